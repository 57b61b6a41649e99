"""Exception hierarchy and error codes."""

from __future__ import annotations


class ErrorCode:
    MISSING_CREDENTIAL = "missing_credential"
    LLM_PROTOCOL_ERROR = "llm_protocol_error"
    UPSTREAM_STREAM_ERROR = "upstream_stream_error"
    TOOL_EXCEPTION = "tool_exception"
    UNKNOWN_TOOL = "unknown_tool"
    VALIDATION_ERROR = "validation_error"
    PREPROCESSING_ERROR = "preprocessing_error"


class AgentRelayError(Exception):
    """Base class for errors raised by agentrelay."""

    error_code: str = "error"


class MissingCredentialError(AgentRelayError):
    """A required upstream API key is absent from the request variables."""

    error_code = ErrorCode.MISSING_CREDENTIAL

    def __init__(self, variable: str) -> None:
        super().__init__(f"Missing credential: {variable}")
        self.variable = variable


class StreamProtocolError(AgentRelayError):
    """The completion stream violated the tool-call delta protocol."""

    error_code = ErrorCode.LLM_PROTOCOL_ERROR


class UpstreamStreamError(AgentRelayError):
    """The completion stream itself failed mid-flight."""

    error_code = ErrorCode.UPSTREAM_STREAM_ERROR


class ToolExecutionError(AgentRelayError):
    """A single tool invocation failed."""

    error_code = ErrorCode.TOOL_EXCEPTION


class PreprocessingError(AgentRelayError):
    """Fetching or extracting an attached file failed."""

    error_code = ErrorCode.PREPROCESSING_ERROR
