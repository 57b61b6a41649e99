"""Argument validation for assembled tool invocations."""

from __future__ import annotations

from jsonschema import Draft7Validator
from jsonschema.exceptions import best_match

from agentrelay.tools.base import Tool, normalize_schema


class ToolValidator:
    @staticmethod
    def validate(tool: Tool, arguments: object) -> tuple[bool, str | None]:
        """
        Check *arguments* against the tool's (closed) parameter schema.

        Returns ``(True, None)`` or ``(False, message)``; the message is
        prefixed with the offending argument's path when there is one.
        """
        validator = Draft7Validator(normalize_schema(tool.parameters))
        error = best_match(validator.iter_errors(arguments))
        if error is None:
            return True, None
        path = ".".join(str(p) for p in error.absolute_path)
        return False, f"{path}: {error.message}" if path else error.message

    @staticmethod
    def check_schema(tool: Tool) -> None:
        """Raise ``jsonschema.SchemaError`` if the tool's schema is malformed."""
        Draft7Validator.check_schema(normalize_schema(tool.parameters))
