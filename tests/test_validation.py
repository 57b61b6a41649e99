"""Tests for ToolValidator."""

from agentrelay.tools.image_generation import GenerateImageTool
from agentrelay.tools.validation import ToolValidator
from tests.mock_tools import EchoTool


class TestToolValidator:
    def test_valid_args_pass(self):
        ok, err = ToolValidator.validate(EchoTool(), {"message": "hello"})
        assert ok is True
        assert err is None

    def test_missing_required_arg_fails(self):
        ok, err = ToolValidator.validate(EchoTool(), {})
        assert ok is False
        assert "message" in err.lower() or "required" in err.lower()

    def test_extra_unknown_keys_rejected(self):
        ok, err = ToolValidator.validate(EchoTool(), {"message": "hello", "rogue": "value"})
        assert ok is False
        assert err is not None

    def test_non_object_arguments_rejected(self):
        ok, err = ToolValidator.validate(EchoTool(), ["hello"])
        assert ok is False
        assert err is not None

    def test_image_enum_enforced(self):
        tool = GenerateImageTool()
        ok, _ = ToolValidator.validate(tool, {"prompt": "a cat", "size": "1792x1024"})
        assert ok is True
        ok, err = ToolValidator.validate(tool, {"prompt": "a cat", "size": "640x480"})
        assert ok is False
        assert "640x480" in err

    def test_error_names_offending_argument(self):
        ok, err = ToolValidator.validate(GenerateImageTool(), {"prompt": "a cat", "quality": "ultra"})
        assert ok is False
        assert err.startswith("quality: ")
