"""Tests for tool argument validators."""

import pytest

from openai_assistants_mcp.errors import ValidationError
from openai_assistants_mcp.mcp_server.tools import validation as v

TOOL = "test-tool"


class TestIdValidation:
    """Entity ID checks."""

    @pytest.mark.parametrize(
        "parameter,value",
        [
            ("assistant_id", "asst_abc123"),
            ("thread_id", "thread_ABC123def"),
            ("message_id", "msg_1"),
            ("run_id", "run_abc123def456ghi789jkl012"),
            ("step_id", "step_x9"),
            ("tool_call_id", "call_abc"),
        ],
    )
    def test_valid_ids(self, parameter, value):
        assert v.validate_id(TOOL, value, parameter) == value

    @pytest.mark.parametrize("value", ["", "abc123", "asst_", "asst_abc-123", "thread_abc123", 42, None])
    def test_invalid_assistant_ids(self, value):
        with pytest.raises(ValidationError) as exc_info:
            v.validate_id(TOOL, value, "assistant_id")

        assert exc_info.value.parameter == "assistant_id"

    def test_require_id_missing(self):
        with pytest.raises(ValidationError, match="missing"):
            v.require_id(TOOL, {}, "thread_id")

    def test_optional_id(self):
        assert v.optional_id(TOOL, {}, "run_id") is None
        with pytest.raises(ValidationError):
            v.optional_id(TOOL, {"run_id": "bad"}, "run_id")


class TestFieldValidation:
    """Model, metadata, tools and sampling checks."""

    def test_model_required(self):
        with pytest.raises(ValidationError):
            v.validate_model(TOOL, {"model": ""}, required=True)
        assert v.validate_model(TOOL, {}, required=False) is None

    def test_metadata_must_be_object(self):
        with pytest.raises(ValidationError):
            v.validate_metadata(TOOL, {"metadata": ["a"]})

    def test_metadata_size_limit(self):
        v.validate_metadata(TOOL, {"metadata": {"k": "x" * 100}})
        with pytest.raises(ValidationError, match="maximum size"):
            v.validate_metadata(TOOL, {"metadata": {"k": "x" * 16384}})

    def test_tools_types(self):
        v.validate_tools(TOOL, {"tools": [{"type": "code_interpreter"}, {"type": "file_search"}]})
        with pytest.raises(ValidationError) as exc_info:
            v.validate_tools(TOOL, {"tools": [{"type": "retrieval"}]})
        assert exc_info.value.parameter == "tools[0].type"

    def test_function_tool_needs_name(self):
        v.validate_tools(TOOL, {"tools": [{"type": "function", "function": {"name": "get_weather"}}]})
        with pytest.raises(ValidationError):
            v.validate_tools(TOOL, {"tools": [{"type": "function", "function": {}}]})

    def test_tool_resources_must_match_tools(self):
        args = {"tools": [{"type": "code_interpreter"}], "tool_resources": {"file_search": {"vector_store_ids": []}}}
        with pytest.raises(ValidationError) as exc_info:
            v.validate_tool_resources(TOOL, args)
        assert exc_info.value.parameter == "tool_resources.file_search"

    def test_tool_resources_without_tools_is_accepted(self):
        v.validate_tool_resources(TOOL, {"tool_resources": {"file_search": {"vector_store_ids": ["vs_1"]}}})

    @pytest.mark.parametrize("args", [{"temperature": 2.5}, {"temperature": -0.1}, {"top_p": 1.5}, {"temperature": True}])
    def test_sampling_out_of_range(self, args):
        with pytest.raises(ValidationError):
            v.validate_sampling(TOOL, args)

    def test_sampling_in_range(self):
        v.validate_sampling(TOOL, {"temperature": 0, "top_p": 1})


class TestPaginationValidation:
    """limit/order/after/before checks."""

    def test_valid(self):
        v.validate_pagination(TOOL, {"limit": 100, "order": "desc", "after": "asst_abc"})

    @pytest.mark.parametrize("limit", [0, 101, "10", 2.5])
    def test_invalid_limit(self, limit):
        with pytest.raises(ValidationError) as exc_info:
            v.validate_pagination(TOOL, {"limit": limit})
        assert exc_info.value.parameter == "limit"

    def test_invalid_order(self):
        with pytest.raises(ValidationError):
            v.validate_pagination(TOOL, {"order": "newest"})

    def test_after_and_before_exclusive(self):
        with pytest.raises(ValidationError, match="together"):
            v.validate_pagination(TOOL, {"after": "msg_a", "before": "msg_b"})

    def test_empty_cursor(self):
        with pytest.raises(ValidationError):
            v.validate_pagination(TOOL, {"before": ""})


class TestToolOutputs:
    """run-submit-tool-outputs payload checks."""

    def test_valid(self):
        v.validate_tool_outputs(TOOL, {"tool_outputs": [{"tool_call_id": "call_1", "output": ""}]})

    def test_empty_list(self):
        with pytest.raises(ValidationError):
            v.validate_tool_outputs(TOOL, {"tool_outputs": []})

    def test_bad_call_id(self):
        with pytest.raises(ValidationError) as exc_info:
            v.validate_tool_outputs(TOOL, {"tool_outputs": [{"tool_call_id": "run_1", "output": "x"}]})
        assert exc_info.value.parameter == "tool_outputs[0].tool_call_id"

    def test_output_must_be_string(self):
        with pytest.raises(ValidationError) as exc_info:
            v.validate_tool_outputs(TOOL, {"tool_outputs": [{"tool_call_id": "call_1", "output": {"a": 1}}]})
        assert exc_info.value.parameter == "tool_outputs[0].output"

    def test_include_must_be_strings(self):
        v.validate_include(TOOL, {"include": ["step_details.tool_calls[*].file_search.results[*].content"]})
        with pytest.raises(ValidationError):
            v.validate_include(TOOL, {"include": [1]})
