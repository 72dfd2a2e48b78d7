"""Tests for the tool handler registry."""

from typing import Any, Dict

import pytest

from openai_assistants_mcp.errors import RegistrationError, UnknownToolError, ValidationError
from openai_assistants_mcp.mcp_server.config.tool_definitions import HANDLER_CATEGORIES, TOTAL_TOOL_COUNT
from openai_assistants_mcp.mcp_server.handlers.registry import ToolHandlerRegistry
from openai_assistants_mcp.mcp_server.tools import HANDLER_CLASSES
from openai_assistants_mcp.mcp_server.tools.base import BaseToolHandler
from openai_assistants_mcp.mcp_server.tools.assistant import AssistantGetHandler, AssistantListHandler


class EchoHandler(BaseToolHandler):
    name = "echo"
    category = "misc"

    def validate(self, args: Dict[str, Any]) -> None:
        pass

    async def execute(self, args, provider):
        return args


ECHO_DEFINITION = {
    "title": "Echo",
    "description": "Echo the arguments back.",
    "inputSchema": {"type": "object", "properties": {"text": {"type": "string"}}},
}


class TestToolHandlerRegistry:
    """Test cases for ToolHandlerRegistry."""

    @pytest.fixture
    def registry(self):
        return ToolHandlerRegistry()

    def test_builds_every_tabled_tool(self, registry):
        assert registry.get_tool_count() == TOTAL_TOOL_COUNT
        assert registry.list_tool_names()[:3] == ["assistant-create", "assistant-list", "assistant-get"]
        assert registry.list_tool_names()[-1] == "run-step-get"

    def test_get_stats(self, registry):
        stats = registry.get_stats()

        assert stats["total_handlers"] == TOTAL_TOOL_COUNT
        assert stats["handlers_by_category"] == {
            "assistant": 5,
            "thread": 4,
            "message": 5,
            "run": 6,
            "run-step": 2,
        }
        assert len(stats["registered_tools"]) == TOTAL_TOOL_COUNT

    def test_get_tools_by_category(self, registry):
        assert registry.get_tools_by_category("run-step") == ["run-step-list", "run-step-get"]

    def test_list_tools_descriptors(self, registry):
        tools = registry.list_tools()

        assert [tool.name for tool in tools] == registry.list_tool_names()
        create = tools[0].model_dump(by_alias=True, exclude_none=True)
        assert create["name"] == "assistant-create"
        assert create["inputSchema"]["required"] == ["model"]
        listed = tools[1].model_dump(by_alias=True, exclude_none=True)
        assert listed["annotations"]["readOnlyHint"] is True

    def test_missing_handler_fails(self):
        categories = {"assistant": ["assistant-get", "assistant-clone"]}
        with pytest.raises(RegistrationError, match="assistant-clone"):
            ToolHandlerRegistry(categories=categories, handler_classes=[AssistantGetHandler])

    def test_duplicate_table_entry_fails(self):
        categories = {"assistant": ["assistant-get"], "other": ["assistant-get"]}
        with pytest.raises(RegistrationError, match="more than once"):
            ToolHandlerRegistry(categories=categories, handler_classes=[AssistantGetHandler])

    def test_duplicate_handler_class_fails(self):
        class AnotherGetHandler(AssistantGetHandler):
            pass

        with pytest.raises(RegistrationError, match="both claim"):
            ToolHandlerRegistry(
                categories={"assistant": ["assistant-get"]},
                handler_classes=[AssistantGetHandler, AnotherGetHandler],
            )

    def test_untabled_handler_fails(self):
        with pytest.raises(RegistrationError, match="assistant-list"):
            ToolHandlerRegistry(
                categories={"assistant": ["assistant-get"]},
                handler_classes=[AssistantGetHandler, AssistantListHandler],
            )

    def test_category_mismatch_fails(self):
        with pytest.raises(RegistrationError, match="category"):
            ToolHandlerRegistry(categories={"thread": ["assistant-get"]}, handler_classes=[AssistantGetHandler])

    def test_custom_definition_is_listed(self):
        registry = ToolHandlerRegistry(
            categories={"misc": ["echo"]}, handler_classes=[EchoHandler], definitions={"echo": ECHO_DEFINITION}
        )

        tool = registry.list_tools()[0].model_dump(by_alias=True, exclude_none=True)
        assert tool["description"] == "Echo the arguments back."
        assert tool["inputSchema"] == ECHO_DEFINITION["inputSchema"]

    def test_tool_without_definition_fails(self):
        with pytest.raises(RegistrationError, match="'echo' has no definition"):
            ToolHandlerRegistry(categories={"misc": ["echo"]}, handler_classes=[EchoHandler], definitions={})

    def test_incomplete_definition_fails(self):
        definition = {"title": "Echo", "inputSchema": {"type": "object", "properties": {}, "required": ["text"]}}

        with pytest.raises(RegistrationError) as exc_info:
            ToolHandlerRegistry(
                categories={"misc": ["echo"]}, handler_classes=[EchoHandler], definitions={"echo": definition}
            )

        assert "missing 'description'" in str(exc_info.value)
        assert "undeclared property 'text'" in str(exc_info.value)

    def test_definition_for_untabled_tool_fails(self):
        definitions = {"echo": ECHO_DEFINITION, "echo-twice": ECHO_DEFINITION}

        with pytest.raises(RegistrationError, match="'echo-twice' is not in any category"):
            ToolHandlerRegistry(categories={"misc": ["echo"]}, handler_classes=[EchoHandler], definitions=definitions)

    def test_default_handler_classes_match_table(self):
        assert len(HANDLER_CLASSES) == TOTAL_TOOL_COUNT

    @pytest.mark.asyncio
    async def test_dispatch_unknown_tool(self, registry, fake_provider):
        with pytest.raises(UnknownToolError) as exc_info:
            await registry.dispatch("assistant-clone", {}, fake_provider)

        assert exc_info.value.tool_name == "assistant-clone"
        assert "assistant-create" in exc_info.value.available_tools

    @pytest.mark.asyncio
    async def test_dispatch_validates_before_provider(self, registry, fake_provider):
        with pytest.raises(ValidationError):
            await registry.dispatch("assistant-get", {"assistant_id": "bad"}, fake_provider)

        fake_provider.get_assistant.assert_not_called()

    @pytest.mark.asyncio
    async def test_dispatch_executes(self, registry, fake_provider, sample_assistant):
        fake_provider.get_assistant.return_value = sample_assistant

        result = await registry.dispatch("assistant-get", {"assistant_id": "asst_abc123"}, fake_provider)

        assert result == sample_assistant
        fake_provider.get_assistant.assert_awaited_once_with("asst_abc123")


THREAD = {"thread_id": "thread_abc123"}
RUN = {"thread_id": "thread_abc123", "run_id": "run_abc123"}
MESSAGE = {"thread_id": "thread_abc123", "message_id": "msg_abc123"}

# tool name -> (valid arguments, invalid arguments, provider method)
DISPATCH_CASES = {
    "assistant-create": ({"model": "gpt-4o"}, {"name": "No model"}, "create_assistant"),
    "assistant-list": ({"limit": 20}, {"limit": 0}, "list_assistants"),
    "assistant-get": ({"assistant_id": "asst_abc123"}, {"assistant_id": "bad"}, "get_assistant"),
    "assistant-update": (
        {"assistant_id": "asst_abc123", "name": "Tutor"},
        {"assistant_id": "asst_abc123", "temperature": 3},
        "update_assistant",
    ),
    "assistant-delete": ({"assistant_id": "asst_abc123"}, {}, "delete_assistant"),
    "thread-create": ({"messages": [{"role": "user", "content": "Hi"}]}, {"messages": "Hi"}, "create_thread"),
    "thread-get": (THREAD, {"thread_id": "asst_abc123"}, "get_thread"),
    "thread-update": ({**THREAD, "metadata": {"topic": "math"}}, {**THREAD, "metadata": "math"}, "update_thread"),
    "thread-delete": (THREAD, {}, "delete_thread"),
    "message-create": (
        {**THREAD, "role": "user", "content": "Hi"},
        {**THREAD, "role": "system", "content": "Hi"},
        "create_message",
    ),
    "message-list": ({**THREAD, "order": "asc"}, {**THREAD, "order": "up"}, "list_messages"),
    "message-get": (MESSAGE, {**THREAD, "message_id": "run_abc123"}, "get_message"),
    "message-update": ({**MESSAGE, "metadata": {"k": "v"}}, THREAD, "update_message"),
    "message-delete": (MESSAGE, {"message_id": "msg_abc123"}, "delete_message"),
    "run-create": ({**THREAD, "assistant_id": "asst_abc123"}, THREAD, "create_run"),
    "run-list": ({**THREAD, "limit": 10}, {**THREAD, "after": "a", "before": "b"}, "list_runs"),
    "run-get": (RUN, {**THREAD, "run_id": "run-abc"}, "get_run"),
    "run-update": ({**RUN, "metadata": {"k": "v"}}, THREAD, "update_run"),
    "run-cancel": (RUN, {"run_id": "run_abc123"}, "cancel_run"),
    "run-submit-tool-outputs": (
        {**RUN, "tool_outputs": [{"tool_call_id": "call_abc123", "output": "42"}]},
        {**RUN, "tool_outputs": []},
        "submit_tool_outputs",
    ),
    "run-step-list": (RUN, {**RUN, "include": "step_details"}, "list_run_steps"),
    "run-step-get": ({**RUN, "step_id": "step_abc123"}, RUN, "get_run_step"),
}

TABLED_TOOLS = [name for tools in HANDLER_CATEGORIES.values() for name in tools]


class TestDispatchEveryTool:
    """Every tabled tool reaches its provider method only with valid arguments."""

    def test_cases_cover_the_table(self):
        assert sorted(DISPATCH_CASES) == sorted(TABLED_TOOLS)

    @pytest.fixture
    def registry(self):
        return ToolHandlerRegistry()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tool_name", TABLED_TOOLS)
    async def test_valid_arguments_reach_provider(self, registry, fake_provider, tool_name):
        valid, _, method = DISPATCH_CASES[tool_name]
        getattr(fake_provider, method).return_value = {"ok": True}

        result = await registry.dispatch(tool_name, dict(valid), fake_provider)

        assert result == {"ok": True}
        getattr(fake_provider, method).assert_awaited_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tool_name", TABLED_TOOLS)
    async def test_invalid_arguments_never_reach_provider(self, registry, fake_provider, tool_name):
        _, invalid, method = DISPATCH_CASES[tool_name]

        with pytest.raises(ValidationError) as exc_info:
            await registry.dispatch(tool_name, dict(invalid), fake_provider)

        assert exc_info.value.tool_name == tool_name
        getattr(fake_provider, method).assert_not_called()
