"""Tests for the individual tool handlers."""

import asyncio

import pytest

from openai_assistants_mcp.errors import ProviderError, ProviderTimeoutError, ValidationError
from openai_assistants_mcp.mcp_server.tools import handler_classes_by_name

HANDLERS = handler_classes_by_name()


def handler(name):
    return HANDLERS[name]()


class TestAssistantHandlers:
    """Assistant tools."""

    @pytest.mark.asyncio
    async def test_create(self, fake_provider, sample_assistant):
        fake_provider.create_assistant.return_value = sample_assistant
        args = {"model": "gpt-4o", "name": "Math Tutor", "tools": [{"type": "code_interpreter"}]}

        result = await handler("assistant-create").handle(args, fake_provider)

        assert result == sample_assistant
        fake_provider.create_assistant.assert_awaited_once_with(args)

    @pytest.mark.asyncio
    async def test_create_requires_model(self, fake_provider):
        with pytest.raises(ValidationError) as exc_info:
            await handler("assistant-create").handle({"name": "No model"}, fake_provider)

        assert exc_info.value.parameter == "model"
        assert exc_info.value.tool_name == "assistant-create"
        fake_provider.create_assistant.assert_not_called()

    @pytest.mark.asyncio
    async def test_list_passes_pagination(self, fake_provider):
        fake_provider.list_assistants.return_value = {"object": "list", "data": []}

        await handler("assistant-list").handle({"limit": 5, "order": "asc"}, fake_provider)

        fake_provider.list_assistants.assert_awaited_once_with({"limit": 5, "order": "asc"})

    @pytest.mark.asyncio
    async def test_update_splits_id_from_body(self, fake_provider):
        await handler("assistant-update").handle(
            {"assistant_id": "asst_abc123", "name": "Renamed", "description": None}, fake_provider
        )

        fake_provider.update_assistant.assert_awaited_once_with("asst_abc123", {"name": "Renamed"})

    @pytest.mark.asyncio
    async def test_delete(self, fake_provider):
        fake_provider.delete_assistant.return_value = {"id": "asst_abc123", "deleted": True}

        result = await handler("assistant-delete").handle({"assistant_id": "asst_abc123"}, fake_provider)

        assert result["deleted"] is True


class TestThreadAndMessageHandlers:
    """Thread and message tools."""

    @pytest.mark.asyncio
    async def test_thread_create_with_messages(self, fake_provider):
        args = {"messages": [{"role": "user", "content": "Hello"}], "metadata": {"batch": "1"}}

        await handler("thread-create").handle(args, fake_provider)

        fake_provider.create_thread.assert_awaited_once_with(args)

    @pytest.mark.asyncio
    async def test_thread_create_rejects_bad_message(self, fake_provider):
        with pytest.raises(ValidationError) as exc_info:
            await handler("thread-create").handle({"messages": [{"role": "system", "content": "x"}]}, fake_provider)

        assert exc_info.value.parameter == "messages[0].role"

    @pytest.mark.asyncio
    async def test_thread_get(self, fake_provider):
        await handler("thread-get").handle({"thread_id": "thread_abc123"}, fake_provider)

        fake_provider.get_thread.assert_awaited_once_with("thread_abc123")

    @pytest.mark.asyncio
    async def test_message_create(self, fake_provider):
        await handler("message-create").handle(
            {"thread_id": "thread_abc123", "role": "user", "content": "Solve 3x + 11 = 14"}, fake_provider
        )

        fake_provider.create_message.assert_awaited_once_with(
            "thread_abc123", {"role": "user", "content": "Solve 3x + 11 = 14"}
        )

    @pytest.mark.asyncio
    async def test_message_create_rejects_empty_content(self, fake_provider):
        with pytest.raises(ValidationError) as exc_info:
            await handler("message-create").handle(
                {"thread_id": "thread_abc123", "role": "user", "content": "  "}, fake_provider
            )

        assert exc_info.value.parameter == "content"

    @pytest.mark.asyncio
    async def test_message_list_with_run_filter(self, fake_provider):
        await handler("message-list").handle(
            {"thread_id": "thread_abc123", "run_id": "run_abc123", "limit": 1}, fake_provider
        )

        fake_provider.list_messages.assert_awaited_once_with("thread_abc123", {"run_id": "run_abc123", "limit": 1})

    @pytest.mark.asyncio
    async def test_message_update(self, fake_provider):
        await handler("message-update").handle(
            {"thread_id": "thread_abc123", "message_id": "msg_abc123", "metadata": {"k": "v"}}, fake_provider
        )

        fake_provider.update_message.assert_awaited_once_with("thread_abc123", "msg_abc123", {"metadata": {"k": "v"}})


class TestRunHandlers:
    """Run and run step tools."""

    @pytest.mark.asyncio
    async def test_run_create(self, fake_provider, sample_run):
        fake_provider.create_run.return_value = sample_run

        result = await handler("run-create").handle(
            {"thread_id": "thread_abc123", "assistant_id": "asst_abc123", "temperature": 0.5}, fake_provider
        )

        assert result == sample_run
        fake_provider.create_run.assert_awaited_once_with(
            "thread_abc123", {"assistant_id": "asst_abc123", "temperature": 0.5}
        )

    @pytest.mark.asyncio
    async def test_run_create_requires_assistant(self, fake_provider):
        with pytest.raises(ValidationError) as exc_info:
            await handler("run-create").handle({"thread_id": "thread_abc123"}, fake_provider)

        assert exc_info.value.parameter == "assistant_id"

    @pytest.mark.asyncio
    async def test_run_get_rejects_wrong_prefix(self, fake_provider):
        with pytest.raises(ValidationError) as exc_info:
            await handler("run-get").handle({"thread_id": "thread_abc123", "run_id": "thread_abc123"}, fake_provider)

        assert exc_info.value.parameter == "run_id"
        fake_provider.get_run.assert_not_called()

    @pytest.mark.asyncio
    async def test_run_cancel(self, fake_provider):
        await handler("run-cancel").handle({"thread_id": "thread_abc123", "run_id": "run_abc123"}, fake_provider)

        fake_provider.cancel_run.assert_awaited_once_with("thread_abc123", "run_abc123")

    @pytest.mark.asyncio
    async def test_submit_tool_outputs(self, fake_provider):
        outputs = [{"tool_call_id": "call_abc123", "output": "{\"temp_c\": 4}"}]

        await handler("run-submit-tool-outputs").handle(
            {"thread_id": "thread_abc123", "run_id": "run_abc123", "tool_outputs": outputs}, fake_provider
        )

        fake_provider.submit_tool_outputs.assert_awaited_once_with(
            "thread_abc123", "run_abc123", {"tool_outputs": outputs}
        )

    @pytest.mark.asyncio
    async def test_submit_tool_outputs_requires_outputs(self, fake_provider):
        with pytest.raises(ValidationError) as exc_info:
            await handler("run-submit-tool-outputs").handle(
                {"thread_id": "thread_abc123", "run_id": "run_abc123"}, fake_provider
            )

        assert exc_info.value.parameter == "tool_outputs"

    @pytest.mark.asyncio
    async def test_run_step_list(self, fake_provider):
        await handler("run-step-list").handle(
            {"thread_id": "thread_abc123", "run_id": "run_abc123", "order": "asc"}, fake_provider
        )

        fake_provider.list_run_steps.assert_awaited_once_with("thread_abc123", "run_abc123", {"order": "asc"})

    @pytest.mark.asyncio
    async def test_run_step_get(self, fake_provider):
        await handler("run-step-get").handle(
            {"thread_id": "thread_abc123", "run_id": "run_abc123", "step_id": "step_abc123"}, fake_provider
        )

        fake_provider.get_run_step.assert_awaited_once_with("thread_abc123", "run_abc123", "step_abc123")


class TestErrorEnrichment:
    """Provider failures carry the tool context."""

    @pytest.mark.asyncio
    async def test_provider_error_gets_tool_context(self, fake_provider):
        fake_provider.get_run.side_effect = ProviderError(
            "API request failed: No run found", provider_name="fake", status_code=404, category="resource"
        )

        with pytest.raises(ProviderError) as exc_info:
            await handler("run-get").handle({"thread_id": "thread_abc123", "run_id": "run_abc123"}, fake_provider)

        assert exc_info.value.tool_name == "run-get"
        assert exc_info.value.tool_category == "run"
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_timeout_becomes_provider_timeout(self, fake_provider):
        async def slow(*args, **kwargs):
            await asyncio.sleep(1)

        fake_provider.get_thread.side_effect = slow

        with pytest.raises(ProviderTimeoutError) as exc_info:
            await handler("thread-get").handle({"thread_id": "thread_abc123"}, fake_provider, timeout=0.01)

        assert exc_info.value.retryable is True
        assert exc_info.value.tool_name == "thread-get"
        assert exc_info.value.category == "timeout"

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self, fake_provider):
        fake_provider.get_thread.side_effect = RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await handler("thread-get").handle({"thread_id": "thread_abc123"}, fake_provider)
