"""Assistant tool handlers."""

from typing import Any, Dict

from ...providers.base import Provider
from . import validation as v
from .base import BaseToolHandler


def _validate_assistant_fields(tool_name: str, args: Dict[str, Any]) -> None:
    v.validate_string(tool_name, args, "name", non_empty=True)
    v.validate_string(tool_name, args, "description")
    v.validate_string(tool_name, args, "instructions")
    v.validate_tools(tool_name, args)
    v.validate_tool_resources(tool_name, args)
    v.validate_sampling(tool_name, args)
    v.validate_metadata(tool_name, args)


class AssistantCreateHandler(BaseToolHandler):
    name = "assistant-create"
    category = "assistant"

    def validate(self, args: Dict[str, Any]) -> None:
        v.validate_model(self.name, args, required=True)
        _validate_assistant_fields(self.name, args)

    async def execute(self, args: Dict[str, Any], provider: Provider) -> Any:
        return await provider.create_assistant(self.payload(args))


class AssistantListHandler(BaseToolHandler):
    name = "assistant-list"
    category = "assistant"

    def validate(self, args: Dict[str, Any]) -> None:
        v.validate_pagination(self.name, args)

    async def execute(self, args: Dict[str, Any], provider: Provider) -> Any:
        return await provider.list_assistants(self.payload(args))


class AssistantGetHandler(BaseToolHandler):
    name = "assistant-get"
    category = "assistant"

    def validate(self, args: Dict[str, Any]) -> None:
        v.require_id(self.name, args, "assistant_id")

    async def execute(self, args: Dict[str, Any], provider: Provider) -> Any:
        return await provider.get_assistant(args["assistant_id"])


class AssistantUpdateHandler(BaseToolHandler):
    name = "assistant-update"
    category = "assistant"

    def validate(self, args: Dict[str, Any]) -> None:
        v.require_id(self.name, args, "assistant_id")
        v.validate_model(self.name, args)
        _validate_assistant_fields(self.name, args)

    async def execute(self, args: Dict[str, Any], provider: Provider) -> Any:
        return await provider.update_assistant(args["assistant_id"], self.payload(args, "assistant_id"))


class AssistantDeleteHandler(BaseToolHandler):
    name = "assistant-delete"
    category = "assistant"

    def validate(self, args: Dict[str, Any]) -> None:
        v.require_id(self.name, args, "assistant_id")

    async def execute(self, args: Dict[str, Any], provider: Provider) -> Any:
        return await provider.delete_assistant(args["assistant_id"])
