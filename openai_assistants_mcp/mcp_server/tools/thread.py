"""Thread tool handlers."""

from typing import Any, Dict

from ...providers.base import Provider
from . import validation as v
from .base import BaseToolHandler


class ThreadCreateHandler(BaseToolHandler):
    name = "thread-create"
    category = "thread"

    def validate(self, args: Dict[str, Any]) -> None:
        v.validate_messages(self.name, args)
        v.validate_tool_resources(self.name, args)
        v.validate_metadata(self.name, args)

    async def execute(self, args: Dict[str, Any], provider: Provider) -> Any:
        return await provider.create_thread(self.payload(args))


class ThreadGetHandler(BaseToolHandler):
    name = "thread-get"
    category = "thread"

    def validate(self, args: Dict[str, Any]) -> None:
        v.require_id(self.name, args, "thread_id")

    async def execute(self, args: Dict[str, Any], provider: Provider) -> Any:
        return await provider.get_thread(args["thread_id"])


class ThreadUpdateHandler(BaseToolHandler):
    name = "thread-update"
    category = "thread"

    def validate(self, args: Dict[str, Any]) -> None:
        v.require_id(self.name, args, "thread_id")
        v.validate_tool_resources(self.name, args)
        v.validate_metadata(self.name, args)

    async def execute(self, args: Dict[str, Any], provider: Provider) -> Any:
        return await provider.update_thread(args["thread_id"], self.payload(args, "thread_id"))


class ThreadDeleteHandler(BaseToolHandler):
    name = "thread-delete"
    category = "thread"

    def validate(self, args: Dict[str, Any]) -> None:
        v.require_id(self.name, args, "thread_id")

    async def execute(self, args: Dict[str, Any], provider: Provider) -> Any:
        return await provider.delete_thread(args["thread_id"])
