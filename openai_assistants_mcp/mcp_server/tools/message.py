"""Message tool handlers."""

from typing import Any, Dict

from ...errors import ValidationError
from ...providers.base import Provider
from . import validation as v
from .base import BaseToolHandler


class MessageCreateHandler(BaseToolHandler):
    name = "message-create"
    category = "message"

    def validate(self, args: Dict[str, Any]) -> None:
        v.require_id(self.name, args, "thread_id")
        v.validate_message(self.name, args)
        attachments = args.get("attachments")
        if attachments is not None and not isinstance(attachments, list):
            raise ValidationError(self.name, "attachments must be an array", "attachments")

    async def execute(self, args: Dict[str, Any], provider: Provider) -> Any:
        return await provider.create_message(args["thread_id"], self.payload(args, "thread_id"))


class MessageListHandler(BaseToolHandler):
    name = "message-list"
    category = "message"

    def validate(self, args: Dict[str, Any]) -> None:
        v.require_id(self.name, args, "thread_id")
        v.optional_id(self.name, args, "run_id")
        v.validate_pagination(self.name, args)

    async def execute(self, args: Dict[str, Any], provider: Provider) -> Any:
        return await provider.list_messages(args["thread_id"], self.payload(args, "thread_id"))


class MessageGetHandler(BaseToolHandler):
    name = "message-get"
    category = "message"

    def validate(self, args: Dict[str, Any]) -> None:
        v.require_id(self.name, args, "thread_id")
        v.require_id(self.name, args, "message_id")

    async def execute(self, args: Dict[str, Any], provider: Provider) -> Any:
        return await provider.get_message(args["thread_id"], args["message_id"])


class MessageUpdateHandler(BaseToolHandler):
    name = "message-update"
    category = "message"

    def validate(self, args: Dict[str, Any]) -> None:
        v.require_id(self.name, args, "thread_id")
        v.require_id(self.name, args, "message_id")
        v.validate_metadata(self.name, args)

    async def execute(self, args: Dict[str, Any], provider: Provider) -> Any:
        return await provider.update_message(
            args["thread_id"], args["message_id"], self.payload(args, "thread_id", "message_id")
        )


class MessageDeleteHandler(BaseToolHandler):
    name = "message-delete"
    category = "message"

    def validate(self, args: Dict[str, Any]) -> None:
        v.require_id(self.name, args, "thread_id")
        v.require_id(self.name, args, "message_id")

    async def execute(self, args: Dict[str, Any], provider: Provider) -> Any:
        return await provider.delete_message(args["thread_id"], args["message_id"])
