"""Run tool handlers.

Every run lives under a thread, so each handler validates ``thread_id``
(and ``run_id`` where it addresses an existing run) and sends the
remaining arguments as the request body.
"""

from typing import Any, Dict

from ...providers.base import Provider
from . import validation as v
from .base import BaseToolHandler


class RunCreateHandler(BaseToolHandler):
    name = "run-create"
    category = "run"

    def validate(self, args: Dict[str, Any]) -> None:
        v.require_id(self.name, args, "thread_id")
        v.require_id(self.name, args, "assistant_id")
        v.validate_model(self.name, args)
        v.validate_string(self.name, args, "instructions")
        v.validate_string(self.name, args, "additional_instructions")
        v.validate_tools(self.name, args)
        v.validate_sampling(self.name, args)
        v.validate_metadata(self.name, args)

    async def execute(self, args: Dict[str, Any], provider: Provider) -> Any:
        return await provider.create_run(args["thread_id"], self.payload(args, "thread_id"))


class RunListHandler(BaseToolHandler):
    name = "run-list"
    category = "run"

    def validate(self, args: Dict[str, Any]) -> None:
        v.require_id(self.name, args, "thread_id")
        v.validate_pagination(self.name, args)

    async def execute(self, args: Dict[str, Any], provider: Provider) -> Any:
        return await provider.list_runs(args["thread_id"], self.payload(args, "thread_id"))


class RunGetHandler(BaseToolHandler):
    name = "run-get"
    category = "run"

    def validate(self, args: Dict[str, Any]) -> None:
        v.require_id(self.name, args, "thread_id")
        v.require_id(self.name, args, "run_id")

    async def execute(self, args: Dict[str, Any], provider: Provider) -> Any:
        return await provider.get_run(args["thread_id"], args["run_id"])


class RunUpdateHandler(BaseToolHandler):
    name = "run-update"
    category = "run"

    def validate(self, args: Dict[str, Any]) -> None:
        v.require_id(self.name, args, "thread_id")
        v.require_id(self.name, args, "run_id")
        v.validate_metadata(self.name, args)

    async def execute(self, args: Dict[str, Any], provider: Provider) -> Any:
        return await provider.update_run(
            args["thread_id"], args["run_id"], self.payload(args, "thread_id", "run_id")
        )


class RunCancelHandler(BaseToolHandler):
    name = "run-cancel"
    category = "run"

    def validate(self, args: Dict[str, Any]) -> None:
        v.require_id(self.name, args, "thread_id")
        v.require_id(self.name, args, "run_id")

    async def execute(self, args: Dict[str, Any], provider: Provider) -> Any:
        return await provider.cancel_run(args["thread_id"], args["run_id"])


class RunSubmitToolOutputsHandler(BaseToolHandler):
    name = "run-submit-tool-outputs"
    category = "run"

    def validate(self, args: Dict[str, Any]) -> None:
        v.require_id(self.name, args, "thread_id")
        v.require_id(self.name, args, "run_id")
        v.validate_tool_outputs(self.name, args)

    async def execute(self, args: Dict[str, Any], provider: Provider) -> Any:
        return await provider.submit_tool_outputs(
            args["thread_id"], args["run_id"], self.payload(args, "thread_id", "run_id")
        )
