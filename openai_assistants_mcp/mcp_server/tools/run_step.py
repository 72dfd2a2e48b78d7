"""Run step tool handlers."""

from typing import Any, Dict

from ...providers.base import Provider
from . import validation as v
from .base import BaseToolHandler


class RunStepListHandler(BaseToolHandler):
    name = "run-step-list"
    category = "run-step"

    def validate(self, args: Dict[str, Any]) -> None:
        v.require_id(self.name, args, "thread_id")
        v.require_id(self.name, args, "run_id")
        v.validate_pagination(self.name, args)
        v.validate_include(self.name, args)

    async def execute(self, args: Dict[str, Any], provider: Provider) -> Any:
        return await provider.list_run_steps(
            args["thread_id"], args["run_id"], self.payload(args, "thread_id", "run_id")
        )


class RunStepGetHandler(BaseToolHandler):
    name = "run-step-get"
    category = "run-step"

    def validate(self, args: Dict[str, Any]) -> None:
        v.require_id(self.name, args, "thread_id")
        v.require_id(self.name, args, "run_id")
        v.require_id(self.name, args, "step_id")

    async def execute(self, args: Dict[str, Any], provider: Provider) -> Any:
        return await provider.get_run_step(args["thread_id"], args["run_id"], args["step_id"])
