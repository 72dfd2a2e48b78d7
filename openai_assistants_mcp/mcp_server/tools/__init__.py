"""Tool handlers, one class per MCP tool."""

from typing import Dict, List, Type

from .base import BaseToolHandler
from .assistant import (
    AssistantCreateHandler,
    AssistantListHandler,
    AssistantGetHandler,
    AssistantUpdateHandler,
    AssistantDeleteHandler,
)
from .thread import ThreadCreateHandler, ThreadGetHandler, ThreadUpdateHandler, ThreadDeleteHandler
from .message import (
    MessageCreateHandler,
    MessageListHandler,
    MessageGetHandler,
    MessageUpdateHandler,
    MessageDeleteHandler,
)
from .run import (
    RunCreateHandler,
    RunListHandler,
    RunGetHandler,
    RunUpdateHandler,
    RunCancelHandler,
    RunSubmitToolOutputsHandler,
)
from .run_step import RunStepListHandler, RunStepGetHandler

HANDLER_CLASSES: List[Type[BaseToolHandler]] = [
    AssistantCreateHandler,
    AssistantListHandler,
    AssistantGetHandler,
    AssistantUpdateHandler,
    AssistantDeleteHandler,
    ThreadCreateHandler,
    ThreadGetHandler,
    ThreadUpdateHandler,
    ThreadDeleteHandler,
    MessageCreateHandler,
    MessageListHandler,
    MessageGetHandler,
    MessageUpdateHandler,
    MessageDeleteHandler,
    RunCreateHandler,
    RunListHandler,
    RunGetHandler,
    RunUpdateHandler,
    RunCancelHandler,
    RunSubmitToolOutputsHandler,
    RunStepListHandler,
    RunStepGetHandler,
]


def handler_classes_by_name() -> Dict[str, Type[BaseToolHandler]]:
    return {cls.name: cls for cls in HANDLER_CLASSES}


__all__ = ["BaseToolHandler", "HANDLER_CLASSES", "handler_classes_by_name"]
