"""
Tool table and MCP tool definitions.

HANDLER_CATEGORIES is the single source of truth for which tools exist and
in what order they are listed. TOOL_DEFINITIONS carries the MCP-facing
metadata (title, description, input schema, annotations) for each tool.
"""

from typing import Any, Dict, List, Optional

HANDLER_CATEGORIES: Dict[str, List[str]] = {
    "assistant": [
        "assistant-create",
        "assistant-list",
        "assistant-get",
        "assistant-update",
        "assistant-delete",
    ],
    "thread": [
        "thread-create",
        "thread-get",
        "thread-update",
        "thread-delete",
    ],
    "message": [
        "message-create",
        "message-list",
        "message-get",
        "message-update",
        "message-delete",
    ],
    "run": [
        "run-create",
        "run-list",
        "run-get",
        "run-update",
        "run-cancel",
        "run-submit-tool-outputs",
    ],
    "run-step": [
        "run-step-list",
        "run-step-get",
    ],
}

TOTAL_TOOL_COUNT = sum(len(tools) for tools in HANDLER_CATEGORIES.values())


def _id(description: str, example: str) -> Dict[str, Any]:
    return {"type": "string", "description": f"{description} (e.g., \"{example}\")."}


ASSISTANT_ID = _id("The assistant ID", "asst_abc123def456ghi789jkl012")
THREAD_ID = _id("The thread ID", "thread_abc123def456ghi789jkl012")
MESSAGE_ID = _id("The message ID", "msg_abc123def456ghi789jkl012")
RUN_ID = _id("The run ID", "run_abc123def456ghi789jkl012")
STEP_ID = _id("The run step ID", "step_abc123def456ghi789jkl012")

METADATA = {
    "type": "object",
    "description": "Up to 16KB of custom key-value pairs attached to the object.",
}

TOOLS = {
    "type": "array",
    "description": (
        "Tools enabled for the assistant or run: code_interpreter, file_search, "
        "or function (requires function.name)."
    ),
    "items": {
        "type": "object",
        "properties": {
            "type": {"type": "string", "enum": ["code_interpreter", "file_search", "function"]},
            "function": {"type": "object"},
        },
        "required": ["type"],
    },
}

TOOL_RESOURCES = {
    "type": "object",
    "description": "Resources for the enabled tools. Each key must match a tool in 'tools'.",
    "properties": {
        "file_search": {
            "type": "object",
            "properties": {"vector_store_ids": {"type": "array", "items": {"type": "string"}}},
        },
        "code_interpreter": {
            "type": "object",
            "properties": {"file_ids": {"type": "array", "items": {"type": "string"}}},
        },
    },
}

PAGINATION = {
    "limit": {
        "type": "integer",
        "minimum": 1,
        "maximum": 100,
        "description": "Maximum number of objects to return (1-100, default 20).",
    },
    "order": {
        "type": "string",
        "enum": ["asc", "desc"],
        "description": "Sort by created_at: asc for oldest first, desc for newest first.",
    },
    "after": {"type": "string", "description": "Cursor: return objects after this ID."},
    "before": {"type": "string", "description": "Cursor: return objects before this ID."},
}

ASSISTANT_FIELDS = {
    "model": {"type": "string", "description": "Model to use (e.g., \"gpt-4o\")."},
    "name": {"type": "string", "description": "Descriptive name for the assistant."},
    "description": {"type": "string", "description": "What the assistant is for."},
    "instructions": {"type": "string", "description": "System instructions for the assistant."},
    "tools": TOOLS,
    "tool_resources": TOOL_RESOURCES,
    "temperature": {"type": "number", "minimum": 0, "maximum": 2},
    "top_p": {"type": "number", "minimum": 0, "maximum": 1},
    "metadata": METADATA,
}

MESSAGE_FIELDS = {
    "role": {"type": "string", "enum": ["user", "assistant"], "description": "Message author role."},
    "content": {"type": "string", "description": "Text content of the message."},
    "attachments": {"type": "array", "items": {"type": "object"}, "description": "Files attached to the message."},
    "metadata": METADATA,
}

READ_ONLY = {"readOnlyHint": True}
DESTRUCTIVE = {"destructiveHint": True}


def _schema(properties: Dict[str, Any], required: Optional[List[str]] = None) -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


ASSISTANT_TOOL_DEFINITIONS: Dict[str, Dict[str, Any]] = {
    "assistant-create": {
        "title": "Create Assistant",
        "description": (
            "Create a new assistant with instructions, a model and optional tools "
            "(code interpreter, file search, functions). Returns the assistant object "
            "including its ID."
        ),
        "inputSchema": _schema(ASSISTANT_FIELDS, ["model"]),
    },
    "assistant-list": {
        "title": "List Assistants",
        "description": "List assistants with cursor pagination (limit, order, after, before).",
        "inputSchema": _schema(PAGINATION),
        "annotations": READ_ONLY,
    },
    "assistant-get": {
        "title": "Get Assistant",
        "description": "Retrieve an assistant's configuration by ID.",
        "inputSchema": _schema({"assistant_id": ASSISTANT_ID}, ["assistant_id"]),
        "annotations": READ_ONLY,
    },
    "assistant-update": {
        "title": "Update Assistant",
        "description": "Modify an assistant. Only the fields provided are changed.",
        "inputSchema": _schema({"assistant_id": ASSISTANT_ID, **ASSISTANT_FIELDS}, ["assistant_id"]),
    },
    "assistant-delete": {
        "title": "Delete Assistant",
        "description": "Permanently delete an assistant. Existing threads are not affected.",
        "inputSchema": _schema({"assistant_id": ASSISTANT_ID}, ["assistant_id"]),
        "annotations": DESTRUCTIVE,
    },
}

THREAD_TOOL_DEFINITIONS: Dict[str, Dict[str, Any]] = {
    "thread-create": {
        "title": "Create Thread",
        "description": "Create a conversation thread, optionally seeded with initial messages.",
        "inputSchema": _schema({
            "messages": {
                "type": "array",
                "description": "Initial messages, each with role and content.",
                "items": _schema(MESSAGE_FIELDS, ["role", "content"]),
            },
            "tool_resources": TOOL_RESOURCES,
            "metadata": METADATA,
        }),
    },
    "thread-get": {
        "title": "Get Thread",
        "description": "Retrieve a thread by ID.",
        "inputSchema": _schema({"thread_id": THREAD_ID}, ["thread_id"]),
        "annotations": READ_ONLY,
    },
    "thread-update": {
        "title": "Update Thread",
        "description": "Modify a thread's metadata or tool resources.",
        "inputSchema": _schema(
            {"thread_id": THREAD_ID, "tool_resources": TOOL_RESOURCES, "metadata": METADATA},
            ["thread_id"],
        ),
    },
    "thread-delete": {
        "title": "Delete Thread",
        "description": "Permanently delete a thread and its messages.",
        "inputSchema": _schema({"thread_id": THREAD_ID}, ["thread_id"]),
        "annotations": DESTRUCTIVE,
    },
}

MESSAGE_TOOL_DEFINITIONS: Dict[str, Dict[str, Any]] = {
    "message-create": {
        "title": "Add Message",
        "description": "Add a message to a thread.",
        "inputSchema": _schema({"thread_id": THREAD_ID, **MESSAGE_FIELDS}, ["thread_id", "role", "content"]),
    },
    "message-list": {
        "title": "List Messages",
        "description": "List the messages of a thread, optionally only those created by one run.",
        "inputSchema": _schema(
            {"thread_id": THREAD_ID, **PAGINATION, "run_id": RUN_ID},
            ["thread_id"],
        ),
        "annotations": READ_ONLY,
    },
    "message-get": {
        "title": "Get Message",
        "description": "Retrieve one message from a thread.",
        "inputSchema": _schema({"thread_id": THREAD_ID, "message_id": MESSAGE_ID}, ["thread_id", "message_id"]),
        "annotations": READ_ONLY,
    },
    "message-update": {
        "title": "Update Message",
        "description": "Modify a message's metadata.",
        "inputSchema": _schema(
            {"thread_id": THREAD_ID, "message_id": MESSAGE_ID, "metadata": METADATA},
            ["thread_id", "message_id"],
        ),
    },
    "message-delete": {
        "title": "Delete Message",
        "description": "Delete a message from a thread.",
        "inputSchema": _schema({"thread_id": THREAD_ID, "message_id": MESSAGE_ID}, ["thread_id", "message_id"]),
        "annotations": DESTRUCTIVE,
    },
}

RUN_TOOL_DEFINITIONS: Dict[str, Dict[str, Any]] = {
    "run-create": {
        "title": "Start Run",
        "description": (
            "Start a run: the assistant processes the thread and may call tools. "
            "Poll run-get until the run completes or requires action."
        ),
        "inputSchema": _schema(
            {
                "thread_id": THREAD_ID,
                "assistant_id": ASSISTANT_ID,
                "model": ASSISTANT_FIELDS["model"],
                "instructions": {"type": "string", "description": "Override the assistant instructions."},
                "additional_instructions": {"type": "string", "description": "Appended to the instructions."},
                "tools": TOOLS,
                "temperature": ASSISTANT_FIELDS["temperature"],
                "top_p": ASSISTANT_FIELDS["top_p"],
                "metadata": METADATA,
            },
            ["thread_id", "assistant_id"],
        ),
    },
    "run-list": {
        "title": "List Runs",
        "description": "List the runs of a thread.",
        "inputSchema": _schema({"thread_id": THREAD_ID, **PAGINATION}, ["thread_id"]),
        "annotations": READ_ONLY,
    },
    "run-get": {
        "title": "Get Run",
        "description": "Retrieve a run and its status (queued, in_progress, requires_action, completed, ...).",
        "inputSchema": _schema({"thread_id": THREAD_ID, "run_id": RUN_ID}, ["thread_id", "run_id"]),
        "annotations": READ_ONLY,
    },
    "run-update": {
        "title": "Update Run",
        "description": "Modify a run's metadata.",
        "inputSchema": _schema(
            {"thread_id": THREAD_ID, "run_id": RUN_ID, "metadata": METADATA},
            ["thread_id", "run_id"],
        ),
    },
    "run-cancel": {
        "title": "Cancel Run",
        "description": "Cancel a run that is in progress.",
        "inputSchema": _schema({"thread_id": THREAD_ID, "run_id": RUN_ID}, ["thread_id", "run_id"]),
        "annotations": DESTRUCTIVE,
    },
    "run-submit-tool-outputs": {
        "title": "Submit Tool Outputs",
        "description": (
            "Submit the outputs of function calls for a run whose status is "
            "requires_action. Every pending tool call must be answered."
        ),
        "inputSchema": _schema(
            {
                "thread_id": THREAD_ID,
                "run_id": RUN_ID,
                "tool_outputs": {
                    "type": "array",
                    "items": _schema(
                        {
                            "tool_call_id": _id("The tool call ID", "call_abc123def456ghi789jkl012"),
                            "output": {"type": "string", "description": "Result of the tool call."},
                        },
                        ["tool_call_id", "output"],
                    ),
                },
            },
            ["thread_id", "run_id", "tool_outputs"],
        ),
    },
}

RUN_STEP_TOOL_DEFINITIONS: Dict[str, Dict[str, Any]] = {
    "run-step-list": {
        "title": "List Run Steps",
        "description": "List the steps (message creation, tool calls) a run went through.",
        "inputSchema": _schema(
            {
                "thread_id": THREAD_ID,
                "run_id": RUN_ID,
                **PAGINATION,
                "include": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Extra fields to include, e.g. file search result content.",
                },
            },
            ["thread_id", "run_id"],
        ),
        "annotations": READ_ONLY,
    },
    "run-step-get": {
        "title": "Get Run Step",
        "description": "Retrieve one step of a run.",
        "inputSchema": _schema(
            {"thread_id": THREAD_ID, "run_id": RUN_ID, "step_id": STEP_ID},
            ["thread_id", "run_id", "step_id"],
        ),
        "annotations": READ_ONLY,
    },
}

TOOL_DEFINITIONS: Dict[str, Dict[str, Any]] = {
    **ASSISTANT_TOOL_DEFINITIONS,
    **THREAD_TOOL_DEFINITIONS,
    **MESSAGE_TOOL_DEFINITIONS,
    **RUN_TOOL_DEFINITIONS,
    **RUN_STEP_TOOL_DEFINITIONS,
}


def validate_tool_definitions(
    categories: Optional[Dict[str, List[str]]] = None,
    definitions: Optional[Dict[str, Dict[str, Any]]] = None,
) -> List[str]:
    """
    Check a tool table and its definitions against each other.

    Args:
        categories: Tool table, defaults to HANDLER_CATEGORIES
        definitions: Tool definitions, defaults to TOOL_DEFINITIONS

    Returns:
        List of problems found; empty when consistent
    """
    if categories is None:
        categories = HANDLER_CATEGORIES
    if definitions is None:
        definitions = TOOL_DEFINITIONS

    problems = []
    tabled = [name for tools in categories.values() for name in tools]

    seen = set()
    for name in tabled:
        if name in seen:
            problems.append(f"Tool '{name}' is listed more than once")
        seen.add(name)
        if name not in definitions:
            problems.append(f"Tool '{name}' has no definition")

    for name, definition in definitions.items():
        if name not in seen:
            problems.append(f"Definition '{name}' is not in any category")
        for field in ("title", "description", "inputSchema"):
            if field not in definition:
                problems.append(f"Definition '{name}' is missing '{field}'")
        schema = definition.get("inputSchema", {})
        properties = schema.get("properties", {})
        for required in schema.get("required", []):
            if required not in properties:
                problems.append(f"Definition '{name}' requires undeclared property '{required}'")

    return problems
