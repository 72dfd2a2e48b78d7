"""
Argument validators for tool handlers.

Each validator raises ``ValidationError`` naming the tool and the offending
parameter; none of them touch a provider.
"""

import json
import re
from typing import Any, Dict, Optional

from ...errors import ValidationError

ID_PREFIXES = {
    "assistant_id": "asst_",
    "thread_id": "thread_",
    "message_id": "msg_",
    "run_id": "run_",
    "step_id": "step_",
    "tool_call_id": "call_",
}

VALID_TOOL_TYPES = ("code_interpreter", "file_search", "function")
VALID_ROLES = ("user", "assistant")
VALID_ORDERS = ("asc", "desc")
MAX_METADATA_BYTES = 16384


def validate_id(tool_name: str, value: Any, parameter: str) -> str:
    """Validate an entity ID of the kind named by ``parameter``."""
    prefix = ID_PREFIXES[parameter]
    if not isinstance(value, str) or not value:
        raise ValidationError(tool_name, f"{parameter} must be a non-empty string", parameter)
    if not re.fullmatch(re.escape(prefix) + r"[A-Za-z0-9]+", value):
        raise ValidationError(
            tool_name,
            f"Invalid {parameter} format: expected '{prefix}' followed by letters or digits, got '{value}'",
            parameter,
        )
    return value


def require_id(tool_name: str, args: Dict[str, Any], parameter: str) -> str:
    if parameter not in args or args[parameter] is None:
        raise ValidationError(tool_name, f"Required parameter '{parameter}' is missing", parameter)
    return validate_id(tool_name, args[parameter], parameter)


def optional_id(tool_name: str, args: Dict[str, Any], parameter: str) -> Optional[str]:
    if args.get(parameter) is None:
        return None
    return validate_id(tool_name, args[parameter], parameter)


def validate_string(
    tool_name: str,
    args: Dict[str, Any],
    parameter: str,
    required: bool = False,
    non_empty: bool = False,
) -> Optional[str]:
    """Validate an optional (or required) string argument."""
    value = args.get(parameter)
    if value is None:
        if required:
            raise ValidationError(tool_name, f"Required parameter '{parameter}' is missing", parameter)
        return None
    if not isinstance(value, str):
        raise ValidationError(tool_name, f"{parameter} must be a string", parameter)
    if (required or non_empty) and not value.strip():
        raise ValidationError(tool_name, f"{parameter} cannot be empty", parameter)
    return value


def validate_model(tool_name: str, args: Dict[str, Any], required: bool = False) -> Optional[str]:
    return validate_string(tool_name, args, "model", required=required, non_empty=True)


def validate_metadata(tool_name: str, args: Dict[str, Any]) -> None:
    metadata = args.get("metadata")
    if metadata is None:
        return
    if not isinstance(metadata, dict):
        raise ValidationError(tool_name, "metadata must be an object", "metadata")
    try:
        encoded = json.dumps(metadata)
    except (TypeError, ValueError) as e:
        raise ValidationError(tool_name, f"metadata is not JSON-serializable: {e}", "metadata") from e
    if len(encoded.encode("utf-8")) > MAX_METADATA_BYTES:
        raise ValidationError(
            tool_name, f"metadata exceeds the maximum size of {MAX_METADATA_BYTES} bytes", "metadata"
        )


def validate_tools(tool_name: str, args: Dict[str, Any]) -> None:
    tools = args.get("tools")
    if tools is None:
        return
    if not isinstance(tools, list):
        raise ValidationError(tool_name, "tools must be an array", "tools")

    for index, tool in enumerate(tools):
        parameter = f"tools[{index}]"
        if not isinstance(tool, dict):
            raise ValidationError(tool_name, f"{parameter} must be an object", parameter)
        tool_type = tool.get("type")
        if tool_type not in VALID_TOOL_TYPES:
            raise ValidationError(
                tool_name,
                f"{parameter}.type must be one of: {', '.join(VALID_TOOL_TYPES)}",
                f"{parameter}.type",
            )
        if tool_type == "function":
            function = tool.get("function")
            if not isinstance(function, dict) or not isinstance(function.get("name"), str) or not function["name"]:
                raise ValidationError(
                    tool_name, f"{parameter}.function.name is required for function tools", f"{parameter}.function"
                )


def validate_tool_resources(tool_name: str, args: Dict[str, Any]) -> None:
    """tool_resources entries must match a tool enabled in the same request."""
    resources = args.get("tool_resources")
    if resources is None:
        return
    if not isinstance(resources, dict):
        raise ValidationError(tool_name, "tool_resources must be an object", "tool_resources")

    # Updates may reference tools configured earlier; only check when tools are sent along
    if "tools" not in args:
        return
    enabled = {tool.get("type") for tool in args.get("tools") or [] if isinstance(tool, dict)}
    for resource_type in ("file_search", "code_interpreter"):
        if resource_type in resources and resource_type not in enabled:
            raise ValidationError(
                tool_name,
                f"tool_resources.{resource_type} requires a {resource_type} tool in 'tools'",
                f"tool_resources.{resource_type}",
            )


def _validate_range(tool_name: str, args: Dict[str, Any], parameter: str, low: float, high: float) -> None:
    value = args.get(parameter)
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not low <= value <= high:
        raise ValidationError(tool_name, f"{parameter} must be a number between {low} and {high}", parameter)


def validate_sampling(tool_name: str, args: Dict[str, Any]) -> None:
    _validate_range(tool_name, args, "temperature", 0, 2)
    _validate_range(tool_name, args, "top_p", 0, 1)


def validate_pagination(tool_name: str, args: Dict[str, Any]) -> None:
    limit = args.get("limit")
    if limit is not None:
        if isinstance(limit, bool) or not isinstance(limit, int) or not 1 <= limit <= 100:
            raise ValidationError(tool_name, "limit must be an integer between 1 and 100", "limit")

    order = args.get("order")
    if order is not None and order not in VALID_ORDERS:
        raise ValidationError(tool_name, "order must be 'asc' or 'desc'", "order")

    validate_string(tool_name, args, "after", non_empty=True)
    validate_string(tool_name, args, "before", non_empty=True)
    if args.get("after") is not None and args.get("before") is not None:
        raise ValidationError(tool_name, "after and before cannot be used together", "after")


def validate_message(tool_name: str, message: Dict[str, Any], parameter: str = "") -> None:
    """Validate role and content of a message, optionally nested under ``parameter``."""
    prefix = f"{parameter}." if parameter else ""
    if not isinstance(message, dict):
        raise ValidationError(tool_name, f"{parameter or 'message'} must be an object", parameter or None)

    role = message.get("role")
    if role not in VALID_ROLES:
        raise ValidationError(tool_name, f"{prefix}role must be 'user' or 'assistant'", f"{prefix}role")

    content = message.get("content")
    if not isinstance(content, str) or not content.strip():
        raise ValidationError(tool_name, f"{prefix}content must be a non-empty string", f"{prefix}content")

    validate_metadata(tool_name, message)


def validate_messages(tool_name: str, args: Dict[str, Any]) -> None:
    messages = args.get("messages")
    if messages is None:
        return
    if not isinstance(messages, list):
        raise ValidationError(tool_name, "messages must be an array", "messages")
    for index, message in enumerate(messages):
        validate_message(tool_name, message, f"messages[{index}]")


def validate_tool_outputs(tool_name: str, args: Dict[str, Any]) -> None:
    outputs = args.get("tool_outputs")
    if outputs is None:
        raise ValidationError(tool_name, "Required parameter 'tool_outputs' is missing", "tool_outputs")
    if not isinstance(outputs, list) or not outputs:
        raise ValidationError(tool_name, "tool_outputs must be a non-empty array", "tool_outputs")

    for index, output in enumerate(outputs):
        parameter = f"tool_outputs[{index}]"
        if not isinstance(output, dict):
            raise ValidationError(tool_name, f"{parameter} must be an object", parameter)
        try:
            require_id(tool_name, output, "tool_call_id")
        except ValidationError as e:
            raise ValidationError(tool_name, f"{parameter}: {e.message}", f"{parameter}.tool_call_id") from e
        if not isinstance(output.get("output"), str):
            raise ValidationError(tool_name, f"{parameter}.output must be a string", f"{parameter}.output")


def validate_include(tool_name: str, args: Dict[str, Any]) -> None:
    include = args.get("include")
    if include is None:
        return
    if not isinstance(include, list) or not all(isinstance(item, str) and item for item in include):
        raise ValidationError(tool_name, "include must be an array of strings", "include")
