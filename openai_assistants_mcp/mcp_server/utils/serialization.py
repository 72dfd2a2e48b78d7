"""
JSON serialization for tool results.

Provider results are mostly plain JSON, but datetimes, Decimals, Enums,
dataclasses and pydantic models are converted as well.
"""

import dataclasses
import json
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class MCPJSONEncoder(json.JSONEncoder):
    """JSON encoder that handles datetime, Decimal, Enum, dataclass and pydantic objects."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        elif isinstance(obj, Decimal):
            return float(obj)
        elif isinstance(obj, Enum):
            return obj.value
        elif hasattr(obj, "model_dump"):
            return obj.model_dump()
        elif dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            return dataclasses.asdict(obj)
        return super().default(obj)


def safe_json_dumps(obj: Any, indent: Optional[int] = None) -> str:
    """
    Serialize ``obj`` to JSON, falling back to a string representation.

    Args:
        obj: Object to serialize
        indent: Optional indentation passed to json.dumps

    Returns:
        JSON string representation of the object
    """
    try:
        return json.dumps(obj, cls=MCPJSONEncoder, ensure_ascii=False, indent=indent)
    except (TypeError, ValueError) as e:
        return json.dumps(
            {"error": f"Serialization failed: {str(e)}", "data": str(obj)}, indent=indent
        )
