"""Protocol-level helpers used by the dispatcher."""

from .errors import sanitize_error
from .pagination import paginate
from .serialization import MCPJSONEncoder, safe_json_dumps

__all__ = ["sanitize_error", "paginate", "MCPJSONEncoder", "safe_json_dumps"]
