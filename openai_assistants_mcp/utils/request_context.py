"""Request context management for tracing requests through the server.

Each JSON-RPC request handled by the dispatcher gets a short request ID
(``req_a1b2c3``) stored in a context variable, so every log line emitted
while serving that request can be correlated, including lines written from
executor threads started inside the request.
"""

import secrets
from contextvars import ContextVar
from typing import Optional

# Context variable for request ID - async-safe
REQUEST_ID_CONTEXT: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def generate_request_id() -> str:
    """Generate a unique 6-digit hex request ID with req_ prefix.

    Returns:
        str: Request ID in format 'req_a1b2c3'
    """
    return f"req_{secrets.token_hex(3)}"


def get_request_id() -> Optional[str]:
    """Get the current request ID from context, or None if unset."""
    return REQUEST_ID_CONTEXT.get()


def set_request_id(request_id: Optional[str]) -> None:
    """Set the request ID in the current context."""
    REQUEST_ID_CONTEXT.set(request_id)


def format_request_id(request_id: Optional[str]) -> str:
    """Format request ID for logging, falling back to 'req_unknown'."""
    return request_id or "req_unknown"


def ensure_request_id() -> str:
    """Ensure a request ID exists, generating one if necessary.

    Returns:
        str: Current or newly generated request ID
    """
    current_id = get_request_id()
    if current_id:
        return current_id

    new_id = generate_request_id()
    set_request_id(new_id)
    return new_id
