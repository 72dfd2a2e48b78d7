import logging
import sys
from typing import Optional

from .utils.request_context import get_request_id, format_request_id


class RequestIDFormatter(logging.Formatter):
    """Log formatter that includes the current request ID.

    Format: timestamp [request_id] level logger_name: message
    Example: 2025-08-07 14:30:15,123 [req_a1b2c3] INFO openai_assistants_mcp.mcp_server.server: tools/call run-create
    """

    def __init__(self, fmt: Optional[str] = None, datefmt: Optional[str] = None):
        if fmt is None:
            fmt = "%(asctime)s [%(request_id)s] %(levelname)s %(name)s: %(message)s"
        elif "[%(request_id)s]" not in fmt:
            fmt = fmt.replace("%(levelname)s", "[%(request_id)s] %(levelname)s")

        super().__init__(fmt, datefmt)

    def format(self, record: logging.LogRecord) -> str:
        record.request_id = format_request_id(get_request_id())
        return super().format(record)


def setup_logging(log_level: str = "INFO", include_request_id: bool = True):
    """
    Set up logging for the application.

    Logs always go to stderr; stdout carries the JSON-RPC stream when the
    server runs over stdio.

    Args:
        log_level (str): Logging level as a string (e.g., 'DEBUG', 'INFO').
        include_request_id (bool): Whether to include request IDs in log messages.
    """
    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {log_level}")

    if include_request_id:
        formatter = RequestIDFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Replace existing handlers so repeated calls don't duplicate output
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    # requests/urllib3 are chatty at DEBUG
    logging.getLogger("urllib3").setLevel(max(numeric_level, logging.WARNING))
