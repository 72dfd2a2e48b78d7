"""Sanitizing exception messages before they reach a client."""

import re
from pathlib import Path

MAX_MESSAGE_LENGTH = 200


def sanitize_error(error: Exception) -> str:
    """
    Strip file system paths and truncate an error message.

    Args:
        error: The exception to sanitize

    Returns:
        Sanitized error message string

    Example:
        >>> sanitize_error(FileNotFoundError("/home/user/secret/file.txt not found"))
        'file.txt not found'
    """
    sanitized = str(error).replace(str(Path.home()), "~")

    # Keep only the last path component
    sanitized = re.sub(r"~?/[a-zA-Z0-9_/.-]*/", "", sanitized)

    if len(sanitized) > MAX_MESSAGE_LENGTH:
        sanitized = sanitized[:MAX_MESSAGE_LENGTH] + "..."

    return sanitized or error.__class__.__name__
