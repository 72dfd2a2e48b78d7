"""Opaque cursor pagination for list methods."""

import base64
import binascii
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ...errors import InvalidParamsError

CURSOR_PREFIX = "offset:"


def encode_cursor(offset: int) -> str:
    return base64.urlsafe_b64encode(f"{CURSOR_PREFIX}{offset}".encode("ascii")).decode("ascii")


def decode_cursor(cursor: str) -> int:
    """
    Decode a cursor produced by ``encode_cursor``.

    Raises:
        InvalidParamsError: If the cursor is not one this server issued
    """
    try:
        decoded = base64.urlsafe_b64decode(cursor.encode("ascii")).decode("ascii")
    except (binascii.Error, UnicodeError, AttributeError) as e:
        raise InvalidParamsError(f"Invalid cursor: {cursor!r}") from e

    if not decoded.startswith(CURSOR_PREFIX) or not decoded[len(CURSOR_PREFIX):].isdigit():
        raise InvalidParamsError(f"Invalid cursor: {cursor!r}")
    return int(decoded[len(CURSOR_PREFIX):])


def paginate(items: Sequence[Any], cursor: Optional[str], page_size: int) -> Tuple[List[Any], Optional[str]]:
    """
    Slice one page out of ``items``.

    Returns:
        (page, next_cursor) where next_cursor is None on the last page
    """
    offset = decode_cursor(cursor) if cursor else 0
    if offset > len(items):
        raise InvalidParamsError(f"Cursor is past the end of the list: {cursor!r}")

    page = list(items[offset:offset + page_size])
    next_offset = offset + page_size
    return page, encode_cursor(next_offset) if next_offset < len(items) else None


def with_next_cursor(result: Dict[str, Any], next_cursor: Optional[str]) -> Dict[str, Any]:
    if next_cursor:
        result["nextCursor"] = next_cursor
    return result
