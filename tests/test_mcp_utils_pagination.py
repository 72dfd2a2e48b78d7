"""Tests for cursor pagination used by tools/list and resources/list."""

import base64

import pytest

from openai_assistants_mcp.errors import InvalidParamsError
from openai_assistants_mcp.mcp_server.utils.pagination import (
    decode_cursor,
    encode_cursor,
    paginate,
    with_next_cursor,
)


class TestCursor:
    """Cursor encoding."""

    def test_cursor_is_opaque_base64(self):
        cursor = encode_cursor(50)

        assert base64.urlsafe_b64decode(cursor).decode() == "offset:50"
        assert decode_cursor(cursor) == 50

    @pytest.mark.parametrize(
        "cursor",
        [
            "not base64!",
            base64.urlsafe_b64encode(b"page:2").decode(),
            base64.urlsafe_b64encode(b"offset:-1").decode(),
            base64.urlsafe_b64encode(b"offset:").decode(),
        ],
    )
    def test_invalid_cursor(self, cursor):
        with pytest.raises(InvalidParamsError, match="Invalid cursor"):
            decode_cursor(cursor)


class TestPaginate:
    """paginate()."""

    def test_single_page(self):
        page, next_cursor = paginate(list(range(5)), None, 50)

        assert page == [0, 1, 2, 3, 4]
        assert next_cursor is None

    def test_walks_all_pages(self):
        items = list(range(22))
        seen = []
        cursor = None
        pages = 0

        while True:
            page, cursor = paginate(items, cursor, 10)
            seen.extend(page)
            pages += 1
            if cursor is None:
                break

        assert seen == items
        assert pages == 3

    def test_exact_multiple_has_no_trailing_cursor(self):
        page, next_cursor = paginate(list(range(10)), encode_cursor(5), 5)

        assert page == [5, 6, 7, 8, 9]
        assert next_cursor is None

    def test_cursor_past_end(self):
        with pytest.raises(InvalidParamsError, match="past the end"):
            paginate([1, 2], encode_cursor(3), 10)

    def test_with_next_cursor(self):
        assert with_next_cursor({"tools": []}, None) == {"tools": []}
        assert with_next_cursor({"tools": []}, "abc") == {"tools": [], "nextCursor": "abc"}
