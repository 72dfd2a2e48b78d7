"""Unit tests for request context utilities and request-aware logging."""

import asyncio
import logging

import pytest

from openai_assistants_mcp.logging_utils import RequestIDFormatter, setup_logging
from openai_assistants_mcp.utils.request_context import (
    REQUEST_ID_CONTEXT,
    ensure_request_id,
    format_request_id,
    generate_request_id,
    get_request_id,
    set_request_id,
)


class TestRequestIDGeneration:
    """Test request ID generation functions."""

    def test_generate_request_id_format(self):
        """Test that generated request IDs follow the correct format."""
        request_id = generate_request_id()

        assert request_id.startswith("req_")
        assert len(request_id) == 10  # 'req_' + 6 hex chars
        int(request_id[4:], 16)

    def test_generate_request_id_uniqueness(self):
        ids = [generate_request_id() for _ in range(100)]
        assert len(set(ids)) > 90


class TestRequestIDContext:
    """Test request ID context management."""

    def setup_method(self):
        """Clear context before each test."""
        REQUEST_ID_CONTEXT.set(None)

    def test_get_set_request_id(self):
        assert get_request_id() is None

        set_request_id("req_test01")
        assert get_request_id() == "req_test01"

    def test_ensure_request_id_when_none(self):
        request_id = ensure_request_id()

        assert request_id.startswith("req_")
        assert get_request_id() == request_id

    def test_ensure_request_id_when_exists(self):
        set_request_id("req_existing")
        assert ensure_request_id() == "req_existing"

    def test_format_request_id(self):
        assert format_request_id("req_a1b2c3") == "req_a1b2c3"
        assert format_request_id(None) == "req_unknown"
        assert format_request_id("") == "req_unknown"

    @pytest.mark.asyncio
    async def test_concurrent_tasks_are_isolated(self):
        """Test that each asyncio task sees only its own request ID."""

        async def worker(request_id):
            set_request_id(request_id)
            await asyncio.sleep(0)
            return get_request_id()

        results = await asyncio.gather(*(worker(f"req_00000{i}") for i in range(5)))

        assert results == [f"req_00000{i}" for i in range(5)]


class TestRequestIDFormatter:
    """Test the log formatter."""

    def setup_method(self):
        REQUEST_ID_CONTEXT.set(None)

    def _record(self, message="tools/call assistant-create"):
        return logging.LogRecord(
            name="openai_assistants_mcp.mcp_server.server",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg=message,
            args=(),
            exc_info=None,
        )

    def test_includes_current_request_id(self):
        set_request_id("req_a1b2c3")
        output = RequestIDFormatter().format(self._record())

        assert "[req_a1b2c3] INFO openai_assistants_mcp.mcp_server.server: tools/call assistant-create" in output

    def test_unknown_request_id(self):
        output = RequestIDFormatter("%(levelname)s %(message)s").format(self._record("ping"))

        assert output == "[req_unknown] INFO ping"


class TestSetupLogging:
    """Test setup_logging."""

    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers = root.handlers[:]
        level = root.level
        yield
        root.handlers = handlers
        root.setLevel(level)

    def test_configures_single_stderr_handler(self):
        setup_logging("DEBUG")
        setup_logging("DEBUG")

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, RequestIDFormatter)
        assert root.level == logging.DEBUG
        assert logging.getLogger("urllib3").level == logging.WARNING

    def test_plain_formatter(self):
        setup_logging("warning", include_request_id=False)

        root = logging.getLogger()
        assert not isinstance(root.handlers[0].formatter, RequestIDFormatter)
        assert root.level == logging.WARNING

    def test_invalid_level(self):
        with pytest.raises(ValueError, match="Invalid log level"):
            setup_logging("LOUD")
