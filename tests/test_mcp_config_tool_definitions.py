"""Tests for the tool table and tool definitions."""

import pytest

from openai_assistants_mcp.mcp_server.config.tool_definitions import (
    HANDLER_CATEGORIES,
    TOOL_DEFINITIONS,
    TOTAL_TOOL_COUNT,
    validate_tool_definitions,
)


class TestHandlerCategories:
    """Test the declarative tool table."""

    def test_category_order(self):
        assert list(HANDLER_CATEGORIES) == ["assistant", "thread", "message", "run", "run-step"]

    def test_category_sizes(self):
        sizes = {category: len(tools) for category, tools in HANDLER_CATEGORIES.items()}
        assert sizes == {"assistant": 5, "thread": 4, "message": 5, "run": 6, "run-step": 2}

    def test_total_count_is_derived_from_table(self):
        assert TOTAL_TOOL_COUNT == sum(len(tools) for tools in HANDLER_CATEGORIES.values())
        assert TOTAL_TOOL_COUNT == 22

    def test_tool_names_are_unique(self):
        names = [name for tools in HANDLER_CATEGORIES.values() for name in tools]
        assert len(names) == len(set(names))


class TestToolDefinitions:
    """Test the MCP-facing tool definitions."""

    def test_definitions_are_consistent(self):
        assert validate_tool_definitions() == []

    def test_reports_problems_for_custom_table(self):
        categories = {"misc": ["echo", "echo"], "other": ["shout"]}
        definitions = {
            "echo": {"title": "Echo", "description": "Echo.", "inputSchema": {"type": "object"}},
            "whisper": {"title": "Whisper", "description": "Whisper.", "inputSchema": {"type": "object"}},
        }

        problems = validate_tool_definitions(categories, definitions)

        assert problems == [
            "Tool 'echo' is listed more than once",
            "Tool 'shout' has no definition",
            "Definition 'whisper' is not in any category",
        ]

    def test_every_tool_has_object_schema(self):
        for name, definition in TOOL_DEFINITIONS.items():
            assert definition["inputSchema"]["type"] == "object", name
            assert definition["description"], name

    def test_required_ids(self):
        assert TOOL_DEFINITIONS["assistant-create"]["inputSchema"]["required"] == ["model"]
        assert TOOL_DEFINITIONS["run-create"]["inputSchema"]["required"] == ["thread_id", "assistant_id"]
        assert TOOL_DEFINITIONS["run-step-get"]["inputSchema"]["required"] == ["thread_id", "run_id", "step_id"]

    def test_annotations(self):
        assert TOOL_DEFINITIONS["assistant-list"]["annotations"] == {"readOnlyHint": True}
        assert TOOL_DEFINITIONS["thread-delete"]["annotations"] == {"destructiveHint": True}
        assert "annotations" not in TOOL_DEFINITIONS["message-create"]
