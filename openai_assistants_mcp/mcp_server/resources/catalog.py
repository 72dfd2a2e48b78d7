"""
Resource catalog - static and computed documents served via resources/*.

Listing is metadata only; content is resolved when a resource is read.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from ...errors import RegistrationError, ResourceContentError, ResourceNotFoundError
from ..config.tool_definitions import HANDLER_CATEGORIES, TOOL_DEFINITIONS

logger = logging.getLogger(__name__)

CONTENT_DIR = Path(__file__).parent / "content"
CATEGORIES = ("templates", "docs", "examples")
URI_PATTERN = re.compile(r"^[a-z][a-z0-9+.-]*://[^\s]+$")

ContentResolver = Callable[[], Any]


@dataclass(frozen=True)
class ResourceEntry:
    """One catalog entry. ``resolver`` produces the content on demand."""

    uri: str
    name: str
    description: str
    mime_type: str
    category: str
    resolver: ContentResolver = field(repr=False, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        """MCP resource descriptor."""
        return {
            "uri": self.uri,
            "name": self.name,
            "description": self.description,
            "mimeType": self.mime_type,
        }


@dataclass(frozen=True)
class ResourceContents:
    uri: str
    mime_type: str
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"uri": self.uri, "mimeType": self.mime_type, "text": self.text}


def _json_file(relative_path: str) -> ContentResolver:
    def resolve() -> Any:
        with open(CONTENT_DIR / relative_path, "r", encoding="utf-8") as f:
            return json.load(f)
    return resolve


def _text_file(relative_path: str) -> ContentResolver:
    def resolve() -> str:
        return (CONTENT_DIR / relative_path).read_text(encoding="utf-8")
    return resolve


def render_tool_usage() -> str:
    """Markdown overview of every tool, generated from the tool definitions."""
    lines = ["# Tool Usage", ""]
    for category, tool_names in HANDLER_CATEGORIES.items():
        lines.append(f"## {category}")
        lines.append("")
        for name in tool_names:
            definition = TOOL_DEFINITIONS.get(name, {})
            schema = definition.get("inputSchema", {})
            required = schema.get("required", [])
            optional = [p for p in schema.get("properties", {}) if p not in required]
            lines.append(f"### {name}")
            lines.append("")
            lines.append(definition.get("description", ""))
            lines.append("")
            lines.append(f"- Required: {', '.join(required) if required else 'none'}")
            if optional:
                lines.append(f"- Optional: {', '.join(optional)}")
            lines.append("")
    return "\n".join(lines)


RESOURCE_DEFINITIONS: List[ResourceEntry] = [
    ResourceEntry(
        uri="assistant://templates/coding-assistant",
        name="Coding Assistant Template",
        description="assistant-create arguments for a code review and debugging assistant",
        mime_type="application/json",
        category="templates",
        resolver=_json_file("templates/coding-assistant.json"),
    ),
    ResourceEntry(
        uri="assistant://templates/data-analyst",
        name="Data Analyst Template",
        description="assistant-create arguments for a data analysis assistant with code interpreter",
        mime_type="application/json",
        category="templates",
        resolver=_json_file("templates/data-analyst.json"),
    ),
    ResourceEntry(
        uri="assistant://templates/customer-support",
        name="Customer Support Template",
        description="assistant-create arguments for a knowledge-base support assistant",
        mime_type="application/json",
        category="templates",
        resolver=_json_file("templates/customer-support.json"),
    ),
    ResourceEntry(
        uri="docs://getting-started",
        name="Getting Started",
        description="First steps: create an assistant, start a thread, run it and read the answer",
        mime_type="text/markdown",
        category="docs",
        resolver=_text_file("docs/getting-started.md"),
    ),
    ResourceEntry(
        uri="docs://openai-assistants-api",
        name="Assistants API Reference",
        description="Tool to endpoint mapping, pagination, run statuses and limits",
        mime_type="text/markdown",
        category="docs",
        resolver=_text_file("docs/openai-assistants-api.md"),
    ),
    ResourceEntry(
        uri="docs://best-practices",
        name="Best Practices",
        description="Guidelines for assistants, threads, runs, error handling and cost",
        mime_type="text/markdown",
        category="docs",
        resolver=_text_file("docs/best-practices.md"),
    ),
    ResourceEntry(
        uri="docs://troubleshooting/common-issues",
        name="Troubleshooting Guide",
        description="Common errors and how to resolve them",
        mime_type="text/markdown",
        category="docs",
        resolver=_text_file("docs/troubleshooting/common-issues.md"),
    ),
    ResourceEntry(
        uri="docs://tool-usage",
        name="Tool Usage",
        description="Every tool with its required and optional arguments",
        mime_type="text/markdown",
        category="docs",
        resolver=render_tool_usage,
    ),
    ResourceEntry(
        uri="examples://workflows/basic-workflow",
        name="Basic Workflow",
        description="Single question and answer from assistant creation to reading the reply",
        mime_type="text/markdown",
        category="examples",
        resolver=_text_file("examples/basic-workflow.md"),
    ),
    ResourceEntry(
        uri="examples://workflows/advanced-workflow",
        name="Advanced Workflow",
        description="Function calling with requires_action and submitted tool outputs",
        mime_type="text/markdown",
        category="examples",
        resolver=_text_file("examples/advanced-workflow.md"),
    ),
    ResourceEntry(
        uri="examples://workflows/batch-processing",
        name="Batch Processing",
        description="Running many independent inputs through one assistant",
        mime_type="text/markdown",
        category="examples",
        resolver=_text_file("examples/batch-processing.md"),
    ),
]


class ResourceCatalog:
    """
    Immutable catalog of resources keyed by exact URI.

    Raises ``RegistrationError`` at construction for malformed or duplicate
    URIs and unknown categories.
    """

    def __init__(self, entries: Optional[List[ResourceEntry]] = None):
        self._entries: Dict[str, ResourceEntry] = {}
        for entry in entries if entries is not None else RESOURCE_DEFINITIONS:
            if not URI_PATTERN.match(entry.uri):
                raise RegistrationError(f"Malformed resource URI: {entry.uri}")
            if entry.uri in self._entries:
                raise RegistrationError(f"Resource '{entry.uri}' is declared more than once")
            if entry.category not in CATEGORIES:
                raise RegistrationError(f"Resource '{entry.uri}' has unknown category '{entry.category}'")
            self._entries[entry.uri] = entry

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, uri: str) -> bool:
        return uri in self._entries

    def list_resources(self) -> List[ResourceEntry]:
        """All entries in declaration order; no content is resolved."""
        return list(self._entries.values())

    def list_by_category(self, category: str) -> List[ResourceEntry]:
        return [entry for entry in self._entries.values() if entry.category == category]

    def get_stats(self) -> Dict[str, Any]:
        by_category = {category: len(self.list_by_category(category)) for category in CATEGORIES}
        return {"total": len(self._entries), "by_category": by_category}

    def read_resource(self, uri: str) -> ResourceContents:
        """
        Resolve the content of a resource.

        Args:
            uri: Exact resource URI

        Returns:
            ResourceContents with the text (structured content is JSON-encoded)

        Raises:
            ResourceNotFoundError: If the URI is not catalogued
            ResourceContentError: If the resource resolves to nothing
        """
        entry = self._entries.get(uri)
        if entry is None:
            raise ResourceNotFoundError(uri, list(self._entries))

        try:
            content = entry.resolver()
        except OSError as e:
            logger.error(f"Failed to load content for {uri}: {e}")
            raise ResourceContentError(uri, f"content could not be loaded ({e.__class__.__name__})") from e

        if content is None:
            raise ResourceContentError(uri, "resource has no content")
        text = content if isinstance(content, str) else json.dumps(content, indent=2)
        if not text.strip():
            raise ResourceContentError(uri)

        return ResourceContents(uri=uri, mime_type=entry.mime_type, text=text)
