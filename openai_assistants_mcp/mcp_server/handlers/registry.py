"""Tool handler registry - builds and dispatches the tools declared in the tool table."""

import logging
from typing import Any, Dict, List, Optional, Sequence, Type

from mcp.types import Tool, ToolAnnotations

from ...errors import RegistrationError, UnknownToolError
from ...providers.base import Provider
from ..config.tool_definitions import HANDLER_CATEGORIES, TOOL_DEFINITIONS, validate_tool_definitions
from ..tools import HANDLER_CLASSES
from ..tools.base import BaseToolHandler

logger = logging.getLogger(__name__)


class ToolHandlerRegistry:
    """
    Maps tool names to handler instances, built from the category table.

    Construction fails with ``RegistrationError`` when the table and the
    handler implementations disagree: a tabled tool without a handler, a
    handler for an untabled tool, a duplicate name, a handler whose category
    differs from the table, or a tool definition that is missing or
    incomplete. The registry is immutable afterwards.
    """

    def __init__(
        self,
        categories: Optional[Dict[str, List[str]]] = None,
        handler_classes: Optional[Sequence[Type[BaseToolHandler]]] = None,
        definitions: Optional[Dict[str, Dict[str, Any]]] = None,
    ):
        self._categories = categories if categories is not None else HANDLER_CATEGORIES
        self._definitions = definitions if definitions is not None else TOOL_DEFINITIONS
        self._handlers: Dict[str, BaseToolHandler] = {}
        self._build(handler_classes if handler_classes is not None else HANDLER_CLASSES)

    def _build(self, handler_classes: Sequence[Type[BaseToolHandler]]) -> None:
        classes: Dict[str, Type[BaseToolHandler]] = {}
        for handler_class in handler_classes:
            if handler_class.name in classes:
                raise RegistrationError(
                    f"Handlers {classes[handler_class.name].__name__} and {handler_class.__name__} "
                    f"both claim tool '{handler_class.name}'"
                )
            classes[handler_class.name] = handler_class

        for category, tool_names in self._categories.items():
            for tool_name in tool_names:
                if tool_name in self._handlers:
                    raise RegistrationError(f"Tool '{tool_name}' is declared more than once")

                handler_class = classes.get(tool_name)
                if handler_class is None:
                    raise RegistrationError(f"No handler implementation for tool '{tool_name}' ({category})")
                if handler_class.category != category:
                    raise RegistrationError(
                        f"Handler for '{tool_name}' has category '{handler_class.category}', "
                        f"table declares '{category}'"
                    )

                self._handlers[tool_name] = handler_class()
                logger.debug(f"Registered tool handler: {tool_name}")

        untabled = sorted(set(classes) - set(self._handlers))
        if untabled:
            raise RegistrationError(f"Handlers not declared in the tool table: {', '.join(untabled)}")

        problems = validate_tool_definitions(self._categories, self._definitions)
        if problems:
            raise RegistrationError(f"Inconsistent tool definitions: {'; '.join(problems)}")

        logger.info(f"Registered {len(self._handlers)} tool handlers across {len(self._categories)} categories")

    def has_tool(self, name: str) -> bool:
        return name in self._handlers

    def get_handler(self, name: str) -> Optional[BaseToolHandler]:
        return self._handlers.get(name)

    def list_tool_names(self) -> List[str]:
        """Tool names in table order."""
        return list(self._handlers)

    def get_tools_by_category(self, category: str) -> List[str]:
        return [name for name, handler in self._handlers.items() if handler.category == category]

    def get_tool_count(self) -> int:
        return len(self._handlers)

    def list_tools(self) -> List[Tool]:
        """
        MCP tool descriptors in table order.

        Returns:
            List of ``mcp.types.Tool``
        """
        tools = []
        for name in self._handlers:
            definition = self._definitions[name]
            annotations = definition.get("annotations")
            tools.append(
                Tool(
                    name=name,
                    title=definition["title"],
                    description=definition["description"],
                    inputSchema=definition["inputSchema"],
                    annotations=ToolAnnotations(**annotations) if annotations else None,
                )
            )
        return tools

    def get_stats(self) -> Dict[str, Any]:
        """
        Registry statistics.

        Returns:
            Dict with total_handlers, handlers_by_category and registered_tools
        """
        by_category: Dict[str, int] = {}
        for handler in self._handlers.values():
            by_category[handler.category] = by_category.get(handler.category, 0) + 1

        return {
            "total_handlers": len(self._handlers),
            "handlers_by_category": by_category,
            "registered_tools": self.list_tool_names(),
        }

    async def dispatch(
        self,
        name: str,
        args: Dict[str, Any],
        provider: Provider,
        timeout: Optional[float] = None,
    ) -> Any:
        """
        Validate and execute a tool call.

        Args:
            name: Tool name
            args: Tool arguments
            provider: Provider resolved for this request
            timeout: Optional bound in seconds on the provider call

        Raises:
            UnknownToolError: If no handler is registered under ``name``
            ValidationError: If the arguments are invalid
            ProviderError: If the provider call fails (with tool context attached)
        """
        handler = self._handlers.get(name)
        if handler is None:
            raise UnknownToolError(name, self.list_tool_names())
        return await handler.handle(args, provider, timeout=timeout)
