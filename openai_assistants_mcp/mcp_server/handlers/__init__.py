"""Tool handler registry."""

from .registry import ToolHandlerRegistry

__all__ = ["ToolHandlerRegistry"]
