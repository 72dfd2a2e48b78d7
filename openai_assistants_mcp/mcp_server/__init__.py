"""MCP protocol layer: dispatcher, tool handlers, resources and prompts."""

from .server import BaseMCPHandler, ConnectionState

__all__ = ["BaseMCPHandler", "ConnectionState"]
