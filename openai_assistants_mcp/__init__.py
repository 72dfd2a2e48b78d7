"""OpenAI Assistants MCP server.

Exposes the OpenAI Assistants API (assistants, threads, messages, runs and
run steps) as Model Context Protocol tools over JSON-RPC 2.0.
"""

__version__ = "0.1.0"
