"""MCP server surface: tool dispatcher and STDIO server lifecycle."""

from angelscript_mcp.server.app import SERVER_NAME, SERVER_VERSION, AngelscriptMcpServer
from angelscript_mcp.server.dispatcher import DispatcherState, ToolDispatcher, ToolResult

__all__ = [
    "SERVER_NAME",
    "SERVER_VERSION",
    "AngelscriptMcpServer",
    "DispatcherState",
    "ToolDispatcher",
    "ToolResult",
]
