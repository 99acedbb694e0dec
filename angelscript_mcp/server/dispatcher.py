"""Tool dispatcher: advertises the search tool and routes tool calls to it."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from mcp import types
from mcp.server.lowlevel import Server

from angelscript_mcp.contracts.api_search import SEARCH_TOOL, ToolDescriptor
from angelscript_mcp.core.context import SearchContext
from angelscript_mcp.core.logger import logger
from angelscript_mcp.search.pipeline import TOOL_FAILED_MESSAGE, run_api_search


class DispatcherState(StrEnum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"


@dataclass
class ToolResult:
    text: str
    is_error: bool = False

    @classmethod
    def ok(cls, text: str) -> "ToolResult":
        return cls(text=text)

    @classmethod
    def fail(cls, text: str) -> "ToolResult":
        return cls(text=text, is_error=True)

    def to_mcp(self) -> types.CallToolResult:
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=self.text)],
            isError=self.is_error,
        )


def to_mcp_tool(descriptor: ToolDescriptor) -> types.Tool:
    return types.Tool(
        name=descriptor.name,
        description=descriptor.description,
        inputSchema=descriptor.input_schema,
    )


class ToolDispatcher:
    """Maps tool names to the search pipeline; unknown names become error results.

    ``state`` only records whether the MCP handlers are installed on a server.
    ``call_tool`` does not consult it, so the one-shot CLI can call an
    unregistered dispatcher directly.
    """

    def __init__(self, context: SearchContext, descriptor: ToolDescriptor = SEARCH_TOOL):
        self._context = context
        self._descriptor = descriptor
        self.state = DispatcherState.UNINITIALIZED

    def list_tools(self) -> list[ToolDescriptor]:
        return [self._descriptor]

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> ToolResult:
        if name != self._descriptor.name:
            logger.warning(f"Unknown tool requested: {name}")
            return ToolResult.fail(f"Unknown tool: {name}")

        started = logger.tool_execute(name, arguments or {})
        try:
            text = await run_api_search(self._context, arguments)
        except Exception as e:
            # run_api_search converts its own failures; this guards the dispatch boundary
            logger.error(f"{name} raised past the pipeline boundary", exception=e)
            text = TOOL_FAILED_MESSAGE
        logger.tool_result(name, len(text), True, started=started)
        return ToolResult.ok(text)

    def register(self, server: Server) -> None:
        """Install list_tools/call_tool handlers; the dispatcher is READY afterwards."""

        async def _list_tools(_: types.ListToolsRequest) -> types.ServerResult:
            tools = [to_mcp_tool(d) for d in self.list_tools()]
            return types.ServerResult(types.ListToolsResult(tools=tools))

        async def _call_tool(request: types.CallToolRequest) -> types.ServerResult:
            result = await self.call_tool(request.params.name, request.params.arguments)
            return types.ServerResult(result.to_mcp())

        server.request_handlers[types.ListToolsRequest] = _list_tools
        server.request_handlers[types.CallToolRequest] = _call_tool
        self.state = DispatcherState.READY
