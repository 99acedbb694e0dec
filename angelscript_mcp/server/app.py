"""MCP server for Angelscript API search over STDIO.

The provider connects in the background while the transport is already up;
tool calls wait on the readiness gate instead of failing early. All
diagnostics go to stderr because stdout carries MCP frames.
"""

from __future__ import annotations

import asyncio

from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from angelscript_mcp.core.context import SearchContext
from angelscript_mcp.core.logger import logger
from angelscript_mcp.providers.interface import SymbolProvider
from angelscript_mcp.server.dispatcher import ToolDispatcher

SERVER_NAME = "angelscript-mcp-server"
SERVER_VERSION = "1.0.0"


class AngelscriptMcpServer:
    def __init__(self, context: SearchContext):
        self.context = context
        self.server: Server = Server(SERVER_NAME, version=SERVER_VERSION)
        self.dispatcher = ToolDispatcher(context)
        self.dispatcher.register(self.server)
        self._connect_task: asyncio.Task | None = None
        self._stopped = False

    @property
    def provider(self) -> SymbolProvider:
        return self.context.provider

    async def _connect_provider(self) -> None:
        try:
            await self.provider.start()
        except Exception as e:
            logger.error("Symbol provider failed to start", exception=e)
            self.context.gate.fail(e)
            return
        self.context.gate.resolve()
        logger.info("Symbol provider ready")

    def connect_provider(self) -> asyncio.Task:
        """Start the provider in the background; the gate settles when it finishes."""
        if self._connect_task is None:
            self._connect_task = asyncio.create_task(self._connect_provider())
        return self._connect_task

    async def start(self) -> None:
        """Attach STDIO and serve until the client disconnects."""
        self.connect_provider()
        async with stdio_server() as (read_stream, write_stream):
            logger.info("Angelscript MCP Server started")
            logger.info(
                "Available tools: %s",
                ", ".join(d.name for d in self.dispatcher.list_tools()),
            )
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )

    async def stop(self) -> None:
        if self._stopped:
            return
        self._stopped = True
        if self._connect_task is not None and not self._connect_task.done():
            self._connect_task.cancel()
            try:
                await self._connect_task
            except asyncio.CancelledError:
                pass
        await self.provider.close()
        logger.info("Angelscript MCP Server stopped")

    async def serve(self) -> None:
        try:
            await self.start()
        finally:
            await self.stop()
