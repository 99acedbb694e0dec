"""One-shot interface: run a single API search, print the result, exit."""

from __future__ import annotations

import asyncio

from angelscript_mcp.contracts.api_search import TOOL_NAME
from angelscript_mcp.core.bootstrap import build_context
from angelscript_mcp.core.config import config
from angelscript_mcp.server.dispatcher import ToolDispatcher


async def run_oneshot(
    query: str,
    limit: int | None = None,
    include_details: bool = True,
) -> int:
    text = (query or "").strip()
    if not text:
        print("Error: query must not be empty")
        return 2

    context = build_context(config)
    arguments: dict[str, object] = {"query": text, "includeDetails": include_details}
    if limit is not None:
        arguments["limit"] = limit

    try:
        await context.provider.start()
        context.gate.resolve()
        result = await ToolDispatcher(context).call_tool(TOOL_NAME, arguments)
        print(result.text)
        return 1 if result.is_error else 0
    finally:
        await context.provider.close()


def main(query: str, limit: int | None = None, include_details: bool = True) -> int:
    return asyncio.run(run_oneshot(query=query, limit=limit, include_details=include_details))
