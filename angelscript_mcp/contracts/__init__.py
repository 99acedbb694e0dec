"""Angelscript API search contract: request, match, payload, and tool descriptor types."""

from angelscript_mcp.contracts.api_search import (
    SEARCH_TOOL,
    TOOL_NAME,
    EnrichedMatch,
    Match,
    SearchPayload,
    SearchQuery,
    ToolDescriptor,
)

__all__ = [
    "SEARCH_TOOL",
    "TOOL_NAME",
    "EnrichedMatch",
    "Match",
    "SearchPayload",
    "SearchQuery",
    "ToolDescriptor",
]
