"""Search + enrich pipeline behind the angelscript_searchApi tool.

validate -> has-data check -> readiness gate -> provider search -> base payload
-> optional concurrent detail enrichment -> JSON text.

Every recoverable condition ends as a user-facing string; nothing raised here
reaches the dispatcher.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from angelscript_mcp.contracts.api_search import EnrichedMatch, SearchPayload, SearchQuery
from angelscript_mcp.core.context import SearchContext
from angelscript_mcp.core.logger import logger
from angelscript_mcp.search.enrichment import fetch_details
from angelscript_mcp.search.validator import validate_search_args

NO_QUERY_MESSAGE = "No query provided. Please supply a search query."

EMPTY_DATABASE_MESSAGE = (
    "Angelscript types have not been loaded. The type database is empty. "
    "This typically means the Unreal Engine connection has not been established, "
    "or no type data has been cached. Please ensure the Unreal Editor is running "
    "and connected, or that cached type data is available."
)

TOOL_FAILED_MESSAGE = (
    "The Angelscript API tool failed to run. "
    "Please ensure the language server is running and try again."
)


def no_results_message(query: str) -> str:
    return f'No Angelscript API results for "{query}".'


def build_payload(query: SearchQuery, results: Sequence[Any]) -> SearchPayload:
    """Project provider results onto the first ``query.limit`` items, rank order kept."""
    items = [EnrichedMatch.from_provider(raw) for raw in results[: query.limit]]
    return SearchPayload(
        query=query.text,
        total=len(results),
        returned=len(items),
        truncated=len(results) > len(items),
        items=items,
    )


def merge_details(payload: SearchPayload, details: Sequence[str | None]) -> SearchPayload:
    if len(details) != len(payload.items):
        raise ValueError(
            f"Detail count {len(details)} does not match item count {len(payload.items)}"
        )
    items = [
        item.model_copy(update={"details": detail})
        for item, detail in zip(payload.items, details)
    ]
    return payload.model_copy(update={"items": items})


async def run_api_search(context: SearchContext, arguments: dict[str, Any] | None) -> str:
    query = validate_search_args(arguments)
    if query is None:
        return NO_QUERY_MESSAGE

    provider = context.provider
    if not provider.has_data():
        return EMPTY_DATABASE_MESSAGE

    try:
        await context.gate.wait()

        results = await provider.search(query.text)
        if not results:
            return no_results_message(query.text)

        payload = build_payload(query, results)
        if query.include_details:
            details = await fetch_details(
                payload.items,
                provider.fetch_detail,
                concurrency=context.detail_concurrency,
                timeout=context.detail_timeout,
            )
            payload = merge_details(payload, details)

        return payload.to_json()
    except Exception as e:
        logger.error("angelscript_searchApi tool failed", exception=e)
        return TOOL_FAILED_MESSAGE
