"""API search pipeline: request validation, detail enrichment, payload assembly."""

from angelscript_mcp.search.enrichment import fetch_details
from angelscript_mcp.search.pipeline import (
    EMPTY_DATABASE_MESSAGE,
    NO_QUERY_MESSAGE,
    TOOL_FAILED_MESSAGE,
    build_payload,
    merge_details,
    no_results_message,
    run_api_search,
)
from angelscript_mcp.search.validator import validate_search_args

__all__ = [
    "EMPTY_DATABASE_MESSAGE",
    "NO_QUERY_MESSAGE",
    "TOOL_FAILED_MESSAGE",
    "build_payload",
    "fetch_details",
    "merge_details",
    "no_results_message",
    "run_api_search",
    "validate_search_args",
]
