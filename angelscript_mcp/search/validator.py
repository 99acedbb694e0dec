"""Normalize raw tool arguments into a SearchQuery.

Malformed shapes are coerced, never rejected: the only outcome besides a
query is "no query text", which the caller turns into a fixed message.
"""

from __future__ import annotations

import math
from typing import Any

from angelscript_mcp.contracts.api_search import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    MIN_LIMIT,
    SearchQuery,
)


def normalize_limit(raw: Any) -> int:
    # bool is an int subclass but not a number here
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return DEFAULT_LIMIT
    if isinstance(raw, float):
        if math.isnan(raw):
            return DEFAULT_LIMIT
        if math.isinf(raw):
            return MAX_LIMIT if raw > 0 else MIN_LIMIT
        raw = math.floor(raw)
    return min(max(int(raw), MIN_LIMIT), MAX_LIMIT)


def normalize_include_details(raw: Any) -> bool:
    return raw is not False


def validate_search_args(arguments: dict[str, Any] | None) -> SearchQuery | None:
    """Return a SearchQuery, or None when the trimmed query is empty."""
    args = arguments if isinstance(arguments, dict) else {}
    raw_query = args.get("query")
    text = raw_query.strip() if isinstance(raw_query, str) else ""
    if not text:
        return None
    return SearchQuery(
        text=text,
        limit=normalize_limit(args.get("limit")),
        include_details=normalize_include_details(args.get("includeDetails")),
    )
