"""Angelscript API search contract.

Defines the canonical types for:
  - The validated tool request (SearchQuery)
  - Provider matches and their enriched form (Match, EnrichedMatch)
  - The serialized tool payload (SearchPayload)
  - Tool advertisement (ToolDescriptor)

Provider tokens travel under the key ``data`` on the wire, which is the field
name the language server uses. The token is opaque: it is handed back to the
provider verbatim and never inspected here.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

TOOL_NAME = "angelscript_searchApi"

MIN_LIMIT = 1
MAX_LIMIT = 1000
DEFAULT_LIMIT = 500


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------


class SearchQuery(BaseModel):
    """One validated search request. Built per invocation, never reused."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(min_length=1, description="Trimmed, non-empty query text")
    limit: int = Field(default=DEFAULT_LIMIT, ge=MIN_LIMIT, le=MAX_LIMIT)
    include_details: bool = Field(default=True)


# ---------------------------------------------------------------------------
# Matches
# ---------------------------------------------------------------------------


class Match(BaseModel):
    """One ranked hit from the symbol provider."""

    label: str = Field(description="Display label, e.g. 'AActor::GetActorLocation'")
    type: str | None = Field(default=None, description="Provider symbol kind, if any")
    token: Any = Field(
        default=None,
        validation_alias=AliasChoices("data", "token"),
        description="Opaque provider handle passed back to fetch_detail",
    )

    @classmethod
    def from_provider(cls, raw: Any) -> Match:
        """Lift one raw provider record into a Match without touching its token."""
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, Match):
            return cls(label=raw.label, type=raw.type, token=raw.token)
        if not isinstance(raw, dict):
            return cls(label=str(raw))
        label = raw.get("label")
        kind = raw.get("type")
        return cls(
            label="" if label is None else str(label),
            type=None if kind is None else str(kind),
            token=raw.get("data", raw.get("token")),
        )


class EnrichedMatch(Match):
    """A match plus its detail document, present only when the fetch succeeded."""

    details: str | None = Field(default=None)

    def to_wire(self) -> dict[str, Any]:
        item: dict[str, Any] = {"label": self.label}
        if self.type is not None:
            item["type"] = self.type
        if self.token is not None:
            item["data"] = self.token
        if self.details is not None:
            item["details"] = self.details
        return item


# ---------------------------------------------------------------------------
# Payload
# ---------------------------------------------------------------------------


class SearchPayload(BaseModel):
    """Serialized result of one successful search."""

    query: str
    total: int = Field(ge=0)
    returned: int = Field(ge=0)
    truncated: bool
    items: list[EnrichedMatch] = Field(default_factory=list)

    def to_wire(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "total": self.total,
            "returned": self.returned,
            "truncated": self.truncated,
            "items": [item.to_wire() for item in self.items],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_wire(), indent=2, ensure_ascii=False, default=str)


# ---------------------------------------------------------------------------
# Tool advertisement
# ---------------------------------------------------------------------------


class ToolDescriptor(BaseModel):
    """Static tool advertisement; created once at startup."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    input_schema: dict[str, Any]


SEARCH_TOOL = ToolDescriptor(
    name=TOOL_NAME,
    description=(
        "Search the Angelscript API database for symbols and documentation. "
        "Provide a query string and optionally limit the results or include documentation details."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "query": {
                "type": "string",
                "description": "Search query text for Angelscript API symbols.",
            },
            "limit": {
                "type": "number",
                "description": "Maximum number of results to return (1-1000).",
                "default": DEFAULT_LIMIT,
                "minimum": MIN_LIMIT,
                "maximum": MAX_LIMIT,
            },
            "includeDetails": {
                "type": "boolean",
                "description": "Include documentation details for top matches.",
                "default": True,
            },
        },
        "required": ["query"],
    },
)
