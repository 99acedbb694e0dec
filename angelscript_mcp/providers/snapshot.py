"""Symbol provider backed by a cached type-database snapshot (JSON file).

Snapshot format: a JSON list of symbol records, or an object with a
``symbols`` list. Each record carries ``label`` and optionally ``type``,
``data`` (the token handed back on detail lookup) and ``details``.

Records without ``data``, or whose ``data`` repeats an earlier record's,
get ``{"index": n}`` as their token so overloads never share details.
"""

from __future__ import annotations

import asyncio
import json
import re
from pathlib import Path
from typing import Any

from angelscript_mcp.core.logger import logger
from angelscript_mcp.providers.interface import ProviderError, SymbolProvider

_SEGMENT_SPLIT = re.compile(r"::|\.|\s+")


def _token_key(token: Any) -> str:
    return json.dumps(token, sort_keys=True, default=str)


def _rank(label: str, terms: list[str]) -> int | None:
    """0 exact, 1 prefix (of the label or a ``::``/``.`` segment), 2 contains.

    Every whitespace-separated term must occur in the label; None otherwise.
    """
    lowered = label.lower()
    if not all(term in lowered for term in terms):
        return None
    joined = " ".join(terms)
    if lowered == joined:
        return 0
    segments = [s for s in _SEGMENT_SPLIT.split(lowered) if s]
    if any(seg.startswith(terms[0]) for seg in segments) or lowered.startswith(terms[0]):
        return 1
    return 2


class SnapshotProvider(SymbolProvider):
    def __init__(self, path: Path):
        self._path = path
        self._records: list[dict[str, Any]] = []
        self._details: dict[str, str | None] = {}
        self._loaded = False

    @classmethod
    def from_records(cls, records: list[dict[str, Any]]) -> SnapshotProvider:
        provider = cls(Path("<memory>"))
        provider._index(records)
        return provider

    def _index(self, records: list[dict[str, Any]]) -> None:
        self._records = []
        self._details = {}
        for record in records:
            if not isinstance(record, dict) or not record.get("label"):
                continue
            token = record.get("data")
            if token is None or _token_key(token) in self._details:
                token = {"index": len(self._records)}
            key = _token_key(token)
            if key in self._details:
                raise ProviderError(f"Duplicate symbol token in snapshot: {key[:80]}")
            self._records.append(
                {"label": str(record["label"]), "type": record.get("type"), "data": token}
            )
            self._details[key] = record.get("details")
        self._loaded = True

    def _read(self) -> list[dict[str, Any]]:
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ProviderError(f"Could not read type snapshot {self._path}: {e}") from e
        if isinstance(raw, dict):
            raw = raw.get("symbols", [])
        if not isinstance(raw, list):
            raise ProviderError(f"Type snapshot {self._path} must hold a list of symbols")
        return raw

    async def start(self) -> None:
        records = await asyncio.to_thread(self._read)
        self._index(records)
        logger.info(f"Snapshot: loaded {len(self._records)} symbols from {self._path}")

    def has_data(self) -> bool:
        # Unknown until the file is read; callers then wait on the readiness gate.
        return not self._loaded or bool(self._records)

    async def search(self, text: str) -> list[Any]:
        terms = [t for t in text.lower().split() if t]
        if not terms:
            return []
        ranked: list[tuple[int, int, dict[str, Any]]] = []
        for position, record in enumerate(self._records):
            rank = _rank(record["label"], terms)
            if rank is not None:
                ranked.append((rank, position, record))
        ranked.sort(key=lambda r: (r[0], r[1]))
        return [dict(record) for _, _, record in ranked]

    async def fetch_detail(self, token: Any) -> str | None:
        key = _token_key(token)
        if key not in self._details:
            raise ProviderError(f"Unknown symbol token: {key[:80]}")
        return self._details[key]
