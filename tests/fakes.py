from __future__ import annotations

import asyncio
from typing import Any

from angelscript_mcp.providers.interface import SymbolProvider


def make_matches(count: int, prefix: str = "Symbol") -> list[dict[str, Any]]:
    return [
        {"label": f"{prefix}{i}", "type": "method", "data": f"tok-{i}"}
        for i in range(count)
    ]


class FakeProvider(SymbolProvider):
    """In-memory provider that records calls and in-flight detail fetches."""

    def __init__(
        self,
        matches: list[Any] | None = None,
        *,
        loaded: bool = True,
        fail_tokens: set[str] | None = None,
        yields: dict[str, int] | None = None,
        search_error: Exception | None = None,
    ):
        self.matches = list(matches or [])
        self.loaded = loaded
        self.fail_tokens = fail_tokens or set()
        self.yields = yields or {}
        self.search_error = search_error
        self.search_calls: list[str] = []
        self.detail_calls: list[Any] = []
        self.completed: list[Any] = []
        self.in_flight = 0
        self.peak_in_flight = 0
        self.closed = False

    def has_data(self) -> bool:
        return self.loaded

    async def search(self, text: str) -> list[Any]:
        self.search_calls.append(text)
        if self.search_error is not None:
            raise self.search_error
        return list(self.matches)

    async def fetch_detail(self, token: Any) -> str | None:
        self.detail_calls.append(token)
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            for _ in range(self.yields.get(str(token), 1)):
                await asyncio.sleep(0)
            if str(token) in self.fail_tokens:
                raise RuntimeError(f"detail lookup failed for {token}")
            self.completed.append(token)
            return f"doc:{token}"
        finally:
            self.in_flight -= 1

    @property
    def provider_calls(self) -> int:
        return len(self.search_calls) + len(self.detail_calls)

    async def close(self) -> None:
        self.closed = True
