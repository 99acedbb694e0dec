"""Readiness gate and the per-process search context."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from angelscript_mcp.providers.interface import SymbolProvider

DEFAULT_DETAIL_CONCURRENCY = 10


class ReadinessGate:
    """One-shot signal that the symbol provider connection is usable.

    Resolved (or failed) once during startup and held for the process lifetime.
    Waiting suspends only the caller; other invocations keep running.
    """

    def __init__(self) -> None:
        self._ready = asyncio.Event()
        self._error: BaseException | None = None

    @property
    def is_set(self) -> bool:
        return self._ready.is_set()

    @property
    def error(self) -> BaseException | None:
        return self._error

    def resolve(self) -> None:
        if self._ready.is_set():
            return
        self._ready.set()

    def fail(self, error: BaseException) -> None:
        if self._ready.is_set():
            return
        self._error = error
        self._ready.set()

    async def wait(self) -> None:
        await self._ready.wait()
        if self._error is not None:
            raise self._error


@dataclass
class SearchContext:
    """Everything one search invocation needs from the process.

    Owned by the server and passed explicitly, so tests can build independent
    instances with their own provider and gate.
    """

    provider: SymbolProvider
    gate: ReadinessGate = field(default_factory=ReadinessGate)
    detail_concurrency: int = DEFAULT_DETAIL_CONCURRENCY
    detail_timeout: float | None = None
