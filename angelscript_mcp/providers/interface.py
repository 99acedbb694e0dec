"""Standard interface for symbol providers used by the search pipeline."""

from abc import ABC, abstractmethod
from typing import Any


class ProviderError(RuntimeError):
    """A symbol provider could not serve a request."""


class SymbolProvider(ABC):
    """Base for all symbol providers (language server, cached snapshot)."""

    @abstractmethod
    def has_data(self) -> bool:
        """Return True when the provider has any type data loaded."""

    @abstractmethod
    async def search(self, text: str) -> list[Any]:
        """Return ranked raw matches, best first. May be empty."""

    @abstractmethod
    async def fetch_detail(self, token: Any) -> str | None:
        """Return the documentation for one match token."""

    async def start(self) -> None:
        """Connect or load; called once at startup before the gate resolves."""

    async def close(self) -> None:
        """Release connections and processes."""
