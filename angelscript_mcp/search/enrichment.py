"""Concurrent detail enrichment for ranked matches.

A fixed pool of workers pulls indices from one shared iterator and writes into
a pre-sized slot list, so at most ``concurrency`` fetches are in flight and a
freed worker picks up the next index as soon as its fetch settles. Slot ``i``
always belongs to ``items[i]``, whatever order the fetches finish in.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from angelscript_mcp.contracts.api_search import Match
from angelscript_mcp.core.logger import logger

DetailFetcher = Callable[[Any], Awaitable[str | None]]


async def fetch_details(
    items: Sequence[Match],
    fetch: DetailFetcher,
    concurrency: int = 10,
    timeout: float | None = None,
) -> list[str | None]:
    """Fetch one detail document per item; failed or empty slots stay None.

    Every index is attempted exactly once. A failure is logged with the item's
    label and never retried or propagated. Returns only after all fetches have
    settled. With ``timeout`` unset a stalled fetch holds its worker forever.
    """
    total = len(items)
    details: list[str | None] = [None] * total
    if total == 0:
        return details

    indices = iter(range(total))

    async def _fetch_one(index: int) -> None:
        item = items[index]
        try:
            pending = fetch(item.token)
            if timeout is not None:
                result = await asyncio.wait_for(pending, timeout)
            else:
                result = await pending
        except Exception as e:
            logger.detail_failed(item.label, e)
            return
        details[index] = None if result is None else str(result)

    async def _worker() -> None:
        for index in indices:
            await _fetch_one(index)

    workers = min(max(concurrency, 1), total)
    await asyncio.gather(*(_worker() for _ in range(workers)))
    return details
