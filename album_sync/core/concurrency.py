"""
Bounded-concurrency mapping over async operations.

map_bounded() runs an async operation over a sequence in consecutive
chunks: every call in a chunk runs concurrently, and the next chunk only
starts once the whole current chunk has settled. This caps the number of
requests in flight against the album service while still parallelizing.

Usage:
    from album_sync.core.concurrency import map_bounded

    flags = await map_bounded(albums, check_one, limit=5)
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_CONCURRENCY = 5


async def map_bounded(
    items: Sequence[T],
    operation: Callable[[T], Awaitable[R]],
    limit: int = DEFAULT_CONCURRENCY
) -> list[R]:
    """
    Apply an async operation to every item with at most `limit` in flight.

    Args:
        items: Items to process. Consumed in order.
        operation: Coroutine function called once per item.
        limit: Chunk size, i.e. the maximum number of concurrent calls.

    Returns:
        Results in exactly the order of `items`, whatever order the
        calls finished in.

    Raises:
        ValueError: If limit is less than 1.
        Exception: Whatever `operation` raised. There is no per-item
                   recovery here; wrap `operation` to return a fallback
                   value if one failure must not abort the whole call.
    """
    if limit < 1:
        raise ValueError(f"limit must be a positive integer, got {limit}")

    results: list[R] = []

    for start in range(0, len(items), limit):
        chunk = items[start:start + limit]
        results.extend(await asyncio.gather(*(operation(item) for item in chunk)))

    return results
