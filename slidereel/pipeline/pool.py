"""
Bounded fan-out/join for SlideReel.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import Generic, TypeVar

T = TypeVar("T")
R = TypeVar("R")


class _Skipped:
    """Marker for work that never started because a sibling already failed."""


_SKIPPED = _Skipped()


class BoundedPool(Generic[T, R]):
    """Run an async function over items with at most ``limit`` calls in flight.

    Once any call fails, calls that have not started yet are skipped while
    calls already in flight run to completion. The first observed error is
    re-raised after every call has settled.
    """

    def __init__(self, limit: int) -> None:
        if limit < 1:
            raise ValueError(f"Concurrency limit must be >= 1, got {limit}")
        self.limit = limit

    async def map(
        self, func: Callable[[T], Awaitable[R]], items: Sequence[T]
    ) -> list[R]:
        semaphore = asyncio.Semaphore(self.limit)
        errors: list[BaseException] = []

        async def _run(item: T) -> R | _Skipped:
            async with semaphore:
                if errors:
                    return _SKIPPED
                try:
                    return await func(item)
                except Exception as e:
                    errors.append(e)
                    raise

        settled = await asyncio.gather(
            *(_run(item) for item in items), return_exceptions=True
        )
        if errors:
            raise errors[0]
        for result in settled:
            # Cancellation or a BaseException escaped the worker
            if isinstance(result, BaseException):
                raise result
        return [r for r in settled if not isinstance(r, _Skipped)]  # type: ignore[misc]
