"""Shared concurrency primitives for the export and generation pipelines.

Two patterns are exposed:

1. **throttled_gather** -- ``asyncio.gather`` with an optional semaphore
   around each awaitable.  Used by the export resolver to fan out
   sub-collection fetches.  Without a semaphore the fan-out is unbounded.

2. **gather_all** -- the task-group join used by both pipelines: wait for
   *every* awaitable to finish, then raise the first failure.  Siblings of a
   failed task are observed to completion, never cancelled, so work that was
   already dispatched still gets to emit its output.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

_T = TypeVar("_T")


def make_semaphore(limit: int) -> asyncio.Semaphore | None:
    """Return a semaphore for ``limit`` > 0, or ``None`` for unbounded."""
    if limit > 0:
        return asyncio.Semaphore(limit)
    return None


async def gather_all(aws: list[Awaitable[_T]]) -> list[_T]:
    """Await every awaitable, then raise the first exception (in input order).

    Results come back in input order when all succeed.
    """
    results = await asyncio.gather(*aws, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return list(results)


async def throttled_gather(
    coros: list[Awaitable[_T]],
    semaphore: asyncio.Semaphore | None = None,
) -> list[_T]:
    """Run awaitables concurrently, optionally bounded by ``semaphore``.

    Parameters
    ----------
    coros:
        Awaitable objects to execute concurrently.
    semaphore:
        Optional semaphore for concurrency control.  ``None`` runs every
        awaitable at once.

    Returns
    -------
    list[_T]
        Results in the same order as the input coroutines.

    Raises
    ------
    Exception
        The first failure, after all awaitables have finished.
    """
    if semaphore is None:
        return await gather_all(coros)

    async def _wrapped(coro: Awaitable[_T]) -> _T:
        async with semaphore:
            return await coro

    return await gather_all([_wrapped(c) for c in coros])
