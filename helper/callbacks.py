# helper/callbacks.py
from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from collections.abc import Callable
from typing import Any
from typing import TypeVar

T = TypeVar('T')


def with_callback(awaitable: Awaitable[T], callback: Callable[[T | BaseException], Any] | None = None) -> asyncio.Future[T]:
    """
    Adapter for callback-style consumers.

    Schedules the awaitable on the running loop and hands its outcome to
    `callback`: the result on success, the exception instance on failure
    (e.g. UnsupportedOperation from shell() on Windows). The returned future is
    still awaitable and still raises, so both styles share one code path.
    """
    future = asyncio.ensure_future(awaitable)

    if callback is not None:
        def _done(fut: asyncio.Future):
            if fut.cancelled():
                return
            error = fut.exception()
            callback(error if error is not None else fut.result())

        future.add_done_callback(_done)

    return future


def run_blocking(awaitable: Awaitable[T]) -> T:
    """Runs a collector coroutine to completion from synchronous code (CLI, scripts)."""
    async def _wrap():
        return await awaitable

    return asyncio.run(_wrap())
