"""Resume Python awaiters when a native future makes progress.

The native side calls ``CONTINUATION_CALLBACK`` with a continuation handle and
a poll result, possibly from a thread it owns. The callback only enqueues the
poll result onto the event loop that owns the awaiting task; all state lives
behind the handle in ``CONTINUATIONS``.
"""

from __future__ import annotations

import asyncio
import ctypes
import logging
from typing import Any, Callable

from rustcall.handles import HandleMap
from rustcall.invoke import rust_call_with_error
from rustcall.lifters import NULL_ERROR_LIFTER, ErrorLifter

logger = logging.getLogger(__name__)

POLL_READY = 0
POLL_MAYBE_READY = 1

CONTINUATION_CALLBACK_TYPE = ctypes.CFUNCTYPE(None, ctypes.c_size_t, ctypes.c_int8)


class Continuation:
    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop
        self._queue: asyncio.Queue[int] = asyncio.Queue()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    def resume(self, poll_code: int) -> None:
        try:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, poll_code)
        except RuntimeError:
            logger.debug("dropping poll result %d: event loop is closed", poll_code)

    async def next_poll(self) -> int:
        return await self._queue.get()


CONTINUATIONS: HandleMap[Continuation] = HandleMap()


def continuation_callback(handle: int, poll_code: int) -> None:
    if poll_code == POLL_READY:
        continuation = CONTINUATIONS.remove(handle)
    else:
        continuation = CONTINUATIONS.get(handle)
    if continuation is None:
        logger.debug("poll result %d for unknown continuation %d", poll_code, handle)
        return
    continuation.resume(poll_code)


CONTINUATION_CALLBACK = CONTINUATION_CALLBACK_TYPE(continuation_callback)


async def rust_call_async(
    rust_future: Any,
    poll_fn: Callable[[Any, Any, int], Any],
    complete_fn: Callable[..., Any],
    free_fn: Callable[[Any], Any],
    lift_fn: Callable[[Any], Any],
    lifter: ErrorLifter | None = None,
) -> Any:
    continuation = Continuation(asyncio.get_running_loop())
    handle = CONTINUATIONS.insert(continuation)
    try:
        while True:
            poll_fn(rust_future, CONTINUATION_CALLBACK, handle)
            if await continuation.next_poll() == POLL_READY:
                break
        return lift_fn(
            rust_call_with_error(lifter or NULL_ERROR_LIFTER, complete_fn, rust_future)
        )
    finally:
        # Cancellation only stops the await; the native operation is not told.
        CONTINUATIONS.remove(handle)
        free_fn(rust_future)
