"""Fire-and-forget task dispatch with explicitly observed results."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

_logger = logging.getLogger(__name__)


def dispatch(
    coro: Coroutine[Any, Any, Any],
    pending: set[asyncio.Task[Any]],
    *,
    description: str,
    failure_level: int = logging.DEBUG,
) -> asyncio.Task[Any]:
    """Schedule *coro* on the running loop and deliberately ignore its result.

    The task is kept in *pending* until it finishes so it cannot be garbage
    collected mid-flight.  Its outcome is retrieved in a done-callback:
    failures are logged at *failure_level*, never re-raised, since callers of
    fire-and-forget operations observe them through unit state and the
    ``on_error`` callback.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        coro.close()
        raise
    task = loop.create_task(coro)
    pending.add(task)

    def _observe(done: asyncio.Task[Any]) -> None:
        pending.discard(done)
        if done.cancelled():
            _logger.debug("%s cancelled", description)
            return
        error = done.exception()
        if error is not None:
            _logger.log(failure_level, "%s failed: %r", description, error, exc_info=error)

    task.add_done_callback(_observe)
    return task
