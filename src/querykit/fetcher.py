"""Deduplicating executor shared by queries and mutations."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

from querykit.models.state import Status
from querykit.state.status import StatusState

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class DedupFetcher(Generic[T]):
    """Run a producer with at most one invocation in flight.

    While a call is outstanding, :meth:`run` hands every caller the same
    future instead of invoking the producer again, so all of them observe the
    same result or the same exception.  The slot check and the ``LOADING``
    transition happen synchronously inside :meth:`run`, before any suspension
    point, which is what keeps two logically concurrent calls from both
    starting the producer.
    """

    def __init__(self, status: StatusState) -> None:
        self._status = status
        self._in_flight: asyncio.Future[T] | None = None

    @property
    def in_flight(self) -> bool:
        return self._in_flight is not None

    def run(self, producer: Callable[[], Awaitable[T]]) -> asyncio.Future[T]:
        """Start *producer* unless a call is already in flight.

        Must be called from a coroutine or callback running on the event loop.
        """
        if self._in_flight is not None:
            _logger.debug("Joining in-flight call")
            return self._in_flight

        # The task cannot start before this method returns, so occupying the
        # slot first lets sink listeners re-enter run() and join the call.
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._execute(producer))
        self._in_flight = task
        self._status.set_error(None)
        self._status.set_status(Status.LOADING)
        return task

    async def _execute(self, producer: Callable[[], Awaitable[T]]) -> T:
        try:
            result = await producer()
        except (Exception, asyncio.CancelledError) as error:
            # A producer cancelled from inside (e.g. awaiting a cancelled
            # sub-task) still ends the call in ERROR, never stuck in LOADING.
            _logger.debug("Producer failed: %r", error)
            self._status.set_status(Status.ERROR)
            self._status.set_error(error)
            raise
        else:
            self._status.set_status(Status.SUCCESS)
            return result
        finally:
            # Runs before any awaiting caller resumes.
            self._in_flight = None


def is_call_failure(error: BaseException, future: asyncio.Future[Any]) -> bool:
    """Tell a failed shared call apart from the cancellation of one caller.

    A caller awaiting *future* through :func:`asyncio.shield` sees
    ``CancelledError`` both when it was cancelled itself (the shared call keeps
    running) and when the producer was cancelled (the shared call is over).
    """
    if isinstance(error, asyncio.CancelledError):
        return future.cancelled()
    return True
