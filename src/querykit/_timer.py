"""Cancelable repeating timer driven by an event-loop-like scheduler."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

_logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """The subset of :class:`asyncio.AbstractEventLoop` the timer relies on."""

    def call_later(self, delay: float, callback: Callable[[], object], /) -> TimerHandle: ...


class RepeatingTimer:
    """Invoke *callback* every *interval* seconds until cancelled.

    The next tick is armed before *callback* runs, so a failing callback
    never stops the cadence.  Cancelling prevents future ticks only.
    """

    def __init__(self, interval: float, callback: Callable[[], None], scheduler: Scheduler) -> None:
        self._interval = interval
        self._callback = callback
        self._scheduler = scheduler
        self._handle: TimerHandle | None = None
        self._cancelled = False

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def active(self) -> bool:
        return self._handle is not None and not self._cancelled

    def start(self) -> None:
        if self._cancelled:
            raise RuntimeError("Cannot restart a cancelled timer")
        self._arm()

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _arm(self) -> None:
        self._handle = self._scheduler.call_later(self._interval, self._tick)

    def _tick(self) -> None:
        if self._cancelled:
            return
        self._arm()
        try:
            self._callback()
        except Exception:
            _logger.exception("Timer callback failed interval=%s", self._interval)
