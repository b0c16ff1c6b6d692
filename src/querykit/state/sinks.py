"""Notification sinks: the seam between units and a reactive binding."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from querykit.models.state import QueryState, Status
from querykit.state.events import EventBus, ToolkitEvent

_logger = logging.getLogger(__name__)


@runtime_checkable
class NotificationSink(Protocol):
    """Receiver of one-way state notifications.

    Implementations must not raise; delivery is synchronous within the
    operation that changed the state.
    """

    def notify_data(self, value: Any) -> None: ...

    def notify_error(self, error: Any) -> None: ...

    def notify_status(self, status: Status) -> None: ...


class NullSink:
    """Sink that discards every notification."""

    def notify_data(self, value: Any) -> None:
        return None

    def notify_error(self, error: Any) -> None:
        return None

    def notify_status(self, status: Status) -> None:
        return None


class EventBusSink:
    """Forward notifications to an :class:`EventBus` as ``toolkit:*`` events."""

    def __init__(self, bus: EventBus | None = None) -> None:
        self.bus = bus if bus is not None else EventBus()

    def notify_data(self, value: Any) -> None:
        self.bus.emit(ToolkitEvent.DATA, value)

    def notify_error(self, error: Any) -> None:
        self.bus.emit(ToolkitEvent.ERROR, error)

    def notify_status(self, status: Status) -> None:
        self.bus.emit(ToolkitEvent.STATUS, status)


class StoreSink:
    """Observable store holding the latest :class:`QueryState` snapshot.

    Every notification replaces the snapshot and hands the new one to each
    subscriber.  Snapshots are immutable, so subscribers can keep them.
    """

    def __init__(self, initial: QueryState | None = None) -> None:
        self._snapshot = initial if initial is not None else QueryState()
        self._listeners: list[Callable[[QueryState], None]] = []

    @property
    def snapshot(self) -> QueryState:
        return self._snapshot

    def subscribe(self, listener: Callable[[QueryState], None]) -> Callable[[], None]:
        """Register *listener*; returns a callable that removes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def notify_data(self, value: Any) -> None:
        self._replace(data=value)

    def notify_error(self, error: Any) -> None:
        self._replace(error=error)

    def notify_status(self, status: Status) -> None:
        self._replace(status=status)

    def _replace(self, **changes: Any) -> None:
        self._snapshot = self._snapshot.model_copy(update=changes)
        for listener in list(self._listeners):
            try:
                listener(self._snapshot)
            except Exception:
                _logger.exception("Store listener failed")
