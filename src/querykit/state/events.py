"""Plain publish/subscribe bus used by the default notification sink."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import StrEnum
from typing import Any

_logger = logging.getLogger(__name__)

Handler = Callable[[Any], None]


class ToolkitEvent(StrEnum):
    DATA = "toolkit:data"
    ERROR = "toolkit:error"
    STATUS = "toolkit:status"


class EventBus:
    """Synchronous in-process event bus.

    Handlers run in registration order on the emitting call stack.  A failing
    handler is logged and does not prevent the remaining handlers from running.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = {}

    def on(self, event: str, handler: Handler) -> Callable[[], None]:
        """Register *handler* for *event*; returns a callable that unregisters it."""
        self._handlers.setdefault(event, []).append(handler)
        return lambda: self.off(event, handler)

    def off(self, event: str, handler: Handler) -> None:
        handlers = self._handlers.get(event)
        if not handlers:
            return
        self._handlers[event] = [h for h in handlers if h is not handler]

    def emit(self, event: str, payload: Any) -> None:
        # Copy so handlers may unsubscribe while being notified.
        for handler in list(self._handlers.get(event, ())):
            try:
                handler(payload)
            except Exception:
                _logger.exception("Event handler failed event=%s", event)

    def off_all(self) -> None:
        self._handlers = {}

    def handler_count(self, event: str) -> int:
        return len(self._handlers.get(event, ()))
