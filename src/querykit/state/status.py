"""Per-unit status and last-error holder."""

from __future__ import annotations

from typing import Any

from querykit.models.state import MutationState, Status
from querykit.state.sinks import NotificationSink


class StatusState:
    """Current lifecycle status and last error of one unit.

    ``status`` and ``error`` are independent fields.  The fetcher clears the
    error when a call starts and records it after the status has moved to
    ``ERROR``, and ``update()`` can move the status to ``SUCCESS`` without a
    fetch.  ``is_error`` therefore looks at both: it becomes true as soon as an
    error is recorded and stays true while one is recorded, whatever the
    status.
    """

    def __init__(self, sink: NotificationSink) -> None:
        self._sink = sink
        self._status = Status.IDLE
        self._error: Any = None

    @property
    def status(self) -> Status:
        return self._status

    @property
    def error(self) -> Any:
        return self._error

    def set_status(self, status: Status) -> None:
        self._status = status
        self._sink.notify_status(status)

    def set_error(self, error: Any) -> None:
        self._error = error
        self._sink.notify_error(error)

    @property
    def is_idle(self) -> bool:
        return self._status == Status.IDLE

    @property
    def is_loading(self) -> bool:
        return self._status == Status.LOADING

    @property
    def is_success(self) -> bool:
        return self._status == Status.SUCCESS

    @property
    def is_error(self) -> bool:
        return self._status == Status.ERROR or self._error is not None

    def snapshot(self) -> MutationState:
        return MutationState(status=self._status, error=self._error)
