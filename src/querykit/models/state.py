"""Lifecycle status and immutable state snapshots."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict


class Status(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class MutationState(BaseModel):
    """Point-in-time view of a unit's status and last error.

    ``is_error`` mirrors :class:`querykit.state.status.StatusState`: it is
    true while the status is ``ERROR`` *or* an error value is recorded.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    status: Status = Status.IDLE
    error: Any = None

    @property
    def is_idle(self) -> bool:
        return self.status == Status.IDLE

    @property
    def is_loading(self) -> bool:
        return self.status == Status.LOADING

    @property
    def is_success(self) -> bool:
        return self.status == Status.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.status == Status.ERROR or self.error is not None


class QueryState(MutationState):
    """Snapshot of a query: data slot plus status and last error."""

    data: Any = None
