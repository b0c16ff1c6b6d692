"""Mutation unit: one-shot side-effecting operations with status tracking."""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Any, Generic, TypeVar

from querykit._dispatch import dispatch
from querykit._redact import args_for_log
from querykit.config import ToolkitConfig
from querykit.fetcher import DedupFetcher, is_call_failure
from querykit.models.options import MutationOptions
from querykit.models.state import MutationState, Status
from querykit.state.sinks import NotificationSink, NullSink
from querykit.state.status import StatusState

_logger = logging.getLogger(__name__)

TData = TypeVar("TData")
TArgs = TypeVar("TArgs")


class Mutation(Generic[TData, TArgs]):
    """Imperative trigger for writes and other one-shot operations.

    Unlike :class:`querykit.query.Query` a mutation keeps no data slot and
    remembers no arguments; it only tracks the status of its last call.
    """

    def __init__(
        self,
        options: MutationOptions[TData, TArgs],
        *,
        sink: NotificationSink | None = None,
        config: ToolkitConfig | None = None,
    ) -> None:
        self._fn = options.fn
        self._on_success = options.on_success
        self._on_error = options.on_error
        self._sink: NotificationSink = sink if sink is not None else NullSink()
        self._config = config or ToolkitConfig()
        self._status = StatusState(self._sink)
        self._fetcher: DedupFetcher[TData] = DedupFetcher(self._status)
        self._pending: set[asyncio.Task[Any]] = set()

    @property
    def error(self) -> Any:
        return self._status.error

    @property
    def status(self) -> Status:
        return self._status.status

    @property
    def is_idle(self) -> bool:
        return self._status.is_idle

    @property
    def is_loading(self) -> bool:
        return self._status.is_loading

    @property
    def is_success(self) -> bool:
        return self._status.is_success

    @property
    def is_error(self) -> bool:
        return self._status.is_error

    @property
    def sink(self) -> NotificationSink:
        return self._sink

    @property
    def state(self) -> MutationState:
        return self._status.snapshot()

    async def mutate_async(self, args: TArgs | None = None) -> TData:
        """Run the operation and return its result, re-raising its failure."""
        future = self._fetcher.run(functools.partial(self._fn, args))
        try:
            data = await asyncio.shield(future)
        except (Exception, asyncio.CancelledError) as error:
            if not is_call_failure(error, future):
                raise
            if self._on_error is not None:
                self._on_error(error, args)
            raise

        if self._on_success is not None:
            self._on_success(data, args)
        return data

    def mutate(self, args: TArgs | None = None) -> None:
        """Start :meth:`mutate_async` in the background and return immediately."""
        _logger.debug("Background mutation args=%s", args_for_log(args, enabled=self._config.log_args))
        dispatch(self.mutate_async(args), self._pending, description="Background mutation")

    def reset(self) -> None:
        self._status.set_status(Status.IDLE)
        self._status.set_error(None)
