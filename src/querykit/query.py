"""Query unit: cached asynchronous data with dedup, refetch and polling."""

from __future__ import annotations

import asyncio
import copy
import functools
import logging
from typing import Any, Generic, TypeVar

from querykit._dispatch import dispatch
from querykit._redact import args_for_log
from querykit._timer import RepeatingTimer, Scheduler
from querykit.config import ToolkitConfig
from querykit.exceptions import InvalidArgumentError
from querykit.fetcher import DedupFetcher, is_call_failure
from querykit.models.options import QueryOptions
from querykit.models.state import QueryState, Status
from querykit.state.sinks import NotificationSink, NullSink
from querykit.state.status import StatusState

_logger = logging.getLogger(__name__)

TData = TypeVar("TData")
TArgs = TypeVar("TArgs")


class Query(Generic[TData, TArgs]):
    """One unit of cached asynchronous data.

    Usage::

        query = Query(QueryOptions(fn=load_user))
        user = await query.fetch({"id": 7})
        query.refetch()                      # same arguments, in the background
        await query.start_polling(30.0, {"id": 7})

    Parameters
    ----------
    options : QueryOptions
        Producer, callbacks and optional initial data.
    sink : NotificationSink, optional
        Receives every data/status/error change.  Defaults to :class:`NullSink`.
    config : ToolkitConfig, optional
        Shared behaviour switches.
    scheduler : Scheduler, optional
        Drives the polling timer.  Defaults to the running event loop at the
        time :meth:`start_polling` is called.
    """

    def __init__(
        self,
        options: QueryOptions[TData, TArgs],
        *,
        sink: NotificationSink | None = None,
        config: ToolkitConfig | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        self._fn = options.fn
        self._on_success = options.on_success
        self._on_error = options.on_error
        self._sink: NotificationSink = sink if sink is not None else NullSink()
        self._config = config or ToolkitConfig()
        self._scheduler = scheduler
        self._status = StatusState(self._sink)
        self._fetcher: DedupFetcher[TData] = DedupFetcher(self._status)
        self._data: TData | None = None
        self._args: TArgs | None = None
        self._timer: RepeatingTimer | None = None
        self._pending: set[asyncio.Task[Any]] = set()

        if options.initial_data is not None:
            self._set_data(options.initial_data)

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------

    @property
    def data(self) -> TData | None:
        return self._data

    @property
    def error(self) -> Any:
        return self._status.error

    @property
    def status(self) -> Status:
        return self._status.status

    @property
    def last_args(self) -> TArgs | None:
        """Arguments of the last successful fetch."""
        return self._args

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
    def is_polling(self) -> bool:
        return self._timer is not None and self._timer.active

    @property
    def sink(self) -> NotificationSink:
        return self._sink

    @property
    def state(self) -> QueryState:
        return QueryState(data=self._data, status=self._status.status, error=self._status.error)

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    async def fetch(self, args: TArgs | None = None) -> TData:
        """Run the producer with *args*, joining a call already in flight.

        On success the arguments are remembered for :meth:`refetch` and the
        data slot is updated.  Producer failures are re-raised unchanged.
        """
        future = self._fetcher.run(functools.partial(self._fn, args))
        try:
            # Shielded: cancelling this caller must not abort a shared call.
            data = await asyncio.shield(future)
        except (Exception, asyncio.CancelledError) as error:
            if not is_call_failure(error, future):
                raise
            if self._on_error is not None:
                self._on_error(error, args)
            raise

        self._args = args
        self._set_data(data)
        if self._on_success is not None:
            self._on_success(data, args)
        return data

    def fetch_sync(self, args: TArgs | None = None) -> None:
        """Start :meth:`fetch` in the background and return immediately.

        Failures are visible through :attr:`error`/:attr:`is_error` and the
        ``on_error`` callback only.
        """
        _logger.debug("Background fetch args=%s", args_for_log(args, enabled=self._config.log_args))
        dispatch(self.fetch(args), self._pending, description="Background fetch")

    def refetch(self) -> None:
        """Fetch again in the background with the last successful arguments."""
        self.fetch_sync(self._args)

    def update(self, data: TData | None) -> None:
        """Write *data* directly, bypassing the producer."""
        self._set_data(data)
        self._status.set_status(Status.SUCCESS)
        self._status.set_error(None)

    def reset(self) -> None:
        """Return to the initial idle state and stop polling."""
        self._args = None
        self._set_data(None)
        self._status.set_status(Status.IDLE)
        self._status.set_error(None)
        self.stop_polling()

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    async def start_polling(self, interval: float, args: TArgs | None = None, immediate: bool = False) -> None:
        """Fetch with *args* every *interval* seconds until stopped.

        With ``immediate=True`` one fetch is awaited before the timer is
        armed, so its failure propagates to the caller and no timer is armed.
        Re-arming replaces an existing timer.
        """
        # NaN fails this comparison as well.
        if not interval >= 0:
            raise InvalidArgumentError(f"Polling interval must be >= 0, got {interval!r}")

        if immediate:
            await self.fetch(args)

        self._cancel_timer()
        scheduler = self._scheduler if self._scheduler is not None else asyncio.get_running_loop()
        self._timer = RepeatingTimer(interval, functools.partial(self._poll_tick, args), scheduler)
        self._timer.start()
        _logger.debug(
            "Polling armed interval=%s args=%s", interval, args_for_log(args, enabled=self._config.log_args)
        )

    def stop_polling(self) -> None:
        if self._timer is not None:
            _logger.debug("Polling stopped interval=%s", self._timer.interval)
        self._cancel_timer()

    def _poll_tick(self, args: TArgs | None) -> None:
        level = logging.WARNING if self._config.log_poll_errors else logging.DEBUG
        dispatch(self.fetch(args), self._pending, description="Polling fetch", failure_level=level)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _set_data(self, data: Any) -> None:
        published = self._copy_for_sink(data)
        self._data = data
        self._sink.notify_data(published)

    def _copy_for_sink(self, data: Any) -> Any:
        if not self._config.copy_data:
            return data
        try:
            return copy.deepcopy(data)
        except Exception:
            # Locks, sockets and similar handles cannot be copied.
            _logger.warning(
                "Data of type %s cannot be copied; sink receives the shared reference",
                type(data).__name__,
                exc_info=True,
            )
            return data
