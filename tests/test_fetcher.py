from __future__ import annotations

import asyncio
from typing import Any

import pytest

from querykit.fetcher import DedupFetcher
from querykit.models.state import Status
from querykit.state.status import StatusState


class _RecordingSink:
    def __init__(self) -> None:
        self.statuses: list[Status] = []
        self.errors: list[Any] = []

    def notify_data(self, value: Any) -> None:  # pragma: no cover
        pass

    def notify_error(self, error: Any) -> None:
        self.errors.append(error)

    def notify_status(self, status: Status) -> None:
        self.statuses.append(status)


@pytest.mark.asyncio
async def test_successful_run_transitions_loading_then_success() -> None:
    sink = _RecordingSink()
    status = StatusState(sink)
    fetcher: DedupFetcher[int] = DedupFetcher(status)

    async def producer() -> int:
        return 42

    future = fetcher.run(producer)
    assert status.status == Status.LOADING

    assert await future == 42
    assert status.status == Status.SUCCESS
    assert status.error is None
    assert sink.statuses == [Status.LOADING, Status.SUCCESS]
    assert sink.errors == [None]


@pytest.mark.asyncio
async def test_failed_run_records_error_and_reraises_original() -> None:
    sink = _RecordingSink()
    status = StatusState(sink)
    fetcher: DedupFetcher[int] = DedupFetcher(status)
    boom = RuntimeError("request failed")

    async def producer() -> int:
        raise boom

    with pytest.raises(RuntimeError) as excinfo:
        await fetcher.run(producer)

    assert excinfo.value is boom
    assert status.status == Status.ERROR
    assert status.error is boom
    assert status.is_error
    assert sink.statuses == [Status.LOADING, Status.ERROR]
    assert sink.errors == [None, boom]


@pytest.mark.asyncio
async def test_concurrent_runs_share_one_producer_call() -> None:
    status = StatusState(_RecordingSink())
    fetcher: DedupFetcher[int] = DedupFetcher(status)
    gate = asyncio.Event()
    calls = 0

    async def producer() -> int:
        nonlocal calls
        calls += 1
        await gate.wait()
        return 42

    first = fetcher.run(producer)
    second = fetcher.run(producer)
    assert first is second
    assert fetcher.in_flight

    gate.set()
    assert await asyncio.gather(first, second) == [42, 42]
    assert calls == 1
    assert not fetcher.in_flight


@pytest.mark.asyncio
async def test_concurrent_runs_share_the_same_exception() -> None:
    fetcher: DedupFetcher[int] = DedupFetcher(StatusState(_RecordingSink()))
    gate = asyncio.Event()
    boom = ValueError("nope")
    calls = 0

    async def producer() -> int:
        nonlocal calls
        calls += 1
        await gate.wait()
        raise boom

    first = fetcher.run(producer)
    second = fetcher.run(producer)
    gate.set()

    results = await asyncio.gather(first, second, return_exceptions=True)
    assert results[0] is boom
    assert results[1] is boom
    assert calls == 1


@pytest.mark.asyncio
async def test_new_call_starts_after_previous_settles() -> None:
    fetcher: DedupFetcher[int] = DedupFetcher(StatusState(_RecordingSink()))

    async def first_producer() -> int:
        return 1

    async def second_producer() -> int:
        return 2

    first = fetcher.run(first_producer)
    assert await first == 1

    second = fetcher.run(second_producer)
    assert second is not first
    assert await second == 2


@pytest.mark.asyncio
async def test_slot_cleared_after_failure() -> None:
    fetcher: DedupFetcher[int] = DedupFetcher(StatusState(_RecordingSink()))

    async def failing() -> int:
        raise RuntimeError("x")

    with pytest.raises(RuntimeError):
        await fetcher.run(failing)

    assert not fetcher.in_flight


@pytest.mark.asyncio
async def test_synchronous_producer_exception_counts_as_failure() -> None:
    status = StatusState(_RecordingSink())
    fetcher: DedupFetcher[int] = DedupFetcher(status)

    def producer() -> Any:
        raise KeyError("sync")

    with pytest.raises(KeyError):
        await fetcher.run(producer)

    assert status.status == Status.ERROR
    assert not fetcher.in_flight


@pytest.mark.asyncio
async def test_next_run_clears_previous_error_before_loading() -> None:
    sink = _RecordingSink()
    status = StatusState(sink)
    fetcher: DedupFetcher[int] = DedupFetcher(status)
    boom = RuntimeError("first")

    async def failing() -> int:
        raise boom

    async def ok() -> int:
        return 5

    with pytest.raises(RuntimeError):
        await fetcher.run(failing)

    future = fetcher.run(ok)
    assert status.error is None
    assert status.is_loading
    assert not status.is_error
    await future

    assert sink.statuses == [Status.LOADING, Status.ERROR, Status.LOADING, Status.SUCCESS]
    assert sink.errors == [None, boom, None]


@pytest.mark.asyncio
async def test_producer_cancelled_from_inside_ends_in_error() -> None:
    sink = _RecordingSink()
    status = StatusState(sink)
    fetcher: DedupFetcher[int] = DedupFetcher(status)

    async def producer() -> int:
        inner: asyncio.Future[int] = asyncio.get_running_loop().create_future()
        inner.cancel()
        return await inner

    with pytest.raises(asyncio.CancelledError):
        await fetcher.run(producer)

    assert status.status == Status.ERROR
    assert isinstance(status.error, asyncio.CancelledError)
    assert status.is_error
    assert sink.statuses == [Status.LOADING, Status.ERROR]
    assert not fetcher.in_flight
