"""Construction options for queries and mutations."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

TData = TypeVar("TData")
TArgs = TypeVar("TArgs")

Producer = Callable[[TArgs], Awaitable[TData]]
SuccessCallback = Callable[[TData, TArgs], None]
ErrorCallback = Callable[[Exception, TArgs], None]


@dataclass(frozen=True, slots=True)
class MutationOptions(Generic[TData, TArgs]):
    """Options for a one-shot operation.

    ``fn`` receives the arguments passed to ``mutate``/``mutate_async`` and
    returns an awaitable.  Both callbacks are optional and are invoked
    synchronously once the call settles, before the caller resumes.
    """

    fn: Producer[TArgs, TData]
    on_success: SuccessCallback[TData, TArgs] | None = None
    on_error: ErrorCallback[TArgs] | None = None


@dataclass(frozen=True, slots=True)
class QueryOptions(Generic[TData, TArgs]):
    """Options for a cached query.

    ``initial_data`` seeds the data slot at construction time without
    touching the status, which stays ``IDLE`` until the first fetch.
    """

    fn: Producer[TArgs, TData]
    on_success: SuccessCallback[TData, TArgs] | None = None
    on_error: ErrorCallback[TArgs] | None = None
    initial_data: Any = None
