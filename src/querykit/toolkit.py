"""Key-indexed registry of queries."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from querykit._timer import Scheduler
from querykit.config import ToolkitConfig
from querykit.models.options import MutationOptions, QueryOptions
from querykit.mutation import Mutation
from querykit.query import Query
from querykit.state.sinks import EventBusSink, NotificationSink

_logger = logging.getLogger(__name__)

SinkFactory = Callable[[], NotificationSink]


class Toolkit:
    """Create queries memoized by key, and unregistered mutations.

    Usage::

        toolkit = create_toolkit()
        users = toolkit.create_query("users", QueryOptions(fn=list_users))
        await users.fetch()
        save = toolkit.create_mutation(
            MutationOptions(fn=save_user, on_success=lambda *_: toolkit.invalidate("users"))
        )

    Every unit gets a fresh sink from *sink_factory*; by default an
    :class:`~querykit.state.sinks.EventBusSink` with its own bus.
    """

    def __init__(
        self,
        config: ToolkitConfig | None = None,
        *,
        sink_factory: SinkFactory = EventBusSink,
        scheduler: Scheduler | None = None,
    ) -> None:
        self._config = config or ToolkitConfig()
        self._sink_factory = sink_factory
        self._scheduler = scheduler
        self._queries: dict[str, Query[Any, Any]] = {}

    @property
    def config(self) -> ToolkitConfig:
        return self._config

    def __contains__(self, key: object) -> bool:
        return key in self._queries

    def __len__(self) -> int:
        return len(self._queries)

    def create_query(self, key: str | None, options: QueryOptions[Any, Any]) -> Query[Any, Any]:
        """Return the query registered under *key*, creating it if needed.

        When a query already exists for *key* it is returned unchanged and
        *options* are ignored.  A falsy *key* creates an unregistered query.
        """
        # No await between lookup and insert: get-or-create is atomic on the loop.
        if key:
            cached = self._queries.get(key)
            if cached is not None:
                _logger.debug("Query cache hit key=%s", key)
                return cached

        query: Query[Any, Any] = Query(
            options,
            sink=self._sink_factory(),
            config=self._config,
            scheduler=self._scheduler,
        )
        if key:
            self._queries[key] = query
            _logger.debug("Query registered key=%s", key)
        return query

    def create_mutation(self, options: MutationOptions[Any, Any]) -> Mutation[Any, Any]:
        """Return a new mutation; mutations are never cached."""
        return Mutation(options, sink=self._sink_factory(), config=self._config)

    def get_query(self, key: str) -> Query[Any, Any] | None:
        return self._queries.get(key)

    def get_query_data(self, key: str) -> Any:
        query = self._queries.get(key)
        return query.data if query is not None else None

    def invalidate(self, key: str) -> None:
        """Refetch the query under *key* in the background, if it exists."""
        query = self._queries.get(key)
        if query is None:
            _logger.debug("Invalidate skipped, unknown key=%s", key)
            return
        query.refetch()

    def invalidate_queries(self) -> None:
        for query in list(self._queries.values()):
            query.refetch()

    def reset_query(self, key: str) -> None:
        query = self._queries.pop(key, None)
        if query is not None:
            query.reset()
            _logger.debug("Query reset and evicted key=%s", key)

    def reset_queries(self) -> None:
        """Reset every query and empty the registry.

        Later ``create_query`` calls for the same keys build brand-new
        instances; subscribers of the old ones are not carried over.
        """
        queries = list(self._queries.values())
        for query in queries:
            query.reset()
        self._queries.clear()
        _logger.debug("All queries reset count=%d", len(queries))


def create_toolkit(config: ToolkitConfig | None = None, **kwargs: Any) -> Toolkit:
    return Toolkit(config, **kwargs)


default_toolkit = create_toolkit()
"""Process-wide toolkit for applications that need a single registry."""
