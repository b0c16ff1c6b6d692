"""querykit - per-key asynchronous data synchronization for asyncio."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("querykit")
except PackageNotFoundError:
    __version__ = "0+local"
from querykit.config import ToolkitConfig
from querykit.exceptions import InvalidArgumentError, QueryKitError
from querykit.fetcher import DedupFetcher
from querykit.models import MutationOptions, MutationState, QueryOptions, QueryState, Status
from querykit.mutation import Mutation
from querykit.query import Query
from querykit.state.events import EventBus, ToolkitEvent
from querykit.state.sinks import EventBusSink, NotificationSink, NullSink, StoreSink
from querykit.state.status import StatusState
from querykit.toolkit import Toolkit, create_toolkit, default_toolkit

__all__ = [
    "__version__",
    "DedupFetcher",
    "EventBus",
    "EventBusSink",
    "InvalidArgumentError",
    "Mutation",
    "MutationOptions",
    "MutationState",
    "NotificationSink",
    "NullSink",
    "Query",
    "QueryKitError",
    "QueryOptions",
    "QueryState",
    "Status",
    "StatusState",
    "StoreSink",
    "Toolkit",
    "ToolkitConfig",
    "ToolkitEvent",
    "create_toolkit",
    "default_toolkit",
]
