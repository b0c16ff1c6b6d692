"""Public data models for querykit."""

from querykit.models.options import MutationOptions, QueryOptions
from querykit.models.state import MutationState, QueryState, Status

__all__ = [
    "MutationOptions",
    "MutationState",
    "QueryOptions",
    "QueryState",
    "Status",
]
