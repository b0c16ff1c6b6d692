"""Custom exception hierarchy for querykit."""

from __future__ import annotations


class QueryKitError(Exception):
    """Base exception for all querykit errors."""


class InvalidArgumentError(QueryKitError, ValueError):
    """An operation received an argument outside its accepted range.

    Raised by :meth:`querykit.query.Query.start_polling` when the polling
    interval is negative.  Producer failures are never wrapped in this (or
    any other) querykit exception; they propagate unchanged.
    """
