"""Redaction of call arguments for DEBUG logs.

Query and mutation arguments routinely carry credentials (login forms,
API keys, bearer tokens).  Arguments are only logged when ``log_args`` is
enabled, and then only in the redacted form produced here.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

_SENSITIVE_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "passwd",
        "secret",
        "token",
        "accesstoken",
        "refreshtoken",
        "apikey",
        "authorization",
        "cookie",
        "session",
        "pin",
    }
)

_SCALARS = (bool, int, float)


def _is_sensitive(key: Any) -> bool:
    return str(key).lower().replace("_", "").replace("-", "") in _SENSITIVE_KEYS


def _as_mapping(value: Any) -> Mapping[str, Any] | None:
    if isinstance(value, Mapping):
        return value
    if isinstance(value, BaseModel):
        return value.model_dump()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    return None


def redact_for_log(value: Any, *, max_string: int = 256) -> Any:
    """Return a copy of *value* with sensitive keys masked and long strings cut."""
    if value is None or isinstance(value, _SCALARS):
        return value

    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"

    mapping = _as_mapping(value)
    if mapping is not None:
        return {
            str(k): "<redacted>" if _is_sensitive(k) else redact_for_log(v, max_string=max_string)
            for k, v in mapping.items()
        }

    if isinstance(value, (list, tuple, set, frozenset)):
        return [redact_for_log(v, max_string=max_string) for v in value]

    # Opaque objects are described by type only.
    return f"<{type(value).__name__}>"


def args_for_log(args: Any, *, enabled: bool) -> Any:
    """Render call arguments for a log record, or a placeholder when disabled."""
    if not enabled:
        return "<args hidden>"
    return redact_for_log(args)
