"""Toolkit configuration for querykit."""

from __future__ import annotations

import dataclasses
import os
from typing import Any


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class ToolkitConfig:
    """Behaviour switches shared by every unit a toolkit creates.

    Parameters
    ----------
    copy_data : bool
        Deep-copy data before handing it to a notification sink, so that
        subscribers never share a reference with the unit's own data slot.
        Disable for payloads that cannot be copied (open handles, locks).
    log_poll_errors : bool
        Log failed polling ticks at WARNING level.  When disabled they are
        still recorded in the unit state but only logged at DEBUG.
    log_args : bool
        Include (redacted) call arguments in DEBUG log records.
    """

    copy_data: bool = True
    log_poll_errors: bool = True
    log_args: bool = False

    @classmethod
    def from_env(cls, **overrides: Any) -> ToolkitConfig:
        """Create configuration from environment variables.

        Reads ``QUERYKIT_COPY_DATA``, ``QUERYKIT_LOG_POLL_ERRORS`` and
        ``QUERYKIT_LOG_ARGS``. Explicit keyword arguments override
        environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        ToolkitConfig
            Populated configuration.
        """
        env = os.environ
        defaults = cls()

        _ENV_BOOL_MAP = {
            "QUERYKIT_COPY_DATA": "copy_data",
            "QUERYKIT_LOG_POLL_ERRORS": "log_poll_errors",
            "QUERYKIT_LOG_ARGS": "log_args",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_BOOL_MAP.items():
            if field_name in overrides:
                continue
            config_kwargs[field_name] = _env_bool(env.get(env_key), getattr(defaults, field_name))

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
