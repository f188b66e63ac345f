"""Environment-driven cache configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from typing import Any

ENV_PREFIX = "ONEMIN_CACHE_"
_DISABLED_VALUES = {"off", "none", "disabled"}

# Distinguishes "sweep explicitly disabled" from "variable not set".
_DISABLED = object()


def _env_number(name: str) -> Any:
    """Parse a numeric env var.

    Unparseable values are returned as-is so that option validation can
    report them and fall back to the default.
    """
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError:
        return raw


def _env_interval(name: str) -> Any:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is not None and raw.strip().lower() in _DISABLED_VALUES:
        return _DISABLED
    return _env_number(name)


def _env_bool(name: str) -> Any:
    """Parse a boolean env var; unrecognized values are returned as-is."""
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return None
    lowered = raw.strip().lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    return raw


@dataclass(frozen=True)
class CacheConfig:
    clear_expired_ms: Any = field(default_factory=lambda: _env_interval("CLEAR_EXPIRED_MS"))
    live_time_ms: Any = field(default_factory=lambda: _env_number("LIVE_TIME_MS"))
    max_size_kb: Any = field(default_factory=lambda: _env_number("MAX_SIZE_KB"))
    debug: Any = field(default_factory=lambda: _env_bool("DEBUG"))

    def to_options(self) -> dict[str, Any]:
        """Return the raw option mapping; unset variables are omitted."""
        options: dict[str, Any] = {}
        if self.clear_expired_ms is _DISABLED:
            options["clear_expired_ms"] = None
        elif self.clear_expired_ms is not None:
            options["clear_expired_ms"] = self.clear_expired_ms
        for name in ("live_time_ms", "max_size_kb", "debug"):
            value = getattr(self, name)
            if value is not None:
                options[name] = value
        return options
