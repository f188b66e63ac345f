"""Cache options and their validation.

Options are validated one by one. An invalid value never fails construction:
it is replaced by the documented default and reported as an
:class:`OptionDiagnostic` so the caller can decide how to surface it.

Usage:
    options, diagnostics = validate_options({"liveTimeMs": 1000})
    for diagnostic in diagnostics:
        logger.warning(diagnostic.message)
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    ValidationError,
    field_validator,
)

logger = logging.getLogger(__name__)

DEFAULT_CLEAR_EXPIRED_MS = 10_000.0
DEFAULT_LIVE_TIME_MS = 60_000.0
DEFAULT_MAX_SIZE_KB = 5_000.0
DEFAULT_DEBUG = False

# camelCase spellings accepted for compatibility with existing option blocks
OPTION_ALIASES = {
    "clearExpiredMs": "clear_expired_ms",
    "liveTimeMs": "live_time_ms",
    "maxSizeKb": "max_size_kb",
}

_REQUIREMENTS = {
    "clear_expired_ms": "must be a number greater than 0",
    "live_time_ms": "must be a number",
    "max_size_kb": "must be a number",
    "debug": "must be a boolean value",
}

# Diagnostic name used when the whole option block is not a mapping
WHOLE_BLOCK = "*"


class CacheOptions(BaseModel):
    """Sanitized cache options.

    Attributes:
        clear_expired_ms: Interval between automatic sweeps; ``None`` disables them
        live_time_ms: Default time-to-live applied by ``add``
        max_size_kb: Advisory size limit, never enforced
        debug: Emit diagnostic traces for every operation
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    clear_expired_ms: StrictFloat | None = Field(
        default=DEFAULT_CLEAR_EXPIRED_MS, description="Sweep interval in ms (None = disabled)"
    )
    live_time_ms: StrictFloat = Field(default=DEFAULT_LIVE_TIME_MS, description="Default entry TTL in ms")
    max_size_kb: StrictFloat = Field(default=DEFAULT_MAX_SIZE_KB, description="Advisory size limit in kb")
    debug: StrictBool = Field(default=DEFAULT_DEBUG, description="Trace operations")

    @field_validator("clear_expired_ms", "live_time_ms", "max_size_kb")
    @classmethod
    def _finite(cls, value: float | None) -> float | None:
        if value is not None and not math.isfinite(value):
            raise ValueError("value must be finite")
        return value

    @field_validator("clear_expired_ms")
    @classmethod
    def _positive_interval(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("interval must be greater than 0")
        return value

    @property
    def sweep_enabled(self) -> bool:
        return self.clear_expired_ms is not None


@dataclass(frozen=True)
class OptionDiagnostic:
    """An option that was rejected and replaced by its default."""

    option: str
    value: Any
    default: Any

    @property
    def message(self) -> str:
        if self.option == WHOLE_BLOCK:
            return f"options must be a mapping, got {type(self.value).__name__}. Using default options"
        return (
            f"options.{self.option} {_REQUIREMENTS[self.option]}. "
            f"Set to default value: {self.default}"
        )


def _normalize_keys(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Map aliases to field names and drop unrecognized keys."""
    normalized: dict[str, Any] = {}
    for key, value in raw.items():
        name = OPTION_ALIASES.get(key, key)
        if name in CacheOptions.model_fields:
            normalized[name] = value
    return normalized


def validate_options(
    raw: CacheOptions | Mapping[str, Any] | None = None,
) -> tuple[CacheOptions, list[OptionDiagnostic]]:
    """Validate raw options, falling back to defaults for invalid values.

    Args:
        raw: Option mapping (python names or camelCase aliases), an existing
            ``CacheOptions`` instance, or ``None`` for all defaults

    Returns:
        Tuple of (sanitized options, diagnostics for every replaced option)
    """
    if raw is None:
        return CacheOptions(), []
    if isinstance(raw, CacheOptions):
        return raw, []
    if not isinstance(raw, Mapping):
        return CacheOptions(), [OptionDiagnostic(option=WHOLE_BLOCK, value=raw, default=None)]

    values = _normalize_keys(raw)
    try:
        return CacheOptions.model_validate(values), []
    except ValidationError as exc:
        rejected = {str(error["loc"][0]) for error in exc.errors() if error["loc"]}

    diagnostics: list[OptionDiagnostic] = []
    for name in CacheOptions.model_fields:
        if name not in rejected:
            continue
        default = CacheOptions.model_fields[name].default
        diagnostics.append(OptionDiagnostic(option=name, value=values.pop(name), default=default))
        logger.debug("Rejected option %s=%r", name, diagnostics[-1].value)

    return CacheOptions.model_validate(values), diagnostics
