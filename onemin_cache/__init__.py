"""In-memory key/value cache with per-entry TTL and background sweeping."""

from .cache import TTLCache
from .config import CacheConfig
from .errors import CacheError, MissingArgumentError
from .expiration import CacheEntry, is_expired, monotonic_ms
from .options import CacheOptions, OptionDiagnostic, validate_options
from .sizing import approx_size_bytes, approx_size_kb

__all__ = [
    # Cache
    "TTLCache",
    "CacheEntry",
    # Options
    "CacheConfig",
    "CacheOptions",
    "OptionDiagnostic",
    "validate_options",
    # Errors
    "CacheError",
    "MissingArgumentError",
    # Helpers
    "approx_size_bytes",
    "approx_size_kb",
    "is_expired",
    "monotonic_ms",
]
