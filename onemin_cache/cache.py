"""In-memory TTL cache with a background sweep of expired entries."""

from __future__ import annotations

import logging
import threading
import weakref
from collections.abc import Mapping
from typing import Any, Callable

from .config import CacheConfig
from .errors import MissingArgumentError
from .expiration import CacheEntry, is_expired, monotonic_ms
from .options import CacheOptions, OptionDiagnostic, validate_options
from .sizing import approx_size_kb

logger = logging.getLogger(__name__)

Clock = Callable[[], float]

# Marks an argument the caller did not pass.
_MISSING: Any = object()


def _sweep_loop(
    cache_ref: weakref.ReferenceType[TTLCache],
    stop_event: threading.Event,
    interval_s: float,
) -> None:
    """Run ``clear_expired`` every *interval_s* until stopped or the cache is gone."""
    while not stop_event.wait(interval_s):
        cache = cache_ref()
        if cache is None:
            return
        try:
            cache.clear_expired()
        except Exception:
            logger.exception("[OneMinCache] Background sweep failed for %s", cache.cache_id)
        cache = None


def _normalize_key(key: Any) -> str:
    return key if isinstance(key, str) else str(key)


def _is_positive_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


class TTLCache:
    """Thread-safe key/value cache with per-entry time-to-live.

    Expired entries are removed lazily by ``get``/``has`` and in bulk by
    ``clear_expired``, which also runs on a daemon thread every
    ``clear_expired_ms`` unless the sweep is disabled. Call ``close()`` (or
    use the cache as a context manager) to stop the sweep thread.

    Example:
        >>> with TTLCache("prices", {"live_time_ms": 1000}) as cache:
        ...     cache.add("T4_BAG", {"sell_price_min": 1200})
        ...     cache.get("T4_BAG")
        {'sell_price_min': 1200}
    """

    def __init__(
        self,
        cache_id: str,
        options: CacheOptions | Mapping[str, Any] | None = None,
        *,
        clock: Clock | None = None,
    ) -> None:
        sanitized, diagnostics = validate_options(options)
        for diagnostic in diagnostics:
            logger.warning("[OneMinCache] Warning! %s", diagnostic.message)

        self.cache_id = cache_id
        self._options = sanitized
        self._diagnostics = tuple(diagnostics)
        self._clock: Clock = clock or monotonic_ms
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.RLock()
        self._stop_event = threading.Event()
        self._sweep_thread: threading.Thread | None = None

        if sanitized.sweep_enabled:
            self._start_sweep(sanitized.clear_expired_ms / 1000.0)
        else:
            self._stop_event.set()

    @classmethod
    def from_env(cls, cache_id: str, *, clock: Clock | None = None) -> "TTLCache":
        return cls(cache_id, CacheConfig().to_options(), clock=clock)

    @property
    def options(self) -> CacheOptions:
        return self._options

    @property
    def option_diagnostics(self) -> tuple[OptionDiagnostic, ...]:
        """Options rejected at construction and replaced by defaults."""
        return self._diagnostics

    @property
    def sweep_running(self) -> bool:
        """True while the background sweep thread is active."""
        thread = self._sweep_thread
        return thread is not None and thread.is_alive() and not self._stop_event.is_set()

    @property
    def closed(self) -> bool:
        """True once no background sweep will run any more.

        This refers to the sweep only: a cache built with
        ``clear_expired_ms=None`` reports ``closed`` from the start, and a
        closed cache still serves ``add``/``get``/``has`` and the rest.
        """
        return self._stop_event.is_set()

    # ------------ lifecycle ------------
    def _start_sweep(self, interval_s: float) -> None:
        self._sweep_thread = threading.Thread(
            target=_sweep_loop,
            args=(weakref.ref(self), self._stop_event, interval_s),
            name=f"onemin-cache-sweep-{self.cache_id}",
            daemon=True,
        )
        # Stop the thread if the cache is collected without close().
        weakref.finalize(self, self._stop_event.set)
        self._sweep_thread.start()

    def close(self) -> None:
        """Stop the background sweep. Foreground operations keep working."""
        self._stop_event.set()
        thread = self._sweep_thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        self._trace("close")

    def __enter__(self) -> "TTLCache":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------ helpers ------------
    def _trace(self, message: str, *args: Any) -> None:
        if self._options.debug:
            logger.info("[%s] " + message, self.cache_id, *args)

    def _live_entry(self, key: str) -> CacheEntry | None:
        """Return the entry for *key*, deleting it first if it has expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if is_expired(entry.expires_at, self._clock()):
            del self._entries[key]
            return None
        return entry

    # ------------ operations ------------
    def add(self, key: Any = _MISSING, value: Any = _MISSING, live_time_ms: Any = _MISSING) -> None:
        """Store *value* under *key*, replacing any existing entry.

        Args:
            key: Cache key
            value: Value to store; ``None`` is not storable
            live_time_ms: Time-to-live in ms. Defaults to ``options.live_time_ms``.
                Zero, negative or non-numeric values store the entry forever.

        Raises:
            MissingArgumentError: If key or value is missing
        """
        if key is _MISSING or key is None:
            raise MissingArgumentError("key")
        if value is _MISSING or value is None:
            raise MissingArgumentError("value")
        if live_time_ms is _MISSING:
            live_time_ms = self._options.live_time_ms

        key = _normalize_key(key)
        self._trace('add "%s"', key)

        with self._lock:
            expires_at = self._clock() + live_time_ms if _is_positive_number(live_time_ms) else None
            self._entries[key] = CacheEntry(data=value, expires_at=expires_at)

    def get(self, key: Any, default: Any = None) -> Any:
        """Return the value for *key*, or *default* if missing or expired.

        Reading an expired entry deletes it.
        """
        self._trace("get")
        if key is None:
            return default
        with self._lock:
            entry = self._live_entry(_normalize_key(key))
        return default if entry is None else entry.data

    def has(self, key: Any) -> bool:
        """Return True if *key* holds a live value. Deletes it if expired."""
        if key is None:
            return False
        with self._lock:
            result = self._live_entry(_normalize_key(key)) is not None
        self._trace('has "%s": %s', key, result)
        return result

    def get_all(self) -> dict[str, CacheEntry]:
        """Return a copy of the entry table.

        Expired entries are swept first, but only when periodic sweeping is
        enabled.
        """
        with self._lock:
            if self._options.sweep_enabled:
                self.clear_expired()
            self._trace("getAll")
            return dict(self._entries)

    def clear(self, key: Any) -> None:
        self._trace("clear: %s", key)
        if key is None:
            return
        with self._lock:
            self._entries.pop(_normalize_key(key), None)

    def clear_expired(self) -> int:
        """Delete every expired entry. Returns the number removed."""
        self._trace("clearExpired (all)")
        with self._lock:
            now = self._clock()
            expired = [key for key, entry in self._entries.items() if is_expired(entry.expires_at, now)]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def clear_all(self) -> None:
        self._trace("clearAll (both expired and not expired)")
        with self._lock:
            self._entries = {}

    def get_keys(self) -> list[str]:
        """Return stored keys, including expired entries not yet swept."""
        self._trace("getKeys")
        with self._lock:
            return list(self._entries)

    def get_size_kb(self) -> int:
        """Return the approximate size of all entries in kb.

        Exceeding ``options.max_size_kb`` only logs a warning.
        """
        with self._lock:
            result = approx_size_kb(self._entries)
        self._trace("getSizeKb: %s", result)
        if result > self._options.max_size_kb:
            logger.warning(
                "[%s] Approximate size %s kb exceeds max_size_kb=%s",
                self.cache_id,
                result,
                self._options.max_size_kb,
            )
        return result

    def get_keys_qty(self) -> int:
        with self._lock:
            result = len(self._entries)
        self._trace("getKeysQty: %s", result)
        return result

    def __len__(self) -> int:
        return self.get_keys_qty()

    def __contains__(self, key: Any) -> bool:
        return self.has(key)
