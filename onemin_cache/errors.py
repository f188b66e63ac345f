"""Exceptions raised by the cache."""

from __future__ import annotations

from dataclasses import dataclass


class CacheError(Exception):
    """Base class for cache errors."""


@dataclass(frozen=True)
class MissingArgumentError(CacheError, ValueError):
    field: str

    def __str__(self) -> str:
        return f"Missing required field: {self.field}"
