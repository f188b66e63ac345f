"""Approximate memory footprint of cached values.

The estimate walks the reachable object graph and sums rough per-value costs:

- ``bool``: 4 bytes
- numbers (``int``, ``float``, ``Decimal``, ``Fraction`` ...): 8 bytes
- ``str``: 2 bytes per character
- ``bytes`` / ``bytearray``: 1 byte per element

Containers and arbitrary objects add nothing themselves; their members are
walked instead. Each composite object is visited at most once, so cyclic
structures terminate. This is an estimate, not accounting: interpreter and
hash table overhead are ignored.
"""

from __future__ import annotations

import math
import numbers
from collections.abc import Mapping, Sequence, Set
from typing import Any, Iterable

BOOL_BYTES = 4
NUMBER_BYTES = 8
CHAR_BYTES = 2


def _members(value: Any) -> Iterable[Any]:
    """Return the values reachable one step from a composite object."""
    if isinstance(value, Mapping):
        return list(value.values())
    if isinstance(value, (Sequence, Set)):
        return list(value)

    members: list[Any] = []
    attrs = getattr(value, "__dict__", None)
    if isinstance(attrs, dict):
        members.extend(attrs.values())
    for cls in type(value).__mro__:
        slots = cls.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for slot in slots:
            if slot in ("__dict__", "__weakref__"):
                continue
            try:
                members.append(getattr(value, slot))
            except AttributeError:
                continue
    return members


def approx_size_bytes(value: Any) -> int:
    """Return the approximate size of *value* in bytes."""
    seen: set[int] = set()
    stack: list[Any] = [value]
    total = 0

    while stack:
        item = stack.pop()

        if item is None:
            continue
        if isinstance(item, bool):
            total += BOOL_BYTES
        elif isinstance(item, numbers.Number):
            total += NUMBER_BYTES
        elif isinstance(item, str):
            total += len(item) * CHAR_BYTES
        elif isinstance(item, (bytes, bytearray)):
            total += len(item)
        elif id(item) not in seen:
            seen.add(id(item))
            stack.extend(_members(item))

    return total


def approx_size_kb(value: Any) -> int:
    """Return the approximate size of *value* in kilobytes, rounded half up."""
    return math.floor(approx_size_bytes(value) / 1024 + 0.5)
