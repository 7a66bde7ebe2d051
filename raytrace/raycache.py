"""A direct-mapped cache of colours already traced for a ray."""

from __future__ import annotations

import struct

from .vectors import EPSILON, Color, Ray

CACHE_SIZE = 65536
CACHE_MASK = CACHE_SIZE - 1

_MASK32 = 0xFFFFFFFF
_DOUBLE = struct.Struct("<d")
_UINT64 = struct.Struct("<Q")


def _low_word(value: float) -> int:
    """Low 32 bits of the IEEE-754 representation of ``value``."""
    return _UINT64.unpack(_DOUBLE.pack(value))[0] & _MASK32


def ray_hash(ray: Ray) -> int:
    """Slot index of ``ray`` in a cache of ``CACHE_SIZE`` entries."""
    result = 0
    for component in (*ray.origin, *ray.direction):
        result = ((result * 397) & _MASK32) ^ _low_word(component)
    return result & CACHE_MASK


def rays_equal(a: Ray, b: Ray) -> bool:
    """Whether every origin and direction component differs by at most EPSILON."""
    return all(
        abs(p - q) <= EPSILON
        for p, q in zip((*a.origin, *a.direction), (*b.origin, *b.direction))
    )


class RayCache:
    """Remembers one colour per hash slot; a new entry replaces the old one."""

    def __init__(self) -> None:
        self._slots: list[tuple[Ray, Color] | None] = [None] * CACHE_SIZE

    def get(self, ray: Ray) -> Color | None:
        """Cached colour for ``ray``, or ``None`` if not cached."""
        entry = self._slots[ray_hash(ray)]
        if entry is not None and rays_equal(entry[0], ray):
            return entry[1]
        return None

    def put(self, ray: Ray, color: Color) -> None:
        """Store ``color`` for ``ray``."""
        self._slots[ray_hash(ray)] = (ray, color)

    def clear(self) -> None:
        """Forget every entry."""
        self._slots = [None] * CACHE_SIZE