"""
src/utils/cache.py
Small TTL cache for fetched draw slices. Optional: analyzers never depend on it.
"""
from __future__ import annotations

import time
from collections import OrderedDict
from typing import Any, Callable, Hashable


class TTLCache:
    """Bounded mapping with per-entry expiry; the oldest entry is evicted when full."""

    def __init__(self, max_size: int = 20, ttl: float = 300.0, clock: Callable[[], float] = time.monotonic):
        self.max_size = max_size
        self.ttl = ttl
        self._clock = clock
        self._data: OrderedDict[Hashable, tuple[Any, float]] = OrderedDict()

    def get(self, key: Hashable) -> Any | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        value, expiry = entry
        if self._clock() > expiry:
            del self._data[key]
            return None
        return value

    def set(self, key: Hashable, value: Any, ttl: float | None = None) -> None:
        if key in self._data:
            del self._data[key]
        elif len(self._data) >= self.max_size:
            self._data.popitem(last=False)
        self._data[key] = (value, self._clock() + (self.ttl if ttl is None else ttl))

    def cleanup(self) -> int:
        now = self._clock()
        expired = [k for k, (_, expiry) in self._data.items() if now > expiry]
        for k in expired:
            del self._data[k]
        return len(expired)

    def clear(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)
