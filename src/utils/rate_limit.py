"""
src/utils/rate_limit.py
Fixed-window request limiter. One instance per caller, passed in explicitly.
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable


@dataclass
class RateLimitResult:
    allowed: bool
    remaining: int
    reset_in: float  # seconds


class RateLimiter:
    """Allow `max_requests` per key inside each `window` seconds."""

    def __init__(self, max_requests: int = 10, window: float = 60.0, clock: Callable[[], float] = time.monotonic):
        if max_requests < 1:
            raise ValueError("max_requests must be >= 1")
        self.max_requests = max_requests
        self.window = window
        self._clock = clock
        # key -> [count, reset_at]
        self._entries: dict[str, list[float]] = {}

    def check(self, key: str) -> RateLimitResult:
        now = self._clock()
        entry = self._entries.get(key)

        if entry is None or now > entry[1]:
            self._entries[key] = [1, now + self.window]
            return RateLimitResult(True, self.max_requests - 1, self.window)

        entry[0] += 1
        reset_in = entry[1] - now
        if entry[0] > self.max_requests:
            return RateLimitResult(False, 0, reset_in)
        return RateLimitResult(True, self.max_requests - int(entry[0]), reset_in)

    def cleanup(self) -> int:
        """Drop expired windows; returns how many were removed."""
        now = self._clock()
        expired = [k for k, (_, reset_at) in self._entries.items() if now > reset_at]
        for k in expired:
            del self._entries[k]
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)


class RateLimitExceeded(RuntimeError):
    def __init__(self, key: str, reset_in: float):
        super().__init__(f"Rate limit exceeded for {key!r}, retry in {reset_in:.0f}s")
        self.key = key
        self.reset_in = reset_in
