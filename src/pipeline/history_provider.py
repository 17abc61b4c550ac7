"""
src/pipeline/history_provider.py
Read-only access to draw history, algorithm configs and performance rows.
"""
from __future__ import annotations

from typing import Callable

from src.models.types import AlgorithmConfig, AlgorithmPerformanceRecord, Draw, PerformanceSummary
from src.utils import supabase_client as db
from src.utils.cache import TTLCache
from src.utils.config import HISTORY_LIMIT_MAX, HISTORY_LIMIT_MIN
from src.utils.logger import get_logger
from src.utils.rate_limit import RateLimiter, RateLimitExceeded
from src.utils.validation import validate_draw, validate_draw_name

log = get_logger("pipeline.history")


class DrawHistoryProvider:
    """
    Fetches most-recent-first draw slices for one draw name.
    `fetch`, `cache` and `rate_limiter` are injected so callers (and tests) control I/O and state.
    The limiter is keyed by draw name; a refused request raises RateLimitExceeded.
    """

    def __init__(
        self,
        fetch: Callable[[str, int], list[dict]] | None = None,
        cache: TTLCache | None = None,
        rate_limiter: RateLimiter | None = None,
    ):
        self._fetch = fetch or db.get_recent_draws
        self.cache = cache
        self.rate_limiter = rate_limiter

    def get_history(self, draw_name: str, limit: int = 100) -> list[Draw]:
        if not validate_draw_name(draw_name):
            raise ValueError(f"Invalid draw name: {draw_name!r}")
        if self.rate_limiter is not None:
            verdict = self.rate_limiter.check(draw_name)
            if not verdict.allowed:
                log.warning(f"Rate limit hit for {draw_name}, reset in {verdict.reset_in:.0f}s")
                raise RateLimitExceeded(draw_name, verdict.reset_in)
        limit = max(HISTORY_LIMIT_MIN, min(HISTORY_LIMIT_MAX, int(limit)))

        key = (draw_name, limit)
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        rows = self._fetch(draw_name, limit)
        draws = [Draw.from_row(row) for row in rows if validate_draw(row)]
        if len(draws) < len(rows):
            log.warning(f"{len(rows) - len(draws)} invalid rows dropped for {draw_name}")
        # store order is trusted only after sorting: most recent first
        draws.sort(key=lambda d: d.draw_date, reverse=True)
        log.info(f"Loaded {len(draws)} draws for {draw_name} (limit={limit})")

        if self.cache is not None:
            self.cache.set(key, draws)
        return draws

    def fetch_algorithm_configs(self, enabled_only: bool = False) -> list[AlgorithmConfig]:
        return [AlgorithmConfig.from_row(row) for row in db.get_algorithm_configs(enabled_only=enabled_only)]

    def fetch_performance_history(
        self,
        algorithm: str | None = None,
        draw_name: str | None = None,
        limit: int = 50,
        order_by: str = "draw_date",
    ) -> list[AlgorithmPerformanceRecord]:
        rows = db.get_performance_history(
            algorithm=algorithm, draw_name=draw_name, limit=limit, order_by=order_by
        )
        return [AlgorithmPerformanceRecord.from_row(row) for row in rows]

    def fetch_rankings(self, draw_name: str | None = None, global_only: bool = False) -> list[PerformanceSummary]:
        rows = db.get_algorithm_rankings(draw_name=draw_name, global_only=global_only)
        return [PerformanceSummary.from_ranking_row(row) for row in rows]

    def fetch_recent_predictions(self, draw_name: str, limit: int = 10) -> list[dict]:
        return db.get_recent_predictions(draw_name, limit=limit)
