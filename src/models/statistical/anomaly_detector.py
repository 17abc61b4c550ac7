"""
src/models/statistical/anomaly_detector.py
Flag unusual draws: consecutive runs, non-uniform spread, frequency spikes,
near-identical back-to-back draws.
"""
from __future__ import annotations

from typing import Sequence

import numpy as np

from src.models.types import Anomaly, Draw, numbers_of
from src.utils.logger import get_logger

log = get_logger("stats.anomaly")


def _draw_date(draw):
    return draw.draw_date if isinstance(draw, Draw) else None


class AnomalyDetector:
    """
    Runs four independent checks over the most recent `window` draws
    and returns the `max_results` highest-scoring anomalies.
    """

    def __init__(
        self,
        number_range: tuple[int, int] = (1, 90),
        window: int = 50,
        min_draws: int = 10,
        critical_value: float = 112.02,  # chi-square, 90 df, p=0.05
        critical_multiplier: float = 1.5,
        spike_rate: float = 15.0,
        spike_high_rate: float = 20.0,
        duplicate_pairs: int = 10,
        duplicate_threshold: int = 4,
        max_results: int = 5,
    ):
        self.lo, self.hi = number_range
        self.window = window
        self.min_draws = min_draws
        self.critical_value = critical_value
        self.critical_multiplier = critical_multiplier
        self.spike_rate = spike_rate
        self.spike_high_rate = spike_high_rate
        self.duplicate_pairs = duplicate_pairs
        self.duplicate_threshold = duplicate_threshold
        self.max_results = max_results

    # ── Helpers ───────────────────────────────────────────────────

    def _counts(self, history: Sequence) -> np.ndarray:
        """Occurrences per number; index 0 ↔ self.lo. Out-of-range values are ignored."""
        flat = [n for draw in history for n in numbers_of(draw) if self.lo <= n <= self.hi]
        size = self.hi - self.lo + 1
        if not flat:
            return np.zeros(size, dtype=int)
        return np.bincount(np.asarray(flat) - self.lo, minlength=size)

    def chi_square(self, history: Sequence) -> float:
        observed = self._counts(history)
        total = observed.sum()
        if total == 0:
            return 0.0
        expected = total / observed.size
        return float(np.sum((observed - expected) ** 2 / expected))

    # ── Checks ────────────────────────────────────────────────────

    def check_consecutive(self, history: Sequence) -> list[Anomaly]:
        found = []
        for draw in history:
            nums = sorted(numbers_of(draw))
            consecutive = sum(1 for a, b in zip(nums, nums[1:]) if b - a == 1)
            if consecutive >= 3:
                found.append(Anomaly(
                    type="unusual_pattern",
                    severity="medium",
                    description=f"{consecutive + 1} consecutive numbers in one draw",
                    score=consecutive * 20,
                    draw_date=_draw_date(draw),
                    numbers=tuple(numbers_of(draw)),
                ))
        return found

    def check_uniformity(self, history: Sequence) -> list[Anomaly]:
        chi2 = self.chi_square(history)
        if chi2 > self.critical_value * self.critical_multiplier:
            return [Anomaly(
                type="randomness_issue",
                severity="high",
                description=f"Non-random distribution detected (chi2={chi2:.1f})",
                score=90,
            )]
        return []

    def check_frequency_spikes(self, history: Sequence) -> list[Anomaly]:
        n_draws = len(history)
        if n_draws == 0:
            return []
        counts = self._counts(history)
        expected_rate = 100 * 5 / counts.size
        found = []
        for offset, count in enumerate(counts):
            rate = count / n_draws * 100
            if rate > self.spike_rate:
                num = self.lo + offset
                found.append(Anomaly(
                    type="frequency_spike",
                    severity="high" if rate > self.spike_high_rate else "medium",
                    description=f"Number {num} drawn {rate:.1f}% of the time (expected {expected_rate:.1f}%)",
                    score=float(rate * 3),
                    numbers=(num,),
                ))
        return found

    def check_duplicates(self, history: Sequence) -> list[Anomaly]:
        found = []
        for i in range(min(len(history) - 1, self.duplicate_pairs)):
            current = numbers_of(history[i])
            previous = set(numbers_of(history[i + 1]))
            shared = tuple(n for n in current if n in previous)
            if len(shared) >= self.duplicate_threshold:
                found.append(Anomaly(
                    type="suspicious_draw",
                    severity="high",
                    description=f"{len(shared)} identical numbers in two consecutive draws",
                    score=len(shared) * 25,
                    draw_date=_draw_date(history[i]),
                    numbers=shared,
                ))
        return found

    # ── Entry point ───────────────────────────────────────────────

    def detect(self, history: Sequence[Draw | Sequence[int]], limit: int | None = None) -> list[Anomaly]:
        """History is most-recent-first. Fewer than `min_draws` draws ⇒ []."""
        recent = history[: self.window]
        if len(recent) < self.min_draws:
            log.debug(f"Anomaly detection skipped: {len(recent)} draws < {self.min_draws}")
            return []

        anomalies = (
            self.check_consecutive(recent)
            + self.check_uniformity(recent)
            + self.check_frequency_spikes(recent)
            + self.check_duplicates(recent)
        )
        anomalies.sort(key=lambda a: a.score, reverse=True)
        if anomalies:
            log.info(f"{len(anomalies)} anomalies found over {len(recent)} draws")
        return anomalies[: self.max_results if limit is None else limit]
