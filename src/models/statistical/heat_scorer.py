"""
src/models/statistical/heat_scorer.py
Hot / warm / cold / frozen classification from recency, frequency and short-term trend.
"""
from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from src.models.types import Draw, NumberHeat, numbers_of

DEFAULT_THRESHOLDS = {"hot": 0.8, "warm": 0.5, "cold": 0.2}
TEMPERATURES = ("hot", "warm", "cold", "frozen")


class HeatScorer:
    """score = exp(-last_seen * decay) * (frequency * 10) * trend"""

    def __init__(
        self,
        number_range: tuple[int, int] = (1, 90),
        decay: float = 0.1,
        trend_window: int = 10,
        thresholds: dict[str, float] | None = None,
    ):
        self.lo, self.hi = number_range
        self.decay = decay
        self.trend_window = trend_window
        self.thresholds = {**DEFAULT_THRESHOLDS, **(thresholds or {})}

    def classify(self, score: float) -> str:
        if score > self.thresholds["hot"]:
            return "hot"
        if score > self.thresholds["warm"]:
            return "warm"
        if score > self.thresholds["cold"]:
            return "cold"
        return "frozen"

    def _trend(self, recent: int, previous: int) -> float:
        if recent > previous:
            return 1.5
        if recent < previous:
            return 0.5
        return 1.0

    def get_heatmap(self, history: Sequence[Draw | Sequence[int]]) -> list[NumberHeat]:
        """One NumberHeat per number in range, ordered by number. History is most-recent-first."""
        n_draws = len(history)
        size = self.hi - self.lo + 1
        # presence[i, k] == True when number lo+k is in draw i
        presence = np.zeros((n_draws, size), dtype=bool)
        for i, draw in enumerate(history):
            for num in numbers_of(draw):
                if self.lo <= num <= self.hi:
                    presence[i, num - self.lo] = True

        w = self.trend_window
        occurrences = presence.sum(axis=0)
        recent_counts = presence[:w].sum(axis=0)
        previous_counts = presence[w: 2 * w].sum(axis=0)

        heat = []
        for k in range(size):
            hits = np.flatnonzero(presence[:, k])
            last_seen = float(hits[0]) if hits.size else math.inf
            frequency = float(occurrences[k]) / n_draws if n_draws else 0.0

            recency_score = math.exp(-last_seen * self.decay)
            freq_score = frequency * 10
            trend_score = self._trend(int(recent_counts[k]), int(previous_counts[k]))
            score = recency_score * freq_score * trend_score

            heat.append(NumberHeat(
                number=self.lo + k,
                temperature=self.classify(score),
                score=score,
                last_seen=last_seen,
                frequency=frequency,
            ))
        return heat

    def get_by_temperature(self, history: Sequence) -> dict[str, list[int]]:
        groups: dict[str, list[int]] = {t: [] for t in TEMPERATURES}
        for h in self.get_heatmap(history):
            groups[h.temperature].append(h.number)
        return groups
