"""
src/models/strategies/base.py
Common shape of the number-picking strategies: score every number, keep the
best candidates, spread the pick across color groups.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np

from src.models.types import StrategyPrediction, numbers_of


def color_group(num: int) -> int:
    """Ticket color band: 1-9, 10-19, ..., 80-90 (90 joins the last band)."""
    return min(num // 10, 8)


def pick_balanced(candidates: Sequence[int], n: int = 5) -> list[int]:
    """
    One number per color group in candidate order, then fill with the
    remaining candidates. Returned sorted.
    """
    if len(candidates) <= n:
        return sorted(candidates)

    first_of_group: dict[int, int] = {}
    for num in candidates:
        first_of_group.setdefault(color_group(num), num)

    selected = list(first_of_group.values())[:n]
    for num in candidates:
        if len(selected) >= n:
            break
        if num not in selected:
            selected.append(num)
    return sorted(selected)


class Strategy(ABC):
    """Deterministic predictor over a most-recent-first history."""

    name = "strategy"
    factors: tuple[str, ...] = ()
    base_confidence = 0.5

    def __init__(
        self,
        number_range: tuple[int, int] = (1, 90),
        pick_count: int = 5,
        min_draws: int = 5,
        candidates: int = 15,
    ):
        self.lo, self.hi = number_range
        self.size = self.hi - self.lo + 1
        self.pick_count = pick_count
        self.min_draws = min_draws
        self.candidates = candidates

    def _indices(self, draw) -> list[int]:
        return [n - self.lo for n in numbers_of(draw) if self.lo <= n <= self.hi]

    @abstractmethod
    def scores(self, history: Sequence) -> np.ndarray:
        """One score per number; index 0 ↔ self.lo."""

    def confidence(self, scores: np.ndarray, picks: Sequence[int]) -> float:
        return self.base_confidence

    def predict(self, history: Sequence) -> StrategyPrediction | None:
        """None when the history is shorter than `min_draws`."""
        if len(history) < self.min_draws:
            return None
        scores = self.scores(history)
        ranked = sorted(range(self.lo, self.hi + 1), key=lambda n: (-scores[n - self.lo], n))
        picks = pick_balanced(ranked[: self.candidates], self.pick_count)
        return StrategyPrediction(
            algorithm=self.name,
            numbers=tuple(picks),
            confidence=float(self.confidence(scores, picks)),
            factors=self.factors,
        )
