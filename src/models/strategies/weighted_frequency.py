"""
src/models/strategies/weighted_frequency.py
Frequency with exponential decay: a draw `i` places back weighs exp(-i * decay).
"""
from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from src.models.strategies.base import Strategy


class WeightedFrequencyStrategy(Strategy):

    name = "weighted_frequency"
    factors = ("frequency", "time decay", "normalization")

    def __init__(self, decay: float = 0.05, window: int = 100, **kwargs):
        super().__init__(**kwargs)
        self.decay = decay
        self.window = window

    def scores(self, history: Sequence) -> np.ndarray:
        weighted = np.zeros(self.size)
        total = 0.0
        for idx, draw in enumerate(history[: self.window]):
            weight = math.exp(-idx * self.decay)
            hits = self._indices(draw)
            weighted[hits] += weight
            total += weight * len(hits)
        return weighted / (total or 1.0)

    def confidence(self, scores: np.ndarray, picks: Sequence[int]) -> float:
        avg = float(np.mean([scores[n - self.lo] for n in picks]))
        return min(0.85, avg * 12 + 0.2)
