"""
src/models/strategies/variance.py
Appearance rate damped by the spread of the frequency distribution.
"""
from __future__ import annotations

from typing import Sequence

import numpy as np

from src.models.strategies.base import Strategy


class VarianceStrategy(Strategy):

    name = "variance"
    factors = ("frequency spread", "adjusted frequency", "normalization")

    def scores(self, history: Sequence) -> np.ndarray:
        counts = np.zeros(self.size)
        for draw in history:
            np.add.at(counts, self._indices(draw), 1)
        seen = counts[counts > 0]
        spread = float(seen.std()) if seen.size else 0.0
        return counts / len(history) / (spread + 1)

    def confidence(self, scores: np.ndarray, picks: Sequence[int]) -> float:
        avg = float(np.mean([scores[n - self.lo] for n in picks]))
        return min(0.80, avg * 10 + 0.3)
