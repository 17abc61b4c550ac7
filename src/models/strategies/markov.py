"""
src/models/strategies/markov.py
First-order number-to-number transitions between consecutive draws.
"""
from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from src.models.strategies.base import Strategy


class MarkovStrategy(Strategy):
    """
    P(b next | a now) counted over every (a in draw t, b in draw t+1) pair,
    Laplace-smoothed per row. The current state is the most recent draw; its
    rows are averaged to score the next draw.
    """

    name = "markov"
    factors = ("transition matrix", "state probabilities")

    def __init__(self, smoothing: float = 0.01, **kwargs):
        super().__init__(**kwargs)
        self.smoothing = smoothing

    def transition_matrix(self, history: Sequence) -> np.ndarray:
        counts = np.zeros((self.size, self.size))
        # Work oldest-first
        chronological = list(reversed(history))
        for current, following in zip(chronological, chronological[1:]):
            counts[np.ix_(self._indices(current), self._indices(following))] += 1
        row_totals = counts.sum(axis=1, keepdims=True)
        return (counts + self.smoothing) / (row_totals + self.smoothing * self.size)

    def scores(self, history: Sequence) -> np.ndarray:
        matrix = self.transition_matrix(history)
        state = self._indices(history[0])
        if not state:
            return np.full(self.size, 1.0 / self.size)
        return matrix[state].mean(axis=0)

    def confidence(self, scores: np.ndarray, picks: Sequence[int]) -> float:
        avg = float(np.mean([scores[n - self.lo] for n in picks]))
        return min(0.85, math.tanh(avg * 10) + 0.2)
