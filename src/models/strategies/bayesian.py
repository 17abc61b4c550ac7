"""
src/models/strategies/bayesian.py
Uniform prior sharpened by decayed observations, times a short-window likelihood.
"""
from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from src.models.strategies.base import Strategy


class BayesianStrategy(Strategy):

    name = "bayesian"
    factors = ("bayes rule", "prior + likelihood", "normalized posterior")
    base_confidence = 0.78

    def __init__(self, decay: float = 0.03, likelihood_window: int = 20, **kwargs):
        super().__init__(**kwargs)
        self.decay = decay
        self.likelihood_window = likelihood_window

    def scores(self, history: Sequence) -> np.ndarray:
        # log-space keeps long histories from overflowing the running product
        log_prior = np.full(self.size, -math.log(self.size))
        for idx, draw in enumerate(history):
            log_prior[self._indices(draw)] += math.log1p(math.exp(-idx * self.decay))
        prior = np.exp(log_prior - log_prior.max())
        prior /= prior.sum()

        recent = np.zeros(self.size)
        for draw in history[: self.likelihood_window]:
            recent[self._indices(draw)] += 1
        likelihood = 1 + recent / self.likelihood_window

        posterior = prior * likelihood
        return posterior / posterior.sum()
