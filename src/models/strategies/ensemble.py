"""
src/models/strategies/ensemble.py
Confidence-weighted vote across member strategies.
"""
from __future__ import annotations

from typing import Sequence

import numpy as np

from src.models.strategies.base import Strategy
from src.models.types import StrategyPrediction
from src.utils.logger import get_logger

log = get_logger("strategy.ensemble")


class EnsembleStrategy(Strategy):
    """votes[n] += member.confidence for every number a member picks."""

    name = "ensemble"
    factors = ("weighted vote", "consensus")

    def __init__(self, members: Sequence[Strategy], **kwargs):
        super().__init__(**kwargs)
        if not members:
            raise ValueError("Ensemble needs at least one member strategy")
        self.members = list(members)

    def member_predictions(self, history: Sequence) -> list[StrategyPrediction]:
        predictions = []
        for member in self.members:
            prediction = member.predict(history)
            if prediction is not None:
                predictions.append(prediction)
        return predictions

    def _votes(self, predictions: Sequence[StrategyPrediction]) -> np.ndarray:
        votes = np.zeros(self.size)
        for prediction in predictions:
            for num in prediction.numbers:
                votes[num - self.lo] += prediction.confidence
        return votes

    def scores(self, history: Sequence) -> np.ndarray:
        return self._votes(self.member_predictions(history))

    def predict(self, history: Sequence) -> StrategyPrediction | None:
        if len(history) < self.min_draws:
            return None
        predictions = self.member_predictions(history)
        if not predictions:
            return None

        votes = self._votes(predictions)
        ranked = sorted(range(self.lo, self.hi + 1), key=lambda n: (-votes[n - self.lo], n))
        picks = sorted(ranked[: self.pick_count])

        avg_confidence = sum(p.confidence for p in predictions) / len(predictions)
        log.debug(f"Ensemble of {len(predictions)} members → {picks}")
        return StrategyPrediction(
            algorithm=self.name,
            numbers=tuple(picks),
            confidence=min(0.92, avg_confidence * 1.1),
            factors=self.factors + tuple(p.algorithm for p in predictions),
        )
