"""
src/models/strategy_aggregator.py
Rank named prediction algorithms by weighted track record and build a vote-based consensus.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Any, Sequence

from src.models.types import (
    AlgorithmConfig,
    AlgorithmPrediction,
    AlgorithmRecommendation,
    ConsensusResult,
    PerformanceSummary,
)
from src.utils.logger import get_logger

log = get_logger("stats.aggregator")

DEFAULT_BLEND = {"accuracy": 0.35, "best_match": 0.30, "excellence": 0.20, "volume": 0.15}

TUNED_WEIGHT_MIN = 0.1
TUNED_WEIGHT_MAX = 2.0


class MultiStrategyAggregator:
    """
    score = (avg_accuracy/100 * a + best_match/5 * b + excellent_rate * c
             + min(1, total/volume_saturation) * d) * weight
    """

    def __init__(
        self,
        blend: dict[str, float] | None = None,
        volume_saturation: int = 30,
        alternatives: int = 2,
        consensus_algorithms: int = 3,
        pick_count: int = 5,
    ):
        self.blend = {**DEFAULT_BLEND, **(blend or {})}
        if any(v < 0 for v in self.blend.values()):
            raise ValueError(f"Blend coefficients must be non-negative: {self.blend}")
        self.volume_saturation = volume_saturation
        self.alternatives = alternatives
        self.consensus_algorithms = consensus_algorithms
        self.pick_count = pick_count

    # ── Scoring ───────────────────────────────────────────────────

    def score(self, summary: PerformanceSummary, weight: float = 1.0) -> float:
        b = self.blend
        volume = min(1.0, summary.total_predictions / self.volume_saturation) if self.volume_saturation else 1.0
        composite = (
            summary.avg_accuracy / 100 * b["accuracy"]
            + summary.best_match / self.pick_count * b["best_match"]
            + summary.excellence_rate * b["excellence"]
            + volume * b["volume"]
        )
        return composite * weight

    @staticmethod
    def match_config(algorithm: str, configs: Sequence[AlgorithmConfig]) -> AlgorithmConfig | None:
        """Exact name, then case-insensitive, then config name contained in the algorithm label."""
        lowered = algorithm.lower()
        for cfg in configs:
            if cfg.name == algorithm:
                return cfg
        for cfg in configs:
            if cfg.name.lower() == lowered:
                return cfg
        for cfg in configs:
            if cfg.name and cfg.name.lower() in lowered:
                return cfg
        return None

    def rank(
        self,
        summaries: Sequence[PerformanceSummary],
        configs: Sequence[AlgorithmConfig] = (),
    ) -> list[AlgorithmRecommendation]:
        """Score every algorithm with a track record; disabled algorithms are left out."""
        ranked = []
        for summary in summaries:
            cfg = self.match_config(summary.algorithm, configs)
            if cfg is not None and not cfg.enabled:
                continue
            weight = cfg.weight if cfg is not None else 1.0
            ranked.append(AlgorithmRecommendation(
                algorithm=summary.algorithm,
                score=self.score(summary, weight),
                weight=weight,
                metrics={
                    "avg_accuracy": summary.avg_accuracy,
                    "total_predictions": summary.total_predictions,
                    "best_match": summary.best_match,
                    "excellent_predictions": summary.excellent_predictions,
                },
                config={"parameters": cfg.parameters, "enabled": cfg.enabled} if cfg else None,
            ))
        ranked.sort(key=lambda r: (-r.score, r.algorithm))
        return ranked

    def recommend(
        self,
        summaries: Sequence[PerformanceSummary],
        configs: Sequence[AlgorithmConfig] = (),
    ) -> dict[str, Any] | None:
        """
        {"primary": ..., "alternatives": [...], "total_analyzed": n},
        or None when no enabled algorithm has a track record.
        """
        if configs and not any(c.enabled for c in configs):
            log.warning("All algorithms are disabled, no recommendation available.")
            return None
        ranked = self.rank([s for s in summaries if s.total_predictions > 0], configs)
        if not ranked:
            log.warning("No performance history, no recommendation available.")
            return None
        log.info(f"Best algorithm: {ranked[0].algorithm} (score={ranked[0].score:.3f})")
        return {
            "primary": ranked[0],
            "alternatives": ranked[1: 1 + self.alternatives],
            "total_analyzed": len(ranked),
        }

    # ── Consensus ─────────────────────────────────────────────────

    def select_top(self, predictions: Sequence[AlgorithmPrediction]) -> list[AlgorithmPrediction]:
        """Ranked copies of the most accurate predictions; the inputs are left untouched."""
        top = sorted(predictions, key=lambda p: -p.recent_accuracy)[: self.consensus_algorithms]
        return [replace(pred, rank=rank) for rank, pred in enumerate(top, start=1)]

    def consensus(self, predictions: Sequence[AlgorithmPrediction]) -> ConsensusResult:
        """votes[n] += recent_accuracy for each number each top algorithm predicts."""
        top = self.select_top(predictions)
        if not top:
            return ConsensusResult(numbers=[], confidence=0.0, agreement_score=0.0)

        votes: dict[int, float] = {}
        for pred in top:
            for num in pred.numbers:
                votes[num] = votes.get(num, 0.0) + pred.recent_accuracy

        chosen = sorted(votes, key=lambda n: (-votes[n], n))[: self.pick_count]
        total = sum(votes.values())
        agreement = sum(votes[n] for n in chosen) / total * 100 if total > 0 else 0.0
        confidence = sum(p.recent_accuracy for p in top) / len(top)
        return ConsensusResult(numbers=chosen, confidence=confidence, agreement_score=agreement)

    # ── Weight tuning ─────────────────────────────────────────────

    @staticmethod
    def optimal_weight(summary: PerformanceSummary, saturation: int = 50) -> float:
        """Weight in [0.1, 2.0] that grows with accuracy, best match and volume of evidence."""
        confidence_factor = min(1.0, summary.total_predictions / saturation)
        base = (
            summary.avg_accuracy / 100 * 0.4
            + summary.best_match / 5 * 0.3
            + summary.excellence_rate * 0.3
        )
        weight = max(TUNED_WEIGHT_MIN, min(TUNED_WEIGHT_MAX, 0.5 + base * 1.5 * confidence_factor))
        return round(weight, 2)
