"""
src/models/performance.py
Score predictions against real draws and roll the results up per algorithm.
"""
from __future__ import annotations

from typing import Any, Iterable, Sequence

from src.models.types import AlgorithmPerformanceRecord, Draw, PerformanceSummary
from src.utils.config import PICK_COUNT


def evaluate_prediction(
    predicted: Sequence[int],
    winning: Sequence[int],
    expected_count: int = PICK_COUNT,
) -> dict[str, float]:
    """
    match_count = |predicted ∩ winning|, accuracy = match_count / 5 * 100.
    precision/recall/f1 are stored alongside for the admin dashboard.
    """
    if not predicted or not winning:
        return {"match_count": 0, "accuracy": 0.0, "precision": 0.0, "recall": 0.0, "f1": 0.0}

    matches = len(set(predicted) & set(winning))
    precision = matches / len(predicted)
    recall = matches / len(winning)
    f1 = 2 * precision * recall / (precision + recall) if precision > 0 and recall > 0 else 0.0
    return {
        "match_count": matches,
        "accuracy": matches / expected_count * 100,
        "precision": precision,
        "recall": recall,
        "f1": f1,
    }


def build_performance_record(prediction: dict[str, Any], draw: Draw) -> dict[str, Any]:
    """algorithm_performance row for one (prediction, draw) evaluation."""
    scores = evaluate_prediction(prediction["predicted_numbers"], draw.winning_numbers)
    confidence = prediction.get("confidence_score")
    return {
        "draw_name": draw.draw_name,
        "model_used": prediction["model_used"],
        "prediction_date": str(prediction["prediction_date"]),
        "draw_date": draw.draw_date.isoformat(),
        "predicted_numbers": list(prediction["predicted_numbers"]),
        "winning_numbers": list(draw.winning_numbers),
        "matches_count": scores["match_count"],
        "accuracy_score": scores["accuracy"],
        "confidence_score": confidence if confidence is not None else scores["accuracy"] / 100,
        "precision_score": scores["precision"],
        "recall_score": scores["recall"],
        "f1_score": scores["f1"],
        "prediction_score": scores["accuracy"],
    }


def summarize_performance(records: Iterable[AlgorithmPerformanceRecord]) -> dict[str, PerformanceSummary]:
    """Per-algorithm totals, mirroring the algorithm_rankings view."""
    totals: dict[str, PerformanceSummary] = {}
    accuracy_sum: dict[str, float] = {}
    for rec in records:
        s = totals.setdefault(rec.algorithm, PerformanceSummary(algorithm=rec.algorithm))
        s.total_predictions += 1
        s.total_matches += rec.match_count
        s.best_match = max(s.best_match, rec.match_count)
        if rec.match_count >= 2:
            s.good_predictions += 1
        if rec.match_count >= 3:
            s.excellent_predictions += 1
        if rec.match_count == PICK_COUNT:
            s.perfect_predictions += 1
        accuracy_sum[rec.algorithm] = accuracy_sum.get(rec.algorithm, 0.0) + rec.accuracy_score

    for algo, s in totals.items():
        s.avg_accuracy = accuracy_sum[algo] / s.total_predictions
    return totals


def dynamic_confidence(accuracy_scores: Sequence[float], recent_window: int = 5) -> dict[str, Any]:
    """
    Confidence indicator from the latest accuracy scores (most recent first).
    Trend compares the newest `recent_window` scores with the older ones (±5 points).
    """
    if not accuracy_scores:
        return {
            "current_confidence": 50,
            "trend": "stable",
            "recent_accuracy": 0,
            "reliability": "low",
            "should_alert": True,
            "message": "Not enough data to assess confidence",
        }

    n = len(accuracy_scores)
    avg = sum(accuracy_scores) / n
    recent = accuracy_scores[:recent_window]
    older = accuracy_scores[recent_window:]
    recent_avg = sum(recent) / len(recent)
    older_avg = sum(older) / max(1, len(older))

    if recent_avg > older_avg + 5:
        trend = "up"
    elif recent_avg < older_avg - 5:
        trend = "down"
    else:
        trend = "stable"

    reliability = "high" if avg >= 70 else "medium" if avg >= 50 else "low"
    if avg >= 70:
        message = "Excellent performance"
    elif avg >= 60:
        message = "Stable performance"
    elif avg >= 50:
        message = "Moderate performance"
    else:
        message = "Weak performance - review needed"

    return {
        "current_confidence": round(avg),
        "trend": trend,
        "recent_accuracy": round(recent_avg),
        "reliability": reliability,
        "should_alert": avg < 60,
        "message": message,
    }
