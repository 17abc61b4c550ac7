"""
src/pipeline/algorithm_selector.py
Pick the best prediction algorithm for a draw and build the multi-algorithm consensus.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from src.models.analyzer_loader import AnalyzerSuite, load_analyzers
from src.models.performance import dynamic_confidence
from src.models.strategies.backtest import backtest_all
from src.models.strategy_aggregator import MultiStrategyAggregator
from src.models.types import AlgorithmPrediction, to_plain
from src.pipeline.history_provider import DrawHistoryProvider
from src.utils.logger import get_logger
from src.utils.rate_limit import RateLimitExceeded

log = get_logger("pipeline.selector")


def _aggregator(aggregator: MultiStrategyAggregator | None) -> MultiStrategyAggregator:
    return aggregator or load_analyzers().aggregator


def backtest_algorithms(
    draw_name: str,
    limit: int = 100,
    provider: DrawHistoryProvider | None = None,
    suite: AnalyzerSuite | None = None,
) -> dict[str, Any]:
    """Replay every built-in strategy over the draw history, best accuracy first."""
    provider = provider or DrawHistoryProvider()
    suite = suite or load_analyzers()
    try:
        draws = provider.get_history(draw_name, limit=limit)
    except (ValueError, RateLimitExceeded) as exc:
        log.warning(str(exc))
        return {"success": False, "error": str(exc), "results": []}

    results = backtest_all(suite.strategies, draws, **suite.backtest)
    results.sort(key=lambda r: (-r.accuracy, r.algorithm))
    log.info(f"[BACKTEST] {draw_name}: {len(draws)} draws, {len(results)} strategies")
    return to_plain({"success": True, "draw_name": draw_name, "history_length": len(draws), "results": results})


def select_best_algorithm(
    draw_name: str,
    aggregator: MultiStrategyAggregator | None = None,
    provider: DrawHistoryProvider | None = None,
    suite: AnalyzerSuite | None = None,
) -> dict[str, Any]:
    """
    1. Rankings for this draw; fall back to global rankings when there are none
    2. No stored rankings at all: backtest the built-in strategies instead
    3. Algorithm configs (weights, enabled flags)
    4. Weighted score → primary + alternatives
    """
    log.info(f"[SELECT] {draw_name}")
    provider = provider or DrawHistoryProvider()
    if aggregator is None:
        suite = suite or load_analyzers()
        aggregator = suite.aggregator

    summaries = provider.fetch_rankings(draw_name=draw_name)
    source = "draw"
    if not summaries:
        log.info("No draw-specific rankings, using global rankings")
        summaries = provider.fetch_rankings(global_only=True)
        source = "global"
    if not summaries:
        log.info("No stored rankings, falling back to backtest")
        suite = suite or load_analyzers()
        try:
            draws = provider.get_history(draw_name)
        except (ValueError, RateLimitExceeded) as exc:
            log.warning(str(exc))
            draws = []
        summaries = [
            r.summary for r in backtest_all(suite.strategies, draws, **suite.backtest) if r.total_tests > 0
        ]
        source = "backtest"

    configs = provider.fetch_algorithm_configs()
    recommendation = aggregator.recommend(summaries, configs)
    if recommendation is None:
        return {
            "success": False,
            "draw_name": draw_name,
            "message": "No recommendation available",
            "recommendation": None,
        }

    return to_plain({
        "success": True,
        "draw_name": draw_name,
        "recommendation": {
            "primary": recommendation["primary"],
            "alternatives": recommendation["alternatives"],
        },
        "using_global_data": source == "global",
        "source": source,
        "total_algorithms_analyzed": recommendation["total_analyzed"],
        "timestamp": datetime.now(timezone.utc).isoformat(),
    })


def compare_algorithms(
    draw_name: str,
    aggregator: MultiStrategyAggregator | None = None,
    performance_limit: int = 50,
    prediction_limit: int = 10,
    provider: DrawHistoryProvider | None = None,
) -> dict[str, Any]:
    """Top algorithms by recent accuracy with their latest picks, plus the vote consensus."""
    aggregator = _aggregator(aggregator)
    provider = provider or DrawHistoryProvider()

    predictions = provider.fetch_recent_predictions(draw_name, limit=prediction_limit)
    # evaluation order: the most recently scored rows
    performance = provider.fetch_performance_history(
        draw_name=draw_name, limit=performance_limit, order_by="created_at"
    )

    scores: dict[str, list[float]] = {}
    for record in performance:
        scores.setdefault(record.algorithm, []).append(record.accuracy_score)

    candidates = []
    for algo, accs in scores.items():
        latest = next((p for p in predictions if p.get("model_used") == algo), None)
        candidates.append(AlgorithmPrediction(
            algorithm=algo,
            numbers=tuple(latest["predicted_numbers"]) if latest else (),
            recent_accuracy=sum(accs) / len(accs),
            confidence=float(latest.get("confidence_score") or 0.0) if latest else 0.0,
        ))

    top = aggregator.select_top(candidates)
    consensus = aggregator.consensus(top)
    log.info(f"[COMPARE] {draw_name}: consensus {consensus.numbers} ({consensus.agreement_score:.1f}% agreement)")
    return to_plain({"success": True, "top_algorithms": top, "consensus": consensus})


def get_dynamic_confidence(
    draw_name: str,
    limit: int = 10,
    provider: DrawHistoryProvider | None = None,
) -> dict[str, Any]:
    provider = provider or DrawHistoryProvider()
    records = provider.fetch_performance_history(draw_name=draw_name, limit=limit)
    return dynamic_confidence([r.accuracy_score for r in records])
