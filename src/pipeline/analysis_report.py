"""
src/pipeline/analysis_report.py
Fetch a draw slice and run every analyzer over it; results are plain dicts for the dashboard.
"""
from __future__ import annotations

from datetime import date
from typing import Any

from src.models.analyzer_loader import AnalyzerSuite, load_analyzers
from src.models.types import to_plain
from src.pipeline.history_provider import DrawHistoryProvider
from src.utils.config import NUMBER_RANGE, get_draw_day
from src.utils.logger import get_logger
from src.utils.rate_limit import RateLimitExceeded

log = get_logger("pipeline.report")


def build_analysis_report(
    draw_name: str,
    limit: int = 100,
    provider: DrawHistoryProvider | None = None,
    suite: AnalyzerSuite | None = None,
    today: date | None = None,
) -> dict[str, Any]:
    """
    1. Load history (most recent first)
    2. Frequency / heat / co-occurrence / rules / anomalies / distribution / patterns / strategies
    3. Return a JSON-friendly dict
    """
    log.info(f"[REPORT] {draw_name} limit={limit}")
    provider = provider or DrawHistoryProvider()
    suite = suite or load_analyzers()

    try:
        draws = provider.get_history(draw_name, limit=limit)
    except (ValueError, RateLimitExceeded) as exc:
        log.warning(str(exc))
        return {"success": False, "error": str(exc)}

    if not draws:
        msg = f"No draw history for {draw_name}."
        log.warning(msg)
        return {"success": False, "error": msg}

    today = today or date.today()
    freqs = suite.frequency.get_frequencies(draws)
    patterns = suite.patterns.detect(draws)

    report = {
        "success": True,
        "draw_name": draw_name,
        "draw_day": get_draw_day(draw_name),
        "history_length": len(draws),
        "latest_draw": draws[0],
        "number_statistics": suite.frequency.build_number_statistics(draws, draw_name, today=today),
        "hot_numbers": suite.frequency.get_hot_numbers(draws),
        "cold_numbers": suite.frequency.get_cold_numbers(draws),
        "heatmap": suite.heat.get_heatmap(draws),
        "conditional": suite.conditional.mine(draws, today=today),
        "anomalies": suite.anomaly.detect(draws),
        "advanced_statistics": suite.distribution.advanced_statistics(draws),
        "patterns": patterns,
        "pattern_pick": suite.patterns.predict_from_patterns(patterns),
        "strategy_predictions": [p for p in (s.predict(draws) for s in suite.strategies) if p is not None],
    }
    total = sum(f.frequency for f in freqs.values())
    log.info(f"[REPORT] {draw_name}: {len(draws)} draws, {total} numbers, {len(report['anomalies'])} anomalies")
    return to_plain(report)


def consult_number(
    draw_name: str,
    number: int,
    limit: int = 100,
    provider: DrawHistoryProvider | None = None,
    suite: AnalyzerSuite | None = None,
    today: date | None = None,
) -> dict[str, Any]:
    """Regularity and associations of one number in one draw series."""
    lo, hi = NUMBER_RANGE
    if not lo <= number <= hi:
        return {"success": False, "error": f"Number must be in [{lo},{hi}], got {number}"}

    provider = provider or DrawHistoryProvider()
    suite = suite or load_analyzers()
    try:
        draws = provider.get_history(draw_name, limit=limit)
    except (ValueError, RateLimitExceeded) as exc:
        return {"success": False, "error": str(exc)}

    stats = {s.number: s for s in suite.frequency.build_number_statistics(draws, draw_name, today=today)}
    return to_plain({
        "success": True,
        "draw_name": draw_name,
        "number": number,
        "total_draws": len(draws),
        "statistic": stats[number],
        "associated": suite.cooccurrence.same_draw_associations(number, draws),
        "following": suite.cooccurrence.next_draw_associations(number, draws),
    })


def compare_draw_series(
    draw_name_a: str,
    draw_name_b: str,
    limit: int = 100,
    provider: DrawHistoryProvider | None = None,
    suite: AnalyzerSuite | None = None,
) -> dict[str, Any]:
    """Cross-series correlation between two named draws (e.g. the same day's 13:00 and 18:15)."""
    provider = provider or DrawHistoryProvider()
    suite = suite or load_analyzers()
    try:
        series_a = provider.get_history(draw_name_a, limit=limit)
        series_b = provider.get_history(draw_name_b, limit=limit)
    except (ValueError, RateLimitExceeded) as exc:
        return {"success": False, "error": str(exc)}

    return to_plain({
        "success": True,
        "draw_names": [draw_name_a, draw_name_b],
        "pairs_compared": min(len(series_a), len(series_b)),
        "correlations": suite.cooccurrence.cross_draw_correlation(series_a, series_b),
    })
