"""
src/models/strategies/backtest.py
Replay a strategy over past draws: train on the `window` draws before each
target, predict, count matches. Only earlier draws are ever seen.
"""
from __future__ import annotations

from typing import Sequence

import numpy as np

from src.models.performance import evaluate_prediction, summarize_performance
from src.models.strategies.base import Strategy
from src.models.types import (
    AlgorithmPerformanceRecord,
    BacktestResult,
    Draw,
    PerformanceSummary,
    numbers_of,
)
from src.utils.logger import get_logger

log = get_logger("strategy.backtest")


def backtest(
    strategy: Strategy,
    history: Sequence[Draw | Sequence[int]],
    window: int = 50,
    max_tests: int = 20,
) -> BacktestResult:
    """
    History is most-recent-first. Targets are the `max_tests` most recent draws
    that have a full `window` of older draws behind them. A strategy that
    cannot predict (too little data) scores 0 matches for that target.
    """
    chronological = list(reversed(history))
    start = max(window, len(chronological) - max_tests)

    records: list[AlgorithmPerformanceRecord] = []
    for i in range(start, len(chronological)):
        training = chronological[i - window: i][::-1]
        target = chronological[i]
        prediction = strategy.predict(training)
        predicted = prediction.numbers if prediction is not None else ()
        scored = evaluate_prediction(predicted, numbers_of(target))
        records.append(AlgorithmPerformanceRecord(
            algorithm=strategy.name,
            draw_name=target.draw_name if isinstance(target, Draw) else "",
            prediction_date="",
            draw_date=target.draw_date.isoformat() if isinstance(target, Draw) else str(i),
            predicted_numbers=tuple(predicted),
            winning_numbers=tuple(numbers_of(target)),
            match_count=int(scored["match_count"]),
            accuracy_score=scored["accuracy"],
        ))

    if not records:
        log.debug(f"Backtest {strategy.name}: {len(chronological)} draws, nothing to test with window={window}")
        return BacktestResult(
            algorithm=strategy.name,
            total_tests=0,
            avg_matches=0.0,
            accuracy=0.0,
            best_match=0,
            worst_match=0,
            consistency=0.0,
            summary=PerformanceSummary(algorithm=strategy.name),
        )

    matches = np.array([r.match_count for r in records])
    avg = float(matches.mean())
    result = BacktestResult(
        algorithm=strategy.name,
        total_tests=len(records),
        avg_matches=avg,
        accuracy=avg / strategy.pick_count * 100,
        best_match=int(matches.max()),
        worst_match=int(matches.min()),
        consistency=float(matches.std()),
        summary=summarize_performance(records)[strategy.name],
    )
    log.info(f"Backtest {strategy.name}: {result.total_tests} tests, avg {avg:.2f} matches, best {result.best_match}")
    return result


def backtest_all(
    strategies: Sequence[Strategy],
    history: Sequence,
    window: int = 50,
    max_tests: int = 20,
) -> list[BacktestResult]:
    return [backtest(s, history, window=window, max_tests=max_tests) for s in strategies]
