"""
src/pipeline/weight_tuner.py
Re-derive algorithm weights from their rankings and record each change.
"""
from __future__ import annotations

from typing import Any

from src.models.strategy_aggregator import MultiStrategyAggregator
from src.models.types import AlgorithmConfig, PerformanceSummary
from src.utils import supabase_client as db
from src.utils.logger import get_logger

log = get_logger("pipeline.tuner")


def tune_weights(draw_name: str | None = None, dry_run: bool = False) -> dict[str, Any]:
    """
    1. Load rankings (one draw name, or all)
    2. optimal_weight() per algorithm
    3. Upsert algorithm_config (enabled iff it has predictions)
    4. Log old → new weight in algorithm_training_history
    """
    log.info(f"[TUNE] {draw_name or 'all draws'} dry_run={dry_run}")

    rows = db.get_algorithm_rankings(draw_name=draw_name)
    if not rows:
        msg = "No performance data available for tuning"
        log.warning(msg)
        return {"success": False, "message": msg, "results": []}

    current = {c.name: c for c in (AlgorithmConfig.from_row(r) for r in db.get_algorithm_configs())}

    results = []
    for row in rows:
        summary = PerformanceSummary.from_ranking_row(row)
        if not summary.algorithm:
            continue
        cfg = MultiStrategyAggregator.match_config(summary.algorithm, list(current.values()))
        name = cfg.name if cfg else summary.algorithm
        old_weight = cfg.weight if cfg else 1.0
        new_weight = MultiStrategyAggregator.optimal_weight(summary)
        improvement = (new_weight - old_weight) / max(old_weight, 0.01) * 100

        if not dry_run:
            try:
                db.upsert_algorithm_config({
                    "algorithm_name": name,
                    "weight": new_weight,
                    "parameters": cfg.parameters if cfg else {},
                    "is_enabled": summary.total_predictions > 0,
                    "description": f"Auto-tuned from {summary.total_predictions} predictions",
                    "updated_at": db.now_iso(),
                })
            except Exception as exc:
                log.error(f"Config update failed for {name}: {exc}")
                continue
            db.insert_training_history({
                "algorithm_name": name,
                "previous_weight": old_weight,
                "new_weight": new_weight,
                "performance_improvement": improvement,
                "training_metrics": {
                    "avg_accuracy": summary.avg_accuracy,
                    "total_predictions": summary.total_predictions,
                    "best_match": summary.best_match,
                    "excellent_predictions": summary.excellent_predictions,
                },
            })

        log.info(f"Tuned {name}: weight {old_weight:.2f} → {new_weight:.2f} ({improvement:+.1f}%)")
        results.append({
            "algorithm": name,
            "display_name": summary.algorithm,
            "previous_weight": old_weight,
            "new_weight": new_weight,
            "improvement": improvement,
        })

    return {
        "success": True,
        "message": f"Tuned {len(results)} algorithms",
        "dry_run": dry_run,
        "results": results,
    }
