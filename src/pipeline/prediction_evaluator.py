"""
src/pipeline/prediction_evaluator.py
Score stored predictions against the real draws and upsert algorithm_performance rows.
Re-running is idempotent: rows are keyed on (draw_name, model_used, prediction_date, draw_date).
"""
from __future__ import annotations

from typing import Any

from src.models.performance import build_performance_record
from src.models.types import Draw
from src.utils import supabase_client as db
from src.utils.logger import get_logger
from src.utils.validation import validate_draw, validate_draw_name, validate_numbers

log = get_logger("pipeline.evaluator")

MAX_EVALUATIONS_PER_RUN = 10_000


def evaluate_predictions(draw_name: str | None = None) -> dict[str, Any]:
    """
    1. Load draw results (one draw name, or all)
    2. For each draw, load predictions made on or before its date
    3. Compute match_count / accuracy and upsert the performance row
    4. Refresh algorithm_rankings
    5. Return per-algorithm summary
    """
    log.info(f"[EVALUATE] {draw_name or 'all draws'}")

    if draw_name is not None and not validate_draw_name(draw_name):
        return {"success": False, "error": f"Invalid draw name: {draw_name!r}"}

    rows = db.get_draws(draw_name)
    if not rows:
        msg = "No results found to evaluate"
        log.warning(msg)
        return {"success": True, "message": msg, "evaluated_count": 0, "new_evaluations": 0, "errors": 0}

    evaluated = 0
    new = 0
    errors = 0
    stats: dict[str, dict[str, float]] = {}

    for row in rows:
        if evaluated >= MAX_EVALUATIONS_PER_RUN:
            log.warning(f"Evaluation limit reached ({MAX_EVALUATIONS_PER_RUN})")
            break
        if not validate_draw(row):
            errors += 1
            continue

        draw = Draw.from_row(row)
        predictions = db.get_predictions_before(draw.draw_name, draw.draw_date.isoformat())
        if not predictions:
            log.debug(f"No predictions for {draw.draw_name} on/before {draw.draw_date}")
            continue

        for prediction in predictions:
            if not validate_numbers(prediction.get("predicted_numbers")):
                errors += 1
                continue

            record = build_performance_record(prediction, draw)
            existed = db.performance_exists(
                record["draw_name"], record["model_used"], record["prediction_date"], record["draw_date"]
            )
            try:
                db.upsert_performance_record(record)
            except Exception as exc:
                log.error(f"Upsert failed for {record['model_used']} @ {record['draw_date']}: {exc}")
                errors += 1
                continue

            evaluated += 1
            if not existed:
                new += 1

            algo = stats.setdefault(record["model_used"], {"evaluated": 0, "best_match": 0, "total_accuracy": 0.0})
            algo["evaluated"] += 1
            algo["best_match"] = max(algo["best_match"], record["matches_count"])
            algo["total_accuracy"] += record["accuracy_score"]

    db.refresh_algorithm_rankings()

    algorithm_stats = {
        name: {
            "evaluated": int(s["evaluated"]),
            "best_match": int(s["best_match"]),
            "avg_accuracy": s["total_accuracy"] / s["evaluated"] if s["evaluated"] else 0.0,
        }
        for name, s in stats.items()
    }
    for name, s in algorithm_stats.items():
        log.info(f"  {name}: {s['evaluated']} evaluated, best {s['best_match']}/5, avg {s['avg_accuracy']:.2f}%")

    log.info(f"[EVALUATE] {evaluated} predictions evaluated ({new} new, {errors} errors)")
    return {
        "success": True,
        "message": f"Evaluated {evaluated} predictions ({new} new)",
        "evaluated_count": evaluated,
        "new_evaluations": new,
        "errors": errors,
        "algorithm_stats": algorithm_stats,
    }
