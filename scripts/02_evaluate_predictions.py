"""
scripts/02_evaluate_predictions.py
Score stored predictions against real draws (idempotent upsert into algorithm_performance).
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.pipeline.algorithm_selector import select_best_algorithm
from src.pipeline.prediction_evaluator import evaluate_predictions
from src.utils.config import DRAW_NAMES
from src.utils.logger import get_logger

log = get_logger("evaluate_predictions")


def main():
    parser = argparse.ArgumentParser(description="Evaluate predictions against draw results")
    parser.add_argument("--draw", choices=DRAW_NAMES, default=None, help="Limit to one draw name")
    parser.add_argument("--select", action="store_true", help="Print the best algorithm afterwards")
    args = parser.parse_args()

    result = evaluate_predictions(args.draw)
    if not result["success"]:
        log.error(result.get("error"))
        sys.exit(1)

    print("\n" + "=" * 60)
    print("EVALUATION SUMMARY")
    print("=" * 60)
    print(f"  evaluated={result['evaluated_count']} new={result['new_evaluations']} errors={result['errors']}")
    for algo, s in result.get("algorithm_stats", {}).items():
        print(f"  {algo:40s} | n={s['evaluated']:4d} | best={s['best_match']}/5 | avg={s['avg_accuracy']:.2f}%")
    print("=" * 60)

    if args.select and args.draw:
        best = select_best_algorithm(args.draw)
        if best["success"]:
            primary = best["recommendation"]["primary"]
            print(f"Best algorithm for {args.draw}: {primary['algorithm']} (score={primary['score']:.3f})")
        else:
            print(best["message"])


if __name__ == "__main__":
    main()
