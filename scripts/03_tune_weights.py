"""
scripts/03_tune_weights.py
Recompute algorithm weights from rankings and write them to algorithm_config.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.pipeline.weight_tuner import tune_weights
from src.utils.config import DRAW_NAMES
from src.utils.logger import get_logger

log = get_logger("tune_weights")


def main():
    parser = argparse.ArgumentParser(description="Auto-tune algorithm weights")
    parser.add_argument("--draw", choices=DRAW_NAMES, default=None, help="Use one draw's rankings only")
    parser.add_argument("--dry-run", action="store_true", help="Compute only, no DB writes")
    args = parser.parse_args()

    result = tune_weights(args.draw, dry_run=args.dry_run)
    if not result["success"]:
        log.warning(result["message"])
        return

    for r in result["results"]:
        print(f"  {r['algorithm']:30s} | {r['previous_weight']:.2f} → {r['new_weight']:.2f} ({r['improvement']:+.1f}%)")
    log.info(result["message"])


if __name__ == "__main__":
    main()
