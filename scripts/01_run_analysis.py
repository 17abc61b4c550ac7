"""
scripts/01_run_analysis.py
Run every analyzer over one named draw (or all 28) and print / save the report as JSON.
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.pipeline.algorithm_selector import backtest_algorithms
from src.pipeline.analysis_report import build_analysis_report, consult_number
from src.pipeline.history_provider import DrawHistoryProvider
from src.utils.cache import TTLCache
from src.utils.config import DRAW_NAMES, get_section
from src.utils.logger import get_logger
from src.utils.rate_limit import RateLimiter

log = get_logger("run_analysis")


def main():
    parser = argparse.ArgumentParser(description="Draw statistics report")
    parser.add_argument("--draw", choices=DRAW_NAMES + ["all"], default="all")
    parser.add_argument("--limit", type=int, default=100, help="Draws to analyze (10-1000)")
    parser.add_argument("--number", type=int, default=None, help="Consult a single number (1-90)")
    parser.add_argument("--backtest", action="store_true", help="Backtest the built-in strategies instead")
    parser.add_argument("--output", default=None, help="Directory for JSON reports")
    args = parser.parse_args()

    limits = get_section("rate_limit")
    provider = DrawHistoryProvider(
        cache=TTLCache(max_size=len(DRAW_NAMES)),
        rate_limiter=RateLimiter(
            max_requests=limits.get("max_requests", 10),
            window=limits.get("window_seconds", 60),
        ),
    )
    targets = DRAW_NAMES if args.draw == "all" else [args.draw]

    summary = []
    for name in targets:
        if args.backtest:
            report = backtest_algorithms(name, limit=args.limit, provider=provider)
        elif args.number is not None:
            report = consult_number(name, args.number, limit=args.limit, provider=provider)
        else:
            report = build_analysis_report(name, limit=args.limit, provider=provider)
        summary.append((name, report))

        if args.output:
            out_dir = Path(args.output)
            out_dir.mkdir(parents=True, exist_ok=True)
            path = out_dir / f"{name.replace(' ', '_').lower()}.json"
            with open(path, "w", encoding="utf-8") as f:
                json.dump(report, f, ensure_ascii=False, indent=2)
            log.info(f"Report saved to {path}")
        elif len(targets) == 1:
            print(json.dumps(report, ensure_ascii=False, indent=2))

    print("\n" + "=" * 60)
    print("ANALYSIS SUMMARY")
    print("=" * 60)
    for name, r in summary:
        if r.get("success"):
            print(f"  {name:18s} | draws={r.get('history_length', r.get('total_draws', 0)):4d} | anomalies={len(r.get('anomalies', [])):2d}")
        else:
            print(f"  {name:18s} | FAILED: {r.get('error')}")
    print("=" * 60)


if __name__ == "__main__":
    main()
