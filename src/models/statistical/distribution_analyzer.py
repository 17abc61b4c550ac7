"""
src/models/statistical/distribution_analyzer.py
Shape of the draws: decade bands, even/odd split, sums, weekday patterns,
consecutive numbers.
"""
from __future__ import annotations

from collections import Counter
from typing import Any, Sequence

from src.models.statistical.cooccurrence_analyzer import CoOccurrenceAnalyzer
from src.models.types import Draw, numbers_of

DECADE_BANDS: dict[str, tuple[int, int]] = {
    f"{lo}-{lo + 9}": (lo, lo + 9) for lo in range(1, 90, 10)
}


class DistributionAnalyzer:
    """Descriptive statistics over a draw history."""

    def __init__(self, bands: dict[str, tuple[int, int]] | None = None):
        self.bands = bands or DECADE_BANDS

    def get_band(self, num: int) -> str | None:
        for label, (lo, hi) in self.bands.items():
            if lo <= num <= hi:
                return label
        return None

    def band_distribution(self, history: Sequence) -> list[dict[str, Any]]:
        counter: Counter = Counter()
        total = 0
        for draw in history:
            for num in numbers_of(draw):
                total += 1
                band = self.get_band(num)
                if band:
                    counter[band] += 1
        return [
            {
                "range": label,
                "count": counter.get(label, 0),
                "percentage": counter.get(label, 0) / total * 100 if total else 0.0,
            }
            for label in self.bands
        ]

    def even_odd(self, history: Sequence) -> dict[str, int]:
        even = sum(1 for draw in history for n in numbers_of(draw) if n % 2 == 0)
        odd = sum(1 for draw in history for n in numbers_of(draw) if n % 2 == 1)
        return {"even": even, "odd": odd}

    def sum_analysis(self, history: Sequence) -> dict[str, float]:
        sums = sorted(sum(numbers_of(draw)) for draw in history)
        if not sums:
            return {"min": 0, "max": 0, "average": 0.0, "median": 0}
        return {
            "min": sums[0],
            "max": sums[-1],
            "average": sum(sums) / len(sums),
            # upper median, as displayed on the statistics page
            "median": sums[len(sums) // 2],
        }

    def consecutive_presence(self, history: Sequence) -> dict[str, int]:
        has = 0
        for draw in history:
            nums = sorted(numbers_of(draw))
            if any(b - a == 1 for a, b in zip(nums, nums[1:])):
                has += 1
        return {"has_consecutive": has, "no_consecutive": len(history) - has}

    def temporal_patterns(self, draws: Sequence[Draw], most_common: int = 5) -> list[dict[str, Any]]:
        """Average sum and most common numbers per draw weekday."""
        groups: dict[str, list[Sequence[int]]] = {}
        for draw in draws:
            groups.setdefault(draw.draw_day or "Unknown", []).append(draw.winning_numbers)

        patterns = []
        for day, day_draws in groups.items():
            counts = Counter(n for nums in day_draws for n in nums)
            ranked = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
            patterns.append({
                "day": day,
                "average_sum": sum(sum(nums) for nums in day_draws) / len(day_draws),
                "draw_count": len(day_draws),
                "most_common": [n for n, _ in ranked[:most_common]],
            })
        return patterns

    def advanced_statistics(self, draws: Sequence[Draw], top_n: int = 10) -> dict[str, Any]:
        if not draws:
            return {
                "top_pairs": [],
                "top_triplets": [],
                "even_odd_ratio": {"even": 0, "odd": 0},
                "range_distribution": [],
                "sum_analysis": self.sum_analysis([]),
                "temporal_patterns": [],
                "consecutive_numbers": {"has_consecutive": 0, "no_consecutive": 0},
            }
        co = CoOccurrenceAnalyzer()
        return {
            "top_pairs": co.top_pairs(draws, limit=top_n),
            "top_triplets": co.top_triplets(draws, limit=top_n),
            "even_odd_ratio": self.even_odd(draws),
            "range_distribution": self.band_distribution(draws),
            "sum_analysis": self.sum_analysis(draws),
            "temporal_patterns": self.temporal_patterns(draws),
            "consecutive_numbers": self.consecutive_presence(draws),
        }
