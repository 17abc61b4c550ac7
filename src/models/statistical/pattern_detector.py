"""
src/models/statistical/pattern_detector.py
Recurring pairs, regular cycles and hot/cold streaks, ranked by confidence.
"""
from __future__ import annotations

from dataclasses import dataclass
from itertools import combinations
from typing import Sequence

import numpy as np

from src.models.types import numbers_of


@dataclass
class Pattern:
    type: str  # pair | cycle | hot | cold
    numbers: tuple[int, ...]
    frequency: float
    confidence: float
    last_seen: int
    description: str


class PatternDetector:

    def __init__(
        self,
        number_range: tuple[int, int] = (1, 90),
        min_pair_count: int = 3,
        recent_window: int = 10,
        hot_count: int = 3,
        cold_gap: int = 20,
        max_patterns: int = 10,
    ):
        self.lo, self.hi = number_range
        self.min_pair_count = min_pair_count
        self.recent_window = recent_window
        self.hot_count = hot_count
        self.cold_gap = cold_gap
        self.max_patterns = max_patterns

    def _appearances(self, history: Sequence) -> dict[int, list[int]]:
        seen: dict[int, list[int]] = {n: [] for n in range(self.lo, self.hi + 1)}
        for idx, draw in enumerate(history):
            for num in numbers_of(draw):
                if num in seen:
                    seen[num].append(idx)
        return seen

    def pair_patterns(self, history: Sequence) -> list[Pattern]:
        stats: dict[tuple[int, int], list[int]] = {}  # pair -> [count, last_idx]
        for idx, draw in enumerate(history):
            for pair in combinations(sorted(numbers_of(draw)), 2):
                entry = stats.setdefault(pair, [0, idx])
                entry[0] += 1
                entry[1] = min(entry[1], idx)

        return [
            Pattern(
                type="pair",
                numbers=pair,
                frequency=count / len(history),
                confidence=min(0.9, count / 10),
                last_seen=last_idx,
                description=f"Pair {pair[0]}-{pair[1]} ({count}x)",
            )
            for pair, (count, last_idx) in stats.items()
            if count >= self.min_pair_count
        ]

    def cycle_patterns(self, history: Sequence) -> list[Pattern]:
        """Numbers whose gaps between appearances are nearly constant."""
        cycles = []
        for num, idxs in self._appearances(history).items():
            if len(idxs) < 3:
                continue
            gaps = np.diff(idxs)
            avg_gap = float(gaps.mean())
            variance = float(gaps.var())
            if variance < avg_gap * 0.5:
                cycles.append(Pattern(
                    type="cycle",
                    numbers=(num,),
                    frequency=1 / avg_gap,
                    confidence=min(0.85, 1 / (variance + 1)),
                    last_seen=idxs[0],
                    description=f"No.{num} cycles every ~{round(avg_gap)} draws",
                ))
        return cycles

    def hot_cold_patterns(self, history: Sequence) -> list[Pattern]:
        patterns = []
        n_draws = len(history)
        for num, idxs in self._appearances(history).items():
            recent = sum(1 for i in idxs if i < self.recent_window)
            last_idx = idxs[0] if idxs else -1
            frequency = len(idxs) / n_draws
            if recent >= self.hot_count:
                patterns.append(Pattern(
                    type="hot",
                    numbers=(num,),
                    frequency=frequency,
                    confidence=recent / self.recent_window,
                    last_seen=last_idx,
                    description=f"No.{num} hot ({recent}/{self.recent_window})",
                ))
            elif last_idx > self.cold_gap:
                patterns.append(Pattern(
                    type="cold",
                    numbers=(num,),
                    frequency=frequency,
                    confidence=0.6,
                    last_seen=last_idx,
                    description=f"No.{num} cold ({last_idx} draws)",
                ))
        return patterns

    def detect(self, history: Sequence) -> list[Pattern]:
        if not history:
            return []
        patterns = (
            self.pair_patterns(history)
            + self.cycle_patterns(history)
            + self.hot_cold_patterns(history)
        )
        patterns.sort(key=lambda p: p.confidence, reverse=True)
        return patterns[: self.max_patterns]

    def predict_from_patterns(self, patterns: Sequence[Pattern], n_picks: int = 5) -> list[int]:
        scores = {n: 0.0 for n in range(self.lo, self.hi + 1)}
        for pattern in patterns:
            for num in pattern.numbers:
                if num in scores:
                    scores[num] += pattern.confidence * pattern.frequency * 10
        return sorted(scores, key=lambda n: (-scores[n], n))[:n_picks]
