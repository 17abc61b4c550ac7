"""
src/models/statistical/cooccurrence_analyzer.py
Which numbers come out together, and which numbers follow a number in the next draw.
"""
from __future__ import annotations

from collections import Counter
from itertools import combinations
from typing import Sequence

from src.models.types import Association, Draw, numbers_of


def _top(counter: Counter, top_k: int) -> list[Association]:
    # count desc, number asc: stable across runs
    ranked = sorted(counter.items(), key=lambda kv: (-kv[1], kv[0]))
    return [Association(number=n, count=c) for n, c in ranked[:top_k]]


class CoOccurrenceAnalyzer:
    """Same-draw and next-draw association counts over a draw history."""

    def __init__(self, number_range: tuple[int, int] = (1, 90), top_k: int = 10):
        self.lo, self.hi = number_range
        self.top_k = top_k

    def same_draw_counts(self, number: int, history: Sequence[Draw | Sequence[int]]) -> Counter:
        counts: Counter = Counter()
        for draw in history:
            nums = numbers_of(draw)
            if number in nums:
                counts.update(n for n in nums if n != number)
        return counts

    def same_draw_associations(
        self, number: int, history: Sequence[Draw | Sequence[int]], top_k: int | None = None
    ) -> list[Association]:
        return _top(self.same_draw_counts(number, history), top_k or self.top_k)

    def next_draw_associations(
        self, number: int, history: Sequence[Draw | Sequence[int]], top_k: int | None = None
    ) -> list[Association]:
        """
        History is most-recent-first; it is walked oldest-first so that
        draw[i+1] is the draw that came after draw[i].
        """
        if len(history) < 2:
            return []
        chronological = list(reversed(history))
        counts: Counter = Counter()
        for current, following in zip(chronological, chronological[1:]):
            if number in numbers_of(current):
                counts.update(numbers_of(following))
        return _top(counts, top_k or self.top_k)

    def pair_counts(self, history: Sequence[Draw | Sequence[int]]) -> dict[int, Counter]:
        """Symmetric co-count map: pair_counts[a][b] == pair_counts[b][a]."""
        matrix: dict[int, Counter] = {}
        for draw in history:
            for a, b in combinations(numbers_of(draw), 2):
                matrix.setdefault(a, Counter())[b] += 1
                matrix.setdefault(b, Counter())[a] += 1
        return matrix

    def top_pairs(self, history: Sequence, limit: int = 10) -> list[dict]:
        counts: Counter = Counter()
        for draw in history:
            counts.update(combinations(sorted(numbers_of(draw)), 2))
        ranked = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))[:limit]
        return [{"pair": list(pair), "frequency": c} for pair, c in ranked]

    def top_triplets(self, history: Sequence, limit: int = 10) -> list[dict]:
        counts: Counter = Counter()
        for draw in history:
            counts.update(combinations(sorted(numbers_of(draw)), 3))
        ranked = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))[:limit]
        return [{"triplet": list(triplet), "frequency": c} for triplet, c in ranked]

    def cross_draw_correlation(
        self,
        series_a: Sequence[Draw | Sequence[int]],
        series_b: Sequence[Draw | Sequence[int]],
        top_k: int = 20,
        proximity: int = 5,
        min_correlation: float = 0.1,
    ) -> list[dict]:
        """
        Correlate two draw series (e.g. the 13:00 and 18:15 draws) aligned by index.
        A number scores 1 when it appears in both draws of a pair, and 0.5 on each
        side for every near miss within `proximity`.
        """
        n_pairs = min(len(series_a), len(series_b))
        if n_pairs == 0:
            return []

        common = {n: 0 for n in range(self.lo, self.hi + 1)}
        near = {n: 0.0 for n in range(self.lo, self.hi + 1)}
        for i in range(n_pairs):
            nums_a = numbers_of(series_a[i])
            nums_b = numbers_of(series_b[i])
            for a in nums_a:
                if a in nums_b and a in common:
                    common[a] += 1
                for b in nums_b:
                    if a != b and abs(a - b) <= proximity:
                        if a in near:
                            near[a] += 0.5
                        if b in near:
                            near[b] += 0.5

        rows = [
            {
                "number": n,
                "correlation": (common[n] + near[n]) / n_pairs,
                "common_appearances": common[n],
                "proximity_score": near[n],
            }
            for n in common
        ]
        rows = [r for r in rows if r["correlation"] > min_correlation]
        rows.sort(key=lambda r: (-r["correlation"], r["number"]))
        return rows[:top_k]
