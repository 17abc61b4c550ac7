"""
src/models/statistical/frequency_analyzer.py
Per-number occurrence counts, recency gaps and appearance rates over a draw window.
"""
from __future__ import annotations

import math
from datetime import date, timedelta
from typing import Sequence

from src.models.types import Draw, NumberFrequency, NumberStatistic, numbers_of


class FrequencyAnalyzer:
    """Count how often and how recently each number appeared. History is most-recent-first."""

    def __init__(self, number_range: tuple[int, int] = (1, 90), window: int | None = None):
        self.lo, self.hi = number_range
        self.window = window

    def _recent(self, history: Sequence) -> Sequence:
        return history[: self.window] if self.window else history

    def get_frequencies(self, history: Sequence[Draw | Sequence[int]]) -> dict[int, NumberFrequency]:
        """
        Returns {number: NumberFrequency} for every number in range.
        Unseen numbers keep frequency 0 and last_appearance_index = inf.
        """
        recent = self._recent(history)
        counts = {n: 0 for n in range(self.lo, self.hi + 1)}
        last_index = {n: math.inf for n in range(self.lo, self.hi + 1)}

        for idx, draw in enumerate(recent):
            for num in numbers_of(draw):
                if num not in counts:
                    continue
                counts[num] += 1
                if math.isinf(last_index[num]):
                    last_index[num] = idx

        n_draws = len(recent)
        return {
            n: NumberFrequency(
                number=n,
                frequency=counts[n],
                last_appearance_index=last_index[n],
                appearance_rate=counts[n] / n_draws if n_draws else 0.0,
            )
            for n in counts
        }

    def build_number_statistics(
        self,
        draws: Sequence[Draw],
        draw_name: str,
        today: date | None = None,
    ) -> list[NumberStatistic]:
        """NumberStatistic rows, most frequent first, with calendar recency."""
        today = today or date.today()
        recent = self._recent(draws)
        freqs = self.get_frequencies(recent)

        stats: list[NumberStatistic] = []
        for n, f in freqs.items():
            if f.never_seen:
                last_date = None
                days_since = None
                draws_since = None
            else:
                idx = int(f.last_appearance_index)
                last_date = recent[idx].draw_date
                days_since = (today - last_date).days
                draws_since = idx
            stats.append(
                NumberStatistic(
                    draw_name=draw_name,
                    number=n,
                    frequency=f.frequency,
                    last_appearance=last_date,
                    days_since_last=days_since,
                    draws_since_last=draws_since,
                    appearance_rate=f.appearance_rate,
                )
            )
        return sorted(stats, key=lambda s: (-s.frequency, s.number))

    def get_hot_numbers(self, history: Sequence, top_n: int = 10) -> list[int]:
        freqs = self.get_frequencies(history)
        return sorted(freqs, key=lambda n: (-freqs[n].frequency, n))[:top_n]

    def get_cold_numbers(self, history: Sequence, bottom_n: int = 10) -> list[int]:
        """Least frequent numbers that appeared at least once."""
        freqs = self.get_frequencies(history)
        seen = [n for n in freqs if freqs[n].frequency > 0]
        return sorted(seen, key=lambda n: (freqs[n].frequency, n))[:bottom_n]

    def get_trend_series(
        self,
        draws: Sequence[Draw],
        numbers: Sequence[int],
        days: int = 30,
        today: date | None = None,
    ) -> list[dict]:
        """
        Per draw date in the last `days` days (oldest first), how many times
        each selected number was drawn: [{"date": ..., "num_7": 1, ...}, ...].
        """
        if not numbers:
            return []
        today = today or date.today()
        start = today - timedelta(days=days)

        by_date: dict[date, dict[int, int]] = {}
        for draw in draws:
            if not (start <= draw.draw_date <= today):
                continue
            counts = by_date.setdefault(draw.draw_date, {})
            for num in draw.winning_numbers:
                if num in numbers:
                    counts[num] = counts.get(num, 0) + 1

        series = []
        for d in sorted(by_date):
            entry: dict = {"date": d.isoformat()}
            for num in numbers:
                entry[f"num_{num}"] = by_date[d].get(num, 0)
            series.append(entry)
        return series
