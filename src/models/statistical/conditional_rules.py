"""
src/models/statistical/conditional_rules.py
"If X comes out, Y tends to come out too" rules, and recency-weighted winning pairs.
"""
from __future__ import annotations

import math
from collections import Counter
from datetime import date
from itertools import combinations, permutations
from typing import Any, Sequence

from src.models.types import ConditionalRule, Draw, WinningCombination, numbers_of
from src.utils.logger import get_logger

log = get_logger("stats.conditional")


class ConditionalRuleMiner:

    def __init__(
        self,
        min_draws: int = 10,
        min_probability: float = 40.0,
        high_confidence: float = 70.0,
        medium_confidence: float = 50.0,
        max_rules: int = 10,
        max_combinations: int = 8,
        decay_days: float = 30.0,
    ):
        self.min_draws = min_draws
        self.min_probability = min_probability
        self.high_confidence = high_confidence
        self.medium_confidence = medium_confidence
        self.max_rules = max_rules
        self.max_combinations = max_combinations
        self.decay_days = decay_days

    def classify(self, probability: float) -> str:
        if probability >= self.high_confidence:
            return "high"
        if probability >= self.medium_confidence:
            return "medium"
        return "low"

    def find_rules(self, history: Sequence[Draw | Sequence[int]]) -> list[ConditionalRule]:
        """
        P(b | a) = draws containing a and b / draws containing a * 100,
        for every ordered pair seen together at least once.
        """
        if len(history) < self.min_draws:
            return []

        single: Counter = Counter()
        joint: Counter = Counter()
        for draw in history:
            nums = set(numbers_of(draw))
            single.update(nums)
            joint.update(permutations(nums, 2))

        rules = []
        for (a, b), together in joint.items():
            probability = together / single[a] * 100
            if probability < self.min_probability:
                continue
            rules.append(
                ConditionalRule(
                    condition=a,
                    consequence=b,
                    probability=probability,
                    occurrences=together,
                    confidence=self.classify(probability),
                )
            )

        rules.sort(key=lambda r: (-r.probability, -r.occurrences, r.condition, r.consequence))
        return rules[: self.max_rules]

    def find_winning_combinations(
        self, draws: Sequence[Draw], today: date | None = None
    ) -> list[WinningCombination]:
        """
        Unordered pairs scored by share of draws (%) times exp(-days_since_last_seen / decay_days).
        """
        if len(draws) < self.min_draws:
            return []
        today = today or date.today()

        counts: Counter = Counter()
        last_seen: dict[tuple[int, int], date] = {}
        for draw in draws:
            for pair in combinations(sorted(draw.winning_numbers), 2):
                counts[pair] += 1
                if pair not in last_seen or draw.draw_date > last_seen[pair]:
                    last_seen[pair] = draw.draw_date

        n_draws = len(draws)
        combos = []
        for pair, count in counts.items():
            days_since = (today - last_seen[pair]).days
            share = count / n_draws * 100
            combos.append(
                WinningCombination(
                    numbers=pair,
                    frequency=count,
                    last_seen=last_seen[pair],
                    score=share * math.exp(-days_since / self.decay_days),
                )
            )

        combos.sort(key=lambda c: (-c.score, c.numbers))
        return combos[: self.max_combinations]

    def mine(self, draws: Sequence[Draw], today: date | None = None) -> dict[str, Any]:
        rules = self.find_rules(draws)
        combinations_ = self.find_winning_combinations(draws, today=today)
        log.debug(f"Mined {len(rules)} rules, {len(combinations_)} combinations from {len(draws)} draws")
        return {"rules": rules, "combinations": combinations_}
