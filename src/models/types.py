"""
src/models/types.py
Records passed between the store adapter, the analyzers and the pipeline.
"""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Sequence

WEIGHT_MIN = 0.0
WEIGHT_MAX = 2.0


def _to_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    # draw_date may come back as "2024-03-01" or "2024-03-01T00:00:00+00:00"
    return date.fromisoformat(str(value)[:10])


@dataclass(frozen=True)
class Draw:
    draw_name: str
    draw_date: date
    winning_numbers: tuple[int, ...]
    draw_day: str | None = None
    machine_numbers: tuple[int, ...] | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Draw":
        machine = row.get("machine_numbers")
        return cls(
            draw_name=row["draw_name"],
            draw_date=_to_date(row["draw_date"]),
            winning_numbers=tuple(row["winning_numbers"]),
            draw_day=row.get("draw_day"),
            machine_numbers=tuple(machine) if machine else None,
        )


def numbers_of(item: Draw | Sequence[int]) -> Sequence[int]:
    """Winning numbers of a Draw, or the item itself for raw number lists."""
    if isinstance(item, Draw):
        return item.winning_numbers
    return item


@dataclass
class NumberFrequency:
    number: int
    frequency: int
    last_appearance_index: float  # math.inf when never seen
    appearance_rate: float

    @property
    def never_seen(self) -> bool:
        return math.isinf(self.last_appearance_index)


@dataclass
class NumberStatistic:
    draw_name: str
    number: int
    frequency: int
    last_appearance: date | None
    days_since_last: int | None
    draws_since_last: int | None
    appearance_rate: float


@dataclass
class Association:
    number: int
    count: int


@dataclass
class ConditionalRule:
    condition: int
    consequence: int
    probability: float
    occurrences: int
    confidence: str  # "high" | "medium" | "low"


@dataclass
class WinningCombination:
    numbers: tuple[int, int]
    frequency: int
    last_seen: date
    score: float


@dataclass
class Anomaly:
    type: str  # unusual_pattern | randomness_issue | frequency_spike | suspicious_draw
    severity: str  # low | medium | high
    description: str
    score: float
    draw_date: date | None = None
    numbers: tuple[int, ...] = ()


@dataclass
class NumberHeat:
    number: int
    temperature: str  # hot | warm | cold | frozen
    score: float
    last_seen: float
    frequency: float


@dataclass
class AlgorithmConfig:
    name: str
    enabled: bool = True
    weight: float = 1.0
    parameters: dict[str, Any] = field(default_factory=dict)
    description: str | None = None

    def __post_init__(self) -> None:
        self.weight = max(WEIGHT_MIN, min(WEIGHT_MAX, float(self.weight)))

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "AlgorithmConfig":
        weight = row.get("weight")
        return cls(
            name=row["algorithm_name"],
            enabled=bool(row.get("is_enabled", True)),
            weight=1.0 if weight is None else weight,
            parameters=row.get("parameters") or {},
            description=row.get("description"),
        )


@dataclass
class AlgorithmPerformanceRecord:
    algorithm: str
    draw_name: str
    prediction_date: str
    draw_date: str
    predicted_numbers: tuple[int, ...]
    winning_numbers: tuple[int, ...]
    match_count: int
    accuracy_score: float

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "AlgorithmPerformanceRecord":
        return cls(
            algorithm=row["model_used"],
            draw_name=row.get("draw_name", ""),
            prediction_date=str(row.get("prediction_date", "")),
            draw_date=str(row.get("draw_date", "")),
            predicted_numbers=tuple(row.get("predicted_numbers") or ()),
            winning_numbers=tuple(row.get("winning_numbers") or ()),
            match_count=int(row.get("matches_count", 0)),
            accuracy_score=float(row.get("accuracy_score", 0.0)),
        )


@dataclass
class PerformanceSummary:
    algorithm: str
    total_predictions: int = 0
    avg_accuracy: float = 0.0
    total_matches: int = 0
    good_predictions: int = 0
    excellent_predictions: int = 0
    perfect_predictions: int = 0
    best_match: int = 0

    @property
    def excellence_rate(self) -> float:
        if self.total_predictions <= 0:
            return 0.0
        return self.excellent_predictions / self.total_predictions

    @classmethod
    def from_ranking_row(cls, row: dict[str, Any]) -> "PerformanceSummary":
        """Build from an algorithm_rankings view row (NULL columns read as 0)."""
        return cls(
            algorithm=row.get("model_used") or "",
            total_predictions=int(row.get("total_predictions") or 0),
            avg_accuracy=float(row.get("avg_accuracy") or 0.0),
            total_matches=int(row.get("total_matches") or 0),
            good_predictions=int(row.get("good_predictions") or 0),
            excellent_predictions=int(row.get("excellent_predictions") or 0),
            perfect_predictions=int(row.get("perfect_predictions") or 0),
            best_match=int(row.get("best_match") or 0),
        )


@dataclass
class AlgorithmRecommendation:
    algorithm: str
    score: float
    weight: float
    metrics: dict[str, float]
    config: dict[str, Any] | None = None


@dataclass
class AlgorithmPrediction:
    algorithm: str
    numbers: tuple[int, ...]
    recent_accuracy: float
    confidence: float = 0.0
    rank: int = 0


@dataclass
class ConsensusResult:
    numbers: list[int]
    confidence: float
    agreement_score: float


@dataclass
class StrategyPrediction:
    algorithm: str
    numbers: tuple[int, ...]
    confidence: float
    factors: tuple[str, ...] = ()


@dataclass
class BacktestResult:
    algorithm: str
    total_tests: int
    avg_matches: float
    accuracy: float  # avg_matches / 5 * 100
    best_match: int
    worst_match: int
    consistency: float  # std of match counts, lower is steadier
    summary: PerformanceSummary


def to_plain(obj: Any) -> Any:
    """Dataclasses / dates / tuples → JSON-friendly dicts, strings and lists."""
    if hasattr(obj, "__dataclass_fields__"):
        return to_plain(asdict(obj))
    if isinstance(obj, dict):
        return {k: to_plain(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_plain(v) for v in obj]
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, float) and math.isinf(obj):
        return None
    return obj
