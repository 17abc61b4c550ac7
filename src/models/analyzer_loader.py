"""
src/models/analyzer_loader.py
Instantiate every analyzer from the analysis tunables JSON.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from src.models.statistical.anomaly_detector import AnomalyDetector
from src.models.statistical.conditional_rules import ConditionalRuleMiner
from src.models.statistical.cooccurrence_analyzer import CoOccurrenceAnalyzer
from src.models.statistical.distribution_analyzer import DistributionAnalyzer
from src.models.statistical.frequency_analyzer import FrequencyAnalyzer
from src.models.statistical.heat_scorer import HeatScorer
from src.models.statistical.pattern_detector import PatternDetector
from src.models.strategies.base import Strategy
from src.models.strategies.bayesian import BayesianStrategy
from src.models.strategies.ensemble import EnsembleStrategy
from src.models.strategies.markov import MarkovStrategy
from src.models.strategies.variance import VarianceStrategy
from src.models.strategies.weighted_frequency import WeightedFrequencyStrategy
from src.models.strategy_aggregator import MultiStrategyAggregator
from src.utils.config import NUMBER_RANGE, PICK_COUNT, get_analysis_config
from src.utils.logger import get_logger

log = get_logger("model_loader")


@dataclass
class AnalyzerSuite:
    frequency: FrequencyAnalyzer
    cooccurrence: CoOccurrenceAnalyzer
    conditional: ConditionalRuleMiner
    anomaly: AnomalyDetector
    heat: HeatScorer
    distribution: DistributionAnalyzer
    patterns: PatternDetector
    aggregator: MultiStrategyAggregator
    strategies: list[Strategy] = field(default_factory=list)
    backtest: dict[str, int] = field(default_factory=dict)


def load_analyzers(config: dict[str, Any] | None = None) -> AnalyzerSuite:
    """
    Build the analyzers with tunables from `config` (defaults to
    config/analysis_params.json). Missing keys fall back to constructor defaults.
    """
    config = config if config is not None else get_analysis_config()
    number_range = tuple(config.get("number_range", NUMBER_RANGE))
    pick_count = config.get("pick_count", PICK_COUNT)

    co_cfg = config.get("cooccurrence", {})
    heat_cfg = config.get("heat", {})
    agg_cfg = config.get("aggregator", {})

    suite = AnalyzerSuite(
        frequency=FrequencyAnalyzer(number_range=number_range),
        cooccurrence=CoOccurrenceAnalyzer(number_range=number_range, top_k=co_cfg.get("top_k", 10)),
        conditional=ConditionalRuleMiner(**config.get("conditional", {})),
        anomaly=AnomalyDetector(number_range=number_range, **config.get("anomaly", {})),
        heat=HeatScorer(
            number_range=number_range,
            decay=heat_cfg.get("decay", 0.1),
            trend_window=heat_cfg.get("trend_window", 10),
            thresholds=heat_cfg.get("thresholds"),
        ),
        distribution=DistributionAnalyzer(),
        patterns=PatternDetector(number_range=number_range),
        aggregator=MultiStrategyAggregator(
            blend=agg_cfg.get("blend"),
            volume_saturation=agg_cfg.get("volume_saturation", 30),
            alternatives=agg_cfg.get("alternatives", 2),
            consensus_algorithms=agg_cfg.get("consensus_algorithms", 3),
            pick_count=pick_count,
        ),
        strategies=build_strategies(config),
        backtest={"window": 50, "max_tests": 20, **config.get("backtest", {})},
    )
    log.debug(f"Analyzers loaded (config v{config.get('version', '?')})")
    return suite


def build_strategies(config: dict[str, Any] | None = None) -> list[Strategy]:
    """The four base strategies followed by an ensemble over them."""
    config = config if config is not None else get_analysis_config()
    st_cfg = config.get("strategies", {})
    common = {
        "number_range": tuple(config.get("number_range", NUMBER_RANGE)),
        "pick_count": config.get("pick_count", PICK_COUNT),
        "min_draws": st_cfg.get("min_draws", 5),
        "candidates": st_cfg.get("candidates", 15),
    }
    members = [
        WeightedFrequencyStrategy(**st_cfg.get("weighted_frequency", {}), **common),
        BayesianStrategy(**st_cfg.get("bayesian", {}), **common),
        VarianceStrategy(**common),
        MarkovStrategy(**st_cfg.get("markov", {}), **common),
    ]
    return members + [EnsembleStrategy(members, **common)]
