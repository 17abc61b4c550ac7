"""tests/test_models.py"""
import math
from datetime import date, timedelta

import numpy as np
import pytest

from src.models.analyzer_loader import load_analyzers
from src.models.performance import (
    build_performance_record,
    dynamic_confidence,
    evaluate_prediction,
    summarize_performance,
)
from src.models.statistical.anomaly_detector import AnomalyDetector
from src.models.statistical.conditional_rules import ConditionalRuleMiner
from src.models.statistical.cooccurrence_analyzer import CoOccurrenceAnalyzer
from src.models.statistical.distribution_analyzer import DistributionAnalyzer
from src.models.statistical.frequency_analyzer import FrequencyAnalyzer
from src.models.statistical.heat_scorer import HeatScorer
from src.models.statistical.pattern_detector import PatternDetector
from src.models.strategies.backtest import backtest, backtest_all
from src.models.strategies.base import Strategy, color_group, pick_balanced
from src.models.strategies.bayesian import BayesianStrategy
from src.models.strategies.ensemble import EnsembleStrategy
from src.models.strategies.markov import MarkovStrategy
from src.models.strategies.variance import VarianceStrategy
from src.models.strategies.weighted_frequency import WeightedFrequencyStrategy
from src.models.strategy_aggregator import MultiStrategyAggregator
from src.models.types import (
    AlgorithmConfig,
    AlgorithmPerformanceRecord,
    AlgorithmPrediction,
    Draw,
    PerformanceSummary,
    StrategyPrediction,
    to_plain,
)

# Most recent first
HISTORY = [
    [1, 2, 3, 4, 5],
    [1, 2, 6, 7, 8],
    [9, 10, 11, 12, 13],
]

TODAY = date(2024, 3, 31)


def make_draws(numbers_list, draw_name="Etoile", start=TODAY):
    """Draw objects one day apart, most recent first."""
    return [
        Draw(draw_name=draw_name, draw_date=start - timedelta(days=i), winning_numbers=tuple(nums))
        for i, nums in enumerate(numbers_list)
    ]


def spread_history(n_draws):
    """Draws that walk 1..90 in order, 5 at a time."""
    draws = []
    for i in range(n_draws):
        base = (i * 5) % 90
        draws.append([base + k + 1 for k in range(5)])
    return draws


class TestFrequencyAnalyzer:
    def setup_method(self):
        self.fa = FrequencyAnalyzer()

    def test_covers_full_range(self):
        freqs = self.fa.get_frequencies(HISTORY)
        assert len(freqs) == 90
        assert set(freqs) == set(range(1, 91))

    def test_counts_and_last_index(self):
        freqs = self.fa.get_frequencies(HISTORY)
        assert freqs[1].frequency == 2
        assert freqs[1].last_appearance_index == 0
        assert freqs[9].last_appearance_index == 2
        assert freqs[1].appearance_rate == pytest.approx(2 / 3)

    def test_unseen_numbers(self):
        freqs = self.fa.get_frequencies(HISTORY)
        assert freqs[90].frequency == 0
        assert freqs[90].never_seen
        assert freqs[90].appearance_rate == 0.0

    def test_total_frequency_is_five_per_draw(self):
        history = spread_history(40)
        freqs = self.fa.get_frequencies(history)
        assert sum(f.frequency for f in freqs.values()) == len(history) * 5

    def test_empty_history(self):
        freqs = self.fa.get_frequencies([])
        assert all(f.frequency == 0 and f.never_seen for f in freqs.values())

    def test_window_limits_history(self):
        fa = FrequencyAnalyzer(window=1)
        freqs = fa.get_frequencies(HISTORY)
        assert freqs[1].frequency == 1
        assert freqs[6].frequency == 0

    def test_hot_and_cold(self):
        hot = self.fa.get_hot_numbers(HISTORY, top_n=2)
        assert hot == [1, 2]
        cold = self.fa.get_cold_numbers(HISTORY, bottom_n=3)
        assert cold == [3, 4, 5]
        assert 90 not in self.fa.get_cold_numbers(HISTORY, bottom_n=90)

    def test_number_statistics_dates(self):
        draws = make_draws(HISTORY)
        stats = {s.number: s for s in self.fa.build_number_statistics(draws, "Etoile", today=TODAY)}
        assert stats[1].last_appearance == TODAY
        assert stats[1].days_since_last == 0
        assert stats[9].days_since_last == 2
        assert stats[9].draws_since_last == 2
        assert stats[90].last_appearance is None
        assert stats[90].days_since_last is None

    def test_number_statistics_sorted_by_frequency(self):
        draws = make_draws(HISTORY)
        stats = self.fa.build_number_statistics(draws, "Etoile", today=TODAY)
        assert [s.number for s in stats[:2]] == [1, 2]

    def test_trend_series(self):
        draws = make_draws(HISTORY)
        series = self.fa.get_trend_series(draws, [1, 9], days=30, today=TODAY)
        assert len(series) == 3
        # oldest first
        assert series[0]["num_9"] == 1
        assert series[-1]["num_1"] == 1
        assert self.fa.get_trend_series(draws, [], today=TODAY) == []


class TestCoOccurrenceAnalyzer:
    def setup_method(self):
        self.co = CoOccurrenceAnalyzer()

    def test_same_draw_top_association(self):
        assoc = self.co.same_draw_associations(1, HISTORY)
        assert assoc[0].number == 2
        assert assoc[0].count == 2
        assert all(a.number != 1 for a in assoc)

    def test_same_draw_ties_ordered_by_number(self):
        assoc = self.co.same_draw_associations(1, HISTORY)
        tied = [a.number for a in assoc if a.count == 1]
        assert tied == sorted(tied)

    def test_same_draw_full_map(self):
        assoc = self.co.same_draw_associations(1, HISTORY)
        assert {a.number: a.count for a in assoc} == {2: 2, 3: 1, 4: 1, 5: 1, 6: 1, 7: 1, 8: 1}

    def test_next_draw_uses_chronological_order(self):
        # 1 appears in the second-most-recent draw; the draw after it is [1..5]
        assoc = self.co.next_draw_associations(1, HISTORY)
        assert {a.number for a in assoc} == {1, 2, 3, 4, 5}
        assert all(a.count == 1 for a in assoc)

    def test_next_draw_needs_two_draws(self):
        assert self.co.next_draw_associations(1, [[1, 2, 3, 4, 5]]) == []

    def test_number_never_drawn(self):
        assert self.co.same_draw_associations(90, HISTORY) == []
        assert self.co.next_draw_associations(90, HISTORY) == []

    def test_pair_counts_symmetric(self):
        matrix = self.co.pair_counts(spread_history(30) + HISTORY)
        for a, row in matrix.items():
            for b, count in row.items():
                assert matrix[b][a] == count

    def test_top_pairs_and_triplets(self):
        pairs = self.co.top_pairs(HISTORY, limit=1)
        assert pairs == [{"pair": [1, 2], "frequency": 2}]
        triplets = self.co.top_triplets(HISTORY, limit=1)
        assert triplets[0]["frequency"] == 1

    def test_cross_draw_correlation(self):
        rows = self.co.cross_draw_correlation([[1, 2, 3, 4, 5]], [[1, 40, 50, 60, 70]])
        by_number = {r["number"]: r for r in rows}
        assert by_number[1]["common_appearances"] == 1
        assert self.co.cross_draw_correlation([], HISTORY) == []


class TestConditionalRuleMiner:
    def setup_method(self):
        self.miner = ConditionalRuleMiner()

    def _rule_history(self):
        """1 drawn 10 times, 7 of them with 2; filler numbers never repeat."""
        history = []
        filler = iter(range(10, 91))
        for i in range(10):
            if i < 7:
                history.append([1, 2, next(filler), next(filler), next(filler)])
            else:
                history.append([1, next(filler), next(filler), next(filler), next(filler)])
        return history

    def test_probability_and_confidence(self):
        miner = ConditionalRuleMiner(max_rules=1000)
        rules = miner.find_rules(self._rule_history())
        rule = next(r for r in rules if r.condition == 1 and r.consequence == 2)
        assert rule.probability == pytest.approx(70.0)
        assert rule.occurrences == 7
        assert rule.confidence == "high"

    def test_reverse_rule_is_certain(self):
        miner = ConditionalRuleMiner(max_rules=1000)
        rules = miner.find_rules(self._rule_history())
        rule = next(r for r in rules if r.condition == 2 and r.consequence == 1)
        assert rule.probability == pytest.approx(100.0)

    def test_rules_sorted_and_capped(self):
        rules = self.miner.find_rules(self._rule_history())
        assert len(rules) <= 10
        probs = [r.probability for r in rules]
        assert probs == sorted(probs, reverse=True)
        assert all(r.probability >= 40 for r in rules)

    def test_classify(self):
        assert self.miner.classify(70) == "high"
        assert self.miner.classify(69.9) == "medium"
        assert self.miner.classify(50) == "medium"
        assert self.miner.classify(45) == "low"

    def test_too_few_draws(self):
        history = self._rule_history()[:9]
        assert self.miner.find_rules(history) == []
        assert self.miner.find_winning_combinations(make_draws(history), today=TODAY) == []

    def test_winning_combinations_decay(self):
        draws = make_draws(self._rule_history())
        combos = self.miner.find_winning_combinations(draws, today=TODAY)
        assert len(combos) <= 8
        assert combos[0].numbers == (1, 2)
        assert combos[0].frequency == 7
        assert combos[0].last_seen == TODAY
        assert combos[0].score == pytest.approx(70.0)

    def test_mine_returns_both(self):
        result = self.miner.mine(make_draws(self._rule_history()), today=TODAY)
        assert set(result) == {"rules", "combinations"}


class TestAnomalyDetector:
    def setup_method(self):
        self.detector = AnomalyDetector()

    def test_too_few_draws(self):
        assert self.detector.detect([[1, 2, 3, 4, 5]] * 9) == []

    def test_identical_draws_flagged_as_duplicates(self):
        history = [[1, 2, 3, 4, 5]] * 50
        duplicates = self.detector.check_duplicates(history)
        assert len(duplicates) == 10
        assert all(a.type == "suspicious_draw" for a in duplicates)
        assert all(a.severity == "high" and a.score == 125 for a in duplicates)

    def test_duplicate_scan_depth(self):
        history = [[1, 2, 3, 4, 5]] * 50
        detector = AnomalyDetector(duplicate_pairs=49)
        assert len(detector.check_duplicates(history)) == 49

    def test_detect_caps_and_sorts(self):
        history = [[1, 2, 3, 4, 5]] * 50
        anomalies = self.detector.detect(history)
        assert len(anomalies) == 5
        scores = [a.score for a in anomalies]
        assert scores == sorted(scores, reverse=True)
        assert anomalies[0].type == "frequency_spike"

    def test_uniform_history_is_clean(self):
        history = spread_history(18)
        assert self.detector.chi_square(history) == pytest.approx(0.0)
        assert self.detector.check_uniformity(history) == []
        assert self.detector.check_duplicates(history) == []
        assert self.detector.check_frequency_spikes(history) == []

    def test_skewed_history_fails_uniformity(self):
        history = [[1, 2, 3, 4, 5]] * 50
        found = self.detector.check_uniformity(history)
        assert len(found) == 1
        assert found[0].type == "randomness_issue"

    def test_consecutive_run(self):
        found = self.detector.check_consecutive([[10, 11, 12, 13, 50]])
        assert len(found) == 1
        assert found[0].score == 60
        assert self.detector.check_consecutive([[10, 11, 30, 31, 50]]) == []

    def test_spike_severity(self):
        # 5 also comes up 3 times in the spread draws: 9 of 50 → 18%, medium
        history = [[5, 20, 40, 60, 80]] * 6 + spread_history(44)
        spikes = {a.numbers[0]: a for a in self.detector.check_frequency_spikes(history)}
        assert spikes[5].severity == "medium"

    def test_spike_high_severity(self):
        # 5 comes up 12 + 3 times: 15 of 50 → 30%, above the 20% line
        history = [[5, 20, 40, 60, 80]] * 12 + spread_history(38)
        spikes = {a.numbers[0]: a for a in self.detector.check_frequency_spikes(history)}
        assert spikes[5].severity == "high"
        assert spikes[5].score == pytest.approx(30.0 * 3)

    def test_detect_only_reads_last_50_draws(self):
        recent = spread_history(50)
        history = recent + [[1, 2, 3, 4, 5]] * 100
        anomalies = self.detector.detect(history)
        assert anomalies == self.detector.detect(recent)
        assert all(a.type != "frequency_spike" for a in anomalies)
        assert all(a.type != "randomness_issue" for a in anomalies)


class TestHeatScorer:
    def setup_method(self):
        self.heat = HeatScorer()

    def test_one_entry_per_number(self):
        heatmap = self.heat.get_heatmap(HISTORY)
        assert [h.number for h in heatmap] == list(range(1, 91))

    def test_deterministic(self):
        history = spread_history(30)
        assert self.heat.get_heatmap(history) == self.heat.get_heatmap(history)

    def test_recent_frequent_number_is_hot(self):
        heatmap = {h.number: h for h in self.heat.get_heatmap(HISTORY)}
        assert heatmap[1].temperature == "hot"
        assert heatmap[1].last_seen == 0
        assert heatmap[90].temperature == "frozen"
        assert heatmap[90].score == 0.0

    def test_classify_thresholds(self):
        assert self.heat.classify(0.81) == "hot"
        assert self.heat.classify(0.8) == "warm"
        assert self.heat.classify(0.3) == "cold"
        assert self.heat.classify(0.2) == "frozen"

    def test_trend_factor(self):
        assert self.heat._trend(3, 1) == 1.5
        assert self.heat._trend(1, 3) == 0.5
        assert self.heat._trend(2, 2) == 1.0

    def test_groups_cover_range(self):
        groups = self.heat.get_by_temperature(HISTORY)
        assert sum(len(v) for v in groups.values()) == 90

    def test_empty_history(self):
        heatmap = self.heat.get_heatmap([])
        assert all(h.temperature == "frozen" for h in heatmap)

    def test_trend_rising_in_history(self):
        # 7 in three of the last 10 draws, none of the 10 before
        history = [[7, 20, 30, 40, 50]] * 3 + [[1, 2, 3, 4, 5]] * 17
        heat = {h.number: h for h in self.heat.get_heatmap(history)}
        assert heat[7].last_seen == 0
        assert heat[7].frequency == pytest.approx(0.15)
        assert heat[7].score == pytest.approx(1.0 * 0.15 * 10 * 1.5)

    def test_trend_falling_in_history(self):
        history = [[1, 2, 3, 4, 5]] * 10 + [[7, 20, 30, 40, 50]] * 3 + [[1, 2, 3, 4, 5]] * 7
        heat = {h.number: h for h in self.heat.get_heatmap(history)}
        assert heat[7].last_seen == 10
        assert heat[7].score == pytest.approx(math.exp(-10 * 0.1) * 0.15 * 10 * 0.5)

    def test_trend_ignores_draws_past_two_windows(self):
        # 7 only beyond index 20: neither window sees it, trend stays neutral
        history = [[1, 2, 3, 4, 5]] * 20 + [[7, 20, 30, 40, 50]] * 5
        heat = {h.number: h for h in self.heat.get_heatmap(history)}
        assert heat[7].score == pytest.approx(math.exp(-20 * 0.1) * 0.2 * 10 * 1.0)


class TestDistributionAnalyzer:
    def setup_method(self):
        self.dist = DistributionAnalyzer()

    def test_bands(self):
        assert self.dist.get_band(1) == "1-10"
        assert self.dist.get_band(90) == "81-90"
        rows = self.dist.band_distribution(HISTORY)
        assert len(rows) == 9
        assert sum(r["count"] for r in rows) == 15

    def test_even_odd(self):
        assert self.dist.even_odd([[1, 2, 3, 4, 5]]) == {"even": 2, "odd": 3}

    def test_sum_analysis_upper_median(self):
        result = self.dist.sum_analysis([[1, 2, 3, 4, 5], [1, 2, 6, 7, 8]])
        assert result["min"] == 15
        assert result["max"] == 24
        assert result["median"] == 24

    def test_temporal_patterns(self):
        draws = [
            Draw("Etoile", TODAY, (1, 2, 3, 4, 5), draw_day="Lundi"),
            Draw("Etoile", TODAY - timedelta(days=7), (1, 20, 30, 40, 50), draw_day="Lundi"),
        ]
        patterns = self.dist.temporal_patterns(draws)
        assert patterns[0]["day"] == "Lundi"
        assert patterns[0]["draw_count"] == 2
        assert patterns[0]["most_common"][0] == 1

    def test_advanced_statistics_empty(self):
        assert self.dist.advanced_statistics([])["top_pairs"] == []


class TestPatternDetector:
    def setup_method(self):
        self.pd = PatternDetector()

    def test_empty(self):
        assert self.pd.detect([]) == []

    def test_repeated_pair_found(self):
        history = [[1, 2, 30 + i, 50 + i, 70 + i] for i in range(5)]
        pairs = self.pd.pair_patterns(history)
        assert any(p.numbers == (1, 2) for p in pairs)

    def test_predict_from_patterns(self):
        history = [[1, 2, 30 + i, 50 + i, 70 + i] for i in range(5)]
        picks = self.pd.predict_from_patterns(self.pd.detect(history))
        assert len(picks) == 5
        assert {1, 2} <= set(picks)


class TestPerformance:
    def test_match_count_and_accuracy(self):
        result = evaluate_prediction([1, 2, 3, 4, 5], [1, 2, 3, 40, 50])
        assert result["match_count"] == 3
        assert result["accuracy"] == pytest.approx(60.0)

    def test_accuracy_bounds(self):
        assert evaluate_prediction([1, 2, 3, 4, 5], [1, 2, 3, 4, 5])["accuracy"] == 100.0
        assert evaluate_prediction([1, 2, 3, 4, 5], [6, 7, 8, 9, 10])["accuracy"] == 0.0
        assert evaluate_prediction([], [1, 2, 3, 4, 5])["match_count"] == 0

    def test_build_performance_record(self):
        draw = Draw("Etoile", TODAY, (1, 2, 3, 40, 50))
        prediction = {
            "model_used": "frequency",
            "prediction_date": "2024-03-30",
            "predicted_numbers": [1, 2, 3, 4, 5],
        }
        record = build_performance_record(prediction, draw)
        assert record["matches_count"] == 3
        assert record["draw_date"] == "2024-03-31"
        assert record["confidence_score"] == pytest.approx(0.6)

    def test_summarize(self):
        records = [
            AlgorithmPerformanceRecord("freq", "Etoile", "", "", (), (), match_count=m, accuracy_score=m * 20.0)
            for m in (0, 2, 3, 5)
        ]
        summary = summarize_performance(records)["freq"]
        assert summary.total_predictions == 4
        assert summary.good_predictions == 3
        assert summary.excellent_predictions == 2
        assert summary.perfect_predictions == 1
        assert summary.best_match == 5
        assert summary.avg_accuracy == pytest.approx(50.0)

    def test_dynamic_confidence(self):
        empty = dynamic_confidence([])
        assert empty["current_confidence"] == 50
        assert empty["should_alert"] is True

        rising = dynamic_confidence([80, 80, 80, 80, 80, 40, 40, 40])
        assert rising["trend"] == "up"
        assert rising["reliability"] == "medium"


class TestMultiStrategyAggregator:
    def setup_method(self):
        self.agg = MultiStrategyAggregator()

    def _summaries(self):
        return [
            PerformanceSummary("frequency", total_predictions=30, avg_accuracy=40.0, best_match=3, excellent_predictions=6),
            PerformanceSummary("lstm", total_predictions=30, avg_accuracy=20.0, best_match=2),
            PerformanceSummary("random", total_predictions=0),
        ]

    def test_score_formula(self):
        s = PerformanceSummary("x", total_predictions=15, avg_accuracy=50.0, best_match=5, excellent_predictions=3)
        expected = 0.5 * 0.35 + 1.0 * 0.30 + 0.2 * 0.20 + 0.5 * 0.15
        assert self.agg.score(s) == pytest.approx(expected)
        assert self.agg.score(s, weight=2.0) == pytest.approx(expected * 2)

    def test_recommend_primary(self):
        rec = self.agg.recommend(self._summaries())
        assert rec["primary"].algorithm == "frequency"
        assert [a.algorithm for a in rec["alternatives"]] == ["lstm"]
        assert rec["total_analyzed"] == 2

    def test_weight_changes_ranking(self):
        configs = [AlgorithmConfig("frequency", weight=0.1), AlgorithmConfig("lstm", weight=2.0)]
        rec = self.agg.recommend(self._summaries(), configs)
        assert rec["primary"].algorithm == "lstm"

    def test_disabled_excluded(self):
        configs = [AlgorithmConfig("frequency", enabled=False), AlgorithmConfig("lstm")]
        rec = self.agg.recommend(self._summaries(), configs)
        assert rec["primary"].algorithm == "lstm"
        assert rec["total_analyzed"] == 1

    def test_all_disabled(self):
        configs = [AlgorithmConfig("frequency", enabled=False), AlgorithmConfig("lstm", enabled=False)]
        assert self.agg.recommend(self._summaries(), configs) is None

    def test_no_history(self):
        assert self.agg.recommend([PerformanceSummary("random")]) is None

    def test_match_config(self):
        configs = [AlgorithmConfig("LSTM")]
        assert MultiStrategyAggregator.match_config("lstm", configs).name == "LSTM"
        assert MultiStrategyAggregator.match_config("LSTM Enhanced", configs).name == "LSTM"
        assert MultiStrategyAggregator.match_config("xgboost", configs) is None

    def test_config_weight_clamped(self):
        assert AlgorithmConfig("x", weight=5).weight == 2.0
        assert AlgorithmConfig("x", weight=-1).weight == 0.0

    def test_consensus_full_agreement(self):
        preds = [
            AlgorithmPrediction("a", (1, 2, 3, 4, 5), recent_accuracy=80),
            AlgorithmPrediction("b", (1, 2, 3, 4, 5), recent_accuracy=70),
            AlgorithmPrediction("c", (1, 2, 3, 4, 5), recent_accuracy=60),
        ]
        result = self.agg.consensus(preds)
        assert result.numbers == [1, 2, 3, 4, 5]
        assert result.agreement_score == pytest.approx(100.0)
        assert result.confidence == pytest.approx(70.0)

    def test_consensus_uses_top_three(self):
        preds = [
            AlgorithmPrediction("a", (1, 2, 3, 4, 5), recent_accuracy=80),
            AlgorithmPrediction("b", (1, 2, 3, 4, 6), recent_accuracy=70),
            AlgorithmPrediction("c", (1, 2, 3, 7, 8), recent_accuracy=60),
            AlgorithmPrediction("d", (50, 60, 70, 80, 90), recent_accuracy=10),
        ]
        result = self.agg.consensus(preds)
        assert result.numbers == [1, 2, 3, 4, 5]
        assert 50 not in result.numbers
        assert [p.rank for p in self.agg.select_top(preds)] == [1, 2, 3]

    def test_consensus_leaves_inputs_untouched(self):
        preds = [
            AlgorithmPrediction("a", (1, 2, 3, 4, 5), recent_accuracy=60),
            AlgorithmPrediction("b", (1, 2, 3, 4, 6), recent_accuracy=80),
        ]
        self.agg.consensus(preds)
        top = self.agg.select_top(preds)
        assert [(p.algorithm, p.rank) for p in preds] == [("a", 0), ("b", 0)]
        assert [(p.algorithm, p.rank) for p in top] == [("b", 1), ("a", 2)]

    def test_consensus_empty(self):
        result = self.agg.consensus([])
        assert result.numbers == []
        assert result.agreement_score == 0.0

    def test_optimal_weight_bounds(self):
        assert MultiStrategyAggregator.optimal_weight(PerformanceSummary("x")) == 0.5
        best = PerformanceSummary("x", total_predictions=50, avg_accuracy=100.0, best_match=5, excellent_predictions=50)
        assert MultiStrategyAggregator.optimal_weight(best) == 2.0

    def test_negative_blend_rejected(self):
        with pytest.raises(ValueError):
            MultiStrategyAggregator(blend={"accuracy": -1})


class FixedStrategy(Strategy):
    """Always picks the same numbers."""

    name = "fixed"

    def __init__(self, numbers=(1, 2, 3, 4, 5), **kwargs):
        super().__init__(**kwargs)
        self.numbers = tuple(numbers)
        self.seen = []

    def scores(self, history):
        return np.zeros(self.size)

    def predict(self, history):
        self.seen.append(list(history))
        if len(history) < self.min_draws:
            return None
        return StrategyPrediction(self.name, self.numbers, 0.5)


def all_strategies():
    members = [WeightedFrequencyStrategy(), BayesianStrategy(), VarianceStrategy(), MarkovStrategy()]
    return members + [EnsembleStrategy(members)]


class TestPickBalanced:
    def test_color_groups(self):
        assert [color_group(n) for n in (1, 9, 10, 19, 80, 89, 90)] == [0, 0, 1, 1, 8, 8, 8]

    def test_one_per_group_first(self):
        assert pick_balanced([1, 2, 3, 11, 12, 21, 31, 41]) == [1, 11, 21, 31, 41]

    def test_fills_in_candidate_order(self):
        assert pick_balanced([1, 2, 3, 4, 5, 6, 11]) == [1, 2, 3, 4, 11]

    def test_short_candidate_list(self):
        assert pick_balanced([30, 10, 20]) == [10, 20, 30]


class TestStrategies:
    def setup_method(self):
        self.history = spread_history(30)

    @pytest.mark.parametrize("strategy", all_strategies(), ids=lambda s: s.name)
    def test_five_distinct_numbers_in_range(self, strategy):
        prediction = strategy.predict(self.history)
        assert prediction.algorithm == strategy.name
        assert len(set(prediction.numbers)) == 5
        assert all(1 <= n <= 90 for n in prediction.numbers)
        assert list(prediction.numbers) == sorted(prediction.numbers)
        assert 0 < prediction.confidence <= 0.92

    @pytest.mark.parametrize("strategy", all_strategies(), ids=lambda s: s.name)
    def test_deterministic(self, strategy):
        assert strategy.predict(self.history) == strategy.predict(self.history)

    @pytest.mark.parametrize("strategy", all_strategies(), ids=lambda s: s.name)
    def test_too_short_history(self, strategy):
        assert strategy.predict(self.history[:4]) is None

    def test_weighted_frequency_prefers_recent(self):
        history = [[10, 20, 30, 40, 50], [60, 70, 80, 85, 89]] * 3
        scores = WeightedFrequencyStrategy().scores(history)
        assert scores[10 - 1] > scores[60 - 1]
        assert scores.sum() == pytest.approx(1.0)

    def test_bayesian_posterior_is_normalized(self):
        scores = BayesianStrategy().scores([[1, 2, 3, 4, 5]] * 200)
        assert scores.sum() == pytest.approx(1.0)
        assert scores[0] > scores[50]

    def test_variance_scores_seen_numbers_only(self):
        scores = VarianceStrategy().scores(HISTORY)
        assert scores[1 - 1] > scores[3 - 1] > 0
        assert scores[90 - 1] == 0


class TestMarkovStrategy:
    def setup_method(self):
        self.markov = MarkovStrategy()

    def test_transition_matrix(self):
        # most recent first: [1..5] was followed by [6..10]
        matrix = self.markov.transition_matrix([[6, 7, 8, 9, 10], [1, 2, 3, 4, 5]])
        assert matrix[0, 5] == pytest.approx(1.01 / 5.9)
        assert matrix[0, 20] == pytest.approx(0.01 / 5.9)
        # no outgoing transitions from the latest draw: uniform row
        assert matrix[5, 0] == pytest.approx(1 / 90)
        assert np.allclose(matrix.sum(axis=1), 1.0)

    def test_predicts_from_latest_state(self):
        a, b = [1, 2, 3, 4, 5], [50, 60, 70, 80, 90]
        prediction = self.markov.predict([a, b] * 5)
        assert {50, 60, 70, 80} <= set(prediction.numbers)


class TestEnsembleStrategy:
    def test_needs_members(self):
        with pytest.raises(ValueError):
            EnsembleStrategy([])

    def test_votes_from_members(self):
        members = [WeightedFrequencyStrategy(), MarkovStrategy()]
        ensemble = EnsembleStrategy(members)
        history = spread_history(20)
        prediction = ensemble.predict(history)
        voted = set(members[0].predict(history).numbers) | set(members[1].predict(history).numbers)
        assert set(prediction.numbers) <= voted
        assert prediction.factors[-2:] == ("weighted_frequency", "markov")
        assert prediction.confidence <= 0.92

    def test_agreement_wins(self):
        history = spread_history(20)
        fixed = [FixedStrategy((1, 20, 30, 40, 50)), FixedStrategy((1, 20, 30, 40, 60))]
        prediction = EnsembleStrategy(fixed).predict(history)
        assert prediction.numbers == (1, 20, 30, 40, 50)

    def test_no_member_prediction(self):
        ensemble = EnsembleStrategy([FixedStrategy(min_draws=50)])
        assert ensemble.predict(spread_history(10)) is None


class TestBacktest:
    def test_trains_only_on_earlier_draws(self):
        history = make_draws(spread_history(60))
        recorder = FixedStrategy()
        backtest(recorder, history, window=50, max_tests=5)
        # targets are history[4] .. history[0]; each sees the 50 draws right behind it
        assert recorder.seen == [history[j + 1: j + 51] for j in (4, 3, 2, 1, 0)]

    def test_summary_counts(self):
        history = make_draws([[1, 2, 3, 40, 50]] * 5 + spread_history(50))
        result = backtest(FixedStrategy(), history, window=50, max_tests=20)
        assert result.total_tests == 5
        assert result.avg_matches == pytest.approx(3.0)
        assert result.accuracy == pytest.approx(60.0)
        assert result.best_match == result.worst_match == 3
        assert result.consistency == pytest.approx(0.0)
        assert result.summary.total_predictions == 5
        assert result.summary.total_matches == 15
        assert result.summary.excellent_predictions == 5
        assert result.summary.avg_accuracy == pytest.approx(60.0)

    def test_history_shorter_than_window(self):
        result = backtest(FixedStrategy(), spread_history(30), window=50)
        assert result.total_tests == 0
        assert result.summary == PerformanceSummary("fixed")

    def test_no_prediction_counts_as_zero(self):
        result = backtest(FixedStrategy(min_draws=100), spread_history(55), window=50)
        assert result.total_tests == 5
        assert result.best_match == 0
        assert result.summary.total_predictions == 5

    def test_summaries_feed_the_aggregator(self):
        history = spread_history(70)
        results = backtest_all(all_strategies(), history, window=50, max_tests=20)
        assert [r.algorithm for r in results] == [
            "weighted_frequency", "bayesian", "variance", "markov", "ensemble",
        ]
        rec = MultiStrategyAggregator().recommend([r.summary for r in results])
        assert rec["total_analyzed"] == 5


class TestAnalyzerLoader:
    def test_default_config(self):
        suite = load_analyzers()
        assert suite.anomaly.window == 50
        assert suite.conditional.min_draws == 10
        assert suite.heat.thresholds["hot"] == 0.8

    def test_overrides(self):
        suite = load_analyzers({"anomaly": {"max_results": 2}, "heat": {"decay": 0.5}})
        assert suite.anomaly.max_results == 2
        assert suite.heat.decay == 0.5

    def test_end_to_end_report_shape(self):
        suite = load_analyzers()
        draws = make_draws(HISTORY)
        freqs = suite.frequency.get_frequencies(draws)
        assert freqs[1].frequency == 2
        assert suite.cooccurrence.same_draw_associations(1, draws)[0].number == 2
        plain = to_plain(freqs[90])
        assert plain["last_appearance_index"] is None

    def test_strategies_from_config(self):
        suite = load_analyzers({"strategies": {"markov": {"smoothing": 0.5}}, "backtest": {"max_tests": 3}})
        assert [s.name for s in suite.strategies] == [
            "weighted_frequency", "bayesian", "variance", "markov", "ensemble",
        ]
        assert suite.strategies[3].smoothing == 0.5
        assert suite.strategies[-1].members == suite.strategies[:4]
        assert suite.backtest == {"window": 50, "max_tests": 3}
