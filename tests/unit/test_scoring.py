"""
Tests for weighted scoring and weight redistribution.
"""

import pytest

from config.constants import FeatureFlags
from confidence_engine.config import DEFAULT_WEIGHTS
from confidence_engine.scoring import (
    NEUTRAL_RAW_SCORE,
    compute_raw_score,
    get_dominant_feature,
    get_feature_contributions,
    get_weights_for_pair_type,
    redistribute_weights,
)
from confidence_engine.types import (
    UNKNOWN_FEATURE,
    FeatureCode,
    FeatureResult,
    FeatureSignals,
    PairType,
)


def _signals(c=2, s=2, f=2, t=2, u=2, v=None) -> FeatureSignals:
    """Build signals; pass None for an unknown core signal."""
    def _r(value):
        return UNKNOWN_FEATURE if value is None else FeatureResult(value)

    return FeatureSignals(
        C=_r(c), S=_r(s), F=_r(f), T=_r(t), U=_r(u),
        V=None if v is None else _r(v),
    )


# =============================================================================
# Weight lookup
# =============================================================================

class TestWeightLookup:

    def test_tops_bottoms_uses_default(self):
        assert get_weights_for_pair_type(PairType.TOPS_BOTTOMS) is DEFAULT_WEIGHTS

    def test_unlisted_pair_type_falls_back(self):
        assert get_weights_for_pair_type(PairType.TOPS_BAGS) is DEFAULT_WEIGHTS

    def test_shoes_lean_on_usage(self):
        weights = get_weights_for_pair_type(PairType.TOPS_SHOES)
        assert weights[FeatureCode.U] > DEFAULT_WEIGHTS[FeatureCode.U]

    def test_core_weights_sum_to_one(self):
        for pair_type in PairType:
            weights = get_weights_for_pair_type(pair_type)
            total = sum(weights[code] for code in FeatureCode if code != FeatureCode.V)
            assert total == pytest.approx(1.0)


# =============================================================================
# Redistribution
# =============================================================================

class TestRedistributeWeights:
    """Unknown weight moves proportionally onto known signals."""

    def test_all_known_unchanged(self):
        weights = redistribute_weights(_signals(), DEFAULT_WEIGHTS)
        for code in (FeatureCode.C, FeatureCode.S, FeatureCode.F, FeatureCode.T, FeatureCode.U):
            assert weights[code] == pytest.approx(DEFAULT_WEIGHTS[code])

    def test_unknown_texture_redistributed(self):
        weights = redistribute_weights(_signals(t=None), DEFAULT_WEIGHTS)

        assert weights[FeatureCode.T] == 0.0
        assert weights[FeatureCode.C] == pytest.approx(0.20 / 0.85)
        assert weights[FeatureCode.F] == pytest.approx(0.25 / 0.85)
        assert sum(weights.values()) == pytest.approx(1.0)

    def test_total_preserved_with_two_unknown(self):
        weights = redistribute_weights(_signals(s=None, t=None), DEFAULT_WEIGHTS)
        assert weights[FeatureCode.S] == 0.0
        assert weights[FeatureCode.T] == 0.0
        assert sum(weights.values()) == pytest.approx(1.0)

    def test_nothing_known_returns_zeroed(self):
        signals = _signals(c=None, s=None, f=None, t=None, u=None)
        weights = redistribute_weights(signals, DEFAULT_WEIGHTS)
        assert all(w == 0.0 for w in weights.values())

    def test_base_weights_not_mutated(self):
        redistribute_weights(_signals(t=None), DEFAULT_WEIGHTS)
        assert DEFAULT_WEIGHTS[FeatureCode.T] == 0.15

    def test_silhouette_ignored_without_flag(self):
        weights = redistribute_weights(_signals(v=2), DEFAULT_WEIGHTS)
        assert weights[FeatureCode.V] == 0.0

    def test_silhouette_weightless_when_enabled(self):
        flags = FeatureFlags(silhouette_enabled=True)
        weights = redistribute_weights(_signals(v=2), DEFAULT_WEIGHTS, flags)
        assert sum(weights.values()) == pytest.approx(1.0)


# =============================================================================
# Raw score
# =============================================================================

class TestComputeRawScore:

    def test_perfect_pair(self):
        score, weights = compute_raw_score(_signals(), PairType.TOPS_BOTTOMS)
        assert score == pytest.approx(1.0)
        assert weights[FeatureCode.C] == pytest.approx(0.20)

    def test_worst_pair(self):
        score, _ = compute_raw_score(_signals(-2, -2, -2, -2, -2), PairType.TOPS_BOTTOMS)
        assert score == pytest.approx(0.0)

    def test_weighted_mean(self):
        score, _ = compute_raw_score(_signals(2, 0, 0, 0, 0), PairType.TOPS_BOTTOMS)
        assert score == pytest.approx(0.6)

    def test_unknown_signal_excluded(self):
        score, _ = compute_raw_score(_signals(t=None), PairType.TOPS_BOTTOMS)
        assert score == pytest.approx(1.0)

    def test_nothing_known_is_neutral(self):
        signals = _signals(c=None, s=None, f=None, t=None, u=None)
        score, _ = compute_raw_score(signals, PairType.TOPS_BOTTOMS)
        assert score == NEUTRAL_RAW_SCORE

    def test_shoe_weights_applied(self):
        # Only U is positive: shoes weight U at 0.30 versus 0.20
        signals = _signals(0, 0, 0, 0, 2)
        shoes, _ = compute_raw_score(signals, PairType.TOPS_SHOES)
        default, _ = compute_raw_score(signals, PairType.TOPS_BOTTOMS)
        assert shoes == pytest.approx(0.65)
        assert default == pytest.approx(0.60)

    def test_bounded(self):
        for values in [(2, -2, 1, 0, -1), (-1, -1, -1, 2, 2), (0, 0, 0, 0, 0)]:
            score, _ = compute_raw_score(_signals(*values), PairType.BOTTOMS_SHOES)
            assert 0.0 <= score <= 1.0


# =============================================================================
# Analysis helpers
# =============================================================================

class TestScoreAnalysis:

    def test_contributions_cover_every_code(self):
        contributions = get_feature_contributions(_signals(t=None), PairType.TOPS_BOTTOMS)

        assert set(contributions) == set(FeatureCode)
        assert contributions[FeatureCode.T].known is False
        assert contributions[FeatureCode.T].contribution == 0.0
        assert contributions[FeatureCode.V].known is False

    def test_dominant_feature(self):
        signals = _signals(2, -2, -2, -2, -2)
        assert get_dominant_feature(signals, PairType.TOPS_BOTTOMS) == FeatureCode.C

    def test_no_dominant_feature_when_balanced(self):
        assert get_dominant_feature(_signals(), PairType.TOPS_BOTTOMS) is None
