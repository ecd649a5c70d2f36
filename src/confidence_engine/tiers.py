"""
Tier mapping and near-match classification.

map_score_to_tier() combines the raw score with the gate result. The tier
it returns is final (post-cap); explanation eligibility is always decided
on this tier, never on the pre-cap base tier.
"""

from typing import Optional, Tuple

from config.constants import DEFAULT_THRESHOLDS, Thresholds
from confidence_engine.types import ConfidenceTier, GateResult, NearMatchType

_TIER_RANK = {
    ConfidenceTier.HIGH: 3,
    ConfidenceTier.MEDIUM: 2,
    ConfidenceTier.LOW: 1,
}


def get_high_threshold_used(is_shoes: bool, thresholds: Thresholds = DEFAULT_THRESHOLDS) -> float:
    return thresholds.HIGH_SHOES if is_shoes else thresholds.HIGH


def score_to_tier(
    score: float,
    is_shoes: bool = False,
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
) -> ConfidenceTier:
    """Plain threshold mapping with no gates."""
    if score >= get_high_threshold_used(is_shoes, thresholds):
        return ConfidenceTier.HIGH
    if score >= thresholds.MEDIUM:
        return ConfidenceTier.MEDIUM
    return ConfidenceTier.LOW


def map_score_to_tier(
    raw_score: float,
    gate_result: GateResult,
    is_shoes: bool,
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
) -> ConfidenceTier:
    """
    Final tier for a pair.

    A forced tier (hard fail) wins outright. Otherwise the score is mapped
    against the (shoe-aware) thresholds and a HIGH result is capped to
    MEDIUM when the gates say max_tier is MEDIUM.
    """
    if gate_result.forced_tier is not None:
        return gate_result.forced_tier

    tier = score_to_tier(raw_score, is_shoes, thresholds)
    if tier == ConfidenceTier.HIGH and gate_result.max_tier == ConfidenceTier.MEDIUM:
        return ConfidenceTier.MEDIUM
    return tier


def is_near_match(
    raw_score: float,
    tier: ConfidenceTier,
    gate_result: GateResult,
    is_shoes: bool,
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
) -> Tuple[bool, Optional[NearMatchType]]:
    """
    Classify a MEDIUM pair as a near match.

    Type 2a (preferred): would have been HIGH but a cap held it back.
    Type 2b (fallback): strong MEDIUM, score >= NEAR_MATCH_STRONG_MEDIUM_MIN.
    """
    if tier != ConfidenceTier.MEDIUM or gate_result.is_hard_fail:
        return False, None

    if raw_score >= get_high_threshold_used(is_shoes, thresholds) and gate_result.cap_reasons:
        return True, NearMatchType.SOFT_CAPPED_HIGH
    if raw_score >= thresholds.NEAR_MATCH_STRONG_MEDIUM_MIN:
        return True, NearMatchType.STRONG_MEDIUM
    return False, None


# ---------------------------------------------------------------------------
# Tier arithmetic
# ---------------------------------------------------------------------------

def tier_to_number(tier: ConfidenceTier) -> int:
    return _TIER_RANK[ConfidenceTier(tier)]


def compare_tiers(a: ConfidenceTier, b: ConfidenceTier) -> int:
    """Positive if a > b, negative if a < b, 0 if equal."""
    return tier_to_number(a) - tier_to_number(b)


def min_tier(a: ConfidenceTier, b: ConfidenceTier) -> ConfidenceTier:
    return a if compare_tiers(a, b) <= 0 else b


def max_tier(a: ConfidenceTier, b: ConfidenceTier) -> ConfidenceTier:
    return a if compare_tiers(a, b) >= 0 else b


def meets_minimum(tier: ConfidenceTier, minimum: ConfidenceTier) -> bool:
    return compare_tiers(tier, minimum) >= 0
