"""
Weighted scoring with dynamic weight redistribution.

Per-pair-type base weights are looked up, the weight of every unknown
signal is moved proportionally onto the known ones, and the known signals
are combined into a raw score in [0, 1].
"""

from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

from config.constants import DEFAULT_FEATURE_FLAGS, FeatureFlags
from confidence_engine.config import DEFAULT_WEIGHTS, WEIGHTS_BY_PAIR_TYPE
from confidence_engine.types import (
    CORE_FEATURE_CODES,
    FeatureCode,
    FeatureSignals,
    PairType,
)
from confidence_engine.utils import normalize_feature_value

# Neutral score when no signal is usable
NEUTRAL_RAW_SCORE = 0.5


def get_weights_for_pair_type(pair_type: PairType) -> Mapping[FeatureCode, float]:
    return WEIGHTS_BY_PAIR_TYPE.get(pair_type, DEFAULT_WEIGHTS)


def _active_codes(flags: FeatureFlags) -> Tuple[FeatureCode, ...]:
    if flags.silhouette_enabled:
        return CORE_FEATURE_CODES + (FeatureCode.V,)
    return CORE_FEATURE_CODES


def redistribute_weights(
    signals: FeatureSignals,
    base_weights: Mapping[FeatureCode, float],
    flags: FeatureFlags = DEFAULT_FEATURE_FLAGS,
) -> Dict[FeatureCode, float]:
    """
    Move the weight of unknown signals onto known ones.

    Unknown signals get weight 0. Every positive known weight is scaled by
    (known + unknown) / known so the total is unchanged. When nothing is
    known the zeroed weights are returned as-is.

    Example:
        Base C=.20 S=.20 F=.25 T=.15 U=.20 with T unknown:
        factor = 1.0 / 0.85, so C becomes ~.235 and T becomes 0.
    """
    weights: Dict[FeatureCode, float] = dict(base_weights)
    known_total = 0.0
    unknown_total = 0.0
    codes = _active_codes(flags)

    for code in codes:
        signal = signals.get(code)
        weight = weights.get(code, 0.0)
        if signal is None or not signal.known:
            unknown_total += weight
            weights[code] = 0.0
        else:
            known_total += weight

    if known_total == 0:
        return weights

    if unknown_total > 0:
        factor = (known_total + unknown_total) / known_total
        for code in codes:
            if weights.get(code, 0.0) > 0:
                weights[code] *= factor

    return weights


def compute_raw_score(
    signals: FeatureSignals,
    pair_type: PairType,
    flags: FeatureFlags = DEFAULT_FEATURE_FLAGS,
) -> Tuple[float, Dict[FeatureCode, float]]:
    """
    Weighted mean of normalized known signals.

    Returns:
        (raw_score, weights_used). raw_score is in [0, 1]; it is
        NEUTRAL_RAW_SCORE when no known signal carries weight.
    """
    weights_used = redistribute_weights(signals, get_weights_for_pair_type(pair_type), flags)

    weighted_sum = 0.0
    total_weight = 0.0
    for code, signal in signals.items():
        weight = weights_used.get(code, 0.0)
        if weight > 0 and signal.known:
            weighted_sum += normalize_feature_value(signal.value) * weight
            total_weight += weight

    if total_weight == 0:
        return NEUTRAL_RAW_SCORE, weights_used

    return min(1.0, max(0.0, weighted_sum / total_weight)), weights_used


# ---------------------------------------------------------------------------
# Score analysis (debugging / explanations)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FeatureContribution:
    value: int
    weight: float
    contribution: float
    known: bool


def get_feature_contributions(
    signals: FeatureSignals,
    pair_type: PairType,
    flags: FeatureFlags = DEFAULT_FEATURE_FLAGS,
) -> Dict[FeatureCode, FeatureContribution]:
    """Per-code value, redistributed weight and weighted contribution."""
    weights_used = redistribute_weights(signals, get_weights_for_pair_type(pair_type), flags)
    contributions = {
        code: FeatureContribution(value=0, weight=0.0, contribution=0.0, known=False)
        for code in FeatureCode
    }
    for code, signal in signals.items():
        weight = weights_used.get(code, 0.0)
        contributions[code] = FeatureContribution(
            value=signal.value,
            weight=weight,
            contribution=normalize_feature_value(signal.value) * weight if signal.known else 0.0,
            known=signal.known,
        )
    return contributions


def get_dominant_feature(
    signals: FeatureSignals,
    pair_type: PairType,
    flags: FeatureFlags = DEFAULT_FEATURE_FLAGS,
) -> Optional[FeatureCode]:
    """The code contributing more than half of the total, if any."""
    contributions = get_feature_contributions(signals, pair_type, flags)

    total = 0.0
    best = 0.0
    dominant: Optional[FeatureCode] = None
    for code in FeatureCode:
        contrib = abs(contributions[code].contribution)
        total += contrib
        if contrib > best:
            best = contrib
            dominant = code

    if total > 0 and best / total > 0.5:
        return dominant
    return None
