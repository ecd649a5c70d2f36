"""Gates: hard fails and soft caps over a pair's feature signals.

Two-phase system:
1. Hard fails (checked in registry order, first match wins): force the
   pair to LOW. Cap reasons are never evaluated after a hard fail.
2. Soft caps (all evaluated, no short-circuit): each triggered cap limits
   the pair to MEDIUM and is reported as a cap reason.

Every hard fail is a conjunction; one strongly negative signal on its own
never triggers one.

Integration point in pair_evaluation.evaluate_pair():
    gate_result = evaluate_gates(signals, item_a, item_b, pair_type)
    tier = map_score_to_tier(raw_score, gate_result, is_shoes)
"""

from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from confidence_engine.types import (
    CapReason,
    ConfidenceItem,
    ConfidenceTier,
    FeatureResult,
    FeatureSignals,
    GateResult,
    HardFailReason,
    HardFailResult,
    PairType,
)
from confidence_engine.utils import has_shoes

_Check = Callable[[FeatureSignals, bool], bool]


def _known_eq(result: FeatureResult, value: int) -> bool:
    return result.known and result.value == value


def _known_le(result: FeatureResult, value: int) -> bool:
    return result.known and result.value <= value


# ============================================================================
# Phase 1: hard fails
# ============================================================================

def _formality_clash_with_usage(signals: FeatureSignals, shoes: bool) -> bool:
    """F == -2 and U <= -1."""
    return _known_eq(signals.F, -2) and _known_le(signals.U, -1)


def _style_opposition_no_overlap(signals: FeatureSignals, shoes: bool) -> bool:
    """S == -2 and U <= -1."""
    return _known_eq(signals.S, -2) and _known_le(signals.U, -1)


def _shoes_texture_formality_clash(signals: FeatureSignals, shoes: bool) -> bool:
    """Shoes involved, T == -2 and F <= -1."""
    return shoes and _known_eq(signals.T, -2) and _known_le(signals.F, -1)


_HARD_FAIL_RULES: List[Tuple[HardFailReason, _Check]] = [
    (HardFailReason.FORMALITY_CLASH_WITH_USAGE, _formality_clash_with_usage),
    (HardFailReason.STYLE_OPPOSITION_NO_OVERLAP, _style_opposition_no_overlap),
    (HardFailReason.SHOES_TEXTURE_FORMALITY_CLASH, _shoes_texture_formality_clash),
]


# ============================================================================
# Phase 2: soft caps
# ============================================================================

def _formality_tension(signals: FeatureSignals, shoes: bool) -> bool:
    # 2+ level gap
    return _known_le(signals.F, 0)


def _style_tension(signals: FeatureSignals, shoes: bool) -> bool:
    return _known_le(signals.S, -2)


def _color_tension(signals: FeatureSignals, shoes: bool) -> bool:
    return _known_le(signals.C, -1)


def _texture_clash(signals: FeatureSignals, shoes: bool) -> bool:
    return _known_eq(signals.T, -2)


def _usage_mismatch(signals: FeatureSignals, shoes: bool) -> bool:
    return _known_eq(signals.U, -2)


def _shoes_confidence_dampen(signals: FeatureSignals, shoes: bool) -> bool:
    return shoes and (_known_le(signals.F, -1) or _known_le(signals.S, -1))


def _missing_key_signal(signals: FeatureSignals, shoes: bool) -> bool:
    # Style and texture are the key signals
    return not signals.S.known and not signals.T.known


_CAP_RULES: List[Tuple[CapReason, _Check]] = [
    (CapReason.FORMALITY_TENSION, _formality_tension),
    (CapReason.STYLE_TENSION, _style_tension),
    (CapReason.COLOR_TENSION, _color_tension),
    (CapReason.TEXTURE_CLASH, _texture_clash),
    (CapReason.USAGE_MISMATCH, _usage_mismatch),
    (CapReason.SHOES_CONFIDENCE_DAMPEN, _shoes_confidence_dampen),
    (CapReason.MISSING_KEY_SIGNAL, _missing_key_signal),
]


# ============================================================================
# Public API
# ============================================================================

def check_hard_fails(
    signals: FeatureSignals,
    item_a: ConfidenceItem,
    item_b: ConfidenceItem,
    pair_type: Optional[PairType] = None,
) -> HardFailResult:
    """Return the first triggered hard fail, in fixed rule order."""
    shoes = has_shoes(item_a, item_b)
    for reason, check_fn in _HARD_FAIL_RULES:
        if check_fn(signals, shoes):
            return HardFailResult(failed=True, reason=reason)
    return HardFailResult(failed=False, reason=None)


def compute_cap_reasons(
    signals: FeatureSignals,
    item_a: ConfidenceItem,
    item_b: ConfidenceItem,
    pair_type: Optional[PairType] = None,
) -> Tuple[CapReason, ...]:
    """Every triggered soft cap, in registry order, without duplicates."""
    shoes = has_shoes(item_a, item_b)
    return tuple(reason for reason, check_fn in _CAP_RULES if check_fn(signals, shoes))


def evaluate_gates(
    signals: FeatureSignals,
    item_a: ConfidenceItem,
    item_b: ConfidenceItem,
    pair_type: Optional[PairType] = None,
) -> GateResult:
    """Run both phases and return the combined GateResult."""
    hard_fail = check_hard_fails(signals, item_a, item_b, pair_type)
    if hard_fail.failed:
        return GateResult(
            forced_tier=ConfidenceTier.LOW,
            hard_fail_reason=hard_fail.reason,
            max_tier=ConfidenceTier.MEDIUM,
            cap_reasons=(),
        )

    cap_reasons = compute_cap_reasons(signals, item_a, item_b, pair_type)
    return GateResult(
        forced_tier=None,
        hard_fail_reason=None,
        max_tier=ConfidenceTier.MEDIUM if cap_reasons else ConfidenceTier.HIGH,
        cap_reasons=cap_reasons,
    )
