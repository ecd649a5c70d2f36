"""
Pair evaluation: signals -> score -> gates -> tier for one item pair.

Usage:
    from confidence_engine.pair_evaluation import evaluate_pair

    evaluation = evaluate_pair(scanned, wardrobe_item)
    if evaluation is None:
        ...  # unsupported category combination, skip silently
"""

from typing import Iterable, List, Optional, Sequence

from config.constants import (
    DEFAULT_FEATURE_FLAGS,
    DEFAULT_THRESHOLDS,
    FeatureFlags,
    Thresholds,
)
from confidence_engine.gates import evaluate_gates
from confidence_engine.scoring import compute_raw_score
from confidence_engine.signals import compute_feature_signals
from confidence_engine.tiers import get_high_threshold_used, map_score_to_tier
from confidence_engine.types import (
    ConfidenceItem,
    EvalContext,
    Level,
    PairEvaluation,
    StyleFamily,
)
from confidence_engine.utils import get_pair_type, has_shoes

_STATEMENT_FAMILIES = frozenset({
    StyleFamily.EDGY, StyleFamily.ROMANTIC, StyleFamily.STREET, StyleFamily.BOHO,
})


def is_statement_piece(item: ConfidenceItem) -> bool:
    """Bright color, a strong style family, or high formality."""
    color = item.color_profile
    if not color.is_neutral and color.saturation == Level.HIGH:
        return True
    if item.style_family in _STATEMENT_FAMILIES:
        return True
    return item.formality_level >= 4


def evaluate_pair(
    item_a: ConfidenceItem,
    item_b: ConfidenceItem,
    ctx: Optional[EvalContext] = None,
    flags: FeatureFlags = DEFAULT_FEATURE_FLAGS,
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
) -> Optional[PairEvaluation]:
    """
    Evaluate one pair.

    Returns None for an unsupported category combination. Explanation
    fields are left at their defaults; see confidence_engine.explanations.
    ctx is accepted for call-site symmetry with outfit evaluation; pair
    evaluation itself does not log.
    """
    pair_type = get_pair_type(item_a.category, item_b.category)
    if pair_type is None:
        return None

    is_shoes = has_shoes(item_a, item_b)
    features = compute_feature_signals(item_a, item_b, pair_type, flags)
    raw_score, weights_used = compute_raw_score(features, pair_type, flags)
    gate_result = evaluate_gates(features, item_a, item_b, pair_type)
    tier = map_score_to_tier(raw_score, gate_result, is_shoes, thresholds)

    return PairEvaluation(
        item_a_id=item_a.id,
        item_b_id=item_b.id,
        pair_type=pair_type,
        raw_score=raw_score,
        confidence_tier=tier,
        forced_tier=gate_result.forced_tier,
        hard_fail_reason=gate_result.hard_fail_reason,
        cap_reasons=gate_result.cap_reasons,
        features=features,
        both_statement=is_statement_piece(item_a) and is_statement_piece(item_b),
        is_shoes_involved=is_shoes,
        high_threshold_used=get_high_threshold_used(is_shoes, thresholds),
        weights_used=weights_used,
    )


def evaluate_all_pairs(
    items: Sequence[ConfidenceItem],
    flags: FeatureFlags = DEFAULT_FEATURE_FLAGS,
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
) -> List[PairEvaluation]:
    """Every valid unordered pair (i < j) from a list of items."""
    evaluations: List[PairEvaluation] = []
    for i, item_a in enumerate(items):
        for item_b in items[i + 1:]:
            evaluation = evaluate_pair(item_a, item_b, flags=flags, thresholds=thresholds)
            if evaluation is not None:
                evaluations.append(evaluation)
    return evaluations


def evaluate_against_wardrobe(
    target: ConfidenceItem,
    wardrobe: Iterable[ConfidenceItem],
    ctx: Optional[EvalContext] = None,
    flags: FeatureFlags = DEFAULT_FEATURE_FLAGS,
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
) -> List[PairEvaluation]:
    """Evaluate target against each wardrobe item, skipping itself and invalid pairs."""
    evaluations: List[PairEvaluation] = []
    for wardrobe_item in wardrobe:
        if wardrobe_item.id == target.id:
            continue
        evaluation = evaluate_pair(target, wardrobe_item, ctx, flags, thresholds)
        if evaluation is not None:
            evaluations.append(evaluation)
    return evaluations
