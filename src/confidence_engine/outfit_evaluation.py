"""
Outfit evaluation: aggregate pair evaluations against a whole wardrobe.

Aggregation:
1. Outfit confidence from tier counts (see calculate_outfit_confidence)
2. Matches section only for HIGH pairs
3. Near matches for Mode B suggestions (full list, never capped here)
4. Suggestions mode (A or B)

Usage:
    from confidence_engine.outfit_evaluation import evaluate_outfit

    result = evaluate_outfit(scanned, wardrobe, EvalContext(scan_session_id="..."))
    if result.show_matches_section:
        render(result.matches)
"""

from collections import Counter
from typing import Dict, List, Optional, Sequence

from config.constants import (
    DEFAULT_FEATURE_FLAGS,
    DEFAULT_OUTFIT_CONFIG,
    DEFAULT_THRESHOLDS,
    FeatureFlags,
    OutfitConfig,
    Thresholds,
)
from confidence_engine.pair_evaluation import evaluate_against_wardrobe
from confidence_engine.suggestions import select_near_matches
from confidence_engine.types import (
    Category,
    ConfidenceItem,
    ConfidenceTier,
    EvalContext,
    OutfitEvaluation,
    PairEvaluation,
    SuggestionsMode,
)
from core.logging import get_logger

logger = get_logger(__name__)


# =============================================================================
# Outfit Evaluation
# =============================================================================

def evaluate_outfit(
    target: ConfidenceItem,
    wardrobe: Sequence[ConfidenceItem],
    ctx: Optional[EvalContext] = None,
    flags: FeatureFlags = DEFAULT_FEATURE_FLAGS,
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
    config: OutfitConfig = DEFAULT_OUTFIT_CONFIG,
) -> OutfitEvaluation:
    """
    Evaluate a scanned item against every wardrobe item.

    Args:
        target: The scanned item
        wardrobe: The user's wardrobe items
        ctx: Optional per-scan context, only used for log correlation
        flags: Feature flags
        thresholds: Tier thresholds
        config: Display limits

    Returns:
        OutfitEvaluation. With no valid pairs at all, a trivial LOW / Mode A
        result with empty lists.
    """
    evaluations = evaluate_against_wardrobe(target, wardrobe, ctx, flags, thresholds)
    return aggregate_outfit(evaluations, target, wardrobe, ctx, thresholds, config)


def aggregate_outfit(
    evaluations: Sequence[PairEvaluation],
    target: ConfidenceItem,
    wardrobe: Sequence[ConfidenceItem],
    ctx: Optional[EvalContext] = None,
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
    config: OutfitConfig = DEFAULT_OUTFIT_CONFIG,
) -> OutfitEvaluation:
    """Aggregate already-computed pair evaluations of target against wardrobe."""
    tier_counts = Counter(e.confidence_tier.value for e in evaluations)
    logger.debug(
        "Outfit evaluated",
        scan_session_id=ctx.scan_session_id if ctx else None,
        scanned_category=target.category.value,
        wardrobe_size=len(wardrobe),
        evaluations=len(evaluations),
        tier_distribution=dict(tier_counts),
    )

    if not evaluations:
        return OutfitEvaluation(
            show_matches_section=False,
            outfit_confidence=ConfidenceTier.LOW,
            matches=(),
            near_matches=(),
            suggestions_mode=SuggestionsMode.A,
            matched_categories=(),
            best_match=None,
        )

    high_matches = [e for e in evaluations if e.confidence_tier == ConfidenceTier.HIGH]
    # Stable sort keeps wardrobe order among equal scores
    matches = sorted(high_matches, key=lambda e: e.raw_score, reverse=True)
    matches = matches[:config.max_matches_shown]

    near_matches = select_near_matches(evaluations, thresholds=thresholds)

    suggestions_mode = determine_suggestions_mode(
        len(high_matches), near_matches, len(wardrobe), ctx
    )

    # Only what is actually shown: HIGH matches plus selected near matches.
    # Weak MEDIUM pairs must not suppress Mode A bullets.
    matched_categories = _extract_matched_categories(high_matches + near_matches, wardrobe)

    return OutfitEvaluation(
        show_matches_section=bool(high_matches),
        outfit_confidence=calculate_outfit_confidence(evaluations),
        matches=tuple(matches),
        near_matches=tuple(near_matches),
        suggestions_mode=suggestions_mode,
        matched_categories=tuple(matched_categories),
        best_match=matches[0] if matches else None,
    )


# =============================================================================
# Helpers
# =============================================================================

def _extract_matched_categories(
    evaluations: Sequence[PairEvaluation],
    wardrobe: Sequence[ConfidenceItem],
) -> List[Category]:
    category_by_id = {item.id: item.category for item in wardrobe}

    matched: Dict[Category, None] = {}
    for evaluation in evaluations:
        # The wardrobe side is usually item_b, but may be item_a
        for item_id in (evaluation.item_b_id, evaluation.item_a_id):
            category = category_by_id.get(item_id)
            if category is not None:
                matched.setdefault(category, None)
    return list(matched)


def calculate_outfit_confidence(evaluations: Sequence[PairEvaluation]) -> ConfidenceTier:
    """
    Outfit-level confidence from pair tiers.

    - 2+ HIGH                -> HIGH
    - exactly 1 HIGH, no LOW -> HIGH
    - exactly 1 HIGH, any LOW -> MEDIUM (risky)
    - no HIGH, any MEDIUM    -> MEDIUM
    - otherwise              -> LOW
    """
    counts = Counter(e.confidence_tier for e in evaluations)
    high = counts[ConfidenceTier.HIGH]

    if high >= 2:
        return ConfidenceTier.HIGH
    if high == 1:
        return ConfidenceTier.MEDIUM if counts[ConfidenceTier.LOW] > 0 else ConfidenceTier.HIGH
    if counts[ConfidenceTier.MEDIUM] > 0:
        return ConfidenceTier.MEDIUM
    return ConfidenceTier.LOW


def determine_suggestions_mode(
    high_match_count: int,
    near_matches: Sequence[PairEvaluation],
    wardrobe_size: int,
    ctx: Optional[EvalContext] = None,
) -> SuggestionsMode:
    """
    Mode A ("what to add") unless near matches carry something to fix.

    Mode B only when there are no HIGH matches and at least one near match
    has a cap reason.
    """
    if wardrobe_size == 0:
        return _log_mode_decision(SuggestionsMode.A, None, ctx, reason="emptyWardrobe")

    if high_match_count > 0:
        return _log_mode_decision(
            SuggestionsMode.A, None, ctx,
            reason="hasHighMatches", high_match_count=high_match_count,
        )

    if near_matches:
        if any(m.cap_reasons for m in near_matches):
            return _log_mode_decision(
                SuggestionsMode.B, "hasCapReasons", ctx, near_match_count=len(near_matches),
            )
        return _log_mode_decision(
            SuggestionsMode.A, None, ctx,
            reason="noCapReasons", near_match_count=len(near_matches),
        )

    return _log_mode_decision(SuggestionsMode.A, None, ctx, reason="noNearMatches")


def _log_mode_decision(
    mode: SuggestionsMode,
    trigger: Optional[str],
    ctx: Optional[EvalContext],
    **details,
) -> SuggestionsMode:
    logger.debug(
        "Suggestions mode decided",
        scan_session_id=ctx.scan_session_id if ctx else None,
        mode=mode.value,
        trigger=trigger,
        **details,
    )
    return mode


# =============================================================================
# Category-Grouped Matches
# =============================================================================

def group_matches_by_category(
    evaluations: Sequence[PairEvaluation],
    wardrobe: Sequence[ConfidenceItem],
) -> Dict[Category, List[PairEvaluation]]:
    """Group by the wardrobe item's category, each group score-descending."""
    item_by_id = {item.id: item for item in wardrobe}

    grouped: Dict[Category, List[PairEvaluation]] = {}
    for evaluation in evaluations:
        wardrobe_item = item_by_id.get(evaluation.item_b_id) or item_by_id.get(evaluation.item_a_id)
        if wardrobe_item is None:
            continue
        grouped.setdefault(wardrobe_item.category, []).append(evaluation)

    for group in grouped.values():
        group.sort(key=lambda e: e.raw_score, reverse=True)
    return grouped


def get_best_match_per_category(
    evaluations: Sequence[PairEvaluation],
    wardrobe: Sequence[ConfidenceItem],
) -> List[PairEvaluation]:
    """At most one evaluation per wardrobe category, score-descending overall."""
    grouped = group_matches_by_category(evaluations, wardrobe)
    best = [group[0] for group in grouped.values() if group]
    best.sort(key=lambda e: e.raw_score, reverse=True)
    return best
