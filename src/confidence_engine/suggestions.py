"""
Styling suggestions: Mode A ("what to add") and Mode B ("make it work").

Selection is fully deterministic. Mode A picks a static per-category
template. Mode B orders cap reasons by a fixed priority table (ties broken
by a stable order), takes the first bullet of each of the top reasons and
resolves its text for the requested style vibe.

Bullet keys are the stable tokens a UI persists and uses to open tip
sheets; resolved text is display-only and can always be recomputed with
resolve_bullet_title().

Usage:
    from confidence_engine.suggestions import (
        generate_mode_a_suggestions,
        generate_outfit_mode_b_suggestions,
    )

    if result.suggestions_mode == SuggestionsMode.B:
        mode_b = generate_outfit_mode_b_suggestions(result.near_matches, vibe)
"""

from collections import Counter
from typing import (
    Collection,
    Iterable,
    List,
    Optional,
    Sequence,
    Set,
    Tuple,
    Union,
)

from config.constants import (
    DEFAULT_FEATURE_FLAGS,
    DEFAULT_THRESHOLDS,
    FeatureFlags,
    Thresholds,
)
from confidence_engine.config import (
    CAP_REASON_STABLE_ORDER,
    DEFAULT_MODE_B_CONFIG,
    DEFAULT_TEMPLATE_KEY,
    MODE_A_BULLETS_BY_KEY,
    MODE_A_TEMPLATES,
    MODE_B_BULLETS_BY_KEY,
    MODE_B_COPY_BY_REASON,
    REASON_PRIORITY,
    SAFE_GENERIC_BULLET_KEY,
    SAFE_GENERIC_BULLET_TEXT,
    ModeBConfig,
)
from confidence_engine.types import (
    CapReason,
    Category,
    ConfidenceTier,
    ModeASuggestion,
    ModeBSuggestion,
    PairEvaluation,
    SlotCandidate,
    StyleVibe,
    SuggestionBullet,
)
from core.logging import get_logger

logger = get_logger(__name__)

VibeArg = Optional[Union[StyleVibe, str]]

CONTEXT_SELECTED_OUTFIT = "selected_outfit"
CONTEXT_AGGREGATE = "aggregate"


def _resolve_text(text: str, text_by_style, vibe: VibeArg) -> str:
    if not vibe:
        return text
    return text_by_style.get(vibe, text)


# =============================================================================
# Near Matches & Cap Reasons
# =============================================================================

def select_near_matches(
    evaluations: Iterable[PairEvaluation],
    limit: Optional[int] = None,
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
) -> List[PairEvaluation]:
    """
    MEDIUM pairs worth "make it work" guidance.

    Type 2a (score >= the pair's own HIGH threshold, with caps) come first,
    then Type 2b (score >= NEAR_MATCH_STRONG_MEDIUM_MIN); each group is
    sorted by score descending. limit=None returns every near match.
    """
    type_2a: List[PairEvaluation] = []
    type_2b: List[PairEvaluation] = []
    for evaluation in evaluations:
        if evaluation.confidence_tier != ConfidenceTier.MEDIUM:
            continue
        if evaluation.raw_score >= evaluation.high_threshold_used and evaluation.cap_reasons:
            type_2a.append(evaluation)
        elif evaluation.raw_score >= thresholds.NEAR_MATCH_STRONG_MEDIUM_MIN:
            type_2b.append(evaluation)

    type_2a.sort(key=lambda e: e.raw_score, reverse=True)
    type_2b.sort(key=lambda e: e.raw_score, reverse=True)
    near_matches = type_2a + type_2b
    if limit is not None:
        near_matches = near_matches[:limit]
    return near_matches


def aggregate_cap_reasons(near_matches: Iterable[PairEvaluation]) -> List[CapReason]:
    """Distinct cap reasons, most frequent first, then by priority."""
    counts: Counter = Counter()
    for evaluation in near_matches:
        counts.update(evaluation.cap_reasons)
    return sorted(
        counts,
        key=lambda reason: (-counts[reason], -REASON_PRIORITY.get(reason, 0)),
    )


def should_show_mode_b(
    cap_reasons: Iterable[CapReason],
    is_hard_fail: bool,
    flags: FeatureFlags = DEFAULT_FEATURE_FLAGS,
    config: ModeBConfig = DEFAULT_MODE_B_CONFIG,
) -> bool:
    """Pair-level gate: Mode B needs at least one non-excluded cap reason."""
    if not flags.mode_b_strong_medium_fallback or is_hard_fail:
        return False
    return any(reason not in config.excluded_reasons for reason in cap_reasons)


# =============================================================================
# Mode A
# =============================================================================

def generate_mode_a_suggestions(category: Category, vibe: VibeArg = None) -> ModeASuggestion:
    """Static per-category template, text resolved for vibe."""
    template = MODE_A_TEMPLATES.get(Category(category).value, MODE_A_TEMPLATES[DEFAULT_TEMPLATE_KEY])
    return ModeASuggestion(
        intro=template.intro,
        bullets=tuple(
            SuggestionBullet(
                key=bullet.key,
                text=_resolve_text(bullet.text, bullet.text_by_style, vibe),
                target=bullet.target,
            )
            for bullet in template.bullets
        ),
    )


def filter_mode_a_bullets(
    bullets: Sequence[SuggestionBullet],
    wardrobe_count: int,
    matched_categories: Collection[Category] = (),
) -> List[SuggestionBullet]:
    """
    Drop bullets that would be redundant for this user, preserving order.

    Empty wardrobe: generic (null-target) bullets are dropped. Non-empty
    wardrobe: bullets whose target is already matched are dropped as well.
    """
    matched = set(matched_categories)
    kept: List[SuggestionBullet] = []
    for bullet in bullets:
        if wardrobe_count == 0 and bullet.target is None:
            continue
        if wardrobe_count > 0 and bullet.target is not None and bullet.target in matched:
            continue
        kept.append(bullet)
    return kept


# =============================================================================
# Mode B
# =============================================================================

def _stable_index(reason: CapReason) -> int:
    try:
        return CAP_REASON_STABLE_ORDER.index(reason)
    except ValueError:
        return len(CAP_REASON_STABLE_ORDER)


def build_mode_b_bullets(
    cap_reasons: Iterable[CapReason],
    vibe: VibeArg = None,
    config: ModeBConfig = DEFAULT_MODE_B_CONFIG,
) -> Tuple[Tuple[SuggestionBullet, ...], Tuple[CapReason, ...]]:
    """
    Deterministic Mode B bullets.

    1. Drop excluded reasons.
    2. Sort by priority (desc), ties by stable order.
    3. Take the top max_bullets; first bullet of each reason.
    4. If fewer than min_bullets and no reason at all was used, append the
       generic fallback bullet.

    Returns:
        (bullets, reasons_used)
    """
    valid = [r for r in cap_reasons if r not in config.excluded_reasons]
    ordered = sorted(valid, key=lambda r: (-REASON_PRIORITY.get(r, 0), _stable_index(r)))

    bullets: List[SuggestionBullet] = []
    reasons_used: List[CapReason] = []
    for reason in ordered[:config.max_bullets]:
        copy = MODE_B_COPY_BY_REASON.get(reason)
        if not copy:
            continue
        bullet = copy[0]
        bullets.append(SuggestionBullet(
            key=bullet.key,
            text=_resolve_text(bullet.text, bullet.text_by_style, vibe),
        ))
        reasons_used.append(reason)

    # Generic fallback only when nothing (real or MISSING_KEY_SIGNAL) produced copy
    if len(bullets) < config.min_bullets and not reasons_used:
        bullets.append(SuggestionBullet(key=SAFE_GENERIC_BULLET_KEY, text=SAFE_GENERIC_BULLET_TEXT))

    return tuple(bullets), tuple(reasons_used)


def generate_mode_b_suggestions(
    cap_reasons: Iterable[CapReason],
    vibe: VibeArg = None,
    config: ModeBConfig = DEFAULT_MODE_B_CONFIG,
) -> ModeBSuggestion:
    bullets, reasons_used = build_mode_b_bullets(cap_reasons, vibe, config)
    return ModeBSuggestion(bullets=bullets, reasons_used=reasons_used)


def _is_type_2b_without_caps(evaluation: PairEvaluation, thresholds: Thresholds) -> bool:
    return (
        not evaluation.cap_reasons
        and thresholds.NEAR_MATCH_STRONG_MEDIUM_MIN
        <= evaluation.raw_score
        < evaluation.high_threshold_used
    )


def generate_outfit_mode_b_suggestions(
    near_matches: Sequence[PairEvaluation],
    vibe: VibeArg = None,
    context: Optional[str] = None,
    config: ModeBConfig = DEFAULT_MODE_B_CONFIG,
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
) -> Optional[ModeBSuggestion]:
    """
    Outfit-level Mode B from aggregated cap reasons.

    With no aggregated reasons, a Type 2b near match (strong MEDIUM, no
    caps) yields the single MISSING_KEY_SIGNAL bullet; anything else
    yields None.
    """
    if not near_matches:
        return None

    aggregated = aggregate_cap_reasons(near_matches)
    if aggregated:
        return generate_mode_b_suggestions(aggregated, vibe, config)

    if any(_is_type_2b_without_caps(e, thresholds) for e in near_matches):
        best = max(near_matches, key=lambda e: e.raw_score)
        logger.debug(
            "Type 2b near match without cap reasons, using generic bullet",
            context=context or "unknown",
            pair_type=best.pair_type.value,
            score_band=f"{thresholds.NEAR_MATCH_STRONG_MEDIUM_MIN}-{best.high_threshold_used}",
            near_matches=len(near_matches),
            best_score=round(best.raw_score, 3),
        )
        return generate_mode_b_suggestions([CapReason.MISSING_KEY_SIGNAL], vibe, config)

    logger.warning(
        "Near matches without cap reasons and not Type 2b",
        context=context or "unknown",
        near_matches=len(near_matches),
    )
    return None


def get_mode_b_bullets(
    selected_candidates: Optional[Sequence[SlotCandidate]],
    near_matches: Sequence[PairEvaluation],
    vibe: VibeArg = None,
    config: ModeBConfig = DEFAULT_MODE_B_CONFIG,
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
) -> Optional[ModeBSuggestion]:
    """
    Mode B for the "near" tab.

    With a selected outfit, only its MEDIUM candidates feed the aggregate;
    if it has none, fall back to every near match.
    """
    if selected_candidates:
        medium = [c.evaluation for c in selected_candidates if c.tier == ConfidenceTier.MEDIUM]
        if medium:
            return generate_outfit_mode_b_suggestions(
                medium, vibe, CONTEXT_SELECTED_OUTFIT, config, thresholds
            )
        logger.warning(
            "Selected outfit has no MEDIUM candidates, falling back to aggregate",
            candidates=len(selected_candidates),
        )
    return generate_outfit_mode_b_suggestions(
        near_matches, vibe, CONTEXT_AGGREGATE, config, thresholds
    )


# =============================================================================
# Bullet Title Resolution
# =============================================================================

def is_valid_bullet_key(key: object) -> bool:
    return isinstance(key, str) and (key in MODE_A_BULLETS_BY_KEY or key in MODE_B_BULLETS_BY_KEY)


def resolve_bullet_title(bullet_key: object, vibe: VibeArg = None) -> Optional[str]:
    """
    Title for a persisted bullet key.

    No vibe returns the base title. Mode A keys are checked before Mode B.
    Unknown or non-string keys return None.
    """
    if not isinstance(bullet_key, str) or not bullet_key:
        return None

    bullet = MODE_A_BULLETS_BY_KEY.get(bullet_key) or MODE_B_BULLETS_BY_KEY.get(bullet_key)
    if bullet is None:
        if bullet_key == SAFE_GENERIC_BULLET_KEY:
            return SAFE_GENERIC_BULLET_TEXT
        return None
    return _resolve_text(bullet.text, bullet.text_by_style, vibe)


class BulletTitleResolver:
    """
    resolve_bullet_title() that warns once per unknown key.

    Deep links can replay the same stale key many times; the warn-once
    set lives on the instance.
    """

    def __init__(self):
        self._warned: Set[str] = set()

    def resolve(self, bullet_key: object, vibe: VibeArg = None) -> Optional[str]:
        title = resolve_bullet_title(bullet_key, vibe)
        if title is None and bullet_key is not None:
            key_str = str(bullet_key)
            if key_str not in self._warned:
                self._warned.add(key_str)
                logger.warning("Unknown bullet key", bullet_key=key_str)
        return title
