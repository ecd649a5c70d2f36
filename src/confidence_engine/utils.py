"""
Scoring primitives for the confidence engine.

Each *_score function maps a pair of attribute values to an integer in
[-2, 2] and is symmetric in its two arguments. They never raise on
well-typed input; "unknown" handling that needs a known=False result lives
in confidence_engine.signals.
"""

from typing import Iterable, Optional, Set

from confidence_engine.config import (
    COVERED_CATEGORIES_MAP,
    NEVER_COVERED_CATEGORIES,
    get_style_distance,
)
from confidence_engine.types import (
    Category,
    ColorProfile,
    ConfidenceItem,
    Level,
    PairEvaluation,
    PairType,
    StyleFamily,
    TextureType,
)
from core.utils import clamp, round_half_up


# =============================================================================
# Pair Type Resolution
# =============================================================================

_VALID_PAIR_TYPES = {p.value: p for p in PairType}


def has_shoes(item_a: ConfidenceItem, item_b: ConfidenceItem) -> bool:
    return item_a.category == Category.SHOES or item_b.category == Category.SHOES


def get_pair_type(cat_a: Category, cat_b: Category) -> Optional[PairType]:
    """
    Resolve the whitelisted pair type for two categories.

    The alphabetical key is tried first, then the reversed key, since the
    whitelist is not uniformly alphabetical (e.g. "tops_bottoms"). Same
    category or an unlisted combination returns None.
    """
    a, b = Category(cat_a).value, Category(cat_b).value
    if a == b:
        return None
    first, second = sorted((a, b))
    return (
        _VALID_PAIR_TYPES.get(f"{first}_{second}")
        or _VALID_PAIR_TYPES.get(f"{second}_{first}")
    )


# =============================================================================
# Color
# =============================================================================

_LEVEL_VALUE = {Level.LOW: 1, Level.MED: 2, Level.HIGH: 3}


def hue_distance(hue_a: float, hue_b: float) -> float:
    """Circular hue distance in degrees, 0..180."""
    diff = abs(hue_a - hue_b)
    return min(diff, 360 - diff)


def _hue_bucket(dist: float) -> int:
    if dist <= 30:
        return 2    # same / analogous
    if dist <= 45:
        return -2   # near-clash
    if dist <= 90:
        return -1   # awkward
    if dist <= 120:
        return 0    # triadic
    if dist <= 150:
        return 1    # split-complementary
    return 2        # complementary


def color_score(a: ColorProfile, b: ColorProfile) -> int:
    if a.is_neutral and b.is_neutral:
        return 2
    if a.is_neutral or b.is_neutral:
        return 1

    score = _hue_bucket(hue_distance(a.dominant_hue or 0, b.dominant_hue or 0))

    # Saturation: both bright amplifies, both muted dampens
    if a.saturation == Level.HIGH and b.saturation == Level.HIGH:
        score = score + 1 if score > 0 else score - 1
    elif a.saturation == Level.LOW and b.saturation == Level.LOW:
        score = round_half_up(score * 0.5)

    # Light/dark contrast bonus
    if abs(_LEVEL_VALUE[a.value] - _LEVEL_VALUE[b.value]) >= 2:
        score += 1

    return int(clamp(score, -2, 2))


# =============================================================================
# Style / Formality
# =============================================================================

def style_score(a: StyleFamily, b: StyleFamily) -> int:
    return get_style_distance(a, b)


_FORMALITY_DIFF_SCORE = {0: 2, 1: 1, 2: 0, 3: -1}


def formality_score(level_a: int, level_b: int) -> int:
    """Formality ladder: 0 steps apart = +2 ... 4 steps apart = -2."""
    return _FORMALITY_DIFF_SCORE.get(abs(level_a - level_b), -2)


# =============================================================================
# Texture
# =============================================================================

_COMPLEMENTARY_TEXTURES = (
    frozenset({TextureType.SMOOTH, TextureType.TEXTURED}),
    frozenset({TextureType.SOFT, TextureType.STRUCTURED}),
)
_HIGH_IMPACT_TEXTURES = frozenset({TextureType.TEXTURED, TextureType.STRUCTURED})


def texture_score(a: TextureType, b: TextureType) -> int:
    if a == TextureType.UNKNOWN or b == TextureType.UNKNOWN:
        return 0
    if a == b:
        # Doubled high-impact textures are caught here first and read as "same"
        return 1
    if frozenset({a, b}) in _COMPLEMENTARY_TEXTURES:
        return 2
    if a == TextureType.MIXED or b == TextureType.MIXED:
        return 1
    if a in _HIGH_IMPACT_TEXTURES and b in _HIGH_IMPACT_TEXTURES:
        return -1
    return 0


# =============================================================================
# Usage
# =============================================================================

def usage_score(
    formality_a: int,
    formality_b: int,
    style_a: StyleFamily,
    style_b: StyleFamily,
) -> int:
    """Usage context: formality blended with style, weighted toward formality."""
    f = formality_score(formality_a, formality_b)
    s = style_score(style_a, style_b)
    return round_half_up(f * 0.6 + s * 0.4)


def dampened_usage_score(formality_a: int, formality_b: int) -> int:
    """Style-blind usage estimate used when either style is unknown."""
    return round_half_up(formality_score(formality_a, formality_b) * 0.7)


# =============================================================================
# Normalization
# =============================================================================

def normalize_feature_value(value: float) -> float:
    """Map [-2, 2] linearly onto [0, 1], clamping out-of-range input."""
    return (clamp(value, -2, 2) + 2) / 4


def denormalize_feature_value(normalized: float) -> float:
    return clamp(normalized, 0, 1) * 4 - 2


# =============================================================================
# Covered Categories
# =============================================================================

def get_covered_category(
    pair_type: PairType, scanned_category: Category
) -> Optional[Category]:
    """
    The wardrobe-side category a match "covers" for the scanned item.

    Returns None when the scanned category is not part of the pair, or when
    the other side is an always-optional category (accessories, bags).

    Example:
        >>> get_covered_category(PairType.TOPS_BOTTOMS, Category.TOPS)
        <Category.BOTTOMS: 'bottoms'>
    """
    mapping = COVERED_CATEGORIES_MAP.get(pair_type)
    if mapping is None:
        return None

    cat_a, cat_b = mapping
    if scanned_category == cat_a:
        covered = cat_b
    elif scanned_category == cat_b:
        covered = cat_a
    else:
        return None

    if covered in NEVER_COVERED_CATEGORIES:
        return None
    return covered


def get_covered_categories(
    matches: Iterable[PairEvaluation], scanned_category: Category
) -> Set[Category]:
    covered: Set[Category] = set()
    for match in matches:
        category = get_covered_category(match.pair_type, scanned_category)
        if category is not None:
            covered.add(category)
    return covered
