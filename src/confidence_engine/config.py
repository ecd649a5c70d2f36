"""
Static rule and copy tables for the confidence engine.

Everything here is read-only data: per-pair-type feature weights, the
style-family adjacency table, Mode A / Mode B copy keyed by stable bullet
keys, explanation templates and the covered-category map. Tables are
checked for coverage at import time (_validate_tables) so a new enum
member without a table entry fails loudly instead of silently falling
through a lookup.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping, Optional, Tuple

from confidence_engine.types import (
    CapReason,
    Category,
    FeatureCode,
    PairType,
    StyleFamily,
    StyleVibe,
)


# =============================================================================
# 1. FEATURE WEIGHTS
# =============================================================================

Weights = Mapping[FeatureCode, float]


def _weights(c: float, s: float, f: float, t: float, u: float, v: float = 0.0) -> Weights:
    return MappingProxyType({
        FeatureCode.C: c, FeatureCode.S: s, FeatureCode.F: f,
        FeatureCode.T: t, FeatureCode.U: u, FeatureCode.V: v,
    })


DEFAULT_WEIGHTS: Weights = _weights(c=0.20, s=0.20, f=0.25, t=0.15, u=0.20)

# Shoes lean on usage; outerwear leans on texture
_SHOES_WEIGHTS = _weights(c=0.15, s=0.20, f=0.25, t=0.10, u=0.30)
_OUTERWEAR_WEIGHTS = _weights(c=0.15, s=0.20, f=0.20, t=0.25, u=0.20)

WEIGHTS_BY_PAIR_TYPE: Mapping[PairType, Weights] = MappingProxyType({
    PairType.TOPS_BOTTOMS: DEFAULT_WEIGHTS,
    PairType.SKIRTS_TOPS: DEFAULT_WEIGHTS,
    PairType.TOPS_SHOES: _SHOES_WEIGHTS,
    PairType.BOTTOMS_SHOES: _SHOES_WEIGHTS,
    PairType.DRESSES_SHOES: _SHOES_WEIGHTS,
    PairType.SKIRTS_SHOES: _SHOES_WEIGHTS,
    PairType.TOPS_OUTERWEAR: _OUTERWEAR_WEIGHTS,
    PairType.BOTTOMS_OUTERWEAR: _OUTERWEAR_WEIGHTS,
    PairType.DRESSES_OUTERWEAR: _OUTERWEAR_WEIGHTS,
    PairType.SHOES_OUTERWEAR: _weights(c=0.10, s=0.20, f=0.25, t=0.20, u=0.25),
})


# =============================================================================
# 2. STYLE ADJACENCY
# =============================================================================

# One direction per pair; the lookup table below is made symmetric.
_STYLE_RELATIONS: Dict[int, Tuple[Tuple[StyleFamily, StyleFamily], ...]] = {
    # Natural neighbors
    2: (
        (StyleFamily.MINIMAL, StyleFamily.CLASSIC),
        (StyleFamily.MINIMAL, StyleFamily.PREPPY),
        (StyleFamily.CLASSIC, StyleFamily.PREPPY),
        (StyleFamily.CLASSIC, StyleFamily.ROMANTIC),
        (StyleFamily.STREET, StyleFamily.ATHLEISURE),
        (StyleFamily.STREET, StyleFamily.EDGY),
        (StyleFamily.ROMANTIC, StyleFamily.BOHO),
        (StyleFamily.EDGY, StyleFamily.BOHO),
        (StyleFamily.FORMAL, StyleFamily.CLASSIC),
        (StyleFamily.FORMAL, StyleFamily.MINIMAL),
    ),
    # Compatible
    1: (
        (StyleFamily.MINIMAL, StyleFamily.EDGY),
        (StyleFamily.CLASSIC, StyleFamily.BOHO),
        (StyleFamily.PREPPY, StyleFamily.ROMANTIC),
        (StyleFamily.MINIMAL, StyleFamily.ROMANTIC),
    ),
    # Tension
    -1: (
        (StyleFamily.PREPPY, StyleFamily.STREET),
        (StyleFamily.ROMANTIC, StyleFamily.STREET),
        (StyleFamily.FORMAL, StyleFamily.BOHO),
        (StyleFamily.ROMANTIC, StyleFamily.ATHLEISURE),
        (StyleFamily.ATHLEISURE, StyleFamily.MINIMAL),
        (StyleFamily.ATHLEISURE, StyleFamily.CLASSIC),
    ),
    # Opposing
    -2: (
        (StyleFamily.FORMAL, StyleFamily.ATHLEISURE),
        (StyleFamily.FORMAL, StyleFamily.STREET),
        (StyleFamily.PREPPY, StyleFamily.EDGY),
    ),
}


def _build_style_adjacency() -> Mapping[Tuple[StyleFamily, StyleFamily], int]:
    table: Dict[Tuple[StyleFamily, StyleFamily], int] = {}
    for score, pairs in _STYLE_RELATIONS.items():
        for a, b in pairs:
            table[(a, b)] = score
            table[(b, a)] = score
    return MappingProxyType(table)


STYLE_ADJACENCY = _build_style_adjacency()


def get_style_distance(a: StyleFamily, b: StyleFamily) -> int:
    """
    Adjacency score for two style families in [-2, 2].

    Same family is +2. Unknown or unlisted pairs are 0; callers that need
    to distinguish "unknown" handle it before calling.
    """
    if a == b:
        return 2
    if a == StyleFamily.UNKNOWN or b == StyleFamily.UNKNOWN:
        return 0
    return STYLE_ADJACENCY.get((a, b), 0)


# =============================================================================
# 3. MODE B PRIORITIES
# =============================================================================

REASON_PRIORITY: Mapping[CapReason, int] = MappingProxyType({
    CapReason.FORMALITY_TENSION: 5,
    CapReason.STYLE_TENSION: 4,
    CapReason.COLOR_TENSION: 3,
    CapReason.USAGE_MISMATCH: 2,
    CapReason.SHOES_CONFIDENCE_DAMPEN: 1,
    CapReason.TEXTURE_CLASH: 0,
    CapReason.MISSING_KEY_SIGNAL: 0,
})

# Tie-breaker when priorities match
CAP_REASON_STABLE_ORDER: Tuple[CapReason, ...] = (
    CapReason.FORMALITY_TENSION,
    CapReason.STYLE_TENSION,
    CapReason.COLOR_TENSION,
    CapReason.USAGE_MISMATCH,
    CapReason.SHOES_CONFIDENCE_DAMPEN,
    CapReason.TEXTURE_CLASH,
    CapReason.MISSING_KEY_SIGNAL,
)

SAFE_GENERIC_BULLET_KEY = "DEFAULT__GENERIC_FALLBACK"
SAFE_GENERIC_BULLET_TEXT = "Let one piece stand out and keep the rest simple."


@dataclass(frozen=True)
class ModeBConfig:
    """Bullet limits for Mode B ("make it work") guidance."""

    max_bullets: int = 3
    min_bullets: int = 2

    # TEXTURE_CLASH has no copy
    excluded_reasons: FrozenSet[CapReason] = field(
        default_factory=lambda: frozenset({CapReason.TEXTURE_CLASH})
    )


DEFAULT_MODE_B_CONFIG = ModeBConfig()


# =============================================================================
# 4. EXPLANATION TEMPLATES
# =============================================================================

@dataclass(frozen=True)
class ExplanationTemplate:
    """
    "Why this works" copy.

    pair_type None matches any pair type (generic fallback).
    base_text is level 1 (abstract), soft_variant level 2, concrete_variant
    level 3 (rare).
    """

    id: str
    pair_type: Optional[PairType]
    max_specificity_level: int
    base_text: str
    soft_variant: Optional[str] = None
    concrete_variant: Optional[str] = None


_SHAPES_CONSISTENT = "The shapes feel consistent, so the outfit reads put-together."

EXPLANATION_TEMPLATES: Tuple[ExplanationTemplate, ...] = (
    # Top x Bottom
    ExplanationTemplate(
        id="top_bottom_balance",
        pair_type=PairType.TOPS_BOTTOMS,
        max_specificity_level=2,
        base_text="Easy + easy: clean, effortless balance.",
        soft_variant=_SHAPES_CONSISTENT,
    ),
    ExplanationTemplate(
        id="top_bottom_relaxed",
        pair_type=PairType.TOPS_BOTTOMS,
        max_specificity_level=2,
        base_text="Same level of relaxedness, so it looks intentional.",
        soft_variant=_SHAPES_CONSISTENT,
    ),
    # Top x Shoes
    ExplanationTemplate(
        id="top_shoes_cohesive",
        pair_type=PairType.TOPS_SHOES,
        max_specificity_level=2,
        base_text="Simple shoes keep the look cohesive.",
        soft_variant="The shoe vibe matches the top's energy.",
    ),
    ExplanationTemplate(
        id="top_shoes_casual",
        pair_type=PairType.TOPS_SHOES,
        max_specificity_level=1,
        base_text="Keeps the outfit grounded and everyday.",
    ),
    # Bottom x Shoes
    ExplanationTemplate(
        id="bottom_shoes_ground",
        pair_type=PairType.BOTTOMS_SHOES,
        max_specificity_level=2,
        base_text="Balanced proportions from the ground up.",
        soft_variant="They share the same level of polish.",
    ),
    ExplanationTemplate(
        id="bottom_shoes_function",
        pair_type=PairType.BOTTOMS_SHOES,
        max_specificity_level=1,
        base_text="A clean finish that doesn't compete with the silhouette.",
    ),
    # Top x Outerwear
    ExplanationTemplate(
        id="top_outerwear_structure",
        pair_type=PairType.TOPS_OUTERWEAR,
        max_specificity_level=2,
        base_text="Adds structure without changing the vibe.",
        soft_variant="A light layer makes it feel finished.",
    ),
    # Dresses
    ExplanationTemplate(
        id="dress_shoes_balance",
        pair_type=PairType.DRESSES_SHOES,
        max_specificity_level=2,
        base_text="Same dressiness level, so nothing feels off.",
        soft_variant="A simple pairing that lets the dress lead.",
    ),
    # Generic fallback
    ExplanationTemplate(
        id="generic_harmony",
        pair_type=None,
        max_specificity_level=1,
        base_text="Easy to wear together.",
    ),
    ExplanationTemplate(
        id="generic_no_compete",
        pair_type=None,
        max_specificity_level=1,
        base_text="A safe, cohesive pairing.",
    ),
)

# Chance of the rare concrete (level 3) variant
CONCRETE_VARIANT_PROBABILITY = 0.1


class ForbiddenRule:
    """Ids reported when an otherwise-HIGH pair may not show an explanation."""
    STATEMENT_STATEMENT = "statement_statement"
    SHOES_CONTENTIOUS = "shoes_contentious"
    TEXTURE_CLASH = "texture_clash"
    STYLE_OPPOSITION = "style_opposition"


# =============================================================================
# 5. COVERED CATEGORIES
# =============================================================================

COVERED_CATEGORIES_MAP: Mapping[PairType, Tuple[Category, Category]] = MappingProxyType({
    # Core outfit pairs
    PairType.TOPS_BOTTOMS: (Category.TOPS, Category.BOTTOMS),
    PairType.TOPS_SHOES: (Category.TOPS, Category.SHOES),
    PairType.TOPS_OUTERWEAR: (Category.TOPS, Category.OUTERWEAR),
    PairType.BOTTOMS_SHOES: (Category.BOTTOMS, Category.SHOES),
    PairType.BOTTOMS_OUTERWEAR: (Category.BOTTOMS, Category.OUTERWEAR),
    PairType.SHOES_OUTERWEAR: (Category.SHOES, Category.OUTERWEAR),
    # Dresses
    PairType.DRESSES_SHOES: (Category.DRESSES, Category.SHOES),
    PairType.DRESSES_OUTERWEAR: (Category.DRESSES, Category.OUTERWEAR),
    # Skirts
    PairType.SKIRTS_TOPS: (Category.SKIRTS, Category.TOPS),
    PairType.SKIRTS_SHOES: (Category.SKIRTS, Category.SHOES),
    PairType.SKIRTS_OUTERWEAR: (Category.SKIRTS, Category.OUTERWEAR),
    # Accessories and bags never count as covered (see NEVER_COVERED_CATEGORIES)
    PairType.TOPS_ACCESSORIES: (Category.TOPS, Category.ACCESSORIES),
    PairType.BOTTOMS_ACCESSORIES: (Category.BOTTOMS, Category.ACCESSORIES),
    PairType.SHOES_ACCESSORIES: (Category.SHOES, Category.ACCESSORIES),
    PairType.OUTERWEAR_ACCESSORIES: (Category.OUTERWEAR, Category.ACCESSORIES),
    PairType.DRESSES_ACCESSORIES: (Category.DRESSES, Category.ACCESSORIES),
    PairType.TOPS_BAGS: (Category.TOPS, Category.BAGS),
    PairType.BOTTOMS_BAGS: (Category.BOTTOMS, Category.BAGS),
    PairType.DRESSES_BAGS: (Category.DRESSES, Category.BAGS),
})

NEVER_COVERED_CATEGORIES: FrozenSet[Category] = frozenset({
    Category.ACCESSORIES, Category.BAGS,
})


# =============================================================================
# 6. MODE A COPY ("what to add")
# =============================================================================

_V = StyleVibe


@dataclass(frozen=True)
class ModeABulletTemplate:
    key: str
    text: str
    target: Optional[Category]
    text_by_style: Mapping[StyleVibe, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ModeATemplate:
    intro: str
    bullets: Tuple[ModeABulletTemplate, ...]


DEFAULT_TEMPLATE_KEY = "default"

MODE_A_TEMPLATES: Mapping[str, ModeATemplate] = MappingProxyType({
    Category.TOPS.value: ModeATemplate(
        intro="To make this item easy to wear:",
        bullets=(
            ModeABulletTemplate(
                key="TOPS__BOTTOMS_DARK_STRUCTURED",
                text="Dark, structured bottoms",
                target=Category.BOTTOMS,
                text_by_style={
                    _V.OFFICE: "Tailored dark trousers",
                    _V.MINIMAL: "Clean-line trousers in a dark neutral",
                    _V.STREET: "Dark straight-leg jeans or cargo pants",
                },
            ),
            ModeABulletTemplate(
                key="TOPS__SHOES_NEUTRAL",
                text="Neutral everyday shoes",
                target=Category.SHOES,
                text_by_style={
                    _V.OFFICE: "Loafers or simple flats",
                    _V.MINIMAL: "Clean low-profile shoes",
                    _V.STREET: "Clean white sneakers or simple flats",
                },
            ),
            ModeABulletTemplate(
                key="TOPS__OUTERWEAR_LIGHT_LAYER",
                text="Light layer for balance",
                target=Category.OUTERWEAR,
                text_by_style={
                    _V.OFFICE: "A light blazer or refined cardigan",
                    _V.MINIMAL: "A streamlined coat or simple cardigan",
                    _V.STREET: "An oversized jacket or zip-up hoodie",
                },
            ),
        ),
    ),
    Category.BOTTOMS.value: ModeATemplate(
        intro="To complete this look:",
        bullets=(
            ModeABulletTemplate(
                key="BOTTOMS__TOP_NEUTRAL_SIMPLE",
                text="Simple top in a neutral tone",
                target=Category.TOPS,
                text_by_style={
                    _V.OFFICE: "A crisp button-down or polished blouse",
                    _V.MINIMAL: "A clean tee or sleek knit top",
                    _V.STREET: "A relaxed graphic tee or oversized shirt",
                },
            ),
            ModeABulletTemplate(
                key="BOTTOMS__SHOES_EVERYDAY",
                text="Everyday shoes that don't compete",
                target=Category.SHOES,
                text_by_style={
                    _V.OFFICE: "Classic loafers or understated heels",
                    _V.MINIMAL: "Simple leather sneakers or ballet flats",
                    _V.STREET: "Clean sneakers or simple flats",
                },
            ),
            ModeABulletTemplate(
                key="BOTTOMS__OUTERWEAR_OPTIONAL",
                text="Optional outer layer for structure",
                target=Category.OUTERWEAR,
                text_by_style={
                    _V.OFFICE: "A tailored blazer or trench coat",
                    _V.MINIMAL: "A sleek jacket or structured cardigan",
                    _V.STREET: "A denim jacket or leather jacket",
                },
            ),
        ),
    ),
    Category.SHOES.value: ModeATemplate(
        intro="This works best with:",
        bullets=(
            ModeABulletTemplate(
                key="SHOES__TOP_RELAXED",
                text="Relaxed everyday top",
                target=Category.TOPS,
                text_by_style={
                    _V.OFFICE: "A tucked blouse or fitted knit",
                    _V.MINIMAL: "A simple tee or clean sweater",
                    _V.STREET: "An oversized tee or hoodie",
                },
            ),
            ModeABulletTemplate(
                key="SHOES__BOTTOMS_STRUCTURED",
                text="Simple structured bottoms",
                target=Category.BOTTOMS,
                text_by_style={
                    _V.OFFICE: "Tailored trousers or straight-leg pants",
                    _V.MINIMAL: "Straight-leg pants in a neutral tone",
                    _V.STREET: "Relaxed jeans or cargo pants",
                },
            ),
            ModeABulletTemplate(
                key="SHOES__OUTERWEAR_MINIMAL",
                text="Minimal layering",
                target=Category.OUTERWEAR,
                text_by_style={
                    _V.OFFICE: "A light blazer or lightweight jacket",
                    _V.MINIMAL: "A simple jacket or lightweight layer",
                    _V.STREET: "A utility jacket or lightweight outer layer",
                },
            ),
        ),
    ),
    Category.OUTERWEAR.value: ModeATemplate(
        intro="This pairs well with:",
        bullets=(
            ModeABulletTemplate(
                key="OUTERWEAR__TOP_BASE",
                text="Easy base layer",
                target=Category.TOPS,
                text_by_style={
                    _V.OFFICE: "A button-down or fine-knit sweater",
                    _V.MINIMAL: "A fitted tee or simple turtleneck",
                    _V.STREET: "A graphic tee or relaxed hoodie",
                },
            ),
            ModeABulletTemplate(
                key="OUTERWEAR__BOTTOMS_BALANCED",
                text="Balanced bottoms",
                target=Category.BOTTOMS,
                text_by_style={
                    _V.OFFICE: "Tailored trousers or wide-leg pants",
                    _V.MINIMAL: "Clean straight-leg pants",
                    _V.STREET: "Relaxed jeans or wide-leg pants",
                },
            ),
            ModeABulletTemplate(
                key="OUTERWEAR__SHOES_SIMPLE",
                text="Simple shoes",
                target=Category.SHOES,
                text_by_style={
                    _V.OFFICE: "Loafers or simple flats",
                    _V.MINIMAL: "Low-profile sneakers or simple flats",
                    _V.STREET: "Clean sneakers or simple flats",
                },
            ),
        ),
    ),
    Category.DRESSES.value: ModeATemplate(
        intro="To complete this look:",
        bullets=(
            ModeABulletTemplate(
                key="DRESSES__SHOES_SIMPLE",
                text="Simple shoes that don't compete",
                target=Category.SHOES,
                text_by_style={
                    _V.OFFICE: "Classic pumps or elegant flats",
                    _V.MINIMAL: "Sleek sandals or simple mules",
                    _V.STREET: "Clean sneakers or simple flats",
                    _V.FEMININE: "Ballet flats or delicate heeled sandals",
                },
            ),
            ModeABulletTemplate(
                key="DRESSES__OUTERWEAR_LIGHT",
                text="Light outer layer for cooler moments",
                target=Category.OUTERWEAR,
                text_by_style={
                    _V.OFFICE: "A lightweight blazer or structured cardigan",
                    _V.MINIMAL: "A lightweight trench or light coat",
                    _V.STREET: "A denim jacket or lightweight blazer",
                    _V.FEMININE: "A soft cardigan or cropped jacket",
                },
            ),
            ModeABulletTemplate(
                key="DRESSES__ACCESSORIES_MINIMAL",
                text="Minimal accessories",
                target=Category.ACCESSORIES,
                text_by_style={
                    _V.OFFICE: "Simple jewelry and a structured bag",
                    _V.MINIMAL: "One understated piece",
                    _V.STREET: "A cap or simple chain",
                    _V.FEMININE: "Delicate jewelry or a small bag",
                },
            ),
        ),
    ),
    Category.SKIRTS.value: ModeATemplate(
        intro="To make this item easy to wear:",
        bullets=(
            ModeABulletTemplate(
                key="SKIRTS__TOP_COMPLEMENTARY",
                text="Simple top in a complementary tone",
                target=Category.TOPS,
                text_by_style={
                    _V.OFFICE: "A tucked blouse or fine knit",
                    _V.MINIMAL: "A fitted tee or simple tank",
                    _V.STREET: "A cropped tee or relaxed button-down",
                    _V.FEMININE: "A soft blouse or fitted top",
                },
            ),
            ModeABulletTemplate(
                key="SKIRTS__SHOES_EVERYDAY",
                text="Everyday shoes",
                target=Category.SHOES,
                text_by_style={
                    _V.OFFICE: "Loafers or kitten heels",
                    _V.MINIMAL: "Simple flats or low sneakers",
                    _V.STREET: "Clean sneakers or simple flats",
                    _V.FEMININE: "Ballet flats or strappy sandals",
                },
            ),
            ModeABulletTemplate(
                key="SKIRTS__OUTERWEAR_OPTIONAL",
                text="Optional light layer",
                target=Category.OUTERWEAR,
                text_by_style={
                    _V.OFFICE: "A cropped blazer or cardigan",
                    _V.MINIMAL: "A simple jacket",
                    _V.STREET: "A denim or utility jacket",
                    _V.FEMININE: "A soft cardigan or light jacket",
                },
            ),
        ),
    ),
    Category.BAGS.value: ModeATemplate(
        intro="This works well with:",
        bullets=(
            ModeABulletTemplate(
                key="BAGS__OUTFIT_CLEAN",
                text="Clean, simple outfit pieces",
                target=Category.TOPS,
                text_by_style={
                    _V.OFFICE: "A polished blouse or fine knit",
                    _V.MINIMAL: "A clean tee or simple top",
                    _V.STREET: "A relaxed tee or simple sweatshirt",
                },
            ),
            ModeABulletTemplate(
                key="BAGS__SHOES_NEUTRAL",
                text="Neutral everyday shoes",
                target=Category.SHOES,
                text_by_style={
                    _V.OFFICE: "Classic loafers or simple heels",
                    _V.MINIMAL: "Sleek flats or low-profile sneakers",
                    _V.STREET: "Clean sneakers",
                },
            ),
            ModeABulletTemplate(
                key="BAGS__ACCESSORIES_MINIMAL",
                text="Minimal competing accessories",
                target=Category.ACCESSORIES,
            ),
        ),
    ),
    Category.ACCESSORIES.value: ModeATemplate(
        intro="This complements:",
        bullets=(
            ModeABulletTemplate(
                key="ACCESSORIES__SHOES_NEUTRAL",
                text="Neutral everyday shoes",
                target=Category.SHOES,
            ),
            ModeABulletTemplate(
                key="ACCESSORIES__OUTERWEAR_CLEAN",
                text="Clean layering",
                target=Category.OUTERWEAR,
            ),
        ),
    ),
    DEFAULT_TEMPLATE_KEY: ModeATemplate(
        intro="To make this item easy to wear:",
        bullets=(
            ModeABulletTemplate(
                key="DEFAULT__KEEP_SIMPLE",
                text="Keep the other pieces simple",
                target=None,
            ),
            ModeABulletTemplate(
                key="DEFAULT__NEUTRAL_COLORS",
                text="Choose neutral colors",
                target=None,
            ),
            ModeABulletTemplate(
                key="DEFAULT__AVOID_TEXTURE",
                text="Avoid competing textures",
                target=None,
            ),
        ),
    ),
})


# =============================================================================
# 7. MODE B COPY ("make it work")
# =============================================================================

@dataclass(frozen=True)
class ModeBBulletTemplate:
    key: str
    text: str
    text_by_style: Mapping[StyleVibe, str] = field(default_factory=dict)


# Keys are namespaced REASON__DESCRIPTION. TEXTURE_CLASH has no copy.
MODE_B_COPY_BY_REASON: Mapping[CapReason, Tuple[ModeBBulletTemplate, ...]] = MappingProxyType({
    CapReason.FORMALITY_TENSION: (
        ModeBBulletTemplate(
            key="FORMALITY_TENSION__MATCH_DRESSINESS",
            text="Keep the rest of the outfit at the same level of dressiness.",
            text_by_style={
                _V.OFFICE: "Stick to equally polished pieces throughout.",
                _V.STREET: "Keep everything at the same relaxed level.",
            },
        ),
        ModeBBulletTemplate(
            key="FORMALITY_TENSION__AVOID_MIX",
            text="Avoid mixing very dressy pieces with very casual ones.",
            text_by_style={
                _V.OFFICE: "Don't pair this with overly casual items.",
                _V.STREET: "Skip the formal pieces with this.",
            },
        ),
    ),
    CapReason.STYLE_TENSION: (
        ModeBBulletTemplate(
            key="STYLE_TENSION__LET_ONE_LEAD",
            text="Let one piece set the vibe, and keep the rest simple.",
            text_by_style={
                _V.MINIMAL: "Let this piece stand alone with quiet basics.",
                _V.STREET: "Let this be the statement and keep everything else low-key.",
            },
        ),
        ModeBBulletTemplate(
            key="STYLE_TENSION__STICK_CLASSIC",
            text="Stick to clean, classic pieces around this item.",
            text_by_style={
                _V.MINIMAL: "Pair with understated, streamlined pieces.",
                _V.OFFICE: "Surround it with tailored, neutral staples.",
            },
        ),
    ),
    CapReason.COLOR_TENSION: (
        ModeBBulletTemplate(
            key="COLOR_TENSION__NEUTRAL_OTHERS",
            text="Keep the other pieces neutral to avoid competing colors.",
            text_by_style={
                _V.MINIMAL: "Stick to tonal neutrals for the rest.",
                _V.STREET: "Let this color pop against simple black or white.",
            },
        ),
        ModeBBulletTemplate(
            key="COLOR_TENSION__CONTRAST_OR_TONAL",
            text="Choose either contrast or tonal color, not both.",
        ),
    ),
    CapReason.USAGE_MISMATCH: (
        ModeBBulletTemplate(
            key="USAGE_MISMATCH__CLEAR_CONTEXT",
            text="Match the outfit to one clear context (everyday vs dressy).",
            text_by_style={
                _V.OFFICE: "Decide: is this for work or weekend?",
                _V.STREET: "Keep the whole outfit in the same casual lane.",
            },
        ),
        ModeBBulletTemplate(
            key="USAGE_MISMATCH__CONSISTENT_PURPOSE",
            text="Keep the look consistent rather than mixing purposes.",
        ),
    ),
    CapReason.SHOES_CONFIDENCE_DAMPEN: (
        ModeBBulletTemplate(
            key="SHOES_CONFIDENCE_DAMPEN__SIMPLE_SHOES",
            text="Choose simple shoes that don't compete with the outfit.",
            text_by_style={
                _V.MINIMAL: "Go for sleek, low-profile shoes.",
                _V.STREET: "Clean sneakers work best here.",
                _V.OFFICE: "Simple loafers or flats won't fight the look.",
            },
        ),
        ModeBBulletTemplate(
            key="SHOES_CONFIDENCE_DAMPEN__MINIMAL_SHAPE",
            text="A minimal shoe shape keeps the look more cohesive.",
        ),
    ),
    CapReason.TEXTURE_CLASH: (),
    CapReason.MISSING_KEY_SIGNAL: (
        ModeBBulletTemplate(
            key="MISSING_KEY_SIGNAL__SIMPLE_VERSATILE",
            text="Keep the other pieces simple and versatile.",
        ),
    ),
})


# =============================================================================
# 8. BULLET LOOKUPS
# =============================================================================

MODE_A_BULLETS_BY_KEY: Mapping[str, ModeABulletTemplate] = MappingProxyType({
    bullet.key: bullet
    for template in MODE_A_TEMPLATES.values()
    for bullet in template.bullets
})

MODE_B_BULLETS_BY_KEY: Mapping[str, ModeBBulletTemplate] = MappingProxyType({
    bullet.key: bullet
    for bullets in MODE_B_COPY_BY_REASON.values()
    for bullet in bullets
})


# =============================================================================
# 9. COVERAGE CHECKS
# =============================================================================

def _validate_tables() -> None:
    missing_templates = [c.value for c in Category if c.value not in MODE_A_TEMPLATES]
    if missing_templates:
        raise RuntimeError(f"Mode A templates missing for: {missing_templates}")

    for table_name, table in (
        ("REASON_PRIORITY", REASON_PRIORITY),
        ("MODE_B_COPY_BY_REASON", MODE_B_COPY_BY_REASON),
    ):
        missing = [r.value for r in CapReason if r not in table]
        if missing:
            raise RuntimeError(f"{table_name} missing cap reasons: {missing}")

    if set(CAP_REASON_STABLE_ORDER) != set(CapReason):
        raise RuntimeError("CAP_REASON_STABLE_ORDER must list every cap reason once")

    missing_pairs = [p.value for p in PairType if p not in COVERED_CATEGORIES_MAP]
    if missing_pairs:
        raise RuntimeError(f"COVERED_CATEGORIES_MAP missing pair types: {missing_pairs}")

    overlap = set(MODE_A_BULLETS_BY_KEY) & set(MODE_B_BULLETS_BY_KEY)
    if overlap:
        raise RuntimeError(f"Bullet keys shared between Mode A and Mode B: {sorted(overlap)}")

    for (a, b), score in STYLE_ADJACENCY.items():
        if STYLE_ADJACENCY.get((b, a)) != score:
            raise RuntimeError(f"Style adjacency not symmetric for {a.value}/{b.value}")


_validate_tables()
