"""
Domain model for the confidence engine.

Closed enumerations and immutable value objects. Items come in from the
caller, evaluations go back out; nothing here is mutated after construction.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, Optional, Tuple


# =============================================================================
# Enums
# =============================================================================

class Category(str, Enum):
    """Clothing category of an item."""
    TOPS = "tops"
    BOTTOMS = "bottoms"
    SHOES = "shoes"
    OUTERWEAR = "outerwear"
    DRESSES = "dresses"
    ACCESSORIES = "accessories"
    BAGS = "bags"
    SKIRTS = "skirts"


class PairType(str, Enum):
    """Whitelisted category combinations. Values are the canonical pair keys."""
    TOPS_BOTTOMS = "tops_bottoms"
    TOPS_SHOES = "tops_shoes"
    TOPS_OUTERWEAR = "tops_outerwear"
    BOTTOMS_SHOES = "bottoms_shoes"
    BOTTOMS_OUTERWEAR = "bottoms_outerwear"
    SHOES_OUTERWEAR = "shoes_outerwear"
    TOPS_ACCESSORIES = "tops_accessories"
    BOTTOMS_ACCESSORIES = "bottoms_accessories"
    SHOES_ACCESSORIES = "shoes_accessories"
    OUTERWEAR_ACCESSORIES = "outerwear_accessories"
    TOPS_BAGS = "tops_bags"
    BOTTOMS_BAGS = "bottoms_bags"
    DRESSES_SHOES = "dresses_shoes"
    DRESSES_OUTERWEAR = "dresses_outerwear"
    DRESSES_ACCESSORIES = "dresses_accessories"
    DRESSES_BAGS = "dresses_bags"
    SKIRTS_TOPS = "skirts_tops"
    SKIRTS_SHOES = "skirts_shoes"
    SKIRTS_OUTERWEAR = "skirts_outerwear"


class StyleFamily(str, Enum):
    MINIMAL = "minimal"
    CLASSIC = "classic"
    STREET = "street"
    ATHLEISURE = "athleisure"
    ROMANTIC = "romantic"
    EDGY = "edgy"
    BOHO = "boho"
    PREPPY = "preppy"
    FORMAL = "formal"
    UNKNOWN = "unknown"


class Level(str, Enum):
    """Three-bucket level used for color saturation and value (lightness)."""
    LOW = "low"
    MED = "med"
    HIGH = "high"


class TextureType(str, Enum):
    SMOOTH = "smooth"
    TEXTURED = "textured"
    SOFT = "soft"
    STRUCTURED = "structured"
    MIXED = "mixed"
    UNKNOWN = "unknown"


class SilhouetteVolume(str, Enum):
    FITTED = "fitted"
    REGULAR = "regular"
    OVERSIZED = "oversized"
    UNKNOWN = "unknown"


class SilhouetteLength(str, Enum):
    SHORT = "short"
    REGULAR = "regular"
    LONG = "long"
    UNKNOWN = "unknown"


class FeatureCode(str, Enum):
    """Signal codes: Color, Style, Formality, Texture, Usage, silhouette (V)."""
    C = "C"
    S = "S"
    F = "F"
    T = "T"
    U = "U"
    V = "V"


CORE_FEATURE_CODES: Tuple[FeatureCode, ...] = (
    FeatureCode.C, FeatureCode.S, FeatureCode.F, FeatureCode.T, FeatureCode.U,
)


class CapReason(str, Enum):
    """Soft caps: limit a pair to MEDIUM."""
    FORMALITY_TENSION = "FORMALITY_TENSION"
    STYLE_TENSION = "STYLE_TENSION"
    COLOR_TENSION = "COLOR_TENSION"
    TEXTURE_CLASH = "TEXTURE_CLASH"
    USAGE_MISMATCH = "USAGE_MISMATCH"
    SHOES_CONFIDENCE_DAMPEN = "SHOES_CONFIDENCE_DAMPEN"
    MISSING_KEY_SIGNAL = "MISSING_KEY_SIGNAL"


class HardFailReason(str, Enum):
    """Hard fails: force a pair to LOW."""
    FORMALITY_CLASH_WITH_USAGE = "FORMALITY_CLASH_WITH_USAGE"
    STYLE_OPPOSITION_NO_OVERLAP = "STYLE_OPPOSITION_NO_OVERLAP"
    SHOES_TEXTURE_FORMALITY_CLASH = "SHOES_TEXTURE_FORMALITY_CLASH"


class ConfidenceTier(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class SuggestionsMode(str, Enum):
    A = "A"  # "what to add"
    B = "B"  # "make it work"


class StyleVibe(str, Enum):
    """User-facing style vibe; selects copy variants, never affects scoring."""
    CASUAL = "casual"
    MINIMAL = "minimal"
    OFFICE = "office"
    STREET = "street"
    FEMININE = "feminine"
    SPORTY = "sporty"


class NearMatchType(str, Enum):
    SOFT_CAPPED_HIGH = "2a"
    STRONG_MEDIUM = "2b"


# =============================================================================
# Item Value Objects
# =============================================================================

@dataclass(frozen=True)
class ColorProfile:
    """Dominant color of an item. Neutral colors never carry a hue."""

    is_neutral: bool
    saturation: Level = Level.MED
    value: Level = Level.MED
    dominant_hue: Optional[float] = None

    def __post_init__(self):
        if self.is_neutral and self.dominant_hue is not None:
            raise ValueError("neutral color profile must not carry a dominant_hue")
        if self.dominant_hue is not None and not 0 <= self.dominant_hue < 360:
            raise ValueError(f"dominant_hue must be in [0, 360), got {self.dominant_hue}")


@dataclass(frozen=True)
class SilhouetteProfile:
    volume: SilhouetteVolume = SilhouetteVolume.UNKNOWN
    length: SilhouetteLength = SilhouetteLength.UNKNOWN


@dataclass(frozen=True)
class ConfidenceItem:
    """One scanned or wardrobe item, as seen by the engine."""

    id: str
    category: Category
    color_profile: ColorProfile
    style_family: StyleFamily
    formality_level: int  # 1 (athleisure) .. 5 (formal)
    texture_type: TextureType
    silhouette_profile: Optional[SilhouetteProfile] = None
    image_uri: Optional[str] = None
    label: Optional[str] = None

    def __post_init__(self):
        level = self.formality_level
        if isinstance(level, bool) or not isinstance(level, int) or not 1 <= level <= 5:
            raise ValueError(f"formality_level must be an integer in 1..5, got {level!r}")


# =============================================================================
# Signals
# =============================================================================

@dataclass(frozen=True)
class FeatureResult:
    """A single signal. When known is False the value carries no meaning."""

    value: int
    known: bool = True

    def __post_init__(self):
        v = self.value
        if isinstance(v, bool) or not isinstance(v, int) or not -2 <= v <= 2:
            raise ValueError(f"feature value must be an integer in [-2, 2], got {v!r}")


UNKNOWN_FEATURE = FeatureResult(0, known=False)


@dataclass(frozen=True)
class FeatureSignals:
    C: FeatureResult
    S: FeatureResult
    F: FeatureResult
    T: FeatureResult
    U: FeatureResult
    V: Optional[FeatureResult] = None

    def get(self, code: FeatureCode) -> Optional[FeatureResult]:
        return getattr(self, FeatureCode(code).value)

    def items(self) -> Iterator[Tuple[FeatureCode, FeatureResult]]:
        """Iterate (code, result) pairs; V only when present."""
        for code in CORE_FEATURE_CODES:
            yield code, getattr(self, code.value)
        if self.V is not None:
            yield FeatureCode.V, self.V


# =============================================================================
# Gates
# =============================================================================

@dataclass(frozen=True)
class HardFailResult:
    failed: bool
    reason: Optional[HardFailReason] = None


@dataclass(frozen=True)
class GateResult:
    """
    Outcome of both gate phases.

    A hard fail sets forced_tier=LOW and leaves cap_reasons empty; caps are
    not evaluated once a hard fail has triggered.
    """

    forced_tier: Optional[ConfidenceTier] = None
    hard_fail_reason: Optional[HardFailReason] = None
    max_tier: ConfidenceTier = ConfidenceTier.HIGH
    cap_reasons: Tuple[CapReason, ...] = ()

    @property
    def is_hard_fail(self) -> bool:
        return self.forced_tier == ConfidenceTier.LOW


# =============================================================================
# Evaluations
# =============================================================================

@dataclass(frozen=True)
class EvalContext:
    """Per-call context. Carried explicitly instead of module state."""

    scan_session_id: Optional[str] = None


@dataclass(frozen=True)
class PairEvaluation:
    # Identity
    item_a_id: str
    item_b_id: str
    pair_type: PairType

    # Scores
    raw_score: float
    confidence_tier: ConfidenceTier

    # Gates
    forced_tier: Optional[ConfidenceTier]
    hard_fail_reason: Optional[HardFailReason]
    cap_reasons: Tuple[CapReason, ...]

    features: FeatureSignals

    # Statement detection (forbidden explanation rule)
    both_statement: bool

    # Debug metadata
    is_shoes_involved: bool
    high_threshold_used: float
    weights_used: Dict[FeatureCode, float] = field(default_factory=dict, compare=False)

    # Explanation fields; populated by confidence_engine.explanations
    explanation_allowed: bool = False
    explanation_forbidden_reason: Optional[str] = None
    explanation_template_id: Optional[str] = None
    explanation_specificity_level: Optional[int] = None

    @property
    def is_hard_fail(self) -> bool:
        return self.forced_tier == ConfidenceTier.LOW


@dataclass(frozen=True)
class OutfitEvaluation:
    show_matches_section: bool
    outfit_confidence: ConfidenceTier
    matches: Tuple[PairEvaluation, ...]
    near_matches: Tuple[PairEvaluation, ...]
    suggestions_mode: SuggestionsMode
    matched_categories: Tuple[Category, ...]
    best_match: Optional[PairEvaluation] = None


@dataclass(frozen=True)
class SlotCandidate:
    """One item slot of an assembled outfit combination."""

    item_id: str
    tier: ConfidenceTier
    evaluation: PairEvaluation


# =============================================================================
# Suggestions & Explanations
# =============================================================================

@dataclass(frozen=True)
class SuggestionBullet:
    """A resolved bullet. key is the stable token; text is display-only."""

    key: str
    text: str
    target: Optional[Category] = None


@dataclass(frozen=True)
class ModeASuggestion:
    intro: str
    bullets: Tuple[SuggestionBullet, ...]


@dataclass(frozen=True)
class ModeBSuggestion:
    bullets: Tuple[SuggestionBullet, ...]
    reasons_used: Tuple[CapReason, ...]


@dataclass(frozen=True)
class ExplanationResult:
    allowed: bool
    forbidden_reason: Optional[str] = None
    template_id: Optional[str] = None
    specificity_level: Optional[int] = None
    text: Optional[str] = None
