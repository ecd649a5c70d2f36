"""
Integration layer: untyped item payloads -> ConfidenceItem.

Payloads are validated with pydantic at this boundary only; a
ValidationError propagates to the caller unchanged. Everything the
payload does not state explicitly (color profile, style family,
formality, texture) is inferred here with keyword heuristics.

Usage:
    from confidence_engine.integration import raw_item_to_confidence_item

    scanned = raw_item_to_confidence_item(payload, scanned=True)
    wardrobe = convert_wardrobe(wardrobe_payloads)
"""

import colorsys
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, Field, model_validator

from confidence_engine.types import (
    Category,
    ColorProfile,
    ConfidenceItem,
    Level,
    StyleFamily,
    StyleVibe,
    TextureType,
)
from core.utils import contains_any, join_lower, round_half_up


# ============================================================================
# Input Models
# ============================================================================

class RawColor(BaseModel):
    """One detected color. The first color in a list is the dominant one."""
    hex: str = Field(..., pattern=r"^#?([0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$", description="#RGB or #RRGGBB")
    name: Optional[str] = None


class ItemSignals(BaseModel):
    """Optional analysis signals attached to a scanned item."""
    statement_level: Optional[str] = Field(None, description="e.g. subtle, moderate, bold")
    silhouette_volume: Optional[str] = Field(None, description="e.g. fitted, relaxed, oversized")


class RawItem(BaseModel):
    """A scanned or wardrobe item as stored by the app."""
    id: str = Field(..., min_length=1)
    category: Category
    colors: List[RawColor] = Field(default_factory=list)
    style_tags: List[StyleVibe] = Field(default_factory=list, description="User-selected style vibes")
    style_notes: List[str] = Field(default_factory=list, description="Free-text style descriptors")
    structure: Optional[str] = Field(None, description="structured / soft")
    item_signals: Optional[ItemSignals] = None
    image_uri: Optional[str] = None
    label: Optional[str] = None


class ColorProfileInput(BaseModel):
    is_neutral: bool
    dominant_hue: Optional[float] = Field(None, ge=0, lt=360)
    saturation: Level = Level.MED
    value: Level = Level.MED

    @model_validator(mode="after")
    def validate_neutral_hue(self):
        """Neutral colors never carry a hue."""
        if self.is_neutral and self.dominant_hue is not None:
            raise ValueError("neutral color profile must not carry a dominant_hue")
        return self

    def to_color_profile(self) -> ColorProfile:
        return ColorProfile(
            is_neutral=self.is_neutral,
            saturation=self.saturation,
            value=self.value,
            dominant_hue=self.dominant_hue,
        )


class ConfidenceSignalsInput(BaseModel):
    """Explicit signals from image analysis. Any field may be missing."""
    color_profile: Optional[ColorProfileInput] = None
    style_family: Optional[StyleFamily] = None
    formality_level: Optional[int] = Field(None, ge=1, le=5)
    texture_type: Optional[TextureType] = None


# ============================================================================
# Color
# ============================================================================

NEUTRAL_COLORS = frozenset({
    "#000000",  # black
    "#FFFFFF",  # white
    "#1C1917",  # charcoal
    "#78716C",  # gray
    "#D6D3D1",  # light gray
    "#F5F5DC",  # beige
    "#D2B48C",  # tan
    "#FFFDD0",  # cream
    "#C0C0C0",  # silver
    "#808080",
    "#A9A9A9",
    "#696969",
    "#2F2F2F",
    "#3D3D3D",
    "#E5E5E5",
    "#F0F0F0",
    "#FAFAFA",
})


def _normalize_hex(hex_color: str) -> str:
    clean = hex_color.strip().lstrip("#").upper()
    if len(clean) == 3:
        clean = "".join(c * 2 for c in clean)
    return f"#{clean}"


def hex_to_hsv(hex_color: str) -> Tuple[float, float, float]:
    """
    Returns (hue 0-360, saturation 0-1, value 0-1).

    Accepts #RGB and #RRGGBB, with or without the leading '#'.
    """
    clean = _normalize_hex(hex_color)[1:]
    r, g, b = (int(clean[i:i + 2], 16) / 255 for i in (0, 2, 4))
    h, s, v = colorsys.rgb_to_hsv(r, g, b)
    return h * 360, s, v


def is_neutral_color(hex_color: str) -> bool:
    if _normalize_hex(hex_color) in NEUTRAL_COLORS:
        return True

    _, s, v = hex_to_hsv(hex_color)
    if s < 0.15:
        return True
    # Very dark or very light reads as neutral unless clearly saturated
    if v < 0.15 or v > 0.95:
        return s < 0.25
    return False


def _level(x: float) -> Level:
    if x < 0.33:
        return Level.LOW
    if x < 0.66:
        return Level.MED
    return Level.HIGH


def to_color_profile(colors: Sequence[RawColor]) -> ColorProfile:
    """Profile of the dominant (first) color; neutral med/med when empty."""
    if not colors:
        return ColorProfile(is_neutral=True, saturation=Level.MED, value=Level.MED)

    hex_color = colors[0].hex
    h, s, v = hex_to_hsv(hex_color)
    neutral = is_neutral_color(hex_color)
    return ColorProfile(
        is_neutral=neutral,
        dominant_hue=None if neutral else round_half_up(h) % 360,
        saturation=_level(s),
        value=_level(v),
    )


# ============================================================================
# Style Family
# ============================================================================

STYLE_VIBE_TO_FAMILY = {
    StyleVibe.CASUAL: StyleFamily.CLASSIC,  # everyday/versatile, not athletic
    StyleVibe.MINIMAL: StyleFamily.MINIMAL,
    StyleVibe.OFFICE: StyleFamily.CLASSIC,
    StyleVibe.STREET: StyleFamily.STREET,
    StyleVibe.FEMININE: StyleFamily.ROMANTIC,
    StyleVibe.SPORTY: StyleFamily.ATHLEISURE,
}

# Modifier tags; a more specific tag wins over these
LOW_PRIORITY_VIBES = frozenset({StyleVibe.CASUAL})

# Checked in order, first hit wins
_STYLE_KEYWORDS: Tuple[Tuple[StyleFamily, Tuple[str, ...]], ...] = (
    (StyleFamily.ROMANTIC, (
        "wrap", "v-neck", "v-neckline", "draped", "feminine", "soft",
        "ruffle", "lace", "floral", "delicate",
    )),
    (StyleFamily.MINIMAL, (
        "clean lines", "simple", "understated", "sleek", "minimal", "streamlined",
    )),
    (StyleFamily.CLASSIC, (
        "timeless", "tailored", "polished", "traditional", "classic", "refined",
    )),
    (StyleFamily.EDGY, (
        "edgy", "punk", "bold", "leather", "hardware", "studded", "asymmetric",
    )),
    (StyleFamily.BOHO, (
        "boho", "bohemian", "artistic", "free-spirited", "embroidered", "fringe",
    )),
    (StyleFamily.PREPPY, ("preppy", "collegiate", "nautical", "polo")),
    (StyleFamily.FORMAL, (
        "formal", "elegant", "dressy", "evening", "business", "professional",
    )),
    (StyleFamily.STREET, ("street", "urban", "graphic", "oversized", "cargo", "hoodie")),
    (StyleFamily.ATHLEISURE, (
        "athletic", "sporty", "active", "workout", "performance", "comfortable",
    )),
)


def to_style_family(
    vibes: Optional[Sequence[StyleVibe]],
    style_notes: Optional[Sequence[str]] = None,
) -> StyleFamily:
    """
    Primary style family.

    The first non-casual vibe wins (["casual", "minimal"] -> minimal). With
    no vibes at all, keyword heuristics over the style notes are used.
    """
    if vibes:
        primary = next((v for v in vibes if v not in LOW_PRIORITY_VIBES), vibes[0])
        return STYLE_VIBE_TO_FAMILY[StyleVibe(primary)]

    if style_notes:
        notes = join_lower(list(style_notes))
        for family, keywords in _STYLE_KEYWORDS:
            if contains_any(notes, keywords):
                return family

        # "Statement" depends on what kind
        if "statement" in notes:
            if contains_any(notes, ("fitted", "wrap", "silhouette")):
                return StyleFamily.ROMANTIC
            return StyleFamily.EDGY

    return StyleFamily.UNKNOWN


# ============================================================================
# Formality & Texture
# ============================================================================

_FORMALITY_KEYWORDS: Tuple[Tuple[int, Tuple[str, ...]], ...] = (
    (5, ("formal", "black-tie", "evening")),
    (4, ("business", "professional", "office")),
    (3, ("smart casual", "polished")),
    (2, ("casual", "everyday")),
    (1, ("athleisure", "loungewear", "sporty")),
)

_FAMILY_FORMALITY_BASELINE = {
    StyleFamily.FORMAL: 5,
    StyleFamily.CLASSIC: 3,
    StyleFamily.PREPPY: 3,
    StyleFamily.MINIMAL: 3,
    StyleFamily.ROMANTIC: 3,
    StyleFamily.BOHO: 2,
    StyleFamily.ATHLEISURE: 1,
    StyleFamily.STREET: 2,
    StyleFamily.EDGY: 2,
    StyleFamily.UNKNOWN: 2,
}


def infer_formality_level(
    category: Category,
    style_family: StyleFamily,
    style_notes: Optional[Sequence[str]] = None,
    structure: Optional[str] = None,
) -> int:
    """Explicit note keywords first, then the family baseline."""
    if style_notes:
        notes = join_lower(list(style_notes))
        for level, keywords in _FORMALITY_KEYWORDS:
            if contains_any(notes, keywords):
                return level

    level = _FAMILY_FORMALITY_BASELINE[StyleFamily(style_family)]
    if category == Category.OUTERWEAR and structure == "structured":
        level = min(5, level + 1)
    return level


_TEXTURE_KEYWORDS: Tuple[Tuple[TextureType, Tuple[str, ...]], ...] = (
    (TextureType.SMOOTH, ("silk", "satin", "polished", "sleek")),
    (TextureType.TEXTURED, ("knit", "tweed", "corduroy", "ribbed", "cable")),
    (TextureType.SOFT, ("cashmere", "jersey", "cotton", "soft", "fleece")),
    (TextureType.STRUCTURED, ("denim", "canvas", "stiff", "tailored", "structured")),
    (TextureType.MIXED, ("mixed", "contrast")),
)


def infer_texture_type(
    style_notes: Optional[Sequence[str]] = None,
    structure: Optional[str] = None,
) -> TextureType:
    if style_notes:
        notes = join_lower(list(style_notes))
        for texture, keywords in _TEXTURE_KEYWORDS:
            if contains_any(notes, keywords):
                return texture

    if structure == "structured":
        return TextureType.STRUCTURED
    if structure == "soft":
        return TextureType.SOFT
    return TextureType.UNKNOWN


# ============================================================================
# Conversion
# ============================================================================

ItemPayload = Union[RawItem, Mapping[str, Any]]


def _as_raw_item(payload: ItemPayload) -> RawItem:
    if isinstance(payload, RawItem):
        return payload
    return RawItem.model_validate(payload)


def wardrobe_item_to_confidence_item(item: RawItem) -> ConfidenceItem:
    style_family = to_style_family(item.style_tags, item.style_notes)
    return ConfidenceItem(
        id=item.id,
        category=item.category,
        color_profile=to_color_profile(item.colors),
        style_family=style_family,
        formality_level=infer_formality_level(
            item.category, style_family, item.style_notes, item.structure
        ),
        texture_type=infer_texture_type(item.style_notes, item.structure),
        image_uri=item.image_uri,
        label=item.label,
    )


def scanned_item_to_confidence_item(item: RawItem) -> ConfidenceItem:
    """
    Scanned items carry no structure attribute; formality is adjusted from
    the analysis signals instead (bold statement +1, relaxed/oversized -1).
    """
    style_family = to_style_family(item.style_tags, item.style_notes)
    formality = infer_formality_level(item.category, style_family, item.style_notes)

    signals = item.item_signals
    if signals is not None:
        if signals.statement_level == "bold":
            formality = min(5, formality + 1)
        if signals.silhouette_volume in ("relaxed", "oversized"):
            formality = max(1, formality - 1)

    return ConfidenceItem(
        id=item.id,
        category=item.category,
        color_profile=to_color_profile(item.colors),
        style_family=style_family,
        formality_level=formality,
        texture_type=infer_texture_type(item.style_notes),
        image_uri=item.image_uri,
        label=item.label,
    )


def raw_item_to_confidence_item(payload: ItemPayload, scanned: bool = False) -> ConfidenceItem:
    """Validate a payload and convert it. Raises pydantic.ValidationError."""
    item = _as_raw_item(payload)
    if scanned:
        return scanned_item_to_confidence_item(item)
    return wardrobe_item_to_confidence_item(item)


def convert_wardrobe(payloads: Sequence[ItemPayload]) -> List[ConfidenceItem]:
    return [raw_item_to_confidence_item(p) for p in payloads]


def merge_with_explicit_signals(
    inferred: ConfidenceItem,
    explicit: Union[ConfidenceSignalsInput, Mapping[str, Any]],
) -> ConfidenceItem:
    """Explicit signals take precedence over inferred ones."""
    if not isinstance(explicit, ConfidenceSignalsInput):
        explicit = ConfidenceSignalsInput.model_validate(explicit)

    return ConfidenceItem(
        id=inferred.id,
        category=inferred.category,
        color_profile=(
            explicit.color_profile.to_color_profile()
            if explicit.color_profile is not None
            else inferred.color_profile
        ),
        style_family=explicit.style_family or inferred.style_family,
        formality_level=explicit.formality_level or inferred.formality_level,
        texture_type=explicit.texture_type or inferred.texture_type,
        silhouette_profile=inferred.silhouette_profile,
        image_uri=inferred.image_uri,
        label=inferred.label,
    )


# ============================================================================
# Copy Vibe Resolution
# ============================================================================

# Copy only; never affects scoring
VIBE_PRIORITY: Tuple[StyleVibe, ...] = (
    StyleVibe.OFFICE,
    StyleVibe.MINIMAL,
    StyleVibe.STREET,
    StyleVibe.FEMININE,
    StyleVibe.SPORTY,
    StyleVibe.CASUAL,
)

# classic is the everyday catch-all, so it maps to casual copy, not office
STYLE_FAMILY_TO_UI_VIBE = {
    StyleFamily.ROMANTIC: StyleVibe.FEMININE,
    StyleFamily.BOHO: StyleVibe.FEMININE,
    StyleFamily.MINIMAL: StyleVibe.MINIMAL,
    StyleFamily.ATHLEISURE: StyleVibe.SPORTY,
    StyleFamily.STREET: StyleVibe.STREET,
    StyleFamily.EDGY: StyleVibe.STREET,
    StyleFamily.PREPPY: StyleVibe.OFFICE,
    StyleFamily.FORMAL: StyleVibe.OFFICE,
    StyleFamily.CLASSIC: StyleVibe.CASUAL,
    StyleFamily.UNKNOWN: StyleVibe.CASUAL,
}


def resolve_ui_vibe_for_copy(
    style_tags: Optional[Sequence[StyleVibe]] = None,
    style_notes: Optional[Sequence[str]] = None,
    explicit_style_family: Optional[StyleFamily] = None,
) -> StyleVibe:
    """
    Style vibe used to pick bullet text variants.

    1. All-casual tags keep casual copy, even for a classic family
    2. An explicit (non-unknown) style family wins
    3. Otherwise the highest-priority tag
    4. Otherwise the keyword-inferred family
    """
    tags = [StyleVibe(t) for t in style_tags] if style_tags else []
    casual_intent = bool(tags) and all(t == StyleVibe.CASUAL for t in tags)

    if explicit_style_family is not None and explicit_style_family != StyleFamily.UNKNOWN:
        if explicit_style_family == StyleFamily.CLASSIC and casual_intent:
            return StyleVibe.CASUAL
        return STYLE_FAMILY_TO_UI_VIBE[StyleFamily(explicit_style_family)]

    if tags:
        for vibe in VIBE_PRIORITY:
            if vibe in tags:
                return vibe
        return tags[0]

    family = to_style_family(None, style_notes)
    return STYLE_FAMILY_TO_UI_VIBE[family]
