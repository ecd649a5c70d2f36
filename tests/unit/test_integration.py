"""
Tests for the integration layer: payload validation and signal inference.
"""

import pytest
from pydantic import ValidationError

from confidence_engine.integration import (
    RawColor,
    convert_wardrobe,
    hex_to_hsv,
    infer_formality_level,
    infer_texture_type,
    is_neutral_color,
    merge_with_explicit_signals,
    raw_item_to_confidence_item,
    resolve_ui_vibe_for_copy,
    to_color_profile,
    to_style_family,
)
from confidence_engine.types import (
    Category,
    Level,
    StyleFamily,
    StyleVibe,
    TextureType,
)


# =============================================================================
# Color
# =============================================================================

class TestColor:

    def test_hex_to_hsv(self):
        h, s, v = hex_to_hsv("#FF0000")
        assert (h, s, v) == (0.0, 1.0, 1.0)

    def test_short_hex_and_no_hash(self):
        assert hex_to_hsv("F00") == hex_to_hsv("#ff0000")

    @pytest.mark.parametrize("hex_color", ["#000000", "#ffffff", "#808080", "#8A8580"])
    def test_neutrals(self, hex_color):
        assert is_neutral_color(hex_color) is True

    @pytest.mark.parametrize("hex_color", ["#FF0000", "#336699", "#228B22"])
    def test_chromatic(self, hex_color):
        assert is_neutral_color(hex_color) is False

    def test_profile_uses_dominant_color(self):
        profile = to_color_profile([RawColor(hex="#336699"), RawColor(hex="#000000")])

        assert profile.is_neutral is False
        assert profile.dominant_hue == 210
        assert profile.saturation == Level.HIGH
        assert profile.value == Level.MED

    def test_neutral_profile_has_no_hue(self):
        profile = to_color_profile([RawColor(hex="#000000")])
        assert profile.is_neutral is True
        assert profile.dominant_hue is None
        assert profile.value == Level.LOW

    def test_empty_colors(self):
        profile = to_color_profile([])
        assert profile.is_neutral is True
        assert profile.saturation == Level.MED
        assert profile.value == Level.MED

    def test_invalid_hex_rejected(self):
        with pytest.raises(ValidationError):
            RawColor(hex="#GGGGGG")


# =============================================================================
# Inference
# =============================================================================

class TestStyleFamily:

    def test_non_casual_vibe_wins(self):
        assert to_style_family([StyleVibe.CASUAL, StyleVibe.MINIMAL]) == StyleFamily.MINIMAL

    def test_casual_only(self):
        assert to_style_family([StyleVibe.CASUAL]) == StyleFamily.CLASSIC

    def test_sporty(self):
        assert to_style_family([StyleVibe.SPORTY]) == StyleFamily.ATHLEISURE

    @pytest.mark.parametrize("notes,expected", [
        (["tailored blazer"], StyleFamily.CLASSIC),
        (["leather jacket"], StyleFamily.EDGY),
        (["floral print"], StyleFamily.ROMANTIC),
        (["graphic tee"], StyleFamily.STREET),
        (["statement piece"], StyleFamily.EDGY),
        (["statement wrap silhouette"], StyleFamily.ROMANTIC),
    ])
    def test_keywords(self, notes, expected):
        assert to_style_family([], notes) == expected

    def test_nothing_known(self):
        assert to_style_family(None, None) == StyleFamily.UNKNOWN
        assert to_style_family([], ["blue"]) == StyleFamily.UNKNOWN


class TestFormalityAndTexture:

    def test_note_keywords(self):
        assert infer_formality_level(Category.DRESSES, StyleFamily.ROMANTIC, ["evening gown"]) == 5
        assert infer_formality_level(Category.TOPS, StyleFamily.CLASSIC, ["casual tee"]) == 2

    def test_family_baseline(self):
        assert infer_formality_level(Category.TOPS, StyleFamily.CLASSIC) == 3
        assert infer_formality_level(Category.TOPS, StyleFamily.ATHLEISURE) == 1
        assert infer_formality_level(Category.TOPS, StyleFamily.UNKNOWN) == 2

    def test_structured_outerwear_bumped(self):
        assert infer_formality_level(Category.OUTERWEAR, StyleFamily.CLASSIC, structure="structured") == 4
        assert infer_formality_level(Category.OUTERWEAR, StyleFamily.FORMAL, structure="structured") == 5

    @pytest.mark.parametrize("notes,structure,expected", [
        (["silk blouse"], None, TextureType.SMOOTH),
        (["chunky knit"], None, TextureType.TEXTURED),
        (["raw denim"], None, TextureType.STRUCTURED),
        (["blue"], "soft", TextureType.SOFT),
        (None, "structured", TextureType.STRUCTURED),
        (None, None, TextureType.UNKNOWN),
    ])
    def test_texture(self, notes, structure, expected):
        assert infer_texture_type(notes, structure) == expected


# =============================================================================
# Conversion
# =============================================================================

class TestConversion:

    def test_wardrobe_item(self):
        item = raw_item_to_confidence_item({
            "id": "w1",
            "category": "bottoms",
            "colors": [{"hex": "#000000", "name": "black"}],
            "style_tags": ["office"],
            "style_notes": ["tailored trousers"],
            "structure": "structured",
            "label": "Black trousers",
        })

        assert item.id == "w1"
        assert item.category == Category.BOTTOMS
        assert item.color_profile.is_neutral is True
        assert item.style_family == StyleFamily.CLASSIC
        assert item.formality_level == 3
        assert item.texture_type == TextureType.STRUCTURED
        assert item.label == "Black trousers"

    def test_scanned_item_signals_adjust_formality(self):
        item = raw_item_to_confidence_item(
            {
                "id": "s1",
                "category": "tops",
                "colors": [{"hex": "#FF0000"}],
                "style_tags": ["office"],
                "item_signals": {"statement_level": "bold"},
            },
            scanned=True,
        )
        assert item.style_family == StyleFamily.CLASSIC
        assert item.formality_level == 4
        assert item.color_profile.dominant_hue == 0
        assert item.texture_type == TextureType.UNKNOWN

    def test_scanned_item_ignores_structure(self):
        payload = {"id": "s1", "category": "outerwear", "style_tags": ["office"], "structure": "structured"}
        scanned = raw_item_to_confidence_item(payload, scanned=True)
        stored = raw_item_to_confidence_item(payload)

        assert scanned.formality_level == 3
        assert scanned.texture_type == TextureType.UNKNOWN
        assert stored.formality_level == 4
        assert stored.texture_type == TextureType.STRUCTURED

    def test_oversized_lowers_formality_with_floor(self):
        item = raw_item_to_confidence_item(
            {
                "id": "s1",
                "category": "tops",
                "style_tags": ["sporty"],
                "item_signals": {"silhouette_volume": "oversized"},
            },
            scanned=True,
        )
        assert item.formality_level == 1

    def test_convert_wardrobe(self):
        items = convert_wardrobe([
            {"id": "a", "category": "tops"},
            {"id": "b", "category": "shoes"},
        ])
        assert [i.id for i in items] == ["a", "b"]
        assert items[0].style_family == StyleFamily.UNKNOWN

    @pytest.mark.parametrize("payload", [
        {"id": "", "category": "tops"},
        {"id": "x", "category": "hats"},
        {"id": "x", "category": "tops", "colors": [{"hex": "red"}]},
        {"id": "x", "category": "tops", "style_tags": ["gothic"]},
        {"category": "tops"},
    ])
    def test_invalid_payload(self, payload):
        with pytest.raises(ValidationError):
            raw_item_to_confidence_item(payload)


class TestExplicitSignals:

    def test_explicit_wins(self, make_item):
        inferred = make_item(id="x")
        merged = merge_with_explicit_signals(inferred, {
            "formality_level": 5,
            "texture_type": "structured",
            "color_profile": {"is_neutral": False, "dominant_hue": 120, "saturation": "high"},
        })

        assert merged.formality_level == 5
        assert merged.texture_type == TextureType.STRUCTURED
        assert merged.color_profile.dominant_hue == 120
        assert merged.color_profile.saturation == Level.HIGH
        assert merged.style_family == inferred.style_family

    def test_empty_keeps_inferred(self, make_item):
        inferred = make_item(id="x")
        assert merge_with_explicit_signals(inferred, {}) == inferred

    @pytest.mark.parametrize("explicit", [
        {"formality_level": 7},
        {"color_profile": {"is_neutral": True, "dominant_hue": 30}},
        {"color_profile": {"is_neutral": False, "dominant_hue": 360}},
    ])
    def test_invalid_signals(self, make_item, explicit):
        with pytest.raises(ValidationError):
            merge_with_explicit_signals(make_item(), explicit)


# =============================================================================
# Copy vibe
# =============================================================================

class TestResolveUiVibe:

    def test_casual_intent_kept_for_classic(self):
        vibe = resolve_ui_vibe_for_copy([StyleVibe.CASUAL], explicit_style_family=StyleFamily.CLASSIC)
        assert vibe == StyleVibe.CASUAL

    def test_explicit_family(self):
        assert resolve_ui_vibe_for_copy(explicit_style_family=StyleFamily.FORMAL) == StyleVibe.OFFICE
        assert resolve_ui_vibe_for_copy(explicit_style_family=StyleFamily.CLASSIC) == StyleVibe.CASUAL

    def test_tag_priority(self):
        assert resolve_ui_vibe_for_copy([StyleVibe.STREET, StyleVibe.OFFICE]) == StyleVibe.OFFICE

    def test_inferred_from_notes(self):
        assert resolve_ui_vibe_for_copy(style_notes=["clean lines"]) == StyleVibe.MINIMAL

    def test_default(self):
        assert resolve_ui_vibe_for_copy() == StyleVibe.CASUAL
