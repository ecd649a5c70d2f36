"""
Tests for Mode A / Mode B suggestions and bullet-title resolution.
"""

from unittest.mock import patch

import pytest

from config.constants import FeatureFlags
from confidence_engine.config import (
    MODE_A_TEMPLATES,
    SAFE_GENERIC_BULLET_KEY,
    SAFE_GENERIC_BULLET_TEXT,
    ModeBConfig,
)
from confidence_engine.suggestions import (
    CONTEXT_AGGREGATE,
    BulletTitleResolver,
    aggregate_cap_reasons,
    build_mode_b_bullets,
    filter_mode_a_bullets,
    generate_mode_a_suggestions,
    generate_mode_b_suggestions,
    generate_outfit_mode_b_suggestions,
    get_mode_b_bullets,
    is_valid_bullet_key,
    resolve_bullet_title,
    select_near_matches,
    should_show_mode_b,
)
from confidence_engine.types import (
    UNKNOWN_FEATURE,
    CapReason,
    Category,
    ConfidenceTier,
    FeatureResult,
    FeatureSignals,
    PairEvaluation,
    PairType,
    SlotCandidate,
    StyleVibe,
    SuggestionBullet,
)


# =============================================================================
# Helpers
# =============================================================================

def _evaluation(**overrides) -> PairEvaluation:
    """MEDIUM tops/bottoms evaluation with no caps; override any field."""
    defaults = {
        "item_a_id": "top-1",
        "item_b_id": "bottom-1",
        "pair_type": PairType.TOPS_BOTTOMS,
        "raw_score": 0.72,
        "confidence_tier": ConfidenceTier.MEDIUM,
        "forced_tier": None,
        "hard_fail_reason": None,
        "cap_reasons": (),
        "features": FeatureSignals(
            C=FeatureResult(1), S=FeatureResult(1), F=FeatureResult(1),
            T=UNKNOWN_FEATURE, U=FeatureResult(1),
        ),
        "both_statement": False,
        "is_shoes_involved": False,
        "high_threshold_used": 0.78,
    }
    defaults.update(overrides)
    return PairEvaluation(**defaults)


def _keys(bullets):
    return [b.key for b in bullets]


# =============================================================================
# Near matches
# =============================================================================

class TestSelectNearMatches:
    """Type 2a first, then Type 2b, each score-descending."""

    def test_ordering(self):
        strong_medium = _evaluation(item_b_id="b1", raw_score=0.76)
        capped_high = _evaluation(
            item_b_id="b2", raw_score=0.80, cap_reasons=(CapReason.COLOR_TENSION,)
        )
        capped_higher = _evaluation(
            item_b_id="b3", raw_score=0.90, cap_reasons=(CapReason.STYLE_TENSION,)
        )
        weaker = _evaluation(item_b_id="b4", raw_score=0.71)

        result = select_near_matches([strong_medium, weaker, capped_high, capped_higher])

        assert [e.item_b_id for e in result] == ["b3", "b2", "b1", "b4"]

    def test_excludes_weak_medium_and_other_tiers(self):
        evaluations = [
            _evaluation(item_b_id="weak", raw_score=0.65),
            _evaluation(item_b_id="high", raw_score=0.95, confidence_tier=ConfidenceTier.HIGH),
            _evaluation(item_b_id="low", raw_score=0.40, confidence_tier=ConfidenceTier.LOW),
        ]
        assert select_near_matches(evaluations) == []

    def test_shoes_use_own_threshold(self):
        # 0.80 with caps is 2a for a top, but only 2b for shoes (0.82)
        shoes = _evaluation(
            item_b_id="shoes",
            pair_type=PairType.TOPS_SHOES,
            raw_score=0.80,
            cap_reasons=(CapReason.SHOES_CONFIDENCE_DAMPEN,),
            is_shoes_involved=True,
            high_threshold_used=0.82,
        )
        bottom = _evaluation(item_b_id="bottom", raw_score=0.74)
        result = select_near_matches([bottom, shoes])
        assert [e.item_b_id for e in result] == ["shoes", "bottom"]

    def test_limit(self):
        evaluations = [_evaluation(item_b_id=f"b{i}", raw_score=0.70 + i / 100) for i in range(5)]
        assert len(select_near_matches(evaluations, limit=2)) == 2
        assert len(select_near_matches(evaluations)) == 5


class TestAggregateCapReasons:

    def test_frequency_then_priority(self):
        near = [
            _evaluation(cap_reasons=(CapReason.COLOR_TENSION,)),
            _evaluation(cap_reasons=(CapReason.COLOR_TENSION, CapReason.FORMALITY_TENSION)),
            _evaluation(cap_reasons=(CapReason.STYLE_TENSION,)),
        ]
        assert aggregate_cap_reasons(near) == [
            CapReason.COLOR_TENSION,
            CapReason.FORMALITY_TENSION,
            CapReason.STYLE_TENSION,
        ]

    def test_empty(self):
        assert aggregate_cap_reasons([_evaluation()]) == []


class TestShouldShowModeB:

    def test_needs_non_excluded_reason(self):
        assert should_show_mode_b([CapReason.COLOR_TENSION], False) is True
        assert should_show_mode_b([CapReason.TEXTURE_CLASH], False) is False
        assert should_show_mode_b([], False) is False

    def test_never_for_hard_fail(self):
        assert should_show_mode_b([CapReason.COLOR_TENSION], True) is False

    def test_flag_off(self):
        flags = FeatureFlags(mode_b_strong_medium_fallback=False)
        assert should_show_mode_b([CapReason.COLOR_TENSION], False, flags) is False


# =============================================================================
# Mode A
# =============================================================================

class TestModeA:

    def test_template_for_category(self):
        suggestion = generate_mode_a_suggestions(Category.TOPS)
        assert suggestion.intro == "To make this item easy to wear:"
        assert _keys(suggestion.bullets) == [
            "TOPS__BOTTOMS_DARK_STRUCTURED",
            "TOPS__SHOES_NEUTRAL",
            "TOPS__OUTERWEAR_LIGHT_LAYER",
        ]
        assert suggestion.bullets[0].target == Category.BOTTOMS

    def test_vibe_resolves_text_but_not_key(self):
        base = generate_mode_a_suggestions(Category.TOPS)
        office = generate_mode_a_suggestions(Category.TOPS, StyleVibe.OFFICE)

        assert office.bullets[0].text == "Tailored dark trousers"
        assert _keys(office.bullets) == _keys(base.bullets)

    def test_vibe_as_string(self):
        office = generate_mode_a_suggestions(Category.TOPS, "office")
        assert office.bullets[0].text == "Tailored dark trousers"

    def test_vibe_without_variant_uses_base_text(self):
        feminine = generate_mode_a_suggestions(Category.TOPS, StyleVibe.FEMININE)
        assert feminine.bullets[0].text == "Dark, structured bottoms"

    def test_every_category_has_template(self):
        for category in Category:
            assert category.value in MODE_A_TEMPLATES
            assert generate_mode_a_suggestions(category).bullets


class TestFilterModeABullets:

    def _bullets(self):
        return [
            SuggestionBullet(key="A", text="a", target=Category.BOTTOMS),
            SuggestionBullet(key="B", text="b", target=None),
            SuggestionBullet(key="C", text="c", target=Category.SHOES),
        ]

    def test_empty_wardrobe_drops_generic(self):
        assert _keys(filter_mode_a_bullets(self._bullets(), 0)) == ["A", "C"]

    def test_empty_wardrobe_ignores_matches(self):
        kept = filter_mode_a_bullets(self._bullets(), 0, [Category.BOTTOMS])
        assert _keys(kept) == ["A", "C"]

    def test_drops_matched_targets(self):
        kept = filter_mode_a_bullets(self._bullets(), 5, [Category.BOTTOMS])
        assert _keys(kept) == ["B", "C"]

    def test_nothing_matched(self):
        assert _keys(filter_mode_a_bullets(self._bullets(), 5)) == ["A", "B", "C"]


# =============================================================================
# Mode B
# =============================================================================

class TestBuildModeBBullets:
    """Priority order, max bullets, first bullet per reason."""

    def test_priority_and_limit(self):
        bullets, reasons = build_mode_b_bullets([
            CapReason.USAGE_MISMATCH,
            CapReason.COLOR_TENSION,
            CapReason.FORMALITY_TENSION,
            CapReason.STYLE_TENSION,
        ])
        assert reasons == (
            CapReason.FORMALITY_TENSION,
            CapReason.STYLE_TENSION,
            CapReason.COLOR_TENSION,
        )
        assert _keys(bullets) == [
            "FORMALITY_TENSION__MATCH_DRESSINESS",
            "STYLE_TENSION__LET_ONE_LEAD",
            "COLOR_TENSION__NEUTRAL_OTHERS",
        ]

    def test_vibe_text(self):
        bullets, _ = build_mode_b_bullets([CapReason.FORMALITY_TENSION], StyleVibe.OFFICE)
        assert bullets[0].key == "FORMALITY_TENSION__MATCH_DRESSINESS"
        assert bullets[0].text == "Stick to equally polished pieces throughout."

    def test_single_reason_no_fallback(self):
        bullets, reasons = build_mode_b_bullets([CapReason.USAGE_MISMATCH])
        assert _keys(bullets) == ["USAGE_MISMATCH__CLEAR_CONTEXT"]
        assert reasons == (CapReason.USAGE_MISMATCH,)

    def test_texture_clash_only_falls_back(self):
        bullets, reasons = build_mode_b_bullets([CapReason.TEXTURE_CLASH])
        assert _keys(bullets) == [SAFE_GENERIC_BULLET_KEY]
        assert bullets[0].text == SAFE_GENERIC_BULLET_TEXT
        assert reasons == ()

    def test_no_reasons_falls_back(self):
        bullets, reasons = build_mode_b_bullets([])
        assert _keys(bullets) == [SAFE_GENERIC_BULLET_KEY]
        assert reasons == ()

    def test_missing_key_signal_has_copy(self):
        bullets, reasons = build_mode_b_bullets([CapReason.MISSING_KEY_SIGNAL])
        assert _keys(bullets) == ["MISSING_KEY_SIGNAL__SIMPLE_VERSATILE"]
        assert reasons == (CapReason.MISSING_KEY_SIGNAL,)

    def test_custom_limits(self):
        config = ModeBConfig(max_bullets=1)
        bullets, _ = build_mode_b_bullets(
            [CapReason.COLOR_TENSION, CapReason.STYLE_TENSION], config=config
        )
        assert _keys(bullets) == ["STYLE_TENSION__LET_ONE_LEAD"]

    def test_deterministic(self):
        reasons = [CapReason.SHOES_CONFIDENCE_DAMPEN, CapReason.COLOR_TENSION]
        first = generate_mode_b_suggestions(reasons, StyleVibe.STREET)
        second = generate_mode_b_suggestions(list(reversed(reasons)), StyleVibe.STREET)
        assert first == second


class TestOutfitModeB:

    def test_no_near_matches(self):
        assert generate_outfit_mode_b_suggestions([]) is None

    def test_aggregated_reasons(self):
        near = [
            _evaluation(raw_score=0.85, cap_reasons=(CapReason.COLOR_TENSION,)),
            _evaluation(raw_score=0.80, cap_reasons=(CapReason.FORMALITY_TENSION,)),
        ]
        suggestion = generate_outfit_mode_b_suggestions(near, context=CONTEXT_AGGREGATE)
        assert suggestion.reasons_used == (CapReason.FORMALITY_TENSION, CapReason.COLOR_TENSION)

    def test_strong_medium_without_caps(self):
        suggestion = generate_outfit_mode_b_suggestions([_evaluation(raw_score=0.74)])
        assert _keys(suggestion.bullets) == ["MISSING_KEY_SIGNAL__SIMPLE_VERSATILE"]
        assert suggestion.reasons_used == (CapReason.MISSING_KEY_SIGNAL,)

    def test_nothing_actionable(self):
        with patch("confidence_engine.suggestions.logger") as mock_logger:
            assert generate_outfit_mode_b_suggestions([_evaluation(raw_score=0.60)]) is None
        mock_logger.warning.assert_called_once()

    def test_uncapped_at_high_threshold_is_not_fallback(self):
        """0.80 clears the 0.78 HIGH line, so it is not a strong MEDIUM."""
        with patch("confidence_engine.suggestions.logger") as mock_logger:
            assert generate_outfit_mode_b_suggestions([_evaluation(raw_score=0.80)]) is None
        mock_logger.warning.assert_called_once()
        assert mock_logger.warning.call_args.args[0] == (
            "Near matches without cap reasons and not Type 2b"
        )

    def test_shoes_fallback_below_shoes_threshold(self):
        """The same 0.80 sits under the 0.82 shoes line and still gets the generic bullet."""
        shoes_pair = _evaluation(
            raw_score=0.80,
            pair_type=PairType.TOPS_SHOES,
            is_shoes_involved=True,
            high_threshold_used=0.82,
        )
        suggestion = generate_outfit_mode_b_suggestions([shoes_pair])

        assert _keys(suggestion.bullets) == ["MISSING_KEY_SIGNAL__SIMPLE_VERSATILE"]
        assert suggestion.reasons_used == (CapReason.MISSING_KEY_SIGNAL,)


class TestSelectedOutfitModeB:

    def test_uses_selected_medium_candidates(self):
        selected = _evaluation(item_b_id="sel", cap_reasons=(CapReason.USAGE_MISMATCH,))
        other = _evaluation(item_b_id="other", cap_reasons=(CapReason.COLOR_TENSION,))
        candidates = [
            SlotCandidate(item_id="sel", tier=ConfidenceTier.MEDIUM, evaluation=selected),
        ]
        suggestion = get_mode_b_bullets(candidates, [selected, other])
        assert suggestion.reasons_used == (CapReason.USAGE_MISMATCH,)

    def test_falls_back_to_aggregate(self):
        high = _evaluation(item_b_id="hi", raw_score=0.9, confidence_tier=ConfidenceTier.HIGH)
        near = _evaluation(item_b_id="near", cap_reasons=(CapReason.COLOR_TENSION,))
        candidates = [SlotCandidate(item_id="hi", tier=ConfidenceTier.HIGH, evaluation=high)]

        with patch("confidence_engine.suggestions.logger") as mock_logger:
            suggestion = get_mode_b_bullets(candidates, [near])

        assert suggestion.reasons_used == (CapReason.COLOR_TENSION,)
        mock_logger.warning.assert_called_once()

    def test_no_selection(self):
        near = _evaluation(cap_reasons=(CapReason.STYLE_TENSION,))
        assert get_mode_b_bullets(None, [near]).reasons_used == (CapReason.STYLE_TENSION,)


# =============================================================================
# Bullet titles
# =============================================================================

class TestResolveBulletTitle:

    def test_mode_a_key(self):
        assert resolve_bullet_title("TOPS__BOTTOMS_DARK_STRUCTURED") == "Dark, structured bottoms"
        assert resolve_bullet_title("TOPS__BOTTOMS_DARK_STRUCTURED", StyleVibe.OFFICE) == (
            "Tailored dark trousers"
        )

    def test_mode_b_key(self):
        assert resolve_bullet_title("MISSING_KEY_SIGNAL__SIMPLE_VERSATILE") == (
            "Keep the other pieces simple and versatile."
        )

    def test_generic_fallback_key(self):
        assert resolve_bullet_title(SAFE_GENERIC_BULLET_KEY) == SAFE_GENERIC_BULLET_TEXT

    @pytest.mark.parametrize("key", ["NOPE__NOTHING", "", None, 42])
    def test_unknown_or_invalid(self, key):
        assert resolve_bullet_title(key) is None

    def test_is_valid_bullet_key(self):
        assert is_valid_bullet_key("TOPS__SHOES_NEUTRAL") is True
        assert is_valid_bullet_key("COLOR_TENSION__NEUTRAL_OTHERS") is True
        assert is_valid_bullet_key("NOPE") is False
        assert is_valid_bullet_key(None) is False


class TestBulletTitleResolver:

    def test_warns_once_per_key(self):
        resolver = BulletTitleResolver()
        with patch("confidence_engine.suggestions.logger") as mock_logger:
            assert resolver.resolve("STALE__KEY") is None
            assert resolver.resolve("STALE__KEY") is None
            assert resolver.resolve("OTHER__KEY") is None
        assert mock_logger.warning.call_count == 2

    def test_known_key_does_not_warn(self):
        resolver = BulletTitleResolver()
        with patch("confidence_engine.suggestions.logger") as mock_logger:
            assert resolver.resolve("TOPS__SHOES_NEUTRAL") == "Neutral everyday shoes"
        mock_logger.warning.assert_not_called()
