"""
Confidence engine: rules-based clothing compatibility.

Pipeline per pair: feature signals -> weighted raw score -> gates (hard
fails, soft caps) -> tier. Outfit evaluation aggregates pairs against a
wardrobe and picks the suggestions mode; suggestions and explanations are
generated on demand from the evaluation records.
"""

from confidence_engine.explanations import (
    enrich_with_explanation,
    generate_explanation,
    is_explanation_eligible,
)
from confidence_engine.outfit_evaluation import (
    aggregate_outfit,
    calculate_outfit_confidence,
    determine_suggestions_mode,
    evaluate_outfit,
    get_best_match_per_category,
    group_matches_by_category,
)
from confidence_engine.pair_evaluation import (
    evaluate_against_wardrobe,
    evaluate_all_pairs,
    evaluate_pair,
)
from confidence_engine.suggestions import (
    BulletTitleResolver,
    filter_mode_a_bullets,
    generate_mode_a_suggestions,
    generate_mode_b_suggestions,
    generate_outfit_mode_b_suggestions,
    get_mode_b_bullets,
    resolve_bullet_title,
    select_near_matches,
)
from confidence_engine.types import (
    CapReason,
    Category,
    ColorProfile,
    ConfidenceItem,
    ConfidenceTier,
    EvalContext,
    HardFailReason,
    OutfitEvaluation,
    PairEvaluation,
    PairType,
    StyleFamily,
    StyleVibe,
    SuggestionsMode,
    TextureType,
)

__all__ = [
    # Types
    "CapReason",
    "Category",
    "ColorProfile",
    "ConfidenceItem",
    "ConfidenceTier",
    "EvalContext",
    "HardFailReason",
    "OutfitEvaluation",
    "PairEvaluation",
    "PairType",
    "StyleFamily",
    "StyleVibe",
    "SuggestionsMode",
    "TextureType",
    # Evaluation
    "evaluate_pair",
    "evaluate_all_pairs",
    "evaluate_against_wardrobe",
    "evaluate_outfit",
    "aggregate_outfit",
    "calculate_outfit_confidence",
    "determine_suggestions_mode",
    "group_matches_by_category",
    "get_best_match_per_category",
    # Suggestions
    "BulletTitleResolver",
    "select_near_matches",
    "generate_mode_a_suggestions",
    "filter_mode_a_bullets",
    "generate_mode_b_suggestions",
    "generate_outfit_mode_b_suggestions",
    "get_mode_b_bullets",
    "resolve_bullet_title",
    # Explanations
    "generate_explanation",
    "enrich_with_explanation",
    "is_explanation_eligible",
]
