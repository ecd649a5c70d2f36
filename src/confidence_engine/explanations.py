"""
Explanation eligibility and template selection.

Explanations are only shown for HIGH confidence pairs. Template choice is
random among the templates for the pair type, but the default random source
is seeded from the pair identity, so the same pair always gets the same
explanation.
"""

import hashlib
import random
from dataclasses import replace
from typing import Optional, Tuple

from config.constants import DEFAULT_FEATURE_FLAGS, FeatureFlags
from confidence_engine.config import (
    CONCRETE_VARIANT_PROBABILITY,
    EXPLANATION_TEMPLATES,
    ExplanationTemplate,
    ForbiddenRule,
)
from confidence_engine.types import (
    CapReason,
    ConfidenceTier,
    ExplanationResult,
    HardFailReason,
    PairEvaluation,
    PairType,
)

REASON_FEATURE_DISABLED = "feature_disabled"
REASON_CONFIDENCE_TOO_LOW = "confidence_too_low"
REASON_NO_TEMPLATE_FOUND = "no_template_found"


# =============================================================================
# Eligibility
# =============================================================================

def check_forbidden_rules(
    evaluation: PairEvaluation,
    flags: FeatureFlags = DEFAULT_FEATURE_FLAGS,
) -> Tuple[bool, Optional[str]]:
    """
    Returns (forbidden, rule_id). Rules, in order:

    1. Both items are statement pieces
    2. Shoes involved while shoe explanations are disabled
    3. TEXTURE_CLASH among the cap reasons
    4. Style opposition hard fail
    """
    if evaluation.both_statement:
        return True, ForbiddenRule.STATEMENT_STATEMENT
    if evaluation.is_shoes_involved and not flags.explanations_allow_shoes:
        return True, ForbiddenRule.SHOES_CONTENTIOUS
    if CapReason.TEXTURE_CLASH in evaluation.cap_reasons:
        return True, ForbiddenRule.TEXTURE_CLASH
    if evaluation.hard_fail_reason == HardFailReason.STYLE_OPPOSITION_NO_OVERLAP:
        return True, ForbiddenRule.STYLE_OPPOSITION
    return False, None


def is_explanation_eligible(
    evaluation: PairEvaluation,
    flags: FeatureFlags = DEFAULT_FEATURE_FLAGS,
) -> Tuple[bool, Optional[str]]:
    """Returns (eligible, reason). Uses the final (post-cap) tier."""
    if not flags.explanations_enabled:
        return False, REASON_FEATURE_DISABLED
    if evaluation.confidence_tier != ConfidenceTier.HIGH:
        return False, REASON_CONFIDENCE_TOO_LOW

    forbidden, rule_id = check_forbidden_rules(evaluation, flags)
    if forbidden:
        return False, rule_id
    return True, None


# =============================================================================
# Template Selection
# =============================================================================

def pair_rng(evaluation: PairEvaluation) -> random.Random:
    """Random source seeded from the pair identity."""
    key = f"{evaluation.item_a_id}|{evaluation.item_b_id}|{evaluation.pair_type.value}"
    digest = hashlib.sha256(key.encode("utf-8")).digest()
    return random.Random(int.from_bytes(digest[:8], "big"))


def select_template(pair_type: PairType, rng: random.Random) -> Optional[ExplanationTemplate]:
    """Pair-specific templates first; generic ones only when none exist."""
    specific = [t for t in EXPLANATION_TEMPLATES if t.pair_type == pair_type]
    if specific:
        return rng.choice(specific)

    generic = [t for t in EXPLANATION_TEMPLATES if t.pair_type is None]
    if generic:
        return rng.choice(generic)
    return None


def determine_specificity_level(
    evaluation: PairEvaluation,
    template: ExplanationTemplate,
    rng: random.Random,
) -> int:
    """
    1 (abstract) by default.

    Level 2 needs a strong Style or Formality signal and a soft variant.
    Level 3 additionally needs a concrete variant and is rare.
    """
    features = evaluation.features
    strong_positive = (
        (features.S.known and features.S.value >= 2)
        or (features.F.known and features.F.value >= 2)
    )
    max_level = template.max_specificity_level

    if max_level >= 3 and strong_positive and template.concrete_variant:
        if rng.random() < CONCRETE_VARIANT_PROBABILITY:
            return 3
    if max_level >= 2 and strong_positive and template.soft_variant:
        return 2
    return 1


def get_explanation_text(template: ExplanationTemplate, level: int) -> str:
    if level == 3:
        return template.concrete_variant or template.soft_variant or template.base_text
    if level == 2:
        return template.soft_variant or template.base_text
    return template.base_text


# =============================================================================
# Public API
# =============================================================================

def generate_explanation(
    evaluation: PairEvaluation,
    rng: Optional[random.Random] = None,
    flags: FeatureFlags = DEFAULT_FEATURE_FLAGS,
) -> ExplanationResult:
    eligible, reason = is_explanation_eligible(evaluation, flags)
    if not eligible:
        return ExplanationResult(allowed=False, forbidden_reason=reason)

    if rng is None:
        rng = pair_rng(evaluation)

    template = select_template(evaluation.pair_type, rng)
    if template is None:
        return ExplanationResult(allowed=False, forbidden_reason=REASON_NO_TEMPLATE_FOUND)

    level = determine_specificity_level(evaluation, template, rng)
    return ExplanationResult(
        allowed=True,
        forbidden_reason=None,
        template_id=template.id,
        specificity_level=level,
        text=get_explanation_text(template, level),
    )


def enrich_with_explanation(
    evaluation: PairEvaluation,
    rng: Optional[random.Random] = None,
    flags: FeatureFlags = DEFAULT_FEATURE_FLAGS,
) -> PairEvaluation:
    """Copy of the evaluation with its explanation fields populated."""
    result = generate_explanation(evaluation, rng, flags)
    return replace(
        evaluation,
        explanation_allowed=result.allowed,
        explanation_forbidden_reason=result.forbidden_reason,
        explanation_template_id=result.template_id,
        explanation_specificity_level=result.specificity_level,
    )
