"""
Feature signal computation.

Derives the per-pair signals C, S, F, T, U (and optionally V) as integer
FeatureResults in [-2, 2]:

  C  Color      always known
  S  Style      unknown if either style family is unknown
  F  Formality  always known
  T  Texture    unknown if either texture is unknown
  U  Usage      always known (style-blind, dampened fallback when S unknown)
  V  Silhouette only with the silhouette flag on and both volumes known

Usage:
    from confidence_engine.signals import compute_feature_signals

    signals = compute_feature_signals(top, bottom, PairType.TOPS_BOTTOMS)
    if not signals.S.known:
        ...
"""

from typing import Optional

from config.constants import DEFAULT_FEATURE_FLAGS, FeatureFlags
from confidence_engine.types import (
    UNKNOWN_FEATURE,
    ConfidenceItem,
    FeatureResult,
    FeatureSignals,
    PairType,
    SilhouetteProfile,
    SilhouetteVolume,
    StyleFamily,
    TextureType,
)
from confidence_engine.utils import (
    color_score,
    dampened_usage_score,
    formality_score,
    style_score,
    texture_score,
    usage_score,
)


# =============================================================================
# Individual Signals
# =============================================================================

def compute_color_signal(a: ConfidenceItem, b: ConfidenceItem) -> FeatureResult:
    return FeatureResult(color_score(a.color_profile, b.color_profile))


def compute_style_signal(a: ConfidenceItem, b: ConfidenceItem) -> FeatureResult:
    if a.style_family == StyleFamily.UNKNOWN or b.style_family == StyleFamily.UNKNOWN:
        return UNKNOWN_FEATURE
    return FeatureResult(style_score(a.style_family, b.style_family))


def compute_formality_signal(a: ConfidenceItem, b: ConfidenceItem) -> FeatureResult:
    return FeatureResult(formality_score(a.formality_level, b.formality_level))


def compute_texture_signal(a: ConfidenceItem, b: ConfidenceItem) -> FeatureResult:
    if a.texture_type == TextureType.UNKNOWN or b.texture_type == TextureType.UNKNOWN:
        return UNKNOWN_FEATURE
    return FeatureResult(texture_score(a.texture_type, b.texture_type))


def compute_usage_signal(a: ConfidenceItem, b: ConfidenceItem) -> FeatureResult:
    styles_known = (
        a.style_family != StyleFamily.UNKNOWN and b.style_family != StyleFamily.UNKNOWN
    )
    if styles_known:
        value = usage_score(a.formality_level, b.formality_level, a.style_family, b.style_family)
    else:
        value = dampened_usage_score(a.formality_level, b.formality_level)
    return FeatureResult(value)


def _silhouette_known(profile: Optional[SilhouetteProfile]) -> bool:
    return profile is not None and profile.volume != SilhouetteVolume.UNKNOWN


def compute_silhouette_signal(a: ConfidenceItem, b: ConfidenceItem) -> FeatureResult:
    """Volume balance: fitted against oversized is best, regular goes with anything."""
    if not (_silhouette_known(a.silhouette_profile) and _silhouette_known(b.silhouette_profile)):
        return UNKNOWN_FEATURE

    vol_a = a.silhouette_profile.volume
    vol_b = b.silhouette_profile.volume
    if {vol_a, vol_b} == {SilhouetteVolume.FITTED, SilhouetteVolume.OVERSIZED}:
        return FeatureResult(2)
    if SilhouetteVolume.REGULAR in (vol_a, vol_b):
        return FeatureResult(1)
    # Same volume (fitted/fitted, oversized/oversized) can work but is not optimal
    return FeatureResult(0)


# =============================================================================
# All Signals
# =============================================================================

def compute_feature_signals(
    item_a: ConfidenceItem,
    item_b: ConfidenceItem,
    pair_type: PairType,
    flags: FeatureFlags = DEFAULT_FEATURE_FLAGS,
) -> FeatureSignals:
    """
    Compute every signal for one pair.

    pair_type is accepted so callers resolve it once; no current signal
    varies by pair type. V is only present when flags.silhouette_enabled.
    """
    return FeatureSignals(
        C=compute_color_signal(item_a, item_b),
        S=compute_style_signal(item_a, item_b),
        F=compute_formality_signal(item_a, item_b),
        T=compute_texture_signal(item_a, item_b),
        U=compute_usage_signal(item_a, item_b),
        V=compute_silhouette_signal(item_a, item_b) if flags.silhouette_enabled else None,
    )


# =============================================================================
# Signal Helpers
# =============================================================================

def count_known_features(signals: FeatureSignals) -> int:
    return sum(1 for _, result in signals.items() if result.known)


def get_min_feature_value(signals: FeatureSignals) -> int:
    """Lowest known value; 0 when nothing is known."""
    values = [r.value for _, r in signals.items() if r.known]
    return min(values) if values else 0


def get_max_feature_value(signals: FeatureSignals) -> int:
    """Highest known value; 0 when nothing is known."""
    values = [r.value for _, r in signals.items() if r.known]
    return max(values) if values else 0


def has_strong_negative(signals: FeatureSignals) -> bool:
    return any(r.known and r.value <= -2 for _, r in signals.items())
