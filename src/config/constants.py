"""
Engine constants and algorithm configuration.

These are values that don't change based on environment but may need
to be tuned or referenced across the engine. Feature flags and the
outfit display limit have environment overrides (see config.settings);
from_settings() builds the frozen config from a Settings instance.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from config.settings import Settings


# =============================================================================
# Tier Thresholds
# =============================================================================

@dataclass(frozen=True)
class Thresholds:
    """Raw-score cutoffs for tier mapping and near-match classification."""

    # HIGH cutoff for ordinary pairs
    HIGH: float = 0.78

    # MEDIUM cutoff (below = LOW)
    MEDIUM: float = 0.58

    # Shoes are stricter: a shoe pair needs more evidence to reach HIGH
    HIGH_SHOES: float = 0.82

    # Type 2b near match: strong MEDIUM without a cap
    NEAR_MATCH_STRONG_MEDIUM_MIN: float = 0.70


DEFAULT_THRESHOLDS = Thresholds()


# =============================================================================
# Feature Flags
# =============================================================================

@dataclass(frozen=True)
class FeatureFlags:
    """Switches that alter engine behaviour without touching rule tables."""

    explanations_enabled: bool = True
    explanations_allow_shoes: bool = False
    mode_b_strong_medium_fallback: bool = True
    silhouette_enabled: bool = False

    @classmethod
    def from_settings(cls, settings: "Settings") -> "FeatureFlags":
        return cls(
            explanations_enabled=settings.explanations_enabled,
            explanations_allow_shoes=settings.explanations_allow_shoes,
            mode_b_strong_medium_fallback=settings.mode_b_strong_medium_fallback,
            silhouette_enabled=settings.silhouette_enabled,
        )


DEFAULT_FEATURE_FLAGS = FeatureFlags()


# =============================================================================
# Outfit Configuration
# =============================================================================

@dataclass(frozen=True)
class OutfitConfig:
    """Outfit-level aggregation limits."""

    # HIGH matches returned for display
    max_matches_shown: int = 100

    @classmethod
    def from_settings(cls, settings: "Settings") -> "OutfitConfig":
        return cls(max_matches_shown=settings.max_matches_shown)


DEFAULT_OUTFIT_CONFIG = OutfitConfig()
