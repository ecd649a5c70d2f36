"""
Configuration module for the confidence engine.

Environment-driven settings come from pydantic-settings; algorithm
configuration (thresholds, flags, limits) lives in frozen dataclasses.

Usage:
    from config import get_settings, DEFAULT_THRESHOLDS

    settings = get_settings()
    flags = FeatureFlags.from_settings(settings)
"""

from config.constants import (
    DEFAULT_FEATURE_FLAGS,
    DEFAULT_OUTFIT_CONFIG,
    DEFAULT_THRESHOLDS,
    FeatureFlags,
    OutfitConfig,
    Thresholds,
)
from config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "FeatureFlags",
    "OutfitConfig",
    "Thresholds",
    "DEFAULT_FEATURE_FLAGS",
    "DEFAULT_OUTFIT_CONFIG",
    "DEFAULT_THRESHOLDS",
]
