"""
Pytest configuration and shared fixtures for the confidence engine tests.
"""
import os
import sys

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), "src"))

# Load environment variables
from dotenv import load_dotenv
load_dotenv(os.path.join(os.path.dirname(os.path.dirname(__file__)), ".env"))


# ============================================================================
# Fixtures: Test Data Factories
# ============================================================================

@pytest.fixture
def make_item():
    """Factory for ConfidenceItem with neutral, classic, mid-formality defaults."""
    from confidence_engine.types import (
        Category,
        ColorProfile,
        ConfidenceItem,
        StyleFamily,
        TextureType,
    )

    def _make(**overrides) -> ConfidenceItem:
        defaults = {
            "id": "item-001",
            "category": Category.TOPS,
            "color_profile": ColorProfile(is_neutral=True),
            "style_family": StyleFamily.CLASSIC,
            "formality_level": 3,
            "texture_type": TextureType.SMOOTH,
        }
        defaults.update(overrides)
        return ConfidenceItem(**defaults)

    return _make


@pytest.fixture
def classic_top(make_item):
    """Scanned top: neutral, classic, formality 3, smooth."""
    from confidence_engine.types import Category
    return make_item(id="top-1", category=Category.TOPS)


@pytest.fixture
def classic_bottom(make_item):
    """Wardrobe bottom that pairs with classic_top at raw score 1.0."""
    from confidence_engine.types import Category, TextureType
    return make_item(id="bottom-1", category=Category.BOTTOMS, texture_type=TextureType.TEXTURED)


@pytest.fixture
def test_settings():
    """Settings instance that bypasses the cache."""
    from config.settings import get_test_settings
    return get_test_settings()


# ============================================================================
# Markers auto-use
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "slow: marks tests as slow")
