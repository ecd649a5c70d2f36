"""
Core Utility Functions.

Numeric and string helpers shared by the engine and the integration adapter.
"""

import math
from typing import Iterable, List, Optional


# =============================================================================
# Numeric Helpers
# =============================================================================

def clamp(value: float, low: float, high: float) -> float:
    """
    Clamp a value into the closed range [low, high].

    Args:
        value: Value to clamp
        low: Lower bound
        high: Upper bound

    Returns:
        The clamped value
    """
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, with .5 going toward +infinity.

    Python's built-in round() uses banker's rounding (round(0.5) == 0),
    which would shift signal buckets. Result is always an int, so a
    negative zero can never escape.

    Example:
        >>> round_half_up(0.5)
        1
        >>> round_half_up(-0.5)
        0
        >>> round_half_up(-1.4)
        -1
    """
    return int(math.floor(value + 0.5))


# =============================================================================
# String Helpers
# =============================================================================

def join_lower(items: Optional[List[str]]) -> str:
    """Join free-text notes into one lowercase string for keyword matching."""
    if not items:
        return ""
    return " ".join(s for s in items if s).lower()


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    """True if any keyword occurs as a substring of text."""
    return any(k in text for k in keywords)
