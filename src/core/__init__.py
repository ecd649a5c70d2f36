"""
Core module for cross-cutting concerns.

This module provides:
- Structured logging configuration
- Numeric and string utilities
"""

from core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    configure_logging_from_settings,
    get_logger,
    scan_context,
    unbind_context,
)
from core.utils import clamp, contains_any, join_lower, round_half_up

__all__ = [
    "bind_context",
    "clear_context",
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
    "scan_context",
    "unbind_context",
    "clamp",
    "contains_any",
    "join_lower",
    "round_half_up",
]
