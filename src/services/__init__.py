"""
Services module for business logic.

Provides the confidence service facade over the rules engine.
"""

from services.confidence_service import (
    ConfidenceService,
    get_confidence_service,
    reset_confidence_service,
)

__all__ = [
    "ConfidenceService",
    "get_confidence_service",
    "reset_confidence_service",
]
