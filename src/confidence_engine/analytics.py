"""
Confidence engine telemetry.

Observe only: events describe engine behavior for later tuning and never
feed back into evaluation. Event builders are pure functions; the session
id and the sink live on a ConfidenceTelemetry instance.
"""

import random
import string
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Sequence

from config.constants import DEFAULT_THRESHOLDS, Thresholds
from confidence_engine.types import (
    CapReason,
    ConfidenceTier,
    OutfitEvaluation,
    PairEvaluation,
)
from core.logging import get_logger

logger = get_logger(__name__)

PAIR_EVALUATED = "confidence_pair_evaluated"
OUTFIT_EVALUATED = "confidence_outfit_evaluated"
TIER_DISTRIBUTION = "confidence_tier_distribution"
CAP_REASON_FREQUENCY = "confidence_cap_reason_frequency"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class ConfidenceEngineEvent:
    name: str
    properties: Dict[str, Any]
    timestamp: str = field(default_factory=_now_iso)


EventSink = Callable[[ConfidenceEngineEvent], None]


def generate_session_id() -> str:
    """ce_<epoch millis>_<7 random base36 chars>"""
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=7))
    return f"ce_{int(time.time() * 1000)}_{suffix}"


def _tier_counts(pairs: Sequence[PairEvaluation]) -> Dict[ConfidenceTier, int]:
    counts = {ConfidenceTier.HIGH: 0, ConfidenceTier.MEDIUM: 0, ConfidenceTier.LOW: 0}
    for pair in pairs:
        counts[pair.confidence_tier] += 1
    return counts


# =============================================================================
# Event Builders
# =============================================================================

def build_pair_evaluated_event(
    evaluation: PairEvaluation,
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
) -> ConfidenceEngineEvent:
    is_near_match = evaluation.confidence_tier == ConfidenceTier.MEDIUM and (
        evaluation.raw_score >= evaluation.high_threshold_used
        or evaluation.raw_score >= thresholds.NEAR_MATCH_STRONG_MEDIUM_MIN
    )
    return ConfidenceEngineEvent(
        name=PAIR_EVALUATED,
        properties={
            "pair_type": evaluation.pair_type.value,
            "raw_score": evaluation.raw_score,
            "confidence_tier": evaluation.confidence_tier.value,
            "is_hard_fail": evaluation.is_hard_fail,
            "hard_fail_reason": evaluation.hard_fail_reason.value if evaluation.hard_fail_reason else None,
            "cap_reasons": [r.value for r in evaluation.cap_reasons],
            "is_shoes_involved": evaluation.is_shoes_involved,
            "is_near_match": is_near_match,
            "explanation_allowed": evaluation.explanation_allowed,
            "explanation_forbidden_reason": evaluation.explanation_forbidden_reason,
        },
    )


def build_outfit_evaluated_event(
    evaluation: OutfitEvaluation,
    all_pairs: Sequence[PairEvaluation],
    wardrobe_size: int,
) -> ConfidenceEngineEvent:
    counts = _tier_counts(all_pairs)
    return ConfidenceEngineEvent(
        name=OUTFIT_EVALUATED,
        properties={
            "wardrobe_size": wardrobe_size,
            "pair_count": len(all_pairs),
            "high_match_count": counts[ConfidenceTier.HIGH],
            "medium_match_count": counts[ConfidenceTier.MEDIUM],
            "low_match_count": counts[ConfidenceTier.LOW],
            "near_match_count": len(evaluation.near_matches),
            "outfit_confidence": evaluation.outfit_confidence.value,
            "suggestions_mode": evaluation.suggestions_mode.value,
            "show_matches_section": evaluation.show_matches_section,
        },
    )


def build_tier_distribution_event(
    pairs: Sequence[PairEvaluation],
    session_id: str,
) -> ConfidenceEngineEvent:
    counts = _tier_counts(pairs)
    return ConfidenceEngineEvent(
        name=TIER_DISTRIBUTION,
        properties={
            "session_id": session_id,
            "high_count": counts[ConfidenceTier.HIGH],
            "medium_count": counts[ConfidenceTier.MEDIUM],
            "low_count": counts[ConfidenceTier.LOW],
            "hard_fail_count": sum(1 for p in pairs if p.is_hard_fail),
            "total_evaluations": len(pairs),
        },
    )


def build_cap_reason_frequency_event(
    pairs: Sequence[PairEvaluation],
    session_id: str,
) -> ConfidenceEngineEvent:
    reason_counts = {reason.value: 0 for reason in CapReason}
    total_capped = 0
    for pair in pairs:
        if pair.cap_reasons:
            total_capped += 1
            for reason in pair.cap_reasons:
                reason_counts[reason.value] += 1

    return ConfidenceEngineEvent(
        name=CAP_REASON_FREQUENCY,
        properties={
            "session_id": session_id,
            "reason_counts": reason_counts,
            "total_capped": total_capped,
        },
    )


# =============================================================================
# Telemetry
# =============================================================================

class ConfidenceTelemetry:
    """
    Session-scoped event emitter.

    Every event is logged at DEBUG and handed to the sink, if one is set.
    A failing sink is logged and ignored; telemetry never breaks evaluation.
    """

    def __init__(
        self,
        sink: Optional[EventSink] = None,
        enabled: bool = True,
        thresholds: Thresholds = DEFAULT_THRESHOLDS,
    ):
        self._sink = sink
        self._enabled = enabled
        self._thresholds = thresholds
        self._lock = threading.Lock()
        self._session_id = generate_session_id()

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_sink(self, sink: Optional[EventSink]) -> None:
        self._sink = sink

    def start_new_session(self) -> str:
        with self._lock:
            self._session_id = generate_session_id()
            return self._session_id

    def track(self, event: ConfidenceEngineEvent) -> None:
        if not self._enabled:
            return

        logger.debug("Confidence engine event", event_name=event.name, **event.properties)

        if self._sink is None:
            return
        try:
            self._sink(event)
        except Exception as e:
            logger.warning("Failed to deliver telemetry event", event_name=event.name, error=str(e))

    # -------------------------------------------------------------------------

    def track_pair_evaluation(self, evaluation: PairEvaluation) -> None:
        self.track(build_pair_evaluated_event(evaluation, self._thresholds))

    def track_outfit_evaluation(
        self,
        evaluation: OutfitEvaluation,
        all_pairs: Sequence[PairEvaluation],
        wardrobe_size: int,
    ) -> None:
        self.track(build_outfit_evaluated_event(evaluation, all_pairs, wardrobe_size))

    def track_tier_distribution(self, pairs: Sequence[PairEvaluation]) -> None:
        self.track(build_tier_distribution_event(pairs, self._session_id))

    def track_cap_reason_frequency(self, pairs: Sequence[PairEvaluation]) -> None:
        self.track(build_cap_reason_frequency_event(pairs, self._session_id))


# =============================================================================
# Aggregate Helpers
# =============================================================================

def calculate_average_score(pairs: Sequence[PairEvaluation]) -> float:
    if not pairs:
        return 0.0
    return sum(p.raw_score for p in pairs) / len(pairs)


def calculate_tier_percentages(pairs: Sequence[PairEvaluation]) -> Dict[str, float]:
    """Percentages (0-100) keyed high/medium/low."""
    if not pairs:
        return {"high": 0.0, "medium": 0.0, "low": 0.0}

    counts = _tier_counts(pairs)
    total = len(pairs)
    return {
        "high": counts[ConfidenceTier.HIGH] / total * 100,
        "medium": counts[ConfidenceTier.MEDIUM] / total * 100,
        "low": counts[ConfidenceTier.LOW] / total * 100,
    }
