"""
Confidence Service

Thin facade over the confidence engine for app callers. Wires settings,
evaluation, explanations, suggestions and telemetry together:

    service = get_confidence_service()
    result = service.evaluate(scanned, wardrobe)
    advice = service.suggestions(scanned, result, StyleVibe.OFFICE, len(wardrobe))

The engine itself never reads settings; this service turns them into the
frozen FeatureFlags / OutfitConfig the engine functions take.
"""

import threading
from dataclasses import replace
from typing import Optional, Sequence, Union

from config.constants import DEFAULT_THRESHOLDS, FeatureFlags, OutfitConfig, Thresholds
from config.settings import Settings, get_settings
from confidence_engine.analytics import ConfidenceTelemetry, EventSink
from confidence_engine.config import DEFAULT_MODE_B_CONFIG, ModeBConfig
from confidence_engine.explanations import enrich_with_explanation
from confidence_engine.outfit_evaluation import aggregate_outfit
from confidence_engine.pair_evaluation import evaluate_against_wardrobe
from confidence_engine.suggestions import (
    CONTEXT_AGGREGATE,
    BulletTitleResolver,
    filter_mode_a_bullets,
    generate_mode_a_suggestions,
    generate_outfit_mode_b_suggestions,
    get_mode_b_bullets,
)
from confidence_engine.types import (
    ConfidenceItem,
    EvalContext,
    ModeASuggestion,
    ModeBSuggestion,
    OutfitEvaluation,
    SlotCandidate,
    StyleVibe,
    SuggestionsMode,
)
from core.logging import LoggerMixin, configure_logging_from_settings, scan_context


class ConfidenceService(LoggerMixin):
    """
    Evaluate scanned items against a wardrobe and produce styling advice.

    Stateless apart from the telemetry session and the bullet-title
    resolver's warn-once set; safe to share across threads.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        sink: Optional[EventSink] = None,
        thresholds: Thresholds = DEFAULT_THRESHOLDS,
        mode_b_config: ModeBConfig = DEFAULT_MODE_B_CONFIG,
    ):
        self.settings = settings or get_settings()
        self.flags = FeatureFlags.from_settings(self.settings)
        self.outfit_config = OutfitConfig.from_settings(self.settings)
        self.thresholds = thresholds
        self.mode_b_config = mode_b_config
        self.telemetry = ConfidenceTelemetry(
            sink=sink,
            enabled=self.settings.telemetry_enabled,
            thresholds=thresholds,
        )
        self.bullet_resolver = BulletTitleResolver()

    # =========================================================================
    # Evaluation
    # =========================================================================

    def evaluate(
        self,
        scanned: ConfidenceItem,
        wardrobe: Sequence[ConfidenceItem],
        ctx: Optional[EvalContext] = None,
    ) -> OutfitEvaluation:
        """
        Evaluate scanned against every wardrobe item.

        Every pair gets its explanation fields populated (only HIGH pairs
        can be allowed), then the outfit is aggregated and telemetry is
        emitted for the pairs and the outfit.
        """
        if ctx is None:
            ctx = EvalContext(scan_session_id=self.telemetry.session_id)

        with scan_context(ctx.scan_session_id):
            pairs = evaluate_against_wardrobe(
                scanned, wardrobe, ctx, self.flags, self.thresholds
            )
            pairs = [enrich_with_explanation(p, flags=self.flags) for p in pairs]
            result = aggregate_outfit(
                pairs, scanned, wardrobe, ctx, self.thresholds, self.outfit_config
            )

            for pair in pairs:
                self.telemetry.track_pair_evaluation(pair)
            self.telemetry.track_outfit_evaluation(result, pairs, len(wardrobe))
            self.telemetry.track_tier_distribution(pairs)
            self.telemetry.track_cap_reason_frequency(pairs)

            self.logger.info(
                "Scanned item evaluated",
                scanned_id=scanned.id,
                wardrobe_size=len(wardrobe),
                pair_count=len(pairs),
                outfit_confidence=result.outfit_confidence.value,
                suggestions_mode=result.suggestions_mode.value,
                matches=len(result.matches),
                near_matches=len(result.near_matches),
            )
            return result

    # =========================================================================
    # Suggestions
    # =========================================================================

    def suggestions(
        self,
        scanned: ConfidenceItem,
        result: OutfitEvaluation,
        vibe: Optional[StyleVibe],
        wardrobe_count: int,
    ) -> Optional[Union[ModeASuggestion, ModeBSuggestion]]:
        """
        Mode A (filtered for this wardrobe) or Mode B, per result.suggestions_mode.

        Mode B may return None when near matches carry nothing actionable.
        """
        if result.suggestions_mode == SuggestionsMode.B:
            return generate_outfit_mode_b_suggestions(
                result.near_matches,
                vibe,
                CONTEXT_AGGREGATE,
                self.mode_b_config,
                self.thresholds,
            )

        mode_a = generate_mode_a_suggestions(scanned.category, vibe)
        bullets = filter_mode_a_bullets(mode_a.bullets, wardrobe_count, result.matched_categories)
        return replace(mode_a, bullets=tuple(bullets))

    def near_match_bullets(
        self,
        result: OutfitEvaluation,
        selected_candidates: Optional[Sequence[SlotCandidate]] = None,
        vibe: Optional[StyleVibe] = None,
    ) -> Optional[ModeBSuggestion]:
        """Mode B bullets for the near-match tab, optionally for one selected outfit."""
        return get_mode_b_bullets(
            selected_candidates,
            result.near_matches,
            vibe,
            self.mode_b_config,
            self.thresholds,
        )

    def resolve_bullet_title(self, bullet_key: str, vibe: Optional[StyleVibe] = None) -> Optional[str]:
        return self.bullet_resolver.resolve(bullet_key, vibe)


# =============================================================================
# Singleton
# =============================================================================

_service: Optional[ConfidenceService] = None
_service_lock = threading.Lock()


def get_confidence_service() -> ConfidenceService:
    """Get or create ConfidenceService singleton (thread-safe)."""
    global _service
    if _service is None:
        with _service_lock:
            if _service is None:
                settings = get_settings()
                configure_logging_from_settings(settings)
                _service = ConfidenceService(settings)
    return _service


def reset_confidence_service() -> None:
    """Drop the singleton so the next call rebuilds it (tests, settings reload)."""
    global _service
    with _service_lock:
        _service = None
