"""
SoulSort — Radar Aggregator

Folds the per-signal scores into the seven published radar dimensions.

Pipeline:
  1. combine:   score[s] = clamp01(prior[s] + delta[s]) for every signal.
  2. override:  if gaming was detected, every signal becomes 0.15.  This is
                a hard override, not a blend: gaming voids the evidence.
  3. project:   each dimension is a fixed weighted mean of 2–5 signals
                (DIMENSION_WEIGHTS), expressed as a rounded percentage.

The V4 dashboard axes are a second, display-only projection of the radar.
"""

from __future__ import annotations

from collections.abc import Mapping

import structlog

from soulsort.schemas.radar import RADAR_DIMENSIONS, SIGNAL_NAMES, RadarProfile, V4RadarAxes
from soulsort.utils.numeric import clamp, clamp01, round_half_up, safe_number, to_percent

logger = structlog.get_logger("soulsort.radar_service")


class RadarService:
    """Signal combination and radar projection.  Stateless."""

    GAMING_SIGNAL_VALUE: float = 0.15

    # ── Dimension → {signal: weight}.  Weights in each row sum to 1. ─────
    DIMENSION_WEIGHTS: dict[str, dict[str, float]] = {
        "self_transcendence": {
            "self_transcendence": 0.7,
            "repair_motivation": 0.3,
        },
        "self_enhancement": {
            "self_enhancement": 0.7,
            "desire_intensity": 0.3,
        },
        "rooting": {
            "rooting": 0.6,
            "stability_orientation": 0.4,
        },
        "searching": {
            "searching": 0.4,
            "novelty_depth_preference": 0.2,
            "freedom_orientation": 0.2,
            "enm_openness": 0.2,
        },
        "relational": {
            "communication_style": 0.2,
            "conflict_navigation": 0.2,
            "repair_motivation": 0.2,
            "self_regulation_awareness": 0.2,
            "exclusivity_comfort": 0.2,
        },
        "erotic": {
            "erotic_attunement": 0.2,
            "desire_intensity": 0.2,
            "fantasy_openness": 0.2,
            "desire_regulation": 0.2,
            "attraction_depth_preference": 0.2,
        },
        "consent": {
            "consent_awareness": 0.25,
            "negotiation_comfort": 0.25,
            "non_coerciveness": 0.25,
            "self_advocacy": 0.25,
        },
    }

    # ── Signal combination ──────────────────────────────────────────────

    def combine(
        self,
        priors: Mapping[str, float],
        deltas: Mapping[str, float],
    ) -> dict[str, float]:
        """Add each delta to its prior and clamp to [0, 1].

        Signals missing from *priors* start at the neutral 0.5; missing
        deltas are 0.0.
        """
        return {
            name: clamp01(safe_number(priors.get(name), 0.5) + safe_number(deltas.get(name), 0.0))
            for name in SIGNAL_NAMES
        }

    def apply_gaming_override(self, signals: Mapping[str, float], gaming: bool) -> dict[str, float]:
        """Return *signals* unchanged, or every signal at 0.15 when gaming."""
        if not gaming:
            return dict(signals)
        logger.info("gaming_override_applied", value=self.GAMING_SIGNAL_VALUE)
        return {name: self.GAMING_SIGNAL_VALUE for name in SIGNAL_NAMES}

    # ── Projection ──────────────────────────────────────────────────────

    def project(self, signals: Mapping[str, float]) -> RadarProfile:
        """Fold a signal vector into a :class:`RadarProfile`."""
        values: dict[str, int] = {}
        for dimension in RADAR_DIMENSIONS:
            weights = self.DIMENSION_WEIGHTS[dimension]
            total = sum(weights.values())
            weighted = sum(
                clamp01(safe_number(signals.get(signal), 0.5)) * weight
                for signal, weight in weights.items()
            )
            values[dimension] = to_percent(weighted / total)
        return RadarProfile(**values)

    @staticmethod
    def to_v4_axes(radar: RadarProfile) -> V4RadarAxes:
        """Project the seven radar dimensions onto the six dashboard axes."""

        def pct(value: float) -> int:
            return int(clamp(round_half_up(value), 0, 100))

        meaning = (radar.self_transcendence + radar.self_enhancement + radar.rooting + radar.searching) / 4
        return V4RadarAxes(
            meaning_values=pct(meaning),
            regulation_nervous_system=pct(radar.relational * 0.7 + radar.consent * 0.2 + radar.rooting * 0.1),
            erotic_attunement=pct(radar.erotic),
            autonomy_orientation=pct(radar.searching * 0.5 + radar.relational * 0.5),
            consent_orientation=pct(radar.consent),
            conflict_repair=pct(radar.relational * 0.65 + radar.consent * 0.35),
        )
