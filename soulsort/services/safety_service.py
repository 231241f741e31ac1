"""
SoulSort — Safety Cap Pipeline

Order matters; each stage assumes the earlier caps are already reflected:

  1. Low-engagement clamp   garbage or gaming → every dimension into [15, 25]
  2. Coercion caps          consent ≤ 35; relational and erotic reduced
  3. Score gates            consent < 40 → score ≤ 55; any flag → score ≤ 60
  4. Low-engagement cap     garbage or gaming → score ≤ 25 (re-applied after
                            dealbreakers so a ``min`` can never lift it)

Abuse flags only ever grow within a run: each stage returns the incoming
flags plus its own, deduplicated in insertion order.
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from soulsort.schemas.radar import RADAR_DIMENSIONS, RadarProfile
from soulsort.schemas.scan import CoercionScan
from soulsort.utils.numeric import clamp

logger = structlog.get_logger("soulsort.safety_service")

LOW_ENGAGEMENT: str = "low_engagement"
GAMING_DETECTED: str = "gaming_detected"
OWNERSHIP_LANGUAGE: str = "ownership_language"
COERCIVE_CONTROL_LANGUAGE: str = "coercive_control_language"


def merge_flags(*groups: Iterable[str]) -> tuple[str, ...]:
    """Concatenate flag groups, keeping the first occurrence of each flag."""
    merged: dict[str, None] = {}
    for group in groups:
        for flag in group:
            merged.setdefault(flag, None)
    return tuple(merged)


class SafetyService:
    """Radar caps and score gates applied after projection."""

    LOW_ENGAGEMENT_FLOOR: int = 15
    LOW_ENGAGEMENT_CEILING: int = 25
    LOW_ENGAGEMENT_SCORE_CAP: int = 25

    COERCION_CONSENT_CAP: int = 35
    # severity → (relational reduction, erotic reduction)
    COERCION_REDUCTIONS: dict[str, tuple[int, int]] = {
        "high": (20, 15),
        "medium": (15, 10),
    }

    CONSENT_GATE_THRESHOLD: int = 40
    CONSENT_GATE_CAP: int = 55
    ABUSE_FLAG_CAP: int = 60

    # ── Radar stages ────────────────────────────────────────────────────

    def clamp_low_engagement(
        self,
        radar: RadarProfile,
        garbage: bool,
        gaming: bool,
        flags: Iterable[str] = (),
    ) -> tuple[RadarProfile, tuple[str, ...]]:
        """Clamp every dimension into [15, 25] when garbage or gaming.

        Values already inside the band are kept as they are.
        """
        incoming = tuple(flags)
        if not (garbage or gaming):
            return radar, merge_flags(incoming)

        clamped = radar.replace(
            **{
                dim: clamp(getattr(radar, dim), self.LOW_ENGAGEMENT_FLOOR, self.LOW_ENGAGEMENT_CEILING)
                for dim in RADAR_DIMENSIONS
            }
        )
        added = ([LOW_ENGAGEMENT] if garbage else []) + ([GAMING_DETECTED] if gaming else [])
        return clamped, merge_flags(incoming, added)

    def apply_coercion_caps(
        self,
        radar: RadarProfile,
        scan: CoercionScan,
        flags: Iterable[str] = (),
    ) -> tuple[RadarProfile, tuple[str, ...]]:
        incoming = tuple(flags)
        if not scan.triggered:
            return radar, merge_flags(incoming)

        severity = scan.severity or "medium"
        relational_cut, erotic_cut = self.COERCION_REDUCTIONS[severity]
        capped = radar.replace(
            consent=min(radar.consent, self.COERCION_CONSENT_CAP),
            relational=max(0, radar.relational - relational_cut),
            erotic=max(0, radar.erotic - erotic_cut),
        )
        flag = OWNERSHIP_LANGUAGE if severity == "high" else COERCIVE_CONTROL_LANGUAGE

        logger.info(
            "coercion_caps_applied",
            severity=severity,
            consent=capped.consent,
            relational=capped.relational,
            erotic=capped.erotic,
        )
        return capped, merge_flags(incoming, [flag])

    # ── Score stages ────────────────────────────────────────────────────

    def apply_score_gates(self, score: int, radar: RadarProfile, flags: Iterable[str]) -> int:
        """Consent-floor gate followed by the abuse-flag gate."""
        if radar.consent < self.CONSENT_GATE_THRESHOLD:
            score = min(score, self.CONSENT_GATE_CAP)
        if tuple(flags):
            score = min(score, self.ABUSE_FLAG_CAP)
        return score

    def apply_low_engagement_cap(self, score: int, garbage: bool, gaming: bool) -> int:
        if garbage or gaming:
            return min(score, self.LOW_ENGAGEMENT_SCORE_CAP)
        return score
