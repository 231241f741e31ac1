"""
SoulSort — Scoring Engine orchestration

Runs the two scoring pipelines end to end and records every intermediate
value in a trace instead of printing debug output.

Owner profile build:
  low-evidence check → priors → normalised deltas → combined signals →
  intent scan → gaming override → radar projection → V4 axes

Requester assessment:
  priors/deltas/combine → intent scan → gaming override → projection →
  low-engagement clamp → coercion caps → dealbreakers → score composition

Score composition (fixed order):
  base = round(clamp(100 − rms × RMS_PENALTY_FACTOR, 0, 100))
  → low-engagement cap (25) → consent gate (55) → abuse-flag gate (60)
  → min(dealbreaker caps) → low-engagement cap again

Every stage returns a new value; no stage can raise the score.  Raw answer
text is never logged.
"""

from __future__ import annotations

import math
import uuid
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Optional

import structlog

from soulsort.config import get_settings
from soulsort.schemas.assessment import (
    AssessmentInput,
    AssessmentResult,
    AssessmentTrace,
    ProfileInput,
    ProfileResult,
    ProfileTrace,
    ScoreStage,
)
from soulsort.schemas.dealbreaker import DealbreakerRuleHit
from soulsort.schemas.radar import RADAR_DIMENSIONS, RadarProfile
from soulsort.services.answer_service import answer_text
from soulsort.services.coercion_service import CoercionService
from soulsort.services.dealbreaker_service import (
    DealbreakerInput,
    apply_dealbreaker_caps,
    dealbreaker_cap,
    evaluate_dealbreakers,
)
from soulsort.services.delta_service import DeltaService
from soulsort.services.insight_service import InsightService
from soulsort.services.intent_service import IntentService
from soulsort.services.prior_service import PriorService
from soulsort.services.radar_service import RadarService
from soulsort.services.safety_service import GAMING_DETECTED, SafetyService
from soulsort.utils.numeric import clamp, round_half_up

logger = structlog.get_logger("soulsort.scoring_service")


@dataclass(frozen=True)
class ScoreComposition:
    """Outcome of :meth:`ScoringService.compose`."""

    differences: dict[str, int]
    rms: float
    base_score: int
    stages: tuple[ScoreStage, ...]
    dealbreaker_cap: Optional[int]
    final_score: int


class ScoringService:
    """Owner-profile and requester-assessment pipelines.

    Collaborators are injected at construction so tests can swap any one of
    them; by default each is built fresh.
    """

    def __init__(
        self,
        prior_service: PriorService | None = None,
        delta_service: DeltaService | None = None,
        intent_service: IntentService | None = None,
        coercion_service: CoercionService | None = None,
        radar_service: RadarService | None = None,
        safety_service: SafetyService | None = None,
        insight_service: InsightService | None = None,
    ) -> None:
        self.prior_service = prior_service or PriorService()
        self.delta_service = delta_service or DeltaService()
        self.intent_service = intent_service or IntentService()
        self.coercion_service = coercion_service or CoercionService()
        self.radar_service = radar_service or RadarService()
        self.safety_service = safety_service or SafetyService()
        self.insight_service = insight_service or InsightService()

        settings = get_settings()
        self.scoring_version: str = settings.SCORING_VERSION
        self.schema_version: int = settings.SCHEMA_VERSION
        self.rms_penalty_factor: float = settings.RMS_PENALTY_FACTOR

    # ── Distance ────────────────────────────────────────────────────────

    @staticmethod
    def differences(a: RadarProfile, b: RadarProfile) -> dict[str, int]:
        """Absolute per-dimension difference between two profiles."""
        return {dim: abs(getattr(a, dim) - getattr(b, dim)) for dim in RADAR_DIMENSIONS}

    @staticmethod
    def rms(differences: Mapping[str, int]) -> float:
        values = list(differences.values())
        if not values:
            return 0.0
        return math.sqrt(sum(d * d for d in values) / len(values))

    def base_score(self, rms: float) -> int:
        return round_half_up(clamp(100.0 - rms * self.rms_penalty_factor, 0.0, 100.0))

    # ── Score composition ───────────────────────────────────────────────

    def compose(
        self,
        requester_radar: RadarProfile,
        owner_radar: RadarProfile,
        abuse_flags: Iterable[str] = (),
        garbage: bool = False,
        gaming: bool = False,
        dealbreaker_hits: Sequence[DealbreakerRuleHit] = (),
    ) -> ScoreComposition:
        """Turn two (already capped) radars into the final score.

        Each cap is a ``min`` so the score never rises between stages; the
        low-engagement cap is asserted on both sides of the dealbreaker step.
        """
        flags = tuple(abuse_flags)
        diffs = self.differences(requester_radar, owner_radar)
        rms = self.rms(diffs)
        base = self.base_score(rms)

        stages: list[ScoreStage] = [ScoreStage(stage="base", score=base)]
        score = self.safety_service.apply_low_engagement_cap(base, garbage, gaming)
        stages.append(ScoreStage(stage="low_engagement_cap", score=score))

        score = self.safety_service.apply_score_gates(score, requester_radar, flags)
        stages.append(ScoreStage(stage="score_gates", score=score))

        score = apply_dealbreaker_caps(score, dealbreaker_hits)
        stages.append(ScoreStage(stage="dealbreaker_caps", score=score))

        score = self.safety_service.apply_low_engagement_cap(score, garbage, gaming)
        stages.append(ScoreStage(stage="low_engagement_recap", score=score))

        return ScoreComposition(
            differences=diffs,
            rms=rms,
            base_score=base,
            stages=tuple(stages),
            dealbreaker_cap=dealbreaker_cap(dealbreaker_hits),
            final_score=int(clamp(score, 0, 100)),
        )

    # ── Owner profile ───────────────────────────────────────────────────

    def build_profile(
        self,
        sliders: Any = None,
        raw_deltas: Any = None,
        answers: Any = None,
    ) -> ProfileResult:
        """Build an owner's radar from sliders, extracted deltas and answers."""
        inp = ProfileInput(sliders=sliders, deltas=raw_deltas, answers=answers)
        log = logger.bind(run_id=uuid.uuid4().hex[:12], pipeline="profile")
        log.info("profile_build_start", answers=len(inp.answers))

        low_evidence = self.delta_service.is_low_evidence(inp.answers)
        priors = self.prior_service.build_priors(inp.sliders)
        deltas = self.delta_service.normalize(inp.deltas, low_evidence)
        combined = self.radar_service.combine(priors, deltas)

        intent = self.intent_service.scan(inp.answers)
        signals = self.radar_service.apply_gaming_override(combined, intent.gaming)
        radar = self.radar_service.project(signals)
        flags: tuple[str, ...] = (GAMING_DETECTED,) if intent.gaming else ()

        trace = ProfileTrace(
            scoring_version=self.scoring_version,
            priors=priors,
            deltas=deltas,
            low_evidence=low_evidence,
            combined_signals=combined,
            signal_scores=signals,
            intent=intent,
            radar=radar,
        )
        log.info(
            "profile_build_complete",
            low_evidence=low_evidence,
            gaming=intent.gaming,
            radar=radar.model_dump(),
        )
        return ProfileResult(
            radar=radar,
            v4_axes=self.radar_service.to_v4_axes(radar),
            signal_scores=signals,
            abuse_flags=flags,
            trace=trace,
        )

    # ── Requester assessment ────────────────────────────────────────────

    def assess_requester(self, assessment: AssessmentInput | Mapping[str, Any]) -> AssessmentResult:
        """Score a requester against a profile owner.

        ``dealbreaker_hits`` on the result is owner-only data; the API's
        requester view drops it.
        """
        inp = assessment if isinstance(assessment, AssessmentInput) else AssessmentInput.model_validate(
            dict(assessment) if isinstance(assessment, Mapping) else {}
        )
        log = logger.bind(run_id=uuid.uuid4().hex[:12], pipeline="requester")
        log.info(
            "requester_assessment_start",
            answers=len(inp.answers),
            dealbreakers=len(inp.owner_dealbreakers),
            upstream_flags=len(inp.upstream_flags),
        )

        # ── Signals ───────────────────────────────────────────────────
        low_evidence = self.delta_service.is_low_evidence(inp.answers)
        priors = self.prior_service.build_priors(inp.requester_sliders)
        deltas = self.delta_service.normalize(inp.requester_deltas, low_evidence)
        combined = self.radar_service.combine(priors, deltas)

        intent = self.intent_service.scan(inp.answers)
        signals = self.radar_service.apply_gaming_override(combined, intent.gaming)
        projected = self.radar_service.project(signals)

        # ── Safety caps ───────────────────────────────────────────────
        text = answer_text(inp.answers)
        clamped, flags = self.safety_service.clamp_low_engagement(
            projected, intent.garbage, intent.gaming, inp.upstream_flags
        )
        coercion = self.coercion_service.scan(text)
        final_radar, flags = self.safety_service.apply_coercion_caps(clamped, coercion, flags)

        # ── Dealbreakers and score ────────────────────────────────────
        hits = evaluate_dealbreakers(
            DealbreakerInput(
                requester_radar=final_radar,
                owner_radar=inp.owner_radar,
                structured_fields=inp.structured_fields,
                owner_dealbreakers=frozenset(inp.owner_dealbreakers),
                abuse_flags=flags,
                answer_text=text,
            )
        )
        composition = self.compose(
            final_radar,
            inp.owner_radar,
            abuse_flags=flags,
            garbage=intent.garbage,
            gaming=intent.gaming,
            dealbreaker_hits=hits,
        )

        trace = AssessmentTrace(
            scoring_version=self.scoring_version,
            schema_version=self.schema_version,
            priors=priors,
            deltas=deltas,
            low_evidence=low_evidence,
            combined_signals=combined,
            signal_scores=signals,
            intent=intent,
            coercion=coercion,
            radar_projected=projected,
            radar_after_engagement_clamp=clamped,
            radar_final=final_radar,
            differences=composition.differences,
            rms=composition.rms,
            base_score=composition.base_score,
            score_stages=composition.stages,
            dealbreaker_cap=composition.dealbreaker_cap,
            final_score=composition.final_score,
        )
        log.info(
            "requester_assessment_complete",
            low_evidence=low_evidence,
            gaming=intent.gaming,
            garbage=intent.garbage,
            coercion_severity=coercion.severity,
            abuse_flags=list(flags),
            dealbreaker_hits=[h.rule_id for h in hits],
            base_score=composition.base_score,
            final_score=composition.final_score,
        )
        return AssessmentResult(
            radar=final_radar,
            v4_axes=self.radar_service.to_v4_axes(final_radar),
            compatibility_score=composition.final_score,
            abuse_flags=flags,
            dealbreaker_hits=hits,
            insights=self.insight_service.build(inp.owner_radar, final_radar),
            trace=trace,
        )
