from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from soulsort.schemas.dealbreaker import DealbreakerRuleHit, RequesterStructuredFields
from soulsort.schemas.preferences import PreferenceSliders
from soulsort.schemas.radar import RadarProfile, V4RadarAxes
from soulsort.schemas.scan import CoercionScan, IntentScan


# ── Input coercion helpers ────────────────────────────────────────────────────

def _string_tuple(value: Any) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple, set, frozenset)):
        return ()
    return tuple(item for item in value if isinstance(item, str))


def _answer_tuple(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple("" if item is None else str(item) for item in value)


def _mapping_or_empty(value: Any) -> dict:
    return dict(value) if isinstance(value, Mapping) else {}


# ── Inputs ────────────────────────────────────────────────────────────────────

class ProfileInput(BaseModel):
    """Everything the owner-profile build needs: sliders, LLM deltas, answers."""

    model_config = ConfigDict(frozen=True)

    sliders: PreferenceSliders = Field(default_factory=PreferenceSliders)
    deltas: dict[str, Any] = Field(default_factory=dict)
    answers: tuple[str, ...] = ()

    @field_validator("sliders", mode="before")
    @classmethod
    def _coerce_sliders(cls, v: Any) -> Any:
        return v if isinstance(v, PreferenceSliders) else _mapping_or_empty(v)

    @field_validator("deltas", mode="before")
    @classmethod
    def _coerce_deltas(cls, v: Any) -> dict:
        return _mapping_or_empty(v)

    @field_validator("answers", mode="before")
    @classmethod
    def _coerce_answers(cls, v: Any) -> tuple[str, ...]:
        return _answer_tuple(v)


class AssessmentInput(BaseModel):
    """One requester-vs-owner assessment run.

    ``answers`` holds the requester's free-text answers only (no question
    text); the intent and coercion scanners and the text-based dealbreaker
    rules all read them.
    """

    model_config = ConfigDict(frozen=True)

    owner_radar: RadarProfile = Field(default_factory=RadarProfile)
    owner_dealbreakers: tuple[str, ...] = ()
    requester_deltas: dict[str, Any] = Field(default_factory=dict)
    requester_sliders: PreferenceSliders = Field(default_factory=PreferenceSliders)
    answers: tuple[str, ...] = ()
    structured_fields: RequesterStructuredFields = Field(default_factory=RequesterStructuredFields)
    upstream_flags: tuple[str, ...] = ()

    @field_validator("owner_radar", mode="before")
    @classmethod
    def _coerce_owner_radar(cls, v: Any) -> RadarProfile:
        return RadarProfile.from_any(v)

    @field_validator("owner_dealbreakers", "upstream_flags", mode="before")
    @classmethod
    def _coerce_labels(cls, v: Any) -> tuple[str, ...]:
        return _string_tuple(v)

    @field_validator("requester_deltas", mode="before")
    @classmethod
    def _coerce_deltas(cls, v: Any) -> dict:
        return _mapping_or_empty(v)

    @field_validator("requester_sliders", mode="before")
    @classmethod
    def _coerce_sliders(cls, v: Any) -> Any:
        return v if isinstance(v, PreferenceSliders) else _mapping_or_empty(v)

    @field_validator("answers", mode="before")
    @classmethod
    def _coerce_answers(cls, v: Any) -> tuple[str, ...]:
        return _answer_tuple(v)

    @field_validator("structured_fields", mode="before")
    @classmethod
    def _coerce_structured(cls, v: Any) -> Any:
        return v if isinstance(v, RequesterStructuredFields) else _mapping_or_empty(v)


# ── Traces ────────────────────────────────────────────────────────────────────

class ScoreStage(BaseModel):
    model_config = ConfigDict(frozen=True)

    stage: str
    score: int


class ProfileTrace(BaseModel):
    """Every intermediate value of one owner-profile build."""

    model_config = ConfigDict(frozen=True)

    scoring_version: str
    priors: dict[str, float]
    deltas: dict[str, float]
    low_evidence: bool
    combined_signals: dict[str, float]
    signal_scores: dict[str, float]
    intent: IntentScan
    radar: RadarProfile


class AssessmentTrace(BaseModel):
    """Every intermediate value of one requester assessment, in stage order."""

    model_config = ConfigDict(frozen=True)

    scoring_version: str
    schema_version: int
    priors: dict[str, float]
    deltas: dict[str, float]
    low_evidence: bool
    combined_signals: dict[str, float]
    signal_scores: dict[str, float]
    intent: IntentScan
    coercion: CoercionScan
    radar_projected: RadarProfile
    radar_after_engagement_clamp: RadarProfile
    radar_final: RadarProfile
    differences: dict[str, int]
    rms: float
    base_score: int
    score_stages: tuple[ScoreStage, ...]
    dealbreaker_cap: Optional[int] = None
    final_score: int


# ── Insights ──────────────────────────────────────────────────────────────────

class AxisAlignment(BaseModel):
    model_config = ConfigDict(frozen=True)

    dimension: str
    owner: int
    requester: int
    delta: int
    descriptor: str


class AlignmentInsights(BaseModel):
    model_config = ConfigDict(frozen=True)

    axes: tuple[AxisAlignment, ...]
    flow: tuple[str, ...] = ()
    friction: tuple[str, ...] = ()


# ── Results ───────────────────────────────────────────────────────────────────

class ProfileResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    radar: RadarProfile
    v4_axes: V4RadarAxes
    signal_scores: dict[str, float]
    abuse_flags: tuple[str, ...] = ()
    trace: ProfileTrace


class AssessmentResult(BaseModel):
    """Full outcome of an assessment.  ``dealbreaker_hits`` is owner-only data."""

    model_config = ConfigDict(frozen=True)

    radar: RadarProfile
    v4_axes: V4RadarAxes
    compatibility_score: int
    abuse_flags: tuple[str, ...] = ()
    dealbreaker_hits: tuple[DealbreakerRuleHit, ...] = ()
    insights: AlignmentInsights
    trace: AssessmentTrace


# ── API views ─────────────────────────────────────────────────────────────────

class RequesterAssessmentResponse(BaseModel):
    """What the requester is allowed to see: no hits, no flags, no trace."""

    score: int
    requester_radar: RadarProfile
    owner_radar: RadarProfile
    requester_v4_axes: V4RadarAxes
    insights: AlignmentInsights


class DealbreakerCatalogEntry(BaseModel):
    rule_id: str
    label: str
    type: str
    severity: str
    cap_score_to: int
