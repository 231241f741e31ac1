from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from soulsort.schemas.assessment import AssessmentInput
from soulsort.services.answer_service import extract_answers, pair_answers


def _message_list(value: Any) -> list[dict]:
    if not isinstance(value, (list, tuple)):
        return []
    return [dict(m) for m in value if isinstance(m, Mapping)]


def _question_list(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [q for q in value if isinstance(q, str) and q]


class _LooseRequest(BaseModel):
    """Base for request bodies.  Fields stay loose; the engine coerces them."""

    model_config = ConfigDict(extra="ignore")

    answers: Optional[Any] = None
    chat_history: list[dict] = []

    @field_validator("chat_history", mode="before")
    @classmethod
    def _coerce_history(cls, v: Any) -> list[dict]:
        return _message_list(v)

    def _resolved_answers(self, questions: list[str] | None = None) -> Any:
        if isinstance(self.answers, (list, tuple, str)) and self.answers:
            return self.answers
        if not self.chat_history:
            return self.answers
        if questions:
            return [answer for _, answer in pair_answers(self.chat_history, questions)]
        return extract_answers(self.chat_history)


class ProfileRadarRequest(_LooseRequest):
    """Owner onboarding: sliders, extracted deltas and answers (or a chat)."""

    sliders: Optional[Any] = None
    deltas: Optional[Any] = None

    def profile_args(self) -> dict[str, Any]:
        return {
            "sliders": self.sliders,
            "raw_deltas": self.deltas,
            "answers": self._resolved_answers(),
        }


class RequesterAssessmentRequest(_LooseRequest):
    """Requester assessment against a stored owner profile."""

    owner_radar: Optional[Any] = None
    owner_dealbreakers: Optional[Any] = None
    requester_deltas: Optional[Any] = None
    requester_sliders: Optional[Any] = None
    structured_fields: Optional[Any] = None
    upstream_flags: Optional[Any] = None
    questions: list[str] = []

    @field_validator("questions", mode="before")
    @classmethod
    def _coerce_questions(cls, v: Any) -> list[str]:
        return _question_list(v)

    def to_input(self) -> AssessmentInput:
        return AssessmentInput(
            owner_radar=self.owner_radar,
            owner_dealbreakers=self.owner_dealbreakers,
            requester_deltas=self.requester_deltas,
            requester_sliders=self.requester_sliders,
            answers=self._resolved_answers(self.questions),
            structured_fields=self.structured_fields,
            upstream_flags=self.upstream_flags,
        )
