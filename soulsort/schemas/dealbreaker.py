from __future__ import annotations

from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator


class DealbreakerRuleType(str, Enum):
    SAFETY = "SAFETY"
    PREFERENCE = "PREFERENCE"
    COMMUNICATION = "COMMUNICATION"


class DealbreakerSeverity(str, Enum):
    HARD = "HARD"
    SOFT = "SOFT"


class DealbreakerEvidence(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: str
    value: Union[str, int, float]


class DealbreakerRuleHit(BaseModel):
    """A triggered dealbreaker.  Stored for audit; shown to the owner only."""

    model_config = ConfigDict(frozen=True)

    rule_id: str
    label: str
    reason: str
    evidence: tuple[DealbreakerEvidence, ...] = ()
    cap_score_to: int


_RELATIONSHIP_STRUCTURES = ("monogamous", "open_to_enm", "enm_only", "unsure")
_KINK_OPENNESS = ("no", "maybe", "yes")
_STATUS_ORIENTATION = ("low", "medium", "high")


class RequesterStructuredFields(BaseModel):
    """Multiple-choice answers given by the requester via quick replies.

    Values outside the closed choice sets are treated as absent: the
    preference rules only ever fire on an explicit structured answer.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    relationship_structure: Optional[Literal["monogamous", "open_to_enm", "enm_only", "unsure"]] = None
    kink_openness: Optional[Literal["no", "maybe", "yes"]] = None
    status_orientation: Optional[Literal["low", "medium", "high"]] = None

    @field_validator("relationship_structure", mode="before")
    @classmethod
    def _known_structure(cls, v: Any) -> str | None:
        return _choice_or_none(v, _RELATIONSHIP_STRUCTURES)

    @field_validator("kink_openness", mode="before")
    @classmethod
    def _known_kink(cls, v: Any) -> str | None:
        return _choice_or_none(v, _KINK_OPENNESS)

    @field_validator("status_orientation", mode="before")
    @classmethod
    def _known_status(cls, v: Any) -> str | None:
        return _choice_or_none(v, _STATUS_ORIENTATION)


def _choice_or_none(value: Any, choices: tuple[str, ...]) -> str | None:
    if not isinstance(value, str):
        return None
    normalised = value.strip().lower()
    return normalised if normalised in choices else None
