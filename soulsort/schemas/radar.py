from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from soulsort.utils.numeric import round_half_up, safe_number

RADAR_DIMENSIONS: tuple[str, ...] = (
    "self_transcendence",
    "self_enhancement",
    "rooting",
    "searching",
    "relational",
    "erotic",
    "consent",
)

SIGNAL_NAMES: tuple[str, ...] = (
    # values
    "self_transcendence",
    "self_enhancement",
    "rooting",
    "searching",
    "stability_orientation",
    # relational / conflict
    "communication_style",
    "conflict_navigation",
    "repair_motivation",
    "self_regulation_awareness",
    # erotic
    "erotic_attunement",
    "desire_intensity",
    "fantasy_openness",
    "attraction_depth_preference",
    "desire_regulation",
    "novelty_depth_preference",
    # structure / freedom
    "freedom_orientation",
    "enm_openness",
    "exclusivity_comfort",
    # consent
    "consent_awareness",
    "negotiation_comfort",
    "non_coerciveness",
    "self_advocacy",
)

NEUTRAL_DIMENSION: int = 50


class RadarProfile(BaseModel):
    """Seven published compatibility dimensions, each an int in [0, 100].

    Construction never fails on bad numbers: missing, NaN, infinite or
    non-numeric values become the neutral midpoint (50) and out-of-range
    values are clamped.  Instances are frozen; use :meth:`replace` to derive
    a new profile.
    """

    model_config = ConfigDict(frozen=True)

    self_transcendence: int = NEUTRAL_DIMENSION
    self_enhancement: int = NEUTRAL_DIMENSION
    rooting: int = NEUTRAL_DIMENSION
    searching: int = NEUTRAL_DIMENSION
    relational: int = NEUTRAL_DIMENSION
    erotic: int = NEUTRAL_DIMENSION
    consent: int = NEUTRAL_DIMENSION

    @model_validator(mode="before")
    @classmethod
    def _accept_legacy_consent_key(cls, data: Any) -> Any:
        # Older stored profiles carry "consent_dim" instead of "consent"; a
        # zero, blank or NaN "consent" also defers to it.
        if isinstance(data, Mapping) and "consent_dim" in data:
            consent = data.get("consent")
            if consent is None or consent == "" or consent == 0 or consent != consent:
                data = {**data, "consent": data["consent_dim"]}
        return data

    @field_validator(*RADAR_DIMENSIONS, mode="before")
    @classmethod
    def _coerce_dimension(cls, v: Any) -> int:
        return round_half_up(safe_number(v, NEUTRAL_DIMENSION, 0.0, 100.0))

    @classmethod
    def from_any(cls, data: Any) -> "RadarProfile":
        """Build a profile from whatever the caller holds (model, mapping or junk)."""
        if isinstance(data, RadarProfile):
            return data
        if isinstance(data, Mapping):
            return cls.model_validate(dict(data))
        return cls()

    def replace(self, **changes: Any) -> "RadarProfile":
        """Return a validated copy with *changes* applied."""
        return RadarProfile(**{**self.model_dump(), **changes})

    def as_list(self) -> list[int]:
        return [getattr(self, dim) for dim in RADAR_DIMENSIONS]


class V4RadarAxes(BaseModel):
    """Dashboard axes derived from a :class:`RadarProfile`."""

    model_config = ConfigDict(frozen=True)

    meaning_values: int
    regulation_nervous_system: int
    erotic_attunement: int
    autonomy_orientation: int
    consent_orientation: int
    conflict_repair: int
