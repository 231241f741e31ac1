from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from soulsort.utils.numeric import safe_number

NEUTRAL_SLIDER: float = 50.0


class PreferenceSliders(BaseModel):
    """Onboarding sliders supplied by the profile owner (each 0-100).

    ``boundaries_scale_version`` selects the meaning of the boundaries
    slider: version 1 stores ``boundaries`` as difficulty (0 = easy,
    100 = hard); version 2 stores ``boundaries_ease`` (0 = hard,
    100 = easy).
    """

    model_config = ConfigDict(frozen=True)

    pace: float = NEUTRAL_SLIDER
    connection_chemistry: float = NEUTRAL_SLIDER
    vanilla_kinky: float = NEUTRAL_SLIDER
    open_monogamous: float = NEUTRAL_SLIDER
    boundaries: float = NEUTRAL_SLIDER
    boundaries_ease: Optional[float] = None
    boundaries_scale_version: int = 1

    @field_validator(
        "pace", "connection_chemistry", "vanilla_kinky", "open_monogamous", "boundaries",
        mode="before",
    )
    @classmethod
    def _coerce_slider(cls, v: Any) -> float:
        return safe_number(v, NEUTRAL_SLIDER, 0.0, 100.0)

    @field_validator("boundaries_ease", mode="before")
    @classmethod
    def _coerce_optional_slider(cls, v: Any) -> float | None:
        if v is None:
            return None
        return safe_number(v, NEUTRAL_SLIDER, 0.0, 100.0)

    @field_validator("boundaries_scale_version", mode="before")
    @classmethod
    def _coerce_scale_version(cls, v: Any) -> int:
        return 2 if safe_number(v, 1.0) == 2.0 else 1

    @property
    def boundaries_ease_unified(self) -> float:
        """Boundaries as ease (higher = easier) regardless of scale version."""
        if self.boundaries_scale_version == 2 and self.boundaries_ease is not None:
            return self.boundaries_ease
        return 100.0 - self.boundaries
