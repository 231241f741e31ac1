from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict


class IntentScan(BaseModel):
    """Outcome of the deterministic gaming / garbage scan over answer text."""

    model_config = ConfigDict(frozen=True)

    gaming: bool = False
    garbage: bool = False
    gaming_matches: tuple[str, ...] = ()
    garbage_reasons: tuple[str, ...] = ()

    @property
    def low_engagement(self) -> bool:
        return self.gaming or self.garbage


class CoercionScan(BaseModel):
    """Outcome of the ownership / coercive-control language scan."""

    model_config = ConfigDict(frozen=True)

    triggered: bool = False
    severity: Optional[Literal["high", "medium"]] = None
    matches: tuple[str, ...] = ()
