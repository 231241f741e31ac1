"""
SoulSort — Prior Builder

Turns the owner's onboarding sliders into a full signal vector of priors in
[0, 1].  Sliders are the dominant evidence in the scoring model: the LLM
deltas applied later can only nudge these values.

Nine signals are seeded from sliders; every other signal starts at the
neutral 0.5.  The boundaries slider is read through its scale version
(v1 = difficulty, v2 = ease) and unified to ease before use.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog

from soulsort.schemas.preferences import PreferenceSliders
from soulsort.schemas.radar import SIGNAL_NAMES
from soulsort.utils.numeric import clamp01

logger = structlog.get_logger("soulsort.prior_service")


class PriorService:
    """Slider → prior conversion.  Stateless; safe to share."""

    NEUTRAL_PRIOR: float = 0.5

    # Seeded signals that only get a damped nudge away from neutral.
    NEGOTIATION_NUDGE: float = 0.3
    FREEDOM_NUDGE: float = 0.5

    def build_priors(self, sliders: PreferenceSliders | Mapping[str, Any] | None = None) -> dict[str, float]:
        """Return a fresh prior for every signal in :data:`SIGNAL_NAMES`.

        Accepts a :class:`PreferenceSliders` or any raw mapping; absent or
        malformed sliders fall back to 50 and out-of-range values are
        clamped, so this never raises.
        """
        prefs = self._coerce(sliders)

        pace = prefs.pace / 100.0
        chemistry = prefs.connection_chemistry / 100.0
        kink = prefs.vanilla_kinky / 100.0
        monogamy = prefs.open_monogamous / 100.0
        ease = prefs.boundaries_ease_unified / 100.0

        priors = {name: self.NEUTRAL_PRIOR for name in SIGNAL_NAMES}
        priors.update(
            {
                "desire_regulation": pace,
                "novelty_depth_preference": chemistry,
                "attraction_depth_preference": 1.0 - chemistry,
                "fantasy_openness": kink,
                "exclusivity_comfort": monogamy,
                "enm_openness": 1.0 - monogamy,
                "freedom_orientation": self._nudge(1.0 - monogamy, self.FREEDOM_NUDGE),
                "self_advocacy": ease,
                "negotiation_comfort": self._nudge(ease, self.NEGOTIATION_NUDGE),
            }
        )
        priors = {name: clamp01(value) for name, value in priors.items()}

        logger.debug(
            "priors_built",
            boundaries_scale_version=prefs.boundaries_scale_version,
            boundaries_ease=round(prefs.boundaries_ease_unified, 2),
        )
        return priors

    # ── Internal helpers ────────────────────────────────────────────────

    def _nudge(self, value: float, strength: float) -> float:
        """Move from neutral toward *value* by *strength* of the distance."""
        return self.NEUTRAL_PRIOR + (value - self.NEUTRAL_PRIOR) * strength

    @staticmethod
    def _coerce(sliders: PreferenceSliders | Mapping[str, Any] | None) -> PreferenceSliders:
        if isinstance(sliders, PreferenceSliders):
            return sliders
        if isinstance(sliders, Mapping):
            return PreferenceSliders.model_validate(dict(sliders))
        return PreferenceSliders()
