"""
SoulSort — Delta Normalizer

Sanitises the signal → delta map returned by the external signal-extraction
model.  The model's output is untrusted: every delta is clamped to
[-DELTA_LIMIT, +DELTA_LIMIT], unknown signal names are dropped, and missing
or non-numeric values become 0.0.

Low-evidence mode (any answer under LOW_EVIDENCE_MIN_WORDS words, or "Not
answered") halves every delta and caps positive deltas at +0.10, so thin
answers can never produce a confident-looking shift away from the sliders.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from soulsort.config import get_settings
from soulsort.schemas.radar import SIGNAL_NAMES
from soulsort.services.answer_service import NOT_ANSWERED, word_count
from soulsort.utils.numeric import clamp, safe_number

logger = structlog.get_logger("soulsort.delta_service")


class DeltaService:
    """Clamp and (optionally) dampen externally supplied signal deltas."""

    LOW_EVIDENCE_MULTIPLIER: float = 0.5
    LOW_EVIDENCE_POSITIVE_CAP: float = 0.10

    def __init__(self) -> None:
        settings = get_settings()
        self.delta_limit: float = settings.DELTA_LIMIT
        self.min_words: int = settings.LOW_EVIDENCE_MIN_WORDS

    # ── Public API ──────────────────────────────────────────────────────

    def is_low_evidence(self, answers: Iterable[Any] | None) -> bool:
        """True when evidence is too thin to trust the model's deltas.

        Any single answer under ``min_words`` words, or an explicit
        "Not answered" placeholder, puts the whole run in low-evidence mode.
        No answers at all is also low evidence.
        """
        texts = ["" if a is None else str(a) for a in (answers or [])]
        if not texts:
            return True
        for text in texts:
            if text.strip().lower() == NOT_ANSWERED.lower():
                return True
            if word_count(text) < self.min_words:
                return True
        return False

    def normalize(
        self,
        raw_deltas: Mapping[str, Any] | None,
        low_evidence: bool = False,
    ) -> dict[str, float]:
        """Return a clamped delta for every known signal.

        Parameters
        ----------
        raw_deltas:
            Sparse signal → delta map from the extraction model.  Anything
            that is not a mapping is treated as empty.
        low_evidence:
            Apply the ×0.5 multiplier and the +0.10 positive cap.
        """
        source: Mapping[str, Any] = raw_deltas if isinstance(raw_deltas, Mapping) else {}

        unknown = sorted(str(k) for k in source if k not in SIGNAL_NAMES)
        if unknown:
            logger.warning("unknown_delta_signals_dropped", signals=unknown)

        normalised: dict[str, float] = {}
        for name in SIGNAL_NAMES:
            delta = safe_number(source.get(name), 0.0)
            delta = clamp(delta, -self.delta_limit, self.delta_limit)
            if low_evidence:
                delta *= self.LOW_EVIDENCE_MULTIPLIER
                delta = min(delta, self.LOW_EVIDENCE_POSITIVE_CAP)
            normalised[name] = delta

        logger.debug(
            "deltas_normalised",
            low_evidence=low_evidence,
            nonzero=sum(1 for d in normalised.values() if d != 0.0),
        )
        return normalised
