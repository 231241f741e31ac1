"""
SoulSort — Intent Scanner

Deterministic, regex-based check of requester/owner answers for two kinds of
low-quality input:

Gaming
    Attempts to talk to (or game) the scoring model instead of answering.
    Any single *strong* pattern (prompt-injection or score-optimisation
    language) triggers immediately.  *Weak* patterns (meta-questions about
    how scoring works) are common in honest answers too, so at least two
    distinct weak patterns must match.

Garbage
    Low-effort or gibberish answers: a word repeated three times in a row,
    keyboard mash, vowel-less letter runs, or too few words overall.

Both checks read answer text only, never question text.  Nothing here
raises: empty input is garbage, not an error.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

import structlog

from soulsort.schemas.scan import IntentScan
from soulsort.services.answer_service import answer_text, word_count

logger = structlog.get_logger("soulsort.intent_service")


# ── Gaming patterns ─────────────────────────────────────────────────────────

_STRONG_GAMING_PATTERNS: dict[str, re.Pattern[str]] = {
    "system_prompt": re.compile(r"\bsystem\s+prompt\b", re.IGNORECASE),
    "jailbreak": re.compile(r"\bjail\s*break", re.IGNORECASE),
    "ignore_instructions": re.compile(
        r"\b(ignore|disregard|forget)\s+(all\s+|any\s+)?(the\s+|your\s+)?(previous|prior|above|earlier)\s+(instructions|prompts?|rules)\b",
        re.IGNORECASE,
    ),
    "prompt_injection": re.compile(r"\bprompt\s+injection\b", re.IGNORECASE),
    "score_optimisation": re.compile(
        r"\b(optimi[sz]e|maximi[sz]e|boost|hack|game|inflate)\s+(my\s+|the\s+|this\s+)?(score|rating|compatibility|match)",
        re.IGNORECASE,
    ),
    "developer_mode": re.compile(r"\b(developer|dev|debug|admin)\s+mode\b", re.IGNORECASE),
    "score_demand": re.compile(
        r"\b(give|rate|score)\s+(me|us)\s+(a\s+)?(perfect|100|full|max(imum)?|high(est)?)\b",
        re.IGNORECASE,
    ),
    "role_override": re.compile(
        r"\b(you\s+are\s+now|act\s+as|pretend\s+to\s+be)\s+(an?\s+)?(ai|chatbot|language\s+model)\b",
        re.IGNORECASE,
    ),
}

_WEAK_GAMING_PATTERNS: dict[str, re.Pattern[str]] = {
    "how_scored": re.compile(r"\bhow\s+(is|are|do|does)\s+(this|these|it|you|they)\s+(get\s+)?(scored|score|graded|rated|ranked)\b", re.IGNORECASE),
    "what_measured": re.compile(r"\bwhat\s+(are|is)\s+(you|this|it)\s+(scoring|measuring|looking\s+for|testing)\b", re.IGNORECASE),
    "algorithm": re.compile(r"\b(the|your|this)\s+algorithm\b", re.IGNORECASE),
    "vectors": re.compile(r"\b(vectors?|embeddings?)\b", re.IGNORECASE),
    "weights": re.compile(r"\b(the|your|scoring)\s+weights\b", re.IGNORECASE),
    "the_prompt": re.compile(r"\b(the|your)\s+prompt\b", re.IGNORECASE),
    "the_model": re.compile(r"\b(the|your)\s+(language|scoring|ai)\s+model\b", re.IGNORECASE),
    "right_answer": re.compile(r"\bwhat('s|\s+is)\s+the\s+(right|correct|best|ideal)\s+answer\b", re.IGNORECASE),
    "desired_answer": re.compile(r"\bwhat\s+(answer|response)\s+do\s+you\s+(want|need|expect)\b", re.IGNORECASE),
}


# ── Garbage patterns ────────────────────────────────────────────────────────

_REPEATED_WORD = re.compile(r"\b(\w+)(\s+\1\b){2,}", re.IGNORECASE)

_KEYBOARD_MASH: tuple[re.Pattern[str], ...] = (
    re.compile(r"asdf[a-z;]*", re.IGNORECASE),
    re.compile(r"qwert[a-z]*", re.IGNORECASE),
    re.compile(r"zxcv[a-z]*", re.IGNORECASE),
    re.compile(r"hjkl[a-z;]*", re.IGNORECASE),
    re.compile(r"(abc)+", re.IGNORECASE),
    re.compile(r"(xyz)+", re.IGNORECASE),
    re.compile(r"[nm]+", re.IGNORECASE),
    re.compile(r"[0-9]+"),
    re.compile(r"([a-z0-9])\1{2,}", re.IGNORECASE),
)

# "y" is treated as a vowel so "rhythm" and "crypt" are not flagged.
_NO_VOWEL_TOKEN = re.compile(r"\b[bcdfghjklmnpqrstvwxz]{5,}\b", re.IGNORECASE)

_WORD_CHAR = re.compile(r"\w")


class IntentService:
    """Gaming and garbage detection over a set of answers."""

    WEAK_MATCHES_REQUIRED: int = 2
    MIN_ANSWERS_FOR_VOLUME_CHECK: int = 4
    MIN_TOTAL_WORDS: int = 10
    MIN_WORDS_PER_ANSWER: int = 3

    def scan(self, answers: Sequence[str] | None) -> IntentScan:
        """Run both checks and return an :class:`IntentScan`."""
        items = [a if isinstance(a, str) else "" for a in (answers or [])]
        text = answer_text(items)

        gaming_matches = self.detect_gaming(text)
        garbage_reasons = self.detect_garbage(items)

        result = IntentScan(
            gaming=bool(gaming_matches),
            garbage=bool(garbage_reasons),
            gaming_matches=tuple(gaming_matches),
            garbage_reasons=tuple(garbage_reasons),
        )
        if result.low_engagement:
            logger.info(
                "low_engagement_detected",
                gaming=result.gaming,
                garbage=result.garbage,
                gaming_matches=list(result.gaming_matches),
                garbage_reasons=list(result.garbage_reasons),
            )
        return result

    # ── Gaming ──────────────────────────────────────────────────────────

    def detect_gaming(self, text: str) -> list[str]:
        """Return the names of the gaming patterns that fired.

        Empty when neither a strong pattern nor enough weak patterns match.
        """
        strong = [name for name, pattern in _STRONG_GAMING_PATTERNS.items() if pattern.search(text)]
        if strong:
            return strong

        weak = [name for name, pattern in _WEAK_GAMING_PATTERNS.items() if pattern.search(text)]
        if len(weak) >= self.WEAK_MATCHES_REQUIRED:
            return weak
        return []

    # ── Garbage ─────────────────────────────────────────────────────────

    def detect_garbage(self, answers: Sequence[str]) -> list[str]:
        reasons: list[str] = []
        text = answer_text(answers)

        if not _WORD_CHAR.search(text):
            return ["empty"]

        if _REPEATED_WORD.search(text):
            reasons.append("repeated_word")

        stripped = [a.strip() for a in answers]
        if any(a and self._is_keyboard_mash(a) for a in stripped):
            reasons.append("keyboard_mash")

        if _NO_VOWEL_TOKEN.search(text):
            reasons.append("no_vowel_token")

        if len(answers) >= self.MIN_ANSWERS_FOR_VOLUME_CHECK:
            counts = [word_count(a) for a in answers]
            if sum(counts) < self.MIN_TOTAL_WORDS or all(c < self.MIN_WORDS_PER_ANSWER for c in counts):
                reasons.append("too_few_words")

        return reasons

    @staticmethod
    def _is_keyboard_mash(answer: str) -> bool:
        return any(pattern.fullmatch(answer) for pattern in _KEYBOARD_MASH)
