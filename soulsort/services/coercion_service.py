"""
SoulSort — Coercion Scanner

Flags ownership and coercive-control language in a requester's answers.
Patterns are checked in order; the scan records every pattern that matched
and grades the result ``high`` when any of the explicitly severe forms
(possessive nouns for a partner, "know their place", "belongs to me") is
present, ``medium`` otherwise.

The scan is textual only and independent of the intent scanner.
"""

from __future__ import annotations

import re

import structlog

from soulsort.schemas.scan import CoercionScan

logger = structlog.get_logger("soulsort.coercion_service")


# (name, pattern, high_severity)
_COERCION_PATTERNS: tuple[tuple[str, re.Pattern[str], bool], ...] = (
    ("possessive_partner", re.compile(r"\bmy\s+(woman|man|girl|boy)\b", re.IGNORECASE), True),
    (
        "possessive_spouse",
        re.compile(
            r"\bmy\s+(partner|wife|husband)\s+(is\s+mine|belongs|obeys|will\s+obey|does\s+what\s+i\s+(say|tell))",
            re.IGNORECASE,
        ),
        False,
    ),
    ("know_their_place", re.compile(r"\bknow\s+(her|his|their)\s+place\b", re.IGNORECASE), True),
    ("non_negotiable", re.compile(r"\bnon-?negotiable\b", re.IGNORECASE), False),
    ("disrespect_anger", re.compile(r"\bdisrespect\w*\b[^.!?\n]{0,80}\bangry\b", re.IGNORECASE), False),
    ("obedience", re.compile(r"\bobedien(t|ce)\b", re.IGNORECASE), False),
    ("submission_demand", re.compile(r"\b(should|must|has\s+to|have\s+to|will)\s+submit\b", re.IGNORECASE), False),
    (
        "withheld_permission",
        re.compile(r"\b(won'?t|will\s+not|don'?t|do\s+not|never)\s+allow\s+(her|him|them)\b", re.IGNORECASE),
        False,
    ),
    (
        "permission_required",
        re.compile(r"\b(needs?|has\s+to\s+ask|must\s+ask|have\s+to\s+ask)\s+(for\s+)?(my\s+)?permission\b", re.IGNORECASE),
        False,
    ),
    ("belongs_to_me", re.compile(r"\bbelongs\s+to\s+me\b", re.IGNORECASE), True),
    ("assigned_role", re.compile(r"\b(her|his|their)\s+(job|duty|role)\s+is\b", re.IGNORECASE), False),
    ("demanded_obedience", re.compile(r"\b(should|must|has\s+to)\s+(obey|listen\s+to\s+me|respect\s+me)\b", re.IGNORECASE), False),
)


class CoercionService:
    """Ownership / coercive-control language detection."""

    def scan(self, text: str | None) -> CoercionScan:
        """Scan *text* and return the matched pattern names with a severity."""
        if not text:
            return CoercionScan()

        matches: list[str] = []
        high = False
        for name, pattern, high_severity in _COERCION_PATTERNS:
            if pattern.search(text):
                matches.append(name)
                high = high or high_severity

        if not matches:
            return CoercionScan()

        severity = "high" if high else "medium"
        logger.info("coercive_language_detected", severity=severity, patterns=matches)
        return CoercionScan(triggered=True, severity=severity, matches=tuple(matches))
