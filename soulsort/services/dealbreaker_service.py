"""
SoulSort — Dealbreaker Rule Engine

A fixed registry of eight typed rules.  Each rule is a frozen
:class:`DealbreakerRule` pointing at a pure module-level evaluate function
of a frozen :class:`DealbreakerInput`; rules share no state and are tested
one at a time.

A rule runs only when the profile owner selected its label.  Unselected
rules return ``None`` without looking at the input.  Every triggered hit
is kept, and the effective cap is the minimum ``cap_score_to`` across hits.

Preference rules (monogamy, kink, status) fire only on an explicit
structured answer; prose alone never triggers them.  Communication and
manipulation rules fire on closed regex lists over answer text only.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Optional

import structlog

from soulsort.schemas.dealbreaker import (
    DealbreakerEvidence,
    DealbreakerRuleHit,
    DealbreakerRuleType,
    DealbreakerSeverity,
    RequesterStructuredFields,
)
from soulsort.schemas.radar import RadarProfile
from soulsort.services.safety_service import COERCIVE_CONTROL_LANGUAGE, OWNERSHIP_LANGUAGE

logger = structlog.get_logger("soulsort.dealbreaker_service")


@dataclass(frozen=True)
class DealbreakerInput:
    """Everything a rule may read.  ``answer_text`` holds answers only."""

    requester_radar: RadarProfile
    owner_radar: RadarProfile
    structured_fields: RequesterStructuredFields = field(default_factory=RequesterStructuredFields)
    owner_dealbreakers: frozenset[str] = frozenset()
    abuse_flags: tuple[str, ...] = ()
    answer_text: str = ""


@dataclass(frozen=True)
class DealbreakerRule:
    id: str
    label: str
    type: DealbreakerRuleType
    severity: DealbreakerSeverity
    cap_score_to: int
    evaluate: Callable[[DealbreakerInput], Optional[DealbreakerRuleHit]]


def _evidence(*pairs: tuple[str, str | int | float]) -> tuple[DealbreakerEvidence, ...]:
    return tuple(DealbreakerEvidence(field=name, value=value) for name, value in pairs)


def _any_match(patterns: Sequence[re.Pattern[str]], text: str) -> bool:
    return any(p.search(text) for p in patterns)


# ── Thresholds ──────────────────────────────────────────────────────────────

CONSENT_MISALIGNMENT_THRESHOLD = 40
OWNER_MONOGAMY_RELATIONAL = 60   # owner relational above this → prefers monogamy
OWNER_ENM_RELATIONAL = 40        # owner relational below this → prefers ENM
OWNER_HIGH_KINK_EROTIC = 65


# ── Text pattern lists ──────────────────────────────────────────────────────

_AVOIDANCE_PATTERNS = (
    re.compile(r"\b(avoid|avoiding|don't talk|won't discuss|refuse to talk|shut down|stonewall|silent treatment|ghost|disappear)\b", re.IGNORECASE),
    re.compile(r"\b(rather not|don't want to|hate talking about|don't like discussing)\b", re.IGNORECASE),
    re.compile(r"\b(run away|walk away|leave when|exit when)\b.*\b(conflict|disagreement|argument|fight)\b", re.IGNORECASE),
)

_EXPLOSIVE_PATTERNS = (
    re.compile(r"\b(explosive|explode|blow up|lose it|freak out|go ballistic|rage|scream|yell|shout)\b.*\b(conflict|disagreement|argument|fight|when|during)\b", re.IGNORECASE),
    re.compile(r"\b(escalate|escalation|get heated|get angry|get mad)\b.*\b(quickly|fast|always|often|frequently)\b", re.IGNORECASE),
    re.compile(r"\b(lose control|losing control|can't control|lash out)\b", re.IGNORECASE),
    re.compile(r"\b(tend to|often|frequently|usually|always)\s+(explode|blow up|freak out|rage|scream)\b", re.IGNORECASE),
)

_SELF_AWARENESS_PATTERNS = (
    re.compile(r"\bnever\s+(my|me)\s+(fault|problem|doing)\b", re.IGNORECASE),
    re.compile(r"\balways\s+(their|his|her|the\s+other\s+person's)\s+(fault|problem)\b", re.IGNORECASE),
    re.compile(r"\b(never|don't|can't)\s+(see|understand|realize|recognize)\s+(my|how i|what i)\b", re.IGNORECASE),
    re.compile(r"\b(blame|blaming)\s+(others|them|everyone|people)\s+(always|never|for everything)\b", re.IGNORECASE),
    re.compile(r"\b(no idea|don't know|can't tell|unaware)\s+(why|how|what)\s+(they|others|people)\b", re.IGNORECASE),
)

_MANIPULATIVE_PATTERNS = (
    re.compile(r"\blie to\b", re.IGNORECASE),
    re.compile(r"\bmanipulate\b", re.IGNORECASE),
    re.compile(r"\bgaslight\b", re.IGNORECASE),
    re.compile(r"\bplay games\b", re.IGNORECASE),
    re.compile(r"\b(deceive|deception|deceptive)\b", re.IGNORECASE),
    re.compile(r"\b(manipulation|manipulating)\b", re.IGNORECASE),
)


# ── Rule functions ──────────────────────────────────────────────────────────

def evaluate_consent_misalignment(inp: DealbreakerInput) -> Optional[DealbreakerRuleHit]:
    if "Consent misalignment" not in inp.owner_dealbreakers:
        return None

    consent = inp.requester_radar.consent
    consent_low = consent < CONSENT_MISALIGNMENT_THRESHOLD
    ownership = OWNERSHIP_LANGUAGE in inp.abuse_flags or COERCIVE_CONTROL_LANGUAGE in inp.abuse_flags
    if not (consent_low or ownership):
        return None

    reason = (
        f"Requester consent dimension is {consent} (below threshold of {CONSENT_MISALIGNMENT_THRESHOLD})"
        if consent_low
        else "Ownership or coercive language detected"
    )
    evidence = [("consent", consent)]
    if ownership:
        evidence.append(("abuse_flags", ", ".join(inp.abuse_flags)))
    return DealbreakerRuleHit(
        rule_id="consent_misalignment",
        label="Consent misalignment",
        reason=reason,
        evidence=_evidence(*evidence),
        cap_score_to=45,
    )


def evaluate_monogamy_mismatch(inp: DealbreakerInput) -> Optional[DealbreakerRuleHit]:
    if "Monogamy mismatch" not in inp.owner_dealbreakers:
        return None

    structure = inp.structured_fields.relationship_structure
    if structure is None:
        return None

    relational = inp.owner_radar.relational
    prefers_monogamy = relational > OWNER_MONOGAMY_RELATIONAL
    prefers_enm = relational < OWNER_ENM_RELATIONAL
    mismatch = (prefers_monogamy and structure == "enm_only") or (prefers_enm and structure == "monogamous")
    if not mismatch:
        return None

    return DealbreakerRuleHit(
        rule_id="monogamy_mismatch",
        label="Monogamy mismatch",
        reason=f"Owner prefers {'monogamy' if prefers_monogamy else 'ENM'} but requester is {structure}",
        evidence=_evidence(
            ("owner_relational", relational),
            ("requester_relationship_structure", structure),
        ),
        cap_score_to=50,
    )


def evaluate_kink_incompatibility(inp: DealbreakerInput) -> Optional[DealbreakerRuleHit]:
    if "Kink incompatibility" not in inp.owner_dealbreakers:
        return None

    openness = inp.structured_fields.kink_openness
    if openness is None:
        return None

    erotic = inp.owner_radar.erotic
    if not (erotic > OWNER_HIGH_KINK_EROTIC and openness == "no"):
        return None

    return DealbreakerRuleHit(
        rule_id="kink_incompatibility",
        label="Kink incompatibility",
        reason="Owner has high kink openness but requester is not open to kink",
        evidence=_evidence(("owner_erotic", erotic), ("requester_kink_openness", openness)),
        cap_score_to=55,
    )


def evaluate_communication_avoidance(inp: DealbreakerInput) -> Optional[DealbreakerRuleHit]:
    if "Communication avoidance" not in inp.owner_dealbreakers:
        return None
    if not _any_match(_AVOIDANCE_PATTERNS, inp.answer_text):
        return None
    return DealbreakerRuleHit(
        rule_id="communication_avoidance",
        label="Communication avoidance",
        reason="Communication avoidance patterns detected in responses",
        evidence=_evidence(("detected_pattern", "communication_avoidance")),
        cap_score_to=65,
    )


def evaluate_explosive_conflict(inp: DealbreakerInput) -> Optional[DealbreakerRuleHit]:
    if "Frequent explosive conflict" not in inp.owner_dealbreakers:
        return None
    if not _any_match(_EXPLOSIVE_PATTERNS, inp.answer_text):
        return None
    return DealbreakerRuleHit(
        rule_id="frequent_explosive_conflict",
        label="Frequent explosive conflict",
        reason="Explicit self-report of explosive conflict patterns detected",
        evidence=_evidence(("detected_pattern", "explosive_conflict")),
        cap_score_to=55,
    )


def evaluate_lack_of_self_awareness(inp: DealbreakerInput) -> Optional[DealbreakerRuleHit]:
    if "Lack of self-awareness" not in inp.owner_dealbreakers:
        return None
    if not _any_match(_SELF_AWARENESS_PATTERNS, inp.answer_text):
        return None
    return DealbreakerRuleHit(
        rule_id="lack_of_self_awareness",
        label="Lack of self-awareness",
        reason="Patterns indicating lack of self-awareness detected",
        evidence=_evidence(("detected_pattern", "lack_of_self_awareness")),
        cap_score_to=60,
    )


def evaluate_manipulative_language(inp: DealbreakerInput) -> Optional[DealbreakerRuleHit]:
    if "Deceptive/manipulative language" not in inp.owner_dealbreakers:
        return None
    if not _any_match(_MANIPULATIVE_PATTERNS, inp.answer_text):
        return None
    return DealbreakerRuleHit(
        rule_id="deceptive_manipulative_language",
        label="Deceptive/manipulative language",
        reason="Explicit manipulative or deceptive language detected",
        evidence=_evidence(("detected_keywords", "manipulative_language")),
        cap_score_to=55,
    )


def evaluate_status_oriented_dating(inp: DealbreakerInput) -> Optional[DealbreakerRuleHit]:
    if "Status-oriented dating" not in inp.owner_dealbreakers:
        return None
    status = inp.structured_fields.status_orientation
    if status != "high":
        return None
    return DealbreakerRuleHit(
        rule_id="status_oriented_dating",
        label="Status-oriented dating",
        reason="Requester indicated high importance of status/success in partner selection",
        evidence=_evidence(("requester_status_orientation", status)),
        cap_score_to=65,
    )


# ── Registry ────────────────────────────────────────────────────────────────

DEALBREAKER_RULES: tuple[DealbreakerRule, ...] = (
    DealbreakerRule(
        "consent_misalignment", "Consent misalignment",
        DealbreakerRuleType.SAFETY, DealbreakerSeverity.HARD, 45,
        evaluate_consent_misalignment,
    ),
    DealbreakerRule(
        "monogamy_mismatch", "Monogamy mismatch",
        DealbreakerRuleType.PREFERENCE, DealbreakerSeverity.HARD, 50,
        evaluate_monogamy_mismatch,
    ),
    DealbreakerRule(
        "kink_incompatibility", "Kink incompatibility",
        DealbreakerRuleType.PREFERENCE, DealbreakerSeverity.HARD, 55,
        evaluate_kink_incompatibility,
    ),
    DealbreakerRule(
        "communication_avoidance", "Communication avoidance",
        DealbreakerRuleType.COMMUNICATION, DealbreakerSeverity.SOFT, 65,
        evaluate_communication_avoidance,
    ),
    DealbreakerRule(
        "frequent_explosive_conflict", "Frequent explosive conflict",
        DealbreakerRuleType.COMMUNICATION, DealbreakerSeverity.HARD, 55,
        evaluate_explosive_conflict,
    ),
    DealbreakerRule(
        "lack_of_self_awareness", "Lack of self-awareness",
        DealbreakerRuleType.COMMUNICATION, DealbreakerSeverity.SOFT, 60,
        evaluate_lack_of_self_awareness,
    ),
    DealbreakerRule(
        "deceptive_manipulative_language", "Deceptive/manipulative language",
        DealbreakerRuleType.SAFETY, DealbreakerSeverity.HARD, 55,
        evaluate_manipulative_language,
    ),
    DealbreakerRule(
        "status_oriented_dating", "Status-oriented dating",
        DealbreakerRuleType.PREFERENCE, DealbreakerSeverity.SOFT, 65,
        evaluate_status_oriented_dating,
    ),
)

RULES_BY_LABEL: dict[str, DealbreakerRule] = {rule.label: rule for rule in DEALBREAKER_RULES}


# ── Engine ──────────────────────────────────────────────────────────────────

def evaluate_dealbreakers(inp: DealbreakerInput) -> tuple[DealbreakerRuleHit, ...]:
    """Run every selected rule and return the hits in registry order."""
    unknown = sorted(label for label in inp.owner_dealbreakers if label not in RULES_BY_LABEL)
    if unknown:
        logger.warning("unknown_dealbreaker_labels_ignored", labels=unknown)

    hits: list[DealbreakerRuleHit] = []
    for rule in DEALBREAKER_RULES:
        if rule.label not in inp.owner_dealbreakers:
            continue
        hit = rule.evaluate(inp)
        if hit is not None:
            hits.append(hit)

    if hits:
        logger.info(
            "dealbreakers_triggered",
            rule_ids=[h.rule_id for h in hits],
            cap=min(h.cap_score_to for h in hits),
        )
    return tuple(hits)


def dealbreaker_cap(hits: Iterable[DealbreakerRuleHit]) -> Optional[int]:
    """Most restrictive cap across *hits*, or ``None`` when there are none."""
    caps = [hit.cap_score_to for hit in hits]
    return min(caps) if caps else None


def apply_dealbreaker_caps(score: int, hits: Iterable[DealbreakerRuleHit]) -> int:
    cap = dealbreaker_cap(hits)
    return score if cap is None else min(score, cap)
