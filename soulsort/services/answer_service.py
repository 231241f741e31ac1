"""
SoulSort — Answer preparation helpers

Pulls answer text out of chat transcripts so the scanners and the
low-evidence check work on plain answer strings.  Two transcript shapes
exist:

- Onboarding chats tag each assistant question with a stable ``[[Qn]]``
  marker; :func:`extract_answers` reads the first user reply after each
  marker.
- Requester chats ask the canonical questions verbatim (possibly with AI
  commentary in between); :func:`pair_answers` matches questions by their
  opening characters.

Messages may be mappings (``{"role": ..., "content": ...}``) or objects
with ``role`` / ``content`` attributes.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

NOT_ANSWERED: str = "Not answered"
ONBOARDING_QUESTION_COUNT: int = 4
QUESTION_PREFIX_CHARS: int = 30


def word_count(text: str | None) -> int:
    """Whitespace-delimited word count; ``None`` counts as zero."""
    return len((text or "").split())


def answer_text(answers: Sequence[str]) -> str:
    """Concatenate answers into the single text blob the scanners read."""
    return "\n".join(a for a in answers if a)


def _field(message: Any, name: str) -> str:
    if isinstance(message, Mapping):
        value = message.get(name)
    else:
        value = getattr(message, name, None)
    return value if isinstance(value, str) else ""


def extract_answers(
    chat_history: Sequence[Any],
    question_count: int = ONBOARDING_QUESTION_COUNT,
) -> list[str]:
    """Return one answer per ``[[Qn]]`` marker, in question order.

    A question with no following user reply (or no marker at all) yields
    :data:`NOT_ANSWERED`.
    """
    answers: list[str | None] = [None] * question_count

    for i, message in enumerate(chat_history):
        if _field(message, "role") != "assistant":
            continue
        content = _field(message, "content")
        for q_idx in range(question_count):
            if f"[[Q{q_idx + 1}]]" not in content:
                continue
            for reply in chat_history[i + 1:]:
                if _field(reply, "role") == "user" and _field(reply, "content"):
                    answers[q_idx] = _field(reply, "content")
                    break
            break

    return [a if a is not None else NOT_ANSWERED for a in answers]


def pair_answers(
    chat_history: Sequence[Any],
    questions: Sequence[str],
) -> list[tuple[str, str]]:
    """Pair each canonical question with the next user reply.

    An assistant message matches a question when it contains the question's
    first :data:`QUESTION_PREFIX_CHARS` characters.  If the next question is
    asked before any reply arrives, the current one is skipped.
    """
    pairs: list[tuple[str, str]] = []
    q_idx = 0

    for i, message in enumerate(chat_history):
        if q_idx >= len(questions):
            break
        if _field(message, "role") != "assistant":
            continue
        question = questions[q_idx]
        content = _field(message, "content")
        if question[:QUESTION_PREFIX_CHARS] not in content and content != question:
            continue

        for reply in chat_history[i + 1:]:
            role = _field(reply, "role")
            if role == "user":
                pairs.append((question, _field(reply, "content")))
                q_idx += 1
                break
            if role == "assistant" and q_idx + 1 < len(questions):
                upcoming = questions[q_idx + 1][:QUESTION_PREFIX_CHARS]
                if upcoming in _field(reply, "content"):
                    q_idx += 1
                    break

    return pairs
