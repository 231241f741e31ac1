"""
SoulSort — Dealbreakers API

Read-only catalog of the dealbreaker labels an owner can select.
"""

from __future__ import annotations

from fastapi import APIRouter

from soulsort.schemas.assessment import DealbreakerCatalogEntry
from soulsort.services.dealbreaker_service import DEALBREAKER_RULES

router = APIRouter()


@router.get(
    "",
    response_model=list[DealbreakerCatalogEntry],
    summary="List selectable dealbreakers",
)
async def list_dealbreakers() -> list[DealbreakerCatalogEntry]:
    return [
        DealbreakerCatalogEntry(
            rule_id=rule.id,
            label=rule.label,
            type=rule.type.value,
            severity=rule.severity.value,
            cap_score_to=rule.cap_score_to,
        )
        for rule in DEALBREAKER_RULES
    ]
