"""Shared FastAPI dependencies."""

from __future__ import annotations

from soulsort.services.scoring_service import ScoringService

_scoring_service: ScoringService | None = None


def get_scoring_service() -> ScoringService:
    global _scoring_service
    if _scoring_service is None:
        _scoring_service = ScoringService()
    return _scoring_service
