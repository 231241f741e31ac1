"""
SoulSort — Profiles API

Builds an owner's radar from onboarding sliders, the extracted signal
deltas and the onboarding answers.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends

from soulsort.api.deps import get_scoring_service
from soulsort.schemas.assessment import ProfileResult
from soulsort.schemas.requests import ProfileRadarRequest
from soulsort.services.scoring_service import ScoringService

logger = structlog.get_logger("soulsort.api.profiles")

router = APIRouter()


# ──────────────────────────────────────────────────────────────────────────────
# POST /radar — Build an owner profile radar
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/radar",
    response_model=ProfileResult,
    summary="Build an owner's radar profile",
)
async def build_profile_radar(
    body: ProfileRadarRequest,
    scoring: ScoringService = Depends(get_scoring_service),
) -> ProfileResult:
    """Run the owner-profile pipeline.

    ``answers`` may be given directly; otherwise they are read from
    ``chat_history`` using the ``[[Qn]]`` question markers.
    """
    result = scoring.build_profile(**body.profile_args())
    logger.info(
        "profile_radar_built",
        gaming="gaming_detected" in result.abuse_flags,
        low_evidence=result.trace.low_evidence,
    )
    return result
