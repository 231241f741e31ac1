"""
SoulSort — Assessments API

Scores a requester against a profile owner.  Two views of the same run:

- ``POST /requester``        what the requester may see (score, radars,
                              insights); no dealbreaker hits or flags.
- ``POST /requester/audit``  the full result with hits, flags and trace,
                              for the owner and for audit storage.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends

from soulsort.api.deps import get_scoring_service
from soulsort.schemas.assessment import AssessmentResult, RequesterAssessmentResponse
from soulsort.schemas.requests import RequesterAssessmentRequest
from soulsort.services.scoring_service import ScoringService

logger = structlog.get_logger("soulsort.api.assessments")

router = APIRouter()


# ──────────────────────────────────────────────────────────────────────────────
# POST /requester — Requester-facing assessment
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/requester",
    response_model=RequesterAssessmentResponse,
    summary="Assess a requester (requester view)",
)
async def assess_requester(
    body: RequesterAssessmentRequest,
    scoring: ScoringService = Depends(get_scoring_service),
) -> RequesterAssessmentResponse:
    assessment = body.to_input()
    result = scoring.assess_requester(assessment)
    logger.info("requester_assessed", score=result.compatibility_score)
    return RequesterAssessmentResponse(
        score=result.compatibility_score,
        requester_radar=result.radar,
        owner_radar=assessment.owner_radar,
        requester_v4_axes=result.v4_axes,
        insights=result.insights,
    )


# ──────────────────────────────────────────────────────────────────────────────
# POST /requester/audit — Owner-side full result
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/requester/audit",
    response_model=AssessmentResult,
    summary="Assess a requester (full audit view)",
)
async def assess_requester_audit(
    body: RequesterAssessmentRequest,
    scoring: ScoringService = Depends(get_scoring_service),
) -> AssessmentResult:
    result = scoring.assess_requester(body.to_input())
    logger.info(
        "requester_audit_assessed",
        score=result.compatibility_score,
        dealbreaker_hits=[h.rule_id for h in result.dealbreaker_hits],
    )
    return result
