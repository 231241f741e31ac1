"""
SoulSort — Main API Router

Aggregates all sub-routers under a single prefix so that ``soulsort.main``
can mount the entire API surface with one ``include_router`` call.
"""

from fastapi import APIRouter

from soulsort.api import assessments, dealbreakers, profiles

router = APIRouter()

router.include_router(profiles.router, prefix="/profiles", tags=["Profiles"])
router.include_router(assessments.router, prefix="/assessments", tags=["Assessments"])
router.include_router(dealbreakers.router, prefix="/dealbreakers", tags=["Dealbreakers"])
