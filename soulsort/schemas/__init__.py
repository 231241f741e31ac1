"""
SoulSort — value-model registry.

Every model is a frozen pydantic ``BaseModel``; each scoring stage builds a
new instance instead of mutating its input.
"""

from soulsort.schemas.radar import RADAR_DIMENSIONS, SIGNAL_NAMES, RadarProfile, V4RadarAxes
from soulsort.schemas.preferences import PreferenceSliders
from soulsort.schemas.dealbreaker import (
    DealbreakerEvidence,
    DealbreakerRuleHit,
    DealbreakerRuleType,
    DealbreakerSeverity,
    RequesterStructuredFields,
)
from soulsort.schemas.scan import CoercionScan, IntentScan
from soulsort.schemas.assessment import (
    AlignmentInsights,
    AssessmentInput,
    AssessmentResult,
    AssessmentTrace,
    AxisAlignment,
    DealbreakerCatalogEntry,
    ProfileInput,
    ProfileResult,
    ProfileTrace,
    RequesterAssessmentResponse,
    ScoreStage,
)

__all__ = [
    "RADAR_DIMENSIONS",
    "SIGNAL_NAMES",
    "RadarProfile",
    "V4RadarAxes",
    "PreferenceSliders",
    "DealbreakerEvidence",
    "DealbreakerRuleHit",
    "DealbreakerRuleType",
    "DealbreakerSeverity",
    "RequesterStructuredFields",
    "CoercionScan",
    "IntentScan",
    "AlignmentInsights",
    "AssessmentInput",
    "AssessmentResult",
    "AssessmentTrace",
    "AxisAlignment",
    "DealbreakerCatalogEntry",
    "ProfileInput",
    "ProfileResult",
    "ProfileTrace",
    "RequesterAssessmentResponse",
    "ScoreStage",
]
