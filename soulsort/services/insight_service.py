"""
SoulSort — Alignment insights

Per-dimension comparison of an owner's and a requester's radar for the
dashboard: absolute delta, a short descriptor, and summary lists of the
dimensions in natural alignment ("flow") and those with a large mismatch
("friction").
"""

from __future__ import annotations

import structlog

from soulsort.schemas.assessment import AlignmentInsights, AxisAlignment
from soulsort.schemas.radar import RADAR_DIMENSIONS, RadarProfile

logger = structlog.get_logger("soulsort.insight_service")


class InsightService:
    """Builds :class:`AlignmentInsights` from two radar profiles."""

    ALIGNED_MAX_DELTA: int = 10
    SLIGHT_TENSION_MAX_DELTA: int = 22
    FLOW_MAX_DELTA: int = 12
    FRICTION_MIN_DELTA: int = 25
    MAX_FLOW_ITEMS: int = 5
    MAX_FRICTION_ITEMS: int = 4

    DIMENSION_TITLES: dict[str, str] = {
        "self_transcendence": "How you give beyond yourselves",
        "self_enhancement": "How you pursue ambition",
        "rooting": "How you settle",
        "searching": "How you balance closeness and freedom",
        "relational": "How you connect and repair",
        "erotic": "Your desire landscape",
        "consent": "How you navigate consent",
    }

    @classmethod
    def descriptor(cls, delta: int) -> str:
        delta = abs(delta)
        if delta <= cls.ALIGNED_MAX_DELTA:
            return "aligned"
        if delta <= cls.SLIGHT_TENSION_MAX_DELTA:
            return "slight tension"
        return "tension zone"

    def build(self, owner: RadarProfile, requester: RadarProfile) -> AlignmentInsights:
        axes: list[AxisAlignment] = []
        flow: list[str] = []
        friction: list[str] = []

        for dim in RADAR_DIMENSIONS:
            owner_value = getattr(owner, dim)
            requester_value = getattr(requester, dim)
            delta = abs(owner_value - requester_value)
            axes.append(
                AxisAlignment(
                    dimension=dim,
                    owner=owner_value,
                    requester=requester_value,
                    delta=delta,
                    descriptor=self.descriptor(delta),
                )
            )
            title = self.DIMENSION_TITLES[dim]
            if delta <= self.FLOW_MAX_DELTA:
                flow.append(f"{title}: natural alignment")
            elif delta >= self.FRICTION_MIN_DELTA:
                friction.append(f"{title}: high mismatch to negotiate")

        logger.debug("insights_built", flow=len(flow), friction=len(friction))
        return AlignmentInsights(
            axes=tuple(axes),
            flow=tuple(flow[: self.MAX_FLOW_ITEMS]),
            friction=tuple(friction[: self.MAX_FRICTION_ITEMS]),
        )
