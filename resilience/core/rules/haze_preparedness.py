"""
Haze Preparedness Rule — Business sits in a state hit by the June-October haze.
"""

from __future__ import annotations

from resilience.models.report_models import Priority, Recommendation, RecommendationContext


RULE_ID = "haze_preparedness"

HAZE_AFFECTED_STATES = ("kuala lumpur", "selangor", "perak", "penang", "negeri sembilan")


def check(context: RecommendationContext) -> Recommendation | None:
    location = context.business.location.lower()
    if not any(state in location for state in HAZE_AFFECTED_STATES):
        return None
    return Recommendation(
        priority=Priority.MEDIUM,
        category="location_risk",
        title="Haze Preparedness",
        description="Your business is located in an area affected by seasonal haze.",
        action="Prepare air filtration and staff health measures ahead of the haze season.",
    )
