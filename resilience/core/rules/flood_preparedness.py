"""
Flood Preparedness Rule — Business sits in an east-coast flood belt state.
"""

from __future__ import annotations

from resilience.models.report_models import Priority, Recommendation, RecommendationContext


RULE_ID = "flood_preparedness"

FLOOD_PRONE_STATES = ("kelantan", "terengganu")


def check(context: RecommendationContext) -> Recommendation | None:
    location = context.business.location.lower()
    if not any(state in location for state in FLOOD_PRONE_STATES):
        return None
    return Recommendation(
        priority=Priority.MEDIUM,
        category="location_risk",
        title="Flood Preparedness",
        description="Your business is located in a flood-prone area.",
        action="Prepare flood protection measures and establish an emergency response plan.",
    )
