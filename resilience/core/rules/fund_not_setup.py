"""
Fund Not Set Up Rule — The business has no emergency fund configured.

Only fires when the fund source answered; a failed fetch says nothing about
whether a fund exists.
"""

from __future__ import annotations

from resilience.models.analytics_models import SourceStatus
from resilience.models.report_models import Priority, Recommendation, RecommendationContext


RULE_ID = "fund_not_setup"


def check(context: RecommendationContext) -> Recommendation | None:
    if context.fund is None or context.fund.status != SourceStatus.NOT_SETUP:
        return None
    return Recommendation(
        priority=Priority.HIGH,
        category="emergency_fund",
        title="Setup Emergency Fund",
        description="Establish an emergency fund to protect your business against unexpected shocks.",
        action="Create an emergency fund with a target of 3-6 months of expenses.",
    )
