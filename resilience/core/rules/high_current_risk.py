"""
High Current Risk Rule — Latest risk assessment scored above 70.
"""

from __future__ import annotations

from resilience.models.analytics_models import SourceStatus
from resilience.models.report_models import Priority, Recommendation, RecommendationContext


RULE_ID = "high_current_risk"

RISK_THRESHOLD = 70.0


def check(context: RecommendationContext) -> Recommendation | None:
    risk = context.risk
    if risk is None or risk.status != SourceStatus.ACTIVE or risk.current_risk_score is None:
        return None
    if risk.current_risk_score <= RISK_THRESHOLD:
        return None
    return Recommendation(
        priority=Priority.HIGH,
        category="risk_management",
        title="Address High-Risk Factors",
        description=f"Your current risk score is {risk.current_risk_score:.1f}/100.",
        action="Review and implement the mitigation recommendations from your latest risk assessment.",
    )
