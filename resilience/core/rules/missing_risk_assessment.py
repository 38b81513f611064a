"""
Missing Risk Assessment Rule — No risk assessment on file for the period.
"""

from __future__ import annotations

from resilience.models.analytics_models import SourceStatus
from resilience.models.report_models import Priority, Recommendation, RecommendationContext


RULE_ID = "missing_risk_assessment"


def check(context: RecommendationContext) -> Recommendation | None:
    if context.risk is None or context.risk.status != SourceStatus.NO_DATA:
        return None
    return Recommendation(
        priority=Priority.MEDIUM,
        category="risk_assessment",
        title="Conduct Risk Assessment",
        description="Regular risk assessments help identify potential threats to your business.",
        action="Run a comprehensive risk assessment to identify vulnerabilities.",
    )
