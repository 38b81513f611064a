"""
Low Fund Completion Rule — Active emergency fund below half of its target.
"""

from __future__ import annotations

from resilience.models.analytics_models import SourceStatus
from resilience.models.report_models import Priority, Recommendation, RecommendationContext


RULE_ID = "low_fund_completion"

COMPLETION_THRESHOLD = 50.0


def check(context: RecommendationContext) -> Recommendation | None:
    fund = context.fund
    if fund is None or fund.status != SourceStatus.ACTIVE:
        return None
    if fund.completion_rate >= COMPLETION_THRESHOLD:
        return None
    return Recommendation(
        priority=Priority.HIGH,
        category="emergency_fund",
        title="Increase Emergency Fund Contributions",
        description=f"Your emergency fund is only {fund.completion_rate:.1f}% complete.",
        action="Increase monthly contributions to reach your target faster.",
    )
