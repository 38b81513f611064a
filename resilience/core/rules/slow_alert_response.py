"""
Slow Alert Response Rule — Fewer than 80% of alerts resolved.

A business with no alerts has nothing to resolve and never triggers this rule.
"""

from __future__ import annotations

from resilience.models.analytics_models import SourceStatus
from resilience.models.report_models import Priority, Recommendation, RecommendationContext


RULE_ID = "slow_alert_response"

RESOLUTION_THRESHOLD = 80.0


def check(context: RecommendationContext) -> Recommendation | None:
    alerts = context.alerts
    if alerts is None or alerts.status != SourceStatus.ACTIVE:
        return None
    if alerts.resolution_rate >= RESOLUTION_THRESHOLD:
        return None
    return Recommendation(
        priority=Priority.MEDIUM,
        category="alert_management",
        title="Improve Alert Response",
        description=f"Only {alerts.resolution_rate:.1f}% of alerts have been resolved.",
        action="Establish a protocol for addressing alerts promptly.",
    )
