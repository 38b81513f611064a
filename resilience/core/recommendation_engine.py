"""
Recommendation Engine — Runs the ordered recommendation rules.

Rules are pure functions over a RecommendationContext. Registry order is the
output order; callers that want priority order use sort_by_priority().
"""

from __future__ import annotations

import logging
from typing import Callable

from resilience.config import settings
from resilience.core.rules import (
    flood_preparedness,
    fund_not_setup,
    haze_preparedness,
    high_current_risk,
    low_fund_completion,
    missing_risk_assessment,
    slow_alert_response,
)
from resilience.models.report_models import (
    PRIORITY_ORDER,
    Recommendation,
    RecommendationContext,
)

logger = logging.getLogger("resilience.rules")

# Type for a recommendation rule check function
RuleCheckFn = Callable[[RecommendationContext], Recommendation | None]

# Registry of all recommendation rules, in evaluation order
RULE_REGISTRY: dict[str, RuleCheckFn] = {
    fund_not_setup.RULE_ID: fund_not_setup.check,
    low_fund_completion.RULE_ID: low_fund_completion.check,
    missing_risk_assessment.RULE_ID: missing_risk_assessment.check,
    high_current_risk.RULE_ID: high_current_risk.check,
    slow_alert_response.RULE_ID: slow_alert_response.check,
    flood_preparedness.RULE_ID: flood_preparedness.check,
    haze_preparedness.RULE_ID: haze_preparedness.check,
}


def sort_by_priority(recommendations: list[Recommendation]) -> list[Recommendation]:
    """Stable sort: high before medium before low, rule order within a band."""
    return sorted(recommendations, key=lambda r: PRIORITY_ORDER[r.priority])


class RecommendationEngine:
    """
    Deterministic recommendation engine.

    Output is deduplicated by title and capped at max_recommendations.
    """

    def __init__(
        self,
        rules: dict[str, RuleCheckFn] | None = None,
        max_recommendations: int | None = None,
    ) -> None:
        self.rules = rules if rules is not None else RULE_REGISTRY
        self.max_recommendations = (
            max_recommendations
            if max_recommendations is not None
            else settings.max_recommendations
        )

    def run(self, context: RecommendationContext) -> list[Recommendation]:
        recommendations: list[Recommendation] = []
        seen_titles: set[str] = set()

        for rule_id, check_fn in self.rules.items():
            try:
                recommendation = check_fn(context)
            except Exception as e:
                # A broken rule must not sink the report
                logger.error(f"Rule '{rule_id}' failed: {type(e).__name__}: {e}")
                continue

            if recommendation is None or recommendation.title in seen_titles:
                continue
            seen_titles.add(recommendation.title)
            recommendations.append(recommendation)

            if len(recommendations) >= self.max_recommendations:
                logger.debug(f"Recommendation cap {self.max_recommendations} reached at '{rule_id}'")
                break

        return recommendations

    def run_single_rule(self, rule_id: str, context: RecommendationContext) -> Recommendation | None:
        """Run one rule by id."""
        if rule_id not in self.rules:
            raise ValueError(f"Unknown rule: {rule_id}")
        return self.rules[rule_id](context)
