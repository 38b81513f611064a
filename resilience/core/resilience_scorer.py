"""
Resilience Score Aggregator — Weighted composite of five sub-scores.

resilience = Σ(score_i × weight_i) / Σ(weight_i)   over available factors only

Renormalising by the weights actually used keeps the result in [0, 100] no
matter how many sources are missing; a single available factor yields its own
value.
"""

from __future__ import annotations

import math

from resilience.errors import ComputationError
from resilience.models.analytics_models import (
    AlertAnalytics,
    FundAnalytics,
    ReceiptAnalytics,
    RiskAnalytics,
    SourceStatus,
    TransactionAnalytics,
)
from resilience.models.score_models import ResilienceScore, SubScores

FACTOR_WEIGHTS: dict[str, float] = {
    "fund": 0.30,
    "risk": 0.25,
    "alerts": 0.20,
    "receipts": 0.15,
    "transactions": 0.10,
}

NEUTRAL_ALERT_SCORE = 50.0
RECEIPTS_FOR_FULL_SCORE = 50
TRANSACTIONS_FOR_FULL_SCORE = 20


def _clamp_percent(value: float) -> float:
    if not math.isfinite(value):
        return 0.0
    return min(max(value, 0.0), 100.0)


def derive_sub_scores(
    fund: FundAnalytics | None = None,
    risk: RiskAnalytics | None = None,
    alerts: AlertAnalytics | None = None,
    receipts: ReceiptAnalytics | None = None,
    transactions: TransactionAnalytics | None = None,
) -> SubScores:
    """
    Map subsystem analytics onto the five aggregator inputs.

    None analytics (fetch failed) and sources with nothing recorded produce no
    sub-score. Alerts are the exception: zero alerts score a neutral 50.
    """
    sub = SubScores()

    if fund is not None and fund.status == SourceStatus.ACTIVE:
        sub.fund = min(fund.completion_rate, 100.0)

    if risk is not None and risk.status == SourceStatus.ACTIVE:
        current = risk.current_risk_score
        if current is None:
            current = risk.avg_risk_score or 0.0
        sub.risk = max(0.0, 100.0 - current)

    if alerts is not None:
        if alerts.status == SourceStatus.ACTIVE:
            sub.alerts = alerts.resolution_rate
        else:
            sub.alerts = NEUTRAL_ALERT_SCORE

    if receipts is not None and receipts.status == SourceStatus.ACTIVE:
        sub.receipts = min(receipts.total_receipts / RECEIPTS_FOR_FULL_SCORE * 100, 100.0)

    if transactions is not None and transactions.status == SourceStatus.ACTIVE:
        sub.transactions = min(
            transactions.total_transactions / TRANSACTIONS_FOR_FULL_SCORE * 100, 100.0
        )

    return sub


class ResilienceScoreAggregator:
    """Pure weighted aggregator; holds only its weight table."""

    def __init__(self, weights: dict[str, float] | None = None) -> None:
        self.weights = dict(weights or FACTOR_WEIGHTS)

    def aggregate(self, sub_scores: SubScores) -> ResilienceScore:
        numerator = 0.0
        denominator = 0.0
        components: dict[str, float | None] = {}
        used: dict[str, float] = {}
        missing: list[str] = []

        for factor, weight in self.weights.items():
            value = getattr(sub_scores, factor)
            if value is None:
                components[factor] = None
                missing.append(factor)
                continue
            value = _clamp_percent(value)
            components[factor] = value
            numerator += value * weight
            denominator += weight
            used[factor] = weight

        if denominator > 0:
            overall = numerator / denominator
        elif used:
            raise ComputationError(f"Zero total weight for available factors: {sorted(used)}")
        else:
            overall = 0.0

        effective = {factor: weight / denominator for factor, weight in used.items()}

        return ResilienceScore(
            overall=_clamp_percent(overall),
            effective_weights=effective,
            missing_factors=missing,
            **components,
        )
