"""
Analytics Summaries — Reduce collaborator snapshots to per-subsystem analytics.

Each summariser is a pure function. A None snapshot (source has nothing
configured) maps to a non-active status; fetch failures never reach here.
"""

from __future__ import annotations

from collections import Counter
from statistics import mean

from resilience.models.analytics_models import (
    AlertAnalytics,
    FundAnalytics,
    MonthlyTotal,
    ReceiptAnalytics,
    RiskAnalytics,
    SourceStatus,
    TransactionAnalytics,
)
from resilience.models.risk_models import RiskAssessmentResult
from resilience.models.snapshot_models import (
    AlertStats,
    FinancialSnapshot,
    FundTransaction,
    ReceiptStats,
    TransactionStats,
    TransactionType,
)

TREND_THRESHOLD = 10.0


def monthly_totals(transactions: list[FundTransaction]) -> list[MonthlyTotal]:
    """Group dated transactions by YYYY-MM, in first-seen order."""
    buckets: dict[str, list[float]] = {}
    for t in transactions:
        if t.created_at is None:
            continue
        buckets.setdefault(t.created_at.strftime("%Y-%m"), []).append(t.amount)
    return [
        MonthlyTotal(month=month, count=len(amounts), total=sum(amounts), average=mean(amounts))
        for month, amounts in buckets.items()
    ]


def calculate_trend(scores: list[float]) -> str:
    """
    Compare the three most recent risk scores against the three before them.

    Scores are ordered newest first. Lower risk reads as 'improving'.
    """
    if len(scores) < 2:
        return "stable"
    recent = scores[:3]
    older = scores[3:6]
    recent_avg = mean(recent)
    older_avg = mean(older) if older else recent_avg
    if recent_avg < older_avg - TREND_THRESHOLD:
        return "improving"
    if recent_avg > older_avg + TREND_THRESHOLD:
        return "deteriorating"
    return "stable"


def summarize_fund(snapshot: FinancialSnapshot | None) -> FundAnalytics:
    if snapshot is None:
        return FundAnalytics(status=SourceStatus.NOT_SETUP)

    contributions = [
        t for t in snapshot.recent_transactions
        if t.transaction_type in (TransactionType.CONTRIBUTION, TransactionType.AUTO_CONTRIBUTION)
    ]
    withdrawals = [
        t for t in snapshot.recent_transactions if t.transaction_type == TransactionType.WITHDRAWAL
    ]
    total_contributed = sum(t.amount for t in contributions)
    total_withdrawn = sum(t.amount for t in withdrawals)

    return FundAnalytics(
        status=SourceStatus.ACTIVE,
        current_balance=snapshot.current_balance,
        target_balance=snapshot.target_balance,
        completion_rate=snapshot.completion_percentage,
        total_contributed=total_contributed,
        total_withdrawn=total_withdrawn,
        net_growth=total_contributed - total_withdrawn,
        contribution_count=len(contributions),
        withdrawal_count=len(withdrawals),
        transaction_count=len(snapshot.recent_transactions),
        monthly_contributions=monthly_totals(contributions),
        monthly_withdrawals=monthly_totals(withdrawals),
        last_contribution=max((t.created_at for t in contributions if t.created_at), default=None),
        last_withdrawal=max((t.created_at for t in withdrawals if t.created_at), default=None),
    )


def summarize_risk_history(history: list[RiskAssessmentResult]) -> RiskAnalytics:
    """history is ordered newest first; history[0] is the current assessment."""
    if not history:
        return RiskAnalytics(status=SourceStatus.NO_DATA)

    scores = [a.risk_score for a in history]
    severity = Counter(a.severity_level.value.lower() for a in history)

    return RiskAnalytics(
        status=SourceStatus.ACTIVE,
        total_assessments=len(history),
        avg_risk_score=mean(scores),
        highest_risk=max(scores),
        lowest_risk=min(scores),
        current_risk_score=scores[0],
        risk_trend=calculate_trend(scores),
        risk_type_distribution=dict(Counter(a.risk_type for a in history)),
        severity_distribution={
            level: severity.get(level, 0) for level in ("low", "medium", "high", "critical")
        },
        last_assessment=history[0].assessed_on,
    )


def summarize_alerts(stats: AlertStats) -> AlertAnalytics:
    if stats.total_alerts == 0:
        return AlertAnalytics(status=SourceStatus.NO_ALERTS)
    return AlertAnalytics(
        status=SourceStatus.ACTIVE,
        total_alerts=stats.total_alerts,
        active_alerts=stats.active_alerts,
        resolved_alerts=stats.resolved_alerts,
        resolution_rate=stats.resolved_alerts / stats.total_alerts * 100,
        type_distribution=dict(stats.type_distribution),
        severity_distribution=dict(stats.severity_distribution),
    )


def summarize_receipts(stats: ReceiptStats) -> ReceiptAnalytics:
    if stats.total_receipts == 0:
        return ReceiptAnalytics(status=SourceStatus.NO_DATA)
    return ReceiptAnalytics(
        status=SourceStatus.ACTIVE,
        total_receipts=stats.total_receipts,
        total_spending=stats.total_spending,
        avg_transaction_value=stats.total_spending / stats.total_receipts,
        category_distribution=dict(stats.category_distribution),
    )


def summarize_transactions(stats: TransactionStats) -> TransactionAnalytics:
    if stats.total_count == 0:
        return TransactionAnalytics(status=SourceStatus.NO_DATA)
    return TransactionAnalytics(
        status=SourceStatus.ACTIVE,
        total_transactions=stats.total_count,
        type_distribution=dict(stats.type_distribution),
        payment_method_distribution=dict(stats.payment_method_distribution),
    )
