"""
Report Worker — Async orchestrator producing a full resilience report.

Pipeline:
1. Load the business profile (the only fatal lookup)
2. Fan out the five analytics snapshot fetches, each with its own timeout
3. Run a fresh risk analysis, or reuse the latest persisted assessment
4. Summarise analytics and derive the five sub-scores
5. Aggregate the resilience score
6. Benchmark against the business category
7. Evaluate recommendation rules
8. Assemble the ResilienceReport (+ optional audit entry)
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from datetime import date, datetime, timezone
from typing import Any, Awaitable, Callable

from resilience.audit.logger import AuditLogger
from resilience.config import settings
from resilience.core.analytics import (
    summarize_alerts,
    summarize_fund,
    summarize_receipts,
    summarize_risk_history,
    summarize_transactions,
)
from resilience.core.benchmark import BenchmarkEstimator
from resilience.core.knowledge import default_knowledge
from resilience.core.recommendation_engine import RecommendationEngine
from resilience.core.resilience_scorer import ResilienceScoreAggregator, derive_sub_scores
from resilience.core.risk_profile import RiskProfileCalculator
from resilience.errors import BusinessNotFoundError, MissingFundDataError
from resilience.models.knowledge_models import RiskKnowledge
from resilience.models.report_models import (
    AuditEntry,
    Priority,
    Recommendation,
    RecommendationContext,
    ReportSummary,
    ResilienceReport,
)
from resilience.models.risk_models import RiskAssessmentResult
from resilience.models.snapshot_models import BusinessProfile, FinancialSnapshot
from resilience.sources.base import AnalyticsSource

logger = logging.getLogger("resilience.worker")

# Report summary bands; independent of the 30/50/70 risk severity bands
CRITICAL_BELOW = 40
NEEDS_IMPROVEMENT_BELOW = 60
GOOD_BELOW = 80

# Sub-score factor -> snapshot fetch feeding it
FACTOR_SOURCES: dict[str, str] = {
    "fund": "fund",
    "risk": "risk_history",
    "alerts": "alerts",
    "receipts": "receipts",
    "transactions": "transactions",
}


class _Missing:
    """Marker for a snapshot whose fetch failed or timed out."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def _present(value: Any) -> bool:
    return value is not MISSING and value is not None


def classify_resilience(score: float) -> str:
    """<40 critical, <60 needs_improvement, otherwise good (80+ included)."""
    if score < CRITICAL_BELOW:
        return "critical"
    if score < NEEDS_IMPROVEMENT_BELOW:
        return "needs_improvement"
    return "good"


def key_insight(score: float) -> str:
    if score < CRITICAL_BELOW:
        return (
            "Your business requires immediate attention to build resilience. "
            "Focus on emergency fund setup and risk assessment."
        )
    if score < NEEDS_IMPROVEMENT_BELOW:
        return "Your business has basic resilience measures but needs improvement in key areas."
    if score < GOOD_BELOW:
        return (
            "Your business demonstrates good resilience practices. "
            "Continue monitoring and optimization."
        )
    return "Your business shows excellent resilience. You are well-prepared for potential disruptions."


def build_summary(score: float, recommendations: list[Recommendation]) -> ReportSummary:
    return ReportSummary(
        overall_status=classify_resilience(score),
        resilience_score=round(score, 2),
        total_recommendations=len(recommendations),
        high_priority_actions=sum(1 for r in recommendations if r.priority == Priority.HIGH),
        medium_priority_actions=sum(1 for r in recommendations if r.priority == Priority.MEDIUM),
        key_insight=key_insight(score),
    )


class ReportOrchestrator:
    """
    Stateless report pipeline. One instance can serve concurrent requests;
    per-request state lives only inside generate_report().
    """

    def __init__(
        self,
        source: AnalyticsSource,
        knowledge: RiskKnowledge | None = None,
        risk_calculator: RiskProfileCalculator | None = None,
        aggregator: ResilienceScoreAggregator | None = None,
        benchmark: BenchmarkEstimator | None = None,
        recommender: RecommendationEngine | None = None,
        audit_logger: AuditLogger | None = None,
        fetch_timeout: float | None = None,
        today: Callable[[], date] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        knowledge = knowledge or default_knowledge()
        self.source = source
        self.risk_calculator = risk_calculator or RiskProfileCalculator(knowledge)
        self.aggregator = aggregator or ResilienceScoreAggregator()
        self.benchmark = benchmark or BenchmarkEstimator(knowledge)
        self.recommender = recommender or RecommendationEngine()
        if audit_logger is None and settings.audit_enabled:
            audit_logger = AuditLogger(clock=clock)
        self.audit_logger = audit_logger
        self.fetch_timeout = fetch_timeout if fetch_timeout is not None else settings.fetch_timeout_seconds
        self.today = today or date.today
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    async def generate_report(
        self,
        business_id: str,
        period_months: int | None = None,
        run_analysis: bool = False,
    ) -> ResilienceReport:
        """
        Build a resilience report.

        Args:
            business_id: Business to report on.
            period_months: Lookback window; defaults to settings.default_period_months.
            run_analysis: Compute a fresh risk assessment instead of reusing the
                latest persisted one.

        Raises:
            BusinessNotFoundError: the business does not exist.
            ValueError: period_months < 1.
        """
        period = period_months if period_months is not None else settings.default_period_months
        if period < 1:
            raise ValueError(f"period_months must be >= 1, got {period}")

        report_id = str(uuid.uuid4())[:8]
        start_time = time.monotonic()
        notes: list[str] = []

        # ── Step 1: Business profile ──
        business = await self.source.get_business(business_id)
        if business is None:
            logger.warning(f"[{report_id}] Business {business_id} not found")
            raise BusinessNotFoundError(business_id)

        logger.info(
            f"[{report_id}] Generating report for {business_id} "
            f"({business.category.value}, '{business.location}'), period={period}m"
        )

        # ── Step 2: Fan out snapshot fetches ──
        failed: set[str] = set()
        fund_snapshot, history, alert_stats, receipt_stats, transaction_stats = await asyncio.gather(
            self._fetch(report_id, "fund", self.source.get_fund_snapshot(business_id, period), failed),
            self._fetch(report_id, "risk_history", self.source.get_risk_history(business_id, period), failed),
            self._fetch(report_id, "alerts", self.source.get_alert_stats(business_id, period), failed),
            self._fetch(report_id, "receipts", self.source.get_receipt_stats(business_id, period), failed),
            self._fetch(
                report_id, "transactions", self.source.get_transaction_stats(business_id, period), failed
            ),
        )

        # ── Step 3: Risk assessment ──
        assessments: list[RiskAssessmentResult] | None = None if history is MISSING else list(history or [])
        if run_analysis:
            fresh = self._analyze(report_id, business, None if fund_snapshot is MISSING else fund_snapshot, notes)
            if fresh is not None:
                assessments = [fresh, *(assessments or [])]
        latest = assessments[0] if assessments else None

        # ── Step 4: Analytics + sub-scores ──
        fund = None if fund_snapshot is MISSING else summarize_fund(fund_snapshot)
        risk = None if assessments is None else summarize_risk_history(assessments)
        alerts = summarize_alerts(alert_stats) if _present(alert_stats) else None
        receipts = summarize_receipts(receipt_stats) if _present(receipt_stats) else None
        transactions = (
            summarize_transactions(transaction_stats) if _present(transaction_stats) else None
        )

        sub_scores = derive_sub_scores(fund, risk, alerts, receipts, transactions)

        # ── Step 5: Aggregate ──
        resilience_score = self.aggregator.aggregate(sub_scores)
        for factor in resilience_score.missing_factors:
            if FACTOR_SOURCES[factor] in failed:
                notes.append(f"{factor} data unavailable; factor used 0 weight")
            else:
                notes.append(f"{factor} has no data for the period; factor used 0 weight")
        logger.info(
            f"[{report_id}] Resilience score: {resilience_score.overall:.1f}/100 "
            f"(missing: {resilience_score.missing_factors or 'none'})"
        )

        # ── Step 6: Benchmark ──
        benchmark = self.benchmark.estimate(business.category, resilience_score.overall)

        # ── Step 7: Recommendations ──
        recommendations = self.recommender.run(
            RecommendationContext(
                business=business,
                resilience_score=resilience_score,
                fund=fund,
                risk=risk,
                alerts=alerts,
            )
        )

        # ── Step 8: Assemble ──
        report = ResilienceReport(
            business=business,
            period_months=period,
            generated_at=self.clock(),
            resilience_score=resilience_score,
            risk_assessment=latest,
            fund=fund,
            risk=risk,
            alerts=alerts,
            receipts=receipts,
            transactions=transactions,
            benchmark=benchmark,
            recommendations=recommendations,
            summary=build_summary(resilience_score.overall, recommendations),
            notes=notes,
        )

        elapsed_ms = (time.monotonic() - start_time) * 1000
        if self.audit_logger is not None:
            self.audit_logger.log(
                AuditEntry(
                    report_id=report_id,
                    business_id=business_id,
                    period_months=period,
                    resilience_score=round(resilience_score.overall, 2),
                    risk_severity=latest.severity_level.value if latest else None,
                    fresh_analysis=run_analysis,
                    degraded_sources=sorted(failed),
                    recommendations=len(recommendations),
                    duration_ms=round(elapsed_ms, 2),
                )
            )

        logger.info(
            f"[{report_id}] Report complete in {elapsed_ms:.0f}ms: "
            f"status={report.summary.overall_status}, {benchmark.ranking}, "
            f"{len(recommendations)} recommendations"
        )
        return report

    async def _fetch(
        self,
        report_id: str,
        name: str,
        awaitable: Awaitable[Any],
        failed: set[str],
    ) -> Any:
        """Await one snapshot; on error or timeout mark it failed and return MISSING."""
        try:
            return await asyncio.wait_for(awaitable, timeout=self.fetch_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"[{report_id}] {name} fetch timed out after {self.fetch_timeout}s")
        except Exception as e:
            logger.warning(f"[{report_id}] {name} fetch failed: {type(e).__name__}: {e}")
        failed.add(name)
        return MISSING

    def _analyze(
        self,
        report_id: str,
        business: BusinessProfile,
        fund_snapshot: FinancialSnapshot | None,
        notes: list[str],
    ) -> RiskAssessmentResult | None:
        transactions = None
        if fund_snapshot is not None:
            transactions = fund_snapshot.recent_transactions[: settings.analysis_transaction_limit]
        try:
            assessment = self.risk_calculator.calculate(
                business.location,
                business.category,
                fund_snapshot,
                transactions=transactions,
                as_of=self.today(),
            )
        except MissingFundDataError as e:
            logger.warning(f"[{report_id}] Fresh risk analysis skipped: {e}")
            notes.append("Fresh risk analysis skipped: missing fund data")
            return None

        logger.info(
            f"[{report_id}] Fresh risk analysis: {assessment.risk_score}/100 "
            f"{assessment.severity_level.value} ({assessment.risk_type})"
        )
        return assessment
