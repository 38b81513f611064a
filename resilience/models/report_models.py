"""
Report Models — Recommendations, summary and the assembled resilience report.

ResilienceReport.to_dict() is the transport contract for API, export and
dashboard consumers.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field

from resilience.models.analytics_models import (
    AlertAnalytics,
    FundAnalytics,
    ReceiptAnalytics,
    RiskAnalytics,
    TransactionAnalytics,
)
from resilience.models.risk_models import RiskAssessmentResult
from resilience.models.score_models import BenchmarkResult, ResilienceScore
from resilience.models.snapshot_models import BusinessProfile


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


PRIORITY_ORDER: dict[Priority, int] = {
    Priority.HIGH: 0,
    Priority.MEDIUM: 1,
    Priority.LOW: 2,
}


class Recommendation(BaseModel):
    priority: Priority
    category: str = Field(..., description="Tag, e.g. 'emergency_fund', 'location_risk'")
    title: str = Field(..., description="Short title; unique within a report")
    description: str
    action: str


class ReportSummary(BaseModel):
    overall_status: Literal["critical", "needs_improvement", "good"]
    resilience_score: float
    total_recommendations: int
    high_priority_actions: int
    medium_priority_actions: int
    key_insight: str


class AuditEntry(BaseModel):
    """Audit metadata for a generated report."""

    report_id: str
    business_id: str
    period_months: int
    resilience_score: float
    risk_severity: str | None = None
    fresh_analysis: bool = False
    degraded_sources: list[str] = Field(default_factory=list)
    recommendations: int = 0
    duration_ms: float = 0.0


class AuditRecord(AuditEntry):
    """An AuditEntry as persisted: stamped with the time it was written."""

    timestamp: datetime


class ResilienceReport(BaseModel):
    """Full resilience report. generated_at is the only wall-clock field."""

    business: BusinessProfile
    period_months: int
    generated_at: datetime
    resilience_score: ResilienceScore
    risk_assessment: RiskAssessmentResult | None = None
    fund: FundAnalytics | None = None
    risk: RiskAnalytics | None = None
    alerts: AlertAnalytics | None = None
    receipts: ReceiptAnalytics | None = None
    transactions: TransactionAnalytics | None = None
    benchmark: BenchmarkResult
    recommendations: list[Recommendation] = Field(default_factory=list)
    summary: ReportSummary
    notes: list[str] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Plain nested dict, JSON-ready."""
        return self.model_dump(mode="json")


class RecommendationContext(BaseModel):
    """Everything recommendation rules may inspect. None means the source is missing."""

    business: BusinessProfile
    resilience_score: ResilienceScore
    fund: FundAnalytics | None = None
    risk: RiskAnalytics | None = None
    alerts: AlertAnalytics | None = None
