"""
Analytics Models — Per-subsystem summaries derived from collaborator snapshots.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field


class SourceStatus(str, Enum):
    ACTIVE = "active"
    NOT_SETUP = "not_setup"
    NO_DATA = "no_data"
    NO_ALERTS = "no_alerts"


class MonthlyTotal(BaseModel):
    month: str = Field(..., description="YYYY-MM")
    count: int
    total: float
    average: float


class FundAnalytics(BaseModel):
    status: SourceStatus
    current_balance: float = 0.0
    target_balance: float = 0.0
    completion_rate: float = 0.0
    total_contributed: float = 0.0
    total_withdrawn: float = 0.0
    net_growth: float = 0.0
    contribution_count: int = 0
    withdrawal_count: int = 0
    transaction_count: int = 0
    monthly_contributions: list[MonthlyTotal] = Field(default_factory=list)
    monthly_withdrawals: list[MonthlyTotal] = Field(default_factory=list)
    last_contribution: datetime | None = None
    last_withdrawal: datetime | None = None


class RiskAnalytics(BaseModel):
    status: SourceStatus
    total_assessments: int = 0
    avg_risk_score: float | None = None
    highest_risk: float | None = None
    lowest_risk: float | None = None
    current_risk_score: float | None = None
    risk_trend: str = "stable"
    risk_type_distribution: dict[str, int] = Field(default_factory=dict)
    severity_distribution: dict[str, int] = Field(default_factory=dict)
    last_assessment: date | None = None


class AlertAnalytics(BaseModel):
    status: SourceStatus
    total_alerts: int = 0
    active_alerts: int = 0
    resolved_alerts: int = 0
    resolution_rate: float = 0.0
    type_distribution: dict[str, int] = Field(default_factory=dict)
    severity_distribution: dict[str, int] = Field(default_factory=dict)


class ReceiptAnalytics(BaseModel):
    status: SourceStatus
    total_receipts: int = 0
    total_spending: float = 0.0
    avg_transaction_value: float = 0.0
    category_distribution: dict[str, float] = Field(default_factory=dict)


class TransactionAnalytics(BaseModel):
    status: SourceStatus
    total_transactions: int = 0
    type_distribution: dict[str, int] = Field(default_factory=dict)
    payment_method_distribution: dict[str, int] = Field(default_factory=dict)
