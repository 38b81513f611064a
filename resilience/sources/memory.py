"""
In-Memory Analytics Source — Dict-backed AnalyticsSource.

Used for embedding the engine where snapshots are already in hand, and in
tests. Windowing is the caller's job: whatever is stored is returned for any
period.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from resilience.models.risk_models import RiskAssessmentResult
from resilience.models.snapshot_models import (
    AlertStats,
    BusinessProfile,
    FinancialSnapshot,
    ReceiptStats,
    TransactionStats,
)
from resilience.sources.base import AnalyticsSource


@dataclass
class BusinessRecord:
    """Everything the source knows about one business."""

    profile: BusinessProfile
    fund: FinancialSnapshot | None = None
    risk_history: list[RiskAssessmentResult] = field(default_factory=list)
    alerts: AlertStats = field(default_factory=AlertStats)
    receipts: ReceiptStats = field(default_factory=ReceiptStats)
    transactions: TransactionStats = field(default_factory=TransactionStats)


class InMemoryAnalyticsSource(AnalyticsSource):
    def __init__(self, records: list[BusinessRecord] | None = None) -> None:
        self._records: dict[str, BusinessRecord] = {}
        for record in records or []:
            self.add(record)

    def add(self, record: BusinessRecord) -> None:
        self._records[record.profile.id] = record

    def _record(self, business_id: str) -> BusinessRecord:
        try:
            return self._records[business_id]
        except KeyError:
            raise LookupError(f"No data for business {business_id}") from None

    async def get_business(self, business_id: str) -> BusinessProfile | None:
        record = self._records.get(business_id)
        return record.profile if record else None

    async def get_fund_snapshot(self, business_id: str, period_months: int) -> FinancialSnapshot | None:
        return self._record(business_id).fund

    async def get_risk_history(self, business_id: str, period_months: int) -> list[RiskAssessmentResult]:
        return list(self._record(business_id).risk_history)

    async def get_alert_stats(self, business_id: str, period_months: int) -> AlertStats:
        return self._record(business_id).alerts

    async def get_receipt_stats(self, business_id: str, period_months: int) -> ReceiptStats:
        return self._record(business_id).receipts

    async def get_transaction_stats(self, business_id: str, period_months: int) -> TransactionStats:
        return self._record(business_id).transactions
