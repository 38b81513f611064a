"""
Analytics Source — Contract for the collaborators that supply snapshots.

Storage, the API layer and their schemas live outside the engine. Whatever
backs a source only has to materialise these models. Every method is async so
the orchestrator can fan the fetches out.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from resilience.models.risk_models import RiskAssessmentResult
from resilience.models.snapshot_models import (
    AlertStats,
    BusinessProfile,
    FinancialSnapshot,
    ReceiptStats,
    TransactionStats,
)


class AnalyticsSource(ABC):
    """Read-only access to a business's signals over a lookback window."""

    @abstractmethod
    async def get_business(self, business_id: str) -> BusinessProfile | None:
        """The business profile, or None if it does not exist."""

    @abstractmethod
    async def get_fund_snapshot(
        self, business_id: str, period_months: int
    ) -> FinancialSnapshot | None:
        """Fund balance and window transactions, or None if no fund is set up."""

    @abstractmethod
    async def get_risk_history(
        self, business_id: str, period_months: int
    ) -> list[RiskAssessmentResult]:
        """Persisted assessments in the window, newest first."""

    @abstractmethod
    async def get_alert_stats(self, business_id: str, period_months: int) -> AlertStats:
        ...

    @abstractmethod
    async def get_receipt_stats(self, business_id: str, period_months: int) -> ReceiptStats:
        ...

    @abstractmethod
    async def get_transaction_stats(
        self, business_id: str, period_months: int
    ) -> TransactionStats:
        ...
