"""
Snapshot Models — Inputs supplied by external collaborators.

Upstream stores are not owned by the engine, so numeric fields are normalised
here instead of rejected: negatives clamp to 0, non-finite values become 0 and
malformed timestamps become None.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class BusinessCategory(str, Enum):
    RESTAURANT = "restaurant"
    RETAIL = "retail"
    SERVICES = "services"
    MANUFACTURING = "manufacturing"
    AGRICULTURE = "agriculture"
    CONSTRUCTION = "construction"
    OTHER = "other"


class TransactionType(str, Enum):
    CONTRIBUTION = "contribution"
    WITHDRAWAL = "withdrawal"
    AUTO_CONTRIBUTION = "auto_contribution"


def non_negative(value: Any) -> float:
    """Coerce an upstream number to a finite, non-negative float."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def non_negative_int(value: Any) -> int:
    return int(non_negative(value))


def coerce_category(value: Any) -> BusinessCategory:
    """Map free-form category input onto the enum, degrading to OTHER."""
    if isinstance(value, BusinessCategory):
        return value
    try:
        return BusinessCategory(str(value or "").strip().lower())
    except ValueError:
        return BusinessCategory.OTHER


class BusinessProfile(BaseModel):
    """Business registry record. Read-only to the engine."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    location: str = Field(default="", description="Free-text location, e.g. 'Kota Bharu, Kelantan'")
    category: BusinessCategory = BusinessCategory.OTHER
    size: str | None = Field(default=None, description="Size indicator, e.g. 'micro', 'small'")

    @field_validator("location", mode="before")
    @classmethod
    def _location(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, value: Any) -> BusinessCategory:
        return coerce_category(value)


class FundTransaction(BaseModel):
    """A single emergency-fund movement."""

    transaction_type: TransactionType
    amount: float = 0.0
    created_at: datetime | None = None
    payment_method: str | None = None

    @field_validator("amount", mode="before")
    @classmethod
    def _amount(cls, value: Any) -> float:
        return non_negative(value)

    @field_validator("created_at", mode="before")
    @classmethod
    def _created_at(cls, value: Any) -> datetime | None:
        """Parse to an aware UTC datetime; naive values are read as UTC."""
        if value is None:
            return None
        if not isinstance(value, datetime):
            try:
                value = datetime.fromisoformat(str(value))
            except ValueError:
                return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class FinancialSnapshot(BaseModel):
    """Emergency-fund balance plus the transactions in the lookback window."""

    current_balance: float = 0.0
    target_balance: float = 0.0
    recent_transactions: list[FundTransaction] = Field(default_factory=list)

    @field_validator("current_balance", "target_balance", mode="before")
    @classmethod
    def _balance(cls, value: Any) -> float:
        return non_negative(value)

    @property
    def fund_ratio(self) -> float:
        """current / target; a target of 0 reads as a critically empty fund."""
        if self.target_balance <= 0:
            return 0.0
        return max(0.0, self.current_balance / self.target_balance)

    @property
    def completion_percentage(self) -> float:
        return self.fund_ratio * 100


class AlertStats(BaseModel):
    total_alerts: int = 0
    resolved_alerts: int = 0
    active_alerts: int = 0
    type_distribution: dict[str, int] = Field(default_factory=dict)
    severity_distribution: dict[str, int] = Field(default_factory=dict)

    @field_validator("total_alerts", "resolved_alerts", "active_alerts", mode="before")
    @classmethod
    def _counts(cls, value: Any) -> int:
        return non_negative_int(value)

    @field_validator("resolved_alerts")
    @classmethod
    def _resolved_within_total(cls, value: int, info: ValidationInfo) -> int:
        total = info.data.get("total_alerts", 0)
        return min(value, total)


class ReceiptStats(BaseModel):
    total_receipts: int = 0
    total_spending: float = 0.0
    category_distribution: dict[str, float] = Field(default_factory=dict)

    @field_validator("total_receipts", mode="before")
    @classmethod
    def _count(cls, value: Any) -> int:
        return non_negative_int(value)

    @field_validator("total_spending", mode="before")
    @classmethod
    def _spending(cls, value: Any) -> float:
        return non_negative(value)


class TransactionStats(BaseModel):
    total_count: int = 0
    type_distribution: dict[str, int] = Field(default_factory=dict)
    payment_method_distribution: dict[str, int] = Field(default_factory=dict)

    @field_validator("total_count", mode="before")
    @classmethod
    def _count(cls, value: Any) -> int:
        return non_negative_int(value)
