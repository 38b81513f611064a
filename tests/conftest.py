"""
Test fixtures shared across all resilience engine tests.
"""

from datetime import datetime

import pytest

from resilience.core.knowledge import load_knowledge
from resilience.models.snapshot_models import (
    BusinessCategory,
    BusinessProfile,
    FinancialSnapshot,
    FundTransaction,
    TransactionType,
)
from resilience.sources.memory import BusinessRecord, InMemoryAnalyticsSource


@pytest.fixture
def knowledge():
    """Bundled risk knowledge tables."""
    return load_knowledge()


@pytest.fixture
def kelantan_business():
    return BusinessProfile(
        id="biz-kb-001",
        name="Kedai Makan Siti",
        location="Kota Bharu, Kelantan",
        category=BusinessCategory.RESTAURANT,
        size="micro",
    )


@pytest.fixture
def fund_snapshot():
    """Fund at 25% of target: two contributions, one withdrawal."""
    return FinancialSnapshot(
        current_balance=5000,
        target_balance=20000,
        recent_transactions=[
            FundTransaction(
                transaction_type=TransactionType.CONTRIBUTION,
                amount=3000,
                created_at=datetime(2026, 8, 3, 10, 0),
                payment_method="fpx",
            ),
            FundTransaction(
                transaction_type=TransactionType.CONTRIBUTION,
                amount=2500,
                created_at=datetime(2026, 9, 1, 9, 30),
                payment_method="fpx",
            ),
            FundTransaction(
                transaction_type=TransactionType.WITHDRAWAL,
                amount=500,
                created_at=datetime(2026, 9, 20, 16, 45),
                payment_method="duitnow",
            ),
        ],
    )


@pytest.fixture
def kelantan_record(kelantan_business, fund_snapshot):
    return BusinessRecord(profile=kelantan_business, fund=fund_snapshot)


@pytest.fixture
def memory_source(kelantan_record):
    """In-memory source holding only the Kelantan restaurant."""
    return InMemoryAnalyticsSource([kelantan_record])
