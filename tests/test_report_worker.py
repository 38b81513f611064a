"""
Tests for Report Worker — end-to-end report assembly and degraded fetches.
"""

import asyncio
from datetime import date, datetime, timezone

import pytest

from resilience.audit.logger import AuditLogger
from resilience.errors import BusinessNotFoundError
from resilience.models.analytics_models import SourceStatus
from resilience.models.report_models import AuditEntry
from resilience.models.snapshot_models import (
    AlertStats,
    BusinessProfile,
    FinancialSnapshot,
    FundTransaction,
    ReceiptStats,
)
from resilience.sources.memory import BusinessRecord, InMemoryAnalyticsSource
from resilience.workers.report_worker import (
    ReportOrchestrator,
    build_summary,
    classify_resilience,
    key_insight,
)

QUIET_DAY = date(2026, 10, 15)
FIXED_NOW = datetime(2026, 10, 15, 8, 0, tzinfo=timezone.utc)


class FailingAlertSource(InMemoryAnalyticsSource):
    async def get_alert_stats(self, business_id, period_months):
        raise RuntimeError("alert store unavailable")


class SlowReceiptSource(InMemoryAnalyticsSource):
    async def get_receipt_stats(self, business_id, period_months):
        await asyncio.sleep(5)
        return ReceiptStats(total_receipts=100)


class BlockingSource(InMemoryAnalyticsSource):
    """Every snapshot fetch hangs until cancelled; cancellations are recorded."""

    FETCHES = 5

    def __init__(self, records):
        super().__init__(records)
        self.started = 0
        self.cancelled: list[str] = []
        self.all_started = asyncio.Event()

    async def _hang(self, name):
        self.started += 1
        if self.started == self.FETCHES:
            self.all_started.set()
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.cancelled.append(name)
            raise

    async def get_fund_snapshot(self, business_id, period_months):
        await self._hang("fund")

    async def get_risk_history(self, business_id, period_months):
        await self._hang("risk_history")

    async def get_alert_stats(self, business_id, period_months):
        await self._hang("alerts")

    async def get_receipt_stats(self, business_id, period_months):
        await self._hang("receipts")

    async def get_transaction_stats(self, business_id, period_months):
        await self._hang("transactions")


def _orchestrator(source, knowledge, **kwargs):
    return ReportOrchestrator(
        source,
        knowledge=knowledge,
        today=lambda: QUIET_DAY,
        clock=lambda: FIXED_NOW,
        **kwargs,
    )


def test_fresh_analysis_report(memory_source, knowledge):
    orchestrator = _orchestrator(memory_source, knowledge)
    report = asyncio.run(orchestrator.generate_report("biz-kb-001", period_months=12, run_analysis=True))

    assert report.risk_assessment.risk_score == pytest.approx(57.0)
    assert report.risk_assessment.severity_level.value == "HIGH"
    assert report.risk.current_risk_score == pytest.approx(57.0)

    score = report.resilience_score
    assert score.fund == pytest.approx(25.0)
    assert score.risk == pytest.approx(43.0)
    assert score.alerts == 50.0
    assert score.missing_factors == ["receipts", "transactions"]
    assert score.overall == pytest.approx((25 * 0.30 + 43 * 0.25 + 50 * 0.20) / 0.75)

    assert [r.title for r in report.recommendations] == [
        "Increase Emergency Fund Contributions",
        "Flood Preparedness",
    ]
    assert report.summary.overall_status == "critical"
    assert report.summary.high_priority_actions == 1
    assert report.summary.medium_priority_actions == 1
    assert report.benchmark.business_category == "restaurant"
    assert report.benchmark.ranking == "Bottom 25%"
    assert "receipts has no data for the period; factor used 0 weight" in report.notes


def test_report_without_fresh_analysis_uses_history(memory_source, knowledge):
    orchestrator = _orchestrator(memory_source, knowledge)
    report = asyncio.run(orchestrator.generate_report("biz-kb-001"))

    assert report.period_months == 12
    assert report.risk_assessment is None
    assert report.risk.status == SourceStatus.NO_DATA
    assert report.resilience_score.risk is None
    assert report.resilience_score.overall == pytest.approx((25 * 0.30 + 50 * 0.20) / 0.50)
    assert [r.title for r in report.recommendations] == [
        "Increase Emergency Fund Contributions",
        "Conduct Risk Assessment",
        "Flood Preparedness",
    ]


def test_latest_persisted_assessment_reused(kelantan_record, fund_snapshot, knowledge):
    from resilience.core.risk_profile import RiskProfileCalculator

    previous = RiskProfileCalculator(knowledge).calculate(
        "Kota Bharu, Kelantan", "restaurant", fund_snapshot, as_of=date(2026, 12, 1)
    )
    kelantan_record.risk_history = [previous]
    orchestrator = _orchestrator(InMemoryAnalyticsSource([kelantan_record]), knowledge)
    report = asyncio.run(orchestrator.generate_report("biz-kb-001"))

    assert report.risk_assessment == previous
    assert report.risk.current_risk_score == pytest.approx(85.5)
    assert "Address High-Risk Factors" in [r.title for r in report.recommendations]


def test_unknown_business_raises(memory_source, knowledge):
    orchestrator = _orchestrator(memory_source, knowledge)
    with pytest.raises(BusinessNotFoundError) as exc_info:
        asyncio.run(orchestrator.generate_report("nope"))
    assert exc_info.value.business_id == "nope"


def test_invalid_period_rejected(memory_source, knowledge):
    orchestrator = _orchestrator(memory_source, knowledge)
    with pytest.raises(ValueError):
        asyncio.run(orchestrator.generate_report("biz-kb-001", period_months=0))


def test_failed_fetch_degrades_factor(kelantan_record, knowledge):
    orchestrator = _orchestrator(FailingAlertSource([kelantan_record]), knowledge)
    report = asyncio.run(orchestrator.generate_report("biz-kb-001", run_analysis=True))

    assert report.alerts is None
    assert report.resilience_score.alerts is None
    assert "alerts data unavailable; factor used 0 weight" in report.notes
    assert report.resilience_score.overall == pytest.approx((25 * 0.30 + 43 * 0.25) / 0.55)


def test_slow_fetch_times_out(kelantan_record, knowledge):
    orchestrator = _orchestrator(SlowReceiptSource([kelantan_record]), knowledge, fetch_timeout=0.05)
    report = asyncio.run(orchestrator.generate_report("biz-kb-001"))

    assert report.receipts is None
    assert "receipts data unavailable; factor used 0 weight" in report.notes


def test_cancelling_report_cancels_in_flight_fetches(kelantan_record, knowledge):
    source = BlockingSource([kelantan_record])
    orchestrator = _orchestrator(source, knowledge, fetch_timeout=30)

    async def cancel_mid_fetch():
        task = asyncio.create_task(orchestrator.generate_report("biz-kb-001"))
        await asyncio.wait_for(source.all_started.wait(), timeout=5)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(cancel_mid_fetch())
    assert sorted(source.cancelled) == ["alerts", "fund", "receipts", "risk_history", "transactions"]


def test_mixed_timezone_transactions_still_produce_report(kelantan_business, knowledge):
    movements = [
        ("contribution", "2026-09-01T10:00:00+08:00"),
        ("contribution", "2026-09-02T10:00:00"),
        ("withdrawal", "2026-09-03T09:00:00+08:00"),
        ("withdrawal", "2026-09-04T09:00:00"),
    ]
    fund = FinancialSnapshot(
        current_balance=5000,
        target_balance=20000,
        recent_transactions=[
            FundTransaction(transaction_type=kind, amount=100, created_at=created_at)
            for kind, created_at in movements
        ],
    )
    source = InMemoryAnalyticsSource([BusinessRecord(profile=kelantan_business, fund=fund)])
    report = asyncio.run(_orchestrator(source, knowledge).generate_report("biz-kb-001", run_analysis=True))

    assert report.fund.last_contribution == datetime(2026, 9, 2, 10, 0, tzinfo=timezone.utc)
    assert report.fund.last_withdrawal == datetime(2026, 9, 4, 9, 0, tzinfo=timezone.utc)
    assert report.resilience_score.fund == pytest.approx(25.0)


def test_fund_not_setup_skips_fresh_analysis(kelantan_business, knowledge):
    source = InMemoryAnalyticsSource([BusinessRecord(profile=kelantan_business)])
    report = asyncio.run(_orchestrator(source, knowledge).generate_report("biz-kb-001", run_analysis=True))

    assert report.fund.status == SourceStatus.NOT_SETUP
    assert report.risk_assessment is None
    assert "Fresh risk analysis skipped: missing fund data" in report.notes
    titles = [r.title for r in report.recommendations]
    assert titles[0] == "Setup Emergency Fund"


def test_active_alerts_feed_score(kelantan_business, fund_snapshot, knowledge):
    record = BusinessRecord(
        profile=kelantan_business,
        fund=fund_snapshot,
        alerts=AlertStats(total_alerts=10, resolved_alerts=5, active_alerts=5),
    )
    report = asyncio.run(
        _orchestrator(InMemoryAnalyticsSource([record]), knowledge).generate_report("biz-kb-001")
    )
    assert report.resilience_score.alerts == pytest.approx(50.0)
    assert "Improve Alert Response" in [r.title for r in report.recommendations]


def test_report_is_idempotent(memory_source, knowledge):
    orchestrator = ReportOrchestrator(memory_source, knowledge=knowledge, today=lambda: QUIET_DAY)

    first = asyncio.run(orchestrator.generate_report("biz-kb-001", run_analysis=True)).to_dict()
    second = asyncio.run(orchestrator.generate_report("biz-kb-001", run_analysis=True)).to_dict()
    first.pop("generated_at")
    second.pop("generated_at")
    assert first == second


def test_report_serialises_to_plain_dict(memory_source, knowledge):
    report = asyncio.run(_orchestrator(memory_source, knowledge).generate_report("biz-kb-001"))
    data = report.to_dict()

    assert data["business"]["category"] == "restaurant"
    assert data["generated_at"].startswith("2026-10-15T08:00:00")
    assert isinstance(data["resilience_score"]["overall"], float)


def test_concurrent_reports(kelantan_record, knowledge):
    other = BusinessProfile(id="biz-pj-002", location="Petaling Jaya, Selangor", category="retail")
    source = InMemoryAnalyticsSource([kelantan_record, BusinessRecord(profile=other)])
    orchestrator = _orchestrator(source, knowledge)

    async def both():
        return await asyncio.gather(
            orchestrator.generate_report("biz-kb-001"),
            orchestrator.generate_report("biz-pj-002"),
        )

    kb, pj = asyncio.run(both())
    assert kb.business.id == "biz-kb-001"
    assert pj.business.id == "biz-pj-002"
    assert "Haze Preparedness" in [r.title for r in pj.recommendations]
    assert "Flood Preparedness" not in [r.title for r in pj.recommendations]


def test_audit_entry_written(memory_source, knowledge, tmp_path):
    audit = AuditLogger(str(tmp_path / "audit.jsonl"), clock=lambda: FIXED_NOW)
    orchestrator = _orchestrator(memory_source, knowledge, audit_logger=audit)
    asyncio.run(orchestrator.generate_report("biz-kb-001", run_analysis=True))

    records = audit.read_recent(business_id="biz-kb-001")
    assert len(records) == 1
    assert records[0].risk_severity == "HIGH"
    assert records[0].fresh_analysis is True
    assert records[0].degraded_sources == []
    assert records[0].timestamp == FIXED_NOW


def test_audit_filters_and_skips_malformed_lines(tmp_path):
    path = tmp_path / "audit.jsonl"
    audit = AuditLogger(str(path), clock=lambda: FIXED_NOW)
    for i, business_id in enumerate(["a", "b", "a"]):
        audit.log(
            AuditEntry(report_id=f"r{i}", business_id=business_id, period_months=12, resilience_score=50.0)
        )
    with open(path, "a", encoding="utf-8") as f:
        f.write('not json\n{"business_id": "a"}\n')

    assert [r.report_id for r in audit.read_recent()] == ["r0", "r1", "r2"]
    assert [r.report_id for r in audit.read_recent(business_id="a")] == ["r0", "r2"]
    assert [r.report_id for r in audit.read_recent(count=1)] == ["r2"]
    assert audit.read_recent(count=0) == []


def test_audit_missing_file_reads_empty(tmp_path):
    assert AuditLogger(str(tmp_path / "absent.jsonl")).read_recent() == []


@pytest.mark.parametrize(
    "score,status",
    [(0, "critical"), (39.9, "critical"), (40, "needs_improvement"), (59.9, "needs_improvement"),
     (60, "good"), (95, "good")],
)
def test_classify_resilience(score, status):
    assert classify_resilience(score) == status


def test_key_insight_excellent_band():
    assert "excellent" in key_insight(85)
    assert "good resilience" in key_insight(70)


def test_summary_counts_priorities():
    summary = build_summary(55.556, [])
    assert summary.resilience_score == 55.56
    assert summary.total_recommendations == 0
    assert summary.overall_status == "needs_improvement"
