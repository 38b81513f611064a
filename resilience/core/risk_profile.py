"""
Risk Profile Calculator — Weighted, location- and season-aware risk scoring.

Risk Score = (location×0.40 + category×0.25 + financial×0.25 + operational×0.10)
             × seasonal multiplier, clamped to [0, 100]

Every component is traced into risk_factors for explainability.
"""

from __future__ import annotations

import logging
from datetime import date

from resilience.config import settings
from resilience.core.knowledge import default_knowledge
from resilience.core.location_risk import (
    analyze_location,
    category_dimensions,
    seasonal_adjustment,
)
from resilience.errors import MissingFundDataError
from resilience.models.knowledge_models import RiskKnowledge
from resilience.models.risk_models import (
    LocationAnalysis,
    RiskAssessmentResult,
    RiskFactorScore,
    SeasonalAdjustment,
    SeverityLevel,
)
from resilience.models.snapshot_models import (
    BusinessCategory,
    FinancialSnapshot,
    FundTransaction,
    TransactionType,
    coerce_category,
)

logger = logging.getLogger("resilience.risk")

LOCATION_WEIGHT = 0.40
CATEGORY_WEIGHT = 0.25
FINANCIAL_WEIGHT = 0.25
OPERATIONAL_WEIGHT = 0.10

# Fund ratio bands
CRITICAL_FUND_RATIO = 0.3
RECOMMENDED_FUND_RATIO = 0.6

HIGH_DIMENSION_SCORE = 0.7

SEVERITY_DESCRIPTIONS: dict[SeverityLevel, str] = {
    SeverityLevel.CRITICAL: "Business faces immediate and severe risks that require urgent attention.",
    SeverityLevel.HIGH: (
        "Business faces significant risks that could impact operations. "
        "Immediate action recommended."
    ),
    SeverityLevel.MEDIUM: "Business faces moderate risks that should be monitored and addressed.",
    SeverityLevel.LOW: "Business risks are minimal but regular monitoring is recommended.",
}


def severity_for_score(score: float) -> SeverityLevel:
    """<30 LOW, 30-49 MEDIUM, 50-69 HIGH, >=70 CRITICAL."""
    if score >= 70:
        return SeverityLevel.CRITICAL
    if score >= 50:
        return SeverityLevel.HIGH
    if score >= 30:
        return SeverityLevel.MEDIUM
    return SeverityLevel.LOW


def _mean_percent(dimensions: list[RiskFactorScore]) -> float:
    if not dimensions:
        return 0.0
    return sum(d.score for d in dimensions) / len(dimensions) * 100


def _factor_label(dim: RiskFactorScore) -> str:
    return f"{dim.name.replace('_', ' ')} ({round(dim.score * 100)}%)"


def _financial_dimension_score(fund_ratio: float) -> float:
    if fund_ratio < CRITICAL_FUND_RATIO:
        return 0.9
    if fund_ratio < RECOMMENDED_FUND_RATIO:
        return 0.6
    return 0.3


class RiskProfileCalculator:
    """
    Computes a RiskAssessmentResult from location, category and fund data.

    Stateless apart from the read-only knowledge tables; safe to share across
    concurrent report requests.
    """

    def __init__(
        self,
        knowledge: RiskKnowledge | None = None,
        max_mitigations: int | None = None,
    ) -> None:
        self.knowledge = knowledge or default_knowledge()
        self.max_mitigations = (
            max_mitigations if max_mitigations is not None else settings.max_mitigations
        )

    def calculate(
        self,
        location: str | None,
        category: BusinessCategory | str | None,
        fund: FinancialSnapshot | None,
        transactions: list[FundTransaction] | None = None,
        as_of: date | None = None,
    ) -> RiskAssessmentResult:
        """
        Run a full risk analysis.

        Args:
            location: Free-text location, matched case-insensitively.
            category: Business category; unknown values contribute no category risk.
            fund: Required emergency-fund snapshot.
            transactions: Recent transactions; defaults to fund.recent_transactions.
            as_of: Day used to pick the active season; defaults to today.

        Raises:
            MissingFundDataError: fund is None.
        """
        if fund is None:
            raise MissingFundDataError()

        as_of = as_of or date.today()
        category_value = coerce_category(category).value
        history = fund.recent_transactions if transactions is None else transactions

        location_analysis = analyze_location(self.knowledge, location)
        category_dims = category_dimensions(self.knowledge, category_value)
        season = seasonal_adjustment(self.knowledge, location, category_value, as_of)

        risk_factors: list[str] = [_factor_label(d) for d in location_analysis.dimensions]
        risk_factors.extend(_factor_label(d) for d in category_dims)

        # ── Financial ──
        fund_ratio = fund.fund_ratio
        withdrawals = sum(1 for t in history if t.transaction_type == TransactionType.WITHDRAWAL)
        contributions = sum(1 for t in history if t.transaction_type == TransactionType.CONTRIBUTION)

        financial_score = 0.0
        if fund_ratio < CRITICAL_FUND_RATIO:
            financial_score += 50
            risk_factors.append("Emergency fund critically low")
        elif fund_ratio < RECOMMENDED_FUND_RATIO:
            financial_score += 25
            risk_factors.append("Emergency fund below recommended level")
        if withdrawals > 3:
            financial_score += 30
            risk_factors.append("High frequency of emergency withdrawals")
        if contributions < 2:
            financial_score += 15
            risk_factors.append("Low contribution frequency")

        # ── Operational ──
        operational_score = 0.0
        if not history:
            operational_score = 40.0
            risk_factors.append("No transaction history available")

        raw_score = (
            _mean_percent(location_analysis.dimensions) * LOCATION_WEIGHT
            + _mean_percent(category_dims) * CATEGORY_WEIGHT
            + financial_score * FINANCIAL_WEIGHT
            + operational_score * OPERATIONAL_WEIGHT
        )
        adjusted = raw_score * season.risk_multiplier
        risk_score = round(min(max(adjusted, 0.0), 100.0), 2)
        severity = severity_for_score(risk_score)

        logger.debug(
            f"Risk for '{location}' ({category_value}): raw={raw_score:.2f} "
            f"season={season.current_season} x{season.risk_multiplier} -> {risk_score} {severity.value}"
        )

        return RiskAssessmentResult(
            risk_type=self.primary_risk_type(location_analysis, category_dims, fund_ratio),
            severity_level=severity,
            risk_score=risk_score,
            probability=round(min(risk_score + 10, 100.0), 2),
            impact=round(min(risk_score + 5, 100.0), 2),
            description=self._describe(severity, risk_factors, location_analysis, season),
            risk_factors=risk_factors,
            mitigation_recommendations=self.mitigations(
                location_analysis, category_value, fund_ratio, season, severity
            ),
            assessed_on=as_of,
            location_analysis=location_analysis,
            seasonal_analysis=season,
            category_risks=category_dims,
        )

    @staticmethod
    def primary_risk_type(
        location_analysis: LocationAnalysis,
        category_dims: list[RiskFactorScore],
        fund_ratio: float,
    ) -> str:
        """
        Dimension with the largest weighted contribution.

        Same-named dimensions from location and category accumulate. Ties keep
        the first dimension seen (location, then category, then financial).
        """
        weighted: dict[str, float] = {}
        for dim in location_analysis.dimensions:
            weighted[dim.name] = weighted.get(dim.name, 0.0) + dim.score * LOCATION_WEIGHT
        for dim in category_dims:
            weighted[dim.name] = weighted.get(dim.name, 0.0) + dim.score * CATEGORY_WEIGHT
        weighted["financial"] = (
            weighted.get("financial", 0.0) + _financial_dimension_score(fund_ratio) * FINANCIAL_WEIGHT
        )

        primary, best = "general", 0.0
        for name, score in weighted.items():
            if score > best:
                primary, best = name, score
        return primary

    def mitigations(
        self,
        location_analysis: LocationAnalysis,
        category: str,
        fund_ratio: float,
        season: SeasonalAdjustment,
        severity: SeverityLevel,
    ) -> list[str]:
        """Rule-matched mitigation phrases, unique in first-seen order, capped."""
        tables = self.knowledge.mitigations
        phrases: list[str] = []

        if fund_ratio < RECOMMENDED_FUND_RATIO:
            phrases.extend(tables.fund_below_recommended)
            if fund_ratio < CRITICAL_FUND_RATIO:
                phrases.extend(tables.fund_critical)

        for dimension, dimension_phrases in tables.location.items():
            if location_analysis.score_of(dimension) >= HIGH_DIMENSION_SCORE:
                phrases.extend(dimension_phrases)

        phrases.extend(tables.category.get(category, ()))

        if season.current_season:
            phrases.extend(tables.season.get(season.current_season, ()))

        if severity == SeverityLevel.CRITICAL:
            phrases.extend(tables.critical)

        phrases.extend(tables.general)

        return list(dict.fromkeys(phrases))[: self.max_mitigations]

    @staticmethod
    def _describe(
        severity: SeverityLevel,
        risk_factors: list[str],
        location_analysis: LocationAnalysis,
        season: SeasonalAdjustment,
    ) -> str:
        description = SEVERITY_DESCRIPTIONS[severity]
        if location_analysis.state_name:
            description += (
                f" Located in {location_analysis.state_name}: "
                f"{location_analysis.state_description}."
            )
        if season.current_season:
            description += (
                f" Currently in {season.current_season.replace('_', ' ')} "
                f"which affects risk levels."
            )
        if risk_factors:
            description += " Key factors: " + ", ".join(risk_factors[:3])
        return description
