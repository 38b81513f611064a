"""
Location & Season Lookups — Turn free-text location and category into risk
dimensions, and pick the seasonal multiplier active for a given month.

All functions are pure over the knowledge tables passed in.
"""

from __future__ import annotations

from datetime import date

from resilience.models.knowledge_models import RiskKnowledge
from resilience.models.risk_models import (
    LocationAnalysis,
    LocationRisk,
    RiskFactorScore,
    SeasonalAdjustment,
    SeverityLevel,
)

UNKNOWN_LOCATION = "location_unknown"
UNKNOWN_LOCATION_SCORE = 0.3


def _normalize(text: str | None) -> str:
    return (text or "").strip().lower()


def describe_dimension(knowledge: RiskKnowledge, dimension: str, state: str) -> str:
    template = knowledge.dimension_descriptions.get(dimension)
    if template:
        return template.format(state=state)
    return f"Risk factor identified in {state}"


def analyze_location(knowledge: RiskKnowledge, location: str | None) -> LocationAnalysis:
    """
    Match the location against the state table.

    States are tried in table order and the first substring match contributes
    all of its dimensions. An unmatched location has no dimensions (location
    score 0) and is reported as a single low 'location_unknown' risk.
    """
    location_lower = _normalize(location)

    for state, profile in knowledge.states.items():
        if location_lower and state in location_lower:
            dimensions = [
                RiskFactorScore(name=name, score=score, source="location")
                for name, score in profile.risks.items()
            ]
            flagged: list[LocationRisk] = []
            for dim in dimensions:
                if dim.score >= 0.7:
                    severity = SeverityLevel.HIGH
                elif dim.score >= 0.5:
                    severity = SeverityLevel.MEDIUM
                else:
                    continue
                flagged.append(
                    LocationRisk(
                        type=dim.name,
                        severity=severity,
                        score=dim.score,
                        description=describe_dimension(knowledge, dim.name, state),
                    )
                )
            return LocationAnalysis(
                state_name=state,
                state_description=profile.description,
                dimensions=dimensions,
                location_risks=flagged,
            )

    # Flagged for the report only; no dimension feeds the location score
    return LocationAnalysis(
        location_risks=[
            LocationRisk(
                type=UNKNOWN_LOCATION,
                severity=SeverityLevel.LOW,
                score=UNKNOWN_LOCATION_SCORE,
                description="Location not specifically identified for risk assessment",
            )
        ],
    )


def category_dimensions(knowledge: RiskKnowledge, category: str | None) -> list[RiskFactorScore]:
    """Category risk dimensions; an unknown category contributes nothing."""
    table = knowledge.categories.get(_normalize(category), {})
    return [RiskFactorScore(name=name, score=score, source="category") for name, score in table.items()]


def seasonal_adjustment(
    knowledge: RiskKnowledge,
    location: str | None,
    category: str | None,
    as_of: date,
) -> SeasonalAdjustment:
    """
    Active season for the month of as_of.

    Seasons are evaluated in table order; the first whose month matches and
    which affects either the location or the category wins.
    """
    month = as_of.month
    location_lower = _normalize(location)
    category_lower = _normalize(category)

    for season in knowledge.seasons:
        if month not in season.months:
            continue
        affects_location = bool(location_lower) and any(
            state in location_lower for state in season.affected_locations
        )
        affects_category = bool(category_lower) and any(
            cat in category_lower for cat in season.affected_categories
        )
        if affects_location or affects_category:
            return SeasonalAdjustment(
                current_season=season.name,
                risk_multiplier=season.risk_multiplier,
                seasonal_factors=list(season.factors),
            )

    return SeasonalAdjustment()
