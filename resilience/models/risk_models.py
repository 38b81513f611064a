"""
Risk Assessment Data Models — Structured, explainable risk profile output.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class SeverityLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class RiskFactorScore(BaseModel):
    """One named risk dimension and its 0-1 score."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Dimension key, e.g. 'flood_risk'")
    score: float = Field(..., ge=0.0, le=1.0)
    source: Literal["location", "category", "financial"]


class LocationRisk(BaseModel):
    """A location dimension flagged as noteworthy (score >= 0.5, or unknown)."""

    type: str
    severity: SeverityLevel
    score: float
    description: str


class LocationAnalysis(BaseModel):
    state_name: str | None = None
    state_description: str | None = None
    dimensions: list[RiskFactorScore] = Field(default_factory=list)
    location_risks: list[LocationRisk] = Field(default_factory=list)

    def score_of(self, name: str) -> float:
        for dim in self.dimensions:
            if dim.name == name:
                return dim.score
        return 0.0


class SeasonalAdjustment(BaseModel):
    current_season: str | None = None
    risk_multiplier: float = 1.0
    seasonal_factors: list[str] = Field(default_factory=list)


class RiskAssessmentResult(BaseModel):
    """A single risk analysis run. Superseded by newer runs, never mutated."""

    model_config = ConfigDict(frozen=True)

    risk_type: str
    severity_level: SeverityLevel
    risk_score: float = Field(..., ge=0.0, le=100.0)
    probability: float = Field(..., ge=0.0, le=100.0)
    impact: float = Field(..., ge=0.0, le=100.0)
    description: str = ""
    risk_factors: list[str] = Field(default_factory=list)
    mitigation_recommendations: list[str] = Field(default_factory=list)
    assessed_on: date | None = None

    location_analysis: LocationAnalysis | None = None
    seasonal_analysis: SeasonalAdjustment | None = None
    category_risks: list[RiskFactorScore] = Field(default_factory=list)
