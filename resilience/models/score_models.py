"""
Resilience Score Data Models — Sub-scores, composite score and benchmark.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class SubScores(BaseModel):
    """The five aggregator inputs. None means the source had no data."""

    fund: float | None = None
    risk: float | None = None
    alerts: float | None = None
    receipts: float | None = None
    transactions: float | None = None


class ResilienceScore(BaseModel):
    """Composite 0-100 resilience score with per-factor explainability."""

    overall: float = Field(..., ge=0.0, le=100.0)
    fund: float | None = None
    risk: float | None = None
    alerts: float | None = None
    receipts: float | None = None
    transactions: float | None = None
    effective_weights: dict[str, float] = Field(
        default_factory=dict,
        description="Renormalised weight each available factor actually carried",
    )
    missing_factors: list[str] = Field(default_factory=list)
    formula: str = Field(
        default="resilience = Σ(score × weight) / Σ(weight of available factors)",
        description="Human-readable formula used",
    )


class BenchmarkResult(BaseModel):
    business_category: str
    category_average: float
    score: float
    percentile: float = Field(..., ge=0.0, le=100.0)
    ranking: str
    typical_risks: list[str] = Field(default_factory=list)
    industry_insights: list[str] = Field(default_factory=list)
