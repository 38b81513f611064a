"""
Benchmark Estimator — Percentile standing against the business category.

Category scores are assumed normally distributed around the category average
with a fixed standard deviation.
"""

from __future__ import annotations

import math

from resilience.config import settings
from resilience.core.knowledge import default_knowledge
from resilience.models.knowledge_models import RiskKnowledge
from resilience.models.score_models import BenchmarkResult
from resilience.models.snapshot_models import BusinessCategory, coerce_category

# Abramowitz & Stegun 26.2.17, |error| < 7.5e-8
_P = 0.2316419
_B = (0.319381530, -0.356563782, 1.781477937, -1.821255978, 1.330274429)
_INV_SQRT_2PI = 0.3989422804014327

RANKING_BANDS: tuple[tuple[float, str], ...] = (
    (90.0, "Top 10%"),
    (75.0, "Top 25%"),
    (50.0, "Above Average"),
    (25.0, "Below Average"),
)


def normal_cdf(x: float) -> float:
    """Standard normal CDF Φ(x) via the A&S rational approximation."""
    t = 1.0 / (1.0 + _P * abs(x))
    poly = t * (_B[0] + t * (_B[1] + t * (_B[2] + t * (_B[3] + t * _B[4]))))
    tail = _INV_SQRT_2PI * math.exp(-x * x / 2.0) * poly
    return 1.0 - tail if x >= 0 else tail


def estimate_percentile(score: float, average: float, std_dev: float = 15.0) -> float:
    """Percentile in [0, 100], rounded to 2 decimals."""
    z = (score - average) / std_dev
    return round(min(max(normal_cdf(z) * 100, 0.0), 100.0), 2)


def ranking_label(percentile: float) -> str:
    for threshold, label in RANKING_BANDS:
        if percentile >= threshold:
            return label
    return "Bottom 25%"


class BenchmarkEstimator:
    def __init__(
        self,
        knowledge: RiskKnowledge | None = None,
        std_dev: float | None = None,
    ) -> None:
        self.knowledge = knowledge or default_knowledge()
        self.std_dev = std_dev if std_dev is not None else settings.benchmark_std_dev
        if self.std_dev <= 0:
            raise ValueError(f"std_dev must be positive, got {self.std_dev}")

    def estimate(self, category: BusinessCategory | str | None, score: float) -> BenchmarkResult:
        category_value = coerce_category(category).value
        benchmark = self.knowledge.benchmarks.get(category_value, self.knowledge.default_benchmark)
        percentile = estimate_percentile(score, benchmark.average, self.std_dev)

        return BenchmarkResult(
            business_category=category_value,
            category_average=benchmark.average,
            score=score,
            percentile=percentile,
            ranking=ranking_label(percentile),
            typical_risks=list(benchmark.typical_risks),
            industry_insights=list(benchmark.insights),
        )
