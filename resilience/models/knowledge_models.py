"""
Risk Knowledge Models — Static lookup tables, loaded once and shared read-only.

Every mapping is exposed as a MappingProxyType, so a cached RiskKnowledge can be
shared across concurrent requests without any caller mutating it.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator


def freeze_mapping(value: Any) -> Any:
    """Recursively wrap dicts in read-only proxies; other values pass through."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze_mapping(item) for key, item in value.items()})
    return value


class KnowledgeTable(BaseModel):
    """Frozen model whose mapping fields are read-only views."""

    model_config = ConfigDict(frozen=True, validate_default=True)

    @field_validator("*", mode="after")
    @classmethod
    def _read_only(cls, value: Any) -> Any:
        return freeze_mapping(value)


class StateRiskProfile(KnowledgeTable):
    description: str
    risks: Mapping[str, float]


class SeasonDefinition(KnowledgeTable):
    name: str
    months: tuple[int, ...]
    affected_locations: tuple[str, ...] = ()
    affected_categories: tuple[str, ...] = ()
    risk_multiplier: float = Field(..., gt=0.0)
    factors: tuple[str, ...] = ()


class CategoryBenchmark(KnowledgeTable):
    average: float
    typical_risks: tuple[str, ...] = ()
    insights: tuple[str, ...] = ()


class MitigationTables(KnowledgeTable):
    """Mitigation phrases, keyed by the condition that triggers them."""

    fund_below_recommended: tuple[str, ...] = ()
    fund_critical: tuple[str, ...] = ()
    location: Mapping[str, tuple[str, ...]] = Field(default_factory=dict)
    category: Mapping[str, tuple[str, ...]] = Field(default_factory=dict)
    season: Mapping[str, tuple[str, ...]] = Field(default_factory=dict)
    critical: tuple[str, ...] = ()
    general: tuple[str, ...] = ()


class RiskKnowledge(KnowledgeTable):
    """
    All static risk knowledge.

    Table order is meaningful: states are matched in order, seasons are
    evaluated in order (monsoon, haze, festival) and the first match wins.
    """

    states: Mapping[str, StateRiskProfile]
    categories: Mapping[str, Mapping[str, float]]
    seasons: tuple[SeasonDefinition, ...]
    benchmarks: Mapping[str, CategoryBenchmark]
    default_benchmark: CategoryBenchmark
    dimension_descriptions: Mapping[str, str] = Field(default_factory=dict)
    mitigations: MitigationTables = Field(default_factory=MitigationTables)
