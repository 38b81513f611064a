"""
Risk Knowledge Loader — Reads the static risk tables once per process.

The bundled tables live in resilience/data/risk_knowledge.json. Deployments can
point RISK_KNOWLEDGE_PATH at a replacement file with the same shape.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path

from resilience.config import settings
from resilience.models.knowledge_models import RiskKnowledge

logger = logging.getLogger("resilience.knowledge")

BUNDLED_KNOWLEDGE_PATH = Path(__file__).resolve().parent.parent / "data" / "risk_knowledge.json"


def load_knowledge(path: str | Path | None = None) -> RiskKnowledge:
    """
    Load and validate a knowledge file.

    Raises:
        OSError: the file cannot be read.
        pydantic.ValidationError: the file does not match the table schema.
    """
    source = Path(path) if path else BUNDLED_KNOWLEDGE_PATH
    with open(source, encoding="utf-8") as f:
        raw = json.load(f)

    knowledge = RiskKnowledge.model_validate(raw)
    logger.info(
        f"Loaded risk knowledge from {source.name}: {len(knowledge.states)} states, "
        f"{len(knowledge.categories)} categories, {len(knowledge.seasons)} seasons"
    )
    return knowledge


@lru_cache(maxsize=1)
def default_knowledge() -> RiskKnowledge:
    """Process-wide knowledge tables (settings override, else bundled)."""
    return load_knowledge(settings.risk_knowledge_path)
