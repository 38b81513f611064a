"""
Resilience Engine Configuration — pydantic-settings based.

All settings are read from environment variables or .env file.
Every value has a default; the engine runs unconfigured.
"""

import logging

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Engine-wide settings sourced from environment variables."""

    # ── Collaborator fetches ──
    fetch_timeout_seconds: float = Field(
        default=5.0, description="Independent timeout per analytics snapshot fetch"
    )
    default_period_months: int = Field(
        default=12, description="Lookback window used when the caller gives none"
    )
    analysis_transaction_limit: int = Field(
        default=30,
        description="Most recent fund transactions fed into a fresh risk analysis",
    )

    # ── Scoring ──
    benchmark_std_dev: float = Field(
        default=15.0, description="Assumed std deviation of category resilience scores"
    )
    max_mitigations: int = Field(
        default=10, description="Cap on mitigation recommendations per risk assessment"
    )
    max_recommendations: int = Field(
        default=10, description="Cap on report recommendations"
    )
    risk_knowledge_path: str | None = Field(
        default=None,
        description="Optional JSON file replacing the bundled risk knowledge tables",
    )

    # ── Audit ──
    audit_enabled: bool = Field(
        default=False, description="Append an audit entry for every generated report"
    )
    audit_log_path: str = Field(
        default="resilience_audit.jsonl", description="Path to JSON-lines audit log file"
    )

    # ── Logging ──
    log_level: str = Field(default="INFO", description="Root level for resilience loggers")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Module-level singleton
settings = Settings()


def configure_logging(level: str | None = None) -> logging.Logger:
    """Apply the standard log format and return the package root logger."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger = logging.getLogger("resilience")
    logger.setLevel((level or settings.log_level).upper())
    return logger
