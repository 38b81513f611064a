"""
Audit Logger — Append-only JSON-lines trail of generated reports.

Each line is one AuditRecord: report id, business, period, score, risk severity,
degraded sources and duration. Report content itself is never written here.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from pydantic import ValidationError

from resilience.config import settings
from resilience.models.report_models import AuditEntry, AuditRecord

logger = logging.getLogger("resilience.audit")


class AuditLogger:
    """Persists AuditRecords and reads them back, newest last."""

    def __init__(
        self,
        log_path: str | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.log_path = Path(log_path or settings.audit_log_path)
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def log(self, entry: AuditEntry) -> AuditRecord:
        """Stamp and append an entry. Write failures are logged, not raised."""
        record = AuditRecord(timestamp=self.clock(), **entry.model_dump())

        try:
            with open(self.log_path, "a", encoding="utf-8") as f:
                f.write(record.model_dump_json() + "\n")
        except OSError as e:
            logger.error(f"Failed to write audit record {record.report_id}: {e}")
        return record

    def read_recent(self, count: int = 50, business_id: str | None = None) -> list[AuditRecord]:
        """The last `count` records, optionally for one business."""
        if count <= 0 or not self.log_path.exists():
            return []

        records: list[AuditRecord] = []
        try:
            with open(self.log_path, encoding="utf-8") as f:
                for line_no, line in enumerate(f, start=1):
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        record = AuditRecord.model_validate_json(line)
                    except ValidationError:
                        logger.warning(f"Skipping malformed audit line {line_no} in {self.log_path.name}")
                        continue
                    if business_id is None or record.business_id == business_id:
                        records.append(record)
        except OSError as e:
            logger.error(f"Failed to read audit log: {e}")
            return []

        return records[-count:]
