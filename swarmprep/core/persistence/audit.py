"""
Run ledger — append-only history of provisioning runs.

One NDJSON line per run in ``<workdir>/.swarmprep/audit.ndjson``.
Lines are only ever appended. ``swarmprep history`` reads them back.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Iterator

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_AUDIT_DIR = ".swarmprep"
DEFAULT_AUDIT_FILE = "audit.ndjson"


class RunRecord(BaseModel):
    """Summary of one provisioning run."""

    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    operation_id: str = ""
    dry_run: bool = False

    status: str = ""               # ok, failed
    exit_code: int = 0
    node_version: str | None = None
    cuda_available: bool | None = None
    aborted_at: str | None = None  # phase id that stopped the run

    phases: dict[str, str] = Field(default_factory=dict)  # phase id → ok/skipped/failed
    duration_ms: int = 0

    errors: list[str] = Field(default_factory=list)

    @property
    def phases_total(self) -> int:
        return len(self.phases)

    @property
    def phases_succeeded(self) -> int:
        return sum(1 for s in self.phases.values() if s == "ok")


def default_audit_path(work_dir: Path) -> Path:
    """Ledger location for a working directory."""
    return work_dir / DEFAULT_AUDIT_DIR / DEFAULT_AUDIT_FILE


class RunLedger:
    """The NDJSON ledger of one working directory."""

    def __init__(self, work_dir: Path | None = None, *, path: Path | None = None):
        self._path = path or default_audit_path(work_dir or Path.cwd())

    @property
    def path(self) -> Path:
        return self._path

    def append(self, record: RunRecord) -> bool:
        """Append a record. Returns False (after logging) if the write failed."""
        line = json.dumps(record.model_dump(mode="json"), ensure_ascii=False)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            logger.error("Could not append to %s: %s", self._path, e)
            return False
        logger.debug("Recorded run %s in %s", record.operation_id, self._path)
        return True

    def __iter__(self) -> Iterator[RunRecord]:
        """Records oldest first. Unparseable lines are logged and skipped."""
        try:
            lines = self._path.read_text(encoding="utf-8").splitlines()
        except FileNotFoundError:
            return
        except OSError as e:
            logger.error("Could not read %s: %s", self._path, e)
            return

        for number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                yield RunRecord.model_validate_json(line)
            except ValidationError as e:
                logger.warning("%s:%d is not a run record: %s", self._path, number, e)

    def recent(self, n: int = 20) -> list[RunRecord]:
        """The last ``n`` records, oldest first."""
        return list(self)[-n:] if n > 0 else []
