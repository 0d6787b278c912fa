"""
Tests for the run ledger — append, read back, corrupt lines.
"""

import json
from pathlib import Path

from swarmprep.core.persistence.audit import (
    DEFAULT_AUDIT_DIR,
    DEFAULT_AUDIT_FILE,
    RunLedger,
    RunRecord,
    default_audit_path,
)


class TestRunRecord:
    def test_phase_counts(self):
        record = RunRecord(phases={"a": "ok", "b": "skipped", "c": "failed"})
        assert record.phases_total == 3
        assert record.phases_succeeded == 1


class TestRunLedger:
    def test_default_location(self, tmp_path: Path):
        assert default_audit_path(tmp_path) == tmp_path / DEFAULT_AUDIT_DIR / DEFAULT_AUDIT_FILE
        assert RunLedger(tmp_path).path == default_audit_path(tmp_path)

    def test_explicit_path(self, tmp_path: Path):
        path = tmp_path / "ledger.ndjson"
        assert RunLedger(path=path).path == path

    def test_append_creates_parent_dirs(self, tmp_path: Path):
        ledger = RunLedger(tmp_path)
        assert ledger.append(RunRecord(operation_id="op-1", status="ok"))
        assert ledger.path.is_file()

    def test_append_only(self, tmp_path: Path):
        ledger = RunLedger(tmp_path)
        ledger.append(RunRecord(operation_id="op-1", status="ok"))
        ledger.append(RunRecord(operation_id="op-2", status="failed", exit_code=1))

        lines = ledger.path.read_text().splitlines()
        assert len(lines) == 2
        assert json.loads(lines[0])["operation_id"] == "op-1"
        assert [r.operation_id for r in ledger] == ["op-1", "op-2"]

    def test_missing_ledger_is_empty(self, tmp_path: Path):
        assert list(RunLedger(tmp_path)) == []

    def test_corrupt_lines_skipped(self, tmp_path: Path):
        ledger = RunLedger(tmp_path)
        ledger.append(RunRecord(operation_id="op-1"))
        with ledger.path.open("a") as f:
            f.write("{not json\n\n")
        ledger.append(RunRecord(operation_id="op-2"))

        assert [r.operation_id for r in ledger] == ["op-1", "op-2"]

    def test_recent(self, tmp_path: Path):
        ledger = RunLedger(tmp_path)
        for i in range(5):
            ledger.append(RunRecord(operation_id=f"op-{i}"))
        assert [r.operation_id for r in ledger.recent(2)] == ["op-3", "op-4"]
        assert ledger.recent(0) == []

    def test_append_failure_is_not_raised(self, tmp_path: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        ledger = RunLedger(path=blocker / "audit.ndjson")
        assert ledger.append(RunRecord(operation_id="op-1")) is False
        assert list(ledger) == []
