"""
Engine executor — the sequential provisioning loop.

Runs phases strictly in order. After each phase the phase's error
policy decides what a failure means:

    abort   → report the error, stop, exit code 1
    warn    → report a warning, continue
    ignore  → debug log only, continue

No retries and no cleanup: effects of earlier phases stay in place.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Callable, Literal, Sequence

from swarmprep.core.models.phase import PhaseResult, PhaseSpec
from swarmprep.core.persistence.audit import RunLedger, RunRecord
from swarmprep.core.services.provision.orchestration.context import ProvisionContext

logger = logging.getLogger(__name__)

StatusLevel = Literal["success", "progress", "warning", "error"]
Notify = Callable[[str, StatusLevel], None]


def _log_notify(message: str, level: StatusLevel) -> None:
    logger.info("[%s] %s", level, message)


@dataclass
class ProvisionReport:
    """Result of a provisioning run."""

    operation_id: str = ""
    dry_run: bool = False
    results: list[PhaseResult] = field(default_factory=list)
    aborted_at: str | None = None
    node_version: str | None = None
    cuda_available: bool | None = None
    duration_ms: int = 0

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if r.failed)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.results if r.skipped)

    @property
    def status(self) -> str:
        return "failed" if self.aborted_at else "ok"

    @property
    def exit_code(self) -> int:
        return 1 if self.aborted_at else 0

    def result_for(self, phase_id: str) -> PhaseResult | None:
        for r in self.results:
            if r.phase_id == phase_id:
                return r
        return None

    def to_dict(self) -> dict:
        return {
            "operation_id": self.operation_id,
            "dry_run": self.dry_run,
            "status": self.status,
            "exit_code": self.exit_code,
            "aborted_at": self.aborted_at,
            "node_version": self.node_version,
            "cuda_available": self.cuda_available,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skipped": self.skipped,
            "duration_ms": self.duration_ms,
            "phases": [r.model_dump(mode="json") for r in self.results],
        }


def generate_operation_id() -> str:
    """Generate a unique operation identifier."""
    ts = datetime.now(UTC).strftime("%Y%m%dT%H%M%S")
    short = uuid.uuid4().hex[:8]
    return f"provision-{ts}-{short}"


def _run_one(phase: PhaseSpec, ctx: ProvisionContext) -> PhaseResult:
    """Run a phase, converting unexpected exceptions into a failed result."""
    started_at = datetime.now(UTC).isoformat()
    start = time.monotonic()
    try:
        result = phase.run(ctx)
    except Exception as e:
        logger.exception("Phase %s raised", phase.phase_id)
        result = PhaseResult.failure(f"{phase.title.rstrip('.')} failed: {e}")

    return result.model_copy(update={
        "phase_id": phase.phase_id,
        "started_at": started_at,
        "ended_at": datetime.now(UTC).isoformat(),
        "duration_ms": int((time.monotonic() - start) * 1000),
    })


def run_phases(
    phases: Sequence[PhaseSpec],
    ctx: ProvisionContext,
    notify: Notify | None = None,
    operation_id: str | None = None,
) -> ProvisionReport:
    """Run ``phases`` in order against ``ctx``.

    Args:
        phases: Ordered phase specs.
        ctx: Shared provisioning context.
        notify: Receives ``(message, level)`` status lines.
        operation_id: Optional id (generated when omitted).

    Returns:
        ProvisionReport. ``aborted_at`` names the first gated phase that
        failed; phases after it were not run.
    """
    notify = notify or _log_notify
    report = ProvisionReport(
        operation_id=operation_id or generate_operation_id(),
        dry_run=ctx.dry_run,
    )
    start = time.monotonic()

    for phase in phases:
        notify(phase.title, "progress")
        result = _run_one(phase, ctx)
        report.results.append(result)

        if result.ok:
            logger.info("Phase %s ok (%dms)", phase.phase_id, result.duration_ms)
            if result.message:
                notify(result.message, "success")
            continue

        if result.skipped:
            logger.info("Phase %s skipped: %s", phase.phase_id, result.message)
            if result.message:
                notify(result.message, "warning")
            continue

        error = result.error or f"{phase.phase_id} failed"
        if phase.gated:
            logger.error("Phase %s failed, aborting run: %s", phase.phase_id, error)
            notify(error, "error")
            report.aborted_at = phase.phase_id
            break

        if phase.on_error == "warn":
            logger.warning("Phase %s failed (continuing): %s", phase.phase_id, error)
            notify(error, "warning")
        else:
            logger.debug("Ignoring failure of %s: %s", phase.phase_id, error)

    report.node_version = ctx.node_version
    report.cuda_available = ctx.cuda_available
    report.duration_ms = int((time.monotonic() - start) * 1000)
    return report


def record_run(report: ProvisionReport, ledger: RunLedger) -> RunRecord:
    """Append one ledger record summarising ``report``."""
    record = RunRecord(
        operation_id=report.operation_id,
        dry_run=report.dry_run,
        status=report.status,
        exit_code=report.exit_code,
        node_version=report.node_version,
        cuda_available=report.cuda_available,
        aborted_at=report.aborted_at,
        phases={r.phase_id: r.status for r in report.results},
        duration_ms=report.duration_ms,
        errors=[r.error for r in report.results if r.failed and r.error],
    )
    ledger.append(record)
    return record
