"""
Provision use case — the full run, from config to audited report.

Loads configuration, builds the context and phase list, runs the
executor and appends the outcome to the audit ledger.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from swarmprep.core.config.loader import ConfigError, load_config
from swarmprep.core.engine.executor import (
    Notify,
    ProvisionReport,
    record_run,
    run_phases,
)
from swarmprep.core.models.config import ProvisionConfig
from swarmprep.core.persistence.audit import RunLedger
from swarmprep.core.services.provision.orchestration.context import ProvisionContext
from swarmprep.core.services.provision.orchestration.phases import build_phases

logger = logging.getLogger(__name__)


@dataclass
class ProvisionResult:
    """Result of a provisioning run."""

    report: ProvisionReport | None = None
    config: ProvisionConfig | None = None
    work_dir: Path | None = None
    audit_path: Path | None = None
    error: str | None = None

    @property
    def exit_code(self) -> int:
        if self.error or self.report is None:
            return 1
        return self.report.exit_code

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            return result

        result["work_dir"] = str(self.work_dir)
        if self.audit_path:
            result["audit_path"] = str(self.audit_path)
        if self.report:
            result["report"] = self.report.to_dict()
        return result


def run_provision(
    config_path: Path | None = None,
    work_dir: Path | None = None,
    dry_run: bool = False,
    notify: Notify | None = None,
    context: ProvisionContext | None = None,
) -> ProvisionResult:
    """Provision this host.

    Args:
        config_path: Optional explicit path to swarmprep.yml.
        work_dir: Directory the venv is created in (default: cwd).
        dry_run: Log mutating commands instead of running them.
        notify: Receives ``(message, level)`` status lines.
        context: Pre-built context (tests inject fakes here). When given,
            ``config_path``, ``work_dir`` and ``dry_run`` are ignored.

    Returns:
        ProvisionResult; ``exit_code`` is 0 on success, 1 otherwise.
    """
    result = ProvisionResult()

    if context is None:
        try:
            config = load_config(config_path)
        except ConfigError as e:
            result.error = str(e)
            return result
        context = ProvisionContext(
            config=config,
            work_dir=(work_dir or Path.cwd()).resolve(),
            dry_run=dry_run,
        )

    result.config = context.config
    result.work_dir = context.work_dir

    logger.info(
        "Provisioning in %s (dry_run=%s, venv=%s)",
        context.work_dir, context.dry_run, context.venv_path,
    )
    report = run_phases(build_phases(context.config), context, notify=notify)
    result.report = report

    if context.config.audit:
        ledger = RunLedger(context.work_dir)
        record_run(report, ledger)
        result.audit_path = ledger.path

    return result
