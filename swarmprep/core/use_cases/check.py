"""
Check use case — read-only report of what a previous run left behind.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from swarmprep.core.models.config import ProvisionConfig
from swarmprep.core.services.provision.data.constants import CUDA_PROBE_CODE
from swarmprep.core.services.provision.detection.hardware import nvidia_smi, parse_cuda_probe
from swarmprep.core.services.provision.detection.runtime import get_tool_version
from swarmprep.core.services.provision.execution.subprocess_runner import (
    CommandRunner,
    run_command,
)

logger = logging.getLogger(__name__)


@dataclass
class CheckResult:
    """Host state relevant to provisioning."""

    tools: dict[str, str | None] = field(default_factory=dict)
    venv_path: str = ""
    venv_exists: bool = False
    cuda_available: bool | None = None
    gpu: dict | None = None

    @property
    def ready(self) -> bool:
        return self.venv_exists and all(self.tools.values())

    def to_dict(self) -> dict:
        return {
            "ready": self.ready,
            "tools": self.tools,
            "venv": {"path": self.venv_path, "exists": self.venv_exists},
            "cuda_available": self.cuda_available,
            "gpu": self.gpu,
        }


def check_host(
    config: ProvisionConfig,
    work_dir: Path,
    *,
    runner: CommandRunner = run_command,
    which: Callable[[str], str | None] = shutil.which,
    version_of: Callable[..., str | None] = get_tool_version,
) -> CheckResult:
    """Probe node/npm, the venv and CUDA without changing anything."""
    result = CheckResult()

    for binary in config.node.binaries:
        result.tools[binary] = version_of(binary, which=which) if which(binary) else None

    venv = Path(config.python.venv_dir)
    if not venv.is_absolute():
        venv = work_dir / venv
    result.venv_path = str(venv)
    python = venv / "bin" / "python"
    result.venv_exists = venv.is_dir() and python.exists()

    result.gpu = nvidia_smi(which=which, runner=runner)

    if result.venv_exists:
        probe = runner([str(python), "-c", CUDA_PROBE_CODE], timeout=120)
        if probe["ok"]:
            result.cuda_available = parse_cuda_probe(probe.get("stdout", ""))
        else:
            logger.info("CUDA probe failed: %s", probe.get("error"))

    return result
