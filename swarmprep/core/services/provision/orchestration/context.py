"""
L5 Orchestration — provisioning context.

Everything a phase needs is passed explicitly through this object:
configuration, working directory, values discovered by earlier phases,
and the I/O seams (command runner, PATH lookup, HTTP fetch). Nothing
is read from ambient shell state such as an activated venv.
"""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from swarmprep.core.models.config import ProvisionConfig
from swarmprep.core.services.provision.detection.listing import fetch_text
from swarmprep.core.services.provision.execution.subprocess_runner import (
    CommandRunner,
    run_command,
)


@dataclass
class ProvisionContext:
    """Mutable state threaded through the phases of one run."""

    config: ProvisionConfig = field(default_factory=ProvisionConfig)
    work_dir: Path = field(default_factory=Path.cwd)
    dry_run: bool = False

    runner: CommandRunner = run_command
    which: Callable[[str], str | None] = shutil.which
    fetch: Callable[..., str] = fetch_text

    # Filled in by phases as the run progresses
    node_version: str | None = None
    node_major: str | None = None
    installed_versions: dict[str, str] = field(default_factory=dict)
    venv_python: Path | None = None
    env_overrides: dict[str, str] = field(default_factory=dict)
    cuda_available: bool | None = None

    @property
    def venv_path(self) -> Path:
        """Absolute path of the isolated environment directory."""
        venv = Path(self.config.python.venv_dir)
        return venv if venv.is_absolute() else self.work_dir / venv

    def run(self, cmd: list[str], **kwargs: Any) -> dict[str, Any]:
        """Run a command with the run-wide timeout and dry-run flag applied."""
        kwargs.setdefault("timeout", self.config.command_timeout)
        kwargs.setdefault("dry_run", self.dry_run)
        kwargs.setdefault("cwd", str(self.work_dir))
        return self.runner(cmd, **kwargs)

    def activate(self, venv: Path) -> None:
        """Point later installs at ``venv`` (the explicit form of ``activate``)."""
        bin_dir = venv / "bin"
        self.venv_python = bin_dir / "python"
        self.env_overrides = {
            "VIRTUAL_ENV": str(venv),
            "PATH": f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}",
        }
