"""
L3 Detection — GPU driver and CUDA availability.

Read-only probes: ``nvidia-smi`` and an import of torch inside the
provisioned environment.
"""

from __future__ import annotations

import re
import shutil

from swarmprep.core.services.provision.execution.subprocess_runner import (
    CommandRunner,
    run_command,
)


def nvidia_smi(which=shutil.which, runner: CommandRunner = run_command) -> dict | None:
    """NVIDIA driver and CUDA versions from ``nvidia-smi``, or None.

    Both queries go through ``runner``, so they are logged like any
    other command and can be faked in tests.
    """
    if not which("nvidia-smi"):
        return None

    r = runner(
        ["nvidia-smi", "--query-gpu=driver_version,name", "--format=csv,noheader,nounits"],
        timeout=5,
    )
    stdout = r.get("stdout", "").strip()
    if not r["ok"] or not stdout:
        return None
    driver_ver, _, name = stdout.splitlines()[0].partition(",")

    r2 = runner(["nvidia-smi"], timeout=5)
    m = re.search(r"CUDA Version:\s+(\d+\.\d+)", r2.get("stdout", "")) if r2["ok"] else None
    return {
        "driver_version": driver_ver.strip(),
        "model": name.strip() or None,
        "cuda_version": m.group(1) if m else None,
    }


def parse_cuda_probe(stdout: str) -> bool | None:
    """Read the boolean printed by the torch probe.

    The last non-empty line is used; torch may print warnings first.
    """
    lines = [ln.strip() for ln in stdout.splitlines() if ln.strip()]
    if not lines:
        return None
    last = lines[-1]
    if last == "True":
        return True
    if last == "False":
        return False
    return None
