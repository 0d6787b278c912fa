"""
L3 Detection — installed runtime probes.

Read-only: PATH lookups and ``--version`` style queries. These call
``subprocess.run`` directly and are not logged as ``CMD`` lines.
"""

from __future__ import annotations

import re
import shutil
import subprocess

VERSION_COMMANDS: dict[str, tuple[list[str], str]] = {
    "node":   (["node", "-v"],         r"v?(\d+\.\d+\.\d+)"),
    "npm":    (["npm", "-v"],          r"(\d+\.\d+\.\d+)"),
    "curl":   (["curl", "--version"],  r"curl\s+(\d+\.\d+\.\d+)"),
    "python3": (["python3", "--version"], r"Python\s+(\d+\.\d+\.\d+)"),
}


def get_tool_version(tool: str, which=shutil.which) -> str | None:
    """Installed version of a known tool, or None if absent/unparseable."""
    entry = VERSION_COMMANDS.get(tool)
    if not entry:
        return None

    cmd, pattern = entry
    if not which(cmd[0]):
        return None

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=10)
    except (subprocess.TimeoutExpired, OSError):
        return None

    output = (result.stdout or "") + (result.stderr or "")
    match = re.search(pattern, output)
    return match.group(1) if match else None
