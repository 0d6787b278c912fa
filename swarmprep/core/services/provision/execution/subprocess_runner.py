"""
L4 Execution — Core subprocess runner.

Every provisioning command and GPU probe runs through ``run_command``.
Logging, privilege escalation and error capture live here. The one
other ``subprocess.run`` call is the read-only ``--version`` query in
``detection/runtime.py``.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import time
from typing import Any, Protocol, Sequence

from swarmprep.core.services.provision.data.constants import OUTPUT_TAIL_CHARS

logger = logging.getLogger(__name__)


class CommandRunner(Protocol):
    """Signature shared by ``run_command`` and test doubles."""

    def __call__(
        self,
        cmd: Sequence[str],
        *,
        needs_sudo: bool = False,
        preserve_env: bool = False,
        input_text: str | None = None,
        env_overrides: dict[str, str] | None = None,
        cwd: str | None = None,
        timeout: int | None = None,
        dry_run: bool = False,
    ) -> dict[str, Any]:
        ...


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def _tail(text: str | None) -> str:
    return text[-OUTPUT_TAIL_CHARS:] if text else ""


def sudo_prefix(*, preserve_env: bool = False) -> list[str]:
    """Privilege escalation prefix; empty when already root."""
    if os.geteuid() == 0:
        return []
    return ["sudo", "-E"] if preserve_env else ["sudo"]


def run_command(
    cmd: Sequence[str],
    *,
    needs_sudo: bool = False,
    preserve_env: bool = False,
    input_text: str | None = None,
    env_overrides: dict[str, str] | None = None,
    cwd: str | None = None,
    timeout: int | None = None,
    dry_run: bool = False,
) -> dict[str, Any]:
    """Run a command and capture its outcome.

    Never raises for a failed command; the caller reads ``ok``.

    Args:
        cmd: Command list for ``subprocess.run()``.
        needs_sudo: Prefix with ``sudo`` unless running as root.
        preserve_env: Pass ``-E`` to sudo (keep the caller's environment).
        input_text: Text piped to the child's stdin.
        env_overrides: Extra env vars, e.g. ``VIRTUAL_ENV`` and ``PATH``.
        cwd: Working directory for the command.
        timeout: Seconds before ``TimeoutExpired``. None waits forever.
        dry_run: Log the command but do not execute it.

    Returns:
        ``{"ok": True, "stdout": "...", "elapsed_ms": N}`` on success,
        ``{"ok": False, "error": "...", "returncode": N, ...}`` on failure.
    """
    argv = list(cmd)
    if needs_sudo:
        argv = sudo_prefix(preserve_env=preserve_env) + argv

    logger.info("CMD %s", _fmt_argv(argv))

    if dry_run:
        return {"ok": True, "stdout": "", "elapsed_ms": 0, "dry_run": True}

    env = os.environ.copy()
    if env_overrides:
        for key, value in env_overrides.items():
            env[key] = os.path.expandvars(value)

    start = time.monotonic()
    try:
        result = subprocess.run(
            argv,
            capture_output=True,
            text=True,
            timeout=timeout,
            input=input_text,
            env=env,
            cwd=cwd,
        )
    except subprocess.TimeoutExpired:
        return {"ok": False, "error": f"Command timed out ({timeout}s)"}
    except FileNotFoundError as e:
        return {"ok": False, "error": f"Command not found: {e.filename or argv[0]}"}
    except OSError as e:
        logger.exception("Subprocess error: %s", argv)
        return {"ok": False, "error": str(e)}

    elapsed_ms = int((time.monotonic() - start) * 1000)

    if result.stdout:
        logger.debug("STDOUT %s", _tail(result.stdout).strip())
    if result.stderr:
        logger.debug("STDERR %s", _tail(result.stderr).strip())

    if result.returncode == 0:
        return {
            "ok": True,
            "stdout": _tail(result.stdout),
            "elapsed_ms": elapsed_ms,
        }

    return {
        "ok": False,
        "error": f"Command failed (exit {result.returncode}): {_fmt_argv(argv)}",
        "returncode": result.returncode,
        "stderr": _tail(result.stderr),
        "stdout": _tail(result.stdout),
        "elapsed_ms": elapsed_ms,
    }
