"""
L4 Execution — virtual environment and pip operations.

Pip always runs as ``<venv>/bin/python -m pip`` with the venv's
``VIRTUAL_ENV``/``PATH`` applied, so installs can't leak into the
system interpreter.
"""

from __future__ import annotations

import logging
from typing import Any

from swarmprep.core.services.provision.orchestration.context import ProvisionContext

logger = logging.getLogger(__name__)


def create_or_reuse_venv(ctx: ProvisionContext) -> dict[str, Any]:
    """Create the venv when its directory is absent; otherwise leave it alone.

    An existing directory is never cleared or recreated.
    """
    venv = ctx.venv_path
    if venv.is_dir():
        logger.info("Reusing virtual environment at %s", venv)
        return {"ok": True, "created": False, "path": str(venv)}

    result = ctx.run([ctx.config.python.base_python, "-m", "venv", str(venv)])
    result.update({"created": True, "path": str(venv)})
    return result


def _pip(ctx: ProvisionContext, *args: str) -> dict[str, Any]:
    python = ctx.venv_python or (ctx.venv_path / "bin" / "python")
    return ctx.run(
        [str(python), "-m", "pip", *args],
        env_overrides=ctx.env_overrides,
    )


def pip_upgrade_self(ctx: ProvisionContext) -> dict[str, Any]:
    return _pip(ctx, "install", "--upgrade", "pip")


def pip_uninstall(ctx: ProvisionContext, packages: list[str]) -> dict[str, Any]:
    if not packages:
        return {"ok": True, "stdout": ""}
    return _pip(ctx, "uninstall", "-y", *packages)


def pip_install(
    ctx: ProvisionContext,
    packages: list[str],
    *,
    extra_index_url: str | None = None,
) -> dict[str, Any]:
    if not packages:
        return {"ok": True, "stdout": ""}
    args = ["install", *packages]
    if extra_index_url:
        args += ["--extra-index-url", extra_index_url]
    return _pip(ctx, *args)


def run_in_venv(ctx: ProvisionContext, code: str) -> dict[str, Any]:
    """Run ``python -c <code>`` with the venv interpreter."""
    python = ctx.venv_python or (ctx.venv_path / "bin" / "python")
    return ctx.run([str(python), "-c", code], env_overrides=ctx.env_overrides)
