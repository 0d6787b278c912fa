"""
L4 Execution — system package operations (apt + NodeSource).

All commands run with ``sudo`` unless already root.
"""

from __future__ import annotations

import logging
from typing import Any

from swarmprep.core.services.provision.detection.listing import FETCH_ERRORS
from swarmprep.core.services.provision.orchestration.context import ProvisionContext

logger = logging.getLogger(__name__)


def apt_update(ctx: ProvisionContext) -> dict[str, Any]:
    return ctx.run(["apt-get", "update"], needs_sudo=True)


def apt_install(ctx: ProvisionContext, packages: list[str]) -> dict[str, Any]:
    if not packages:
        return {"ok": True, "stdout": ""}
    return ctx.run(["apt-get", "install", "-y", *packages], needs_sudo=True)


def nodesource_setup_url(ctx: ProvisionContext, major: str) -> str:
    return ctx.config.node.nodesource_setup_url.format(major=major)


def run_nodesource_setup(ctx: ProvisionContext, major: str) -> dict[str, Any]:
    """Download the NodeSource setup script and run it as ``sudo -E bash -``.

    The script registers the apt source for the ``<major>.x`` line.
    """
    url = nodesource_setup_url(ctx, major)

    try:
        script = ctx.fetch(url, timeout=ctx.config.node.fetch_timeout)
    except FETCH_ERRORS as e:
        return {"ok": False, "error": f"Cannot download {url}: {e}"}

    if not script.strip():
        return {"ok": False, "error": f"Empty setup script from {url}"}

    logger.info("Running NodeSource setup for %s.x (%d bytes)", major, len(script))
    return ctx.run(
        ["bash", "-"],
        needs_sudo=True,
        preserve_env=True,
        input_text=script,
    )
