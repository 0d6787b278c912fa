"""
L5 Orchestration — the provisioning phases, in run order.

Each phase takes the ProvisionContext and returns a PhaseResult.
``build_phases()`` pairs every phase with the policy the executor
applies when it fails.
"""

from __future__ import annotations

import logging

from swarmprep.core.models.config import ProvisionConfig
from swarmprep.core.models.phase import PhaseResult, PhaseSpec
from swarmprep.core.services.provision.data.constants import CUDA_PROBE_CODE
from swarmprep.core.services.provision.detection.hardware import (
    nvidia_smi,
    parse_cuda_probe,
)
from swarmprep.core.services.provision.detection.listing import discover_latest_version
from swarmprep.core.services.provision.domain.cuda_compat import check_cuda_driver_compat
from swarmprep.core.services.provision.domain.node_version import (
    VersionDiscoveryError,
    major_version,
)
from swarmprep.core.services.provision.execution import apt, pip
from swarmprep.core.services.provision.orchestration.context import ProvisionContext

logger = logging.getLogger(__name__)


def _failure(result: dict, message: str) -> PhaseResult:
    """Turn a failed runner dict into a PhaseResult with a readable error."""
    detail = (result.get("stderr") or result.get("error") or "").strip()
    metadata = {k: result[k] for k in ("returncode", "error") if k in result}
    if detail:
        last = detail.splitlines()[-1]
        return PhaseResult.failure(f"{message} ({last})", metadata=metadata)
    return PhaseResult.failure(message, metadata=metadata)


# ── Part 1: Node.js + npm ───────────────────────────────────────


def ensure_download_tool(ctx: ProvisionContext) -> PhaseResult:
    tool = ctx.config.node.download_tool
    path = ctx.which(tool)
    if path:
        return PhaseResult.success(f"{tool} is available at {path}")

    logger.info("%s is not installed, installing it", tool)
    result = apt.apt_update(ctx)
    if result["ok"]:
        result = apt.apt_install(ctx, [tool])
    if not result["ok"]:
        return _failure(
            result,
            f"Failed to install {tool}. Please install it manually and rerun the script.",
        )
    return PhaseResult.success(f"{tool} installed")


def detect_prior_runtime(ctx: ProvisionContext) -> PhaseResult:
    existing = ctx.which("node")
    if existing:
        return PhaseResult.success(
            f"Existing Node.js found at {existing}. "
            "The latest version will be installed system-wide.",
            metadata={"existing_path": existing},
        )
    return PhaseResult.success("No existing Node.js installation found")


def discover_version(ctx: ProvisionContext) -> PhaseResult:
    node = ctx.config.node
    try:
        version = discover_latest_version(
            node.listing_url,
            strategy=node.version_strategy,
            pattern=node.version_pattern,
            timeout=node.fetch_timeout,
            fetch=ctx.fetch,
        )
    except VersionDiscoveryError as e:
        return PhaseResult.failure(str(e))

    ctx.node_version = version
    ctx.node_major = major_version(version)
    return PhaseResult.success(
        f"Latest Node.js version is {version}",
        metadata={"version": version, "major": ctx.node_major},
    )


def configure_package_source(ctx: ProvisionContext) -> PhaseResult:
    if not ctx.node_major:
        return PhaseResult.failure("No Node.js major version discovered")

    result = apt.run_nodesource_setup(ctx, ctx.node_major)
    if not result["ok"]:
        return _failure(result, "Failed to set up NodeSource repository.")
    return PhaseResult.success(f"NodeSource repository configured for Node.js {ctx.node_major}.x")


def install_runtime(ctx: ProvisionContext) -> PhaseResult:
    result = apt.apt_install(ctx, [ctx.config.node.package])
    if not result["ok"]:
        return _failure(result, "Failed to install Node.js and npm.")
    return PhaseResult.success("Node.js and npm packages installed")


def verify_runtime(ctx: ProvisionContext) -> PhaseResult:
    if ctx.dry_run:
        return PhaseResult.skip("dry-run: nothing was installed to verify")

    binaries = ctx.config.node.binaries
    missing = [b for b in binaries if not ctx.which(b)]
    if missing:
        return PhaseResult.failure(
            "Installation completed, but "
            f"{' or '.join(missing)} not found in PATH."
        )

    versions: dict[str, str] = {}
    for binary in binaries:
        result = ctx.run([binary, "-v"], dry_run=False)
        if not result["ok"]:
            return _failure(result, f"{binary} is on PATH but does not report a version.")
        versions[binary] = result.get("stdout", "").strip()

    ctx.installed_versions = versions
    node_v = versions.get("node", "?")
    npm_v = versions.get("npm", "?")
    return PhaseResult.success(
        f"Node.js {node_v} and npm {npm_v} installed successfully!",
        metadata={"versions": versions},
    )


# ── Part 2: Python environment ──────────────────────────────────


def create_environment(ctx: ProvisionContext) -> PhaseResult:
    result = pip.create_or_reuse_venv(ctx)
    if not result["ok"]:
        return _failure(result, f"Failed to create virtual environment {ctx.venv_path}.")
    verb = "Created" if result.get("created") else "Reusing"
    return PhaseResult.success(
        f"{verb} virtual environment {ctx.venv_path}",
        metadata={"created": bool(result.get("created"))},
    )


def activate_environment(ctx: ProvisionContext) -> PhaseResult:
    venv = ctx.venv_path
    ctx.activate(venv)
    if not ctx.dry_run and not ctx.venv_python.exists():
        return PhaseResult.failure(f"No interpreter at {ctx.venv_python}")
    return PhaseResult.success(f"Virtual environment active ({ctx.venv_python})")


def upgrade_installer(ctx: ProvisionContext) -> PhaseResult:
    result = pip.pip_upgrade_self(ctx)
    if not result["ok"]:
        return _failure(result, "pip upgrade failed; continuing with the bundled pip.")
    return PhaseResult.success("pip upgraded")


def remove_conflicting(ctx: ProvisionContext) -> PhaseResult:
    packages = ctx.config.python.conflicting_packages
    result = pip.pip_uninstall(ctx, packages)
    if not result["ok"]:
        return _failure(result, f"Could not uninstall {', '.join(packages)}")
    return PhaseResult.success(f"Cleaned up old installs of {', '.join(packages)}")


def install_pinned(ctx: ProvisionContext) -> PhaseResult:
    py = ctx.config.python
    result = pip.pip_install(ctx, py.pinned_packages, extra_index_url=py.extra_index_url)
    if not result["ok"]:
        return _failure(result, f"Failed to install {' '.join(py.pinned_packages)}.")
    return PhaseResult.success(f"Installed {' '.join(py.pinned_packages)}")


def repin_dependency(ctx: ProvisionContext) -> PhaseResult:
    packages = ctx.config.python.repin_packages
    result = pip.pip_install(ctx, packages)
    if not result["ok"]:
        return _failure(result, f"Failed to install {' '.join(packages)}.")
    return PhaseResult.success(f"Pinned {' '.join(packages)}")


def install_auxiliary(ctx: ProvisionContext) -> PhaseResult:
    packages = ctx.config.python.auxiliary_packages
    result = pip.pip_install(ctx, packages)
    if not result["ok"]:
        return _failure(result, f"Failed to install {', '.join(packages)}.")
    return PhaseResult.success(f"Installed {', '.join(packages)}")


def capability_check(ctx: ProvisionContext) -> PhaseResult:
    if ctx.dry_run:
        return PhaseResult.skip("dry-run: CUDA availability not checked")

    metadata: dict = {}
    gpu = nvidia_smi(which=ctx.which, runner=ctx.run)
    if gpu:
        metadata["gpu"] = gpu
        compat = check_cuda_driver_compat(ctx.config.python.cuda_version, gpu["driver_version"])
        if not compat["compatible"]:
            logger.warning(compat["message"])
            metadata["driver_warning"] = compat["message"]

    result = pip.run_in_venv(ctx, CUDA_PROBE_CODE)
    if not result["ok"]:
        return _failure(result, "CUDA availability check could not run")

    available = parse_cuda_probe(result.get("stdout", ""))
    if available is None:
        return PhaseResult.failure("CUDA availability check printed no boolean", metadata=metadata)

    ctx.cuda_available = available
    metadata["cuda_available"] = available
    return PhaseResult.success(f"CUDA available: {available}", metadata=metadata)


def build_phases(config: ProvisionConfig | None = None) -> list[PhaseSpec]:
    """All phases, in run order, with their error policies."""
    config = config or ProvisionConfig()
    py = config.python
    return [
        PhaseSpec("ensure_download_tool", f"Checking for {config.node.download_tool}...",
                  ensure_download_tool),
        PhaseSpec("detect_prior_runtime", "Checking for an existing Node.js...",
                  detect_prior_runtime, on_error="ignore"),
        PhaseSpec("discover_version", "Fetching latest Node.js version...", discover_version),
        PhaseSpec("configure_package_source", "Setting up NodeSource repository...",
                  configure_package_source),
        PhaseSpec("install_runtime", "Installing Node.js and npm...", install_runtime),
        PhaseSpec("verify_runtime", "Verifying Node.js and npm installation...", verify_runtime),
        PhaseSpec("create_environment", "Preparing virtual environment...", create_environment),
        PhaseSpec("activate_environment", "Activating virtual environment...",
                  activate_environment),
        PhaseSpec("upgrade_installer", "Upgrading pip...", upgrade_installer, on_error="warn"),
        PhaseSpec("remove_conflicting", "Cleaning up old torch installations...",
                  remove_conflicting, on_error="ignore"),
        PhaseSpec("install_pinned", f"Installing {' '.join(py.pinned_packages)}...", install_pinned),
        PhaseSpec("repin_dependency", f"Re-pinning {' '.join(py.repin_packages)}...", repin_dependency),
        PhaseSpec("install_auxiliary", "Installing additional packages...", install_auxiliary),
        PhaseSpec("capability_check", "Verifying PyTorch and CUDA installation...",
                  capability_check, on_error="warn"),
    ]
