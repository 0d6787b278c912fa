"""
swarmprep — CLI entrypoint.

Usage:
    swarmprep                 # provision this host (same as ``swarmprep run``)
    swarmprep run --dry-run
    swarmprep node-version
    swarmprep check
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from swarmprep import __version__
from swarmprep.core.observability.logging_config import resolve_level, setup_logging
from swarmprep.ui.cli.status import show


def _load_config_or_exit(ctx: click.Context):
    from swarmprep.core.config.loader import ConfigError, load_config

    try:
        return load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        show(str(e), "error")
        sys.exit(1)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="swarmprep")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to swarmprep.yml (default: auto-detect, else built-in defaults).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """swarmprep — provision Node.js and a CUDA PyTorch environment."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get("SWARMPREP_LOG_FILE"),
        log_file_level=os.environ.get("SWARMPREP_LOG_FILE_LEVEL"),
        quiet_third_party=not debug,
    )

    if ctx.invoked_subcommand is None:
        ctx.invoke(run)


@cli.command()
@click.option("--dry-run", is_flag=True, help="Log mutating commands instead of running them.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def run(ctx: click.Context, dry_run: bool = False, as_json: bool = False) -> None:
    """Install Node.js + npm, then build the Python ML environment."""
    from swarmprep.core.use_cases.provision import run_provision

    if not as_json:
        label = " [dry-run]" if dry_run else ""
        click.echo(f"🚀 Starting full setup (Node.js + Python venv){label}...")

    result = run_provision(
        config_path=ctx.obj.get("config_path"),
        dry_run=dry_run,
        notify=(lambda message, level: None) if as_json else show,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(result.exit_code)

    if result.error:
        show(result.error, "error")
        sys.exit(1)

    report = result.report
    assert report is not None

    if report.aborted_at:
        click.echo()
        click.secho(
            f"   Setup stopped at {report.aborted_at} "
            f"({report.succeeded}/{report.total} phases ok)",
            fg="red",
            bold=True,
        )
        sys.exit(1)

    click.echo("🏁 Setup COMPLETED! Node.js + Python environment is ready to use.")


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def plan(ctx: click.Context, as_json: bool) -> None:
    """List the provisioning phases and what a failure in each one does."""
    from swarmprep.core.services.provision.orchestration.phases import build_phases

    config = _load_config_or_exit(ctx)
    phases = build_phases(config)

    if as_json:
        click.echo(json.dumps(
            [{"id": p.phase_id, "title": p.title, "on_error": p.on_error} for p in phases],
            indent=2,
        ))
        return

    policy_color = {"abort": "red", "warn": "yellow", "ignore": "white"}
    click.secho(f"\n📋 {len(phases)} phases", fg="cyan", bold=True)
    for i, p in enumerate(phases, start=1):
        click.echo(f"   {i:>2}. {p.phase_id:<26}", nl=False)
        click.secho(f"{p.on_error:<7}", fg=policy_color[p.on_error], nl=False)
        click.echo(f" {p.title}")
    click.echo()


@cli.command("node-version")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def node_version(ctx: click.Context, as_json: bool) -> None:
    """Discover the Node.js version a run would install."""
    from swarmprep.core.services.provision.detection.listing import discover_latest_version
    from swarmprep.core.services.provision.domain.node_version import (
        VersionDiscoveryError,
        major_version,
    )

    config = _load_config_or_exit(ctx)
    node = config.node

    try:
        version = discover_latest_version(
            node.listing_url,
            strategy=node.version_strategy,
            pattern=node.version_pattern,
            timeout=node.fetch_timeout,
        )
    except VersionDiscoveryError as e:
        if as_json:
            click.echo(json.dumps({"error": str(e)}, indent=2))
        else:
            show(str(e), "error")
        sys.exit(1)

    major = major_version(version)
    if as_json:
        click.echo(json.dumps({
            "version": version,
            "major": major,
            "strategy": node.version_strategy,
            "setup_url": node.nodesource_setup_url.format(major=major),
        }, indent=2))
        return

    show(f"Latest Node.js version is {version} (NodeSource line {major}.x)")


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def check(ctx: click.Context, as_json: bool) -> None:
    """Report node/npm, the virtual environment and CUDA (read-only)."""
    from swarmprep.core.use_cases.check import check_host

    config = _load_config_or_exit(ctx)
    result = check_host(config, Path.cwd())

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    for tool, version in result.tools.items():
        if version:
            show(f"{tool} {version}")
        else:
            show(f"{tool} not found in PATH", "error")

    if result.venv_exists:
        show(f"Virtual environment {result.venv_path}")
    else:
        show(f"No virtual environment at {result.venv_path}", "error")

    if result.gpu:
        click.echo(
            f"   GPU: {result.gpu.get('model') or '?'} "
            f"(driver {result.gpu.get('driver_version')}, CUDA {result.gpu.get('cuda_version')})"
        )
    if result.cuda_available is not None:
        click.echo(f"CUDA available: {result.cuda_available}")

    if not result.ready:
        sys.exit(1)


# ── Register sub-command groups from swarmprep/ui/cli/ ──────────

from swarmprep.ui.cli.history import history  # noqa: E402

cli.add_command(history)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
