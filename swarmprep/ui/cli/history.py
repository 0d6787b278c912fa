"""
CLI command for the provisioning run ledger.
"""

from __future__ import annotations

import json
from pathlib import Path

import click


@click.command()
@click.option("-n", "count", default=10, show_default=True, help="Number of runs to show.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option(
    "--dir", "work_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Working directory of the runs (default: cwd).",
)
def history(count: int, as_json: bool, work_dir: Path | None) -> None:
    """Show recent provisioning runs."""
    from swarmprep.core.persistence.audit import RunLedger

    ledger = RunLedger((work_dir or Path.cwd()).resolve())
    records = ledger.recent(count)

    if as_json:
        click.echo(json.dumps([r.model_dump(mode="json") for r in records], indent=2))
        return

    if not records:
        click.secho(f"No runs recorded in {ledger.path}", fg="yellow")
        return

    click.secho(f"📜 Last {len(records)} run(s):", fg="cyan", bold=True)
    for r in records:
        color = "green" if r.status == "ok" else "red"
        mode = " [dry-run]" if r.dry_run else ""
        node = f" node {r.node_version}" if r.node_version else ""
        click.secho(f"   {r.timestamp}  {r.status:<6}", fg=color, nl=False)
        click.echo(f"{mode}{node}  {r.phases_succeeded}/{r.phases_total} phases")
        if r.cuda_available is not None:
            click.echo(f"     CUDA available: {r.cuda_available}")
        if r.aborted_at:
            click.echo(f"     ✗ aborted at {r.aborted_at}")
            for err in r.errors[:3]:
                click.echo(f"     │ {err}")
