"""
Status lines — the colored, iconographic progress output.

Every line is magenta + bold, tagged with an icon for its level, and
written to stdout (errors included; stderr carries only logging).
"""

from __future__ import annotations

import click

ICONS = {
    "success": "✅",
    "progress": "⏳",
    "warning": "⚠️ ",
    "error": "❌",
}


def show(message: str, level: str = "success") -> None:
    """Print one status line. Unknown levels render as success."""
    icon = ICONS.get(level, ICONS["success"])
    click.secho(f"{icon} {message}", fg="magenta", bold=True)
