"""Command hierarchy groups for organized CLI experience.

Provides logical grouping of commands under:
  testscope config   — Project configuration
"""

from __future__ import annotations

import typer

# ── Configuration group ──────────────────────────────────────
config_grp = typer.Typer(
    help="⚙️  Configuration — show or create testscope.toml.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
