"""Typer-based CLI for selecting and running affected Clojure tests."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from . import __version__
from .cli_groups import config_grp
from .config import DEFAULT_SELECTOR
from .config_manager import config_path, load_settings, save_default_config, settings_to_dict
from .errors import SearchUnavailableError, TestscopeError
from .models import STATUS_NOTHING_CHANGED, VariantPlan
from .orchestrator import ImpactOrchestrator
from .variants import LANGUAGES, variants_for

console = Console()

app = typer.Typer(
    help="🎯 testscope — run only the Clojure tests a change can affect.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(config_grp, name="config")


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
        force=True,
    )


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"testscope v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log search and closure details."),
):
    """testscope: impact-based test selection for clj and cljs projects."""
    setup_logging(verbose)


def _check_lang(lang: str) -> str:
    if lang not in LANGUAGES:
        raise typer.BadParameter(f"Language must be one of: {', '.join(LANGUAGES)}")
    return lang


def _orchestrator(project: Path, base: Optional[str]) -> ImpactOrchestrator:
    project_dir = project.resolve()
    settings = load_settings(project_dir)
    if base:
        settings.base_ref = base
    return ImpactOrchestrator(project_dir, settings)


def _report(plan: VariantPlan) -> None:
    variant = plan.variant
    if plan.status == STATUS_NOTHING_CHANGED:
        exts = "/".join(variant.extensions)
        typer.echo(f"[{variant.name}] No changed {exts} files under {variant.source_root}/")
        return

    typer.echo(f"[{variant.name}] Changed namespaces: {', '.join(plan.changed_modules)}")
    if not plan.ready:
        typer.echo(f"[{variant.name}] No test files found for affected namespaces")
        return
    typer.echo(f"[{variant.name}] Affected tests: {', '.join(plan.tests)}")


def _fail(exc: TestscopeError) -> None:
    if isinstance(exc, SearchUnavailableError):
        console.print(f"[red]✗[/red] {escape(str(exc))}", soft_wrap=True)
    else:
        console.print(f"[red]✗[/red] Error: {escape(str(exc))}", soft_wrap=True)
    raise typer.Exit(code=1)


@app.command("run")
def run(
    selector: str = typer.Argument(DEFAULT_SELECTOR, help="Test selector passed to lein eftest."),
    project: Path = typer.Option(Path("."), "--project", "-p", exists=True, file_okay=False, help="Project directory."),
    lang: str = typer.Option("both", "--lang", "-l", help="Language variant: clj, cljs or both."),
    base: Optional[str] = typer.Option(None, "--base", "-b", help="Git ref to diff against."),
    files: Optional[List[str]] = typer.Option(
        None, "--file", "-f", help="Changed file (repeatable); skips git."
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Resolve tests without running them."),
):
    """Run the test namespaces affected by changes since --base.

    Example:
      testscope run
      testscope run :integration --lang clj
      testscope run -f src/clj/app/core.clj --dry-run
    """
    _check_lang(lang)
    orchestrator = _orchestrator(project, base)
    variants = variants_for(lang, orchestrator.settings)

    def announce(plan: VariantPlan, effective: str) -> None:
        name = plan.variant.name
        if effective != selector:
            console.print(
                f"[yellow]⚠️  Selector {selector} is not supported for {name}; "
                f"running all affected tests.[/yellow]",
                soft_wrap=True,
            )
        typer.echo(f"[{name}] Running tests for: {' '.join(plan.tests)}")

    try:
        outcomes = orchestrator.run(
            variants,
            selector,
            files or None,
            dry_run=dry_run,
            on_plan=_report,
            on_execute=announce,
        )
    except TestscopeError as exc:
        _fail(exc)

    codes = [code for _, code in outcomes if code != 0]
    raise typer.Exit(code=codes[0] if codes else 0)


@app.command("plan")
def plan(
    project: Path = typer.Option(Path("."), "--project", "-p", exists=True, file_okay=False, help="Project directory."),
    lang: str = typer.Option("both", "--lang", "-l", help="Language variant: clj, cljs or both."),
    base: Optional[str] = typer.Option(None, "--base", "-b", help="Git ref to diff against."),
    files: Optional[List[str]] = typer.Option(
        None, "--file", "-f", help="Changed file (repeatable); skips git."
    ),
):
    """Show affected namespaces and their test namespaces without running anything."""
    _check_lang(lang)
    orchestrator = _orchestrator(project, base)

    try:
        for variant in variants_for(lang, orchestrator.settings):
            result = orchestrator.plan(variant, files or None)
            _report(result)
            if result.status == STATUS_NOTHING_CHANGED:
                continue

            table = Table(
                title=f"{variant.name}: {len(result.affected)} affected, {result.rounds} round(s)",
                show_header=True,
            )
            table.add_column("Namespace", style="cyan")
            table.add_column("Test namespace")
            table.add_column("Found", justify="center")
            for candidate in result.candidates:
                mark = "[green]✓[/green]" if candidate.exists else "[dim]-[/dim]"
                table.add_row(candidate.module, candidate.test_module, mark)
            console.print(table)
    except TestscopeError as exc:
        _fail(exc)


@config_grp.command("show")
def config_show(
    project: Path = typer.Option(Path("."), "--project", "-p", exists=True, file_okay=False, help="Project directory."),
):
    """Print the effective configuration for a project."""
    project_dir = project.resolve()
    path = config_path(project_dir)
    source = str(path) if path.exists() else "defaults"
    console.print(f"[bold]Configuration[/bold] ({source})")

    for section, values in settings_to_dict(load_settings(project_dir)).items():
        typer.echo(f"[{section}]")
        for key, value in values.items():
            if isinstance(value, list):
                value = " ".join(value)
            typer.echo(f"  {key} = {value}")


@config_grp.command("init")
def config_init(
    project: Path = typer.Option(Path("."), "--project", "-p", exists=True, file_okay=False, help="Project directory."),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file."),
):
    """Write a default testscope.toml into the project."""
    project_dir = project.resolve()
    if save_default_config(project_dir, overwrite=force):
        typer.echo(f"Wrote {config_path(project_dir)}")
    else:
        typer.echo(f"{config_path(project_dir)} already exists (use --force to overwrite).")


if __name__ == "__main__":
    app()
