"""
CLI for fsident.

Provides command-line access to URI conversion, candidate classification
and configured crawl roots.
"""

from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from fsident.core import (
    ConversionError,
    ExclusionEngine,
    UserSettings,
    configure_logging,
    configured_roots,
    is_indirection_file,
    last_modified,
    load_settings,
    path_to_uri,
    resolve_target,
    uri_to_path_string,
)

# Initialize Rich Console
console = Console()

app = typer.Typer(
    name="fsident",
    help="Filesystem identity - canonical file URIs and crawl signals",
    add_completion=False,
)

_CONFIG_OPTION = typer.Option(None, "--config", "-c", help="Settings file (.yaml, .yml or .json)")


def get_settings(config_path: Optional[Path] = None) -> UserSettings:
    """Load .env, the settings snapshot and logging configuration."""
    load_dotenv()
    settings = load_settings(config_path)
    configure_logging(settings.logging)
    return settings


@app.command()
def uri(
    paths: list[Path] = typer.Argument(..., help="Paths to convert"),
    config: Optional[Path] = _CONFIG_OPTION,
):
    """Print the canonical file URI of each path."""
    get_settings(config)
    for path in paths:
        console.print(path_to_uri(path.absolute()), markup=False, highlight=False, soft_wrap=True)


@app.command()
def path(
    uris: list[str] = typer.Argument(..., help="File URIs to convert"),
    config: Optional[Path] = _CONFIG_OPTION,
):
    """Print the native path addressed by each file URI."""
    get_settings(config)
    failed = False
    for value in uris:
        try:
            console.print(uri_to_path_string(value), markup=False, highlight=False, soft_wrap=True)
        except ConversionError as e:
            console.print(f"[bold red]Error:[/bold red] {e}", highlight=False)
            failed = True

    if failed:
        raise typer.Exit(1)


@app.command()
def classify(
    target: Path = typer.Argument(..., help="File or directory to classify"),
    root: Optional[Path] = typer.Option(
        None, "--root", "-r", help="Topmost directory whose .gitignore applies"
    ),
    config: Optional[Path] = _CONFIG_OPTION,
):
    """Show the crawl signals for one filesystem entry."""
    get_settings(config)
    target = target.absolute()
    is_dir = target.is_dir()

    engine = ExclusionEngine()
    engine.load_for_path(target, root=root)
    classification = engine.classify(target)

    grid = Table.grid(padding=1)
    grid.add_column(style="bold")
    grid.add_column()

    grid.add_row("URI:", Text(path_to_uri(target)))
    grid.add_row("Last Modified:", last_modified(target).isoformat())
    grid.add_row("Hidden:", str(classification.is_hidden))
    grid.add_row("Ignore File:", str(classification.is_ignore_definition))
    rule = engine.deciding_rule(target, is_dir=is_dir)
    grid.add_row("Ignored:", str(rule is not None and not rule[1].negation))
    if rule is not None:
        rule_set, pattern = rule
        grid.add_row("Rule:", Text(f"{rule_set.source_path}:{pattern.line_number}: {pattern.raw}"))

    if is_indirection_file(target):
        shortcut_target = resolve_target(target)
        grid.add_row(
            "Shortcut Target:",
            Text(str(shortcut_target)) if shortcut_target is not None else "[dim]unresolved[/dim]",
        )

    console.print(Panel(grid, title=Text(str(target)), border_style="blue", expand=False))


@app.command()
def roots(
    config: Optional[Path] = _CONFIG_OPTION,
):
    """List the configured root directories to crawl."""
    try:
        settings = get_settings(config)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    watched = configured_roots(settings)
    if not watched:
        console.print("[dim]No watched paths configured[/dim]")
        return

    for root_path in watched:
        console.print(str(root_path), markup=False, highlight=False, soft_wrap=True)


if __name__ == "__main__":
    app()
