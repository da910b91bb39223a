"""arborlog CLI: inspect and exercise logger configurations."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from arborlog.config import ArborSettings
from arborlog.context import LoggerContext
from arborlog.core.configurator import ConfigurationBuilder
from arborlog.core.diagnostics import DiagnosticCollector
from arborlog.core.hierarchy import Hierarchy
from arborlog.core.logger import Logger
from arborlog.core.sources import load_configuration
from arborlog.errors import ConfigurationError
from arborlog.models.enums import DiagnosticSeverity, Level

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="arborlog",
    help="Inspect and exercise hierarchical logger configurations.",
    no_args_is_help=True,
)
console = Console()

# Global state set by the callback
_verbose: bool = False


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """arborlog: hierarchical logging configuration tool."""
    global _verbose
    _verbose = verbose


def _setup() -> ArborSettings:
    settings = ArborSettings.load(Path("."))
    from arborlog.logging_setup import setup_logging
    setup_logging(settings.logging, verbose=_verbose)
    return settings


def _build(config_path: Path) -> tuple[Hierarchy, DiagnosticCollector]:
    """Load ``config_path`` into a scratch hierarchy, collecting diagnostics."""
    collector = DiagnosticCollector()
    try:
        config_tree = load_configuration(config_path, collector)
    except ConfigurationError as exc:
        logger.debug("Configuration load failed", exc_info=True)
        console.print(f"[red]Configuration failed: {escape(str(exc))}[/red]")
        raise typer.Exit(1)

    hierarchy = Hierarchy(collector)
    ConfigurationBuilder(diagnostics=collector).configure(hierarchy, config_tree)
    return hierarchy, collector


@app.command()
def check(
    config_path: Path = typer.Argument(help="Configuration file (.toml, .json or .xml)"),
    strict: bool = typer.Option(False, "--strict", help="Fail on any diagnostic"),
) -> None:
    """Validate a configuration file and list its diagnostics."""
    _setup()
    hierarchy, collector = _build(config_path)
    hierarchy.shutdown()

    if not collector.diagnostics:
        console.print(
            f"[green]Configuration OK:[/green] {len(hierarchy.current_loggers())} logger(s), "
            f"{len(hierarchy.appenders())} attached appender(s)"
        )
        return

    table = Table(title="Diagnostics")
    table.add_column("Severity")
    table.add_column("Source", style="dim")
    table.add_column("Message")
    for diagnostic in collector.diagnostics:
        style = _severity_color(diagnostic.severity)
        table.add_row(
            f"[{style}]{diagnostic.severity.value}[/{style}]",
            escape(diagnostic.source),
            escape(diagnostic.message),
        )
    console.print(table)

    if strict:
        console.print(f"[red]{len(collector)} diagnostic(s) reported[/red]")
        raise typer.Exit(1)


@app.command()
def tree(
    config_path: Path = typer.Argument(help="Configuration file (.toml, .json or .xml)"),
) -> None:
    """Show the logger tree a configuration file builds."""
    _setup()
    hierarchy, _ = _build(config_path)

    children: dict[str, list[Logger]] = {}
    for node in hierarchy.current_loggers():
        if node.parent is not None:
            children.setdefault(node.parent.name, []).append(node)

    root = hierarchy.get_root_logger()
    display = Tree(_describe(root))
    _add_children(display, root, children)
    console.print(display)
    hierarchy.shutdown()


@app.command()
def emit(
    config_path: Path = typer.Argument(help="Configuration file (.toml, .json or .xml)"),
    logger_name: str = typer.Argument(help="Logger to log through, e.g. 'app.db'"),
    level: str = typer.Argument(help="Level: trace, debug, info, warn, error or fatal"),
    message: str = typer.Argument(help="Message to log"),
) -> None:
    """Configure from a file and log one message."""
    parsed = Level.from_name(level)
    if parsed is None or parsed in (Level.ALL, Level.OFF):
        console.print(f"[red]Invalid level '{escape(level)}'. Must be: trace, debug, info, warn, error or fatal[/red]")
        raise typer.Exit(1)

    settings = _setup()
    with LoggerContext(settings=settings) as context:
        try:
            context.configure(config_path)
        except ConfigurationError as exc:
            console.print(f"[red]Configuration failed: {escape(str(exc))}[/red]")
            raise typer.Exit(1)
        context.get_logger(logger_name).log(parsed, message)


def _add_children(branch: Tree, node: Logger, children: dict[str, list[Logger]]) -> None:
    for child in children.get(node.name, []):
        _add_children(branch.add(_describe(child)), child, children)


def _describe(node: Logger) -> str:
    if node.level is not None:
        level = f"[bold]{node.level}[/bold]"
    else:
        level = f"[dim]{node.get_effective_level()} (inherited)[/dim]"
    parts = [f"[cyan]{escape(node.name)}[/cyan]", level]
    if not node.additive:
        parts.append("[yellow]additivity off[/yellow]")
    if node.appenders:
        parts.append("-> " + escape(", ".join(a.name for a in node.appenders)))
    return " ".join(parts)


def _severity_color(severity: DiagnosticSeverity) -> str:
    return {
        DiagnosticSeverity.NOTICE: "blue",
        DiagnosticSeverity.WARNING: "yellow",
        DiagnosticSeverity.ERROR: "red",
    }.get(severity, "white")


if __name__ == "__main__":
    app()
