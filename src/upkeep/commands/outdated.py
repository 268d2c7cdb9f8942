"""Outdated command implementation."""

import click
from rich.console import Console
from rich.table import Table

from upkeep.core.config import get_config
from upkeep.core.differ import compute_candidates
from upkeep.core.errors import UnsupportedFeature
from upkeep.core.source import ManifestSource

console = Console()


@click.command()
@click.option("--vc/--no-vc", "include_vc", default=None, help="Include version-controlled packages")
def outdated(include_vc: bool | None):
    """List packages with available upgrades."""
    config = get_config()
    source = ManifestSource(config)

    if include_vc is None:
        include_vc = config.version_control and source.supports_version_control()

    try:
        candidates = compute_candidates(source, include_vc)
    except UnsupportedFeature as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    if not candidates:
        console.print("[green]All packages are up to date![/green]")
        raise SystemExit(0)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Package")
    table.add_column("Installed")
    table.add_column("Available")

    for candidate in candidates:
        available = (
            "(vc)" if candidate.available is None
            else f"[green]{candidate.available.version}[/green]"
        )
        table.add_row(candidate.name, str(candidate.installed.version), available)

    console.print(table)
    console.print(f"\n{len(candidates)} package(s) can be upgraded")
    console.print("[dim]Run 'upkeep upgrade' to choose which to upgrade[/dim]")
