"""Refresh command implementation."""

import click
from rich.console import Console

from upkeep.core.config import get_config
from upkeep.core.errors import IoFailure, NoSourcesConfigured
from upkeep.core.pipeline import UpgradePipeline
from upkeep.core.source import ManifestSource

console = Console()


@click.command()
@click.option("--force", "-f", is_flag=True, help="Refresh even if the index is recent")
def refresh(force: bool):
    """Refresh the package index if it is older than the configured interval."""
    config = get_config()
    config.ensure_dirs()

    pipeline = UpgradePipeline(ManifestSource(config), config)

    try:
        refreshed = pipeline.refresh_if_stale(force=force)
    except NoSourcesConfigured as e:
        console.print(f"[red]Error:[/red] {e}")
        console.print(f"[dim]Add index URLs under 'sources' in {config.settings_path}[/dim]")
        raise SystemExit(1)
    except IoFailure as e:
        console.print(f"[red]Refresh failed:[/red] {e}")
        raise SystemExit(1)

    if refreshed:
        console.print("[green]✓[/green] Package index refreshed")
    else:
        console.print(
            f"Package index is less than {config.refresh_interval_days} day(s) old, "
            "use --force to refresh anyway"
        )
