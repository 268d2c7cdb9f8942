"""Upgrade command implementation."""

import click
from rich.console import Console

from upkeep.core.config import get_config
from upkeep.core.errors import NoSourcesConfigured, UnsupportedFeature
from upkeep.core.pipeline import UpgradePipeline, RunReport, UP_TO_DATE, CANCELLED
from upkeep.core.source import ManifestSource
from upkeep.terminal import TerminalSurface

console = Console()


def print_report(report: RunReport) -> None:
    """Summarize a pipeline run."""
    if report.error:
        console.print(f"[red]Error:[/red] {report.error}")
    elif report.status == UP_TO_DATE:
        console.print("[green]All packages are up to date![/green]")
    elif report.status == CANCELLED:
        console.print("[yellow]Cancelled[/yellow]")

    if report.upgraded:
        console.print(f"[green]✓[/green] Upgraded: {', '.join(report.upgraded)}")

    if report.failures:
        console.print(f"\n[red]{len(report.failures)} upgrade(s) failed:[/red]")
        for failure in report.failures:
            note = " (new version installed)" if failure.new_version_installed else ""
            console.print(f"  [red]✗[/red] {failure}{note}")


@click.command()
@click.option("--all", "-a", "upgrade_all", is_flag=True, help="Upgrade everything without asking")
@click.option("--vc/--no-vc", "include_vc", default=None, help="Include version-controlled packages")
@click.option("--no-refresh", is_flag=True, help="Use the cached index as is")
def upgrade(upgrade_all: bool, include_vc: bool | None, no_refresh: bool):
    """Choose outdated packages and upgrade them."""
    config = get_config()
    config.ensure_dirs()

    pipeline = UpgradePipeline(
        ManifestSource(config),
        config,
        surface=TerminalSurface(console),
    )

    try:
        report = pipeline.run(
            interactive=not upgrade_all,
            refresh=not no_refresh,
            include_vc=include_vc,
        )
    except (NoSourcesConfigured, UnsupportedFeature) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    print_report(report)
    if not report.ok:
        raise SystemExit(1)
