"""Schedule command implementation."""

import click
from rich.console import Console

from upkeep.commands.upgrade import print_report
from upkeep.core.config import get_config
from upkeep.core.errors import InvalidTimeFormat
from upkeep.core.pipeline import UpgradePipeline
from upkeep.core.scheduler import Scheduler
from upkeep.core.source import ManifestSource
from upkeep.terminal import TerminalSurface

console = Console()


@click.command()
@click.option("--at", "at_time", help="Time of day, e.g. 07:00 or 7:00am (default from config)")
@click.option("--unattended", is_flag=True, help="Upgrade everything without asking")
def schedule(at_time: str | None, unattended: bool):
    """Run upgrades every day at a fixed time until interrupted."""
    config = get_config()
    config.ensure_dirs()
    if unattended:
        config.unattended = True

    pipeline = UpgradePipeline(
        ManifestSource(config),
        config,
        surface=TerminalSurface(console),
    )

    def on_tick():
        print_report(pipeline.tick())

    try:
        handle = Scheduler().arm(at_time or config.schedule_time, on_tick)
    except InvalidTimeFormat as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    mode = "unattended" if config.unattended else "interactive"
    console.print(
        f"[blue]Daily {mode} upgrade at {handle.entry}[/blue], "
        f"next run {handle.next_fire:%Y-%m-%d %H:%M}"
    )
    console.print("[dim]Press Ctrl-C to stop[/dim]")

    try:
        while not handle.cancelled:
            handle.join(1.0)
    except KeyboardInterrupt:
        handle.cancel()
        console.print("\nSchedule stopped")
