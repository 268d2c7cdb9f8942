"""List command implementation."""

import click
from rich.console import Console
from rich.table import Table

from upkeep.core.config import get_config
from upkeep.core.manifest import Manifest

console = Console()


@click.command("list")
def list_packages():
    """List all installed packages."""
    manifest = Manifest(get_config().manifest_path)
    packages = manifest.list_packages()

    if not packages:
        console.print("No packages installed")
        raise SystemExit(0)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Package")
    table.add_column("Version")
    table.add_column("Source")
    table.add_column("Selected")

    for pkg in packages:
        latest = pkg.latest
        table.add_row(
            pkg.name,
            str(latest.version) if latest else "",
            pkg.kind.value,
            "yes" if pkg.selected else "",
        )

    console.print(table)
