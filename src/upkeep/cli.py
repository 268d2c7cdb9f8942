"""CLI entry point for upkeep."""

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from upkeep import __version__
from upkeep.core.config import get_config
from upkeep.core.errors import ConfigError
from upkeep.commands import list_cmd, outdated, refresh, upgrade, schedule

console = Console()


def configure_logging(verbose: bool) -> None:
    """Send upkeep's log records to stderr through rich."""
    logger = logging.getLogger("upkeep")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(console=Console(stderr=True), show_path=verbose)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)


@click.group()
@click.version_option(version=__version__, prog_name="upkeep")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def main(verbose: bool):
    """Upkeep - keep installed packages up to date.

    Compares installed packages with the configured package indexes,
    lets you pick which ones to upgrade, and can repeat this every day.

    Examples:

        upkeep outdated

        upkeep upgrade

        upkeep upgrade --all

        upkeep schedule --at 7:00am
    """
    configure_logging(verbose)
    try:
        get_config()
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)


# Register commands
main.add_command(list_cmd.list_packages)
main.add_command(outdated.outdated)
main.add_command(refresh.refresh)
main.add_command(upgrade.upgrade)
main.add_command(schedule.schedule)


if __name__ == "__main__":
    main()
