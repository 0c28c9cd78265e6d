"""CLI entrypoint."""

import sys

import click
from loguru import logger

from .commands.package import package
from .commands.validate import validate
from .commands.release import release

LOG_FORMAT = "<level>{level: <7}</level> {message}"


def configure_logging(verbose: bool) -> None:
    """Single stderr sink with one line per diagnostic."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO", format=LOG_FORMAT)


@click.group()
@click.version_option(version="1.0.0", prog_name="skillpack")
@click.option("--verbose", "-v", is_flag=True, help="Show debug output")
def cli(verbose: bool):
    """Skillpack CLI - package skills into versioned archives and release them."""
    configure_logging(verbose)


cli.add_command(package)
cli.add_command(validate)
cli.add_command(release)


if __name__ == "__main__":
    cli()
