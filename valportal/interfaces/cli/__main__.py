"""Entry point for the ``valportal`` command.

Aggregates the subcommands of ``valportal.interfaces.cli``; also runnable as
``python -m valportal.interfaces.cli``.
"""

import logging

import click

from valportal import __version__
from valportal.infrastructure.observability import configure_logging

from .config_cmd import config
from .docs import docs
from .resources import resources
from .serve import serve


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name="valportal")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """VAL portal command-line interface."""
    configure_logging(level=logging.DEBUG if verbose else logging.INFO)


cli.add_command(serve)
cli.add_command(resources)
cli.add_command(config)
cli.add_command(docs)


if __name__ == "__main__":
    cli()
