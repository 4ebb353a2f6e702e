"""flowbridge CLI entry point: Click group with subcommands."""

import logging

import click

from flowbridge import __version__


@click.group()
@click.version_option(version=__version__, prog_name="flowbridge")
@click.option("-v", "--verbose", is_flag=True, help="Log pipeline progress to stderr.")
def cli(verbose: bool) -> None:
    """flowbridge - transcode HTML + CSS into a Webflow paste payload."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Import and register subcommands
from flowbridge.cli.transcode import transcode  # noqa: E402
from flowbridge.cli.route import route  # noqa: E402
from flowbridge.cli.diagnose import diagnose  # noqa: E402
from flowbridge.cli.inspect import inspect  # noqa: E402

cli.add_command(transcode)
cli.add_command(route)
cli.add_command(diagnose)
cli.add_command(inspect)
