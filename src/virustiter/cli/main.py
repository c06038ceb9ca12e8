"""virustiter CLI — top-level Click group."""

from __future__ import annotations

import logging

import click


@click.group()
@click.version_option(package_name="virustiter")
@click.option("--verbose", "-v", is_flag=True, help="Show progress logs and full tracebacks on errors.")
def cli(verbose: bool) -> None:
    """virustiter — viral titer from paired fluorescence micrographs."""
    from virustiter.cli import utils

    utils.verbose = verbose
    if verbose:
        from rich.logging import RichHandler

        logging.basicConfig(
            level=logging.INFO,
            format="%(message)s",
            handlers=[RichHandler(console=utils.console, show_path=False)],
        )


def _register_commands() -> None:
    """Register all subcommands — imports deferred to avoid loading heavy deps at startup."""
    from virustiter.cli.check import check
    from virustiter.cli.fit import fit
    from virustiter.cli.mask import mask
    from virustiter.cli.tally import tally

    cli.add_command(check)
    cli.add_command(fit)
    cli.add_command(mask)
    cli.add_command(tally)


_register_commands()
