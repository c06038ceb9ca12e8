"""virustiter tally — aggregate a classification table by group."""

from __future__ import annotations

from pathlib import Path

import click

from virustiter.cli.utils import console, error_handler


@click.command()
@click.argument("table", type=click.Path(exists=True, dir_okay=False))
@click.option("--var", default=None, help="Dose column. Defaults to 'moi' then 'x'.")
@click.option("--by", default=None, help="Grouping column. Defaults to 'well' or 'file'.")
@click.option("--param", default="positive", show_default=True,
              help="Boolean column scored as positive.")
@click.option("--phenotype", type=click.Path(exists=True, dir_okay=False), default=None,
              help="CSV of phenotype columns joined by grouping key.")
@click.option("-o", "--output", type=click.Path(dir_okay=False), default=None,
              help="Write the tally to this CSV file.")
@error_handler
def tally(
    table: str,
    var: str | None,
    by: str | None,
    param: str,
    phenotype: str | None,
    output: str | None,
) -> None:
    """Count positive and negative objects per well or file."""
    from virustiter.io import read_phenotype, read_table
    from virustiter.titer import get_tally

    df = read_table(Path(table))
    pheno = None
    if phenotype is not None:
        pheno = read_phenotype(Path(phenotype))
    result = get_tally(df, var=var, by=by, phenotype=pheno, param=param)

    if output is not None:
        result.to_csv(Path(output), index=False)
        console.print(f"[green]Tally of {len(result)} groups written to {output}[/green]")
    else:
        console.print(result.to_string(index=False))
