"""virustiter check — summarize a directory of paired images."""

from __future__ import annotations

from pathlib import Path

import click
from rich.table import Table

from virustiter.cli.utils import console, error_handler, parse_which


@click.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False))
@click.option("--type", "image_type", default="tiff", show_default=True,
              type=click.Choice(["tif", "tiff", "jpeg", "jpg", "png"], case_sensitive=False),
              help="Image file type.")
@click.option("--pattern", default=None, help="Regex selecting image files.")
@click.option("--which", default="1,2,2", show_default=True,
              help="Nuclear,target[,per-field] frame positions.")
@error_handler
def check(path: str, image_type: str, pattern: str | None, which: str) -> None:
    """Check that image groups hold complete nuclear/target pairs."""
    from virustiter.io import check_images

    result = check_images(Path(path), type=image_type, which=parse_which(which), pattern=pattern)

    table = Table(title=f"Image groups by {result.key}")
    table.add_column(result.key.capitalize())
    table.add_column("Files", justify="right")
    table.add_column("Frames", justify="right")
    table.add_column("Fields", justify="right")
    for name, files in result.groups.items():
        table.add_row(
            name, str(len(files)), str(result.n_frames[name]), str(result.n_fields[name]),
        )
    console.print(table)
    console.print(f"Found {len(result.groups)} groups of images")
