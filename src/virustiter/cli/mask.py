"""virustiter mask — label nuclei in a nuclear-stain image."""

from __future__ import annotations

from pathlib import Path

import click

from virustiter.cli.utils import console, error_handler, make_progress, parse_which


@click.command()
@click.argument("image", type=click.Path(exists=True, dir_okay=False))
@click.option("--width", type=float, default=36, show_default=True,
              help="Largest nuclear width in pixels.")
@click.option("--offset", type=float, default=0.05, show_default=True,
              help="Adaptive threshold offset (0.01 for low contrast).")
@click.option("--gamma", type=float, default=1.0, show_default=True,
              help="Gamma correction; values below 1 favor dim nuclei.")
@click.option("--sigma", type=float, default=2, show_default=True,
              help="Smoothing radius (2 routine, 5 for finely detailed images).")
@click.option("--which", default=None,
              help="Nuclear,target[,per-field] frame positions for image pair stacks, e.g. 1,2,2.")
@click.option("-o", "--output", type=click.Path(dir_okay=False), default=None,
              help="Write the label image to this TIFF file.")
@error_handler
def mask(
    image: str,
    width: float,
    offset: float,
    gamma: float,
    sigma: float,
    which: str | None,
    output: str | None,
) -> None:
    """Segment nuclei and report the number of objects."""
    from virustiter.io import read_image, split_pair, write_tiff
    from virustiter.segment import NuclearMaskBuilder, NucMaskParams

    data = read_image(Path(image))
    if which is not None:
        data, _ = split_pair(data, parse_which(which))

    builder = NuclearMaskBuilder(
        NucMaskParams(width=width, offset=offset, gamma=gamma, sigma=sigma)
    )
    with make_progress() as progress:
        task = progress.add_task("Segmenting...", total=None)
        result = builder.build(data)
        progress.update(task, total=1, completed=1)

    console.print("[green]Segmentation complete[/green]")
    console.print(f"  Image shape: {tuple(result.shape)}")
    console.print(f"  Nuclei found: {result.n_objects}")
    if result.degenerate:
        console.print(
            "[yellow]Warning:[/yellow] threshold left a frame entirely "
            "foreground or background; try a different --offset or --width."
        )
    if output is not None:
        write_tiff(Path(output), result.labels)
        console.print(f"  Labels written to {output}")
