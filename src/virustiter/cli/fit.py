"""virustiter fit — fit a dose-response curve and report the titer."""

from __future__ import annotations

from pathlib import Path

import click

from virustiter.cli.utils import console, error_handler


@click.command()
@click.argument("tally", type=click.Path(exists=True, dir_okay=False))
@click.option("--link", default="cloglog", show_default=True,
              type=click.Choice(["cloglog", "logit"]), help="GLM link function.")
@click.option("--target", type=float, default=None,
              help="Response fraction for the titer. Defaults to 1 - exp(-1).")
@click.option("--unit", default=None, help="Dose unit shown in the report.")
@click.option("--plot", "plot_path", type=click.Path(dir_okay=False), default=None,
              help="Save a diagnostic plot to this image file.")
@error_handler
def fit(
    tally: str,
    link: str,
    target: float | None,
    unit: str | None,
    plot_path: str | None,
) -> None:
    """Fit infected fraction against dose and report the titer."""
    from virustiter.io import read_table
    from virustiter.titer import DEFAULT_TARGET_FRACTION, get_fit

    target_fraction = DEFAULT_TARGET_FRACTION if target is None else target
    model = get_fit(read_table(Path(tally)), link=link)
    summary = model.summary(target_fraction)

    unit_text = f" {unit}" if unit else ""
    console.print(f"[green]Fit complete[/green] ({summary['link']} link, "
                  f"{summary['n_groups']} groups)")
    if summary["n_excluded"]:
        console.print(f"  Excluded (dose <= 0): {summary['n_excluded']}")
    console.print(f"  Intercept: {summary['intercept']:.4g} (SE {summary['se_intercept']:.3g})")
    console.print(f"  Slope: {summary['slope']:.4g} (SE {summary['se_slope']:.3g})")
    console.print(f"  Residual deviance: {summary['deviance']:.4g} on {summary['df_resid']} df")
    console.print(
        f"  Dose at {summary['target_fraction']:.3f} response: "
        f"{summary['estimate']:0.3g}{unit_text} "
        f"(95% CI: {summary['lower']:0.3g}-{summary['upper']:0.3g})"
    )

    if plot_path is not None:
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        from virustiter.titer.plot import plot_fit

        ax = plot_fit(model, unit=unit, target_fraction=target_fraction)
        ax.figure.savefig(plot_path, dpi=150, bbox_inches="tight")
        plt.close(ax.figure)
        console.print(f"  Plot written to {plot_path}")
