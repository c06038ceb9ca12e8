"""Diagnostic plot of a dose-response fit."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Any

import numpy as np

from virustiter.titer.fit import DEFAULT_TARGET_FRACTION, DoseResponseFit

if TYPE_CHECKING:
    from matplotlib.axes import Axes


def format_titer(fit: DoseResponseFit, unit: str | None = None,
                 target_fraction: float = DEFAULT_TARGET_FRACTION) -> str:
    """Text such as ``"12.3 ul (95% CI:9.8-15.4)"`` for the inverse-predicted dose."""
    cf = fit.inverse_dose(target_fraction)
    unit_text = f" {unit}" if unit else ""
    return (
        f"{cf.estimate:0.3g}{unit_text} "
        f"({cf.level:.0%} CI:{cf.lower:0.3g}-{cf.upper:0.3g})"
    )


def plot_fit(
    fit: DoseResponseFit,
    ax: Axes | None = None,
    main: str | None = None,
    xlab: str | None = None,
    ylab: str | None = None,
    ylim: tuple[float, float] | None = None,
    pch_col: str = "black",
    line_col: str = "red",
    ref_col: str = "blue",
    unit: str | None = None,
    target_fraction: float = DEFAULT_TARGET_FRACTION,
    n_points: int = 101,
    **kwargs: Any,
) -> Axes:
    """Plot observed fractions, the fitted curve, and the titer reference lines.

    Observed points with a positive dose are drawn on a log dose axis. The
    fitted curve is evaluated on ``n_points`` log-spaced doses across the
    observed range. Dashed lines run from the left edge at the target
    response to the inverse-predicted dose and down to the axis.

    Args:
        fit: Fitted model from ``get_fit``.
        ax: Axes to draw into; a new figure is created if None.
        main: Title. Defaults to the ``directory`` column of the fit data,
            else today's date.
        xlab: X label. Defaults to ``"One IU = <dose> (95% CI:<lo>-<hi>)"``.
        ylab: Y label. Defaults to ``"Infected fraction"``.
        ylim: Y limits. Defaults to (0, 1).
        pch_col: Color of the observed points.
        line_col: Color of the fitted curve.
        ref_col: Color of the reference lines.
        unit: Optional dose unit shown in the default x label.
        target_fraction: Response level of the reference point.
        n_points: Number of points on the fitted curve.
        **kwargs: Passed to ``Axes.scatter`` for the observed points.

    Returns:
        The Axes drawn into.
    """
    import matplotlib.pyplot as plt

    if ax is None:
        _, ax = plt.subplots()

    data = fit.evaluable
    x = data["x"].to_numpy(dtype=np.float64)
    y = (data["pos"] / (data["pos"] + data["neg"])).to_numpy(dtype=np.float64)
    cf = fit.inverse_dose(target_fraction)

    xlo, xhi = float(x.min()), float(x.max())
    xp = np.exp(np.linspace(np.log(xlo), np.log(xhi), n_points))
    yp = fit.predict(xp)

    if main is None:
        if "directory" in fit.data.columns:
            main = str(fit.data["directory"].iloc[0])
        else:
            main = date.today().isoformat()
    if xlab is None:
        xlab = "One IU = " + format_titer(fit, unit, target_fraction)
    if ylab is None:
        ylab = "Infected fraction"
    if ylim is None:
        ylim = (0, 1)

    ax.scatter(x, y, color=pch_col, **kwargs)
    ax.plot(xp, yp, color=line_col)
    ax.plot(
        [xlo, cf.estimate, cf.estimate],
        [target_fraction, target_fraction, ylim[0] - 0.02],
        linestyle="--", color=ref_col,
    )
    ax.set_xscale("log")
    ax.set_ylim(*ylim)
    ax.set_xlabel(xlab)
    ax.set_ylabel(ylab)
    ax.set_title(main)
    return ax
