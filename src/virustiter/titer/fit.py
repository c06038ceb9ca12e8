"""Dose-response fitting — binomial GLM on log dose and inverse prediction.

The model is ``cbind(pos, neg) ~ log(x)`` with a binomial response and a
complementary log-log (default) or logit link, fit by iteratively
reweighted least squares. Under the cloglog link the intercept at
``log(x) = 0`` corresponds to a Poisson single-hit model, and the dose
giving a response of ``1 - exp(-1)`` (about 0.632) is the dose delivering
on average one infectious unit per cell.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

import numpy as np
import pandas as pd
from scipy import stats
from scipy.special import expit, logit, xlogy

from virustiter.core.exceptions import (
    FitError,
    InvalidParameterError,
    MissingVariableError,
    NoPositiveDoseError,
    ZeroCountGroupError,
)

logger = logging.getLogger(__name__)

DEFAULT_TARGET_FRACTION = 1.0 - np.exp(-1.0)

_EPS = np.finfo(np.float64).eps


@dataclass(frozen=True)
class Link:
    """A GLM link function with its inverse and derivative dmu/deta."""

    name: str
    link: Callable[[np.ndarray], np.ndarray]
    inverse: Callable[[np.ndarray], np.ndarray]
    mu_eta: Callable[[np.ndarray], np.ndarray]


def _cloglog_inverse(eta: np.ndarray) -> np.ndarray:
    return np.clip(-np.expm1(-np.exp(eta)), _EPS, 1.0 - _EPS)


def _cloglog_mu_eta(eta: np.ndarray) -> np.ndarray:
    eta = np.minimum(eta, 700.0)
    return np.maximum(np.exp(eta - np.exp(eta)), _EPS)


def _logit_mu_eta(eta: np.ndarray) -> np.ndarray:
    mu = expit(eta)
    return np.maximum(mu * (1.0 - mu), _EPS)


LINKS: dict[str, Link] = {
    "cloglog": Link(
        name="cloglog",
        link=lambda mu: np.log(-np.log1p(-mu)),
        inverse=_cloglog_inverse,
        mu_eta=_cloglog_mu_eta,
    ),
    "logit": Link(
        name="logit",
        link=logit,
        inverse=lambda eta: np.clip(expit(eta), _EPS, 1.0 - _EPS),
        mu_eta=_logit_mu_eta,
    ),
}


def get_link(name: str) -> Link:
    """Look up a link by name ("cloglog" or "logit")."""
    if name not in LINKS:
        raise InvalidParameterError("link", f"unknown link {name!r}; supported: {sorted(LINKS)}")
    return LINKS[name]


def binomial_deviance(pos: np.ndarray, n: np.ndarray, mu: np.ndarray) -> float:
    """Residual deviance of binomial counts against fitted probabilities."""
    neg = n - pos
    return float(2.0 * np.sum(xlogy(pos, pos / (n * mu)) + xlogy(neg, neg / (n * (1.0 - mu)))))


@dataclass(frozen=True)
class InverseDose:
    """Dose at which the fitted response reaches ``target``, with a CI.

    Unpacks as ``estimate, lower, upper``.
    """

    estimate: float
    lower: float
    upper: float
    target: float = DEFAULT_TARGET_FRACTION
    level: float = 0.95
    log_se: float = float("nan")

    def __iter__(self):
        yield self.estimate
        yield self.lower
        yield self.upper


@dataclass(frozen=True, eq=False)
class DoseResponseFit:
    """A fitted dose-response model.

    Attributes:
        link: Link function name.
        coef: Read-only (intercept, slope) on the log-dose scale.
        cov: Read-only 2x2 covariance of ``coef``.
        _data: The tally used for the fit with an ``evaluable`` column;
            rows with ``x <= 0`` are kept but marked not evaluable. Read
            it through ``data``, which returns a copy.
        deviance: Residual deviance.
        null_deviance: Deviance of the intercept-only model.
        df_resid: Residual degrees of freedom.
        iterations: IRLS iterations performed.
        converged: Whether IRLS met its tolerance.
    """

    link: str
    coef: np.ndarray
    cov: np.ndarray
    _data: pd.DataFrame = field(repr=False)
    deviance: float
    null_deviance: float
    df_resid: int
    iterations: int
    converged: bool = True

    @property
    def intercept(self) -> float:
        return float(self.coef[0])

    @property
    def slope(self) -> float:
        return float(self.coef[1])

    @property
    def std_errors(self) -> np.ndarray:
        return np.sqrt(np.diag(self.cov))

    @property
    def data(self) -> pd.DataFrame:
        """Copy of the fitted tally, including rows not evaluable."""
        return self._data.copy()

    @property
    def evaluable(self) -> pd.DataFrame:
        """Rows that entered the fit."""
        return self._data[self._data["evaluable"]].copy()

    def predict(self, doses: Any) -> np.ndarray | float:
        """Expected response fraction at each dose; ``nan`` for doses <= 0."""
        x = np.asarray(doses, dtype=np.float64)
        out = np.full(x.shape, np.nan)
        ok = np.isfinite(x) & (x > 0)
        eta = self.coef[0] + self.coef[1] * np.log(x[ok])
        out[ok] = get_link(self.link).inverse(eta)
        if out.ndim == 0:
            return float(out)
        return out

    def inverse_dose(
        self,
        target_fraction: float = DEFAULT_TARGET_FRACTION,
        level: float = 0.95,
    ) -> InverseDose:
        """Dose giving ``target_fraction`` response with a two-sided interval.

        The interval comes from the delta method on the log-dose scale and
        is exponentiated, so it is asymmetric around the estimate.

        Raises:
            InvalidParameterError: If the target or level is outside (0, 1).
            FitError: If the fitted slope is zero.
        """
        if not 0 < target_fraction < 1:
            raise InvalidParameterError(
                "target_fraction", f"must be in (0, 1), got {target_fraction}"
            )
        if not 0 < level < 1:
            raise InvalidParameterError("level", f"must be in (0, 1), got {level}")
        b0, b1 = self.coef
        if b1 == 0:
            raise FitError("Fitted slope is zero; inverse prediction is undefined")

        eta = float(get_link(self.link).link(np.float64(target_fraction)))
        log_dose = (eta - b0) / b1
        grad = np.array([-1.0 / b1, -(eta - b0) / b1**2])
        log_se = float(np.sqrt(grad @ self.cov @ grad))
        z = stats.norm.ppf(0.5 + level / 2.0)
        return InverseDose(
            estimate=float(np.exp(log_dose)),
            lower=float(np.exp(log_dose - z * log_se)),
            upper=float(np.exp(log_dose + z * log_se)),
            target=float(target_fraction),
            level=float(level),
            log_se=log_se,
        )

    def summary(self, target_fraction: float = DEFAULT_TARGET_FRACTION) -> dict[str, Any]:
        """Coefficients, fit statistics, and the inverse-predicted dose."""
        se = self.std_errors
        cf = self.inverse_dose(target_fraction)
        return {
            "link": self.link,
            "intercept": self.intercept,
            "slope": self.slope,
            "se_intercept": float(se[0]),
            "se_slope": float(se[1]),
            "deviance": self.deviance,
            "null_deviance": self.null_deviance,
            "df_resid": self.df_resid,
            "n_groups": int(self._data["evaluable"].sum()),
            "n_excluded": int((~self._data["evaluable"]).sum()),
            "iterations": self.iterations,
            "converged": self.converged,
            "target_fraction": cf.target,
            "estimate": cf.estimate,
            "lower": cf.lower,
            "upper": cf.upper,
        }


def _irls(
    X: np.ndarray,
    pos: np.ndarray,
    n: np.ndarray,
    link: Link,
    max_iter: int,
    tol: float,
) -> tuple[np.ndarray, np.ndarray, float, int, bool]:
    """Weighted binomial IRLS; returns (beta, cov, deviance, iterations, converged)."""
    y = pos / n
    mu = (n * y + 0.5) / (n + 1.0)
    eta = link.link(mu)
    dev_old = binomial_deviance(pos, n, mu)
    beta = np.zeros(X.shape[1])
    converged = False
    iterations = 0

    for iterations in range(1, max_iter + 1):
        d = link.mu_eta(eta)
        z = eta + (y - mu) / d
        w = n * d**2 / (mu * (1.0 - mu))
        WX = X * w[:, np.newaxis]
        try:
            beta = np.linalg.solve(X.T @ WX, WX.T @ z)
        except np.linalg.LinAlgError as exc:
            raise FitError(f"Singular information matrix: {exc}") from exc
        eta = X @ beta
        mu = link.inverse(eta)
        dev = binomial_deviance(pos, n, mu)
        if not np.isfinite(dev):
            raise FitError("Deviance is not finite")
        if abs(dev - dev_old) / (abs(dev) + 0.1) < tol:
            converged = True
            break
        dev_old = dev

    d = link.mu_eta(eta)
    w = n * d**2 / (mu * (1.0 - mu))
    try:
        cov = np.linalg.inv(X.T @ (X * w[:, np.newaxis]))
    except np.linalg.LinAlgError as exc:
        raise FitError(f"Singular information matrix: {exc}") from exc
    return beta, cov, dev, iterations, converged


def get_fit(
    tally: pd.DataFrame,
    link: str = "cloglog",
    max_iter: int = 50,
    tol: float = 1e-8,
) -> DoseResponseFit:
    """Fit infected fractions against log dose.

    Each group is weighted by its object count through the binomial
    counts ``pos`` and ``neg``, so fractions of exactly 0 or 1 stay
    well-posed.

    Args:
        tally: Aggregated table with ``x``, ``pos`` and ``neg`` columns,
            as returned by ``get_tally``.
        link: "cloglog" (default) or "logit".
        max_iter: Maximum IRLS iterations.
        tol: Relative deviance change for convergence.

    Returns:
        DoseResponseFit.

    Raises:
        MissingVariableError: If a required column is absent.
        ZeroCountGroupError: If a row has ``pos + neg == 0``.
        NoPositiveDoseError: If no row has a positive dose.
        FitError: If fewer than two distinct positive doses remain, all
            responses are identical at the extremes, or IRLS fails to
            converge.
    """
    model_link = get_link(link)
    for column in ("x", "pos", "neg"):
        if column not in tally.columns:
            raise MissingVariableError(column)
    if tally.empty:
        raise NoPositiveDoseError(0)

    data = tally.copy()
    x = data["x"].to_numpy(dtype=np.float64)
    pos_all = data["pos"].to_numpy(dtype=np.float64)
    n_all = pos_all + data["neg"].to_numpy(dtype=np.float64)
    if np.any(n_all <= 0):
        bad = int(np.flatnonzero(n_all <= 0)[0])
        raise ZeroCountGroupError(data.index[bad])

    evaluable = np.isfinite(x) & (x > 0)
    data["evaluable"] = evaluable
    if not evaluable.any():
        raise NoPositiveDoseError(len(data))
    if not evaluable.all():
        logger.info(
            "Excluding %d rows with non-positive dose from the fit", int((~evaluable).sum()),
            extra={"stage": "fit", "n_excluded": int((~evaluable).sum())},
        )
    if np.unique(x[evaluable]).size < 2:
        raise FitError("At least two distinct positive doses are required")

    pos = pos_all[evaluable]
    n = n_all[evaluable]
    y = pos / n
    if np.all(y == 0) or np.all(y == 1):
        raise FitError("All fractions are 0 or all are 1; the response is not estimable")

    X = np.column_stack([np.ones(evaluable.sum()), np.log(x[evaluable])])
    beta, cov, deviance, iterations, converged = _irls(X, pos, n, model_link, max_iter, tol)
    if not converged:
        raise FitError(f"IRLS did not converge in {max_iter} iterations")

    null_mu = np.full_like(y, np.clip(pos.sum() / n.sum(), _EPS, 1.0 - _EPS))
    null_deviance = binomial_deviance(pos, n, null_mu)

    beta.setflags(write=False)
    cov.setflags(write=False)
    fit = DoseResponseFit(
        link=model_link.name,
        coef=beta,
        cov=cov,
        _data=data,
        deviance=deviance,
        null_deviance=null_deviance,
        df_resid=int(evaluable.sum()) - 2,
        iterations=iterations,
        converged=converged,
    )
    logger.info(
        "Fit %s model to %d groups in %d iterations (deviance %.4g)",
        model_link.name, int(evaluable.sum()), iterations, deviance,
        extra={"stage": "fit", "deviance": deviance, "iterations": iterations},
    )
    return fit


def get_ec63(fit: DoseResponseFit, level: float = 0.95) -> InverseDose:
    """Dose giving one infectious unit per cell on average (response 1 - e^-1)."""
    return fit.inverse_dose(DEFAULT_TARGET_FRACTION, level=level)
