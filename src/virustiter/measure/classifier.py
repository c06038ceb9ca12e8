"""Classify measured objects as positive or negative for the target."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

import numpy as np
import pandas as pd

from virustiter.core.exceptions import InvalidParameterError, MissingVariableError
from virustiter.measure.measurer import measure_objects

logger = logging.getLogger(__name__)

SUPPORTED_METHODS = frozenset({"otsu", "li", "triangle"})


def _otsu_cutoff(values: np.ndarray) -> float:
    """Otsu on the exact value distribution, placed between two distinct values.

    The returned cutoff lies midway between the largest value of the low
    class and the smallest value of the high class.
    """
    from skimage.filters import threshold_otsu

    distinct, counts = np.unique(values, return_counts=True)
    boundary = threshold_otsu(hist=(counts, distinct))
    idx = int(np.searchsorted(distinct, boundary))
    idx = min(idx, distinct.size - 2)
    return float((distinct[idx] + distinct[idx + 1]) / 2.0)


def compute_cutoff(values: np.ndarray, method: str = "otsu") -> float:
    """Automatic cutoff over per-object values.

    Raises:
        InvalidParameterError: If the method is unknown or there are too
            few distinct values to threshold.
    """
    from skimage.filters import threshold_li, threshold_triangle

    if method not in SUPPORTED_METHODS:
        raise InvalidParameterError(
            "method", f"unknown method {method!r}; supported: {sorted(SUPPORTED_METHODS)}"
        )
    values = np.asarray(values, dtype=np.float64)
    values = values[np.isfinite(values)]
    if np.unique(values).size < 2:
        raise InvalidParameterError(
            "values", "need at least two distinct values for an automatic cutoff"
        )
    if method == "otsu":
        return _otsu_cutoff(values)
    elif method == "li":
        return float(threshold_li(values))
    return float(threshold_triangle(values))


def classify_objects(
    features: pd.DataFrame,
    metric: str = "mean_intensity",
    cutoff: float | None = None,
    method: str = "otsu",
    column: str = "positive",
) -> pd.DataFrame:
    """Return a copy of ``features`` with a boolean classification column.

    Objects whose ``metric`` exceeds ``cutoff`` are positive. Without an
    explicit cutoff one is computed from the objects with ``method``.
    """
    if metric not in features.columns:
        raise MissingVariableError(metric)
    result = features.copy()
    if result.empty:
        result[column] = pd.Series(dtype=bool)
        return result
    if cutoff is None:
        cutoff = compute_cutoff(result[metric].to_numpy(), method)
    result[column] = result[metric].to_numpy(dtype=np.float64) > cutoff
    logger.info(
        "Classified %d of %d objects positive (%s > %.4g)",
        int(result[column].sum()), len(result), metric, cutoff,
        extra={"stage": "classify", "cutoff": cutoff},
    )
    return result


def measure_group(
    labels: np.ndarray,
    target: np.ndarray,
    group: Any,
    key: str = "well",
    dose: float | None = None,
    nuclear: np.ndarray | None = None,
    extra: Mapping[str, Any] | None = None,
) -> pd.DataFrame:
    """Measure the objects of one group, without classifying them.

    Args:
        labels: Label image or stack from the nuclear mask builder.
        target: Matching target-antigen image or stack.
        group: Value of the grouping column for every row (well or file).
        key: Grouping column name ("well" or "file").
        dose: Optional dose for the group, stored in a ``moi`` column.
        nuclear: Optional nuclear image for ``nuclear_intensity``.
        extra: Additional constant columns to add.

    Returns:
        Feature table with one row per object and the grouping column first.
    """
    table = measure_objects(labels, target, nuclear)
    table.insert(0, key, group)
    if dose is not None:
        table["moi"] = float(dose)
    for name, value in (extra or {}).items():
        table[name] = value
    return table


def classify_groups(
    tables: Sequence[pd.DataFrame],
    metric: str = "mean_intensity",
    cutoff: float | None = None,
    method: str = "otsu",
    column: str = "positive",
) -> pd.DataFrame:
    """Classify the objects of every group against one shared cutoff.

    Without an explicit cutoff it is computed with ``method`` over the
    pooled objects of all groups, so a well with no infected cells or a
    single nucleus is scored against the same boundary as the others.

    Returns:
        One classification table holding the rows of every group.
    """
    tables = [t for t in tables if not t.empty]
    if not tables:
        raise InvalidParameterError("tables", "no objects to classify")
    pooled = pd.concat(tables, ignore_index=True)
    return classify_objects(pooled, metric=metric, cutoff=cutoff, method=method, column=column)


def build_classification_table(
    labels: np.ndarray,
    target: np.ndarray,
    group: Any,
    cutoff: float,
    key: str = "well",
    dose: float | None = None,
    nuclear: np.ndarray | None = None,
    metric: str = "mean_intensity",
    column: str = "positive",
    extra: Mapping[str, Any] | None = None,
) -> pd.DataFrame:
    """Measure and classify the objects of one group against a fixed cutoff.

    Use ``classify_groups`` to derive one cutoff shared by every group.

    Returns:
        Classification table with one row per object.
    """
    if cutoff is None or not np.isfinite(cutoff):
        raise InvalidParameterError("cutoff", f"must be a finite number, got {cutoff}")
    table = measure_group(labels, target, group, key=key, dose=dose, nuclear=nuclear, extra=extra)
    return classify_objects(table, metric=metric, cutoff=cutoff, column=column)
