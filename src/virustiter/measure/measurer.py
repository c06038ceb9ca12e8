"""Per-object intensity features from a labeled mask and a target image."""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd
from skimage.measure import regionprops

from virustiter.core.exceptions import InvalidParameterError

logger = logging.getLogger(__name__)

FEATURE_COLUMNS = [
    "label",
    "area",
    "centroid_x",
    "centroid_y",
    "mean_intensity",
    "max_intensity",
    "integrated_intensity",
]


def _check_pair(labels: np.ndarray, image: np.ndarray, name: str) -> None:
    if labels.shape != image.shape:
        raise InvalidParameterError(
            name, f"shape {image.shape} does not match labels {labels.shape}"
        )


def measure_frame(
    labels: np.ndarray,
    target: np.ndarray,
    nuclear: np.ndarray | None = None,
) -> pd.DataFrame:
    """Measure each labeled object in one 2D frame.

    Args:
        labels: 2D integer label image, 0 = background.
        target: 2D target-antigen image of the same shape.
        nuclear: Optional 2D nuclear image; adds ``nuclear_intensity``.

    Returns:
        DataFrame with one row per label, columns ``FEATURE_COLUMNS``.
        Empty (with those columns) if there are no objects.
    """
    labels = np.asarray(labels)
    target = np.asarray(target, dtype=np.float64)
    _check_pair(labels, target, "target")
    if nuclear is not None:
        nuclear = np.asarray(nuclear, dtype=np.float64)
        _check_pair(labels, nuclear, "nuclear")

    columns = FEATURE_COLUMNS + (["nuclear_intensity"] if nuclear is not None else [])
    if labels.max() == 0:
        return pd.DataFrame(columns=columns)

    rows = []
    for prop in regionprops(labels.astype(np.int32), intensity_image=target):
        # regionprops centroid is (row, col) = (y, x)
        centroid_y, centroid_x = prop.centroid
        values = prop.image_intensity[prop.image]
        row = {
            "label": int(prop.label),
            "area": int(prop.area),
            "centroid_x": float(centroid_x),
            "centroid_y": float(centroid_y),
            "mean_intensity": float(np.mean(values)),
            "max_intensity": float(np.max(values)),
            "integrated_intensity": float(np.sum(values)),
        }
        if nuclear is not None:
            row["nuclear_intensity"] = float(np.mean(nuclear[labels == prop.label]))
        rows.append(row)
    return pd.DataFrame(rows, columns=columns)


def measure_objects(
    labels: np.ndarray,
    target: np.ndarray,
    nuclear: np.ndarray | None = None,
) -> pd.DataFrame:
    """Measure objects in a 2D frame or a (frames, Y, X) stack.

    Stacks are measured frame by frame and get a 0-based ``frame`` column.
    """
    labels = np.asarray(labels)
    if labels.ndim == 2:
        return measure_frame(labels, target, nuclear)
    if labels.ndim != 3:
        raise InvalidParameterError("labels", f"expected 2-D or 3-D array, got {labels.ndim}-D")

    target = np.asarray(target)
    _check_pair(labels, target, "target")
    frames = []
    for i in range(labels.shape[0]):
        df = measure_frame(labels[i], target[i], None if nuclear is None else nuclear[i])
        df.insert(0, "frame", i)
        frames.append(df)
    result = pd.concat(frames, ignore_index=True)
    logger.debug("Measured %d objects in %d frames", len(result), labels.shape[0])
    return result
