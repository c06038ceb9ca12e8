"""Adaptive thresholding against a disc-shaped local mean."""

from __future__ import annotations

import numpy as np
from scipy import ndimage as ndi
from skimage.morphology import disk

from virustiter.core.exceptions import InvalidParameterError

# Boundary modes that extend the image with its own samples. "constant"
# pads with zeros and would break invariance to a uniform intensity shift.
SUPPORTED_MODES = frozenset({"reflect", "mirror", "nearest", "wrap"})


def window_size(width: float) -> int:
    """Odd window diameter for a requested width: ``w - w % 2 + 1``."""
    if width is None or not np.isfinite(width) or width <= 1:
        raise InvalidParameterError("width", f"must be > 1, got {width}")
    w = int(width)
    return w - w % 2 + 1


def disc_kernel(width: float) -> np.ndarray:
    """Normalized disc kernel (weights sum to 1) spanning ``window_size(width)``."""
    size = window_size(width)
    kernel = disk(size // 2).astype(np.float64)
    return kernel / kernel.sum()


def local_mean(image: np.ndarray, width: float, mode: str = "reflect") -> np.ndarray:
    """Disc-weighted mean of each pixel's neighborhood."""
    if mode not in SUPPORTED_MODES:
        raise InvalidParameterError(
            "mode", f"unsupported boundary mode {mode!r}; use one of {sorted(SUPPORTED_MODES)}"
        )
    return ndi.convolve(np.asarray(image, dtype=np.float64), disc_kernel(width), mode=mode)


def adaptive_threshold(
    image: np.ndarray,
    width: float,
    offset: float = 0.05,
    mode: str = "reflect",
) -> np.ndarray:
    """Foreground where a pixel exceeds its disc-neighborhood mean plus ``offset``.

    Args:
        image: Smoothed 2D intensity image.
        width: Neighborhood width in pixels; rounded to the odd diameter
            ``w - w % 2 + 1``. Must be > 1.
        offset: Additive offset over the local mean. Use ~0.01 for low
            contrast images normalized to [0, 1].
        mode: Boundary handling for the local mean (see ``SUPPORTED_MODES``).

    Returns:
        Boolean mask with the same shape as ``image``.

    Raises:
        InvalidParameterError: For a non-2D image, ``width <= 1``, a
            non-finite offset, or an unsupported mode.
    """
    image = np.asarray(image, dtype=np.float64)
    if image.ndim != 2:
        raise InvalidParameterError("image", f"expected 2-D array, got {image.ndim}-D")
    if offset is None or not np.isfinite(offset):
        raise InvalidParameterError("offset", f"must be finite, got {offset}")
    return image > (local_mean(image, width, mode=mode) + offset)
