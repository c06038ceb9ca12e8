"""Intensity preprocessing shared by the segmentation stages."""

from __future__ import annotations

import numpy as np
from skimage.filters import gaussian, median
from skimage.morphology import disk

from virustiter.core.exceptions import InvalidParameterError


def check_image(image: np.ndarray, allow_frames: bool = True) -> np.ndarray:
    """Validate an intensity image and return it as float64.

    Raises:
        InvalidParameterError: If the array is not 2-D (or 3-D when frames
            are allowed), contains non-finite values, or negative samples.
    """
    image = np.asarray(image)
    ndims = (2, 3) if allow_frames else (2,)
    if image.ndim not in ndims:
        raise InvalidParameterError(
            "image", f"expected {' or '.join(f'{n}-D' for n in ndims)} array, got {image.ndim}-D"
        )
    if image.size == 0:
        raise InvalidParameterError("image", "array is empty")
    if image.dtype == bool:
        image = image.astype(np.uint8)
    if not np.issubdtype(image.dtype, np.number):
        raise InvalidParameterError("image", f"non-numeric dtype {image.dtype}")
    image = image.astype(np.float64)
    if not np.all(np.isfinite(image)):
        raise InvalidParameterError("image", "contains NaN or infinite samples")
    if np.any(image < 0):
        raise InvalidParameterError("image", "contains negative samples")
    return image


def normalize_image(image: np.ndarray) -> np.ndarray:
    """Rescale intensities linearly to [0, 1] using the observed min and max.

    A constant image maps to all zeros.
    """
    img_min, img_max = np.min(image), np.max(image)
    if img_max > img_min:
        return (image - img_min) / (img_max - img_min)
    return np.zeros_like(image, dtype=np.float64)


def gamma_correct(image: np.ndarray, gamma: float) -> np.ndarray:
    """Raise each sample to ``gamma``; values below 1 lift dim signal."""
    if gamma == 1:
        return image
    return np.power(image, gamma)


def smooth(image: np.ndarray, sigma: float) -> np.ndarray:
    """Median filter with a disc of radius ``sigma``, then Gaussian blur.

    Both filters replicate edge pixels beyond the image border.
    """
    if sigma <= 0:
        return image
    radius = max(int(round(sigma)), 1)
    filtered = median(image, footprint=disk(radius), mode="nearest")
    return gaussian(filtered, sigma=sigma, mode="nearest", preserve_range=True)
