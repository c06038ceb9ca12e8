"""Image reading and writing via tifffile (other formats via scikit-image)."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import tifffile

logger = logging.getLogger(__name__)

TIFF_EXTENSIONS = {".tif", ".tiff"}
IMAGE_EXTENSIONS = TIFF_EXTENSIONS | {".png", ".jpg", ".jpeg"}


def read_tiff(path: Path) -> np.ndarray:
    """Read a TIFF file into a numpy array.

    Args:
        path: Path to the TIFF file.

    Returns:
        Numpy array with the image data.
    """
    return tifffile.imread(str(path))


def write_tiff(path: Path, data: np.ndarray) -> None:
    """Write an array (e.g. a label image) to a TIFF file."""
    tifffile.imwrite(str(path), data)


def read_image(path: Path) -> np.ndarray:
    """Read an image file as grayscale.

    TIFF files are read with tifffile, PNG and JPEG with scikit-image.
    Color images are averaged to grayscale.
    """
    path = Path(path)
    if path.suffix.lower() in TIFF_EXTENSIONS:
        data = read_tiff(path)
    else:
        from skimage.io import imread

        data = imread(str(path))
    return to_grayscale(data)


def is_color(data: np.ndarray) -> bool:
    """True if the trailing axis looks like RGB(A) samples.

    A (3, Y, X) stack is treated as three frames, not as color.
    """
    if data.ndim == 3:
        return data.shape[-1] in (3, 4) and data.shape[0] > 4
    return data.ndim == 4 and data.shape[-1] in (3, 4)


def to_grayscale(data: np.ndarray) -> np.ndarray:
    """Average RGB samples uniformly; alpha is discarded."""
    if not is_color(data):
        return data
    logger.warning("Image converted to grayscale by uniform RGB averaging")
    return data[..., :3].astype(np.float64).mean(axis=-1)
