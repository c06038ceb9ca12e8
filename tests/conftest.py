"""Shared test fixtures for virustiter."""

import numpy as np
import pytest
from skimage.draw import disk


@pytest.fixture
def two_blob_image() -> np.ndarray:
    """256x256 binary image with two disks of radius 20 at (60, 60) and (180, 180)."""
    image = np.zeros((256, 256), dtype=np.float64)
    for center in ((60, 60), (180, 180)):
        rr, cc = disk(center, 20, shape=image.shape)
        image[rr, cc] = 1.0
    return image


@pytest.fixture
def classification_table():
    """Classification table with three wells at increasing moi."""
    import pandas as pd

    rows = []
    for well, moi, n_pos, n_neg in (("A1", 0.5, 2, 8), ("A2", 2.0, 5, 5), ("A3", 8.0, 9, 1)):
        for i in range(n_pos + n_neg):
            rows.append({"well": well, "label": i + 1, "moi": moi, "positive": i < n_pos})
    return pd.DataFrame(rows)
