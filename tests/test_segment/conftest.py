"""Shared fixtures for segmentation tests."""

from __future__ import annotations

import numpy as np
import pytest
from skimage.draw import disk


@pytest.fixture
def touching_blobs() -> np.ndarray:
    """Binary mask of two overlapping disks (radius 20, centers 36 px apart)."""
    mask = np.zeros((100, 140), dtype=bool)
    for center in ((50, 52), (50, 88)):
        rr, cc = disk(center, 20, shape=mask.shape)
        mask[rr, cc] = True
    return mask


@pytest.fixture
def ring_mask() -> np.ndarray:
    """Annulus with a 10 px hole in the middle."""
    mask = np.zeros((64, 64), dtype=bool)
    rr, cc = disk((32, 32), 20)
    mask[rr, cc] = True
    rr, cc = disk((32, 32), 10)
    mask[rr, cc] = False
    return mask
