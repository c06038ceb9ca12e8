"""Shared fixtures for measurement tests."""

from __future__ import annotations

import numpy as np
import pytest


@pytest.fixture
def labels() -> np.ndarray:
    """64x64 label image with two 20x20 cells.

    Cell 1: rows/cols 10:30. Cell 2: rows/cols 40:60.
    """
    labels = np.zeros((64, 64), dtype=np.int32)
    labels[10:30, 10:30] = 1
    labels[40:60, 40:60] = 2
    return labels


@pytest.fixture
def target() -> np.ndarray:
    """Target image: cell 1 dim (100), cell 2 bright (200), background 5."""
    image = np.full((64, 64), 5.0)
    image[10:30, 10:30] = 100.0
    image[40:60, 40:60] = 200.0
    return image
