"""Shared fixtures for CLI module tests."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
import pytest
import tifffile
from click.testing import CliRunner


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def nuclear_tiff(tmp_path: Path, two_blob_image: np.ndarray) -> Path:
    """16-bit TIFF of two separated nuclei."""
    p = tmp_path / "nuclei.tif"
    tifffile.imwrite(str(p), (two_blob_image * 1000 + 50).astype(np.uint16))
    return p


@pytest.fixture
def pair_tiff(tmp_path: Path, two_blob_image: np.ndarray) -> Path:
    """Two-frame TIFF with the target frame first and nuclei second."""
    nuclei = (two_blob_image * 1000 + 50).astype(np.uint16)
    target = np.full_like(nuclei, 10)
    p = tmp_path / "pair.tif"
    tifffile.imwrite(str(p), np.stack([target, nuclei]))
    return p


@pytest.fixture
def table_csv(tmp_path: Path, classification_table: pd.DataFrame) -> Path:
    p = tmp_path / "classified.csv"
    classification_table.to_csv(p, index=False)
    return p


@pytest.fixture
def tally_csv(tmp_path: Path) -> Path:
    p = tmp_path / "tally.csv"
    pd.DataFrame({
        "x": [1.0, 10.0, 100.0],
        "y": [0.05, 0.4, 0.95],
        "pos": [5, 40, 95],
        "neg": [95, 60, 5],
        "well": ["A1", "A2", "A3"],
    }).to_csv(p, index=False)
    return p
