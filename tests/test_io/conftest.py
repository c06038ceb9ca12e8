"""Shared fixtures for IO module tests."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
import tifffile


def _pair_stack(n_fields: int, seed: int = 0) -> np.ndarray:
    rng = np.random.default_rng(seed)
    return rng.integers(0, 4096, (2 * n_fields, 32, 32), dtype=np.uint16)


@pytest.fixture
def well_dir(tmp_path: Path) -> Path:
    """Directory with one subdirectory per well.

    Layout: A1/field1.tif, A1/field2.tif, B2/field1.tif; every file holds
    one nuclear/target pair.
    """
    d = tmp_path / "plate"
    for well, n_files in (("A1", 2), ("B2", 1)):
        (d / well).mkdir(parents=True)
        for i in range(n_files):
            tifffile.imwrite(str(d / well / f"field{i + 1}.tif"), _pair_stack(1, seed=i))
    return d


@pytest.fixture
def stack_dir(tmp_path: Path) -> Path:
    """Directory of multi-frame files, one per group.

    Layout: plate1.tif (3 fields), plate2.tif (2 fields).
    """
    d = tmp_path / "stacks"
    d.mkdir()
    tifffile.imwrite(str(d / "plate1.tif"), _pair_stack(3))
    tifffile.imwrite(str(d / "plate2.tif"), _pair_stack(2))
    return d
