"""Shared fixtures for tally and fit tests."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest


def make_tally(x, pos, neg, key: str = "well") -> pd.DataFrame:
    """Build an aggregated table from parallel sequences."""
    pos = np.asarray(pos, dtype=np.int64)
    neg = np.asarray(neg, dtype=np.int64)
    return pd.DataFrame({
        "x": np.asarray(x, dtype=np.float64),
        "y": pos / (pos + neg),
        "pos": pos,
        "neg": neg,
        key: [f"A{i + 1}" for i in range(len(pos))],
    })


@pytest.fixture
def three_point_tally() -> pd.DataFrame:
    """Tally with (x=1, 5/95), (x=10, 40/60), (x=100, 95/5)."""
    return make_tally([1, 10, 100], [5, 40, 95], [95, 60, 5])


@pytest.fixture
def single_hit_tally() -> pd.DataFrame:
    """Noise-free counts from a Poisson single-hit curve with one IU at dose 5."""
    doses = np.array([0.25, 0.5, 1, 2, 4, 8, 16, 32], dtype=np.float64)
    n = 10000
    p = 1.0 - np.exp(-doses / 5.0)
    pos = np.round(n * p).astype(np.int64)
    return make_tally(doses, pos, n - pos)


@pytest.fixture
def tally_factory():
    """Factory building an aggregated table from doses and counts."""
    return make_tally
