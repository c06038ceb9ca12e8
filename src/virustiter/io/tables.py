"""Tabular inputs — classification tables and phenotype sheets."""

from __future__ import annotations

from pathlib import Path

import pandas as pd


def read_table(path: Path) -> pd.DataFrame:
    """Read a CSV table (classification results or a tally)."""
    return pd.read_csv(Path(path))


def read_phenotype(path: Path) -> pd.DataFrame:
    """Read a phenotype CSV with one row per group.

    Values are kept as written; wells are matched case-insensitively when
    the phenotype is joined onto a tally.
    """
    return pd.read_csv(Path(path))
