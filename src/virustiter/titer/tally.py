"""Tally per-object classifications into per-group infected fractions."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Union

import numpy as np
import pandas as pd

from virustiter.core.exceptions import (
    AmbiguousGroupingError,
    InvalidParameterError,
    MissingVariableError,
    ZeroCountGroupError,
)
from virustiter.core.models import VariableAliases

logger = logging.getLogger(__name__)

TALLY_COLUMNS = ["x", "y", "pos", "neg"]

DoseSpec = Union[str, Mapping[Any, float], Sequence[float], np.ndarray, pd.Series, None]


def resolve_key(
    table: pd.DataFrame,
    by: str | None = None,
    aliases: VariableAliases | None = None,
) -> str:
    """Pick the grouping column.

    An explicit ``by`` must name an existing column. Otherwise exactly one
    of ``aliases.group`` must be present.

    Raises:
        MissingVariableError: If ``by`` is not a column.
        AmbiguousGroupingError: If zero or several alias columns are present.
    """
    aliases = aliases or VariableAliases()
    if by is not None:
        if by not in table.columns:
            raise MissingVariableError(by)
        return by
    found = tuple(name for name in aliases.group if name in table.columns)
    if len(found) != 1:
        raise AmbiguousGroupingError(found)
    return found[0]


def _unique_dose(values: pd.Series, column: str, group: Any) -> float:
    unique = pd.unique(values.dropna())
    if len(unique) == 0:
        raise MissingVariableError(f"{column} for group {group!r}")
    if len(unique) > 1:
        raise InvalidParameterError(
            column, f"group {group!r} has {len(unique)} different values"
        )
    return float(unique[0])


def resolve_dose(
    table: pd.DataFrame,
    key: str,
    groups: Sequence[Any],
    var: DoseSpec = None,
    aliases: VariableAliases | None = None,
) -> pd.Series:
    """Dose per group, indexed by group value.

    Args:
        table: Classification table.
        key: Grouping column.
        groups: Group values in output order.
        var: Column name, mapping of group -> dose, a Series indexed by
            group, or a sequence aligned with ``groups``. If None, the first
            present column among ``aliases.dose`` is used.
        aliases: Recognized column names.

    Raises:
        MissingVariableError: If no dose source is available, or a group
            has no dose.
        InvalidParameterError: If a group has conflicting doses or a
            sequence has the wrong length.
        ZeroCountGroupError: If a mapping names a group with no objects.
    """
    aliases = aliases or VariableAliases()

    if isinstance(var, Mapping) or isinstance(var, pd.Series):
        doses = pd.Series(var, dtype="float64") if isinstance(var, Mapping) else var.astype("float64")
        known = set(groups)
        for group in doses.index:
            if group not in known:
                raise ZeroCountGroupError(group)
        missing = [g for g in groups if g not in doses.index or pd.isna(doses.get(g))]
        if missing:
            raise MissingVariableError(f"dose for group {missing[0]!r}")
        return doses.reindex(list(groups))

    if var is not None and not isinstance(var, str):
        values = np.asarray(var, dtype=np.float64).ravel()
        if values.size != len(groups):
            raise InvalidParameterError(
                "var", f"{values.size} doses supplied for {len(groups)} groups"
            )
        return pd.Series(values, index=list(groups), dtype="float64")

    if isinstance(var, str):
        if var not in table.columns:
            raise MissingVariableError(var)
        column = var
    else:
        present = [name for name in aliases.dose if name in table.columns]
        if not present:
            raise MissingVariableError(candidates=aliases.dose)
        column = present[0]

    grouped = table.groupby(key, sort=True, observed=True)[column]
    doses = {group: _unique_dose(values, column, group) for group, values in grouped}
    return pd.Series(doses, dtype="float64").reindex(list(groups))


def get_tally(
    table: pd.DataFrame,
    var: DoseSpec = None,
    by: str | None = None,
    phenotype: pd.DataFrame | None = None,
    param: str = "positive",
    aliases: VariableAliases | None = None,
) -> pd.DataFrame:
    """Count positive and negative objects per group.

    Args:
        table: Classification table, one row per object.
        var: Dose source (see ``resolve_dose``). Defaults to the ``moi`` or
            ``x`` column.
        by: Grouping column. Defaults to whichever of ``well`` / ``file``
            is present.
        phenotype: Optional table joined onto the result by grouping key.
            Phenotype rows without a matching group are dropped; groups
            without a phenotype row get missing values.
        param: Boolean column scored as positive. Missing values count as
            negative.
        aliases: Recognized column names and their resolution order.

    Returns:
        DataFrame sorted by group with columns ``x``, ``y``, ``pos``,
        ``neg``, the grouping key, then any phenotype columns.

    Raises:
        ZeroCountGroupError: If the table (or a group) has no objects.
        AmbiguousGroupingError: If the grouping column cannot be resolved.
        MissingVariableError: If the dose, ``param`` or key is missing.
    """
    aliases = aliases or VariableAliases()
    key = resolve_key(table, by, aliases)
    if param not in table.columns:
        raise MissingVariableError(param)
    if table.empty:
        raise ZeroCountGroupError()
    if table[key].isna().any():
        raise InvalidParameterError(key, "group values must not be missing")

    flags = table[param]
    positive = flags.where(flags.notna(), False).astype(bool).astype(np.int64)
    grouped = positive.groupby(table[key], sort=True, observed=False)
    counts = pd.DataFrame({"pos": grouped.sum(), "n": grouped.size()})

    empty = counts.index[counts["n"] == 0]
    if len(empty):
        raise ZeroCountGroupError(empty[0])

    groups = list(counts.index)
    doses = resolve_dose(table, key, groups, var, aliases)

    pos = counts["pos"].to_numpy(dtype=np.int64)
    neg = counts["n"].to_numpy(dtype=np.int64) - pos
    result = pd.DataFrame({
        "x": doses.to_numpy(dtype=np.float64),
        "y": pos / (pos + neg),
        "pos": pos,
        "neg": neg,
        key: groups,
    })

    if phenotype is not None:
        result = join_phenotype(result, phenotype, key)

    logger.info(
        "Tallied %d objects into %d groups by %s", int(counts["n"].sum()), len(result), key,
        extra={"stage": "tally", "key": key, "n_groups": len(result)},
    )
    return result


_JOIN_COLUMN = "__join_key__"


def join_values(values: pd.Series, key: str) -> pd.Series:
    """Values used to match groups; wells compare stripped and upper-cased."""
    if key != "well":
        return values
    return values.astype(str).str.strip().str.upper()


def join_phenotype(tally: pd.DataFrame, phenotype: pd.DataFrame, key: str) -> pd.DataFrame:
    """Left-join phenotype columns onto a tally by grouping key.

    Well identifiers are matched case-insensitively on both sides; the
    tally keeps its own key values.

    Raises:
        MissingVariableError: If ``phenotype`` lacks the key column.
        InvalidParameterError: If a key value appears more than once.
    """
    if key not in phenotype.columns:
        raise MissingVariableError(key)
    right_keys = join_values(phenotype[key], key)
    if right_keys.duplicated().any():
        dup = phenotype.loc[right_keys.duplicated(), key].iloc[0]
        raise InvalidParameterError("phenotype", f"duplicate {key} {dup!r}")
    extra = [c for c in phenotype.columns if c != key and c not in tally.columns]
    dropped = [c for c in phenotype.columns if c != key and c in tally.columns]
    if dropped:
        logger.warning("Ignoring phenotype columns that clash with the tally: %s", dropped)

    right = phenotype[extra].assign(**{_JOIN_COLUMN: right_keys.to_numpy()})
    left = tally.assign(**{_JOIN_COLUMN: join_values(tally[key], key).to_numpy()})
    unmatched = int((~left[_JOIN_COLUMN].isin(right[_JOIN_COLUMN])).sum())
    if unmatched:
        logger.warning("%d of %d groups have no phenotype row", unmatched, len(left))
    return left.merge(right, how="left", on=_JOIN_COLUMN).drop(columns=_JOIN_COLUMN)
