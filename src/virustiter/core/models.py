"""Data models and configuration records shared across virustiter."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from virustiter.core.exceptions import InvalidParameterError


@dataclass(frozen=True)
class LabeledMask:
    """Labeled nuclear mask produced by the nuclear mask builder.

    Attributes:
        labels: Integer array (Y, X) or (frames, Y, X); 0 = background,
            objects numbered contiguously from 1 (per frame).
        n_objects: Number of labeled objects (summed over frames).
        degenerate: True if any frame thresholded to entirely foreground
            or entirely background.
    """

    labels: np.ndarray
    n_objects: int
    degenerate: bool = False

    @property
    def shape(self) -> tuple[int, ...]:
        return self.labels.shape


@dataclass(frozen=True)
class VariableAliases:
    """Recognized column names, in resolution order.

    Attributes:
        dose: Candidate dose columns; the first present one is used.
        group: Candidate grouping columns; exactly one must be present.
    """

    dose: tuple[str, ...] = ("moi", "x")
    group: tuple[str, ...] = ("well", "file")

    def __post_init__(self) -> None:
        if not self.dose:
            raise InvalidParameterError("dose", "at least one alias is required")
        if not self.group:
            raise InvalidParameterError("group", "at least one alias is required")
