"""Split interleaved nuclear/target frame stacks."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from virustiter.core.exceptions import InvalidParameterError


def normalize_which(which: Sequence[int]) -> tuple[int, int, int]:
    """Expand ``(nuclear, target)`` to ``(nuclear, target, per_field)`` and validate.

    Positions are 1-based. The third value is the number of frames per
    field and must be the largest; with two values it defaults to their
    maximum, e.g. ``(1, 2)`` means nuclear first, target second and
    ``(1, 2, 3)`` adds a third ignored frame (phase contrast, etc.).
    """
    which = tuple(int(w) for w in which)
    if len(which) == 2:
        which = (which[0], which[1], max(which))
    if len(which) != 3:
        raise InvalidParameterError("which", "must have length 2 or 3")
    nuclear, target, per_field = which
    if min(which) < 1:
        raise InvalidParameterError("which", "positions are 1-based")
    if nuclear == target:
        raise InvalidParameterError("which", "nuclear and target positions must differ")
    if per_field != max(which):
        raise InvalidParameterError("which", "the third value must be the largest")
    return nuclear, target, per_field


def split_pair(
    stack: np.ndarray, which: Sequence[int] = (1, 2, 2)
) -> tuple[np.ndarray, np.ndarray]:
    """Separate a (frames, Y, X) stack into nuclear and target stacks.

    Args:
        stack: 2D image pair stack with frames on the first axis.
        which: 1-based positions of the nuclear and target frames within
            each field, plus the number of frames per field.

    Returns:
        Tuple of (nuclear frames, target frames), each (fields, Y, X).

    Raises:
        InvalidParameterError: If ``which`` is malformed or the frame count
            is not a multiple of the frames per field.
    """
    nuclear, target, per_field = normalize_which(which)
    stack = np.asarray(stack)
    if stack.ndim == 2:
        stack = stack[np.newaxis]
    if stack.ndim != 3:
        raise InvalidParameterError("stack", f"expected 3-D array, got {stack.ndim}-D")
    n_frames = stack.shape[0]
    if n_frames % per_field != 0:
        raise InvalidParameterError(
            "stack", f"{n_frames} frames is not a multiple of {per_field}"
        )
    return stack[nuclear - 1 :: per_field], stack[target - 1 :: per_field]
