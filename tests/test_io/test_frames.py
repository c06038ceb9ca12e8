"""Tests for splitting nuclear/target frame stacks."""

import numpy as np
import pytest

from virustiter.core.exceptions import InvalidParameterError
from virustiter.io.frames import normalize_which, split_pair


def _numbered_stack(n: int) -> np.ndarray:
    """Stack whose frame i is filled with the value i."""
    return np.arange(n, dtype=np.float64)[:, None, None] * np.ones((n, 4, 4))


class TestNormalizeWhich:
    def test_two_values(self):
        assert normalize_which((1, 2)) == (1, 2, 2)
        assert normalize_which((2, 1)) == (2, 1, 2)

    def test_three_values(self):
        assert normalize_which((1, 3, 3)) == (1, 3, 3)

    @pytest.mark.parametrize("which", [(1,), (1, 2, 3, 4), (0, 1), (1, 1), (1, 3, 2)])
    def test_invalid(self, which):
        with pytest.raises(InvalidParameterError, match="which"):
            normalize_which(which)


class TestSplitPair:
    def test_default_order(self):
        nuclear, target = split_pair(_numbered_stack(6))
        assert nuclear[:, 0, 0].tolist() == [0, 2, 4]
        assert target[:, 0, 0].tolist() == [1, 3, 5]

    def test_target_first(self):
        nuclear, target = split_pair(_numbered_stack(4), which=(2, 1))
        assert nuclear[:, 0, 0].tolist() == [1, 3]
        assert target[:, 0, 0].tolist() == [0, 2]

    def test_extra_frame_ignored(self):
        nuclear, target = split_pair(_numbered_stack(6), which=(1, 2, 3))
        assert nuclear[:, 0, 0].tolist() == [0, 3]
        assert target[:, 0, 0].tolist() == [1, 4]

    def test_shapes(self):
        nuclear, target = split_pair(np.zeros((4, 10, 12)))
        assert nuclear.shape == (2, 10, 12)
        assert target.shape == (2, 10, 12)

    def test_not_a_multiple(self):
        with pytest.raises(InvalidParameterError, match="not a multiple"):
            split_pair(_numbered_stack(5))

    def test_single_frame_rejected(self):
        with pytest.raises(InvalidParameterError):
            split_pair(np.zeros((8, 8)))
