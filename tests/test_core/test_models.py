"""Tests for virustiter.core.models."""

from dataclasses import FrozenInstanceError

import numpy as np
import pytest

from virustiter.core.exceptions import InvalidParameterError
from virustiter.core.models import LabeledMask, VariableAliases


class TestLabeledMask:
    def test_shape(self):
        mask = LabeledMask(labels=np.zeros((4, 5), dtype=np.int32), n_objects=0, degenerate=True)
        assert mask.shape == (4, 5)

    def test_frozen(self):
        mask = LabeledMask(labels=np.zeros((2, 2), dtype=np.int32), n_objects=0)
        with pytest.raises(FrozenInstanceError):
            mask.n_objects = 3  # type: ignore[misc]

    def test_not_degenerate_by_default(self):
        mask = LabeledMask(labels=np.ones((2, 2), dtype=np.int32), n_objects=1)
        assert mask.degenerate is False


class TestVariableAliases:
    def test_defaults_in_resolution_order(self):
        aliases = VariableAliases()
        assert aliases.dose == ("moi", "x")
        assert aliases.group == ("well", "file")

    def test_empty_dose_aliases_rejected(self):
        with pytest.raises(InvalidParameterError, match="dose"):
            VariableAliases(dose=())

    def test_empty_group_aliases_rejected(self):
        with pytest.raises(InvalidParameterError, match="group"):
            VariableAliases(group=())
