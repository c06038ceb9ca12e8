"""Tests for per-object feature extraction."""

from __future__ import annotations

import numpy as np
import pytest

from virustiter.core.exceptions import InvalidParameterError
from virustiter.measure.measurer import FEATURE_COLUMNS, measure_frame, measure_objects


class TestMeasureFrame:
    def test_one_row_per_label(self, labels: np.ndarray, target: np.ndarray):
        df = measure_frame(labels, target)
        assert list(df.columns) == FEATURE_COLUMNS
        assert df["label"].tolist() == [1, 2]
        assert df["area"].tolist() == [400, 400]

    def test_intensities(self, labels: np.ndarray, target: np.ndarray):
        df = measure_frame(labels, target)
        assert df["mean_intensity"].tolist() == pytest.approx([100.0, 200.0])
        assert df["max_intensity"].tolist() == pytest.approx([100.0, 200.0])
        assert df["integrated_intensity"].tolist() == pytest.approx([40000.0, 80000.0])

    def test_centroid_is_x_y(self, target: np.ndarray):
        labels = np.zeros((64, 64), dtype=np.int32)
        labels[10:20, 40:50] = 1
        df = measure_frame(labels, target)
        assert df.loc[0, "centroid_x"] == pytest.approx(44.5)
        assert df.loc[0, "centroid_y"] == pytest.approx(14.5)

    def test_nuclear_intensity(self, labels: np.ndarray, target: np.ndarray):
        nuclear = np.full((64, 64), 7.0)
        df = measure_frame(labels, target, nuclear)
        assert df["nuclear_intensity"].tolist() == pytest.approx([7.0, 7.0])

    def test_empty_labels(self, target: np.ndarray):
        df = measure_frame(np.zeros((64, 64), dtype=np.int32), target)
        assert df.empty
        assert list(df.columns) == FEATURE_COLUMNS

    def test_shape_mismatch_rejected(self, labels: np.ndarray):
        with pytest.raises(InvalidParameterError, match="target"):
            measure_frame(labels, np.zeros((32, 32)))


class TestMeasureObjects:
    def test_stack_adds_frame_column(self, labels: np.ndarray, target: np.ndarray):
        df = measure_objects(np.stack([labels, labels]), np.stack([target, target * 2]))
        assert df["frame"].tolist() == [0, 0, 1, 1]
        assert df["mean_intensity"].tolist() == pytest.approx([100.0, 200.0, 200.0, 400.0])

    def test_2d_has_no_frame_column(self, labels: np.ndarray, target: np.ndarray):
        assert "frame" not in measure_objects(labels, target).columns

    def test_1d_rejected(self):
        with pytest.raises(InvalidParameterError):
            measure_objects(np.zeros(10, dtype=np.int32), np.zeros(10))
