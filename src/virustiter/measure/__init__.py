"""virustiter measure — per-object features and positive/negative classification."""

from virustiter.measure.classifier import (
    build_classification_table,
    classify_groups,
    classify_objects,
    compute_cutoff,
    measure_group,
)
from virustiter.measure.measurer import FEATURE_COLUMNS, measure_frame, measure_objects

__all__ = [
    "FEATURE_COLUMNS",
    "build_classification_table",
    "classify_groups",
    "classify_objects",
    "compute_cutoff",
    "measure_frame",
    "measure_group",
    "measure_objects",
]
