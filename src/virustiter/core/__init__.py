"""virustiter core — exceptions and shared data models."""

from virustiter.core.exceptions import (
    AmbiguousGroupingError,
    FitError,
    InvalidParameterError,
    MissingVariableError,
    NoPositiveDoseError,
    VirusTiterError,
    ZeroCountGroupError,
)
from virustiter.core.models import LabeledMask, VariableAliases

__all__ = [
    "AmbiguousGroupingError",
    "FitError",
    "InvalidParameterError",
    "LabeledMask",
    "MissingVariableError",
    "NoPositiveDoseError",
    "VariableAliases",
    "VirusTiterError",
    "ZeroCountGroupError",
]
