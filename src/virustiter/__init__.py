"""virustiter — viral titer from paired nuclear and target fluorescence images.

Usage:
    from virustiter import nuc_mask, get_tally, get_fit

    labels = nuc_mask(dapi, width=36)
    tally = get_tally(classified)        # one row per well: x, y, pos, neg
    fit = get_fit(tally)
    estimate, lower, upper = fit.inverse_dose()
"""

from virustiter.core.exceptions import (
    AmbiguousGroupingError,
    FitError,
    InvalidParameterError,
    MissingVariableError,
    NoPositiveDoseError,
    VirusTiterError,
    ZeroCountGroupError,
)
from virustiter.segment import NuclearMaskBuilder, NucMaskParams, nuc_mask
from virustiter.titer import DoseResponseFit, get_ec63, get_fit, get_tally

__version__ = "0.1.0"

__all__ = [
    "AmbiguousGroupingError",
    "DoseResponseFit",
    "FitError",
    "InvalidParameterError",
    "MissingVariableError",
    "NoPositiveDoseError",
    "NucMaskParams",
    "NuclearMaskBuilder",
    "VirusTiterError",
    "ZeroCountGroupError",
    "get_ec63",
    "get_fit",
    "get_tally",
    "nuc_mask",
]
