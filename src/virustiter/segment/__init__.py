"""virustiter segment — nuclear segmentation by adaptive threshold and watershed."""

from virustiter.segment.morphology import (
    distance_map,
    fill_holes,
    find_seeds,
    watershed_labels,
)
from virustiter.segment.nuc_mask import NuclearMaskBuilder, NucMaskParams, nuc_mask
from virustiter.segment.preprocessing import normalize_image, smooth
from virustiter.segment.thresholding import adaptive_threshold, disc_kernel, local_mean

__all__ = [
    "NucMaskParams",
    "NuclearMaskBuilder",
    "adaptive_threshold",
    "disc_kernel",
    "distance_map",
    "fill_holes",
    "find_seeds",
    "local_mean",
    "normalize_image",
    "nuc_mask",
    "smooth",
    "watershed_labels",
]
