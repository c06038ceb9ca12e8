"""virustiter IO — image sources, TIFF reading, image sets, tables."""

from virustiter.io.frames import normalize_which, split_pair
from virustiter.io.scanner import ImageCheckResult, check_images, list_images, load_group
from virustiter.io.sources import (
    ImageSource,
    LoadedSource,
    PathSource,
    as_source,
    resolve_image,
)
from virustiter.io.tables import read_phenotype, read_table
from virustiter.io.tiff import read_image, read_tiff, write_tiff

__all__ = [
    "ImageCheckResult",
    "ImageSource",
    "LoadedSource",
    "PathSource",
    "as_source",
    "check_images",
    "list_images",
    "load_group",
    "normalize_which",
    "read_image",
    "read_phenotype",
    "read_table",
    "read_tiff",
    "resolve_image",
    "split_pair",
    "write_tiff",
]
