"""Image set discovery — group images by well directory or by stack file."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from virustiter.core.exceptions import InvalidParameterError
from virustiter.io.frames import normalize_which
from virustiter.io.tiff import IMAGE_EXTENSIONS, read_image

logger = logging.getLogger(__name__)

WELL_PATTERN = re.compile(r"^[A-Za-z][0-9]+$")

_TYPE_EXTENSIONS = {
    "tif": {".tif", ".tiff"},
    "tiff": {".tif", ".tiff"},
    "jpg": {".jpg", ".jpeg"},
    "jpeg": {".jpg", ".jpeg"},
    "png": {".png"},
}


@dataclass(frozen=True)
class ImageCheckResult:
    """Summary of an image set.

    Attributes:
        image_type: "by_well" (one directory per well) or "by_stack"
            (one multi-frame file per group).
        key: Grouping column the groups correspond to ("well" or "file").
        groups: Group name -> image files, sorted by name.
        n_frames: Group name -> total frames read.
        n_fields: Group name -> number of image fields (frames / per_field).
    """

    image_type: str
    key: str
    groups: dict[str, list[Path]]
    n_frames: dict[str, int] = field(default_factory=dict)
    n_fields: dict[str, int] = field(default_factory=dict)


def list_images(path: Path, type: str = "tiff", pattern: str | None = None) -> list[Path]:
    """Find image files of a type below ``path``, optionally filtered by regex.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        InvalidParameterError: If ``path`` is not a directory or the type
            is unknown.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Image path does not exist: {path}")
    if not path.is_dir():
        raise InvalidParameterError("path", f"not a directory: {path}")
    extensions = _TYPE_EXTENSIONS.get(type.lower())
    if extensions is None:
        raise InvalidParameterError("type", f"unknown image type {type!r}")

    regex = re.compile(pattern) if pattern else None
    files = []
    for child in sorted(path.rglob("*")):
        if child.is_symlink() or not child.is_file():
            continue
        if child.suffix.lower() not in extensions:
            continue
        if regex is not None and not regex.search(str(child)):
            continue
        files.append(child)
    return files


def group_images(files: Sequence[Path]) -> tuple[str, dict[str, list[Path]]]:
    """Group files by well directory (``A1/img.tif``) or by file name.

    Returns:
        Tuple of (image type, groups).

    Raises:
        InvalidParameterError: If well directories and stack files are mixed.
    """
    by_well = [bool(WELL_PATTERN.match(f.parent.name)) for f in files]
    groups: dict[str, list[Path]] = {}
    if files and all(by_well):
        image_type = "by_well"
        for f in files:
            groups.setdefault(f.parent.name, []).append(f)
    elif not any(by_well):
        image_type = "by_stack"
        for f in files:
            groups.setdefault(f.name, []).append(f)
    else:
        raise InvalidParameterError(
            "path", "unable to use a mixture of well directories and stack files"
        )
    return image_type, dict(sorted(groups.items()))


def load_group(files: Sequence[Path]) -> np.ndarray:
    """Read a group of files as a single (frames, Y, X) stack."""
    frames = []
    for f in files:
        data = read_image(f)
        if data.ndim == 2:
            data = data[np.newaxis]
        frames.append(data)
    return np.concatenate(frames, axis=0)


def check_images(
    path: Path,
    type: str = "tiff",
    which: Sequence[int] = (1, 2, 2),
    pattern: str | None = None,
) -> ImageCheckResult:
    """Check that every image group holds whole fields of paired frames.

    Args:
        path: Directory of well subdirectories or multi-frame files.
        type: Image file type ("tif", "tiff", "jpeg", "jpg", "png").
        which: Nuclear and target positions (1-based) and frames per field.
        pattern: Optional regex selecting image files.

    Returns:
        ImageCheckResult describing the groups.

    Raises:
        InvalidParameterError: If no images are found, layouts are mixed,
            or a group's frame count is not a multiple of the frames per field.
    """
    _, _, per_field = normalize_which(which)
    files = list_images(path, type=type, pattern=pattern)
    logger.info("Found %d image files", len(files))
    if not files:
        raise InvalidParameterError("path", f"no {type} images found in {path}")

    image_type, groups = group_images(files)
    key = "well" if image_type == "by_well" else "file"
    logger.info("Found %d groups of images by %s", len(groups), key)

    n_frames: dict[str, int] = {}
    n_fields: dict[str, int] = {}
    bad: list[str] = []
    for name, group_files in groups.items():
        n = int(load_group(group_files).shape[0])
        n_frames[name] = n
        n_fields[name] = n // per_field
        if n % per_field != 0:
            bad.append(name)
    if bad:
        raise InvalidParameterError(
            "which", f"the number of images in {', '.join(bad)} is not a multiple of {per_field}"
        )

    return ImageCheckResult(
        image_type=image_type,
        key=key,
        groups=groups,
        n_frames=n_frames,
        n_fields=n_fields,
    )
