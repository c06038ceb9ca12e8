"""Image sources — a path to be loaded, or an array already in memory."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

import numpy as np

from virustiter.core.exceptions import InvalidParameterError


@dataclass(frozen=True)
class PathSource:
    """An image on disk, resolved by ``resolve_image``."""

    path: Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(self.path))


@dataclass(frozen=True, eq=False)
class LoadedSource:
    """An image already loaded into memory."""

    image: np.ndarray = field(repr=False)


ImageSource = Union[PathSource, LoadedSource]


def as_source(obj: ImageSource | np.ndarray | str | os.PathLike) -> ImageSource:
    """Wrap a path or array in the matching ``ImageSource`` variant."""
    if isinstance(obj, (PathSource, LoadedSource)):
        return obj
    if isinstance(obj, (str, os.PathLike)):
        return PathSource(Path(obj))
    if isinstance(obj, np.ndarray):
        return LoadedSource(obj)
    raise InvalidParameterError(
        "source", f"expected a path or numpy array, got {type(obj).__name__}"
    )


def resolve_image(obj: ImageSource | np.ndarray | str | os.PathLike) -> np.ndarray:
    """Return the image array for a source, reading it from disk if needed.

    Raises:
        FileNotFoundError: If a path source does not exist.
        InvalidParameterError: If ``obj`` is neither a path nor an array.
    """
    source = as_source(obj)
    if isinstance(source, LoadedSource):
        return source.image

    from virustiter.io.tiff import read_image

    if not source.path.is_file():
        raise FileNotFoundError(f"Image file not found: {source.path}")
    return read_image(source.path)
