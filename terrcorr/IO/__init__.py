# -*- coding: utf-8 -*-
"""
IO Module - Line-oriented raster input/output for terrain correction.

Readers and writers for the float rasters the deskew driver streams:
memory-mapped ``.npy`` files, GeoTIFF files (rasterio), and in-memory
arrays.  Format is chosen from the file extension unless given
explicitly.  Backends are imported lazily so rasterio is only required
when a GeoTIFF is opened.

Dependencies
------------
rasterio (GeoTIFF only)

Author
------
Duane Smalley, PhD
duane.d.smalley@gmail.com

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-01-30

Modified
--------
2026-03-02
"""

# Standard library
import importlib
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

# Base classes and models
from terrcorr.IO.base import LineReader, LineWriter
from terrcorr.IO.models import (
    SceneMetadata,
    read_metadata,
    sidecar_path,
    write_metadata,
)
from terrcorr.IO.numpy_io import (
    ArrayLineReader,
    ArrayLineWriter,
    NumpyLineReader,
    NumpyLineWriter,
)
from terrcorr.vocabulary import OutputFormat


# Format registries: map format strings to (module_path, class_name)
_READER_REGISTRY: Dict[str, Tuple[str, str]] = {
    OutputFormat.GEOTIFF.value: ('terrcorr.IO.geotiff', 'GeoTIFFLineReader'),
    OutputFormat.NUMPY.value: ('terrcorr.IO.numpy_io', 'NumpyLineReader'),
}

_WRITER_REGISTRY: Dict[str, Tuple[str, str]] = {
    OutputFormat.GEOTIFF.value: ('terrcorr.IO.geotiff', 'GeoTIFFLineWriter'),
    OutputFormat.NUMPY.value: ('terrcorr.IO.numpy_io', 'NumpyLineWriter'),
}

# Extension-to-format mapping for auto-detection
_EXTENSION_MAP: Dict[str, str] = {
    '.tif': OutputFormat.GEOTIFF.value,
    '.tiff': OutputFormat.GEOTIFF.value,
    '.geotiff': OutputFormat.GEOTIFF.value,
    '.npy': OutputFormat.NUMPY.value,
}


def format_from_path(
    path: Union[str, Path],
    format: Optional[Union[str, OutputFormat]] = None,
) -> str:
    """Resolve the raster format of *path*.

    Parameters
    ----------
    path : str or Path
        Raster path.
    format : str or OutputFormat, optional
        Explicit format; overrides the extension.

    Returns
    -------
    str
        Registry key, ``'geotiff'`` or ``'numpy'``.

    Raises
    ------
    ValueError
        If the format is unknown or cannot be inferred.
    """
    if format is not None:
        key = format.value if isinstance(format, OutputFormat) else format.lower()
        if key not in _WRITER_REGISTRY:
            raise ValueError(
                f"Unknown raster format: {format!r}. "
                f"Supported formats: {sorted(_WRITER_REGISTRY.keys())}"
            )
        return key
    ext = Path(path).suffix.lower()
    if ext not in _EXTENSION_MAP:
        raise ValueError(
            f"Cannot determine raster format from extension '{ext}'. "
            f"Supported extensions: {sorted(_EXTENSION_MAP.keys())}. "
            f"Provide an explicit format= argument."
        )
    return _EXTENSION_MAP[ext]


def _load_class(registry: Dict[str, Tuple[str, str]], key: str) -> type:
    module_path, class_name = registry[key]
    module = importlib.import_module(module_path)
    return getattr(module, class_name)


def open_reader(
    filepath: Union[str, Path],
    format: Optional[Union[str, OutputFormat]] = None,
) -> LineReader:
    """Open a line raster for reading.

    Parameters
    ----------
    filepath : str or Path
        Raster path.
    format : str or OutputFormat, optional
        Format override.  Inferred from the extension when None.

    Returns
    -------
    LineReader

    Examples
    --------
    >>> from terrcorr.IO import open_reader
    >>> with open_reader('dem_slant.npy') as dem:
    ...     first = dem.read_line(0)
    """
    key = format_from_path(filepath, format)
    return _load_class(_READER_REGISTRY, key)(filepath)


def get_writer(
    format: Union[str, OutputFormat],
    filepath: Union[str, Path],
    metadata: SceneMetadata,
) -> LineWriter:
    """Create a LineWriter for the given format.

    Parameters
    ----------
    format : str or OutputFormat
        ``'geotiff'`` or ``'numpy'``.
    filepath : str or Path
        Output path.
    metadata : SceneMetadata
        Output dimensions and scene metadata.

    Returns
    -------
    LineWriter

    Raises
    ------
    ValueError
        If *format* is not a recognized format string.
    """
    key = format_from_path(filepath, format)
    return _load_class(_WRITER_REGISTRY, key)(filepath, metadata)


def open_writer(
    filepath: Union[str, Path],
    metadata: SceneMetadata,
    format: Optional[Union[str, OutputFormat]] = None,
) -> LineWriter:
    """Create a LineWriter, inferring the format from the extension."""
    return get_writer(format_from_path(filepath, format), filepath, metadata)


__all__ = [
    'LineReader',
    'LineWriter',
    'SceneMetadata',
    'read_metadata',
    'write_metadata',
    'sidecar_path',
    'NumpyLineReader',
    'NumpyLineWriter',
    'ArrayLineReader',
    'ArrayLineWriter',
    'format_from_path',
    'open_reader',
    'get_writer',
    'open_writer',
]
