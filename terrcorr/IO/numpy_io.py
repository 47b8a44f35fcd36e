# -*- coding: utf-8 -*-
"""
NumPy Line Rasters - Memory-mapped ``.npy`` rasters and in-memory arrays.

``.npy`` rasters hold ``(lines, samples)`` or ``(bands, lines, samples)``
arrays.  Scene metadata lives in a ``<file>.npy.json`` sidecar.  Reads
and writes go through memory maps so only the touched lines are paged
in.

``ArrayLineReader`` and ``ArrayLineWriter`` offer the same line interface
over arrays held in memory, for library callers and tests.

Author
------
Steven Siebert

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-02-11

Modified
--------
2026-03-02
"""

# Standard library
from pathlib import Path
from typing import Optional, Union

# Third-party
import numpy as np

# Terrcorr internal
from terrcorr.exceptions import ValidationError
from terrcorr.IO.base import LineReader, LineWriter
from terrcorr.IO.models import (
    SceneMetadata,
    read_metadata,
    sidecar_path,
    write_metadata,
)


def _as_cube(data: np.ndarray) -> np.ndarray:
    """View a 2D raster as a single-band 3D one."""
    if data.ndim == 2:
        return data[np.newaxis, :, :]
    if data.ndim != 3:
        raise ValidationError(
            f"Line rasters must be 2D or 3D, got shape {data.shape}"
        )
    return data


def _check_shape(cube: np.ndarray, metadata: SceneMetadata, source: str) -> None:
    if cube.shape != metadata.shape:
        raise ValidationError(
            f"{source}: array shape {cube.shape} does not match metadata "
            f"(bands, lines, samples) = {metadata.shape}"
        )


class NumpyLineReader(LineReader):
    """Read scanlines from a memory-mapped ``.npy`` raster.

    Parameters
    ----------
    filepath : str or Path
        Path to the ``.npy`` file.  Metadata is read from the JSON
        sidecar when present, otherwise only dimensions are known.

    Examples
    --------
    >>> with NumpyLineReader('dem_slant.npy') as reader:
    ...     heights = reader.read_line(0)
    """

    def _load_metadata(self) -> None:
        self._array = _as_cube(np.load(str(self.filepath), mmap_mode='r'))
        bands, lines, samples = self._array.shape
        if sidecar_path(self.filepath).exists():
            self.metadata = read_metadata(self.filepath)
            _check_shape(self._array, self.metadata, str(self.filepath))
        else:
            self.metadata = SceneMetadata(
                lines=lines, samples=samples, bands=bands,
                dtype=str(self._array.dtype),
            )

    def _read_line(self, line: int, band: int) -> np.ndarray:
        return np.array(self._array[band, line, :])

    def close(self) -> None:
        self._array = None


class NumpyLineWriter(LineWriter):
    """Write scanlines into a memory-mapped ``.npy`` raster.

    Single-band rasters are stored 2D.  The sidecar is written on
    ``close``.

    Parameters
    ----------
    filepath : str or Path
        Output ``.npy`` path.
    metadata : SceneMetadata
        Output dimensions and scene metadata.
    """

    def __init__(
        self,
        filepath: Union[str, Path],
        metadata: SceneMetadata,
    ) -> None:
        super().__init__(filepath, metadata)
        if metadata.bands == 1:
            shape = (metadata.lines, metadata.samples)
        else:
            shape = metadata.shape
        self._memmap = np.lib.format.open_memmap(
            str(self.filepath), mode='w+',
            dtype=np.dtype(metadata.dtype), shape=shape,
        )
        self._cube = _as_cube(self._memmap)

    def _write_line(self, data: np.ndarray, line: int, band: int) -> None:
        self._cube[band, line, :] = data

    def close(self) -> None:
        if self._closed:
            return
        self._memmap.flush()
        self._cube = None
        self._memmap = None
        write_metadata(self.metadata, self.filepath)
        super().close()


class ArrayLineReader(LineReader):
    """Serve scanlines from an in-memory array.

    Parameters
    ----------
    data : np.ndarray
        ``(lines, samples)`` or ``(bands, lines, samples)``.
    metadata : SceneMetadata, optional
        Scene metadata.  Built from the array shape when omitted; its
        dimensions must match the array when given.
    """

    def __init__(
        self,
        data: np.ndarray,
        metadata: Optional[SceneMetadata] = None,
    ) -> None:
        self.filepath = None
        self._array = _as_cube(np.asarray(data))
        bands, lines, samples = self._array.shape
        if metadata is None:
            metadata = SceneMetadata(
                lines=lines, samples=samples, bands=bands,
                dtype=str(self._array.dtype),
            )
        _check_shape(self._array, metadata, 'in-memory raster')
        self.metadata = metadata

    def _load_metadata(self) -> None:
        pass

    def _read_line(self, line: int, band: int) -> np.ndarray:
        return np.array(self._array[band, line, :])


class ArrayLineWriter(LineWriter):
    """Collect written scanlines in an in-memory array.

    Parameters
    ----------
    metadata : SceneMetadata
        Output dimensions.

    Attributes
    ----------
    data : np.ndarray
        ``(bands, lines, samples)`` array of the data written so far.
    """

    def __init__(self, metadata: SceneMetadata) -> None:
        super().__init__(None, metadata)
        self.data = np.zeros(metadata.shape, dtype=np.dtype(metadata.dtype))

    def _write_line(self, data: np.ndarray, line: int, band: int) -> None:
        self.data[band, line, :] = data
