# -*- coding: utf-8 -*-
"""
IO Base Classes - Abstract interfaces for line-oriented raster access.

Terrain correction streams images one scanline at a time.  ``LineReader``
and ``LineWriter`` define that access pattern: read or write one line of
one band as float samples, with scene metadata attached.

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

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

import numpy as np

from terrcorr.exceptions import ProcessorError
from terrcorr.IO.models import SceneMetadata


class LineReader(ABC):
    """
    Abstract base class for scanline readers.

    Attributes
    ----------
    filepath : Path or None
        Path to the raster file, None for in-memory rasters.
    metadata : SceneMetadata
        Scene metadata of the raster.
    """

    def __init__(self, filepath: Union[str, Path]) -> None:
        """
        Initialize the reader.

        Parameters
        ----------
        filepath : Union[str, Path]
            Path to the raster file

        Raises
        ------
        FileNotFoundError
            If the specified filepath does not exist
        """
        self.filepath: Optional[Path] = Path(filepath)
        if not self.filepath.exists():
            raise FileNotFoundError(f"File not found: {self.filepath}")

        self.metadata: SceneMetadata
        self._load_metadata()

    @abstractmethod
    def _load_metadata(self) -> None:
        """
        Populate ``self.metadata`` and open the raster.
        """
        pass

    @abstractmethod
    def _read_line(self, line: int, band: int) -> np.ndarray:
        """
        Read one line of one band, already bounds checked.
        """
        pass

    def read_line(self, line: int, band: int = 0) -> np.ndarray:
        """
        Read one scanline as float32 samples.

        Parameters
        ----------
        line : int
            Line index (0-based)
        band : int, default=0
            Band index (0-based)

        Returns
        -------
        np.ndarray
            1D float32 array of ``metadata.samples`` values

        Raises
        ------
        ValueError
            If ``line`` or ``band`` is out of bounds
        ProcessorError
            If the raster returns fewer samples than expected
        """
        meta = self.metadata
        if not 0 <= line < meta.lines:
            raise ValueError(
                f"Line {line} out of range for {meta.lines} lines"
            )
        if not 0 <= band < meta.bands:
            raise ValueError(
                f"Band {band} out of range for {meta.bands} bands"
            )
        data = np.asarray(self._read_line(line, band), dtype=np.float32)
        if data.shape != (meta.samples,):
            raise ProcessorError(
                f"Short read from {self.filepath}: line {line} band {band} "
                f"has shape {data.shape}, expected ({meta.samples},)"
            )
        return data

    def close(self) -> None:
        """
        Close the reader and release resources.

        Default implementation does nothing.
        """
        pass

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
        return False


class LineWriter(ABC):
    """
    Abstract base class for scanline writers.

    The output raster is sized from ``metadata`` when the writer is
    created.  Lines may be written in any order; ``close`` finalizes the
    file and its metadata.

    Attributes
    ----------
    filepath : Path or None
        Output path, None for in-memory rasters.
    metadata : SceneMetadata
        Metadata of the raster being written.
    """

    def __init__(
        self,
        filepath: Optional[Union[str, Path]],
        metadata: SceneMetadata,
    ) -> None:
        """
        Initialize the writer.

        Parameters
        ----------
        filepath : Union[str, Path], optional
            Output path
        metadata : SceneMetadata
            Dimensions, band layout and scene metadata of the output
        """
        self.filepath = Path(filepath) if filepath is not None else None
        self.metadata = metadata
        self._closed = False

    @abstractmethod
    def _write_line(self, data: np.ndarray, line: int, band: int) -> None:
        """
        Write one line of one band, already bounds checked.
        """
        pass

    def write_line(self, data: np.ndarray, line: int, band: int = 0) -> None:
        """
        Write one scanline.

        Parameters
        ----------
        data : np.ndarray
            1D array of ``metadata.samples`` values
        line : int
            Line index (0-based)
        band : int, default=0
            Band index (0-based)

        Raises
        ------
        ValueError
            If the line, band or sample count does not fit the raster
        """
        meta = self.metadata
        data = np.asarray(data)
        if data.shape != (meta.samples,):
            raise ValueError(
                f"Expected {meta.samples} samples, got shape {data.shape}"
            )
        if not 0 <= line < meta.lines:
            raise ValueError(
                f"Line {line} out of range for {meta.lines} lines"
            )
        if not 0 <= band < meta.bands:
            raise ValueError(
                f"Band {band} out of range for {meta.bands} bands"
            )
        self._write_line(data, line, band)

    def close(self) -> None:
        """
        Finalize the output.

        Default implementation only marks the writer closed.
        """
        self._closed = True

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
        return False
