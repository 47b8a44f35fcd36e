# -*- coding: utf-8 -*-
"""
DEM Heights - Tagged height lines and the legacy sentinel encoding.

DEM rasters mark missing terrain with reserved float values.  Inside the
deskew pipeline a line of heights is carried as a ``DemLine``: float
heights plus an explicit per-sample ``DemState``.  Only
``DemLine.from_sentinels`` and ``DemLine.to_sentinels`` compare against
the reserved values.

Dependencies
------------
numpy

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
2026-02-12

Modified
--------
2026-03-02
"""

# Standard library
from dataclasses import dataclass

# Third-party
import numpy as np

# Terrcorr internal
from terrcorr.vocabulary import DemState

#: Height written for unmeasured terrain.
BAD_DEM_HEIGHT = -10000.0

#: Height written where DEM data is explicitly absent.
NO_DEM_DATA = -9999.0

#: Heights below this floor (meters) are treated as unmeasured.
MIN_VALID_HEIGHT = -900.0

_NO_DATA_TOLERANCE = 1e-4


@dataclass
class DemLine:
    """One line of DEM heights with an explicit state per sample.

    Parameters
    ----------
    heights : np.ndarray
        Heights in meters, float64.  Values under non-``VALID`` states
        are undefined and must not be used.
    state : np.ndarray
        ``DemState`` codes (uint8), same length as ``heights``.
    """

    heights: np.ndarray
    state: np.ndarray

    def __post_init__(self) -> None:
        self.heights = np.asarray(self.heights, dtype=np.float64)
        self.state = np.asarray(self.state, dtype=np.uint8)
        if self.heights.shape != self.state.shape:
            raise ValueError(
                f"heights shape {self.heights.shape} does not match "
                f"state shape {self.state.shape}"
            )

    @classmethod
    def empty(cls, n: int) -> 'DemLine':
        """A line of ``n`` samples, all ``BAD``."""
        return cls(np.zeros(n), np.full(n, DemState.BAD, dtype=np.uint8))

    @classmethod
    def from_sentinels(cls, values: np.ndarray) -> 'DemLine':
        """Classify raw raster heights.

        ``NO_DEM_DATA`` becomes ``NO_DATA``.  ``BAD_DEM_HEIGHT``, NaN and
        any other height below ``MIN_VALID_HEIGHT`` become ``BAD``.
        """
        values = np.asarray(values, dtype=np.float64)
        state = np.full(values.shape, DemState.VALID, dtype=np.uint8)
        with np.errstate(invalid='ignore'):
            bad = ~(values >= MIN_VALID_HEIGHT)
        state[bad] = DemState.BAD
        state[np.abs(values - NO_DEM_DATA) < _NO_DATA_TOLERANCE] = \
            DemState.NO_DATA
        heights = np.where(state == DemState.VALID, values, 0.0)
        return cls(heights, state)

    def to_sentinels(self) -> np.ndarray:
        """Encode back to raw raster heights (float32)."""
        out = self.heights.astype(np.float32)
        out[self.state == DemState.BAD] = BAD_DEM_HEIGHT
        out[self.state == DemState.NO_DATA] = NO_DEM_DATA
        return out

    def copy(self) -> 'DemLine':
        return DemLine(self.heights.copy(), self.state.copy())

    def assign(self, other: 'DemLine') -> None:
        """Overwrite this line's contents in place."""
        self.heights[...] = other.heights
        self.state[...] = other.state

    @property
    def valid(self) -> np.ndarray:
        """Boolean mask of samples holding a usable height."""
        return self.state == DemState.VALID

    @property
    def no_data(self) -> np.ndarray:
        """Boolean mask of samples explicitly marked as absent data."""
        return self.state == DemState.NO_DATA

    def __len__(self) -> int:
        return len(self.heights)
