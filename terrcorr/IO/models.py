# -*- coding: utf-8 -*-
"""
IO Models - Typed scene metadata for line-oriented SAR and DEM rasters.

Provides ``SceneMetadata``, the metadata accessor consumed by the
terrain-correction core: raster dimensions, band layout, sample-axis
geometry, and the orbital quantities (earth radius, satellite height,
slant range to first sample and sample spacing) needed to build the
slant/ground range lookup tables.  Metadata travels alongside each raster
as a JSON sidecar file.

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
2026-02-10

Modified
--------
2026-03-02
"""

# Standard library
import json
from dataclasses import dataclass, field, fields as dc_fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

# Third-party
import numpy as np

# Terrcorr internal
from terrcorr.vocabulary import ImageType

ScalarOrArray = Union[float, np.ndarray]


def _broadcast(value: float, line: Any, sample: Any) -> ScalarOrArray:
    """Return *value* shaped like the broadcast of *line* and *sample*."""
    if np.isscalar(line) and np.isscalar(sample):
        return float(value)
    shape = np.broadcast(np.asarray(line), np.asarray(sample)).shape
    return np.full(shape, value, dtype=np.float64)


@dataclass
class SceneMetadata:
    """Typed metadata for a SAR image or DEM raster.

    The orbital fields describe the scene-centre viewing geometry.  The
    accessors take ``(line, sample)`` arguments so callers are written
    against position-dependent geometry even though this model holds a
    single value per scene.

    Parameters
    ----------
    lines : int
        Number of image lines (azimuth).
    samples : int
        Number of samples per line (range).
    bands : int
        Number of bands.  Default 1.
    band_names : List[str]
        Band names, e.g. ``['HH', 'HV']``.
    dtype : str
        NumPy dtype string of the stored pixels.
    image_type : ImageType
        Geometry of the sample axis (slant range, ground range or map
        projected).
    x_pixel_size : float
        Range pixel size in meters.
    y_pixel_size : float
        Azimuth pixel size in meters.
    earth_radius : float
        Local earth radius at scene centre (meters).
    satellite_height : float
        Geocentric distance to the satellite (meters).  A value smaller
        than ``earth_radius`` is taken as altitude above the surface.
    slant_range_first : float
        Slant range to the first full-resolution sample (meters).
    slant_spacing : float
        Slant range spacing of full-resolution samples (meters).
    start_sample : int
        Offset of the first stored sample in full-resolution samples.
    sample_increment : int
        Full-resolution samples per stored sample.
    nodata : float, optional
        No-data fill value.
    extras : Dict[str, Any]
        Free-form additional metadata.

    Examples
    --------
    >>> meta = SceneMetadata(
    ...     lines=400, samples=512, earth_radius=6371000.0,
    ...     satellite_height=7071000.0, slant_range_first=800000.0,
    ...     slant_spacing=20.0,
    ... )
    >>> meta.get_slant(0, 10)
    800200.0
    """

    lines: int
    samples: int
    bands: int = 1
    band_names: List[str] = field(default_factory=list)
    dtype: str = 'float32'
    image_type: ImageType = ImageType.SLANT_RANGE
    x_pixel_size: float = 1.0
    y_pixel_size: float = 1.0
    earth_radius: float = 6371000.0
    satellite_height: float = 7071000.0
    slant_range_first: float = 0.0
    slant_spacing: float = 1.0
    start_sample: int = 0
    sample_increment: int = 1
    nodata: Optional[float] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.image_type, ImageType):
            self.image_type = ImageType(self.image_type)

    # ----------------------------------------------------------------
    # Geometry accessors
    # ----------------------------------------------------------------

    @property
    def is_map_projected(self) -> bool:
        """Whether the raster has been resampled onto a map projection."""
        return self.image_type is ImageType.MAP_PROJECTED

    @property
    def shape(self) -> Tuple[int, int, int]:
        """``(bands, lines, samples)``."""
        return (self.bands, self.lines, self.samples)

    def get_earth_radius(self, line: Any, sample: Any) -> ScalarOrArray:
        """Earth radius (meters) below the given pixel."""
        return _broadcast(self.earth_radius, line, sample)

    def get_sat_height(self, line: Any, sample: Any) -> ScalarOrArray:
        """Geocentric satellite radius (meters) when imaging the pixel."""
        height = self.satellite_height
        if height < self.earth_radius:
            height = self.earth_radius + height
        return _broadcast(height, line, sample)

    def get_slants(self) -> Tuple[float, float]:
        """Slant range to the first full-resolution sample and its spacing.

        Returns
        -------
        Tuple[float, float]
            ``(slant_first, slant_per)`` in meters.
        """
        return self.slant_range_first, self.slant_spacing

    def get_slant(self, line: Any, sample: Any) -> ScalarOrArray:
        """Slant range (meters) to a stored sample."""
        sample = np.asarray(sample, dtype=np.float64)
        full_res = self.start_sample + sample * self.sample_increment
        slant = self.slant_range_first + full_res * self.slant_spacing
        if np.isscalar(line) and slant.ndim == 0:
            return float(slant)
        return slant + np.zeros_like(np.asarray(line, dtype=np.float64))

    def incidence_angle(self, line: Any, sample: Any) -> ScalarOrArray:
        """Incidence angle (radians) at a stored sample on the ellipsoid.

        Law of cosines in the triangle earth centre, satellite, ground
        point.
        """
        er = self.get_earth_radius(line, sample)
        sat = self.get_sat_height(line, sample)
        sr = self.get_slant(line, sample)
        cos_inner = (sr * sr + er * er - sat * sat) / (2.0 * er * sr)
        return np.pi - np.arccos(cos_inner)

    # ----------------------------------------------------------------
    # Serialization
    # ----------------------------------------------------------------

    def copy(self, **changes: Any) -> 'SceneMetadata':
        """Return a copy with the given fields replaced."""
        changes.setdefault('band_names', list(self.band_names))
        changes.setdefault('extras', dict(self.extras))
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary.

        ``None`` fields are dropped and extras are merged into the top
        level, matching the layout read by :meth:`from_dict`.
        """
        result: Dict[str, Any] = {}
        for f in dc_fields(self):
            if f.name == 'extras':
                continue
            val = getattr(self, f.name)
            if val is None:
                continue
            if isinstance(val, ImageType):
                val = val.value
            result[f.name] = val
        result.update(self.extras)
        return result

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'SceneMetadata':
        """Construct from a plain dictionary.

        Typed field keys become attributes; remaining keys go into
        ``extras``.
        """
        field_names = {f.name for f in dc_fields(cls) if f.name != 'extras'}
        typed = {k: v for k, v in d.items() if k in field_names}
        extras = {k: v for k, v in d.items() if k not in field_names}
        return cls(**typed, extras=extras)


def sidecar_path(filepath: Union[str, Path]) -> Path:
    """Path of the JSON metadata sidecar for a raster file."""
    filepath = Path(filepath)
    return filepath.with_suffix(filepath.suffix + '.json')


def read_metadata(filepath: Union[str, Path]) -> SceneMetadata:
    """Read the metadata sidecar of a raster.

    Parameters
    ----------
    filepath : str or Path
        Raster file path (the sidecar is ``<filepath>.json``).

    Returns
    -------
    SceneMetadata

    Raises
    ------
    FileNotFoundError
        If the sidecar does not exist.
    """
    path = sidecar_path(filepath)
    with open(path) as f:
        return SceneMetadata.from_dict(json.load(f))


def write_metadata(metadata: SceneMetadata, filepath: Union[str, Path]) -> Path:
    """Write the metadata sidecar of a raster.

    Parameters
    ----------
    metadata : SceneMetadata
        Metadata to write.
    filepath : str or Path
        Raster file path (the sidecar is ``<filepath>.json``).

    Returns
    -------
    Path
        The sidecar path written.
    """
    path = sidecar_path(filepath)
    with open(path, 'w') as f:
        json.dump(metadata.to_dict(), f, indent=2, default=str)
    return path
