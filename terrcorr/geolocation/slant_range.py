# -*- coding: utf-8 -*-
"""
Slant Range Geometry - Ground range / slant range lookup tables for a swath.

Builds, once per image, the per-sample tables that relate slant-range
sample positions to ground-range sample positions for a spherical earth
seen from a satellite at a fixed geocentric radius.  Ground range is
sampled uniformly in earth central angle ``phi``, so the ground pixel size
is ``earth_radius / phi_mul``.

Terrain height moves a point in both directions: a raised point is seen
at a shorter slant range than the sea-level point below it.  The
``height_shift_*`` tables hold that displacement (pixels per meter of
height), measured by raising the earth radius 1000 m and re-solving the
triangle.

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
2026-02-11

Modified
--------
2026-03-02
"""

# Standard library
import logging
from typing import Union, TYPE_CHECKING

# Third-party
import numpy as np

# Terrcorr internal
from terrcorr.exceptions import GeometryError

if TYPE_CHECKING:
    from terrcorr.IO.models import SceneMetadata

logger = logging.getLogger(__name__)

ArrayLike = Union[float, np.ndarray]

# Height step (m) used to measure the height displacement tables.
_HEIGHT_PROBE = 1000.0

# Slack allowed on acos arguments before geometry is declared degenerate.
_ACOS_TOLERANCE = 1e-12


def _acos(cos_value: np.ndarray, what: str) -> np.ndarray:
    """``arccos`` that refuses arguments outside [-1, 1].

    Raises
    ------
    GeometryError
        If any argument is non-finite or outside [-1, 1] by more than
        rounding error.
    """
    cos_value = np.asarray(cos_value, dtype=np.float64)
    bad = ~np.isfinite(cos_value) | (np.abs(cos_value) > 1.0 + _ACOS_TOLERANCE)
    if np.any(bad):
        raise GeometryError(
            f"Degenerate viewing geometry while computing {what}: "
            f"cosine {cos_value[bad].ravel()[0]!r} is outside [-1, 1]. "
            f"Check satellite height, earth radius and slant ranges."
        )
    return np.arccos(np.clip(cos_value, -1.0, 1.0))


class GeometryModel:
    """Slant/ground range mapping tables for one image.

    All tables have ``sample_count`` entries.  Tables indexed by slant
    range position: ``slant_range``, ``slant_range_sqr``, ``incid_ang``,
    ``sin_incid_ang``, ``cos_incid_ang``, ``ground_sr`` and
    ``height_shift_sr``.  Tables indexed by ground range position:
    ``slant_gr`` and ``height_shift_gr``.

    The model is read-only once built; its arrays are flagged
    non-writeable.

    Parameters
    ----------
    earth_radius : float
        Earth radius at scene centre (meters).
    satellite_height : float
        Geocentric satellite radius (meters).  Values smaller than
        ``earth_radius`` are taken as altitude above the surface.
    slant_first : float
        Slant range to the first full-resolution sample (meters).
    slant_spacing : float
        Full-resolution slant range sample spacing (meters).
    sample_count : int
        Samples per line.  At least 2.
    start_sample : int
        Offset of the first stored sample in full-resolution samples.
    sample_increment : int
        Full-resolution samples per stored sample.
    line_count : int
        Lines in the image, kept for reporting.

    Raises
    ------
    GeometryError
        If the parameters do not describe a realisable viewing geometry.

    Examples
    --------
    >>> model = GeometryModel(6371000.0, 700000.0, 800000.0, 2000.0, 100)
    >>> round(model.phi_to_grx(model.grx_to_phi(42.0)), 6)
    42.0
    """

    def __init__(
        self,
        earth_radius: float,
        satellite_height: float,
        slant_first: float,
        slant_spacing: float,
        sample_count: int,
        start_sample: int = 0,
        sample_increment: int = 1,
        line_count: int = 1,
    ) -> None:
        earth_radius = float(earth_radius)
        satellite_height = float(satellite_height)
        if not np.isfinite(earth_radius) or earth_radius <= 0:
            raise GeometryError(
                f"earth_radius must be positive, got {earth_radius}"
            )
        if not np.isfinite(satellite_height) or satellite_height <= 0:
            raise GeometryError(
                f"satellite_height must be positive, got {satellite_height}"
            )
        if int(sample_count) < 2:
            raise GeometryError(
                f"sample_count must be at least 2, got {sample_count}"
            )
        if not slant_spacing > 0 or not sample_increment > 0:
            raise GeometryError(
                f"slant spacing must be positive, got spacing "
                f"{slant_spacing} with increment {sample_increment}"
            )
        if satellite_height < earth_radius:
            satellite_height = earth_radius + satellite_height

        self.earth_radius = earth_radius
        self.satellite_height = satellite_height
        self.sample_count = int(sample_count)
        self.line_count = int(line_count)
        self.slant_first = float(slant_first) + slant_spacing * start_sample
        self.slant_per = float(slant_spacing) * sample_increment

        self._build_tables()

    @classmethod
    def from_metadata(cls, meta: 'SceneMetadata') -> 'GeometryModel':
        """Build the model from scene metadata, sampled at scene centre."""
        centre_line = meta.lines // 2
        centre_sample = meta.samples // 2
        slant_first, slant_per = meta.get_slants()
        return cls(
            earth_radius=meta.get_earth_radius(centre_line, centre_sample),
            satellite_height=meta.get_sat_height(centre_line, centre_sample),
            slant_first=slant_first,
            slant_spacing=slant_per,
            sample_count=meta.samples,
            start_sample=meta.start_sample,
            sample_increment=meta.sample_increment,
            line_count=meta.lines,
        )

    # ----------------------------------------------------------------
    # Table construction
    # ----------------------------------------------------------------

    def _build_tables(self) -> None:
        er = self.earth_radius
        sat = self.satellite_height
        ns = self.sample_count
        x = np.arange(ns, dtype=np.float64)

        self.slant_range = self.slant_first + x * self.slant_per
        self.slant_range_sqr = self.slant_range * self.slant_range
        if self.slant_range[0] <= 0:
            raise GeometryError(
                f"Slant range to first sample must be positive, got "
                f"{self.slant_range[0]}"
            )

        self.incid_ang = np.pi - _acos(
            (self.slant_range_sqr + er * er - sat * sat)
            / (2.0 * er * self.slant_range),
            'incidence angle',
        )
        self.sin_incid_ang = np.sin(self.incid_ang)
        self.cos_incid_ang = np.cos(self.incid_ang)

        # Earth central angle of each slant range sample at sea level
        phi_sr = _acos(
            (sat * sat + er * er - self.slant_range_sqr) / (2.0 * sat * er),
            'earth central angle',
        )
        self.min_phi = float(phi_sr[0])
        self.max_phi = float(phi_sr[-1])
        if not self.max_phi > self.min_phi:
            raise GeometryError(
                f"Swath has no ground extent: central angles "
                f"[{self.min_phi}, {self.max_phi}]"
            )
        self.phi_mul = (ns - 1) / (self.max_phi - self.min_phi)
        self.gr_pixel_size = er / self.phi_mul

        er_up = er + _HEIGHT_PROBE

        # Indexed by ground range pixel
        phi_gr = self.grx_to_phi(x)
        slant = np.sqrt(sat * sat + er * er - 2.0 * sat * er * np.cos(phi_gr))
        self.slant_gr = (slant - self.slant_first) / self.slant_per
        phi_up = _acos(
            (sat * sat + er_up * er_up - slant * slant) / (2.0 * sat * er_up),
            'raised ground range angle',
        )
        self.height_shift_gr = (self.phi_to_grx(phi_up) - x) / _HEIGHT_PROBE

        # Indexed by slant range pixel
        self.ground_sr = self.phi_to_grx(phi_sr)
        slant_up = np.sqrt(
            sat * sat + er_up * er_up - 2.0 * sat * er_up * np.cos(phi_sr)
        )
        self.height_shift_sr = (
            (slant_up - self.slant_first) / self.slant_per - x
        ) / _HEIGHT_PROBE

        for name in ('slant_range', 'slant_range_sqr', 'incid_ang',
                     'sin_incid_ang', 'cos_incid_ang', 'slant_gr',
                     'height_shift_gr', 'ground_sr', 'height_shift_sr'):
            table = getattr(self, name)
            if not np.all(np.isfinite(table)):
                raise GeometryError(f"Non-finite values in {name} table")
            table.setflags(write=False)

        logger.debug(
            "Geometry: %d samples, incidence %.2f-%.2f deg, "
            "ground pixel %.3f m",
            ns, np.degrees(self.incid_ang[0]),
            np.degrees(self.incid_ang[-1]), self.gr_pixel_size,
        )

    # ----------------------------------------------------------------
    # Point mappings
    # ----------------------------------------------------------------

    def grx_to_phi(self, grx: ArrayLike) -> ArrayLike:
        """Ground range pixel position to earth central angle (radians)."""
        return self.min_phi + np.asarray(grx, dtype=np.float64) / self.phi_mul

    def phi_to_grx(self, phi: ArrayLike) -> ArrayLike:
        """Earth central angle (radians) to ground range pixel position."""
        return (np.asarray(phi, dtype=np.float64) - self.min_phi) * self.phi_mul

    def _lookup(
        self,
        pos: ArrayLike,
        height: ArrayLike,
        shift: np.ndarray,
        table: np.ndarray,
    ) -> ArrayLike:
        """Remove the height displacement at *pos*, then interpolate *table*.

        Positions are clamped to ``[0, ns - 1]`` so the lookup never
        leaves the table.
        """
        ns = self.sample_count
        p = np.asarray(pos, dtype=np.float64)
        h = np.asarray(height, dtype=np.float64)
        idx = np.clip(np.floor(p), 0, ns - 1).astype(np.intp)
        sea_level = np.clip(p - h * shift[idx], 0.0, ns - 1.0)
        ix = np.minimum(np.floor(sea_level), ns - 2).astype(np.intp)
        dx = sea_level - ix
        result = table[ix] + dx * (table[ix + 1] - table[ix])
        if np.ndim(pos) == 0 and np.ndim(height) == 0:
            return float(result)
        return result

    def gr_to_sr(self, grx: ArrayLike, height: ArrayLike) -> ArrayLike:
        """Ground range position and terrain height to slant range position.

        Parameters
        ----------
        grx : float or np.ndarray
            Fractional ground range sample position(s).
        height : float or np.ndarray
            Terrain height(s) in meters, broadcast against ``grx``.

        Returns
        -------
        float or np.ndarray
            Fractional slant range sample position(s).
        """
        return self._lookup(grx, height, self.height_shift_gr, self.slant_gr)

    def sr_to_gr(self, srx: ArrayLike, height: ArrayLike) -> ArrayLike:
        """Slant range position and terrain height to ground range position.

        Mirror of :meth:`gr_to_sr`.
        """
        return self._lookup(srx, height, self.height_shift_sr, self.ground_sr)

    def shift_gr(self, values: np.ndarray) -> np.ndarray:
        """Resample a ground range line onto slant-consistent positions.

        Output pixel ``x`` takes the input interpolated linearly at
        ``slant_gr[x]``; positions before the first or after the last
        sample take the edge value.
        """
        values = np.asarray(values, dtype=np.float64)
        ns = self.sample_count
        new_x = np.floor(self.slant_gr).astype(np.intp)
        ix = np.clip(new_x, 0, ns - 2)
        frac = self.slant_gr - ix
        out = values[ix] * (1.0 - frac) + values[ix + 1] * frac
        out[new_x < 0] = values[0]
        out[new_x > ns - 2] = values[ns - 1]
        return out

    def look_value(self, grx: ArrayLike, height: ArrayLike) -> ArrayLike:
        """Negative cosine of the off-nadir look angle to a terrain point.

        Increases monotonically across a visible swath.  A point whose
        value is smaller than one already passed is hidden from the
        sensor (radar shadow).
        """
        sat = self.satellite_height
        phi = self.grx_to_phi(grx)
        radius = self.earth_radius + np.asarray(height, dtype=np.float64)
        sr_sqr = sat * sat + radius * radius - 2.0 * sat * radius * np.cos(phi)
        sr = np.sqrt(sr_sqr)
        look = -(sr_sqr + sat * sat - radius * radius) / (2.0 * sr * sat)
        if np.ndim(grx) == 0 and np.ndim(height) == 0:
            return float(look)
        return look

    def __repr__(self) -> str:
        return (
            f"GeometryModel(samples={self.sample_count}, "
            f"lines={self.line_count}, "
            f"gr_pixel_size={self.gr_pixel_size:.3f})"
        )
