# -*- coding: utf-8 -*-
"""
Slant Range Geometry Tests - GeometryModel table construction and lookups.

Uses a spaceborne geometry (700 km altitude, 800 km near slant range)
whose incidence angles run from about 31 to 49 degrees across the swath.

Dependencies
------------
pytest

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

import numpy as np
import pytest

from terrcorr.exceptions import GeometryError
from terrcorr.geolocation import GeometryModel
from terrcorr.IO.models import SceneMetadata


EARTH_RADIUS = 6371000.0
ALTITUDE = 700000.0
SLANT_FIRST = 800000.0
SLANT_SPACING = 2000.0
SAMPLES = 100


@pytest.fixture
def model():
    """Coarse 100-sample swath, roughly 3.1 km ground pixels."""
    return GeometryModel(EARTH_RADIUS, ALTITUDE, SLANT_FIRST,
                         SLANT_SPACING, SAMPLES)


class TestConstruction:
    """Table sizes, scalars and validation."""

    def test_altitude_becomes_geocentric_radius(self, model):
        assert model.satellite_height == pytest.approx(EARTH_RADIUS + ALTITUDE)

    def test_geocentric_radius_kept(self):
        m = GeometryModel(EARTH_RADIUS, EARTH_RADIUS + ALTITUDE, SLANT_FIRST,
                          SLANT_SPACING, SAMPLES)
        assert m.satellite_height == pytest.approx(EARTH_RADIUS + ALTITUDE)

    def test_table_lengths(self, model):
        for name in ('slant_range', 'slant_range_sqr', 'incid_ang',
                     'sin_incid_ang', 'cos_incid_ang', 'slant_gr',
                     'height_shift_gr', 'ground_sr', 'height_shift_sr'):
            assert getattr(model, name).shape == (SAMPLES,)

    def test_tables_read_only(self, model):
        with pytest.raises(ValueError):
            model.slant_gr[0] = 5.0

    def test_incidence_increases_across_swath(self, model):
        deg = np.degrees(model.incid_ang)
        assert np.all(np.diff(deg) > 0)
        assert 25.0 < deg[0] < 35.0
        assert 45.0 < deg[-1] < 55.0

    def test_ground_pixel_size(self, model):
        assert 2900.0 < model.gr_pixel_size < 3300.0
        assert model.gr_pixel_size == pytest.approx(
            EARTH_RADIUS / model.phi_mul
        )

    def test_phi_range(self, model):
        assert model.max_phi > model.min_phi > 0
        assert model.phi_mul == pytest.approx(
            (SAMPLES - 1) / (model.max_phi - model.min_phi)
        )

    def test_start_sample_and_increment(self):
        m = GeometryModel(EARTH_RADIUS, ALTITUDE, SLANT_FIRST, 1000.0, SAMPLES,
                          start_sample=4, sample_increment=2)
        assert m.slant_first == pytest.approx(SLANT_FIRST + 4000.0)
        assert m.slant_per == pytest.approx(2000.0)

    def test_from_metadata(self, model):
        meta = SceneMetadata(
            lines=10, samples=SAMPLES, earth_radius=EARTH_RADIUS,
            satellite_height=ALTITUDE, slant_range_first=SLANT_FIRST,
            slant_spacing=SLANT_SPACING,
        )
        m = GeometryModel.from_metadata(meta)
        np.testing.assert_allclose(m.slant_gr, model.slant_gr)
        assert m.line_count == 10

    def test_repr(self, model):
        assert 'samples=100' in repr(model)


class TestDegenerateGeometry:
    """Parameters that cannot describe a viewing geometry."""

    def test_slant_shorter_than_altitude(self):
        with pytest.raises(GeometryError):
            GeometryModel(EARTH_RADIUS, ALTITUDE, 500000.0, SLANT_SPACING,
                          SAMPLES)

    def test_single_sample(self):
        with pytest.raises(GeometryError):
            GeometryModel(EARTH_RADIUS, ALTITUDE, SLANT_FIRST, SLANT_SPACING, 1)

    def test_non_positive_radius(self):
        with pytest.raises(GeometryError):
            GeometryModel(0.0, ALTITUDE, SLANT_FIRST, SLANT_SPACING, SAMPLES)

    def test_non_positive_spacing(self):
        with pytest.raises(GeometryError):
            GeometryModel(EARTH_RADIUS, ALTITUDE, SLANT_FIRST, 0.0, SAMPLES)

    def test_geometry_error_is_value_error(self):
        with pytest.raises(ValueError):
            GeometryModel(EARTH_RADIUS, ALTITUDE, 500000.0, SLANT_SPACING,
                          SAMPLES)


class TestMappings:
    """Point conversions between ground and slant range."""

    def test_phi_round_trip(self, model):
        phi = np.linspace(model.min_phi, model.max_phi, 37)
        np.testing.assert_allclose(model.grx_to_phi(model.phi_to_grx(phi)),
                                   phi, rtol=0, atol=1e-12)

    def test_swath_endpoints(self, model):
        assert model.phi_to_grx(model.min_phi) == pytest.approx(0.0)
        assert model.phi_to_grx(model.max_phi) == pytest.approx(SAMPLES - 1)
        assert model.slant_gr[0] == pytest.approx(0.0, abs=1e-6)
        assert model.slant_gr[-1] == pytest.approx(SAMPLES - 1, abs=1e-6)

    def test_sea_level_round_trip(self, model):
        grx = np.arange(SAMPLES, dtype=np.float64)
        sr = model.gr_to_sr(grx, 0.0)
        back = model.sr_to_gr(sr, 0.0)
        assert np.all(np.abs(back - grx) < 1.0)

    def test_elevated_round_trip(self, model):
        grx = np.arange(2, SAMPLES - 2, dtype=np.float64)
        sr = model.gr_to_sr(grx, 1000.0)
        back = model.sr_to_gr(sr, 1000.0)
        assert np.all(np.abs(back - grx) < 1.0)

    def test_mappings_monotonic(self, model):
        assert np.all(np.diff(model.slant_gr) > 0)
        assert np.all(np.diff(model.ground_sr) > 0)

    def test_raised_terrain_appears_nearer(self, model):
        # Higher terrain at the same ground position is closer in range
        sea = model.gr_to_sr(50.0, 0.0)
        raised = model.gr_to_sr(50.0, 2000.0)
        assert raised < sea

    def test_scalar_in_scalar_out(self, model):
        assert isinstance(model.gr_to_sr(10.0, 0.0), float)
        assert isinstance(model.sr_to_gr(10.0, 0.0), float)
        assert isinstance(model.look_value(10.0, 0.0), float)

    def test_lookup_clamped(self, model):
        assert model.gr_to_sr(-50.0, 0.0) == pytest.approx(model.slant_gr[0])
        assert model.gr_to_sr(500.0, 0.0) == pytest.approx(model.slant_gr[-1])

    def test_look_value_increases_over_flat_ground(self, model):
        looks = model.look_value(np.arange(SAMPLES, dtype=np.float64), 0.0)
        assert np.all(np.diff(looks) > 0)
        assert np.all((looks > -1.0) & (looks < 0.0))

    def test_shift_gr_constant(self, model):
        shifted = model.shift_gr(np.full(SAMPLES, 42.0))
        np.testing.assert_allclose(shifted, 42.0)
