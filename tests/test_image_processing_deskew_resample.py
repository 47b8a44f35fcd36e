# -*- coding: utf-8 -*-
"""
DEM Resampling Tests - DemLine sentinels and slant/ground DEM conversion.

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
2026-10-19
"""

import numpy as np
import pytest

from terrcorr.geolocation import GeometryModel
from terrcorr.image_processing.deskew.heights import (
    BAD_DEM_HEIGHT,
    NO_DEM_DATA,
    DemLine,
)
from terrcorr.image_processing.deskew.resample import (
    carry_forward_heights,
    dem_sr2gr,
    shift_ground_dem,
)
from terrcorr.vocabulary import DemState


SAMPLES = 100


@pytest.fixture
def model():
    return GeometryModel(6371000.0, 700000.0, 800000.0, 2000.0, SAMPLES)


def _line(heights, bad=(), no_data=()):
    heights = np.asarray(heights, dtype=np.float64).copy()
    heights[list(bad)] = BAD_DEM_HEIGHT
    heights[list(no_data)] = NO_DEM_DATA
    return DemLine.from_sentinels(heights)


class TestDemLine:
    """Sentinel decoding and encoding."""

    def test_from_sentinels_states(self):
        line = DemLine.from_sentinels(
            np.array([BAD_DEM_HEIGHT, NO_DEM_DATA, -950.0, 0.0, 100.0, np.nan])
        )
        expected = [DemState.BAD, DemState.NO_DATA, DemState.BAD,
                    DemState.VALID, DemState.VALID, DemState.BAD]
        np.testing.assert_array_equal(line.state, expected)
        np.testing.assert_array_equal(line.heights, [0, 0, 0, 0, 100, 0])

    def test_negative_heights_above_floor_are_valid(self):
        line = DemLine.from_sentinels(np.array([-400.0, -899.0]))
        assert np.all(line.valid)

    def test_to_sentinels(self):
        line = DemLine(
            np.array([5.0, 0.0, 0.0]),
            np.array([DemState.VALID, DemState.BAD, DemState.NO_DATA]),
        )
        out = line.to_sentinels()
        assert out.dtype == np.float32
        np.testing.assert_array_equal(out, [5.0, BAD_DEM_HEIGHT, NO_DEM_DATA])

    def test_empty_is_bad(self):
        line = DemLine.empty(4)
        assert len(line) == 4
        assert not np.any(line.valid)

    def test_assign_in_place(self):
        target = DemLine.empty(3)
        heights = target.heights
        target.assign(DemLine(np.array([1.0, 2.0, 3.0]), np.zeros(3)))
        assert target.heights is heights
        np.testing.assert_array_equal(target.heights, [1, 2, 3])
        assert np.all(target.valid)

    def test_shape_mismatch(self):
        with pytest.raises(ValueError):
            DemLine(np.zeros(3), np.zeros(4))


class TestDemSr2Gr:
    """Slant to ground range DEM conversion."""

    def test_constant_line(self, model):
        out = dem_sr2gr(model, _line(np.full(SAMPLES, 100.0)), fill_holes=True)
        interior = slice(2, SAMPLES - 2)
        assert np.all(out.valid[interior])
        np.testing.assert_allclose(out.heights[interior], 100.0)

    def test_all_bad_line(self, model):
        out = dem_sr2gr(model, DemLine.empty(SAMPLES))
        assert not np.any(out.valid)
        assert np.all(out.state == DemState.BAD)

    def test_short_gap_interpolated(self, model):
        sr = _line(np.full(SAMPLES, 50.0), bad=[40])
        out = dem_sr2gr(model, sr, fill_holes=False)
        assert np.all(out.valid[2:SAMPLES - 2])

    def test_long_gap_left_unfilled(self, model):
        sr = _line(np.full(SAMPLES, 50.0), bad=range(40, 50))
        out = dem_sr2gr(model, sr, fill_holes=False)
        assert np.any(out.state[10:90] == DemState.BAD)

    def test_long_gap_filled(self, model):
        sr = _line(np.full(SAMPLES, 50.0), bad=range(40, 50))
        out = dem_sr2gr(model, sr, fill_holes=True)
        assert np.all(out.valid[2:SAMPLES - 2])
        np.testing.assert_allclose(out.heights[2:SAMPLES - 2], 50.0)

    def test_no_data_propagates(self, model):
        sr = _line(np.full(SAMPLES, 50.0), no_data=range(40, 50))
        out = dem_sr2gr(model, sr, fill_holes=True)
        assert np.count_nonzero(out.no_data) >= 8
        assert not np.any(out.state[2:SAMPLES - 2] == DemState.BAD)
        # Heights under NO_DATA carry no value
        assert np.all(out.heights[out.no_data] == 0.0)

    def test_ramp_interpolated(self, model):
        ramp = np.linspace(0.0, 990.0, SAMPLES)
        out = dem_sr2gr(model, _line(ramp), fill_holes=True)
        h = out.heights[2:SAMPLES - 2]
        assert np.all(np.diff(h) >= 0)
        assert h.min() >= 0.0 and h.max() <= 990.0


class TestShiftGroundDem:
    """Resampling a supplied ground range DEM onto the model grid."""

    def test_constant(self, model):
        out = shift_ground_dem(model, _line(np.full(SAMPLES, 300.0)))
        assert np.all(out.valid)
        np.testing.assert_allclose(out.heights, 300.0)

    def test_bad_sample_spreads_to_nearest(self, model):
        out = shift_ground_dem(model, _line(np.full(SAMPLES, 300.0), bad=[50]))
        assert 1 <= np.count_nonzero(~out.valid) <= 3
        np.testing.assert_allclose(out.heights[out.valid], 300.0)

    def test_unusable_neighbour_with_weight_invalidates(self, model):
        out = shift_ground_dem(model, _line(np.full(SAMPLES, 300.0), bad=[50]))
        pos = np.asarray(model.slant_gr)
        touching = (pos > 49.0) & (pos < 51.0)
        assert np.any(touching)
        assert np.all(out.state[touching] == DemState.BAD)
        assert np.all(out.valid[~touching])
        assert np.all(out.heights[touching] == 0.0)

    def test_no_data_wins_over_bad(self, model):
        sr = _line(np.full(SAMPLES, 300.0), bad=[50], no_data=[51])
        out = shift_ground_dem(model, sr)
        pos = np.asarray(model.slant_gr)
        touching_no_data = (pos > 50.0) & (pos < 52.0)
        assert np.any(touching_no_data)
        assert np.all(out.state[touching_no_data] == DemState.NO_DATA)
        only_bad = (pos > 49.0) & (pos <= 50.0)
        assert np.all(out.state[only_bad] == DemState.BAD)


class TestCarryForward:
    """Last-usable-height propagation."""

    def test_forward(self):
        line = DemLine(
            np.array([0.0, 5.0, 0.0, 0.0, 7.0, 0.0]),
            np.array([1, 0, 1, 2, 0, 1]),
        )
        np.testing.assert_array_equal(carry_forward_heights(line),
                                      [0, 5, 5, 5, 7, 7])

    def test_reverse(self):
        line = DemLine(
            np.array([0.0, 5.0, 0.0, 0.0, 7.0, 0.0]),
            np.array([1, 0, 1, 2, 0, 1]),
        )
        np.testing.assert_array_equal(
            carry_forward_heights(line, reverse=True), [5, 5, 7, 7, 7, 0]
        )
