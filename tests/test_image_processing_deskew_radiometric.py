# -*- coding: utf-8 -*-
"""
Radiometric Correction Tests - Kellndorfer slope normalization.

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
2026-02-16

Modified
--------
2026-10-19
"""

import numpy as np
import pytest

from terrcorr.exceptions import ValidationError
from terrcorr.geolocation import GeometryModel
from terrcorr.image_processing.deskew.heights import DemLine
from terrcorr.image_processing.deskew.radiometric import (
    check_radiometric_form,
    radio_compensate,
)
from terrcorr.vocabulary import MaskValue, RadiometricForm


SAMPLES = 100


@pytest.fixture
def model():
    return GeometryModel(6371000.0, 700000.0, 800000.0, 2000.0, SAMPLES)


def _valid(heights):
    heights = np.asarray(heights, dtype=np.float64)
    return DemLine(heights, np.zeros(heights.shape, dtype=np.uint8))


class TestFormSelection:
    """Formula numbers accepted and rejected."""

    def test_disabled_and_kellndorfer(self):
        assert check_radiometric_form(0) is RadiometricForm.DISABLED
        assert check_radiometric_form(5) is RadiometricForm.KELLNDORFER
        assert check_radiometric_form('5') is RadiometricForm.KELLNDORFER

    @pytest.mark.parametrize("form", [1, 2, 3, 4, 6])
    def test_untested_forms_rejected(self, form):
        with pytest.raises(ValidationError, match="untested"):
            check_radiometric_form(form)

    @pytest.mark.parametrize("form", [7, -1, 'abc', None])
    def test_bad_forms_rejected(self, form):
        with pytest.raises(ValidationError, match="Bad radiometric"):
            check_radiometric_form(form)

    def test_untested_form_rejected_by_compensation(self, model):
        flat = _valid(np.zeros(SAMPLES))
        with pytest.raises(ValidationError):
            radio_compensate(model, flat, flat, np.ones(SAMPLES), form=3)


class TestKellndorfer:
    """Slope normalization of a ground range line."""

    def test_flat_terrain_unchanged(self, model):
        flat = _valid(np.full(SAMPLES, 100.0))
        line = np.full(SAMPLES, 4.0)
        radio_compensate(model, flat, flat, line)
        np.testing.assert_allclose(line, 4.0)

    def test_disabled_leaves_line(self, model):
        slope = _valid(100.0 * np.arange(SAMPLES))
        line = np.ones(SAMPLES)
        out = radio_compensate(model, slope, slope, line,
                               form=RadiometricForm.DISABLED)
        assert out is line
        np.testing.assert_array_equal(line, 1.0)

    def test_slope_facing_sensor_darkened(self, model):
        # Terrain rising with range faces the sensor
        slope = _valid(100.0 * np.arange(SAMPLES))
        line = np.ones(SAMPLES)
        radio_compensate(model, slope, slope, line)
        assert line[0] == 1.0
        assert np.all(line[1:] < 1.0)
        assert np.all(line[1:] > 0.9)

    def test_slope_facing_away_brightened(self, model):
        slope = _valid(100.0 * np.arange(SAMPLES)[::-1])
        line = np.ones(SAMPLES)
        radio_compensate(model, slope, slope, line)
        assert np.all(line[1:] > 1.0)

    def test_along_track_slope(self, model):
        # Previous line one ground pixel higher: a 45 degree slope in y
        current = _valid(np.full(SAMPLES, 100.0))
        previous = _valid(np.full(SAMPLES, 100.0 + model.gr_pixel_size))
        line = np.ones(SAMPLES)
        radio_compensate(model, current, previous, line)
        cos_ang = model.cos_incid_ang[1:] / np.sqrt(2.0)
        expected = np.sqrt(1.0 - cos_ang * cos_ang) / model.sin_incid_ang[1:]
        assert line[0] == 1.0
        np.testing.assert_allclose(line[1:], expected)
        assert np.all(line[1:] > 1.0)

    def test_along_track_slope_sign_irrelevant(self, model):
        current = _valid(np.full(SAMPLES, 500.0))
        rising = np.ones(SAMPLES)
        falling = np.ones(SAMPLES)
        radio_compensate(model, current, _valid(np.full(SAMPLES, 800.0)),
                         rising)
        radio_compensate(model, current, _valid(np.full(SAMPLES, 200.0)),
                         falling)
        np.testing.assert_allclose(rising, falling)
        assert np.all(rising[1:] > 1.0)

    def test_user_masked_pixels_skipped(self, model):
        slope = _valid(100.0 * np.arange(SAMPLES))
        mask = np.full(SAMPLES, float(MaskValue.NORMAL))
        mask[10] = MaskValue.USER_MASK
        line = np.ones(SAMPLES)
        radio_compensate(model, slope, slope, line, mask=mask)
        assert line[10] == 1.0
        assert line[11] < 1.0

    def test_unusable_previous_line_skipped(self, model):
        slope = _valid(100.0 * np.arange(SAMPLES))
        line = np.ones(SAMPLES)
        radio_compensate(model, slope, DemLine.empty(SAMPLES), line)
        np.testing.assert_array_equal(line, 1.0)

    def test_bad_neighbour_skipped(self, model):
        heights = 100.0 * np.arange(SAMPLES)
        state = np.zeros(SAMPLES, dtype=np.uint8)
        state[20] = 1
        dem = DemLine(heights, state)
        line = np.ones(SAMPLES)
        radio_compensate(model, dem, _valid(heights), line)
        assert line[20] == 1.0
        assert line[21] == 1.0
        assert line[22] < 1.0
