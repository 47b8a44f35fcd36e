# -*- coding: utf-8 -*-
"""
Deskew Configuration Tests - DeskewConfig normalization and YAML loading.

Dependencies
------------
pytest
pyyaml

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
2026-02-18

Modified
--------
2026-03-02
"""

from pathlib import Path

import pytest

from terrcorr.config import DeskewConfig
from terrcorr.exceptions import ValidationError
from terrcorr.vocabulary import GroundDemSource, LEAVE_MASK, RadiometricForm


YAML_TEXT = """\
input:
  dem_slant: dem_slant.npy
  sar: sar.npy
output:
  path: terrcorr.npy
  mask: layover_mask.npy
correction:
  radiometric: kellndorfer
  fill_holes: true
  fill_value: -5
  gr_dem: Original
  interpolation: nearest
"""


class TestDefaults:
    """A bare configuration."""

    def test_defaults(self):
        cfg = DeskewConfig()
        assert cfg.radiometric is RadiometricForm.DISABLED
        assert cfg.which_gr_dem is GroundDemSource.BACKCONVERTED
        assert cfg.fill_holes is False
        assert cfg.fill_value == LEAVE_MASK
        assert cfg.interpolation == 'bilinear'

    def test_paths_normalized(self):
        cfg = DeskewConfig(dem_slant='dem.npy', output='', sar=None)
        assert cfg.dem_slant == Path('dem.npy')
        assert cfg.output is None


class TestNormalization:
    """Accepted spellings and rejected values."""

    @pytest.mark.parametrize("value,expected", [
        (0, RadiometricForm.DISABLED),
        ('0', RadiometricForm.DISABLED),
        ('none', RadiometricForm.DISABLED),
        ('Disabled', RadiometricForm.DISABLED),
        (5, RadiometricForm.KELLNDORFER),
        ('5', RadiometricForm.KELLNDORFER),
        ('kellndorfer', RadiometricForm.KELLNDORFER),
        (True, RadiometricForm.KELLNDORFER),
    ])
    def test_radiometric(self, value, expected):
        assert DeskewConfig(radiometric=value).radiometric is expected

    @pytest.mark.parametrize("value", [1, 3, '6', 'ulander', 9])
    def test_radiometric_rejected(self, value):
        with pytest.raises(ValidationError):
            DeskewConfig(radiometric=value)

    def test_gr_dem_case_insensitive(self):
        assert DeskewConfig(which_gr_dem='ORIGINAL').which_gr_dem \
            is GroundDemSource.ORIGINAL

    def test_gr_dem_rejected(self):
        with pytest.raises(ValidationError):
            DeskewConfig(which_gr_dem='slant')

    def test_fill_holes_must_be_bool(self):
        with pytest.raises(ValidationError):
            DeskewConfig(fill_holes='yes')

    def test_fill_value_must_be_number(self):
        with pytest.raises(ValidationError):
            DeskewConfig(fill_value='lots')

    def test_interpolation_rejected(self):
        with pytest.raises(ValidationError):
            DeskewConfig(interpolation='cubic')

    def test_mask_requires_sar(self):
        with pytest.raises(ValidationError, match="without a SAR"):
            DeskewConfig(mask='mask.npy')


class TestYaml:
    """Loading the sectioned YAML layout."""

    def test_from_yaml(self, tmp_path):
        path = tmp_path / 'deskew.yaml'
        path.write_text(YAML_TEXT)
        cfg = DeskewConfig.from_yaml(path)
        assert cfg.dem_slant == Path('dem_slant.npy')
        assert cfg.sar == Path('sar.npy')
        assert cfg.output == Path('terrcorr.npy')
        assert cfg.out_mask == Path('layover_mask.npy')
        assert cfg.radiometric is RadiometricForm.KELLNDORFER
        assert cfg.fill_holes is True
        assert cfg.fill_value == -5.0
        assert cfg.which_gr_dem is GroundDemSource.ORIGINAL
        assert cfg.interpolation == 'nearest'

    def test_empty_file(self, tmp_path):
        path = tmp_path / 'empty.yaml'
        path.write_text('')
        assert DeskewConfig.from_yaml(path) == DeskewConfig()

    def test_unknown_key(self, tmp_path):
        path = tmp_path / 'bad.yaml'
        path.write_text("correction:\n  sharpen: true\n")
        with pytest.raises(ValidationError, match="correction.sharpen"):
            DeskewConfig.from_yaml(path)

    def test_section_not_mapping(self, tmp_path):
        path = tmp_path / 'bad.yaml'
        path.write_text("input: dem.npy\n")
        with pytest.raises(ValidationError):
            DeskewConfig.from_yaml(path)

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / 'bad.yaml'
        path.write_text("input: [unclosed\n")
        with pytest.raises(ValidationError, match="Invalid YAML"):
            DeskewConfig.from_yaml(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            DeskewConfig.from_yaml(tmp_path / 'absent.yaml')


class TestOverrides:
    """Merging command-line overrides and building call arguments."""

    def test_merged_ignores_none(self):
        cfg = DeskewConfig(dem_slant='a.npy', radiometric=5)
        merged = cfg.merged(dem_slant=None, output='b.npy', radiometric=None)
        assert merged.dem_slant == Path('a.npy')
        assert merged.output == Path('b.npy')
        assert merged.radiometric is RadiometricForm.KELLNDORFER

    def test_merged_validates(self):
        with pytest.raises(ValidationError):
            DeskewConfig().merged(radiometric='2')

    def test_to_kwargs(self):
        kwargs = DeskewConfig(dem_slant='a.npy', output='b.npy').to_kwargs()
        assert kwargs['in_dem_slant'] == Path('a.npy')
        assert kwargs['output'] == Path('b.npy')
        assert kwargs['in_sar'] is None

    def test_to_kwargs_requires_paths(self):
        with pytest.raises(ValidationError, match="slant range DEM"):
            DeskewConfig(output='b.npy').to_kwargs()
        with pytest.raises(ValidationError, match="output"):
            DeskewConfig(dem_slant='a.npy').to_kwargs()
