# -*- coding: utf-8 -*-
"""
Deskew Configuration - Typed run settings with YAML loading.

A run can be described in a YAML file with ``input``, ``output`` and
``correction`` sections::

    input:
      dem_slant: dem_slant.npy
      sar: sar.npy
      dem_ground: null
      mask: null
    output:
      path: terrcorr.npy
      mask: layover_mask.npy
    correction:
      radiometric: kellndorfer   # or 0 / 5 / disabled
      fill_holes: false
      fill_value: -1             # -1 keeps data under user-masked pixels
      gr_dem: backconverted      # or original
      interpolation: bilinear    # or nearest

Dependencies
------------
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

# Standard library
import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

# Third-party
import yaml

# Terrcorr internal
from terrcorr.exceptions import ValidationError
from terrcorr.image_processing.deskew.radiometric import check_radiometric_form
from terrcorr.vocabulary import GroundDemSource, LEAVE_MASK, RadiometricForm

_INTERPOLATIONS = ('bilinear', 'nearest')

# YAML (section, key) -> DeskewConfig field
_YAML_FIELDS = {
    ('input', 'dem_slant'): 'dem_slant',
    ('input', 'sar'): 'sar',
    ('input', 'dem_ground'): 'dem_ground',
    ('input', 'mask'): 'mask',
    ('output', 'path'): 'output',
    ('output', 'mask'): 'out_mask',
    ('correction', 'radiometric'): 'radiometric',
    ('correction', 'fill_holes'): 'fill_holes',
    ('correction', 'fill_value'): 'fill_value',
    ('correction', 'gr_dem'): 'which_gr_dem',
    ('correction', 'interpolation'): 'interpolation',
}


def _as_path(value: Any) -> Optional[Path]:
    if value is None or value == '':
        return None
    return Path(value)


def _parse_radiometric(value: Any) -> RadiometricForm:
    if isinstance(value, str) and not value.strip().lstrip('-').isdigit():
        name = value.strip().upper()
        if name == 'NONE':
            name = 'DISABLED'
        try:
            return RadiometricForm[name]
        except KeyError as e:
            raise ValidationError(
                f"Unknown radiometric correction {value!r}; use one of "
                f"{[m.name.lower() for m in RadiometricForm]} or a number"
            ) from e
    if isinstance(value, bool):
        return RadiometricForm.KELLNDORFER if value else RadiometricForm.DISABLED
    return check_radiometric_form(value)


@dataclass
class DeskewConfig:
    """Settings of one deskew run.

    Field meanings follow :func:`terrcorr.deskew_dem`.  Values are
    normalized and checked on construction.

    Raises
    ------
    ValidationError
        If a value is out of its allowed set.
    """

    dem_slant: Optional[Path] = None
    output: Optional[Path] = None
    sar: Optional[Path] = None
    dem_ground: Optional[Path] = None
    mask: Optional[Path] = None
    out_mask: Optional[Path] = None
    radiometric: Union[int, str, RadiometricForm] = RadiometricForm.DISABLED
    fill_holes: bool = False
    fill_value: float = LEAVE_MASK
    which_gr_dem: Union[str, GroundDemSource] = GroundDemSource.BACKCONVERTED
    interpolation: str = 'bilinear'

    def __post_init__(self) -> None:
        for name in ('dem_slant', 'output', 'sar', 'dem_ground', 'mask',
                     'out_mask'):
            setattr(self, name, _as_path(getattr(self, name)))

        self.radiometric = _parse_radiometric(self.radiometric)

        try:
            self.which_gr_dem = GroundDemSource(
                self.which_gr_dem.lower()
                if isinstance(self.which_gr_dem, str) else self.which_gr_dem
            )
        except ValueError as e:
            raise ValidationError(
                f"gr_dem must be one of "
                f"{[s.value for s in GroundDemSource]}, "
                f"got {self.which_gr_dem!r}"
            ) from e

        if not isinstance(self.fill_holes, bool):
            raise ValidationError(
                f"fill_holes must be true or false, got {self.fill_holes!r}"
            )
        try:
            self.fill_value = float(self.fill_value)
        except (TypeError, ValueError) as e:
            raise ValidationError(
                f"fill_value must be a number, got {self.fill_value!r}"
            ) from e

        self.interpolation = str(self.interpolation).lower()
        if self.interpolation not in _INTERPOLATIONS:
            raise ValidationError(
                f"interpolation must be one of {list(_INTERPOLATIONS)}, "
                f"got {self.interpolation!r}"
            )

        if self.mask is not None and self.sar is None:
            raise ValidationError("Cannot produce a mask without a SAR image")

    @classmethod
    def from_dict(cls, cfg: Dict[str, Any]) -> 'DeskewConfig':
        """Build from the sectioned layout read from YAML.

        Raises
        ------
        ValidationError
            On unknown sections or keys.
        """
        if cfg is None:
            cfg = {}
        if not isinstance(cfg, dict):
            raise ValidationError(
                f"Configuration must be a mapping, got {type(cfg).__name__}"
            )
        kwargs: Dict[str, Any] = {}
        for section, values in cfg.items():
            if not isinstance(values, dict):
                raise ValidationError(
                    f"Configuration section {section!r} must be a mapping"
                )
            for key, value in values.items():
                field_name = _YAML_FIELDS.get((section, key))
                if field_name is None:
                    raise ValidationError(
                        f"Unknown configuration key {section}.{key}"
                    )
                kwargs[field_name] = value
        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> 'DeskewConfig':
        """Load from a YAML file.

        Raises
        ------
        FileNotFoundError
            If the file does not exist.
        ValidationError
            If the YAML is malformed or holds invalid settings.
        """
        with open(path) as f:
            try:
                cfg = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValidationError(f"Invalid YAML in {path}: {e}") from e
        return cls.from_dict(cfg)

    def merged(self, **overrides: Any) -> 'DeskewConfig':
        """Copy with the non-None ``overrides`` applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return dataclasses.replace(self, **changes)

    def to_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for :func:`terrcorr.deskew_dem`.

        Raises
        ------
        ValidationError
            If the slant DEM or output path is missing.
        """
        if self.dem_slant is None:
            raise ValidationError("No slant range DEM given")
        if self.output is None:
            raise ValidationError("No output path given")
        return {
            'in_dem_slant': self.dem_slant,
            'output': self.output,
            'in_sar': self.sar,
            'in_dem_ground': self.dem_ground,
            'radiometric': self.radiometric,
            'in_mask': self.mask,
            'out_mask': self.out_mask,
            'fill_holes': self.fill_holes,
            'fill_value': self.fill_value,
            'which_gr_dem': self.which_gr_dem,
            'interpolation': self.interpolation,
        }
