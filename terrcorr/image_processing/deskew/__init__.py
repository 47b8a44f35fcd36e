# -*- coding: utf-8 -*-
"""
Deskew Sub-module - Slant range to ground range terrain correction.

Removes the incidence-angle skew of slant range SAR imagery using a DEM,
classifies layover and radar shadow, and optionally normalizes
backscatter for terrain slope.

Key Classes
-----------
DemDeskewer
    Line-sequential driver.  Validates inputs, builds the geometry model
    once, then corrects line by line.
deskew_dem
    Convenience entry point accepting paths or open line readers and
    writers.
DemLine
    Ground or slant range heights with an explicit per-sample state.
geo_compensate
    Resample one line into ground range and classify its pixels.
radio_compensate
    Kellndorfer radiometric terrain correction of one line.

Dependencies
------------
numpy
scipy

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

from terrcorr.image_processing.deskew.heights import (
    BAD_DEM_HEIGHT,
    NO_DEM_DATA,
    MIN_VALID_HEIGHT,
    DemLine,
)
from terrcorr.image_processing.deskew.resample import (
    MAX_BREAK_LEN,
    carry_forward_heights,
    dem_sr2gr,
    shift_ground_dem,
)
from terrcorr.image_processing.deskew.geometric import (
    LayoverHitTable,
    MaskStatistics,
    geo_compensate,
)
from terrcorr.image_processing.deskew.radiometric import (
    check_radiometric_form,
    radio_compensate,
)
from terrcorr.image_processing.deskew.masking import (
    apply_output_mask,
    translate_input_mask,
)
from terrcorr.image_processing.deskew.deskew import (
    MASK_BAND_NAME,
    DemDeskewer,
    DemLineArena,
    DeskewResult,
    deskew_dem,
)

__all__ = [
    'BAD_DEM_HEIGHT',
    'NO_DEM_DATA',
    'MIN_VALID_HEIGHT',
    'DemLine',
    'MAX_BREAK_LEN',
    'carry_forward_heights',
    'dem_sr2gr',
    'shift_ground_dem',
    'LayoverHitTable',
    'MaskStatistics',
    'geo_compensate',
    'check_radiometric_form',
    'radio_compensate',
    'apply_output_mask',
    'translate_input_mask',
    'MASK_BAND_NAME',
    'DemDeskewer',
    'DemLineArena',
    'DeskewResult',
    'deskew_dem',
]
