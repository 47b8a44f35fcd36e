# -*- coding: utf-8 -*-
"""
Deskew Masking - Input mask translation and final output masking.

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
2026-02-16

Modified
--------
2026-03-02
"""

# Standard library
from typing import Optional

# Third-party
import numpy as np

# Terrcorr internal
from terrcorr.image_processing.deskew.geometric import MaskStatistics
from terrcorr.image_processing.deskew.heights import DemLine
from terrcorr.vocabulary import INPUT_MASK_INVALID, LEAVE_MASK, MaskValue


def translate_input_mask(raw: np.ndarray) -> np.ndarray:
    """Translate a user mask line into working mask codes.

    ``2.0`` becomes ``INVALID_DATA``; ``0`` and ``1`` become ``NORMAL``;
    any other value becomes ``USER_MASK``.
    """
    raw = np.asarray(raw, dtype=np.float64)
    out = np.full(raw.shape, float(MaskValue.NORMAL))
    invalid = raw == INPUT_MASK_INVALID
    user = (raw != 0.0) & (raw != 1.0) & ~invalid
    out[invalid] = MaskValue.INVALID_DATA
    out[user] = MaskValue.USER_MASK
    return out


def apply_output_mask(
    line: np.ndarray,
    mask: np.ndarray,
    gr_dem_conv: DemLine,
    fill_value: float = LEAVE_MASK,
    zero_layover_shadow: bool = True,
    stats: Optional[MaskStatistics] = None,
) -> np.ndarray:
    """Blank excluded pixels of an output line in place.

    Parameters
    ----------
    line : np.ndarray
        Ground range output samples.
    mask : np.ndarray
        Final mask line.
    gr_dem_conv : DemLine
        Back-converted ground range DEM; ``NO_DATA`` pixels are zeroed.
    fill_value : float
        Value written under ``USER_MASK`` pixels.  ``LEAVE_MASK`` keeps
        the data.
    zero_layover_shadow : bool
        Zero layover and shadow pixels.
    stats : MaskStatistics, optional
        ``user_masked`` is incremented by the user-masked pixel count.

    Returns
    -------
    np.ndarray
        ``line``.
    """
    user = mask == MaskValue.USER_MASK
    if stats is not None:
        stats.user_masked += int(np.count_nonzero(user))
    if fill_value != LEAVE_MASK:
        line[user] = fill_value

    line[gr_dem_conv.no_data] = 0.0

    if zero_layover_shadow:
        hidden = (mask == MaskValue.LAYOVER) | (mask == MaskValue.SHADOW)
        line[hidden] = 0.0
    return line
