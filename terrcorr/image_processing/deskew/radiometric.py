# -*- coding: utf-8 -*-
"""
Radiometric Compensation - Terrain-slope normalization of ground range lines.

Scales each ground range sample by how the local terrain facet is tilted
relative to the radar look direction.  The facet normal comes from the
across-track slope (neighbouring pixels of the current line) and the
along-track slope (same pixel of the previous line).  For facets facing
the sensor the Kellndorfer et al. (IEEE TGRS 1998, 1396-1411) factor
``sin(theta_local) / sin(theta_incidence)`` is applied.  Facets facing
away are left alone; they are shadow and handled by the mask.

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
from typing import Optional, Union

# Third-party
import numpy as np

# Terrcorr internal
from terrcorr.exceptions import ValidationError
from terrcorr.geolocation.slant_range import GeometryModel
from terrcorr.image_processing.deskew.heights import DemLine
from terrcorr.vocabulary import (
    MaskValue,
    RadiometricForm,
    UNTESTED_RADIOMETRIC_FORMS,
)


def check_radiometric_form(form: Union[int, RadiometricForm]) -> RadiometricForm:
    """Resolve a radiometric formula selector.

    Parameters
    ----------
    form : int or RadiometricForm
        Formula number.  0 disables correction, 5 selects Kellndorfer.

    Returns
    -------
    RadiometricForm

    Raises
    ------
    ValidationError
        If ``form`` names one of the untested historical formulas or is
        not a formula number at all.
    """
    if isinstance(form, RadiometricForm):
        return form
    try:
        number = int(form)
    except (TypeError, ValueError) as e:
        raise ValidationError(
            f"Bad radiometric correction formula: {form!r}"
        ) from e
    if number in UNTESTED_RADIOMETRIC_FORMS:
        raise ValidationError(
            f"Use of an untested radiometric terrain correction "
            f"formula: #{number}."
        )
    try:
        return RadiometricForm(number)
    except ValueError as e:
        raise ValidationError(
            f"Bad radiometric correction formula: {number}"
        ) from e


def radio_compensate(
    model: GeometryModel,
    gr_dem: DemLine,
    gr_dem_prev: DemLine,
    line_data: np.ndarray,
    form: Union[int, RadiometricForm] = RadiometricForm.KELLNDORFER,
    mask: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Apply radiometric terrain correction to one ground range line.

    Pixel 0 and pixels that are user-masked, or whose height, left
    neighbour height or previous-line height is unusable, are left
    unchanged.

    Parameters
    ----------
    model : GeometryModel
        Geometry tables of the image.
    gr_dem : DemLine
        Ground range heights of this line.
    gr_dem_prev : DemLine
        Ground range heights of the previous line.
    line_data : np.ndarray
        Ground range samples, float, corrected in place.
    form : int or RadiometricForm
        Correction formula.
    mask : np.ndarray, optional
        Mask line; ``USER_MASK`` pixels are skipped.

    Returns
    -------
    np.ndarray
        ``line_data``.

    Raises
    ------
    ValidationError
        If ``form`` is not a supported formula.
    """
    form = check_radiometric_form(form)
    if form is RadiometricForm.DISABLED:
        return line_data

    h = gr_dem.heights
    usable = gr_dem.valid[1:] & gr_dem.valid[:-1] & gr_dem_prev.valid[1:]
    if mask is not None:
        usable &= mask[1:] != MaskValue.USER_MASK

    pixel_size = model.gr_pixel_size
    dx = (h[1:] - h[:-1]) / pixel_size
    dy = (gr_dem_prev.heights[1:] - h[1:]) / pixel_size
    sin_incid = model.sin_incid_ang[1:]
    cos_ang = (dx * sin_incid + model.cos_incid_ang[1:]) / np.sqrt(
        dx * dx + dy * dy + 1.0
    )

    facing = usable & (cos_ang >= 0)
    factor = np.sqrt(np.clip(1.0 - cos_ang * cos_ang, 0.0, None)) / sin_incid
    body = line_data[1:]
    body[facing] *= factor[facing]
    return line_data
