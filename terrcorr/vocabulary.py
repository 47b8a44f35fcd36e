# -*- coding: utf-8 -*-
"""
Terrcorr Vocabulary - Enumerations shared across the terrain-correction stack.

Closed vocabularies for pixel mask classes, radiometric correction
formulas, ground-range DEM selection, image geometry types, DEM sample
states and output formats.

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
2026-01-30

Modified
--------
2026-03-02
"""

from enum import Enum, IntEnum


class MaskValue(IntEnum):
    """Per-pixel terrain visibility classes written to the output mask.

    Stored on disk as small integer-valued floats.  Value ``2`` is
    reserved for the input-only "mark as invalid" encoding and is never
    written.
    """

    NORMAL = 1
    LAYOVER = 3
    SHADOW = 4
    USER_MASK = 5
    INVALID_DATA = 6


#: Input mask value meaning "treat this pixel as invalid data".
INPUT_MASK_INVALID = 2.0

#: ``fill_value`` meaning "leave the data under user-masked pixels".
LEAVE_MASK = -1


class RadiometricForm(IntEnum):
    """Radiometric terrain correction formula selector.

    Only ``DISABLED`` and ``KELLNDORFER`` are supported.  Numbers 1-4
    (the old terrcorr ``ftcli``, ``ftcgo``, ``ftcsq`` and ``ftcvx``
    corrections) and 6 (a diffuse-reflection ``1 - 0.33 cos^7`` model)
    were never validated; selecting any of them is an error.
    """

    DISABLED = 0
    KELLNDORFER = 5


#: Formula numbers that exist historically but are intentionally unsupported.
UNTESTED_RADIOMETRIC_FORMS = (1, 2, 3, 4, 6)


class GroundDemSource(Enum):
    """Which ground-range DEM line drives geometric compensation."""

    BACKCONVERTED = "backconverted"
    ORIGINAL = "original"


class ImageType(Enum):
    """Geometry of a raster's sample axis."""

    SLANT_RANGE = "S"
    GROUND_RANGE = "G"
    MAP_PROJECTED = "P"


class DemState(IntEnum):
    """Classification of a single DEM sample."""

    VALID = 0
    BAD = 1
    NO_DATA = 2


class OutputFormat(Enum):
    """Supported line-raster file formats."""

    GEOTIFF = "geotiff"
    NUMPY = "numpy"
