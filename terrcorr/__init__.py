# -*- coding: utf-8 -*-
"""
Terrcorr - SAR terrain correction with a digital elevation model.

Maps slant range SAR imagery and DEMs to ground range, removing the
incidence-angle skew, classifying layover and radar shadow, and
optionally normalizing backscatter for terrain slope.

Dependencies
------------
numpy
scipy
pyyaml
rasterio (GeoTIFF rasters only)

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

__version__ = "0.1.0"
__author__ = "Duane Smalley"

from terrcorr.exceptions import (
    TerrcorrError,
    ValidationError,
    GeometryError,
    ProcessorError,
    DependencyError,
)
from terrcorr.vocabulary import (
    MaskValue,
    RadiometricForm,
    GroundDemSource,
    ImageType,
    DemState,
    OutputFormat,
    LEAVE_MASK,
)
from terrcorr.geolocation import GeometryModel
from terrcorr.image_processing.deskew import (
    DemDeskewer,
    DeskewResult,
    deskew_dem,
)

__all__ = [
    'TerrcorrError',
    'ValidationError',
    'GeometryError',
    'ProcessorError',
    'DependencyError',
    'MaskValue',
    'RadiometricForm',
    'GroundDemSource',
    'ImageType',
    'DemState',
    'OutputFormat',
    'LEAVE_MASK',
    'GeometryModel',
    'DemDeskewer',
    'DeskewResult',
    'deskew_dem',
]
