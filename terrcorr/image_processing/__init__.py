# -*- coding: utf-8 -*-
"""
Image Processing Module - Terrain correction of SAR scanlines.

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

from terrcorr.image_processing.deskew import DemDeskewer, DeskewResult, deskew_dem

__all__ = [
    'DemDeskewer',
    'DeskewResult',
    'deskew_dem',
]
