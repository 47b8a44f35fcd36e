# -*- coding: utf-8 -*-
"""
Geolocation Module - Slant range / ground range viewing geometry.

Key Classes
-----------
GeometryModel
    Per-image lookup tables mapping slant range sample positions to
    ground range positions and back, corrected for terrain height.

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
2026-02-11

Modified
--------
2026-03-02
"""

from terrcorr.geolocation.slant_range import GeometryModel

__all__ = ['GeometryModel']
