# -*- coding: utf-8 -*-
"""
Terrcorr Exception Hierarchy - Domain-specific exceptions for terrain correction.

Provides a small exception hierarchy that lets callers (the command line
tool, batch drivers) catch terrain-correction errors distinctly from
Python built-in exceptions. All exceptions subclass both ``TerrcorrError``
and the appropriate built-in exception for backward compatibility.

Data-quality outcomes (missing DEM heights, layover, radar shadow) are not
errors; they are recorded in the output mask.

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
2026-02-06

Modified
--------
2026-03-02
"""


class TerrcorrError(Exception):
    """Base exception for all terrain-correction errors."""


class ValidationError(TerrcorrError, ValueError):
    """Invalid input rasters, parameters, or configuration.

    Raised for map-projected inputs where swath geometry is required,
    line/sample count mismatches between rasters, a mask supplied
    without a SAR image, and selection of an untested radiometric
    correction formula.
    """


class GeometryError(TerrcorrError, ValueError):
    """Degenerate orbital or range geometry.

    Raised when the satellite height, earth radius and slant ranges do
    not describe a realisable viewing geometry (e.g. an ``acos``
    argument outside [-1, 1]), instead of letting NaN propagate into the
    lookup tables.
    """


class ProcessorError(TerrcorrError, RuntimeError):
    """Unexpected failure once line processing has started.

    Raised when the line loop encounters a non-recoverable error that
    is not an input validation issue, such as a short read.
    """


class DependencyError(TerrcorrError, ImportError):
    """Missing optional dependency required for a specific backend.

    Raised when a raster backend requires an optional package
    (rasterio) that is not installed.
    """
