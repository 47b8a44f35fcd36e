# -*- coding: utf-8 -*-
"""
Vocabulary Tests - Mask codes, enumerations and the exception hierarchy.

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
2026-02-10

Modified
--------
2026-03-02
"""

import pytest

import terrcorr
from terrcorr.exceptions import (
    DependencyError,
    GeometryError,
    ProcessorError,
    TerrcorrError,
    ValidationError,
)
from terrcorr.vocabulary import (
    INPUT_MASK_INVALID,
    MaskValue,
    RadiometricForm,
    UNTESTED_RADIOMETRIC_FORMS,
)


class TestMaskValue:
    """On-disk mask codes."""

    def test_codes(self):
        assert [int(v) for v in MaskValue] == [1, 3, 4, 5, 6]

    def test_input_invalid_code_never_written(self):
        assert INPUT_MASK_INVALID not in {float(v) for v in MaskValue}


class TestRadiometricForm:
    """Supported and unsupported formula numbers."""

    def test_supported(self):
        assert [int(f) for f in RadiometricForm] == [0, 5]

    def test_untested_not_members(self):
        for number in UNTESTED_RADIOMETRIC_FORMS:
            with pytest.raises(ValueError):
                RadiometricForm(number)


class TestExceptions:
    """Every error is a TerrcorrError and a matching built-in."""

    @pytest.mark.parametrize("cls,builtin", [
        (ValidationError, ValueError),
        (GeometryError, ValueError),
        (ProcessorError, RuntimeError),
        (DependencyError, ImportError),
    ])
    def test_hierarchy(self, cls, builtin):
        assert issubclass(cls, TerrcorrError)
        assert issubclass(cls, builtin)

    def test_package_exports(self):
        for name in terrcorr.__all__:
            assert hasattr(terrcorr, name)
