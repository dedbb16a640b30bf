#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2024 Michael J. Hayford
""" strongly typed scalars and conversions for physical quantities

All quantities are stored in SI base units: meters, joules and radians.
:class:`Length`, :class:`Energy` and :class:`Angle` are :class:`float`
subclasses. Adding or subtracting two different quantity types raises
:class:`TypeError`; a sum of like quantities keeps the type, as does
scaling by a plain number. The ratio or product of two quantities is a
plain float. The conversion functions are the sanctioned way of creating
quantities from numbers.

.. Created on Mon Mar 11 10:02:17 2024

.. codeauthor: Michael J. Hayford
"""
from math import radians, degrees
from numbers import Number
from typing import TypeVar

import numpy as np

from opticbench.error import ConfigurationError
from opticbench.util.misc_math import is_finite_number

Q = TypeVar('Q', bound='_Quantity')


class _Quantity(float):
    """ float tagged with a physical dimension """

    def __repr__(self):
        return f"{type(self).__name__}({float(self)!r})"

    def _additive(self, other, op):
        if isinstance(other, _Quantity):
            if type(other) is not type(self):
                return NotImplemented
            return type(self)(op(float(self), float(other)))
        if isinstance(other, Number):
            # mixing with a bare number drops the tag
            return op(float(self), float(other))
        return NotImplemented

    def __add__(self: Q, other: Q) -> Q:  # type: ignore[override]
        return self._additive(other, lambda a, b: a + b)

    def __radd__(self: Q, other: Q) -> Q:  # type: ignore[override]
        return self._additive(other, lambda a, b: b + a)

    def __sub__(self: Q, other: Q) -> Q:  # type: ignore[override]
        return self._additive(other, lambda a, b: a - b)

    def __rsub__(self: Q, other: Q) -> Q:  # type: ignore[override]
        return self._additive(other, lambda a, b: b - a)

    def __mul__(self: Q, other: float) -> Q:  # type: ignore[override]
        if isinstance(other, _Quantity):
            return float(self)*float(other)
        if isinstance(other, Number):
            return type(self)(float(self)*float(other))
        return NotImplemented

    __rmul__ = __mul__

    def __truediv__(self: Q, other: float) -> Q:  # type: ignore[override]
        if isinstance(other, _Quantity):
            return float(self)/float(other)
        if isinstance(other, Number):
            return type(self)(float(self)/float(other))
        return NotImplemented

    def __rtruediv__(self, other) -> float:  # type: ignore[override]
        if isinstance(other, Number):
            return float(other)/float(self)
        return NotImplemented

    def __neg__(self: Q) -> Q:
        return type(self)(-float(self))

    def __pos__(self: Q) -> Q:
        return self

    def __abs__(self: Q) -> Q:
        return type(self)(abs(float(self)))


class Length(_Quantity):
    """ length in meters """


class Energy(_Quantity):
    """ energy in joules """


class Angle(_Quantity):
    """ angle in radians """


def meter(value: float) -> Length:
    return Length(float(value))


def millimeter(value: float) -> Length:
    return Length(float(value)*1e-3)


def micrometer(value: float) -> Length:
    return Length(float(value)*1e-6)


def nanometer(value: float) -> Length:
    return Length(float(value)*1e-9)


def centimeter(value: float) -> Length:
    return Length(float(value)*1e-2)


def joule(value: float) -> Energy:
    return Energy(float(value))


def millijoule(value: float) -> Energy:
    return Energy(float(value)*1e-3)


def radian(value: float) -> Angle:
    return Angle(float(value))


def degree(value: float) -> Angle:
    return Angle(radians(value))


def to_nanometer(wvl: Length) -> float:
    """ wavelength in nm, the unit used by :mod:`opticalglass` """
    return float(wvl)*1e9


def to_millimeter(length: Length) -> float:
    return float(length)*1e3


def to_degree(angle: Angle) -> float:
    return degrees(angle)


def check_finite(value, what: str = 'value'):
    """ raise ConfigurationError unless value is a finite number """
    if not is_finite_number(value):
        raise ConfigurationError(f"{what} must be finite, got {value!r}")
    return value


def check_positive(value, what: str = 'value'):
    check_finite(value, what)
    if value <= 0.:
        raise ConfigurationError(f"{what} must be positive, got {value!r}")
    return value


def check_non_negative(value, what: str = 'value'):
    check_finite(value, what)
    if value < 0.:
        raise ConfigurationError(
            f"{what} must not be negative, got {value!r}")
    return value


def check_finite_array(arr, what: str = 'array'):
    if not np.all(np.isfinite(arr)):
        raise ConfigurationError(f"{what} contains non-finite entries")
    return arr
