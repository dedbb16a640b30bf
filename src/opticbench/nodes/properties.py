#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2024 Michael J. Hayford
""" Typed, validated parameters of optical nodes

    Every node keeps its user settable parameters in a :class:`Properties`
    bag. A :class:`Property` holds a value, a description and an optional
    validator. A validator is a callable taking the value that returns the
    (possibly normalized) value or raises :exc:`~opticbench.error.PropertyError`.

    The factory functions in this module build the common validators.

.. Created on Mon Mar 18 11:05:27 2024

.. codeauthor: Michael J. Hayford
"""
import copy

from opticbench.error import PropertyError
from opticbench.util.misc_math import is_finite_number


def finite(value):
    if not is_finite_number(value):
        raise PropertyError(f"expected a finite number, got {value!r}")
    return float(value)


def positive(value):
    if not is_finite_number(value) or value <= 0.:
        raise PropertyError(f"expected a positive number, got {value!r}")
    return float(value)


def non_negative(value):
    if not is_finite_number(value) or value < 0.:
        raise PropertyError(f"expected a number >= 0, got {value!r}")
    return float(value)


def in_range(lo, hi):
    """ validator for finite numbers in the closed interval [lo, hi] """
    def validate(value):
        if not is_finite_number(value) or not lo <= value <= hi:
            raise PropertyError(f"expected a number in [{lo}, {hi}], "
                                f"got {value!r}")
        return float(value)
    return validate


def one_of(*choices):
    def validate(value):
        if value not in choices:
            raise PropertyError(f"expected one of {choices}, got {value!r}")
        return value
    return validate


def instance_of(*types):
    def validate(value):
        if not isinstance(value, types):
            names = ', '.join(t.__name__ for t in types)
            raise PropertyError(f"expected an instance of {names}, "
                                f"got {type(value).__name__}")
        return value
    return validate


class Property():
    def __init__(self, value, description='', validator=None):
        self.description = description
        self.validator = validator
        self.value = self.validate(value)

    def __repr__(self):
        return f"{type(self).__name__}({self.value!r})"

    def validate(self, value):
        if self.validator is None:
            return value
        return self.validator(value)


class Properties():
    """ ordered name -> :class:`Property` bag """

    def __init__(self):
        self._props = {}

    def __contains__(self, name):
        return name in self._props

    def __iter__(self):
        return iter(self._props)

    def __len__(self):
        return len(self._props)

    def create(self, name, value, description='', validator=None):
        if name in self._props:
            raise PropertyError(f"property '{name}' already exists")
        self._props[name] = Property(value, description, validator)

    def get(self, name):
        try:
            return self._props[name].value
        except KeyError:
            raise PropertyError(f"unknown property '{name}'") from None

    def set(self, name, value):
        """ set a validated value; the old value is kept on failure """
        try:
            prop = self._props[name]
        except KeyError:
            raise PropertyError(f"unknown property '{name}'") from None
        try:
            prop.value = prop.validate(value)
        except PropertyError as err:
            raise PropertyError(f"property '{name}': {err.msg}") from None

    def description(self, name):
        if name not in self._props:
            raise PropertyError(f"unknown property '{name}'")
        return self._props[name].description

    def items(self):
        return ((k, p.value) for k, p in self._props.items())

    def values_dict(self):
        return {k: copy.deepcopy(p.value) for k, p in self._props.items()}

    def listobj_str(self):
        o_str = ""
        for name, prop in self._props.items():
            o_str += f"{name}: {prop.value!r}"
            if prop.description:
                o_str += f"   ({prop.description})"
            o_str += "\n"
        return o_str
