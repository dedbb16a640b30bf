#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2017 Michael J. Hayford
""" Module building on :mod:`opticalglass` for refractive index support

    Nodes with a bulk medium (lenses, wedges) keep a simple, serializable
    description of the material: a refractive index, an (index, v-number)
    pair or a 'glass, catalog' string. :func:`decode_medium` turns it into an
    :class:`opticalglass.opticalmedium.OpticalMedium`.

.. Created on Fri Sep 15 17:06:17 2017

.. codeauthor: Michael J. Hayford
"""
import logging

from opticalglass import glassfactory as gfact
from opticalglass import opticalmedium as om
from opticalglass import modelglass as mg
from opticalglass import glasserror

from opticbench.error import ConfigurationError
from opticbench.util.misc_math import is_finite_number
from opticbench.util.units import Length, to_nanometer

logger = logging.getLogger(__name__)


def decode_medium(*inputs) -> om.OpticalMedium:
    """ Input utility for parsing various forms of glass input.

    The **inputs** can have several forms:

        - **refractive_index, v-number**: float -> :class:`opticalglass.modelglass.ModelGlass`
        - **refractive_index** only: float -> :class:`opticalglass.opticalmedium.ConstantIndex`
        - **glass_name, catalog_name** as 1 or 2 strings
        - an instance with a `rindex` attribute
        - **air**: str -> :class:`opticalglass.opticalmedium.Air`
        - blank -> defaults to :class:`opticalglass.opticalmedium.Air`

    Raises:
        ConfigurationError: non-finite or non-positive index, unknown glass
    """
    if len(inputs) == 0:
        return om.Air()

    logger.debug(f"num inputs = {len(inputs)}, inputs[0] = {inputs[0]}, "
                 f"{type(inputs[0])}")
    if is_finite_number(inputs[0]) and not isinstance(inputs[0], str):
        n = float(inputs[0])
        if n < 1.0:
            raise ConfigurationError(
                f"refractive index must be >= 1, got {n}")
        if n == 1.0:
            return om.Air()
        if len(inputs) == 1 or inputs[1] in ('', None):
            return om.ConstantIndex(n, f"n:{n:.3f}")
        return mg.ModelGlass(n, float(inputs[1]), '')

    if isinstance(inputs[0], str):
        str_args = [tkn.strip() for tkn in inputs
                    if isinstance(tkn, str) and len(tkn.strip()) > 0]
        if len(str_args) == 0 or str_args[0].upper() == 'AIR':
            return om.Air()
        if len(str_args) == 2:
            name, cat = str_args
        elif ',' in str_args[0]:
            name, cat = [s.strip() for s in str_args[0].split(',')]
        else:
            raise ConfigurationError(
                f"glass '{str_args[0]}' needs a catalog name")
        try:
            return gfact.create_glass(name, cat)
        except glasserror.GlassNotFoundError as gerr:
            raise ConfigurationError(
                f"glass {name} not found in catalog {cat}") from gerr

    if hasattr(inputs[0], 'rindex'):
        return inputs[0]

    raise ConfigurationError(f"cannot interpret medium {inputs!r}")


def rindex(medium: om.OpticalMedium, wvl: Length) -> float:
    """ refractive index of medium at wavelength wvl (in meters) """
    return float(medium.rindex(to_nanometer(wvl)))


def medium_spec(value):
    """ normalize a medium property value to a tuple for decode_medium """
    if isinstance(value, (tuple, list)):
        return tuple(value)
    return (value,)
