#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2024 Michael J. Hayford
""" Reflectivity models for the surfaces of optical nodes

    A coating answers one question: what fraction of the energy of an
    incoming ray is reflected at a surface with a given normal, going into a
    medium of index n2. The transmitted fraction is the remainder.

    Polarization is not resolved. :class:`Fresnel` uses the s-polarized
    amplitude coefficient only.

.. Created on Tue Mar 12 14:40:03 2024

.. codeauthor: Michael J. Hayford
"""
import logging
from math import sqrt

import numpy as np
from numpy.linalg import norm

from opticbench.error import ConfigurationError
from opticbench.util.misc_math import is_finite_number

logger = logging.getLogger(__name__)


class Coating:
    """ Base class for coatings. """

    def __repr__(self):
        return "{!s}()".format(type(self).__name__)

    def listobj_str(self):
        return f"coating: {type(self).__name__}\n"

    def reflectivity(self, ray, normal, n2: float) -> float:
        """ reflected energy fraction of `ray` hitting `normal` into n2 """
        raise NotImplementedError


class IdealAR(Coating):
    """ ideal anti-reflection coating, nothing is reflected """

    def reflectivity(self, ray, normal, n2):
        return 0.


class ConstantR(Coating):
    """ coating with a fixed reflectivity, independent of angle and index """

    def __init__(self, reflectivity=0.0):
        if not is_finite_number(reflectivity):
            raise ConfigurationError(
                f"reflectivity must be finite, got {reflectivity!r}")
        if not 0.0 <= reflectivity <= 1.0:
            raise ConfigurationError(
                f"reflectivity must be within [0, 1], got {reflectivity}")
        self.r = float(reflectivity)

    def __repr__(self):
        return f"{type(self).__name__}(reflectivity={self.r})"

    def listobj_str(self):
        return f"coating: {type(self).__name__}: R={self.r}\n"

    def reflectivity(self, ray, normal, n2):
        return self.r


class Fresnel(Coating):
    """ uncoated interface, reflectivity from the Fresnel equations

    With :math:`\\alpha` the angle of incidence and :math:`\\beta` the
    refraction angle from Snell's law,

    :math:`r_s = \\frac{n_1\\cos\\alpha - n_2\\cos\\beta}
    {n_1\\cos\\alpha + n_2\\cos\\beta}
    = -\\frac{\\sin(\\alpha - \\beta)}{\\sin(\\alpha + \\beta)}`

    and :math:`R = r_s^2`. The cosine form is used since it stays defined at
    normal incidence, where it gives :math:`((n_2-n_1)/(n_2+n_1))^2`.
    """

    def reflectivity(self, ray, normal, n2):
        n1 = ray.refr_index
        cos_a = abs(np.dot(ray.dir, normal))/(norm(normal)*norm(ray.dir))
        cos_a = min(cos_a, 1.0)
        sin_b_sqr = (n1/n2)**2*(1.0 - cos_a*cos_a)
        if sin_b_sqr >= 1.0:
            # total internal reflection
            return 1.0
        cos_b = sqrt(1.0 - sin_b_sqr)
        rs = (n1*cos_a - n2*cos_b)/(n1*cos_a + n2*cos_b)
        return rs*rs
