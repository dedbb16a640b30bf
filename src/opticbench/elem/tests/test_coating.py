#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on Wed Apr  3 08:55:12 2024

@author: Mike
"""


import unittest
from math import sin, cos, asin, radians
from pytest import approx
import numpy as np

from opticbench.elem.coating import IdealAR, ConstantR, Fresnel
from opticbench.error import ConfigurationError
from opticbench.raytr.ray import Ray


class CoatingTestCase(unittest.TestCase):
    def setUp(self):
        self.normal = np.array([0., 0., 1.])
        self.ray = Ray([0., 0., 0.], [0., 0., 1.], 1e-6, 1.0)

    def test_ideal_ar(self):
        assert IdealAR().reflectivity(self.ray, self.normal, 1.5) == 0.

    def test_constant(self):
        assert ConstantR(0.3).reflectivity(self.ray, self.normal, 1.5) == 0.3
        with self.assertRaises(ConfigurationError):
            ConstantR(1.1)
        with self.assertRaises(ConfigurationError):
            ConstantR(float('nan'))

    def test_fresnel_normal_incidence(self):
        r = Fresnel().reflectivity(self.ray, self.normal, 1.5)
        assert r == approx(0.04)
        # same result from the other side of the interface
        ray = Ray([0., 0., 0.], [0., 0., -1.], 1e-6, 1.0, refr_index=1.5)
        assert Fresnel().reflectivity(ray, self.normal, 1.0) == approx(0.04)

    def test_fresnel_oblique(self):
        alpha = radians(45.)
        beta = asin(sin(alpha)/1.5)
        ray = Ray([0., 0., 0.], [0., sin(alpha), cos(alpha)], 1e-6, 1.0)
        rs = -sin(alpha - beta)/sin(alpha + beta)
        assert Fresnel().reflectivity(ray, self.normal, 1.5) == approx(rs*rs)

    def test_fresnel_tir(self):
        alpha = radians(60.)
        ray = Ray([0., 0., 0.], [0., sin(alpha), cos(alpha)], 1e-6, 1.0,
                  refr_index=1.5)
        assert Fresnel().reflectivity(ray, self.normal, 1.0) == 1.0


if __name__ == '__main__':
    unittest.main(verbosity=2)
