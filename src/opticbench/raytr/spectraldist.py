#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2024 Michael J. Hayford
""" Spectral distributions: the wavelengths assigned to each ray position

    :meth:`generate` returns a list of (wavelength, weight) pairs whose
    weights sum to 1.

.. Created on Thu Mar 14 16:02:44 2024

.. codeauthor: Michael J. Hayford
"""
from math import log, sqrt

import numpy as np

from opticbench.error import ConfigurationError
from opticbench.util.misc_math import is_finite_number
from opticbench.util.units import check_positive


class SpectralDistribution():
    def __repr__(self):
        args = ', '.join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"{type(self).__name__}({args})"

    def generate(self):
        pass


class LaserLines(SpectralDistribution):
    """ discrete lines given as (wavelength, relative intensity) pairs """
    def __init__(self, lines):
        if len(lines) == 0:
            raise ConfigurationError("at least one laser line is needed")
        for wvl, intensity in lines:
            check_positive(wvl, 'wavelength')
            check_positive(intensity, 'line intensity')
        self.lines = [(float(w), float(i)) for w, i in lines]

    def generate(self):
        total = sum(i for w, i in self.lines)
        return [(w, i/total) for w, i in self.lines]


class Gaussian(SpectralDistribution):
    """ (super-)Gaussian spectrum sampled at num_points wavelengths

    Args:
        wvl_range: (start, stop) wavelengths
        num_points: number of samples across the range
        mu: center wavelength
        fwhm: full width at half maximum
        power: super-Gaussian exponent, 1 for a Gaussian
    """
    def __init__(self, wvl_range, num_points, mu, fwhm, power=1.0):
        start, stop = wvl_range
        check_positive(start, 'wavelength range start')
        if not is_finite_number(stop) or stop <= start:
            raise ConfigurationError(f"invalid wavelength range {wvl_range}")
        if not isinstance(num_points, int) or num_points < 1:
            raise ConfigurationError(
                f"num_points must be a positive integer, got {num_points!r}")
        self.wvl_range = (float(start), float(stop))
        self.num_points = num_points
        self.mu = check_positive(mu, 'center wavelength')
        self.fwhm = check_positive(fwhm, 'fwhm')
        self.power = check_positive(power, 'power')

    def generate(self):
        wvls = np.linspace(*self.wvl_range, self.num_points)
        sigma = self.fwhm/(2*sqrt(2*log(2)))
        rel = np.exp(-((wvls - self.mu)**2/(2*sigma**2))**self.power)
        total = np.sum(rel)
        if not total > 0.:
            raise ConfigurationError("spectral distribution vanishes over "
                                     "the wavelength range")
        return [(float(w), float(r/total)) for w, r in zip(wvls, rel)]
