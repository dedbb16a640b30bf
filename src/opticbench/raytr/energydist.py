#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2024 Michael J. Hayford
""" Energy distributions over a set of ray start points

    :meth:`apply` returns one energy per point. The energies always sum to
    the distribution's total energy.

.. Created on Thu Mar 14 15:31:09 2024

.. codeauthor: Michael J. Hayford
"""
import numpy as np

from opticbench.error import ConfigurationError
from opticbench.util.units import check_non_negative, check_positive


class EnergyDistribution():
    """ Base class for energy distributions. """

    def __init__(self, total_energy):
        self.total_energy = check_non_negative(total_energy, 'total energy')

    def __repr__(self):
        args = ', '.join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"{type(self).__name__}({args})"

    def apply(self, points):
        pass

    def _normalized(self, rel):
        s = np.sum(rel)
        if not s > 0.:
            raise ConfigurationError("energy distribution vanishes at all "
                                     "points")
        return self.total_energy*rel/s


class Uniform(EnergyDistribution):
    def apply(self, points):
        n = len(points)
        if n == 0:
            return np.zeros(0)
        return np.full(n, self.total_energy/n)


class General2DGaussian(EnergyDistribution):
    """ (super-)Gaussian profile, centered at mu_xy with widths sigma_xy

    The relative energy at (x, y) is::

        exp(-((x - mu_x)^2/(2 sigma_x^2) + (y - mu_y)^2/(2 sigma_y^2))^power)

    optionally evaluated in a frame rotated by `theta` radians.
    """
    def __init__(self, total_energy, mu_xy=(0., 0.), sigma_xy=(1., 1.),
                 power=1.0, theta=0.0):
        super().__init__(total_energy)
        self.mu_xy = np.array(mu_xy, dtype=float)
        self.sigma_xy = np.array(
            [check_positive(s, 'sigma') for s in sigma_xy])
        self.power = check_positive(power, 'power')
        self.theta = theta

    def apply(self, points):
        pts = np.asarray(points, dtype=float)
        if len(pts) == 0:
            return np.zeros(0)
        c, s = np.cos(self.theta), np.sin(self.theta)
        dx = pts[:, 0] - self.mu_xy[0]
        dy = pts[:, 1] - self.mu_xy[1]
        xr = c*dx + s*dy
        yr = -s*dx + c*dy
        arg = (xr**2/(2*self.sigma_xy[0]**2) + yr**2/(2*self.sigma_xy[1]**2))
        return self._normalized(np.exp(-arg**self.power))
