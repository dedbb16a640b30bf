#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2020 Michael J. Hayford
"""Various generators and distributions for producing 2d ray positions

    Each position distribution has a generator, :meth:`gen`, yielding 2d
    points, and :meth:`generate`, returning the points as an (N, 3) array
    in the z=0 plane. The point counts are:

        - :class:`Hexapolar`: 1 + 3*n*(n+1) for n rings
        - :class:`Grid`: nx*ny
        - all others: the requested number of points

.. Created on Tue Mar 24 21:14:31 2020

.. codeauthor: Michael J. Hayford
"""

import math
import warnings

import numpy as np
from scipy.stats import qmc

from opticbench.error import ConfigurationError
from opticbench.util.misc_math import is_finite_number

# golden ratio
PHI = (1 + math.sqrt(5))/2


def _check_length(value, what, allow_zero=False):
    if not is_finite_number(value) or value < 0. or \
            (value == 0. and not allow_zero):
        raise ConfigurationError(f"{what} must be positive and finite, "
                                 f"got {value!r}")
    return float(value)


def _check_count(value, what, minimum=1):
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)) \
            or value < minimum:
        raise ConfigurationError(f"{what} must be an integer >= {minimum}, "
                                 f"got {value!r}")
    return int(value)


class PositionDistribution():
    """ Base class for 2d position distributions. """

    def __repr__(self):
        args = ', '.join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"{type(self).__name__}({args})"

    def listobj_str(self):
        return f"{self!r}: {self.nr_of_points()} points\n"

    def gen(self):
        """ yield 2d points """
        pass

    def nr_of_points(self) -> int:
        pass

    def generate(self):
        """ the distribution's points as an (N, 3) array, z = 0 """
        pts = np.array([xy for xy in self.gen()], dtype=float).reshape(-1, 2)
        return np.column_stack((pts, np.zeros(len(pts))))


def hexapolar_ray_generator(radius, nr_of_rings):
    """Generator function for a center point and rings of 6*i points.

    Ring i, for i in 1..nr_of_rings, has radius i*radius/nr_of_rings.
    """
    yield np.array([0., 0.])
    for i in range(1, nr_of_rings+1):
        r = i*radius/nr_of_rings
        npts = 6*i
        for j in range(npts):
            theta = 2*math.pi*j/npts
            yield np.array([r*math.cos(theta), r*math.sin(theta)])


class Hexapolar(PositionDistribution):
    def __init__(self, radius, nr_of_rings):
        self.radius = _check_length(radius, 'radius', allow_zero=True)
        self.nr_of_rings = _check_count(nr_of_rings, 'nr_of_rings', 0)

    def nr_of_points(self):
        n = self.nr_of_rings
        return 1 + 3*n*(n + 1)

    def gen(self):
        yield from hexapolar_ray_generator(self.radius, self.nr_of_rings)


def grid_ray_generator(grid_rng):
    """Generator function to produce a 2d regular grid.

    arguments:
        grid_rng: start, stop, num
        start: 2d numpy array of lower left grid coords
        stop: 2d numpy array of upper right grid coords
        num: the number of samples along each axis, (nx, ny)

    A single sample along an axis is placed midway between start and stop.
    """
    start, stop, num = grid_rng
    start = np.array(start, dtype=float)
    stop = np.array(stop, dtype=float)
    num = np.array(num)
    step = np.where(num > 1, (stop - start)/np.maximum(num - 1, 1), 0.)
    first = np.where(num > 1, start, (start + stop)/2)
    for i in range(num[0]):
        for j in range(num[1]):
            yield first + np.array([i, j])*step


class Grid(PositionDistribution):
    def __init__(self, side_length_x, side_length_y, nr_of_points_x,
                 nr_of_points_y):
        self.side_length_x = _check_length(side_length_x, 'side_length_x',
                                           allow_zero=True)
        self.side_length_y = _check_length(side_length_y, 'side_length_y',
                                           allow_zero=True)
        self.nr_of_points_x = _check_count(nr_of_points_x, 'nr_of_points_x')
        self.nr_of_points_y = _check_count(nr_of_points_y, 'nr_of_points_y')

    def nr_of_points(self):
        return self.nr_of_points_x*self.nr_of_points_y

    def gen(self):
        half = np.array([self.side_length_x, self.side_length_y])/2
        yield from grid_ray_generator(
            (-half, half, (self.nr_of_points_x, self.nr_of_points_y)))


class Sobol(PositionDistribution):
    """ unscrambled Sobol low discrepancy points over a rectangle """
    def __init__(self, side_length_x, side_length_y, nr_of_points):
        self.side_length_x = _check_length(side_length_x, 'side_length_x')
        self.side_length_y = _check_length(side_length_y, 'side_length_y')
        self.num_points = _check_count(nr_of_points, 'nr_of_points')

    def nr_of_points(self):
        return self.num_points

    def gen(self):
        sampler = qmc.Sobol(d=2, scramble=False)
        with warnings.catch_warnings():
            # counts that aren't powers of 2 are fine here
            warnings.simplefilter('ignore', UserWarning)
            pts = sampler.random(self.num_points)
        side = np.array([self.side_length_x, self.side_length_y])
        for p in pts:
            yield (p - 0.5)*side


class Random(PositionDistribution):
    """ uniformly distributed random points over a rectangle """
    def __init__(self, side_length_x, side_length_y, nr_of_points,
                 seed=None):
        self.side_length_x = _check_length(side_length_x, 'side_length_x')
        self.side_length_y = _check_length(side_length_y, 'side_length_y')
        self.num_points = _check_count(nr_of_points, 'nr_of_points')
        self.seed = seed

    def nr_of_points(self):
        return self.num_points

    def gen(self):
        rng = np.random.default_rng(self.seed)
        side = np.array([self.side_length_x, self.side_length_y])
        for p in rng.uniform(-0.5, 0.5, size=(self.num_points, 2)):
            yield p*side


class FibonacciEllipse(PositionDistribution):
    """ Fibonacci (sunflower) spiral filling an ellipse """
    def __init__(self, radius_x, radius_y, nr_of_points):
        self.radius_x = _check_length(radius_x, 'radius_x')
        self.radius_y = _check_length(radius_y, 'radius_y')
        self.num_points = _check_count(nr_of_points, 'nr_of_points')

    def nr_of_points(self):
        return self.num_points

    def gen(self):
        n = self.num_points
        for i in range(n):
            sin_phi, cos_phi = (math.sin(2*math.pi*((i/PHI) % 1)),
                                math.cos(2*math.pi*((i/PHI) % 1)))
            sqrt_r = math.sqrt(i/n)
            yield np.array([self.radius_x*sin_phi*sqrt_r,
                            self.radius_y*cos_phi*sqrt_r])


class FibonacciRectangle(PositionDistribution):
    """ Fibonacci lattice over a rectangle """
    def __init__(self, side_length_x, side_length_y, nr_of_points):
        self.side_length_x = _check_length(side_length_x, 'side_length_x')
        self.side_length_y = _check_length(side_length_y, 'side_length_y')
        self.num_points = _check_count(nr_of_points, 'nr_of_points')

    def nr_of_points(self):
        return self.num_points

    def gen(self):
        n = self.num_points
        for i in range(n):
            yield np.array([self.side_length_x*(((i/PHI) % 1) - 0.5),
                            self.side_length_y*(i/n - 0.5)])
