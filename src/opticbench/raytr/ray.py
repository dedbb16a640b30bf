#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2024 Michael J. Hayford
""" A single geometric ray

    A :class:`Ray` carries its position and unit direction, wavelength,
    energy and the refractive index of the medium it is travelling in.
    It keeps its position history and counts refractions and bounces.

.. Created on Thu Mar 14 08:47:12 2024

.. codeauthor: Michael J. Hayford
"""
import copy

import numpy as np
from numpy.linalg import norm

from opticbench.error import ConfigurationError
from opticbench.util.misc_math import normalize, is_finite_number
from opticbench.util.units import Length, Energy
from .raytrace import bend, reflect, diffract, paraxial_bend
from .traceerror import TraceMissedSurfaceError


class Ray():
    def __init__(self, pos, dir, wvl: Length, energy: Energy,
                 refr_index=1.0):
        self.pos = np.array(pos, dtype=float)
        d = np.array(dir, dtype=float)
        if not (np.all(np.isfinite(self.pos)) and np.all(np.isfinite(d))):
            raise ConfigurationError("ray position and direction must be "
                                     "finite")
        if norm(d) == 0.:
            raise ConfigurationError("ray direction must not be zero")
        if not is_finite_number(wvl) or wvl <= 0.:
            raise ConfigurationError(f"wavelength must be positive, "
                                     f"got {wvl!r}")
        if not is_finite_number(energy) or energy < 0.:
            raise ConfigurationError(f"ray energy must be >= 0, "
                                     f"got {energy!r}")
        self.dir = normalize(d)
        self.wvl = wvl
        self.energy = energy
        self.refr_index = refr_index
        self.path_length = 0.0
        self.pos_hist = []
        self.nr_of_bounces = 0
        self.nr_of_refractions = 0
        self.valid = True

    @classmethod
    def new_collimated(cls, pos, wvl, energy):
        """ ray starting at pos, travelling along +z """
        return cls(pos, [0., 0., 1.], wvl, energy)

    def __repr__(self):
        return (f"{type(self).__name__}(pos={self.pos.tolist()}, "
                f"dir={self.dir.tolist()}, wvl={self.wvl}, "
                f"energy={self.energy})")

    def copy(self):
        new_ray = copy.copy(self)
        new_ray.pos = self.pos.copy()
        new_ray.dir = self.dir.copy()
        new_ray.pos_hist = list(self.pos_hist)
        return new_ray

    def invalidate(self):
        self.valid = False

    def move_to(self, pt):
        """ move the ray in a straight line to pt """
        self.pos_hist.append(self.pos)
        self.path_length += self.refr_index*norm(pt - self.pos)
        self.pos = np.array(pt, dtype=float)

    def propagate(self, length):
        """ move the ray by length along its direction """
        self.move_to(self.pos + length*self.dir)

    def propagate_along_z(self, distance):
        """ free space translation until z changed by distance

        The z change is counted in the direction of travel, so a ray
        heading towards -z ends up at z - distance.
        """
        if distance < 0.:
            raise ConfigurationError(
                f"propagation distance must be >= 0, got {distance}")
        if self.dir[2] == 0.:
            raise TraceMissedSurfaceError(None, self.pos, self.dir)
        self.propagate(distance/abs(self.dir[2]))

    def refract_paraxial(self, focal_length):
        """ ideal thin lens in the z=0 plane of the ray's frame """
        if self.dir[2] == 0.:
            raise TraceMissedSurfaceError(None, self.pos, self.dir)
        s = -self.pos[2]/self.dir[2]
        self.move_to(self.pos + s*self.dir)
        self.dir = paraxial_bend(self.pos, self.dir, focal_length)
        self.nr_of_refractions += 1

    def refract(self, normal, n2):
        """ Snell refraction into index n2; TraceTIRError on TIR """
        self.dir = normalize(bend(self.dir, normal, self.refr_index, n2))
        self.refr_index = n2
        self.nr_of_refractions += 1

    def reflect(self, normal):
        self.dir = normalize(reflect(self.dir, normal))
        self.nr_of_bounces += 1

    def diffract(self, normal, grating_vector, order, origin):
        """ reflective diffraction at the current position

        The optical path gains order*wvl per ruling between origin and the
        ray position. Raises TraceEvanescentRayError for an evanescent order.
        """
        self.dir = normalize(diffract(self.dir, normal, grating_vector,
                                      order, self.wvl, self.refr_index))
        self.path_length += order*self.wvl*np.dot(grating_vector,
                                                  self.pos - origin)
        self.nr_of_bounces += 1

    def transformed(self, iso):
        """ copy of the ray mapped from iso's local frame to its parent """
        new_ray = self.copy()
        new_ray.pos = iso.transform_point(self.pos)
        new_ray.dir = iso.transform_vector(self.dir)
        new_ray.pos_hist = [iso.transform_point(p) for p in self.pos_hist]
        return new_ray

    def inverse_transformed(self, iso):
        """ copy of the ray mapped from iso's parent frame into iso """
        new_ray = self.copy()
        new_ray.pos = iso.inverse_transform_point(self.pos)
        new_ray.dir = iso.inverse_transform_vector(self.dir)
        new_ray.pos_hist = [iso.inverse_transform_point(p)
                            for p in self.pos_hist]
        return new_ray

