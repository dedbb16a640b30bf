#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2018 Michael J. Hayford
""" Module for optical surfaces, their apertures and hit maps

    An :class:`OpticSurface` combines a :class:`~.profiles.SurfaceProfile`,
    placed in the frame of its node by an :class:`~.transform.Isometry`,
    with the aperture and coating of the port it belongs to, and a
    :class:`~.hitmap.HitMap` of the rays that struck it.

.. Created on Sat Sep 16 09:22:05 2017

.. codeauthor: Michael J. Hayford
"""

import logging
from math import sqrt

import numpy as np

from opticbench.error import ConfigurationError
from opticbench.util.misc_math import is_finite_number
from opticbench.elem.coating import IdealAR
from opticbench.elem.hitmap import HitMap
from opticbench.elem.profiles import Plane
from opticbench.elem.transform import Isometry
from opticbench.raytr.traceerror import (TraceMissedSurfaceError,
                                         TraceRayBlockedError)

logger = logging.getLogger(__name__)


class Aperture():
    """ binary aperture, evaluated in the local surface frame """
    def __init__(self, x_offset=0.0, y_offset=0.0):
        self.x_offset = x_offset
        self.y_offset = y_offset

    def listobj_str(self):
        o_str = ""
        if self.x_offset != 0. or self.y_offset != 0.:
            o_str = f"x_offset={self.x_offset}   y_offset={self.y_offset}\n"
        return o_str

    def dimension(self):
        pass

    def max_dimension(self):
        x, y = self.dimension()
        return sqrt(x*x + y*y)

    def point_inside(self, x: float, y: float, fuzz: float = 1e-12) -> bool:
        pass

    def bounding_box(self):
        center = np.array([self.x_offset, self.y_offset])
        extent = np.array(self.dimension())
        return center-extent, center+extent

    def tform(self, x, y):
        x -= self.x_offset
        y -= self.y_offset
        return x, y


class Circular(Aperture):
    def __init__(self, radius=1.0, **kwargs):
        super().__init__(**kwargs)
        if not is_finite_number(radius) or radius <= 0.:
            raise ConfigurationError(
                f"aperture radius must be positive, got {radius!r}")
        self.radius = radius

    def __repr__(self):
        return f"{type(self).__name__}(radius={self.radius})"

    def listobj_str(self):
        o_str = f"ca: radius={self.radius}\n"
        o_str += super().listobj_str()
        return o_str

    def dimension(self):
        return (self.radius, self.radius)

    def max_dimension(self):
        return self.radius

    def point_inside(self, x: float, y: float, fuzz: float = 1e-12) -> bool:
        x, y = self.tform(x, y)
        return sqrt(x*x + y*y) <= self.radius + fuzz


class Rectangular(Aperture):
    def __init__(self, x_half_width=1.0, y_half_width=1.0, **kwargs):
        super().__init__(**kwargs)
        for hw in (x_half_width, y_half_width):
            if not is_finite_number(hw) or hw <= 0.:
                raise ConfigurationError(
                    f"aperture half width must be positive, got {hw!r}")
        self.x_half_width = x_half_width
        self.y_half_width = y_half_width

    def __repr__(self):
        return (f"{type(self).__name__}(x_half_width={self.x_half_width}, "
                f"y_half_width={self.y_half_width})")

    def listobj_str(self):
        o_str = (f"ca: {type(self).__name__}: x_half_width={self.x_half_width}"
                 f"   y_half_width={self.y_half_width}\n")
        o_str += super().listobj_str()
        return o_str

    def dimension(self):
        return (self.x_half_width, self.y_half_width)

    def point_inside(self, x: float, y: float, fuzz: float = 1e-12) -> bool:
        x, y = self.tform(x, y)
        return (abs(x) <= self.x_half_width + fuzz
                and abs(y) <= self.y_half_width + fuzz)


class OpticSurface():
    """ a profile placed in a node, with aperture, coating and hit map

    Attributes:
        name: label of the surface within its node
        profile: the :class:`~.profiles.SurfaceProfile`
        iso: placement of the profile frame in the node frame
        port: the :class:`~opticbench.nodes.ports.Port` supplying aperture
              and coating, or None
        hit_map: rays recorded on this surface
    """
    def __init__(self, name='', profile=None, iso=None, port=None):
        self.name = name
        self.profile = profile if profile is not None else Plane()
        self.iso = iso if iso is not None else Isometry()
        self.port = port
        self.hit_map = HitMap()

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r}, {self.profile!r})"

    def listobj_str(self):
        o_str = f"surface: {self.name}\n"
        o_str += self.profile.listobj_str()
        if self.aperture is not None:
            o_str += self.aperture.listobj_str()
        o_str += self.coating.listobj_str()
        return o_str

    @property
    def aperture(self):
        return self.port.aperture if self.port is not None else None

    @property
    def coating(self):
        return self.port.coating if self.port is not None else IdealAR()

    def intersect_and_normal(self, p, d):
        """ forward intersection and unit normal, in the node frame, or None
        """
        p_s = self.iso.inverse_transform_point(p)
        d_s = self.iso.inverse_transform_vector(d)
        result = self.profile.intersect_and_normal(p_s, d_s)
        if result is None:
            return None
        pt_s, n_s = result
        return self.iso.transform_point(pt_s), self.iso.transform_vector(n_s)

    def intercept(self, p, d):
        """ intersection point and normal of a ray that passes the aperture

        Raises:
            TraceMissedSurfaceError: no forward intersection
            TraceRayBlockedError: the intersection is outside the aperture
        """
        result = self.intersect_and_normal(p, d)
        if result is None:
            raise TraceMissedSurfaceError(self, p, d)
        if not self.point_inside(result[0]):
            raise TraceRayBlockedError(self, result[0])
        return result

    def local_xy(self, p):
        """ transverse coordinates of node frame point p on this surface """
        p_s = self.iso.inverse_transform_point(p)
        return p_s[0], p_s[1]

    def point_inside(self, p) -> bool:
        if self.aperture is None:
            return True
        x, y = self.local_xy(p)
        return self.aperture.point_inside(x, y)

    def reset_hit_map(self):
        self.hit_map.reset()
