#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2017 Michael J. Hayford
""" Module for different surface profile shapes

    The profiles module captures the geometric shape aspect of an optical
    surface. The :class:`~.SurfaceProfile` base class specifies an api that
    subclasses implement to provide different shapes. Coordinates are in the
    profile's own frame: the vertex is at the origin and the axis is z.

.. Created on Tue Aug  1 13:18:57 2017

.. codeauthor: Michael J. Hayford
"""
import numpy as np
from math import sqrt

from opticbench.util.misc_math import normalize
from opticbench.raytr.traceerror import TraceMissedSurfaceError
from opticbench.raytr.raytrace import paraxial_bend


class SurfaceProfile:
    """Base class for surface profiles. """

    def __repr__(self):
        return "{!s}()".format(type(self).__name__)

    def listobj_str(self):
        return f"profile: {type(self).__name__}\n"

    def df(self, p):
        """Returns the gradient of the profile surface function at point
        :math:`\\boldsymbol{p}`.
        """
        pass

    def normal(self, p):
        """Returns the unit normal of the profile at point
        :math:`\\boldsymbol{p}`.
        """
        return normalize(self.df(p))

    def sag(self, x, y):
        """Returns the sagitta (z coordinate) of the surface at x, y. """
        pass

    def intersect(self, p0, d, eps, z_dir):
        ''' Intersect a profile, starting from an arbitrary point.

        Args:
            p0:  start point of the ray in the profile's coordinate system
            d:  direction cosine of the ray in the profile's coordinate system
            eps: numeric tolerance
            z_dir: +1 if propagation positive direction, -1 if otherwise

        Returns:
            tuple: distance to intersection point *s1*, intersection point *p*

        Raises:
            :exc:`~opticbench.raytr.traceerror.TraceMissedSurfaceError`
        '''
        pass

    def intersect_and_normal(self, p0, d, eps=1.0e-12):
        """ forward intersection point and surface normal, or None

        Solutions lying behind the ray start point are rejected.
        """
        z_dir = 1.0 if d[2] >= 0. else -1.0
        try:
            s, p = self.intersect(p0, d, eps, z_dir)
        except TraceMissedSurfaceError:
            return None
        if s < -eps:
            return None
        return p, self.normal(p)


class Plane(SurfaceProfile):
    """ flat surface, z = 0 in the profile frame """

    def df(self, p):
        return np.array([0., 0., 1.])

    def normal(self, p):
        return np.array([0., 0., 1.])

    def sag(self, x, y):
        return 0.

    def intersect(self, p0, d, eps, z_dir):
        if abs(d[2]) < eps:
            raise TraceMissedSurfaceError(self, p0, d)
        s = -p0[2]/d[2]
        p = p0 + s*d
        return s, p


class Spherical(SurfaceProfile):
    """ Spherical surface profile parameterized by curvature.

    The sag :math:`z` is given by:

    :math:`z = R - \\sqrt{R^2 - x^2 - y^2}`

    where :math:`R = 1/c`
    """

    def __init__(self, c=0.0, r=None):
        """ initialize a Spherical profile.

        Args:
            c: curvature
            r: radius of curvature. If zero, taken as planar. If r is
                specified, it overrides any input for c (curvature).
        """
        if r is not None:
            self.r = r
        else:
            self.cv = c

    @property
    def r(self):
        if self.cv != 0.0:
            return 1.0/self.cv
        else:
            return 0.0

    @r.setter
    def r(self, radius):
        if radius != 0.0:
            self.cv = 1.0/radius
        else:
            self.cv = 0.0

    def __repr__(self):
        return "{!s}(c={})".format(type(self).__name__, self.cv)

    def listobj_str(self):
        o_str = f"profile: {type(self).__name__}\n"
        o_str += f"c={self.cv},   r={self.r}\n"
        return o_str

    def flip(self):
        self.cv = -self.cv

    def intersect(self, p, d, eps, z_dir):
        ''' Intersection with a sphere, starting from an arbitrary point. '''
        # Substitute expressions equivalent to Welford's 4.8 and 4.9
        # For quadratic equation ax**2 + bx + c = 0:
        #  ax2 = 2a
        #  cx2 = 2c
        ax2 = self.cv
        cx2 = self.cv * p.dot(p) - 2*p[2]
        b = self.cv * d.dot(p) - d[2]
        try:
            # Use z_dir to pick correct root
            s = cx2/(z_dir*sqrt(b*b - ax2*cx2) - b)
        except (ValueError, ZeroDivisionError):
            raise TraceMissedSurfaceError(self, p, d)

        p1 = p + s*d
        return s, p1

    def df(self, p):
        return np.array([-self.cv*p[0], -self.cv*p[1], 1.0-self.cv*p[2]])

    def sag(self, x, y):
        if self.cv != 0.0:
            r = 1/self.cv
            try:
                adj = sqrt(r*r - x*x - y*y)
            except ValueError:
                raise TraceMissedSurfaceError(self)
            return r*(1 - abs(adj/r))
        else:
            return 0


class Paraxial(Plane):
    """ flat surface acting as an ideal thin lens of given focal length

    The geometry is planar; :meth:`bend` applies the paraxial angle change
    :math:`\\Delta u = -y/f`.
    """

    def __init__(self, focal_length=1.0):
        self.focal_length = focal_length

    def __repr__(self):
        return f"{type(self).__name__}(focal_length={self.focal_length})"

    def listobj_str(self):
        return (f"profile: {type(self).__name__}\n"
                f"focal_length={self.focal_length}\n")

    def bend(self, pt, d_in):
        return paraxial_bend(pt, d_in, self.focal_length)


def sphere_or_plane(curvature: float) -> SurfaceProfile:
    """ Spherical profile, or Plane when curvature is zero """
    if curvature == 0.:
        return Plane()
    return Spherical(c=curvature)


class Conic(Spherical):
    """ Conic surface profile parameterized by curvature and conic constant.

    Conics produced for conic constant values:

        + cc > 0.0: oblate spheroid
        + cc = 0.0: sphere
        + cc < 0.0 and > -1.0: ellipsoid
        + cc = -1.0: paraboloid
        + cc < -1.0: hyperboloid

    The sag :math:`z` is given by:

    :math:`z(r)=\\dfrac{cr^2}{1+\\sqrt[](1-(1+cc) c^2 r^2)}`

    where :math:`r^2 = x^2+y^2`
    """

    def __init__(self, c=0.0, cc=0.0, r=None, ec=None):
        """ initialize a Conic profile.

        Args:
            c: curvature
            cc: conic constant
            r: radius of curvature, overrides c when given
            ec: conic asphere (= cc + 1), overrides cc when given
        """
        super().__init__(c=c, r=r)
        if ec is not None:
            self.ec = ec
        else:
            self.cc = cc

    @property
    def ec(self):
        return self.cc + 1.0

    @ec.setter
    def ec(self, ec):
        self.cc = ec - 1.0

    def __repr__(self):
        return "{!s}(c={}, cc={})".format(type(self).__name__,
                                          self.cv, self.cc)

    def listobj_str(self):
        o_str = f"profile: {type(self).__name__}\n"
        o_str += f"c={self.cv},   r={self.r}   conic cnst={self.cc}\n"
        return o_str

    def intersect(self, p, d, eps, z_dir):
        ''' Intersection with a conic, starting from an arbitrary point.'''
        # For quadratic equation ax**2 + bx + c = 0:
        #  ax2 = 2a
        #  cx2 = 2c
        ax2 = self.cv*(1. + self.cc*d[2]*d[2])
        cx2 = self.cv*(p[0]*p[0] + p[1]*p[1] + self.ec*p[2]*p[2]) - 2.0*p[2]
        b = self.cv*(d[0]*p[0] + d[1]*p[1] + self.ec*d[2]*p[2]) - d[2]
        try:
            # Use z_dir to pick correct root
            s = cx2/(z_dir*sqrt(b*b - ax2*cx2) - b)
        except (ValueError, ZeroDivisionError):
            raise TraceMissedSurfaceError(self, p, d)

        p1 = p + s*d
        return s, p1

    def df(self, p):
        return np.array(
                [-self.cv*p[0],
                 -self.cv*p[1],
                 1.0-(self.cc+1.0)*self.cv*p[2]])

    def sag(self, x, y):
        r2 = x*x + y*y
        try:
            z = self.cv*r2/(1. + sqrt(1. - (self.cc+1.0)*self.cv*self.cv*r2))
        except ValueError:
            raise TraceMissedSurfaceError(self)
        return z


class Cylindrical(Spherical):
    """ cylinder with its axis along x, curved in the y-z plane only

    The sag :math:`z` is given by:

    :math:`z = R - \\sqrt{R^2 - y^2}`

    where :math:`R = 1/c`
    """

    def intersect(self, p, d, eps, z_dir):
        ''' Intersection with a cylinder, starting from an arbitrary point. '''
        # the sphere's quadratic with the x terms dropped
        ax2 = self.cv*(d[1]*d[1] + d[2]*d[2])
        cx2 = self.cv*(p[1]*p[1] + p[2]*p[2]) - 2*p[2]
        b = self.cv*(d[1]*p[1] + d[2]*p[2]) - d[2]
        try:
            s = cx2/(z_dir*sqrt(b*b - ax2*cx2) - b)
        except (ValueError, ZeroDivisionError):
            raise TraceMissedSurfaceError(self, p, d)

        p1 = p + s*d
        return s, p1

    def df(self, p):
        return np.array([0., -self.cv*p[1], 1.0-self.cv*p[2]])

    def sag(self, x, y):
        return super().sag(0., y)


def cylinder_or_plane(curvature: float) -> SurfaceProfile:
    """ Cylindrical profile, or Plane when curvature is zero """
    if curvature == 0.:
        return Plane()
    return Cylindrical(c=curvature)
