#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2018 Michael J. Hayford
""" miscellaneous functions for working with numpy vectors and floats

.. Created on Wed May 23 15:27:06 2018

.. codeauthor: Michael J. Hayford
"""
import numpy as np
from numpy.linalg import norm
from math import isfinite, pi
import transforms3d as t3d


def normalize(v):
    """ return normalized version of input vector v """
    length = norm(v)
    if length == 0.0:
        return v
    else:
        return v/length


def is_finite_number(a) -> bool:
    """ returns true if a is a real number that is neither inf nor nan """
    try:
        return isfinite(float(a))
    except (TypeError, ValueError):
        return False


def euler2opt(e):
    """ convert right-handed euler angles to optical design convention,
        i.e. alpha and beta are left-handed
    """
    return np.array([-e[0], -e[1], e[2]])


def euler2rot3d(euler):
    """ convert euler angle vector, in degrees, to a rotation matrix. """
    rot_mat = t3d.euler.euler2mat(*np.deg2rad(euler2opt(euler)))
    return rot_mat


def rot_v1_into_v2(v1, v2):
    """ rotation matrix that turns unit vector v1 into unit vector v2.

    Rodrigues' formula about the axis v1 x v2. Antiparallel vectors are
    rotated by pi about an axis perpendicular to v1.
    """
    v1 = normalize(np.asarray(v1, dtype=float))
    v2 = normalize(np.asarray(v2, dtype=float))
    axis = np.cross(v1, v2)
    s = norm(axis)
    c = np.dot(v1, v2)
    if s < 1e-12:
        if c > 0.:
            return np.identity(3)
        # pick any axis perpendicular to v1
        trial = np.array([0., 1., 0.]) if abs(v1[1]) < 0.9 \
            else np.array([1., 0., 0.])
        axis = normalize(np.cross(v1, trial))
        return t3d.axangles.axangle2mat(axis, pi)
    k = axis/s
    kx = np.array([[0., -k[2], k[1]],
                   [k[2], 0., -k[0]],
                   [-k[1], k[0], 0.]])
    return np.identity(3) + s*kx + (1. - c)*np.matmul(kx, kx)


def polygon_area(vertices) -> float:
    """ area of a simple polygon with ordered vertices (shoelace formula) """
    v = np.asarray(vertices)
    x, y = v[:, 0], v[:, 1]
    return 0.5*abs(np.dot(x, np.roll(y, 1)) - np.dot(y, np.roll(x, 1)))


def convex_polygon_area(vertices) -> float:
    """ area of a convex polygon given its vertices in any order """
    v = np.asarray(vertices)
    ctr = v.mean(axis=0)
    ang = np.arctan2(v[:, 1] - ctr[1], v[:, 0] - ctr[0])
    return polygon_area(v[np.argsort(ang)])


def linspace_centers(start, stop, num):
    """ centers of num equal cells spanning start to stop """
    step = (stop - start)/num
    return start + step*(np.arange(num) + 0.5)
