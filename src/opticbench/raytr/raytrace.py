#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2018 Michael J. Hayford
""" Functions for the interaction of a single ray direction with a surface

.. Created on Thu Jan 25 11:01:04 2018

.. codeauthor: Michael J. Hayford
"""

import numpy as np
from numpy.linalg import norm
from math import sqrt, copysign

from opticbench.util.misc_math import normalize
from .traceerror import TraceTIRError, TraceEvanescentRayError


def bend(d_in, normal, n_in, n_out):
    """ refract incoming direction, d_in, about normal """
    try:
        normal_len = norm(normal)
        cosI = np.dot(d_in, normal)/normal_len
        sinI_sqr = 1.0 - cosI*cosI
        n_cosIp = copysign(sqrt(n_out*n_out - n_in*n_in*sinI_sqr), cosI)
        alpha = n_cosIp - n_in*cosI
        d_out = (n_in*d_in + alpha*normal/normal_len)/n_out
        return d_out
    except ValueError:
        raise TraceTIRError(d_in, normal, n_in, n_out)


def reflect(d_in, normal):
    """ reflect incoming direction, d_in, about normal """
    normal_len = norm(normal)
    cosI = np.dot(d_in, normal)/normal_len
    d_out = d_in - 2.0*cosI*normal/normal_len
    return d_out


def paraxial_bend(pt, d_in, focal_length):
    """ thin lens angle change at point pt on a flat surface at z=0

    The ray slopes, taken with respect to the direction of travel, change by
    -pt/focal_length. Rays travelling towards -z see the same lens.
    """
    z_sign = 1.0 if d_in[2] >= 0. else -1.0
    dz = abs(d_in[2])
    if dz == 0.:
        raise TraceTIRError(d_in, np.array([0., 0., 1.]), 1.0, 1.0)
    ux = d_in[0]/dz - pt[0]/focal_length
    uy = d_in[1]/dz - pt[1]/focal_length
    return normalize(np.array([ux, uy, z_sign]))


def diffract(d_in, normal, grating_vector, order, wvl, n_in=1.0):
    """ direction of order diffracted in reflection by a ruled grating

    The grating vector lies in the surface, across the rulings; its length
    is the line density. The tangential part of the direction picks up
    order*wvl/n_in times the grating vector and the normal part changes
    sign, as in the grating equation
    :math:`n(\\sin\\theta_m - \\sin\\theta_i) = m\\lambda\\rho`.

    Raises:
        :exc:`~.traceerror.TraceEvanescentRayError` if the order is
        evanescent
    """
    n_hat = normalize(normal)
    cosI = np.dot(d_in, n_hat)
    tang = d_in - cosI*n_hat
    tang = tang + (order*wvl/n_in)*np.asarray(grating_vector, dtype=float)
    tang = tang - np.dot(tang, n_hat)*n_hat
    cos_sqr = 1.0 - np.dot(tang, tang)
    if cos_sqr < 0.:
        raise TraceEvanescentRayError(d_in, normal, wvl, order)
    return tang - copysign(sqrt(cos_sqr), cosI)*n_hat
