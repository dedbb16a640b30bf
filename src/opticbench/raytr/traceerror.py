#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2018 Michael J. Hayford
""" Support for ray trace exception handling

    These exceptions signal the fate of a single ray. The bundle level
    operations catch them and drop the ray from the bundle.

.. Created on Wed Oct 24 15:22:40 2018

.. codeauthor: Michael J. Hayford
"""


class TraceError(Exception):
    """ Exception raised when ray tracing a node """


class TraceMissedSurfaceError(TraceError):
    """ Exception raised when ray misses a surface """
    def __init__(self, surf=None, pt=None, d=None):
        self.surf = surf
        self.pt = pt
        self.d = d


class TraceTIRError(TraceError):
    """ Exception raised when ray TIRs at a surface """
    def __init__(self, inc_dir, normal, n_in, n_out):
        self.inc_dir = inc_dir
        self.normal = normal
        self.n_in = n_in
        self.n_out = n_out


class TraceEvanescentRayError(TraceError):
    """ Exception raised when a diffraction order doesn't propagate """
    def __init__(self, inc_dir, normal, wvl, order):
        self.inc_dir = inc_dir
        self.normal = normal
        self.wvl = wvl
        self.order = order


class TraceRayBlockedError(TraceError):
    """ Exception raised when ray is blocked by an aperture on a surface """
    def __init__(self, surf, int_pt):
        self.surf = surf
        self.int_pt = int_pt
