#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2024 Michael J. Hayford
""" Ideal beam splitter with two inputs and two outputs

    Light entering `input_1` is split into a transmitted part leaving
    `out1_trans1_refl2` and a reflected part leaving `out2_trans2_refl1`;
    light entering `input_2` is split the other way round. The splitting is
    given either as the transmitted fraction or as a transmission
    :class:`~opticbench.light.spectrum.Spectrum`.

    The splitting plane is the z = 0 plane of the node frame; the reflected
    rays and the reflected optical axis are folded by it. Tilt the splitter
    with its alignment isometry to steer the reflected beam.

.. Created on Fri Mar 22 15:06:37 2024

.. codeauthor: Michael J. Hayford
"""
import numpy as np

from opticbench.error import PropertyError
from opticbench.elem.profiles import Plane
from opticbench.elem.surface import OpticSurface
from opticbench.elem.transform import Isometry
from opticbench.light.lightdata import (LightResult, EnergyData, GeometricData,
                                        GhostFocusData, expect)
from opticbench.light.spectrum import Spectrum, merge_spectra
from opticbench.raytr.raytrace import reflect
from opticbench.util.misc_math import rot_v1_into_v2
from .node import OpticNode
from .properties import in_range

INPUTS = ('input_1', 'input_2')
OUTPUTS = ('out1_trans1_refl2', 'out2_trans2_refl1')


def _splitting(value):
    if isinstance(value, Spectrum):
        if not value.is_transmission_spectrum():
            raise PropertyError("splitting spectrum values must be in "
                                "[0, 1]")
        return value
    return in_range(0., 1.)(value)


class BeamSplitter(OpticNode):
    default_name = 'beam splitter'

    def __init__(self, name=None, ratio=0.5):
        super().__init__(name, inputs=INPUTS, outputs=OUTPUTS)
        self.props.create('ratio', ratio,
                          'transmitted fraction, a number or a Spectrum',
                          _splitting)
        self.update()

    def update(self):
        self.surfaces = [OpticSurface('splitter', Plane(), Isometry(),
                                      self.ports.inputs['input_1'])]

    @property
    def ratio(self):
        return self.props.get('ratio')

    def routes(self, inverted):
        """ (entry, transmitted exit, reflected exit) per entry port """
        ins = self.input_names(inverted)
        outs = self.output_names(inverted)
        return [(ins[0], outs[0], outs[1]), (ins[1], outs[1], outs[0])]

    def transmission_at(self, wvl):
        r = self.ratio
        if isinstance(r, Spectrum):
            return float(r.transmission_at(wvl))
        return r

    def _split_spectrum(self, spectrum):
        r = self.ratio
        if isinstance(r, Spectrum):
            reflected = spectrum.split_by_spectrum(r)
        else:
            reflected = spectrum.copy()
            reflected.scale_vertical(1. - r)
            spectrum.scale_vertical(r)
        return spectrum, reflected

    def analyze_energy(self, incoming, ctx, inverted):
        result = LightResult()
        parts = {}
        for entry, trans_out, refl_out in self.routes(inverted):
            data = incoming.get(entry)
            if data is None:
                continue
            spec = expect(data, EnergyData, entry).spectrum.copy()
            trans, refl = self._split_spectrum(spec)
            parts.setdefault(trans_out, []).append(trans)
            parts.setdefault(refl_out, []).append(refl)
        for port, specs in parts.items():
            total = specs[0]
            for s in specs[1:]:
                total = merge_spectra(total, s)
            result[port] = EnergyData(total)
        return result

    def folded_axis(self, axis):
        normal = self.isometry.transform_vector(np.array([0., 0., 1.]))
        d_in = axis.z_axis
        d_out = reflect(d_in, normal)
        rot_mat = np.matmul(rot_v1_into_v2(d_in, d_out), axis.rot_mat)
        return Isometry(t=axis.t, rot_mat=rot_mat)

    def _split_bundle(self, bundle):
        """ transmitted and reflected parts of a bundle in the node frame """
        surf = self.surfaces[0]
        bundle.hit_surface(surf, record=True)
        reflected = bundle.copy(new_id=True)
        reflected.parent_id = bundle.uuid
        normal = np.array([0., 0., 1.])
        for tr, rr in zip(bundle.rays, reflected.rays):
            t = self.transmission_at(tr.wvl)
            tr.energy *= t
            rr.energy *= 1. - t
            rr.reflect(normal)
        return bundle, reflected

    def _trace_port(self, data, entry, inverted, kind):
        axis = data.axis
        self.place(axis, inverted)
        if axis is None:
            axis = self.isometry
        bundles = [data.bundle] if kind is GeometricData else data.bundles
        trans, refl = [], []
        for b in bundles:
            t, r = self._split_bundle(b.inverse_transformed(self.isometry))
            trans.append(t.transformed(self.isometry))
            refl.append(r.transformed(self.isometry))
        return (trans, axis), (refl, self.folded_axis(axis))

    def _analyze_rays(self, incoming, inverted, kind):
        parts = {}
        for entry, trans_out, refl_out in self.routes(inverted):
            data = incoming.get(entry)
            if data is None:
                continue
            data = expect(data, kind, entry)
            trans, refl = self._trace_port(data, entry, inverted, kind)
            for port, (bundles, axis) in ((trans_out, trans),
                                          (refl_out, refl)):
                if port in parts:
                    parts[port][0].extend(bundles)
                else:
                    parts[port] = (list(bundles), axis)
        result = LightResult()
        for port, (bundles, axis) in parts.items():
            if kind is GeometricData:
                merged = bundles[0]
                for b in bundles[1:]:
                    merged.merge(b)
                result[port] = GeometricData(merged, axis)
            else:
                result[port] = GhostFocusData(bundles, axis)
        return result

    def analyze_raytrace(self, incoming, ctx, inverted):
        return self._analyze_rays(incoming, inverted, GeometricData)

    def analyze_ghostfocus(self, incoming, ctx, inverted):
        return self._analyze_rays(incoming, inverted, GhostFocusData)
