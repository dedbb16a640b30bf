#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2024 Michael J. Hayford
""" Meters and detectors

    Detectors are planes at z = 0 of their node frame. Light passes through
    them unchanged; on the way they record what arrives. The recorded state
    is cleared at the start of every analysis and is read with
    :meth:`Detector.report`. A detector that receives no light reports zero.

.. Created on Mon Mar 25 10:12:58 2024

.. codeauthor: Michael J. Hayford
"""
import logging

import numpy as np
import pandas as pd

from opticbench.elem.fluence import FluenceEstimator
from opticbench.elem.profiles import Plane
from opticbench.elem.surface import OpticSurface
from opticbench.elem.transform import Isometry
from opticbench.error import PropertyError
from opticbench.light.spectrum import merge_spectra
from opticbench.raytr.rays import RayBundle
from opticbench.util.units import nanometer
from .node import OpticNode, air_index
from .properties import positive, instance_of

logger = logging.getLogger(__name__)


class Detector(OpticNode):
    """ Base class for detectors. """

    def __init__(self, name=None):
        super().__init__(name)
        self.update()
        self.reset_data()

    def update(self):
        self.surfaces = [OpticSurface('detector', Plane(), Isometry(),
                                      self.ports.inputs['input_1'])]
        self.media = [air_index, air_index]

    @property
    def surface(self):
        return self.surfaces[0]

    def reset(self):
        super().reset()
        self.reset_data()

    def reset_data(self):
        pass

    def sync_to_restore(self, root):
        super().sync_to_restore(root)
        self.reset_data()

    def record_spectrum(self, spectrum, ctx):
        pass

    def record_bundle(self, bundle, ctx):
        pass

    def analyze_energy(self, incoming, ctx, inverted):
        result = super().analyze_energy(incoming, ctx, inverted)
        for data in result.values():
            self.record_spectrum(data.spectrum, ctx)
        return result

    def analyze_raytrace(self, incoming, ctx, inverted):
        result = super().analyze_raytrace(incoming, ctx, inverted)
        for data in result.values():
            self.record_bundle(data.bundle, ctx)
        return result

    def analyze_ghostfocus(self, incoming, ctx, inverted):
        result = super().analyze_ghostfocus(incoming, ctx, inverted)
        for port in self.output_names(inverted):
            if port in result:
                for b in result[port].bundles:
                    self.record_bundle(b, ctx)
        return result

    def report(self):
        return {}


class EnergyMeter(Detector):
    default_name = 'energy meter'

    def reset_data(self):
        self.energy = 0.0

    def transient_attrs(self):
        return super().transient_attrs() + ['energy']

    def record_spectrum(self, spectrum, ctx):
        self.energy += spectrum.total_energy()

    def record_bundle(self, bundle, ctx):
        self.energy += bundle.total_energy()

    def report(self):
        return {'energy': self.energy}


class Spectrometer(Detector):
    """ records the spectrum of the arriving light

    Ray bundles are binned with the spectrometer's resolution.
    """
    default_name = 'spectrometer'

    def __init__(self, name=None, resolution=nanometer(0.1)):
        super().__init__(name)
        self.props.create('resolution', resolution,
                          'spectral resolution for ray data', positive)

    def reset_data(self):
        self.spectrum = None

    def transient_attrs(self):
        return super().transient_attrs() + ['spectrum']

    def record_spectrum(self, spectrum, ctx):
        self.spectrum = merge_spectra(self.spectrum, spectrum)

    def record_bundle(self, bundle, ctx):
        spec = bundle.to_spectrum(self.props.get('resolution'))
        if spec is not None:
            self.spectrum = merge_spectra(self.spectrum, spec)

    def report(self):
        total = 0.0 if self.spectrum is None else self.spectrum.total_energy()
        return {'spectrum': self.spectrum, 'total_energy': total}


class SpotDiagram(Detector):
    """ records the rays crossing the detector plane """
    default_name = 'spot diagram'

    def reset_data(self):
        self.bundle = RayBundle()

    def transient_attrs(self):
        return super().transient_attrs() + ['bundle']

    def record_bundle(self, bundle, ctx):
        self.bundle.merge(bundle.copy())

    def spot_positions(self):
        """ (x, y) of the recorded rays on the detector surface """
        positions, _ = self.surface.hit_map.hit_points()
        return positions

    def report(self):
        positions, energies = self.surface.hit_map.hit_points()
        if len(positions) == 0:
            return {'nr_of_rays': 0, 'energy': 0.0, 'centroid': None,
                    'rms_radius': 0.0, 'geo_radius': 0.0}
        ctr = positions.mean(axis=0)
        r = np.hypot(*(positions - ctr).T)
        return {'nr_of_rays': len(positions),
                'energy': float(np.sum(energies)),
                'centroid': ctr,
                'rms_radius': float(np.sqrt(np.mean(r*r))),
                'geo_radius': float(np.max(r))}


def _grid_shape(value):
    if not isinstance(value, (tuple, list)) or len(value) != 2:
        raise PropertyError(f"grid shape must be (nx, ny), got {value!r}")
    for n in value:
        instance_of(int)(n)
        if n < 1:
            raise PropertyError(f"grid shape entries must be >= 1, "
                                f"got {value!r}")
    return tuple(value)


def _estimator(value):
    try:
        return FluenceEstimator(value)
    except ValueError:
        raise PropertyError(f"unknown fluence estimator {value!r}") from None


class FluenceDetector(Detector):
    """ estimates the fluence of the rays hitting the detector plane """
    default_name = 'fluence detector'

    def __init__(self, name=None, grid_shape=(64, 64),
                 estimator=FluenceEstimator.KDE):
        super().__init__(name)
        self.props.create('grid_shape', grid_shape, 'output grid (nx, ny)',
                          _grid_shape)
        self.props.create('estimator', estimator, 'fluence estimator',
                          _estimator)

    def fluence(self, bounce=None):
        """ :class:`~opticbench.elem.fluence.FluenceData` of the hits """
        return self.surface.hit_map.calc_fluence_map(
            self.props.get('grid_shape'), self.props.get('estimator'),
            bounce=bounce)

    def report(self):
        if self.surface.hit_map.is_empty():
            return {'fluence': None, 'peak': 0.0, 'average': 0.0,
                    'total_energy': 0.0}
        fd = self.fluence()
        return {'fluence': fd, 'peak': fd.peak(), 'average': fd.average(),
                'total_energy': fd.total_energy()}


class WaveFront(Detector):
    """ wavefront error of the rays crossing the detector plane

    For every wavelength, the optical path lengths of the rays are taken
    relative to the ray closest to the detector center and expressed in
    waves. A ray with a longer path lags behind and has a negative error.
    """
    default_name = 'wavefront monitor'

    def reset_data(self):
        # rows of (x, y, optical path length, wavelength)
        self.samples = []

    def transient_attrs(self):
        return super().transient_attrs() + ['samples']

    def record_bundle(self, bundle, ctx):
        for r in bundle:
            x, y = self.surface.local_xy(
                self.isometry.inverse_transform_point(r.pos))
            self.samples.append((x, y, r.path_length, float(r.wvl)))

    def wavelengths(self):
        return sorted({s[3] for s in self.samples})

    def wavefront_error(self, wvl):
        """ (n, 3) array of x, y and the wavefront error in waves at wvl """
        data = np.array([s for s in self.samples
                         if np.isclose(s[3], wvl, rtol=1e-12, atol=0.)])
        if len(data) == 0:
            return np.zeros((0, 3))
        ref = np.argmin(np.hypot(data[:, 0], data[:, 1]))
        wf = -(data[:, 2] - data[ref, 2])/wvl
        return np.column_stack((data[:, 0], data[:, 1], wf))

    def wavefront_df(self):
        """ DataFrame of peak to valley and RMS error, one row per wvl """
        rows = []
        for wvl in self.wavelengths():
            wf = self.wavefront_error(wvl)[:, 2]
            rows.append((wvl, len(wf), float(np.ptp(wf)), float(np.std(wf))))
        return pd.DataFrame(rows, columns=['wvl', 'nr_of_rays', 'ptv', 'rms'])

    def report(self):
        """ worst peak to valley and RMS error over the wavelengths """
        if len(self.samples) == 0:
            return {'nr_of_rays': 0, 'ptv': 0.0, 'rms': 0.0,
                    'wavefronts': self.wavefront_df()}
        df = self.wavefront_df()
        return {'nr_of_rays': len(self.samples),
                'ptv': float(df['ptv'].max()),
                'rms': float(df['rms'].max()),
                'wavefronts': df}
