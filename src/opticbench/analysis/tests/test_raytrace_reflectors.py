#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on Tue May  7 09:31:48 2024

@author: Mike
"""


import unittest
from math import asin, sqrt
from pytest import approx
import numpy as np
import numpy.testing as npt

from opticbench.analysis.analyzers import RayTraceAnalyzer, EnergyAnalyzer
from opticbench.elem.transform import Isometry
from opticbench.error import ConfigurationError, PropertyError
from opticbench.light.lightdata import EnergyData, GeometricData
from opticbench.light.spectrum import create_he_ne_spec
from opticbench.nodes.detectors import EnergyMeter, SpotDiagram, WaveFront
from opticbench.nodes.elements import (CylindricLens, ParabolicMirror,
                                       ReflectiveGrating, ThinMirror)
from opticbench.nodes.group import NodeGroup
from opticbench.nodes.source import Source, round_collimated_ray_source
from opticbench.raytr.rays import RayBundle
from opticbench.util.units import millimeter, micrometer, nanometer, degree


def chain(*nodes, distance=millimeter(10.)):
    g = NodeGroup('bench')
    for n in nodes:
        g.add_node(n)
    for a, b in zip(nodes[:-1], nodes[1:]):
        g.connect(a, 'output_1', b, 'input_1', distance)
    return g


class ParabolicMirrorTestCase(unittest.TestCase):
    def setUp(self):
        self.src = round_collimated_ray_source(millimeter(1.), 1.0, 3)
        self.spot = SpotDiagram('focus')

    def test_focus(self):
        mirror = ParabolicMirror('parabola', millimeter(50.))
        g = chain(self.src, mirror, self.spot, distance=millimeter(50.))
        RayTraceAnalyzer().analyze(g)
        report = self.spot.report()
        assert report['energy'] == approx(1.0)
        assert report['geo_radius'] < 1e-12
        # folded back onto the source plane
        npt.assert_allclose(self.spot.isometry.t, [0., 0., 0.], atol=1e-12)
        assert np.all(self.spot.bundle.directions()[:, 2] < 0.)

    def test_sphere_has_aberration(self):
        sphere = ThinMirror('sphere', -1/(2*millimeter(50.)))
        g = chain(self.src, sphere, self.spot, distance=millimeter(50.))
        RayTraceAnalyzer().analyze(g)
        assert self.spot.report()['geo_radius'] > 1e-8

    def test_focal_length(self):
        with self.assertRaises(PropertyError):
            ParabolicMirror('flat', 0.)
        mirror = ParabolicMirror('parabola', millimeter(50.))
        mirror.set_property('focal_length', millimeter(25.))
        assert mirror.surfaces[0].profile.cv == approx(-20.)
        assert mirror.surfaces[0].profile.cc == -1.


class CylindricLensTestCase(unittest.TestCase):
    def test_focus_in_y_only(self):
        src = round_collimated_ray_source(millimeter(1.), 1.0, 3)
        lens = CylindricLens.from_radii('cylinder', millimeter(50.), np.inf,
                                        millimeter(2.), 1.5)
        spot = SpotDiagram('line focus')
        g = NodeGroup('bench')
        for n in (src, lens, spot):
            g.add_node(n)
        g.connect(src, 'output_1', lens, 'input_1', millimeter(10.))
        g.connect(lens, 'output_1', spot, 'input_1', millimeter(100.))
        RayTraceAnalyzer().analyze(g)

        assert spot.report()['nr_of_rays'] == len(src.light_data.bundle)
        npt.assert_allclose(spot.bundle.directions()[:, 0], 0., atol=1e-12)
        xy = spot.spot_positions()
        x_in = src.light_data.bundle.positions()[:, 0]
        npt.assert_allclose(np.sort(xy[:, 0]), np.sort(x_in), atol=1e-12)
        assert np.max(np.abs(xy[:, 1])) < millimeter(0.1)


class ReflectiveGratingTestCase(unittest.TestCase):
    def setUp(self):
        self.src = round_collimated_ray_source(millimeter(1.), 1.0, 2)
        self.spot = SpotDiagram('spot')

    def test_first_order(self):
        grating = ReflectiveGrating('grating', 1./micrometer(2.), 1)
        g = chain(self.src, grating, self.spot)
        RayTraceAnalyzer().analyze(g)
        assert self.spot.report()['energy'] == approx(1.0)
        d_m = np.array([0.5, 0., -sqrt(0.75)])
        npt.assert_allclose(self.spot.isometry.z_axis, d_m, atol=1e-12)
        d = self.spot.bundle.directions()
        npt.assert_allclose(d, np.tile(d_m, (len(d), 1)), atol=1e-12)
        assert all(r.nr_of_bounces == 1 for r in self.spot.bundle)

    def test_littrow(self):
        grating = ReflectiveGrating('echelle')
        assert grating.get_property('line_density') == approx(1.74e6)
        assert grating.order == -1
        wvl = nanometer(1000.)
        assert grating.littrow_angle(wvl) == approx(asin(0.87))
        grating.align_littrow(wvl)
        g = chain(self.src, grating, self.spot)
        RayTraceAnalyzer().analyze(g)
        npt.assert_allclose(self.spot.isometry.z_axis, [0., 0., -1.],
                            atol=1e-12)
        npt.assert_allclose(self.spot.bundle.directions()[:, 2], -1.,
                            atol=1e-12)
        with self.assertRaises(ConfigurationError):
            grating.littrow_angle(nanometer(2000.))

    def test_evanescent_order(self):
        grating = ReflectiveGrating('grating', 1./micrometer(2.), 3)
        g = chain(self.src, grating, self.spot)
        RayTraceAnalyzer().analyze(g)
        assert self.spot.report()['nr_of_rays'] == 0
        assert self.spot.report()['energy'] == approx(0.0)

    def test_energy_flow(self):
        src = Source('src', EnergyData(create_he_ne_spec(1.0)))
        grating = ReflectiveGrating('grating')
        meter = EnergyMeter('meter')
        EnergyAnalyzer().analyze(chain(src, grating, meter))
        assert meter.report()['energy'] == approx(1.0)

    def test_properties(self):
        with self.assertRaises(PropertyError):
            ReflectiveGrating('grating', diffraction_order=1.5)
        with self.assertRaises(PropertyError):
            ReflectiveGrating('grating', diffraction_order=True)
        with self.assertRaises(PropertyError):
            ReflectiveGrating('grating', line_density=0.)


class WaveFrontTestCase(unittest.TestCase):
    def setUp(self):
        self.wf = WaveFront('wavefront')

    def test_point_source(self):
        bundle = RayBundle.new_hexapolar_point_source(
            degree(90.), 1, nanometer(1000.), 1.0)
        src = Source('point source', GeometricData(bundle))
        src.set_isometry(Isometry())
        g = chain(src, self.wf, distance=millimeter(1.))
        RayTraceAnalyzer().analyze(g)
        report = self.wf.report()
        assert report['nr_of_rays'] == 7
        # the 45 degree rays lag by (sqrt(2) - 1) mm
        ptv = (sqrt(2.) - 1.)*1e-3/1e-6
        assert report['ptv'] == approx(ptv)
        assert report['rms'] == approx(ptv*sqrt(6.)/7.)
        wf = self.wf.wavefront_error(nanometer(1000.))
        assert wf[:, 2].max() == approx(0.)
        assert wf[:, 2].min() == approx(-ptv)

    def test_collimated_is_flat(self):
        src = round_collimated_ray_source(millimeter(1.), 1.0, 3)
        RayTraceAnalyzer().analyze(chain(src, self.wf))
        report = self.wf.report()
        assert report['nr_of_rays'] == 37
        assert report['ptv'] == approx(0., abs=1e-9)
        df = report['wavefronts']
        assert len(df) == 1
        assert df['wvl'][0] == approx(1e-6)

    def test_diffracted_beam_is_flat(self):
        src = round_collimated_ray_source(millimeter(1.), 1.0, 3)
        grating = ReflectiveGrating('grating', 1./micrometer(2.), 1)
        RayTraceAnalyzer().analyze(chain(src, grating, self.wf))
        assert self.wf.report()['ptv'] == approx(0., abs=1e-6)

    def test_no_light(self):
        report = self.wf.report()
        assert report['nr_of_rays'] == 0
        assert report['ptv'] == 0.
        assert report['rms'] == 0.
        assert len(self.wf.wavefront_error(nanometer(1000.))) == 0


if __name__ == '__main__':
    unittest.main(verbosity=2)
