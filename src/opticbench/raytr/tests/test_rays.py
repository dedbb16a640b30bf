#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on Thu Apr  4 14:17:02 2024

@author: Mike
"""


import unittest
from math import radians, sqrt
from pytest import approx
import numpy as np
import numpy.testing as npt

from opticbench.elem.coating import ConstantR, Fresnel
from opticbench.elem.profiles import Plane, Paraxial
from opticbench.elem.surface import OpticSurface, Circular
from opticbench.elem.transform import Isometry
from opticbench.error import AnalysisError, ConfigurationError, DataError
from opticbench.nodes.ports import Port
from opticbench.raytr.energydist import Uniform
from opticbench.raytr.ray import Ray
from opticbench.raytr.rays import RayBundle, check_geometric
from opticbench.raytr.sampler import Hexapolar, Grid
from opticbench.raytr.spectraldist import LaserLines
from opticbench.raytr.raytrace import diffract, reflect
from opticbench.raytr.traceerror import TraceEvanescentRayError
from opticbench.util.units import nanometer, micrometer


def glass_index(wvl):
    return 1.5


class RayTestCase(unittest.TestCase):
    def test_invalid_rays(self):
        with self.assertRaises(ConfigurationError):
            Ray([0., 0., 0.], [0., 0., 0.], 1e-6, 1.)
        with self.assertRaises(ConfigurationError):
            Ray([0., 0., 0.], [0., 0., 1.], -1e-6, 1.)
        with self.assertRaises(ConfigurationError):
            Ray([0., 0., 0.], [0., 0., 1.], 1e-6, -1.)
        with self.assertRaises(ConfigurationError):
            Ray([0., np.inf, 0.], [0., 0., 1.], 1e-6, 1.)

    def test_propagate_along_z(self):
        ray = Ray([0., 0., 0.], [0., 0.6, 0.8], 1e-6, 1.)
        ray.propagate_along_z(2.)
        npt.assert_allclose(ray.pos, [0., 1.5, 2.])
        assert ray.path_length == approx(2.5)
        assert len(ray.pos_hist) == 1

        ray = Ray([0., 0., 0.], [0., 0., -1.], 1e-6, 1.)
        ray.propagate_along_z(2.)
        npt.assert_allclose(ray.pos, [0., 0., -2.])

    def test_refract_paraxial(self):
        ray = Ray([0., 1., -5.], [0., 0., 1.], 1e-6, 1.)
        ray.refract_paraxial(10.)
        npt.assert_allclose(ray.pos, [0., 1., 0.])
        ray.propagate_along_z(10.)
        npt.assert_allclose(ray.pos, [0., 0., 10.], atol=1e-12)
        assert ray.nr_of_refractions == 1


class RayBundleTestCase(unittest.TestCase):
    def setUp(self):
        self.bundle = RayBundle.new_collimated(
            nanometer(1000.), Uniform(1.0), Hexapolar(1.0, 2))

    def test_collimated(self):
        b = self.bundle
        assert len(b) == 19
        assert b.total_energy() == approx(1.0)
        npt.assert_allclose(b.directions(), np.tile([0., 0., 1.], (19, 1)))
        npt.assert_allclose(b.centroid(), [0., 0., 0.], atol=1e-12)
        assert b.beam_radius_geo() == approx(1.0)
        assert b.central_wavelength() == approx(nanometer(1000.))

    def test_with_spectrum(self):
        lines = LaserLines([(nanometer(500.), 1.0), (nanometer(1000.), 3.0)])
        b = RayBundle.new_collimated_with_spectrum(lines, Uniform(2.0),
                                                   Grid(1., 1., 2, 2))
        assert len(b) == 8
        assert b.total_energy() == approx(2.0)
        assert b.wavelengths() == [nanometer(500.), nanometer(1000.)]
        spec = b.to_spectrum(nanometer(1.))
        assert spec.total_energy() == approx(2.0)
        assert spec.get_value(nanometer(1000.)) == approx(1.5)

    def test_point_source(self):
        b = RayBundle.new_hexapolar_point_source(radians(90.), 2,
                                                 nanometer(1000.), 1.0)
        assert len(b) == 19
        npt.assert_allclose(b.positions(), 0.)
        # the outer ring lies on the cone
        d = b.directions()
        assert np.max(np.arccos(d[:, 2])) == approx(radians(45.))
        with self.assertRaises(ConfigurationError):
            RayBundle.new_hexapolar_point_source(np.pi, 2, 1e-6, 1.0)

    def test_copy_and_ids(self):
        b = self.bundle
        c = b.copy()
        assert c.uuid == b.uuid
        c.rays[0].pos[0] = 5.
        assert b.rays[0].pos[0] == 0.
        d = b.copy(new_id=True)
        assert d.uuid != b.uuid

    def test_split(self):
        b = self.bundle
        rest = b.split(0.25)
        assert b.total_energy() == approx(0.25)
        assert rest.total_energy() == approx(0.75)
        assert rest.parent_id == b.uuid
        with self.assertRaises(ConfigurationError):
            b.split(1.5)

    def test_filters(self):
        b = self.bundle
        b.rays[0].energy = 1e-9
        b.invalidate_by_threshold_energy(1e-6)
        assert len(b) == 18
        b.rays[0].nr_of_bounces = 3
        b.filter_by_nr_of_bounces(2)
        assert len(b) == 17
        b.filter_energy(lambda wvl: 0.5)
        assert b.total_energy() == approx(0.5*17/19)
        with self.assertRaises(AnalysisError):
            b.filter_energy(lambda wvl: 1.5)

    def test_transforms(self):
        iso = Isometry.from_euler([1., 2., 3.], (0., 30., 0.))
        moved = self.bundle.transformed(iso)
        back = moved.inverse_transformed(iso)
        npt.assert_allclose(back.positions(), self.bundle.positions(),
                            atol=1e-12)
        npt.assert_allclose(moved.directions()[0], iso.z_axis, atol=1e-12)

    def test_ray_df(self):
        df = self.bundle.ray_df()
        assert len(df) == 19
        assert df['energy'].sum() == approx(1.0)

    def test_check_geometric(self):
        assert check_geometric(self.bundle) is self.bundle
        with self.assertRaises(DataError):
            check_geometric([1, 2, 3], 'test')


class SurfaceInteractionTestCase(unittest.TestCase):
    def setUp(self):
        self.bundle = RayBundle.new_collimated(
            nanometer(1000.), Uniform(1.0), Grid(0., 2., 1, 3))
        for r in self.bundle:
            r.pos[2] = -1.

    def surface(self, coating=None, aperture=None, profile=None, z=0.):
        port = Port(aperture=aperture, coating=coating)
        return OpticSurface('s', profile if profile is not None else Plane(),
                            Isometry.along_z(z), port)

    def test_fresnel_ghost(self):
        surf = self.surface(coating=Fresnel())
        refl = self.bundle.refract_on_surface(surf, glass_index, ghost=True,
                                              record=True)
        assert self.bundle.total_energy() == approx(0.96)
        assert refl.total_energy() == approx(0.04)
        assert refl.bounce == 1
        assert refl.parent_id == self.bundle.uuid
        npt.assert_allclose(refl.directions()[:, 2], -1.)
        assert all(r.refr_index == 1.5 for r in self.bundle)
        assert len(surf.hit_map) == 3
        assert surf.hit_map.total_energy() == approx(1.0)

    def test_no_ghost(self):
        surf = self.surface(coating=ConstantR(0.1))
        refl = self.bundle.refract_on_surface(surf, glass_index)
        assert refl is None
        assert self.bundle.total_energy() == approx(0.9)
        assert surf.hit_map.is_empty()

    def test_aperture_clips(self):
        surf = self.surface(aperture=Circular(radius=0.5))
        self.bundle.refract_on_surface(surf, glass_index, record=True)
        assert len(self.bundle) == 1
        assert self.bundle.total_energy() == approx(1/3)
        assert len(surf.hit_map) == 1

    def test_reflect(self):
        surf = self.surface(coating=ConstantR(0.8), z=2.)
        self.bundle.reflect_on_surface(surf)
        assert self.bundle.total_energy() == approx(0.8)
        npt.assert_allclose(self.bundle.positions()[:, 2], 2.)
        npt.assert_allclose(self.bundle.directions()[:, 2], -1.)
        assert all(r.nr_of_bounces == 1 for r in self.bundle)

    def test_paraxial_surface(self):
        surf = self.surface(profile=Paraxial(focal_length=4.))
        self.bundle.refract_on_surface(surf, glass_index)
        # the thin lens keeps the medium
        assert all(r.refr_index == 1.0 for r in self.bundle)
        self.bundle.propagate_along_z(4.)
        npt.assert_allclose(self.bundle.positions()[:, :2], 0., atol=1e-12)

    def test_bad_coating(self):
        surf = self.surface(coating=ConstantR(0.5))
        surf.port.coating.r = 2.0
        with self.assertRaises(AnalysisError):
            self.bundle.refract_on_surface(surf, glass_index)

    def test_diffract(self):
        surf = self.surface(coating=ConstantR(0.9))
        g = np.array([0., 1./micrometer(2.), 0.])
        self.bundle.diffract_on_surface(surf, g, 1, record=True)
        assert len(self.bundle) == 3
        assert self.bundle.total_energy() == approx(0.9)
        npt.assert_allclose(self.bundle.directions(),
                            np.tile([0., 0.5, -sqrt(0.75)], (3, 1)),
                            atol=1e-12)
        # one wavelength of extra path per ruling crossed
        npt.assert_allclose([r.path_length for r in self.bundle],
                            [0.5, 1.0, 1.5], atol=1e-12)
        assert all(r.nr_of_bounces == 1 for r in self.bundle)
        assert len(surf.hit_map) == 3

    def test_evanescent_order(self):
        surf = self.surface()
        g = np.array([0., 1./micrometer(2.), 0.])
        self.bundle.diffract_on_surface(surf, g, 3)
        assert self.bundle.is_empty()


class DiffractTestCase(unittest.TestCase):
    def setUp(self):
        self.normal = np.array([0., 0., 1.])
        self.g = np.array([1./micrometer(2.), 0., 0.])
        self.wvl = nanometer(1000.)

    def test_zero_order_is_reflection(self):
        d_in = np.array([0.3, 0., 1.])
        d_in /= np.linalg.norm(d_in)
        npt.assert_allclose(diffract(d_in, self.normal, self.g, 0, self.wvl),
                            reflect(d_in, self.normal), atol=1e-14)

    def test_grating_equation(self):
        d_in = np.array([0., 0., 1.])
        for order in (1, -1):
            d_out = diffract(d_in, self.normal, self.g, order, self.wvl)
            npt.assert_allclose(d_out, [order*0.5, 0., -sqrt(0.75)],
                                atol=1e-14)

    def test_littrow(self):
        order = -1
        sin_b = -order*self.wvl*self.g[0]/2
        d_in = np.array([sin_b, 0., sqrt(1 - sin_b*sin_b)])
        d_out = diffract(d_in, self.normal, self.g, order, self.wvl)
        npt.assert_allclose(d_out, -d_in, atol=1e-14)

    def test_evanescent(self):
        with self.assertRaises(TraceEvanescentRayError):
            diffract(np.array([0., 0., 1.]), self.normal, self.g, 3,
                     self.wvl)


if __name__ == '__main__':
    unittest.main(verbosity=2)
