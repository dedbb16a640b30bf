#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on Thu Apr  4 09:31:55 2024

@author: Mike
"""


import unittest
from pytest import approx
import numpy as np
import numpy.testing as npt

from opticbench.error import ConfigurationError
from opticbench.raytr import sampler
from opticbench.raytr.energydist import Uniform, General2DGaussian
from opticbench.raytr.spectraldist import LaserLines, Gaussian


class SamplerTestCase(unittest.TestCase):
    def test_hexapolar(self):
        hexp = sampler.Hexapolar(1.0, 3)
        pts = hexp.generate()
        assert hexp.nr_of_points() == 37
        assert pts.shape == (37, 3)
        npt.assert_allclose(pts[0], [0., 0., 0.])
        r = np.hypot(pts[:, 0], pts[:, 1])
        assert r.max() == approx(1.0)
        assert sampler.Hexapolar(1.0, 0).generate().shape == (1, 3)

    def test_grid(self):
        pts = sampler.Grid(2.0, 4.0, 3, 5).generate()
        assert len(pts) == 15
        assert pts[:, 0].min() == approx(-1.0)
        assert pts[:, 1].max() == approx(2.0)

        # single column on the y axis
        pts = sampler.Grid(0.0, 2.0, 1, 3).generate()
        npt.assert_allclose(pts[:, :2], [[0., -1.], [0., 0.], [0., 1.]])

    def test_area_distributions(self):
        for dist in (sampler.Sobol(2., 1., 100),
                     sampler.Random(2., 1., 100, seed=7),
                     sampler.FibonacciRectangle(2., 1., 100)):
            pts = dist.generate()
            assert len(pts) == dist.nr_of_points() == 100
            assert np.all(np.abs(pts[:, 0]) <= 1.0)
            assert np.all(np.abs(pts[:, 1]) <= 0.5)

    def test_fibonacci_ellipse(self):
        pts = sampler.FibonacciEllipse(2., 1., 200).generate()
        assert len(pts) == 200
        rho = (pts[:, 0]/2.)**2 + pts[:, 1]**2
        assert np.all(rho <= 1.0 + 1e-12)

    def test_random_seed(self):
        p1 = sampler.Random(1., 1., 10, seed=3).generate()
        p2 = sampler.Random(1., 1., 10, seed=3).generate()
        npt.assert_array_equal(p1, p2)

    def test_invalid(self):
        with self.assertRaises(ConfigurationError):
            sampler.Hexapolar(-1.0, 3)
        with self.assertRaises(ConfigurationError):
            sampler.Grid(1.0, 1.0, 0, 3)
        with self.assertRaises(ConfigurationError):
            sampler.Sobol(1.0, 1.0, 2.5)


class DistributionTestCase(unittest.TestCase):
    def setUp(self):
        self.pts = sampler.Hexapolar(1.0, 5).generate()

    def test_uniform(self):
        e = Uniform(3.0).apply(self.pts)
        assert np.sum(e) == approx(3.0)
        assert np.ptp(e) == approx(0.0)

    def test_gaussian(self):
        e = General2DGaussian(1.0, sigma_xy=(0.5, 0.5)).apply(self.pts)
        assert np.sum(e) == approx(1.0)
        assert np.argmax(e) == 0

        shifted = General2DGaussian(1.0, mu_xy=(1.0, 0.), sigma_xy=(0.2, 0.2))
        e = shifted.apply(self.pts)
        npt.assert_allclose(self.pts[np.argmax(e), :2], [1., 0.], atol=1e-12)

    def test_spectral(self):
        lines = LaserLines([(1e-6, 3.0), (5e-7, 1.0)]).generate()
        assert lines[0] == approx((1e-6, 0.75))
        g = Gaussian((5e-7, 6e-7), 11, 5.5e-7, 2e-8).generate()
        assert len(g) == 11
        assert sum(w for _, w in g) == approx(1.0)
        assert max(g, key=lambda wl: wl[1])[0] == approx(5.5e-7)
        with self.assertRaises(ConfigurationError):
            LaserLines([])


if __name__ == '__main__':
    unittest.main(verbosity=2)
