#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on Wed Apr  3 13:20:48 2024

@author: Mike
"""


import unittest
from pytest import approx
import numpy as np
import numpy.testing as npt

from opticbench.elem import fluence as flu
from opticbench.error import DataError
from opticbench.raytr.energydist import General2DGaussian
from opticbench.raytr.sampler import Hexapolar


class FluenceTestCase(unittest.TestCase):
    def setUp(self):
        pts = Hexapolar(1.0, 10).generate()
        self.positions = pts[:, :2]
        self.weights = General2DGaussian(2.0, sigma_xy=(0.3, 0.3)).apply(pts)

    def test_binning_conserves_energy(self):
        fd = flu.binning(self.positions, self.weights, (16, 12))
        assert fd.fluence.shape == (12, 16)
        assert fd.total_energy() == approx(2.0)
        assert fd.peak() >= fd.average() > 0.

    def test_binning_cells(self):
        positions = np.array([[0., 0.], [1., 1.]])
        fd = flu.binning(positions, [1., 2.], (2, 2))
        npt.assert_allclose(fd.x, [0.25, 0.75])
        assert fd.cell_area == approx(0.25)
        npt.assert_allclose(fd.fluence, [[4., 0.], [0., 8.]])

    def test_estimators_agree(self):
        kde = flu.calc_fluence(self.positions, self.weights, (64, 64),
                               flu.FluenceEstimator.KDE)
        vor = flu.calc_fluence(self.positions, self.weights, (64, 64),
                               flu.FluenceEstimator.VORONOI)
        assert kde.estimator is flu.FluenceEstimator.KDE
        assert kde.total_energy() == approx(2.0, rel=0.1)
        assert vor.total_energy() == approx(2.0, rel=0.1)

    def test_peak_near_center(self):
        fd = flu.kde(self.positions, self.weights, (33, 33))
        j, i = np.unravel_index(np.argmax(fd.fluence), fd.fluence.shape)
        assert abs(fd.x[i]) < 0.1
        assert abs(fd.y[j]) < 0.1

    def test_voronoi_areas(self):
        g = np.array([[x, y] for x in range(4) for y in range(4)], dtype=float)
        areas = flu.voronoi_cell_areas(g)
        # interior points of a unit grid own unit cells
        assert areas[5] == approx(1.0)
        assert areas[10] == approx(1.0)

    def test_merge_duplicates(self):
        pts, w = flu.merge_duplicates(np.array([[0., 0.], [1., 0.],
                                                [0., 0.]]),
                                      np.array([1., 2., 3.]))
        assert len(pts) == 2
        assert np.sum(w) == approx(6.)
        assert w[0] == approx(4.)

    def test_errors(self):
        with self.assertRaises(DataError):
            flu.binning(np.zeros((0, 2)), [], (4, 4))
        with self.assertRaises(DataError):
            flu.voronoi(np.array([[0., 0.], [1., 1.]]), [1., 1.], (4, 4))
        with self.assertRaises(DataError):
            flu.calc_fluence(self.positions, self.weights, (4, 4), 'magic')

    def test_df(self):
        fd = flu.binning(self.positions, self.weights, (8, 4))
        assert fd.df().shape == (4, 8)


if __name__ == '__main__':
    unittest.main(verbosity=2)
