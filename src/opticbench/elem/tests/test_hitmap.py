#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on Wed Apr  3 16:02:37 2024

@author: Mike
"""


import unittest
from pytest import approx
import numpy as np
import numpy.testing as npt

from opticbench.elem.fluence import FluenceEstimator
from opticbench.elem.hitmap import HitMap, EnergyHitPoint, FluenceHitPoint
from opticbench.error import DataError


class HitMapTestCase(unittest.TestCase):
    def setUp(self):
        self.hm = HitMap()
        self.hm.add_hit_point(EnergyHitPoint([0., 0.], 1.0), 0, 'a')
        self.hm.add_hit_point(EnergyHitPoint([1., 0.], 2.0), 0, 'a')
        self.hm.add_hit_point(EnergyHitPoint([0., 1.], 0.5), 0, 'b')
        self.hm.add_hit_point(EnergyHitPoint([1., 1.], 0.25), 1, 'c')

    def test_bookkeeping(self):
        assert len(self.hm) == 4
        assert self.hm.bounces() == [0, 1]
        assert self.hm.total_energy() == approx(3.75)
        assert self.hm.total_energy(bounce=1) == approx(0.25)

        pos, w = self.hm.hit_points(bounce=0, bundle_id='a')
        npt.assert_allclose(pos, [[0., 0.], [1., 0.]])
        npt.assert_allclose(w, [1., 2.])

        pos, w = self.hm.hit_points(bounce=2)
        assert pos.shape == (0, 2)

    def test_reset(self):
        self.hm.reset()
        assert self.hm.is_empty()
        # a reset map takes either kind of point
        self.hm.add_hit_point(FluenceHitPoint([0., 0.], 3.0))
        assert len(self.hm) == 1

    def test_mixed_points_rejected(self):
        with self.assertRaises(DataError):
            self.hm.add_hit_point(FluenceHitPoint([0., 0.], 1.0))
        assert len(self.hm) == 4

    def test_non_finite_rejected(self):
        with self.assertRaises(DataError):
            self.hm.add_hit_point(EnergyHitPoint([np.nan, 0.], 1.0))
        with self.assertRaises(DataError):
            self.hm.add_hit_point(EnergyHitPoint([0., 0.], np.inf))

    def test_fluence_map(self):
        fd = self.hm.calc_fluence_map((2, 2), FluenceEstimator.BINNING,
                                      bounce=0)
        assert fd.total_energy() == approx(3.5)
        with self.assertRaises(DataError):
            HitMap().calc_fluence_map((2, 2), FluenceEstimator.BINNING)

    def test_fluence_points(self):
        hm = HitMap()
        for p in ([0., 0.], [1., 0.], [0., 1.], [1., 1.]):
            hm.add_hit_point(FluenceHitPoint(p, 2.0))
        with self.assertRaises(DataError):
            hm.total_energy()
        fd = hm.calc_fluence_map((4, 4), FluenceEstimator.KDE)
        npt.assert_allclose(fd.fluence, 2.0)

    def test_hit_df(self):
        df = self.hm.hit_df()
        assert list(df.columns) == ['bounce', 'bundle_id', 'x', 'y',
                                    'weight']
        assert len(df) == 4
        assert df['weight'].sum() == approx(3.75)


if __name__ == '__main__':
    unittest.main(verbosity=2)
