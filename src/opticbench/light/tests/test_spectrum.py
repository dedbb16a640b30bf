#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on Fri Apr  5 10:44:19 2024

@author: Mike
"""


import tempfile
import unittest
from pathlib import Path
from pytest import approx
import numpy as np
import numpy.testing as npt

from opticbench.error import ConfigurationError, DataError
from opticbench.light import spectrum as spc
from opticbench.light.lightdata import (LightResult, EnergyData,
                                        GhostFocusData, expect)
from opticbench.util.units import nanometer


class SpectrumTestCase(unittest.TestCase):
    def setUp(self):
        self.spec = spc.Spectrum((nanometer(500.), nanometer(600.)),
                                 nanometer(1.))

    def test_grid(self):
        assert len(self.spec.lambdas) == 100
        assert self.spec.lambdas[0] == approx(nanometer(500.))
        assert self.spec.average_resolution() == approx(nanometer(1.))
        assert self.spec.total_energy() == 0.
        with self.assertRaises(ConfigurationError):
            spc.Spectrum((nanometer(600.), nanometer(500.)), nanometer(1.))
        with self.assertRaises(ConfigurationError):
            spc.Spectrum((nanometer(500.), nanometer(600.)), 0.)

    def test_single_peak(self):
        self.spec.add_single_peak(nanometer(550.5), 2.0)
        assert self.spec.total_energy() == approx(2.0)
        assert self.spec.center_wavelength() == approx(nanometer(550.5))
        assert self.spec.get_value(nanometer(550.)) == approx(1.0)
        assert self.spec.get_value(nanometer(700.)) is None
        with self.assertRaises(DataError):
            self.spec.add_single_peak(nanometer(700.), 1.0)
        with self.assertRaises(ConfigurationError):
            self.spec.add_single_peak(nanometer(550.), -1.0)

    def test_lorentzian(self):
        self.spec.add_lorentzian_peak(nanometer(550.), nanometer(5.), 3.0)
        assert self.spec.total_energy() == approx(3.0)
        assert self.spec.lambdas[np.argmax(self.spec.data)] == \
            approx(nanometer(550.))

    def test_scale_and_filter(self):
        self.spec.data[:] = 1.0
        self.spec.scale_vertical(0.5)
        assert self.spec.total_energy() == approx(50.)

        lp = spc.create_long_pass_filter((nanometer(500.), nanometer(600.)),
                                         nanometer(1.), nanometer(549.5))
        assert lp.is_transmission_spectrum()
        rejected = self.spec.split_by_spectrum(lp)
        assert self.spec.total_energy() == approx(25.)
        assert rejected.total_energy() == approx(25.)

        sp = spc.create_short_pass_filter((nanometer(500.), nanometer(600.)),
                                          nanometer(1.), nanometer(549.5))
        self.spec.filter(sp)
        assert self.spec.total_energy() == approx(0.)

    def test_soft_edge_filter(self):
        f = spc.generate_filter_spectrum((nanometer(500.), nanometer(600.)),
                                         nanometer(1.),
                                         spc.FilterType.LONG_PASS,
                                         nanometer(550.), nanometer(10.))
        assert f.get_value(nanometer(550.)) == approx(0.5)
        assert f.get_value(nanometer(555.)) == approx(0.9, abs=1e-3)
        assert f.get_value(nanometer(545.)) == approx(0.1, abs=1e-3)

    def test_resample_conserves_energy(self):
        self.spec.add_single_peak(nanometer(520.), 1.0)
        self.spec.add_single_peak(nanometer(580.25), 2.0)
        coarse = spc.Spectrum((nanometer(490.), nanometer(610.)),
                              nanometer(5.))
        coarse.add(self.spec)
        assert coarse.total_energy() == approx(3.0)
        self.spec.resample(coarse)
        assert self.spec.total_energy() == approx(3.0)
        assert len(self.spec.lambdas) == len(coarse.lambdas)

    def test_merge(self):
        he_ne = spc.create_he_ne_spec(1.0)
        nd = spc.create_nd_glass_spec(2.0)
        merged = spc.merge_spectra(he_ne, nd)
        assert merged.total_energy() == approx(3.0)
        assert spc.merge_spectra(None, None) is None
        single = spc.merge_spectra(None, he_ne)
        assert single is not he_ne
        assert single.total_energy() == approx(1.0)

    def test_laser_lines(self):
        spec = spc.Spectrum.from_laser_lines(
            [(nanometer(1064.), 1.0), (nanometer(532.), 0.5)], nanometer(1.))
        assert spec.total_energy() == approx(1.5)
        assert spec.range()[0] < nanometer(532.) < nanometer(1064.) < \
            spec.range()[1]
        with self.assertRaises(ConfigurationError):
            spc.Spectrum.from_laser_lines([], nanometer(1.))

    def test_from_arrays(self):
        with self.assertRaises(ConfigurationError):
            spc.Spectrum.from_arrays([2., 1.], [0., 0.])
        with self.assertRaises(ConfigurationError):
            spc.Spectrum.from_arrays([1., 2.], [0., np.nan])

    def test_from_csv(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'filter.csv'
            path.write_text("500;10\n550;50\n600;90\n")
            spec = spc.Spectrum.from_csv(path)
            npt.assert_allclose(spec.lambdas, [5e-7, 5.5e-7, 6e-7])
            npt.assert_allclose(spec.data, [0.1, 0.5, 0.9])
            assert spec.is_transmission_spectrum()
            with self.assertRaises(ConfigurationError):
                spc.Spectrum.from_csv(Path(tmp) / 'missing.csv')

    def test_df(self):
        df = self.spec.df()
        assert list(df.columns) == ['wavelength', 'value']


class LightDataTestCase(unittest.TestCase):
    def test_light_result(self):
        result = LightResult()
        result['output_1'] = EnergyData(spc.create_he_ne_spec(1.0))
        assert result['output_1'].total_energy() == approx(1.0)
        with self.assertRaises(DataError):
            result['output_1'] = 1.0

    def test_expect(self):
        data = GhostFocusData([])
        assert expect(data, GhostFocusData) is data
        with self.assertRaises(DataError):
            expect(data, EnergyData, 'input_1')


if __name__ == '__main__':
    unittest.main(verbosity=2)
