#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2024 Michael J. Hayford
""" Binned energy (or transmission) spectra

    A :class:`Spectrum` holds values on a grid of wavelength bin centers.
    For an energy spectrum the value of a bin is the energy contained in
    that bin, so :meth:`Spectrum.total_energy` is a plain sum. A
    transmission spectrum holds values in [0, 1] and is used by filters.

    Wavelengths are in meters.

.. Created on Fri Mar 15 09:34:51 2024

.. codeauthor: Michael J. Hayford
"""
import copy
import logging
from enum import Enum
from pathlib import Path

import numpy as np
import pandas as pd

from opticbench.error import ConfigurationError, DataError
from opticbench.util.misc_math import is_finite_number
from opticbench.util.units import (Length, Energy, nanometer, check_positive,
                                   check_non_negative)

logger = logging.getLogger(__name__)


class Spectrum:
    def __init__(self, wvl_range, resolution: Length):
        """ create a zero spectrum with bins every resolution in wvl_range

        Args:
            wvl_range: (start, stop) wavelengths, stop is excluded
            resolution: bin spacing
        """
        start, stop = wvl_range
        check_positive(start, 'wavelength range start')
        check_positive(resolution, 'spectrum resolution')
        if not is_finite_number(stop) or stop <= start:
            raise ConfigurationError(f"invalid wavelength range {wvl_range}")
        n = int(np.floor((stop - start)/resolution + 1e-6))
        if n < 2:
            raise ConfigurationError("wavelength range holds less than 2 "
                                     "bins at this resolution")
        self.lambdas = start + resolution*np.arange(n)
        self.data = np.zeros(n)

    @classmethod
    def from_arrays(cls, lambdas, data):
        lambdas = np.asarray(lambdas, dtype=float)
        data = np.asarray(data, dtype=float)
        if lambdas.ndim != 1 or lambdas.shape != data.shape or \
                len(lambdas) < 2:
            raise ConfigurationError("spectrum needs matching 1d arrays with "
                                     "at least 2 entries")
        if np.any(np.diff(lambdas) <= 0.) or lambdas[0] <= 0.:
            raise ConfigurationError("spectrum wavelengths must be positive "
                                     "and increasing")
        if not np.all(np.isfinite(data)):
            raise ConfigurationError("spectrum data must be finite")
        spec = cls.__new__(cls)
        spec.lambdas = lambdas
        spec.data = data
        return spec

    @classmethod
    def from_csv(cls, file_name):
        """ read a transmission spectrum from a 2 column csv file

        The columns, separated by semicolons and without a header, are the
        wavelength in nm and the transmission in percent.
        """
        path = Path(file_name)
        if not path.exists():
            raise ConfigurationError(f"spectrum file {path} not found")
        try:
            df = pd.read_csv(path, sep=';', header=None)
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as err:
            raise ConfigurationError(
                f"cannot parse spectrum file {path}: {err}") from err
        return cls.from_arrays(df.iloc[:, 0].to_numpy(dtype=float)*1e-9,
                               df.iloc[:, 1].to_numpy(dtype=float)*0.01)

    @classmethod
    def from_laser_lines(cls, lines, resolution: Length):
        """ spectrum of (wavelength, energy) lines

        The range spans the lines with 5 bins of margin on either side.
        """
        if len(lines) == 0:
            raise ConfigurationError("no laser lines provided")
        wvls = [check_positive(w, 'laser line wavelength') for w, e in lines]
        for w, e in lines:
            check_non_negative(e, 'laser line energy')
        start = max(min(wvls) - 5*resolution, resolution)
        spec = cls((start, max(wvls) + 6*resolution), resolution)
        for w, e in lines:
            spec.add_single_peak(w, e)
        return spec

    def __repr__(self):
        return (f"{type(self).__name__}(range=({self.lambdas[0]:.6g}, "
                f"{self.lambdas[-1]:.6g}), bins={len(self.lambdas)}, "
                f"total={self.total_energy():.6g})")

    def listobj_str(self):
        o_str = f"spectrum: {len(self.lambdas)} bins "
        o_str += f"{self.lambdas[0]*1e9:.2f}-{self.lambdas[-1]*1e9:.2f} nm\n"
        o_str += f"total={self.total_energy():.6g}\n"
        return o_str

    def copy(self):
        return copy.deepcopy(self)

    def range(self):
        return self.lambdas[0], self.lambdas[-1]

    def average_resolution(self) -> Length:
        return float(np.mean(np.diff(self.lambdas)))

    def edges(self):
        """ bin edges, midway between the centers """
        mid = 0.5*(self.lambdas[1:] + self.lambdas[:-1])
        first = self.lambdas[0] - (mid[0] - self.lambdas[0])
        last = self.lambdas[-1] + (self.lambdas[-1] - mid[-1])
        return np.concatenate(([first], mid, [last]))

    def is_transmission_spectrum(self):
        return bool(np.all((self.data >= 0.) & (self.data <= 1.)))

    def total_energy(self) -> Energy:
        return float(np.sum(self.data))

    def center_wavelength(self) -> Length:
        """ energy weighted mean wavelength """
        total = self.total_energy()
        if total == 0.:
            raise DataError("center wavelength of an empty spectrum")
        return float(np.dot(self.lambdas, self.data)/total)

    def get_value(self, wvl: Length):
        """ value of the bin containing wvl, None if outside the range """
        edges = self.edges()
        if wvl < edges[0] or wvl >= edges[-1]:
            return None
        idx = np.searchsorted(edges, wvl, side='right') - 1
        return float(self.data[idx])

    def add_single_peak(self, wvl: Length, value: float):
        """ add value at wvl, shared linearly between the 2 nearest bins """
        check_non_negative(value, 'peak value')
        if not self.lambdas[0] <= wvl <= self.lambdas[-1]:
            raise DataError(f"wavelength {wvl} outside the spectrum range")
        i1 = int(np.searchsorted(self.lambdas, wvl))
        if i1 == 0 or self.lambdas[i1] == wvl:
            self.data[i1] += value
            return
        i0 = i1 - 1
        frac = (wvl - self.lambdas[i0])/(self.lambdas[i1] - self.lambdas[i0])
        self.data[i0] += value*(1. - frac)
        self.data[i1] += value*frac

    def add_lorentzian_peak(self, center: Length, width: Length,
                            energy: Energy):
        """ add a Lorentzian line of FWHM width holding energy on the grid """
        check_positive(center, 'peak center')
        check_positive(width, 'peak width')
        check_non_negative(energy, 'peak energy')
        hw_sqr = (width/2)**2
        line = hw_sqr/((self.lambdas - center)**2 + hw_sqr)
        self.data += energy*line/np.sum(line)

    def scale_vertical(self, factor: float):
        check_non_negative(factor, 'scale factor')
        self.data = self.data*factor

    def resampled(self, lambdas):
        """ data rebinned onto bin centers lambdas, conserving energy """
        target = Spectrum.from_arrays(lambdas, np.zeros(len(lambdas)))
        cum = np.concatenate(([0.], np.cumsum(self.data)))
        cum_new = np.interp(target.edges(), self.edges(), cum)
        return np.diff(cum_new)

    def resample(self, spectrum: 'Spectrum'):
        """ rebin onto the grid of spectrum, conserving the energy inside """
        self.data = self.resampled(spectrum.lambdas)
        self.lambdas = spectrum.lambdas.copy()

    def transmission_at(self, lambdas):
        """ this spectrum's values interpolated at lambdas, 0 outside """
        return np.interp(lambdas, self.lambdas, self.data, left=0., right=0.)

    def filter(self, filter_spectrum: 'Spectrum'):
        """ multiply by the transmission of filter_spectrum """
        self.data = self.data*filter_spectrum.transmission_at(self.lambdas)

    def split_by_spectrum(self, filter_spectrum: 'Spectrum') -> 'Spectrum':
        """ keep the transmitted part, return the rejected remainder """
        t = filter_spectrum.transmission_at(self.lambdas)
        rejected = self.copy()
        rejected.data = self.data*(1. - t)
        self.data = self.data*t
        return rejected

    def add(self, spectrum: 'Spectrum'):
        self.data = self.data + spectrum.resampled(self.lambdas)

    def sub(self, spectrum: 'Spectrum'):
        self.data = np.clip(self.data - spectrum.resampled(self.lambdas),
                            0., None)

    def df(self):
        return pd.DataFrame({'wavelength': self.lambdas, 'value': self.data})


def merge_spectra(s1, s2):
    """ sum of two optional spectra on a grid covering both """
    if s1 is None:
        return None if s2 is None else s2.copy()
    if s2 is None:
        return s1.copy()
    start = min(s1.lambdas[0], s2.lambdas[0])
    stop = max(s1.lambdas[-1], s2.lambdas[-1])
    res = min(s1.average_resolution(), s2.average_resolution())
    merged = Spectrum((start, stop + res), res)
    merged.add(s1)
    merged.add(s2)
    return merged


def create_he_ne_spec(energy: Energy) -> Spectrum:
    spec = Spectrum((nanometer(620.), nanometer(645.)), nanometer(0.1))
    spec.add_single_peak(nanometer(632.816), energy)
    return spec


def create_nd_glass_spec(energy: Energy) -> Spectrum:
    spec = Spectrum((nanometer(1040.), nanometer(1070.)), nanometer(0.1))
    spec.add_single_peak(nanometer(1054.), energy)
    return spec


def create_visible_spec() -> Spectrum:
    return Spectrum((nanometer(380.), nanometer(750.)), nanometer(0.1))


def create_nir_spec() -> Spectrum:
    return Spectrum((nanometer(800.), nanometer(2500.)), nanometer(0.1))


class FilterType(Enum):
    SHORT_PASS = 'short_pass'
    LONG_PASS = 'long_pass'


def generate_filter_spectrum(wvl_range, resolution: Length,
                             filter_type: FilterType, cut_off: Length,
                             width: Length = 0.0) -> Spectrum:
    """ transmission spectrum of an ideal edge filter

    With width 0 the edge is a step at cut_off, otherwise a logistic edge
    of the given 10-90% width.
    """
    spec = Spectrum(wvl_range, resolution)
    if not wvl_range[0] <= cut_off < wvl_range[1]:
        raise ConfigurationError("cut-off wavelength must be inside the "
                                 "spectrum range")
    if width > 0.:
        # 10-90% rise of the logistic function spans 2*ln(9)/k
        k = 2*np.log(9.)/width
        t = 1./(1. + np.exp(-k*(spec.lambdas - cut_off)))
    else:
        t = (spec.lambdas > cut_off).astype(float)
    spec.data = t if FilterType(filter_type) is FilterType.LONG_PASS else 1. - t
    return spec


def create_short_pass_filter(wvl_range, resolution, cut_off) -> Spectrum:
    return generate_filter_spectrum(wvl_range, resolution,
                                    FilterType.SHORT_PASS, cut_off)


def create_long_pass_filter(wvl_range, resolution, cut_off) -> Spectrum:
    return generate_filter_spectrum(wvl_range, resolution,
                                    FilterType.LONG_PASS, cut_off)
