#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2024 Michael J. Hayford
""" Light data exchanged between nodes during an analysis

    Each port of a node emits exactly one kind of light data:

        - :class:`EnergyData`: an energy :class:`~.spectrum.Spectrum`
        - :class:`GeometricData`: a :class:`~opticbench.raytr.rays.RayBundle`
          plus the frame of the optical axis it travels along
        - :class:`GhostFocusData`: a list of ray bundles, one per ray
          generation reaching the port

    A :class:`LightResult` maps port names to light data.

.. Created on Fri Mar 15 14:10:26 2024

.. codeauthor: Michael J. Hayford
"""
from opticbench.error import DataError


class LightData:
    """ Base class for the light data variants. """

    def listobj_str(self):
        return f"{type(self).__name__}\n"

    def total_energy(self):
        pass


class EnergyData(LightData):
    def __init__(self, spectrum):
        self.spectrum = spectrum

    def __repr__(self):
        return f"{type(self).__name__}({self.spectrum!r})"

    def total_energy(self):
        return self.spectrum.total_energy()


class GeometricData(LightData):
    """ a ray bundle and its optical axis frame

    `axis` is an :class:`~opticbench.elem.transform.Isometry` whose origin
    sits on the optical axis at the port and whose z axis points along it.
    It is used to place downstream nodes; it may be None.
    """
    def __init__(self, bundle, axis=None):
        self.bundle = bundle
        self.axis = axis

    def __repr__(self):
        return f"{type(self).__name__}({self.bundle!r})"

    def total_energy(self):
        return self.bundle.total_energy()


class GhostFocusData(LightData):
    def __init__(self, bundles, axis=None):
        self.bundles = list(bundles)
        self.axis = axis

    def __repr__(self):
        return f"{type(self).__name__}({len(self.bundles)} bundles)"

    def total_energy(self):
        return sum(b.total_energy() for b in self.bundles)

    def merge(self, other: 'GhostFocusData'):
        self.bundles.extend(other.bundles)
        if self.axis is None:
            self.axis = other.axis


class LightResult(dict):
    """ port name -> :class:`LightData` """

    def __setitem__(self, port_name, light_data):
        if not isinstance(light_data, LightData):
            raise DataError(f"port '{port_name}': expected LightData, got "
                            f"{type(light_data).__name__}")
        super().__setitem__(port_name, light_data)

    def listobj_str(self):
        o_str = ""
        for port, data in self.items():
            o_str += f"{port}: {data!r}\n"
        return o_str


def expect(light_data, data_type, port_name=''):
    """ return light_data if it is a data_type, else raise DataError """
    if not isinstance(light_data, data_type):
        raise DataError(f"port '{port_name}': expected "
                        f"{data_type.__name__}, got "
                        f"{type(light_data).__name__}")
    return light_data
