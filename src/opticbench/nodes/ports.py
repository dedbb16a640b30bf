#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2024 Michael J. Hayford
""" Input and output ports of optical nodes

    A :class:`Port` is a named attachment point for one direction of light
    flow. It carries the aperture and the coating of the surface behind it.
    :class:`OpticPorts` is the port set of a node: the ports it has when it
    is not inverted, split into inputs and outputs. Inverting a node swaps
    the roles of the two sets; the ports themselves don't change.

.. Created on Mon Mar 18 14:21:50 2024

.. codeauthor: Michael J. Hayford
"""
from opticbench.error import ConfigurationError
from opticbench.elem.coating import Coating, IdealAR
from opticbench.elem.surface import Aperture


class Port():
    def __init__(self, aperture=None, coating=None):
        self.aperture = aperture
        self.coating = coating if coating is not None else IdealAR()

    def __repr__(self):
        return (f"{type(self).__name__}(aperture={self.aperture!r}, "
                f"coating={self.coating!r})")

    @property
    def aperture(self):
        return self._aperture

    @aperture.setter
    def aperture(self, ap):
        if ap is not None and not isinstance(ap, Aperture):
            raise ConfigurationError(f"not an aperture: {ap!r}")
        self._aperture = ap

    @property
    def coating(self):
        return self._coating

    @coating.setter
    def coating(self, c):
        if not isinstance(c, Coating):
            raise ConfigurationError(f"not a coating: {c!r}")
        self._coating = c

    def __json_encode__(self):
        return {'aperture': self.aperture, 'coating': self.coating}

    def __json_decode__(self, **attrs):
        self.aperture = attrs['aperture']
        self.coating = attrs['coating']

    def listobj_str(self):
        o_str = ""
        if self.aperture is not None:
            o_str += self.aperture.listobj_str()
        o_str += self.coating.listobj_str()
        return o_str


class OpticPorts():
    def __init__(self, inputs=(), outputs=()):
        self.inputs = {name: Port() for name in inputs}
        self.outputs = {name: Port() for name in outputs}

    def __repr__(self):
        return (f"{type(self).__name__}(inputs={list(self.inputs)}, "
                f"outputs={list(self.outputs)})")

    def __contains__(self, name):
        return name in self.inputs or name in self.outputs

    def names(self):
        return list(self.inputs) + list(self.outputs)

    def input_names(self, inverted=False):
        """ names of the ports receiving light """
        return list(self.outputs) if inverted else list(self.inputs)

    def output_names(self, inverted=False):
        """ names of the ports emitting light """
        return list(self.inputs) if inverted else list(self.outputs)

    def port(self, name):
        if name in self.inputs:
            return self.inputs[name]
        if name in self.outputs:
            return self.outputs[name]
        raise ConfigurationError(f"unknown port '{name}'")

    def set_aperture(self, name, aperture):
        self.port(name).aperture = aperture

    def set_coating(self, name, coating):
        self.port(name).coating = coating

    def __json_encode__(self):
        return {'inputs': self.inputs, 'outputs': self.outputs}

    def __json_decode__(self, **attrs):
        self.inputs = attrs['inputs']
        self.outputs = attrs['outputs']

    def listobj_str(self):
        o_str = ""
        for role, ports in (('input', self.inputs),
                            ('output', self.outputs)):
            for name, p in ports.items():
                o_str += f"{role} port {name}:\n"
                o_str += p.listobj_str()
        return o_str
