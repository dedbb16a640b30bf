#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2024 Michael J. Hayford
""" Light sources

    A :class:`Source` has a single output port and emits the light data it
    holds, an energy spectrum or a ray bundle given in the source frame.
    A source with a ray bundle can feed an energy flow analysis; its rays are
    converted into a spectrum. A source with a spectrum can't feed a ray
    trace.

    The helper functions create ray sources for common cases, all at 1000 nm
    and placed at the origin of the enclosing frame.

.. Created on Thu Mar 21 08:44:19 2024

.. codeauthor: Michael J. Hayford
"""
import logging

from opticbench.error import DataError
from opticbench.elem.transform import Isometry
from opticbench.light.lightdata import (LightData, LightResult, EnergyData,
                                        GeometricData, GhostFocusData)
from opticbench.raytr.energydist import Uniform
from opticbench.raytr.rays import RayBundle
from opticbench.raytr.sampler import Hexapolar, Grid
from opticbench.util.units import Length, Energy, Angle, nanometer
from .node import OpticNode
from .properties import instance_of

logger = logging.getLogger(__name__)

DEFAULT_WVL = nanometer(1000.)


def _light_data(value):
    if value is None:
        return None
    return instance_of(LightData)(value)


class Source(OpticNode):
    default_name = 'source'

    def __init__(self, name=None, light_data=None):
        super().__init__(name, inputs=(), outputs=('output_1',))
        self.props.create('light_data', light_data, 'emitted light',
                          _light_data)

    @property
    def light_data(self):
        return self.props.get('light_data')

    @light_data.setter
    def light_data(self, data):
        self.props.set('light_data', data)

    def listobj_str(self):
        o_str = super().listobj_str()
        if self.light_data is not None:
            o_str += self.light_data.listobj_str()
        return o_str

    def analyze(self, incoming, ctx, inverted=False):
        if inverted:
            # light can only arrive at the output port; it is absorbed
            return LightResult()
        out_port = self.output_names()[0]
        data = self.light_data
        result = LightResult()
        if data is None:
            ctx.logger.warning(f"source '{self.name}' has no light data")
            return result
        if ctx.is_energy:
            if isinstance(data, EnergyData):
                result[out_port] = EnergyData(data.spectrum.copy())
            elif isinstance(data, GeometricData):
                spec = data.bundle.to_spectrum(ctx.config.spectrum_resolution)
                if spec is not None:
                    result[out_port] = EnergyData(spec)
            else:
                raise DataError(f"cannot emit {type(data).__name__} in an "
                                "energy flow analysis")
            return result

        if not isinstance(data, GeometricData):
            raise DataError(f"source '{self.name}' needs a ray bundle for a "
                            f"{ctx.mode.value} analysis")
        if ctx.is_ghost_focus and ctx.bounce > 0:
            return result
        self.place(None, False)
        bundle = data.bundle.copy(new_id=True).transformed(self.isometry)
        axis = self.exit_axis(False)
        if ctx.is_ray_trace:
            result[out_port] = GeometricData(bundle, axis)
        else:
            result[out_port] = GhostFocusData([bundle], axis)
        return result


def _ray_source(name, bundle):
    src = Source(name, GeometricData(bundle))
    src.set_isometry(Isometry())
    return src


def round_collimated_ray_source(radius: Length, energy: Energy,
                                nr_of_rings: int) -> Source:
    """ hexapolar bundle of collimated rays """
    bundle = RayBundle.new_collimated(DEFAULT_WVL, Uniform(energy),
                                      Hexapolar(radius, nr_of_rings))
    return _ray_source('collimated ray source', bundle)


def collimated_line_ray_source(size_y: Length, energy: Energy,
                               nr_of_points_y: int) -> Source:
    """ collimated rays evenly spaced along y, centered on the axis """
    bundle = RayBundle.new_collimated(DEFAULT_WVL, Uniform(energy),
                                      Grid(0., size_y, 1, nr_of_points_y))
    return _ray_source('collimated line ray source', bundle)


def point_ray_source(cone_angle: Angle, energy: Energy) -> Source:
    """ rays from the origin filling a cone of full angle cone_angle

    A cone angle of 0 gives all rays along the optical axis.
    """
    bundle = RayBundle.new_hexapolar_point_source(cone_angle, 3, DEFAULT_WVL,
                                                  energy)
    return _ray_source('point ray source', bundle)
