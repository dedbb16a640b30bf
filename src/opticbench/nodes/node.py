#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2024 Michael J. Hayford
""" Base class for optical nodes

    An :class:`OpticNode` has an id, a :class:`~.properties.Properties` bag
    holding at least its `name`, `inverted` flag and `alignment`, and a set of
    input and output ports. Nodes whose light path is a sequence of surfaces
    list them in `surfaces`, ordered from the input side to the output side,
    with the refractive index of each space in `media`.

    The analysis engine calls :meth:`OpticNode.analyze` with the light
    arriving at the node's ports and the effective inversion of the node;
    the result maps the emitting ports to their light data. In a ghost focus
    run, light reflected back out of the ports it arrived on is also part of
    the result.

    Placement: in a ray trace, a node that has no fixed isometry is placed
    on the optical axis of the light arriving at it. The axis frame at the
    entry port becomes the node frame, turned around when the node is
    traversed inverted, and the node's alignment isometry is applied on top.

.. Created on Tue Mar 19 13:52:06 2024

.. codeauthor: Michael J. Hayford
"""
import logging
import uuid
from enum import Enum

from opticbench.elem.transform import Isometry, flip_about_y
from opticbench.light.lightdata import (LightResult, EnergyData, GeometricData,
                                        GhostFocusData, expect)
from .ports import OpticPorts
from .properties import Properties, instance_of

logger = logging.getLogger(__name__)


class NodeState(Enum):
    UNRESOLVED = 'unresolved'
    READY = 'ready'
    RESOLVED = 'resolved'


def _optional_isometry(value):
    if value is None:
        return None
    return instance_of(Isometry)(value)


def air_index(wvl):
    return 1.0


class OpticNode():
    """ Base class for optical nodes.

    Attributes:
        uuid: the node id, a uuid4 string
        props: the node's :class:`~.properties.Properties`
        ports: the node's :class:`~.ports.OpticPorts`
        isometry: node frame in the frame of the enclosing graph, or None
                  while unplaced
        fixed_isometry: True if the isometry was set by the user
        surfaces: list of :class:`~opticbench.elem.surface.OpticSurface`
        state: the :class:`NodeState` in the current analysis
    """
    default_name = 'node'

    def __init__(self, name=None, inputs=('input_1',), outputs=('output_1',)):
        self.uuid = str(uuid.uuid4())
        self.props = Properties()
        self.props.create('name', name if name is not None
                          else self.default_name, 'display name',
                          instance_of(str))
        self.props.create('inverted', False,
                          'swap the roles of input and output ports',
                          instance_of(bool))
        self.props.create('alignment', None,
                          'alignment isometry applied on top of the '
                          'placement', _optional_isometry)
        self.ports = OpticPorts(inputs, outputs)
        self.isometry = None
        self.fixed_isometry = False
        self.surfaces = []
        self.media = [air_index]
        self.state = NodeState.UNRESOLVED
        self._entry_axis = None

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r})"

    def __json_encode__(self):
        attrs = dict(vars(self))
        attrs['props'] = self.props.values_dict()
        if not self.fixed_isometry:
            attrs['isometry'] = None
        for a in self.transient_attrs():
            attrs.pop(a, None)
        return attrs

    def __json_decode__(self, **attrs):
        self.__init__()
        props = attrs.pop('props')
        for name, value in props.items():
            self.props.set(name, value)
        for a_key, a_val in attrs.items():
            setattr(self, a_key, a_val)

    def transient_attrs(self):
        """ attributes rebuilt from the properties, or analysis state """
        return ['surfaces', 'media', 'state', '_entry_axis']

    def sync_to_restore(self, root):
        self.state = NodeState.UNRESOLVED
        self._entry_axis = None
        self.update()

    def update(self):
        """ rebuild the surfaces and media from the properties """
        pass

    def listobj_str(self):
        o_str = f"{type(self).__name__}: {self.name}  ({self.uuid})\n"
        o_str += self.props.listobj_str()
        o_str += self.ports.listobj_str()
        return o_str

    @property
    def name(self):
        return self.props.get('name')

    @name.setter
    def name(self, value):
        self.props.set('name', value)

    @property
    def inverted(self):
        return self.props.get('inverted')

    @inverted.setter
    def inverted(self, value):
        self.props.set('inverted', value)

    @property
    def alignment(self):
        return self.props.get('alignment')

    @alignment.setter
    def alignment(self, iso):
        self.props.set('alignment', iso)

    def set_property(self, name, value):
        """ validated property update; the node is rebuilt afterwards """
        self.props.set(name, value)
        self.update()

    def get_property(self, name):
        return self.props.get(name)

    @property
    def length(self):
        """ axial distance from the input port plane to the output one """
        return 0.0

    def input_names(self, inverted=False):
        return self.ports.input_names(inverted)

    def output_names(self, inverted=False):
        return self.ports.output_names(inverted)

    def set_isometry(self, iso):
        """ fix the node frame; None returns it to automatic placement """
        self.isometry = iso
        self.fixed_isometry = iso is not None

    def reset(self):
        """ clear the results of a previous analysis """
        if not self.fixed_isometry:
            self.isometry = None
        self._entry_axis = None
        self.state = NodeState.UNRESOLVED
        for s in self.surfaces:
            s.reset_hit_map()

    def has_pending(self):
        return False

    # --- placement
    def place(self, axis, inverted):
        """ set the node isometry from the axis frame at the entry port

        A node that is already placed, either fixed or earlier in the same
        analysis, keeps its isometry.
        """
        if self.isometry is not None:
            if self._entry_axis is None:
                # fixed: the node frame is the forward entry frame
                self._entry_axis = (self.isometry, False)
            return
        if axis is None:
            axis = Isometry()
        if inverted:
            base = axis.append(Isometry.along_z(self.length))
            base = base.append(flip_about_y())
        else:
            base = axis
        self.isometry = (base if self.alignment is None
                         else base.append(self.alignment))
        self._entry_axis = (axis, inverted)

    def entry_axis(self, inverted):
        axis, placed_inv = self._entry_axis
        if inverted == placed_inv:
            return axis
        return (axis.append(Isometry.along_z(self.length))
                .append(flip_about_y()))

    def exit_axis(self, inverted):
        """ axis frame leaving the node when traversed with inversion """
        axis, placed_inv = self._entry_axis
        if inverted == placed_inv:
            return axis.append(Isometry.along_z(self.length))
        return axis.append(flip_about_y())

    def reflected_axis(self, inverted):
        """ axis frame of light sent back out of the entry port """
        return self.entry_axis(inverted).append(flip_about_y())

    # --- analysis
    def analyze(self, incoming, ctx, inverted=False):
        """ light leaving the node's ports for the `incoming` light

        Args:
            incoming: :class:`~opticbench.light.lightdata.LightResult` of the
                      light arriving at the node's ports
            ctx: the :class:`~opticbench.analysis.config.AnalysisContext`
            inverted: the effective inversion of the node

        Returns:
            :class:`~opticbench.light.lightdata.LightResult`
        """
        if incoming is None:
            incoming = LightResult()
        if ctx.is_energy:
            return self.analyze_energy(incoming, ctx, inverted)
        elif ctx.is_ray_trace:
            return self.analyze_raytrace(incoming, ctx, inverted)
        else:
            return self.analyze_ghostfocus(incoming, ctx, inverted)

    def port_pairs(self, inverted):
        return list(zip(self.input_names(inverted),
                        self.output_names(inverted)))

    def transfer_spectrum(self, spectrum, ctx):
        """ energy flow through the node; spectrum is a private copy """
        return spectrum

    def analyze_energy(self, incoming, ctx, inverted):
        result = LightResult()
        for in_port, out_port in self.port_pairs(inverted):
            data = incoming.get(in_port)
            if data is None:
                continue
            data = expect(data, EnergyData, in_port)
            spec = self.transfer_spectrum(data.spectrum.copy(), ctx)
            result[out_port] = EnergyData(spec)
        return result

    def trace(self, bundle, inverted, ghost=False):
        """ trace bundle, in the node frame, through the node's surfaces

        Returns:
            the transmitted bundle and the list of reflected bundles, which
            have travelled back through the surfaces in front of the
            reflecting one
        """
        surfs = self.surfaces[::-1] if inverted else self.surfaces
        media = self.media[::-1] if inverted else self.media
        reflected = []
        for i, s in enumerate(surfs):
            r = bundle.refract_on_surface(s, media[i+1], ghost=ghost,
                                          record=True)
            if r is not None and not r.is_empty():
                for j in range(i-1, -1, -1):
                    r.refract_on_surface(surfs[j], media[j], record=True)
                reflected.append(r)
        return bundle, reflected

    def analyze_raytrace(self, incoming, ctx, inverted):
        result = LightResult()
        for in_port, out_port in self.port_pairs(inverted):
            data = incoming.get(in_port)
            if data is None:
                continue
            geo = expect(data, GeometricData, in_port)
            self.place(geo.axis, inverted)
            bundle = geo.bundle.inverse_transformed(self.isometry)
            bundle, _ = self.trace(bundle, inverted)
            result[out_port] = GeometricData(
                bundle.transformed(self.isometry), self.exit_axis(inverted))
        return result

    def analyze_ghostfocus(self, incoming, ctx, inverted):
        result = LightResult()
        for in_port, out_port in self.port_pairs(inverted):
            data = incoming.get(in_port)
            if data is None:
                continue
            gfd = expect(data, GhostFocusData, in_port)
            self.place(gfd.axis, inverted)
            transmitted, reflected = [], []
            for b in gfd.bundles:
                b_loc = b.inverse_transformed(self.isometry)
                b_loc, refl = self.trace(b_loc, inverted, ghost=True)
                transmitted.append(b_loc.transformed(self.isometry))
                reflected += [r.transformed(self.isometry) for r in refl]
            result[out_port] = GhostFocusData(transmitted,
                                              self.exit_axis(inverted))
            if len(reflected) > 0:
                result[in_port] = GhostFocusData(
                    reflected, self.reflected_axis(inverted))
        return result

