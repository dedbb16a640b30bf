#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2024 Michael J. Hayford
""" Optical elements with a single input and a single output port

    Each element lays out its surfaces in the node frame, the first one at
    z = 0 on the input side. Elements with a bulk medium take a medium
    description understood by :func:`~opticbench.elem.medium.decode_medium`.

    Energy flow through lenses, mirrors, gratings and wedges is lossless;
    only filters (and beam splitters) change the spectrum. Mirrors and
    gratings fold the optical axis.

.. Created on Wed Mar 20 10:31:44 2024

.. codeauthor: Michael J. Hayford
"""
import logging
from math import asin

import numpy as np

from opticbench.error import ConfigurationError, PropertyError
from opticbench.elem.coating import ConstantR
from opticbench.elem.medium import decode_medium, medium_spec, rindex
from opticbench.elem.profiles import (Plane, Paraxial, Conic, sphere_or_plane,
                                      cylinder_or_plane)
from opticbench.elem.surface import OpticSurface
from opticbench.elem.transform import Isometry, flip_about_y
from opticbench.light.spectrum import Spectrum
from opticbench.raytr.raytrace import reflect, diffract
from opticbench.raytr.traceerror import TraceEvanescentRayError
from opticbench.util.misc_math import rot_v1_into_v2
from opticbench.util.units import millimeter, radian, to_degree
from .node import OpticNode, air_index
from .properties import finite, positive, in_range, instance_of

logger = logging.getLogger(__name__)


def _medium(value):
    try:
        decode_medium(*medium_spec(value))
    except ConfigurationError as err:
        raise PropertyError(err.msg) from err
    return value


def _non_zero(value):
    value = finite(value)
    if value == 0.:
        raise PropertyError("expected a non-zero number")
    return value


class Dummy(OpticNode):
    """ an empty plane, light passes through unchanged """
    default_name = 'dummy'

    def __init__(self, name=None):
        super().__init__(name)
        self.update()

    def update(self):
        self.surfaces = [OpticSurface('plane', Plane(), Isometry(),
                                      self.ports.inputs['input_1'])]
        self.media = [air_index, air_index]


class ParaxialSurface(OpticNode):
    """ ideal thin lens """
    default_name = 'paraxial surface'

    def __init__(self, name=None, focal_length=millimeter(100.)):
        super().__init__(name)
        self.props.create('focal_length', focal_length, 'focal length',
                          _non_zero)
        self.update()

    def update(self):
        self.surfaces = [OpticSurface(
            'paraxial', Paraxial(self.props.get('focal_length')), Isometry(),
            self.ports.inputs['input_1'])]
        self.media = [air_index, air_index]


class Lens(OpticNode):
    """ spherical singlet

    A curvature of 0 gives a flat surface. Positive curvatures have their
    center of curvature towards +z.
    """
    default_name = 'lens'

    def __init__(self, name=None, front_curvature=0.0, back_curvature=0.0,
                 center_thickness=millimeter(10.), medium=1.5):
        super().__init__(name)
        self.props.create('front_curvature', front_curvature,
                          'curvature of the input side surface', finite)
        self.props.create('back_curvature', back_curvature,
                          'curvature of the output side surface', finite)
        self.props.create('center_thickness', center_thickness,
                          'axial thickness', positive)
        self.props.create('medium', medium, 'lens material', _medium)
        self.update()

    @classmethod
    def from_radii(cls, name=None, front_radius=np.inf, back_radius=np.inf,
                   center_thickness=millimeter(10.), medium=1.5):
        """ create from radii of curvature, infinite for a flat surface """
        c1 = 0. if np.isinf(front_radius) else 1/front_radius
        c2 = 0. if np.isinf(back_radius) else 1/back_radius
        return cls(name, c1, c2, center_thickness, medium)

    @property
    def length(self):
        return self.props.get('center_thickness')

    def surface_profile(self, curvature):
        return sphere_or_plane(curvature)

    def update(self):
        self.medium = decode_medium(*medium_spec(self.props.get('medium')))
        self.surfaces = [
            OpticSurface('front',
                         self.surface_profile(
                             self.props.get('front_curvature')),
                         Isometry(), self.ports.inputs['input_1']),
            OpticSurface('back',
                         self.surface_profile(
                             self.props.get('back_curvature')),
                         Isometry.along_z(self.length),
                         self.ports.outputs['output_1'])]
        self.media = [air_index, self.rindex, air_index]

    def transient_attrs(self):
        return super().transient_attrs() + ['medium']

    def rindex(self, wvl):
        return rindex(self.medium, wvl)


class CylindricLens(Lens):
    """ singlet with cylindrical surfaces, focusing in the y-z plane only

    The cylinder axes run along x of the node frame. Curvatures follow the
    sign convention of :class:`Lens`.
    """
    default_name = 'cylindric lens'

    def surface_profile(self, curvature):
        return cylinder_or_plane(curvature)


class Wedge(OpticNode):
    """ plate whose output surface is tilted about x by the wedge angle

    The optical axis leaves the wedge undeviated; downstream nodes can be
    aligned to the deviated beam with their alignment isometry.
    """
    default_name = 'wedge'

    def __init__(self, name=None, center_thickness=millimeter(5.),
                 wedge_angle=0.0, medium=1.5):
        super().__init__(name)
        self.props.create('center_thickness', center_thickness,
                          'axial thickness', positive)
        self.props.create('wedge_angle', wedge_angle,
                          'tilt of the output surface about x, in radians',
                          in_range(-np.pi/2, np.pi/2))
        self.props.create('medium', medium, 'wedge material', _medium)
        self.update()

    @property
    def length(self):
        return self.props.get('center_thickness')

    def update(self):
        self.medium = decode_medium(*medium_spec(self.props.get('medium')))
        angle = to_degree(self.props.get('wedge_angle'))
        self.surfaces = [
            OpticSurface('front', Plane(), Isometry(),
                         self.ports.inputs['input_1']),
            OpticSurface('back', Plane(),
                         Isometry.from_euler([0., 0., self.length],
                                             (angle, 0., 0.)),
                         self.ports.outputs['output_1'])]
        self.media = [air_index, self.rindex, air_index]

    def transient_attrs(self):
        return super().transient_attrs() + ['medium']

    def rindex(self, wvl):
        return rindex(self.medium, wvl)


class Reflector(OpticNode):
    """ Base class for nodes with a single reflecting surface

    Light arriving at the input port is reflected out of the output port;
    the optical axis is folded accordingly. The reflectivity is the coating
    of the input port, 100% by default. Subclasses build the surface in
    :meth:`update`.
    """

    def __init__(self, name=None):
        super().__init__(name)
        self.ports.inputs['input_1'].coating = ConstantR(1.0)

    def trace(self, bundle, inverted, ghost=False):
        bundle.reflect_on_surface(self.surfaces[0], record=True)
        return bundle, []

    def fold(self, d_in, normal):
        """ direction of the axis leaving the vertex, global frame """
        return reflect(d_in, normal)

    def exit_axis(self, inverted):
        axis, placed_inv = self._entry_axis
        if inverted != placed_inv:
            return axis.append(flip_about_y())
        normal = self.isometry.transform_vector(
            self.surfaces[0].profile.normal(np.array([0., 0., 0.])))
        d_in = axis.z_axis
        d_out = self.fold(d_in, normal)
        rot_mat = np.matmul(rot_v1_into_v2(d_in, d_out), axis.rot_mat)
        return Isometry(t=axis.t, rot_mat=rot_mat)


class ThinMirror(Reflector):
    """ flat or spherical mirror of zero thickness """
    default_name = 'mirror'

    def __init__(self, name=None, curvature=0.0):
        super().__init__(name)
        self.props.create('curvature', curvature, 'mirror curvature', finite)
        self.update()

    def update(self):
        self.surfaces = [OpticSurface(
            'mirror', sphere_or_plane(self.props.get('curvature')),
            Isometry(), self.ports.inputs['input_1'])]
        self.media = [air_index, air_index]


class ParabolicMirror(Reflector):
    """ paraboloid mirror focusing an axial beam without spherical aberration

    A positive focal length is concave towards the incoming light, a
    negative one is convex.
    """
    default_name = 'parabolic mirror'

    def __init__(self, name=None, focal_length=millimeter(100.)):
        super().__init__(name)
        self.props.create('focal_length', focal_length, 'focal length',
                          _non_zero)
        self.update()

    def update(self):
        cv = -1/(2*self.props.get('focal_length'))
        self.surfaces = [OpticSurface(
            'mirror', Conic(c=cv, cc=-1.), Isometry(),
            self.ports.inputs['input_1'])]
        self.media = [air_index, air_index]


def _order(value):
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise PropertyError(f"diffraction order must be an integer, "
                            f"got {value!r}")
    return int(value)


class ReflectiveGrating(Reflector):
    """ plane ruled grating used in reflection

    The rulings run along y of the node frame, so the light is dispersed in
    the x-z plane. Rays are sent into the single diffraction order set by
    the `diffraction_order` property; rays for which that order is
    evanescent are dropped. The optical axis follows the order at the
    central wavelength of the last bundle traced.
    """
    default_name = 'grating'

    def __init__(self, name=None, line_density=1740./millimeter(1.),
                 diffraction_order=-1):
        super().__init__(name)
        self.props.create('line_density', line_density,
                          'number of lines per meter', positive)
        self.props.create('diffraction_order', diffraction_order,
                          'diffraction order sent to the output port',
                          _order)
        self._axis_wvl = None
        self.update()

    def update(self):
        self.surfaces = [OpticSurface('grating', Plane(), Isometry(),
                                      self.ports.inputs['input_1'])]
        self.media = [air_index, air_index]

    def transient_attrs(self):
        return super().transient_attrs() + ['_axis_wvl']

    @property
    def order(self):
        return self.props.get('diffraction_order')

    def grating_vector(self):
        """ grating vector in the node frame, across the rulings """
        return np.array([self.props.get('line_density'), 0., 0.])

    def littrow_angle(self, wvl):
        """ tilt about y sending order at wvl back along the incoming axis """
        s = -self.order*wvl*self.props.get('line_density')/2
        if abs(s) >= 1.:
            raise ConfigurationError(
                f"no Littrow configuration for order {self.order} at "
                f"{wvl}")
        return radian(asin(s))

    def align_littrow(self, wvl):
        """ set the alignment to the Littrow configuration at wvl """
        beta = to_degree(self.littrow_angle(wvl))
        self.alignment = Isometry.from_euler(euler=(0., beta, 0.))

    def trace(self, bundle, inverted, ghost=False):
        wvl = bundle.central_wavelength()
        if wvl is not None:
            self._axis_wvl = wvl
        bundle.diffract_on_surface(self.surfaces[0], self.grating_vector(),
                                   self.order, record=True)
        return bundle, []

    def fold(self, d_in, normal):
        if self._axis_wvl is None:
            return reflect(d_in, normal)
        g = self.isometry.transform_vector(self.grating_vector())
        try:
            return diffract(d_in, normal, g, self.order, self._axis_wvl)
        except TraceEvanescentRayError:
            logger.warning("%s: order %d is evanescent at %s, the axis is "
                           "reflected", self.name, self.order,
                           self._axis_wvl)
            return reflect(d_in, normal)


def _transmission(value):
    if isinstance(value, Spectrum):
        if not value.is_transmission_spectrum():
            raise PropertyError("filter spectrum values must be in [0, 1]")
        return value
    return in_range(0., 1.)(value)


class IdealFilter(OpticNode):
    """ filter of constant or spectral transmission """
    default_name = 'filter'

    def __init__(self, name=None, transmission=1.0):
        super().__init__(name)
        self.props.create('transmission', transmission,
                          'transmission, a number or a Spectrum',
                          _transmission)
        self.update()

    @classmethod
    def from_optical_density(cls, name=None, optical_density=0.0):
        od = instance_of(int, float)(optical_density)
        if not np.isfinite(od) or od < 0.:
            raise PropertyError(f"optical density must be >= 0, got {od}")
        return cls(name, 10.**(-od))

    def update(self):
        self.surfaces = [OpticSurface('plane', Plane(), Isometry(),
                                      self.ports.inputs['input_1'])]
        self.media = [air_index, air_index]

    def transmission_at(self, wvl):
        t = self.props.get('transmission')
        if isinstance(t, Spectrum):
            return float(t.transmission_at(wvl))
        return t

    def transfer_spectrum(self, spectrum, ctx):
        t = self.props.get('transmission')
        if isinstance(t, Spectrum):
            spectrum.filter(t)
        else:
            spectrum.scale_vertical(t)
        return spectrum

    def trace(self, bundle, inverted, ghost=False):
        bundle, reflected = super().trace(bundle, inverted, ghost)
        bundle.filter_energy(self.transmission_at)
        return bundle, reflected
