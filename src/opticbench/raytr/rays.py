#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2024 Michael J. Hayford
""" Ray bundles and their interaction with surfaces

    A :class:`RayBundle` is an ordered list of :class:`~.ray.Ray` sharing a
    logical origin. It has its own id and a bounce level; the bounce level
    counts the reflections that produced the bundle in a ghost focus
    analysis. Hit maps are keyed by both.

    The surface interaction methods work in the frame of the node that owns
    the surface. Rays that miss a surface, land outside its aperture or are
    totally internally reflected are dropped from the bundle.

.. Created on Thu Mar 14 10:18:33 2024

.. codeauthor: Michael J. Hayford
"""
import logging
import uuid
from math import tan, pi

import numpy as np
import pandas as pd

from opticbench.error import AnalysisError, ConfigurationError, DataError
from opticbench.elem.hitmap import EnergyHitPoint
from opticbench.elem.profiles import Paraxial
from opticbench.light.spectrum import Spectrum
from opticbench.util.misc_math import is_finite_number, normalize
from opticbench.util.units import Length, Energy, Angle, check_non_negative
from .energydist import Uniform
from .ray import Ray
from .raytrace import paraxial_bend
from .sampler import Hexapolar
from .spectraldist import LaserLines
from .traceerror import TraceError, TraceTIRError, TraceEvanescentRayError

logger = logging.getLogger(__name__)


class RayBundle():
    def __init__(self, rays=None, bounce=0, parent_id=None):
        self.rays = list(rays) if rays is not None else []
        self.uuid = str(uuid.uuid4())
        self.bounce = bounce
        self.parent_id = parent_id

    @classmethod
    def new_collimated(cls, wvl: Length, energy_dist, pos_dist):
        """ rays along +z at the points of pos_dist, single wavelength """
        return cls.new_collimated_with_spectrum(LaserLines([(wvl, 1.0)]),
                                                energy_dist, pos_dist)

    @classmethod
    def new_collimated_with_spectrum(cls, spectral_dist, energy_dist,
                                     pos_dist):
        """ rays along +z; every point gets one ray per spectral line

        The energy of a point is shared among its wavelengths by their
        spectral weights.
        """
        points = pos_dist.generate()
        energies = energy_dist.apply(points)
        lines = spectral_dist.generate()
        rays = [Ray.new_collimated(p, wvl, e*w)
                for p, e in zip(points, energies)
                for wvl, w in lines]
        return cls(rays)

    @classmethod
    def new_hexapolar_point_source(cls, cone_angle: Angle, nr_of_rings: int,
                                   wvl: Length, energy: Energy):
        """ rays from the origin filling a cone of full angle cone_angle """
        if not is_finite_number(cone_angle) or not 0. <= cone_angle < pi:
            raise ConfigurationError(
                f"cone angle must be in [0, pi), got {cone_angle!r}")
        dist = Hexapolar(tan(cone_angle/2), nr_of_rings)
        pts = dist.generate()
        energies = Uniform(energy).apply(pts)
        rays = [Ray([0., 0., 0.], [p[0], p[1], 1.], wvl, e)
                for p, e in zip(pts, energies)]
        return cls(rays)

    def __repr__(self):
        return (f"{type(self).__name__}(rays={len(self.rays)}, "
                f"bounce={self.bounce}, energy={self.total_energy():.6g})")

    def __len__(self):
        return len(self.rays)

    def __iter__(self):
        return iter(self.rays)

    def listobj_str(self):
        o_str = f"ray bundle {self.uuid}: {len(self.rays)} rays, "
        o_str += f"bounce {self.bounce}\n"
        o_str += f"total energy={self.total_energy():.6g}\n"
        return o_str

    def is_empty(self):
        return len(self.rays) == 0

    def copy(self, new_id=False):
        new_bundle = RayBundle([r.copy() for r in self.rays], self.bounce,
                               self.parent_id)
        if not new_id:
            new_bundle.uuid = self.uuid
        return new_bundle

    def nr_of_rays(self, valid_only=True):
        if valid_only:
            return sum(1 for r in self.rays if r.valid)
        return len(self.rays)

    def total_energy(self) -> Energy:
        return float(sum(r.energy for r in self.rays if r.valid))

    def add_ray(self, ray):
        self.rays.append(ray)

    def merge(self, other: 'RayBundle'):
        self.rays.extend(other.rays)

    def prune(self):
        """ remove invalid rays """
        self.rays = [r for r in self.rays if r.valid]

    def transformed(self, iso):
        new_bundle = self.copy()
        new_bundle.rays = [r.transformed(iso) for r in self.rays]
        return new_bundle

    def inverse_transformed(self, iso):
        new_bundle = self.copy()
        new_bundle.rays = [r.inverse_transformed(iso) for r in self.rays]
        return new_bundle

    def positions(self):
        return np.array([r.pos for r in self.rays]).reshape(-1, 3)

    def directions(self):
        return np.array([r.dir for r in self.rays]).reshape(-1, 3)

    def energies(self):
        return np.array([r.energy for r in self.rays])

    def wavelengths(self):
        return sorted({r.wvl for r in self.rays})

    def central_wavelength(self):
        if self.is_empty():
            return None
        e = self.energies()
        wvls = np.array([r.wvl for r in self.rays])
        if np.sum(e) == 0.:
            return float(np.mean(wvls))
        return float(np.dot(wvls, e)/np.sum(e))

    def centroid(self):
        if self.is_empty():
            return None
        return self.positions().mean(axis=0)

    def beam_radius_geo(self):
        """ largest transverse distance of a ray from the centroid """
        ctr = self.centroid()
        if ctr is None:
            return None
        d = self.positions()[:, :2] - ctr[:2]
        return float(np.max(np.hypot(d[:, 0], d[:, 1])))

    def to_spectrum(self, resolution: Length):
        """ energy spectrum of the rays, None for an empty bundle """
        if self.is_empty():
            return None
        lines = {}
        for r in self.rays:
            lines[r.wvl] = lines.get(r.wvl, 0.) + r.energy
        return Spectrum.from_laser_lines(list(lines.items()), resolution)

    def scale_energy(self, factor):
        check_non_negative(factor, 'energy factor')
        for r in self.rays:
            r.energy *= factor

    def filter_energy(self, transmission):
        """ scale each ray's energy by transmission(wavelength) """
        for r in self.rays:
            t = transmission(r.wvl)
            if not (is_finite_number(t) and 0. <= t <= 1.):
                raise AnalysisError(f"transmission {t} at {r.wvl} is outside "
                                    "[0, 1]")
            r.energy *= t

    def split(self, ratio):
        """ keep ratio of each ray's energy, return a bundle with the rest """
        if not (is_finite_number(ratio) and 0. <= ratio <= 1.):
            raise ConfigurationError(f"split ratio must be in [0, 1], "
                                     f"got {ratio!r}")
        other = self.copy(new_id=True)
        other.parent_id = self.uuid
        other.scale_energy(1. - ratio)
        self.scale_energy(ratio)
        return other

    def invalidate_by_threshold_energy(self, min_energy_per_ray: Energy):
        check_non_negative(min_energy_per_ray, 'minimum energy per ray')
        for r in self.rays:
            if r.energy < min_energy_per_ray:
                r.invalidate()
        self.prune()

    def filter_by_nr_of_bounces(self, max_bounces):
        self.rays = [r for r in self.rays if r.nr_of_bounces <= max_bounces]

    def filter_by_nr_of_refractions(self, max_refractions):
        self.rays = [r for r in self.rays
                     if r.nr_of_refractions <= max_refractions]

    def propagate_along_z(self, distance):
        for r in self.rays:
            try:
                r.propagate_along_z(distance)
            except TraceError:
                r.invalidate()
        self.prune()

    def refract_paraxial(self, focal_length):
        """ ideal thin lens in the z=0 plane of the bundle's frame """
        for r in self.rays:
            try:
                r.refract_paraxial(focal_length)
            except TraceError:
                r.invalidate()
        self.prune()

    def _hit(self, ray, surface, record):
        """ move ray onto surface and return the normal, None if dropped """
        try:
            pt, normal = surface.intercept(ray.pos, ray.dir)
        except TraceError:
            ray.invalidate()
            return None
        ray.move_to(pt)
        if record:
            x, y = surface.local_xy(pt)
            surface.hit_map.add_hit_point(
                EnergyHitPoint(np.array([x, y]), ray.energy),
                bounce=self.bounce, bundle_id=self.uuid)
        return normal

    def hit_surface(self, surface, record=True):
        """ move the rays onto surface, recording the hits """
        for r in self.rays:
            if r.valid:
                self._hit(r, surface, record)
        self.prune()

    def _reflectivity(self, surface, ray, normal, n2):
        refl = surface.coating.reflectivity(ray, normal, n2)
        if not (is_finite_number(refl) and 0. <= refl <= 1.):
            raise AnalysisError(f"coating {surface.coating!r} of surface "
                                f"'{surface.name}' returned non-physical "
                                f"reflectivity {refl}")
        return refl

    def refract_on_surface(self, surface, n2_fct=None, ghost=False,
                           record=False):
        """ transmit the rays through surface into the medium n2_fct(wvl)

        The transmitted rays keep (1 - R) of their energy. With ghost set,
        the reflected rays, carrying R of the energy, are returned as a new
        bundle one bounce level up; otherwise None is returned.

        A :class:`~opticbench.elem.profiles.Paraxial` profile bends the rays
        as an ideal thin lens and leaves the refractive index unchanged.
        """
        reflected = RayBundle(bounce=self.bounce+1,
                              parent_id=self.uuid) if ghost else None
        paraxial = isinstance(surface.profile, Paraxial)
        for ray in self.rays:
            if not ray.valid:
                continue
            normal = self._hit(ray, surface, record)
            if normal is None:
                continue
            n2 = ray.refr_index if paraxial or n2_fct is None \
                else n2_fct(ray.wvl)
            refl = self._reflectivity(surface, ray, normal, n2)
            if ghost and refl > 0.:
                r_ray = ray.copy()
                r_ray.energy *= refl
                r_ray.reflect(normal)
                reflected.add_ray(r_ray)
            try:
                if paraxial:
                    self._paraxial_bend(ray, surface)
                else:
                    ray.refract(normal, n2)
            except TraceTIRError:
                ray.invalidate()
                continue
            ray.energy *= (1. - refl)
        self.prune()
        return reflected

    @staticmethod
    def _paraxial_bend(ray, surface):
        pt_s = surface.iso.inverse_transform_point(ray.pos)
        d_s = surface.iso.inverse_transform_vector(ray.dir)
        d_s = paraxial_bend(pt_s, d_s, surface.profile.focal_length)
        ray.dir = normalize(surface.iso.transform_vector(d_s))
        ray.nr_of_refractions += 1

    def reflect_on_surface(self, surface, record=False):
        """ reflect the rays, keeping R of their energy """
        for ray in self.rays:
            if not ray.valid:
                continue
            normal = self._hit(ray, surface, record)
            if normal is None:
                continue
            refl = self._reflectivity(surface, ray, normal, ray.refr_index)
            ray.energy *= refl
            ray.reflect(normal)
        self.prune()

    def diffract_on_surface(self, surface, grating_vector, order,
                            record=False):
        """ diffract the rays into order at a reflective grating surface

        grating_vector is in the surface frame. Rays of an evanescent order
        are dropped.
        """
        g = surface.iso.transform_vector(grating_vector)
        for ray in self.rays:
            if not ray.valid:
                continue
            normal = self._hit(ray, surface, record)
            if normal is None:
                continue
            refl = self._reflectivity(surface, ray, normal, ray.refr_index)
            ray.energy *= refl
            try:
                ray.diffract(normal, g, order, surface.iso.t)
            except TraceEvanescentRayError:
                ray.invalidate()
        self.prune()

    def ray_df(self):
        """ DataFrame with one row per ray """
        rows = [(*r.pos, *r.dir, r.wvl, r.energy, r.path_length,
                 r.nr_of_bounces, r.nr_of_refractions) for r in self.rays]
        return pd.DataFrame(rows, columns=['x', 'y', 'z', 'l', 'm', 'n',
                                           'wvl', 'energy', 'path_length',
                                           'bounces', 'refractions'])


def check_geometric(bundle, what=''):
    if not isinstance(bundle, RayBundle):
        raise DataError(f"{what}: expected a RayBundle, got "
                        f"{type(bundle).__name__}")
    return bundle
