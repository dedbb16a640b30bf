#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2024 Michael J. Hayford
""" Record of where and with which weight rays struck a surface

    A :class:`HitMap` belongs to one surface. It is organized by bounce
    level and, within a bounce level, by the id of the ray bundle that
    produced the hits, so that separate illumination passes stay
    distinguishable. All the points of one hit map carry the same kind of
    weight: either energies (:class:`EnergyHitPoint`) or fluences
    (:class:`FluenceHitPoint`).

    Fluence fields are computed on request from the stored points and are
    not cached.

.. Created on Wed Mar 13 11:05:37 2024

.. codeauthor: Michael J. Hayford
"""
import logging

import attr
import numpy as np
import pandas as pd

from opticbench.error import DataError
from opticbench.elem import fluence as flu

logger = logging.getLogger(__name__)


@attr.s
class EnergyHitPoint:
    position = attr.ib()
    energy = attr.ib()

    @property
    def weight(self):
        return self.energy


@attr.s
class FluenceHitPoint:
    position = attr.ib()
    fluence = attr.ib()

    @property
    def weight(self):
        return self.fluence


class HitMap:
    """ hit points of one surface, keyed by bounce level and bundle id """

    def __init__(self):
        self.hit_maps = {}
        self.point_type = None

    def __repr__(self):
        return (f"{type(self).__name__}(bounces={self.bounces()}, "
                f"points={len(self)})")

    def __len__(self):
        return sum(len(pts) for bundles in self.hit_maps.values()
                   for pts in bundles.values())

    def is_empty(self):
        return len(self) == 0

    def reset(self):
        self.hit_maps = {}
        self.point_type = None

    def bounces(self):
        return sorted(self.hit_maps.keys())

    def add_hit_point(self, hit_point, bounce=0, bundle_id=''):
        """ append hit_point to the map for bounce and bundle_id

        Raises:
            DataError: non-finite position or weight, or a point of a
                different kind than those already in the map
        """
        pos = np.asarray(hit_point.position, dtype=float)
        if pos.shape != (2,):
            raise DataError(f"hit point position must be 2d, got {pos}")
        if not (np.all(np.isfinite(pos)) and np.isfinite(hit_point.weight)):
            raise DataError(f"non-finite hit point {hit_point}")
        if self.point_type is None:
            self.point_type = type(hit_point)
        elif not isinstance(hit_point, self.point_type):
            raise DataError(
                f"cannot add {type(hit_point).__name__} to a hit map of "
                f"{self.point_type.__name__}s")
        bundles = self.hit_maps.setdefault(bounce, {})
        bundles.setdefault(bundle_id, []).append(hit_point)

    def hit_points(self, bounce=None, bundle_id=None):
        """ (positions, weights) arrays, optionally for one bounce/bundle """
        pts = []
        for b, bundles in self.hit_maps.items():
            if bounce is not None and b != bounce:
                continue
            for bid, hps in bundles.items():
                if bundle_id is not None and bid != bundle_id:
                    continue
                pts.extend(hps)
        positions = np.array([hp.position for hp in pts],
                             dtype=float).reshape(-1, 2)
        weights = np.array([hp.weight for hp in pts], dtype=float)
        return positions, weights

    def total_energy(self, bounce=None):
        if self.point_type is FluenceHitPoint:
            raise DataError("total energy undefined for a fluence hit map")
        return float(np.sum(self.hit_points(bounce=bounce)[1]))

    def calc_fluence_map(self, grid_shape, estimator, bounce=None,
                         bundle_id=None, bounds=None):
        """ estimate the fluence field of the recorded hit points

        Args:
            grid_shape: (nx, ny) cells of the output grid
            estimator: a :class:`~.fluence.FluenceEstimator`
            bounce: restrict to one bounce level, default all
            bundle_id: restrict to one ray bundle, default all
            bounds: ((xmin, xmax), (ymin, ymax)), default from the points

        Returns:
            :class:`~.fluence.FluenceData`
        """
        positions, weights = self.hit_points(bounce, bundle_id)
        if len(positions) == 0:
            raise DataError("hit map is empty")
        if self.point_type is FluenceHitPoint:
            # the points already carry fluence, no estimation needed
            logger.warning("fluence hit map: interpolating point fluences, "
                           f"estimator {estimator} ignored")
            if bounds is None:
                bounds = flu.bounding_box(positions)
            xs, ys, cell = flu.grid_cells(grid_shape, bounds)
            return flu.FluenceData(xs, ys,
                                   flu.interpolate(positions, weights, xs, ys),
                                   None, cell)
        return flu.calc_fluence(positions, weights, grid_shape, estimator,
                                bounds=bounds)

    def hit_df(self):
        """ DataFrame with one row per hit point """
        rows = [(b, bid, hp.position[0], hp.position[1], hp.weight)
                for b, bundles in self.hit_maps.items()
                for bid, hps in bundles.items()
                for hp in hps]
        return pd.DataFrame(rows, columns=['bounce', 'bundle_id',
                                           'x', 'y', 'weight'])
