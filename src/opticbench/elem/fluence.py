#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2024 Michael J. Hayford
""" Fluence estimation from weighted hit points

    Three estimators turn scattered (position, energy) samples into a
    fluence field (energy per area) on a regular grid:

        - :func:`binning`: histogram of the weights over the grid cells.
          Conserves the total weight exactly but depends on the grid.
        - :func:`voronoi`: each sample's energy is spread over its Voronoi
          cell. The per-sample fluences are linearly interpolated onto the
          grid.
        - :func:`kde`: a Gaussian kernel of Silverman bandwidth is placed on
          each sample and the sum is evaluated on the grid.

    Voronoi and KDE reproduce the total weight to within about 10% for a
    smooth, well sampled distribution; the difference is smoothing and
    interpolation error.

    Grids are described by `grid_shape` = (nx, ny) and `bounds` =
    ((xmin, xmax), (ymin, ymax)); fields are returned as (ny, nx) arrays of
    values at the cell centers.

.. Created on Wed Mar 13 16:21:50 2024

.. codeauthor: Michael J. Hayford
"""
import logging
from enum import Enum
from math import ceil, pi, sqrt

import attr
import numpy as np
import pandas as pd
from scipy.interpolate import griddata
from scipy.spatial import Voronoi, QhullError
from scipy.spatial.distance import pdist

from opticbench.error import DataError
from opticbench.util.misc_math import convex_polygon_area, linspace_centers

logger = logging.getLogger(__name__)


class FluenceEstimator(Enum):
    BINNING = 'binning'
    VORONOI = 'voronoi'
    KDE = 'kde'


@attr.s
class FluenceData:
    """ fluence field sampled at the centers of a regular grid """
    x = attr.ib()
    y = attr.ib()
    fluence = attr.ib()
    estimator = attr.ib(default=None)
    cell = attr.ib(default=(1., 1.))

    @property
    def cell_area(self):
        return self.cell[0]*self.cell[1]

    def total_energy(self):
        """ integral of the field, sum of cell fluence times cell area """
        return float(np.sum(self.fluence))*self.cell_area

    def peak(self):
        return float(np.max(self.fluence))

    def average(self):
        """ mean fluence over the cells receiving energy """
        lit = self.fluence[self.fluence > 0.]
        return float(np.mean(lit)) if lit.size > 0 else 0.

    def df(self):
        return pd.DataFrame(self.fluence, index=self.y, columns=self.x)

    def listobj_str(self):
        o_str = f"fluence: {self.estimator}  grid: {len(self.x)}x{len(self.y)}\n"
        o_str += (f"peak={self.peak():.6g}   average={self.average():.6g}"
                  f"   total={self.total_energy():.6g}\n")
        return o_str


def _check_samples(positions, weights):
    positions = np.asarray(positions, dtype=float).reshape(-1, 2)
    weights = np.asarray(weights, dtype=float).reshape(-1)
    if len(positions) == 0:
        raise DataError("no hit points for fluence estimation")
    if len(positions) != len(weights):
        raise DataError("positions and weights differ in length")
    return positions, weights


def bounding_box(positions, margin=0.0):
    """ ((xmin, xmax), (ymin, ymax)) of positions, padded by margin

    A degenerate extent is widened to the other axis' extent, or to 1 um
    if all points coincide.
    """
    lo = positions.min(axis=0)
    hi = positions.max(axis=0)
    span = hi - lo
    fallback = max(span.max(), 1e-6)
    for i in range(2):
        if span[i] == 0.:
            lo[i] -= fallback/2
            hi[i] += fallback/2
    return ((lo[0] - margin, hi[0] + margin),
            (lo[1] - margin, hi[1] + margin))


def grid_cells(grid_shape, bounds):
    nx, ny = grid_shape
    if nx < 1 or ny < 1:
        raise DataError(f"invalid grid shape {grid_shape}")
    (x0, x1), (y0, y1) = bounds
    xs = linspace_centers(x0, x1, nx)
    ys = linspace_centers(y0, y1, ny)
    cell = ((x1 - x0)/nx, (y1 - y0)/ny)
    return xs, ys, cell


def binning(positions, weights, grid_shape, bounds=None):
    """ histogram fluence; sum(fluence)*cell_area equals sum(weights) """
    positions, weights = _check_samples(positions, weights)
    if bounds is None:
        bounds = bounding_box(positions)
    xs, ys, cell = grid_cells(grid_shape, bounds)
    # histogram2d puts points on the upper edge into the last cell
    hist, _, _ = np.histogram2d(positions[:, 0], positions[:, 1],
                                bins=grid_shape, range=bounds,
                                weights=weights)
    fluence = hist.T/(cell[0]*cell[1])
    return FluenceData(xs, ys, fluence, FluenceEstimator.BINNING, cell)


def merge_duplicates(positions, weights):
    """ combine coincident points, summing their weights """
    uniq, inverse = np.unique(positions, axis=0, return_inverse=True)
    merged = np.zeros(len(uniq))
    np.add.at(merged, inverse.reshape(-1), weights)
    return uniq, merged


def voronoi_cell_areas(points):
    """ areas of the Voronoi cells of points, clipped to a padded box

    The points are mirrored across the four sides of a box enclosing them
    with a margin of half the mean point spacing, which makes every cell of
    the original points finite and bounded by the box.
    """
    n = len(points)
    (x0, x1), (y0, y1) = bounding_box(points)
    spacing = sqrt((x1 - x0)*(y1 - y0)/n)
    (x0, x1), (y0, y1) = bounding_box(points, margin=0.5*spacing)
    mirrored = [points,
                np.column_stack((2*x0 - points[:, 0], points[:, 1])),
                np.column_stack((2*x1 - points[:, 0], points[:, 1])),
                np.column_stack((points[:, 0], 2*y0 - points[:, 1])),
                np.column_stack((points[:, 0], 2*y1 - points[:, 1]))]
    try:
        vor = Voronoi(np.vstack(mirrored))
    except QhullError as err:
        raise DataError(f"Voronoi tessellation failed: {err}") from err
    areas = np.empty(n)
    for i in range(n):
        region = vor.regions[vor.point_region[i]]
        if len(region) == 0 or -1 in region:
            raise DataError("unbounded Voronoi cell")
        areas[i] = convex_polygon_area(vor.vertices[region])
    return areas


def voronoi(positions, weights, grid_shape, bounds=None):
    """ Voronoi cell fluence, linearly interpolated onto the grid """
    positions, weights = _check_samples(positions, weights)
    points, energies = merge_duplicates(positions, weights)
    if len(points) < 3:
        raise DataError("Voronoi estimation needs at least 3 distinct points")
    point_fluence = energies/voronoi_cell_areas(points)
    if bounds is None:
        bounds = bounding_box(points)
    xs, ys, cell = grid_cells(grid_shape, bounds)
    return FluenceData(xs, ys, interpolate(points, point_fluence, xs, ys),
                       FluenceEstimator.VORONOI, cell)


def interpolate(points, values, xs, ys):
    """ linear interpolation of scattered values, zero outside the hull """
    gx, gy = np.meshgrid(xs, ys)
    try:
        return griddata(points, values, (gx, gy), method='linear',
                        fill_value=0.)
    except QhullError as err:
        raise DataError(f"interpolation failed: {err}") from err


def bandwidth_estimate(positions, max_points=2000):
    """ Silverman's rule of thumb applied to the pairwise point distances

    At most `max_points` evenly strided samples enter the distance
    statistics.
    """
    n = len(positions)
    if n < 2:
        raise DataError("bandwidth estimation needs at least 2 points")
    step = max(1, ceil(n/max_points))
    dist = pdist(positions[::step])
    std_dev = np.std(dist)
    q25, q75 = np.percentile(dist, [25, 75])
    h = 0.9*min(std_dev, (q75 - q25)/1.34)*n**(-0.2)
    if not h > 0.:
        raise DataError("hit points are too clustered for a bandwidth "
                        "estimate")
    return h


def kde(positions, weights, grid_shape, bounds=None, bandwidth=None):
    """ Gaussian kernel density estimate of the fluence

    The default bounds pad the points' bounding box by 3 bandwidths so the
    kernels' mass stays on the grid.
    """
    positions, weights = _check_samples(positions, weights)
    h = bandwidth_estimate(positions) if bandwidth is None else bandwidth
    if bounds is None:
        bounds = bounding_box(positions, margin=3*h)
    xs, ys, cell = grid_cells(grid_shape, bounds)
    norm_factor = 1./(2*pi*h*h)
    fluence = np.empty((len(ys), len(xs)))
    dx2 = (xs[:, np.newaxis] - positions[:, 0])**2
    # one grid row at a time keeps memory at nx*n
    for j, y in enumerate(ys):
        d2 = dx2 + (y - positions[:, 1])**2
        fluence[j] = norm_factor*np.exp(-d2/(2*h*h)).dot(weights)
    return FluenceData(xs, ys, fluence, FluenceEstimator.KDE, cell)


_estimators = {
    FluenceEstimator.BINNING: binning,
    FluenceEstimator.VORONOI: voronoi,
    FluenceEstimator.KDE: kde,
    }


def calc_fluence(positions, weights, grid_shape, estimator, bounds=None):
    """ estimate a fluence field with the chosen FluenceEstimator """
    try:
        est_fct = _estimators[FluenceEstimator(estimator)]
    except ValueError as err:
        raise DataError(f"unknown fluence estimator {estimator!r}") from err
    logger.debug(f"{FluenceEstimator(estimator).value}: {len(positions)} "
                 f"points onto {grid_shape}")
    return est_fct(positions, weights, grid_shape, bounds=bounds)
