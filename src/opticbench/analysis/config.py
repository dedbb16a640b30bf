#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2024 Michael J. Hayford
""" Analysis modes, analyzer configurations and the per run context

    Each analyzer is configured by a small :mod:`attr` record. The
    :class:`AnalysisContext` carries the mode, the configuration and the log
    sink through one run of the analysis engine.

.. Created on Tue Mar 19 09:40:12 2024

.. codeauthor: Michael J. Hayford
"""
import logging
from enum import Enum

import attr

from opticbench.error import ConfigurationError
from opticbench.util.misc_math import is_finite_number
from opticbench.util.units import nanometer


class AnalyzerType(Enum):
    ENERGY = 'energy'
    RAYTRACE = 'ray trace'
    GHOSTFOCUS = 'ghost focus'


def _positive(instance, attribute, value):
    if not is_finite_number(value) or value <= 0.:
        raise ConfigurationError(f"{attribute.name} must be positive, "
                                 f"got {value!r}")


def _non_negative(instance, attribute, value):
    if not is_finite_number(value) or value < 0.:
        raise ConfigurationError(f"{attribute.name} must be >= 0, "
                                 f"got {value!r}")


def _count(instance, attribute, value):
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigurationError(f"{attribute.name} must be an integer >= 0, "
                                 f"got {value!r}")


@attr.s
class EnergyConfig:
    spectrum_resolution = attr.ib(default=nanometer(1.0),
                                  validator=_positive)


@attr.s
class RayTraceConfig:
    min_energy_per_ray = attr.ib(default=0.0, validator=_non_negative)
    max_number_of_bounces = attr.ib(default=1000, validator=_count)
    max_number_of_refractions = attr.ib(default=1000, validator=_count)


@attr.s
class GhostFocusConfig:
    max_bounces = attr.ib(default=1, validator=_count)
    min_energy_per_ray = attr.ib(default=0.0, validator=_non_negative)


class AnalysisContext():
    """ mode, configuration and log sink of one analysis run

    Attributes:
        mode: the :class:`AnalyzerType`
        config: the analyzer's configuration record
        logger: log sink for node level messages
        bounce: the current ghost focus pass, 0 otherwise
    """
    def __init__(self, mode, config, logger=None):
        self.mode = AnalyzerType(mode)
        self.config = config
        self.logger = (logger if logger is not None
                       else logging.getLogger('opticbench.analysis'))
        self.bounce = 0

    def __repr__(self):
        return f"{type(self).__name__}({self.mode}, {self.config!r})"

    @property
    def is_ghost_focus(self):
        return self.mode is AnalyzerType.GHOSTFOCUS

    @property
    def is_ray_trace(self):
        return self.mode is AnalyzerType.RAYTRACE

    @property
    def is_energy(self):
        return self.mode is AnalyzerType.ENERGY
