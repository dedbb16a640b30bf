#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2024 Michael J. Hayford
""" Analyzers running the analysis engine on a scenery

    An analyzer binds an analysis mode to its configuration and an optional
    log sink. :meth:`Analyzer.analyze` runs the engine on a
    :class:`~opticbench.nodes.group.NodeGroup`; afterwards the detectors of
    the scenery hold the results.

    .. code::

        analyzer = RayTraceAnalyzer(RayTraceConfig(min_energy_per_ray=1e-9))
        analyzer.analyze(scenery)
        print(meter.report())

.. Created on Thu Mar 28 11:47:03 2024

.. codeauthor: Michael J. Hayford
"""
import logging

from opticbench.error import ConfigurationError
from opticbench.util import str_to_class
from .config import (AnalyzerType, AnalysisContext, EnergyConfig,
                     RayTraceConfig, GhostFocusConfig)

logger = logging.getLogger(__name__)


class Analyzer():
    """ Base class for analyzers.

    Attributes:
        config: the analyzer's configuration record
        logger: log sink used during the analysis
    """
    analyzer_type = None
    config_type = None

    def __init__(self, config=None, logger=None):
        self.config = config if config is not None else self.config_type()
        if not isinstance(self.config, self.config_type):
            raise ConfigurationError(
                f"{type(self).__name__} needs a {self.config_type.__name__},"
                f" got {type(self.config).__name__}")
        self.logger = (logger if logger is not None
                       else logging.getLogger(__name__))

    def __repr__(self):
        return f"{type(self).__name__}({self.config!r})"

    def __json_encode__(self):
        attrs = dict(vars(self))
        del attrs['logger']
        return attrs

    def __json_decode__(self, **attrs):
        self.__init__(attrs['config'])

    def analyze(self, scenery):
        """ run the analysis on the top level group `scenery` """
        ctx = AnalysisContext(self.analyzer_type, self.config, self.logger)
        return scenery.analyze_scenery(ctx)


class EnergyAnalyzer(Analyzer):
    analyzer_type = AnalyzerType.ENERGY
    config_type = EnergyConfig


class RayTraceAnalyzer(Analyzer):
    analyzer_type = AnalyzerType.RAYTRACE
    config_type = RayTraceConfig


class GhostFocusAnalyzer(Analyzer):
    analyzer_type = AnalyzerType.GHOSTFOCUS
    config_type = GhostFocusConfig


_analyzer_classes = {
    AnalyzerType.ENERGY: 'EnergyAnalyzer',
    AnalyzerType.RAYTRACE: 'RayTraceAnalyzer',
    AnalyzerType.GHOSTFOCUS: 'GhostFocusAnalyzer',
    }


def create_analyzer(analyzer_type, config=None, logger=None):
    """ analyzer instance for an :class:`~.config.AnalyzerType` """
    try:
        class_name = _analyzer_classes[AnalyzerType(analyzer_type)]
    except ValueError as err:
        raise ConfigurationError(
            f"unknown analyzer type {analyzer_type!r}") from err
    return str_to_class(__name__, class_name, config=config, logger=logger)
