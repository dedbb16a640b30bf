#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2024 Michael J. Hayford
""" Exceptions raised while building or analyzing an optical bench

    - :exc:`ConfigurationError`: the graph or a node parameter is invalid,
      e.g. unknown or occupied ports, out of range values, cyclic graphs
    - :exc:`PropertyError`: a property bag rejected a name or a value
    - :exc:`AnalysisError`: a node failed while computing its output
    - :exc:`DataError`: the light data does not fit the requested analysis

.. Created on Mon Mar 11 09:12:45 2024

.. codeauthor: Michael J. Hayford
"""


class OpticBenchError(Exception):
    """ Base class for opticbench exceptions.

    The analysis engine fills in `node_id` and `node_name` for errors
    raised inside a node so the fault can be located.
    """
    def __init__(self, msg='', node_id=None, node_name=None):
        super().__init__(msg)
        self.msg = msg
        self.node_id = node_id
        self.node_name = node_name

    def __str__(self):
        if self.node_name is None and self.node_id is None:
            return self.msg
        return f"node '{self.node_name}' ({self.node_id}): {self.msg}"

    def set_context(self, node_id, node_name):
        """ Attach node context unless an inner node already did. """
        if self.node_id is None:
            self.node_id = node_id
            self.node_name = node_name


class ConfigurationError(OpticBenchError):
    """ Exception raised for an invalid graph or node configuration """


class PropertyError(ConfigurationError):
    """ Exception raised when a property name or value is rejected """


class AnalysisError(OpticBenchError):
    """ Exception raised when a node fails during analysis """


class DataError(OpticBenchError):
    """ Exception raised for light data unsuited to the analysis mode """
