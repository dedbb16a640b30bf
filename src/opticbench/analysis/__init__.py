""" Package for running analyses on an optical bench

    The :mod:`~.analysis` subpackage provides the analyzer configurations
    and the analyzers for energy flow, ray trace and ghost focus
    calculations, :mod:`~.analyzers`.
"""
