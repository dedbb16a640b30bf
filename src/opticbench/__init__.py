# -*- coding: utf-8 -*-
""" The **opticbench** optical bench modeling and analysis package

    An optical bench is modeled as a graph of optical nodes connected by
    distance labeled edges. The graph is contained in a
    :class:`~.nodes.group.NodeGroup`. It is supported by the following
    subpackages:

        - :mod:`~.util`: units, miscellaneous math functions
        - :mod:`~.elem`: transforms, surface profiles, apertures, coatings,
          hit maps and fluence estimation
        - :mod:`~.light`: spectra and the light data exchanged between nodes
        - :mod:`~.raytr`: rays, ray bundles and their generation from
          position, energy and spectral distributions
        - :mod:`~.nodes`: the optical nodes, the port model and the scene
          graph with its execution engine
        - :mod:`~.analysis`: energy flow, ray trace and ghost focus analyzers

    The :mod:`~.document` module saves and restores a complete bench in an
    .opm file.

        - :mod:`opticalglass`: this package interfaces with glass manufacturer
          optical data and is used for refractive index support
"""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version(__name__)
except PackageNotFoundError:
    __version__ = 'unknown'


def listobj(obj):
    """ Print wrapper function for listobj_str() method of `obj`.

    Classes may implement the `listobj_str` method that returns a string
    containing a formatted description of the object. Examples include
    :meth:`.NodeGroup.listobj_str` and :meth:`.Properties.listobj_str`.
    """
    try:
        print(obj.listobj_str())
    except AttributeError:
        print(repr(obj))
