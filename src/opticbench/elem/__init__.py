""" Package providing the geometric constituents of optical nodes

    The :mod:`~.elem` subpackage provides classes and functions for the
    surfaces of optical nodes. These include:

        - Coordinate transformation support :mod:`~.transform`
        - Surface shapes, :mod:`~.profiles`, and optical surfaces with their
          apertures, :mod:`~.surface`
        - Reflectivity models, :mod:`~.coating`
        - Refractive index support via opticalglass, :mod:`~.medium`
        - Recording of ray hits, :mod:`~.hitmap`, and estimation of the
          fluence from them, :mod:`~.fluence`
"""
