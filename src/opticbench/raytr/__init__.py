""" Package for geometric ray tracing through optical nodes

    The :mod:`~.raytr` subpackage provides core classes and functions
    for ray tracing. These include:

        - Base level ray tracing, :mod:`~.raytrace`
        - Single rays, :mod:`~.ray`, and ray bundles, :mod:`~.rays`
        - Sample generation for ray start points, :mod:`~.sampler`
        - Energy and spectral distributions over the rays of a bundle,
          :mod:`~.energydist` and :mod:`~.spectraldist`
        - Exception classes for reporting ray trace errors, :mod:`~.traceerror`
"""
