""" package for spectra and the light data exchanged between nodes

    - :mod:`~.spectrum`: binned energy and transmission spectra
    - :mod:`~.lightdata`: the per port light data and :class:`LightResult`
"""
