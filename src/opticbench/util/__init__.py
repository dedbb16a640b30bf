""" package supplying utility functions for units and numpy support

    The :mod:`~opticbench.util` subpackage provides miscellaneous functions
    for geometric calculations and anything else that doesn't have an
    obvious home. These include:

        - miscellaneous math functions, :mod:`~.misc_math`
        - typed physical quantities and unit conversion, :mod:`~.units`
"""

import importlib
import logging

logger = logging.getLogger(__name__)


def str_to_class(module_name: str, class_name: str, **kwargs):
    """Return a class instance from a string reference"""
    try:
        module_ = importlib.import_module(module_name)
    except ImportError:
        logger.error(f'Module "{module_name}" does not exist')
        raise
    try:
        class_obj = getattr(module_, class_name)
    except AttributeError:
        logger.error(f'Class "{class_name}" does not exist')
        raise
    return class_obj(**kwargs)
