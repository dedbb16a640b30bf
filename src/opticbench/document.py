#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2024 Michael J. Hayford
""" The optical bench document: scenery plus analyzers, saved as .opm files

    An .opm file is a json_tricks file holding an :class:`OpmDocument`
    stamped with the file format version. Nodes are stored with their uuid,
    property values and ports; analysis results are not saved. Reference
    nodes store the uuid of the node they refer to and are re-linked on
    restore.

.. Created on Fri Mar 29 10:02:51 2024

.. codeauthor: Michael J. Hayford
"""
import logging
from pathlib import Path

import json_tricks
from packaging import version

from opticbench.analysis.analyzers import Analyzer, create_analyzer
from opticbench.error import ConfigurationError
from opticbench.nodes.group import NodeGroup

logger = logging.getLogger(__name__)

OPM_VERSION = '0.1.0'


class OpmDocument():
    """ top level container of an optical bench model

    Attributes:
        scenery: the top level :class:`~opticbench.nodes.group.NodeGroup`
        analyzers: list of :class:`~opticbench.analysis.analyzers.Analyzer`
        opm_version: file format version the document was saved with
    """
    def __init__(self, scenery=None, analyzers=None):
        self.scenery = scenery if scenery is not None else NodeGroup('scenery')
        self.analyzers = list(analyzers) if analyzers is not None else []
        self.opm_version = OPM_VERSION

    def __repr__(self):
        return (f"{type(self).__name__}({self.scenery.name!r}, "
                f"{len(self.analyzers)} analyzers)")

    def listobj_str(self):
        o_str = f"opm document, version {self.opm_version}\n"
        o_str += self.scenery.listobj_str()
        for a in self.analyzers:
            o_str += f"{a!r}\n"
        return o_str

    def add_analyzer(self, analyzer_type, config=None, logger=None):
        """ create an analyzer for analyzer_type and add it """
        analyzer = create_analyzer(analyzer_type, config=config,
                                   logger=logger)
        self.analyzers.append(analyzer)
        return analyzer

    def remove_analyzer(self, analyzer):
        try:
            self.analyzers.remove(analyzer)
        except ValueError:
            raise ConfigurationError(f"{analyzer!r} is not part of the "
                                     "document") from None

    def analyze(self):
        """ run all analyzers in turn, returning their results """
        return [a.analyze(self.scenery) for a in self.analyzers]

    def save_model(self, file_name, version=None):
        """Save the document in an .opm file.

        Args:
            file_name: str or Path
            version: optional override for the file format version
        """
        file_pth = Path(file_name).with_suffix('.opm')

        # Ensure the parent directory exists
        if not file_pth.parent.exists():
            file_pth.parent.mkdir(parents=True)

        self.opm_version = OPM_VERSION if version is None else version

        fs_dict = {}
        fs_dict['opm_document'] = self

        with open(file_pth, 'w') as f:
            json_tricks.dump(fs_dict, f, indent=1,
                             separators=(',', ':'), allow_nan=True)
        logger.info(f"saved {file_pth}")
        return file_pth

    def sync_to_restore(self):
        self.scenery.sync_to_restore()
        for a in self.analyzers:
            if not isinstance(a, Analyzer):
                raise ConfigurationError(f"not an analyzer: {a!r}")


def open_opm(file_name):
    """ open an .opm file and return the restored :class:`OpmDocument`

    Raises:
        ConfigurationError: missing file, no document in the file or a file
            written by a newer version
    """
    file_pth = Path(file_name)
    if not file_pth.exists():
        raise ConfigurationError(f"file {file_pth} not found")
    with open(file_pth, 'r') as f:
        contents = f.read()
    try:
        obj_dict = json_tricks.loads(contents)
    except ValueError as err:
        raise ConfigurationError(f"can't read {file_pth}: {err}") from err
    doc = obj_dict.get('opm_document') if isinstance(obj_dict, dict) \
        else None
    if not isinstance(doc, OpmDocument):
        raise ConfigurationError(f"{file_pth} holds no opm document")
    file_version = getattr(doc, 'opm_version', None)
    if file_version is None:
        raise ConfigurationError(f"{file_pth} has no version stamp")
    if version.parse(file_version) > version.parse(OPM_VERSION):
        raise ConfigurationError(f"{file_pth} was written by version "
                                 f"{file_version}, newer than "
                                 f"{OPM_VERSION}")
    doc.sync_to_restore()
    logger.info(f"opened {file_pth}, version {file_version}")
    return doc
