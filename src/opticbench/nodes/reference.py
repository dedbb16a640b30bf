#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2024 Michael J. Hayford
""" Nodes referring to another node of the graph

    A :class:`NodeReference` stands for a second pass of light through a node
    that is already in the graph, e.g. a lens in a double pass setup. It has
    the referenced node's ports and physics, but its own `inverted` flag, and
    it never places the referenced node: the referenced node has to be placed
    before the reference is analyzed.

    The reference holds the node object; a saved model stores its uuid and
    the link is restored by :meth:`NodeReference.sync_to_restore`.

.. Created on Tue Mar 26 16:27:41 2024

.. codeauthor: Michael J. Hayford
"""
import logging

from anytree.search import find_by_attr

from opticbench.error import AnalysisError, ConfigurationError
from .node import OpticNode, NodeState

logger = logging.getLogger(__name__)


class NodeReference(OpticNode):
    default_name = 'reference'

    def __init__(self, name=None, ref_node=None):
        super().__init__(name, inputs=(), outputs=())
        self.ref_id = None
        self.ref = None
        if ref_node is not None:
            self.assign_reference(ref_node)

    def __json_encode__(self):
        attrs = super().__json_encode__()
        del attrs['ref']
        return attrs

    def transient_attrs(self):
        return super().transient_attrs() + ['ports']

    def sync_to_restore(self, root):
        super().sync_to_restore(root)
        tree_node = find_by_attr(root.part_tree(), self.ref_id, name='uuid')
        if tree_node is None:
            raise ConfigurationError(f"reference '{self.name}': node "
                                     f"{self.ref_id} not found")
        self.assign_reference(tree_node.id)

    def assign_reference(self, ref_node):
        if isinstance(ref_node, NodeReference):
            raise ConfigurationError("a reference can't refer to another "
                                     "reference")
        self.ref = ref_node
        self.ref_id = ref_node.uuid
        self.ports = ref_node.ports

    def listobj_str(self):
        o_str = super().listobj_str()
        ref_name = self.ref.name if self.ref is not None else None
        o_str += f"refers to: {ref_name}  ({self.ref_id})\n"
        return o_str

    def reset(self):
        self.state = NodeState.UNRESOLVED

    def analyze(self, incoming, ctx, inverted=False):
        if self.ref is None:
            raise AnalysisError(f"reference '{self.name}' has no node "
                                "assigned")
        if not ctx.is_energy and self.ref.isometry is None:
            raise AnalysisError(f"referenced node '{self.ref.name}' is not "
                                "placed yet")
        return self.ref.analyze(incoming, ctx, inverted)
