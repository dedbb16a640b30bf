#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2024 Michael J. Hayford
""" Node groups: the scene graph and its analysis engine

    A :class:`NodeGroup` owns a set of nodes and the edges connecting an
    output port of one node to an input port of another, at a distance along
    the optical axis. Each port takes part in at most one edge and the graph
    must be acyclic. Internal ports can be mapped to external port names,
    which lets a group act as a node inside another group.

    The analysis engine is a recursive interpreter over the group tree:

        - the nodes of a group are visited in a stable topological order,
          insertion order breaking ties
        - a node is analyzed once the light of all its upstream nodes has
          been delivered to it, then its outputs are passed along the edges
          or out of the group's mapped ports
        - the engine carries a direction flag. It flips at every inverted
          group, and for every odd pass of a ghost focus analysis; edges
          are then walked from target to source and every node is analyzed
          with its effective inversion, `node.inverted ^ flag`

    In a ghost focus analysis, the light a node sends back out of the ports
    it arrived on is held back as pending reflections. Each following pass
    runs in the opposite direction and emits the pending light from those
    ports.

.. Created on Wed Mar 27 09:18:40 2024

.. codeauthor: Michael J. Hayford
"""
import heapq
import logging

import attr
from anytree import RenderTree
from anytree.search import find_by_attr

from opticbench.error import OpticBenchError, ConfigurationError, DataError
from opticbench.elem.transform import Isometry
from opticbench.light.lightdata import (LightResult, EnergyData, GeometricData,
                                        GhostFocusData)
from opticbench.light.spectrum import merge_spectra
from opticbench.util.misc_math import is_finite_number
from . import BenchNode
from .node import OpticNode, NodeState
from .ports import OpticPorts

logger = logging.getLogger(__name__)


@attr.s
class Edge:
    """ light path from (src_id, src_port) to (tgt_id, tgt_port) """
    src_id = attr.ib()
    src_port = attr.ib()
    tgt_id = attr.ib()
    tgt_port = attr.ib()
    distance = attr.ib(default=0.0)

    def emitter(self, reversed_=False):
        return ((self.tgt_id, self.tgt_port) if reversed_
                else (self.src_id, self.src_port))

    def receiver(self, reversed_=False):
        return ((self.src_id, self.src_port) if reversed_
                else (self.tgt_id, self.tgt_port))

    def touches(self, node_id, port):
        return ((self.src_id, self.src_port) == (node_id, port) or
                (self.tgt_id, self.tgt_port) == (node_id, port))


class NodeGroup(OpticNode):
    """ container of nodes and edges, usable as a node itself

    Attributes:
        nodes: uuid -> node, in insertion order
        edges: list of :class:`Edge`
        input_map: external input port name -> (node uuid, port name)
        output_map: external output port name -> (node uuid, port name)
        expanded: presentation hint, show the group's content
    """
    default_name = 'group'

    def __init__(self, name=None):
        super().__init__(name, inputs=(), outputs=())
        self.nodes = {}
        self.edges = []
        self.input_map = {}
        self.output_map = {}
        self.expanded = False
        self._ghost_pending = {}

    def transient_attrs(self):
        return super().transient_attrs() + ['ports', '_ghost_pending']

    def sync_to_restore(self, root=None):
        root = self if root is None else root
        super().sync_to_restore(root)
        self._ghost_pending = {}
        self.input_map = {k: tuple(v) for k, v in self.input_map.items()}
        self.output_map = {k: tuple(v) for k, v in self.output_map.items()}
        for node in self.nodes.values():
            node.sync_to_restore(root)
        self._sync_ports()

    def _sync_ports(self):
        """ share the Port objects of the mapped internal ports """
        self.ports = OpticPorts()
        for ext, (nid, port) in self.input_map.items():
            self.ports.inputs[ext] = self.nodes[nid].ports.port(port)
        for ext, (nid, port) in self.output_map.items():
            self.ports.outputs[ext] = self.nodes[nid].ports.port(port)

    def listobj_str(self):
        o_str = f"{type(self).__name__}: {self.name}  ({self.uuid})\n"
        for pre, _, tree_node in RenderTree(self.part_tree()):
            o_str += f"{pre}{tree_node.name} ({type(tree_node.id).__name__})\n"
        for e in self.edges:
            o_str += (f"{self.nodes[e.src_id].name}.{e.src_port} -> "
                      f"{self.nodes[e.tgt_id].name}.{e.tgt_port}   "
                      f"d={e.distance}\n")
        for role, port_map in (('input', self.input_map),
                               ('output', self.output_map)):
            for ext, (nid, port) in port_map.items():
                o_str += (f"{role} {ext}: {self.nodes[nid].name}.{port}\n")
        return o_str

    # --- graph construction
    def node(self, node_or_id):
        """ the group's node given the node or its uuid """
        nid = node_or_id.uuid if isinstance(node_or_id, OpticNode) \
            else node_or_id
        try:
            return self.nodes[nid]
        except KeyError:
            raise ConfigurationError(f"node {node_or_id!r} is not in group "
                                     f"'{self.name}'") from None

    def add_node(self, node):
        """ add node to the group and return its uuid """
        if not isinstance(node, OpticNode):
            raise ConfigurationError(f"not an optical node: {node!r}")
        if node is self:
            raise ConfigurationError("a group can't contain itself")
        if node.uuid in self.nodes:
            raise ConfigurationError(f"node '{node.name}' is already in "
                                     f"group '{self.name}'")
        self.nodes[node.uuid] = node
        return node.uuid

    def remove_node(self, node_or_id):
        """ remove a node with its edges and port mappings """
        node = self.node(node_or_id)
        self.edges = [e for e in self.edges
                      if node.uuid not in (e.src_id, e.tgt_id)]
        for port_map in (self.input_map, self.output_map):
            for ext in [k for k, v in port_map.items() if v[0] == node.uuid]:
                del port_map[ext]
        del self.nodes[node.uuid]
        self._sync_ports()

    def _is_mapped(self, node_id, port):
        return ((node_id, port) in self.input_map.values() or
                (node_id, port) in self.output_map.values())

    def _is_connected(self, node_id, port):
        return any(e.touches(node_id, port) for e in self.edges)

    def connect(self, src, src_port, tgt, tgt_port, distance=0.0):
        """ connect output src_port of src to input tgt_port of tgt

        The graph is unchanged if the connection is rejected.

        Raises:
            ConfigurationError: unknown node or port, wrong port role, port
                already in use, self loop, invalid distance or a cycle
        """
        src_node = self.node(src)
        tgt_node = self.node(tgt)
        if src_node is tgt_node:
            raise ConfigurationError(f"can't connect node '{src_node.name}' "
                                     "to itself")
        self._check_port(src_node, src_port, is_input=False)
        self._check_port(tgt_node, tgt_port, is_input=True)
        if not is_finite_number(distance) or distance < 0.:
            raise ConfigurationError(f"distance must be finite and >= 0, "
                                     f"got {distance!r}")
        for node, port in ((src_node, src_port), (tgt_node, tgt_port)):
            if self._is_connected(node.uuid, port) or \
                    self._is_mapped(node.uuid, port):
                raise ConfigurationError(f"port '{port}' of node "
                                         f"'{node.name}' is already in use")
        edge = Edge(src_node.uuid, src_port, tgt_node.uuid, tgt_port,
                    float(distance))
        self._toposort(self.edges + [edge])
        self.edges.append(edge)
        return edge

    def disconnect(self, node_or_id, port):
        node = self.node(node_or_id)
        n_edges = len(self.edges)
        self.edges = [e for e in self.edges if not e.touches(node.uuid, port)]
        if len(self.edges) == n_edges:
            raise ConfigurationError(f"port '{port}' of node '{node.name}' "
                                     "is not connected")

    def _check_port(self, node, port, is_input):
        names = (node.input_names(node.inverted) if is_input
                 else node.output_names(node.inverted))
        if port not in names:
            if port in node.ports:
                role = 'an input' if is_input else 'an output'
                raise ConfigurationError(f"port '{port}' of node "
                                         f"'{node.name}' is not {role} port")
            raise ConfigurationError(f"node '{node.name}' has no port "
                                     f"'{port}'")

    def map_input_port(self, node_or_id, port, external_name=None):
        self._map_port(node_or_id, port, external_name, is_input=True)

    def map_output_port(self, node_or_id, port, external_name=None):
        self._map_port(node_or_id, port, external_name, is_input=False)

    def _map_port(self, node_or_id, port, external_name, is_input):
        node = self.node(node_or_id)
        self._check_port(node, port, is_input)
        if self._is_mapped(node.uuid, port):
            raise ConfigurationError(f"port '{port}' of node '{node.name}' "
                                     "is already mapped")
        if self._is_connected(node.uuid, port):
            raise ConfigurationError(f"port '{port}' of node '{node.name}' "
                                     "is connected")
        ext = port if external_name is None else external_name
        if ext in self.input_map or ext in self.output_map:
            raise ConfigurationError(f"group '{self.name}' already has a "
                                     f"port '{ext}'")
        port_map = self.input_map if is_input else self.output_map
        port_map[ext] = (node.uuid, port)
        self._sync_ports()

    def unmap_port(self, external_name):
        for port_map in (self.input_map, self.output_map):
            if external_name in port_map:
                del port_map[external_name]
                self._sync_ports()
                return
        raise ConfigurationError(f"group '{self.name}' has no port "
                                 f"'{external_name}'")

    def expand_view(self, expand=True):
        """ presentation hint only, analysis is not affected """
        self.expanded = expand

    # --- tree access
    def part_tree(self, parent=None):
        """ anytree of the group's nodes, recursing into subgroups """
        tree_node = BenchNode(self.name, id=self, uuid=self.uuid,
                              parent=parent)
        for node in self.nodes.values():
            if isinstance(node, NodeGroup):
                node.part_tree(parent=tree_node)
            else:
                BenchNode(node.name, id=node, uuid=node.uuid,
                          parent=tree_node)
        return tree_node

    def find_node(self, uuid):
        """ node with the given uuid in the group tree, or None """
        tree_node = find_by_attr(self.part_tree(), uuid, name='uuid')
        return tree_node.id if tree_node is not None else None

    # --- execution order
    def _toposort(self, edges, reversed_=False):
        """ node ids in a stable topological order

        Raises:
            ConfigurationError: if the edges contain a cycle
        """
        ids = list(self.nodes)
        index = {nid: i for i, nid in enumerate(ids)}
        in_degree = {nid: 0 for nid in ids}
        successors = {nid: [] for nid in ids}
        for e in edges:
            a = e.emitter(reversed_)[0]
            b = e.receiver(reversed_)[0]
            successors[a].append(b)
            in_degree[b] += 1
        ready = [index[nid] for nid in ids if in_degree[nid] == 0]
        heapq.heapify(ready)
        order = []
        while ready:
            nid = ids[heapq.heappop(ready)]
            order.append(nid)
            for b in successors[nid]:
                in_degree[b] -= 1
                if in_degree[b] == 0:
                    heapq.heappush(ready, index[b])
        if len(order) != len(ids):
            raise ConfigurationError(f"group '{self.name}' contains a cycle")
        return order

    def _check_roles(self, reversed_):
        for e in self.edges:
            e_id, e_port = e.emitter(reversed_)
            r_id, r_port = e.receiver(reversed_)
            emitter, receiver = self.nodes[e_id], self.nodes[r_id]
            e_inv = emitter.inverted ^ reversed_
            r_inv = receiver.inverted ^ reversed_
            if e_port not in emitter.output_names(e_inv) or \
                    r_port not in receiver.input_names(r_inv):
                raise ConfigurationError(
                    f"edge {emitter.name}.{e_port} -> {receiver.name}.{r_port}"
                    " doesn't match the port roles of its nodes")
        for node in self.nodes.values():
            if isinstance(node, NodeGroup):
                node._check_roles(node.inverted ^ reversed_)

    def execution_order(self, reversed_=False):
        """ the group's nodes in the order the engine visits them

        Raises:
            ConfigurationError: port roles that don't match the direction
                of light, or a cycle
        """
        self._check_roles(reversed_)
        return [self.nodes[nid] for nid in self._toposort(self.edges,
                                                          reversed_)]

    # --- analysis
    def reset(self):
        super().reset()
        self._ghost_pending = {}
        for node in self.nodes.values():
            node.reset()

    def has_pending(self):
        """ True if reflections wait for the next ghost focus pass """
        return (len(self._ghost_pending) > 0 or
                any(n.has_pending() for n in self.nodes.values()))

    def clear_pending(self):
        self._ghost_pending = {}
        for n in self.nodes.values():
            if isinstance(n, NodeGroup):
                n.clear_pending()

    def _is_unconnected(self, node, inverted, arrive_map):
        ins = node.input_names(inverted)
        if len(ins) == 0:
            return False
        return not any(self._is_connected(node.uuid, p) or
                       (node.uuid, p) in arrive_map.values() for p in ins)

    def analyze(self, incoming, ctx, inverted=False):
        return self._run(incoming, ctx, inverted)

    def _run(self, incoming, ctx, reversed_):
        order = self.execution_order(reversed_)
        arrive_map = self.output_map if reversed_ else self.input_map
        leave_map = self.input_map if reversed_ else self.output_map
        leave_ports = {v: k for k, v in leave_map.items()}
        ghost = ctx.is_ghost_focus
        seeds = {}
        if ghost:
            seeds, self._ghost_pending = self._ghost_pending, {}

        inbox = {nid: LightResult() for nid in self.nodes}
        for ext, data in (incoming or {}).items():
            if ext in arrive_map:
                nid, port = arrive_map[ext]
                deliver(inbox[nid], port, data)
            else:
                ctx.logger.debug(f"group '{self.name}': light at '{ext}' "
                                 "is not mapped, ignored")

        result = LightResult()
        for node in order:
            node.state = NodeState.READY
            eff = node.inverted ^ reversed_
            if ctx.bounce == 0 and self._is_unconnected(node, eff,
                                                        arrive_map):
                ctx.logger.warning(f"node '{node.name}' has no connected "
                                   "input")
            ctx.logger.debug(f"analyzing '{node.name}', inverted={eff}")
            try:
                outgoing = node.analyze(inbox[node.uuid], ctx, eff)
            except OpticBenchError as err:
                err.set_context(node.uuid, node.name)
                raise
            filter_rays(outgoing, ctx)
            if ghost:
                self._exchange_pending(node, outgoing, eff, seeds)
            for port, data in outgoing.items():
                edge = self._edge_from(node.uuid, port, reversed_)
                if edge is not None:
                    r_id, r_port = edge.receiver(reversed_)
                    deliver(inbox[r_id], r_port,
                            along_edge(data, edge.distance))
                elif (node.uuid, port) in leave_ports:
                    deliver(result, leave_ports[(node.uuid, port)], data)
                else:
                    ctx.logger.debug(f"output '{port}' of node "
                                     f"'{node.name}' is not connected, "
                                     "light dropped")
            node.state = NodeState.RESOLVED
        return result

    def _edge_from(self, node_id, port, reversed_):
        for e in self.edges:
            if e.emitter(reversed_) == (node_id, port):
                return e
        return None

    def _exchange_pending(self, node, outgoing, inverted, seeds):
        """ emit the node's pending reflections, hold back new ones """
        for port in node.output_names(inverted):
            pending = seeds.pop((node.uuid, port), None)
            if pending is not None:
                deliver(outgoing, port, pending)
        for port in node.input_names(inverted):
            if port in outgoing:
                self._ghost_pending[(node.uuid, port)] = outgoing.pop(port)

    def analyze_scenery(self, ctx):
        """ run an analysis with this group as the top level scenery

        Returns:
            the light leaving the group's mapped ports; for a ghost focus
            analysis, the list of these results for each pass
        """
        self.reset()
        ctx.logger.info(f"{ctx.mode.value} analysis of '{self.name}'")
        if not ctx.is_ghost_focus:
            result = self._run(LightResult(), ctx, self.inverted)
            ctx.logger.info(f"{ctx.mode.value} analysis finished")
            return result

        results = []
        for k in range(ctx.config.max_bounces + 1):
            ctx.bounce = k
            results.append(self._run(LightResult(), ctx,
                                     self.inverted ^ (k % 2 == 1)))
            if not self.has_pending():
                break
        if self.has_pending():
            ctx.logger.warning(f"ghost focus cut off after "
                               f"{ctx.config.max_bounces} bounces with "
                               "reflections pending")
            self.clear_pending()
        ctx.logger.info(f"ghost focus analysis finished after "
                        f"{len(results)} passes")
        return results


def deliver(light_result, port, data):
    """ add data at port, merging with light already there """
    if port not in light_result:
        light_result[port] = data
        return
    present = light_result[port]
    if isinstance(present, GhostFocusData) and \
            isinstance(data, GhostFocusData):
        present.merge(data)
    elif isinstance(present, GeometricData) and \
            isinstance(data, GeometricData):
        present.bundle.merge(data.bundle)
    elif isinstance(present, EnergyData) and isinstance(data, EnergyData):
        light_result[port] = EnergyData(merge_spectra(present.spectrum,
                                                      data.spectrum))
    else:
        raise DataError(f"port '{port}': can't merge "
                        f"{type(data).__name__} into "
                        f"{type(present).__name__}")


def along_edge(data, distance):
    """ light data with its axis moved distance along the edge """
    if isinstance(data, (GeometricData, GhostFocusData)) and \
            data.axis is not None:
        axis = data.axis.append(Isometry.along_z(distance))
        if isinstance(data, GeometricData):
            return GeometricData(data.bundle, axis)
        return GhostFocusData(data.bundles, axis)
    return data


def filter_rays(light_result, ctx):
    """ drop rays below the energy limit, or beyond the bounce limits """
    if ctx.is_ray_trace:
        cfg = ctx.config
        for data in light_result.values():
            if isinstance(data, GeometricData):
                b = data.bundle
                b.invalidate_by_threshold_energy(cfg.min_energy_per_ray)
                b.filter_by_nr_of_bounces(cfg.max_number_of_bounces)
                b.filter_by_nr_of_refractions(cfg.max_number_of_refractions)
    elif ctx.is_ghost_focus:
        for port in list(light_result):
            data = light_result[port]
            if not isinstance(data, GhostFocusData):
                continue
            for b in data.bundles:
                b.invalidate_by_threshold_energy(ctx.config.min_energy_per_ray)
            data.bundles = [b for b in data.bundles if not b.is_empty()]
            if len(data.bundles) == 0:
                del light_result[port]
