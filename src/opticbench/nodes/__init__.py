""" Package providing the optical nodes and the scene graph

    The :mod:`~.nodes` subpackage provides the node model of an optical
    bench. These include:

        - Typed, validated node parameters, :mod:`~.properties`
        - Input and output ports with apertures and coatings, :mod:`~.ports`
        - The base optical node, :mod:`~.node`
        - Light sources, :mod:`~.source`
        - Lenses, mirrors, gratings and other optical elements,
          :mod:`~.elements` and :mod:`~.beamsplitter`
        - Meters, detectors and the wavefront monitor, :mod:`~.detectors`
        - Aliases of other nodes, :mod:`~.reference`
        - Node groups and the analysis engine, :mod:`~.group`

    A group's node tree is rendered using :class:`BenchNode`.
"""

from anytree import Node


class BenchNode(Node):
    """ anytree Node carrying an optical node as `id` """

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r})"
