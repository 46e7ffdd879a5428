from __future__ import annotations

from typing import List, TYPE_CHECKING

from gradientgenerator.layout.components import Component
from gradientgenerator.utils import compute_index_factor

if TYPE_CHECKING:
    from gradientgenerator.model.mesh import Mesh, Quad


class Layer:
    """
    Junction row of one layer.

    A row of `n_inlets` inlet nodes and `n_inlets + 1` outlet nodes (squares of
    width w) lies on one horizontal line, alternating outlet/inlet from the
    left. Neighbouring nodes are `l_channel` apart and joined by a connecting
    channel, so the layer has 2 * n_inlets channels.
    """

    def __init__(self, n_inlets: int, w: float, l_channel: float) -> None:
        self.n_inlets = n_inlets
        self.n_outlets = n_inlets + 1
        self.n_channels = 2 * n_inlets
        self.w = w
        self.l_channel = l_channel
        self.x = 0.0
        self.y = 0.0

        self.inlet_nodes: List[Quad] = []
        self.outlet_nodes: List[Quad] = []
        self.channels: List[Quad] = []

    @property
    def quads(self) -> List[Quad]:
        return self.inlet_nodes + self.outlet_nodes + self.channels

    def create(self, mesh: Mesh) -> None:
        for i in range(self.n_inlets):
            x = self.x + compute_index_factor(i, self.n_inlets) * 2 * self.l_channel
            self.inlet_nodes.append(mesh.add_square(x, self.y, self.w, tag=Component.NODE))

        for i in range(self.n_outlets):
            x = self.x + compute_index_factor(i, self.n_outlets) * 2 * self.l_channel
            self.outlet_nodes.append(mesh.add_square(x, self.y, self.w, tag=Component.NODE))

        i_inlet = 0
        i_outlet = 0
        for i in range(self.n_channels):
            if i % 2 == 0:
                left = self.outlet_nodes[i_outlet]
                right = self.inlet_nodes[i_inlet]
                i_outlet += 1
            else:
                left = self.inlet_nodes[i_inlet]
                right = self.outlet_nodes[i_outlet]
                i_inlet += 1
            # reuse the facing node edges, the channel shares their vertices
            self.channels.append(mesh.add_quad_between_edges(left.e1, right.e3, tag=Component.CONNECTION))
