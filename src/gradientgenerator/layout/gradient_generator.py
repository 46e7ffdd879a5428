"""
Network Geometry Builder
========================
Places inlets, layers, meanders and outlets in device coordinates and
stitches their shared corners.

Coordinates: x to the right, y upwards. The top of the longest inlet lies on
y = 0; the layers follow downwards, each one meander height below the
previous. Horizontal positions use the index factor of the component inside
its row times 2 * l_connection.
"""
from __future__ import annotations

import logging
from typing import List, Sequence, TYPE_CHECKING

from gradientgenerator.config import NUMBER_OF_INLETS
from gradientgenerator.layout.inlet import Inlet
from gradientgenerator.layout.layer import Layer
from gradientgenerator.layout.meander import Meander
from gradientgenerator.layout.outlet import Outlet
from gradientgenerator.model.mesh import Mesh
from gradientgenerator.utils import compute_index_factor

if TYPE_CHECKING:
    from gradientgenerator.model.mesh import Quad
    from gradientgenerator.solvers.meander_group import MeanderDimensions

logger = logging.getLogger(__name__)


class GradientGeneratorGeometry:
    """
    Geometry of the whole device.

    Args:
        w: Channel width [m].
        l_connection: Length of the connecting channels [m].
        inlet_lengths: Length of both inlets [m].
        meander_groups: Sized meanders, one list per layer.
        outlet_lengths: Length of every straight outlet [m].
        straight_outlets: False builds the off-centre outlets as angular outlets.
    """

    def __init__(
        self,
        w: float,
        l_connection: float,
        inlet_lengths: Sequence[float],
        meander_groups: Sequence[Sequence[MeanderDimensions]],
        outlet_lengths: Sequence[float],
        straight_outlets: bool = True,
    ) -> None:
        if len(inlet_lengths) != NUMBER_OF_INLETS:
            raise ValueError(f"Expected {NUMBER_OF_INLETS} inlets, got {len(inlet_lengths)}.")
        if len(meander_groups) != len(outlet_lengths) - 2:
            raise ValueError(
                f"{len(outlet_lengths)} outlets need {len(outlet_lengths) - 2} meander layers, "
                f"got {len(meander_groups)}."
            )

        self.w = w
        self.l_connection = l_connection
        self.n_inlets = NUMBER_OF_INLETS
        self.n_outlets = len(outlet_lengths)
        self.n_layers = self.n_outlets - 2
        self.x = 0.0
        self.y = 0.0

        self.mesh = Mesh()
        self.inlets: List[Inlet] = [Inlet(w, l) for l in inlet_lengths]
        self.layers: List[Layer] = [Layer(k + 2, w, l_connection) for k in range(self.n_layers)]
        self.meanders: List[List[Meander]] = [
            [Meander(dimensions) for dimensions in group] for group in meander_groups
        ]
        self.outlets: List[Outlet] = [Outlet(w, l) for l in outlet_lengths]
        if not straight_outlets:
            for i, outlet in enumerate(self.outlets):
                outlet.set_angular(i, self.n_outlets, l_connection)

    @property
    def quads(self) -> List[Quad]:
        return self.mesh.quads

    def create(self) -> Mesh:
        """Build and stitch all components, return the finished mesh."""
        x = self.x
        y = self.y

        l_inlet_max = max(inlet.l for inlet in self.inlets)
        for i, inlet in enumerate(self.inlets):
            inlet.x = x + compute_index_factor(i, self.n_inlets) * 2 * self.l_connection
            inlet.y = y - l_inlet_max + inlet.l / 2
            inlet.create(self.mesh)

        y -= l_inlet_max + self.w / 2
        for k, layer in enumerate(self.layers):
            layer.x = x
            layer.y = y
            layer.create(self.mesh)

            group = self.meanders[k]
            for i, meander in enumerate(group):
                meander.x = x + compute_index_factor(i, len(group)) * 2 * self.l_connection
                meander.y = y - meander.h_meander / 2
                meander.create(self.mesh)
            y -= group[0].h_meander

        for i, outlet in enumerate(self.outlets):
            outlet.x = x + compute_index_factor(i, self.n_outlets) * 2 * self.l_connection
            outlet.y = y
            outlet.create(self.mesh)

        self.merge_points()
        logger.info(f"Mesh created: {len(self.mesh.quads)} quads, {len(self.mesh.used_points())} vertices")
        return self.mesh

    def merge_points(self) -> None:
        """Re-point the corners of adjacent components to one shared vertex."""
        merge = self.mesh.merge
        for k, layer in enumerate(self.layers):
            for i, node in enumerate(layer.inlet_nodes):
                top = node.e2
                # bottom corners of the upstream channel onto the node's top edge
                upstream = self.inlets[i].quads[0] if k == 0 else self.meanders[k - 1][i].outlet[0]
                merge(upstream, 1, top.start)
                merge(upstream, 0, top.end)

            for i, node in enumerate(layer.outlet_nodes):
                bottom = node.e0
                entry = self.meanders[k][i].inlet[0]
                merge(entry, 3, bottom.start)
                merge(entry, 2, bottom.end)

        for i, meander in enumerate(self.meanders[-1]):
            top = self.outlets[i].quads[0].e2
            merge(meander.outlet[0], 1, top.start)
            merge(meander.outlet[0], 0, top.end)
