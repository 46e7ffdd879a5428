"""
Serpentine channel geometry.

The meander is centred at (x, y) inside its bounding box w_meander x
h_meander. From the top it consists of

    - the inlet: vertical run l0, a 90° arc to the left, half run l2,
    - n_arcs 180° turns (left, right, left, ...) joined by full runs l1,
    - the outlet: half run l2, a 90° arc down, vertical run l0.

The outlet leaves to the right when n_arcs is even, to the left otherwise.
Every 180° turn is made of two 90° arc quads.
"""
from __future__ import annotations

from math import sqrt
from typing import List, TYPE_CHECKING

from gradientgenerator.layout.components import Component

if TYPE_CHECKING:
    from gradientgenerator.model.mesh import Mesh, Quad
    from gradientgenerator.solvers.meander_group import MeanderDimensions

SQRT2 = sqrt(2)


class Meander:
    def __init__(self, dimensions: MeanderDimensions) -> None:
        self.w = dimensions.w
        self.radius = dimensions.radius
        self.w_meander = dimensions.w_meander
        self.h_meander = dimensions.h_meander
        self.n_arcs = dimensions.n_arcs
        self.x = 0.0
        self.y = 0.0

        self.l0 = dimensions.l0
        self.l1 = dimensions.l1
        self.l2 = dimensions.l2

        self.inlet: List[Quad] = []
        self.outlet: List[Quad] = []
        self.straight_channels: List[Quad] = []
        self.left_arcs: List[Quad] = []
        self.right_arcs: List[Quad] = []

    @property
    def quads(self) -> List[Quad]:
        return self.inlet + self.outlet + self.straight_channels + self.left_arcs + self.right_arcs

    @property
    def r_min(self) -> float:
        return self.radius - self.w / 2

    @property
    def r_max(self) -> float:
        return self.radius + self.w / 2

    def create(self, mesh: Mesh) -> None:
        self._create_inlet(mesh)
        self._create_outlet(mesh, from_right=self.n_arcs % 2 == 0)
        self._create_straight_channels(mesh)
        self._create_arcs(mesh)

    def _create_inlet(self, mesh: Mesh) -> None:
        top = self.y + self.h_meander / 2

        inlet0 = mesh.add_rectangle(self.x, top - self.l0 / 2, self.w, self.l0, tag=Component.MEANDER)
        inlet2 = mesh.add_rectangle(
            self.x - self.radius - self.l2 / 2, top - self.l0 - self.radius, self.l2, self.w, tag=Component.MEANDER
        )

        xc = self.x - self.radius
        yc = top - self.l0
        inlet1 = mesh.add_arc_quad(
            inlet0.e0.end,
            inlet0.e0.start,
            mesh.add_point(xc + self.r_min / SQRT2, yc - self.r_min / SQRT2),
            inlet2.e1.end,
            inlet2.e1.start,
            mesh.add_point(xc + self.r_max / SQRT2, yc - self.r_max / SQRT2),
            tag=Component.MEANDER,
        )
        self.inlet = [inlet0, inlet1, inlet2]

    def _create_outlet(self, mesh: Mesh, from_right: bool) -> None:
        bottom = self.y - self.h_meander / 2
        sign = 1 if from_right else -1

        outlet0 = mesh.add_rectangle(self.x, bottom + self.l0 / 2, self.w, self.l0, tag=Component.MEANDER)
        outlet2 = mesh.add_rectangle(
            self.x + sign * (self.radius + self.l2 / 2), bottom + self.l0 + self.radius, self.l2, self.w,
            tag=Component.MEANDER,
        )

        xc = self.x + sign * self.radius
        yc = bottom + self.l0
        if from_right:
            p2, p3 = outlet2.e3.end, outlet2.e3.start
            interpolation_12 = mesh.add_point(xc - self.r_min / SQRT2, yc + self.r_min / SQRT2)
            interpolation_30 = mesh.add_point(xc - self.r_max / SQRT2, yc + self.r_max / SQRT2)
        else:
            p2, p3 = outlet2.e1.end, outlet2.e1.start
            interpolation_12 = mesh.add_point(xc + self.r_max / SQRT2, yc + self.r_max / SQRT2)
            interpolation_30 = mesh.add_point(xc + self.r_min / SQRT2, yc + self.r_min / SQRT2)

        outlet1 = mesh.add_arc_quad(
            outlet0.e2.end, outlet0.e2.start, interpolation_12, p2, p3, interpolation_30, tag=Component.MEANDER
        )
        self.outlet = [outlet0, outlet1, outlet2]

    def _create_straight_channels(self, mesh: Mesh) -> None:
        top = self.y + self.h_meander / 2
        for i in range(1, self.n_arcs):
            y = top - self.l0 - self.radius * (2 * i + 1)
            self.straight_channels.append(mesh.add_rectangle(self.x, y, self.l1, self.w, tag=Component.MEANDER))

    def _create_arcs(self, mesh: Mesh) -> None:
        for i in range(self.n_arcs):
            top = self.inlet[2] if i == 0 else self.straight_channels[i - 1]
            bottom = self.outlet[2] if i == self.n_arcs - 1 else self.straight_channels[i]
            if i % 2 == 0:
                self._create_left_arc(mesh, top, bottom)
            else:
                self._create_right_arc(mesh, top, bottom)

    def _create_left_arc(self, mesh: Mesh, top: Quad, bottom: Quad) -> None:
        # corners 2/3 of both halves are the left ends of the runs
        p2_arc0, p3_arc0 = top.e3.end, top.e3.start
        p2_arc1, p3_arc1 = bottom.e3.end, bottom.e3.start

        xc = p2_arc0.x
        yc = (p2_arc0.y + p3_arc1.y) / 2
        outer = mesh.add_point(xc - self.r_max, yc)
        inner = mesh.add_point(xc - self.r_min, yc)

        self.left_arcs.append(mesh.add_arc_quad(
            outer, inner,
            mesh.add_point(xc - self.r_min / SQRT2, yc + self.r_min / SQRT2),
            p2_arc0, p3_arc0,
            mesh.add_point(xc - self.r_max / SQRT2, yc + self.r_max / SQRT2),
            tag=Component.MEANDER,
        ))
        self.left_arcs.append(mesh.add_arc_quad(
            inner, outer,
            mesh.add_point(xc - self.r_max / SQRT2, yc - self.r_max / SQRT2),
            p2_arc1, p3_arc1,
            mesh.add_point(xc - self.r_min / SQRT2, yc - self.r_min / SQRT2),
            tag=Component.MEANDER,
        ))

    def _create_right_arc(self, mesh: Mesh, top: Quad, bottom: Quad) -> None:
        p2_arc0, p3_arc0 = top.e1.end, top.e1.start
        p2_arc1, p3_arc1 = bottom.e1.end, bottom.e1.start

        xc = p2_arc0.x
        yc = (p3_arc0.y + p2_arc1.y) / 2
        inner = mesh.add_point(xc + self.r_min, yc)
        outer = mesh.add_point(xc + self.r_max, yc)

        self.right_arcs.append(mesh.add_arc_quad(
            inner, outer,
            mesh.add_point(xc + self.r_max / SQRT2, yc + self.r_max / SQRT2),
            p2_arc0, p3_arc0,
            mesh.add_point(xc + self.r_min / SQRT2, yc + self.r_min / SQRT2),
            tag=Component.MEANDER,
        ))
        self.right_arcs.append(mesh.add_arc_quad(
            outer, inner,
            mesh.add_point(xc + self.r_min / SQRT2, yc - self.r_min / SQRT2),
            p2_arc1, p3_arc1,
            mesh.add_point(xc + self.r_max / SQRT2, yc - self.r_max / SQRT2),
            tag=Component.MEANDER,
        ))
