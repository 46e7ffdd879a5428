from __future__ import annotations

from typing import List, TYPE_CHECKING

from gradientgenerator.layout.components import Component, OutletShape
from gradientgenerator.utils import compute_index_factor

if TYPE_CHECKING:
    from gradientgenerator.model.mesh import Mesh, Quad


def compute_angular_outlet_length(w: float, index: int, n_outlets: int, l_connection: float) -> float:
    """
    Centre-line length of an angular outlet.

    The vertical drop h_outlet is the same for every outlet; the horizontal
    run grows with the distance from the centre.
    """
    h_outlet = w * (n_outlets + 1) if n_outlets % 2 == 0 else w * n_outlets
    factor = abs(compute_index_factor(index, n_outlets))
    l1 = 2 * factor * (l_connection - w) - w
    return h_outlet + l1 + w


class Outlet:
    """
    Outlet channel whose top edge is centred at (x, y).

    A straight outlet is one vertical rectangle of length l (at least w).
    An angular outlet drops by l0, runs l1 towards the centre of the device
    and drops again, so that all outlets end on one line with a pitch of 2 w.
    """

    def __init__(self, w: float, l: float) -> None:
        self.w = w
        self.l = max(l, w)
        self.shape = OutletShape.STRAIGHT
        self.index_factor = 0.0
        self.l0 = 0.0
        self.l1 = 0.0
        self.x = 0.0
        self.y = 0.0
        self.quads: List[Quad] = []

    def set_angular(self, index: int, n_outlets: int, l_connection: float) -> None:
        self.index_factor = compute_index_factor(index, n_outlets)
        self.l = compute_angular_outlet_length(self.w, index, n_outlets, l_connection)

        factor = abs(self.index_factor)
        # the outlet in the middle stays straight
        if factor == 0:
            self.shape = OutletShape.STRAIGHT
            return

        self.shape = OutletShape.ANGULAR
        self.l0 = 2 * factor * self.w if n_outlets % 2 == 0 else (2 * factor - 1) * self.w
        self.l1 = 2 * factor * (l_connection - self.w) - self.w

    def create(self, mesh: Mesh) -> None:
        match self.shape:
            case OutletShape.STRAIGHT:
                self.quads = [
                    mesh.add_rectangle(self.x, self.y - self.l / 2, self.w, self.l, tag=Component.OUTLET)
                ]
            case OutletShape.ANGULAR:
                self.quads = self._create_angular(mesh)

    def _create_angular(self, mesh: Mesh) -> List[Quad]:
        w = self.w
        # left outlets run to the right, right outlets to the left
        direction = 1 if self.index_factor < 0 else -1
        x_turn = self.x + direction * (self.l1 + w)
        y_run = self.y - (self.l0 + w / 2)
        y_end = self.y - (self.l - self.l1 - w)

        corner_top = mesh.add_square(self.x, y_run, w, tag=Component.OUTLET)
        corner_bottom = mesh.add_square(x_turn, y_run, w, tag=Component.OUTLET)

        if direction > 0:
            run = mesh.add_quad(
                [corner_top.e1.start, corner_bottom.e3.end, corner_bottom.e3.start, corner_top.e1.end],
                tag=Component.OUTLET,
            )
        else:
            run = mesh.add_quad(
                [corner_bottom.e1.start, corner_top.e3.end, corner_top.e3.start, corner_bottom.e1.end],
                tag=Component.OUTLET,
            )

        drop_top = mesh.add_quad(
            [
                corner_top.e2.end,
                corner_top.e2.start,
                mesh.add_point(self.x + w / 2, self.y),
                mesh.add_point(self.x - w / 2, self.y),
            ],
            tag=Component.OUTLET,
        )
        drop_bottom = mesh.add_quad(
            [
                mesh.add_point(x_turn - w / 2, y_end),
                mesh.add_point(x_turn + w / 2, y_end),
                corner_bottom.e0.end,
                corner_bottom.e0.start,
            ],
            tag=Component.OUTLET,
        )
        # drop_top first: its top edge is stitched to the last meander
        return [drop_top, corner_top, run, corner_bottom, drop_bottom]
