from __future__ import annotations

from typing import List, TYPE_CHECKING

from gradientgenerator.layout.components import Component

if TYPE_CHECKING:
    from gradientgenerator.model.mesh import Mesh, Quad


class Inlet:
    """Straight vertical inlet channel of width `w` and length `l`, centred at (x, y)."""

    def __init__(self, w: float, l: float) -> None:
        self.w = w
        self.l = l
        self.x = 0.0
        self.y = 0.0
        self.quads: List[Quad] = []

    def create(self, mesh: Mesh) -> None:
        self.quads = [mesh.add_rectangle(self.x, self.y, self.w, self.l, tag=Component.INLET)]
