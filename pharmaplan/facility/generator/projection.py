"""
projection.py - Coordinate projection v1.0

Facility Layout Engine
Maps placed room nodes (metre-space centres) onto the output canvas. The
projected set is translated so its bounding box starts exactly at the
canvas margin on both axes.
"""

from typing import List, Optional, Sequence
import logging

from pharmaplan.bootstrap.config import LayoutConfig
from pharmaplan.facility.schema.cleanroom import CleanroomClass, cleanroom_color
from pharmaplan.facility.schema.layout import GeneratedShape, PressureRegime
from pharmaplan.facility.schema.room import RoomNode

__all__ = ['CoordinateProjector']

logger = logging.getLogger(__name__)

_POSITIVE_PRESSURE = {CleanroomClass.A, CleanroomClass.B, CleanroomClass.C}


class CoordinateProjector:
    """Projects room nodes into pixel-space shapes."""

    def __init__(self, config: Optional[LayoutConfig] = None):
        self.config = config or LayoutConfig()

    def project(self, nodes: Sequence[RoomNode]) -> List[GeneratedShape]:
        """
        Project nodes to shapes.

        Shape `x`/`y` is the top-left corner: (left - min_left) * scale + margin,
        so the minimum projected x and y equal the margin.
        """
        if not nodes:
            return []

        scale = self.config.pixels_per_meter
        margin = self.config.canvas_margin
        lefts = [n.x - n.width / 2 for n in nodes]
        tops = [n.y - n.height / 2 for n in nodes]
        min_left, min_top = min(lefts), min(tops)

        shapes = [
            self._shape(node, (left - min_left) * scale + margin, (top - min_top) * scale + margin)
            for node, left, top in zip(nodes, lefts, tops)
        ]
        logger.debug(f"Projected {len(shapes)} shapes at {scale}px/m")
        return shapes

    def _shape(self, node: RoomNode, x: float, y: float) -> GeneratedShape:
        scale = self.config.pixels_per_meter
        pressure = (
            PressureRegime.POSITIVE
            if node.cleanroom_class in _POSITIVE_PRESSURE
            else PressureRegime.NEUTRAL
        )
        return GeneratedShape(
            shape_id=f"shape-{node.room_id}",
            room_id=node.room_id,
            name=node.name,
            room_type=node.room_type,
            category=node.category,
            cleanroom_class=node.cleanroom_class,
            x=x,
            y=y,
            width=node.width * scale,
            height=node.height * scale,
            width_m=node.width,
            height_m=node.height,
            area=node.area,
            shape_type=node.shape_type,
            is_airlock=node.is_airlock,
            buffer_for=node.buffer_for,
            fill_color=cleanroom_color(node.cleanroom_class),
            border_width=3 if node.is_airlock else 2,
            pressure_regime=pressure,
        )
