"""
sizing.py - Room size resolution v1.0

Facility Layout Engine
Resolves room-type names against the reference size table and turns them
into sized room nodes. Unknown names never fail a request: they get the
generic default footprint and a warning.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import logging

from pharmaplan.facility.schema.room import CapacityHints, RoomNode, RoomRequirement, new_room_id
from pharmaplan.facility.schema.room_sizes import (
    DEFAULT_ROOM_AREA,
    DEFAULT_ROOM_CATEGORY,
    DEFAULT_ROOM_HEIGHT,
    DEFAULT_ROOM_WIDTH,
    ROOM_SIZE_TABLE,
    RoomSizeRecord,
    find_room_size,
    scale_room_dimensions,
)

__all__ = [
    'RoomSizeResolver',
    'SizingResult',
]

logger = logging.getLogger(__name__)


@dataclass
class SizingResult:
    """Sized nodes plus the names that fell back to the default size."""

    nodes: List[RoomNode] = field(default_factory=list)
    unmatched: List[str] = field(default_factory=list)


class RoomSizeResolver:
    """
    Sizes rooms from the reference table.

    Matched rooms take the canonical room-type name, category, grade and
    shape from the table, with area scaled by capacity.
    """

    def __init__(self, table: Tuple[RoomSizeRecord, ...] = ROOM_SIZE_TABLE):
        self._table = table

    def lookup(self, name: str) -> Optional[RoomSizeRecord]:
        return find_room_size(name, self._table)

    def resolve(
        self,
        requirement: RoomRequirement,
        default_capacity: Optional[CapacityHints] = None,
    ) -> RoomNode:
        """
        Build a sized room node for one requirement.

        Args:
            requirement: Room name with optional capacity hints
            default_capacity: Request-wide hints filling unset values

        Returns:
            RoomNode with placeholder position
        """
        capacity = requirement.capacity.merged_with(default_capacity)
        record = self.lookup(requirement.name)

        if record is None:
            logger.warning(
                f"No size data for room '{requirement.name}', using default "
                f"{DEFAULT_ROOM_WIDTH}m x {DEFAULT_ROOM_HEIGHT}m"
            )
            return RoomNode(
                room_id=new_room_id(),
                name=requirement.name,
                room_type=requirement.name,
                category=DEFAULT_ROOM_CATEGORY,
                width=DEFAULT_ROOM_WIDTH,
                height=DEFAULT_ROOM_HEIGHT,
                area=DEFAULT_ROOM_AREA,
                matched=False,
            )

        dims = scale_room_dimensions(record, capacity.batch_size, capacity.throughput)
        logger.debug(
            f"Sized '{requirement.name}' as {record.room_type}: "
            f"{dims.width}m x {dims.height}m ({dims.area}m²)"
        )
        return RoomNode(
            room_id=new_room_id(),
            name=record.room_type,
            room_type=record.room_type,
            category=record.category,
            cleanroom_class=record.cleanroom_class,
            width=dims.width,
            height=dims.height,
            area=dims.area,
            shape_type=record.shape_type,
        )

    def resolve_all(
        self,
        requirements: List[RoomRequirement],
        default_capacity: Optional[CapacityHints] = None,
    ) -> SizingResult:
        result = SizingResult()
        for requirement in requirements:
            node = self.resolve(requirement, default_capacity)
            if not node.matched:
                result.unmatched.append(requirement.name)
            result.nodes.append(node)

        logger.info(
            f"Sized {len(result.nodes)} rooms "
            f"({len(result.unmatched)} with default dimensions)"
        )
        return result
