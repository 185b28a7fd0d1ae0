"""
room.py - Room and relationship schema v1.0

Facility Layout Engine
Defines room requirements, room nodes and the typed pairwise relationships
that drive placement, airlock insertion and connector synthesis.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple
from enum import Enum
import uuid

from pharmaplan.facility.schema.cleanroom import CleanroomClass, RoomCategory

__all__ = [
    'RelationshipType',
    'FlowType',
    'FlowDirection',
    'CapacityHints',
    'RoomRequirement',
    'RoomNode',
    'RoomRelationship',
    'new_room_id',
]


# =============================================================================
# ENUMS
# =============================================================================

class RelationshipType(Enum):
    """Relationship types consumed from the relationship store."""

    MATERIAL_FLOW = "MATERIAL_FLOW"
    PERSONNEL_FLOW = "PERSONNEL_FLOW"
    REQUIRES_ACCESS = "REQUIRES_ACCESS"
    PROHIBITED_NEAR = "PROHIBITED_NEAR"

    @property
    def is_prohibited(self) -> bool:
        return self is RelationshipType.PROHIBITED_NEAR


class FlowType(Enum):
    """What moves along a flow relationship."""

    RAW_MATERIAL = "raw_material"
    FINISHED_PRODUCT = "finished_product"
    WASTE = "waste"
    PERSONNEL = "personnel"
    EQUIPMENT = "equipment"


class FlowDirection(Enum):
    BIDIRECTIONAL = "bidirectional"
    UNIDIRECTIONAL = "unidirectional"


def new_room_id() -> str:
    return f"ROOM-{uuid.uuid4().hex[:8].upper()}"


# =============================================================================
# REQUIREMENTS
# =============================================================================

@dataclass(frozen=True)
class CapacityHints:
    """
    Production capacity used to scale room areas.

    Attributes:
        batch_size: Batch size in litres
        throughput: Units per day
    """

    batch_size: Optional[float] = None
    throughput: Optional[float] = None

    def merged_with(self, fallback: Optional["CapacityHints"]) -> "CapacityHints":
        """Fill unset values from another hint set."""
        if fallback is None:
            return self
        return CapacityHints(
            batch_size=self.batch_size if self.batch_size is not None else fallback.batch_size,
            throughput=self.throughput if self.throughput is not None else fallback.throughput,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"batch_size": self.batch_size, "throughput": self.throughput}


@dataclass(frozen=True)
class RoomRequirement:
    """A single required room type with optional capacity hints."""

    name: str
    capacity: CapacityHints = field(default_factory=CapacityHints)


# =============================================================================
# ROOM NODE
# =============================================================================

@dataclass(frozen=True)
class RoomNode:
    """
    A sized room ready for (or finished with) placement.

    Dimensions are metres and fixed at creation. Positions are room centres
    in simulation space; a placed node is produced with `with_position`.

    Attributes:
        room_id: Generated identifier
        name: Display name (canonical room type when matched)
        room_type: Key used for relationship store lookups
        category: Functional category
        cleanroom_class: Cleanliness grade, None for unclassified rooms
        width, height, area: Footprint in m / m²
        x, y: Centre position in metres
        shape_type: Preferred outline from the reference table
        matched: Whether the name resolved against the reference table
        is_airlock: Whether the engine inserted this room as a buffer
        buffer_for: Room ids an inserted airlock sits between
    """

    room_id: str
    name: str
    room_type: str
    category: RoomCategory
    width: float
    height: float
    area: float
    cleanroom_class: Optional[CleanroomClass] = None
    x: float = 0.0
    y: float = 0.0
    shape_type: str = "rectangle"
    matched: bool = True
    is_airlock: bool = False
    buffer_for: Tuple[str, ...] = ()

    def __post_init__(self):
        if self.area <= 0 or self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Room '{self.name}' must have positive dimensions "
                f"(width={self.width}, height={self.height}, area={self.area})"
            )

    def with_position(self, x: float, y: float) -> "RoomNode":
        return replace(self, x=float(x), y=float(y))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "room_id": self.room_id,
            "name": self.name,
            "room_type": self.room_type,
            "category": self.category.value,
            "cleanroom_class": self.cleanroom_class.value if self.cleanroom_class else None,
            "width": self.width,
            "height": self.height,
            "area": self.area,
            "x": self.x,
            "y": self.y,
            "shape_type": self.shape_type,
            "matched": self.matched,
            "is_airlock": self.is_airlock,
            "buffer_for": list(self.buffer_for),
        }


# =============================================================================
# RELATIONSHIP
# =============================================================================

@dataclass(frozen=True)
class RoomRelationship:
    """
    A directed, typed relationship between two room nodes.

    Attributes:
        from_room_id: Source room
        to_room_id: Target room
        type: Relationship type
        priority: 1 (weak) to 10 (strong)
        flow_type: What flows, for flow relationships
        flow_direction: Uni/bidirectional flow
        reason: Rationale supplied by the store
    """

    from_room_id: str
    to_room_id: str
    type: RelationshipType
    priority: int = 5
    flow_type: Optional[FlowType] = None
    flow_direction: Optional[FlowDirection] = None
    reason: Optional[str] = None

    @property
    def is_prohibited(self) -> bool:
        return self.type.is_prohibited

    def connects(self, room_a: str, room_b: str) -> bool:
        """Whether this relationship joins the two rooms in either direction."""
        return {self.from_room_id, self.to_room_id} == {room_a, room_b}

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "from_room_id": self.from_room_id,
            "to_room_id": self.to_room_id,
            "type": self.type.value,
            "priority": self.priority,
            "flow_type": self.flow_type.value if self.flow_type else None,
            "flow_direction": self.flow_direction.value if self.flow_direction else None,
            "reason": self.reason,
        }
