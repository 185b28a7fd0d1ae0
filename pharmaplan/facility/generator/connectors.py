"""
connectors.py - Door connector synthesis v1.0

Facility Layout Engine
Derives doors between projected shapes that are related and close enough
to warrant a direct connection.
"""

from typing import Dict, FrozenSet, List, Optional, Sequence, Set, Tuple
import logging
import math
import uuid

from pharmaplan.bootstrap.config import LayoutConfig
from pharmaplan.facility.schema.cleanroom import requires_airlock
from pharmaplan.facility.schema.layout import (
    ConnectorType,
    DoorConnection,
    DoorEndpoint,
    DoorFlowType,
    GeneratedShape,
)
from pharmaplan.facility.schema.room import FlowDirection, RoomRelationship

__all__ = ['ConnectorSynthesizer']

logger = logging.getLogger(__name__)


def _endpoint(shape: GeneratedShape) -> DoorEndpoint:
    cx, cy = shape.center
    return DoorEndpoint(shape_id=shape.shape_id, x=cx, y=cy)


class ConnectorSynthesizer:
    """
    Creates door connections from relationships.

    A door is emitted for each non-prohibited relationship whose rooms are
    within proximity_factor x their combined width (centre to centre).
    Only one door is kept per room pair and flow type, the one licensed by
    the highest-priority relationship. Pairs with any prohibited-near
    relationship never get a door.
    """

    def __init__(self, config: Optional[LayoutConfig] = None):
        self.config = config or LayoutConfig()

    def connector_type(self, a: GeneratedShape, b: GeneratedShape) -> ConnectorType:
        if a.is_airlock or b.is_airlock:
            return ConnectorType.AIRLOCK
        if requires_airlock(a.cleanroom_class, b.cleanroom_class, self.config.airlock_gap_threshold):
            return ConnectorType.AIRLOCK
        return ConnectorType.STANDARD

    def within_reach(self, a: GeneratedShape, b: GeneratedShape) -> bool:
        (ax, ay), (bx, by) = a.center, b.center
        distance = math.hypot(bx - ax, by - ay)
        return distance <= (a.width + b.width) * self.config.proximity_factor

    def synthesize(
        self,
        shapes: Sequence[GeneratedShape],
        relationships: Sequence[RoomRelationship],
    ) -> List[DoorConnection]:
        """
        Build door connections.

        Args:
            shapes: Projected shapes
            relationships: Relationships after airlock rerouting

        Returns:
            Door connections
        """
        by_room: Dict[str, GeneratedShape] = {s.room_id: s for s in shapes}
        prohibited_pairs: Set[FrozenSet[str]] = {
            frozenset((r.from_room_id, r.to_room_id))
            for r in relationships if r.is_prohibited
        }

        doors: List[DoorConnection] = []
        seen: Set[Tuple[FrozenSet[str], DoorFlowType]] = set()
        skipped = 0

        for rel in sorted(relationships, key=lambda r: -r.priority):
            if rel.is_prohibited:
                continue
            source, target = by_room.get(rel.from_room_id), by_room.get(rel.to_room_id)
            if source is None or target is None:
                continue
            pair = frozenset((rel.from_room_id, rel.to_room_id))
            if pair in prohibited_pairs:
                continue

            flow_type = DoorFlowType.for_relationship(rel.type)
            if (pair, flow_type) in seen:
                continue

            if not self.within_reach(source, target):
                skipped += 1
                continue

            seen.add((pair, flow_type))
            doors.append(DoorConnection(
                connection_id=f"door-{uuid.uuid4().hex[:8]}",
                from_endpoint=_endpoint(source),
                to_endpoint=_endpoint(target),
                flow_type=flow_type,
                flow_direction=rel.flow_direction or FlowDirection.BIDIRECTIONAL,
                connector_type=self.connector_type(source, target),
                relationship_type=rel.type,
                priority=rel.priority,
                reason=rel.reason,
            ))

        logger.info(f"Created {len(doors)} door connections ({skipped} pairs too far apart)")
        return doors
