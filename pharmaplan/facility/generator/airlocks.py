"""
airlocks.py - Airlock insertion v1.0

Facility Layout Engine
Inserts buffer rooms between related rooms whose cleanroom grades differ
too much to connect directly, and reroutes the triggering relationships
through the inserted airlock.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple
import logging

from pharmaplan.bootstrap.config import LayoutConfig
from pharmaplan.facility.schema.cleanroom import RoomCategory, higher_class, requires_airlock
from pharmaplan.facility.schema.room import (
    RelationshipType,
    RoomNode,
    RoomRelationship,
    new_room_id,
)
from pharmaplan.facility.schema.room_sizes import find_room_size, scale_room_dimensions

__all__ = [
    'MATERIAL_AIRLOCK',
    'PERSONNEL_AIRLOCK',
    'AirlockResult',
    'airlock_kind',
    'AirlockInserter',
]

logger = logging.getLogger(__name__)

MATERIAL_AIRLOCK = "Material Airlock"
PERSONNEL_AIRLOCK = "Personnel Airlock"

# Used only if the reference table lacks an airlock entry
_FALLBACK_AIRLOCK_SIZE = (3.0, 3.0, 9.0)


@dataclass
class AirlockResult:
    """
    Nodes after insertion and the relationship set used for connectors.

    Attributes:
        nodes: Original nodes followed by inserted airlocks
        airlocks: Inserted airlock nodes
        routed_relationships: Relationships with airlock-triggering ones
            replaced by legs through their airlock
    """

    nodes: List[RoomNode] = field(default_factory=list)
    airlocks: List[RoomNode] = field(default_factory=list)
    routed_relationships: List[RoomRelationship] = field(default_factory=list)


def airlock_kind(relationship_type: RelationshipType) -> str:
    if relationship_type is RelationshipType.MATERIAL_FLOW:
        return MATERIAL_AIRLOCK
    return PERSONNEL_AIRLOCK


class AirlockInserter:
    """Inserts airlocks at grade transitions of placed rooms."""

    def __init__(self, config: Optional[LayoutConfig] = None):
        self.config = config or LayoutConfig()

    def insert(
        self,
        nodes: Sequence[RoomNode],
        relationships: Sequence[RoomRelationship],
    ) -> AirlockResult:
        """
        Insert one airlock per (room pair, airlock kind) needing a buffer.

        Airlocks sit at the midpoint of the two room centres, take the
        cleaner of the two grades and are categorized as Support. The
        simulation is not re-run.
        """
        by_id = {n.room_id: n for n in nodes}
        created: Dict[Tuple[FrozenSet[str], str], RoomNode] = {}
        routed: List[RoomRelationship] = []

        for rel in relationships:
            source, target = by_id.get(rel.from_room_id), by_id.get(rel.to_room_id)
            if (
                rel.is_prohibited
                or source is None
                or target is None
                or not requires_airlock(
                    source.cleanroom_class,
                    target.cleanroom_class,
                    self.config.airlock_gap_threshold,
                )
            ):
                routed.append(rel)
                continue

            kind = airlock_kind(rel.type)
            key = (frozenset((source.room_id, target.room_id)), kind)
            airlock = created.get(key)
            if airlock is None:
                airlock = self._create_airlock(kind, source, target)
                created[key] = airlock
                logger.info(
                    f"Inserted {kind} between {source.name} ({source.cleanroom_class.value}) "
                    f"and {target.name} ({target.cleanroom_class.value})"
                )

            routed.extend(self._legs(rel, airlock))

        airlocks = list(created.values())
        return AirlockResult(
            nodes=list(nodes) + airlocks,
            airlocks=airlocks,
            routed_relationships=routed,
        )

    def _create_airlock(self, kind: str, source: RoomNode, target: RoomNode) -> RoomNode:
        record = find_room_size(kind)
        if record is not None:
            dims = scale_room_dimensions(record)
            width, height, area = dims.width, dims.height, dims.area
        else:
            width, height, area = _FALLBACK_AIRLOCK_SIZE

        return RoomNode(
            room_id=new_room_id(),
            name=kind,
            room_type=kind,
            category=RoomCategory.SUPPORT,
            cleanroom_class=higher_class(source.cleanroom_class, target.cleanroom_class),
            width=width,
            height=height,
            area=area,
            x=(source.x + target.x) / 2,
            y=(source.y + target.y) / 2,
            is_airlock=True,
            buffer_for=(source.room_id, target.room_id),
        )

    @staticmethod
    def _legs(rel: RoomRelationship, airlock: RoomNode) -> List[RoomRelationship]:
        reason = f"Routed through {airlock.name}"
        if rel.reason:
            reason = f"{reason}: {rel.reason}"
        return [
            RoomRelationship(
                from_room_id=rel.from_room_id,
                to_room_id=airlock.room_id,
                type=rel.type,
                priority=rel.priority,
                flow_type=rel.flow_type,
                flow_direction=rel.flow_direction,
                reason=reason,
            ),
            RoomRelationship(
                from_room_id=airlock.room_id,
                to_room_id=rel.to_room_id,
                type=rel.type,
                priority=rel.priority,
                flow_type=rel.flow_type,
                flow_direction=rel.flow_direction,
                reason=reason,
            ),
        ]
