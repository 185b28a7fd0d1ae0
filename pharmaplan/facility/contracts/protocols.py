"""
contracts/protocols.py - Collaborator protocols v1.0

Facility Layout Engine
Narrow interfaces for the two external collaborators of layout synthesis:
the relationship store and the text-generation layout assistant. Both are
injected into the layout service and can be replaced by deterministic
doubles in tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

__all__ = [
    'RelationshipRecord',
    'ExtractedRequirements',
    'RoomSummary',
    'RelationshipStoreProtocol',
    'LayoutAssistantProtocol',
]


# =============================================================================
# DATA EXCHANGED WITH COLLABORATORS
# =============================================================================

@dataclass
class RelationshipRecord:
    """
    A raw relationship as returned by the store for a directed pair.

    Values are wire strings (e.g. type "MATERIAL_FLOW", flow_direction
    "unidirectional"); normalization happens in the retriever.
    """

    type: str
    priority: Optional[int] = None
    flow_type: Optional[str] = None
    flow_direction: Optional[str] = None
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "priority": self.priority,
            "flow_type": self.flow_type,
            "flow_direction": self.flow_direction,
            "reason": self.reason,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RelationshipRecord":
        return cls(
            type=data["type"],
            priority=data.get("priority"),
            flow_type=data.get("flow_type", data.get("flowType")),
            flow_direction=data.get("flow_direction", data.get("flowDirection")),
            reason=data.get("reason"),
        )


@dataclass
class ExtractedRequirements:
    """Structured requirements extracted from a free-text description."""

    rooms: List[str] = field(default_factory=list)
    batch_size: Optional[float] = None
    throughput: Optional[float] = None
    layout_style: Optional[str] = None
    prioritize_flow: Optional[str] = None


@dataclass
class RoomSummary:
    """Short room description handed to rationale generation."""

    name: str
    category: str
    cleanroom_class: Optional[str] = None
    area: float = 0.0
    is_airlock: bool = False

    def describe(self) -> str:
        grade = f"Grade {self.cleanroom_class}" if self.cleanroom_class else "unclassified"
        return f"{self.name} ({self.category}, {grade}, {self.area:.0f} m²)"


# =============================================================================
# PROTOCOLS
# =============================================================================

@runtime_checkable
class RelationshipStoreProtocol(Protocol):
    """Source of typed pairwise room-type relationships."""

    def query(self, from_room_type: str, to_room_type: str) -> List[RelationshipRecord]:
        """
        Relationships directed from one room type to another.

        Raises on store failure; an empty list means no relationship.
        """
        ...


@runtime_checkable
class LayoutAssistantProtocol(Protocol):
    """Text-generation capability used by layout synthesis."""

    async def extract_requirements(self, description: str) -> ExtractedRequirements:
        """
        Extract room types and capacity hints from a description.

        Raises on failure; the caller aborts the request.
        """
        ...

    async def generate_rationale(
        self,
        rooms: List[RoomSummary],
        description: Optional[str] = None,
    ) -> str:
        """Short paragraph explaining the generated layout."""
        ...
