"""
layout.py - Generated layout schema v1.0

Facility Layout Engine
Defines the output of layout synthesis: projected room shapes, door
connections between them, zones, metrics and layout metadata.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Any, Tuple
from datetime import datetime
from enum import Enum
import hashlib
import json

from pharmaplan.facility.schema.cleanroom import CleanroomClass, RoomCategory
from pharmaplan.facility.schema.room import FlowDirection, RelationshipType, RoomRelationship

__all__ = [
    'ConnectorType',
    'DoorFlowType',
    'PressureRegime',
    'EnvironmentalRange',
    'GeneratedShape',
    'DoorEndpoint',
    'DoorConnection',
    'LayoutMetrics',
    'ZoneDefinition',
    'LayoutMetadata',
    'GeneratedLayout',
]


# =============================================================================
# ENUMS
# =============================================================================

class ConnectorType(Enum):
    """Door connector subtype."""

    STANDARD = "standard"
    AIRLOCK = "airlock"


class DoorFlowType(Enum):
    """What moves through a door."""

    MATERIAL = "material"
    PERSONNEL = "personnel"

    @classmethod
    def for_relationship(cls, relationship_type: RelationshipType) -> "DoorFlowType":
        if relationship_type is RelationshipType.PERSONNEL_FLOW:
            return cls.PERSONNEL
        return cls.MATERIAL


class PressureRegime(Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


# =============================================================================
# SHAPES
# =============================================================================

@dataclass(frozen=True)
class EnvironmentalRange:
    """Inclusive operating range for an environmental parameter."""

    minimum: float
    maximum: float
    unit: str

    def to_dict(self) -> Dict[str, Any]:
        return {"min": self.minimum, "max": self.maximum, "unit": self.unit}


@dataclass(frozen=True)
class GeneratedShape:
    """
    A finalized room projected into output (pixel) space.

    `x`/`y` are the top-left corner and `width`/`height` are pixels; the
    metric footprint is kept in `width_m`/`height_m`/`area`.

    Attributes:
        shape_id: Shape identifier
        room_id: Originating room node id
        name: Room name
        room_type: Canonical room type
        category: Functional category
        cleanroom_class: Grade, None when unclassified
        x, y: Top-left corner (px)
        width, height: Size (px)
        width_m, height_m, area: Metric footprint
        is_airlock: Inserted buffer room
        buffer_for: Room ids an airlock sits between
        rotation: Degrees, always 0 for generated layouts
    """

    shape_id: str
    room_id: str
    name: str
    room_type: str
    category: RoomCategory
    cleanroom_class: Optional[CleanroomClass]
    x: float
    y: float
    width: float
    height: float
    width_m: float
    height_m: float
    area: float
    shape_type: str = "rectangle"
    is_airlock: bool = False
    buffer_for: Tuple[str, ...] = ()
    rotation: float = 0.0

    # Presentation
    fill_color: str = "#D3D3D3"
    border_color: str = "#333333"
    border_width: int = 2
    opacity: float = 0.8

    # Environment
    pressure_regime: PressureRegime = PressureRegime.NEUTRAL
    temperature_range: EnvironmentalRange = EnvironmentalRange(18.0, 26.0, "°C")
    humidity_range: EnvironmentalRange = EnvironmentalRange(30.0, 60.0, "%")

    # Compliance
    is_compliant: bool = True
    compliance_issues: Tuple[str, ...] = ()

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        cx, cy = self.center
        return {
            "shape_id": self.shape_id,
            "room_id": self.room_id,
            "name": self.name,
            "room_type": self.room_type,
            "category": self.category.value,
            "cleanroom_class": self.cleanroom_class.value if self.cleanroom_class else None,
            "shape_type": self.shape_type,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "center": {"x": cx, "y": cy},
            "width_m": self.width_m,
            "height_m": self.height_m,
            "area": self.area,
            "is_airlock": self.is_airlock,
            "buffer_for": list(self.buffer_for),
            "rotation": self.rotation,
            "fill_color": self.fill_color,
            "border_color": self.border_color,
            "border_width": self.border_width,
            "opacity": self.opacity,
            "pressure_regime": self.pressure_regime.value,
            "temperature_range": self.temperature_range.to_dict(),
            "humidity_range": self.humidity_range.to_dict(),
            "is_compliant": self.is_compliant,
            "compliance_issues": list(self.compliance_issues),
        }


# =============================================================================
# DOOR CONNECTIONS
# =============================================================================

@dataclass(frozen=True)
class DoorEndpoint:
    """One side of a door: the shape, its anchor point and edge placement."""

    shape_id: str
    x: float
    y: float
    edge_index: int = 0
    normalized_position: float = 0.5

    def to_dict(self) -> Dict[str, Any]:
        return {
            "shape_id": self.shape_id,
            "x": self.x,
            "y": self.y,
            "edge_index": self.edge_index,
            "normalized_position": self.normalized_position,
        }


@dataclass(frozen=True)
class DoorConnection:
    """
    A door between two projected shapes, licensed by a relationship.

    Attributes:
        connection_id: Identifier
        from_endpoint, to_endpoint: Door endpoints
        flow_type: Material or personnel
        flow_direction: Uni/bidirectional
        connector_type: Standard or airlock door
        relationship_type: Type of the licensing relationship
        priority: Priority of the licensing relationship
        reason: Rationale carried from the relationship
    """

    connection_id: str
    from_endpoint: DoorEndpoint
    to_endpoint: DoorEndpoint
    flow_type: DoorFlowType
    flow_direction: FlowDirection
    connector_type: ConnectorType
    relationship_type: RelationshipType
    priority: int = 5
    reason: Optional[str] = None

    @property
    def shape_ids(self) -> Tuple[str, str]:
        return (self.from_endpoint.shape_id, self.to_endpoint.shape_id)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "connection_id": self.connection_id,
            "from": self.from_endpoint.to_dict(),
            "to": self.to_endpoint.to_dict(),
            "flow_type": self.flow_type.value,
            "flow_direction": self.flow_direction.value,
            "connector_type": self.connector_type.value,
            "relationship_type": self.relationship_type.value,
            "priority": self.priority,
            "reason": self.reason,
        }


# =============================================================================
# METRICS & ZONES
# =============================================================================

@dataclass
class LayoutMetrics:
    """
    Quantitative layout metrics.

    Attributes:
        total_area: Sum of room areas (m²)
        average_material_flow_distance: Mean centre distance of material flows (m)
        average_personnel_flow_distance: Mean centre distance of personnel flows (m)
        cleanroom_utilization: Share of area in Grade A-D rooms (%)
        flow_efficiency: 0..1, 1 when flows are short
        cross_contamination_risk: 0..1, share of prohibited pairs placed close
    """

    total_area: float = 0.0
    average_material_flow_distance: float = 0.0
    average_personnel_flow_distance: float = 0.0
    cleanroom_utilization: float = 0.0
    flow_efficiency: float = 1.0
    cross_contamination_risk: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_area": self.total_area,
            "average_material_flow_distance": self.average_material_flow_distance,
            "average_personnel_flow_distance": self.average_personnel_flow_distance,
            "cleanroom_utilization": self.cleanroom_utilization,
            "flow_efficiency": self.flow_efficiency,
            "cross_contamination_risk": self.cross_contamination_risk,
        }


@dataclass
class ZoneDefinition:
    """A named group of shapes (by category or by cleanroom class)."""

    zone_id: str
    name: str
    zone_type: str  # "category" | "cleanroom_class"
    shape_ids: List[str] = field(default_factory=list)
    color: str = "#D3D3D3"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "zone_id": self.zone_id,
            "name": self.name,
            "zone_type": self.zone_type,
            "shape_ids": list(self.shape_ids),
            "color": self.color,
        }


# =============================================================================
# METADATA
# =============================================================================

@dataclass
class LayoutMetadata:
    """
    Summary of a generated layout.

    Attributes:
        total_area: Total room area (m²)
        compliance_score: 0..100
        warnings: Rule violations found
        suggestions: Improvement hints
        rationale: Short natural-language explanation
        metrics: Quantitative metrics
        room_count: Number of shapes
        airlock_count: Number of inserted airlocks
        relationship_count: Relationships retrieved
        failed_relationship_pairs: Pair lookups that errored
        unmatched_rooms: Names that fell back to the default size
    """

    total_area: float = 0.0
    compliance_score: int = 100
    warnings: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    rationale: str = ""
    metrics: LayoutMetrics = field(default_factory=LayoutMetrics)
    room_count: int = 0
    airlock_count: int = 0
    relationship_count: int = 0
    failed_relationship_pairs: int = 0
    unmatched_rooms: List[str] = field(default_factory=list)
    generated_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "total_area": self.total_area,
            "compliance_score": self.compliance_score,
            "warnings": list(self.warnings),
            "suggestions": list(self.suggestions),
            "rationale": self.rationale,
            "metrics": self.metrics.to_dict(),
            "room_count": self.room_count,
            "airlock_count": self.airlock_count,
            "relationship_count": self.relationship_count,
            "failed_relationship_pairs": self.failed_relationship_pairs,
            "unmatched_rooms": list(self.unmatched_rooms),
            "generated_at": self.generated_at.isoformat(),
        }


# =============================================================================
# GENERATED LAYOUT
# =============================================================================

@dataclass
class GeneratedLayout:
    """
    Complete output of one generation request.

    `relationships` holds the retrieved relationship set (before airlock
    rerouting) so the layout can be validated after the fact.
    """

    shapes: List[GeneratedShape] = field(default_factory=list)
    door_connections: List[DoorConnection] = field(default_factory=list)
    metadata: LayoutMetadata = field(default_factory=LayoutMetadata)
    zones: List[ZoneDefinition] = field(default_factory=list)
    relationships: List[RoomRelationship] = field(default_factory=list)

    @property
    def shape_count(self) -> int:
        return len(self.shapes)

    @property
    def airlocks(self) -> List[GeneratedShape]:
        return [s for s in self.shapes if s.is_airlock]

    def get_shape(self, shape_id: str) -> Optional[GeneratedShape]:
        for shape in self.shapes:
            if shape.shape_id == shape_id:
                return shape
        return None

    def shape_for_room(self, room_id: str) -> Optional[GeneratedShape]:
        for shape in self.shapes:
            if shape.room_id == room_id:
                return shape
        return None

    def connections_for_shape(self, shape_id: str) -> List[DoorConnection]:
        return [c for c in self.door_connections if shape_id in c.shape_ids]

    def compute_hash(self) -> str:
        """Content hash over geometry and connectivity."""
        data = {
            "shapes": sorted(
                (s.room_type, round(s.x, 3), round(s.y, 3), s.width, s.height)
                for s in self.shapes
            ),
            "doors": sorted(
                (c.from_endpoint.shape_id, c.to_endpoint.shape_id, c.flow_type.value)
                for c in self.door_connections
            ),
        }
        content = json.dumps(data, sort_keys=True)
        return hashlib.sha256(content.encode()).hexdigest()

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "shapes": [s.to_dict() for s in self.shapes],
            "door_connections": [c.to_dict() for c in self.door_connections],
            "zones": [z.to_dict() for z in self.zones],
            "metadata": self.metadata.to_dict(),
        }
