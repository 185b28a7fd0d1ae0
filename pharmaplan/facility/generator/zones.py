"""
zones.py - Layout metrics and zones v1.0

Facility Layout Engine
Quantitative metrics of a projected layout (flow distances, cleanroom
utilization, flow efficiency, cross-contamination risk) and zone grouping
by room category and cleanroom class.
"""

from collections import defaultdict
from typing import Dict, List, Optional, Sequence
import math

from pharmaplan.bootstrap.config import LayoutConfig, ScoringConfig
from pharmaplan.facility.schema.cleanroom import (
    CleanroomClass,
    RoomCategory,
    cleanroom_color,
)
from pharmaplan.facility.schema.layout import GeneratedShape, LayoutMetrics, ZoneDefinition
from pharmaplan.facility.schema.room import RelationshipType, RoomRelationship

__all__ = [
    'CATEGORY_COLORS',
    'compute_metrics',
    'build_zones',
]

CATEGORY_COLORS: Dict[RoomCategory, str] = {
    RoomCategory.PRODUCTION: "#4A90E2",
    RoomCategory.QUALITY_CONTROL: "#9B59B6",
    RoomCategory.WAREHOUSE: "#F5A623",
    RoomCategory.UTILITIES: "#7F8C8D",
    RoomCategory.PERSONNEL: "#2ECC71",
    RoomCategory.SUPPORT: "#95A5A6",
}

_CLASSIFIED = {CleanroomClass.A, CleanroomClass.B, CleanroomClass.C, CleanroomClass.D}


def _distance_m(a: GeneratedShape, b: GeneratedShape, pixels_per_meter: float) -> float:
    (ax, ay), (bx, by) = a.center, b.center
    return math.hypot(bx - ax, by - ay) / pixels_per_meter


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def compute_metrics(
    shapes: Sequence[GeneratedShape],
    relationships: Sequence[RoomRelationship],
    layout_config: Optional[LayoutConfig] = None,
    scoring_config: Optional[ScoringConfig] = None,
) -> LayoutMetrics:
    """
    Compute layout metrics.

    Flow distances are centre-to-centre in metres over the retrieved
    (un-rerouted) relationships. Flow efficiency falls linearly from 1 at
    zero mean flow distance to 0 at `max_flow_distance`.
    """
    layout_config = layout_config or LayoutConfig()
    scoring_config = scoring_config or ScoringConfig()
    ppm = layout_config.pixels_per_meter
    by_room = {s.room_id: s for s in shapes}

    flows: Dict[RelationshipType, List[float]] = defaultdict(list)
    prohibited_total = 0
    prohibited_close = 0

    for rel in relationships:
        a, b = by_room.get(rel.from_room_id), by_room.get(rel.to_room_id)
        if a is None or b is None:
            continue
        if rel.is_prohibited:
            prohibited_total += 1
            (ax, ay), (bx, by) = a.center, b.center
            if math.hypot(bx - ax, by - ay) <= (a.width + b.width) * layout_config.proximity_factor:
                prohibited_close += 1
            continue
        flows[rel.type].append(_distance_m(a, b, ppm))

    total_area = sum(s.area for s in shapes)
    classified_area = sum(s.area for s in shapes if s.cleanroom_class in _CLASSIFIED)

    flow_distances = flows[RelationshipType.MATERIAL_FLOW] + flows[RelationshipType.PERSONNEL_FLOW]
    if flow_distances:
        efficiency = max(0.0, 1.0 - _mean(flow_distances) / scoring_config.max_flow_distance)
    else:
        efficiency = 1.0

    return LayoutMetrics(
        total_area=round(total_area, 1),
        average_material_flow_distance=round(_mean(flows[RelationshipType.MATERIAL_FLOW]), 2),
        average_personnel_flow_distance=round(_mean(flows[RelationshipType.PERSONNEL_FLOW]), 2),
        cleanroom_utilization=round(classified_area / total_area * 100, 1) if total_area else 0.0,
        flow_efficiency=round(efficiency, 3),
        cross_contamination_risk=(
            round(prohibited_close / prohibited_total, 3) if prohibited_total else 0.0
        ),
    )


def build_zones(shapes: Sequence[GeneratedShape]) -> List[ZoneDefinition]:
    """One zone per room category present, one per grade with two or more rooms."""
    by_category: Dict[RoomCategory, List[str]] = defaultdict(list)
    by_class: Dict[CleanroomClass, List[str]] = defaultdict(list)
    for shape in shapes:
        by_category[shape.category].append(shape.shape_id)
        if shape.cleanroom_class is not None:
            by_class[shape.cleanroom_class].append(shape.shape_id)

    zones = [
        ZoneDefinition(
            zone_id=f"zone-{category.name.lower()}",
            name=f"{category.value} Zone",
            zone_type="category",
            shape_ids=ids,
            color=CATEGORY_COLORS[category],
        )
        for category, ids in by_category.items()
    ]
    zones.extend(
        ZoneDefinition(
            zone_id=f"zone-grade-{cls.value.lower()}",
            name=f"Grade {cls.value} Zone" if cls is not CleanroomClass.CNC else "CNC Zone",
            zone_type="cleanroom_class",
            shape_ids=ids,
            color=cleanroom_color(cls),
        )
        for cls, ids in by_class.items()
        if len(ids) >= 2
    )
    return zones
