"""
facility/generator - Layout synthesis pipeline

One module per pipeline step, orchestrated by LayoutGenerationService.
"""

from pharmaplan.facility.generator.requirements import (
    ResolvedRequirements,
    RequirementResolver,
)
from pharmaplan.facility.generator.sizing import (
    RoomSizeResolver,
    SizingResult,
)
from pharmaplan.facility.generator.relationships import (
    QueryStatus,
    PairQueryResult,
    RelationshipBatchReport,
    RelationshipRetriever,
)
from pharmaplan.facility.generator.placement import (
    SimulationArena,
    PlacementResult,
    ForceDirectedPlacer,
)
from pharmaplan.facility.generator.airlocks import (
    MATERIAL_AIRLOCK,
    PERSONNEL_AIRLOCK,
    AirlockResult,
    AirlockInserter,
    airlock_kind,
)
from pharmaplan.facility.generator.projection import CoordinateProjector
from pharmaplan.facility.generator.connectors import ConnectorSynthesizer
from pharmaplan.facility.generator.zones import (
    CATEGORY_COLORS,
    compute_metrics,
    build_zones,
)
from pharmaplan.facility.generator.compliance import (
    ComplianceReport,
    ComplianceScorer,
    fallback_rationale,
)
from pharmaplan.facility.generator.layout_service import LayoutGenerationService

__all__ = [
    'ResolvedRequirements',
    'RequirementResolver',
    'RoomSizeResolver',
    'SizingResult',
    'QueryStatus',
    'PairQueryResult',
    'RelationshipBatchReport',
    'RelationshipRetriever',
    'SimulationArena',
    'PlacementResult',
    'ForceDirectedPlacer',
    'MATERIAL_AIRLOCK',
    'PERSONNEL_AIRLOCK',
    'AirlockResult',
    'AirlockInserter',
    'airlock_kind',
    'CoordinateProjector',
    'ConnectorSynthesizer',
    'CATEGORY_COLORS',
    'compute_metrics',
    'build_zones',
    'ComplianceReport',
    'ComplianceScorer',
    'fallback_rationale',
    'LayoutGenerationService',
]
