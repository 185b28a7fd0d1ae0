"""
facility - Layout Synthesis Engine

Turns a list of required pharmaceutical room types and their GMP
relationships into a conflict-free 2-D arrangement:

- Room sizing from the reference table
- Relationship retrieval from the GMP knowledge store
- Force-directed placement with overlap resolution
- Airlock insertion at steep cleanroom-grade transitions
- Projection to canvas coordinates and door synthesis
- Compliance scoring, metrics and zones
"""

from pharmaplan.facility.exceptions import (
    LayoutGenerationError,
    InvalidRequestError,
    RequirementExtractionError,
    RelationshipQueryError,
)

from pharmaplan.facility.schema import (
    CleanroomClass,
    RoomCategory,
    RelationshipType,
    FlowType,
    FlowDirection,
    RoomRequirement,
    RoomNode,
    RoomRelationship,
    GeneratedShape,
    DoorConnection,
    LayoutMetadata,
    GeneratedLayout,
    LayoutStyle,
    PrioritizeFlow,
    LayoutConstraints,
    LayoutGenerationRequest,
    ValidationResult,
    validate_layout,
)

from pharmaplan.facility.contracts import (
    RelationshipRecord,
    ExtractedRequirements,
    RoomSummary,
    RelationshipStoreProtocol,
    LayoutAssistantProtocol,
)

from pharmaplan.facility.knowledge import (
    RelationshipRule,
    RelationshipStore,
    DEFAULT_GMP_RULES,
)

from pharmaplan.facility.generator import LayoutGenerationService

__all__ = [
    # Exceptions
    'LayoutGenerationError',
    'InvalidRequestError',
    'RequirementExtractionError',
    'RelationshipQueryError',
    # Schema
    'CleanroomClass',
    'RoomCategory',
    'RelationshipType',
    'FlowType',
    'FlowDirection',
    'RoomRequirement',
    'RoomNode',
    'RoomRelationship',
    'GeneratedShape',
    'DoorConnection',
    'LayoutMetadata',
    'GeneratedLayout',
    'LayoutStyle',
    'PrioritizeFlow',
    'LayoutConstraints',
    'LayoutGenerationRequest',
    'ValidationResult',
    'validate_layout',
    # Contracts
    'RelationshipRecord',
    'ExtractedRequirements',
    'RoomSummary',
    'RelationshipStoreProtocol',
    'LayoutAssistantProtocol',
    # Knowledge
    'RelationshipRule',
    'RelationshipStore',
    'DEFAULT_GMP_RULES',
    # Service
    'LayoutGenerationService',
]
