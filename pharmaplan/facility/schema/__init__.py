"""
facility/schema - Data model of the layout synthesis engine

Cleanroom grades and room categories, room requirements and nodes, typed
relationships, the room-size reference table, generated layout output,
the generation request and post-hoc layout validation.
"""

from pharmaplan.facility.schema.cleanroom import (
    CleanroomClass,
    RoomCategory,
    CLEANROOM_COLORS,
    UNCLASSIFIED_COLOR,
    class_gap,
    requires_airlock,
    higher_class,
    cleanroom_color,
)

from pharmaplan.facility.schema.room import (
    RelationshipType,
    FlowType,
    FlowDirection,
    CapacityHints,
    RoomRequirement,
    RoomNode,
    RoomRelationship,
    new_room_id,
)

from pharmaplan.facility.schema.room_sizes import (
    ScalingFactors,
    RoomSizeRecord,
    ScaledDimensions,
    ROOM_SIZE_TABLE,
    find_room_size,
    scale_room_dimensions,
    rooms_by_category,
    rooms_by_cleanroom_class,
    all_room_types,
)

from pharmaplan.facility.schema.layout import (
    ConnectorType,
    DoorFlowType,
    PressureRegime,
    EnvironmentalRange,
    GeneratedShape,
    DoorEndpoint,
    DoorConnection,
    LayoutMetrics,
    ZoneDefinition,
    LayoutMetadata,
    GeneratedLayout,
)

from pharmaplan.facility.schema.request import (
    LayoutStyle,
    PrioritizeFlow,
    CapacitySpec,
    LayoutConstraints,
    LayoutGenerationRequest,
)

from pharmaplan.facility.schema.validation import (
    ValidationSeverity,
    ValidationIssue,
    ValidationResult,
    validate_layout,
)

__all__ = [
    # Cleanroom
    'CleanroomClass',
    'RoomCategory',
    'CLEANROOM_COLORS',
    'UNCLASSIFIED_COLOR',
    'class_gap',
    'requires_airlock',
    'higher_class',
    'cleanroom_color',
    # Rooms
    'RelationshipType',
    'FlowType',
    'FlowDirection',
    'CapacityHints',
    'RoomRequirement',
    'RoomNode',
    'RoomRelationship',
    'new_room_id',
    # Room sizes
    'ScalingFactors',
    'RoomSizeRecord',
    'ScaledDimensions',
    'ROOM_SIZE_TABLE',
    'find_room_size',
    'scale_room_dimensions',
    'rooms_by_category',
    'rooms_by_cleanroom_class',
    'all_room_types',
    # Layout
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
    # Request
    'LayoutStyle',
    'PrioritizeFlow',
    'CapacitySpec',
    'LayoutConstraints',
    'LayoutGenerationRequest',
    # Validation
    'ValidationSeverity',
    'ValidationIssue',
    'ValidationResult',
    'validate_layout',
]
