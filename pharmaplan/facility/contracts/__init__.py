"""
facility/contracts - Collaborator protocols
"""

from pharmaplan.facility.contracts.protocols import (
    RelationshipRecord,
    ExtractedRequirements,
    RoomSummary,
    RelationshipStoreProtocol,
    LayoutAssistantProtocol,
)

__all__ = [
    'RelationshipRecord',
    'ExtractedRequirements',
    'RoomSummary',
    'RelationshipStoreProtocol',
    'LayoutAssistantProtocol',
]
