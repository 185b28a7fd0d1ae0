"""
facility/knowledge - GMP relationship knowledge
"""

from pharmaplan.facility.knowledge.relationship_store import (
    RelationshipRule,
    RelationshipStore,
    DEFAULT_GMP_RULES,
)

__all__ = [
    'RelationshipRule',
    'RelationshipStore',
    'DEFAULT_GMP_RULES',
]
