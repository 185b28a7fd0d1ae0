"""
bootstrap/ - Bootstrap Layer

Configuration loading and application entry points. Entry points are
imported from `pharmaplan.bootstrap.entrypoints` directly; this package
only re-exports configuration so engine modules can import it freely.
"""

from .config import (
    PharmaPlanConfig,
    LLMConfig,
    LayoutConfig,
    RelationshipConfig,
    ScoringConfig,
    LoggingConfig,
    DEFAULT_ALLOWED_RELATIONSHIP_TYPES,
    load_config,
)

__all__ = [
    'PharmaPlanConfig',
    'LLMConfig',
    'LayoutConfig',
    'RelationshipConfig',
    'ScoringConfig',
    'LoggingConfig',
    'DEFAULT_ALLOWED_RELATIONSHIP_TYPES',
    'load_config',
]
