"""
pharmaplan - GMP facility layout synthesis

Generates spatially valid pharmaceutical facility floor plans from a
room list or a natural-language description.

Usage:
    from pharmaplan import LayoutGenerationService, LayoutGenerationRequest
    from pharmaplan.facility import RelationshipStore
    from pharmaplan.llm import RuleBasedLayoutAssistant

    service = LayoutGenerationService(
        store=RelationshipStore.with_default_rules(),
        assistant=RuleBasedLayoutAssistant(),
    )
    layout = await service.generate(
        LayoutGenerationRequest(explicit_rooms=["Weighing Room", "Granulation Room"])
    )
"""

__version__ = "1.0.0"

from pharmaplan.facility import (
    LayoutGenerationService,
    LayoutGenerationRequest,
    GeneratedLayout,
    LayoutGenerationError,
)

__all__ = [
    '__version__',
    'LayoutGenerationService',
    'LayoutGenerationRequest',
    'GeneratedLayout',
    'LayoutGenerationError',
]
