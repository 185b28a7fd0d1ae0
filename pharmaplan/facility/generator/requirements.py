"""
requirements.py - Requirement resolution v1.0

Facility Layout Engine
Turns a generation request into the flat list of room requirements plus
request-wide capacity hints and constraints. The layout assistant is only
consulted when no explicit room list is given.
"""

from dataclasses import dataclass, field
from typing import List, Optional
import logging

from pharmaplan.facility.contracts.protocols import (
    ExtractedRequirements,
    LayoutAssistantProtocol,
)
from pharmaplan.facility.exceptions import InvalidRequestError, RequirementExtractionError
from pharmaplan.facility.schema.request import (
    LayoutConstraints,
    LayoutGenerationRequest,
    LayoutStyle,
    PrioritizeFlow,
)
from pharmaplan.facility.schema.room import CapacityHints, RoomRequirement

__all__ = [
    'ResolvedRequirements',
    'RequirementResolver',
]

logger = logging.getLogger(__name__)


@dataclass
class ResolvedRequirements:
    """Everything downstream steps need from the request."""

    requirements: List[RoomRequirement] = field(default_factory=list)
    capacity: CapacityHints = field(default_factory=CapacityHints)
    constraints: LayoutConstraints = field(default_factory=LayoutConstraints)
    extracted: bool = False

    @property
    def room_names(self) -> List[str]:
        return [r.name for r in self.requirements]


def _parse_enum(enum_cls, value: Optional[str]):
    if not value:
        return None
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        logger.warning(f"Ignoring unknown {enum_cls.__name__} value: {value!r}")
        return None


class RequirementResolver:
    """Resolves requested room types, extracting them from text when needed."""

    def __init__(self, assistant: Optional[LayoutAssistantProtocol] = None):
        self._assistant = assistant

    async def resolve(self, request: LayoutGenerationRequest) -> ResolvedRequirements:
        """
        Resolve a request into room requirements.

        Explicit rooms take precedence over the description. Explicit
        capacity and constraint values take precedence over extracted ones.

        Raises:
            InvalidRequestError: No description and no rooms
            RequirementExtractionError: Extraction failed or found no rooms
        """
        if not request.has_room_source:
            raise InvalidRequestError("Request needs a description or an explicit room list")

        capacity = request.capacity_hints()
        constraints = request.constraints or LayoutConstraints()

        if request.explicit_rooms:
            logger.info(f"Using {len(request.explicit_rooms)} explicit rooms")
            return ResolvedRequirements(
                requirements=[RoomRequirement(name) for name in request.explicit_rooms],
                capacity=capacity,
                constraints=constraints,
            )

        extracted = await self._extract(request.description)

        capacity = capacity.merged_with(
            CapacityHints(batch_size=extracted.batch_size, throughput=extracted.throughput)
        )
        constraints = LayoutConstraints(
            layout_style=constraints.layout_style
            or _parse_enum(LayoutStyle, extracted.layout_style),
            prioritize_flow=constraints.prioritize_flow
            or _parse_enum(PrioritizeFlow, extracted.prioritize_flow),
        )

        logger.info(f"Extracted {len(extracted.rooms)} rooms from description")
        return ResolvedRequirements(
            requirements=[RoomRequirement(name) for name in extracted.rooms],
            capacity=capacity,
            constraints=constraints,
            extracted=True,
        )

    async def _extract(self, description: str) -> ExtractedRequirements:
        if self._assistant is None:
            raise RequirementExtractionError("No layout assistant configured for room extraction")

        try:
            extracted = await self._assistant.extract_requirements(description)
        except Exception as e:
            logger.error(f"Room extraction failed: {e}")
            raise RequirementExtractionError("Failed to extract rooms from description", cause=e) from e

        rooms = [name.strip() for name in (extracted.rooms or []) if name and name.strip()]
        if not rooms:
            raise RequirementExtractionError("No rooms could be identified in the description")
        extracted.rooms = rooms
        return extracted
