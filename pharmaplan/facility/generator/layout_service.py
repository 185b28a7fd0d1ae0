"""
layout_service.py - Layout generation service v1.0

Facility Layout Engine
Orchestrates one generation request end to end:

  requirements -> sizing -> relationships -> placement -> airlocks
  -> separation -> projection -> connectors -> metrics/zones -> compliance

The service holds only its collaborators and configuration; every request
owns its own node arrays and random generator, so one instance can serve
concurrent requests.
"""

from typing import Any, Dict, Optional, Union
import logging
import time

from pharmaplan.bootstrap.config import PharmaPlanConfig
from pharmaplan.facility.contracts.protocols import (
    LayoutAssistantProtocol,
    RelationshipStoreProtocol,
)
from pharmaplan.facility.generator.airlocks import AirlockInserter
from pharmaplan.facility.generator.compliance import ComplianceScorer
from pharmaplan.facility.generator.connectors import ConnectorSynthesizer
from pharmaplan.facility.generator.placement import ForceDirectedPlacer
from pharmaplan.facility.generator.projection import CoordinateProjector
from pharmaplan.facility.generator.relationships import RelationshipRetriever
from pharmaplan.facility.generator.requirements import RequirementResolver
from pharmaplan.facility.generator.sizing import RoomSizeResolver
from pharmaplan.facility.generator.zones import build_zones, compute_metrics
from pharmaplan.facility.schema.layout import GeneratedLayout, LayoutMetadata
from pharmaplan.facility.schema.request import LayoutGenerationRequest
from pharmaplan.facility.schema.room_sizes import ROOM_SIZE_TABLE
from pharmaplan.facility.schema.validation import ValidationResult, validate_layout

__all__ = ['LayoutGenerationService']

logger = logging.getLogger(__name__)


class LayoutGenerationService:
    """
    Generates GMP facility layouts.

    Usage:
        service = LayoutGenerationService(
            store=RelationshipStore.with_default_rules(),
            assistant=RuleBasedLayoutAssistant(),
        )
        layout = await service.generate(
            LayoutGenerationRequest(explicit_rooms=["Weighing Room", "Granulation"])
        )
    """

    def __init__(
        self,
        store: RelationshipStoreProtocol,
        assistant: Optional[LayoutAssistantProtocol] = None,
        config: Optional[PharmaPlanConfig] = None,
        room_table=ROOM_SIZE_TABLE,
    ):
        """
        Initialize the service.

        Args:
            store: Relationship store queried per room pair
            assistant: Text-generation capability for extraction and rationale
            config: Engine configuration (defaults when omitted)
            room_table: Room-size reference table
        """
        self.config = config or PharmaPlanConfig()
        self._store = store
        self._assistant = assistant

        self._requirements = RequirementResolver(assistant)
        self._sizer = RoomSizeResolver(room_table)
        self._retriever = RelationshipRetriever(store, self.config.relationships)
        self._airlocks = AirlockInserter(self.config.layout)
        self._projector = CoordinateProjector(self.config.layout)
        self._connectors = ConnectorSynthesizer(self.config.layout)
        self._scorer = ComplianceScorer(self.config.scoring, assistant)

    async def generate(
        self,
        request: Union[LayoutGenerationRequest, Dict[str, Any]],
    ) -> GeneratedLayout:
        """
        Generate a layout for a request.

        Raises:
            InvalidRequestError: Neither description nor rooms given
            RequirementExtractionError: Room extraction failed
            RelationshipQueryError: Lookups failed and degradation is disabled
        """
        if not isinstance(request, LayoutGenerationRequest):
            request = LayoutGenerationRequest.model_validate(request)

        start = time.perf_counter()
        resolved = await self._requirements.resolve(request)
        sizing = self._sizer.resolve_all(resolved.requirements, resolved.capacity)

        batch = self._retriever.retrieve(sizing.nodes)
        relationships = batch.relationships

        placer = ForceDirectedPlacer(self.config.layout)
        placement = placer.place(sizing.nodes, relationships, resolved.constraints)

        inserted = self._airlocks.insert(placement.nodes, relationships)
        nodes = inserted.nodes
        converged = placement.converged
        if inserted.airlocks:
            separation = placer.separate(nodes)
            nodes = separation.nodes
            converged = separation.converged

        shapes = self._projector.project(nodes)
        doors = self._connectors.synthesize(shapes, inserted.routed_relationships)

        metrics = compute_metrics(shapes, relationships, self.config.layout, self.config.scoring)
        compliance = self._scorer.assess(nodes, relationships, metrics)

        warnings = list(compliance.warnings)
        if batch.degraded:
            warnings.append(
                f"{len(batch.failed_pairs)} relationship lookups failed and were treated "
                f"as no relationship; the layout may be under-constrained"
            )
        if not converged:
            warnings.append("Some rooms may still be closer than the minimum separation")
        if sizing.unmatched:
            warnings.append(f"Default dimensions used for: {', '.join(sizing.unmatched)}")

        rationale = await self._scorer.rationale(nodes, request.description)

        layout = GeneratedLayout(
            shapes=shapes,
            door_connections=doors,
            zones=build_zones(shapes),
            relationships=list(relationships),
            metadata=LayoutMetadata(
                total_area=metrics.total_area,
                compliance_score=compliance.score,
                warnings=warnings,
                suggestions=compliance.suggestions,
                rationale=rationale,
                metrics=metrics,
                room_count=len(shapes),
                airlock_count=len(inserted.airlocks),
                relationship_count=len(relationships),
                failed_relationship_pairs=len(batch.failed_pairs),
                unmatched_rooms=list(sizing.unmatched),
            ),
        )

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"Generated layout: {len(shapes)} rooms, {len(inserted.airlocks)} airlocks, "
            f"{len(doors)} doors, score {compliance.score} in {elapsed_ms:.0f}ms"
        )
        return layout

    def validate(self, layout: GeneratedLayout) -> ValidationResult:
        """Check a layout against the geometric and GMP invariants."""
        return validate_layout(layout, self.config.layout)
