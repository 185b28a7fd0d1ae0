"""
Layout Pipeline Integration Tests

Runs LayoutGenerationService end to end with deterministic collaborators
and checks the structural guarantees of every generated layout.
"""

import itertools
import math
from unittest.mock import AsyncMock, Mock

import pytest

from pharmaplan.bootstrap.config import PharmaPlanConfig

from pharmaplan.facility import LayoutGenerationService
from pharmaplan.facility.contracts.protocols import RelationshipRecord
from pharmaplan.facility.exceptions import (
    InvalidRequestError,
    RelationshipQueryError,
    RequirementExtractionError,
)
from pharmaplan.facility.knowledge.relationship_store import RelationshipStore
from pharmaplan.facility.schema.cleanroom import CleanroomClass
from pharmaplan.facility.schema.layout import ConnectorType, DoorFlowType
from pharmaplan.facility.schema.request import LayoutGenerationRequest
from pharmaplan.facility.schema.room import FlowDirection
from pharmaplan.llm.services.layout_assistant import LLMLayoutAssistant


SOLID_DOSE_FLOWS = {
    ("Raw Material Warehouse", "Weighing Room"): [
        RelationshipRecord("MATERIAL_FLOW", 9, "raw_material", "unidirectional", "Dispense incoming stock"),
    ],
    ("Weighing Room", "Granulation Room"): [
        RelationshipRecord("MATERIAL_FLOW", 9, "raw_material", "unidirectional", "Weighed batches to granulation"),
    ],
}

GOWNING_TO_FILLING = {
    ("Gowning Room", "Sterile Filling Room"): [
        RelationshipRecord("PERSONNEL_FLOW", 9, "personnel", "unidirectional", "Gown before aseptic entry"),
    ],
}


def assert_structural_guarantees(layout, config):
    """Separation, margin and door rules hold for every layout."""
    ppm = config.layout.pixels_per_meter
    gap = config.layout.min_distance * ppm
    for a, b in itertools.combinations(layout.shapes, 2):
        (ax, ay), (bx, by) = a.center, b.center
        assert math.hypot(ax - bx, ay - by) >= (a.width + b.width) / 2 + gap - 1e-6

    assert min(s.x for s in layout.shapes) == pytest.approx(config.layout.canvas_margin)
    assert min(s.y for s in layout.shapes) == pytest.approx(config.layout.canvas_margin)

    shape_ids = {s.shape_id for s in layout.shapes}
    for door in layout.door_connections:
        assert set(door.shape_ids) <= shape_ids

    assert 0 <= layout.metadata.compliance_score <= 100
    assert layout.metadata.room_count == len(layout.shapes)
    assert layout.metadata.rationale


# =============================================================================
# EXPLICIT ROOM SCENARIOS
# =============================================================================

class TestSolidDosePipeline:
    """Three-room solid dose line without grade conflicts."""

    @pytest.fixture
    def service(self, store_factory, config, rule_based_assistant):
        return LayoutGenerationService(
            store=store_factory(SOLID_DOSE_FLOWS),
            assistant=rule_based_assistant,
            config=config,
        )

    @pytest.mark.asyncio
    async def test_rooms_doors_and_score(self, service, config):
        """Aliases resolve, both flows get doors, score is perfect."""
        layout = await service.generate(LayoutGenerationRequest(
            explicit_rooms=["Raw Material Storage", "Weighing Room", "Granulation"],
        ))

        assert [s.name for s in layout.shapes] == [
            "Raw Material Warehouse", "Weighing Room", "Granulation Room",
        ]
        assert [s.cleanroom_class for s in layout.shapes] == [
            CleanroomClass.CNC, CleanroomClass.D, CleanroomClass.D,
        ]
        assert layout.airlocks == []
        assert len(layout.door_connections) == 2
        assert all(d.connector_type is ConnectorType.STANDARD for d in layout.door_connections)
        assert all(d.flow_type is DoorFlowType.MATERIAL for d in layout.door_connections)
        assert all(d.flow_direction is FlowDirection.UNIDIRECTIONAL for d in layout.door_connections)
        assert layout.metadata.compliance_score == 100
        assert layout.metadata.relationship_count == 2
        assert_structural_guarantees(layout, config)

    @pytest.mark.asyncio
    async def test_zones(self, service):
        """Category zones plus a Grade D zone for the two process rooms."""
        layout = await service.generate({
            "explicitRooms": ["Raw Material Storage", "Weighing Room", "Granulation"],
        })

        zone_ids = {z.zone_id for z in layout.zones}
        assert zone_ids == {"zone-warehouse", "zone-production", "zone-grade-d"}

    @pytest.mark.asyncio
    async def test_validation_passes(self, service):
        """Generated layout passes every validation rule."""
        layout = await service.generate(LayoutGenerationRequest(
            explicit_rooms=["Raw Material Storage", "Weighing Room", "Granulation"],
        ))

        result = service.validate(layout)
        assert result.is_valid, [i.message for i in result.issues]

    @pytest.mark.asyncio
    async def test_seeded_generation_is_reproducible(self, service):
        """Same request and seed produce the same geometry."""
        request = LayoutGenerationRequest(
            explicit_rooms=["Raw Material Storage", "Weighing Room", "Granulation"],
        )
        first = await service.generate(request)
        second = await service.generate(request)

        assert first.compute_hash() == second.compute_hash()

    @pytest.mark.asyncio
    async def test_output_document(self, service):
        """Serialized layout has the expected top-level sections."""
        layout = await service.generate(LayoutGenerationRequest(explicit_rooms=["Weighing Room"]))
        data = layout.to_dict()

        assert set(data) == {"shapes", "door_connections", "zones", "metadata"}
        assert data["shapes"][0]["x"] == 100.0
        assert data["metadata"]["room_count"] == 1


class TestSterileAirlockPipeline:
    """Grade A filling room entered from a Grade D gowning room."""

    @pytest.mark.asyncio
    async def test_personnel_airlock_inserted(self, store_factory, config, rule_based_assistant):
        """The flow is routed through one personnel airlock with airlock doors."""
        service = LayoutGenerationService(
            store=store_factory(GOWNING_TO_FILLING),
            assistant=rule_based_assistant,
            config=config,
        )
        layout = await service.generate(LayoutGenerationRequest(
            explicit_rooms=["Sterile Filling Room", "Gowning Room"],
        ))

        assert len(layout.airlocks) == 1
        airlock = layout.airlocks[0]
        filling = next(s for s in layout.shapes if s.name == "Sterile Filling Room")
        gowning = next(s for s in layout.shapes if s.name == "Gowning Room")

        assert airlock.name == "Personnel Airlock"
        assert airlock.cleanroom_class is CleanroomClass.A
        assert set(airlock.buffer_for) == {filling.room_id, gowning.room_id}
        assert layout.metadata.airlock_count == 1

        assert len(layout.door_connections) == 2
        for door in layout.door_connections:
            assert airlock.shape_id in door.shape_ids
            assert door.connector_type is ConnectorType.AIRLOCK
            assert door.flow_type is DoorFlowType.PERSONNEL
        assert layout.connections_for_shape(filling.shape_id) != []
        assert not any(
            set(d.shape_ids) == {filling.shape_id, gowning.shape_id}
            for d in layout.door_connections
        )

        assert service.validate(layout).is_valid
        assert_structural_guarantees(layout, config)


# =============================================================================
# DEFAULT STORE AND DESCRIPTION SCENARIOS
# =============================================================================

class TestDefaultStorePipeline:
    """Runs against the bundled GMP rule set."""

    @pytest.fixture
    def service(self, config, rule_based_assistant):
        return LayoutGenerationService(
            store=RelationshipStore.with_default_rules(),
            assistant=rule_based_assistant,
            config=config,
        )

    @pytest.mark.asyncio
    async def test_description_request(self, service, config):
        """Rooms and capacity come from the description."""
        layout = await service.generate(LayoutGenerationRequest(description=(
            "Tablet plant with weighing, granulation and compression rooms. "
            "500 L batches, 10,000 tablets per day, linear layout with material flow priority."
        )))

        names = {s.name for s in layout.shapes}
        assert names == {"Weighing Room", "Granulation Room", "Compression Room"}
        granulation = next(s for s in layout.shapes if s.name == "Granulation Room")
        assert granulation.area == 150.0
        assert layout.metadata.rationale.startswith("Layout of 3 rooms")
        assert_structural_guarantees(layout, config)

    @pytest.mark.asyncio
    async def test_prohibited_pair(self, service, config):
        """Prohibited rooms get no door, a warning and a penalty."""
        layout = await service.generate(LayoutGenerationRequest(
            explicit_rooms=["Waste Disposal Room", "Weighing Room"],
        ))

        assert layout.door_connections == []
        assert layout.metadata.compliance_score == 90
        assert any(
            "Waste Disposal Room and Weighing Room must not be placed near each other" in w
            for w in layout.metadata.warnings
        )
        assert service.validate(layout).is_valid

    @pytest.mark.asyncio
    async def test_unmatched_room_warning(self, service):
        """Unknown rooms are kept with default size and reported."""
        layout = await service.generate(LayoutGenerationRequest(
            explicit_rooms=["Weighing Room", "Quantum Flux Chamber"],
        ))

        assert layout.metadata.unmatched_rooms == ["Quantum Flux Chamber"]
        assert "Default dimensions used for: Quantum Flux Chamber" in layout.metadata.warnings
        assert layout.shape_count == 2

    @pytest.mark.asyncio
    async def test_unrelated_rooms_penalized(self, service):
        """No relationships at all costs the no-relationship penalty."""
        layout = await service.generate(LayoutGenerationRequest(
            explicit_rooms=["Boiler Room", "Training Room"],
        ))

        assert layout.metadata.relationship_count == 0
        assert layout.metadata.compliance_score == 80


# =============================================================================
# FAILURE HANDLING
# =============================================================================

class TestPipelineFailures:
    """Error propagation and degradation."""

    @pytest.mark.asyncio
    async def test_empty_request_rejected(self, stub_store, config):
        with pytest.raises(InvalidRequestError):
            await LayoutGenerationService(stub_store, config=config).generate({})

    @pytest.mark.asyncio
    async def test_unextractable_description(self, stub_store, config, rule_based_assistant):
        """A description naming no known room aborts the request."""
        service = LayoutGenerationService(stub_store, rule_based_assistant, config)

        with pytest.raises(RequirementExtractionError):
            await service.generate(LayoutGenerationRequest(description="A garden shed"))

    @pytest.mark.asyncio
    async def test_llm_extraction_failure_aborts(self, stub_store):
        """With default settings a failing LLM extraction yields no layout."""
        defaults = PharmaPlanConfig().llm
        llm = Mock()
        llm.complete_json = AsyncMock(side_effect=RuntimeError("provider down"))
        llm.complete = AsyncMock(side_effect=RuntimeError("provider down"))
        assistant = LLMLayoutAssistant(
            llm,
            use_fallback=defaults.fallback_to_deterministic,
            extraction_fallback=defaults.extraction_fallback,
        )
        service = LayoutGenerationService(stub_store, assistant, PharmaPlanConfig())

        with pytest.raises(RequirementExtractionError) as exc_info:
            await service.generate(LayoutGenerationRequest(
                description="Tablet plant with weighing and granulation",
            ))

        assert isinstance(exc_info.value.cause, RuntimeError)
        llm.complete.assert_not_called()
        assert stub_store.calls == []

    @pytest.mark.asyncio
    async def test_degraded_lookups_warn(self, store_factory, config, rule_based_assistant):
        """Failed lookups are reported and the layout is still produced."""
        store = store_factory(SOLID_DOSE_FLOWS, failing=[("Weighing Room", "Granulation Room")])
        service = LayoutGenerationService(store, rule_based_assistant, config)

        layout = await service.generate(LayoutGenerationRequest(
            explicit_rooms=["Raw Material Storage", "Weighing Room", "Granulation"],
        ))

        assert layout.metadata.failed_relationship_pairs == 1
        assert layout.metadata.relationship_count == 1
        assert any("1 relationship lookups failed" in w for w in layout.metadata.warnings)

    @pytest.mark.asyncio
    async def test_strict_lookups_abort(self, store_factory, config, rule_based_assistant):
        """With degradation disabled the request fails."""
        config.relationships.degrade_on_query_error = False
        store = store_factory(SOLID_DOSE_FLOWS, failing=[("Weighing Room", "Granulation Room")])
        service = LayoutGenerationService(store, rule_based_assistant, config)

        with pytest.raises(RelationshipQueryError):
            await service.generate(LayoutGenerationRequest(
                explicit_rooms=["Raw Material Storage", "Weighing Room", "Granulation"],
            ))
