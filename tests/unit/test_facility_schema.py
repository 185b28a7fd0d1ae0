"""
test_facility_schema.py - Tests for the facility data model

Tests for:
- Cleanroom grades and transition rules
- Room nodes and relationships
- Room-size reference table lookup and scaling
- Generation request parsing
"""

import pytest


# =============================================================================
# CLEANROOM TESTS
# =============================================================================

class TestCleanroomClass:
    """Tests for CleanroomClass and transition rules."""

    def test_levels_are_ordered(self):
        """A is cleanest, CNC is unclassified."""
        from pharmaplan.facility.schema.cleanroom import CleanroomClass

        levels = [c.level for c in (CleanroomClass.A, CleanroomClass.B, CleanroomClass.C,
                                    CleanroomClass.D, CleanroomClass.CNC)]
        assert levels == sorted(levels, reverse=True)
        assert CleanroomClass.CNC.level == 0

    def test_parse_accepts_prefixes(self):
        """Parse handles 'Grade B', 'class c' and plain letters."""
        from pharmaplan.facility.schema.cleanroom import CleanroomClass

        assert CleanroomClass.parse("Grade B") is CleanroomClass.B
        assert CleanroomClass.parse("class c") is CleanroomClass.C
        assert CleanroomClass.parse("a") is CleanroomClass.A
        assert CleanroomClass.parse(None) is None

    def test_requires_airlock_on_large_gap(self):
        """Gap of two or more grades needs a buffer."""
        from pharmaplan.facility.schema.cleanroom import CleanroomClass, requires_airlock

        assert requires_airlock(CleanroomClass.A, CleanroomClass.D)
        assert requires_airlock(CleanroomClass.B, CleanroomClass.D)
        assert not requires_airlock(CleanroomClass.C, CleanroomClass.D)
        assert not requires_airlock(CleanroomClass.D, CleanroomClass.CNC)

    def test_requires_airlock_between_a_and_b(self):
        """Transitions between Grade A and Grade B are always buffered."""
        from pharmaplan.facility.schema.cleanroom import CleanroomClass, requires_airlock

        assert requires_airlock(CleanroomClass.A, CleanroomClass.B)
        assert not requires_airlock(CleanroomClass.B, CleanroomClass.B)

    def test_unclassified_never_requires_airlock(self):
        """Rooms without a grade do not trigger airlocks."""
        from pharmaplan.facility.schema.cleanroom import CleanroomClass, requires_airlock

        assert not requires_airlock(CleanroomClass.A, None)
        assert not requires_airlock(None, None)

    def test_higher_class(self):
        """higher_class returns the cleaner grade."""
        from pharmaplan.facility.schema.cleanroom import CleanroomClass, higher_class

        assert higher_class(CleanroomClass.A, CleanroomClass.D) is CleanroomClass.A
        assert higher_class(CleanroomClass.D, CleanroomClass.B) is CleanroomClass.B
        assert higher_class(None, CleanroomClass.C) is CleanroomClass.C

    def test_colors(self):
        """Grades map to display colours; unclassified is grey."""
        from pharmaplan.facility.schema.cleanroom import (
            CleanroomClass,
            UNCLASSIFIED_COLOR,
            cleanroom_color,
        )

        assert cleanroom_color(CleanroomClass.A) == "#DC143C"
        assert cleanroom_color(None) == UNCLASSIFIED_COLOR


# =============================================================================
# ROOM TESTS
# =============================================================================

class TestRoomNode:
    """Tests for RoomNode."""

    def test_rejects_non_positive_dimensions(self, node_factory):
        """Zero or negative dimensions are invalid."""
        with pytest.raises(ValueError):
            node_factory("Bad Room", width=0.0)

    def test_with_position_returns_new_node(self, node_factory):
        """with_position leaves the original untouched."""
        node = node_factory("Weighing Room")
        moved = node.with_position(3.5, -2.0)

        assert (moved.x, moved.y) == (3.5, -2.0)
        assert (node.x, node.y) == (0.0, 0.0)
        assert moved.room_id == node.room_id

    def test_to_dict(self, node_factory):
        """Serialization uses wire values for enums."""
        from pharmaplan.facility.schema.cleanroom import CleanroomClass

        data = node_factory("Filling", cleanroom_class=CleanroomClass.A).to_dict()
        assert data["cleanroom_class"] == "A"
        assert data["category"] == "Production"
        assert data["area"] == 48.0


class TestRoomRelationship:
    """Tests for RoomRelationship."""

    def test_connects_is_symmetric(self):
        """connects matches either direction."""
        from pharmaplan.facility.schema.room import RelationshipType, RoomRelationship

        rel = RoomRelationship("R1", "R2", RelationshipType.MATERIAL_FLOW)
        assert rel.connects("R1", "R2")
        assert rel.connects("R2", "R1")
        assert not rel.connects("R1", "R3")

    def test_prohibited_flag(self):
        """Only PROHIBITED_NEAR is prohibited."""
        from pharmaplan.facility.schema.room import RelationshipType, RoomRelationship

        assert RoomRelationship("R1", "R2", RelationshipType.PROHIBITED_NEAR).is_prohibited
        assert not RoomRelationship("R1", "R2", RelationshipType.REQUIRES_ACCESS).is_prohibited

    def test_capacity_merge(self):
        """Unset capacity values are filled from the fallback."""
        from pharmaplan.facility.schema.room import CapacityHints

        merged = CapacityHints(batch_size=100.0).merged_with(CapacityHints(50.0, 2000.0))
        assert merged.batch_size == 100.0
        assert merged.throughput == 2000.0


# =============================================================================
# ROOM SIZE TABLE TESTS
# =============================================================================

class TestRoomSizeLookup:
    """Tests for find_room_size."""

    def test_exact_name(self):
        """Exact names match case-insensitively."""
        from pharmaplan.facility.schema.room_sizes import find_room_size

        record = find_room_size("  weighing ROOM ")
        assert record.room_type == "Weighing Room"

    def test_exact_alias(self):
        """Aliases resolve to the canonical room type."""
        from pharmaplan.facility.schema.room_sizes import find_room_size

        assert find_room_size("Raw Material Storage").room_type == "Raw Material Warehouse"
        assert find_room_size("QC Lab").room_type == "Analytical Laboratory"

    def test_partial_name(self):
        """A shortened name matches the room type containing it."""
        from pharmaplan.facility.schema.room_sizes import find_room_size

        assert find_room_size("Granulation").room_type == "Granulation Room"

    def test_miss(self):
        """Unknown names return None."""
        from pharmaplan.facility.schema.room_sizes import find_room_size

        assert find_room_size("Quantum Flux Chamber") is None
        assert find_room_size("") is None

    def test_table_helpers(self):
        """Category and grade helpers filter the table."""
        from pharmaplan.facility.schema.cleanroom import CleanroomClass, RoomCategory
        from pharmaplan.facility.schema.room_sizes import (
            ROOM_SIZE_TABLE,
            all_room_types,
            rooms_by_category,
            rooms_by_cleanroom_class,
        )

        assert len(all_room_types()) == len(ROOM_SIZE_TABLE)
        assert all(r.category is RoomCategory.UTILITIES for r in rooms_by_category(RoomCategory.UTILITIES))
        grade_a = [r.room_type for r in rooms_by_cleanroom_class(CleanroomClass.A)]
        assert grade_a == ["Sterile Filling Room"]


class TestRoomScaling:
    """Tests for scale_room_dimensions."""

    def test_unscaled_keeps_typical_dimensions(self):
        """No capacity leaves the typical size."""
        from pharmaplan.facility.schema.room_sizes import find_room_size, scale_room_dimensions

        dims = scale_room_dimensions(find_room_size("Granulation Room"))
        assert (dims.width, dims.height, dims.area) == (8.0, 10.0, 80.0)

    def test_batch_scaling_keeps_aspect_ratio(self):
        """Area grows with batch size; aspect ratio is preserved."""
        from pharmaplan.facility.schema.room_sizes import find_room_size, scale_room_dimensions

        dims = scale_room_dimensions(find_room_size("Granulation Room"), batch_size=20)
        assert dims.area == 100.0
        assert dims.width == 8.9
        assert dims.height == 11.2

    def test_scaling_clamped_to_max_area(self):
        """Scaled area never exceeds the record's maximum."""
        from pharmaplan.facility.schema.room_sizes import find_room_size, scale_room_dimensions

        record = find_room_size("Granulation Room")
        dims = scale_room_dimensions(record, batch_size=1000)
        assert dims.area == record.max_area
        assert dims.width == 11.0
        assert dims.height == 13.7

    def test_rooms_without_factor_ignore_capacity(self):
        """Rooms without a batch factor do not grow with batch size."""
        from pharmaplan.facility.schema.room_sizes import find_room_size, scale_room_dimensions

        dims = scale_room_dimensions(find_room_size("Weighing Room"), batch_size=500)
        assert dims.area == 30.0


# =============================================================================
# REQUEST TESTS
# =============================================================================

class TestLayoutGenerationRequest:
    """Tests for the pydantic request model."""

    def test_camel_case_input(self):
        """Wire field names are accepted."""
        from pharmaplan.facility.schema.request import (
            LayoutGenerationRequest,
            LayoutStyle,
            PrioritizeFlow,
        )

        request = LayoutGenerationRequest.model_validate({
            "explicitRooms": ["Weighing Room", "  ", "Granulation Room"],
            "capacity": {"batchSize": 200, "throughput": 5000},
            "constraints": {"layoutStyle": "linear", "prioritizeFlow": "material"},
        })

        assert request.explicit_rooms == ["Weighing Room", "Granulation Room"]
        assert request.capacity_hints().batch_size == 200
        assert request.constraints.layout_style is LayoutStyle.LINEAR
        assert request.constraints.prioritize_flow is PrioritizeFlow.MATERIAL

    def test_blank_description_has_no_room_source(self):
        """Whitespace-only description counts as missing."""
        from pharmaplan.facility.schema.request import LayoutGenerationRequest

        request = LayoutGenerationRequest(description="   ")
        assert request.description is None
        assert not request.has_room_source

    def test_negative_capacity_rejected(self):
        """Capacity values must be non-negative."""
        from pydantic import ValidationError
        from pharmaplan.facility.schema.request import LayoutGenerationRequest

        with pytest.raises(ValidationError):
            LayoutGenerationRequest.model_validate({"capacity": {"batchSize": -1}})
