"""
test_relationships.py - Tests for the relationship store and retriever

Tests for:
- RelationshipStore default rules, JSON loading and queries
- RelationshipRetriever normalization, pair coverage and failure policy
"""

import json

import pytest


# =============================================================================
# RELATIONSHIP STORE TESTS
# =============================================================================

class TestRelationshipStore:
    """Tests for the networkx-backed RelationshipStore."""

    def test_default_rules_loaded(self):
        """Default rule set is non-empty."""
        from pharmaplan.facility.knowledge.relationship_store import (
            DEFAULT_GMP_RULES,
            RelationshipStore,
        )

        store = RelationshipStore.with_default_rules()
        assert store.rule_count == len(DEFAULT_GMP_RULES)
        assert "Weighing Room" in store.room_types()

    def test_query_is_directed_and_case_insensitive(self):
        """Rules are returned only in their own direction."""
        from pharmaplan.facility.knowledge.relationship_store import RelationshipStore

        store = RelationshipStore.with_default_rules()
        forward = store.query("weighing room", "GRANULATION ROOM")
        backward = store.query("Granulation Room", "Weighing Room")

        assert len(forward) == 1
        assert forward[0].type == "MATERIAL_FLOW"
        assert forward[0].priority == 8
        assert forward[0].flow_direction == "unidirectional"
        assert backward == []

    def test_unknown_room_type_returns_empty(self):
        """Unknown types are not an error."""
        from pharmaplan.facility.knowledge.relationship_store import RelationshipStore

        assert RelationshipStore.with_default_rules().query("Bridge", "Engine Room") == []

    def test_same_type_rule_replaces(self):
        """Adding a rule of the same type for a pair overwrites it."""
        from pharmaplan.facility.knowledge.relationship_store import (
            RelationshipRule,
            RelationshipStore,
        )

        store = RelationshipStore()
        store.add_rule(RelationshipRule("A Room", "B Room", "MATERIAL_FLOW", 3))
        store.add_rule(RelationshipRule("a room", "b room", "MATERIAL_FLOW", 7))
        store.add_rule(RelationshipRule("A Room", "B Room", "PROHIBITED_NEAR", 9))

        records = {r.type: r for r in store.query("A Room", "B Room")}
        assert store.rule_count == 2
        assert records["MATERIAL_FLOW"].priority == 7

    def test_load_json(self, tmp_path):
        """Rules load from a JSON object with a relationships list."""
        from pharmaplan.facility.knowledge.relationship_store import RelationshipStore

        path = tmp_path / "rules.json"
        path.write_text(json.dumps({"relationships": [
            {"from": "Cell Bank", "to": "Fermentation Room", "type": "MATERIAL_FLOW",
             "priority": 8, "flow_type": "raw_material"},
        ]}))

        store = RelationshipStore()
        assert store.load_json(str(path)) == 1
        assert store.related_room_types("Fermentation Room") == ["Cell Bank"]

    def test_export_round_trip(self):
        """to_rules rebuilds an equivalent store."""
        from pharmaplan.facility.knowledge.relationship_store import RelationshipStore

        store = RelationshipStore.with_default_rules()
        copy = RelationshipStore(store.to_rules())
        assert copy.rule_count == store.rule_count

    def test_satisfies_store_protocol(self):
        """RelationshipStore is a RelationshipStoreProtocol."""
        from pharmaplan.facility.contracts.protocols import RelationshipStoreProtocol
        from pharmaplan.facility.knowledge.relationship_store import RelationshipStore

        assert isinstance(RelationshipStore(), RelationshipStoreProtocol)


# =============================================================================
# RELATIONSHIP RETRIEVER TESTS
# =============================================================================

class TestRelationshipNormalization:
    """Tests for RelationshipRetriever.normalize."""

    def test_disallowed_types_dropped(self, stub_store, record_factory):
        """Types outside the allow-list are ignored."""
        from pharmaplan.facility.generator.relationships import RelationshipRetriever

        retriever = RelationshipRetriever(stub_store)
        assert retriever.normalize(record_factory("ADJACENT_TO"), "R1", "R2") is None
        assert retriever.normalize(record_factory("SHARES_UTILITY"), "R1", "R2") is None

    def test_priority_defaults_and_clamps(self, stub_store, record_factory):
        """Missing priority gets the default, out-of-range values are clamped."""
        from pharmaplan.facility.generator.relationships import RelationshipRetriever

        retriever = RelationshipRetriever(stub_store)
        assert retriever.normalize(record_factory("MATERIAL_FLOW", None), "R1", "R2").priority == 5
        assert retriever.normalize(record_factory("MATERIAL_FLOW", 42), "R1", "R2").priority == 10
        assert retriever.normalize(record_factory("MATERIAL_FLOW", -3), "R1", "R2").priority == 1

    def test_enum_fields_parsed(self, stub_store, record_factory):
        """Flow type and direction map to enums; unknown values become None."""
        from pharmaplan.facility.generator.relationships import RelationshipRetriever
        from pharmaplan.facility.schema.room import FlowDirection, FlowType, RelationshipType

        retriever = RelationshipRetriever(stub_store)
        rel = retriever.normalize(
            record_factory("personnel_flow", 9, flow_type="personnel", flow_direction="sideways"),
            "R1", "R2",
        )

        assert rel.type is RelationshipType.PERSONNEL_FLOW
        assert rel.flow_type is FlowType.PERSONNEL
        assert rel.flow_direction is None
        assert not isinstance(rel.flow_direction, FlowDirection)


class TestRelationshipRetriever:
    """Tests for RelationshipRetriever.retrieve."""

    def test_queries_both_directions(self, store_factory, node_factory, record_factory):
        """Every unordered pair is queried twice."""
        from pharmaplan.facility.generator.relationships import RelationshipRetriever

        store = store_factory({
            ("Weighing Room", "Granulation Room"): [record_factory("MATERIAL_FLOW", 8)],
        })
        nodes = [node_factory("Weighing Room"), node_factory("Granulation Room"), node_factory("Gowning Room")]

        report = RelationshipRetriever(store).retrieve(nodes)

        assert report.pairs_queried == 6
        assert len(store.calls) == 6
        assert len(report.relationships) == 1
        rel = report.relationships[0]
        assert rel.from_room_id == "ROOM-WEIGHING-ROOM"
        assert rel.to_room_id == "ROOM-GRANULATION-ROOM"
        assert not report.degraded

    def test_failure_degrades_by_default(self, store_factory, node_factory):
        """A failing pair is reported and treated as no relationship."""
        from pharmaplan.facility.generator.relationships import QueryStatus, RelationshipRetriever

        store = store_factory(failing=[("Weighing Room", "Granulation Room")])
        report = RelationshipRetriever(store).retrieve(
            [node_factory("Weighing Room"), node_factory("Granulation Room")]
        )

        assert report.has_failures
        assert report.degraded
        assert len(report.failed_pairs) == 1
        assert report.failed_pairs[0].status is QueryStatus.ERROR
        assert "store unreachable" in report.failed_pairs[0].error
        assert report.relationships == []

    def test_failure_aborts_when_degradation_disabled(self, store_factory, node_factory):
        """Strict mode raises with the batch report attached."""
        from pharmaplan.bootstrap.config import RelationshipConfig
        from pharmaplan.facility.exceptions import RelationshipQueryError
        from pharmaplan.facility.generator.relationships import RelationshipRetriever

        store = store_factory(failing=[("Granulation Room", "Weighing Room")])
        retriever = RelationshipRetriever(store, RelationshipConfig(degrade_on_query_error=False))

        with pytest.raises(RelationshipQueryError) as exc_info:
            retriever.retrieve([node_factory("Weighing Room"), node_factory("Granulation Room")])

        assert exc_info.value.report.pairs_queried == 2

    def test_single_room_queries_nothing(self, stub_store, node_factory):
        """No pairs, no lookups."""
        from pharmaplan.facility.generator.relationships import RelationshipRetriever

        report = RelationshipRetriever(stub_store).retrieve([node_factory("Weighing Room")])
        assert report.pairs_queried == 0
        assert stub_store.calls == []
