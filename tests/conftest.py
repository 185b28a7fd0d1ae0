"""
PharmaPlan Test Configuration and Fixtures

Deterministic collaborators (relationship store, layout assistant) and a
seeded configuration so layout tests are reproducible.
"""

import pytest
from typing import Dict, List, Optional, Tuple

from pharmaplan.bootstrap.config import LayoutConfig, PharmaPlanConfig
from pharmaplan.facility.contracts.protocols import RelationshipRecord
from pharmaplan.facility.schema.cleanroom import CleanroomClass, RoomCategory
from pharmaplan.facility.schema.room import RoomNode


TEST_SEED = 1234


class StubRelationshipStore:
    """
    In-memory relationship store keyed by (from_type, to_type).

    Pairs listed in `failing` raise on lookup.
    """

    def __init__(
        self,
        relationships: Optional[Dict[Tuple[str, str], List[RelationshipRecord]]] = None,
        failing: Optional[List[Tuple[str, str]]] = None,
    ):
        self.relationships = relationships or {}
        self.failing = set(failing or [])
        self.calls: List[Tuple[str, str]] = []

    def query(self, from_room_type: str, to_room_type: str) -> List[RelationshipRecord]:
        self.calls.append((from_room_type, to_room_type))
        if (from_room_type, to_room_type) in self.failing:
            raise ConnectionError(f"store unreachable for {from_room_type} -> {to_room_type}")
        return list(self.relationships.get((from_room_type, to_room_type), []))


def make_node(
    name: str,
    cleanroom_class: Optional[CleanroomClass] = None,
    width: float = 6.0,
    height: float = 8.0,
    x: float = 0.0,
    y: float = 0.0,
    category: RoomCategory = RoomCategory.PRODUCTION,
    room_id: Optional[str] = None,
    **kwargs,
) -> RoomNode:
    """RoomNode with sensible defaults for tests."""
    return RoomNode(
        room_id=room_id or f"ROOM-{name.upper().replace(' ', '-')}",
        name=name,
        room_type=name,
        category=category,
        cleanroom_class=cleanroom_class,
        width=width,
        height=height,
        area=width * height,
        x=x,
        y=y,
        **kwargs,
    )


@pytest.fixture
def layout_config():
    """Layout constants with a fixed seed."""
    return LayoutConfig(seed=TEST_SEED)


@pytest.fixture
def config():
    """Root configuration with a fixed placement seed and no LLM."""
    cfg = PharmaPlanConfig()
    cfg.layout.seed = TEST_SEED
    cfg.llm.provider = "rule_based"
    return cfg


@pytest.fixture
def stub_store():
    """Empty stub store; tests fill `relationships` as needed."""
    return StubRelationshipStore()


@pytest.fixture
def rule_based_assistant():
    from pharmaplan.llm.services.layout_assistant import RuleBasedLayoutAssistant

    return RuleBasedLayoutAssistant()


@pytest.fixture
def node_factory():
    """Factory building RoomNodes, see `make_node`."""
    return make_node


@pytest.fixture
def store_factory():
    """Factory building StubRelationshipStores."""
    return StubRelationshipStore


def record(type_: str, priority: Optional[int] = 5, **kwargs) -> RelationshipRecord:
    return RelationshipRecord(type=type_, priority=priority, **kwargs)


@pytest.fixture
def record_factory():
    """Factory building RelationshipRecords."""
    return record
