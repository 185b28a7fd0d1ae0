"""
knowledge/relationship_store.py - GMP relationship store v1.0

Facility Layout Engine
In-process relationship store backed by a networkx multi-digraph. Nodes are
canonical room-type names, edges carry typed GMP relationships (flows,
access requirements, prohibited proximity). Ships with a default rule set
for solid-dose, sterile and biologics facilities and can load extra rules
from JSON.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple
import json
import logging

import networkx as nx

from pharmaplan.facility.contracts.protocols import RelationshipRecord

__all__ = [
    'RelationshipRule',
    'RelationshipStore',
    'DEFAULT_GMP_RULES',
]

logger = logging.getLogger(__name__)


# =============================================================================
# RULES
# =============================================================================

@dataclass(frozen=True)
class RelationshipRule:
    """A directed rule between two room types."""

    from_type: str
    to_type: str
    type: str
    priority: int
    reason: str = ""
    flow_type: Optional[str] = None
    flow_direction: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": self.from_type,
            "to": self.to_type,
            "type": self.type,
            "priority": self.priority,
            "reason": self.reason,
            "flow_type": self.flow_type,
            "flow_direction": self.flow_direction,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RelationshipRule":
        return cls(
            from_type=data["from"],
            to_type=data["to"],
            type=data["type"],
            priority=int(data.get("priority", 5)),
            reason=data.get("reason", ""),
            flow_type=data.get("flow_type"),
            flow_direction=data.get("flow_direction"),
        )


def _flow(src, dst, priority, reason, flow_type, direction="unidirectional", kind="MATERIAL_FLOW"):
    return RelationshipRule(src, dst, kind, priority, reason, flow_type, direction)


def _prohibited(src, dst, priority, reason):
    return RelationshipRule(src, dst, "PROHIBITED_NEAR", priority, reason)


DEFAULT_GMP_RULES: Tuple[RelationshipRule, ...] = (
    # Solid dose production flow
    _flow("Raw Material Warehouse", "Weighing Room", 9,
          "Raw materials must flow to weighing area", "raw_material"),
    _flow("Weighing Room", "Granulation Room", 8,
          "Raw material flow from weighing to granulation", "raw_material"),
    _flow("Granulation Room", "Compression Room", 9,
          "Granulated material must flow to compression", "raw_material"),
    _flow("Compression Room", "Coating Room", 7,
          "Compressed tablets to coating", "finished_product"),
    _flow("Coating Room", "Packaging Room", 8,
          "Coated tablets to packaging", "finished_product"),
    _flow("Compression Room", "Packaging Room", 8,
          "Uncoated tablets to packaging", "finished_product"),
    _flow("Capsule Filling Room", "Packaging Room", 8,
          "Filled capsules to packaging", "finished_product"),
    _flow("Packaging Material Storage", "Packaging Room", 7,
          "Packaging components supplied to packaging lines", "raw_material"),
    _flow("Packaging Room", "Labeling Room", 7,
          "Packed product to labeling and serialization", "finished_product"),

    # Sterile flow
    _flow("Sterile Preparation Room", "Sterile Filling Room", 9,
          "Compounded solution transferred to aseptic filling", "raw_material"),
    _flow("Sterile Filling Room", "Lyophilization Room", 8,
          "Filled vials loaded into the freeze dryer", "finished_product"),
    _flow("Equipment Staging", "Sterile Preparation Room", 6,
          "Sterilized equipment staged for aseptic preparation", "equipment",
          kind="REQUIRES_ACCESS"),

    # Biologics flow
    _flow("Fermentation Room", "Purification Room", 9,
          "Harvested broth to downstream purification", "raw_material"),
    _flow("Purification Room", "Sterile Filling Room", 7,
          "Purified bulk drug substance to aseptic filling", "raw_material"),
    _flow("API Manufacturing", "Quarantine Storage", 7,
          "API batches held pending release", "finished_product"),

    # Quality control
    _flow("Packaging Room", "Analytical Laboratory", 8,
          "Finished product samples for release testing", "finished_product"),
    _flow("Quarantine Storage", "Analytical Laboratory", 8,
          "Quarantined materials need testing before release", "raw_material",
          direction="bidirectional"),
    _flow("Sampling Room", "Analytical Laboratory", 7,
          "Incoming material samples for identity testing", "raw_material"),
    _flow("Sterile Filling Room", "Microbiology Laboratory", 7,
          "Environmental monitoring and sterility samples", "finished_product"),
    _flow("Analytical Laboratory", "Stability Chamber Room", 6,
          "Stability samples pulled for testing", "finished_product",
          direction="bidirectional", kind="REQUIRES_ACCESS"),
    _flow("Analytical Laboratory", "Instrument Room", 7,
          "Prepared samples run on shared instruments", "raw_material",
          direction="bidirectional", kind="REQUIRES_ACCESS"),
    _prohibited("Analytical Laboratory", "Microbiology Laboratory", 9,
                "Risk of cross-contamination between analytical and microbiological testing"),
    RelationshipRule("Weighing Room", "Analytical Laboratory", "ADJACENT_TO", 7,
                     "Sample collection and testing coordination"),

    # Warehouse, receiving and shipping
    _flow("Receiving Area", "Raw Material Warehouse", 8,
          "Received materials flow to raw materials storage", "raw_material"),
    _flow("Receiving Area", "Quarantine Storage", 8,
          "Received materials held in quarantine until released", "raw_material"),
    _flow("Packaging Room", "Finished Goods Warehouse", 9,
          "Packaged products to finished goods storage", "finished_product"),
    _flow("Finished Goods Warehouse", "Shipping Area", 8,
          "Finished goods flow to shipping area", "finished_product"),
    _flow("Cold Storage", "Shipping Area", 7,
          "Cold chain products dispatched directly", "finished_product"),
    _prohibited("Receiving Area", "Shipping Area", 7,
                "Separate receiving and shipping to avoid cross-contamination"),

    # Personnel
    _flow("Gowning Room", "Weighing Room", 9,
          "Personnel must change before entering production areas", "personnel",
          kind="PERSONNEL_FLOW"),
    _flow("Gowning Room", "Granulation Room", 9,
          "Personnel must change before entering production areas", "personnel",
          kind="PERSONNEL_FLOW"),
    _flow("Gowning Room", "Compression Room", 9,
          "Personnel must change before entering production areas", "personnel",
          kind="PERSONNEL_FLOW"),
    _flow("Gowning Room", "Sterile Preparation Room", 9,
          "Personnel gown up before entering Grade B areas", "personnel",
          kind="PERSONNEL_FLOW"),
    _flow("Break Room", "Gowning Room", 5,
          "Staff return to production through gowning", "personnel",
          direction="bidirectional", kind="PERSONNEL_FLOW"),
    _flow("Washroom", "Gowning Room", 5,
          "Hygiene facilities next to changing areas", "personnel",
          direction="bidirectional", kind="PERSONNEL_FLOW"),

    # Utilities and maintenance
    RelationshipRule("Granulation Room", "HVAC Room", "SHARES_UTILITY", 8,
                     "Granulation requires controlled HVAC for dust containment"),
    RelationshipRule("Microbiology Laboratory", "HVAC Room", "SHARES_UTILITY", 9,
                     "Microbiology lab requires strict environmental controls"),
    RelationshipRule("Weighing Room", "Electrical Room", "SHARES_UTILITY", 7,
                     "Weighing equipment requires stable electrical supply"),
    _flow("Maintenance Workshop", "HVAC Room", 6,
          "Technicians service air handling units", "equipment",
          direction="bidirectional", kind="REQUIRES_ACCESS"),
    _flow("Maintenance Workshop", "Purified Water System", 6,
          "Technicians service the water system", "equipment",
          direction="bidirectional", kind="REQUIRES_ACCESS"),

    # Waste segregation
    _prohibited("Waste Disposal Room", "Weighing Room", 10,
                "Waste disposal must be separated from raw material handling"),
    _prohibited("Waste Disposal Room", "Granulation Room", 10,
                "Waste disposal must be separated from production areas"),
    _prohibited("Waste Disposal Room", "Analytical Laboratory", 10,
                "Waste disposal must be separated from testing areas"),
    _prohibited("Waste Disposal Room", "Sterile Filling Room", 10,
                "Waste disposal must be separated from aseptic processing"),
    _prohibited("Waste Disposal Room", "Packaging Room", 9,
                "Waste disposal must be separated from product handling"),
)


# =============================================================================
# STORE
# =============================================================================

class RelationshipStore:
    """
    Graph-backed relationship store.

    Usage:
        store = RelationshipStore.with_default_rules()
        records = store.query("Weighing Room", "Granulation Room")

    Room-type lookups are case-insensitive.
    """

    def __init__(self, rules: Optional[Iterable[RelationshipRule]] = None):
        self._graph = nx.MultiDiGraph()
        self._names: Dict[str, str] = {}  # lower-case name -> node name
        if rules:
            self.add_rules(rules)

    @classmethod
    def with_default_rules(cls) -> "RelationshipStore":
        return cls(DEFAULT_GMP_RULES)

    @property
    def graph(self) -> nx.MultiDiGraph:
        """The underlying networkx graph."""
        return self._graph

    @property
    def rule_count(self) -> int:
        return self._graph.number_of_edges()

    def room_types(self) -> List[str]:
        return sorted(self._graph.nodes)

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def _node(self, room_type: str) -> str:
        key = room_type.strip().lower()
        if key not in self._names:
            self._names[key] = room_type.strip()
            self._graph.add_node(self._names[key])
        return self._names[key]

    def add_rule(self, rule: RelationshipRule) -> None:
        """Add a directed rule; a rule with the same type replaces the old one."""
        src, dst = self._node(rule.from_type), self._node(rule.to_type)
        self._graph.add_edge(
            src, dst, key=rule.type,
            priority=rule.priority,
            reason=rule.reason,
            flow_type=rule.flow_type,
            flow_direction=rule.flow_direction,
        )

    def add_rules(self, rules: Iterable[RelationshipRule]) -> int:
        count = 0
        for rule in rules:
            self.add_rule(rule)
            count += 1
        return count

    def load_json(self, filepath: str) -> int:
        """
        Load rules from a JSON file.

        Accepts a list of rule objects or {"relationships": [...]}.

        Returns:
            Number of rules loaded
        """
        path = Path(filepath)
        with open(path) as f:
            data = json.load(f)

        if isinstance(data, dict):
            data = data.get("relationships", [])

        count = self.add_rules(RelationshipRule.from_dict(item) for item in data)
        logger.info(f"Loaded {count} relationship rules from {path}")
        return count

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def query(self, from_room_type: str, to_room_type: str) -> List[RelationshipRecord]:
        """Relationships directed from one room type to another."""
        src = self._names.get(from_room_type.strip().lower())
        dst = self._names.get(to_room_type.strip().lower())
        if src is None or dst is None or not self._graph.has_edge(src, dst):
            return []

        return [
            RelationshipRecord(
                type=rel_type,
                priority=data.get("priority"),
                flow_type=data.get("flow_type"),
                flow_direction=data.get("flow_direction"),
                reason=data.get("reason") or None,
            )
            for rel_type, data in self._graph.get_edge_data(src, dst).items()
        ]

    def related_room_types(self, room_type: str) -> List[str]:
        """Room types with a rule in either direction."""
        node = self._names.get(room_type.strip().lower())
        if node is None:
            return []
        neighbours = set(self._graph.successors(node)) | set(self._graph.predecessors(node))
        return sorted(neighbours)

    def to_rules(self) -> List[RelationshipRule]:
        """Export all rules."""
        return [
            RelationshipRule(
                from_type=src,
                to_type=dst,
                type=key,
                priority=data.get("priority", 5),
                reason=data.get("reason", ""),
                flow_type=data.get("flow_type"),
                flow_direction=data.get("flow_direction"),
            )
            for src, dst, key, data in self._graph.edges(keys=True, data=True)
        ]
