"""
relationships.py - Relationship retrieval v1.0

Facility Layout Engine
Queries the relationship store for every pair of sized rooms, in both
directions, and normalizes the records into typed room relationships.

Each directed lookup yields a PairQueryResult (success, empty or error).
Results are aggregated into a RelationshipBatchReport; whether failed
lookups degrade to "no relationship" or abort the request is an explicit
policy flag.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional
from enum import Enum
import itertools
import logging

from pharmaplan.bootstrap.config import RelationshipConfig
from pharmaplan.facility.contracts.protocols import RelationshipRecord, RelationshipStoreProtocol
from pharmaplan.facility.exceptions import RelationshipQueryError
from pharmaplan.facility.schema.room import (
    FlowDirection,
    FlowType,
    RelationshipType,
    RoomNode,
    RoomRelationship,
)

__all__ = [
    'QueryStatus',
    'PairQueryResult',
    'RelationshipBatchReport',
    'RelationshipRetriever',
]

logger = logging.getLogger(__name__)

MIN_PRIORITY = 1
MAX_PRIORITY = 10


class QueryStatus(Enum):
    SUCCESS = "success"
    EMPTY = "empty"
    ERROR = "error"


@dataclass
class PairQueryResult:
    """Outcome of one directed pair lookup."""

    from_room_id: str
    to_room_id: str
    from_room_type: str
    to_room_type: str
    status: QueryStatus
    relationships: List[RoomRelationship] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from_room_type": self.from_room_type,
            "to_room_type": self.to_room_type,
            "status": self.status.value,
            "relationships": len(self.relationships),
            "error": self.error,
        }


@dataclass
class RelationshipBatchReport:
    """
    Aggregate of all pair lookups for one request.

    Attributes:
        results: One entry per directed lookup
        degraded: Failed lookups were treated as "no relationship"
    """

    results: List[PairQueryResult] = field(default_factory=list)
    degraded: bool = False

    @property
    def relationships(self) -> List[RoomRelationship]:
        return [rel for result in self.results for rel in result.relationships]

    @property
    def pairs_queried(self) -> int:
        return len(self.results)

    @property
    def failed_pairs(self) -> List[PairQueryResult]:
        return [r for r in self.results if r.status is QueryStatus.ERROR]

    @property
    def has_failures(self) -> bool:
        return any(r.status is QueryStatus.ERROR for r in self.results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pairs_queried": self.pairs_queried,
            "relationships": len(self.relationships),
            "failed_pairs": [r.to_dict() for r in self.failed_pairs],
            "degraded": self.degraded,
        }


def _parse_optional(enum_cls, value: Optional[str]):
    if not value:
        return None
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        return None


class RelationshipRetriever:
    """Retrieves typed relationships between sized rooms."""

    def __init__(
        self,
        store: RelationshipStoreProtocol,
        config: Optional[RelationshipConfig] = None,
    ):
        self._store = store
        self._config = config or RelationshipConfig()
        self._allowed = {t.upper() for t in self._config.allowed_types}

    def normalize(
        self,
        record: RelationshipRecord,
        from_room_id: str,
        to_room_id: str,
    ) -> Optional[RoomRelationship]:
        """Convert a store record; None when its type is not allowed."""
        type_name = (record.type or "").strip().upper()
        if type_name not in self._allowed:
            logger.debug(f"Dropping relationship of non-allowed type {record.type!r}")
            return None
        try:
            rel_type = RelationshipType(type_name)
        except ValueError:
            logger.debug(f"Dropping relationship of unknown type {record.type!r}")
            return None

        priority = record.priority
        if priority is None:
            priority = self._config.default_priority
        priority = max(MIN_PRIORITY, min(MAX_PRIORITY, int(priority)))

        return RoomRelationship(
            from_room_id=from_room_id,
            to_room_id=to_room_id,
            type=rel_type,
            priority=priority,
            flow_type=_parse_optional(FlowType, record.flow_type),
            flow_direction=_parse_optional(FlowDirection, record.flow_direction),
            reason=record.reason,
        )

    def query_pair(self, source: RoomNode, target: RoomNode) -> PairQueryResult:
        """Look up relationships directed from one room to another."""
        result = PairQueryResult(
            from_room_id=source.room_id,
            to_room_id=target.room_id,
            from_room_type=source.room_type,
            to_room_type=target.room_type,
            status=QueryStatus.EMPTY,
        )
        try:
            records = self._store.query(source.room_type, target.room_type)
        except Exception as e:
            logger.warning(
                f"Relationship lookup failed for {source.room_type} -> {target.room_type}: {e}"
            )
            result.status = QueryStatus.ERROR
            result.error = str(e)
            return result

        for record in records or []:
            rel = self.normalize(record, source.room_id, target.room_id)
            if rel is not None:
                result.relationships.append(rel)

        if result.relationships:
            result.status = QueryStatus.SUCCESS
        return result

    def retrieve(self, nodes: Iterable[RoomNode]) -> RelationshipBatchReport:
        """
        Query every unordered pair of rooms in both directions.

        Raises:
            RelationshipQueryError: A lookup failed and degradation is disabled
        """
        report = RelationshipBatchReport()
        for a, b in itertools.combinations(list(nodes), 2):
            report.results.append(self.query_pair(a, b))
            report.results.append(self.query_pair(b, a))

        if report.has_failures:
            failed = len(report.failed_pairs)
            if not self._config.degrade_on_query_error:
                raise RelationshipQueryError(
                    f"{failed} of {report.pairs_queried} relationship lookups failed",
                    report=report,
                )
            report.degraded = True
            logger.warning(
                f"{failed} relationship lookups failed, treated as no relationship"
            )

        logger.info(
            f"Retrieved {len(report.relationships)} relationships "
            f"from {report.pairs_queried} lookups"
        )
        return report
