"""
compliance.py - Compliance scoring v1.0

Facility Layout Engine
Heuristic GMP compliance score, warnings, improvement suggestions and the
rationale paragraph for a generated layout.

Score:
  100 - prohibited_penalty per prohibited-near relationship
      - no_relationship_penalty when nothing was retrieved
  clamped to 0..100
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence
import logging

from pharmaplan.bootstrap.config import ScoringConfig
from pharmaplan.facility.contracts.protocols import LayoutAssistantProtocol, RoomSummary
from pharmaplan.facility.schema.cleanroom import CleanroomClass, RoomCategory
from pharmaplan.facility.schema.layout import LayoutMetrics
from pharmaplan.facility.schema.room import RoomNode, RoomRelationship

__all__ = [
    'ComplianceReport',
    'ComplianceScorer',
    'fallback_rationale',
]

logger = logging.getLogger(__name__)


def fallback_rationale(room_count: int) -> str:
    return (
        f"Generated {room_count} rooms organized by cleanroom classification "
        f"and workflow requirements."
    )


@dataclass
class ComplianceReport:
    """Score, warnings and suggestions for one layout."""

    score: int = 100
    warnings: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)


class ComplianceScorer:
    """
    Scores layouts against the retrieved GMP relationships.

    The relationship set passed in must be the retrieved one, before
    airlock rerouting.
    """

    def __init__(
        self,
        config: Optional[ScoringConfig] = None,
        assistant: Optional[LayoutAssistantProtocol] = None,
    ):
        self.config = config or ScoringConfig()
        self._assistant = assistant

    def score(self, relationships: Sequence[RoomRelationship]) -> int:
        score = 100
        score -= self.config.prohibited_penalty * sum(1 for r in relationships if r.is_prohibited)
        if not relationships:
            score -= self.config.no_relationship_penalty
        return max(0, min(100, score))

    def assess(
        self,
        nodes: Sequence[RoomNode],
        relationships: Sequence[RoomRelationship],
        metrics: Optional[LayoutMetrics] = None,
    ) -> ComplianceReport:
        """Score the layout and collect warnings and suggestions."""
        names: Dict[str, str] = {n.room_id: n.name for n in nodes}
        warnings = [
            f"{names.get(r.from_room_id, r.from_room_id)} and "
            f"{names.get(r.to_room_id, r.to_room_id)} must not be placed near each other"
            + (f": {r.reason}" if r.reason else "")
            for r in relationships if r.is_prohibited
        ]
        if not relationships:
            warnings.append("No relationships found between the requested rooms; layout is unconstrained")

        report = ComplianceReport(
            score=self.score(relationships),
            warnings=warnings,
            suggestions=self.suggest(nodes, metrics),
        )
        logger.info(
            f"Compliance score {report.score} "
            f"({len(report.warnings)} warnings, {len(report.suggestions)} suggestions)"
        )
        return report

    def suggest(
        self,
        nodes: Sequence[RoomNode],
        metrics: Optional[LayoutMetrics] = None,
    ) -> List[str]:
        suggestions = []
        categories = {n.category for n in nodes}
        if RoomCategory.PRODUCTION in categories and RoomCategory.QUALITY_CONTROL not in categories:
            suggestions.append("Consider adding a Quality Control laboratory to support production")

        critical = sum(
            1 for n in nodes
            if not n.is_airlock and n.cleanroom_class in (CleanroomClass.A, CleanroomClass.B)
        )
        airlocks = sum(1 for n in nodes if n.is_airlock)
        if critical and airlocks < critical:
            suggestions.append(
                f"Consider additional airlocks: {critical} Grade A/B rooms "
                f"but only {airlocks} airlocks"
            )

        if metrics is not None:
            if metrics.cleanroom_utilization > self.config.high_cleanroom_utilization:
                suggestions.append(
                    f"High cleanroom utilization ({metrics.cleanroom_utilization:.0f}%); "
                    f"review whether every room needs a classified environment"
                )
            if metrics.flow_efficiency < self.config.low_flow_efficiency:
                suggestions.append(
                    "Flow paths are long; consider placing connected rooms closer together"
                )
        return suggestions

    async def rationale(
        self,
        nodes: Sequence[RoomNode],
        description: Optional[str] = None,
    ) -> str:
        """Rationale from the assistant, or the fallback sentence if it fails."""
        if self._assistant is None:
            return fallback_rationale(len(nodes))

        summaries = [
            RoomSummary(
                name=n.name,
                category=n.category.value,
                cleanroom_class=n.cleanroom_class.value if n.cleanroom_class else None,
                area=n.area,
                is_airlock=n.is_airlock,
            )
            for n in nodes
        ]
        try:
            text = await self._assistant.generate_rationale(summaries, description)
        except Exception as e:
            logger.warning(f"Rationale generation failed, using fallback: {e}")
            return fallback_rationale(len(nodes))

        if not text or not text.strip():
            return fallback_rationale(len(nodes))
        return text.strip()
