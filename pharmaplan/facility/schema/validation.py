"""
validation.py - Generated layout validation v1.0

Facility Layout Engine
Post-hoc checks of a generated layout against the structural guarantees
callers rely on: positive areas, minimum separation, canvas margin,
no doors across prohibited pairs and airlock coverage of grade transitions.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from enum import Enum
import itertools
import logging
import math
import time

from pharmaplan.bootstrap.config import LayoutConfig
from pharmaplan.facility.schema.cleanroom import requires_airlock
from pharmaplan.facility.schema.layout import GeneratedLayout
from pharmaplan.facility.schema.room import RelationshipType

__all__ = [
    'ValidationSeverity',
    'ValidationIssue',
    'ValidationResult',
    'validate_layout',
]

logger = logging.getLogger(__name__)

# Absolute tolerance (px) for floating-point comparisons
_TOLERANCE = 1e-6


# =============================================================================
# ENUMS
# =============================================================================

class ValidationSeverity(Enum):
    """Severity levels for validation issues."""

    ERROR = "error"           # Structural guarantee broken
    WARNING = "warning"       # Should be reviewed
    INFO = "info"             # Advisory


# =============================================================================
# ISSUES & RESULT
# =============================================================================

@dataclass
class ValidationIssue:
    """
    A single validation issue.

    Attributes:
        issue_id: Rule-scoped identifier
        severity: Severity level
        category: Rule category (area, separation, margin, connector, airlock)
        message: Human-readable description
        shape_ids: Affected shapes
    """

    issue_id: str
    severity: ValidationSeverity
    category: str
    message: str
    shape_ids: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "issue_id": self.issue_id,
            "severity": self.severity.value,
            "category": self.category,
            "message": self.message,
            "shape_ids": list(self.shape_ids),
        }


@dataclass
class ValidationResult:
    """Result of validating a generated layout."""

    is_valid: bool = True
    issues: List[ValidationIssue] = field(default_factory=list)
    errors_count: int = 0
    warnings_count: int = 0
    checked_rules: List[str] = field(default_factory=list)
    validation_time_ms: float = 0.0

    def add_issue(self, issue: ValidationIssue) -> None:
        """Add an issue and update counts."""
        self.issues.append(issue)
        if issue.severity == ValidationSeverity.ERROR:
            self.errors_count += 1
            self.is_valid = False
        elif issue.severity == ValidationSeverity.WARNING:
            self.warnings_count += 1

    def add_error(self, issue_id: str, category: str, message: str, **kwargs) -> None:
        self.add_issue(ValidationIssue(
            issue_id=issue_id,
            severity=ValidationSeverity.ERROR,
            category=category,
            message=message,
            **kwargs
        ))

    def add_warning(self, issue_id: str, category: str, message: str, **kwargs) -> None:
        self.add_issue(ValidationIssue(
            issue_id=issue_id,
            severity=ValidationSeverity.WARNING,
            category=category,
            message=message,
            **kwargs
        ))

    def get_issues_by_category(self, category: str) -> List[ValidationIssue]:
        return [i for i in self.issues if i.category == category]

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "is_valid": self.is_valid,
            "issues": [i.to_dict() for i in self.issues],
            "errors_count": self.errors_count,
            "warnings_count": self.warnings_count,
            "checked_rules": self.checked_rules,
            "validation_time_ms": self.validation_time_ms,
        }


# =============================================================================
# RULES
# =============================================================================

def _check_areas(layout: GeneratedLayout, config: LayoutConfig, result: ValidationResult) -> None:
    for shape in layout.shapes:
        if shape.area <= 0 or shape.width <= 0 or shape.height <= 0:
            result.add_error(
                f"area_{shape.shape_id}", "area",
                f"Shape {shape.name} has non-positive dimensions",
                shape_ids=[shape.shape_id],
            )


def _check_separation(layout: GeneratedLayout, config: LayoutConfig, result: ValidationResult) -> None:
    gap = config.min_distance * config.pixels_per_meter
    for a, b in itertools.combinations(layout.shapes, 2):
        (ax, ay), (bx, by) = a.center, b.center
        distance = math.hypot(ax - bx, ay - by)
        required = (a.width + b.width) / 2 + gap
        if distance + _TOLERANCE < required:
            result.add_error(
                f"separation_{a.shape_id}_{b.shape_id}", "separation",
                f"{a.name} and {b.name} are {distance:.1f}px apart, "
                f"minimum is {required:.1f}px",
                shape_ids=[a.shape_id, b.shape_id],
            )


def _check_margin(layout: GeneratedLayout, config: LayoutConfig, result: ValidationResult) -> None:
    if not layout.shapes:
        return
    min_x = min(s.x for s in layout.shapes)
    min_y = min(s.y for s in layout.shapes)
    margin = config.canvas_margin
    if abs(min_x - margin) > _TOLERANCE or abs(min_y - margin) > _TOLERANCE:
        result.add_error(
            "margin", "margin",
            f"Bounding box starts at ({min_x:.3f}, {min_y:.3f}), expected ({margin}, {margin})",
        )


def _check_prohibited_connectors(
    layout: GeneratedLayout, config: LayoutConfig, result: ValidationResult
) -> None:
    shape_rooms = {s.shape_id: s.room_id for s in layout.shapes}
    prohibited = [r for r in layout.relationships if r.is_prohibited]

    for door in layout.door_connections:
        if door.relationship_type is RelationshipType.PROHIBITED_NEAR:
            result.add_error(
                f"connector_{door.connection_id}", "connector",
                "Door licensed by a prohibited-near relationship",
                shape_ids=list(door.shape_ids),
            )
            continue
        rooms = [shape_rooms.get(sid) for sid in door.shape_ids]
        if any(r.connects(rooms[0], rooms[1]) for r in prohibited):
            result.add_error(
                f"connector_{door.connection_id}", "connector",
                "Door joins two rooms that must not be near each other",
                shape_ids=list(door.shape_ids),
            )


def _check_airlock_coverage(
    layout: GeneratedLayout, config: LayoutConfig, result: ValidationResult
) -> None:
    by_room = {s.room_id: s for s in layout.shapes}
    airlocks = layout.airlocks

    for rel in layout.relationships:
        if rel.is_prohibited:
            continue
        a, b = by_room.get(rel.from_room_id), by_room.get(rel.to_room_id)
        if a is None or b is None:
            continue
        if not requires_airlock(a.cleanroom_class, b.cleanroom_class, config.airlock_gap_threshold):
            continue

        pair = {a.room_id, b.room_id}
        if not any(set(al.buffer_for) == pair for al in airlocks):
            result.add_error(
                f"airlock_{a.shape_id}_{b.shape_id}", "airlock",
                f"No airlock between {a.name} ({a.cleanroom_class.value}) "
                f"and {b.name} ({b.cleanroom_class.value})",
                shape_ids=[a.shape_id, b.shape_id],
            )

        for door in layout.door_connections:
            if set(door.shape_ids) == {a.shape_id, b.shape_id}:
                result.add_error(
                    f"airlock_bypass_{door.connection_id}", "airlock",
                    f"Door between {a.name} and {b.name} bypasses the airlock",
                    shape_ids=[a.shape_id, b.shape_id],
                )


_RULES = (
    ("positive_area", _check_areas),
    ("minimum_separation", _check_separation),
    ("canvas_margin", _check_margin),
    ("no_prohibited_connectors", _check_prohibited_connectors),
    ("airlock_coverage", _check_airlock_coverage),
)


def validate_layout(
    layout: GeneratedLayout,
    config: Optional[LayoutConfig] = None,
) -> ValidationResult:
    """
    Validate a generated layout.

    Args:
        layout: Layout to check
        config: Geometry constants the layout was generated with

    Returns:
        ValidationResult, invalid when any error was found
    """
    config = config or LayoutConfig()
    result = ValidationResult()
    start = time.perf_counter()

    for name, rule in _RULES:
        rule(layout, config, result)
        result.checked_rules.append(name)

    result.validation_time_ms = (time.perf_counter() - start) * 1000
    if not result.is_valid:
        logger.warning(f"Layout validation failed with {result.errors_count} errors")
    return result
