"""
cleanroom.py - Cleanliness classification schema v1.0

Facility Layout Engine
Defines cleanroom grades, room categories and the grade-transition rules
that decide where buffer rooms (airlocks) are mandatory.
"""

from enum import Enum
from typing import Optional

__all__ = [
    'CleanroomClass',
    'RoomCategory',
    'CLEANROOM_COLORS',
    'UNCLASSIFIED_COLOR',
    'class_gap',
    'requires_airlock',
    'higher_class',
    'cleanroom_color',
]


# =============================================================================
# ENUMS
# =============================================================================

class CleanroomClass(Enum):
    """GMP cleanroom grades, A cleanest, CNC not classified."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    CNC = "CNC"

    @property
    def level(self) -> int:
        """Ordinal cleanliness level (A=4 ... CNC=0)."""
        return _CLASS_LEVELS[self]

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["CleanroomClass"]:
        """Parse 'B', 'grade b', 'Class B' etc.; None for empty input."""
        if value is None:
            return None
        if isinstance(value, CleanroomClass):
            return value
        text = str(value).strip().upper()
        for prefix in ("GRADE ", "CLASS "):
            if text.startswith(prefix):
                text = text[len(prefix):].strip()
        if not text:
            return None
        return cls(text)


_CLASS_LEVELS = {
    CleanroomClass.A: 4,
    CleanroomClass.B: 3,
    CleanroomClass.C: 2,
    CleanroomClass.D: 1,
    CleanroomClass.CNC: 0,
}


class RoomCategory(Enum):
    """Functional categories of pharmaceutical facility rooms."""

    PRODUCTION = "Production"
    QUALITY_CONTROL = "Quality Control"
    WAREHOUSE = "Warehouse"
    UTILITIES = "Utilities"
    PERSONNEL = "Personnel"
    SUPPORT = "Support"


# =============================================================================
# DISPLAY COLOURS
# =============================================================================

CLEANROOM_COLORS = {
    CleanroomClass.A: "#DC143C",    # crimson
    CleanroomClass.B: "#FFA500",    # orange
    CleanroomClass.C: "#4A90E2",    # blue
    CleanroomClass.D: "#90EE90",    # light green
    CleanroomClass.CNC: "#D3D3D3",
}

UNCLASSIFIED_COLOR = "#D3D3D3"


# =============================================================================
# TRANSITION RULES
# =============================================================================

def class_gap(a: Optional[CleanroomClass], b: Optional[CleanroomClass]) -> Optional[int]:
    """Absolute level difference, or None when either side is unclassified."""
    if a is None or b is None:
        return None
    return abs(a.level - b.level)


def requires_airlock(
    a: Optional[CleanroomClass],
    b: Optional[CleanroomClass],
    gap_threshold: int = 2,
) -> bool:
    """
    Whether moving between two grades needs a buffer room.

    True when the level gap reaches the threshold, or when both sides are
    Grade B or cleaner and differ (A <-> B).
    """
    gap = class_gap(a, b)
    if gap is None:
        return False
    if gap >= gap_threshold:
        return True
    return a.level >= 3 and b.level >= 3 and a is not b


def higher_class(
    a: Optional[CleanroomClass],
    b: Optional[CleanroomClass],
) -> Optional[CleanroomClass]:
    """The cleaner of two grades."""
    if a is None:
        return b
    if b is None:
        return a
    return a if a.level >= b.level else b


def cleanroom_color(cleanroom_class: Optional[CleanroomClass]) -> str:
    return CLEANROOM_COLORS.get(cleanroom_class, UNCLASSIFIED_COLOR)
