"""
pharmaplan/llm/prompts/layout.py - Layout Prompt Templates

Templates for extracting room requirements from facility descriptions and
for explaining generated layouts.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from pharmaplan.facility.contracts.protocols import RoomSummary
from pharmaplan.facility.schema.room_sizes import ROOM_SIZE_TABLE, RoomSizeRecord

__all__ = [
    "EXTRACTION_SYSTEM_PROMPT",
    "RATIONALE_SYSTEM_PROMPT",
    "create_extraction_system_prompt",
    "create_extraction_prompt",
    "create_rationale_prompt",
]

# =============================================================================
# System Prompts
# =============================================================================

EXTRACTION_SYSTEM_PROMPT = """You are a pharmaceutical facility design expert. Extract required rooms and parameters from natural language descriptions.

Guidelines:
- Only use room names from the list of available room types
- Include supporting rooms the process clearly needs (storage, QC, gowning)
- Report batch size in litres and throughput in units/day only when mentioned"""

RATIONALE_SYSTEM_PROMPT = """You are a pharmaceutical facility design expert. Explain the layout decisions in 2-3 sentences.
Focus on GMP compliance, cleanroom zoning, and material/personnel flow."""


# =============================================================================
# Prompt Templates
# =============================================================================


def _room_catalogue(table: Iterable[RoomSizeRecord]) -> str:
    return "\n".join(
        f"- {r.room_type} ({r.category.value}, "
        f"{r.cleanroom_class.value if r.cleanroom_class else 'N/A'})"
        for r in table
    )


def create_extraction_system_prompt(table: Iterable[RoomSizeRecord] = ROOM_SIZE_TABLE) -> str:
    """System prompt listing the available room types."""
    return f"{EXTRACTION_SYSTEM_PROMPT}\n\nAvailable room types:\n{_room_catalogue(table)}"


def create_extraction_prompt(description: str) -> str:
    return f"Facility description:\n{description.strip()}"


def create_rationale_prompt(rooms: List[RoomSummary], description: Optional[str] = None) -> str:
    """
    Prompt asking why a generated layout suits GMP.

    Args:
        rooms: Rooms in the layout, airlocks included
        description: Original request text, if any
    """
    lines = []
    if description:
        lines.append(f'Original request: "{description}"')
        lines.append("")
    lines.append(f"Generated layout with {len(rooms)} rooms:")
    lines.extend(f"- {room.describe()}" for room in rooms)
    lines.append("")
    lines.append("Explain why this layout is appropriate for GMP compliance.")
    return "\n".join(lines)
