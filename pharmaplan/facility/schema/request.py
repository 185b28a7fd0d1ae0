"""
request.py - Layout generation request model v1.0

Facility Layout Engine
Pydantic model for the generation request. Accepts both snake_case and the
camelCase wire names (explicitRooms, batchSize, layoutStyle, prioritizeFlow).
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pharmaplan.facility.schema.room import CapacityHints

__all__ = [
    'LayoutStyle',
    'PrioritizeFlow',
    'CapacitySpec',
    'LayoutConstraints',
    'LayoutGenerationRequest',
]


class LayoutStyle(str, Enum):
    """Overall arrangement preference."""

    LINEAR = "linear"
    COMPACT = "compact"
    CLUSTERED = "clustered"
    MODULAR = "modular"


class PrioritizeFlow(str, Enum):
    """Flow type whose adjacency is favoured during placement."""

    MATERIAL = "material"
    PERSONNEL = "personnel"
    BALANCED = "balanced"


class CapacitySpec(BaseModel):
    """Production capacity hints."""

    model_config = ConfigDict(populate_by_name=True)

    batch_size: Optional[float] = Field(
        None, alias="batchSize", ge=0, description="Batch size (L)"
    )
    throughput: Optional[float] = Field(
        None, ge=0, description="Throughput (units/day)"
    )

    def to_hints(self) -> CapacityHints:
        return CapacityHints(batch_size=self.batch_size, throughput=self.throughput)


class LayoutConstraints(BaseModel):
    """Layout preferences."""

    model_config = ConfigDict(populate_by_name=True)

    layout_style: Optional[LayoutStyle] = Field(None, alias="layoutStyle")
    prioritize_flow: Optional[PrioritizeFlow] = Field(None, alias="prioritizeFlow")


class LayoutGenerationRequest(BaseModel):
    """
    A layout generation request.

    Exactly one of `description` or `explicit_rooms` drives room selection;
    when explicit rooms are given they take precedence and no extraction
    is performed.
    """

    model_config = ConfigDict(populate_by_name=True)

    description: Optional[str] = Field(
        None, description="Natural-language facility description"
    )
    explicit_rooms: Optional[List[str]] = Field(
        None, alias="explicitRooms", description="Room-type names"
    )
    capacity: Optional[CapacitySpec] = None
    constraints: Optional[LayoutConstraints] = None

    @field_validator("description")
    @classmethod
    def _strip_description(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        return value or None

    @field_validator("explicit_rooms")
    @classmethod
    def _clean_rooms(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is None:
            return None
        rooms = [name.strip() for name in value if name and name.strip()]
        return rooms or None

    @property
    def has_room_source(self) -> bool:
        return bool(self.explicit_rooms) or bool(self.description)

    def capacity_hints(self) -> CapacityHints:
        if self.capacity is None:
            return CapacityHints()
        return self.capacity.to_hints()
