"""
pharmaplan/llm/prompts/schemas.py - Pydantic Response Models

Structured response schemas for LLM outputs so extraction results are
validated before they reach the layout engine.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = ["RoomExtractionResponse"]


# =============================================================================
# Room Extraction Schemas
# =============================================================================


class RoomExtractionResponse(BaseModel):
    """Response schema for room extraction from a facility description."""

    model_config = ConfigDict(populate_by_name=True)

    rooms: List[str] = Field(default_factory=list, description="Required room type names")
    batch_size: Optional[float] = Field(
        None, alias="batchSize", ge=0, description="Batch size in litres, if mentioned"
    )
    throughput: Optional[float] = Field(
        None, ge=0, description="Throughput in units/day, if mentioned"
    )
    layout_style: Optional[str] = Field(
        None, alias="layoutStyle", description="linear | clustered | compact | modular"
    )
    prioritize_flow: Optional[str] = Field(
        None, alias="prioritizeFlow", description="material | personnel | balanced"
    )

    @field_validator("rooms")
    @classmethod
    def _strip_rooms(cls, value: List[str]) -> List[str]:
        return [name.strip() for name in value if name and name.strip()]
