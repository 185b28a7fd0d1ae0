"""
pharmaplan/llm/prompts - Prompt templates and response schemas
"""

from .layout import (
    EXTRACTION_SYSTEM_PROMPT,
    RATIONALE_SYSTEM_PROMPT,
    create_extraction_system_prompt,
    create_extraction_prompt,
    create_rationale_prompt,
)
from .schemas import RoomExtractionResponse

__all__ = [
    "EXTRACTION_SYSTEM_PROMPT",
    "RATIONALE_SYSTEM_PROMPT",
    "create_extraction_system_prompt",
    "create_extraction_prompt",
    "create_rationale_prompt",
    "RoomExtractionResponse",
]
