"""
pharmaplan/llm/services/layout_assistant.py - Layout Assistant Service

Text-generation capability consumed by the layout engine: room extraction
from facility descriptions and the layout rationale paragraph. The
LLM-backed assistant can fall back to the deterministic rule-based one.
"""

from __future__ import annotations

import logging
import os
import re
from collections import Counter
from typing import Iterable, List, Optional, TYPE_CHECKING

from pharmaplan.bootstrap.config import LLMConfig
from pharmaplan.facility.contracts.protocols import ExtractedRequirements, RoomSummary
from pharmaplan.facility.schema.room_sizes import ROOM_SIZE_TABLE, RoomSizeRecord

from ..prompts.layout import (
    RATIONALE_SYSTEM_PROMPT,
    create_extraction_prompt,
    create_extraction_system_prompt,
    create_rationale_prompt,
)
from ..prompts.schemas import RoomExtractionResponse
from ..provider_factory import PROVIDER_ANTHROPIC, PROVIDER_RULE_BASED, create_llm_provider

if TYPE_CHECKING:
    from ..protocol import LLMProviderProtocol

__all__ = [
    "RuleBasedLayoutAssistant",
    "LLMLayoutAssistant",
    "create_layout_assistant",
]

logger = logging.getLogger("llm.services.layout")

_BATCH_PATTERN = re.compile(r"(\d[\d,]*(?:\.\d+)?)\s*(?:l|liters?|litres?)\b", re.IGNORECASE)
_THROUGHPUT_PATTERN = re.compile(
    r"(\d[\d,]*(?:\.\d+)?)\s*(?:units?|tablets?|vials?|capsules?|doses?)\s*(?:/|per)\s*day",
    re.IGNORECASE,
)
_LAYOUT_STYLES = ("linear", "clustered", "compact", "modular")
_FLOW_PRIORITIES = {
    "material flow": "material",
    "personnel flow": "personnel",
    "balanced flow": "balanced",
}


def _number(text: str) -> float:
    return float(text.replace(",", ""))


def _mentions(text: str, phrase: str) -> bool:
    return re.search(rf"\b{re.escape(phrase.lower())}\b", text) is not None


def _phrases(record: RoomSizeRecord) -> List[str]:
    phrases = [record.room_type] + list(record.aliases)
    # Process rooms are usually named by the process alone ("granulation")
    process, _, suffix = record.room_type.rpartition(" ")
    if suffix == "Room" and process.endswith(("ion", "ing")):
        phrases.append(process)
    return phrases


class RuleBasedLayoutAssistant:
    """
    Deterministic layout assistant.

    Extracts rooms by matching reference room names and aliases in the
    description, and writes the rationale from a template. Used in tests,
    offline, and as the fallback for the LLM-backed assistant.
    """

    def __init__(self, table: Iterable[RoomSizeRecord] = ROOM_SIZE_TABLE):
        self._table = tuple(table)

    async def extract_requirements(self, description: str) -> ExtractedRequirements:
        return self.extract(description)

    def extract(self, description: str) -> ExtractedRequirements:
        text = (description or "").lower()
        rooms: List[str] = []
        for record in self._table:
            if record.room_type in rooms:
                continue
            if any(_mentions(text, phrase) for phrase in _phrases(record)):
                rooms.append(record.room_type)

        batch = _BATCH_PATTERN.search(text)
        throughput = _THROUGHPUT_PATTERN.search(text)
        style = next((s for s in _LAYOUT_STYLES if _mentions(text, s)), None)
        flow = next((v for k, v in _FLOW_PRIORITIES.items() if k in text), None)

        logger.debug(f"Rule-based extraction found {len(rooms)} rooms")
        return ExtractedRequirements(
            rooms=rooms,
            batch_size=_number(batch.group(1)) if batch else None,
            throughput=_number(throughput.group(1)) if throughput else None,
            layout_style=style,
            prioritize_flow=flow,
        )

    async def generate_rationale(
        self,
        rooms: List[RoomSummary],
        description: Optional[str] = None,
    ) -> str:
        grades = Counter(r.cleanroom_class for r in rooms if r.cleanroom_class and not r.is_airlock)
        airlocks = sum(1 for r in rooms if r.is_airlock)

        text = f"Layout of {len(rooms)} rooms grouped by cleanroom classification"
        if grades:
            zoning = ", ".join(f"{count} Grade {grade}" for grade, count in sorted(grades.items()))
            text += f" ({zoning})"
        text += (
            ". Rooms linked by material or personnel flow are placed close together "
            "and incompatible rooms are kept apart."
        )
        if airlocks == 1:
            text += " 1 airlock buffers the steep grade transition."
        elif airlocks:
            text += f" {airlocks} airlocks buffer the steep grade transitions."
        return text


class LLMLayoutAssistant:
    """
    LLM-backed layout assistant.

    Features:
    - Schema-validated room extraction (RoomExtractionResponse)
    - Rationale paragraph in the register of a GMP design reviewer
    - Template rationale when the LLM fails
    - Room extraction failures propagate unless extraction_fallback is set
    """

    def __init__(
        self,
        llm: "LLMProviderProtocol",
        fallback: Optional[RuleBasedLayoutAssistant] = None,
        use_fallback: bool = True,
        extraction_fallback: bool = False,
    ):
        """
        Initialize the assistant.

        Args:
            llm: LLM provider instance
            fallback: Deterministic assistant used when the LLM fails
            use_fallback: Whether rationale failures fall back or propagate
            extraction_fallback: Whether room extraction failures fall back
                to rule-based extraction instead of propagating
        """
        self.llm = llm
        self.fallback = fallback or RuleBasedLayoutAssistant()
        self.use_fallback = use_fallback
        self.extraction_fallback = extraction_fallback

    async def extract_requirements(self, description: str) -> ExtractedRequirements:
        try:
            response = await self.llm.complete_json(
                prompt=create_extraction_prompt(description),
                response_model=RoomExtractionResponse,
                system_prompt=create_extraction_system_prompt(),
            )
        except Exception as e:
            if not self.extraction_fallback:
                raise
            logger.warning(f"LLM room extraction failed: {e}, using rule-based extraction")
            return self.fallback.extract(description)

        return ExtractedRequirements(
            rooms=list(response.rooms),
            batch_size=response.batch_size,
            throughput=response.throughput,
            layout_style=response.layout_style,
            prioritize_flow=response.prioritize_flow,
        )

    async def generate_rationale(
        self,
        rooms: List[RoomSummary],
        description: Optional[str] = None,
    ) -> str:
        try:
            response = await self.llm.complete(
                prompt=create_rationale_prompt(rooms, description),
                system_prompt=RATIONALE_SYSTEM_PROMPT,
            )
            return response.content.strip()
        except Exception as e:
            if not self.use_fallback:
                raise
            logger.warning(f"LLM rationale failed: {e}, using template")
            return await self.fallback.generate_rationale(rooms, description)


def create_layout_assistant(config: Optional[LLMConfig] = None):
    """
    Build the layout assistant selected by configuration.

    The rule-based assistant is returned for provider "rule_based", and for
    "anthropic" without an API key when extraction_fallback is enabled.
    """
    config = config or LLMConfig.from_env()
    provider = config.provider.lower()

    if provider == PROVIDER_RULE_BASED:
        return RuleBasedLayoutAssistant()

    if (
        provider == PROVIDER_ANTHROPIC
        and not (config.api_key or os.getenv("ANTHROPIC_API_KEY"))
        and config.extraction_fallback
    ):
        logger.warning("No Anthropic API key configured, using rule-based layout assistant")
        return RuleBasedLayoutAssistant()

    return LLMLayoutAssistant(
        llm=create_llm_provider(config),
        use_fallback=config.fallback_to_deterministic,
        extraction_fallback=config.extraction_fallback,
    )
