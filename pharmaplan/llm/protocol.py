"""
pharmaplan/llm/protocol.py - LLM Provider Protocol Definition

Abstract protocol for LLM providers so the Anthropic API and a local
Ollama server can be swapped behind the layout assistant.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol, Type, runtime_checkable
import uuid

from pydantic import BaseModel

__all__ = [
    "LLMResponse",
    "LLMOptions",
    "LLMProviderProtocol",
]


@dataclass
class LLMResponse:
    """Response from an LLM completion request."""

    content: str
    model: str
    usage: Dict[str, int] = field(default_factory=dict)
    finish_reason: str = "stop"
    latency_ms: int = 0
    request_id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])

    def __post_init__(self):
        self.usage.setdefault("prompt_tokens", 0)
        self.usage.setdefault("completion_tokens", 0)

    @property
    def total_tokens(self) -> int:
        return self.usage.get("prompt_tokens", 0) + self.usage.get("completion_tokens", 0)


@dataclass
class LLMOptions:
    """Options for LLM completion requests."""

    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    stop_sequences: Optional[list] = None
    timeout_seconds: int = 60

    def merge_with_defaults(
        self,
        default_max_tokens: int = 2048,
        default_temperature: float = 0.3,
    ) -> "LLMOptions":
        """Return new options with defaults filled in."""
        return LLMOptions(
            max_tokens=self.max_tokens or default_max_tokens,
            temperature=self.temperature if self.temperature is not None else default_temperature,
            stop_sequences=self.stop_sequences,
            timeout_seconds=self.timeout_seconds,
        )


@runtime_checkable
class LLMProviderProtocol(Protocol):
    """
    Protocol for LLM providers.

    All providers implement these methods so they are interchangeable and
    easy to replace with mocks in tests.
    """

    async def complete(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        options: Optional[LLMOptions] = None,
    ) -> LLMResponse:
        """
        Generate a completion for the given prompt.

        Args:
            prompt: The user prompt to complete
            system_prompt: Optional system instructions
            options: Optional completion options

        Returns:
            LLMResponse with content and metadata
        """
        ...

    async def complete_json(
        self,
        prompt: str,
        response_model: Type[BaseModel],
        system_prompt: Optional[str] = None,
        options: Optional[LLMOptions] = None,
    ) -> BaseModel:
        """
        Generate a JSON completion validated against a Pydantic model.

        Raises:
            ValidationError: If the response doesn't match the schema
        """
        ...

    def get_usage_stats(self) -> Dict[str, Any]:
        """Request, token and error counters for this session."""
        ...
