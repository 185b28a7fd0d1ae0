"""
pharmaplan/llm/providers/anthropic.py - Anthropic Claude Provider

Implementation of LLMProviderProtocol for Claude models.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import anthropic

from ..protocol import LLMOptions, LLMResponse
from ..exceptions import ProviderUnavailableError, TransientError
from .base import BaseProvider

__all__ = ["AnthropicProvider"]

logger = logging.getLogger("llm.anthropic")

TRANSIENT_STATUS_CODES = {408, 429, 500, 502, 503, 504, 529}

_TRANSIENT_PATTERNS = (
    "rate limit",
    "overloaded",
    "timeout",
    "connection",
    "temporarily unavailable",
)


class AnthropicProvider(BaseProvider):
    """
    Claude provider using the Anthropic API.

    Configuration via environment or LLMConfig:
        - ANTHROPIC_API_KEY or config.api_key
        - Model: claude-sonnet-4-20250514 by default
    """

    def __init__(
        self,
        model: str = "claude-sonnet-4-20250514",
        api_key: Optional[str] = None,
        **kwargs: Any,
    ):
        super().__init__(model=model, **kwargs)
        self._api_key = api_key
        self._client: Optional[anthropic.AsyncAnthropic] = None

    def _get_client(self) -> anthropic.AsyncAnthropic:
        """Get or create the Anthropic client."""
        if self._client is not None:
            return self._client

        try:
            # Client falls back to ANTHROPIC_API_KEY when api_key is None
            self._client = anthropic.AsyncAnthropic(
                api_key=self._api_key or None,
                timeout=self.timeout_seconds,
            )
        except Exception as e:
            raise ProviderUnavailableError(
                "anthropic",
                f"Failed to initialize Anthropic client: {e}",
            ) from e

        return self._client

    async def _raw_complete(
        self,
        prompt: str,
        system_prompt: Optional[str],
        options: LLMOptions,
    ) -> LLMResponse:
        client = self._get_client()

        try:
            response = await client.messages.create(
                model=self.model,
                max_tokens=options.max_tokens or self.default_max_tokens,
                temperature=options.temperature,
                system=system_prompt or "",
                messages=[{"role": "user", "content": prompt}],
            )
        except Exception as e:
            if self._is_transient_error(e):
                raise TransientError(str(e), e) from e
            raise

        content = "".join(
            block.text for block in response.content or [] if hasattr(block, "text")
        )
        return LLMResponse(
            content=content,
            model=response.model,
            usage={
                "prompt_tokens": response.usage.input_tokens,
                "completion_tokens": response.usage.output_tokens,
            },
            finish_reason=response.stop_reason or "stop",
        )

    def _is_transient_error(self, error: Exception) -> bool:
        if getattr(error, "status_code", None) in TRANSIENT_STATUS_CODES:
            return True
        error_str = str(error).lower()
        return any(pattern in error_str for pattern in _TRANSIENT_PATTERNS)
