"""
pharmaplan/llm/providers/local.py - Local LLM Provider (Ollama)

Implementation of LLMProviderProtocol for local LLMs served by Ollama.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ..protocol import LLMOptions, LLMResponse
from ..exceptions import TransientError
from .base import BaseProvider

__all__ = ["LocalProvider", "DEFAULT_BASE_URL", "DEFAULT_MODEL"]

logger = logging.getLogger("llm.local")

DEFAULT_BASE_URL = "http://localhost:11434"
DEFAULT_MODEL = "llama3"


class LocalProvider(BaseProvider):
    """
    Local LLM provider using Ollama.

    Requires Ollama to be running locally:
        - Start: ollama serve
        - Pull model: ollama pull llama3
    """

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        **kwargs: Any,
    ):
        super().__init__(model=model, **kwargs)
        self.base_url = base_url.rstrip("/")
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout_seconds,
            )
        return self._client

    async def _raw_complete(
        self,
        prompt: str,
        system_prompt: Optional[str],
        options: LLMOptions,
    ) -> LLMResponse:
        client = self._get_client()
        payload = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "num_predict": options.max_tokens or self.default_max_tokens,
                "temperature": options.temperature,
            },
        }
        if system_prompt:
            payload["system"] = system_prompt
        if options.stop_sequences:
            payload["options"]["stop"] = options.stop_sequences

        try:
            response = await client.post("/api/generate", json=payload)
        except httpx.TransportError as e:
            raise TransientError(str(e), e) from e

        if response.status_code != 200:
            raise TransientError(
                f"Ollama returned status {response.status_code}: {response.text}"
            )

        data = response.json()
        return LLMResponse(
            content=data.get("response", ""),
            model=data.get("model", self.model),
            usage={
                "prompt_tokens": data.get("prompt_eval_count", 0),
                "completion_tokens": data.get("eval_count", 0),
            },
            finish_reason=data.get("done_reason", "stop"),
        )
