"""
pharmaplan/llm/provider_factory.py - LLM Provider Factory

Creates an LLM provider from LLMConfig. Supports the Anthropic API and a
local Ollama server.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from pharmaplan.bootstrap.config import LLMConfig

from .protocol import LLMProviderProtocol
from .providers.anthropic import AnthropicProvider
from .providers.local import DEFAULT_BASE_URL, DEFAULT_MODEL, LocalProvider

__all__ = [
    "PROVIDER_ANTHROPIC",
    "PROVIDER_LOCAL",
    "PROVIDER_OLLAMA",
    "PROVIDER_RULE_BASED",
    "create_llm_provider",
]

logger = logging.getLogger("llm.factory")

PROVIDER_ANTHROPIC = "anthropic"
PROVIDER_LOCAL = "local"
PROVIDER_OLLAMA = "ollama"  # Alias for local
PROVIDER_RULE_BASED = "rule_based"

ENV_ANTHROPIC_API_KEY = "ANTHROPIC_API_KEY"


def create_llm_provider(config: Optional[LLMConfig] = None) -> LLMProviderProtocol:
    """
    Create an LLM provider based on configuration.

    Args:
        config: LLM configuration (environment defaults when omitted)

    Returns:
        Configured LLMProviderProtocol instance

    Raises:
        ValueError: If the provider type is unknown or rule-based
    """
    config = config or LLMConfig.from_env()
    provider = config.provider.lower()
    if provider == PROVIDER_OLLAMA:
        provider = PROVIDER_LOCAL

    common_options = {
        "max_tokens": config.max_tokens,
        "temperature": config.temperature,
        "timeout_seconds": config.timeout_seconds,
        "retry_attempts": config.retry_attempts,
        "retry_delay_ms": config.retry_delay_ms,
    }

    if provider == PROVIDER_ANTHROPIC:
        api_key = config.api_key or os.getenv(ENV_ANTHROPIC_API_KEY)
        if not api_key:
            logger.warning("No Anthropic API key found. Set ANTHROPIC_API_KEY or PHARMAPLAN_LLM_API_KEY")
        logger.info(f"Creating Anthropic provider with model: {config.model}")
        return AnthropicProvider(model=config.model, api_key=api_key, **common_options)

    if provider == PROVIDER_LOCAL:
        model = config.model if not config.model.startswith("claude") else DEFAULT_MODEL
        base_url = config.base_url or DEFAULT_BASE_URL
        logger.info(f"Creating local provider with model: {model} at {base_url}")
        return LocalProvider(model=model, base_url=base_url, **common_options)

    raise ValueError(
        f"Unknown LLM provider: {config.provider}. "
        f"Supported: {PROVIDER_ANTHROPIC}, {PROVIDER_LOCAL}"
    )
