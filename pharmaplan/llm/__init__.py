"""
pharmaplan/llm - Text-generation layer

Provider abstraction (Anthropic Claude, local Ollama) and the layout
assistant the facility engine uses for room extraction and rationale text.

Usage:
    from pharmaplan.llm import create_layout_assistant
    from pharmaplan.bootstrap.config import load_config

    config = load_config()
    assistant = create_layout_assistant(config.llm)
    extracted = await assistant.extract_requirements("Sterile filling line ...")
"""

from .protocol import (
    LLMProviderProtocol,
    LLMResponse,
    LLMOptions,
)
from .provider_factory import create_llm_provider
from .exceptions import (
    LLMError,
    ProviderUnavailableError,
    ValidationError,
    TransientError,
)
from .services import (
    LLMLayoutAssistant,
    RuleBasedLayoutAssistant,
    create_layout_assistant,
)

__all__ = [
    # Protocol
    "LLMProviderProtocol",
    "LLMResponse",
    "LLMOptions",
    # Factory
    "create_llm_provider",
    "create_layout_assistant",
    # Assistants
    "LLMLayoutAssistant",
    "RuleBasedLayoutAssistant",
    # Exceptions
    "LLMError",
    "ProviderUnavailableError",
    "ValidationError",
    "TransientError",
]
