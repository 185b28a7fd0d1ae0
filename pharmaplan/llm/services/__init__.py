"""
pharmaplan/llm/services - LLM-backed services
"""

from .layout_assistant import (
    LLMLayoutAssistant,
    RuleBasedLayoutAssistant,
    create_layout_assistant,
)

__all__ = [
    "LLMLayoutAssistant",
    "RuleBasedLayoutAssistant",
    "create_layout_assistant",
]
