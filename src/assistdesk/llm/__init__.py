"""Unified LLM provider module for assistdesk.

Supports Anthropic, OpenAI, and Google Gemini with a consistent
interface, cost tracking, and budget enforcement.
"""

from assistdesk.llm.providers import (
    LLMProvider,
    LLMResponse,
    AnthropicProvider,
    OpenAIProvider,
    GoogleProvider,
    create_provider,
    PRICING,
)
from assistdesk.llm.cost_tracker import (
    CostTracker,
    BudgetExceededError,
    CallRecord,
)

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "AnthropicProvider",
    "OpenAIProvider",
    "GoogleProvider",
    "create_provider",
    "PRICING",
    "CostTracker",
    "BudgetExceededError",
    "CallRecord",
]
