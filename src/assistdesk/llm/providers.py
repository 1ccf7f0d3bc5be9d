"""Unified LLM provider abstraction for Anthropic, OpenAI, and Google APIs.

Gives the message classifier one interface over the generative-text
services it can fall back to, with token counts, cost estimation, and
latency measurement on every response.
"""

import logging
import os
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Type

logger = logging.getLogger(__name__)


# Token pricing per million tokens (input, output) in USD
PRICING = {
    # Anthropic
    "claude-3-haiku-20240307": (0.25, 1.25),
    "claude-3-5-haiku-20241022": (0.80, 4.00),
    "claude-haiku-4-5-20251001": (0.80, 4.00),
    "claude-sonnet-4-5-20250929": (3.00, 15.00),
    # OpenAI
    "gpt-4o-mini": (0.15, 0.60),
    "gpt-4o": (2.50, 10.00),
    "gpt-3.5-turbo": (0.50, 1.50),
    # Google Gemini
    "gemini-2.0-flash": (0.10, 0.40),
    "gemini-1.5-flash": (0.075, 0.30),
    "gemini-2.5-pro": (1.25, 10.00),
}


@dataclass
class LLMResponse:
    """Standardized response from any LLM provider."""

    text: str
    model: str
    provider: str
    input_tokens: int = 0
    output_tokens: int = 0
    latency_ms: float = 0.0
    cost_usd: float = 0.0
    raw_response: Optional[Any] = field(default=None, repr=False)

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


def _estimate_cost(model: str, input_tokens: int, output_tokens: int) -> float:
    """Estimate cost in USD for a given model and token counts."""
    pricing = PRICING.get(model)
    if pricing is None:
        # Try partial match, longest key first so "gpt-4o-mini" beats "gpt-4o"
        for key in sorted(PRICING, key=len, reverse=True):
            if key in model or model in key:
                pricing = PRICING[key]
                break
    if pricing is None:
        return 0.0
    input_price, output_price = pricing
    return (input_tokens * input_price + output_tokens * output_price) / 1_000_000


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    provider_name: str = "base"

    def __init__(self, model: str, api_key: Optional[str] = None, timeout: Optional[float] = None):
        self.model = model
        self.api_key = api_key
        self.timeout = timeout

    @abstractmethod
    def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        max_tokens: int = 150,
        temperature: float = 0.0,
    ) -> LLMResponse:
        """Generate a text completion."""

    def _client_kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"api_key": self.api_key}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        return kwargs


class AnthropicProvider(LLMProvider):
    """Anthropic Messages API provider (Claude Haiku, Sonnet, etc.)."""

    provider_name = "anthropic"

    def __init__(
        self,
        model: str = "claude-3-haiku-20240307",
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        super().__init__(model, api_key or os.environ.get("ANTHROPIC_API_KEY"), timeout)
        try:
            import anthropic
        except ImportError:
            raise ImportError("anthropic package required: pip install anthropic")
        self.client = anthropic.Anthropic(**self._client_kwargs())

    def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        max_tokens: int = 150,
        temperature: float = 0.0,
    ) -> LLMResponse:
        kwargs: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system_prompt:
            kwargs["system"] = system_prompt
        if temperature > 0:
            kwargs["temperature"] = temperature

        t0 = time.perf_counter()
        response = self.client.messages.create(**kwargs)
        latency = (time.perf_counter() - t0) * 1000

        input_tokens = response.usage.input_tokens
        output_tokens = response.usage.output_tokens
        text = response.content[0].text if response.content else ""

        return LLMResponse(
            text=text.strip(),
            model=self.model,
            provider=self.provider_name,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            latency_ms=latency,
            cost_usd=_estimate_cost(self.model, input_tokens, output_tokens),
            raw_response=response,
        )


class OpenAIProvider(LLMProvider):
    """OpenAI Chat Completions provider (GPT-4o mini, GPT-4o, etc.)."""

    provider_name = "openai"

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        super().__init__(model, api_key or os.environ.get("OPENAI_API_KEY"), timeout)
        try:
            import openai
        except ImportError:
            raise ImportError("openai package required: pip install openai")
        self.client = openai.OpenAI(**self._client_kwargs())

    def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        max_tokens: int = 150,
        temperature: float = 0.0,
    ) -> LLMResponse:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        t0 = time.perf_counter()
        response = self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            max_tokens=max_tokens,
            temperature=temperature,
        )
        latency = (time.perf_counter() - t0) * 1000

        usage = response.usage
        input_tokens = usage.prompt_tokens if usage else 0
        output_tokens = usage.completion_tokens if usage else 0

        return LLMResponse(
            text=(response.choices[0].message.content or "").strip(),
            model=self.model,
            provider=self.provider_name,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            latency_ms=latency,
            cost_usd=_estimate_cost(self.model, input_tokens, output_tokens),
            raw_response=response,
        )


class GoogleProvider(LLMProvider):
    """Google Gemini API provider."""

    provider_name = "google"

    def __init__(
        self,
        model: str = "gemini-2.0-flash",
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        super().__init__(model, api_key or os.environ.get("GOOGLE_API_KEY"), timeout)
        try:
            from google import genai
        except ImportError:
            raise ImportError("google-genai package required: pip install google-genai")
        self._genai = genai
        client_kwargs: Dict[str, Any] = {"api_key": self.api_key}
        if self.timeout is not None:
            # HttpOptions takes milliseconds
            client_kwargs["http_options"] = genai.types.HttpOptions(timeout=int(self.timeout * 1000))
        self.client = genai.Client(**client_kwargs)

    def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        max_tokens: int = 150,
        temperature: float = 0.0,
    ) -> LLMResponse:
        config = self._genai.types.GenerateContentConfig(
            max_output_tokens=max_tokens,
            temperature=temperature,
        )
        if system_prompt:
            config.system_instruction = system_prompt

        t0 = time.perf_counter()
        response = self.client.models.generate_content(
            model=self.model,
            contents=prompt,
            config=config,
        )
        latency = (time.perf_counter() - t0) * 1000

        input_tokens = 0
        output_tokens = 0
        if response.usage_metadata:
            input_tokens = response.usage_metadata.prompt_token_count or 0
            output_tokens = response.usage_metadata.candidates_token_count or 0

        return LLMResponse(
            text=response.text.strip() if response.text else "",
            model=self.model,
            provider=self.provider_name,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            latency_ms=latency,
            cost_usd=_estimate_cost(self.model, input_tokens, output_tokens),
            raw_response=response,
        )


# Provider registry
_PROVIDERS: Dict[str, Type[LLMProvider]] = {
    "anthropic": AnthropicProvider,
    "openai": OpenAIProvider,
    "google": GoogleProvider,
}


def create_provider(
    name: str,
    model: Optional[str] = None,
    api_key: Optional[str] = None,
    timeout: Optional[float] = None,
) -> LLMProvider:
    """Factory function to create an LLM provider.

    Args:
        name: Provider name ("anthropic", "openai", "google").
        model: Model ID. If None, uses provider default.
        api_key: API key. If None, reads from environment.
        timeout: Request timeout in seconds passed to the SDK client.

    Returns:
        Configured LLMProvider instance.
    """
    provider_cls = _PROVIDERS.get(name)
    if provider_cls is None:
        raise ValueError(f"Unknown provider: {name}. Available: {list(_PROVIDERS.keys())}")

    kwargs: Dict[str, Any] = {}
    if model:
        kwargs["model"] = model
    if api_key:
        kwargs["api_key"] = api_key
    if timeout is not None:
        kwargs["timeout"] = timeout

    return provider_cls(**kwargs)
