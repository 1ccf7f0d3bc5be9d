"""Tests for the LLM provider wrappers and cost tracker."""

from unittest.mock import MagicMock, patch

import pytest

from assistdesk.llm.providers import (
    LLMResponse,
    OpenAIProvider,
    AnthropicProvider,
    GoogleProvider,
    create_provider,
    _estimate_cost,
    PRICING,
)
from assistdesk.llm.cost_tracker import CostTracker, BudgetExceededError


def _openai_module(content="  test response  ", prompt_tokens=100, completion_tokens=50):
    module = MagicMock()
    client = MagicMock()
    module.OpenAI.return_value = client

    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    response.usage.prompt_tokens = prompt_tokens
    response.usage.completion_tokens = completion_tokens
    client.chat.completions.create.return_value = response
    return module


def _anthropic_module(text="  claude response  ", input_tokens=80, output_tokens=40):
    module = MagicMock()
    client = MagicMock()
    module.Anthropic.return_value = client

    response = MagicMock()
    response.content = [MagicMock()]
    response.content[0].text = text
    response.usage.input_tokens = input_tokens
    response.usage.output_tokens = output_tokens
    client.messages.create.return_value = response
    return module


# --- LLMResponse tests ---

class TestLLMResponse:
    def test_total_tokens(self):
        r = LLMResponse(
            text="hello", model="gpt-4o-mini", provider="openai",
            input_tokens=100, output_tokens=50,
        )
        assert r.total_tokens == 150

    def test_defaults(self):
        r = LLMResponse(text="x", model="m", provider="p")
        assert r.input_tokens == 0
        assert r.output_tokens == 0
        assert r.cost_usd == 0.0
        assert r.latency_ms == 0.0


# --- Cost estimation ---

class TestCostEstimation:
    def test_known_model(self):
        cost = _estimate_cost("gpt-4o", 1_000_000, 1_000_000)
        assert cost == pytest.approx(12.50, abs=0.01)

    def test_unknown_model(self):
        cost = _estimate_cost("unknown-model-xyz", 1000, 1000)
        assert cost == 0.0

    def test_partial_match_prefers_longest_key(self):
        # A dated snapshot of gpt-4o-mini must be priced as mini, not gpt-4o
        cost = _estimate_cost("gpt-4o-mini-2024-07-18", 1_000_000, 0)
        assert cost == pytest.approx(0.15)

    def test_default_classifier_models_priced(self):
        for model in ("claude-3-haiku-20240307", "gpt-4o-mini", "gemini-2.0-flash"):
            assert model in PRICING


# --- OpenAI Provider ---

class TestOpenAIProvider:
    def test_generate(self):
        module = _openai_module()
        with patch.dict("sys.modules", {"openai": module}):
            provider = OpenAIProvider(model="gpt-4o-mini", api_key="test-key")
            result = provider.generate("hello", system_prompt="sys", max_tokens=100)

        assert result.text == "test response"
        assert result.provider == "openai"
        assert result.model == "gpt-4o-mini"
        assert result.input_tokens == 100
        assert result.output_tokens == 50
        assert result.cost_usd > 0

        call = module.OpenAI.return_value.chat.completions.create.call_args
        assert call.kwargs["messages"][0] == {"role": "system", "content": "sys"}
        assert call.kwargs["max_tokens"] == 100

    def test_timeout_passed_to_client(self):
        module = _openai_module()
        with patch.dict("sys.modules", {"openai": module}):
            OpenAIProvider(api_key="test-key", timeout=12.5)

        module.OpenAI.assert_called_once_with(api_key="test-key", timeout=12.5)


# --- Anthropic Provider ---

class TestAnthropicProvider:
    def test_generate(self):
        module = _anthropic_module()
        with patch.dict("sys.modules", {"anthropic": module}):
            provider = AnthropicProvider(api_key="test-key")
            result = provider.generate("hello")

        assert result.text == "claude response"
        assert result.provider == "anthropic"
        assert result.model == "claude-3-haiku-20240307"
        assert result.input_tokens == 80

    def test_zero_temperature_not_sent(self):
        module = _anthropic_module()
        with patch.dict("sys.modules", {"anthropic": module}):
            provider = AnthropicProvider(api_key="test-key")
            provider.generate("hello", max_tokens=150, temperature=0.0)

        kwargs = module.Anthropic.return_value.messages.create.call_args.kwargs
        assert "temperature" not in kwargs
        assert kwargs["max_tokens"] == 150

    def test_api_key_from_environment(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "env-key")
        module = _anthropic_module()
        with patch.dict("sys.modules", {"anthropic": module}):
            provider = AnthropicProvider()

        assert provider.api_key == "env-key"


# --- Google Provider ---

class TestGoogleProvider:
    def test_generate(self):
        genai = MagicMock()
        google = MagicMock()
        google.genai = genai

        response = MagicMock()
        response.text = " gemini response "
        response.usage_metadata.prompt_token_count = 30
        response.usage_metadata.candidates_token_count = 10
        genai.Client.return_value.models.generate_content.return_value = response

        with patch.dict("sys.modules", {"google": google, "google.genai": genai}):
            provider = GoogleProvider(api_key="test-key")
            result = provider.generate("hello")

        assert result.text == "gemini response"
        assert result.provider == "google"
        assert result.output_tokens == 10


# --- Factory function ---

class TestCreateProvider:
    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown provider"):
            create_provider("unknown_provider")

    def test_create_openai(self):
        module = _openai_module()
        with patch.dict("sys.modules", {"openai": module}):
            p = create_provider("openai", model="gpt-4o", api_key="key")
        assert p.provider_name == "openai"
        assert p.model == "gpt-4o"

    def test_create_anthropic_default_model(self):
        module = _anthropic_module()
        with patch.dict("sys.modules", {"anthropic": module}):
            p = create_provider("anthropic", api_key="key")
        assert p.provider_name == "anthropic"
        assert p.model == "claude-3-haiku-20240307"


# --- Cost Tracker ---

class TestCostTracker:
    def test_basic_tracking(self):
        tracker = CostTracker()
        tracker.record("openai", "gpt-4o-mini", "classify", "m1", 100, 50, 0.05, 500)
        tracker.record("openai", "gpt-4o-mini", "classify", "m2", 120, 60, 0.06, 600)

        assert tracker.total_cost == pytest.approx(0.11)
        assert tracker.total_calls == 2

    def test_budget_enforcement(self):
        tracker = CostTracker(max_budget_usd=0.10)
        tracker.record("openai", "gpt-4o-mini", "classify", "m1", 100, 50, 0.08, 500)

        with pytest.raises(BudgetExceededError):
            tracker.record("openai", "gpt-4o-mini", "classify", "m2", 100, 50, 0.05, 500)
        # The overshooting call was still paid for
        assert tracker.total_calls == 2
        assert tracker.total_cost == pytest.approx(0.13)

    def test_budget_exhausted(self):
        tracker = CostTracker(max_budget_usd=0.10)
        assert not tracker.budget_exhausted

        tracker.record("openai", "gpt-4o-mini", "classify", "m1", 100, 50, 0.06, 500)
        assert not tracker.budget_exhausted

        tracker.record("openai", "gpt-4o-mini", "classify", "m2", 100, 50, 0.04, 500)
        assert tracker.budget_exhausted

    def test_no_budget_never_exhausted(self):
        tracker = CostTracker()
        tracker.record("openai", "gpt-4o-mini", "classify", "m1", 100, 50, 1000.0, 500)
        assert not tracker.budget_exhausted

    def test_summary(self):
        tracker = CostTracker(max_budget_usd=100.0)
        tracker.record("openai", "gpt-4o-mini", "classify", "m1", 100, 50, 0.05, 500)
        tracker.record("anthropic", "claude-3-haiku-20240307", "classify", "m2", 200, 100, 0.10, 800)

        summary = tracker.get_summary()
        assert summary["total_cost_usd"] == pytest.approx(0.15)
        assert summary["total_calls"] == 2
        assert summary["total_input_tokens"] == 300
        assert "openai/gpt-4o-mini" in summary["by_model"]
        assert "anthropic/claude-3-haiku-20240307" in summary["by_model"]
        assert summary["budget_remaining_usd"] == pytest.approx(99.85)

    def test_save_load(self, tmp_path):
        tracker = CostTracker(max_budget_usd=50.0)
        tracker.record("openai", "gpt-4o-mini", "classify", "m1", 100, 50, 0.05, 500)
        tracker.record("anthropic", "claude-3-haiku-20240307", "classify", "m2", 200, 100, 0.10, 800)

        save_path = str(tmp_path / "costs.json")
        tracker.save(save_path)

        loaded = CostTracker.load(save_path)
        assert loaded.total_cost == pytest.approx(0.15)
        assert loaded.total_calls == 2
        assert loaded.max_budget_usd == 50.0
        assert loaded.records[1].message_id == "m2"

    def test_load_over_budget(self, tmp_path):
        tracker = CostTracker(max_budget_usd=0.10)
        tracker.record("openai", "gpt-4o-mini", "classify", "m1", 100, 50, 0.08, 500)
        with pytest.raises(BudgetExceededError):
            tracker.record("openai", "gpt-4o-mini", "classify", "m2", 100, 50, 0.05, 500)

        save_path = str(tmp_path / "costs.json")
        tracker.save(save_path)

        loaded = CostTracker.load(save_path)
        assert loaded.total_calls == 2
        assert loaded.total_cost == pytest.approx(0.13)
        assert loaded.budget_exhausted

    def test_record_response(self):
        tracker = CostTracker()
        response = LLMResponse(
            text="test", model="gpt-4o-mini", provider="openai",
            input_tokens=100, output_tokens=50, cost_usd=0.05, latency_ms=500,
        )
        tracker.record_response(response, task="classify", message_id="m1")
        assert tracker.total_calls == 1
        assert tracker.total_cost == pytest.approx(0.05)
        assert tracker.records[0].task == "classify"
