"""Tests for the two-tier message classifier."""

import threading
import time
from unittest.mock import MagicMock, patch

import pytest

from assistdesk.config import AssistDeskConfig, LLMConfig
from assistdesk.llm import CostTracker, LLMProvider, LLMResponse
from assistdesk.messaging.cache import InMemoryClassificationCache
from assistdesk.messaging.classifier import (
    MessageClassifier,
    build_prompt,
    create_classifier,
    extract_json_object,
    summarize_classifications,
)
from assistdesk.messaging.models import (
    ClassificationMethod,
    ClassificationResult,
    Confidence,
    MessageSource,
    NormalizedMessage,
    ResponseRequirement,
)


class FakeProvider(LLMProvider):
    """Provider returning canned text, or raising, without any network."""

    def __init__(self, name="anthropic", text='{"requires_response": "yes", "reason": "Asks a question"}',
                 error=None, cost=0.0, delay=0.0):
        super().__init__(model=f"{name}-test")
        self.provider_name = name
        self.text = text
        self.error = error
        self.cost = cost
        self.delay = delay
        self.calls = 0
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def generate(self, prompt, system_prompt=None, max_tokens=150, temperature=0.0):
        with self._lock:
            self.calls += 1
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                time.sleep(self.delay)
            if self.error is not None:
                raise self.error
            return LLMResponse(text=self.text, model=self.model, provider=self.provider_name,
                               input_tokens=50, output_tokens=10, cost_usd=self.cost)
        finally:
            with self._lock:
                self.in_flight -= 1


def make_message(msg_id="m1", preview="hey there", is_dm=False, source=MessageSource.SLACK, subject=None):
    return NormalizedMessage(
        id=msg_id,
        source=source,
        sender_name="Alex Doe",
        preview=preview,
        subject=subject,
        is_direct_message=is_dm,
    )


# --- Helpers ---

class TestPrompt:
    def test_contains_message_fields(self):
        prompt = build_prompt(make_message(preview="Budget question", subject="Q3"))
        assert "From: Alex Doe" in prompt
        assert "Subject: Q3" in prompt
        assert "Message: Budget question" in prompt
        assert '"requires_response"' in prompt

    def test_missing_subject(self):
        assert "Subject: (no subject)" in build_prompt(make_message())


class TestExtractJson:
    def test_object_inside_prose(self):
        text = 'Sure:\n{"requires_response": "no",\n "reason": "FYI"}\nHope that helps'
        assert extract_json_object(text) == {"requires_response": "no", "reason": "FYI"}

    def test_span_runs_to_last_brace(self):
        text = '{"requires_response": "yes", "reason": "a"} or {"requires_response": "no"}'
        assert extract_json_object(text) is None

    def test_no_object(self):
        assert extract_json_object("I cannot tell") is None

    def test_invalid_json(self):
        assert extract_json_object("{not json}") is None

    def test_none(self):
        assert extract_json_object(None) is None


# --- Classification ---

class TestRuleShortCircuit:
    @pytest.mark.asyncio
    async def test_confident_rule_skips_llm(self):
        provider = FakeProvider()
        classifier = MessageClassifier(providers=[provider])

        result = await classifier.classify(make_message(preview="FYI deck attached"))

        assert result.method == ClassificationMethod.RULE
        assert result.requires_response == ResponseRequirement.NO
        assert provider.calls == 0

    @pytest.mark.asyncio
    async def test_dm_fallthrough_goes_to_llm(self):
        provider = FakeProvider()
        classifier = MessageClassifier(providers=[provider])

        result = await classifier.classify(make_message(is_dm=True, source=MessageSource.TEAMS_DM))

        assert provider.calls == 1
        assert result.method == ClassificationMethod.LLM
        assert result.requires_response == ResponseRequirement.YES
        assert result.confidence == Confidence.HIGH
        assert result.reason == "Asks a question"

    @pytest.mark.asyncio
    async def test_work_email_dm_also_goes_to_llm(self):
        provider = FakeProvider()
        classifier = MessageClassifier(providers=[provider])

        await classifier.classify(make_message(is_dm=True, source=MessageSource.EMAIL_WORK))

        assert provider.calls == 1


class TestLLMStep:
    @pytest.mark.asyncio
    async def test_no_providers(self):
        classifier = MessageClassifier(providers=[])
        result = await classifier.classify(make_message())

        assert result.requires_response == ResponseRequirement.MAYBE
        assert result.confidence == Confidence.LOW
        assert result.method == ClassificationMethod.RULE
        assert result.reason == "Unable to determine - LLM not configured"

    @pytest.mark.asyncio
    async def test_openai_answers_with_medium_confidence(self):
        classifier = MessageClassifier(providers=[FakeProvider(name="openai")])
        result = await classifier.classify(make_message())
        assert result.confidence == Confidence.MEDIUM
        assert result.method == ClassificationMethod.LLM

    @pytest.mark.asyncio
    async def test_falls_back_after_error(self):
        failing = FakeProvider(name="anthropic", error=RuntimeError("overloaded"))
        backup = FakeProvider(name="openai", text='{"requires_response": "no", "reason": "Status update"}')
        classifier = MessageClassifier(providers=[failing, backup])

        result = await classifier.classify(make_message())

        assert failing.calls == 1
        assert backup.calls == 1
        assert result.requires_response == ResponseRequirement.NO
        assert result.confidence == Confidence.MEDIUM

    @pytest.mark.asyncio
    async def test_falls_back_after_unparsable_reply(self):
        chatty = FakeProvider(name="anthropic", text="It probably needs a reply.")
        backup = FakeProvider(name="openai")
        classifier = MessageClassifier(providers=[chatty, backup])

        result = await classifier.classify(make_message())

        assert backup.calls == 1
        assert result.requires_response == ResponseRequirement.YES

    @pytest.mark.asyncio
    async def test_all_providers_fail(self):
        classifier = MessageClassifier(providers=[
            FakeProvider(name="anthropic", error=TimeoutError("timed out")),
            FakeProvider(name="openai", text="no json here"),
        ])

        result = await classifier.classify(make_message())

        assert result.requires_response == ResponseRequirement.MAYBE
        assert result.confidence == Confidence.LOW
        assert result.method == ClassificationMethod.RULE
        assert result.reason == "Unable to classify"

    @pytest.mark.asyncio
    async def test_unknown_verdict_is_maybe_and_reason_defaults(self):
        provider = FakeProvider(text='{"requires_response": "probably"}')
        classifier = MessageClassifier(providers=[provider])

        result = await classifier.classify(make_message())

        assert result.requires_response == ResponseRequirement.MAYBE
        assert result.reason == "Claude analysis"

    @pytest.mark.asyncio
    async def test_cost_recorded(self):
        tracker = CostTracker()
        classifier = MessageClassifier(providers=[FakeProvider(cost=0.001)], cost_tracker=tracker)

        await classifier.classify(make_message(msg_id="m42"))

        assert tracker.total_calls == 1
        assert tracker.records[0].task == "classify"
        assert tracker.records[0].message_id == "m42"

    @pytest.mark.asyncio
    async def test_budget_overshoot_keeps_answer(self):
        backup = FakeProvider(name="openai")
        tracker = CostTracker(max_budget_usd=0.1)
        classifier = MessageClassifier(
            providers=[FakeProvider(cost=0.5), backup],
            cost_tracker=tracker,
        )

        result = await classifier.classify(make_message())

        # The overshooting call is recorded and its answer kept
        assert result.requires_response == ResponseRequirement.YES
        assert result.method == ClassificationMethod.LLM
        assert result.confidence == Confidence.HIGH
        assert backup.calls == 0
        assert tracker.total_calls == 1
        assert tracker.total_cost == pytest.approx(0.5)

    @pytest.mark.asyncio
    async def test_no_calls_once_budget_exhausted(self):
        provider = FakeProvider(cost=0.5)
        tracker = CostTracker(max_budget_usd=0.1)
        classifier = MessageClassifier(providers=[provider], cost_tracker=tracker)

        results = [await classifier.classify(make_message(f"m{i}")) for i in range(1, 5)]

        assert provider.calls == 1
        assert tracker.total_calls == 1
        assert results[0].requires_response == ResponseRequirement.YES
        for result in results[1:]:
            assert result.reason == "Unable to classify"
            assert result.confidence == Confidence.LOW


class TestCaching:
    @pytest.mark.asyncio
    async def test_second_call_uses_cache(self):
        provider = FakeProvider()
        classifier = MessageClassifier(providers=[provider])
        message = make_message()

        first = await classifier.classify(message)
        second = await classifier.classify(message)

        assert first == second
        assert provider.calls == 1

    @pytest.mark.asyncio
    async def test_cached_result_wins_over_rules(self):
        cache = InMemoryClassificationCache()
        stored = ClassificationResult(
            ResponseRequirement.YES, Confidence.HIGH, "Decided earlier", ClassificationMethod.LLM,
        )
        cache.set("m1", stored)
        classifier = MessageClassifier(cache=cache)

        result = await classifier.classify(make_message(preview="FYI only"))

        assert result == stored

    @pytest.mark.asyncio
    async def test_fallback_results_are_cached(self):
        classifier = MessageClassifier(providers=[])
        await classifier.classify(make_message())
        assert classifier.cache.get("m1").reason == "Unable to determine - LLM not configured"


class TestBatch:
    @pytest.mark.asyncio
    async def test_every_message_classified(self):
        messages = [make_message(msg_id=f"m{i}", preview=f"hey there {i}") for i in range(12)]
        messages.append(make_message(msg_id="rule", preview="FYI"))
        classifier = MessageClassifier(providers=[FakeProvider()])

        results = await classifier.classify_batch(messages)

        assert set(results) == {m.id for m in messages}
        assert results["rule"].method == ClassificationMethod.RULE
        assert results["m0"].method == ClassificationMethod.LLM

    @pytest.mark.asyncio
    async def test_at_most_five_in_flight(self):
        provider = FakeProvider(delay=0.05)
        messages = [make_message(msg_id=f"m{i}", preview=f"hey there {i}") for i in range(13)]
        classifier = MessageClassifier(providers=[provider])

        await classifier.classify_batch(messages)

        assert provider.calls == 13
        assert provider.max_in_flight <= 5

    @pytest.mark.asyncio
    async def test_custom_batch_size(self):
        provider = FakeProvider(delay=0.02)
        messages = [make_message(msg_id=f"m{i}", preview=f"hey there {i}") for i in range(6)]
        classifier = MessageClassifier(providers=[provider], batch_size=2)

        await classifier.classify_batch(messages, show_progress=True)

        assert provider.max_in_flight <= 2

    @pytest.mark.asyncio
    async def test_empty_batch(self):
        assert await MessageClassifier().classify_batch([]) == {}

    def test_invalid_batch_size(self):
        with pytest.raises(ValueError):
            MessageClassifier(batch_size=0)

    def test_sync_wrapper(self):
        classifier = MessageClassifier(providers=[FakeProvider()])
        results = classifier.classify_batch_sync([make_message()])
        assert results["m1"].requires_response == ResponseRequirement.YES


# --- Summary ---

class TestSummary:
    def test_counts(self):
        results = {
            "a": ClassificationResult(ResponseRequirement.YES, Confidence.MEDIUM, "q", ClassificationMethod.RULE),
            "b": ClassificationResult(ResponseRequirement.NO, Confidence.HIGH, "fyi", ClassificationMethod.RULE),
            "c": ClassificationResult(ResponseRequirement.MAYBE, Confidence.LOW, "?", ClassificationMethod.LLM),
            "d": ClassificationResult(ResponseRequirement.YES, Confidence.HIGH, "ask", ClassificationMethod.LLM),
        }
        summary = summarize_classifications(results)
        assert summary.needs_response == 2
        assert summary.no_response == 1
        assert summary.maybe == 1
        assert summary.by_method == {"rule": 2, "llm": 2}

    def test_empty(self):
        assert summarize_classifications([]).to_dict() == {
            "needs_response": 0, "no_response": 0, "maybe": 0, "by_method": {"rule": 0, "llm": 0},
        }


# --- Wiring ---

class TestCreateClassifier:
    def test_no_keys_means_no_providers(self, monkeypatch):
        for var in ("ANTHROPIC_API_KEY", "OPENAI_API_KEY", "GOOGLE_API_KEY"):
            monkeypatch.delenv(var, raising=False)

        classifier = create_classifier(AssistDeskConfig())

        assert classifier.providers == []
        assert classifier.batch_size == 5
        assert isinstance(classifier.cache, InMemoryClassificationCache)

    def test_configured_provider(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        anthropic_module = MagicMock()
        config = AssistDeskConfig(llm=LLMConfig(anthropic_api_key="key", max_budget_usd=1.0))

        with patch.dict("sys.modules", {"anthropic": anthropic_module}):
            classifier = create_classifier(config)

        assert [p.provider_name for p in classifier.providers] == ["anthropic"]
        assert classifier.providers[0].model == "claude-3-haiku-20240307"
        assert classifier.cost_tracker.max_budget_usd == 1.0
        anthropic_module.Anthropic.assert_called_once_with(api_key="key", timeout=30.0)
