"""Two-tier message classifier: pattern rules first, LLM fallback second.

Rules settle the clear cases (notifications, newsletters, questions)
without any external call. Messages the rules cannot settle, including
unmatched direct messages, go to the configured LLM providers in order.
Every path returns a result; provider failures degrade to a low-confidence
"maybe".
"""

import asyncio
import functools
import json
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from tqdm.asyncio import tqdm_asyncio

from assistdesk.config import AssistDeskConfig
from assistdesk.llm import BudgetExceededError, CostTracker, LLMProvider, create_provider
from assistdesk.messaging.cache import ClassificationCache, InMemoryClassificationCache, create_cache
from assistdesk.messaging.models import (
    ClassificationMethod,
    ClassificationResult,
    Confidence,
    NormalizedMessage,
    ResponseRequirement,
)
from assistdesk.messaging.rules import apply_rules

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 5  # upstream rate limit on concurrent LLM calls

# Providers not listed answer with medium confidence
PROVIDER_CONFIDENCE = {
    "anthropic": Confidence.HIGH,
}

PROVIDER_LABELS = {
    "anthropic": "Claude",
    "openai": "GPT",
    "google": "Gemini",
}

LLM_NOT_CONFIGURED = ClassificationResult(
    requires_response=ResponseRequirement.MAYBE,
    confidence=Confidence.LOW,
    reason="Unable to determine - LLM not configured",
    method=ClassificationMethod.RULE,
)

UNABLE_TO_CLASSIFY = ClassificationResult(
    requires_response=ResponseRequirement.MAYBE,
    confidence=Confidence.LOW,
    reason="Unable to classify",
    method=ClassificationMethod.RULE,
)

CLASSIFICATION_PROMPT = '''Analyze this message and determine if it requires a response from the recipient (a busy executive).

From: {sender}
Subject: {subject}
Message: {preview}

Respond with JSON only:
{{"requires_response": "yes" or "no" or "maybe", "reason": "brief explanation"}}'''

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def build_prompt(message: NormalizedMessage) -> str:
    """Render the classification prompt for one message."""
    return CLASSIFICATION_PROMPT.format(
        sender=message.sender_name,
        subject=message.subject or "(no subject)",
        preview=message.preview,
    )


def extract_json_object(text: Optional[str]) -> Optional[Dict[str, Any]]:
    """Parse the outermost ``{...}`` span of an LLM reply.

    Returns:
        The parsed object, or None if there is no braces span or it is not
        valid JSON.
    """
    match = _JSON_OBJECT.search(text or "")
    if not match:
        return None
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None


def _result_from_llm(parsed: Dict[str, Any], provider_name: str) -> ClassificationResult:
    raw = str(parsed.get("requires_response") or "").strip().lower()
    try:
        requirement = ResponseRequirement(raw)
    except ValueError:
        requirement = ResponseRequirement.MAYBE
    label = PROVIDER_LABELS.get(provider_name, provider_name)
    return ClassificationResult(
        requires_response=requirement,
        confidence=PROVIDER_CONFIDENCE.get(provider_name, Confidence.MEDIUM),
        reason=str(parsed.get("reason") or f"{label} analysis"),
        method=ClassificationMethod.LLM,
    )


@dataclass
class ClassificationSummary:
    """Counts shown next to the message list."""
    needs_response: int = 0
    no_response: int = 0
    maybe: int = 0
    by_method: Dict[str, int] = field(
        default_factory=lambda: {m.value: 0 for m in ClassificationMethod}
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "needs_response": self.needs_response,
            "no_response": self.no_response,
            "maybe": self.maybe,
            "by_method": dict(self.by_method),
        }


def summarize_classifications(
    results: Union[Mapping, Iterable[ClassificationResult]],
) -> ClassificationSummary:
    """Count results by verdict and by method."""
    values = results.values() if isinstance(results, Mapping) else results
    summary = ClassificationSummary()
    for result in values:
        if result.requires_response == ResponseRequirement.YES:
            summary.needs_response += 1
        elif result.requires_response == ResponseRequirement.NO:
            summary.no_response += 1
        else:
            summary.maybe += 1
        summary.by_method[result.method.value] += 1
    return summary


class MessageClassifier:
    """Decides whether messages need a response.

    Example:
        ```python
        classifier = MessageClassifier(providers=[create_provider("anthropic")])
        result = await classifier.classify(message)
        results = await classifier.classify_batch(messages)
        ```

    Results are cached by message id through the injected cache; a repeat
    call for the same id returns the stored result without re-running the
    rules or calling a provider.
    """

    def __init__(
        self,
        providers: Optional[Sequence[LLMProvider]] = None,
        cache: Optional[ClassificationCache] = None,
        cost_tracker: Optional[CostTracker] = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        max_tokens: int = 150,
        temperature: float = 0.0,
    ):
        """Initialize the classifier.

        Args:
            providers: LLM providers in order of preference. Empty means the
                LLM step is not configured.
            cache: Result store. Defaults to an in-memory cache.
            cost_tracker: Optional tracker recording every provider call.
            batch_size: Messages classified concurrently per batch.
            max_tokens: Output cap for provider calls.
            temperature: Sampling temperature for provider calls.
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.providers: List[LLMProvider] = list(providers or [])
        self.cache = cache if cache is not None else InMemoryClassificationCache()
        self.cost_tracker = cost_tracker
        self.batch_size = batch_size
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def classify(self, message: NormalizedMessage) -> ClassificationResult:
        """Classify one message.

        Args:
            message: The message to classify.

        Returns:
            The cached result if the id was seen before; otherwise a final
            rule verdict, or the LLM step's result when the rules were
            inconclusive or only produced a low-confidence guess.
        """
        cached = self.cache.get(message.id)
        if cached is not None:
            return cached

        result = apply_rules(message)
        if result is None or result.confidence == Confidence.LOW:
            result = await self.classify_with_llm(message)

        self.cache.set(message.id, result)
        return result

    async def classify_with_llm(self, message: NormalizedMessage) -> ClassificationResult:
        """Ask the providers in order; never raises."""
        if not self.providers:
            logger.debug(f"No LLM provider configured, cannot classify {message.id}")
            return LLM_NOT_CONFIGURED

        prompt = build_prompt(message)
        loop = asyncio.get_running_loop()

        for provider in self.providers:
            if self.cost_tracker is not None and self.cost_tracker.budget_exhausted:
                logger.warning(f"LLM budget exhausted, not classifying {message.id}")
                return UNABLE_TO_CLASSIFY

            call = functools.partial(
                provider.generate,
                prompt,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
            try:
                response = await loop.run_in_executor(None, call)
            except Exception as e:
                logger.warning(f"{provider.provider_name} classification failed for {message.id}: {e}")
                continue

            if self.cost_tracker is not None:
                try:
                    self.cost_tracker.record_response(response, task="classify", message_id=message.id)
                except BudgetExceededError as e:
                    # Already paid for; keep the answer
                    logger.warning(f"LLM budget exceeded by {message.id}: {e}")

            parsed = extract_json_object(response.text)
            if parsed is None:
                logger.warning(
                    f"{provider.provider_name} returned no JSON object for {message.id}: {response.text[:200]!r}"
                )
                continue
            return _result_from_llm(parsed, provider.provider_name)

        return UNABLE_TO_CLASSIFY

    async def classify_batch(
        self,
        messages: Iterable[NormalizedMessage],
        show_progress: bool = False,
    ) -> Dict[str, ClassificationResult]:
        """Classify many messages, at most ``batch_size`` at a time.

        Messages within a batch run concurrently; batches run one after
        another.

        Args:
            messages: Messages to classify.
            show_progress: Show a progress bar over batches.

        Returns:
            Dict mapping message id to its result.
        """
        messages = list(messages)
        results: Dict[str, ClassificationResult] = {}
        batches = [
            messages[i:i + self.batch_size]
            for i in range(0, len(messages), self.batch_size)
        ]

        if show_progress:
            iterator = tqdm_asyncio(batches, desc="Classifying messages", unit="batch")
        else:
            iterator = batches

        for batch in iterator:
            classified = await asyncio.gather(*(self.classify(m) for m in batch))
            for message, result in zip(batch, classified):
                results[message.id] = result

        logger.info(f"Classified {len(results)} messages in {len(batches)} batches")
        return results

    def classify_batch_sync(
        self,
        messages: Iterable[NormalizedMessage],
        show_progress: bool = False,
    ) -> Dict[str, ClassificationResult]:
        return asyncio.run(self.classify_batch(messages, show_progress=show_progress))


def create_classifier(config: Optional[AssistDeskConfig] = None) -> MessageClassifier:
    """Wire a classifier from configuration.

    Providers without an API key are skipped, so a deployment with no keys
    still classifies with rules and reports the rest as not configured.
    """
    config = config or AssistDeskConfig()
    providers: List[LLMProvider] = []
    for name in config.llm.providers:
        api_key = config.llm.api_key_for(name)
        if not api_key:
            logger.info(f"LLM provider {name} not configured, skipping")
            continue
        providers.append(
            create_provider(
                name,
                model=config.llm.model_for(name),
                api_key=api_key,
                timeout=config.llm.timeout,
            )
        )

    return MessageClassifier(
        providers=providers,
        cache=create_cache(config.classifier.cache_backend, config.classifier.cache_dir),
        cost_tracker=CostTracker(max_budget_usd=config.llm.max_budget_usd),
        batch_size=config.classifier.batch_size,
        max_tokens=config.llm.max_tokens,
        temperature=config.llm.temperature,
    )
