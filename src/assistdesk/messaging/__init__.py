"""Message classification and response metrics.

The classifier decides whether each normalized message needs a response,
using pattern rules first and an LLM only for what the rules cannot
settle. The metrics module summarizes response times per channel.
"""

from assistdesk.messaging.models import (
    ClassificationMethod,
    ClassificationResult,
    Confidence,
    MessageSource,
    MessageStatus,
    NormalizedMessage,
    ResponseRequirement,
)
from assistdesk.messaging.rules import RULE_FAMILIES, RuleFamily, apply_rules
from assistdesk.messaging.cache import (
    ClassificationCache,
    DiskClassificationCache,
    InMemoryClassificationCache,
    create_cache,
)
from assistdesk.messaging.classifier import (
    ClassificationSummary,
    MessageClassifier,
    create_classifier,
    summarize_classifications,
)
from assistdesk.messaging.metrics import (
    ResponseSummary,
    SourceMetrics,
    calculate_source_metrics,
    response_by_channel,
    summarize_response_metrics,
)

__all__ = [
    # Records
    "ClassificationMethod",
    "ClassificationResult",
    "Confidence",
    "MessageSource",
    "MessageStatus",
    "NormalizedMessage",
    "ResponseRequirement",
    # Rules
    "RULE_FAMILIES",
    "RuleFamily",
    "apply_rules",
    # Caching
    "ClassificationCache",
    "DiskClassificationCache",
    "InMemoryClassificationCache",
    "create_cache",
    # Classification
    "ClassificationSummary",
    "MessageClassifier",
    "create_classifier",
    "summarize_classifications",
    # Metrics
    "ResponseSummary",
    "SourceMetrics",
    "calculate_source_metrics",
    "response_by_channel",
    "summarize_response_metrics",
]
