"""Message and classification records shared by the messaging modules.

Provider collaborators (mail, chat and messaging fetchers) hand the core an
already-normalized message; the classifier never mutates it.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union


class MessageSource(str, Enum):
    """Channel a message arrived on."""
    SLACK = "slack"
    TEAMS_MENTION = "teams_mention"
    TEAMS_DM = "teams_dm"
    EMAIL_WORK = "email_work"
    EMAIL_PERSONAL = "email_personal"
    IMESSAGE = "imessage"


class MessageStatus(str, Enum):
    UNREAD = "unread"
    READ = "read"
    RESPONDED = "responded"
    ARCHIVED = "archived"


class ResponseRequirement(str, Enum):
    """Whether a message needs an answer from the recipient."""
    YES = "yes"
    NO = "no"
    MAYBE = "maybe"


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ClassificationMethod(str, Enum):
    RULE = "rule"
    LLM = "llm"


def parse_timestamp(value: Optional[Union[str, datetime]]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp, treating naive values as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _source(value: Any) -> Union[MessageSource, str]:
    try:
        return MessageSource(value)
    except ValueError:
        return str(value)


@dataclass(frozen=True)
class NormalizedMessage:
    """A message from any provider, in the common shape.

    Attributes:
        id: Unique message identifier (cache key for classifications).
        source: Channel the message came from. Unknown channels are kept
            as plain strings.
        sender_name: Display name of the sender.
        preview: Leading text of the message body.
        is_direct_message: True for 1:1 messages.
        sender_email: Sender address, when the channel has one.
        subject: Subject line, when the channel has one.
        received_at: Receipt time (timezone-aware).
        status: Read/responded state tracked by the dashboard.
        response_time_minutes: Minutes to first response, once responded.
        requires_response: Left unset by providers; filled from a
            classification by the presentation layer.
    """
    id: str
    source: Union[MessageSource, str]
    sender_name: str
    preview: str
    is_direct_message: bool = False
    sender_email: Optional[str] = None
    subject: Optional[str] = None
    received_at: Optional[datetime] = None
    status: MessageStatus = MessageStatus.UNREAD
    response_time_minutes: Optional[float] = None
    thread_id: Optional[str] = None
    channel_name: Optional[str] = None
    requires_response: Optional[ResponseRequirement] = None

    @property
    def source_name(self) -> str:
        return self.source.value if isinstance(self.source, MessageSource) else self.source

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NormalizedMessage":
        """Build a message from a provider record."""
        requires = data.get("requires_response")
        return cls(
            id=str(data["id"]),
            source=_source(data.get("source", "")),
            sender_name=data.get("sender_name") or "",
            preview=data.get("preview") or "",
            is_direct_message=bool(data.get("is_direct_message", False)),
            sender_email=data.get("sender_email"),
            subject=data.get("subject"),
            received_at=parse_timestamp(data.get("received_at")),
            status=MessageStatus(data.get("status") or MessageStatus.UNREAD.value),
            response_time_minutes=data.get("response_time_minutes"),
            thread_id=data.get("thread_id"),
            channel_name=data.get("channel_name"),
            requires_response=ResponseRequirement(requires) if requires else None,
        )


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of classifying one message."""
    requires_response: ResponseRequirement
    confidence: Confidence
    reason: str
    method: ClassificationMethod

    def to_dict(self) -> Dict[str, str]:
        return {
            "requires_response": self.requires_response.value,
            "confidence": self.confidence.value,
            "reason": self.reason,
            "method": self.method.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> "ClassificationResult":
        return cls(
            requires_response=ResponseRequirement(data["requires_response"]),
            confidence=Confidence(data["confidence"]),
            reason=data["reason"],
            method=ClassificationMethod(data["method"]),
        )
