"""Pattern rules for deciding whether a message needs a response.

Rule families are checked in priority order against the lower-cased
subject and preview; the first family with a matching pattern decides.
Every "no" family outranks the "needs response" family, so an
acknowledgment that happens to end in a question mark is still "no".
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional, Pattern, Tuple

from assistdesk.messaging.models import (
    ClassificationMethod,
    ClassificationResult,
    Confidence,
    MessageSource,
    NormalizedMessage,
    ResponseRequirement,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleFamily:
    """A named group of patterns sharing one verdict."""
    name: str
    patterns: Tuple[Pattern[str], ...]
    requires_response: ResponseRequirement
    confidence: Confidence
    reason: str

    def matches(self, text: str) -> bool:
        return any(p.search(text) for p in self.patterns)

    def verdict(self) -> ClassificationResult:
        return ClassificationResult(
            requires_response=self.requires_response,
            confidence=self.confidence,
            reason=self.reason,
            method=ClassificationMethod.RULE,
        )


def _compile(*patterns: str) -> Tuple[Pattern[str], ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


# \Z anchors to the very end of the text; "$" would also match before a
# trailing newline. _LINE_CHAR is any character except a line terminator;
# "." alone would also match "\r".
_LINE_CHAR = r"[^\n\r\u2028\u2029]"

NO_RESPONSE_PATTERNS = _compile(
    r"\b(fyi|for your information|just sharing|no response needed|no action needed)\b",
    r"\b(auto-?generated|automated message|do not reply)\b",
    r"\b(has been (scheduled|canceled|updated|accepted|declined))\b",
    r"\b(reminder|notification|alert):",
    r"\b(out of office|ooo)\b",
    rf"\bthank(s| you)\b{_LINE_CHAR}*!?\Z",  # "thanks!" on the last line
    rf"\b(sounds good|perfect|great|got it|noted|will do)\b{_LINE_CHAR}*!?\Z",  # acknowledgments
)

CALENDAR_PATTERNS = _compile(
    r"\b(meeting|invite|calendar|scheduled for)\b",
    rf"\b(accepted|declined|tentative)\b{_LINE_CHAR}*\binvitation\b",
)

NEWSLETTER_PATTERNS = _compile(
    r"\bunsubscribe\b",
    r"\bview in browser\b",
    r"\bnewsletter\b",
    r"\bdigest\b",
    r"\bweekly roundup\b",
    r"\bdaily summary\b",
    r"\bmonthly update\b",
)

ADVERTISEMENT_PATTERNS = _compile(
    r"\b(sale|discount|offer|promo|deal|% off|free shipping)\b",
    r"\b(limited time|act now|don't miss|expires|last chance)\b",
    r"\b(shop now|buy now|order now|get yours)\b",
    r"\b(sponsored|advertisement|partner content)\b",
    r"\b(webinar|register now|sign up today|join us for)\b",
    r"\b(we miss you|come back|haven't seen you)\b",
    r"\b(new arrivals|just dropped|now available)\b",
    r"\b(black friday|cyber monday|holiday sale)\b",
)

READ_ONLY_PATTERNS = _compile(
    r"\b(has been (shipped|delivered|completed|processed))\b",
    r"\b(order confirmation|shipping confirmation|delivery update)\b",
    r"\b(receipt|invoice|statement) (for|from)\b",
    r"\b(security alert|login from|new sign-?in)\b",
    r"\b(password (changed|reset|updated))\b",
    r"\b(your (report|summary|statement) is ready)\b",
    r"\b(successfully (created|updated|deleted|completed))\b",
    r"\b(build (passed|failed|succeeded))\b",
    r"\b(deployed to|deployment complete)\b",
    r"\b(commented on|mentioned you in|reacted to)\b(?![\s\S]*\?)",  # no question after it
    r"\b(joined|left|added|removed) (the|a) (channel|group|team)\b",
    r"\b(shared a (file|document|link) with you)\b",
    r"\b(daily report|weekly report|automated report)\b",
)

NEEDS_RESPONSE_PATTERNS = _compile(
    r"\?\Z",
    r"\b(can you|could you|would you|will you|please|pls)\b",
    r"\b(what do you think|your thoughts|your opinion|your feedback)\b",
    rf"\b(need|require|request|asking)\b{_LINE_CHAR}*\b(your|you to)\b",
    rf"\b(urgent|asap|time{_LINE_CHAR}?sensitive|by (today|tomorrow|eod|eow|friday))\b",
    rf"\b(approve|sign{_LINE_CHAR}?off|review|confirm|decision)\b",
    r"\b(waiting for|awaiting|pending) (your|you)\b",
    r"\b(let me know|lmk|get back to me)\b",
)

RULE_FAMILIES: Tuple[RuleFamily, ...] = (
    RuleFamily(
        "informational", NO_RESPONSE_PATTERNS,
        ResponseRequirement.NO, Confidence.HIGH,
        "Appears to be informational/acknowledgment",
    ),
    RuleFamily(
        "calendar", CALENDAR_PATTERNS,
        ResponseRequirement.NO, Confidence.HIGH,
        "Calendar notification",
    ),
    RuleFamily(
        "newsletter", NEWSLETTER_PATTERNS,
        ResponseRequirement.NO, Confidence.HIGH,
        "Newsletter/marketing email",
    ),
    RuleFamily(
        "advertisement", ADVERTISEMENT_PATTERNS,
        ResponseRequirement.NO, Confidence.HIGH,
        "Advertisement/promotional",
    ),
    RuleFamily(
        "read_only", READ_ONLY_PATTERNS,
        ResponseRequirement.NO, Confidence.HIGH,
        "Read-only notification",
    ),
    RuleFamily(
        "needs_response", NEEDS_RESPONSE_PATTERNS,
        ResponseRequirement.YES, Confidence.MEDIUM,
        "Contains question or action request",
    ),
)

DIRECT_MESSAGE_FALLBACK = ClassificationResult(
    requires_response=ResponseRequirement.MAYBE,
    confidence=Confidence.LOW,
    reason="Direct message - may need response",
    method=ClassificationMethod.RULE,
)


def message_text(message: NormalizedMessage) -> str:
    """Text the rules are evaluated against."""
    return f"{message.subject or ''} {message.preview or ''}".lower()


def match_family(text: str) -> Optional[RuleFamily]:
    """Return the highest-priority family matching the text, if any."""
    for family in RULE_FAMILIES:
        if family.matches(text):
            return family
    return None


def apply_rules(message: NormalizedMessage) -> Optional[ClassificationResult]:
    """Classify a message with the pattern rules.

    Args:
        message: Message to classify.

    Returns:
        The verdict of the first matching rule family; the low-confidence
        "maybe" for unmatched direct messages outside work email; None when
        the rules are inconclusive.
    """
    family = match_family(message_text(message))
    if family is not None:
        logger.debug("Message %s matched rule family %s", message.id, family.name)
        return family.verdict()

    if message.is_direct_message and message.source != MessageSource.EMAIL_WORK:
        return DIRECT_MESSAGE_FALLBACK

    return None
