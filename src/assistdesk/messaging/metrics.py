"""Response-time metrics over normalized messages.

Computes the per-channel and overall figures the dashboard shows: how many
messages arrived, how many were answered, how fast, and how long the
oldest unanswered one has been waiting.
"""

import logging
import math
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

import polars as pl

from assistdesk.messaging.models import MessageSource, MessageStatus, NormalizedMessage

logger = logging.getLogger(__name__)

# Target average response time per channel, in hours
CHANNEL_RESPONSE_TARGETS: Dict[MessageSource, float] = {
    MessageSource.EMAIL_WORK: 4,
    MessageSource.EMAIL_PERSONAL: 8,
    MessageSource.SLACK: 2,
    MessageSource.TEAMS_MENTION: 2,
    MessageSource.TEAMS_DM: 1,
}

_FRAME_SCHEMA = {
    "source": pl.Utf8,
    "responded": pl.Boolean,
    "response_minutes": pl.Float64,
    "age_minutes": pl.Int64,
}


@dataclass
class SourceMetrics:
    source: str
    total_received: int
    total_responded: int
    avg_response_time_minutes: float
    pending_count: int
    oldest_pending_minutes: Optional[int] = None


@dataclass
class ResponseSummary:
    total_messages: int
    pending_messages: int
    responded_messages: int
    avg_response_time_minutes: float
    response_rate: float
    under_30_min_count: int
    under_2_hours_count: int
    over_2_hours_count: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ChannelResponse:
    avg_hours: Optional[float]
    target_hours: float
    count: int
    responded: int
    oldest_pending_hours: float


def _round_tenth(value: float) -> float:
    """Round half up to one decimal, as the dashboard displays it."""
    return math.floor(value * 10 + 0.5) / 10


def _age_minutes(message: NormalizedMessage, now: datetime) -> Optional[int]:
    if message.received_at is None:
        return None
    return int((now - message.received_at).total_seconds() // 60)


def message_frame(messages: Sequence[NormalizedMessage], now: Optional[datetime] = None) -> pl.DataFrame:
    """One row per message with the columns the metrics aggregate over."""
    now = now or datetime.now(timezone.utc)
    return pl.DataFrame(
        {
            "source": [m.source_name for m in messages],
            "responded": [m.status == MessageStatus.RESPONDED for m in messages],
            "response_minutes": [float(m.response_time_minutes or 0) for m in messages],
            "age_minutes": [_age_minutes(m, now) for m in messages],
        },
        schema=_FRAME_SCHEMA,
    )


def calculate_source_metrics(
    messages: Sequence[NormalizedMessage],
    now: Optional[datetime] = None,
) -> List[SourceMetrics]:
    """Per-channel metrics for every known channel.

    Args:
        messages: Messages from all providers.
        now: Reference time for pending ages. Defaults to the current time.

    Returns:
        One SourceMetrics per MessageSource, in declaration order. Channels
        without messages report zeros.
    """
    frame = message_frame(messages, now)
    grouped = frame.group_by("source").agg(
        pl.len().alias("total_received"),
        pl.col("responded").sum().alias("total_responded"),
        pl.col("response_minutes").filter(pl.col("responded")).mean().alias("avg_response"),
        pl.col("age_minutes").filter(~pl.col("responded")).max().alias("oldest_pending"),
    )
    rows = {row["source"]: row for row in grouped.iter_rows(named=True)}

    metrics = []
    for source in MessageSource:
        row = rows.get(source.value)
        if row is None:
            metrics.append(SourceMetrics(source.value, 0, 0, 0.0, 0))
            continue
        total = int(row["total_received"])
        responded = int(row["total_responded"])
        metrics.append(
            SourceMetrics(
                source=source.value,
                total_received=total,
                total_responded=responded,
                avg_response_time_minutes=float(row["avg_response"] or 0.0),
                pending_count=total - responded,
                oldest_pending_minutes=row["oldest_pending"],
            )
        )
    return metrics


def summarize_response_metrics(messages: Sequence[NormalizedMessage]) -> ResponseSummary:
    """Overall response figures across every channel."""
    responded = [m for m in messages if m.status == MessageStatus.RESPONDED]
    times = [m.response_time_minutes or 0 for m in responded]
    total = len(messages)

    return ResponseSummary(
        total_messages=total,
        pending_messages=total - len(responded),
        responded_messages=len(responded),
        avg_response_time_minutes=sum(times) / len(times) if times else 0.0,
        response_rate=(len(responded) / total) * 100 if total else 0.0,
        under_30_min_count=sum(1 for t in times if t <= 30),
        under_2_hours_count=sum(1 for t in times if t <= 120),
        over_2_hours_count=sum(1 for t in times if t > 120),
    )


def response_by_channel(
    messages: Sequence[NormalizedMessage],
    now: Optional[datetime] = None,
) -> Dict[str, ChannelResponse]:
    """Average response hours against each channel's target.

    Only responded messages with a recorded response time count towards the
    average; every other message counts towards the oldest pending age.
    """
    frame = message_frame(messages, now).with_columns(
        (pl.col("responded") & (pl.col("response_minutes") > 0)).alias("timed"),
    )
    grouped = frame.group_by("source").agg(
        pl.len().alias("count"),
        pl.col("timed").sum().alias("responded"),
        pl.col("response_minutes").filter(pl.col("timed")).sum().alias("total_minutes"),
        pl.col("age_minutes").filter(~pl.col("timed")).max().alias("oldest_pending"),
    )
    rows = {row["source"]: row for row in grouped.iter_rows(named=True)}

    channels: Dict[str, ChannelResponse] = {}
    for source, target in CHANNEL_RESPONSE_TARGETS.items():
        row = rows.get(source.value)
        count = int(row["count"]) if row else 0
        responded = int(row["responded"]) if row else 0
        total_minutes = float(row["total_minutes"] or 0.0) if row else 0.0
        oldest = max(row["oldest_pending"] or 0, 0) if row else 0

        channels[source.value] = ChannelResponse(
            avg_hours=_round_tenth(total_minutes / responded / 60) if responded else None,
            target_hours=target,
            count=count,
            responded=responded,
            oldest_pending_hours=_round_tenth(oldest / 60),
        )
    return channels
