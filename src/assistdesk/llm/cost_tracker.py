"""API cost tracking and budget enforcement for LLM classification calls."""

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class BudgetExceededError(Exception):
    """Raised when the cost budget is exceeded."""


@dataclass
class CallRecord:
    """Record of a single LLM API call."""

    provider: str
    model: str
    task: str
    message_id: str
    input_tokens: int
    output_tokens: int
    cost_usd: float
    latency_ms: float


class CostTracker:
    """Tracks LLM API spend with optional budget enforcement.

    Example:
        tracker = CostTracker(max_budget_usd=5.0)
        tracker.record("anthropic", "claude-3-haiku-20240307", "classify", "msg-1", 120, 30, 0.0001, 450)
        print(tracker.get_summary())
    """

    def __init__(self, max_budget_usd: Optional[float] = None):
        self.max_budget_usd = max_budget_usd
        self.records: List[CallRecord] = []
        self._total_cost: float = 0.0

    def record(
        self,
        provider: str,
        model: str,
        task: str,
        message_id: str,
        input_tokens: int,
        output_tokens: int,
        cost_usd: float,
        latency_ms: float,
    ) -> None:
        """Record an API call.

        The call has already been paid for, so it is always recorded; the
        budget check runs afterwards.

        Raises:
            BudgetExceededError: If this cost takes the total over the budget.
        """
        self.records.append(
            CallRecord(
                provider=provider,
                model=model,
                task=task,
                message_id=message_id,
                input_tokens=input_tokens,
                output_tokens=output_tokens,
                cost_usd=cost_usd,
                latency_ms=latency_ms,
            )
        )
        self._total_cost += cost_usd

        if self.max_budget_usd is not None and self._total_cost > self.max_budget_usd:
            raise BudgetExceededError(
                f"Budget exceeded: ${self._total_cost:.4f} > ${self.max_budget_usd:.4f}"
            )

    @property
    def budget_exhausted(self) -> bool:
        """True once no budget is left for another call."""
        return self.max_budget_usd is not None and self._total_cost >= self.max_budget_usd

    def record_response(self, response: Any, task: str, message_id: str) -> None:
        """Record from an LLMResponse object."""
        self.record(
            provider=response.provider,
            model=response.model,
            task=task,
            message_id=message_id,
            input_tokens=response.input_tokens,
            output_tokens=response.output_tokens,
            cost_usd=response.cost_usd,
            latency_ms=response.latency_ms,
        )

    @property
    def total_cost(self) -> float:
        return self._total_cost

    @property
    def total_calls(self) -> int:
        return len(self.records)

    def get_summary(self) -> Dict[str, Any]:
        """Get summary statistics grouped by provider/model."""
        by_model: Dict[str, Dict[str, Any]] = {}

        for r in self.records:
            key = f"{r.provider}/{r.model}"
            if key not in by_model:
                by_model[key] = {"calls": 0, "cost": 0.0, "tokens": 0}
            by_model[key]["calls"] += 1
            by_model[key]["cost"] += r.cost_usd
            by_model[key]["tokens"] += r.input_tokens + r.output_tokens

        return {
            "total_cost_usd": self._total_cost,
            "total_calls": len(self.records),
            "total_input_tokens": sum(r.input_tokens for r in self.records),
            "total_output_tokens": sum(r.output_tokens for r in self.records),
            "budget_usd": self.max_budget_usd,
            "budget_remaining_usd": (
                self.max_budget_usd - self._total_cost if self.max_budget_usd is not None else None
            ),
            "by_model": by_model,
        }

    def save(self, path: str) -> None:
        """Save records to JSON file."""
        data = {
            "summary": self.get_summary(),
            "records": [asdict(r) for r in self.records],
        }
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(data, f, indent=2)
        logger.info("Cost tracker saved to %s (total: $%.4f)", path, self._total_cost)

    @classmethod
    def load(cls, path: str) -> "CostTracker":
        """Load records from JSON file."""
        with open(path) as f:
            data = json.load(f)

        tracker = cls(max_budget_usd=data.get("summary", {}).get("budget_usd"))
        for r in data.get("records", []):
            tracker.records.append(CallRecord(**r))
            tracker._total_cost += r["cost_usd"]
        return tracker
