"""
Conversation Analytics
======================

Read-only statistics over a conversation snapshot: message counts and the
intent distribution of agent replies.

Performance figures (resolution rate, satisfaction and so on) are static
configuration values. They are reported alongside the computed counts but
are never derived from the message log.
"""

from collections import OrderedDict
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..chatbot.memory import Message, MessageRole

DEFAULT_TOP_K = 5


@dataclass(frozen=True)
class PerformanceFigures:
    """Static, non-derived performance figures shown on dashboards."""
    resolution_rate: float = 87.0
    customer_satisfaction: float = 4.6
    satisfaction_scale: float = 5.0
    first_contact_resolution: float = 73.0
    escalation_rate: float = 13.0
    avg_response_time_seconds: float = 1.2

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['derived'] = False
        return data


@dataclass(frozen=True)
class IntentCount:
    """Count of agent replies for one intent."""
    intent: str
    count: int
    percentage: float


@dataclass(frozen=True)
class AnalyticsReport:
    """Summary statistics for a conversation."""
    total_messages: int
    user_message_count: int
    agent_message_count: int
    intent_distribution: Tuple[IntentCount, ...]
    top_k: int = DEFAULT_TOP_K
    performance: PerformanceFigures = field(default_factory=PerformanceFigures)

    @property
    def top_intents(self) -> Tuple[IntentCount, ...]:
        return self.intent_distribution[:self.top_k]

    def intent_count(self, intent: str) -> int:
        for entry in self.intent_distribution:
            if entry.intent == intent:
                return entry.count
        return 0

    def intent_percentage(self, intent: str) -> float:
        """Share of agent replies with the given intent, 0.0 when there are none."""
        return _percentage(self.intent_count(intent), self.agent_message_count)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'total_messages': self.total_messages,
            'user_message_count': self.user_message_count,
            'agent_message_count': self.agent_message_count,
            'intent_distribution': [asdict(entry) for entry in self.intent_distribution],
            'top_intents': [asdict(entry) for entry in self.top_intents],
            'top_k': self.top_k,
            'performance': self.performance.to_dict()
        }


def _percentage(count: int, total: int) -> float:
    if total == 0:
        return 0.0
    return count / total * 100


def count_intents(messages: Sequence[Message]) -> List[Tuple[str, int]]:
    """
    Count agent intents, most frequent first.

    Ties keep the order in which each intent was first seen.
    """
    counts: Dict[str, int] = OrderedDict()
    for message in messages:
        if message.role == MessageRole.AGENT and message.intent:
            counts[message.intent] = counts.get(message.intent, 0) + 1

    return sorted(counts.items(), key=lambda item: item[1], reverse=True)


def compute_analytics(snapshot: Sequence[Message], top_k: int = DEFAULT_TOP_K,
                      performance: Optional[PerformanceFigures] = None) -> AnalyticsReport:
    """
    Compute analytics over a conversation snapshot.

    Args:
        snapshot: Messages in conversation order
        top_k: Number of intents reported as top intents
        performance: Static performance figures to attach

    Returns:
        AnalyticsReport for the snapshot
    """
    if isinstance(top_k, bool) or not isinstance(top_k, int) or top_k < 1:
        raise ValueError(f"top_k must be a positive integer, got {top_k!r}")

    user_count = sum(1 for m in snapshot if m.role == MessageRole.USER)
    agent_count = sum(1 for m in snapshot if m.role == MessageRole.AGENT)

    distribution = tuple(
        IntentCount(intent=intent, count=count, percentage=_percentage(count, agent_count))
        for intent, count in count_intents(snapshot)
    )

    return AnalyticsReport(
        total_messages=len(snapshot),
        user_message_count=user_count,
        agent_message_count=agent_count,
        intent_distribution=distribution,
        top_k=top_k,
        performance=performance or PerformanceFigures()
    )
