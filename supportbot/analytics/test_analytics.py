"""
Unit Tests for Analytics Module
===============================
"""

import pytest

from supportbot.analytics.aggregator import (
    AnalyticsReport, PerformanceFigures, compute_analytics, count_intents
)
from supportbot.chatbot.memory import MessageRole, MessageStore


def build_snapshot(*intents, users=0):
    """Build a snapshot with a greeting, some user messages and agent replies."""
    store = MessageStore()
    for index in range(users):
        store.append(MessageRole.USER, f"question {index}")
    for intent in intents:
        store.append(MessageRole.AGENT, f"reply for {intent}", intent)
    return store.snapshot()


class TestCounts:
    """Test message counts."""

    def test_fresh_conversation(self):
        report = compute_analytics(build_snapshot())

        assert report.total_messages == 1
        assert report.user_message_count == 0
        assert report.agent_message_count == 1
        assert report.intent_percentage("greeting") == 100.0

    def test_mixed_conversation(self):
        report = compute_analytics(build_snapshot("returns", "billing", users=2))

        assert report.total_messages == 5
        assert report.user_message_count == 2
        assert report.agent_message_count == 3

    def test_empty_snapshot(self):
        report = compute_analytics(())

        assert report.total_messages == 0
        assert report.agent_message_count == 0
        assert report.intent_distribution == ()
        assert report.intent_percentage("greeting") == 0.0


class TestIntentDistribution:
    """Test intent distribution ordering and percentages."""

    def test_sorted_by_count_with_first_seen_ties(self):
        snapshot = build_snapshot("returns", "billing", "returns", "fallback")

        assert count_intents(snapshot) == [
            ("returns", 2), ("greeting", 1), ("billing", 1), ("fallback", 1)
        ]

    def test_user_messages_ignored(self):
        snapshot = build_snapshot("billing", users=5)
        assert dict(count_intents(snapshot)) == {"greeting": 1, "billing": 1}

    def test_counts_sum_to_agent_total(self):
        report = compute_analytics(build_snapshot("returns", "billing", "returns", "billing", "fallback"))

        assert sum(entry.count for entry in report.intent_distribution) == report.agent_message_count

    def test_percentages_sum_to_hundred(self):
        report = compute_analytics(build_snapshot("returns", "billing", "returns", "product_info"))
        total = sum(report.intent_percentage(e.intent) for e in report.intent_distribution)

        assert total == pytest.approx(100.0)
        assert report.intent_percentage("returns") == pytest.approx(40.0)
        assert report.intent_percentage("unknown") == 0.0

    def test_top_k(self):
        snapshot = build_snapshot("a", "b", "b", "c", "c", "c", "d", "e", "f")

        report = compute_analytics(snapshot, top_k=2)
        assert [e.intent for e in report.top_intents] == ["c", "b"]
        assert len(report.intent_distribution) == 7

        default = compute_analytics(snapshot)
        assert len(default.top_intents) == 5

    @pytest.mark.parametrize("top_k", [0, -1, 2.5, True])
    def test_invalid_top_k(self, top_k):
        with pytest.raises(ValueError):
            compute_analytics(build_snapshot(), top_k=top_k)


class TestPerformanceFigures:
    """Test static performance figures."""

    def test_defaults_are_fixed(self):
        report = compute_analytics(build_snapshot("returns"))

        assert report.performance == PerformanceFigures()
        assert report.performance.resolution_rate == 87.0
        assert report.performance.customer_satisfaction == 4.6
        assert report.performance.avg_response_time_seconds == 1.2

    def test_custom_figures(self):
        figures = PerformanceFigures(resolution_rate=50.0)
        report = compute_analytics(build_snapshot(), performance=figures)
        assert report.performance.resolution_rate == 50.0

    def test_to_dict_marks_figures_non_derived(self):
        data = compute_analytics(build_snapshot("billing"), top_k=1).to_dict()

        assert data["performance"]["derived"] is False
        assert data["top_k"] == 1
        assert data["top_intents"] == [{"intent": "greeting", "count": 1, "percentage": 50.0}]
        assert len(data["intent_distribution"]) == 2

    def test_report_is_immutable(self):
        report = compute_analytics(build_snapshot())
        assert isinstance(report, AnalyticsReport)
        with pytest.raises(AttributeError):
            report.total_messages = 10
