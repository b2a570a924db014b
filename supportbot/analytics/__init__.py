"""
Analytics Module
===============

Conversation statistics computed from message snapshots.
"""

from .aggregator import (
    AnalyticsReport,
    IntentCount,
    PerformanceFigures,
    compute_analytics,
    count_intents,
    DEFAULT_TOP_K
)

__all__ = [
    "AnalyticsReport",
    "IntentCount",
    "PerformanceFigures",
    "compute_analytics",
    "count_intents",
    "DEFAULT_TOP_K"
]
