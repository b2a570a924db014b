"""
Chat Session
============

Per-conversation object owning the message store, classifier and controller.
This is the in-process API renderers use: submit text, reset, read the
snapshot and analytics, and subscribe to changes.
"""

import logging
from typing import Any, Dict, Optional, Sequence, Tuple

from ..analytics.aggregator import (
    DEFAULT_TOP_K, AnalyticsReport, PerformanceFigures, compute_analytics
)
from .dialog_state import DEFAULT_RESPONSE_DELAY_MS, ConversationController, ConversationStatus
from .events import EventBus, Listener
from .intent_recognizer import IntentClassifier, IntentRule
from .memory import DEFAULT_GREETING, Message, MessageStore
from .scheduler import AsyncioScheduler, Scheduler

logger = logging.getLogger(__name__)


class ChatSession:
    """
    A single support conversation.

    Instantiate one per conversation and hand it to the renderer; there is no
    module-level chat state.
    """

    def __init__(self, scheduler: Optional[Scheduler] = None,
                 rules: Optional[Sequence[IntentRule]] = None,
                 greeting: Optional[str] = None,
                 quick_replies: Sequence[str] = (),
                 response_delay_ms: float = DEFAULT_RESPONSE_DELAY_MS,
                 top_k: int = DEFAULT_TOP_K,
                 performance: Optional[PerformanceFigures] = None,
                 store: Optional[MessageStore] = None):
        """
        Initialize the session.

        Args:
            scheduler: Source of delayed reply callbacks; defaults to an
                AsyncioScheduler, which requires a running event loop
            rules: Ordered intent rules, the support rule set by default
            greeting: Seed agent message text, the default support greeting if omitted
            quick_replies: Canned phrases offered to the user
            response_delay_ms: Simulated reply latency
            top_k: Default number of top intents in analytics
            performance: Static performance figures for analytics
            store: Pre-built message store, mainly for injecting a clock; it
                carries its own greeting, so it cannot be combined with greeting

        Raises:
            ValueError: If both store and greeting are given
            ConfigurationError: If the rules are invalid, or no scheduler is
                given outside a running event loop
        """
        if store is not None and greeting is not None:
            raise ValueError("Pass the greeting to the MessageStore, not alongside it")

        self.events = EventBus()
        self.classifier = IntentClassifier(rules)
        self.store = store or MessageStore(
            greeting=DEFAULT_GREETING if greeting is None else greeting,
            vocabulary=self.classifier.intents
        )
        self.controller = ConversationController(
            store=self.store,
            classifier=self.classifier,
            scheduler=scheduler or AsyncioScheduler(),
            events=self.events,
            response_delay_ms=response_delay_ms
        )
        self.quick_replies: Tuple[str, ...] = tuple(quick_replies)
        self.top_k = top_k
        self.performance = performance or PerformanceFigures()

        logger.info(f"Chat session created with {len(self.classifier.rules)} intent rules")

    @classmethod
    def from_settings(cls, settings, scheduler: Optional[Scheduler] = None) -> 'ChatSession':
        """Create a session from a Settings object."""
        return cls(
            scheduler=scheduler,
            rules=settings.intents,
            greeting=settings.conversation.greeting,
            quick_replies=settings.conversation.quick_replies,
            response_delay_ms=settings.conversation.response_delay_ms,
            top_k=settings.analytics.top_k,
            performance=settings.analytics.performance
        )

    @property
    def status(self) -> ConversationStatus:
        return self.controller.status

    def submit(self, text: str) -> Optional[Message]:
        """Submit user text; the agent reply arrives after the configured delay."""
        return self.controller.submit(text)

    def submit_quick_reply(self, index: int) -> Optional[Message]:
        """Submit one of the configured quick-reply phrases by position."""
        if not 0 <= index < len(self.quick_replies):
            raise IndexError(f"No quick reply at index {index}")
        return self.submit(self.quick_replies[index])

    def reset_conversation(self) -> Message:
        """Start over with a fresh greeting."""
        return self.controller.reset()

    def get_snapshot(self) -> Tuple[Message, ...]:
        return self.store.snapshot()

    def get_analytics(self, top_k: Optional[int] = None) -> AnalyticsReport:
        return compute_analytics(
            self.get_snapshot(),
            top_k=self.top_k if top_k is None else top_k,
            performance=self.performance
        )

    def subscribe(self, listener: Listener):
        """Register a listener for session events; returns an unsubscribe callable."""
        return self.events.subscribe(listener)

    def get_status(self) -> Dict[str, Any]:
        """
        Get session status.

        Returns:
            Dict containing status information
        """
        return {
            'status': self.status.value,
            'epoch': self.store.epoch,
            'message_count': len(self.store),
            'intents': self.classifier.intents
        }
