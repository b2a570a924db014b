"""
Conversation State Management
=============================

Turn cycle for a single conversation: accept a user message, wait out the
simulated latency, then deliver the classified agent reply.
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..error_handling import ConversationBusy
from .events import EventBus, EventType, SessionEvent
from .intent_recognizer import IntentClassifier
from .memory import Message, MessageRole, MessageStore
from .scheduler import ScheduledTask, Scheduler

logger = logging.getLogger(__name__)

DEFAULT_RESPONSE_DELAY_MS = 1500


class ConversationStatus(Enum):
    """Conversation status."""
    IDLE = "idle"
    AWAITING_RESPONSE = "awaiting_response"


@dataclass
class PendingReply:
    """An in-flight exchange waiting for its scheduled completion."""
    text: str
    epoch: int
    task: Optional[ScheduledTask] = None


class ConversationController:
    """
    Two-state controller for the user-to-agent turn cycle.

    At most one exchange is in flight. A submission while a reply is pending
    is rejected with ConversationBusy. Resetting bumps the store epoch, which
    invalidates any pending completion.
    """

    def __init__(self, store: MessageStore, classifier: IntentClassifier,
                 scheduler: Scheduler, events: Optional[EventBus] = None,
                 response_delay_ms: float = DEFAULT_RESPONSE_DELAY_MS):
        self.store = store
        self.classifier = classifier
        self.scheduler = scheduler
        self.events = events or EventBus()
        self.response_delay_ms = response_delay_ms

        self._status = ConversationStatus.IDLE
        self._pending: Optional[PendingReply] = None
        self._lock = threading.RLock()

    @property
    def status(self) -> ConversationStatus:
        return self._status

    @property
    def is_idle(self) -> bool:
        return self._status == ConversationStatus.IDLE

    def submit(self, text: str) -> Optional[Message]:
        """
        Submit user text.

        Args:
            text: Raw user input

        Returns:
            The appended user message, or None when the input is blank

        Raises:
            ConversationBusy: If a reply is still pending
            Exception: Whatever the scheduler raises; the conversation stays idle
        """
        if not text or not text.strip():
            return None

        with self._lock:
            if self._status != ConversationStatus.IDLE:
                logger.warning("Rejected submission while awaiting a response")
                raise ConversationBusy(
                    "A reply is still pending for the previous message",
                    status=self._status.value
                )

            # Schedule first so a scheduler failure leaves the conversation untouched
            pending = PendingReply(text=text.strip(), epoch=self.store.epoch)
            pending.task = self.scheduler.schedule(
                self.response_delay_ms,
                lambda: self._complete(pending)
            )

            try:
                message = self.store.append(MessageRole.USER, text)
            except Exception:
                pending.task.cancel()
                raise

            self._pending = pending
            self._status = ConversationStatus.AWAITING_RESPONSE
            self._emit(EventType.MESSAGE_APPENDED, message=message)
            self._emit(EventType.STATUS_CHANGED)
            logger.debug(f"Accepted message {message.id}, reply due in {self.response_delay_ms}ms")
            return message

    def reset(self) -> Message:
        """Reset the conversation, dropping any pending reply."""
        with self._lock:
            pending, self._pending = self._pending, None
            if pending is not None and pending.task is not None:
                pending.task.cancel()

            greeting = self.store.reset()
            self._emit(EventType.CONVERSATION_RESET, message=greeting)
            self._emit(EventType.MESSAGE_APPENDED, message=greeting)
            self._set_status(ConversationStatus.IDLE)

            logger.info(f"Conversation reset (epoch {self.store.epoch})")
            return greeting

    def _complete(self, pending: PendingReply):
        """Deliver the reply for a pending exchange unless it went stale."""
        with self._lock:
            if pending.epoch != self.store.epoch or pending is not self._pending:
                logger.debug(f"Discarding stale reply from epoch {pending.epoch}")
                return

            result = self.classifier.classify(pending.text)
            reply = self.store.append(MessageRole.AGENT, result.reply, result.intent)
            self._pending = None

            self._emit(EventType.MESSAGE_APPENDED, message=reply)
            self._set_status(ConversationStatus.IDLE)
            logger.debug(f"Delivered reply {reply.id} with intent {result.intent}")

    def _set_status(self, status: ConversationStatus):
        if status == self._status:
            return
        self._status = status
        self._emit(EventType.STATUS_CHANGED)

    def _emit(self, event_type: EventType, message: Optional[Message] = None):
        self.events.emit(SessionEvent(
            type=event_type,
            message=message,
            status=self._status.value,
            epoch=self.store.epoch
        ))
