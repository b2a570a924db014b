"""
Session Events
==============

Listener registration and dispatch for renderers observing a session.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from .memory import Message

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Kinds of session events."""
    MESSAGE_APPENDED = "message_appended"
    STATUS_CHANGED = "status_changed"
    CONVERSATION_RESET = "conversation_reset"


@dataclass(frozen=True)
class SessionEvent:
    """A change in session state."""
    type: EventType
    message: Optional[Message] = None
    status: Optional[str] = None
    epoch: int = 0


Listener = Callable[[SessionEvent], None]


class EventBus:
    """Synchronous event dispatch to registered listeners."""

    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener.

        Returns:
            Callable that removes the listener; calling it twice is harmless
        """
        self._listeners.append(listener)
        logger.debug(f"Registered listener {listener!r}")

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
                logger.debug(f"Removed listener {listener!r}")

        return unsubscribe

    def emit(self, event: SessionEvent):
        """Deliver an event to every listener, isolating listener failures."""
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.error(f"Listener error on {event.type.value}: {e}")

    @property
    def listener_count(self) -> int:
        return len(self._listeners)
