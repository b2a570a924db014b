"""
Conversation Memory
===================

Append-only message store for a single conversation.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional, Tuple

from ..error_handling import InvalidMessage

logger = logging.getLogger(__name__)

GREETING_INTENT = "greeting"
DEFAULT_GREETING = "Hello! 👋 I'm your AI support assistant. How can I help you today?"


class MessageRole(Enum):
    """Author of a message."""
    USER = "user"
    AGENT = "agent"


@dataclass(frozen=True)
class Message:
    """Represents a chat message."""
    id: int
    role: MessageRole
    content: str
    created_at: datetime
    intent: Optional[str] = None

    @property
    def is_user(self) -> bool:
        return self.role == MessageRole.USER

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'id': self.id,
            'role': self.role.value,
            'content': self.content,
            'created_at': self.created_at.isoformat(),
            'intent': self.intent
        }


class MessageStore:
    """
    Ordered message log for one conversation.

    Ids are assigned from a counter that survives resets, so an id is never
    reused for the lifetime of the store. The epoch increments on every reset.
    """

    def __init__(self, greeting: str = DEFAULT_GREETING,
                 clock: Callable[[], datetime] = datetime.utcnow,
                 vocabulary: Optional[Iterable[str]] = None):
        """
        Initialize the store seeded with a greeting message.

        Args:
            greeting: Text of the seed agent message
            clock: Callable returning the timestamp for new messages
            vocabulary: Allowed agent intents; any non-empty intent when omitted
        """
        if not greeting or not greeting.strip():
            raise InvalidMessage("Greeting text must not be empty")

        self.greeting = greeting
        self._clock = clock
        self.vocabulary: Optional[FrozenSet[str]] = None
        if vocabulary is not None:
            self.vocabulary = frozenset(vocabulary) | {GREETING_INTENT}
        self._messages: List[Message] = []
        self._next_id = 1
        self._epoch = 0

        self.append(MessageRole.AGENT, self.greeting, GREETING_INTENT)

    @property
    def epoch(self) -> int:
        return self._epoch

    def __len__(self) -> int:
        return len(self._messages)

    def append(self, role: MessageRole, content: str, intent: Optional[str] = None) -> Message:
        """
        Append a message to the conversation.

        Args:
            role: Message author
            content: Message text, stored trimmed
            intent: Intent label, required for agent messages and forbidden for user ones

        Returns:
            The stored message

        Raises:
            InvalidMessage: If the content is blank or the role/intent pairing is invalid
        """
        if not isinstance(role, MessageRole):
            raise InvalidMessage(f"Unknown message role: {role!r}", role=role)

        text = (content or "").strip()
        if not text:
            raise InvalidMessage("Message content must not be empty", role=role.value)

        if role == MessageRole.USER and intent is not None:
            raise InvalidMessage("User messages cannot carry an intent", intent=intent)
        if role == MessageRole.AGENT and not intent:
            raise InvalidMessage("Agent messages require an intent")
        if role == MessageRole.AGENT and self.vocabulary is not None and intent not in self.vocabulary:
            raise InvalidMessage(f"Unknown intent: {intent}", intent=intent)

        message = Message(
            id=self._next_id,
            role=role,
            content=text,
            created_at=self._clock(),
            intent=intent
        )
        self._next_id += 1
        self._messages.append(message)
        return message

    def snapshot(self) -> Tuple[Message, ...]:
        """Get an immutable copy of the conversation history."""
        return tuple(self._messages)

    def reset(self) -> Message:
        """Clear history, bump the epoch and reseed the greeting."""
        self._messages = []
        self._epoch += 1
        logger.debug(f"Message store reset, epoch now {self._epoch}")
        return self.append(MessageRole.AGENT, self.greeting, GREETING_INTENT)
