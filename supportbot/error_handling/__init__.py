"""
Error Handling
==============

Exception hierarchy for the support session engine.

All errors are local, recoverable conditions reported synchronously to the
caller. Each carries an ErrorCategory so adapters (e.g. the HTTP app) can map
them to a response without inspecting exception types.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(Enum):
    """Error categories for classification."""
    VALIDATION = "validation"
    CONFLICT = "conflict"
    CONFIGURATION = "configuration"


class ChatCoreError(Exception):
    """Base exception for session engine errors."""

    category: ErrorCategory = ErrorCategory.VALIDATION

    def __init__(self, message: str, category: Optional[ErrorCategory] = None, **kwargs):
        super().__init__(message)
        self.message = message
        if category is not None:
            self.category = category
        self.metadata = kwargs

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary."""
        return {
            "error": self.message,
            "category": self.category.value,
            "type": type(self).__name__,
            "metadata": self.metadata
        }


class InvalidMessage(ChatCoreError):
    """Raised when a message has empty content or a malformed role/intent pairing."""
    category = ErrorCategory.VALIDATION


class ConversationBusy(ChatCoreError):
    """Raised when a submission arrives while a reply is still pending."""
    category = ErrorCategory.CONFLICT


class ConfigurationError(ChatCoreError):
    """Raised for invalid settings or intent rules."""
    category = ErrorCategory.CONFIGURATION


__all__ = [
    "ErrorCategory",
    "ChatCoreError",
    "InvalidMessage",
    "ConversationBusy",
    "ConfigurationError"
]
