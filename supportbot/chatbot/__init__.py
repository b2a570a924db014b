"""
Chatbot Core Module
==================

Conversation engine: message store, intent classification, reply scheduling
and the per-conversation session.
"""

from .memory import Message, MessageRole, MessageStore
from .intent_recognizer import (
    IntentClassifier, IntentRule, Classification, DEFAULT_INTENT_RULES, FALLBACK_INTENT
)
from .scheduler import Scheduler, ScheduledTask, AsyncioScheduler, ThreadingScheduler, ManualScheduler
from .events import EventBus, EventType, SessionEvent
from .dialog_state import ConversationController, ConversationStatus
from .base_core import ChatSession

__all__ = [
    'Message',
    'MessageRole',
    'MessageStore',
    'IntentClassifier',
    'IntentRule',
    'Classification',
    'DEFAULT_INTENT_RULES',
    'FALLBACK_INTENT',
    'Scheduler',
    'ScheduledTask',
    'AsyncioScheduler',
    'ThreadingScheduler',
    'ManualScheduler',
    'EventBus',
    'EventType',
    'SessionEvent',
    'ConversationController',
    'ConversationStatus',
    'ChatSession'
]
