"""
SupportBot
==========

Conversational session engine for a customer-support assistant.
"""

from .chatbot.base_core import ChatSession

__version__ = "1.0.0"

__all__ = ['ChatSession']
