"""
Configuration Validation
========================

Validation for settings with detailed error reporting.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from ..chatbot.intent_recognizer import get_rule_errors

logger = logging.getLogger(__name__)

LOG_LEVELS = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}


@dataclass
class ValidationError:
    """Validation error details."""
    field_path: str
    message: str
    severity: str = "error"  # error, warning
    suggested_value: Optional[Any] = None


class ValidationResult:
    """Result of configuration validation."""

    def __init__(self):
        self.errors: List[ValidationError] = []
        self.warnings: List[ValidationError] = []
        self.is_valid = True

    def add_error(self, field_path: str, message: str, suggested_value: Optional[Any] = None):
        """Add validation error."""
        self.errors.append(ValidationError(field_path, message, "error", suggested_value))
        self.is_valid = False

    def add_warning(self, field_path: str, message: str):
        """Add validation warning."""
        self.warnings.append(ValidationError(field_path, message, "warning"))

    def get_summary(self) -> str:
        """Get validation summary."""
        if self.is_valid:
            return f"Configuration valid. {len(self.warnings)} warnings."
        return f"Configuration invalid. {len(self.errors)} errors, {len(self.warnings)} warnings."


class ConfigValidator:
    """Settings validator."""

    @staticmethod
    def validate_conversation(conversation, result: ValidationResult):
        delay = conversation.response_delay_ms
        if not isinstance(delay, (int, float)) or isinstance(delay, bool) or delay < 0:
            result.add_error("conversation.response_delay_ms",
                             f"Delay must be a non-negative number, got {delay!r}", 1500)
        elif delay > 60000:
            result.add_warning("conversation.response_delay_ms",
                               f"Delay of {delay}ms is unusually long")

        if not isinstance(conversation.greeting, str) or not conversation.greeting.strip():
            result.add_error("conversation.greeting", "Greeting must be non-empty text")

        replies = conversation.quick_replies
        if not isinstance(replies, list):
            result.add_error("conversation.quick_replies", "Quick replies must be a list")
            return
        if not replies:
            result.add_warning("conversation.quick_replies", "No quick replies configured")
        for index, reply in enumerate(replies):
            if not isinstance(reply, str) or not reply.strip():
                result.add_error(f"conversation.quick_replies[{index}]",
                                 "Quick reply must be non-empty text")

    @staticmethod
    def validate_analytics(analytics, result: ValidationResult):
        top_k = analytics.top_k
        if not isinstance(top_k, int) or isinstance(top_k, bool) or top_k < 1:
            result.add_error("analytics.top_k", f"top_k must be a positive integer, got {top_k!r}", 5)

        performance = analytics.performance
        for name in ('resolution_rate', 'first_contact_resolution', 'escalation_rate'):
            value = getattr(performance, name)
            if not 0 <= value <= 100:
                result.add_error(f"analytics.performance.{name}",
                                 f"Percentage {value} is out of range (0-100)")
        if not 0 <= performance.customer_satisfaction <= performance.satisfaction_scale:
            result.add_error("analytics.performance.customer_satisfaction",
                             "Satisfaction score exceeds its scale")

    @staticmethod
    def validate_observability(observability, result: ValidationResult):
        if str(observability.log_level).upper() not in LOG_LEVELS:
            result.add_error("observability.log_level",
                             f"Unknown log level: {observability.log_level}", "INFO")

    @staticmethod
    def validate_intents(intents, result: ValidationResult):
        for message in get_rule_errors(intents):
            result.add_error("intents", message)


def validate_settings(settings) -> ValidationResult:
    """Validate a Settings object."""
    result = ValidationResult()

    ConfigValidator.validate_conversation(settings.conversation, result)
    ConfigValidator.validate_analytics(settings.analytics, result)
    ConfigValidator.validate_observability(settings.observability, result)
    ConfigValidator.validate_intents(settings.intents, result)

    logger.debug(result.get_summary())
    return result


def get_validation_errors(settings) -> List[str]:
    """Get validation error messages as strings."""
    result = validate_settings(settings)
    return [f"{error.field_path}: {error.message}" for error in result.errors]
