"""
Intent Recognition
==================

Ordered keyword-rule intent classifier for support messages.

Rules are evaluated top-to-bottom and the first rule with a trigger occurring
anywhere in the lower-cased text wins. Declaration order decides ties, never
the number or length of matched triggers.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from ..error_handling import ConfigurationError

FALLBACK_INTENT = "fallback"


@dataclass(frozen=True)
class IntentRule:
    """A single keyword rule."""
    priority: int
    triggers: Tuple[str, ...]
    intent: str
    reply: str

    def matches(self, text: str) -> bool:
        """Check whether any trigger occurs in already-normalized text."""
        return any(trigger in text for trigger in self.triggers)

    @property
    def is_fallback(self) -> bool:
        return self.intent == FALLBACK_INTENT


@dataclass(frozen=True)
class Classification:
    """Intent classification result."""
    intent: str
    reply: str


DEFAULT_INTENT_RULES: Tuple[IntentRule, ...] = (
    IntentRule(
        priority=0,
        triggers=('track', 'order', 'shipping'),
        intent='order_tracking',
        reply="📦 I can help you track your order! Please provide your order number "
              "and I'll look it up for you."
    ),
    IntentRule(
        priority=1,
        triggers=('return', 'refund', 'exchange'),
        intent='returns',
        reply="↩️ Our return policy allows returns within 30 days of purchase. Items must be "
              "unused and in original packaging. Would you like to start a return?"
    ),
    IntentRule(
        priority=2,
        triggers=('product', 'item', 'buy'),
        intent='product_info',
        reply="🛍️ I'd be happy to help with product information! What specific product "
              "are you interested in learning about?"
    ),
    IntentRule(
        priority=3,
        triggers=('support', 'help', 'agent'),
        intent='contact_support',
        reply="🎧 You can reach our human support team at support@company.com or call "
              "1-800-SUPPORT. They're available 24/7!"
    ),
    IntentRule(
        priority=4,
        triggers=('bill', 'payment', 'charge'),
        intent='billing',
        reply="💳 I can help with billing questions! Are you looking to update payment "
              "info, review charges, or something else?"
    ),
    IntentRule(
        priority=5,
        triggers=(),
        intent=FALLBACK_INTENT,
        reply="🤔 I understand you need help, but I'm not sure about that specific request. "
              "Let me connect you with a human agent who can better assist you!"
    ),
)


def build_rules(definitions: Iterable[Dict[str, Any]]) -> Tuple[IntentRule, ...]:
    """
    Build an ordered rule tuple from plain dictionaries.

    Args:
        definitions: Sequence of {'intent', 'triggers', 'reply'} mappings in priority order

    Returns:
        Tuple of IntentRule with priorities assigned by position
    """
    rules = []
    for index, definition in enumerate(definitions):
        try:
            intent = definition['intent']
            reply = definition['reply']
        except (KeyError, TypeError) as e:
            raise ConfigurationError(f"Intent rule {index} is missing a field: {e}", index=index)

        triggers = tuple(str(t).strip().lower() for t in definition.get('triggers') or ())
        rules.append(IntentRule(priority=index, triggers=triggers, intent=intent, reply=reply))
    return tuple(rules)


def get_rule_errors(rules: Sequence[IntentRule]) -> List[str]:
    """Get a list of problems with a rule set, empty when the set is usable."""
    errors = []
    if not rules:
        return ["Rule set is empty"]

    seen = set()
    for position, rule in enumerate(rules):
        if rule.intent in seen:
            errors.append(f"Duplicate intent '{rule.intent}'")
        seen.add(rule.intent)

        if not rule.reply or not rule.reply.strip():
            errors.append(f"Rule '{rule.intent}' has an empty reply")

        if rule.is_fallback:
            if rule.triggers:
                errors.append("Fallback rule must not define triggers")
            if position != len(rules) - 1:
                errors.append("Fallback rule must be declared last")
        else:
            if not rule.triggers:
                errors.append(f"Rule '{rule.intent}' has no triggers")
            if any(not trigger for trigger in rule.triggers):
                errors.append(f"Rule '{rule.intent}' has a blank trigger")

    if not rules[-1].is_fallback:
        errors.append(f"Rule set must end with the '{FALLBACK_INTENT}' rule")

    return errors


class IntentClassifier:
    """Rule-based intent classifier."""

    def __init__(self, rules: Optional[Sequence[IntentRule]] = None):
        """Initialize with an ordered rule set, defaulting to the support rules."""
        rules = tuple(DEFAULT_INTENT_RULES if rules is None else rules)
        errors = get_rule_errors(rules)
        if errors:
            raise ConfigurationError("Invalid intent rules: " + "; ".join(errors), errors=errors)

        self._rules = rules[:-1]
        self._fallback = rules[-1]

    @property
    def rules(self) -> Tuple[IntentRule, ...]:
        return self._rules + (self._fallback,)

    @property
    def intents(self) -> List[str]:
        """Get supported intents in priority order."""
        return [rule.intent for rule in self.rules]

    def classify(self, text: str) -> Classification:
        """
        Classify text into an intent.

        Never raises; text with no matching trigger resolves to the fallback rule.
        """
        normalized = (text or "").strip().lower()

        for rule in self._rules:
            if rule.matches(normalized):
                return Classification(intent=rule.intent, reply=rule.reply)

        return Classification(intent=self._fallback.intent, reply=self._fallback.reply)
