"""
Configuration Management Module
===============================

YAML settings loading, environment overrides, validation and logging setup.
"""

from .config_manager import (
    Settings, ConfigManager, Environment,
    ConversationConfig, AnalyticsConfig, ObservabilityConfig,
    create_settings, load_settings, setup_logging
)

from .validation import (
    ConfigValidator, ValidationError, ValidationResult,
    validate_settings, get_validation_errors
)

__all__ = [
    "Settings", "ConfigManager", "Environment",
    "ConversationConfig", "AnalyticsConfig", "ObservabilityConfig",
    "create_settings", "load_settings", "setup_logging",

    "ConfigValidator", "ValidationError", "ValidationResult",
    "validate_settings", "get_validation_errors"
]
