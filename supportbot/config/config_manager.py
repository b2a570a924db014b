"""
Configuration Manager
=====================

YAML-backed settings with environment-specific files, environment variable
overrides and validation.
"""

import logging
import os
from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..analytics.aggregator import DEFAULT_TOP_K, PerformanceFigures
from ..chatbot.dialog_state import DEFAULT_RESPONSE_DELAY_MS
from ..chatbot.intent_recognizer import DEFAULT_INTENT_RULES, IntentRule, build_rules
from ..chatbot.memory import DEFAULT_GREETING
from ..error_handling import ConfigurationError
from .validation import validate_settings

logger = logging.getLogger(__name__)

DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

DEFAULT_QUICK_REPLIES = [
    'Track my order',
    'Return policy',
    'Product information',
    'Contact support',
    'Billing questions'
]


class Environment(Enum):
    """Environment types for configuration."""
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


@dataclass
class ConversationConfig:
    """Conversation behaviour settings."""
    response_delay_ms: float = DEFAULT_RESPONSE_DELAY_MS
    greeting: str = DEFAULT_GREETING
    quick_replies: List[str] = field(default_factory=lambda: list(DEFAULT_QUICK_REPLIES))


@dataclass
class AnalyticsConfig:
    """Analytics settings."""
    top_k: int = DEFAULT_TOP_K
    performance: PerformanceFigures = field(default_factory=PerformanceFigures)


@dataclass
class ObservabilityConfig:
    """Logging configuration."""
    log_level: str = "INFO"
    log_format: str = DEFAULT_LOG_FORMAT
    log_file: Optional[str] = None


@dataclass
class Settings:
    """Application settings."""
    environment: Environment = Environment.DEVELOPMENT
    app_name: str = "SupportBot"
    version: str = "1.0.0"
    debug_mode: bool = False

    conversation: ConversationConfig = field(default_factory=ConversationConfig)
    analytics: AnalyticsConfig = field(default_factory=AnalyticsConfig)
    observability: ObservabilityConfig = field(default_factory=ObservabilityConfig)
    intents: List[IntentRule] = field(default_factory=lambda: list(DEFAULT_INTENT_RULES))

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary."""
        data = asdict(self)
        data['environment'] = self.environment.value
        return data

    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION


def setup_logging(observability: ObservabilityConfig):
    """Configure root logging from settings."""
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if observability.log_file:
        handlers.append(logging.FileHandler(observability.log_file))

    logging.basicConfig(
        level=getattr(logging, observability.log_level.upper(), logging.INFO),
        format=observability.log_format,
        handlers=handlers,
        force=True
    )


class ConfigManager:
    """Loads, overrides and validates settings."""

    ENV_OVERRIDES = {
        'conversation.response_delay_ms': ('SUPPORTBOT_RESPONSE_DELAY_MS', float),
        'observability.log_level': ('SUPPORTBOT_LOG_LEVEL', str),
        'analytics.top_k': ('SUPPORTBOT_TOP_K', int),
    }

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or self._find_config_path()
        self._settings: Optional[Settings] = None
        self.load_config()

    def _find_config_path(self) -> str:
        """Find configuration file path based on environment."""
        env = os.environ.get("ENVIRONMENT", "development")
        config_dir = Path(__file__).parent

        env_config = config_dir / f"settings.{env}.yaml"
        if env_config.exists():
            return str(env_config)

        default_config = config_dir / "settings.yaml"
        if default_config.exists():
            return str(default_config)

        raise ConfigurationError("No configuration file found", directory=str(config_dir))

    def load_config(self) -> Settings:
        """Load configuration from file."""
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load configuration: {e}")
            raise ConfigurationError(f"Cannot read {self.config_path}: {e}", path=self.config_path)

        config_data = self._merge_environment_variables(config_data)
        settings = create_settings(config_data)

        result = validate_settings(settings)
        for warning in result.warnings:
            logger.warning(f"{warning.field_path}: {warning.message}")
        if not result.is_valid:
            raise ConfigurationError(
                result.get_summary() + " " + "; ".join(
                    f"{e.field_path}: {e.message}" for e in result.errors
                ),
                path=self.config_path
            )

        self._settings = settings
        logger.info(f"Configuration loaded from {self.config_path}")
        return settings

    def _merge_environment_variables(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Merge environment variables with configuration data."""
        for config_path, (env_var, cast) in self.ENV_OVERRIDES.items():
            env_value = os.environ.get(env_var)
            if env_value:
                try:
                    value = cast(env_value)
                except ValueError:
                    raise ConfigurationError(f"Invalid value for {env_var}: {env_value!r}")
                self._set_nested_value(config_data, config_path, value)

        return config_data

    def _set_nested_value(self, data: Dict[str, Any], path: str, value: Any):
        """Set nested dictionary value using dot notation."""
        keys = path.split('.')
        current = data

        for key in keys[:-1]:
            if not isinstance(current.get(key), dict):
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value

    @property
    def settings(self) -> Settings:
        """Get current settings."""
        if self._settings is None:
            self.load_config()
        return self._settings


def create_settings(config_data: Dict[str, Any]) -> Settings:
    """Create Settings from a configuration dictionary."""
    settings_dict: Dict[str, Any] = {}

    try:
        settings_dict['environment'] = Environment(config_data.get('environment', 'development'))
    except ValueError as e:
        raise ConfigurationError(str(e))
    settings_dict['app_name'] = config_data.get('app_name', 'SupportBot')
    settings_dict['version'] = str(config_data.get('version', '1.0.0'))
    settings_dict['debug_mode'] = bool(config_data.get('debug_mode', False))

    try:
        if 'conversation' in config_data:
            settings_dict['conversation'] = ConversationConfig(**config_data['conversation'])

        if 'analytics' in config_data:
            analytics_data = dict(config_data['analytics'])
            if 'performance' in analytics_data:
                analytics_data['performance'] = PerformanceFigures(**analytics_data['performance'])
            settings_dict['analytics'] = AnalyticsConfig(**analytics_data)

        if 'observability' in config_data:
            settings_dict['observability'] = ObservabilityConfig(**config_data['observability'])
    except TypeError as e:
        raise ConfigurationError(f"Unknown configuration field: {e}")

    if config_data.get('intents'):
        settings_dict['intents'] = list(build_rules(config_data['intents']))

    return Settings(**settings_dict)


def load_settings(config_path: Optional[str] = None) -> Settings:
    """Load settings from a YAML file."""
    return ConfigManager(config_path).settings
