"""
Centralized configuration with environment variable overrides.

Business naming, conversation thresholds, and logging settings are
configurable here. Nothing is hardcoded in parser or state machine logic.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from booking_assistant.logging_context import add_customer_id_filter

load_dotenv()

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_bool(env_var: str, default: str) -> bool:
    """Parse a boolean flag from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    normalized = str(raw).strip().lower()
    if normalized in _TRUTHY:
        return True
    if normalized in _FALSY:
        return False
    raise ValueError(f"Invalid boolean for {env_var}: {raw!r}")


@dataclass(frozen=True)
class BusinessConfig:
    """Business-specific settings loaded from environment or defaults."""

    name: str = os.getenv("BUSINESS_NAME", "Barber Pro")


@dataclass(frozen=True)
class ConversationConfig:
    """Thresholds applied by the parsers and the inbound handler."""

    min_name_length: int = _safe_int("MIN_NAME_LENGTH", "2")
    max_message_length: int = _safe_int("MAX_MESSAGE_LENGTH", "1000")
    timeout_minutes: int = _safe_int("CONVERSATION_TIMEOUT_MINUTES", "0")
    reset_after_booking: bool = _safe_bool("RESET_AFTER_BOOKING", "true")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    business: BusinessConfig = field(default_factory=BusinessConfig)
    conversation: ConversationConfig = field(default_factory=ConversationConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    agent_name: str = os.getenv("AGENT_NAME", "booking-assistant")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if not config.business.name.strip():
        raise ValueError("BUSINESS_NAME must not be empty")
    if config.conversation.min_name_length < 1:
        raise ValueError(
            f"MIN_NAME_LENGTH must be >= 1, got {config.conversation.min_name_length}"
        )
    if config.conversation.max_message_length < config.conversation.min_name_length:
        raise ValueError(
            "MAX_MESSAGE_LENGTH must be >= MIN_NAME_LENGTH, "
            f"got {config.conversation.max_message_length}"
        )
    if config.conversation.timeout_minutes < 0:
        raise ValueError(
            "CONVERSATION_TIMEOUT_MINUTES must be >= 0, "
            f"got {config.conversation.timeout_minutes}"
        )


LOG_FORMAT = "%(asctime)s [%(name)s] [%(customer_id)s] %(levelname)s: %(message)s"


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # Handler-level filter so records from any logger can render customer_id.
    for handler in logging.getLogger().handlers:
        add_customer_id_filter(handler)
    logger.info("Configuration loaded for '%s'", config.business.name)
    return config


# Singleton instance
settings = load_config()
