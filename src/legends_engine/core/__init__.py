"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        LegendsEngineError: Base exception for all engine errors.
        GameEngineError: Session, combat and template errors.
        ConfigurationError: Configuration-related errors.
        ValidationError: Data validation errors.

    Configuration:
        Settings: Main engine settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up engine logging.
        configure_from_settings: Set up logging from Settings.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from legends_engine.core.config import (
    CombatSettings,
    EventGateSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from legends_engine.core.exceptions import (
    CombatError,
    ConfigurationError,
    GameEngineError,
    InvalidGameStateError,
    LegendsEngineError,
    PersistenceError,
    TemplateError,
    ValidationError,
)
from legends_engine.core.logging import (
    bind_context,
    clear_context,
    configure_from_settings,
    configure_logging,
    get_logger,
)


__all__ = [
    # Base exception
    "LegendsEngineError",
    # Game engine exceptions
    "GameEngineError",
    "InvalidGameStateError",
    "CombatError",
    "TemplateError",
    "PersistenceError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
    # Configuration
    "Settings",
    "EventGateSettings",
    "CombatSettings",
    "StorageSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
]
