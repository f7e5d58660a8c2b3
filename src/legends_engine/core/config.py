"""Configuration management for the Legends narrative engine.

This module provides centralized configuration management using
pydantic-settings, supporting environment variables, .env files, and
runtime overrides. Engine components receive these settings explicitly
at construction; only the orchestrator falls back to ``get_settings()``.

Example:
    >>> from legends_engine.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.event_gate.base_chance
    0.15

Environment Variables:
    LEGENDS_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    LEGENDS_RANDOM_SEED: Seed for the session randomness stream
    LEGENDS_SAVE_DATABASE_PATH: Path to the SQLite save database
    LEGENDS_EVENT_BASE_CHANCE: Base random event probability
    LEGENDS_COMBAT_MAGIC_COST: Mana spent by the magic action
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from legends_engine.core.exceptions import ConfigurationError


class EventGateSettings(BaseSettings):
    """Configuration for the random event interrupt probability.

    Attributes:
        base_chance: Probability before any adjustment.
        high_danger_bonus: Added when world danger is "high".
        dangerous_location_bonus: Added when the location type is "dangerous".
        safe_location_penalty: Subtracted when the location type is "safe".
        min_chance: Lower clamp for the final probability.
        max_chance: Upper clamp for the final probability.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEGENDS_EVENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_chance: float = Field(default=0.15, ge=0, le=1, description="Base event chance")
    high_danger_bonus: float = Field(default=0.10, ge=0, le=1, description="High danger bonus")
    dangerous_location_bonus: float = Field(
        default=0.10,
        ge=0,
        le=1,
        description="Dangerous location bonus",
    )
    safe_location_penalty: float = Field(
        default=0.05,
        ge=0,
        le=1,
        description="Safe location penalty",
    )
    min_chance: float = Field(default=0.05, ge=0, le=1, description="Lower clamp")
    max_chance: float = Field(default=0.40, ge=0, le=1, description="Upper clamp")

    @model_validator(mode="after")
    def validate_clamp_range(self) -> "EventGateSettings":
        """Ensure the clamp range is not inverted.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If min_chance > max_chance.
        """
        if self.min_chance > self.max_chance:
            raise ConfigurationError(
                f"min_chance ({self.min_chance}) must not exceed "
                f"max_chance ({self.max_chance})",
                config_key="min_chance",
            )
        return self


class CombatSettings(BaseSettings):
    """Configuration for combat arithmetic and enemy policy.

    Attributes:
        magic_cost: Mana spent by a successful magic action.
        magic_multiplier: Intelligence multiplier for magic damage.
        special_multiplier: Strength multiplier for enemy special attacks.
        low_health_threshold: Fraction of max health under which enemies get desperate.
        desperate_special_chance: Special attack chance when desperate.
        special_chance: Flat special attack chance.
        dodge_factor: Multiplier applied to normal enemy attacks after a dodge.
        damage_variation: Fraction of damage used as symmetric jitter.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEGENDS_COMBAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    magic_cost: int = Field(default=5, ge=0, description="Mana cost of magic")
    magic_multiplier: float = Field(default=1.5, gt=0, description="Magic damage multiplier")
    special_multiplier: float = Field(default=1.5, gt=0, description="Special attack multiplier")
    low_health_threshold: float = Field(
        default=0.3,
        ge=0,
        le=1,
        description="Desperation threshold",
    )
    desperate_special_chance: float = Field(
        default=0.7,
        ge=0,
        le=1,
        description="Special chance when desperate",
    )
    special_chance: float = Field(default=0.2, ge=0, le=1, description="Flat special chance")
    dodge_factor: float = Field(default=0.5, ge=0, le=1, description="Dodge damage factor")
    damage_variation: float = Field(default=0.2, ge=0, le=1, description="Damage jitter fraction")


class StorageSettings(BaseSettings):
    """Configuration for the save database.

    Attributes:
        save_database_path: Path to the SQLite save database.
        max_saves: Maximum number of save slots kept.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEGENDS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    save_database_path: Path = Field(
        default=Path.home() / ".legends" / "saves.db",
        description="Path to SQLite save database",
    )
    max_saves: int = Field(default=10, ge=1, le=100, description="Maximum save slots")

    @field_validator("save_database_path", mode="after")
    @classmethod
    def expand_user(cls, value: Path) -> Path:
        """Expand a leading ``~`` in the configured path.

        Args:
            value: The configured path.

        Returns:
            The expanded path.
        """
        return value.expanduser()


class Settings(BaseSettings):
    """Main engine settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Engine logging level.
        json_logs: Emit JSON logs instead of console output.
        random_seed: Optional seed for the session randomness stream.
        event_gate: Random event gate settings.
        combat: Combat settings.
        storage: Save storage settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEGENDS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(default="Legends Unwritten", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(default=False, description="Emit JSON logs")
    random_seed: int | None = Field(default=None, description="Randomness seed")

    event_gate: EventGateSettings = Field(default_factory=EventGateSettings)
    combat: CombatSettings = Field(default_factory=CombatSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the engine settings singleton.

    Returns:
        The engine Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load engine settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "EventGateSettings",
    "CombatSettings",
    "StorageSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
