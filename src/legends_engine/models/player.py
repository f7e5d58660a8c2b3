"""Player character model.

The player is owned by the game session and mutated only through
``Player.modify_stat``, which enforces the health/mana clamps and drives
level progression.

Models:
    PlayerStats: The numeric stat block.
    Background: Free-form character history.
    Player: Name, archetype, stats, abilities and background.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from legends_engine.core.constants import (
    ARCHETYPE_LEVEL_BONUSES,
    BALANCED_LEVEL_BONUS,
    LEVEL_THRESHOLD_GROWTH,
    LEVEL_UP_HEALTH_GAIN,
    LEVEL_UP_MANA_GAIN,
)
from legends_engine.core.logging import get_logger
from legends_engine.models.enums import Archetype


logger = get_logger(__name__)


# Authored content and save files written by earlier front-ends use camelCase
STAT_ALIASES: dict[str, str] = {
    "maxHealth": "max_health",
    "maxMana": "max_mana",
    "experienceToLevel": "experience_to_level",
}

# Lower bounds the stat block itself validates
_STAT_FLOORS: dict[str, int] = {
    "max_health": 1,
    "max_mana": 0,
    "level": 1,
    "experience_to_level": 2,
}

DEFAULT_ABILITIES: dict[str, list[str]] = {
    Archetype.WARRIOR: ["Powerful Strike", "Shield Block", "Intimidate"],
    Archetype.MAGE: ["Fireball", "Arcane Shield", "Teleport"],
    Archetype.ROGUE: ["Backstab", "Evade", "Pickpocket"],
    Archetype.DIPLOMAT: ["Persuade", "Bribe", "Gather Information"],
}


def canonical_stat_name(name: str) -> str:
    """Map a stat name in any accepted spelling onto its field name.

    Args:
        name: Stat name, snake_case or camelCase.

    Returns:
        The PlayerStats field name (unchanged if not aliased).
    """
    return STAT_ALIASES.get(name, name)


class PlayerStats(BaseModel):
    """Numeric stat block of the player.

    Attributes:
        health: Current health.
        max_health: Health ceiling.
        mana: Current mana.
        max_mana: Mana ceiling.
        strength: Physical attack stat.
        intelligence: Magic attack stat.
        dexterity: Agility stat.
        charisma: Social stat.
        defense: Physical damage reduction.
        resistance: Magical damage reduction.
        level: Character level.
        experience: Experience toward the next level.
        experience_to_level: Experience required for the next level, at least 2
            so that each level-up raises it.
    """

    model_config = ConfigDict(extra="ignore", validate_assignment=True, populate_by_name=True)

    health: int = 100
    max_health: int = Field(
        default=100,
        ge=1,
        validation_alias=AliasChoices("max_health", "maxHealth"),
    )
    mana: int = 50
    max_mana: int = Field(
        default=50,
        ge=0,
        validation_alias=AliasChoices("max_mana", "maxMana"),
    )
    strength: int = 10
    intelligence: int = 10
    dexterity: int = 10
    charisma: int = 10
    defense: int = 5
    resistance: int = 5
    level: int = Field(default=1, ge=1)
    experience: int = 0
    experience_to_level: int = Field(
        default=100,
        ge=2,
        validation_alias=AliasChoices("experience_to_level", "experienceToLevel"),
    )

    @model_validator(mode="after")
    def clamp_pools(self) -> "PlayerStats":
        """Keep health and mana within their ceilings on construction."""
        if not 0 <= self.health <= self.max_health:
            object.__setattr__(self, "health", max(0, min(self.health, self.max_health)))
        if not 0 <= self.mana <= self.max_mana:
            object.__setattr__(self, "mana", max(0, min(self.mana, self.max_mana)))
        return self

    @classmethod
    def stat_names(cls) -> frozenset[str]:
        """Names of every known stat field."""
        return frozenset(cls.model_fields)


class Background(BaseModel):
    """Character history used by narrative interpolation.

    Extra authored fields (e.g. ``mentor``) are kept and interpolable.
    """

    model_config = ConfigDict(extra="allow")

    hometown: str = "Unknown"
    backstory: str = "A mysterious adventurer with an unknown past."


class Player(BaseModel):
    """The player character.

    Attributes:
        name: Display name.
        archetype: Player class; values outside the closed set are kept
            and receive the balanced level-up bonus.
        stats: Numeric stat block.
        abilities: Named abilities, archetype defaults when not given.
        background: Character history.

    Example:
        >>> player = Player(name="Aria", archetype="mage")
        >>> player.modify_stat("health", -30)
        True
        >>> player.stats.health
        70
    """

    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    name: str = Field(default="Adventurer", min_length=1, max_length=100)
    archetype: str = Field(default=Archetype.WARRIOR.value, min_length=1)
    stats: PlayerStats = Field(default_factory=PlayerStats)
    abilities: list[str] = Field(default_factory=list)
    background: Background = Field(default_factory=Background)

    @model_validator(mode="after")
    def default_abilities(self) -> "Player":
        """Fill in archetype abilities when none were provided."""
        if not self.abilities:
            object.__setattr__(
                self,
                "abilities",
                list(DEFAULT_ABILITIES.get(self.archetype, ["Basic Attack"])),
            )
        return self

    def get_stat(self, name: str, default: int = 0) -> int:
        """Look up a stat by name.

        Args:
            name: Stat name, snake_case or camelCase.
            default: Value returned for unknown stats.

        Returns:
            The stat value, or default.
        """
        field = canonical_stat_name(name)
        if field not in PlayerStats.stat_names():
            return default
        return getattr(self.stats, field)

    def modify_stat(self, name: str, delta: int) -> bool:
        """Apply a signed delta to a stat.

        Health and mana are clamped to ``[0, max]``. Experience gains are
        followed by level-up checks. Lowering a ceiling re-clamps its pool.

        Args:
            name: Stat name, snake_case or camelCase.
            delta: Signed amount to add.

        Returns:
            True if the stat exists and was changed, False otherwise.
        """
        field = canonical_stat_name(name)
        if field not in PlayerStats.stat_names():
            logger.debug("Unknown stat ignored", stat=name, delta=delta)
            return False

        stats = self.stats
        value = getattr(stats, field) + int(delta)
        if field in _STAT_FLOORS:
            value = max(_STAT_FLOORS[field], value)
        setattr(stats, field, value)

        if field in ("health", "max_health"):
            stats.health = max(0, min(stats.health, stats.max_health))
        elif field in ("mana", "max_mana"):
            stats.mana = max(0, min(stats.mana, stats.max_mana))
        elif field == "experience":
            self._check_level_up()

        return True

    def _check_level_up(self) -> int:
        """Level up as many times as the current experience allows.

        Returns:
            Number of levels gained.
        """
        stats = self.stats
        gained = 0
        while stats.experience >= stats.experience_to_level:
            stats.level += 1
            stats.experience -= stats.experience_to_level
            stats.experience_to_level = int(stats.experience_to_level * LEVEL_THRESHOLD_GROWTH)

            stats.max_health += LEVEL_UP_HEALTH_GAIN
            stats.max_mana += LEVEL_UP_MANA_GAIN

            bonus = ARCHETYPE_LEVEL_BONUSES.get(self.archetype, BALANCED_LEVEL_BONUS)
            for stat, amount in bonus.items():
                setattr(stats, stat, getattr(stats, stat) + amount)

            stats.health = stats.max_health
            stats.mana = stats.max_mana
            gained += 1

            logger.info(
                "Player levelled up",
                player=self.name,
                level=stats.level,
                next_threshold=stats.experience_to_level,
            )
        return gained

    def add_ability(self, ability: str) -> bool:
        """Learn a new ability.

        Args:
            ability: Ability name.

        Returns:
            True if added, False if already known.
        """
        if ability in self.abilities:
            return False
        self.abilities = [*self.abilities, ability]
        return True

    @classmethod
    def from_data(cls, data: dict[str, Any] | None) -> "Player":
        """Build a player from character-creation or save data.

        Args:
            data: Raw player mapping; missing fields take defaults.

        Returns:
            New Player.
        """
        return cls.model_validate(data or {})


__all__ = [
    "STAT_ALIASES",
    "DEFAULT_ABILITIES",
    "canonical_stat_name",
    "PlayerStats",
    "Background",
    "Player",
]
