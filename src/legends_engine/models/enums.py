"""Enumeration types for the Legends narrative engine.

These enums name the closed vocabularies of the engine: player archetypes,
NPC dispositions, combat actions and outcomes, and effect kinds. Open
vocabularies (location types, weather, time of day) stay plain strings
because authored content is free to extend them.
"""

from __future__ import annotations

from enum import StrEnum

from legends_engine.core.constants import FRIENDLY_THRESHOLD, HOSTILE_THRESHOLD


class Archetype(StrEnum):
    """Player classes that drive default abilities and level-up bonuses."""

    WARRIOR = "warrior"
    MAGE = "mage"
    ROGUE = "rogue"
    DIPLOMAT = "diplomat"


class Disposition(StrEnum):
    """How an NPC regards the player."""

    FRIENDLY = "friendly"
    NEUTRAL = "neutral"
    HOSTILE = "hostile"

    @classmethod
    def from_relationship(cls, score: int) -> "Disposition":
        """Categorize a relationship score.

        Args:
            score: Unbounded relationship score.

        Returns:
            FRIENDLY at or above the friendly threshold, HOSTILE at or
            below the hostile threshold, NEUTRAL otherwise.
        """
        if score >= FRIENDLY_THRESHOLD:
            return cls.FRIENDLY
        if score <= HOSTILE_THRESHOLD:
            return cls.HOSTILE
        return cls.NEUTRAL


class CombatAction(StrEnum):
    """Actions a player may take in a combat round."""

    ATTACK = "attack"
    DODGE = "dodge"
    MAGIC = "magic"

    @classmethod
    def normalize(cls, token: str | None) -> "CombatAction":
        """Map an arbitrary action token onto a known action.

        Unknown or missing tokens are treated as a plain attack.

        Args:
            token: Raw action token from the presentation layer.

        Returns:
            The matching CombatAction, or ATTACK.
        """
        if token is None:
            return cls.ATTACK
        try:
            return cls(str(token).strip().lower())
        except ValueError:
            return cls.ATTACK


class EnemyAction(StrEnum):
    """Actions chosen by the enemy policy."""

    ATTACK = "attack"
    SPECIAL = "special"


class CombatPhase(StrEnum):
    """Lifecycle of a combat session."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"


class CombatResult(StrEnum):
    """Terminal outcome of a combat session."""

    VICTORY = "victory"
    DEFEAT = "defeat"


class EffectKind(StrEnum):
    """Discriminator values for effect descriptor entries."""

    STAT_DELTA = "stat_delta"
    INVENTORY_CHANGE = "inventory_change"
    RELATIONSHIP_DELTA = "relationship_delta"
    WORLD_STATE_OVERRIDE = "world_state_override"
    FLAG_SET = "flag_set"
    LOCATION_VISITED = "location_visited"
    QUEST_COMPLETED = "quest_completed"


# Actions in the order the presentation layer lists them
COMBAT_ACTIONS: tuple[CombatAction, ...] = (
    CombatAction.ATTACK,
    CombatAction.DODGE,
    CombatAction.MAGIC,
)


__all__ = [
    "Archetype",
    "Disposition",
    "CombatAction",
    "EnemyAction",
    "CombatPhase",
    "CombatResult",
    "EffectKind",
    "COMBAT_ACTIONS",
]
