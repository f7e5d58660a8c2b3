"""Engine-wide constants for the Legends narrative engine.

This module defines the fixed rules of player progression and the
markers used by authored content.
"""

from __future__ import annotations

# =============================================================================
# Progression
# =============================================================================

LEVEL_THRESHOLD_GROWTH = 1.5
"""Multiplier applied (then floored) to experience_to_level on each level-up."""

LEVEL_UP_HEALTH_GAIN = 10
"""Max health gained per level."""

LEVEL_UP_MANA_GAIN = 5
"""Max mana gained per level."""

ARCHETYPE_LEVEL_BONUSES: dict[str, dict[str, int]] = {
    "warrior": {"strength": 3, "defense": 2, "dexterity": 1},
    "mage": {"intelligence": 3, "resistance": 2, "max_mana": 5},
    "rogue": {"dexterity": 3, "charisma": 1, "strength": 1},
    "diplomat": {"charisma": 3, "intelligence": 2, "resistance": 1},
}
"""Secondary stat bumps applied on level-up, per archetype."""

BALANCED_LEVEL_BONUS: dict[str, int] = {
    "strength": 1,
    "intelligence": 1,
    "dexterity": 1,
    "charisma": 1,
    "defense": 1,
}
"""Level-up bump for archetypes outside the closed set."""

DEFEAT_RECOVERY_HEALTH = 1
"""Health a player is left with after losing a fight."""

# =============================================================================
# Relationships & NPCs
# =============================================================================

FRIENDLY_THRESHOLD = 50
"""Relationship score at or above which an NPC is friendly."""

HOSTILE_THRESHOLD = -50
"""Relationship score at or below which an NPC is hostile."""

MAX_NPC_MEMORIES = 10
"""Maximum interactions an NPC remembers before forgetting the oldest."""

# =============================================================================
# Content Markers
# =============================================================================

STARTING_TEMPLATE_TYPE = "starting"
"""Template type reserved for the entry scene."""

COMBAT_START_TAG = "combat_start"
"""Scene tag that hands control to the combat state machine."""

EVENT_TAG = "event"
"""Tag prepended to every random event scene."""

QUICKSAVE_SLOT = "quicksave"
"""Save slot used by quick save and quick load."""


__all__ = [
    # Progression
    "LEVEL_THRESHOLD_GROWTH",
    "LEVEL_UP_HEALTH_GAIN",
    "LEVEL_UP_MANA_GAIN",
    "ARCHETYPE_LEVEL_BONUSES",
    "BALANCED_LEVEL_BONUS",
    "DEFEAT_RECOVERY_HEALTH",
    # Relationships
    "FRIENDLY_THRESHOLD",
    "HOSTILE_THRESHOLD",
    "MAX_NPC_MEMORIES",
    # Content markers
    "STARTING_TEMPLATE_TYPE",
    "COMBAT_START_TAG",
    "EVENT_TAG",
    "QUICKSAVE_SLOT",
]
