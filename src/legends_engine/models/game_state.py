"""Session-wide game state models.

Models:
    WorldState: Time of day, weather and danger level.
    GameState: Everything about a session that is not the player.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from legends_engine.models.effects import Scalar


# =============================================================================
# World State
# =============================================================================


class WorldState(BaseModel):
    """Session-wide context read by applicability checks.

    Values are open strings; authored content may introduce new ones and
    may add fields of its own (e.g. ``season``).

    Attributes:
        time: Time of day.
        weather: Current weather.
        danger: Danger level.
    """

    model_config = ConfigDict(extra="allow", validate_assignment=True)

    time: str = Field(default="morning", description="Time of day")
    weather: str = Field(default="clear", description="Current weather")
    danger: str = Field(default="low", description="Danger level")

    def get_field(self, name: str) -> Any:
        """Look up a declared or extra field.

        Args:
            name: Field name.

        Returns:
            The field value, or None when unset.
        """
        if name in type(self).model_fields:
            return getattr(self, name)
        return (self.model_extra or {}).get(name)

    def set_field(self, name: str, value: Any) -> None:
        """Overwrite one declared or extra field."""
        setattr(self, name, value)


# =============================================================================
# Game State
# =============================================================================


class GameState(BaseModel):
    """Mutable state of one game session.

    Attributes:
        visited_locations: Location markers reached.
        completed_quests: Quest markers reached.
        inventory: Item identifiers, duplicates allowed, in acquisition order.
        relationships: NPC id to unbounded integer score.
        npc_memories: NPC id to the interactions that NPC remembers this session.
        world_state: Time, weather and danger.
        flags: Arbitrary named scalars, last write wins.

    Example:
        >>> state = GameState()
        >>> state.relationship_with("innkeeper")
        0
    """

    model_config = ConfigDict(extra="ignore")

    visited_locations: set[str] = Field(default_factory=set, description="Visited locations")
    completed_quests: set[str] = Field(default_factory=set, description="Completed quests")
    inventory: list[str] = Field(default_factory=list, description="Carried items")
    relationships: dict[str, int] = Field(
        default_factory=dict,
        description="NPC relationship scores",
    )
    npc_memories: dict[str, list[dict[str, Any]]] = Field(
        default_factory=dict,
        description="Per-NPC interaction memories",
    )
    world_state: WorldState = Field(default_factory=WorldState, description="World context")
    flags: dict[str, Scalar] = Field(default_factory=dict, description="Named flags")

    @field_serializer("visited_locations", "completed_quests")
    def _serialize_marker_set(self, value: set[str]) -> list[str]:
        return sorted(value)

    def relationship_with(self, npc_id: str) -> int:
        """Current relationship score with an NPC (0 if never met)."""
        return self.relationships.get(npc_id, 0)

    def memories_of(self, npc_id: str) -> list[dict[str, Any]]:
        """Interactions an NPC remembers, oldest first (a copy)."""
        return [dict(memory) for memory in self.npc_memories.get(npc_id, [])]

    def has_item(self, item: str) -> bool:
        """Check inventory membership."""
        return item in self.inventory

    def get_flag(self, flag: str, default: Scalar = None) -> Scalar:
        """Look up a flag value."""
        return self.flags.get(flag, default)


__all__ = [
    "WorldState",
    "GameState",
]
