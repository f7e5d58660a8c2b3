"""Declarative effect descriptors.

An effect descriptor is an ordered list of tagged effect entries, each
describing one change to the player or the game state. Authored content
usually writes effects as a property bag::

    {"stats": {"health": -5}, "inventory": {"add": ["rope"]}, "flags": {"met_galen": True}}

``EffectDescriptor`` accepts both the tagged form and the bag form; bag keys
it does not recognize are dropped.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


Scalar = Union[bool, int, float, str, None]


class StatDelta(BaseModel):
    """Signed change to one player stat."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["stat_delta"] = "stat_delta"
    stat: str = Field(min_length=1, description="Stat name")
    delta: int = Field(description="Signed amount")


class InventoryChange(BaseModel):
    """Items to append to and remove from the inventory."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["inventory_change"] = "inventory_change"
    add: list[str] = Field(default_factory=list, description="Items appended")
    remove: list[str] = Field(default_factory=list, description="Items removed once each")


class RelationshipDelta(BaseModel):
    """Signed change to the relationship score with one NPC."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["relationship_delta"] = "relationship_delta"
    npc_id: str = Field(min_length=1, description="NPC identifier")
    delta: int = Field(description="Signed amount")


class WorldStateOverride(BaseModel):
    """Overwrites named world-state fields."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["world_state_override"] = "world_state_override"
    overrides: dict[str, Scalar] = Field(default_factory=dict, description="Field overrides")


class FlagSet(BaseModel):
    """Assigns one flag."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["flag_set"] = "flag_set"
    flag: str = Field(min_length=1, description="Flag name")
    value: Scalar = Field(default=True, description="Flag value")


class LocationVisited(BaseModel):
    """Marks a location as visited."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["location_visited"] = "location_visited"
    location: str = Field(min_length=1, description="Location name")


class QuestCompleted(BaseModel):
    """Marks a quest as completed."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["quest_completed"] = "quest_completed"
    quest: str = Field(min_length=1, description="Quest identifier")


Effect = Annotated[
    Union[
        StatDelta,
        InventoryChange,
        RelationshipDelta,
        WorldStateOverride,
        FlagSet,
        LocationVisited,
        QuestCompleted,
    ],
    Field(discriminator="kind"),
]


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)


def _string_list(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item is not None]
    return []


def effects_from_bag(bag: dict[str, Any]) -> list[dict[str, Any]]:
    """Convert an authored property-bag effect into tagged entries.

    Args:
        bag: Mapping with any of ``stats``, ``inventory``, ``relationships``,
            ``worldState``, ``flags``, ``location`` and ``quest``.

    Returns:
        List of tagged effect dictionaries, in application order.
    """
    entries: list[dict[str, Any]] = []

    stats = bag.get("stats")
    if isinstance(stats, dict):
        for stat, raw in stats.items():
            delta = _as_int(raw)
            if delta is not None:
                entries.append({"kind": "stat_delta", "stat": str(stat), "delta": delta})

    inventory = bag.get("inventory")
    if isinstance(inventory, dict):
        add = _string_list(inventory.get("add"))
        remove = _string_list(inventory.get("remove"))
        if add or remove:
            entries.append({"kind": "inventory_change", "add": add, "remove": remove})

    relationships = bag.get("relationships")
    if isinstance(relationships, dict):
        for npc_id, raw in relationships.items():
            delta = _as_int(raw)
            if delta is not None:
                entries.append(
                    {"kind": "relationship_delta", "npc_id": str(npc_id), "delta": delta}
                )

    world_state = bag.get("worldState", bag.get("world_state"))
    if isinstance(world_state, dict) and world_state:
        entries.append({"kind": "world_state_override", "overrides": dict(world_state)})

    flags = bag.get("flags")
    if isinstance(flags, dict):
        for flag, value in flags.items():
            entries.append({"kind": "flag_set", "flag": str(flag), "value": value})

    location = bag.get("location")
    if isinstance(location, str) and location:
        entries.append({"kind": "location_visited", "location": location})

    quest = bag.get("quest")
    if isinstance(quest, str) and quest:
        entries.append({"kind": "quest_completed", "quest": quest})

    return entries


class EffectDescriptor(BaseModel):
    """Ordered set of effects applied together.

    Attributes:
        effects: Tagged effect entries in application order.

    Example:
        >>> EffectDescriptor.model_validate({"stats": {"health": -5}}).effects
        [StatDelta(kind='stat_delta', stat='health', delta=-5)]
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    effects: list[Effect] = Field(default_factory=list, description="Effect entries")

    @model_validator(mode="before")
    @classmethod
    def accept_property_bag(cls, data: Any) -> Any:
        """Accept a bare list of entries or the authored bag form."""
        if isinstance(data, list):
            return {"effects": data}
        if isinstance(data, dict) and "effects" not in data:
            return {"effects": effects_from_bag(data)}
        return data

    @property
    def is_empty(self) -> bool:
        """Whether the descriptor carries no effects."""
        return not self.effects

    @property
    def items_added(self) -> list[str]:
        """All items the descriptor appends to the inventory."""
        added: list[str] = []
        for effect in self.effects:
            if isinstance(effect, InventoryChange):
                added.extend(effect.add)
        return added

    def with_effects(self, *extra: Effect) -> "EffectDescriptor":
        """Return a new descriptor with extra entries appended.

        Args:
            *extra: Effect entries to append.

        Returns:
            New EffectDescriptor.
        """
        return EffectDescriptor(effects=[*self.effects, *extra])


__all__ = [
    "Scalar",
    "StatDelta",
    "InventoryChange",
    "RelationshipDelta",
    "WorldStateOverride",
    "FlagSet",
    "LocationVisited",
    "QuestCompleted",
    "Effect",
    "EffectDescriptor",
    "effects_from_bag",
]
