"""Scene, choice, location and NPC models.

A Scene is one instantiated unit of narrative plus the choices offered to
the player. Scenes are immutable once produced; every transition builds a
new one.

Models:
    Location: Name/type/description triple.
    Choice: One option offered to the player.
    NPCStats: Stat block of a non-player character.
    NPC: Non-player character, also used as a combat enemy.
    Scene: Narrative, location, choices and characters.
"""

from __future__ import annotations

import time
from typing import Any
from uuid import uuid4

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from legends_engine.core.constants import MAX_NPC_MEMORIES
from legends_engine.models.effects import EffectDescriptor
from legends_engine.models.enums import Disposition


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid4().hex[:12]}"


# =============================================================================
# Location & Choice
# =============================================================================


class Location(BaseModel):
    """Where a scene takes place.

    Attributes:
        name: Display name.
        type: Open location type (safe, neutral, dangerous, town, ...).
        description: Flavour text.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(default="Unknown", description="Location name")
    type: str = Field(default="neutral", description="Location type")
    description: str = Field(default="", description="Location description")


class Choice(BaseModel):
    """One option offered to the player.

    Attributes:
        text: Display text, already interpolated.
        next_scene_id: Story template to jump to directly, if any.
        effects: Changes applied when the choice is made.
        tags: Tags that steer selection of the next scene.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    text: str = Field(min_length=1, description="Choice text")
    next_scene_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("next_scene_id", "nextSceneId"),
        description="Direct target template id",
    )
    effects: EffectDescriptor | None = Field(default=None, description="Effects of the choice")
    tags: list[str] = Field(default_factory=list, description="Choice tags")

    def has_tag(self, tag: str) -> bool:
        """Check whether the choice carries a tag."""
        return tag in self.tags


# =============================================================================
# NPC
# =============================================================================


def _default_dialogue() -> dict[str, list[str]]:
    return {
        "greeting": ["Hello there."],
        "friendly": ["How can I help you?"],
        "neutral": ["What do you want?"],
        "hostile": ["Stay back!"],
        "farewell": ["Goodbye."],
    }


class NPCStats(BaseModel):
    """Stat block of an NPC or enemy."""

    model_config = ConfigDict(extra="allow")

    health: int = Field(default=50, ge=0, description="Starting health")
    strength: int = 5
    defense: int = 3
    intelligence: int = 5
    resistance: int = 3
    charisma: int = 5


class NPC(BaseModel):
    """A non-player character.

    The same model describes friendly townsfolk and combat enemies. NPCs
    never hold a reference to the player; relationships live in the game
    state keyed by ``id``.

    Attributes:
        id: Identifier used for relationship scores.
        name: Display name.
        description: Flavour text.
        type: Disposition toward the player.
        stats: Stat block used in combat.
        dialogue: Lines per category (greeting, friendly, neutral, hostile, farewell).
        quest_giver: Offers tasks.
        quest: Quest identifier offered, if any.
        merchant: Trades goods.
        inventory: Items carried.
        memories: Recent interactions, oldest first.
        rewards: Effects granted when defeated.
        experience: Experience granted when defeated.
        abilities: Named abilities.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(default_factory=lambda: _new_id("npc"), description="NPC identifier")
    name: str = Field(default="Stranger", description="Display name")
    description: str = Field(default="A mysterious individual.", description="Description")
    type: Disposition = Field(default=Disposition.NEUTRAL, description="Disposition")
    stats: NPCStats = Field(default_factory=NPCStats, description="Stat block")
    dialogue: dict[str, list[str]] = Field(
        default_factory=_default_dialogue,
        description="Dialogue lines per category",
    )
    quest_giver: bool = Field(
        default=False,
        validation_alias=AliasChoices("quest_giver", "questGiver"),
    )
    quest: str | None = None
    merchant: bool = False
    inventory: list[str] = Field(default_factory=list)
    memories: list[dict[str, Any]] = Field(default_factory=list)
    rewards: EffectDescriptor | None = Field(default=None, description="Defeat rewards")
    experience: int = Field(default=0, ge=0, description="Experience granted on defeat")
    abilities: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def lift_reward_experience(cls, data: Any) -> Any:
        """Read ``rewards.experience`` from authored data into ``experience``."""
        if not isinstance(data, dict):
            return data
        rewards = data.get("rewards")
        if isinstance(rewards, dict) and "experience" in rewards and "experience" not in data:
            data = dict(data)
            data["experience"] = rewards["experience"]
        return data

    @field_validator("memories")
    @classmethod
    def bound_memories(cls, value: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Keep only the most recent memories."""
        return value[-MAX_NPC_MEMORIES:]

    @property
    def is_hostile(self) -> bool:
        """Whether the NPC fights the player."""
        return self.type == Disposition.HOSTILE

    def add_memory(self, interaction: dict[str, Any]) -> None:
        """Remember an interaction, forgetting the oldest beyond the cap.

        Args:
            interaction: Mapping describing the interaction, keyed by ``type``.
        """
        memory = {**interaction, "timestamp": int(time.time() * 1000)}
        self.memories = [*self.memories, memory][-MAX_NPC_MEMORIES:]


# =============================================================================
# Scene
# =============================================================================


class Scene(BaseModel):
    """One instantiated unit of narrative plus choices.

    Attributes:
        id: Unique scene identifier.
        title: Display title.
        description: Short description.
        location: Where the scene happens.
        narrative: Ordered paragraphs.
        choices: Ordered options, never empty.
        characters: NPCs present.
        tags: Scene tags read by later selection passes.
        music: Optional music hint.
        ambient_sounds: Optional ambient sound hint.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str = Field(default_factory=lambda: _new_id("scene"), description="Scene identifier")
    title: str = Field(default="Untitled Scene", description="Scene title")
    description: str = Field(default="", description="Scene description")
    location: Location = Field(default_factory=Location, description="Scene location")
    narrative: list[str] = Field(default_factory=list, description="Narrative paragraphs")
    choices: list[Choice] = Field(description="Available choices")
    characters: list[NPC] = Field(default_factory=list, description="Characters present")
    tags: list[str] = Field(default_factory=list, description="Scene tags")
    music: str | None = Field(default=None, description="Music hint")
    ambient_sounds: str | list[str] | None = Field(
        default=None,
        validation_alias=AliasChoices("ambient_sounds", "ambientSounds"),
        description="Ambient sound hint",
    )

    @field_validator("choices")
    @classmethod
    def require_choice(cls, value: list[Choice]) -> list[Choice]:
        """A scene always offers at least one choice."""
        if not value:
            raise ValueError("a scene must offer at least one choice")
        return value

    def has_tag(self, tag: str) -> bool:
        """Check whether the scene carries a tag."""
        return tag in self.tags

    def first_hostile(self) -> NPC | None:
        """Return the first hostile character present, if any."""
        return next((npc for npc in self.characters if npc.is_hostile), None)


__all__ = [
    "Location",
    "Choice",
    "NPCStats",
    "NPC",
    "Scene",
]
