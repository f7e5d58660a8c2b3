"""Authored content templates.

Templates are immutable, externally supplied records that the selection
engine filters, weights and instantiates into scenes. Authored catalogs
are usually written in camelCase (``requiredTags``, ``choiceTags``,
``timeOfDay``); both spellings are accepted and unknown keys are ignored.

Models:
    TemplateRequirements: Hard applicability gates.
    LocationSpec: Location declared by a story template.
    ChoiceTemplate: Uninterpolated choice.
    StoryTemplate: Story scene template.
    EventTemplate: Random event template.
    LocationTemplate: Entry of the location catalog.
    TemplateCatalog: The four read-only collections.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from legends_engine.core.constants import STARTING_TEMPLATE_TYPE
from legends_engine.core.exceptions import TemplateError
from legends_engine.models.effects import EffectDescriptor, Scalar
from legends_engine.models.scene import NPC, Location

if TYPE_CHECKING:
    from legends_engine.models.game_state import GameState
    from legends_engine.models.player import Player


_TEMPLATE_CONFIG = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


# =============================================================================
# Building Blocks
# =============================================================================


class TemplateRequirements(BaseModel):
    """Hard gates a template must pass to be selectable.

    Attributes:
        stats: Minimum stat values (unknown stats count as 0).
        flags: Flags that must equal the given value.
        inventory: Items that must be carried.
        quests: Quests that must be completed.
    """

    model_config = _TEMPLATE_CONFIG

    stats: dict[str, int] = Field(default_factory=dict)
    flags: dict[str, Scalar] = Field(default_factory=dict)
    inventory: list[str] = Field(default_factory=list)
    quests: list[str] = Field(default_factory=list)

    def is_met(self, player: Player, game_state: GameState) -> bool:
        """Check every gate against the player and game state."""
        return self.stats_met(player) and self.flags_met(game_state) and all(
            game_state.has_item(item) for item in self.inventory
        ) and all(quest in game_state.completed_quests for quest in self.quests)

    def stats_met(self, player: Player) -> bool:
        """Check the stat minimums only."""
        return all(player.get_stat(stat) >= minimum for stat, minimum in self.stats.items())

    def flags_met(self, game_state: GameState) -> bool:
        """Check the flag equalities only.

        A missing flag never equals a required value, including None.
        """
        return all(
            flag in game_state.flags and game_state.flags[flag] == value
            for flag, value in self.flags.items()
        )


class LocationSpec(BaseModel):
    """Location declared by a story template.

    Attributes:
        name: Location name; empty means "generate one".
        type: Location type.
        description: Location description.
        continuity: Only selectable while the player is at this location,
            and instantiated by continuing the current location.
    """

    model_config = _TEMPLATE_CONFIG

    name: str | None = None
    type: str = "neutral"
    description: str = ""
    continuity: bool = False

    def to_location(self) -> Location:
        """Build the concrete location declared by the template."""
        return Location(name=self.name or "Unknown", type=self.type, description=self.description)


class ChoiceTemplate(BaseModel):
    """A choice before interpolation."""

    model_config = _TEMPLATE_CONFIG

    text: str = Field(min_length=1)
    next_scene_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("next_scene_id", "nextSceneId"),
    )
    effects: EffectDescriptor | None = None
    tags: list[str] = Field(default_factory=list)


# =============================================================================
# Templates
# =============================================================================


class StoryTemplate(BaseModel):
    """Template for a story scene.

    Attributes:
        id: Unique template identifier, the target of ``next_scene_id``.
        type: Type tag; ``starting`` templates are entry-only.
        title: Title, may contain references.
        description: Description, may contain references.
        location: Declared location, if any.
        narrative: Single paragraph or ordered paragraphs.
        choices: Choice definitions; None means "synthesize defaults".
        tags: Tags copied onto the scene.
        required_tags: Tags the current scene must all carry.
        choice_tags: Choice-tag affinities.
        archetypes: Archetypes a starting template is offered to.
        weight: Base relevance weight.
        characters: NPC ids or inline NPC records.
        music: Music hint.
        ambient_sounds: Ambient sound hint.
        requirements: Hard gates.
        location_types: Location types the current scene must have.
        time_of_day: Required world time.
    """

    model_config = _TEMPLATE_CONFIG

    id: str = Field(min_length=1, description="Template identifier")
    type: str = Field(default="story", description="Template type tag")
    title: str = Field(default="Untitled Scene")
    description: str = ""
    location: LocationSpec | None = None
    narrative: str | list[str] | None = None
    choices: list[ChoiceTemplate] | None = None
    tags: list[str] = Field(default_factory=list)
    required_tags: list[str] | None = Field(
        default=None,
        validation_alias=AliasChoices("required_tags", "requiredTags"),
    )
    choice_tags: list[str] | None = Field(
        default=None,
        validation_alias=AliasChoices("choice_tags", "choiceTags"),
    )
    archetypes: list[str] | None = None
    weight: float = Field(default=1.0, ge=0, description="Base relevance weight")
    characters: list[str | NPC] = Field(default_factory=list)
    music: str | None = None
    ambient_sounds: str | list[str] | None = Field(
        default=None,
        validation_alias=AliasChoices("ambient_sounds", "ambientSounds"),
    )
    requirements: TemplateRequirements | None = None
    location_types: list[str] | None = Field(
        default=None,
        validation_alias=AliasChoices("location_types", "locationTypes"),
    )
    time_of_day: str | None = Field(
        default=None,
        validation_alias=AliasChoices("time_of_day", "timeOfDay"),
    )

    @property
    def is_starting(self) -> bool:
        """Whether the template is reserved for the entry scene."""
        return self.type == STARTING_TEMPLATE_TYPE

    def offered_to(self, archetype: str) -> bool:
        """Whether a starting template is offered to an archetype."""
        return self.archetypes is None or archetype in self.archetypes


class EventTemplate(BaseModel):
    """Template for a random event scene.

    Events always take place at the current location.
    """

    model_config = _TEMPLATE_CONFIG

    id: str = Field(default_factory=lambda: f"event_{uuid4().hex[:12]}")
    title: str = Field(min_length=1)
    description: str = ""
    narrative: str | list[str] | None = None
    location_types: list[str] | None = Field(
        default=None,
        validation_alias=AliasChoices("location_types", "locationTypes"),
    )
    time_of_day: str | None = Field(
        default=None,
        validation_alias=AliasChoices("time_of_day", "timeOfDay"),
    )
    requirements: TemplateRequirements | None = None
    choices: list[ChoiceTemplate] | None = None
    tags: list[str] = Field(default_factory=list)
    weight: float = Field(default=1.0, ge=0)


class LocationTemplate(BaseModel):
    """Entry of the location catalog used for random locations."""

    model_config = _TEMPLATE_CONFIG

    name: str = Field(min_length=1)
    type: str = "neutral"
    description: str = ""

    def to_location(self) -> Location:
        """Build a concrete location from this entry."""
        return Location(name=self.name, type=self.type, description=self.description)


# =============================================================================
# Catalog
# =============================================================================


class TemplateCatalog(BaseModel):
    """Read-only collections of authored content.

    The catalog is always constructed by the caller and handed to the
    engines; the engines never build one themselves.

    Attributes:
        stories: Story templates, ids unique.
        locations: Location catalog for random locations.
        events: Random event templates.
        npcs: NPC templates, ids unique.
        dialogue_patterns: Generic NPC lines per disposition.

    Raises:
        TemplateError: If two stories or two NPCs share an id.
    """

    model_config = _TEMPLATE_CONFIG

    stories: tuple[StoryTemplate, ...] = Field(
        default=(),
        validation_alias=AliasChoices("stories", "storyTemplates"),
    )
    locations: tuple[LocationTemplate, ...] = Field(
        default=(),
        validation_alias=AliasChoices("locations", "locationTemplates"),
    )
    events: tuple[EventTemplate, ...] = Field(
        default=(),
        validation_alias=AliasChoices("events", "eventTemplates"),
    )
    npcs: tuple[NPC, ...] = Field(
        default=(),
        validation_alias=AliasChoices("npcs", "npcTemplates"),
    )
    dialogue_patterns: dict[str, list[str]] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("dialogue_patterns", "dialoguePatterns"),
    )

    @model_validator(mode="after")
    def unique_ids(self) -> "TemplateCatalog":
        """Reject duplicate story and NPC ids."""
        for kind, ids in (
            ("story", [story.id for story in self.stories]),
            ("npc", [npc.id for npc in self.npcs]),
        ):
            seen: set[str] = set()
            for template_id in ids:
                if template_id in seen:
                    raise TemplateError(
                        f"Duplicate {kind} template id",
                        template_id=template_id,
                    )
                seen.add(template_id)
        return self

    def story_by_id(self, template_id: str) -> StoryTemplate | None:
        """Find a story template by id."""
        return next((story for story in self.stories if story.id == template_id), None)

    def npc_by_id(self, npc_id: str) -> NPC | None:
        """Find an NPC template by id."""
        return next((npc for npc in self.npcs if npc.id == npc_id), None)

    def starting_stories(self, archetype: str) -> list[StoryTemplate]:
        """Entry templates offered to an archetype."""
        return [
            story
            for story in self.stories
            if story.is_starting and story.offered_to(archetype)
        ]

    @classmethod
    def from_data(cls, data: dict[str, Any]) -> "TemplateCatalog":
        """Build a catalog from authored data (e.g. parsed JSON)."""
        return cls.model_validate(data)


__all__ = [
    "TemplateRequirements",
    "LocationSpec",
    "ChoiceTemplate",
    "StoryTemplate",
    "EventTemplate",
    "LocationTemplate",
    "TemplateCatalog",
]
