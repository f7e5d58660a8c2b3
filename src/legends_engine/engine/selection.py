"""Template selection engine.

Turns the template catalog plus runtime context into exactly one Scene:

1. Filter story templates by applicability (entry-only exclusion, hard
   requirement gates, required scene tags, choice-tag affinity, location
   continuity, location types and time of day).
2. A choice naming a target template bypasses filtering.
3. When nothing qualifies, retry keeping only the hard gates, then fall
   back to synthesized generic content.
4. Weight the survivors by base weight, location match and choice-tag
   overlap.
5. Draw one by cumulative-weight sampling.
6. Instantiate it: location, interpolated text, choices and characters.

Event scenes go through the same instantiation, restricted to event
templates.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

from legends_engine.core.logging import get_logger
from legends_engine.engine import fallback
from legends_engine.engine.interpolation import InterpolationContext, interpolate, interpolate_all
from legends_engine.engine.randomness import RandomnessProvider, choose
from legends_engine.models.game_state import GameState
from legends_engine.models.player import Player
from legends_engine.models.scene import NPC, Choice, Location, Scene
from legends_engine.models.templates import (
    ChoiceTemplate,
    EventTemplate,
    StoryTemplate,
    TemplateCatalog,
)


logger = get_logger(__name__)

T = TypeVar("T")

LOCATION_MATCH_MULTIPLIER = 2.0
CHOICE_TAG_BONUS = 0.5


# =============================================================================
# Weighted Sampling
# =============================================================================


def select_weighted(weighted: Sequence[tuple[T, float]], rng: RandomnessProvider) -> T:
    """Pick one item by cumulative-weight sampling.

    Draws ``r`` uniformly in ``[0, total)``, then walks the items
    subtracting each weight and returns the first item at which the
    remainder drops to zero or below. Zero-weight items are never
    returned unless every weight is zero, in which case the first item
    is.

    Args:
        weighted: Non-empty sequence of ``(item, weight)`` pairs.
        rng: Randomness source; exactly one value is drawn.

    Returns:
        The selected item.

    Example:
        >>> select_weighted([("a", 2.0), ("b", 1.0)], SequenceRandomness([0.7]))
        'b'
    """
    total = sum(weight for _, weight in weighted)
    remainder = rng.next() * total
    if total <= 0:
        return weighted[0][0]

    last_positive = weighted[0][0]
    for item, weight in weighted:
        if weight <= 0:
            continue
        last_positive = item
        remainder -= weight
        if remainder <= 0:
            return item
    # Floating-point drift can leave a sliver past the last item
    return last_positive


# =============================================================================
# Scene Generator
# =============================================================================


class SceneGenerator:
    """Selects and instantiates templates into scenes.

    Args:
        catalog: Authored content, always supplied by the caller.
        rng: The session's randomness stream.

    Example:
        >>> generator = SceneGenerator(catalog, SeededRandomness(7))
        >>> scene = generator.generate_starting_scene(player, GameState())
    """

    def __init__(self, catalog: TemplateCatalog, rng: RandomnessProvider) -> None:
        self.catalog = catalog
        self.rng = rng

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    def generate_starting_scene(self, player: Player, game_state: GameState | None = None) -> Scene:
        """Produce the first scene of a session.

        Args:
            player: The new player character.
            game_state: Fresh session state.

        Returns:
            A scene from a starting template offered to the player's
            archetype, or the generic starting scene.
        """
        templates = self.catalog.starting_stories(player.archetype)
        if not templates:
            return fallback.generic_starting_scene(player, self.rng)

        template = choose(self.rng, templates)
        logger.info(
            "Starting template selected",
            template_id=template.id,
            archetype=player.archetype,
        )
        return self.instantiate(template, player, game_state or GameState())

    def generate_next_scene(
        self,
        player: Player,
        game_state: GameState,
        current_scene: Scene,
        choice: Choice | None = None,
    ) -> Scene:
        """Produce the scene that follows a choice.

        Args:
            player: The player character.
            game_state: Session state, effects already applied.
            current_scene: Scene the choice was made in.
            choice: The triggering choice.

        Returns:
            Exactly one new Scene.
        """
        if choice is not None and choice.next_scene_id:
            target = self.catalog.story_by_id(choice.next_scene_id)
            if target is not None:
                logger.info("Direct template target", template_id=target.id)
                return self.instantiate(target, player, game_state, current_scene)
            logger.warning("Choice target template not found", template_id=choice.next_scene_id)

        candidates = [
            template
            for template in self.catalog.stories
            if self.is_applicable(template, player, game_state, current_scene, choice)
        ]

        if not candidates:
            candidates = [
                template
                for template in self.catalog.stories
                if self.passes_hard_gates(template, player, game_state)
            ]
            if candidates:
                logger.debug("Relaxed template filter used", candidates=len(candidates))

        if not candidates:
            return fallback.generic_continuation_scene(
                player, current_scene, choice, self.catalog, self.rng
            )

        weighted = [
            (template, self.weight_of(template, current_scene, choice)) for template in candidates
        ]
        template = select_weighted(weighted, self.rng)
        logger.info(
            "Story template selected",
            template_id=template.id,
            candidates=len(candidates),
        )
        return self.instantiate(template, player, game_state, current_scene)

    def generate_event_scene(
        self,
        player: Player,
        game_state: GameState,
        current_scene: Scene,
    ) -> Scene:
        """Produce a random event scene at the current location.

        Args:
            player: The player character.
            game_state: Session state.
            current_scene: Scene being interrupted.

        Returns:
            An event Scene tagged ``event``.
        """
        candidates = [
            event
            for event in self.catalog.events
            if self.event_is_applicable(event, player, game_state, current_scene)
        ]
        if not candidates:
            return fallback.generic_event_scene(current_scene, self.rng)

        event = select_weighted([(event, event.weight) for event in candidates], self.rng)
        logger.info("Event template selected", event_id=event.id, title=event.title)

        location = current_scene.location
        context = InterpolationContext(player=player, game_state=game_state, location=location)
        narrative = interpolate_all(event.narrative, context)
        if not narrative:
            narrative = [fallback.default_narrative(location)]
        return Scene(
            title=interpolate(event.title, context),
            description=interpolate(event.description, context),
            location=location,
            narrative=narrative,
            choices=self._build_choices(event.choices, context, location, player),
            tags=["event", *event.tags],
        )

    # -------------------------------------------------------------------------
    # Filtering & weighting
    # -------------------------------------------------------------------------

    @staticmethod
    def passes_hard_gates(template: StoryTemplate, player: Player, game_state: GameState) -> bool:
        """Check the gates kept by the relaxed filter.

        Entry-only templates never pass once a session is under way.
        """
        if template.is_starting:
            return False
        return template.requirements is None or template.requirements.is_met(player, game_state)

    def is_applicable(
        self,
        template: StoryTemplate,
        player: Player,
        game_state: GameState,
        current_scene: Scene,
        choice: Choice | None,
    ) -> bool:
        """Apply the full applicability predicate to one story template."""
        if not self.passes_hard_gates(template, player, game_state):
            return False

        if template.required_tags and not all(
            current_scene.has_tag(tag) for tag in template.required_tags
        ):
            return False

        if choice is not None and choice.tags and template.choice_tags:
            if not set(choice.tags) & set(template.choice_tags):
                return False

        spec = template.location
        if spec is not None and spec.continuity and spec.name != current_scene.location.name:
            return False

        if template.location_types is not None and (
            current_scene.location.type not in template.location_types
        ):
            return False

        if template.time_of_day is not None and (
            template.time_of_day != game_state.world_state.time
        ):
            return False

        return True

    @staticmethod
    def event_is_applicable(
        event: EventTemplate,
        player: Player,
        game_state: GameState,
        current_scene: Scene,
    ) -> bool:
        """Check an event template against location type, time and requirements."""
        if event.location_types is not None and (
            current_scene.location.type not in event.location_types
        ):
            return False
        if event.time_of_day is not None and event.time_of_day != game_state.world_state.time:
            return False
        requirements = event.requirements
        if requirements is not None:
            return requirements.stats_met(player) and requirements.flags_met(game_state)
        return True

    @staticmethod
    def weight_of(template: StoryTemplate, current_scene: Scene, choice: Choice | None) -> float:
        """Relevance weight of a candidate.

        Args:
            template: Candidate story template.
            current_scene: Scene the choice was made in.
            choice: The triggering choice.

        Returns:
            Base weight, doubled when the declared location matches the
            current one, times ``1 + 0.5 * matching choice tags``.
        """
        weight = template.weight
        if template.location is not None and template.location.name == current_scene.location.name:
            weight *= LOCATION_MATCH_MULTIPLIER
        if choice is not None and choice.tags and template.choice_tags:
            matching = [tag for tag in choice.tags if tag in template.choice_tags]
            weight *= 1 + CHOICE_TAG_BONUS * len(matching)
        return weight

    # -------------------------------------------------------------------------
    # Instantiation
    # -------------------------------------------------------------------------

    def instantiate(
        self,
        template: StoryTemplate,
        player: Player,
        game_state: GameState,
        current_scene: Scene | None = None,
    ) -> Scene:
        """Build a Scene from a story template.

        Args:
            template: The chosen template.
            player: The player character.
            game_state: Session state.
            current_scene: Previous scene, for location continuity.

        Returns:
            A new Scene with all text interpolated and at least one choice.
        """
        location = self._resolve_location(template, current_scene)
        context = InterpolationContext(player=player, game_state=game_state, location=location)

        narrative = interpolate_all(template.narrative, context)
        if not narrative:
            narrative = [fallback.default_narrative(location)]

        return Scene(
            title=interpolate(template.title, context) or template.title,
            description=interpolate(template.description, context),
            location=location,
            narrative=narrative,
            choices=self._build_choices(template.choices, context, location, player),
            characters=self._resolve_characters(template),
            tags=list(template.tags),
            music=template.music,
            ambient_sounds=template.ambient_sounds,
        )

    def _resolve_location(self, template: StoryTemplate, current_scene: Scene | None) -> Location:
        spec = template.location
        if spec is not None and spec.continuity and current_scene is not None:
            return current_scene.location
        if spec is not None and spec.name:
            return spec.to_location()
        return fallback.random_location(self.catalog, self.rng)

    @staticmethod
    def _build_choices(
        templates: list[ChoiceTemplate] | None,
        context: InterpolationContext,
        location: Location,
        player: Player,
    ) -> list[Choice]:
        if not templates:
            return fallback.default_choices(location, player)
        return [
            Choice(
                text=interpolate(item.text, context) or item.text,
                next_scene_id=item.next_scene_id,
                effects=item.effects,
                tags=list(item.tags),
            )
            for item in templates
        ]

    def _resolve_characters(self, template: StoryTemplate) -> list[NPC]:
        characters: list[NPC] = []
        for reference in template.characters:
            if isinstance(reference, NPC):
                characters.append(reference.model_copy(deep=True))
                continue
            npc = self.catalog.npc_by_id(reference)
            if npc is None:
                logger.warning(
                    "Unknown NPC reference dropped",
                    npc_id=reference,
                    template_id=template.id,
                )
                continue
            characters.append(npc.model_copy(deep=True))
        return characters


__all__ = [
    "LOCATION_MATCH_MULTIPLIER",
    "CHOICE_TAG_BONUS",
    "select_weighted",
    "SceneGenerator",
]
