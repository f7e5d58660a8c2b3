"""Effect application engine.

Applies a declarative effect descriptor to the player and game state.
Every entry is applied exactly once, in order, before control returns.
An entry that cannot be applied (unknown stat, invalid world value) is
skipped and logged; it never fails the rest of the descriptor.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import ValidationError as PydanticValidationError

from legends_engine.core.logging import get_logger
from legends_engine.models.effects import (
    Effect,
    EffectDescriptor,
    FlagSet,
    InventoryChange,
    LocationVisited,
    QuestCompleted,
    RelationshipDelta,
    StatDelta,
    WorldStateOverride,
)
from legends_engine.models.game_state import GameState
from legends_engine.models.player import Player


logger = get_logger(__name__)


PLAYER_CATEGORY = "player"
GAME_STATE_CATEGORY = "game_state"


@dataclass
class EffectOutcome:
    """What an application pass changed.

    Attributes:
        applied: Entries that took effect.
        skipped: Entries that were ignored.
        categories: Top-level categories that changed (``player``,
            ``game_state``), in the order they first fired.
    """

    applied: list[Effect] = field(default_factory=list)
    skipped: list[Effect] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)

    @property
    def player_changed(self) -> bool:
        """Whether any player stat changed."""
        return PLAYER_CATEGORY in self.categories

    @property
    def game_state_changed(self) -> bool:
        """Whether any game state field changed."""
        return GAME_STATE_CATEGORY in self.categories

    def record(self, effect: Effect, category: str) -> None:
        """Note an applied entry and the category it changed."""
        self.applied.append(effect)
        if category not in self.categories:
            self.categories.append(category)


class EffectApplicator:
    """Applies effect descriptors to a player and game state.

    Example:
        >>> applicator = EffectApplicator()
        >>> outcome = applicator.apply(player, state, EffectDescriptor.model_validate(
        ...     {"stats": {"health": -5}}
        ... ))
        >>> outcome.player_changed
        True
    """

    def apply(
        self,
        player: Player,
        game_state: GameState,
        descriptor: EffectDescriptor | None,
    ) -> EffectOutcome:
        """Apply every entry of a descriptor once.

        Args:
            player: Player to mutate through ``modify_stat``.
            game_state: Game state to mutate.
            descriptor: Effects to apply; None applies nothing.

        Returns:
            EffectOutcome describing what changed.
        """
        outcome = EffectOutcome()
        if descriptor is None:
            return outcome

        for effect in descriptor.effects:
            if isinstance(effect, StatDelta):
                self._apply_stat(player, effect, outcome)
            elif isinstance(effect, InventoryChange):
                self._apply_inventory(game_state, effect)
                outcome.record(effect, GAME_STATE_CATEGORY)
            elif isinstance(effect, RelationshipDelta):
                game_state.relationships[effect.npc_id] = (
                    game_state.relationships.get(effect.npc_id, 0) + effect.delta
                )
                outcome.record(effect, GAME_STATE_CATEGORY)
            elif isinstance(effect, WorldStateOverride):
                self._apply_world_state(game_state, effect, outcome)
            elif isinstance(effect, FlagSet):
                game_state.flags[effect.flag] = effect.value
                outcome.record(effect, GAME_STATE_CATEGORY)
            elif isinstance(effect, LocationVisited):
                game_state.visited_locations.add(effect.location)
                outcome.record(effect, GAME_STATE_CATEGORY)
            elif isinstance(effect, QuestCompleted):
                game_state.completed_quests.add(effect.quest)
                outcome.record(effect, GAME_STATE_CATEGORY)

        logger.debug(
            "Effects applied",
            applied=len(outcome.applied),
            skipped=len(outcome.skipped),
            categories=outcome.categories,
        )
        return outcome

    @staticmethod
    def _apply_stat(player: Player, effect: StatDelta, outcome: EffectOutcome) -> None:
        if player.modify_stat(effect.stat, effect.delta):
            outcome.record(effect, PLAYER_CATEGORY)
        else:
            logger.warning("Skipped effect on unknown stat", stat=effect.stat, delta=effect.delta)
            outcome.skipped.append(effect)

    @staticmethod
    def _apply_inventory(game_state: GameState, effect: InventoryChange) -> None:
        game_state.inventory.extend(effect.add)
        for item in effect.remove:
            if item in game_state.inventory:
                game_state.inventory.remove(item)

    @staticmethod
    def _apply_world_state(
        game_state: GameState,
        effect: WorldStateOverride,
        outcome: EffectOutcome,
    ) -> None:
        world = game_state.world_state
        rejected: list[str] = []
        for name, value in effect.overrides.items():
            try:
                world.set_field(name, value)
            except PydanticValidationError:
                rejected.append(name)

        if rejected:
            logger.warning("Skipped invalid world state overrides", fields=rejected)
        if len(rejected) == len(effect.overrides):
            outcome.skipped.append(effect)
        else:
            outcome.record(effect, GAME_STATE_CATEGORY)


__all__ = [
    "PLAYER_CATEGORY",
    "GAME_STATE_CATEGORY",
    "EffectOutcome",
    "EffectApplicator",
]
