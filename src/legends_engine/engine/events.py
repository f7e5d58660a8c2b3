"""Random-event gate.

Once per player choice, after the choice's effects are applied and before
the normal continuation is generated, the gate decides whether an event
scene interrupts the story. It is never consulted during combat.
"""

from __future__ import annotations

from legends_engine.core.config import EventGateSettings
from legends_engine.core.logging import get_logger
from legends_engine.engine.randomness import RandomnessProvider
from legends_engine.engine.selection import SceneGenerator
from legends_engine.models.game_state import GameState
from legends_engine.models.player import Player
from legends_engine.models.scene import Scene


logger = get_logger(__name__)


class RandomEventGate:
    """Probabilistic interrupt that substitutes an event for the next scene.

    Args:
        settings: Probability terms and clamp bounds.
        rng: The session's randomness stream.
        generator: Selection engine used to build event scenes.
    """

    def __init__(
        self,
        settings: EventGateSettings,
        rng: RandomnessProvider,
        generator: SceneGenerator,
    ) -> None:
        self.settings = settings
        self.rng = rng
        self.generator = generator

    def probability(self, game_state: GameState, scene: Scene) -> float:
        """Interrupt probability for the current context.

        Args:
            game_state: Session state (danger level).
            scene: Current scene (location type).

        Returns:
            Base chance adjusted for danger and location type, clamped to
            the configured bounds.
        """
        settings = self.settings
        chance = settings.base_chance
        if game_state.world_state.danger == "high":
            chance += settings.high_danger_bonus
        if scene.location.type == "dangerous":
            chance += settings.dangerous_location_bonus
        if scene.location.type == "safe":
            chance -= settings.safe_location_penalty
        return min(max(chance, settings.min_chance), settings.max_chance)

    def roll(self, player: Player, game_state: GameState, scene: Scene) -> Scene | None:
        """Draw once and build an event scene if the draw falls below the chance.

        Args:
            player: The player character.
            game_state: Session state, effects already applied.
            scene: Scene the choice was made in.

        Returns:
            An event Scene, or None when no event fires.
        """
        chance = self.probability(game_state, scene)
        draw = self.rng.next()
        if draw >= chance:
            return None

        logger.info("Random event triggered", chance=round(chance, 3), location=scene.location.name)
        return self.generator.generate_event_scene(player, game_state, scene)


__all__ = [
    "RandomEventGate",
]
