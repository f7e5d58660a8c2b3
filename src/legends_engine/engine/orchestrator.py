"""Scene orchestrator.

``GameEngine`` owns one session: the player, the game state, the current
scene and any combat in progress. It composes the selection engine, the
random-event gate, the effect applicator, the combat state machine and
the dialogue generator, all sharing one randomness stream, and publishes
change notifications on an ``EventBus``.

Per choice the order is fixed: effects are applied and notified, the
choice is announced, the event gate is evaluated, and only then is the
next scene generated and announced.
"""

from __future__ import annotations

from typing import Any

from legends_engine.core.config import Settings, get_settings
from legends_engine.core.constants import COMBAT_START_TAG, QUICKSAVE_SLOT
from legends_engine.core.exceptions import InvalidGameStateError, LegendsEngineError
from legends_engine.core.logging import bind_context, clear_context, get_logger
from legends_engine.engine.combat import CombatEngine
from legends_engine.engine.dialogue import DialogueExchange, DialogueGenerator
from legends_engine.engine.effects import EffectApplicator, EffectOutcome
from legends_engine.engine.events import RandomEventGate
from legends_engine.engine.notifications import EngineEventKind, EventBus
from legends_engine.engine.randomness import RandomnessProvider, SeededRandomness
from legends_engine.engine.selection import SceneGenerator
from legends_engine.models.combat import CombatState
from legends_engine.models.enums import COMBAT_ACTIONS, CombatAction, CombatResult
from legends_engine.models.game_state import GameState
from legends_engine.models.player import Player
from legends_engine.models.scene import NPC, Choice, Scene
from legends_engine.models.snapshot import GameSnapshot
from legends_engine.models.templates import TemplateCatalog
from legends_engine.storage.database import SaveStore


logger = get_logger(__name__)


class GameEngine:
    """Runs one single-player session.

    Args:
        catalog: Authored content.
        rng: Randomness stream; a seeded stream from settings by default.
        settings: Engine settings; the cached settings by default.
        save_store: Persistence collaborator for save and load.
        bus: Notification channel; a private bus by default.

    Example:
        >>> engine = GameEngine(default_catalog(), rng=SeededRandomness(42))
        >>> scene = engine.new_game({"name": "Aria", "archetype": "mage"})
        >>> scene = engine.make_choice(0)
    """

    def __init__(
        self,
        catalog: TemplateCatalog,
        *,
        rng: RandomnessProvider | None = None,
        settings: Settings | None = None,
        save_store: SaveStore | None = None,
        bus: EventBus | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.catalog = catalog
        self.rng = rng or SeededRandomness(self.settings.random_seed)
        self.bus = bus or EventBus()
        self.save_store = save_store

        self.generator = SceneGenerator(catalog, self.rng)
        self.event_gate = RandomEventGate(self.settings.event_gate, self.rng, self.generator)
        self.applicator = EffectApplicator()
        self.combat = CombatEngine(self.settings.combat, self.rng, self.applicator)
        self.dialogue = DialogueGenerator(catalog.dialogue_patterns, self.rng)

        self._player: Player | None = None
        self._game_state = GameState()
        self._current_scene: Scene | None = None
        self._combat_state: CombatState | None = None

        logger.info(
            "GameEngine initialized",
            stories=len(catalog.stories),
            events=len(catalog.events),
        )

    # -------------------------------------------------------------------------
    # State access
    # -------------------------------------------------------------------------

    @property
    def player(self) -> Player | None:
        """The session's player, once a game exists."""
        return self._player

    @property
    def game_state(self) -> GameState:
        """The session's game state."""
        return self._game_state

    @property
    def current_scene(self) -> Scene | None:
        """The scene the player is looking at."""
        return self._current_scene

    @property
    def combat_state(self) -> CombatState | None:
        """The active or just-resolved combat, if any."""
        return self._combat_state

    @property
    def in_combat(self) -> bool:
        """Whether a combat session is open."""
        return self._combat_state is not None

    def _require_game(self) -> tuple[Player, Scene]:
        if self._player is None or self._current_scene is None:
            raise InvalidGameStateError(
                "No game in progress",
                current_state="idle",
                expected_states=["exploring", "combat"],
            )
        return self._player, self._current_scene

    # -------------------------------------------------------------------------
    # Story flow
    # -------------------------------------------------------------------------

    def new_game(self, player_data: Player | dict[str, Any] | None = None) -> Scene:
        """Start a new session.

        Args:
            player_data: A Player or character-creation data.

        Returns:
            The starting scene.
        """
        player = player_data if isinstance(player_data, Player) else Player.from_data(player_data)
        self._player = player
        self._game_state = GameState()
        self._combat_state = None

        clear_context()
        bind_context(player=player.name, archetype=player.archetype)
        logger.info("New game", player=player.name, archetype=player.archetype)
        scene = self.generator.generate_starting_scene(player, self._game_state)
        self._enter_scene(scene)
        return scene

    def make_choice(self, index: int) -> Scene | None:
        """Resolve a choice on the current scene and advance.

        Args:
            index: Zero-based index into the current scene's choices.

        Returns:
            The next scene, or None if the index is out of range (nothing
            is changed in that case).

        Raises:
            InvalidGameStateError: If no game exists or combat is open.
        """
        player, scene = self._require_game()
        if self.in_combat:
            raise InvalidGameStateError(
                "Story choices are unavailable during combat",
                current_state="combat",
                expected_states=["exploring"],
            )
        if not 0 <= index < len(scene.choices):
            logger.warning("Choice index out of range", index=index, choices=len(scene.choices))
            return None

        choice = scene.choices[index]
        if choice.effects is not None:
            self._notify(self.applicator.apply(player, self._game_state, choice.effects))
        self.bus.emit(EngineEventKind.CHOICE_MADE, choice, index=index)

        next_scene = self.event_gate.roll(player, self._game_state, scene)
        if next_scene is None:
            next_scene = self.generator.generate_next_scene(player, self._game_state, scene, choice)

        self._enter_scene(next_scene)
        return next_scene

    def _enter_scene(self, scene: Scene) -> None:
        self._current_scene = scene
        logger.info(
            "Scene changed",
            scene_id=scene.id,
            title=scene.title,
            location=scene.location.name,
        )
        self.bus.emit(EngineEventKind.SCENE_CHANGED, scene)

        if scene.has_tag(COMBAT_START_TAG):
            enemy = scene.first_hostile()
            if enemy is not None:
                self.start_combat(enemy)

    def _notify(self, outcome: EffectOutcome) -> None:
        if outcome.player_changed:
            self.bus.emit(EngineEventKind.PLAYER_UPDATED, self._player)
        if outcome.game_state_changed:
            self.bus.emit(EngineEventKind.GAME_STATE_UPDATED, self._game_state)

    # -------------------------------------------------------------------------
    # Combat
    # -------------------------------------------------------------------------

    def start_combat(self, enemy: NPC) -> CombatState:
        """Open a combat session against an enemy.

        Args:
            enemy: The enemy to fight.

        Returns:
            The in-progress combat state.
        """
        player, _ = self._require_game()
        self._combat_state = self.combat.start(player, enemy)
        self.bus.emit(EngineEventKind.COMBAT_UPDATED, self._combat_state)
        return self._combat_state

    def combat_action(self, action: int | str | CombatAction) -> CombatState | None:
        """Play one combat round.

        Args:
            action: Index into ``COMBAT_ACTIONS`` or an action token.

        Returns:
            The new combat state, or None for an out-of-range index.

        Raises:
            InvalidGameStateError: If no combat is open.
            CombatError: If the combat is already resolved.
        """
        player, _ = self._require_game()
        if self._combat_state is None:
            raise InvalidGameStateError(
                "No combat in progress",
                current_state="exploring",
                expected_states=["combat"],
            )

        if isinstance(action, int) and not isinstance(action, bool):
            if not 0 <= action < len(COMBAT_ACTIONS):
                logger.warning("Combat action index out of range", index=action)
                return None
            action = COMBAT_ACTIONS[action]

        state = self.combat.step(player, self._game_state, self._combat_state, action)
        self._combat_state = state
        self.bus.emit(EngineEventKind.COMBAT_UPDATED, state)

        if state.is_resolved:
            self.bus.emit(EngineEventKind.PLAYER_UPDATED, player)
            if state.result == CombatResult.VICTORY:
                self.bus.emit(EngineEventKind.GAME_STATE_UPDATED, self._game_state)
        return state

    def finish_combat(self) -> Scene:
        """Close a resolved combat and continue the story.

        Returns:
            A continuation scene steered by a ``combat_victory`` or
            ``combat_defeat`` choice tag.

        Raises:
            InvalidGameStateError: If no resolved combat is open.
        """
        player, scene = self._require_game()
        state = self._combat_state
        if state is None or not state.is_resolved:
            raise InvalidGameStateError(
                "Combat has not been resolved",
                current_state="combat" if state else "exploring",
                expected_states=["combat_resolved"],
            )

        tag = "combat_victory" if state.result == CombatResult.VICTORY else "combat_defeat"
        self._combat_state = None
        next_scene = self.generator.generate_next_scene(
            player,
            self._game_state,
            scene,
            Choice(text="Continue", tags=[tag]),
        )
        self._enter_scene(next_scene)
        return next_scene

    # -------------------------------------------------------------------------
    # Dialogue
    # -------------------------------------------------------------------------

    def talk_to(self, npc: NPC | str) -> DialogueExchange | None:
        """Start a conversation with an NPC.

        Args:
            npc: An NPC, or the id of a character in the current scene or
                the catalog.

        Returns:
            The exchange, or None if the NPC cannot be found.
        """
        player, scene = self._require_game()
        if isinstance(npc, str):
            npc_id = npc
            npc = next((c for c in scene.characters if c.id == npc_id), None) or (
                self.catalog.npc_by_id(npc_id)
            )
            if npc is None:
                logger.warning("NPC not found", npc_id=npc_id)
                return None

        # Scene and catalog NPCs are shared; the exchange gets its own copy.
        speaker = npc.model_copy(deep=True)

        relationship = self._game_state.relationship_with(npc.id)
        context = {"location": scene.location.name, "time": self._game_state.world_state.time}
        exchange = self.dialogue.converse(player, speaker, relationship, context)
        self._remember(speaker, {"type": "conversation", "disposition": exchange.disposition.value})
        return exchange

    def respond(self, exchange: DialogueExchange, index: int) -> Choice | None:
        """Pick a response in a conversation and apply its effects.

        Args:
            exchange: The exchange being answered.
            index: Zero-based index into its responses.

        Returns:
            The chosen response, or None if the index is out of range.
        """
        player, _ = self._require_game()
        if not 0 <= index < len(exchange.responses):
            return None
        response = exchange.responses[index]
        if response.effects is not None:
            self._notify(self.applicator.apply(player, self._game_state, response.effects))
        self._remember(exchange.npc, {"type": "response", "text": response.text})
        return response

    def _remember(self, npc: NPC, interaction: dict[str, Any]) -> None:
        npc.memories = self._game_state.memories_of(npc.id)
        npc.add_memory(interaction)
        self._game_state.npc_memories[npc.id] = npc.memories

    # -------------------------------------------------------------------------
    # Save & load
    # -------------------------------------------------------------------------

    def snapshot(self) -> GameSnapshot:
        """Capture the session for persistence.

        Raises:
            InvalidGameStateError: If no game exists.
        """
        player, scene = self._require_game()
        return GameSnapshot(
            player=player.model_copy(deep=True),
            game_state=self._game_state.model_copy(deep=True),
            current_scene=scene,
        )

    def restore(self, snapshot: GameSnapshot) -> None:
        """Replace the session with a snapshot and announce the change."""
        self._player = snapshot.player.model_copy(deep=True)
        self._game_state = snapshot.game_state.model_copy(deep=True)
        self._current_scene = snapshot.current_scene
        self._combat_state = None

        self.bus.emit(EngineEventKind.PLAYER_UPDATED, self._player)
        self.bus.emit(EngineEventKind.GAME_STATE_UPDATED, self._game_state)
        self.bus.emit(EngineEventKind.SCENE_CHANGED, self._current_scene)

    def save_game(self, save_id: str | None = None) -> str | None:
        """Save the session.

        Args:
            save_id: Slot id; the store generates one when omitted.

        Returns:
            The slot id, or None if nothing could be saved.
        """
        if self.save_store is None or self._player is None or self._current_scene is None:
            logger.warning("Save unavailable", has_store=self.save_store is not None)
            return None

        try:
            return self.save_store.save(save_id, self.snapshot())
        except LegendsEngineError as exc:
            logger.error("Save failed", save_id=save_id, error=str(exc))
            return None

    def load_game(self, save_id: str) -> bool:
        """Load a saved session.

        Args:
            save_id: Slot to load.

        Returns:
            True if the session was replaced, False otherwise.
        """
        if self.save_store is None:
            return False
        try:
            snapshot = self.save_store.load(save_id)
        except LegendsEngineError as exc:
            logger.error("Load failed", save_id=save_id, error=str(exc))
            return False
        if snapshot is None:
            return False

        self.restore(snapshot)
        logger.info("Game loaded", save_id=save_id, player=snapshot.player.name)
        return True

    def quick_save(self) -> str | None:
        """Save to the quick save slot."""
        return self.save_game(QUICKSAVE_SLOT)

    def quick_load(self) -> bool:
        """Load the quick save slot."""
        return self.load_game(QUICKSAVE_SLOT)


__all__ = [
    "GameEngine",
]
