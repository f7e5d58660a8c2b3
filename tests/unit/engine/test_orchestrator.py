"""Tests for the GameEngine orchestrator."""

from __future__ import annotations

from typing import Any

import pytest

from legends_engine.core.config import Settings
from legends_engine.core.exceptions import CombatError, InvalidGameStateError
from legends_engine.engine.notifications import EngineEvent, EngineEventKind, EventBus
from legends_engine.engine.orchestrator import GameEngine
from legends_engine.engine.randomness import SequenceRandomness
from legends_engine.models.enums import CombatResult
from legends_engine.models.templates import TemplateCatalog
from legends_engine.storage.database import SaveDatabase


AMBUSH_CATALOG: dict[str, Any] = {
    "stories": [
        {
            "id": "camp",
            "type": "starting",
            "title": "The Camp",
            "location": {"name": "Old Camp", "type": "wilderness"},
            "choices": [
                {"text": "Investigate the rustling", "nextSceneId": "ambush"},
                {"text": "Sit by the fire", "tags": ["rest"]},
            ],
        },
        {
            "id": "ambush",
            "title": "Ambush!",
            "location": {"name": "Old Camp", "continuity": True},
            "requirements": {"flags": {"ambush_allowed": True}},
            "characters": [
                {
                    "id": "goblin",
                    "name": "Goblin",
                    "type": "hostile",
                    "stats": {"health": 10, "strength": 6, "defense": 0},
                    "rewards": {"experience": 25, "inventory": {"add": ["rusty dagger"]}},
                }
            ],
            "tags": ["combat_start"],
        },
    ],
    "npcs": [{"id": "hermit", "name": "Old Hermit", "dialogue": {"neutral": ["Hmph."]}}],
}


class Recorder:
    """Collects every engine event in order."""

    def __init__(self, bus: EventBus) -> None:
        self.events: list[EngineEvent] = []
        for kind in EngineEventKind:
            bus.subscribe(kind, self.events.append)

    @property
    def kinds(self) -> list[EngineEventKind]:
        return [event.kind for event in self.events]


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def engine(empty_catalog: TemplateCatalog, quiet_rng: SequenceRandomness, bus: EventBus) -> Any:
    """Engine over an empty catalog that never fires random events."""
    return GameEngine(empty_catalog, rng=quiet_rng, settings=Settings(), bus=bus)


@pytest.fixture
def ambush_engine(quiet_rng: SequenceRandomness, bus: EventBus, save_db: SaveDatabase) -> Any:
    """Engine whose first choice leads straight into combat."""
    return GameEngine(
        TemplateCatalog.from_data(AMBUSH_CATALOG),
        rng=quiet_rng,
        settings=Settings(),
        save_store=save_db,
        bus=bus,
    )


class TestNewGame:
    """Tests for starting a session."""

    def test_new_game(self, engine: GameEngine, player_data: dict, bus: EventBus) -> None:
        """Test the player, state and first scene of a new session."""
        recorder = Recorder(bus)

        scene = engine.new_game(player_data)

        assert engine.player.name == "Brom"
        assert engine.current_scene is scene
        assert scene.title == "The Beginning"
        assert scene.location.name == "Harbor Docks"
        assert not engine.in_combat
        assert recorder.kinds == [EngineEventKind.SCENE_CHANGED]

    def test_defaults_without_data(self, engine: GameEngine) -> None:
        """Test creating a default adventurer."""
        engine.new_game()

        assert engine.player.name == "Adventurer"

    def test_requires_game(self, engine: GameEngine) -> None:
        """Test that choices need a running session."""
        with pytest.raises(InvalidGameStateError):
            engine.make_choice(0)


class TestMakeChoice:
    """Tests for resolving choices."""

    def test_effects_then_next_scene(
        self,
        engine: GameEngine,
        player_data: dict,
        bus: EventBus,
    ) -> None:
        """Test the order of effects, notifications and the next scene."""
        start = engine.new_game(player_data)
        recorder = Recorder(bus)

        scene = engine.make_choice(2)

        assert engine.game_state.flags["checkedInventory"] is True
        assert scene.location == start.location
        assert scene.title == "Continuing On"
        assert recorder.kinds == [
            EngineEventKind.GAME_STATE_UPDATED,
            EngineEventKind.CHOICE_MADE,
            EngineEventKind.SCENE_CHANGED,
        ]
        assert recorder.events[1].data == {"index": 2}

    def test_out_of_range(self, engine: GameEngine, player_data: dict, bus: EventBus) -> None:
        """Test that a bad index changes nothing."""
        start = engine.new_game(player_data)
        recorder = Recorder(bus)

        assert engine.make_choice(3) is None
        assert engine.make_choice(-1) is None
        assert engine.current_scene is start
        assert recorder.events == []

    def test_event_interrupts(self, empty_catalog: TemplateCatalog, player_data: dict) -> None:
        """Test that a firing gate replaces the continuation."""
        engine = GameEngine(
            empty_catalog,
            rng=SequenceRandomness([0.5, 0.01]),
            settings=Settings(),
        )
        engine.new_game(player_data)

        scene = engine.make_choice(0)

        assert scene.has_tag("event")


class TestCombatFlow:
    """Tests for combat through the orchestrator."""

    def test_combat_starts_from_tagged_scene(
        self,
        ambush_engine: GameEngine,
        player_data: dict,
    ) -> None:
        """Test that a combat_start scene opens combat with its hostile."""
        ambush_engine.new_game(player_data)

        scene = ambush_engine.make_choice(0)

        assert scene.title == "Ambush!"
        assert ambush_engine.in_combat
        assert ambush_engine.combat_state.enemy.name == "Goblin"

    def test_story_locked_during_combat(
        self,
        ambush_engine: GameEngine,
        player_data: dict,
    ) -> None:
        """Test that story choices are rejected while fighting."""
        ambush_engine.new_game(player_data)
        ambush_engine.make_choice(0)

        with pytest.raises(InvalidGameStateError):
            ambush_engine.make_choice(0)

    def test_victory_and_finish(
        self,
        ambush_engine: GameEngine,
        player_data: dict,
        bus: EventBus,
    ) -> None:
        """Test winning a fight and returning to the story."""
        ambush_engine.new_game(player_data)
        ambush_engine.make_choice(0)
        recorder = Recorder(bus)

        state = ambush_engine.combat_action(0)

        assert state.result == CombatResult.VICTORY
        assert ambush_engine.player.stats.experience == 25
        assert ambush_engine.game_state.inventory == ["rusty dagger"]
        assert recorder.kinds == [
            EngineEventKind.COMBAT_UPDATED,
            EngineEventKind.PLAYER_UPDATED,
            EngineEventKind.GAME_STATE_UPDATED,
        ]

        with pytest.raises(CombatError):
            ambush_engine.combat_action("attack")

        scene = ambush_engine.finish_combat()

        assert not ambush_engine.in_combat
        assert scene.location.name == "Old Camp"
        assert ambush_engine.game_state.inventory == ["rusty dagger"]

    def test_bad_action_index(self, ambush_engine: GameEngine, player_data: dict) -> None:
        """Test that an unknown action index plays no round."""
        ambush_engine.new_game(player_data)
        ambush_engine.make_choice(0)

        assert ambush_engine.combat_action(7) is None
        assert ambush_engine.combat_state.round_number == 1

    def test_finish_requires_resolution(
        self,
        ambush_engine: GameEngine,
        player_data: dict,
    ) -> None:
        """Test that an open fight cannot be left."""
        ambush_engine.new_game(player_data)
        ambush_engine.make_choice(0)

        with pytest.raises(InvalidGameStateError):
            ambush_engine.finish_combat()

    def test_no_combat(self, engine: GameEngine, player_data: dict) -> None:
        """Test combat actions outside combat."""
        engine.new_game(player_data)

        with pytest.raises(InvalidGameStateError):
            engine.combat_action(0)


class TestDialogue:
    """Tests for conversations through the orchestrator."""

    def test_talk_and_respond(self, ambush_engine: GameEngine, player_data: dict) -> None:
        """Test talking to a catalog NPC and answering politely."""
        ambush_engine.new_game(player_data)

        exchange = ambush_engine.talk_to("hermit")

        assert exchange.line == "Hmph."
        assert exchange.responses[0].text == "Respond politely"

        response = ambush_engine.respond(exchange, 0)

        assert response is exchange.responses[0]
        assert ambush_engine.game_state.relationship_with("hermit") == 5
        assert [m["type"] for m in exchange.npc.memories] == ["conversation", "response"]

    def test_unknown_npc(self, ambush_engine: GameEngine, player_data: dict) -> None:
        """Test talking to someone who is not there."""
        ambush_engine.new_game(player_data)

        assert ambush_engine.talk_to("nobody") is None

    def test_respond_out_of_range(self, ambush_engine: GameEngine, player_data: dict) -> None:
        """Test an invalid response index."""
        ambush_engine.new_game(player_data)
        exchange = ambush_engine.talk_to("hermit")

        assert ambush_engine.respond(exchange, 99) is None
        assert ambush_engine.game_state.relationships == {}


class TestSaveLoad:
    """Tests for persistence through the orchestrator."""

    def test_save_without_store(self, engine: GameEngine, player_data: dict) -> None:
        """Test that saving needs a store."""
        engine.new_game(player_data)

        assert engine.save_game() is None
        assert engine.load_game("anything") is False

    def test_quick_save_and_load(
        self,
        ambush_engine: GameEngine,
        player_data: dict,
        bus: EventBus,
    ) -> None:
        """Test restoring a quick save after further play."""
        start = ambush_engine.new_game(player_data)
        assert ambush_engine.quick_save() == "quicksave"

        ambush_engine.player.modify_stat("health", -40)
        ambush_engine.game_state.inventory.append("map")
        recorder = Recorder(bus)

        assert ambush_engine.quick_load() is True
        assert ambush_engine.player.stats.health == 100
        assert ambush_engine.game_state.inventory == []
        assert ambush_engine.current_scene == start
        assert recorder.kinds == [
            EngineEventKind.PLAYER_UPDATED,
            EngineEventKind.GAME_STATE_UPDATED,
            EngineEventKind.SCENE_CHANGED,
        ]

    def test_load_missing(self, ambush_engine: GameEngine, player_data: dict) -> None:
        """Test loading an empty slot keeps the session."""
        start = ambush_engine.new_game(player_data)

        assert ambush_engine.load_game("missing") is False
        assert ambush_engine.current_scene is start

    def test_snapshot_is_detached(self, ambush_engine: GameEngine, player_data: dict) -> None:
        """Test that snapshots do not alias live state."""
        ambush_engine.new_game(player_data)
        snapshot = ambush_engine.snapshot()

        ambush_engine.game_state.flags["late"] = True

        assert "late" not in snapshot.game_state.flags
