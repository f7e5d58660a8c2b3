"""Tests for the random event gate."""

from __future__ import annotations

import pytest

from legends_engine.core.config import EventGateSettings
from legends_engine.engine.events import RandomEventGate
from legends_engine.engine.randomness import SequenceRandomness
from legends_engine.engine.selection import SceneGenerator
from legends_engine.models.game_state import GameState
from legends_engine.models.player import Player
from legends_engine.models.scene import Choice, Location, Scene
from legends_engine.models.templates import TemplateCatalog


def scene_at(location_type: str) -> Scene:
    """Scene at a location of the given type."""
    return Scene(
        location=Location(name="Somewhere", type=location_type),
        choices=[Choice(text="Wait")],
    )


def make_gate(values: list[float], settings: EventGateSettings | None = None) -> RandomEventGate:
    """Gate over an empty catalog with a fixed draw sequence."""
    rng = SequenceRandomness(values)
    return RandomEventGate(
        settings or EventGateSettings(),
        rng,
        SceneGenerator(TemplateCatalog(), rng),
    )


class TestProbability:
    """Tests for the interrupt probability."""

    @pytest.mark.parametrize(
        ("location_type", "danger", "expected"),
        [
            ("neutral", "low", 0.15),
            ("safe", "low", 0.10),
            ("dangerous", "low", 0.25),
            ("neutral", "high", 0.25),
            ("dangerous", "high", 0.35),
            ("safe", "high", 0.20),
        ],
    )
    def test_adjustments(self, location_type: str, danger: str, expected: float) -> None:
        """Test danger and location adjustments."""
        game_state = GameState()
        game_state.world_state.danger = danger

        assert make_gate([0.5]).probability(game_state, scene_at(location_type)) == (
            pytest.approx(expected)
        )

    def test_upper_clamp(self) -> None:
        """Test that the probability never exceeds the upper bound."""
        gate = make_gate([0.5], EventGateSettings(base_chance=0.9))

        assert gate.probability(GameState(), scene_at("neutral")) == pytest.approx(0.40)

    def test_lower_clamp(self) -> None:
        """Test that the probability never drops below the lower bound."""
        gate = make_gate([0.5], EventGateSettings(base_chance=0.0))

        assert gate.probability(GameState(), scene_at("safe")) == pytest.approx(0.05)


class TestRoll:
    """Tests for rolling the gate."""

    def test_fires_below_chance(self, player: Player) -> None:
        """Test that a draw below the chance builds an event scene."""
        gate = make_gate([0.09])

        scene = gate.roll(player, GameState(), scene_at("safe"))

        assert scene is not None
        assert scene.has_tag("event")
        assert scene.title == "A Strange Sound"

    def test_draw_equal_to_chance_does_not_fire(self, player: Player) -> None:
        """Test the strict comparison."""
        gate = make_gate([0.2], EventGateSettings(base_chance=0.2))

        assert gate.roll(player, GameState(), scene_at("neutral")) is None

    def test_single_draw_when_quiet(self, player: Player) -> None:
        """Test that a non-firing roll consumes exactly one value."""
        gate = make_gate([0.5])

        assert gate.roll(player, GameState(), scene_at("neutral")) is None
        assert gate.rng.draws == 1
