"""Tests for the combat engine."""

from __future__ import annotations

from typing import Any

import pytest

from legends_engine.core.config import CombatSettings
from legends_engine.core.exceptions import CombatError
from legends_engine.engine.combat import CombatEngine, damage_formula
from legends_engine.engine.effects import EffectApplicator
from legends_engine.engine.randomness import SequenceRandomness
from legends_engine.models.enums import CombatAction, CombatPhase, CombatResult, EnemyAction
from legends_engine.models.game_state import GameState
from legends_engine.models.player import Player
from legends_engine.models.scene import NPC


def make_engine(rng: SequenceRandomness) -> CombatEngine:
    return CombatEngine(CombatSettings(), rng, EffectApplicator())


def make_enemy(**stats: Any) -> NPC:
    """Hostile NPC without rewards."""
    return NPC.model_validate(
        {
            "id": "brute",
            "name": "Brute",
            "type": "hostile",
            "stats": {"health": 100, "strength": 6, "defense": 0, "resistance": 0, **stats},
        }
    )


class TestDamageFormula:
    """Tests for damage_formula."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(0.0, 8), (0.2, 9), (0.5, 10), (0.7, 11), (0.99, 12)],
    )
    def test_jitter_range(self, value: float, expected: int) -> None:
        """Test that (10, 0) stays within [8, 12]."""
        assert damage_formula(10, 0, SequenceRandomness([value])) == expected

    def test_defense_halved(self) -> None:
        """Test that defense counts half."""
        assert damage_formula(10, 4, SequenceRandomness([0.5]), variation_fraction=0) == 8

    def test_minimum_one(self) -> None:
        """Test that overwhelming defense still deals one damage."""
        assert damage_formula(1, 50, SequenceRandomness([0.0])) == 1

    def test_one_draw(self) -> None:
        """Test that exactly one value is drawn."""
        rng = SequenceRandomness([0.5])
        damage_formula(3, 5, rng)

        assert rng.draws == 1


class TestCombatStart:
    """Tests for opening a combat session."""

    def test_start(self, player: Player, enemy: NPC, quiet_rng: SequenceRandomness) -> None:
        """Test the initial combat state."""
        state = make_engine(quiet_rng).start(player, enemy)

        assert state.phase == CombatPhase.IN_PROGRESS
        assert state.round_number == 1
        assert (state.player_health, state.enemy_health) == (100, 10)
        assert state.enemy_max_health == 10
        assert state.log == ("Combat with Goblin begins!",)
        assert quiet_rng.draws == 0


class TestCombatRound:
    """Tests for playing rounds."""

    def test_victory_without_counterattack(
        self,
        player: Player,
        game_state: GameState,
        enemy: NPC,
        quiet_rng: SequenceRandomness,
    ) -> None:
        """Test that a defeated enemy never counterattacks."""
        engine = make_engine(quiet_rng)
        state = engine.step(player, game_state, engine.start(player, enemy), "attack")

        assert state.result == CombatResult.VICTORY
        assert state.phase == CombatPhase.RESOLVED
        assert state.enemy_health == 0
        assert state.player_health == 100
        assert state.last_enemy_action is None
        assert quiet_rng.draws == 1
        assert state.log[1:] == (
            "You attack Goblin for 10 damage!",
            "Round 1 ends. You: 100HP, Goblin: 0HP",
            "You defeated Goblin!",
            "You gained 25 experience!",
            "You obtained: rusty dagger",
        )

    def test_victory_rewards_applied_once(
        self,
        player: Player,
        game_state: GameState,
        enemy: NPC,
        quiet_rng: SequenceRandomness,
    ) -> None:
        """Test that rewards and experience land exactly once."""
        engine = make_engine(quiet_rng)
        engine.step(player, game_state, engine.start(player, enemy), "attack")

        assert player.stats.experience == 25
        assert game_state.inventory == ["rusty dagger"]

    def test_resolved_combat_rejects_steps(
        self,
        player: Player,
        game_state: GameState,
        enemy: NPC,
        quiet_rng: SequenceRandomness,
    ) -> None:
        """Test that a resolved session cannot be stepped."""
        engine = make_engine(quiet_rng)
        state = engine.step(player, game_state, engine.start(player, enemy), "attack")

        with pytest.raises(CombatError) as exc_info:
            engine.step(player, game_state, state, "attack")

        assert exc_info.value.details["enemy_id"] == "goblin"
        assert game_state.inventory == ["rusty dagger"]

    def test_enemy_counterattack(
        self,
        player: Player,
        game_state: GameState,
        quiet_rng: SequenceRandomness,
    ) -> None:
        """Test a full exchange with a surviving enemy."""
        engine = make_engine(quiet_rng)
        state = engine.step(player, game_state, engine.start(player, make_enemy()), "attack")

        assert state.phase == CombatPhase.IN_PROGRESS
        assert state.round_number == 2
        assert state.enemy_health == 90
        assert state.player_health == 97
        assert state.last_enemy_action == EnemyAction.ATTACK
        assert state.log[-1] == "Round 1 ends. You: 97HP, Brute: 90HP"
        assert quiet_rng.draws == 3
        assert player.stats.health == 100

    def test_dodge_halves_normal_attack(
        self,
        player: Player,
        game_state: GameState,
        quiet_rng: SequenceRandomness,
    ) -> None:
        """Test that dodging deals no damage and floors the enemy hit."""
        engine = make_engine(quiet_rng)
        state = engine.step(player, game_state, engine.start(player, make_enemy()), "dodge")

        assert state.enemy_health == 100
        assert state.player_health == 99
        assert state.log[1] == "You prepare to dodge the enemy attack."
        assert state.log[2] == "Brute attacks you for 1 damage! (Reduced by dodge)"

    def test_magic_spends_mana(
        self,
        player: Player,
        game_state: GameState,
        quiet_rng: SequenceRandomness,
    ) -> None:
        """Test a successful spell."""
        engine = make_engine(quiet_rng)
        state = engine.step(player, game_state, engine.start(player, make_enemy()), "magic")

        assert state.enemy_health == 85
        assert player.stats.mana == 45
        assert state.last_player_action == CombatAction.MAGIC

    def test_magic_without_mana(
        self,
        player: Player,
        game_state: GameState,
        quiet_rng: SequenceRandomness,
    ) -> None:
        """Test that a spell without mana does nothing."""
        player.modify_stat("mana", -48)
        engine = make_engine(quiet_rng)
        state = engine.step(player, game_state, engine.start(player, make_enemy()), "magic")

        assert state.enemy_health == 100
        assert player.stats.mana == 2
        assert state.log[1] == "You don't have enough mana!"

    def test_unknown_action_attacks(
        self,
        player: Player,
        game_state: GameState,
        quiet_rng: SequenceRandomness,
    ) -> None:
        """Test that unknown tokens are treated as attacks."""
        engine = make_engine(quiet_rng)
        state = engine.step(player, game_state, engine.start(player, make_enemy()), "flee")

        assert state.last_player_action == CombatAction.ATTACK
        assert state.enemy_health == 90

    def test_desperate_special(
        self,
        player: Player,
        game_state: GameState,
        quiet_rng: SequenceRandomness,
    ) -> None:
        """Test that a badly hurt enemy uses its special attack."""
        engine = make_engine(quiet_rng)
        state = engine.step(
            player, game_state, engine.start(player, make_enemy(health=13)), "attack"
        )

        assert state.enemy_health == 3
        assert state.last_enemy_action == EnemyAction.SPECIAL
        assert state.player_health == 94
        assert state.log[2] == "Brute uses a special attack for 6 damage!"
        assert quiet_rng.draws == 3

    def test_defeat_leaves_one_health(
        self,
        player: Player,
        game_state: GameState,
        quiet_rng: SequenceRandomness,
    ) -> None:
        """Test that defeat sets health to 1 and grants nothing."""
        player.modify_stat("health", -97)
        engine = make_engine(quiet_rng)
        state = engine.step(player, game_state, engine.start(player, make_enemy()), "attack")

        assert state.result == CombatResult.DEFEAT
        assert state.player_health == 0
        assert state.log[-1] == "You have been defeated!"
        assert player.stats.health == 1
        assert game_state.inventory == []

    def test_level_up_refill_survives_victory(
        self,
        player: Player,
        game_state: GameState,
        quiet_rng: SequenceRandomness,
    ) -> None:
        """Test that health is written back before rewards level the player up."""
        player.modify_stat("health", -50)
        enemy = NPC.model_validate(
            {
                "name": "Wolf",
                "type": "hostile",
                "stats": {"health": 5, "defense": 0},
                "rewards": {"experience": 100},
            }
        )
        engine = make_engine(quiet_rng)
        engine.step(player, game_state, engine.start(player, enemy), "attack")

        assert player.stats.level == 2
        assert player.stats.health == 110


class TestEnemyPolicy:
    """Tests for choose_enemy_action."""

    def test_flat_special_chance(self) -> None:
        """Test the flat special roll for a healthy enemy."""
        engine = make_engine(SequenceRandomness([0.1]))

        assert engine.choose_enemy_action(100, 100) == EnemyAction.SPECIAL

    def test_healthy_attack(self) -> None:
        """Test that a healthy enemy skips the desperation roll."""
        rng = SequenceRandomness([0.5])

        assert make_engine(rng).choose_enemy_action(100, 100) == EnemyAction.ATTACK
        assert rng.draws == 1

    def test_desperate_then_flat(self) -> None:
        """Test that a failed desperation roll falls through to the flat roll."""
        rng = SequenceRandomness([0.8, 0.1])

        assert make_engine(rng).choose_enemy_action(1, 100) == EnemyAction.SPECIAL
        assert rng.draws == 2
