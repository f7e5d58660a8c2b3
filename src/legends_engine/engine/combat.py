"""Combat resolution state machine.

A combat session moves ``not_started -> in_progress -> resolved``. Each
call to ``CombatEngine.step`` plays exactly one round:

1. The player's action deals damage (attack, magic) or prepares a dodge.
2. Enemy health is reduced, floored at 0.
3. A surviving enemy picks attack or special and counterattacks; a
   defeated enemy never does.
4. The round counter advances and a summary line is logged.
5. Victory applies the enemy's rewards once; defeat leaves the player at
   1 health.

Random draws per round happen in a fixed order: player damage jitter,
enemy policy rolls, enemy damage jitter.
"""

from __future__ import annotations

import math

from legends_engine.core.config import CombatSettings
from legends_engine.core.constants import DEFEAT_RECOVERY_HEALTH
from legends_engine.core.exceptions import CombatError
from legends_engine.core.logging import get_logger
from legends_engine.engine.effects import EffectApplicator
from legends_engine.engine.randomness import RandomnessProvider, uniform_int
from legends_engine.models.combat import CombatState
from legends_engine.models.effects import EffectDescriptor, StatDelta
from legends_engine.models.enums import CombatAction, CombatPhase, CombatResult, EnemyAction
from legends_engine.models.game_state import GameState
from legends_engine.models.player import Player
from legends_engine.models.scene import NPC


logger = get_logger(__name__)


def damage_formula(
    attack: float,
    defense: float,
    rng: RandomnessProvider,
    variation_fraction: float = 0.2,
) -> int:
    """Compute jittered damage for one hit.

    ``damage = max(1, floor(attack - defense / 2))``, then a symmetric
    integer jitter of up to ``floor(damage * variation_fraction)`` either
    way. The result is not re-clamped after jitter.

    Args:
        attack: Attacking stat (possibly scaled).
        defense: Defending stat.
        rng: Randomness source; exactly one value is drawn.
        variation_fraction: Fraction of damage used as jitter.

    Returns:
        Integer damage.

    Example:
        >>> damage_formula(10, 0, SequenceRandomness([0.5]))
        10
    """
    damage = max(1, math.floor(attack - defense / 2))
    variation = math.floor(damage * variation_fraction)
    return damage + uniform_int(rng, 0, 2 * variation) - variation


class CombatEngine:
    """Runs combat sessions between the player and one enemy.

    Args:
        settings: Combat arithmetic and enemy policy settings.
        rng: The session's randomness stream.
        applicator: Applies victory rewards.

    Example:
        >>> engine = CombatEngine(CombatSettings(), SeededRandomness(1), EffectApplicator())
        >>> state = engine.start(player, enemy)
        >>> state = engine.step(player, game_state, state, "attack")
    """

    def __init__(
        self,
        settings: CombatSettings,
        rng: RandomnessProvider,
        applicator: EffectApplicator,
    ) -> None:
        self.settings = settings
        self.rng = rng
        self.applicator = applicator

    def start(self, player: Player, enemy: NPC) -> CombatState:
        """Open a combat session.

        Args:
            player: The player character.
            enemy: The enemy to fight.

        Returns:
            An in-progress CombatState at round 1.
        """
        logger.info("Combat started", enemy_id=enemy.id, enemy=enemy.name)
        return CombatState(
            enemy=enemy,
            phase=CombatPhase.IN_PROGRESS,
            round_number=1,
            player_health=player.stats.health,
            enemy_health=enemy.stats.health,
            enemy_max_health=enemy.stats.health,
            log=(f"Combat with {enemy.name} begins!",),
        )

    def step(
        self,
        player: Player,
        game_state: GameState,
        state: CombatState,
        action: CombatAction | str | None,
    ) -> CombatState:
        """Play one round.

        Args:
            player: The player character.
            game_state: Session state, receives victory rewards.
            state: Current in-progress combat state.
            action: Player action token; anything unknown is an attack.

        Returns:
            The next CombatState.

        Raises:
            CombatError: If the session is not in progress.
        """
        if state.phase != CombatPhase.IN_PROGRESS:
            raise CombatError(
                f"Cannot play a round of combat in phase {state.phase}",
                enemy_id=state.enemy.id,
                round_number=state.round_number,
            )

        settings = self.settings
        enemy = state.enemy
        chosen = CombatAction.normalize(action)

        player_damage, player_line = self._player_turn(player, enemy, chosen)
        enemy_health = max(0, state.enemy_health - player_damage)

        enemy_action: EnemyAction | None = None
        enemy_damage = 0
        enemy_line = ""
        if enemy_health > 0:
            enemy_action = self.choose_enemy_action(enemy_health, state.enemy_max_health)
            if enemy_action == EnemyAction.SPECIAL:
                enemy_damage = damage_formula(
                    enemy.stats.strength * settings.special_multiplier,
                    player.stats.defense,
                    self.rng,
                    settings.damage_variation,
                )
                enemy_line = f"{enemy.name} uses a special attack for {enemy_damage} damage!"
            else:
                enemy_damage = damage_formula(
                    enemy.stats.strength,
                    player.stats.defense,
                    self.rng,
                    settings.damage_variation,
                )
                if chosen == CombatAction.DODGE:
                    enemy_damage = math.floor(enemy_damage * settings.dodge_factor)
                enemy_line = f"{enemy.name} attacks you for {enemy_damage} damage!"
                if chosen == CombatAction.DODGE:
                    enemy_line += " (Reduced by dodge)"

        player_health = max(0, state.player_health - enemy_damage)

        log = [*state.log, player_line]
        if enemy_line:
            log.append(enemy_line)
        log.append(
            f"Round {state.round_number} ends. "
            f"You: {player_health}HP, {enemy.name}: {enemy_health}HP"
        )

        result: CombatResult | None = None
        if enemy_health <= 0:
            result = CombatResult.VICTORY
            log.append(f"You defeated {enemy.name}!")
            self._write_back_health(player, player_health)
            log.extend(self._apply_rewards(player, game_state, enemy))
        elif player_health <= 0:
            result = CombatResult.DEFEAT
            log.append("You have been defeated!")
            self._write_back_health(player, DEFEAT_RECOVERY_HEALTH)

        logger.info(
            "Combat round resolved",
            round=state.round_number,
            action=chosen.value,
            enemy_action=enemy_action.value if enemy_action else None,
            player_health=player_health,
            enemy_health=enemy_health,
            result=result.value if result else None,
        )

        return state.model_copy(
            update={
                "phase": CombatPhase.RESOLVED if result else CombatPhase.IN_PROGRESS,
                "round_number": state.round_number + 1,
                "player_health": player_health,
                "enemy_health": enemy_health,
                "log": tuple(log),
                "result": result,
                "last_player_action": chosen,
                "last_enemy_action": enemy_action,
            }
        )

    def choose_enemy_action(self, enemy_health: int, enemy_max_health: int) -> EnemyAction:
        """Enemy decision policy.

        A badly hurt enemy turns desperate and likely uses its special;
        otherwise there is a flat chance of a special.

        Args:
            enemy_health: Enemy health after the player's action.
            enemy_max_health: Enemy health at the start of combat.

        Returns:
            The enemy's action.
        """
        settings = self.settings
        if enemy_health < enemy_max_health * settings.low_health_threshold:
            if self.rng.next() < settings.desperate_special_chance:
                return EnemyAction.SPECIAL
        if self.rng.next() < settings.special_chance:
            return EnemyAction.SPECIAL
        return EnemyAction.ATTACK

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _player_turn(self, player: Player, enemy: NPC, action: CombatAction) -> tuple[int, str]:
        settings = self.settings
        if action == CombatAction.DODGE:
            return 0, "You prepare to dodge the enemy attack."

        if action == CombatAction.MAGIC:
            if player.stats.mana < settings.magic_cost:
                return 0, "You don't have enough mana!"
            player.modify_stat("mana", -settings.magic_cost)
            damage = damage_formula(
                player.stats.intelligence * settings.magic_multiplier,
                enemy.stats.resistance,
                self.rng,
                settings.damage_variation,
            )
            return damage, f"You cast a spell at {enemy.name} for {damage} damage!"

        damage = damage_formula(
            player.stats.strength,
            enemy.stats.defense,
            self.rng,
            settings.damage_variation,
        )
        return damage, f"You attack {enemy.name} for {damage} damage!"

    @staticmethod
    def _write_back_health(player: Player, health: int) -> None:
        player.modify_stat("health", health - player.stats.health)

    def _apply_rewards(self, player: Player, game_state: GameState, enemy: NPC) -> list[str]:
        rewards = enemy.rewards or EffectDescriptor()
        if enemy.experience > 0:
            rewards = rewards.with_effects(StatDelta(stat="experience", delta=enemy.experience))
        if rewards.is_empty:
            return []

        self.applicator.apply(player, game_state, rewards)

        lines: list[str] = []
        if enemy.experience > 0:
            lines.append(f"You gained {enemy.experience} experience!")
        if rewards.items_added:
            lines.append(f"You obtained: {', '.join(rewards.items_added)}")
        logger.info(
            "Combat rewards applied",
            enemy_id=enemy.id,
            experience=enemy.experience,
            items=rewards.items_added,
        )
        return lines


__all__ = [
    "damage_formula",
    "CombatEngine",
]
