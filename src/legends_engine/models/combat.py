"""Pydantic V2 schemas for combat sessions.

A CombatState is a frozen snapshot of one combat session. The combat
engine never mutates a state; each round produces a new one.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from legends_engine.models.enums import CombatAction, CombatPhase, CombatResult, EnemyAction
from legends_engine.models.scene import NPC


class CombatState(BaseModel):
    """State of a combat session between the player and one enemy.

    Attributes:
        enemy: The enemy being fought.
        phase: Lifecycle phase.
        round_number: Round about to be played (starts at 1).
        player_health: Player health snapshot.
        enemy_health: Enemy health snapshot.
        enemy_max_health: Enemy health at the start of combat.
        log: Narrative lines, append-only across states.
        result: Terminal result once resolved.
        last_player_action: Action the player took last round.
        last_enemy_action: Action the enemy took last round, if any.

    Example:
        >>> state = engine.start(player, enemy)
        >>> state = engine.step(player, state, "attack")
        >>> state.is_resolved
        False
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    enemy: NPC = Field(description="Enemy being fought")
    phase: CombatPhase = Field(default=CombatPhase.NOT_STARTED, description="Lifecycle phase")
    round_number: Annotated[int, Field(ge=1, description="Current round")] = 1
    player_health: Annotated[int, Field(ge=0, description="Player health snapshot")]
    enemy_health: Annotated[int, Field(ge=0, description="Enemy health snapshot")]
    enemy_max_health: Annotated[int, Field(ge=0, description="Enemy starting health")]
    log: tuple[str, ...] = Field(default=(), description="Narrative log")
    result: CombatResult | None = Field(default=None, description="Terminal result")
    last_player_action: CombatAction | None = Field(default=None)
    last_enemy_action: EnemyAction | None = Field(default=None)

    @property
    def is_resolved(self) -> bool:
        """Check whether combat has ended.

        Returns:
            True once a result is recorded.
        """
        return self.phase == CombatPhase.RESOLVED

    @property
    def is_victory(self) -> bool:
        """Whether the player won."""
        return self.result == CombatResult.VICTORY

    @property
    def is_defeat(self) -> bool:
        """Whether the player lost."""
        return self.result == CombatResult.DEFEAT


__all__ = [
    "CombatState",
]
