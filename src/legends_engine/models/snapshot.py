"""Serializable session snapshot, the unit of save and load."""

from __future__ import annotations

import time
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from legends_engine.models.game_state import GameState
from legends_engine.models.player import Player
from legends_engine.models.scene import Scene


def _now_ms() -> int:
    return int(time.time() * 1000)


class GameSnapshot(BaseModel):
    """Everything needed to resume a session.

    Attributes:
        player: The player character.
        game_state: Session state.
        current_scene: Scene the player is looking at.
        timestamp: Capture time in epoch milliseconds.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    player: Player = Field(description="Player character")
    game_state: GameState = Field(
        default_factory=GameState,
        validation_alias=AliasChoices("game_state", "gameState"),
        description="Session state",
    )
    current_scene: Scene = Field(
        validation_alias=AliasChoices("current_scene", "currentScene"),
        description="Current scene",
    )
    timestamp: int = Field(default_factory=_now_ms, description="Epoch milliseconds")

    def summary(self) -> dict[str, Any]:
        """Short description shown in save lists."""
        return {
            "player_name": self.player.name,
            "archetype": self.player.archetype,
            "level": self.player.stats.level,
            "scene_title": self.current_scene.title,
            "location": self.current_scene.location.name,
            "timestamp": self.timestamp,
        }


__all__ = [
    "GameSnapshot",
]
