"""Pydantic models for the Legends narrative engine.

Exports:
    Enums: Archetype, Disposition, CombatAction, EnemyAction, CombatPhase,
        CombatResult, EffectKind.
    Effects: EffectDescriptor and its tagged entries.
    Player: PlayerStats, Background, Player.
    State: WorldState, GameState, GameSnapshot.
    Scenes: Location, Choice, NPC, Scene.
    Templates: StoryTemplate, EventTemplate, LocationTemplate, TemplateCatalog.
    Combat: CombatState.
"""

from __future__ import annotations

from legends_engine.models.combat import CombatState
from legends_engine.models.effects import (
    Effect,
    EffectDescriptor,
    FlagSet,
    InventoryChange,
    LocationVisited,
    QuestCompleted,
    RelationshipDelta,
    Scalar,
    StatDelta,
    WorldStateOverride,
    effects_from_bag,
)
from legends_engine.models.enums import (
    COMBAT_ACTIONS,
    Archetype,
    CombatAction,
    CombatPhase,
    CombatResult,
    Disposition,
    EffectKind,
    EnemyAction,
)
from legends_engine.models.game_state import GameState, WorldState
from legends_engine.models.player import Background, Player, PlayerStats, canonical_stat_name
from legends_engine.models.scene import NPC, Choice, Location, NPCStats, Scene
from legends_engine.models.snapshot import GameSnapshot
from legends_engine.models.templates import (
    ChoiceTemplate,
    EventTemplate,
    LocationSpec,
    LocationTemplate,
    StoryTemplate,
    TemplateCatalog,
    TemplateRequirements,
)


__all__ = [
    # Enums
    "Archetype",
    "Disposition",
    "CombatAction",
    "EnemyAction",
    "CombatPhase",
    "CombatResult",
    "EffectKind",
    "COMBAT_ACTIONS",
    # Effects
    "Scalar",
    "Effect",
    "EffectDescriptor",
    "StatDelta",
    "InventoryChange",
    "RelationshipDelta",
    "WorldStateOverride",
    "FlagSet",
    "LocationVisited",
    "QuestCompleted",
    "effects_from_bag",
    # Player
    "PlayerStats",
    "Background",
    "Player",
    "canonical_stat_name",
    # State
    "WorldState",
    "GameState",
    "GameSnapshot",
    # Scenes
    "Location",
    "Choice",
    "NPCStats",
    "NPC",
    "Scene",
    # Templates
    "TemplateRequirements",
    "LocationSpec",
    "ChoiceTemplate",
    "StoryTemplate",
    "EventTemplate",
    "LocationTemplate",
    "TemplateCatalog",
    # Combat
    "CombatState",
]
