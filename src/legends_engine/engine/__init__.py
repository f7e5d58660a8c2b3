"""Narrative and combat engine.

Exports:
    Randomness: RandomnessProvider, SeededRandomness, SequenceRandomness.
    Selection: SceneGenerator, select_weighted.
    Events: RandomEventGate.
    Effects: EffectApplicator, EffectOutcome.
    Combat: CombatEngine, damage_formula.
    Dialogue: DialogueGenerator, DialogueExchange.
    Notifications: EventBus, EngineEvent, EngineEventKind.
    Orchestration: GameEngine.
"""

from __future__ import annotations

from legends_engine.engine.combat import CombatEngine, damage_formula
from legends_engine.engine.dialogue import DialogueExchange, DialogueGenerator
from legends_engine.engine.effects import EffectApplicator, EffectOutcome
from legends_engine.engine.events import RandomEventGate
from legends_engine.engine.interpolation import InterpolationContext, interpolate
from legends_engine.engine.notifications import EngineEvent, EngineEventKind, EventBus
from legends_engine.engine.orchestrator import GameEngine
from legends_engine.engine.randomness import (
    RandomnessProvider,
    SeededRandomness,
    SequenceRandomness,
    choose,
    uniform_int,
)
from legends_engine.engine.selection import SceneGenerator, select_weighted


__all__ = [
    # Randomness
    "RandomnessProvider",
    "SeededRandomness",
    "SequenceRandomness",
    "choose",
    "uniform_int",
    # Text
    "InterpolationContext",
    "interpolate",
    # Selection
    "SceneGenerator",
    "select_weighted",
    "RandomEventGate",
    # Effects
    "EffectApplicator",
    "EffectOutcome",
    # Combat
    "CombatEngine",
    "damage_formula",
    # Dialogue
    "DialogueGenerator",
    "DialogueExchange",
    # Notifications
    "EventBus",
    "EngineEvent",
    "EngineEventKind",
    # Orchestration
    "GameEngine",
]
