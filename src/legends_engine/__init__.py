"""Legends Engine - procedural narrative and turn-based combat.

Assembles interactive-fiction scenes from an authored template catalog
and runs simple turn-based fights against enemies met along the way.

DETERMINISM:
- Every random decision draws from one injectable RandomnessProvider
- Seeding that provider replays a session exactly
- Authored content is data; the catalog is always passed in explicitly

Example:
    >>> from legends_engine import GameEngine, SeededRandomness, default_catalog
    >>>
    >>> engine = GameEngine(default_catalog(), rng=SeededRandomness(42))
    >>> scene = engine.new_game({"name": "Aria", "archetype": "mage"})
    >>> print(scene.title)
    >>> scene = engine.make_choice(0)

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic V2 schemas (player, scenes, templates, effects, combat).
    engine: Selection, events, effects, combat, dialogue and orchestration.
    content: Bundled sample catalog.
    storage: SQLite save slots.
"""

from __future__ import annotations

# Core
from legends_engine.core.config import Settings, get_settings
from legends_engine.core.exceptions import LegendsEngineError
from legends_engine.core.logging import configure_logging, get_logger

# Models
from legends_engine.models import (
    NPC,
    Choice,
    CombatState,
    EffectDescriptor,
    GameSnapshot,
    GameState,
    Location,
    Player,
    PlayerStats,
    Scene,
    TemplateCatalog,
)

# Engine
from legends_engine.engine import (
    EngineEventKind,
    EventBus,
    GameEngine,
    SeededRandomness,
    SequenceRandomness,
)

# Content & storage
from legends_engine.content import default_catalog
from legends_engine.storage import SaveDatabase


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "LegendsEngineError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Models
    "NPC",
    "Choice",
    "CombatState",
    "EffectDescriptor",
    "GameSnapshot",
    "GameState",
    "Location",
    "Player",
    "PlayerStats",
    "Scene",
    "TemplateCatalog",
    # Engine
    "EngineEventKind",
    "EventBus",
    "GameEngine",
    "SeededRandomness",
    "SequenceRandomness",
    # Content & storage
    "default_catalog",
    "SaveDatabase",
]
