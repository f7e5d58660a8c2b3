"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the Legends engine test suite.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any

import pytest


if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from legends_engine.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host LEGENDS_* variables and .env files out of the tests."""
    for key in list(os.environ):
        if key.startswith("LEGENDS_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LEGENDS_SAVE_DATABASE_PATH", str(tmp_path / "saves" / "saves.db"))


# =============================================================================
# Randomness Fixtures
# =============================================================================


@pytest.fixture
def quiet_rng() -> Any:
    """Randomness that never fires the event gate and never jitters damage.

    0.5 sits above every gate probability (max 0.40), centres damage
    jitter and keeps the enemy on plain attacks.
    """
    from legends_engine.engine.randomness import SequenceRandomness

    return SequenceRandomness([0.5])


@pytest.fixture
def seeded_rng() -> Any:
    """Seeded randomness for reproducible sessions."""
    from legends_engine.engine.randomness import SeededRandomness

    return SeededRandomness(42)


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def player_data() -> dict[str, Any]:
    """Provide character-creation data for a warrior."""
    return {
        "name": "Brom",
        "archetype": "warrior",
        "background": {"hometown": "Oakvale", "backstory": "A former caravan guard."},
    }


@pytest.fixture
def player(player_data: dict[str, Any]) -> Any:
    """Create a warrior Player."""
    from legends_engine.models.player import Player

    return Player.from_data(player_data)


@pytest.fixture
def game_state() -> Any:
    """Create a fresh GameState."""
    from legends_engine.models.game_state import GameState

    return GameState()


@pytest.fixture
def enemy() -> Any:
    """Create a weak hostile NPC with rewards."""
    from legends_engine.models.scene import NPC

    return NPC.model_validate(
        {
            "id": "goblin",
            "name": "Goblin",
            "type": "hostile",
            "stats": {"health": 10, "strength": 6, "defense": 0, "resistance": 0},
            "rewards": {"experience": 25, "inventory": {"add": ["rusty dagger"]}},
        }
    )


@pytest.fixture
def tavern_scene() -> Any:
    """Create a scene at a safe tavern."""
    from legends_engine.models.scene import Choice, Location, Scene

    return Scene(
        title="The Crossroads Inn",
        location=Location(name="Crossroads Inn", type="safe", description="A tavern."),
        narrative=["A fire crackles."],
        choices=[Choice(text="Look around", tags=["explore"])],
        tags=["tavern"],
    )


# =============================================================================
# Catalog Fixtures
# =============================================================================


@pytest.fixture
def empty_catalog() -> Any:
    """Catalog with no content at all."""
    from legends_engine.models.templates import TemplateCatalog

    return TemplateCatalog()


@pytest.fixture
def catalog() -> Any:
    """The bundled sample catalog."""
    from legends_engine.content import default_catalog

    return default_catalog()


# =============================================================================
# Storage Fixtures
# =============================================================================


@pytest.fixture
def save_db(tmp_path: Path) -> Any:
    """Create a SaveDatabase in a temporary directory."""
    from legends_engine.storage.database import SaveDatabase

    return SaveDatabase(tmp_path / "db" / "saves.db", max_saves=3)
