"""Tests for the exception hierarchy."""

from __future__ import annotations

import pytest

from legends_engine.core.exceptions import (
    CombatError,
    ConfigurationError,
    GameEngineError,
    InvalidGameStateError,
    LegendsEngineError,
    PersistenceError,
    TemplateError,
    ValidationError,
)


class TestLegendsEngineError:
    """Tests for the base LegendsEngineError exception."""

    def test_basic_message(self) -> None:
        """Test exception with basic message."""
        exc = LegendsEngineError("Test error message")
        assert exc.message == "Test error message"
        assert exc.details == {}
        assert str(exc) == "Test error message"

    def test_with_details(self) -> None:
        """Test exception with additional details."""
        exc = LegendsEngineError("Test error", details={"key": "value", "count": 42})
        assert exc.details == {"key": "value", "count": 42}
        assert "key='value'" in str(exc)
        assert "count=42" in str(exc)

    def test_repr(self) -> None:
        """Test exception repr output."""
        repr_str = repr(LegendsEngineError("Test", details={"x": 1}))
        assert "LegendsEngineError" in repr_str
        assert "Test" in repr_str
        assert "x" in repr_str


class TestGameEngineExceptions:
    """Tests for game engine exceptions."""

    def test_invalid_state_context(self) -> None:
        """Test InvalidGameStateError records states."""
        exc = InvalidGameStateError(
            "Choice during combat",
            current_state="combat",
            expected_states=["exploring"],
        )
        assert exc.details["current_state"] == "combat"
        assert exc.details["expected_states"] == ["exploring"]

    def test_combat_error_context(self) -> None:
        """Test CombatError records the enemy and round."""
        exc = CombatError("Already resolved", enemy_id="goblin", round_number=0)
        assert exc.details == {"enemy_id": "goblin", "round_number": 0}

    def test_template_error_context(self) -> None:
        """Test TemplateError records the template id."""
        exc = TemplateError("Duplicate", template_id="intro_tavern")
        assert exc.details["template_id"] == "intro_tavern"

    @pytest.mark.parametrize("exc_class", [InvalidGameStateError, CombatError, TemplateError])
    def test_hierarchy(self, exc_class: type[GameEngineError]) -> None:
        """Test that engine errors share the GameEngineError base."""
        exc = exc_class("boom")
        assert isinstance(exc, GameEngineError)
        assert isinstance(exc, LegendsEngineError)


class TestOtherExceptions:
    """Tests for persistence, configuration and validation exceptions."""

    def test_persistence_error_save_id(self) -> None:
        """Test PersistenceError records the slot."""
        exc = PersistenceError("Corrupt", save_id="quicksave")
        assert exc.details["save_id"] == "quicksave"

    def test_configuration_error_key(self) -> None:
        """Test ConfigurationError records the config key."""
        exc = ConfigurationError("Bad value", config_key="min_chance")
        assert exc.details["config_key"] == "min_chance"

    def test_validation_error_field(self) -> None:
        """Test ValidationError records field and value."""
        exc = ValidationError("Out of range", field_name="values", invalid_value=1.5)
        assert exc.details == {"field_name": "values", "invalid_value": 1.5}

    def test_catch_all(self) -> None:
        """Test that every engine error is caught by the base class."""
        with pytest.raises(LegendsEngineError):
            raise PersistenceError("Disk full")
