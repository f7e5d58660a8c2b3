"""Exception hierarchy for the Legends narrative engine.

Only programming and session-state errors are raised. Recoverable
conditions (missing templates, unknown stats, insufficient mana, failed
saves) are handled where they occur and surface as absent results.

Every exception carries a ``details`` mapping. Keyword context given to a
subclass (``enemy_id=``, ``save_id=`` ...) is folded into it, skipping
values that were not supplied.

Example:
    Raising ``CombatError("Combat already resolved", enemy_id="bandit")``
    renders as ``Combat already resolved [enemy_id='bandit']``.
"""

from __future__ import annotations

from typing import Any


class LegendsEngineError(Exception):
    """Root of every engine error.

    Args:
        message: Human-readable description.
        details: Extra context for logs and debugging.
        **context: Named context merged into details when not None.

    Attributes:
        message: Human-readable description.
        details: Context mapping, possibly empty.
    """

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
        **context: Any,
    ) -> None:
        self.message = message
        self.details = dict(details or {})
        self.details.update({key: value for key, value in context.items() if value is not None})
        super().__init__(str(self))

    def __str__(self) -> str:
        if not self.details:
            return self.message
        rendered = ", ".join(f"{key}={value!r}" for key, value in self.details.items())
        return f"{self.message} [{rendered}]"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Session & Combat
# =============================================================================


class GameEngineError(LegendsEngineError):
    """Errors raised while driving a session."""


class InvalidGameStateError(GameEngineError):
    """An operation was attempted in the wrong session state.

    Raised for story choices during combat, combat actions outside combat
    and any action before ``new_game``.

    Context:
        current_state: State the session was in.
        expected_states: States in which the operation is allowed.
    """

    def __init__(
        self,
        message: str,
        *,
        current_state: str | None = None,
        expected_states: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            details=details,
            current_state=current_state,
            expected_states=expected_states or None,
        )


class CombatError(GameEngineError):
    """A combat session was stepped outside the ``in_progress`` phase."""

    def __init__(
        self,
        message: str,
        *,
        enemy_id: str | None = None,
        round_number: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details, enemy_id=enemy_id, round_number=round_number)


class TemplateError(GameEngineError):
    """Authored content is inconsistent, e.g. two stories share an id."""

    def __init__(
        self,
        message: str,
        *,
        template_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details, template_id=template_id)


# =============================================================================
# Persistence
# =============================================================================


class PersistenceError(LegendsEngineError):
    """A save slot could not be read or written.

    Internal to the save store; its public methods log it and return None
    or False instead.
    """

    def __init__(
        self,
        message: str,
        *,
        save_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details, save_id=save_id)


# =============================================================================
# Configuration & Validation
# =============================================================================


class ConfigurationError(LegendsEngineError):
    """Settings failed to load or hold an inconsistent combination."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details, config_key=config_key)


class ValidationError(LegendsEngineError):
    """An engine input is out of its allowed range.

    Distinct from ``pydantic.ValidationError``, which model parsing raises.
    """

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            details=details,
            field_name=field_name,
            invalid_value=invalid_value,
        )


__all__ = [
    "LegendsEngineError",
    "GameEngineError",
    "InvalidGameStateError",
    "CombatError",
    "TemplateError",
    "PersistenceError",
    "ConfigurationError",
    "ValidationError",
]
