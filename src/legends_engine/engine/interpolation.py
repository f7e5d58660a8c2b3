"""Text interpolation for authored template strings.

Template strings reference context values with dotted names in braces::

    "As a {player.archetype}, you reach {location.name} this {world.time}."

Recognized families:

* ``player.name``, ``player.archetype``
* ``player.stats.<stat>`` (any stat, unknown stats render as 0)
* ``player.background.<field>``
* ``location.name|type|description`` and ``scene.location.*``
* ``world.<field>`` (time, weather, danger and any extra world field)

Anything else, or a reference whose context is missing, is left in the
text verbatim. Substitution is a single pass over the original string, so
a substituted value is never re-expanded.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from legends_engine.core.logging import get_logger
from legends_engine.models.game_state import GameState
from legends_engine.models.player import Player
from legends_engine.models.scene import Location


logger = get_logger(__name__)

REFERENCE_PATTERN = re.compile(r"\{([A-Za-z_]\w*(?:\.[A-Za-z_]\w*)+)\}")

_LOCATION_FIELDS = frozenset({"name", "type", "description"})


@dataclass(frozen=True)
class InterpolationContext:
    """Values available to template references.

    Attributes:
        player: The player character.
        game_state: Session state, for ``world.*`` references.
        location: Location of the scene being built, for ``location.*``.
    """

    player: Player
    game_state: GameState | None = None
    location: Location | None = None


def resolve_reference(path: str, context: InterpolationContext) -> str | None:
    """Resolve one dotted reference.

    Args:
        path: Reference without braces, e.g. ``player.stats.strength``.
        context: Values to resolve against.

    Returns:
        The rendered value, or None if the reference is not recognized or
        its context is missing.
    """
    parts = path.split(".")
    head, rest = parts[0], parts[1:]

    if head == "player":
        return _resolve_player(rest, context.player)
    if head == "scene" and rest[:1] == ["location"]:
        return _resolve_location(rest[1:], context.location)
    if head == "location":
        return _resolve_location(rest, context.location)
    if head == "world" and len(rest) == 1 and context.game_state is not None:
        return _render(context.game_state.world_state.get_field(rest[0]))
    return None


def _resolve_player(rest: list[str], player: Player) -> str | None:
    if rest == ["name"]:
        return player.name
    if rest == ["archetype"]:
        return player.archetype
    if len(rest) == 2 and rest[0] == "stats":
        return str(player.get_stat(rest[1], 0))
    if len(rest) == 2 and rest[0] == "background":
        background = player.background
        if rest[1] in type(background).model_fields:
            return _render(getattr(background, rest[1]))
        return _render((background.model_extra or {}).get(rest[1]))
    return None


def _resolve_location(rest: list[str], location: Location | None) -> str | None:
    if location is None or len(rest) != 1 or rest[0] not in _LOCATION_FIELDS:
        return None
    return getattr(location, rest[0])


def _render(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def interpolate(text: str | None, context: InterpolationContext) -> str:
    """Substitute every recognized reference in a template string.

    Args:
        text: Template string; None renders as an empty string.
        context: Values to resolve against.

    Returns:
        The substituted string. Unrecognized references are kept verbatim.

    Example:
        >>> interpolate("Hello {player.name} {mystery.value}", ctx)
        'Hello Aria {mystery.value}'
    """
    if not text:
        return ""

    def substitute(match: re.Match[str]) -> str:
        value = resolve_reference(match.group(1), context)
        if value is None:
            logger.debug("Unresolved template reference", reference=match.group(0))
            return match.group(0)
        return value

    return REFERENCE_PATTERN.sub(substitute, text)


def interpolate_all(texts: str | list[str] | None, context: InterpolationContext) -> list[str]:
    """Interpolate a single paragraph or an ordered list of paragraphs."""
    if texts is None:
        return []
    if isinstance(texts, str):
        return [interpolate(texts, context)]
    return [interpolate(text, context) for text in texts]


__all__ = [
    "REFERENCE_PATTERN",
    "InterpolationContext",
    "resolve_reference",
    "interpolate",
    "interpolate_all",
]
