"""Injectable randomness sources.

Every random decision in the engine draws from a single
``RandomnessProvider`` threaded through selection, the event gate, combat
and dialogue. Swapping in a ``SequenceRandomness`` makes a whole session
reproducible.
"""

from __future__ import annotations

import math
import random
from collections.abc import Sequence
from typing import Protocol, TypeVar, runtime_checkable

from legends_engine.core.exceptions import ValidationError


T = TypeVar("T")


@runtime_checkable
class RandomnessProvider(Protocol):
    """Source of uniform floats in ``[0, 1)``."""

    def next(self) -> float:
        """Return the next uniform value in ``[0, 1)``."""
        ...


class SeededRandomness:
    """Pseudo-random stream backed by a private ``random.Random``.

    Args:
        seed: Seed for reproducible streams; None seeds from the OS.
    """

    def __init__(self, seed: int | None = None) -> None:
        self.seed = seed
        self._random = random.Random(seed)

    def next(self) -> float:
        return self._random.random()

    def __repr__(self) -> str:
        return f"SeededRandomness(seed={self.seed!r})"


class SequenceRandomness:
    """Replays a fixed list of values, cycling when exhausted.

    Args:
        values: Values in ``[0, 1)``.

    Raises:
        ValidationError: If values is empty or holds an out-of-range value.

    Example:
        >>> rng = SequenceRandomness([0.5, 0.1])
        >>> rng.next(), rng.next(), rng.next()
        (0.5, 0.1, 0.5)
    """

    def __init__(self, values: Sequence[float]) -> None:
        if not values:
            raise ValidationError("Sequence must hold at least one value", field_name="values")
        for value in values:
            if not 0.0 <= value < 1.0:
                raise ValidationError(
                    "Sequence values must lie in [0, 1)",
                    field_name="values",
                    invalid_value=value,
                )
        self._values = tuple(float(value) for value in values)
        self._index = 0

    @property
    def draws(self) -> int:
        """Number of values handed out so far."""
        return self._index

    def next(self) -> float:
        value = self._values[self._index % len(self._values)]
        self._index += 1
        return value

    def __repr__(self) -> str:
        return f"SequenceRandomness(values={list(self._values)!r}, draws={self._index})"


# =============================================================================
# Helpers
# =============================================================================


def uniform_int(rng: RandomnessProvider, low: int, high: int) -> int:
    """Draw an integer uniformly from ``[low, high]`` inclusive.

    Args:
        rng: Randomness source.
        low: Lowest value.
        high: Highest value, not below low.

    Returns:
        ``low + floor(r * (high - low + 1))``.
    """
    return low + math.floor(rng.next() * (high - low + 1))


def choose(rng: RandomnessProvider, items: Sequence[T]) -> T:
    """Pick one item uniformly.

    Args:
        rng: Randomness source.
        items: Non-empty sequence.

    Returns:
        The chosen item.

    Raises:
        ValidationError: If items is empty.
    """
    if not items:
        raise ValidationError("Cannot choose from an empty sequence", field_name="items")
    return items[math.floor(rng.next() * len(items))]


__all__ = [
    "RandomnessProvider",
    "SeededRandomness",
    "SequenceRandomness",
    "uniform_int",
    "choose",
]
