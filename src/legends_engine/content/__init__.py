"""Bundled sample content for the Legends narrative engine."""

from legends_engine.content.default_catalog import default_catalog, default_dialogue_patterns

__all__ = [
    "default_catalog",
    "default_dialogue_patterns",
]
