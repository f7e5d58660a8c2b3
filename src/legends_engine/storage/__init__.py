"""Storage module for saved sessions.

Provides SQLite-based save slots holding serialized game snapshots, plus
JSON import and export.
"""

from legends_engine.storage.database import (
    SaveDatabase,
    SaveRecord,
    SaveStore,
    new_save_id,
)

__all__ = [
    "SaveDatabase",
    "SaveRecord",
    "SaveStore",
    "new_save_id",
]
