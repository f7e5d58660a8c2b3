"""SQLite persistence layer for saved sessions.

Each save slot stores one serialized ``GameSnapshot`` plus a few summary
columns so save lists can be shown without deserializing every session.
The public API never raises for storage problems: failures are logged
and reported as ``None`` or ``False``.

Storage location: ~/.legends/saves.db (``LEGENDS_SAVE_DATABASE_PATH``).
"""

from __future__ import annotations

import json
import sqlite3
import time
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Generator, Protocol, runtime_checkable
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError

from legends_engine.core.config import get_settings
from legends_engine.core.constants import QUICKSAVE_SLOT
from legends_engine.core.exceptions import PersistenceError
from legends_engine.core.logging import get_logger
from legends_engine.models.snapshot import GameSnapshot


logger = get_logger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


def new_save_id() -> str:
    """Generate a fresh, timestamped save slot id."""
    return f"save_{_now_ms()}_{uuid4().hex[:6]}"


# =============================================================================
# Protocol
# =============================================================================


@runtime_checkable
class SaveStore(Protocol):
    """What the orchestrator needs from persistence."""

    def save(self, save_id: str | None, snapshot: GameSnapshot) -> str | None:
        """Store a snapshot, returning the slot id or None on failure."""
        ...

    def load(self, save_id: str) -> GameSnapshot | None:
        """Return the snapshot in a slot, or None."""
        ...


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class SaveRecord:
    """Summary of a saved session.

    Attributes:
        id: Save slot id.
        player_name: Name of the saved player.
        archetype: Player archetype.
        level: Player level.
        scene_title: Title of the scene the player was in.
        location: Location name of that scene.
        timestamp: Snapshot capture time, epoch milliseconds.
    """

    id: str
    player_name: str
    archetype: str
    level: int
    scene_title: str
    location: str
    timestamp: int

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> SaveRecord:
        """Create from database row."""
        return cls(
            id=row[0],
            player_name=row[1],
            archetype=row[2],
            level=row[3],
            scene_title=row[4],
            location=row[5],
            timestamp=row[6],
        )


# =============================================================================
# Database Class
# =============================================================================


class SaveDatabase:
    """SQLite-backed save slots.

    Args:
        db_path: Path to the database file; the configured path if None.
        max_saves: Slot limit; the oldest saves are evicted beyond it.
    """

    SCHEMA_VERSION = 1

    def __init__(self, db_path: str | Path | None = None, max_saves: int | None = None) -> None:
        storage = get_settings().storage
        self.db_path = Path(db_path) if db_path is not None else storage.save_database_path
        self.max_saves = max_saves if max_saves is not None else storage.max_saves

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

        logger.info("Save database initialized", path=str(self.db_path), max_saves=self.max_saves)

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection with proper cleanup."""
        conn = sqlite3.connect(str(self.db_path))
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self) -> None:
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                )
            """)
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS saves (
                    id TEXT PRIMARY KEY,
                    player_name TEXT NOT NULL,
                    archetype TEXT NOT NULL,
                    level INTEGER NOT NULL,
                    scene_title TEXT NOT NULL,
                    location TEXT NOT NULL,
                    timestamp INTEGER NOT NULL,
                    saved_at INTEGER NOT NULL,
                    snapshot_json TEXT NOT NULL
                )
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_saves_saved_at
                ON saves(saved_at DESC)
            """)
            cursor.execute(
                "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
                (self.SCHEMA_VERSION,),
            )

    # =========================================================================
    # Save Operations
    # =========================================================================

    def save(self, save_id: str | None, snapshot: GameSnapshot) -> str | None:
        """Store a snapshot in a slot, replacing any previous content.

        Args:
            save_id: Slot id; a new id is generated if None.
            snapshot: Session to store.

        Returns:
            The slot id, or None if the write failed.
        """
        save_id = save_id or new_save_id()
        try:
            self._write(save_id, snapshot)
        except PersistenceError as exc:
            logger.error("Save failed", save_id=save_id, error=str(exc))
            return None

        logger.info("Game saved", save_id=save_id, player=snapshot.player.name)
        return save_id

    def _write(self, save_id: str, snapshot: GameSnapshot) -> None:
        summary = snapshot.summary()
        try:
            with self._get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    INSERT OR REPLACE INTO saves
                    (id, player_name, archetype, level, scene_title, location,
                     timestamp, saved_at, snapshot_json)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    save_id,
                    summary["player_name"],
                    str(summary["archetype"]),
                    summary["level"],
                    summary["scene_title"],
                    summary["location"],
                    summary["timestamp"],
                    _now_ms(),
                    snapshot.model_dump_json(),
                ))
                # Evict everything beyond the newest max_saves slots
                cursor.execute("""
                    DELETE FROM saves WHERE id NOT IN (
                        SELECT id FROM saves ORDER BY saved_at DESC, rowid DESC LIMIT ?
                    )
                """, (self.max_saves,))
                if cursor.rowcount > 0:
                    logger.info("Old saves evicted", count=cursor.rowcount)
        except sqlite3.Error as exc:
            raise PersistenceError(f"Could not write save: {exc}", save_id=save_id) from exc

    def load(self, save_id: str) -> GameSnapshot | None:
        """Load the snapshot stored in a slot.

        Args:
            save_id: Slot id.

        Returns:
            The snapshot, or None if the slot is missing or unreadable.
        """
        try:
            return self._read(save_id)
        except PersistenceError as exc:
            logger.error("Load failed", save_id=save_id, error=str(exc))
            return None

    def _read(self, save_id: str) -> GameSnapshot | None:
        try:
            with self._get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT snapshot_json FROM saves WHERE id = ?", (save_id,))
                row = cursor.fetchone()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Could not read save: {exc}", save_id=save_id) from exc

        if row is None:
            logger.warning("Save not found", save_id=save_id)
            return None
        try:
            return GameSnapshot.model_validate_json(row[0])
        except PydanticValidationError as exc:
            raise PersistenceError(f"Corrupt save data: {exc}", save_id=save_id) from exc

    def list_saves(self) -> list[SaveRecord]:
        """Get all save slots, newest first.

        Returns:
            Summaries of every stored save.
        """
        try:
            with self._get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    SELECT id, player_name, archetype, level, scene_title, location, timestamp
                    FROM saves ORDER BY saved_at DESC, rowid DESC
                """)
                return [SaveRecord.from_row(tuple(row)) for row in cursor.fetchall()]
        except sqlite3.Error as exc:
            logger.error("Listing saves failed", error=str(exc))
            return []

    def delete_save(self, save_id: str) -> bool:
        """Delete a save slot.

        Args:
            save_id: Slot id.

        Returns:
            True if deleted, False if not found or the delete failed.
        """
        try:
            with self._get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("DELETE FROM saves WHERE id = ?", (save_id,))
                deleted = cursor.rowcount > 0
        except sqlite3.Error as exc:
            logger.error("Delete failed", save_id=save_id, error=str(exc))
            return False

        if deleted:
            logger.info("Save deleted", save_id=save_id)
        return deleted

    def quick_save(self, snapshot: GameSnapshot) -> str | None:
        """Store a snapshot in the quick save slot."""
        return self.save(QUICKSAVE_SLOT, snapshot)

    def quick_load(self) -> GameSnapshot | None:
        """Load the quick save slot."""
        return self.load(QUICKSAVE_SLOT)

    # =========================================================================
    # Import & Export
    # =========================================================================

    def export_save(self, save_id: str, path: str | Path) -> bool:
        """Write a save slot to a JSON file.

        Args:
            save_id: Slot to export.
            path: Destination file.

        Returns:
            True if the file was written.
        """
        snapshot = self.load(save_id)
        if snapshot is None:
            return False

        payload = {"id": save_id, **snapshot.model_dump(mode="json")}
        try:
            Path(path).write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as exc:
            logger.error("Export failed", save_id=save_id, path=str(path), error=str(exc))
            return False

        logger.info("Save exported", save_id=save_id, path=str(path))
        return True

    def import_save(self, path: str | Path) -> str | None:
        """Read a JSON save file into a new slot.

        The file must carry a ``player`` and a current scene
        (``current_scene`` or ``currentScene``). The imported save always
        gets a fresh id.

        Args:
            path: Source file.

        Returns:
            The new slot id, or None if the file is unreadable or invalid.
        """
        try:
            snapshot = self._parse_import(Path(path))
        except PersistenceError as exc:
            logger.error("Import failed", path=str(path), error=str(exc))
            return None
        return self.save(None, snapshot)

    @staticmethod
    def _parse_import(path: Path) -> GameSnapshot:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise PersistenceError(f"Unreadable save file: {exc}") from exc

        if not isinstance(data, dict) or "player" not in data:
            raise PersistenceError("Save file has no player")
        if "current_scene" not in data and "currentScene" not in data:
            raise PersistenceError("Save file has no current scene")

        data.pop("id", None)
        try:
            return GameSnapshot.model_validate(data)
        except PydanticValidationError as exc:
            raise PersistenceError(f"Invalid save data: {exc}") from exc


__all__ = [
    "SaveStore",
    "SaveRecord",
    "SaveDatabase",
    "new_save_id",
]
