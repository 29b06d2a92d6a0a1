"""
Progress persistence - key-value backends and the per-dataset ProgressStore.

Stores learner progress separately from content (the CSV datasets) so that:
- Content can be edited or reordered without losing progress
- Each dataset keeps its own snapshot, never mixed with another's

Backends implement a small namespaced key-value port:
- SQLiteKeyValueStore: ~/.prepdrill/progress.db
- InMemoryKeyValueStore: for tests and for running without a writable disk
"""

import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional, Protocol

from pydantic import ValidationError

from prepdrill.schemas import ProgressSnapshot

from .errors import PersistenceReadError, PersistenceWriteError
from .mastery import repair_snapshot


logger = logging.getLogger(__name__)

DEFAULT_PROGRESS_DIR = Path.home() / ".prepdrill"
DEFAULT_PROGRESS_DB = DEFAULT_PROGRESS_DIR / "progress.db"

PROGRESS_NAMESPACE = "progress"


class KeyValueStore(Protocol):
    """Namespaced string storage used by ProgressStore and PreferencesStore."""

    def get(self, namespace: str, key: str) -> Optional[str]:
        ...

    def set(self, namespace: str, key: str, value: str) -> None:
        ...


class InMemoryKeyValueStore:
    """Dictionary-backed store. Nothing survives the process."""

    def __init__(self):
        self._data: dict[tuple[str, str], str] = {}

    def get(self, namespace: str, key: str) -> Optional[str]:
        return self._data.get((namespace, key))

    def set(self, namespace: str, key: str, value: str) -> None:
        self._data[(namespace, key)] = value


class SQLiteKeyValueStore:
    """
    Key-value store in a SQLite file.

    Each operation opens its own connection, so the store can be shared
    across Streamlit reruns without holding a connection open.
    """

    def __init__(self, db_path: Optional[Path] = None):
        """
        Initialize the store.

        Args:
            db_path: Path to progress.db (default: ~/.prepdrill/progress.db)
        """
        self.db_path = Path(db_path) if db_path else DEFAULT_PROGRESS_DB
        try:
            self._ensure_database()
        except (sqlite3.Error, OSError) as e:
            # Reads and writes will fail and be absorbed by the callers
            logger.warning(f"Progress database unavailable at {self.db_path}: {e}")

    def _ensure_database(self):
        """Create database and table if they don't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(str(self.db_path))
        try:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    namespace TEXT NOT NULL,
                    key TEXT NOT NULL,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    PRIMARY KEY (namespace, key)
                );
            """)
            conn.commit()
        finally:
            conn.close()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a new database connection."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def get(self, namespace: str, key: str) -> Optional[str]:
        try:
            conn = self._get_connection()
            try:
                cursor = conn.execute(
                    """SELECT value FROM kv_store
                       WHERE namespace = ? AND key = ?""",
                    (namespace, key)
                )
                row = cursor.fetchone()
                return row["value"] if row else None
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise PersistenceReadError(f"Could not read {namespace}/{key}: {e}") from e

    def set(self, namespace: str, key: str, value: str) -> None:
        try:
            conn = self._get_connection()
            try:
                now = datetime.now().isoformat()
                conn.execute(
                    """INSERT INTO kv_store (namespace, key, value, updated_at)
                       VALUES (?, ?, ?, ?)
                       ON CONFLICT(namespace, key) DO UPDATE SET
                         value = excluded.value,
                         updated_at = excluded.updated_at""",
                    (namespace, key, value, now)
                )
                conn.commit()
            finally:
                conn.close()
        except (sqlite3.Error, OSError) as e:
            raise PersistenceWriteError(f"Could not write {namespace}/{key}: {e}") from e


class ProgressStore:
    """
    Load and save one ProgressSnapshot per dataset id.

    Never raises on read: missing or malformed data yields an empty
    snapshot. Write failures are logged and flag the store as degraded;
    the session keeps running in memory.
    """

    def __init__(self, backend: KeyValueStore):
        self.backend = backend
        self.degraded = False

    def load(self, dataset_id: str) -> ProgressSnapshot:
        """Stored snapshot for a dataset, or an empty one."""
        try:
            raw = self.backend.get(PROGRESS_NAMESPACE, dataset_id)
        except PersistenceReadError as e:
            logger.warning(f"Progress for '{dataset_id}' unreadable, starting empty: {e}")
            return ProgressSnapshot()

        if raw is None:
            return ProgressSnapshot()

        try:
            snapshot = ProgressSnapshot.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(
                f"Progress for '{dataset_id}' is malformed, starting empty "
                f"({e.error_count()} errors)"
            )
            return ProgressSnapshot()

        return repair_snapshot(snapshot)

    def save(self, dataset_id: str, snapshot: ProgressSnapshot):
        """Overwrite the stored snapshot for a dataset."""
        try:
            self.backend.set(PROGRESS_NAMESPACE, dataset_id, snapshot.model_dump_json())
        except PersistenceWriteError as e:
            if not self.degraded:
                logger.warning(f"Progress will not survive a reload: {e}")
            self.degraded = True

    def reset(self, dataset_id: str) -> ProgressSnapshot:
        """Replace a dataset's progress with an empty snapshot."""
        snapshot = ProgressSnapshot()
        self.save(dataset_id, snapshot)
        return snapshot
