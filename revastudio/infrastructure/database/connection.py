"""Key-value database connection management.

The whole application state lives in a handful of keys, each holding the
JSON text of one collection (``users``, ``folders``, ``photos``) or one
scalar (``currentUserId``, ``language``). Collections are always read and
written whole.
"""
import json
import sqlite3
import threading
from pathlib import Path
from typing import Any, Optional, Protocol

from ...config import DATABASE_PATH, USERS_KEY, FOLDERS_KEY, PHOTOS_KEY


class KeyValueStore(Protocol):
    """Protocol for the durable key-value backend."""

    def get(self, key: str) -> Optional[str]: ...
    def set(self, key: str, value: str) -> None: ...
    def delete(self, key: str) -> None: ...


class SQLiteKeyValueStore:
    """Key-value store kept in a single SQLite table.

    Every ``set`` commits immediately, so the store is flushed on every
    mutating call.
    """

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._conn.execute(
            "CREATE TABLE IF NOT EXISTS kv (key TEXT PRIMARY KEY, value TEXT NOT NULL)"
        )
        self._conn.commit()

    def get(self, key: str) -> Optional[str]:
        row = self._conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        self._conn.execute(
            "INSERT INTO kv (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
            (key, value)
        )
        self._conn.commit()

    def delete(self, key: str) -> None:
        self._conn.execute("DELETE FROM kv WHERE key = ?", (key,))
        self._conn.commit()

    def close(self) -> None:
        self._conn.close()


class MemoryKeyValueStore:
    """In-memory key-value store (tests and throwaway sessions)."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def close(self) -> None:
        pass


def load_json(store: KeyValueStore, key: str, default: Any = None) -> Any:
    """Read and decode a JSON value, returning ``default`` when absent."""
    raw = store.get(key)
    if raw is None:
        return default
    return json.loads(raw)


def dump_json(store: KeyValueStore, key: str, value: Any) -> None:
    """Encode and write a JSON value (compact, like JSON.stringify)."""
    store.set(key, json.dumps(value, separators=(",", ":"), ensure_ascii=False))


# Process-wide store
_store: Optional[KeyValueStore] = None
_lock = threading.Lock()


def get_db() -> KeyValueStore:
    """Get the shared key-value store, opening it on first use."""
    global _store
    with _lock:
        if _store is None:
            _store = SQLiteKeyValueStore(DATABASE_PATH)
        return _store


def set_db(store: Optional[KeyValueStore]) -> None:
    """Replace the shared store (used by tests and embedding callers)."""
    global _store
    with _lock:
        if _store is not None and _store is not store and hasattr(_store, "close"):
            _store.close()
        _store = store


def init_db(store: Optional[KeyValueStore] = None) -> KeyValueStore:
    """Open the store and make sure every collection key exists."""
    if store is not None:
        set_db(store)
    db = get_db()
    for key in (USERS_KEY, FOLDERS_KEY, PHOTOS_KEY):
        if db.get(key) is None:
            dump_json(db, key, [])
    return db
