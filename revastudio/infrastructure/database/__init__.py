"""Key-value database access."""
from .connection import (
    KeyValueStore,
    SQLiteKeyValueStore,
    MemoryKeyValueStore,
    get_db,
    set_db,
    init_db,
    load_json,
    dump_json,
)

__all__ = [
    "KeyValueStore",
    "SQLiteKeyValueStore",
    "MemoryKeyValueStore",
    "get_db",
    "set_db",
    "init_db",
    "load_json",
    "dump_json",
]
