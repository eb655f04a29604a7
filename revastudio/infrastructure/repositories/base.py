"""Base repository over the key-value store.

Every collection is read whole, mutated in memory and written back whole.
There are no partial-document updates at the storage layer.
"""
from typing import Callable, List, Optional

from ..database import KeyValueStore, load_json, dump_json


class Repository:
    """Base repository class for one JSON collection.

    Subclasses set ``kind`` to the collection key.

    Example:
        class FolderRepository(Repository):
            kind = "folders"

            def list_by_user(self, user_id: str) -> list[dict]:
                return [f for f in self.list() if f["userId"] == user_id]
    """

    kind: str = ""

    def __init__(self, store: KeyValueStore):
        """Initialize repository with the key-value store.

        Args:
            store: Key-value backend (SQLite or in-memory)
        """
        self._store = store

    def list(self) -> List[dict]:
        """Return all records of this kind, or an empty list."""
        return load_json(self._store, self.kind, [])

    def save_all(self, records: List[dict]) -> None:
        """Persist the whole collection."""
        dump_json(self._store, self.kind, records)

    def get_by_id(self, record_id: str) -> dict | None:
        """Get record by ID.

        Args:
            record_id: Record id

        Returns:
            Record dict or None
        """
        return next((r for r in self.list() if r.get("id") == record_id), None)

    def exists(self, record_id: str) -> bool:
        return self.get_by_id(record_id) is not None

    def add(self, record: dict) -> dict:
        """Append a record and persist the collection.

        Args:
            record: Fully built record with an ``id``

        Returns:
            The stored record
        """
        records = self.list()
        records.append(record)
        self.save_all(records)
        return record

    def put(self, record_id: str, patch: dict) -> bool:
        """Shallow-merge ``patch`` into the record with ``record_id``.

        A missing id is a no-op; the return value tells the two apart.

        Args:
            record_id: Record id
            patch: Fields to overwrite

        Returns:
            True if the record existed and was updated
        """
        records = self.list()
        for index, record in enumerate(records):
            if record.get("id") == record_id:
                records[index] = {**record, **patch}
                self.save_all(records)
                return True
        return False

    def remove(self, predicate: Callable[[dict], bool]) -> int:
        """Drop every record matching ``predicate`` and persist the rest.

        Args:
            predicate: Returns True for records to remove

        Returns:
            Number of removed records
        """
        records = self.list()
        remaining = [r for r in records if not predicate(r)]
        removed = len(records) - len(remaining)
        if removed:
            self.save_all(remaining)
        return removed

    def _find(self, predicate: Callable[[dict], bool]) -> Optional[dict]:
        return next((r for r in self.list() if predicate(r)), None)
