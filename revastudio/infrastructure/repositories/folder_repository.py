"""Folder repository - handles the flat folders collection.

Folders form a forest per user through ``parentId``. Tree computations live
in the folder service; this layer only reads and writes records.
"""
from typing import Iterable, Optional

from ...config import FOLDERS_KEY
from ...models import FolderRename, new_folder
from .base import Repository


class FolderRepository(Repository):
    """Repository for folder records.

    Examples:
        >>> repo = FolderRepository(store)
        >>> root = repo.create(user_id, "Casamentos")
        >>> child = repo.create(user_id, "2024", parent_id=root["id"])
        >>> repo.list_by_user(user_id)
    """

    kind = FOLDERS_KEY

    def create(self, user_id: str, name: str, parent_id: Optional[str] = None) -> dict:
        """Create a new folder.

        Args:
            user_id: Owner user ID
            name: Folder name
            parent_id: Parent folder ID (None for root)

        Returns:
            Created folder dict
        """
        return self.add(new_folder(user_id, name, parent_id))

    def list_by_user(self, user_id: str) -> list[dict]:
        return [f for f in self.list() if f.get("userId") == user_id]

    def rename(self, folder_id: str, command: FolderRename) -> bool:
        """Update folder name.

        Returns:
            True if folder existed and was updated
        """
        return self.put(folder_id, command.to_patch())

    def delete_by_ids(self, folder_ids: Iterable[str]) -> int:
        ids = set(folder_ids)
        return self.remove(lambda f: f.get("id") in ids)
