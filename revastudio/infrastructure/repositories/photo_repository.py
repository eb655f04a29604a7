"""Photo repository - handles photo metadata records."""
from typing import Iterable, Optional

from ...config import PHOTOS_KEY
from ...models import PhotoMove
from .base import Repository

# Sentinel for "any folder" in list_by_user
ALL_FOLDERS = object()


class PhotoRepository(Repository):
    """Repository for photo metadata.

    The binary payload lives in remote object storage and is addressed by
    ``s3Key``; legacy records carry inline data in ``dataUrl`` instead.
    """

    kind = PHOTOS_KEY

    def list_by_user(self, user_id: str, folder_id=ALL_FOLDERS) -> list[dict]:
        """Get a user's photos, optionally restricted to one folder.

        Args:
            user_id: Owner user ID
            folder_id: Folder ID, None for root-level photos,
                or ALL_FOLDERS for every photo of the user

        Returns:
            List of photo dicts
        """
        photos = [p for p in self.list() if p.get("userId") == user_id]
        if folder_id is ALL_FOLDERS:
            return photos
        return [p for p in photos if p.get("folderId") == folder_id]

    def list_in_folders(self, folder_ids: Iterable[str]) -> list[dict]:
        ids = set(folder_ids)
        return [p for p in self.list() if p.get("folderId") in ids]

    def move(self, photo_id: str, folder_id: Optional[str]) -> bool:
        """Reassign a photo to another folder (None for root).

        Returns:
            True if photo existed and was moved
        """
        return self.put(photo_id, PhotoMove(folderId=folder_id).to_patch())

    def delete(self, photo_id: str) -> bool:
        return self.remove(lambda p: p.get("id") == photo_id) > 0

    def delete_by_user(self, user_id: str) -> int:
        return self.remove(lambda p: p.get("userId") == user_id)

    def total_size(self, user_id: str) -> int:
        return sum(int(p.get("size", 0)) for p in self.list_by_user(user_id))
