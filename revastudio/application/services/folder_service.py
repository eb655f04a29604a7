"""Folder service - folder tree engine and folder management.

Folders are stored flat; the hierarchy is derived from ``parentId``. The
module-level functions are pure and operate on any folder list. The
service applies them to one user's folders and executes cascade deletes.
"""
from typing import Optional, List, Dict

from fastapi import HTTPException

from ...infrastructure.repositories import FolderRepository, PhotoRepository
from ...models import FolderRename


class FolderCycleError(Exception):
    """The parentId graph contains a cycle (corrupted data)."""

    def __init__(self, folder_id: str):
        super().__init__(f"Folder cycle detected at {folder_id}")
        self.folder_id = folder_id


def children_of(folders: List[dict], parent_id: Optional[str]) -> List[dict]:
    """Folders whose parentId equals ``parent_id`` (None matches root)."""
    return [f for f in folders if f.get("parentId") == parent_id]


def _children_index(folders: List[dict]) -> Dict[Optional[str], List[str]]:
    index: Dict[Optional[str], List[str]] = {}
    for folder in folders:
        index.setdefault(folder.get("parentId"), []).append(folder["id"])
    return index


def descendant_ids(folders: List[dict], root_id: str) -> List[str]:
    """Every folder id reachable below ``root_id``, excluding ``root_id``.

    Iterative depth-first walk. A folder reached twice means the parentId
    graph has a cycle.

    Raises:
        FolderCycleError: If a cycle is found
    """
    index = _children_index(folders)
    visited = {root_id}
    result: List[str] = []
    stack = [root_id]

    while stack:
        current = stack.pop()
        for child_id in index.get(current, []):
            if child_id in visited:
                raise FolderCycleError(child_id)
            visited.add(child_id)
            result.append(child_id)
            stack.append(child_id)

    return result


def build_tree(folders: List[dict], parent_id: Optional[str] = None) -> List[dict]:
    """Nested ``{id, name, parentId, children}`` nodes below ``parent_id``.

    Raises:
        FolderCycleError: If a folder is reached twice
    """
    index: Dict[Optional[str], List[dict]] = {}
    for folder in folders:
        index.setdefault(folder.get("parentId"), []).append(folder)

    roots: List[dict] = []
    seen = set()
    stack = [(parent_id, roots)]
    while stack:
        current_id, siblings = stack.pop()
        for folder in index.get(current_id, []):
            if folder["id"] in seen:
                raise FolderCycleError(folder["id"])
            seen.add(folder["id"])
            node = {
                "id": folder["id"],
                "name": folder["name"],
                "parentId": folder.get("parentId"),
                "children": []
            }
            siblings.append(node)
            stack.append((folder["id"], node["children"]))

    return roots


class FolderService:
    """Service for folder management operations.

    Responsibilities:
    - Folder creation with parent validation
    - Rename (no sibling-uniqueness rule)
    - Cascade delete of subfolders and the photos inside them
    - Tree and breadcrumb views

    Folders cannot be re-parented once created.
    """

    def __init__(
        self,
        folder_repository: FolderRepository,
        photo_repository: PhotoRepository,
        photo_service=None
    ):
        self.folder_repo = folder_repository
        self.photo_repo = photo_repository
        self.photo_service = photo_service

    def create_folder(self, user_id: str, name: str, parent_id: Optional[str] = None) -> dict:
        """Create a new folder.

        Args:
            user_id: Owner user ID
            name: Folder name (stripped, must not be empty)
            parent_id: Optional parent folder ID

        Returns:
            Created folder dict

        Raises:
            HTTPException: On validation errors or permission issues
        """
        name = (name or "").strip()
        if not name:
            raise HTTPException(status_code=400, detail="Folder name is required")

        if parent_id:
            parent = self.folder_repo.get_by_id(parent_id)
            if not parent:
                raise HTTPException(status_code=404, detail="Parent folder not found")
            if parent["userId"] != user_id:
                raise HTTPException(
                    status_code=403,
                    detail="Cannot create folder in another user's folder"
                )

        return self.folder_repo.create(user_id, name, parent_id or None)

    def rename_folder(
        self,
        folder_id: str,
        new_name: str,
        user_id: Optional[str] = None,
        strict: bool = False
    ) -> Optional[dict]:
        """Rename a folder. Sibling folders may share a name.

        Args:
            folder_id: Folder ID to rename
            new_name: New name (stripped, must not be empty)
            user_id: Requesting user; must own the folder when given
            strict: Raise 404 instead of ignoring a missing folder

        Returns:
            Updated folder dict, or None when the folder no longer exists
        """
        new_name = (new_name or "").strip()
        if not new_name:
            raise HTTPException(status_code=400, detail="Folder name is required")

        folder = self._get_owned(folder_id, user_id, strict)
        if folder is None:
            return None

        self.folder_repo.rename(folder_id, FolderRename(name=new_name))
        return self.folder_repo.get_by_id(folder_id)

    def delete_folder(
        self,
        folder_id: str,
        user_id: Optional[str] = None,
        strict: bool = False
    ) -> List[dict]:
        """Delete a folder, every subfolder, and every photo inside them.

        Photos are deleted permanently (quota-adjusting), not moved to root.

        Args:
            folder_id: Folder ID to delete
            user_id: Requesting user; must own the folder when given
            strict: Raise 404 instead of ignoring a missing folder

        Returns:
            Deleted photo records, for remote object cleanup

        Raises:
            HTTPException: 409 if the folder data contains a cycle
        """
        folder = self._get_owned(folder_id, user_id, strict)
        if folder is None:
            return []

        folders = self.folder_repo.list_by_user(folder["userId"])
        try:
            doomed = set(descendant_ids(folders, folder_id))
        except FolderCycleError as e:
            print(f"[folders] {e} while deleting {folder_id}")
            raise HTTPException(status_code=409, detail="Folder structure is corrupted (cycle)")
        doomed.add(folder_id)

        removed_photos = []
        for photo in self.photo_repo.list_in_folders(doomed):
            if self.photo_service is not None:
                deleted = self.photo_service.delete_photo(photo["id"])
            else:
                deleted = photo if self.photo_repo.delete(photo["id"]) else None
            if deleted:
                removed_photos.append(deleted)

        self.folder_repo.delete_by_ids(doomed)
        return removed_photos

    def list_folders(self, user_id: str) -> List[dict]:
        return self.folder_repo.list_by_user(user_id)

    def get_folder_tree(self, user_id: str) -> List[dict]:
        """Nested folder tree for the user's sidebar.

        Raises:
            HTTPException: 409 if the folder data contains a cycle
        """
        try:
            return build_tree(self.folder_repo.list_by_user(user_id))
        except FolderCycleError as e:
            print(f"[folders] {e} while building tree for {user_id}")
            raise HTTPException(status_code=409, detail="Folder structure is corrupted (cycle)")

    def get_breadcrumbs(
        self,
        folder_id: str,
        user_id: Optional[str] = None,
        strict: bool = False
    ) -> List[dict]:
        """Get breadcrumb path from root to folder.

        Args:
            folder_id: Target folder ID
            user_id: Requesting user; must own the folder when given
            strict: Raise 404 instead of returning an empty path

        Returns:
            List of {id, name} dicts from root to target
        """
        folder = self._get_owned(folder_id, user_id, strict)
        if folder is None:
            return []

        by_id = {f["id"]: f for f in self.folder_repo.list_by_user(folder["userId"])}
        breadcrumbs = []
        seen = set()
        current_id = folder_id

        while current_id and current_id not in seen:
            folder = by_id.get(current_id)
            if not folder:
                break
            seen.add(current_id)
            breadcrumbs.insert(0, {"id": folder["id"], "name": folder["name"]})
            current_id = folder.get("parentId")

        return breadcrumbs

    def _get_owned(self, folder_id: str, user_id: Optional[str], strict: bool) -> Optional[dict]:
        folder = self.folder_repo.get_by_id(folder_id)
        if not folder:
            if strict:
                raise HTTPException(status_code=404, detail="Folder not found")
            return None

        if user_id is not None and folder["userId"] != user_id:
            raise HTTPException(status_code=403, detail="You don't own this folder")

        return folder
