"""Folder management routes."""
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..application.services import FolderService, PhotoService
from ..dependencies import get_folder_service, get_photo_service, require_user

router = APIRouter(prefix="/api/folders", tags=["folders"])


# Pydantic models for request validation
class FolderCreate(BaseModel):
    name: str
    parent_id: str | None = None


class FolderUpdate(BaseModel):
    name: str


@router.get("")
def list_folders(
    user: dict = Depends(require_user),
    folders: FolderService = Depends(get_folder_service)
):
    """Flat list of the user's folders."""
    return folders.list_folders(user["id"])


@router.get("/tree")
def folder_tree(
    user: dict = Depends(require_user),
    folders: FolderService = Depends(get_folder_service)
):
    """Nested tree under a synthetic "all photos" root."""
    return [{
        "id": None,
        "name": "Todas as fotos",
        "children": folders.get_folder_tree(user["id"])
    }]


@router.post("")
def create_folder(
    data: FolderCreate,
    user: dict = Depends(require_user),
    folders: FolderService = Depends(get_folder_service)
):
    return folders.create_folder(user["id"], data.name, data.parent_id)


@router.put("/{folder_id}")
def rename_folder(
    folder_id: str,
    data: FolderUpdate,
    strict: bool = False,
    user: dict = Depends(require_user),
    folders: FolderService = Depends(get_folder_service)
):
    """Rename a folder. A vanished folder is ignored unless ``strict``."""
    folder = folders.rename_folder(folder_id, data.name, user_id=user["id"], strict=strict)
    return {"status": "ok" if folder else "not_found", "folder": folder}


@router.delete("/{folder_id}")
async def delete_folder(
    folder_id: str,
    strict: bool = False,
    user: dict = Depends(require_user),
    folders: FolderService = Depends(get_folder_service),
    photos: PhotoService = Depends(get_photo_service)
):
    """Delete a folder with its subfolders; photos inside are deleted too."""
    removed = folders.delete_folder(folder_id, user_id=user["id"], strict=strict)
    failures = await photos.cleanup_remote(removed)
    return {"status": "ok", "deletedPhotos": len(removed), "remoteFailures": failures}


@router.get("/{folder_id}/breadcrumbs")
def breadcrumbs(
    folder_id: str,
    strict: bool = False,
    user: dict = Depends(require_user),
    folders: FolderService = Depends(get_folder_service)
):
    return folders.get_breadcrumbs(folder_id, user_id=user["id"], strict=strict)
