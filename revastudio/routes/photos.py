"""Photo routes - listing, uploads, moves, deletes, downloads, usage."""
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import BaseModel

from ..application.services import PhotoService, QuotaService
from ..dependencies import get_photo_service, get_quota_service, require_user
from ..infrastructure.repositories import ALL_FOLDERS

router = APIRouter(prefix="/api", tags=["photos"])

# Query value selecting photos that sit at the root (folderId = null)
ROOT_FOLDER = "root"


class PhotoMoveRequest(BaseModel):
    folder_id: str | None = None


def _folder_filter(folder_id: Optional[str]):
    if folder_id is None:
        return ALL_FOLDERS
    if folder_id == ROOT_FOLDER:
        return None
    return folder_id


@router.get("/photos")
def list_photos(
    folder_id: Optional[str] = None,
    user: dict = Depends(require_user),
    photos: PhotoService = Depends(get_photo_service)
):
    """All photos, ``?folder_id=root`` for root-level ones, or one folder."""
    return photos.list_photos(user["id"], _folder_filter(folder_id))


@router.post("/photos/upload")
async def upload_photos(
    files: List[UploadFile] = File(...),
    folder_id: Optional[str] = Form(None),
    user: dict = Depends(require_user),
    photos: PhotoService = Depends(get_photo_service)
):
    """Upload one or more images into a folder (root when omitted)."""
    batch = []
    for upload in files:
        content = await upload.read()
        batch.append((upload.filename or "", content, upload.content_type or ""))

    if len(batch) == 1:
        name, content, content_type = batch[0]
        photo = await photos.upload(user["id"], name, content, content_type, folder_id or None)
        return {"results": [{"fileName": name, "success": True, "photo": photo}]}

    return {"results": await photos.upload_many(user["id"], batch, folder_id or None)}


@router.put("/photos/{photo_id}/move")
def move_photo(
    photo_id: str,
    data: PhotoMoveRequest,
    strict: bool = False,
    user: dict = Depends(require_user),
    photos: PhotoService = Depends(get_photo_service)
):
    photo = photos.move_photo(photo_id, data.folder_id, user_id=user["id"], strict=strict)
    return {"status": "ok" if photo else "not_found", "photo": photo}


@router.delete("/photos/{photo_id}")
async def delete_photo(
    photo_id: str,
    strict: bool = False,
    user: dict = Depends(require_user),
    photos: PhotoService = Depends(get_photo_service)
):
    result = await photos.delete_photo_everywhere(photo_id, user_id=user["id"], strict=strict)
    return {"status": "ok" if result["deleted"] else "not_found", **result}


@router.get("/photos/{photo_id}/download-url")
async def download_url(
    photo_id: str,
    user: dict = Depends(require_user),
    photos: PhotoService = Depends(get_photo_service)
):
    return {"url": await photos.get_download_url(photo_id, user_id=user["id"])}


@router.get("/remote-photos")
async def remote_photos(
    folder: str,
    user: dict = Depends(require_user),
    photos: PhotoService = Depends(get_photo_service)
):
    """Objects stored under a remote folder name."""
    return {"photos": await photos.list_remote_folder(folder)}


@router.get("/storage")
def storage_usage(
    user: dict = Depends(require_user),
    photos: PhotoService = Depends(get_photo_service),
    quota: QuotaService = Depends(get_quota_service)
):
    return {**quota.usage(user), "totalPhotos": len(photos.list_photos(user["id"]))}
