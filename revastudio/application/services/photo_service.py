"""Photo service - uploads, moves, deletes and download URLs.

Upload order is fixed: quota check, write target, binary transfer, then
metadata and quota update. Nothing is written locally until the transfer
succeeded. Deletes are the other way round: local metadata always goes,
the remote object is removed on a best-effort basis.
"""
import asyncio
from typing import Optional, List

from fastapi import HTTPException

from ...infrastructure.repositories import (
    PhotoRepository, UserRepository, FolderRepository, ALL_FOLDERS
)
from ...infrastructure.storage import (
    UploadGateway, BatchUploadTarget, StorageError, DownloadError, get_gateway
)
from ...models import new_photo, is_legacy_photo
from .quota_service import QuotaService


class PhotoService:
    """Service for photo operations.

    Responsibilities:
    - File validation (images only)
    - Quota checks before any remote call
    - Remote transfer through the upload gateway
    - Metadata records and storageUsed bookkeeping
    - Moves between folders, deletes, download URLs
    """

    def __init__(
        self,
        photo_repository: PhotoRepository,
        user_repository: UserRepository,
        folder_repository: FolderRepository,
        quota_service: Optional[QuotaService] = None,
        gateway: Optional[UploadGateway] = None
    ):
        self.photo_repo = photo_repository
        self.user_repo = user_repository
        self.folder_repo = folder_repository
        self.quota = quota_service or QuotaService(user_repository)
        self.gateway = gateway or get_gateway()

    def list_photos(self, user_id: str, folder_id=ALL_FOLDERS) -> List[dict]:
        """Photos of a user, optionally only those directly in ``folder_id``."""
        return self.photo_repo.list_by_user(user_id, folder_id)

    async def upload(
        self,
        user_id: str,
        file_name: str,
        content: bytes,
        content_type: str,
        folder_id: Optional[str] = None
    ) -> dict:
        """Upload a single photo.

        Args:
            user_id: Uploading user ID
            file_name: Original file name
            content: File bytes
            content_type: MIME type (must be image/*)
            folder_id: Target folder ID (None for root)

        Returns:
            Created photo dict

        Raises:
            HTTPException: 400 invalid file, 404 unknown user or folder,
                413 quota exceeded, 502 remote transfer failure
        """
        self._validate_file(file_name, content_type)
        user = self._require_user(user_id)
        self._validate_folder(folder_id, user_id)

        size = len(content)
        self.quota.check_upload(user, size)

        try:
            target = await self.gateway.request_upload_target(file_name, content_type)
            await self.gateway.put_binary(target.put_url, content, content_type)
        except StorageError as e:
            print(f"[upload] {file_name} failed: {e}")
            raise HTTPException(status_code=502, detail=f"Upload failed: {e}")

        return self._record_upload(
            user_id, file_name, size, content_type, folder_id,
            target.object_key, target.bucket
        )

    async def upload_many(
        self,
        user_id: str,
        files: List[tuple[str, bytes, str]],
        folder_id: Optional[str] = None,
        remote_folder: Optional[str] = None
    ) -> List[dict]:
        """Upload a batch of photos with concurrent transfers.

        Each file is checked against the quota left after the files before
        it in the batch. Rejected files never reach the gateway.

        Args:
            user_id: Uploading user ID
            files: List of (file_name, content, content_type) tuples
            folder_id: Target folder ID (None for root)
            remote_folder: Optional remote folder prefix for the object keys

        Returns:
            One ``{fileName, success, photo | error}`` dict per input file
        """
        user = self._require_user(user_id)
        self._validate_folder(folder_id, user_id)

        results: List[dict] = [{"fileName": name, "success": False} for name, _, _ in files]
        accepted: List[int] = []
        projected = dict(user)
        for i, (file_name, content, content_type) in enumerate(files):
            try:
                self._validate_file(file_name, content_type)
                self.quota.check_upload(projected, len(content))
            except HTTPException as e:
                results[i]["error"] = e.detail
                continue
            projected["storageUsed"] = projected.get("storageUsed", 0) + len(content)
            accepted.append(i)

        if not accepted:
            return results

        try:
            targets = await self.gateway.request_upload_targets(
                [(files[i][0], files[i][2]) for i in accepted], folder=remote_folder
            )
        except StorageError as e:
            print(f"[upload] batch target request failed: {e}")
            for i in accepted:
                results[i]["error"] = f"Upload failed: {e}"
            return results

        if len(targets) < len(accepted):
            print(f"[upload] gateway returned {len(targets)} targets for {len(accepted)} files")
            targets = list(targets) + [
                BatchUploadTarget(files[i][0], False, error="No upload target returned")
                for i in accepted[len(targets):]
            ]

        async def transfer(i: int, batch_target) -> Optional[str]:
            if not batch_target.success:
                return batch_target.error or "Upload target refused"
            _, content, content_type = files[i]
            try:
                await self.gateway.put_binary(batch_target.target.put_url, content, content_type)
            except StorageError as e:
                return f"Upload failed: {e}"
            return None

        errors = await asyncio.gather(*(
            transfer(i, batch_target) for i, batch_target in zip(accepted, targets)
        ))

        for i, batch_target, error in zip(accepted, targets, errors):
            if error:
                print(f"[upload] {files[i][0]} failed: {error}")
                results[i]["error"] = error
                continue
            file_name, content, content_type = files[i]
            results[i]["success"] = True
            results[i]["photo"] = self._record_upload(
                user_id, file_name, len(content), content_type, folder_id,
                batch_target.target.object_key, batch_target.target.bucket
            )

        return results

    def move_photo(
        self,
        photo_id: str,
        folder_id: Optional[str],
        user_id: Optional[str] = None,
        strict: bool = False
    ) -> Optional[dict]:
        """Move a photo to another folder (None for root).

        Returns:
            Updated photo dict, or None when the photo no longer exists
        """
        photo = self._get_owned(photo_id, user_id, strict)
        if photo is None:
            return None

        self._validate_folder(folder_id, photo["userId"])
        self.photo_repo.move(photo_id, folder_id)
        return self.photo_repo.get_by_id(photo_id)

    def delete_photo(self, photo_id: str, user_id: Optional[str] = None, strict: bool = False) -> Optional[dict]:
        """Delete photo metadata and release its bytes from the owner's quota.

        Returns:
            The deleted photo dict, or None when it no longer exists
        """
        photo = self._get_owned(photo_id, user_id, strict)
        if photo is None:
            return None

        self.photo_repo.delete(photo_id)
        self.quota.apply_delta(photo["userId"], -int(photo.get("size", 0)))
        return photo

    async def delete_photo_everywhere(self, photo_id: str, user_id: Optional[str] = None, strict: bool = False) -> dict:
        """Delete metadata, then try to delete the remote object.

        Returns:
            Dict with ``deleted`` and ``remoteDeleted`` flags
        """
        photo = self.delete_photo(photo_id, user_id=user_id, strict=strict)
        if photo is None:
            return {"deleted": False, "remoteDeleted": False}

        failures = await self.cleanup_remote([photo])
        return {"deleted": True, "remoteDeleted": failures == 0}

    async def cleanup_remote(self, photos: List[dict]) -> int:
        """Best-effort removal of remote objects for already-deleted photos.

        Returns:
            Number of objects that could not be deleted
        """
        failures = 0
        for photo in photos:
            key = photo.get("s3Key")
            if not key:
                continue
            try:
                await self.gateway.delete_object(key)
            except StorageError as e:
                print(f"[delete] remote object {key} left behind: {e}")
                failures += 1
        return failures

    async def get_download_url(self, photo_id: str, user_id: Optional[str] = None) -> str:
        """Readable URL for a photo.

        Legacy records return their inline data URL. Remote records ask the
        gateway for a download URL and fall back to the proxy endpoint.

        Raises:
            HTTPException: 404 if the photo does not exist
        """
        photo = self._get_owned(photo_id, user_id, strict=True)
        if is_legacy_photo(photo) or not photo.get("s3Key"):
            return photo.get("dataUrl", "")

        try:
            return await self.gateway.request_download_target(photo["s3Key"])
        except DownloadError as e:
            print(f"[download] falling back to proxy for {photo['s3Key']}: {e}")
            return self.gateway.proxy_image_url(photo["s3Key"])

    async def list_remote_folder(self, folder_name: str) -> List[dict]:
        """Objects the gateway lists for a remote folder name."""
        try:
            photos = await self.gateway.list_photos(folder_name)
        except StorageError as e:
            raise HTTPException(status_code=502, detail=f"Listing failed: {e}")
        return [
            {
                "key": p.key,
                "name": p.name,
                "size": p.size,
                "lastModified": p.last_modified,
                "url": self.gateway.proxy_image_url(p.key),
            }
            for p in photos
        ]

    def delete_user_photos(self, user_id: str) -> List[dict]:
        """Drop every photo of a user (used when the user is deleted)."""
        photos = self.photo_repo.list_by_user(user_id)
        self.photo_repo.delete_by_user(user_id)
        return photos

    def _record_upload(
        self,
        user_id: str,
        file_name: str,
        size: int,
        content_type: str,
        folder_id: Optional[str],
        object_key: str,
        bucket: Optional[str]
    ) -> dict:
        photo = new_photo(
            user_id=user_id,
            name=file_name,
            size=size,
            content_type=content_type,
            folder_id=folder_id,
            s3_key=object_key,
            bucket_name=bucket,
            data_url=self.gateway.proxy_image_url(object_key),
        )
        self.photo_repo.add(photo)
        self.quota.apply_delta(user_id, size)
        return photo

    def _validate_file(self, file_name: str, content_type: str) -> None:
        if not file_name:
            raise HTTPException(status_code=400, detail="file is required")
        if not (content_type or "").startswith("image/"):
            raise HTTPException(status_code=400, detail=f"{file_name} is not a valid image")

    def _validate_folder(self, folder_id: Optional[str], user_id: str) -> None:
        if folder_id is None:
            return
        folder = self.folder_repo.get_by_id(folder_id)
        if not folder:
            raise HTTPException(status_code=404, detail="Folder not found")
        if folder["userId"] != user_id:
            raise HTTPException(status_code=403, detail="You don't own this folder")

    def _require_user(self, user_id: str) -> dict:
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    def _get_owned(self, photo_id: str, user_id: Optional[str], strict: bool) -> Optional[dict]:
        photo = self.photo_repo.get_by_id(photo_id)
        if not photo:
            if strict:
                raise HTTPException(status_code=404, detail="Photo not found")
            return None

        if user_id is not None and photo["userId"] != user_id:
            raise HTTPException(status_code=403, detail="You don't own this photo")

        return photo
