"""Local filesystem emulation of the upload gateway."""
import uuid
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse, parse_qs, quote, unquote

import aiofiles

from .base import (
    UploadGateway,
    GatewayConfig,
    UploadTarget,
    BatchUploadTarget,
    RemotePhoto,
    FileNotFoundError as StorageFileNotFoundError,
    UploadError,
    DownloadError,
    DeleteError
)


class LocalUploadGateway(UploadGateway):
    """Gateway that stores objects on the local filesystem.

    Stores objects in directory structure:
        base_path/
            <bucket>/
                uploads/<uuid>-<file name>
                <folder>/<uuid>-<file name>

    Write targets are ``local://<bucket>/<key>?token=<uuid>`` URLs, valid
    for a single PUT. Readable URLs are ``file://`` URIs.
    """

    def __init__(self, config: GatewayConfig):
        """Initialize local gateway.

        Args:
            config: Gateway configuration with base_path
        """
        if config.backend != "local":
            raise ValueError(f"LocalUploadGateway requires backend='local', got '{config.backend}'")

        self.config = config
        self.bucket = config.bucket_name
        self.root = Path(config.base_path) / self.bucket
        self.root.mkdir(parents=True, exist_ok=True)
        self._pending: set[str] = set()

    def _object_path(self, object_key: str) -> Path:
        # Keep every object inside the bucket directory
        parts = [p for p in Path(object_key).parts if p not in ("..", "/", "")]
        return self.root.joinpath(*parts)

    def _new_target(self, file_name: str, folder: Optional[str] = None) -> UploadTarget:
        safe_name = Path(file_name).name or "file"
        object_key = f"{folder or 'uploads'}/{uuid.uuid4()}-{safe_name}"
        token = uuid.uuid4().hex
        self._pending.add(token)
        return UploadTarget(
            put_url=f"local://{self.bucket}/{quote(object_key)}?token={token}",
            object_key=object_key,
            bucket=self.bucket
        )

    async def request_upload_target(self, file_name: str, file_type: str) -> UploadTarget:
        if not file_name:
            raise UploadError("fileName is required")
        return self._new_target(file_name)

    async def request_upload_targets(
        self,
        files: list[tuple[str, str]],
        folder: Optional[str] = None
    ) -> list[BatchUploadTarget]:
        results = []
        for file_name, _file_type in files:
            if not file_name:
                results.append(BatchUploadTarget(file_name, False, error="fileName is required"))
                continue
            results.append(BatchUploadTarget(file_name, True, target=self._new_target(file_name, folder)))
        return results

    async def put_binary(self, put_url: str, content: bytes, content_type: str) -> None:
        parsed = urlparse(put_url)
        token = parse_qs(parsed.query).get("token", [None])[0]
        if parsed.scheme != "local" or parsed.netloc != self.bucket:
            raise UploadError(f"Not a write target of this gateway: {put_url}")
        if token not in self._pending:
            raise UploadError("Upload target expired or already used")
        self._pending.discard(token)

        file_path = self._object_path(unquote(parsed.path.lstrip("/")))
        file_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            async with aiofiles.open(file_path, "wb") as f:
                await f.write(content)
        except (IOError, OSError) as e:
            raise UploadError(f"Failed to write {file_path.name}: {e}")

    async def request_download_target(self, object_key: str) -> str:
        path = self._object_path(object_key)
        if not path.is_file():
            raise DownloadError(f"Object not found: {object_key}")
        return path.resolve().as_uri()

    def proxy_image_url(self, object_key: str) -> str:
        return self._object_path(object_key).resolve().as_uri()

    async def fetch_binary(self, url: str) -> bytes:
        parsed = urlparse(url)
        if parsed.scheme != "file":
            raise DownloadError(f"Unsupported URL: {url}")
        path = Path(unquote(parsed.path))
        if not path.is_file():
            raise StorageFileNotFoundError(f"Object not found: {url}")
        try:
            async with aiofiles.open(path, "rb") as f:
                return await f.read()
        except (IOError, OSError) as e:
            raise DownloadError(f"Failed to read {path.name}: {e}")

    async def delete_object(self, object_key: str) -> bool:
        path = self._object_path(object_key)
        if not path.exists():
            return False
        try:
            path.unlink()
            return True
        except OSError as e:
            raise DeleteError(f"Failed to delete {object_key}: {e}")

    async def list_photos(self, folder_name: str) -> list[RemotePhoto]:
        folder = self._object_path(folder_name)
        if not folder.is_dir():
            return []
        photos = []
        for path in sorted(folder.iterdir()):
            if not path.is_file():
                continue
            stat = path.stat()
            photos.append(RemotePhoto(
                key=f"{folder_name}/{path.name}",
                name=path.name.split("-", 5)[-1],
                size=stat.st_size,
            ))
        return photos
