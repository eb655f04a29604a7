"""Abstract upload gateway interface.

Binary photo payloads never pass through the metadata store. They go to
remote object storage through a gateway that hands out single-use write
targets and readable URLs.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class FileNotFoundError(StorageError):
    """Object not found in storage."""
    pass


class UploadError(StorageError):
    """Failed to obtain an upload target or transfer the payload."""
    pass


class DownloadError(StorageError):
    """Failed to obtain a readable URL or fetch the payload."""
    pass


class DeleteError(StorageError):
    """Failed to delete a remote object."""
    pass


@dataclass
class GatewayConfig:
    """Gateway configuration."""
    backend: str  # 'local' or 'http'

    # HTTP gateway settings
    base_url: Optional[str] = None
    timeout: float = 30.0

    # Local emulation settings
    base_path: Optional[Path] = None
    bucket_name: str = "local-bucket"

    def __post_init__(self):
        if self.backend == "local" and self.base_path is None:
            from ...config import LOCAL_OBJECTS_DIR
            self.base_path = Path(LOCAL_OBJECTS_DIR)


@dataclass
class UploadTarget:
    """Single-use write target returned by the gateway."""
    put_url: str
    object_key: str
    bucket: Optional[str] = None


@dataclass
class BatchUploadTarget:
    """Per-file result of a batch upload-target request."""
    file_name: str
    success: bool
    target: Optional[UploadTarget] = None
    error: Optional[str] = None


@dataclass
class RemotePhoto:
    """Object listed by the gateway for a remote folder."""
    key: str
    name: str
    size: int = 0
    last_modified: Optional[str] = None
    extra: dict = field(default_factory=dict)


class UploadGateway(ABC):
    """Contract the photo service depends on for remote object storage.

    Implementations:
    - HttpUploadGateway: remote API gateway issuing presigned S3 URLs
    - LocalUploadGateway: filesystem emulation for development and tests
    """

    @abstractmethod
    async def request_upload_target(self, file_name: str, file_type: str) -> UploadTarget:
        """Obtain a single-use write target.

        Args:
            file_name: Original file name
            file_type: MIME type

        Returns:
            UploadTarget with put URL, object key and bucket

        Raises:
            UploadError: If the gateway refuses or is unreachable
        """
        pass

    @abstractmethod
    async def request_upload_targets(
        self,
        files: list[tuple[str, str]],
        folder: Optional[str] = None
    ) -> list[BatchUploadTarget]:
        """Obtain write targets for several files at once.

        Args:
            files: List of (file_name, file_type) tuples
            folder: Optional remote folder prefix

        Returns:
            One BatchUploadTarget per input file, in order

        Raises:
            UploadError: If the whole request fails
        """
        pass

    @abstractmethod
    async def put_binary(self, put_url: str, content: bytes, content_type: str) -> None:
        """Transfer the payload to a write target.

        Raises:
            UploadError: On transport failure or non-2xx response
        """
        pass

    @abstractmethod
    async def request_download_target(self, object_key: str) -> str:
        """Get a readable URL for an object. Safe to call repeatedly.

        Raises:
            DownloadError: If no URL can be produced
        """
        pass

    @abstractmethod
    def proxy_image_url(self, object_key: str) -> str:
        """Always-available proxy URL for displaying an object."""
        pass

    @abstractmethod
    async def fetch_binary(self, url: str) -> bytes:
        """Read the payload behind a readable URL.

        Raises:
            FileNotFoundError: If the object does not exist
            DownloadError: On other failures
        """
        pass

    @abstractmethod
    async def delete_object(self, object_key: str) -> bool:
        """Remove a remote object.

        Returns:
            True if deleted, False if it did not exist

        Raises:
            DeleteError: If deletion fails or the gateway refuses it
        """
        pass

    @abstractmethod
    async def list_photos(self, folder_name: str) -> list[RemotePhoto]:
        """List objects stored under a remote folder name."""
        pass

    async def aclose(self) -> None:
        """Release any held resources."""
        pass
