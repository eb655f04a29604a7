"""Remote API gateway client (presigned S3 URLs behind an HTTP API)."""
from typing import Optional
from urllib.parse import quote

import httpx

from .base import (
    UploadGateway,
    GatewayConfig,
    UploadTarget,
    BatchUploadTarget,
    RemotePhoto,
    StorageError,
    FileNotFoundError as StorageFileNotFoundError,
    UploadError,
    DownloadError,
    DeleteError
)


class HttpUploadGateway(UploadGateway):
    """Gateway backed by the remote HTTP API.

    Endpoints (JSON bodies):
    - POST /generate-upload-url    {fileName, fileType}
    - POST /generate-upload-urls   {files: [{fileName, fileType}], folder?}
    - GET  /generate-download-url  ?fileKey=
    - GET  /proxy-image            ?key=
    - POST /delete-image           {fileKey}
    - GET  /list-photos            ?folder=

    The binary transfer itself is a plain PUT to the presigned URL.
    """

    def __init__(self, config: GatewayConfig, client: Optional[httpx.AsyncClient] = None):
        """Initialize the HTTP gateway.

        Args:
            config: Gateway configuration with base_url
            client: Optional pre-built client (tests pass one with a mock transport)
        """
        if config.backend != "http":
            raise ValueError(f"HttpUploadGateway requires backend='http', got '{config.backend}'")
        if not config.base_url:
            raise ValueError("HttpUploadGateway requires a base_url")

        self.config = config
        self.base_url = config.base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=config.timeout)

    async def _request(self, method: str, path: str, **kwargs) -> dict:
        url = f"{self.base_url}{path}"
        response = await self._client.request(method, url, **kwargs)
        response.raise_for_status()
        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError as e:
            raise httpx.DecodingError(f"Invalid JSON from {path}: {e}", request=response.request)
        if not isinstance(data, dict):
            raise httpx.DecodingError(f"Unexpected JSON from {path}", request=response.request)
        return data

    async def request_upload_target(self, file_name: str, file_type: str) -> UploadTarget:
        try:
            data = await self._request(
                "POST", "/generate-upload-url",
                json={"fileName": file_name, "fileType": file_type}
            )
        except httpx.HTTPError as e:
            print(f"[gateway] upload URL request failed for {file_name}: {e}")
            raise UploadError(f"Failed to get upload URL for {file_name}: {e}")

        if "uploadUrl" not in data or "fileKey" not in data:
            raise UploadError(f"Malformed upload URL response for {file_name}")

        return UploadTarget(
            put_url=data["uploadUrl"],
            object_key=data["fileKey"],
            bucket=data.get("bucketName")
        )

    async def request_upload_targets(
        self,
        files: list[tuple[str, str]],
        folder: Optional[str] = None
    ) -> list[BatchUploadTarget]:
        if not files:
            return []

        payload = {"files": [{"fileName": name, "fileType": ftype} for name, ftype in files]}
        if folder:
            payload["folder"] = folder

        try:
            data = await self._request("POST", "/generate-upload-urls", json=payload)
        except httpx.HTTPError as e:
            print(f"[gateway] batch upload URL request failed: {e}")
            raise UploadError(f"Failed to get upload URLs: {e}")

        results = []
        for item in data.get("results", []):
            if item.get("success") and item.get("uploadUrl") and item.get("fileKey"):
                target = UploadTarget(
                    put_url=item["uploadUrl"],
                    object_key=item["fileKey"],
                    bucket=item.get("bucketName")
                )
                results.append(BatchUploadTarget(item.get("fileName", ""), True, target=target))
            elif item.get("success"):
                results.append(BatchUploadTarget(
                    item.get("fileName", ""), False, error="Malformed upload URL response"
                ))
            else:
                results.append(BatchUploadTarget(
                    item.get("fileName", ""), False, error=item.get("error", "Unknown error")
                ))
        return results

    async def put_binary(self, put_url: str, content: bytes, content_type: str) -> None:
        try:
            response = await self._client.put(
                put_url, content=content, headers={"Content-Type": content_type}
            )
        except httpx.HTTPError as e:
            print(f"[gateway] upload transfer failed: {e}")
            raise UploadError(f"Upload failed: {e}")

        if not response.is_success:
            raise UploadError(f"Upload failed: {response.status_code} {response.reason_phrase}")

    async def request_download_target(self, object_key: str) -> str:
        try:
            data = await self._request(
                "GET", "/generate-download-url", params={"fileKey": object_key}
            )
        except httpx.HTTPError as e:
            print(f"[gateway] download URL request failed for {object_key}: {e}")
            raise DownloadError(f"Failed to get download URL for {object_key}: {e}")

        url = data.get("downloadUrl")
        if not url:
            raise DownloadError(f"Malformed download URL response for {object_key}")
        return url

    def proxy_image_url(self, object_key: str) -> str:
        return f"{self.base_url}/proxy-image?key={quote(object_key, safe='')}"

    async def fetch_binary(self, url: str) -> bytes:
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as e:
            raise DownloadError(f"Failed to fetch {url}: {e}")

        if response.status_code == 404:
            raise StorageFileNotFoundError(f"Object not found: {url}")
        if not response.is_success:
            raise DownloadError(f"Failed to fetch {url}: {response.status_code}")
        return response.content

    async def delete_object(self, object_key: str) -> bool:
        try:
            data = await self._request("POST", "/delete-image", json={"fileKey": object_key})
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return False
            raise DeleteError(f"Failed to delete {object_key}: {e}")
        except httpx.HTTPError as e:
            raise DeleteError(f"Failed to delete {object_key}: {e}")

        if data.get("success", True) is False:
            raise DeleteError(f"Gateway refused to delete {object_key}: {data.get('error', 'unknown error')}")
        return True

    async def list_photos(self, folder_name: str) -> list[RemotePhoto]:
        try:
            data = await self._request("GET", "/list-photos", params={"folder": folder_name})
        except httpx.HTTPError as e:
            raise StorageError(f"Failed to list photos in {folder_name}: {e}")

        photos = []
        for item in data.get("photos", []):
            if not item.get("key"):
                raise StorageError(f"Malformed listing for {folder_name}: item without key")
            photos.append(RemotePhoto(
                key=item["key"],
                name=item.get("name") or item["key"].rsplit("/", 1)[-1],
                size=int(item.get("size", 0)),
                last_modified=item.get("lastModified"),
            ))
        return photos

    async def aclose(self) -> None:
        await self._client.aclose()
