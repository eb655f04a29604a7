"""Unit tests for the HTTP upload gateway client."""
import json

import httpx
import pytest

from revastudio.infrastructure.storage import (
    GatewayConfig, HttpUploadGateway, UploadError, DownloadError, DeleteError,
    StorageError, FileNotFoundError
)

BASE_URL = "https://gateway.test/prod"


def make_gateway(handler) -> HttpUploadGateway:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpUploadGateway(GatewayConfig(backend="http", base_url=BASE_URL), client=client)


class TestConfiguration:

    def test_requires_http_backend(self):
        with pytest.raises(ValueError):
            HttpUploadGateway(GatewayConfig(backend="local", base_url=BASE_URL))

    def test_requires_base_url(self):
        with pytest.raises(ValueError):
            HttpUploadGateway(GatewayConfig(backend="http"))

    def test_proxy_url_escapes_key(self):
        gateway = make_gateway(lambda request: httpx.Response(200))
        assert gateway.proxy_image_url("uploads/a b.jpg") == (
            f"{BASE_URL}/proxy-image?key=uploads%2Fa%20b.jpg"
        )


class TestUploadTargets:

    @pytest.mark.asyncio
    async def test_request_upload_target(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={
                "uploadUrl": "https://s3.test/put?sig=1",
                "fileKey": "uploads/123-a.jpg",
                "bucketName": "reva-bucket",
            })

        gateway = make_gateway(handler)
        target = await gateway.request_upload_target("a.jpg", "image/jpeg")

        assert seen["path"] == "/prod/generate-upload-url"
        assert seen["body"] == {"fileName": "a.jpg", "fileType": "image/jpeg"}
        assert target.put_url == "https://s3.test/put?sig=1"
        assert target.object_key == "uploads/123-a.jpg"
        assert target.bucket == "reva-bucket"

    @pytest.mark.asyncio
    async def test_gateway_error_maps_to_upload_error(self):
        gateway = make_gateway(lambda request: httpx.Response(500, json={"error": "boom"}))
        with pytest.raises(UploadError):
            await gateway.request_upload_target("a.jpg", "image/jpeg")

    @pytest.mark.asyncio
    async def test_malformed_response(self):
        gateway = make_gateway(lambda request: httpx.Response(200, json={"fileKey": "k"}))
        with pytest.raises(UploadError):
            await gateway.request_upload_target("a.jpg", "image/jpeg")

    @pytest.mark.asyncio
    async def test_batch_targets(self):
        def handler(request):
            body = json.loads(request.content)
            assert body["folder"] == "Evento"
            return httpx.Response(200, json={"results": [
                {"fileName": "a.jpg", "success": True,
                 "uploadUrl": "https://s3.test/a", "fileKey": "Evento/1-a.jpg"},
                {"fileName": "b.jpg", "success": False, "error": "too big"},
            ]})

        gateway = make_gateway(handler)
        results = await gateway.request_upload_targets(
            [("a.jpg", "image/jpeg"), ("b.jpg", "image/jpeg")], folder="Evento"
        )

        assert results[0].success and results[0].target.object_key == "Evento/1-a.jpg"
        assert not results[1].success and results[1].error == "too big"

    @pytest.mark.asyncio
    async def test_empty_batch_makes_no_request(self):
        def handler(request):
            raise AssertionError("no request expected")

        assert await make_gateway(handler).request_upload_targets([]) == []


class TestPutBinary:

    @pytest.mark.asyncio
    async def test_put_sends_content_type(self):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["type"] = request.headers["content-type"]
            seen["body"] = request.content
            return httpx.Response(200)

        await make_gateway(handler).put_binary("https://s3.test/put", b"abc", "image/png")

        assert seen == {"method": "PUT", "type": "image/png", "body": b"abc"}

    @pytest.mark.asyncio
    async def test_put_rejected(self):
        gateway = make_gateway(lambda request: httpx.Response(403))
        with pytest.raises(UploadError):
            await gateway.put_binary("https://s3.test/put", b"abc", "image/png")

    @pytest.mark.asyncio
    async def test_put_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        with pytest.raises(UploadError):
            await make_gateway(handler).put_binary("https://s3.test/put", b"abc", "image/png")


class TestDownloadDeleteList:

    @pytest.mark.asyncio
    async def test_download_url(self):
        def handler(request):
            assert request.url.params["fileKey"] == "uploads/1-a.jpg"
            return httpx.Response(200, json={"downloadUrl": "https://s3.test/get"})

        url = await make_gateway(handler).request_download_target("uploads/1-a.jpg")
        assert url == "https://s3.test/get"

    @pytest.mark.asyncio
    async def test_download_url_failure(self):
        gateway = make_gateway(lambda request: httpx.Response(502))
        with pytest.raises(DownloadError):
            await gateway.request_download_target("k")

    @pytest.mark.asyncio
    async def test_fetch_missing_object(self):
        gateway = make_gateway(lambda request: httpx.Response(404))
        with pytest.raises(FileNotFoundError):
            await gateway.fetch_binary("https://s3.test/get")

    @pytest.mark.asyncio
    async def test_delete_object(self):
        def handler(request):
            assert json.loads(request.content) == {"fileKey": "k"}
            return httpx.Response(200, json={"success": True})

        assert await make_gateway(handler).delete_object("k") is True

    @pytest.mark.asyncio
    async def test_delete_missing_object(self):
        gateway = make_gateway(lambda request: httpx.Response(404))
        assert await gateway.delete_object("k") is False

    @pytest.mark.asyncio
    async def test_delete_failure(self):
        gateway = make_gateway(lambda request: httpx.Response(500))
        with pytest.raises(DeleteError):
            await gateway.delete_object("k")

    @pytest.mark.asyncio
    async def test_list_photos(self):
        def handler(request):
            assert request.url.params["folder"] == "Evento"
            return httpx.Response(200, json={"photos": [
                {"key": "Evento/1-a.jpg", "size": 10, "lastModified": "2024-01-01T00:00:00Z"},
                {"key": "Evento/2-b.jpg", "name": "b.jpg", "size": 20},
            ]})

        photos = await make_gateway(handler).list_photos("Evento")

        assert [p.name for p in photos] == ["1-a.jpg", "b.jpg"]
        assert photos[0].last_modified == "2024-01-01T00:00:00Z"

    @pytest.mark.asyncio
    async def test_list_failure(self):
        gateway = make_gateway(lambda request: httpx.Response(500))
        with pytest.raises(StorageError):
            await gateway.list_photos("Evento")


class TestMalformedResponses:
    """Refusals and undecodable bodies map to storage errors."""

    @pytest.mark.asyncio
    async def test_refused_delete(self):
        gateway = make_gateway(lambda request: httpx.Response(200, json={"success": False}))
        with pytest.raises(DeleteError):
            await gateway.delete_object("k")

    @pytest.mark.asyncio
    async def test_delete_with_non_json_body(self):
        gateway = make_gateway(lambda request: httpx.Response(200, text="OK"))
        with pytest.raises(DeleteError):
            await gateway.delete_object("k")

    @pytest.mark.asyncio
    async def test_upload_target_with_non_json_body(self):
        gateway = make_gateway(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(UploadError):
            await gateway.request_upload_target("a.jpg", "image/jpeg")

    @pytest.mark.asyncio
    async def test_download_url_with_json_list(self):
        gateway = make_gateway(lambda request: httpx.Response(200, json=["x"]))
        with pytest.raises(DownloadError):
            await gateway.request_download_target("k")

    @pytest.mark.asyncio
    async def test_batch_item_without_locator(self):
        gateway = make_gateway(lambda request: httpx.Response(200, json={"results": [
            {"fileName": "a.jpg", "success": True},
        ]}))

        results = await gateway.request_upload_targets([("a.jpg", "image/jpeg")])

        assert results[0].success is False
        assert results[0].error == "Malformed upload URL response"

    @pytest.mark.asyncio
    async def test_listing_item_without_key(self):
        gateway = make_gateway(lambda request: httpx.Response(200, json={"photos": [{"size": 3}]}))
        with pytest.raises(StorageError):
            await gateway.list_photos("Evento")
