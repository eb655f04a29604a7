"""Remote object storage gateway.

Supports two backends: the remote HTTP API gateway and a local
filesystem emulation.
"""
from .base import (
    UploadGateway,
    GatewayConfig,
    UploadTarget,
    BatchUploadTarget,
    RemotePhoto,
    StorageError,
    FileNotFoundError,
    UploadError,
    DownloadError,
    DeleteError,
)
from .local_gateway import LocalUploadGateway
from .http_gateway import HttpUploadGateway
from .factory import (
    get_gateway, get_gateway_from_config, set_gateway, reset_gateway, close_gateway
)

__all__ = [
    "UploadGateway",
    "GatewayConfig",
    "UploadTarget",
    "BatchUploadTarget",
    "RemotePhoto",
    "StorageError",
    "FileNotFoundError",
    "UploadError",
    "DownloadError",
    "DeleteError",
    "LocalUploadGateway",
    "HttpUploadGateway",
    "get_gateway",
    "get_gateway_from_config",
    "set_gateway",
    "reset_gateway",
    "close_gateway",
]
