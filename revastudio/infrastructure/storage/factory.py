"""Factory for creating upload gateways."""
from pathlib import Path
from typing import Optional

from ...config import (
    GATEWAY_BACKEND, GATEWAY_URL, GATEWAY_TIMEOUT,
    LOCAL_OBJECTS_DIR, LOCAL_BUCKET_NAME
)
from .base import GatewayConfig, UploadGateway
from .local_gateway import LocalUploadGateway


# Singleton instance
_gateway_instance: Optional[UploadGateway] = None


def get_gateway_config() -> GatewayConfig:
    """Get gateway configuration from the environment-backed config module.

    Environment variables:
    - REVA_GATEWAY_BACKEND: 'local' (default) or 'http'
    - REVA_GATEWAY_URL: Base URL of the remote API gateway
    - REVA_GATEWAY_TIMEOUT: Request timeout in seconds (default: 30)
    - REVA_LOCAL_OBJECTS_DIR: Object directory for the local backend
    - REVA_LOCAL_BUCKET: Bucket name reported by the local backend
    """
    if GATEWAY_BACKEND == "local":
        return GatewayConfig(
            backend="local",
            base_path=Path(LOCAL_OBJECTS_DIR),
            bucket_name=LOCAL_BUCKET_NAME
        )

    elif GATEWAY_BACKEND == "http":
        if not GATEWAY_URL:
            raise ValueError("REVA_GATEWAY_URL is required for the http gateway")
        return GatewayConfig(
            backend="http",
            base_url=GATEWAY_URL,
            timeout=GATEWAY_TIMEOUT
        )

    else:
        raise ValueError(f"Unknown gateway backend: {GATEWAY_BACKEND}")


def get_gateway_from_config(config: GatewayConfig) -> UploadGateway:
    """Create gateway from configuration.

    Args:
        config: Gateway configuration

    Returns:
        Gateway instance
    """
    if config.backend == "local":
        return LocalUploadGateway(config)

    elif config.backend == "http":
        from .http_gateway import HttpUploadGateway
        return HttpUploadGateway(config)

    else:
        raise ValueError(f"Unknown gateway backend: {config.backend}")


def get_gateway() -> UploadGateway:
    """Get or create singleton gateway instance."""
    global _gateway_instance

    if _gateway_instance is None:
        _gateway_instance = get_gateway_from_config(get_gateway_config())

    return _gateway_instance


def set_gateway(gateway: Optional[UploadGateway]) -> None:
    """Install a specific gateway instance (tests, embedding callers)."""
    global _gateway_instance
    _gateway_instance = gateway


def reset_gateway():
    """Reset gateway singleton (useful for testing)."""
    set_gateway(None)


async def close_gateway() -> None:
    """Release the singleton gateway's resources and drop it."""
    global _gateway_instance

    if _gateway_instance is not None:
        await _gateway_instance.aclose()
        _gateway_instance = None
