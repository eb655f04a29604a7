"""Test configuration and fixtures for Reva Studio.

This module provides isolated test environments:
- In-memory key-value store per test
- Local upload gateway writing under tmp_path
- Signed-in clients for user and admin flows
"""
import os
import sys
from pathlib import Path
from typing import Dict, Generator

import pytest
from fastapi.testclient import TestClient

# Ensure package is importable
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment BEFORE importing package modules
os.environ["REVA_SEED_USERS"] = "false"
os.environ["REVA_GATEWAY_BACKEND"] = "local"

from revastudio.infrastructure.database import MemoryKeyValueStore, init_db, set_db
from revastudio.infrastructure.repositories import (
    UserRepository, FolderRepository, PhotoRepository, SessionRepository
)
from revastudio.infrastructure.storage import (
    GatewayConfig, LocalUploadGateway, set_gateway, reset_gateway
)
from revastudio.application.services import (
    QuotaService, FolderService, PhotoService, UserService, AuthService
)
from tests.factories import make_user


@pytest.fixture
def store() -> MemoryKeyValueStore:
    """Fresh in-memory store with empty collections."""
    return init_db(MemoryKeyValueStore())


@pytest.fixture
def user_repo(store) -> UserRepository:
    return UserRepository(store)


@pytest.fixture
def folder_repo(store) -> FolderRepository:
    return FolderRepository(store)


@pytest.fixture
def photo_repo(store) -> PhotoRepository:
    return PhotoRepository(store)


@pytest.fixture
def session_repo(store) -> SessionRepository:
    return SessionRepository(store)


@pytest.fixture
def gateway(tmp_path: Path) -> LocalUploadGateway:
    """Local gateway storing objects under tmp_path."""
    return LocalUploadGateway(
        GatewayConfig(backend="local", base_path=tmp_path / "objects", bucket_name="test-bucket")
    )


@pytest.fixture
def quota_service(user_repo) -> QuotaService:
    return QuotaService(user_repo)


@pytest.fixture
def photo_service(photo_repo, user_repo, folder_repo, quota_service, gateway) -> PhotoService:
    return PhotoService(
        photo_repository=photo_repo,
        user_repository=user_repo,
        folder_repository=folder_repo,
        quota_service=quota_service,
        gateway=gateway
    )


@pytest.fixture
def folder_service(folder_repo, photo_repo, photo_service) -> FolderService:
    return FolderService(folder_repo, photo_repo, photo_service=photo_service)


@pytest.fixture
def user_service(user_repo, photo_service) -> UserService:
    return UserService(user_repo, photo_service=photo_service)


@pytest.fixture
def auth_service(user_repo, session_repo, user_service) -> AuthService:
    return AuthService(user_repo, session_repo, user_service=user_service)


@pytest.fixture
def test_user(user_repo) -> dict:
    """Regular user on the essencial plan."""
    return make_user(user_repo)


@pytest.fixture
def admin_user(user_repo) -> dict:
    return make_user(
        user_repo, email="admin@revastudio.com", password="admin123",
        name="Administrador", role="admin", plan="studio"
    )


# ============================================================================
# HTTP clients
# ============================================================================

@pytest.fixture
def client(store, gateway) -> Generator[TestClient, None, None]:
    """Test client bound to the isolated store and gateway.

    Usage:
        def test_something(client):
            response = client.get("/api/auth/language")
            assert response.status_code == 200
    """
    from revastudio.main import app

    set_db(store)
    set_gateway(gateway)
    with TestClient(app) as test_client:
        yield test_client
    set_db(None)
    reset_gateway()


@pytest.fixture
def authenticated_client(client: TestClient, test_user: Dict) -> TestClient:
    """Client signed in as test_user."""
    response = client.post(
        "/api/auth/login",
        json={"email": test_user["email"], "password": test_user["password"]}
    )
    assert response.status_code == 200, response.text
    return client


@pytest.fixture
def admin_client(client: TestClient, admin_user: Dict) -> TestClient:
    """Client signed in as admin_user."""
    response = client.post(
        "/api/auth/login",
        json={"email": admin_user["email"], "password": admin_user["password"]}
    )
    assert response.status_code == 200, response.text
    return client

