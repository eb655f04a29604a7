"""Shared FastAPI dependencies and service factories."""
from fastapi import HTTPException

from .infrastructure.database import get_db
from .infrastructure.repositories import (
    UserRepository, FolderRepository, PhotoRepository, SessionRepository
)
from .infrastructure.storage import get_gateway
from .application.services import (
    QuotaService, FolderService, PhotoService, UserService, AuthService
)


def get_photo_service() -> PhotoService:
    """Create PhotoService with repositories and the configured gateway."""
    db = get_db()
    user_repo = UserRepository(db)
    return PhotoService(
        photo_repository=PhotoRepository(db),
        user_repository=user_repo,
        folder_repository=FolderRepository(db),
        quota_service=QuotaService(user_repo),
        gateway=get_gateway()
    )


def get_folder_service() -> FolderService:
    db = get_db()
    return FolderService(
        folder_repository=FolderRepository(db),
        photo_repository=PhotoRepository(db),
        photo_service=get_photo_service()
    )


def get_user_service() -> UserService:
    return UserService(UserRepository(get_db()), photo_service=get_photo_service())


def get_quota_service() -> QuotaService:
    return QuotaService(UserRepository(get_db()))


def get_auth_service() -> AuthService:
    db = get_db()
    user_repo = UserRepository(db)
    return AuthService(
        user_repository=user_repo,
        session_repository=SessionRepository(db),
        user_service=UserService(user_repo)
    )


def get_current_user() -> dict | None:
    """User of the active session, if any."""
    return get_auth_service().current_user()


def require_user() -> dict:
    """Require a signed-in user, raise 401 if there is none."""
    user = get_current_user()
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def require_admin() -> dict:
    """Require a signed-in admin, raise 403 for regular users."""
    user = require_user()
    if user.get("role") != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
