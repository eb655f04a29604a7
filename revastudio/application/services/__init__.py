"""Application services - business logic layer."""

from .quota_service import QuotaService
from .folder_service import FolderService, FolderCycleError
from .photo_service import PhotoService
from .user_service import UserService
from .auth_service import AuthService

__all__ = [
    "QuotaService",
    "FolderService",
    "FolderCycleError",
    "PhotoService",
    "UserService",
    "AuthService",
]
