"""Application layer - business logic services.

This layer contains application services that orchestrate repository and
gateway operations. Services do not depend on routes and can be tested in
isolation.
"""

from .services.folder_service import FolderService
from .services.photo_service import PhotoService
from .services.quota_service import QuotaService
from .services.user_service import UserService
from .services.auth_service import AuthService

__all__ = [
    "FolderService",
    "PhotoService",
    "QuotaService",
    "UserService",
    "AuthService",
]
