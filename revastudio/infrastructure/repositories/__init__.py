# Repository Pattern Implementation
"""
Repositories abstract key-value store operations.
Each entity collection has its own repository.

Usage:
    store = get_db()
    repo = FolderRepository(store)
    repo.list_by_user(user_id)
"""
from .base import Repository
from .user_repository import UserRepository
from .folder_repository import FolderRepository
from .photo_repository import PhotoRepository, ALL_FOLDERS
from .session_repository import SessionRepository

__all__ = [
    "Repository",
    "UserRepository",
    "FolderRepository",
    "PhotoRepository",
    "ALL_FOLDERS",
    "SessionRepository",
]
