"""Session repository - active user and language scalars."""
from typing import Optional

from ...config import CURRENT_USER_KEY, LANGUAGE_KEY, DEFAULT_LANGUAGE
from ..database import KeyValueStore


class SessionRepository:
    """Scalar session state stored beside the collections.

    ``currentUserId`` marks the signed-in user; ``language`` is the UI
    language preference. Both are raw strings, not JSON.
    """

    def __init__(self, store: KeyValueStore):
        self._store = store

    def get_current_user_id(self) -> Optional[str]:
        return self._store.get(CURRENT_USER_KEY)

    def set_current_user_id(self, user_id: str) -> None:
        self._store.set(CURRENT_USER_KEY, user_id)

    def clear(self) -> None:
        self._store.delete(CURRENT_USER_KEY)

    def get_language(self) -> str:
        return self._store.get(LANGUAGE_KEY) or DEFAULT_LANGUAGE

    def set_language(self, language: str) -> None:
        self._store.set(LANGUAGE_KEY, language)
