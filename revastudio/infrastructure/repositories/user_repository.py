"""User repository - users collection and plan bookkeeping."""
from ...config import USERS_KEY
from ...models import UserUpdate, QuotaUpdate, new_user
from .base import Repository


class UserRepository(Repository):
    """Repository for user records.

    Emails are matched exactly as stored (case-sensitive).

    Examples:
        >>> repo = UserRepository(store)
        >>> user = repo.create({"email": "a@b.c", "password": "secret", ...})
        >>> repo.update(user["id"], UserUpdate(name="Ana"))
    """

    kind = USERS_KEY

    def create(self, data: dict) -> dict:
        """Create a user. ``id``, ``storageUsed`` and ``createdAt`` are generated.

        Args:
            data: User fields (email, password, name, role, plan, ...)

        Returns:
            Created user dict
        """
        return self.add(new_user(data))

    def get_by_email(self, email: str) -> dict | None:
        return self._find(lambda u: u.get("email") == email)

    def email_taken(self, email: str, exclude_id: str | None = None) -> bool:
        return any(
            u.get("email") == email and u.get("id") != exclude_id
            for u in self.list()
        )

    def list_by_role(self, role: str) -> list[dict]:
        return [u for u in self.list() if u.get("role") == role]

    def update(self, user_id: str, command: UserUpdate) -> bool:
        """Apply a typed user update.

        Returns:
            True if user existed and was updated
        """
        return self.put(user_id, command.to_patch())

    def clear_temporary_password(self, user_id: str) -> bool:
        """Drop the temporary password fields entirely."""
        records = self.list()
        for record in records:
            if record.get("id") == user_id:
                record.pop("temporaryPassword", None)
                record.pop("temporaryPasswordExpiry", None)
                self.save_all(records)
                return True
        return False

    def set_storage_used(self, user_id: str, storage_used: int) -> bool:
        return self.put(user_id, QuotaUpdate(storageUsed=storage_used).to_patch())

    def delete(self, user_id: str) -> bool:
        return self.remove(lambda u: u.get("id") == user_id) > 0
