"""Quota service - per-user storage accounting against plan limits.

``storageUsed`` is maintained incrementally: every photo add or remove goes
through ``apply_delta``. It is never recomputed from the photo collection.
"""
import math
from typing import Optional

from fastapi import HTTPException

from ...config import STORAGE_LIMITS
from ...infrastructure.repositories import UserRepository


def limit_for(plan: str) -> float:
    """Storage ceiling in bytes for a plan (``math.inf`` for studio).

    Raises:
        ValueError: For an unknown plan
    """
    try:
        return STORAGE_LIMITS[plan]
    except KeyError:
        raise ValueError(f"Unknown plan: {plan}")


def would_exceed(user: dict, incoming_bytes: int) -> bool:
    """True when adding ``incoming_bytes`` would pass the plan limit.

    Landing exactly on the limit is allowed.
    """
    limit = limit_for(user["plan"])
    if math.isinf(limit):
        return False
    return user.get("storageUsed", 0) + incoming_bytes > limit


def percentage_used(user: dict) -> float:
    """Percentage of the plan in use, 0 for unbounded plans."""
    limit = limit_for(user["plan"])
    if math.isinf(limit):
        return 0.0
    return user.get("storageUsed", 0) / limit * 100


def format_bytes(num_bytes: float) -> str:
    """Human readable size: ``0 Bytes``, ``1.5 KB``, ``100 GB``."""
    if num_bytes <= 0:
        return "0 Bytes"
    sizes = ["Bytes", "KB", "MB", "GB", "TB"]
    scaled = float(num_bytes)
    i = 0
    while scaled >= 1024 and i < len(sizes) - 1:
        scaled /= 1024
        i += 1
    value = math.floor(scaled * 100 + 0.5) / 100
    if value == int(value):
        value = int(value)
    return f"{value} {sizes[i]}"


def limit_label(plan: str) -> str:
    limit = limit_for(plan)
    return "Ilimitado" if math.isinf(limit) else format_bytes(limit)


class QuotaService:
    """Service for storage quota bookkeeping.

    Responsibilities:
    - Plan limit lookup
    - Pre-upload quota checks
    - Incremental storageUsed updates, clamped at zero
    - Usage summaries for dashboards
    """

    def __init__(self, user_repository: UserRepository):
        self.user_repo = user_repository

    def check_upload(self, user: dict, incoming_bytes: int) -> None:
        """Reject an upload that would pass the plan limit.

        Raises:
            HTTPException: 413 when the quota would be exceeded
        """
        if would_exceed(user, incoming_bytes):
            raise HTTPException(status_code=413, detail="Storage limit exceeded")

    def apply_delta(self, user_id: str, delta_bytes: int) -> Optional[int]:
        """Add ``delta_bytes`` to the user's storageUsed, never going below 0.

        Args:
            user_id: Owner user ID
            delta_bytes: Positive on photo add, negative on photo remove

        Returns:
            New storageUsed, or None if the user no longer exists
        """
        user = self.user_repo.get_by_id(user_id)
        if not user:
            return None

        storage_used = max(0, user.get("storageUsed", 0) + delta_bytes)
        self.user_repo.set_storage_used(user_id, storage_used)
        return storage_used

    def usage(self, user: dict) -> dict:
        """Usage summary for a user."""
        limit = limit_for(user["plan"])
        used = user.get("storageUsed", 0)
        return {
            "plan": user["plan"],
            "storageUsed": used,
            "storageUsedLabel": format_bytes(used),
            "limit": None if math.isinf(limit) else int(limit),
            "limitLabel": limit_label(user["plan"]),
            "percentage": percentage_used(user),
        }
