"""User service - admin CRUD over user accounts.

Passwords are stored and compared in plain text, as in the browser build.
"""
import re
from typing import Optional, List

from fastapi import HTTPException

from ...config import (
    STORAGE_LIMITS, PLAN_TYPES, PAYMENT_METHODS, ACCOUNT_STATUSES,
    MIN_PASSWORD_LENGTH
)
from ...infrastructure.repositories import UserRepository
from ...models import UserUpdate, new_plan_period, utc_now

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

PROFILE_FIELDS = ("cpf", "cnpj", "rg", "endereco", "telefone")


def validate_profile(data: dict, require_password: bool) -> None:
    """Validate signup or admin user form data.

    Raises:
        HTTPException: 400 on the first invalid field
    """
    for required in ("name", "email", "endereco", "telefone"):
        if not str(data.get(required) or "").strip():
            raise HTTPException(status_code=400, detail=f"{required} is required")

    if not EMAIL_PATTERN.match(data["email"]):
        raise HTTPException(status_code=400, detail="Invalid email")

    password = data.get("password") or ""
    if require_password and not password:
        raise HTTPException(status_code=400, detail="password is required")
    if password and len(password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Password must have at least {MIN_PASSWORD_LENGTH} characters"
        )

    if not data.get("cpf") and not data.get("cnpj"):
        raise HTTPException(status_code=400, detail="CPF or CNPJ is required")

    if data.get("plan", "essencial") not in STORAGE_LIMITS:
        raise HTTPException(status_code=400, detail="Invalid plan")
    if data.get("planType", "mensal") not in PLAN_TYPES:
        raise HTTPException(status_code=400, detail="Invalid billing cycle")
    if data.get("paymentMethod", "pix") not in PAYMENT_METHODS:
        raise HTTPException(status_code=400, detail="Invalid payment method")
    if data.get("accountStatus", "ativo") not in ACCOUNT_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid account status")


def public_user(user: dict) -> dict:
    """User dict without credentials."""
    hidden = {"password", "temporaryPassword"}
    return {k: v for k, v in user.items() if k not in hidden}


class UserService:
    """Service for user account management.

    Responsibilities:
    - Account creation with form validation and duplicate-email checks
    - Profile and plan edits with plan-history rollover
    - Account deletion (photos go with it)
    """

    def __init__(self, user_repository: UserRepository, photo_service=None):
        self.user_repo = user_repository
        self.photo_service = photo_service

    def list_users(self) -> List[dict]:
        """Customer accounts (admins are not listed)."""
        return self.user_repo.list_by_role("user")

    def get_user(self, user_id: str) -> dict:
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    def create_user(self, data: dict, role: str = "user") -> dict:
        """Create a customer account.

        Args:
            data: Form fields (name, email, password, plan, documents, ...)
            role: Account role

        Returns:
            Created user dict

        Raises:
            HTTPException: 400 on validation errors, 409 on duplicate email
        """
        validate_profile(data, require_password=True)
        if self.user_repo.email_taken(data["email"]):
            raise HTTPException(status_code=409, detail="Email already registered")

        plan = data.get("plan", "essencial")
        plan_type = data.get("planType", "mensal")
        payment = data.get("paymentMethod", "pix")

        record = {
            "email": data["email"],
            "password": data["password"],
            "name": data["name"].strip(),
            "role": role,
            "plan": plan,
            "planType": plan_type,
            "paymentMethod": payment,
            "accountStatus": "ativo",
            "planHistory": [new_plan_period(plan, plan_type, payment)],
        }
        for field in PROFILE_FIELDS:
            if data.get(field):
                record[field] = data[field]

        return self.user_repo.create(record)

    def update_user(self, user_id: str, data: dict, strict: bool = True) -> Optional[dict]:
        """Edit a user's profile and plan.

        A change of plan or billing cycle closes the current plan period and
        opens a new one. The password only changes when a new one is given.

        Returns:
            Updated user dict, or None for a missing user when not strict
        """
        current = self.user_repo.get_by_id(user_id)
        if not current:
            if strict:
                raise HTTPException(status_code=404, detail="User not found")
            return None

        merged = {**current, **{k: v for k, v in data.items() if v is not None}}
        merged["password"] = data.get("password") or ""
        validate_profile(merged, require_password=False)
        if self.user_repo.email_taken(merged["email"], exclude_id=user_id):
            raise HTTPException(status_code=409, detail="Email already registered")

        history = [dict(p) for p in current.get("planHistory") or []]
        plan_changed = (
            current.get("plan") != merged.get("plan")
            or current.get("planType") != merged.get("planType")
        )
        if plan_changed:
            if history:
                history[-1]["endDate"] = utc_now()
                history[-1]["status"] = "inativo"
            history.append(new_plan_period(
                merged["plan"], merged.get("planType", "mensal"),
                merged.get("paymentMethod", "pix")
            ))

        changes = {
            "name": merged["name"],
            "email": merged["email"],
            "plan": merged["plan"],
            "planType": merged.get("planType"),
            "paymentMethod": merged.get("paymentMethod"),
            "accountStatus": merged.get("accountStatus"),
            "planHistory": history,
        }
        for field in PROFILE_FIELDS:
            if field in data:
                changes[field] = data[field]
        if data.get("password"):
            changes["password"] = data["password"]

        self.user_repo.update(user_id, UserUpdate(**{k: v for k, v in changes.items() if v is not None}))
        return self.user_repo.get_by_id(user_id)

    def delete_user(self, user_id: str, strict: bool = False) -> List[dict]:
        """Delete a user and every photo they own.

        No other user's quota is touched.

        Returns:
            Deleted photo records, for remote object cleanup
        """
        if not self.user_repo.get_by_id(user_id):
            if strict:
                raise HTTPException(status_code=404, detail="User not found")
            return []

        self.user_repo.delete(user_id)
        if self.photo_service is None:
            return []
        return self.photo_service.delete_user_photos(user_id)
