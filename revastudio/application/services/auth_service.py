"""Authentication service - login, signup, password recovery.

Credentials are compared in plain text (known defect carried over from the
browser build, not redesigned here).
"""
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import HTTPException

from ...config import (
    MIN_PASSWORD_LENGTH, TEMP_PASSWORD_LENGTH, TEMP_PASSWORD_ALPHABET,
    TEMP_PASSWORD_TTL_MINUTES, SUPPORTED_LANGUAGES
)
from ...infrastructure.repositories import UserRepository, SessionRepository
from ...models import UserUpdate, format_timestamp, parse_timestamp
from .user_service import UserService


DEFAULT_USERS = [
    {
        "email": "admin@revastudio.com",
        "password": "admin123",
        "name": "Administrador",
        "role": "admin",
        "plan": "studio",
    },
    {
        "email": "contato@teacherkarololiveira.org",
        "password": "123456",
        "name": "Karoline de Oliveira",
        "role": "user",
        "plan": "essencial",
        "cnpj": "42.070.149/0001-97",
        "telefone": "27 99999-2732",
        "endereco": "Avenida Barao Rio Branco, 812, Interlagos, Linhares - ES, CEP: 29903-066",
        "planType": "mensal",
        "paymentMethod": "pix",
        "accountStatus": "ativo",
    },
]


def seed_default_users(user_repo: UserRepository) -> int:
    """Create the default admin and demo accounts on an empty store.

    Returns:
        Number of accounts created
    """
    if user_repo.list():
        return 0
    for data in DEFAULT_USERS:
        user_repo.create(dict(data))
    return len(DEFAULT_USERS)


def generate_temporary_password() -> str:
    return "".join(
        secrets.choice(TEMP_PASSWORD_ALPHABET) for _ in range(TEMP_PASSWORD_LENGTH)
    )


class AuthService:
    """Service for authentication and session handling.

    Responsibilities:
    - Login with permanent or temporary password
    - Signup with validation
    - Temporary-password recovery and password reset
    - Active session and language preference
    """

    def __init__(
        self,
        user_repository: UserRepository,
        session_repository: SessionRepository,
        user_service: Optional[UserService] = None
    ):
        self.user_repo = user_repository
        self.session_repo = session_repository
        self.user_service = user_service or UserService(user_repository)

    def login(self, email: str, password: str, now: Optional[datetime] = None) -> dict:
        """Authenticate and open the session.

        A valid temporary password opens the session but flags the account
        for a password reset.

        Returns:
            Dict with ``user`` and ``needsPasswordReset``

        Raises:
            HTTPException: 401 on bad credentials or expired temporary password
        """
        user = self.user_repo.get_by_email(email)
        if not user:
            raise HTTPException(status_code=401, detail="Invalid email or password")

        now = now or datetime.now(timezone.utc)
        temporary = user.get("temporaryPassword")
        expiry = user.get("temporaryPasswordExpiry")
        if temporary and expiry:
            if now > parse_timestamp(expiry):
                self.user_repo.clear_temporary_password(user["id"])
                raise HTTPException(status_code=401, detail="Temporary password expired")

            if temporary == password:
                self.user_repo.update(user["id"], UserUpdate(needsPasswordReset=True))
                self.session_repo.set_current_user_id(user["id"])
                return {"user": self.user_repo.get_by_id(user["id"]), "needsPasswordReset": True}

        if user.get("password") != password:
            raise HTTPException(status_code=401, detail="Invalid email or password")

        self.session_repo.set_current_user_id(user["id"])
        return {"user": user, "needsPasswordReset": False}

    def logout(self) -> None:
        self.session_repo.clear()

    def current_user(self) -> Optional[dict]:
        user_id = self.session_repo.get_current_user_id()
        if not user_id:
            return None
        return self.user_repo.get_by_id(user_id)

    def signup(self, data: dict) -> dict:
        """Create a customer account and sign it in.

        Raises:
            HTTPException: 400 on validation errors, 409 on duplicate email
        """
        user = self.user_service.create_user(data, role="user")
        self.session_repo.set_current_user_id(user["id"])
        return user

    def request_password_recovery(self, email: str, now: Optional[datetime] = None) -> dict:
        """Issue a temporary password valid for a few minutes.

        Returns:
            Dict with ``user`` and ``temporaryPassword`` for delivery

        Raises:
            HTTPException: 404 if no account uses this email
        """
        user = self.user_repo.get_by_email(email)
        if not user:
            raise HTTPException(status_code=404, detail="Email not found")

        now = now or datetime.now(timezone.utc)
        temporary = generate_temporary_password()
        expiry = now + timedelta(minutes=TEMP_PASSWORD_TTL_MINUTES)
        self.user_repo.update(user["id"], UserUpdate(
            temporaryPassword=temporary,
            temporaryPasswordExpiry=format_timestamp(expiry),
            needsPasswordReset=False
        ))
        return {"user": self.user_repo.get_by_id(user["id"]), "temporaryPassword": temporary}

    def reset_password(self, email: str, password: str, confirm_password: str) -> dict:
        """Set a new permanent password.

        Raises:
            HTTPException: 400 on invalid or mismatched passwords,
                404 for an unknown email
        """
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise HTTPException(
                status_code=400,
                detail=f"Password must have at least {MIN_PASSWORD_LENGTH} characters"
            )
        if password != confirm_password:
            raise HTTPException(status_code=400, detail="Passwords do not match")

        user = self.user_repo.get_by_email(email)
        if not user:
            raise HTTPException(status_code=404, detail="Email not found")

        self.user_repo.update(user["id"], UserUpdate(password=password, needsPasswordReset=False))
        self.user_repo.clear_temporary_password(user["id"])
        return self.user_repo.get_by_id(user["id"])

    def get_language(self) -> str:
        return self.session_repo.get_language()

    def set_language(self, language: str) -> str:
        if language not in SUPPORTED_LANGUAGES:
            raise HTTPException(status_code=400, detail="Unsupported language")
        self.session_repo.set_language(language)
        return language
