"""Authentication routes: login, signup, recovery, session, language."""
from urllib.parse import quote

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..application.services import AuthService
from ..application.services.user_service import public_user
from ..dependencies import get_auth_service, require_user

router = APIRouter(prefix="/api/auth", tags=["auth"])


class LoginRequest(BaseModel):
    email: str
    password: str


class SignupRequest(BaseModel):
    name: str
    email: str
    password: str
    endereco: str
    telefone: str
    cpf: str | None = None
    cnpj: str | None = None
    rg: str | None = None
    plan: str = "essencial"
    plan_type: str = "mensal"
    payment_method: str = "pix"


class RecoveryRequest(BaseModel):
    email: str


class ResetPasswordRequest(BaseModel):
    email: str
    password: str
    confirm_password: str


class LanguageUpdate(BaseModel):
    language: str


@router.post("/login")
def login(data: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    """Sign in; admins land on the admin panel, users on their dashboard."""
    result = auth.login(data.email, data.password)
    user = result["user"]
    if result["needsPasswordReset"]:
        redirect = "/reset-password"
    else:
        redirect = "/admin" if user["role"] == "admin" else "/dashboard"
    return {
        "user": public_user(user),
        "needsPasswordReset": result["needsPasswordReset"],
        "redirect": redirect
    }


@router.post("/logout")
def logout(auth: AuthService = Depends(get_auth_service)):
    auth.logout()
    return {"status": "ok"}


@router.post("/signup")
def signup(data: SignupRequest, auth: AuthService = Depends(get_auth_service)):
    user = auth.signup({
        "name": data.name,
        "email": data.email,
        "password": data.password,
        "endereco": data.endereco,
        "telefone": data.telefone,
        "cpf": data.cpf,
        "cnpj": data.cnpj,
        "rg": data.rg,
        "plan": data.plan,
        "planType": data.plan_type,
        "paymentMethod": data.payment_method,
    })
    return {"user": public_user(user), "redirect": "/dashboard"}


@router.post("/recover")
def recover_password(data: RecoveryRequest, auth: AuthService = Depends(get_auth_service)):
    """Issue a temporary password and a WhatsApp link to deliver it."""
    result = auth.request_password_recovery(data.email)
    message = (
        f"Olá {result['user']['name']}!\n\n"
        f"Sua senha temporária é: {result['temporaryPassword']}\n\n"
        f"Válida por 10 minutos."
    )
    return {"status": "ok", "whatsappUrl": f"https://wa.me/?text={quote(message)}"}


@router.post("/reset-password")
def reset_password(data: ResetPasswordRequest, auth: AuthService = Depends(get_auth_service)):
    auth.reset_password(data.email, data.password, data.confirm_password)
    return {"status": "ok", "redirect": "/login"}


@router.get("/me")
def me(user: dict = Depends(require_user)):
    return public_user(user)


@router.get("/language")
def get_language(auth: AuthService = Depends(get_auth_service)):
    return {"language": auth.get_language()}


@router.put("/language")
def set_language(data: LanguageUpdate, auth: AuthService = Depends(get_auth_service)):
    return {"language": auth.set_language(data.language)}
