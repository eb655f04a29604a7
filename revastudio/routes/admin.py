"""Admin routes - customer account management."""
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..application.services import UserService, PhotoService, QuotaService
from ..application.services.user_service import public_user
from ..dependencies import (
    get_user_service, get_photo_service, get_quota_service, require_admin
)

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])


class UserEditForm(BaseModel):
    """Admin edit form; omitted fields keep their stored values."""
    name: str | None = None
    email: str | None = None
    password: str | None = None
    endereco: str | None = None
    telefone: str | None = None
    cpf: str | None = None
    cnpj: str | None = None
    rg: str | None = None
    plan: str | None = None
    plan_type: str | None = None
    payment_method: str | None = None
    account_status: str | None = None

    def to_record(self) -> dict:
        return {
            "name": self.name,
            "email": self.email,
            "password": self.password,
            "endereco": self.endereco,
            "telefone": self.telefone,
            "cpf": self.cpf,
            "cnpj": self.cnpj,
            "rg": self.rg,
            "plan": self.plan,
            "planType": self.plan_type,
            "paymentMethod": self.payment_method,
            "accountStatus": self.account_status,
        }


class UserForm(UserEditForm):
    """Admin create form."""
    name: str
    email: str
    endereco: str
    telefone: str
    plan: str = "essencial"
    plan_type: str = "mensal"
    payment_method: str = "pix"
    account_status: str = "ativo"


def _with_usage(user: dict, quota: QuotaService) -> dict:
    return {**public_user(user), "usage": quota.usage(user)}


@router.get("/users")
def list_users(
    users: UserService = Depends(get_user_service),
    quota: QuotaService = Depends(get_quota_service)
):
    return [_with_usage(u, quota) for u in users.list_users()]


@router.post("/users")
def create_user(
    data: UserForm,
    users: UserService = Depends(get_user_service),
    quota: QuotaService = Depends(get_quota_service)
):
    return _with_usage(users.create_user(data.to_record()), quota)


@router.get("/users/{user_id}")
def get_user(
    user_id: str,
    users: UserService = Depends(get_user_service),
    quota: QuotaService = Depends(get_quota_service)
):
    return _with_usage(users.get_user(user_id), quota)


@router.put("/users/{user_id}")
def update_user(
    user_id: str,
    data: UserEditForm,
    users: UserService = Depends(get_user_service),
    quota: QuotaService = Depends(get_quota_service)
):
    return _with_usage(users.update_user(user_id, data.to_record()), quota)


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: str,
    users: UserService = Depends(get_user_service),
    photos: PhotoService = Depends(get_photo_service)
):
    """Delete a customer and their photos; remote cleanup is best effort."""
    removed = users.delete_user(user_id)
    failures = await photos.cleanup_remote(removed)
    return {"status": "ok", "deletedPhotos": len(removed), "remoteFailures": failures}
