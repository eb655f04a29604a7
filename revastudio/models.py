"""Record builders and typed update commands.

Records are stored as plain dicts with the camelCase keys of the browser
build. Updates never pass free-form dicts to the store: each entity has a
command type listing exactly the fields it allows to change, and
``to_patch()`` yields only the fields that were set.
"""
import uuid
from dataclasses import dataclass, fields
from datetime import datetime, timezone
from typing import Optional


def generate_id() -> str:
    return str(uuid.uuid4())


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC timestamp in the browser's ``toISOString`` format (milliseconds, ``Z``)."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def utc_now() -> str:
    return format_timestamp(datetime.now(timezone.utc))


def parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class _UNSET:
    def __repr__(self) -> str:
        return "UNSET"


UNSET = _UNSET()


@dataclass(frozen=True)
class _Patch:
    def to_patch(self) -> dict:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }


@dataclass(frozen=True)
class UserUpdate(_Patch):
    """Profile, plan and credential changes for a user."""
    name: object = UNSET
    email: object = UNSET
    password: object = UNSET
    plan: object = UNSET
    cpf: object = UNSET
    cnpj: object = UNSET
    rg: object = UNSET
    endereco: object = UNSET
    telefone: object = UNSET
    planType: object = UNSET
    paymentMethod: object = UNSET
    accountStatus: object = UNSET
    planHistory: object = UNSET
    temporaryPassword: object = UNSET
    temporaryPasswordExpiry: object = UNSET
    needsPasswordReset: object = UNSET


@dataclass(frozen=True)
class QuotaUpdate(_Patch):
    storageUsed: int


@dataclass(frozen=True)
class FolderRename(_Patch):
    name: str


@dataclass(frozen=True)
class PhotoMove(_Patch):
    folderId: Optional[str]


def new_user(data: dict) -> dict:
    """Build a user record; id, storageUsed and createdAt are always fresh."""
    user = {k: v for k, v in data.items() if v is not None}
    user.update({
        "id": generate_id(),
        "storageUsed": 0,
        "createdAt": utc_now(),
    })
    return user


def new_folder(user_id: str, name: str, parent_id: Optional[str] = None) -> dict:
    return {
        "id": generate_id(),
        "userId": user_id,
        "name": name,
        "parentId": parent_id,
        "createdAt": utc_now(),
    }


def new_photo(
    user_id: str,
    name: str,
    size: int,
    content_type: str,
    folder_id: Optional[str] = None,
    s3_key: Optional[str] = None,
    bucket_name: Optional[str] = None,
    data_url: str = "",
) -> dict:
    photo = {
        "id": generate_id(),
        "userId": user_id,
        "folderId": folder_id,
        "name": name,
        "size": size,
        "type": content_type,
        "uploadedAt": utc_now(),
        "dataUrl": data_url,
    }
    if s3_key:
        photo["s3Key"] = s3_key
    if bucket_name:
        photo["bucketName"] = bucket_name
    return photo


def new_plan_period(plan: str, billing_cycle: str, payment_method: str) -> dict:
    return {
        "id": generate_id(),
        "planType": plan,
        "billingCycle": billing_cycle,
        "paymentMethod": payment_method,
        "startDate": utc_now(),
        "status": "ativo",
    }


def is_legacy_photo(photo: dict) -> bool:
    """Photos uploaded before remote storage carry inline base64 data."""
    return not photo.get("s3Key") and str(photo.get("dataUrl", "")).startswith("data:")
