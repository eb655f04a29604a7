"""Application configuration and constants."""
import os
from pathlib import Path

# Directory paths
BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = Path(os.environ.get("REVA_DATA_DIR", str(BASE_DIR / "data")))
DATABASE_PATH = Path(os.environ.get("REVA_DATABASE_PATH", str(DATA_DIR / "revastudio.db")))

# Base URL configuration (for running under a subpath like /reva)
BASE_URL = os.environ.get("REVA_BASE_URL", "").strip("/")
ROOT_PATH = f"/{BASE_URL}" if BASE_URL else ""

# Key-value store keys (kept identical to the browser build)
USERS_KEY = "users"
FOLDERS_KEY = "folders"
PHOTOS_KEY = "photos"
CURRENT_USER_KEY = "currentUserId"
LANGUAGE_KEY = "language"

SUPPORTED_LANGUAGES = {"pt", "en"}
DEFAULT_LANGUAGE = "pt"

# Storage plans (bytes)
GIB = 1024 * 1024 * 1024
STORAGE_LIMITS = {
    "essencial": 100 * GIB,
    "pro": 300 * GIB,
    "studio": float("inf"),
}
PLAN_TYPES = {"mensal", "semestral", "anual"}
PAYMENT_METHODS = {"boleto", "cartao", "pix"}
ACCOUNT_STATUSES = {"ativo", "inativo", "cancelado"}
ROLES = {"admin", "user"}

# Password rules
MIN_PASSWORD_LENGTH = 6
TEMP_PASSWORD_LENGTH = 8
TEMP_PASSWORD_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
TEMP_PASSWORD_TTL_MINUTES = 10

# Seed default admin and demo user on an empty store
SEED_USERS = os.environ.get("REVA_SEED_USERS", "true").lower() == "true"

# Remote upload gateway
GATEWAY_BACKEND = os.environ.get("REVA_GATEWAY_BACKEND", "local").lower()  # local or http
GATEWAY_URL = os.environ.get(
    "REVA_GATEWAY_URL",
    "https://hleasylvvb.execute-api.us-east-2.amazonaws.com/prod"
).rstrip("/")
GATEWAY_TIMEOUT = float(os.environ.get("REVA_GATEWAY_TIMEOUT", "30"))
LOCAL_OBJECTS_DIR = Path(os.environ.get("REVA_LOCAL_OBJECTS_DIR", str(DATA_DIR / "objects")))
LOCAL_BUCKET_NAME = os.environ.get("REVA_LOCAL_BUCKET", "local-bucket")
