"""Reva Studio photo storage - FastAPI entry point."""
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .config import SEED_USERS, ROOT_PATH
from .infrastructure.database import init_db
from .infrastructure.repositories import UserRepository
from .infrastructure.storage import close_gateway
from .application.services.auth_service import seed_default_users

# Import routers
from .routes.auth import router as auth_router
from .routes.admin import router as admin_router
from .routes.folders import router as folders_router
from .routes.photos import router as photos_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup: open the store and seed default accounts
    db = init_db()
    if SEED_USERS:
        seed_default_users(UserRepository(db))
    yield
    # Shutdown: close the gateway's HTTP client
    await close_gateway()


app = FastAPI(title="Reva Studio", root_path=ROOT_PATH, lifespan=lifespan)

# Include routers
app.include_router(auth_router)
app.include_router(admin_router)
app.include_router(folders_router)
app.include_router(photos_router)
