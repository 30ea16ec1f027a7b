"""
Dependencias reutilizables para routers (FastAPI Depends).

- Identidad: extrae el Bearer token y lo valida (sin lógica de negocio).
- Stores: handle privilegiado (admin) y handle restringido al llamador.
Todo se resuelve vía Depends para que los tests puedan sobreescribirlo.
"""
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request
from motor.motor_asyncio import AsyncIOMotorDatabase
from starlette.status import HTTP_429_TOO_MANY_REQUESTS

from sfsd_admin.core import rate_limit
from sfsd_admin.core.config import settings
from sfsd_admin.core.exceptions import Forbidden, Unauthorized
from sfsd_admin.infrastructure.db.mongo_async import get_async_db
from sfsd_admin.infrastructure.security.token_service import Identity, verify_token
from sfsd_admin.infrastructure.storage.cloudinary_host import CloudinaryAssetHost
from sfsd_admin.repositories.stores import PrivilegedStore, ScopedStore
from sfsd_admin.services.profile_mutation import ProfileMutationEngine


def get_bearer_token(authorization: Optional[str] = Header(default=None)) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise Unauthorized("Unauthorized: No token provided.")
    return authorization.split(" ", 1)[1].strip()


def get_identity(token: str = Depends(get_bearer_token)) -> Identity:
    return verify_token(token)


def get_db() -> AsyncIOMotorDatabase:
    return get_async_db()


def get_privileged_store(db: AsyncIOMotorDatabase = Depends(get_db)) -> PrivilegedStore:
    return PrivilegedStore.from_db(db)


def get_scoped_store(
    identity: Identity = Depends(get_identity),
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> ScopedStore:
    return ScopedStore.from_db(db, identity.user_id)


@lru_cache(maxsize=1)
def get_asset_host() -> CloudinaryAssetHost:
    return CloudinaryAssetHost()


def get_mutation_engine(store: PrivilegedStore = Depends(get_privileged_store)) -> ProfileMutationEngine:
    return ProfileMutationEngine(store.profiles, store.notifications)


def admin_rate_limit(request: Request, identity: Identity = Depends(get_identity)) -> None:
    key = (f"user:{identity.user_id}", request.url.path)
    if not rate_limit.allow(key, limit=settings.admin_rate_per_min, window_seconds=60):
        raise HTTPException(status_code=HTTP_429_TOO_MANY_REQUESTS, detail="Demasiadas solicitudes, espera un momento")


def verify_cron_secret(authorization: Optional[str] = Header(default=None)) -> None:
    """El scheduler envía `Authorization: Bearer <CRON_SECRET>`."""
    if not settings.cron_secret:
        raise Forbidden("CRON_SECRET no configurado")
    if authorization != f"Bearer {settings.cron_secret}":
        raise Unauthorized("Unauthorized")
