# src/cookbook/deps.py (clients are process-wide singletons, exposed as dependencies)

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from supabase import Client, create_client

from src.cookbook.config import get_settings
from src.cookbook.infra.db.base import RelationalStore
from src.cookbook.infra.db.supabase_store import SupabaseRelationalStore
from src.cookbook.infra.storage.base import ObjectStore
from src.cookbook.infra.storage.r2_provider import R2StorageProvider
from src.cookbook.infra.storage.supabase_storage import SupabaseObjectStore
from src.cookbook.services.local_auth import LocalAuthService
from src.cookbook.services.recipe_service import RecipeService
from src.cookbook.services.session import SessionProvider, StaticSession

logger = logging.getLogger(__name__)

_client: Client | None = None


def get_supabase() -> Client:
    global _client
    if _client is None:
        settings = get_settings()
        _client = create_client(str(settings.SUPABASE_URL), settings.SUPABASE_SERVICE_ROLE_KEY)
    return _client


@lru_cache
def get_relational_store() -> RelationalStore:
    return SupabaseRelationalStore(get_supabase())


@lru_cache
def get_object_store() -> ObjectStore:
    settings = get_settings()
    if settings.IMAGE_STORAGE_BACKEND == "r2":
        return R2StorageProvider(
            account_id=settings.R2_ACCOUNT_ID,
            access_key_id=settings.R2_ACCESS_KEY_ID,
            secret_access_key=settings.R2_SECRET_ACCESS_KEY,
            public_url=settings.R2_PUBLIC_URL,
        )
    return SupabaseObjectStore(get_supabase(), cache_control=settings.IMAGE_CACHE_CONTROL)


def get_recipe_service() -> RecipeService:
    return RecipeService(
        store=get_relational_store(),
        images=get_object_store(),
        bucket=get_settings().RECIPE_IMAGES_BUCKET,
    )


@lru_cache
def get_local_auth() -> LocalAuthService:
    return LocalAuthService(get_settings().LOCAL_AUTH_STORE_PATH)


auth_scheme = HTTPBearer(auto_error=False)


class CurrentUser(BaseModel):
    id: str
    email: str | None = None
    name: str | None = None


def _user_from_supabase(token: str) -> CurrentUser:
    try:
        res = get_supabase().auth.get_user(token)
    except Exception as exc:
        raise HTTPException(status_code=401, detail="Invalid/expired token") from exc

    user = res.user if res else None
    if not user:
        raise HTTPException(status_code=401, detail="Invalid token")

    # metadata may carry 'name'
    name = None
    meta = getattr(user, "user_metadata", None) or {}
    if isinstance(meta, dict):
        name = meta.get("name")

    return CurrentUser(id=str(user.id), email=user.email, name=name)


def _user_from_local(accounts: LocalAuthService, token: str) -> CurrentUser:
    user = accounts.user_for_token(token)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid token")
    return CurrentUser(id=user.id, email=user.email, name=user.name)


async def get_current_user(
    cred: HTTPAuthorizationCredentials | None = Depends(auth_scheme),
    accounts: LocalAuthService = Depends(get_local_auth),
) -> CurrentUser:
    """
    Reads Authorization: Bearer <token>, validates it against the configured
    auth backend and returns the minimal user data.
    """
    if cred is None or cred.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")

    if get_settings().AUTH_MODE == "local":
        return _user_from_local(accounts, cred.credentials)
    return _user_from_supabase(cred.credentials)


async def get_session(user: CurrentUser = Depends(get_current_user)) -> SessionProvider:
    return StaticSession(user.id)
