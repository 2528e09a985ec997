from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import AnyUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=False,
        extra="ignore",
    )

    SUPABASE_URL: AnyUrl
    SUPABASE_SERVICE_ROLE_KEY: str
    APP_ENV: str = "local"
    FRONTEND_CORS_ORIGINS: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:8080"],
    )

    AUTH_MODE: Literal["supabase", "local"] = "supabase"
    LOCAL_AUTH_STORE_PATH: str = ".data/local_auth.json"

    RECIPE_IMAGES_BUCKET: str = "recipe-images"
    IMAGE_STORAGE_BACKEND: Literal["supabase", "r2"] = "supabase"
    IMAGE_CACHE_CONTROL: str = "3600"

    # Only read when IMAGE_STORAGE_BACKEND=r2
    R2_ACCOUNT_ID: Optional[str] = None
    R2_ACCESS_KEY_ID: Optional[str] = None
    R2_SECRET_ACCESS_KEY: Optional[str] = None
    R2_PUBLIC_URL: Optional[str] = None


@lru_cache
def get_settings() -> Settings:
    return Settings()
