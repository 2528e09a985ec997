# src/cookbook/schemas/auth.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=6)
    name: Optional[str] = Field(default=None, max_length=120)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=1)


class SessionResponse(BaseModel):
    accessToken: str
    tokenType: str = "bearer"
    userId: str
    email: str
    name: Optional[str] = None
