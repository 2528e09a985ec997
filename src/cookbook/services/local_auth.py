# src/cookbook/services/local_auth.py
"""
File-backed account store for local development.
Keeps registered users and open sessions in a single JSON document.
"""
from __future__ import annotations

import hashlib
import json
import logging
import secrets
import threading
from dataclasses import asdict
from pathlib import Path
from typing import Any, Optional

from src.cookbook.domain.errors import InvalidCredentialsError, UserAlreadyExistsError
from src.cookbook.domain.models import User, new_id

logger = logging.getLogger(__name__)

_HASH_ITERATIONS = 200_000


def _hash_password(password: str, salt: str) -> str:
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), bytes.fromhex(salt), _HASH_ITERATIONS)
    return digest.hex()


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class LocalAuthService:
    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {"users": [], "sessions": {}}
        with self.path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
        data.setdefault("users", [])
        data.setdefault("sessions", {})
        return data

    def _save(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=2)
        tmp_path.replace(self.path)

    @staticmethod
    def _find_account(data: dict[str, Any], email: str) -> Optional[dict[str, Any]]:
        for account in data["users"]:
            if account["email"] == email:
                return account
        return None

    def register(self, email: str, password: str, name: Optional[str] = None) -> User:
        normalized = _normalize_email(email)
        with self._lock:
            data = self._load()
            if self._find_account(data, normalized):
                raise UserAlreadyExistsError(normalized)

            user = User(id=new_id(), email=normalized, name=name)
            salt = secrets.token_hex(16)
            data["users"].append(
                {
                    "email": normalized,
                    "salt": salt,
                    "password_hash": _hash_password(password, salt),
                    "user": asdict(user),
                }
            )
            self._save(data)

        logger.info("Registered local user: id=%s", user.id)
        return user

    def login(self, email: str, password: str) -> tuple[User, str]:
        """Check credentials and open a session. Returns the user and its token."""
        normalized = _normalize_email(email)
        with self._lock:
            data = self._load()
            account = self._find_account(data, normalized)
            if account is None:
                raise InvalidCredentialsError()
            expected = account["password_hash"]
            if not secrets.compare_digest(expected, _hash_password(password, account["salt"])):
                raise InvalidCredentialsError()

            user = User(**account["user"])
            token = secrets.token_urlsafe(32)
            data["sessions"][token] = user.id
            self._save(data)

        logger.info("Local user logged in: id=%s", user.id)
        return user, token

    def logout(self, token: str) -> None:
        with self._lock:
            data = self._load()
            if data["sessions"].pop(token, None) is not None:
                self._save(data)

    def user_for_token(self, token: str) -> Optional[User]:
        with self._lock:
            data = self._load()
        user_id = data["sessions"].get(token)
        if user_id is None:
            return None
        for account in data["users"]:
            if account["user"]["id"] == user_id:
                return User(**account["user"])
        return None
