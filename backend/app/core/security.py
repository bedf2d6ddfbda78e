from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum

from jose import jwt

from app.core.config import get_settings


class PrincipalRole(str, Enum):
    admin = "admin"
    scheduler = "scheduler"
    viewer = "viewer"


@dataclass(frozen=True)
class Principal:
    # Opaque identifier recorded on lock transitions; never interpreted further.
    id: str
    role: PrincipalRole


def create_access_token(subject: str, *, role: PrincipalRole | str, expires_delta: timedelta | None = None) -> str:
    settings = get_settings()
    expires_at = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    claims = {"sub": subject, "role": PrincipalRole(role).value, "exp": expires_at}
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict:
    settings = get_settings()
    return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
