from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ALGORITHM = "HS256"


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    role: str | None


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user_id: int, *, role: str, expires_minutes: int | None = None) -> str:
    expire = datetime.utcnow() + timedelta(minutes=expires_minutes or settings.access_token_exp_minutes)
    return jwt.encode({"sub": str(user_id), "role": role, "exp": expire}, settings.app_secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> TokenClaims:
    """Verify signature and expiry; raises ``JWTError`` on anything unusable."""

    payload = jwt.decode(token, settings.app_secret_key, algorithms=[ALGORITHM])
    subject = str(payload.get("sub") or "")
    if not subject.isdigit():
        raise JWTError("Token subject is not a user id")
    return TokenClaims(user_id=int(subject), role=payload.get("role"))
