"""
Session token issuing / verification (JWT) and password hashing (bcrypt).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from aswi.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass(frozen=True)
class TokenSubject:
    user_id: int
    role: str


# ── Passwords ───────────────────────────────────────────────────────
def verify_password(plain: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        # Unrecognised or corrupt hash
        return False


def get_password_hash(plain: str) -> str:
    return pwd_context.hash(plain)


# ── JWT tokens ──────────────────────────────────────────────────────
def create_access_token(
    subject: TokenSubject,
    expires_delta: timedelta | None = None,
) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS))
    return jwt.encode(
        {
            "sub": str(subject.user_id),
            "role": subject.role,
            "iat": now,
            "exp": expire,
            "type": "access",
        },
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
    )


def decode_access_token(token: str) -> TokenSubject | None:
    """Return the subject if the token is valid, else ``None``.

    Bad signatures, malformed tokens, expiry and missing claims all
    collapse to ``None``; callers treat that as unauthenticated.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if payload.get("type") != "access":
        return None
    sub = payload.get("sub")
    role = payload.get("role")
    if not sub or not isinstance(role, str):
        return None
    try:
        user_id = int(sub)
    except (TypeError, ValueError):
        return None
    return TokenSubject(user_id=user_id, role=role)
