"""Token service and password hashing."""

import base64
import json
from datetime import datetime, timedelta, timezone

from jose import jwt

from aswi.core.config import settings
from aswi.core.security import (TokenSubject, create_access_token,
                                decode_access_token, get_password_hash,
                                verify_password)


def test_token_round_trip():
    token = create_access_token(TokenSubject(user_id=42, role="ADMIN"))
    assert decode_access_token(token) == TokenSubject(user_id=42, role="ADMIN")


def test_large_user_id_survives_round_trip():
    big = 9_007_199_254_740_993  # beyond JS safe integer
    token = create_access_token(TokenSubject(user_id=big, role="USER"))
    assert decode_access_token(token).user_id == big


def test_tampered_token_is_invalid():
    token = create_access_token(TokenSubject(user_id=1, role="USER"))
    header, payload, signature = token.split(".")
    claims = json.loads(base64.urlsafe_b64decode(payload + "=" * (-len(payload) % 4)))
    claims["role"] = "ADMIN"
    forged = base64.urlsafe_b64encode(json.dumps(claims).encode()).rstrip(b"=").decode()
    assert decode_access_token(f"{header}.{forged}.{signature}") is None


def test_token_signed_with_other_key_is_invalid():
    forged = jwt.encode(
        {"sub": "1", "role": "ADMIN", "type": "access",
         "exp": datetime.now(timezone.utc) + timedelta(days=1)},
        "another-secret",
        algorithm=settings.ALGORITHM,
    )
    assert decode_access_token(forged) is None


def test_expired_token_is_invalid():
    token = create_access_token(
        TokenSubject(user_id=1, role="USER"), expires_delta=timedelta(seconds=-1)
    )
    assert decode_access_token(token) is None


def test_garbage_token_is_invalid():
    assert decode_access_token("not-a-jwt") is None
    assert decode_access_token("") is None


def test_token_without_role_is_invalid():
    token = jwt.encode(
        {"sub": "1", "type": "access",
         "exp": datetime.now(timezone.utc) + timedelta(days=1)},
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
    )
    assert decode_access_token(token) is None


def test_default_expiry_is_seven_days():
    token = create_access_token(TokenSubject(user_id=1, role="USER"))
    claims = jwt.get_unverified_claims(token)
    assert claims["exp"] - claims["iat"] == 7 * 24 * 60 * 60


def test_password_hashing():
    hashed = get_password_hash("rahasia1")
    assert hashed != "rahasia1"
    assert verify_password("rahasia1", hashed)
    assert not verify_password("salah", hashed)
    assert not verify_password("rahasia1", "not-a-bcrypt-hash")
