"""
Password hashing and token issuance.

Passwords are hashed with bcrypt, tokens are JWTs signed with python-jose.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
from jose import jwt
from jose.exceptions import JOSEError
from pydantic import BaseModel

from app.core.config import Settings
from app.core.exceptions import HashingError, TokenIssuanceError
from app.schemas.user import TokenPair

# bcrypt ignores (or rejects, depending on version) everything past this
BCRYPT_MAX_BYTES = 72


class TokenSubject(BaseModel):
    id: int
    email: str


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash a password with bcrypt. Raises HashingError on failure."""
    raw = password.encode("utf-8")
    if len(raw) > BCRYPT_MAX_BYTES:
        raise HashingError(f"password exceeds {BCRYPT_MAX_BYTES} bytes")
    try:
        return bcrypt.hashpw(raw, bcrypt.gensalt(rounds=rounds)).decode("utf-8")
    except (ValueError, TypeError) as exc:
        raise HashingError(str(exc)) from exc


def verify_password(password: str, credential: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), credential.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def _encode(claims: Dict[str, Any], settings: Settings) -> str:
    try:
        return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    except (JOSEError, ValueError, TypeError) as exc:
        raise TokenIssuanceError(str(exc)) from exc


def issue_tokens(realm: str, subject: TokenSubject, settings: Settings) -> TokenPair:
    """
    Issue an access/refresh token pair for ``subject`` within ``realm``.

    Raises TokenIssuanceError if either token cannot be signed.
    """
    now = datetime.now(timezone.utc)
    base = {"sub": subject.email, "uid": subject.id, "realm": realm, "iat": now}

    access_claims = dict(base, type="access",
                         exp=now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    refresh_claims = dict(base, type="refresh",
                          exp=now + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS))

    return TokenPair(
        access_token=_encode(access_claims, settings),
        refresh_token=_encode(refresh_claims, settings),
    )


def decode_token(token: str, settings: Settings, expected_type: Optional[str] = None) -> Dict[str, Any]:
    """Verify signature and expiry and return the claims."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JOSEError as exc:
        raise TokenIssuanceError(str(exc)) from exc

    if expected_type is not None and payload.get("type") != expected_type:
        raise TokenIssuanceError(f"expected {expected_type} token, got {payload.get('type')}")
    return payload
