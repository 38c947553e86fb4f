"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT signing/verification/decoding via PyJWT
- JTI generation for token identifiers
"""
from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from flask import current_app

ph = PasswordHasher()


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2 (salt is generated per call and embedded)
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password against an Argon2 hash; False on any mismatch
    """
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


def sign_token(payload: Dict[str, Any], secret: str, expires_in: timedelta) -> str:
    """
    Sign payload with secret. iat, exp and a fresh jti are added; the caller's
    payload is not mutated.
    """
    now = _now()
    claims = dict(payload)
    claims.update(
        {
            "iat": int(now.timestamp()),
            "exp": int((now + expires_in).timestamp()),
            "jti": generate_jti(),
        }
    )
    return jwt.encode(claims, secret, algorithm=current_app.config["JWT_ALGORITHM"])


def verify_token(token: str, secret: str) -> Dict[str, Any]:
    """
    Verify signature and expiry. Raises jwt.ExpiredSignatureError when expired
    and jwt.InvalidTokenError for every other failure.
    """
    return jwt.decode(token, secret, algorithms=[current_app.config["JWT_ALGORITHM"]])


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    """Read the claims without checking the signature; None if token is not a JWT."""
    try:
        decoded = jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError:
        return None
    return decoded if isinstance(decoded, dict) else None


def create_access_token(user) -> str:
    """Access token for user, signed with the server-wide JWT_SECRET."""
    payload = {
        "sub": str(user.id),
        "data": {"id": user.id, "username": user.first_name},
    }
    return sign_token(payload, current_app.config["JWT_SECRET"], current_app.config["ACCESS_TOKEN_EXPIRES"])


def create_refresh_token(user_id: int, secret: str) -> str:
    """Refresh token for user_id, signed with that user's stored secret."""
    return sign_token({"sub": str(user_id)}, secret, current_app.config["REFRESH_TOKEN_EXPIRES"])
