"""
Authentication service: sign-up, login and refresh-token exchange.

Token scheme:
- access tokens are signed with the server-wide JWT_SECRET
- refresh tokens are signed with a per-user secret kept in the tokens table

Revoking the user's stored secret therefore invalidates every refresh token
issued under it. Login reuses the stored secret; only a failed refresh
verification retires it.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict

import jwt
from flask import current_app
from sqlalchemy.exc import IntegrityError

from models.refresh_token import RefreshToken
from models.user import User
from services import token_store, users_service
from services.exceptions import (
    InvalidToken,
    PasswordOrEmailIncorrect,
    RefreshTokenNotFound,
    TokenExpired,
)
from utils.random_generator import generate_random_string
from utils.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    verify_password,
    verify_token,
)

logger = logging.getLogger(__name__)

# Largest id a signed 64-bit INTEGER column can hold
MAX_USER_ID = 2 ** 63 - 1


@dataclass
class TokenPayload:
    access_token: str
    refresh_token: str
    expires_in: int
    refresh_expires_in: int


@dataclass
class LoginPayload:
    user: Dict[str, Any]
    token: TokenPayload
    status: int = 200


def sign_up(first_name: str, last_name: str, email: str, password: str) -> Dict[str, Any]:
    user = users_service.create_user(first_name, last_name, email, password)
    return user.to_dict()


def login(email: str, password: str) -> LoginPayload:
    user = users_service.find_by_email(email)
    if user is None:
        raise PasswordOrEmailIncorrect(status=404)

    if not verify_password(password, user.password_hash):
        raise PasswordOrEmailIncorrect(status=400)

    token = create_token(user.id)
    logger.info("User id=%s logged in", user.id)
    return LoginPayload(user=user.to_dict(), token=token)


def _active_secret(user_id: int) -> RefreshToken:
    stored = token_store.find_active(user_id)
    if stored is not None:
        return stored

    secret = generate_random_string(current_app.config["REFRESH_SECRET_LENGTH"])
    try:
        return token_store.create(user_id, secret)
    except IntegrityError:
        # A concurrent request inserted the active row first; use that one
        stored = token_store.find_active(user_id)
        if stored is None:
            raise
        logger.info("Reusing refresh secret created concurrently for user id=%s", user_id)
        return stored


def create_token(user_id: int) -> TokenPayload:
    """Issue an access/refresh pair for user_id, creating the stored secret on first use."""
    user: User = users_service.get_user_by_id(user_id)
    stored = _active_secret(user.id)

    return TokenPayload(
        access_token=create_access_token(user),
        refresh_token=create_refresh_token(user.id, stored.token),
        expires_in=int(current_app.config["ACCESS_TOKEN_EXPIRES"].total_seconds()),
        refresh_expires_in=int(current_app.config["REFRESH_TOKEN_EXPIRES"].total_seconds()),
    )


def _subject_id(claims: Dict[str, Any] | None) -> int:
    """Numeric user id from the sub claim; InvalidToken if missing, malformed or out of id range."""
    subject = (claims or {}).get("sub")
    if not subject or isinstance(subject, bool):
        raise InvalidToken()
    try:
        user_id = int(subject)
    except (TypeError, ValueError, OverflowError):
        raise InvalidToken()
    if not 0 < user_id <= MAX_USER_ID:
        raise InvalidToken()
    return user_id


def check_refresh_token(refresh_token: str) -> Dict[str, Any]:
    """
    Verify refresh_token against the claimed user's stored secret and return its claims.

    Any verification failure revokes the stored secret before raising, so one
    bad presentation forces that user to log in again.
    """
    user_id = _subject_id(decode_token(refresh_token))

    stored = token_store.find_active(user_id)
    if stored is None:
        raise RefreshTokenNotFound()

    try:
        return verify_token(refresh_token, stored.token)
    except jwt.ExpiredSignatureError:
        token_store.revoke(stored)
        raise TokenExpired()
    except jwt.InvalidTokenError as exc:
        token_store.revoke(stored)
        logger.warning("Refresh token for user id=%s failed verification: %s", user_id, exc)
        raise InvalidToken()


def token_refresh(refresh_token: str) -> LoginPayload:
    claims = check_refresh_token(refresh_token)
    user = users_service.get_user_by_id(_subject_id(claims))

    token = create_token(user.id)
    return LoginPayload(user=user.to_dict(), token=token)
