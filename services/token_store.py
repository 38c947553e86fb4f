"""
Persistence for the per-user refresh secrets.

A user has at most one non-revoked row. Rows are never deleted: a revoked
row stays as history and the next issue creates a fresh one.
"""
from __future__ import annotations

import logging
from typing import Optional

from models import storage
from models.refresh_token import RefreshToken, REFRESH_TOKEN_TYPE

logger = logging.getLogger(__name__)


def find_active(user_id: int) -> Optional[RefreshToken]:
    session = storage.get_session()
    return (
        session.query(RefreshToken)
        .filter(RefreshToken.user_id == user_id, RefreshToken.is_revoked.is_(False))
        .first()
    )


def create(user_id: int, secret: str) -> RefreshToken:
    """
    Insert a new active row. No lookup first: if another active row exists
    the partial unique index raises IntegrityError (the session is rolled back).
    """
    token = RefreshToken(user_id=user_id, token=secret, type=REFRESH_TOKEN_TYPE, is_revoked=False)
    token.save()
    logger.debug("Stored new refresh secret id=%s for user id=%s", token.id, user_id)
    return token


def revoke(token: RefreshToken) -> None:
    """Mark token revoked and commit before returning."""
    if token.is_revoked:
        return
    token.is_revoked = True
    token.save()
    logger.warning("Revoked refresh secret id=%s for user id=%s", token.id, token.user_id)
