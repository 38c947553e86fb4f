from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models import storage
from models.user import User
from services.exceptions import UserAlreadyExists, UserCouldNotBeCreated, UserNotFound
from utils.security import hash_password

logger = logging.getLogger(__name__)


def user_exists(email: str) -> bool:
    session = storage.get_session()
    return session.query(User).filter(User.email == email).count() > 0


def create_user(first_name: str, last_name: str, email: str, password: str) -> User:
    """
    Create a user with a hashed password.
    Raises UserAlreadyExists if the email is taken, UserCouldNotBeCreated if the insert fails.
    """
    if user_exists(email):
        raise UserAlreadyExists()

    user = User(
        email=email,
        first_name=first_name,
        last_name=last_name,
        password_hash=hash_password(password),
    )
    try:
        user.save()
    except IntegrityError as exc:
        # lost a race with a concurrent signup for the same email
        raise UserAlreadyExists() from exc
    except SQLAlchemyError as exc:
        logger.exception("Could not persist user %s", email)
        raise UserCouldNotBeCreated() from exc

    logger.info("Created user id=%s", user.id)
    return user


def find_by_email(email: str) -> Optional[User]:
    """User with this exact email (password hash included), or None."""
    session = storage.get_session()
    return session.query(User).filter(User.email == email).first()


def get_user_by_id(user_id: int) -> User:
    user = storage.get(User, user_id)
    if user is None:
        raise UserNotFound()
    return user
