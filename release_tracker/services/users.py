"""
User Account Service

Registration, credential checks and lookups for user accounts.

Routers call these functions and return what they produce; every failure is
raised as one of the errors in release_tracker.errors.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from release_tracker.errors import (
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    NotFoundError,
)
from release_tracker.models import User
from release_tracker.services.security import hash_password, verify_password

logger = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str) -> User | None:
    stmt = select(User).where(User.email == email)
    return db.execute(stmt).scalar_one_or_none()


def register_user(db: Session, email: str, password: str, name: str | None = None) -> User:
    """
    Create an account.

    The email must not be registered yet. The unique index on users.email
    settles a race between two registrations of the same address: the loser's
    insert fails and is reported the same way as the pre-check.

    Raises:
        EmailAlreadyRegisteredError: If the email is taken
    """
    if get_user_by_email(db, email) is not None:
        raise EmailAlreadyRegisteredError()

    user = User(
        email=email,
        password_hash=hash_password(password),
        name=name,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise EmailAlreadyRegisteredError() from exc
    db.refresh(user)

    logger.info(f"New user registered: {user.email}")
    return user


def authenticate_user(db: Session, email: str, password: str) -> User:
    """
    Check an email/password pair.

    Unknown emails and wrong passwords raise the same error, so the response
    does not reveal whether an account exists.

    Raises:
        InvalidCredentialsError: If the credentials do not match an account
    """
    user = get_user_by_email(db, email)

    if user is None:
        logger.warning(f"Login failed: user not found for {email}")
        raise InvalidCredentialsError()

    if not verify_password(password, user.password_hash):
        logger.warning(f"Login failed: incorrect password for {email}")
        raise InvalidCredentialsError()

    logger.info(f"User logged in: {user.email}")
    return user


def get_user(db: Session, user_id: int) -> User:
    """
    Raises:
        NotFoundError: If no user has this id
    """
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user
