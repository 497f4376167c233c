"""
Account operations: registration, login and deletion.

These functions hold the credential and membership rules. They take an open
SQLAlchemy session and raise ``AccountError`` for every failure a client may
see, leaving HTTP concerns to the routes.
"""
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import logging

from .auth import hash_password, verify_password
from .errors import (
    AccountError,
    ErrorKind,
    CREDENTIALS_MISMATCH,
    EMAIL_TAKEN,
    PASSWORD_REQUIRED,
    USERNAME_TAKEN,
)
from .models import User

logger = logging.getLogger(__name__)

def register_user(db: Session, username: str, useremail: str, password: str) -> User:
    """
    Create an account with a salted password hash and a fresh access token.

    Args:
        db: Database session
        username: Unique account name
        useremail: Unique email address, stored lowercased
        password: Plain password, only its hash is persisted

    Returns:
        The persisted User

    Raises:
        AccountError: validation for missing fields or a malformed email,
            conflict when the username or email is taken
    """
    if not password:
        raise AccountError(ErrorKind.VALIDATION, PASSWORD_REQUIRED)

    try:
        new_user = User(
            username=username,
            useremail=useremail,
            password=hash_password(password),
        )
    except ValueError as e:
        raise AccountError(ErrorKind.VALIDATION, str(e)) from e

    # Check if email or username already exists
    if db.query(User).filter(User.username == new_user.username).first():
        raise AccountError(ErrorKind.CONFLICT, USERNAME_TAKEN)
    if db.query(User).filter(User.useremail == new_user.useremail).first():
        raise AccountError(ErrorKind.CONFLICT, EMAIL_TAKEN)

    db.add(new_user)
    try:
        db.commit()
    except IntegrityError as e:
        # a concurrent registration won the unique constraint
        db.rollback()
        logger.info(f"Registration lost uniqueness race: username={username}")
        raise AccountError(ErrorKind.CONFLICT) from e
    db.refresh(new_user)

    logger.info(f"Registered account: user_id={new_user.id}, username={new_user.username}")
    return new_user


def find_by_credentials(db: Session, username: str, password: str):
    """Return the matching User, or None if the username or password is wrong."""
    user = db.query(User).filter(User.username == username).first()
    if not user or not verify_password(password, user.password):
        return None
    return user


def login_user(db: Session, username: str, password: str, discount: float) -> User:
    """
    Verify credentials and grant membership.

    Membership and discount are re-asserted on every successful login, so
    repeated logins leave the account unchanged.

    Raises:
        AccountError: unauthorized when the username is unknown or the
            password does not match
    """
    user = find_by_credentials(db, username, password)
    if not user:
        raise AccountError(ErrorKind.UNAUTHORIZED, CREDENTIALS_MISMATCH)

    user.is_member = True
    user.discount = discount
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: str, actor: User, require_ownership: bool = False) -> None:
    """
    Delete an account by id on behalf of an authenticated ``actor``.

    Unless ``require_ownership`` is set, any authenticated account may delete
    any other account.

    Raises:
        AccountError: forbidden when ownership is required and ``actor`` does
            not own the account, not_found when no such account exists
    """
    actor_id = actor.id
    if actor_id != user_id:
        if require_ownership:
            raise AccountError(ErrorKind.FORBIDDEN)
        logger.warning(f"Cross-account deletion: actor_id={actor_id}, target_id={user_id}")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise AccountError(ErrorKind.NOT_FOUND)

    db.delete(user)
    db.commit()
    logger.info(f"Deleted account: user_id={user_id}, actor_id={actor_id}")
