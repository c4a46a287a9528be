# Overview: Service-layer operations for auth; login gate in front of the till.

"""
Authentication for the till.

WHY: The till has a single binary logged-in/logged-out state. There is no
token, no expiry and no lockout: a successful login flips the session flag,
logout flips it back.

SECURITY NOTES:
- Passwords hashed with bcrypt (cost factor from BCRYPT_ROUNDS, default 12)
- Usernames compared exactly (case-sensitive)
"""

from __future__ import annotations

import logging

import bcrypt
from flask import current_app, has_app_context

from . import store_service
from .register_service import PosSession

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid username or password"
DEFAULT_ROLE = "cashier"


class InvalidCredentials(Exception):
    """Raised when no user matches the supplied username and password."""


def _bcrypt_rounds() -> int:
    if has_app_context():
        return int(current_app.config.get("BCRYPT_ROUNDS", 12))
    return 12


def hash_password(password: str) -> str:
    """Hash password using bcrypt with a fresh salt."""
    salt = bcrypt.gensalt(rounds=_bcrypt_rounds())
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    Returns False for malformed hashes instead of raising.
    """
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def authenticate(username: str, password: str) -> dict:
    """
    Return the user record matching the credentials.

    Raises InvalidCredentials on a miss.
    """
    if not username or not password:
        raise InvalidCredentials(INVALID_CREDENTIALS_MESSAGE)

    user = store_service.find_user_by_credentials(username, password)
    if user is None:
        raise InvalidCredentials(INVALID_CREDENTIALS_MESSAGE)

    store_service.record_login(user["id"])
    return user


def login(session: PosSession, username: str, password: str) -> bool:
    """
    Log the till in.

    On a miss the operator gets a blocking alert and the session stays
    logged out.
    """
    try:
        user = authenticate(username, password)
    except InvalidCredentials as exc:
        session.logged_in = False
        session.username = None
        logger.warning("Login failed for username=%r", username)
        session.presentation.alert(str(exc))
        return False

    session.logged_in = True
    session.username = user["username"]
    logger.info("User %s logged in", user["username"])
    return True


def logout(session: PosSession) -> None:
    session.logged_in = False
    session.username = None


def create_user(
    username: str,
    password: str,
    name: str | None = None,
    role: str | None = DEFAULT_ROLE,
) -> int:
    """Create a till operator; returns the new user id."""
    return store_service.add(store_service.USERS, {
        "username": username,
        "password": password,
        "name": name,
        "role": role,
    })


def list_users() -> list[dict]:
    return store_service.get_all(store_service.USERS)
