"""Local email/password accounts and the signed-in session."""

from __future__ import annotations

import logging
import uuid

from werkzeug.security import check_password_hash, generate_password_hash

import storage
from models import User

logger = logging.getLogger(__name__)

SESSION_KEY = "session_user_id"


class AuthError(Exception):
    """Sign up or sign in failed. The message is safe to show to the user."""


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    def __init__(self):
        self._user: User | None = None

    def current_user(self) -> User | None:
        return self._user

    def restore_session(self) -> User | None:
        """Pick up the user who was signed in when the app last closed."""
        user_id = storage.get_setting(SESSION_KEY)
        if not user_id:
            return None
        row = storage.get_user_by_id(user_id)
        if row is None:
            storage.set_setting(SESSION_KEY, None)
            return None
        self._user = User(id=row["id"], email=row["email"])
        return self._user

    def sign_up(self, email: str, password: str) -> User:
        email = _normalize_email(email)
        if not email or "@" not in email:
            raise AuthError("Enter a valid email address.")
        if not password:
            raise AuthError("Password is required.")
        if storage.get_user_by_email(email) is not None:
            raise AuthError("An account with that email already exists.")

        user = User(id=str(uuid.uuid4()), email=email)
        storage.create_user(user.id, user.email, generate_password_hash(password))
        logger.info("Created account %s", user.id)
        return self._start_session(user)

    def sign_in(self, email: str, password: str) -> User:
        row = storage.get_user_by_email(_normalize_email(email))
        if row is None or not check_password_hash(row["password_hash"], password):
            raise AuthError("Invalid email or password.")
        return self._start_session(User(id=row["id"], email=row["email"]))

    def sign_out(self) -> None:
        if self._user is not None:
            logger.info("Signed out %s", self._user.id)
        self._user = None
        storage.set_setting(SESSION_KEY, None)

    def display_name(self, user: User) -> str:
        """Profile name if one is set, otherwise the local part of the email."""
        profile = storage.get_profile(user.id)
        if profile and profile.name:
            return profile.name
        return user.default_name

    def _start_session(self, user: User) -> User:
        self._user = user
        storage.set_setting(SESSION_KEY, user.id)
        logger.info("Signed in %s", user.id)
        return user
