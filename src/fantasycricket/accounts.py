"""User registration, password hashing and session tokens."""

from __future__ import annotations

import hashlib
import hmac
import logging
import re
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from fantasycricket.errors import AuthenticationError, ValidationError
from fantasycricket.models import User
from fantasycricket.persistence import FantasyStore


logger = logging.getLogger("uvicorn.error")

_SCRYPT_N = 2**14
_SCRYPT_R = 8
_SCRYPT_P = 1
_KEY_LENGTH = 64
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def hash_password(password: str) -> str:
    """Return ``<hex digest>.<hex salt>`` for a scrypt-derived key."""

    salt = secrets.token_hex(16)
    digest = hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt.encode("utf-8"),
        n=_SCRYPT_N,
        r=_SCRYPT_R,
        p=_SCRYPT_P,
        dklen=_KEY_LENGTH,
    )
    return f"{digest.hex()}.{salt}"


def verify_password(password: str, stored: str) -> bool:
    try:
        hashed, salt = stored.split(".", 1)
        expected = bytes.fromhex(hashed)
    except ValueError:
        return False
    supplied = hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt.encode("utf-8"),
        n=_SCRYPT_N,
        r=_SCRYPT_R,
        p=_SCRYPT_P,
        dklen=_KEY_LENGTH,
    )
    return hmac.compare_digest(expected, supplied)


class AccountService:
    def __init__(self, store: FantasyStore, *, session_ttl_hours: int = 24 * 7):
        self.store = store
        self.session_ttl = timedelta(hours=session_ttl_hours)

    def register(self, *, username: str, password: str, name: str, email: str) -> User:
        username = username.strip()
        email = email.strip().lower()
        if not username:
            raise ValidationError("username is required")
        if len(password) < 6:
            raise ValidationError("password must be at least 6 characters")
        if not _EMAIL_RE.match(email):
            raise ValidationError("email is not valid")
        if self.store.user_exists(username=username, email=email):
            raise ValidationError("Username or email already exists")
        user = self.store.create_user(
            username=username,
            name=name.strip() or username,
            email=email,
            password_hash=hash_password(password),
        )
        logger.info("Registered user %s (%s)", user.id, user.username)
        return user

    def login(self, username: str, password: str) -> Tuple[User, str]:
        credentials = self.store.get_credentials(username.strip())
        if credentials is None or not verify_password(password, credentials[1]):
            raise AuthenticationError("Invalid username or password")
        user = credentials[0]
        token = self.store.create_session(user.id, expires_at=datetime.now(timezone.utc) + self.session_ttl)
        return user, token

    def logout(self, token: str) -> None:
        self.store.delete_session(token)

    def resolve(self, token: Optional[str]) -> User:
        if not token:
            raise AuthenticationError("Unauthorized")
        user = self.store.get_session_user(token)
        if user is None:
            raise AuthenticationError("Unauthorized")
        return user

    def ensure_admin(self, username: str, password: str, *, email: Optional[str] = None) -> User:
        """Create the admin account if missing, or promote an existing user."""

        credentials = self.store.get_credentials(username)
        if credentials is not None:
            user = credentials[0]
            if not user.is_admin:
                user = self.store.set_admin(user.id) or user
            return user
        user = self.store.create_user(
            username=username,
            name="Admin User",
            email=email or f"{username}@fantasycricket.local",
            password_hash=hash_password(password),
            is_admin=True,
        )
        logger.info("Created admin user %s", username)
        return user
