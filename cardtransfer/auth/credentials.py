"""
Credential checking: the first step of the login chain.

``CredentialVerifier.verify`` checks a login/password pair against a
pluggable ``CredentialStore`` and, on success, asks the ``OtpManager`` for a
fresh pending-verification token.
"""

from __future__ import annotations

import hmac
from typing import Dict, Protocol

import bcrypt
from sqlalchemy.ext.asyncio import AsyncSession

from cardtransfer.auth.otp_manager import OtpManager, PendingVerification
from cardtransfer.core.errors import AuthError, AuthErrorKind
from cardtransfer.db import crud
from cardtransfer.logging_config import get_logger

logger = get_logger("cardtransfer.auth.credentials")


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except (AttributeError, ValueError):
        # missing or malformed stored hash
        return False


# Checked against when the login is unknown so both paths cost one bcrypt round
_DUMMY_HASH = hash_password("not-a-real-password")


class CredentialStore(Protocol):
    async def check(self, login: str, password: str) -> bool:
        ...


class DatabaseCredentialStore:
    """Checks credentials against the users table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def check(self, login: str, password: str) -> bool:
        user = await crud.get_user_by_login(self.db, login)
        if user is None:
            # Burn comparable time so unknown logins are not distinguishable
            check_password(password, _DUMMY_HASH)
            return False
        return check_password(password, user.password_hash)


class StaticCredentialStore:
    """In-memory login -> password mapping, for fixtures and tests."""

    def __init__(self, passwords: Dict[str, str]):
        self._passwords = dict(passwords)

    async def check(self, login: str, password: str) -> bool:
        expected = self._passwords.get(login)
        if expected is None:
            return False
        return hmac.compare_digest(expected.encode("utf-8"), password.encode("utf-8"))


class CredentialVerifier:
    def __init__(self, store: CredentialStore, otp_manager: OtpManager):
        self.store = store
        self.otp_manager = otp_manager

    async def verify(self, login: str, password: str) -> PendingVerification:
        """
        Validate login + password and issue a pending verification.

        Raises AuthError(INVALID_CREDENTIALS) on any mismatch without saying
        which field was wrong.
        """
        login_norm = (login or "").strip()
        if not login_norm or not password:
            logger.warning("Login rejected - empty login or password")
            raise AuthError(AuthErrorKind.INVALID_CREDENTIALS)

        if not await self.store.check(login_norm, password):
            logger.warning("Login rejected - invalid credentials login=%s", login_norm)
            raise AuthError(AuthErrorKind.INVALID_CREDENTIALS)

        pending = self.otp_manager.issue(login_norm)
        logger.info("Credentials accepted login=%s; verification pending", login_norm)
        return pending
