"""
One-time code verification: the second step of the login chain.

A successful credential check creates a ``PendingVerification``. The first
code attempt against it consumes it, whether the code matches or not, so a
wrong guess sends the user back to the password step.
"""

from __future__ import annotations

import secrets
import string
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional, Protocol

from cardtransfer.auth.session_manager import Session, SessionManager
from cardtransfer.auth.sms_provider_mock import CodeSender, MockSMSProvider
from cardtransfer.core.errors import AuthError, AuthErrorKind
from cardtransfer.logging_config import get_logger

logger = get_logger("cardtransfer.auth.otp")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class PendingVerification:
    token: str
    login: str
    issued_at: datetime
    expires_at: datetime
    code: str


class CodeIssuer(Protocol):
    def issue(self, login: str) -> str:
        ...


class FixedCodeIssuer:
    """Same code for every login (the reference test fixture uses 12345)."""

    def __init__(self, code: str = "12345"):
        self.code = code

    def issue(self, login: str) -> str:
        return self.code


class RandomCodeIssuer:
    def __init__(self, length: int = 5):
        self.length = length

    def issue(self, login: str) -> str:
        return "".join(secrets.choice(string.digits) for _ in range(self.length))


class OtpManager:
    """
    Manages the pending-verification lifecycle.
    """

    def __init__(
        self,
        issuer: Optional[CodeIssuer] = None,
        sender: Optional[CodeSender] = None,
        ttl_seconds: int = 300,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.issuer = issuer or FixedCodeIssuer()
        self.sender = sender or MockSMSProvider()
        self.ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self._pending: Dict[str, PendingVerification] = {}

    def _is_expired(self, pending: PendingVerification) -> bool:
        return self._clock() > pending.expires_at

    def issue(self, login: str) -> PendingVerification:
        now = self._clock()
        pending = PendingVerification(
            token=secrets.token_urlsafe(24),
            login=login,
            issued_at=now,
            expires_at=now + self.ttl,
            code=self.issuer.issue(login),
        )
        self._pending[pending.token] = pending
        self.sender.send_code(login, pending.code)
        self._purge_expired()
        return pending

    def has_pending(self, token: str) -> bool:
        pending = self._pending.get(token)
        if pending is None:
            return False
        if self._is_expired(pending):
            self._pending.pop(token, None)
            return False
        return True

    def consume(self, token: str, code: str) -> str:
        """
        Check ``code`` against the pending verification and remove it.

        Returns the verified login.
        """
        pending = self._pending.pop(token or "", None)
        if pending is None or self._is_expired(pending):
            logger.warning("Verification rejected - unknown, used or expired token")
            raise AuthError(AuthErrorKind.EXPIRED_VERIFICATION)

        supplied = (code or "").strip().encode("utf-8")
        if not secrets.compare_digest(pending.code.encode("utf-8"), supplied):
            logger.warning("Verification rejected - invalid code login=%s", pending.login)
            raise AuthError(AuthErrorKind.INVALID_CODE)

        return pending.login

    def _purge_expired(self) -> None:
        for token in [t for t, p in self._pending.items() if self._is_expired(p)]:
            self._pending.pop(token, None)


class CodeVerifier:
    def __init__(self, otp_manager: OtpManager, session_manager: SessionManager):
        self.otp_manager = otp_manager
        self.session_manager = session_manager

    def verify(self, pending_token: str, code: str) -> Session:
        login = self.otp_manager.consume(pending_token, code)
        session = self.session_manager.create(login)
        logger.info("Verification succeeded login=%s; session created", login)
        return session


_OTP_MANAGER_SINGLETON: Optional[OtpManager] = None


def build_code_issuer(mode: str, fixed_code: str = "12345", length: int = 5) -> CodeIssuer:
    if mode == "fixed":
        return FixedCodeIssuer(fixed_code)
    if mode == "random":
        return RandomCodeIssuer(length)
    raise ValueError(f"Unknown verification code mode: {mode!r}")


def get_otp_manager() -> OtpManager:
    """
    Build (and cache) the process-wide OtpManager from configuration.
    """
    global _OTP_MANAGER_SINGLETON
    if _OTP_MANAGER_SINGLETON is None:
        from cardtransfer import config

        issuer = build_code_issuer(
            config.VERIFICATION_CODE_MODE,
            fixed_code=config.VERIFICATION_FIXED_CODE,
            length=config.VERIFICATION_CODE_LENGTH,
        )
        _OTP_MANAGER_SINGLETON = OtpManager(issuer=issuer, ttl_seconds=config.VERIFICATION_TTL_SECONDS)
    return _OTP_MANAGER_SINGLETON
