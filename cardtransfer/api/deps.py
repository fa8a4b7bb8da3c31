import asyncio
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request

from cardtransfer.auth.otp_manager import OtpManager, get_otp_manager
from cardtransfer.auth.session_manager import Session, SessionManager, get_session_manager
from cardtransfer.db.deps import get_db  # noqa: F401  (re-exported for routers)
from cardtransfer.logging_config import get_logger

logger = get_logger("cardtransfer.api.deps")


def otp_manager_dep() -> OtpManager:
    return get_otp_manager()


def session_manager_dep() -> SessionManager:
    return get_session_manager()


def transfer_lock_dep(request: Request) -> asyncio.Lock:
    return request.app.state.transfer_lock


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_current_session(
    authorization: Optional[str] = Header(default=None),
    sessions: SessionManager = Depends(session_manager_dep),
) -> Session:
    """
    Resolve the bearer token to a live session or fail with 401.
    """
    token = _bearer_token(authorization)
    session = sessions.get(token) if token else None
    if session is None:
        logger.warning("Rejected request without a valid session")
        raise HTTPException(
            status_code=401,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session
