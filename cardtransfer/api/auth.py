from fastapi import APIRouter, Depends

from cardtransfer.auth.credentials import CredentialVerifier, DatabaseCredentialStore
from cardtransfer.auth.otp_manager import CodeVerifier, OtpManager
from cardtransfer.auth.session_manager import Session, SessionManager
from cardtransfer.logging_config import get_logger
from .deps import get_current_session, get_db, otp_manager_dep, session_manager_dep
from .schemas import ErrorOut, LoginRequest, LoginResult, VerifyRequest, VerifyResult

logger = get_logger("cardtransfer.api.auth")

router = APIRouter(tags=["auth"])


@router.post("/login", response_model=LoginResult, responses={401: {"model": ErrorOut}})
async def login(
    payload: LoginRequest,
    db=Depends(get_db),
    otp: OtpManager = Depends(otp_manager_dep),
):
    """
    Check login + password; on success a verification code is sent and a
    pending token returned for the /verify step.
    """
    logger.info("Login attempt login=%s", payload.login)
    verifier = CredentialVerifier(DatabaseCredentialStore(db), otp)
    pending = await verifier.verify(payload.login, payload.password)
    return LoginResult(pending_token=pending.token, expires_at=pending.expires_at)


@router.post("/verify", response_model=VerifyResult, responses={401: {"model": ErrorOut}})
async def verify(
    payload: VerifyRequest,
    otp: OtpManager = Depends(otp_manager_dep),
    sessions: SessionManager = Depends(session_manager_dep),
):
    """
    Exchange a pending token and the one-time code for a session token.
    The pending token is spent by this call whatever the outcome.
    """
    session = CodeVerifier(otp, sessions).verify(payload.pending_token, payload.code)
    return VerifyResult(session_token=session.token, login=session.login)


@router.post("/logout")
async def logout(
    session: Session = Depends(get_current_session),
    sessions: SessionManager = Depends(session_manager_dep),
):
    sessions.destroy(session.token)
    logger.info("Logout login=%s", session.login)
    return {"status": "ok"}
