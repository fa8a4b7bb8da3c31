"""
Exception handlers translating core errors into JSON responses of the
shape {"error": <kind>, "detail": <message>}. Malformed request bodies use
the same shape with error "invalid_request" and status 422.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from cardtransfer.core.errors import AuthError, AuthErrorKind, CardTransferError, TransferErrorKind
from cardtransfer.logging_config import get_logger

logger = get_logger("cardtransfer.api.errors")

HTTP_STATUS_BY_KIND = {
    AuthErrorKind.INVALID_CREDENTIALS: 401,
    AuthErrorKind.INVALID_CODE: 401,
    AuthErrorKind.EXPIRED_VERIFICATION: 401,
    TransferErrorKind.INVALID_AMOUNT: 400,
    TransferErrorKind.NOT_AUTHORIZED: 403,
    TransferErrorKind.SAME_CARD: 400,
    TransferErrorKind.INSUFFICIENT_FUNDS: 409,
}


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(CardTransferError)
    async def card_transfer_error_handler(request: Request, exc: CardTransferError):
        status_code = HTTP_STATUS_BY_KIND.get(exc.kind, 400)
        logger.info("%s %s -> %s %s", request.method, request.url.path, status_code, exc.kind.value)
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
        return JSONResponse(
            status_code=status_code,
            content={"error": exc.kind.value, "detail": exc.message},
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        detail = f"{field}: {first.get('msg', 'invalid request')}" if field else first.get("msg", "invalid request")
        logger.info("%s %s -> 422 invalid_request %s", request.method, request.url.path, detail)
        return JSONResponse(status_code=422, content={"error": "invalid_request", "detail": detail})
