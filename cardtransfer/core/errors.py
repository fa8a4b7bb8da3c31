"""
Error taxonomy for the authentication chain and the transfer core.

Core components raise these; the HTTP layer maps ``kind`` to a status code.
"""

from enum import Enum


class AuthErrorKind(str, Enum):
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_CODE = "invalid_code"
    EXPIRED_VERIFICATION = "expired_verification"


class TransferErrorKind(str, Enum):
    INVALID_AMOUNT = "invalid_amount"
    NOT_AUTHORIZED = "not_authorized"
    SAME_CARD = "same_card"
    INSUFFICIENT_FUNDS = "insufficient_funds"


_AUTH_MESSAGES = {
    AuthErrorKind.INVALID_CREDENTIALS: "Invalid login or password",
    AuthErrorKind.INVALID_CODE: "Invalid verification code",
    AuthErrorKind.EXPIRED_VERIFICATION: "Verification expired or already used; log in again",
}

_TRANSFER_MESSAGES = {
    TransferErrorKind.INVALID_AMOUNT: "Transfer amount must be a positive integer",
    TransferErrorKind.NOT_AUTHORIZED: "Card not found among your cards",
    TransferErrorKind.SAME_CARD: "Source and destination card must differ",
    TransferErrorKind.INSUFFICIENT_FUNDS: "Insufficient funds on the source card",
}


class CardTransferError(Exception):
    """Base class for every error the core reports to callers."""

    def __init__(self, kind: Enum, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


class AuthError(CardTransferError):
    def __init__(self, kind: AuthErrorKind, message: str = None):
        super().__init__(kind, message or _AUTH_MESSAGES[kind])


class TransferError(CardTransferError):
    def __init__(self, kind: TransferErrorKind, message: str = None):
        super().__init__(kind, message or _TRANSFER_MESSAGES[kind])


class NotAuthorizedError(TransferError):
    """Card unknown or owned by somebody else."""

    def __init__(self, message: str = None):
        super().__init__(TransferErrorKind.NOT_AUTHORIZED, message)
