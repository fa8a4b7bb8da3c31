"""
Mock SMS Provider
Simulates delivering one-time codes to the user
"""

from typing import Dict, List, Protocol

from cardtransfer.logging_config import get_logger

logger = get_logger("cardtransfer.auth.sms")


class CodeSender(Protocol):
    def send_code(self, login: str, code: str) -> Dict[str, object]:
        ...


class MockSMSProvider:
    """
    Mock SMS provider for development/testing.

    Keeps the last code per login so test clients can read it back.
    """

    def __init__(self) -> None:
        self.sent: Dict[str, List[str]] = {}

    def send_code(self, login: str, code: str) -> Dict[str, object]:
        # In production, this would call actual SMS gateway
        logger.info("[MOCK SMS] Sending verification code %s to %s", code, login)
        self.sent.setdefault(login, []).append(code)
        return {"success": True, "message_id": "MOCK-SMS"}

    def last_code(self, login: str) -> str:
        return self.sent[login][-1]
