"""
Card Transfer Client
HTTP client for the card transfer API, shaped after the web client's
screens: login page -> verification page -> dashboard -> transfer form.
"""

from typing import Any, Dict, List, Optional, Union

import httpx

from cardtransfer.logging_config import get_logger

logger = get_logger("cardtransfer.client")


class BankClientError(Exception):
    def __init__(self, status_code: int, error: Optional[str], detail: Any):
        super().__init__(f"{status_code} {error or ''} {detail}".strip())
        self.status_code = status_code
        self.error = error
        self.detail = detail


class CardTransferClient:
    """
    Async HTTP client. Pass ``transport`` to talk to an in-process app.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:9999",
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.client = httpx.AsyncClient(base_url=self.base_url, transport=transport, timeout=timeout)
        self.pending_token: Optional[str] = None
        self.session_token: Optional[str] = None

    async def __aenter__(self) -> "CardTransferClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    def _headers(self) -> Dict[str, str]:
        if not self.session_token:
            return {}
        return {"Authorization": f"Bearer {self.session_token}"}

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        response = await self.client.request(method, f"/api{path}", headers=self._headers(), **kwargs)
        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = {"detail": response.text}
            logger.warning("%s %s failed status=%s body=%s", method, path, response.status_code, body)
            raise BankClientError(response.status_code, body.get("error"), body.get("detail"))
        return response.json()

    async def login(self, login: str, password: str) -> str:
        data = await self._request("POST", "/login", json={"login": login, "password": password})
        self.pending_token = data["pending_token"]
        return self.pending_token

    async def verify(self, code: str, pending_token: Optional[str] = None) -> str:
        token = pending_token or self.pending_token
        data = await self._request("POST", "/verify", json={"pending_token": token, "code": code})
        self.pending_token = None
        self.session_token = data["session_token"]
        return self.session_token

    async def logout(self) -> None:
        await self._request("POST", "/logout")
        self.session_token = None

    async def get_cards(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/cards")

    async def get_card_balance(self, index: int) -> int:
        return int((await self.get_cards())[index]["balance"])

    async def transfer(self, from_card: Union[int, str], to_card: Union[int, str], amount: Any) -> Dict[str, Any]:
        payload = {"from_card_id": from_card, "to_card_id": to_card, "amount": amount}
        return await self._request("POST", "/transfer", json=payload)

    async def get_transfers(self, limit: int = 20) -> List[Dict[str, Any]]:
        return await self._request("GET", "/transfers", params={"limit": limit})

    async def make_transfer_to(self, destination_index: int, source_card_number: str, amount: Any) -> Dict[str, Any]:
        """
        Dashboard "top up" on card ``destination_index``, then submit the
        transfer form with the source card number and amount.
        """
        destination = (await self.get_cards())[destination_index]["id"]
        return await self.transfer(source_card_number, destination, amount)
