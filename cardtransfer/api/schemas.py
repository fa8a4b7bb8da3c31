from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    login: str
    password: str


class LoginResult(BaseModel):
    pending_token: str
    expires_at: datetime


class VerifyRequest(BaseModel):
    pending_token: str
    code: str


class VerifyResult(BaseModel):
    session_token: str
    login: str


class CardOut(BaseModel):
    id: str
    number: str
    position: int
    balance: int


class TransferIn(BaseModel):
    from_card_id: Union[int, str] = Field(..., examples=["5559 0000 0000 0001"])
    to_card_id: Union[int, str] = Field(..., examples=["5559 0000 0000 0002"])
    # Deliberately unconstrained: the engine classifies bad amounts itself
    amount: Any = Field(..., examples=[25000])


class TransferOut(BaseModel):
    status: str
    reference: str
    from_card_id: str
    to_card_id: str
    amount: int
    from_balance: int
    to_balance: int


class TransferRecordOut(BaseModel):
    reference: str
    from_card_id: str
    to_card_id: str
    amount: int
    from_balance_after: int
    to_balance_after: int
    created_at: Optional[str] = None


class ErrorOut(BaseModel):
    error: str
    detail: str
