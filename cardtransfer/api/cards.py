import asyncio
from typing import List

from fastapi import APIRouter, Depends

from cardtransfer.auth.session_manager import Session
from cardtransfer.core.account_store import AccountStore
from cardtransfer.core.dashboard import Dashboard
from cardtransfer.db import crud
from cardtransfer.logging_config import get_logger
from .deps import get_current_session, get_db, transfer_lock_dep
from .schemas import CardOut, ErrorOut, TransferIn, TransferOut, TransferRecordOut
from .serializers import serialize_card, serialize_transfer_record, serialize_transfer_result

logger = get_logger("cardtransfer.api.cards")

router = APIRouter(tags=["cards"])


@router.get("/cards", response_model=List[CardOut])
async def list_cards(
    session: Session = Depends(get_current_session),
    db=Depends(get_db),
    lock: asyncio.Lock = Depends(transfer_lock_dep),
):
    """
    Cards of the logged-in user in assignment order (position 0 first).
    """
    cards = await Dashboard(db, session, lock).cards()
    return [serialize_card(c) for c in cards]


@router.get("/cards/{card_ref}", response_model=CardOut, responses={403: {"model": ErrorOut}})
async def get_card(
    card_ref: str,
    session: Session = Depends(get_current_session),
    db=Depends(get_db),
    lock: asyncio.Lock = Depends(transfer_lock_dep),
):
    """
    Single card by number (spaces allowed) or by position.
    """
    return serialize_card(await Dashboard(db, session, lock).card(card_ref))


@router.post(
    "/transfer",
    response_model=TransferOut,
    responses={400: {"model": ErrorOut}, 403: {"model": ErrorOut}, 409: {"model": ErrorOut}},
)
async def transfer(
    payload: TransferIn,
    session: Session = Depends(get_current_session),
    db=Depends(get_db),
    lock: asyncio.Lock = Depends(transfer_lock_dep),
):
    """
    Move ``amount`` minor units between two cards of the logged-in user.
    """
    dashboard = Dashboard(db, session, lock=lock)
    result = await dashboard.transfer(payload.from_card_id, payload.to_card_id, payload.amount)
    return serialize_transfer_result(result)


@router.get("/transfers", response_model=List[TransferRecordOut])
async def list_transfers(limit: int = 20, session: Session = Depends(get_current_session), db=Depends(get_db)):
    """
    Most recent transfers made by the logged-in user.
    """
    limit = max(1, min(limit, 100))
    cards = await AccountStore(db).list_cards(session)
    numbers = {c.card_id: c.card_number for c in cards}
    records = await crud.get_transfers_for_login(db, session.login, limit=limit)
    return [serialize_transfer_record(t, numbers) for t in records]
