"""
Read side of the card store: which cards a session owns and their balances.

Balances are only ever written by ``TransferEngine``.
"""

from typing import List, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from cardtransfer.auth.session_manager import Session
from cardtransfer.core.card_numbers import CardRef, parse_card_ref
from cardtransfer.core.errors import NotAuthorizedError
from cardtransfer.db import crud
from cardtransfer.db.models import Card
from cardtransfer.logging_config import get_logger

logger = get_logger("cardtransfer.core.account_store")


def resolve_card(cards: Sequence[Card], ref: CardRef) -> Card:
    """
    Pick a card out of an owner's position-ordered card list by index or by
    number. Pure lookup; raises NotAuthorizedError when nothing matches.
    """
    try:
        ref = parse_card_ref(ref)
    except TypeError:
        raise NotAuthorizedError() from None

    if isinstance(ref, int):
        if 0 <= ref < len(cards):
            return cards[ref]
        raise NotAuthorizedError()

    for card in cards:
        if card.card_number == ref:
            return card
    raise NotAuthorizedError()


class AccountStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_cards(self, session: Session) -> List[Card]:
        return await crud.get_cards_for_login(self.db, session.login)

    async def get_card(self, session: Session, ref: CardRef) -> Card:
        cards = await self.list_cards(session)
        try:
            return resolve_card(cards, ref)
        except NotAuthorizedError:
            logger.warning("Card lookup denied login=%s ref=%r", session.login, ref)
            raise

    async def get_balance(self, session: Session, ref: CardRef) -> int:
        card = await self.get_card(session, ref)
        return int(card.balance)
