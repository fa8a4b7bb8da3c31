"""
Dashboard facade: what a logged-in user sees and can do.

Mirrors the screens of the web client: the dashboard lists cards by
position, "top up" on a card opens a transfer form with that card as the
destination, and the form takes the source card number and an amount.
No business rules live here; errors from the store and the engine
propagate unchanged.
"""

import asyncio
from dataclasses import dataclass
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from cardtransfer.auth.session_manager import Session
from cardtransfer.core.account_store import AccountStore
from cardtransfer.core.card_numbers import CardRef, mask_card_number
from cardtransfer.core.transfer_engine import TransferEngine, TransferResult
from cardtransfer.db.models import Card


@dataclass(frozen=True)
class CardView:
    id: str
    number: str
    position: int
    balance: int


def _view(card: Card) -> CardView:
    return CardView(
        id=card.card_number,
        number=mask_card_number(card.card_number),
        position=card.position,
        balance=int(card.balance),
    )


class TransferForm:
    def __init__(self, dashboard: "Dashboard", destination_card_number: str):
        self.dashboard = dashboard
        self.destination_card_number = destination_card_number

    async def make_transfer(self, source_card_number: str, amount) -> TransferResult:
        return await self.dashboard.transfer(source_card_number, self.destination_card_number, amount)


class Dashboard:
    def __init__(self, db: AsyncSession, session: Session, lock: asyncio.Lock):
        self.session = session
        self.store = AccountStore(db)
        self.engine = TransferEngine(db, lock)

    async def cards(self) -> List[CardView]:
        return [_view(card) for card in await self.store.list_cards(self.session)]

    async def card(self, ref: CardRef) -> CardView:
        return _view(await self.store.get_card(self.session, ref))

    async def get_card_balance(self, ref: CardRef) -> int:
        return await self.store.get_balance(self.session, ref)

    async def select_destination_card(self, ref: CardRef) -> TransferForm:
        card = await self.store.get_card(self.session, ref)
        return TransferForm(self, card.card_number)

    async def transfer(self, source: CardRef, destination: CardRef, amount) -> TransferResult:
        return await self.engine.transfer(self.session, source, destination, amount)
