"""
Card-to-card transfers.

Validation runs in a fixed order and the first failing check decides the
error:

1. amount is a positive integer          -> INVALID_AMOUNT
2. both cards belong to the session user -> NOT_AUTHORIZED
3. source and destination differ         -> SAME_CARD
4. source balance covers the amount      -> INSUFFICIENT_FUNDS

A successful transfer debits and credits inside one database transaction
while holding the engine lock, so no reader sees one side without the other.
A failed transfer leaves every balance untouched.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cardtransfer.auth.session_manager import Session
from cardtransfer.core.account_store import AccountStore, resolve_card
from cardtransfer.core.card_numbers import CardRef
from cardtransfer.core.errors import TransferError, TransferErrorKind
from cardtransfer.db.models import Card, TransferRecord
from cardtransfer.logging_config import get_logger

logger = get_logger("cardtransfer.core.transfer_engine")


@dataclass(frozen=True)
class TransferResult:
    reference: str
    source_card_number: str
    destination_card_number: str
    amount: int
    source_balance: int
    destination_balance: int


def validate_amount(amount) -> int:
    # bool is an int subclass; True must not mean "transfer 1"
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise TransferError(TransferErrorKind.INVALID_AMOUNT)
    return amount


class TransferEngine:
    def __init__(self, db: AsyncSession, lock: asyncio.Lock):
        self.db = db
        self.lock = lock
        self.store = AccountStore(db)

    async def _lock_card(self, card: Card) -> Card:
        # FOR UPDATE is a no-op on SQLite; the engine lock covers that case
        stmt = (
            select(Card)
            .where(Card.card_id == card.card_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        res = await self.db.execute(stmt)
        return res.scalars().one()

    async def transfer(
        self,
        session: Session,
        source: CardRef,
        destination: CardRef,
        amount,
    ) -> TransferResult:
        amount = validate_amount(amount)
        logger.info(
            "Transfer request login=%s from=%r to=%r amount=%s",
            session.login,
            source,
            destination,
            amount,
        )

        async with self.lock:
            try:
                result = await self._apply(session, source, destination, amount)
            except TransferError as e:
                await self.db.rollback()
                logger.warning(
                    "Transfer rejected login=%s from=%r to=%r amount=%s reason=%s",
                    session.login,
                    source,
                    destination,
                    amount,
                    e.kind.value,
                )
                raise
            except SQLAlchemyError as e:
                await self.db.rollback()
                logger.exception("Transfer failed (DB error): %s", e)
                raise

        logger.info(
            "Transfer success ref=%s from=%s to=%s amount=%s balances=%s/%s",
            result.reference,
            result.source_card_number,
            result.destination_card_number,
            amount,
            result.source_balance,
            result.destination_balance,
        )
        return result

    async def _apply(self, session: Session, source: CardRef, destination: CardRef, amount: int) -> TransferResult:
        cards = await self.store.list_cards(session)

        card_from = resolve_card(cards, source)
        card_to = resolve_card(cards, destination)

        if card_from.card_id == card_to.card_id:
            raise TransferError(TransferErrorKind.SAME_CARD)

        # Lock in a stable order so two opposite transfers cannot deadlock
        first, second = sorted((card_from, card_to), key=lambda c: str(c.card_id))
        locked = {c.card_id: await self._lock_card(c) for c in (first, second)}
        card_from = locked[card_from.card_id]
        card_to = locked[card_to.card_id]

        if card_from.balance < amount:
            raise TransferError(TransferErrorKind.INSUFFICIENT_FUNDS)

        now = datetime.now(timezone.utc).replace(tzinfo=None)
        card_from.balance = card_from.balance - amount
        card_to.balance = card_to.balance + amount
        card_from.updated_at = now
        card_to.updated_at = now

        record = TransferRecord(
            transfer_id=uuid4(),
            reference=f"TXN{uuid4().hex[:12].upper()}",
            initiated_by=card_from.user_id,
            from_card_id=card_from.card_id,
            to_card_id=card_to.card_id,
            amount=amount,
            from_balance_after=card_from.balance,
            to_balance_after=card_to.balance,
            created_at=now,
        )
        self.db.add(record)
        await self.db.commit()

        return TransferResult(
            reference=record.reference,
            source_card_number=card_from.card_number,
            destination_card_number=card_to.card_number,
            amount=amount,
            source_balance=int(card_from.balance),
            destination_balance=int(card_to.balance),
        )
