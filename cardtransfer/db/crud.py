from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cardtransfer.db.models import Card, TransferRecord, User


async def get_user_by_login(db: AsyncSession, login: str) -> Optional[User]:
    q = select(User).where(User.login == login)
    res = await db.execute(q)
    return res.scalars().first()


async def get_cards_for_login(db: AsyncSession, login: str) -> List[Card]:
    q = (
        select(Card)
        .join(User, User.user_id == Card.user_id)
        .where(User.login == login)
        .order_by(Card.position.asc())
        .execution_options(populate_existing=True)
    )
    res = await db.execute(q)
    return list(res.scalars().all())


async def get_card_by_number(db: AsyncSession, card_number: str) -> Optional[Card]:
    q = select(Card).where(Card.card_number == card_number).execution_options(populate_existing=True)
    res = await db.execute(q)
    return res.scalars().first()


async def get_transfers_for_login(db: AsyncSession, login: str, limit: int = 20) -> List[TransferRecord]:
    q = (
        select(TransferRecord)
        .join(User, User.user_id == TransferRecord.initiated_by)
        .where(User.login == login)
        .order_by(TransferRecord.created_at.desc())
        .limit(limit)
    )
    res = await db.execute(q)
    return list(res.scalars().all())
