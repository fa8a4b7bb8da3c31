"""
Reference data: one user with two cards, matching the fixture the web
client's end-to-end tests were written against.
"""

from typing import Dict, List, Tuple
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from cardtransfer.auth.credentials import hash_password
from cardtransfer.core.card_numbers import normalize_card_number
from cardtransfer.db import crud
from cardtransfer.db.models import Card, User
from cardtransfer.logging_config import get_logger

logger = get_logger("cardtransfer.db.seed")

DEMO_LOGIN = "vasya"
DEMO_PASSWORD = "qwerty123"
DEMO_VERIFICATION_CODE = "12345"

# (card number, opening balance in minor units)
DEMO_CARDS: List[Tuple[str, int]] = [
    ("5559 0000 0000 0001", 1_000_000),
    ("5559 0000 0000 0002", 1_000_000),
]

DEMO_USERS: List[Dict] = [
    {
        "login": DEMO_LOGIN,
        "password": DEMO_PASSWORD,
        "full_name": "Vasya Pupkin",
        "cards": DEMO_CARDS,
    },
]


async def seed_demo_data(db: AsyncSession, users: List[Dict] = None) -> Dict[str, int]:
    """
    Idempotent: existing users and cards are left alone, balances included.
    """
    users_created = 0
    cards_created = 0

    for su in users or DEMO_USERS:
        user = await crud.get_user_by_login(db, su["login"])
        if user is None:
            user = User(
                user_id=uuid4(),
                login=su["login"],
                password_hash=hash_password(su["password"]),
                full_name=su.get("full_name"),
            )
            db.add(user)
            await db.flush()
            users_created += 1

        for position, (number, balance) in enumerate(su["cards"]):
            card_number = normalize_card_number(number)
            if await crud.get_card_by_number(db, card_number) is not None:
                continue
            db.add(
                Card(
                    card_id=uuid4(),
                    user_id=user.user_id,
                    card_number=card_number,
                    position=position,
                    balance=balance,
                )
            )
            cards_created += 1

    await db.commit()
    logger.info("Seed complete; users_created=%s cards_created=%s", users_created, cards_created)
    return {"users_created": users_created, "cards_created": cards_created}
