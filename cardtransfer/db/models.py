from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Column,
    ForeignKey,
    Integer,
    String,
    TIMESTAMP,
    UniqueConstraint,
    Uuid,
    func,
)

from cardtransfer.db.session import Base


class User(Base):
    __tablename__ = "users"

    user_id = Column(Uuid(as_uuid=True), primary_key=True)
    login = Column(String(50), unique=True, nullable=False)
    # bcrypt hash, see auth/credentials.py
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(255))
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now())


class Card(Base):
    __tablename__ = "cards"
    __table_args__ = (
        CheckConstraint("balance >= 0", name="ck_cards_balance_non_negative"),
        UniqueConstraint("user_id", "position", name="uq_cards_user_position"),
    )

    card_id = Column(Uuid(as_uuid=True), primary_key=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.user_id"), nullable=False)
    # 16 digits, no spaces
    card_number = Column(String(19), unique=True, nullable=False)
    # Order in which the card was assigned to its owner (0, 1, ...)
    position = Column(Integer, nullable=False)
    # Minor currency units
    balance = Column(BigInteger, nullable=False, default=0)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now())


class TransferRecord(Base):
    __tablename__ = "transfers"

    transfer_id = Column(Uuid(as_uuid=True), primary_key=True)
    reference = Column(String(50), unique=True, nullable=False)
    initiated_by = Column(Uuid(as_uuid=True), ForeignKey("users.user_id"), nullable=False)
    from_card_id = Column(Uuid(as_uuid=True), ForeignKey("cards.card_id"), nullable=False)
    to_card_id = Column(Uuid(as_uuid=True), ForeignKey("cards.card_id"), nullable=False)
    amount = Column(BigInteger, nullable=False)
    from_balance_after = Column(BigInteger, nullable=False)
    to_balance_after = Column(BigInteger, nullable=False)
    created_at = Column(TIMESTAMP, nullable=False)
