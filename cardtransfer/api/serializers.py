from typing import Any, Dict, Mapping
from uuid import UUID

from cardtransfer.core.dashboard import CardView
from cardtransfer.core.transfer_engine import TransferResult
from cardtransfer.db.models import TransferRecord


def serialize_card(c: CardView) -> Dict[str, Any]:
    return {
        "id": c.id,
        "number": c.number,
        "position": c.position,
        "balance": c.balance,
    }


def serialize_transfer_result(r: TransferResult) -> Dict[str, Any]:
    return {
        "status": "success",
        "reference": r.reference,
        "from_card_id": r.source_card_number,
        "to_card_id": r.destination_card_number,
        "amount": r.amount,
        "from_balance": r.source_balance,
        "to_balance": r.destination_balance,
    }


def serialize_transfer_record(t: TransferRecord, card_numbers: Mapping[UUID, str]) -> Dict[str, Any]:
    return {
        "reference": t.reference,
        "from_card_id": card_numbers.get(t.from_card_id, str(t.from_card_id)),
        "to_card_id": card_numbers.get(t.to_card_id, str(t.to_card_id)),
        "amount": int(t.amount),
        "from_balance_after": int(t.from_balance_after),
        "to_balance_after": int(t.to_balance_after),
        "created_at": t.created_at.isoformat() if t.created_at else None,
    }
