"""
Card identifiers.

A card is addressed either by its number (spaces allowed, as printed on the
card) or by its position in the owner's card list. Both forms resolve to the
canonical 16-digit number.
"""

import re
from typing import Union

CardRef = Union[int, str]

_NON_DIGITS = re.compile(r"[\s-]+")
_POSITION = re.compile(r"[0-9]{1,3}")


def normalize_card_number(raw: str) -> str:
    """
    "5559 0000 0000 0001" -> "5559000000000001".

    Anything that is not a digit run after stripping separators is returned
    as-is (stripped), so lookups simply fail to match.
    """
    return _NON_DIGITS.sub("", raw or "").strip()



def mask_card_number(number: str) -> str:
    """Masked form shown on the dashboard: '**** **** **** 0001'."""
    digits = normalize_card_number(number)
    return "**** **** **** " + digits[-4:]


def parse_card_ref(raw: CardRef) -> CardRef:
    """
    Interpret user input as a position (int, or a string of 1-3 ASCII digits)
    or a card number (anything else, separators ignored).

    Signs and separators never turn a string into a position: "-1" and
    "0 1" are looked up as card numbers and match nothing.
    """
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    if not isinstance(raw, str):
        raise TypeError("card reference must be an int or a string")
    stripped = raw.strip()
    if _POSITION.fullmatch(stripped):
        return int(stripped)
    return normalize_card_number(stripped)
