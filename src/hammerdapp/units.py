"""Native currency <-> wei conversions."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Union

WEI_PER_ETHER = 10**18


def parse_ether(value: Union[str, int, Decimal]) -> int:
    """Convert an ether amount ("0.3") to wei."""
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Invalid ether amount: {value!r}")
    if not amount.is_finite():
        raise ValueError(f"Invalid ether amount: {value!r}")
    if amount < 0:
        raise ValueError(f"Ether amount must not be negative: {value!r}")
    wei = amount * WEI_PER_ETHER
    if wei != wei.to_integral_value():
        raise ValueError(f"Ether amount has more than 18 decimals: {value!r}")
    return int(wei)


def format_ether(wei: int) -> str:
    """Convert wei to a plain decimal ether string ("0.3")."""
    amount = Decimal(wei) / WEI_PER_ETHER
    text = format(amount, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
