"""
Inventory Poller - re-reads the contract's view fields.

Triggered when the contract binding is rebuilt and when a transaction
reaches a terminal stage.  The sale price is best-effort: contract
revisions without ``hammerSalePrice`` just yield an unknown price.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .binding import ContractBinding
from .errors import ReadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InventorySnapshot:
    available_count: int = 0
    unit_price: Optional[int] = None


EMPTY_SNAPSHOT = InventorySnapshot()


async def refresh(binding: ContractBinding) -> InventorySnapshot:
    """
    Read available count and sale price into a new snapshot.

    Raises:
        ReadError: if the available count cannot be read (callers keep
            their previous snapshot)
    """
    try:
        available = await binding.call("getAvailableHammers")
    except Exception as exc:
        raise ReadError(f"Failed to fetch hammer data: {exc}") from exc
    if available is None:
        raise ReadError("Failed to fetch hammer data: empty result from getAvailableHammers")

    try:
        price = await binding.call("hammerSalePrice")
    except Exception as exc:
        logger.warning("hammerSalePrice unavailable: %s", exc)
        price = None

    snapshot = InventorySnapshot(available_count=int(available), unit_price=price)
    logger.info(
        "Inventory: %d available, price %s",
        snapshot.available_count,
        "unknown" if price is None else price,
    )
    return snapshot
