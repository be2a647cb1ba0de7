"""Tests for inventory reads."""

from __future__ import annotations

import asyncio

import pytest

from hammerdapp.chain.abi import HAMMER_ABI
from hammerdapp.config import HAMMER_CONTRACT_ADDRESS
from hammerdapp.core.binding import bind
from hammerdapp.core.errors import ReadError
from hammerdapp.core.poller import InventorySnapshot, refresh
from hammerdapp.core.provider import AccessMode, initialize
from hammerdapp.units import parse_ether


def _binding(chain):
    provider = initialize(AccessMode.REMOTE_READ_ONLY, rpc=chain.rpc())
    return bind(HAMMER_CONTRACT_ADDRESS, HAMMER_ABI, provider)


class TestRefresh:
    def test_reads_count_and_price(self, chain) -> None:
        snapshot = asyncio.run(refresh(_binding(chain)))
        assert snapshot == InventorySnapshot(available_count=5, unit_price=parse_ether("0.3"))
        assert chain.calls == ["eth_call", "eth_call"]

    def test_missing_price_is_tolerated(self, chain) -> None:
        chain.price = None
        snapshot = asyncio.run(refresh(_binding(chain)))
        assert snapshot.available_count == 5
        assert snapshot.unit_price is None

    def test_zero_stock(self, chain) -> None:
        chain.available = 0
        assert asyncio.run(refresh(_binding(chain))).available_count == 0

    def test_count_failure_raises(self, chain) -> None:
        chain.available_error = {"code": -32000, "message": "header not found"}
        with pytest.raises(ReadError, match="Failed to fetch hammer data: header not found"):
            asyncio.run(refresh(_binding(chain)))
        assert chain.calls == ["eth_call"]
