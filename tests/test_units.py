"""Unit tests for ether <-> wei conversion."""

from __future__ import annotations

from decimal import Decimal

import pytest

from hammerdapp.units import format_ether, parse_ether


class TestParseEther:
    def test_fractional_amount(self) -> None:
        assert parse_ether("0.3") == 300_000_000_000_000_000

    def test_whole_amount(self) -> None:
        assert parse_ether(2) == 2 * 10**18

    def test_decimal_input(self) -> None:
        assert parse_ether(Decimal("0.000000000000000001")) == 1

    def test_rejects_sub_wei_precision(self) -> None:
        with pytest.raises(ValueError, match="18 decimals"):
            parse_ether("0.0000000000000000001")

    def test_rejects_negative(self) -> None:
        with pytest.raises(ValueError, match="negative"):
            parse_ether("-1")

    @pytest.mark.parametrize("value", ["three", "NaN", "sNaN", "inf", "-Infinity"])
    def test_rejects_garbage(self, value: str) -> None:
        with pytest.raises(ValueError, match="Invalid"):
            parse_ether(value)


class TestFormatEther:
    def test_strips_trailing_zeros(self) -> None:
        assert format_ether(300_000_000_000_000_000) == "0.3"

    def test_whole_number(self) -> None:
        assert format_ether(10**18) == "1"

    def test_zero(self) -> None:
        assert format_ether(0) == "0"

    def test_one_wei(self) -> None:
        assert format_ether(1) == "0.000000000000000001"
