"""Unit tests for utils.py functions."""

from __future__ import annotations

from ethexamples.utils import format_wei, from_hex_quantity, hex_to_bytes, strip_0x, to_hex_quantity


class TestFormatWei:
    def test_ether(self) -> None:
        assert format_wei(1_500_000_000_000_000_000, 18, "ETH") == "1.500 ETH"

    def test_six_decimals(self) -> None:
        assert format_wei(845044608000000, 6, "USDT") == "845044608.000 USDT"

    def test_no_unit(self) -> None:
        assert format_wei(0, 18) == "0.000 "


class TestHex:
    def test_strip_0x(self) -> None:
        assert strip_0x("0xabc") == "abc"
        assert strip_0x("0XABC") == "ABC"
        assert strip_0x("abc") == "abc"

    def test_hex_to_bytes(self) -> None:
        assert hex_to_bytes("0x00ff") == b"\x00\xff"
        assert hex_to_bytes("0x") == b""

    def test_quantities(self) -> None:
        assert to_hex_quantity(0) == "0x0"
        assert to_hex_quantity(1337) == "0x539"
        assert from_hex_quantity("0x539") == 1337
