"""Unit tests for the hand-rolled selector and argument encoding."""

from __future__ import annotations

import pytest
from eth_abi import encode

from ethexamples.codec.encoding import (
    UINT256_MAX,
    Address,
    Uint256,
    build_call_data,
    encode_argument,
    encode_call,
    function_selector,
    function_selector_bytes,
    parse_argument,
    parse_signature,
)
from ethexamples.errors import EncodingError

HOLDER = "0x1a9c8182c09f50c8318d769245bea52c32be35bc"
RECIPIENT = "0x192F53Ba0f8aBa9F0E7Af809916d6ffE2b6A9C31"


class TestFunctionSelector:
    """Tests for function_selector."""

    def test_symbol(self) -> None:
        assert function_selector("symbol()") == "95d89b41"

    def test_balance_of(self) -> None:
        assert function_selector("balanceOf(address)") == "70a08231"

    def test_transfer(self) -> None:
        assert function_selector("transfer(address,uint256)") == "a9059cbb"

    def test_deterministic_and_lowercase_hex(self) -> None:
        first = function_selector("approve(address,uint256)")
        second = function_selector("approve(address,uint256)")
        assert first == second == "095ea7b3"
        assert len(first) == 8
        assert first == first.lower()

    def test_malformed_signature_still_hashes(self) -> None:
        # Not the canonical form, so not the transfer selector, but stable
        result = function_selector("transfer(address to, uint amount)")
        assert len(result) == 8
        assert result != "a9059cbb"
        assert result == function_selector("transfer(address to, uint amount)")

    def test_bytes_variant(self) -> None:
        assert function_selector_bytes("symbol()") == bytes.fromhex("95d89b41")


class TestAddress:
    """Tests for Address encoding."""

    def test_left_padded_to_word(self) -> None:
        word = encode_argument(Address.parse(HOLDER))
        assert len(word) == 64
        assert word == "0" * 24 + HOLDER[2:]

    def test_roundtrip_strips_24_zero_chars(self) -> None:
        address = Address.parse(RECIPIENT)
        word = encode_argument(address)
        assert word[:24] == "0" * 24
        assert bytes.fromhex(word[24:]) == address.value

    def test_accepts_missing_prefix(self) -> None:
        assert Address.parse(HOLDER[2:]) == Address.parse(HOLDER)

    def test_matches_eth_abi(self) -> None:
        word = encode_argument(Address.parse(RECIPIENT))
        assert word == encode(["address"], [RECIPIENT.lower()]).hex()

    def test_wrong_length_rejected(self) -> None:
        with pytest.raises(EncodingError):
            encode_argument(Address(b"\x01" * 19))

    def test_invalid_hex_rejected(self) -> None:
        with pytest.raises(EncodingError):
            Address.parse("0xnothex")


class TestUint256:
    """Tests for Uint256 encoding."""

    def test_zero(self) -> None:
        assert encode_argument(Uint256(0)) == "0" * 64

    def test_max(self) -> None:
        assert encode_argument(Uint256(UINT256_MAX)) == "f" * 64

    def test_big_endian(self) -> None:
        word = encode_argument(Uint256(845044608000000))
        assert word == encode(["uint256"], [845044608000000]).hex()

    def test_overflow_rejected(self) -> None:
        with pytest.raises(EncodingError):
            encode_argument(Uint256(UINT256_MAX + 1))

    def test_negative_rejected(self) -> None:
        with pytest.raises(EncodingError):
            encode_argument(Uint256(-1))

    def test_bool_rejected(self) -> None:
        with pytest.raises(EncodingError):
            encode_argument(Uint256(True))

    def test_parse_decimal_and_hex(self) -> None:
        assert Uint256.parse("100") == Uint256(100)
        assert Uint256.parse("0xff") == Uint256(255)

    def test_parse_leading_zeros_and_uppercase_prefix(self) -> None:
        assert Uint256.parse("010") == Uint256(10)
        assert Uint256.parse("0XFF") == Uint256(255)

    def test_parse_invalid(self) -> None:
        with pytest.raises(EncodingError):
            Uint256.parse("ten")


class TestEncodeArgument:
    def test_unsupported_object(self) -> None:
        with pytest.raises(EncodingError):
            encode_argument(42)  # type: ignore[arg-type]


class TestBuildCallData:
    """Tests for build_call_data."""

    def test_concatenates_in_order(self) -> None:
        selector = function_selector("transfer(address,uint256)")
        w1 = encode_argument(Address.parse(RECIPIENT))
        w2 = encode_argument(Uint256(10))
        data = build_call_data(selector, [w1, w2])
        assert data == selector + w1 + w2
        assert len(data) == 8 + 64 + 64

    def test_no_arguments(self) -> None:
        assert build_call_data("95d89b41", []) == "95d89b41"


class TestEncodeCall:
    """Tests for encode_call."""

    def test_transfer_matches_eth_abi(self) -> None:
        data = encode_call(
            "transfer(address,uint256)",
            [Address.parse(RECIPIENT), Uint256(845044608000000)],
        )
        expected = bytes.fromhex("a9059cbb") + encode(
            ["address", "uint256"], [RECIPIENT.lower(), 845044608000000]
        )
        assert data == expected

    def test_no_args(self) -> None:
        assert encode_call("symbol()") == bytes.fromhex("95d89b41")

    def test_wrong_arity(self) -> None:
        with pytest.raises(EncodingError, match="takes 1 argument"):
            encode_call("balanceOf(address)", [])

    def test_wrong_kind(self) -> None:
        with pytest.raises(EncodingError, match="Expected address"):
            encode_call("balanceOf(address)", [Uint256(1)])

    def test_unsupported_parameter_type(self) -> None:
        with pytest.raises(EncodingError, match="Unsupported parameter"):
            encode_call("setFlag(bool)", [Uint256(1)])

    def test_malformed_signature(self) -> None:
        with pytest.raises(EncodingError, match="Malformed"):
            encode_call("transfer", [])


class TestParsing:
    """Tests for signature and type:value parsing."""

    def test_parse_signature(self) -> None:
        assert parse_signature("transfer(address,uint256)") == (
            "transfer",
            ["address", "uint256"],
        )
        assert parse_signature("symbol()") == ("symbol", [])

    def test_parse_argument(self) -> None:
        assert parse_argument(f"address:{HOLDER}") == Address.parse(HOLDER)
        assert parse_argument("uint256:7") == Uint256(7)

    def test_parse_argument_requires_type(self) -> None:
        with pytest.raises(EncodingError, match="type:value"):
            parse_argument("7")

    def test_parse_argument_unknown_type(self) -> None:
        with pytest.raises(EncodingError, match="Unsupported argument type"):
            parse_argument("bytes32:0x00")
