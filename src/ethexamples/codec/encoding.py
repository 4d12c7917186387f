"""
Hand-rolled ABI encoding for a small subset of Solidity's calling convention.

Call data is ``selector ++ word*``: a 4-byte Keccak-256 prefix of the
canonical function signature followed by one 32-byte big-endian word per
argument, in declaration order.

Only ``address`` and ``uint256`` arguments are supported.  Each supported
kind is a small frozen dataclass with its own ``encode()``; adding a kind
means adding a class and registering its ABI type name in ``ARGUMENT_TYPES``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence, Union

from eth_hash.auto import keccak

from ..errors import EncodingError

WORD_SIZE = 32
UINT256_MAX = 2**256 - 1

_SIGNATURE_RE = re.compile(r"^([A-Za-z_$][A-Za-z0-9_$]*)\((.*)\)$")


def function_selector_bytes(signature: str) -> bytes:
    """First 4 bytes of Keccak-256 over the UTF-8 signature."""
    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    return keccak(signature.encode("utf-8"))[:4]


def function_selector(signature: str) -> str:
    """
    Calculate the function selector for a canonical signature.

    The signature must not contain parameter names or whitespace, and
    parameter types must be explicit (``uint256``, not ``uint``).  Nothing
    is validated here: a malformed signature yields a wrong, but
    deterministic, selector.

    Returns:
        8 character lowercase hex string (4 bytes)
    """
    return function_selector_bytes(signature).hex()


@dataclass(frozen=True)
class Address:
    value: bytes

    @classmethod
    def parse(cls, address: str) -> "Address":
        raw = address[2:] if address[:2].lower() == "0x" else address
        try:
            value = bytes.fromhex(raw)
        except ValueError as exc:
            raise EncodingError(f"Invalid address {address!r}: {exc}") from exc
        return cls(value)

    def encode(self) -> str:
        if len(self.value) != 20:
            raise EncodingError(
                f"Address must be 20 bytes, got {len(self.value)}"
            )
        return self.value.rjust(WORD_SIZE, b"\x00").hex()

    def __str__(self) -> str:
        return "0x" + self.value.hex()


@dataclass(frozen=True)
class Uint256:
    value: int

    @classmethod
    def parse(cls, text: str) -> "Uint256":
        try:
            if text[:2].lower() == "0x":
                value = int(text[2:], 16)
            else:
                value = int(text, 10)
        except ValueError as exc:
            raise EncodingError(f"Invalid uint256 {text!r}") from exc
        return cls(value)

    def encode(self) -> str:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise EncodingError(f"uint256 must be an int, got {self.value!r}")
        if not 0 <= self.value <= UINT256_MAX:
            raise EncodingError(f"Value {self.value} does not fit in uint256")
        return f"{self.value:064x}"


Argument = Union[Address, Uint256]

ARGUMENT_TYPES: dict[str, type] = {
    "address": Address,
    "uint256": Uint256,
}


def encode_argument(arg: Argument) -> str:
    """Encode one argument into a 64 character hex word."""
    if not isinstance(arg, tuple(ARGUMENT_TYPES.values())):
        raise EncodingError(f"Unsupported argument {arg!r}")
    return arg.encode()


def build_call_data(selector: str, words: Sequence[str]) -> str:
    """Concatenate a hex selector and hex words, in order, without a prefix."""
    return selector + "".join(words)


def parse_signature(signature: str) -> tuple[str, list[str]]:
    """Split ``name(t1,t2)`` into its name and parameter types."""
    match = _SIGNATURE_RE.match(signature)
    if match is None:
        raise EncodingError(f"Malformed function signature {signature!r}")
    name, params = match.groups()
    types = params.split(",") if params else []
    return name, types


def parse_argument(text: str) -> Argument:
    """
    Parse a ``type:value`` pair, e.g. ``address:0xabc...`` or ``uint256:10``.
    """
    abi_type, sep, value = text.partition(":")
    if not sep:
        raise EncodingError(f"Argument {text!r} must be written as type:value")
    kind = ARGUMENT_TYPES.get(abi_type)
    if kind is None:
        raise EncodingError(f"Unsupported argument type {abi_type!r}")
    return kind.parse(value)


def encode_call(signature: str, args: Sequence[Argument] = ()) -> bytes:
    """
    Build call data bytes for ``signature`` with ``args``.

    The argument kinds must match the signature's parameter types.
    """
    _, types = parse_signature(signature)
    if len(types) != len(args):
        raise EncodingError(
            f"{signature} takes {len(types)} argument(s), got {len(args)}"
        )
    for abi_type, arg in zip(types, args):
        expected = ARGUMENT_TYPES.get(abi_type)
        if expected is None:
            raise EncodingError(f"Unsupported parameter type {abi_type!r}")
        if not isinstance(arg, expected):
            raise EncodingError(f"Expected {abi_type} argument, got {arg!r}")

    words = [encode_argument(arg) for arg in args]
    return bytes.fromhex(build_call_data(function_selector(signature), words))
