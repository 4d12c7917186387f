"""
Decoding of raw ``eth_call`` return data.

Each helper decodes a single return value with ``eth_abi.decode``, so
``string`` follows the general ABI rule for dynamic values (offset word,
then a length word, then the padded UTF-8 data).  Tuples and arrays are
not supported.
"""

from __future__ import annotations

from typing import Any

from eth_abi import decode
from eth_abi.exceptions import DecodingError as AbiDecodingError

from ..errors import DecodingError


def _decode_single(abi_type: str, raw: bytes) -> Any:
    try:
        (value,) = decode([abi_type], raw)
    except AbiDecodingError as exc:
        raise DecodingError(f"Could not decode {abi_type} return value: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise DecodingError(f"String is not valid UTF-8: {exc}") from exc
    return value


def decode_uint256(raw: bytes) -> int:
    """Decode a single ``uint256`` return value."""
    return _decode_single("uint256", raw)


def decode_address(raw: bytes) -> str:
    """Decode a single ``address`` return value as 0x-prefixed lowercase hex."""
    return _decode_single("address", raw).lower()


def decode_string(raw: bytes) -> str:
    """Decode a single ``string`` return value."""
    return _decode_single("string", raw)
