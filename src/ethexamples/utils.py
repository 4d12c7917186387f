from __future__ import annotations

import sys
from typing import NoReturn, Optional

import click

from .errors import EthExamplesError


def sep() -> None:
    click.echo("=" * 80)


def fail(exc: EthExamplesError) -> NoReturn:
    """Print an error and exit with its exit code."""
    click.secho(f"ERROR: {exc}", fg="red")
    sys.exit(exc.exit_code)


def format_wei(amount: int, decimals: int, unit: Optional[str] = None) -> str:
    """Render a raw integer amount with ``decimals`` as a 3-decimal string."""
    return f"{amount / (10 ** decimals):.3f} {unit or ''}"


def strip_0x(value: str) -> str:
    return value[2:] if value[:2].lower() == "0x" else value


def hex_to_bytes(value: str) -> bytes:
    return bytes.fromhex(strip_0x(value))


def to_hex_quantity(value: int) -> str:
    """Encode an int as a JSON-RPC quantity (0x-prefixed, no leading zeros)."""
    return hex(value)


def from_hex_quantity(value: str) -> int:
    return int(value, 16)
