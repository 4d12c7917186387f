"""
Offline helpers: function selectors and call data from the command line.
"""

from __future__ import annotations

import click

from ..codec.encoding import encode_call, function_selector, parse_argument
from ..errors import EthExamplesError
from ..utils import fail


@click.command()
@click.argument("signature")
def selector(signature: str) -> None:
    """
    Print the 4-byte selector of SIGNATURE.

    \b
    Example:
      ethexamples selector 'transfer(address,uint256)'
    """
    click.echo(f"Function: {signature}")
    click.echo(f"Selector: {function_selector(signature)}")


@click.command()
@click.argument("signature")
@click.argument("args", nargs=-1)
def calldata(signature: str, args: tuple[str, ...]) -> None:
    """
    Print call data for SIGNATURE with ARGS written as type:value.

    \b
    Example:
      ethexamples calldata 'balanceOf(address)' address:0x1a9c...35bc
    """
    try:
        data = encode_call(signature, [parse_argument(arg) for arg in args])
    except EthExamplesError as exc:
        fail(exc)
    click.echo("0x" + data.hex())
