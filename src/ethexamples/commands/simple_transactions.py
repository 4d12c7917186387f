"""
Simple transactions - pay some wei between two accounts.

Flow:
1. Spawn ganache with the example mnemonic
2. Query the balance of the first wallet and of another address
3. Send wei from the (unlocked) first wallet and wait for 1 confirmation
4. Print the block it was mined in and the new balance
"""

from __future__ import annotations

import click

from ..chain.ganache import DevChain
from ..chain.tx import transfer
from ..config import Settings
from ..errors import EthExamplesError
from ..utils import fail, from_hex_quantity

OTHER_ADDRESS = "0xaf206dCE72A0ef76643dfeDa34DB764E2126E646"


def run(settings: Settings, other_address: str, value: int) -> None:
    with DevChain.spawn(settings, mnemonic=settings.mnemonic) as chain:
        click.echo(f"HTTP Endpoint: {chain.endpoint}")

        # Get the first wallet managed by ganache
        first_address = chain.default_wallet().address
        click.echo(f"Wallet first address: {first_address}")

        provider = chain.provider
        click.echo(f"Wallet first address balance: {provider.get_balance(first_address)}")
        click.echo(f"Balance for address {other_address}: {provider.get_balance(other_address)}")

        pending = transfer(
            provider,
            first_address,
            other_address,
            value,
            timeout=settings.confirm_timeout,
        )
        click.echo(f"Pending transfer: {pending.tx_hash}")
        receipt = pending.confirmations(1)

        click.echo(f"TX mined in block {from_hex_quantity(receipt['blockNumber'])}")
        click.echo(f"Balance of {other_address} {provider.get_balance(other_address)}")


@click.command("simple-transactions")
@click.option("--to", "other_address", default=OTHER_ADDRESS, show_default=True,
              help="Address receiving the payment")
@click.option("--value", default=1000, type=click.IntRange(min=0), show_default=True,
              help="Amount to send in wei")
@click.pass_obj
def simple_transactions(obj: dict, other_address: str, value: int) -> None:
    """Send wei between accounts on a fresh ganache chain."""
    try:
        run(obj["settings"], other_address, value)
    except EthExamplesError as exc:
        fail(exc)
