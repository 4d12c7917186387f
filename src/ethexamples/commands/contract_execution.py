"""
Contract execution - call and transact against a token with hand-built call data.

Typically run against a fork of mainnet with a token holder unlocked:

    ethexamples contract-execution \\
        --fork https://mainnet.infura.io/v3/KEY \\
        --unlock 0x1a9c8182c09f50c8318d769245bea52c32be35bc

Flow:
1. Spawn ganache (forking / unlocking when asked)
2. ``symbol()`` and ``balanceOf(address)`` as read-only calls
3. Predict a gas price from the latest block
4. ``transfer(address,uint256)`` as a transaction, 1 confirmation
5. ``balanceOf(recipient)`` again
"""

from __future__ import annotations

from typing import Optional

import click

from ..chain import erc20
from ..chain.ganache import DevChain
from ..chain.tx import next_block_base_fee
from ..config import Settings
from ..errors import EthExamplesError, TransportError
from ..utils import fail, format_wei, from_hex_quantity, sep

# Tether USD on mainnet
DEFAULT_TOKEN = "0xdac17f958d2ee523a2206206994597c13d831ec7"
DEFAULT_RECIPIENT = "0x192F53Ba0f8aBa9F0E7Af809916d6ffE2b6A9C31"
DEFAULT_AMOUNT = 845044608000000


def ganache_args(fork: Optional[str], unlock: Optional[str]) -> list[str]:
    args: list[str] = []
    if fork:
        args += ["-f", fork]
    if unlock:
        args += ["-u", unlock]
    return args


def run(
    settings: Settings,
    fork: Optional[str] = None,
    unlock: Optional[str] = None,
    token: str = DEFAULT_TOKEN,
    recipient: str = DEFAULT_RECIPIENT,
    amount: int = DEFAULT_AMOUNT,
    decimals: int = 6,
    gas_price: Optional[int] = None,
) -> dict:
    """Run the call/transaction walkthrough; returns the transfer receipt."""
    with DevChain.spawn(settings, mnemonic=settings.mnemonic, args=ganache_args(fork, unlock)) as chain:
        provider = chain.provider
        sep()
        click.echo(f"HTTP Endpoint: {chain.endpoint}")
        click.echo(f"Ganache started with chain_id {chain.chain_id}")

        sender = unlock or chain.default_wallet().address
        balance = provider.get_balance(sender)
        click.echo(f"Unlocked address {sender} balance: {format_wei(balance, 18, 'ETH')}")

        sep()
        symbol = erc20.symbol(provider, token)
        click.echo(f"Token Symbol: {symbol}")

        sep()
        block = provider.get_block("latest")
        if block is None:
            raise TransportError("Expecting to get latest block")
        click.echo(f"Current block number {from_hex_quantity(block['number'])}")
        if gas_price is None:
            gas_price = next_block_base_fee(block)

        sep()
        balance = erc20.balance_of(provider, token, sender)
        click.echo(f"Token balance: {format_wei(balance, decimals, symbol)}")

        sep()
        pending = erc20.transfer(
            provider,
            token,
            sender,
            recipient,
            amount,
            gas_price=gas_price,
            timeout=settings.confirm_timeout,
        )
        receipt = pending.confirmations(1)
        click.echo(f"resp: {receipt}")

        balance = erc20.balance_of(provider, token, recipient)
        click.echo(f"Recipient token balance: {format_wei(balance, decimals, symbol)}")
        return receipt


@click.command("contract-execution")
@click.option("--fork", "-f", default=None, help="Ganache: fork another blockchain (RPC URL)")
@click.option("--unlock", "-u", default=None,
              help="Ganache: unlock an address and send from it (default: first wallet)")
@click.option("--token", default=DEFAULT_TOKEN, show_default=True, help="ERC-20 token address")
@click.option("--recipient", default=DEFAULT_RECIPIENT, show_default=True,
              help="Recipient of the token transfer")
@click.option("--amount", default=DEFAULT_AMOUNT, type=click.IntRange(min=0), show_default=True,
              help="Raw token amount to transfer")
@click.option("--decimals", default=6, type=click.IntRange(min=0), show_default=True,
              help="Token decimals used for display")
@click.option("--gas-price", default=None, type=click.IntRange(min=0),
              help="Gas price in wei (default: predicted next block base fee)")
@click.pass_obj
def contract_execution(
    obj: dict,
    fork: Optional[str],
    unlock: Optional[str],
    token: str,
    recipient: str,
    amount: int,
    decimals: int,
    gas_price: Optional[int],
) -> None:
    """Read and transact against an ERC-20 token using hand-built call data."""
    try:
        run(
            obj["settings"],
            fork=fork,
            unlock=unlock,
            token=token,
            recipient=recipient,
            amount=amount,
            decimals=decimals,
            gas_price=gas_price,
        )
    except EthExamplesError as exc:
        fail(exc)
