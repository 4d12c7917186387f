"""
ethexamples CLI

Example programs for driving a local Ethereum development chain.

Every example spawns its own ganache instance, runs one sequential flow
against it and shuts it down again.

Commands:
  simple-transactions  - Send wei between ganache accounts
  contract-deploy      - Compile a Solidity project and deploy a contract
  contract-execution   - ERC-20 calls/transactions with hand-built call data
  selector             - Print a function selector
  calldata             - Print call data for a signature and arguments
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .config import load_settings
from .errors import EthExamplesError
from .utils import fail


def _configure_logging(trace: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if trace else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="ethexamples")
@click.option("--trace", is_flag=True, help="Log RPC traffic and ganache output")
@click.option("--env-file", default=None, type=click.Path(path_type=Path, dir_okay=False),
              help="Load settings from this .env file (default: ./.env)")
@click.pass_context
def cli(ctx: click.Context, trace: bool, env_file: Optional[Path]) -> None:
    """Ethereum client examples on a local ganache chain."""
    _configure_logging(trace)
    try:
        settings = load_settings(env_file)
    except EthExamplesError as exc:
        fail(exc)
    ctx.obj = {"settings": settings, "trace": trace}

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ============ Commands ============

from .commands.contract_deploy import contract_deploy
from .commands.contract_execution import contract_execution
from .commands.selector import calldata, selector
from .commands.simple_transactions import simple_transactions

cli.add_command(simple_transactions)
cli.add_command(contract_deploy)
cli.add_command(contract_execution)
cli.add_command(selector)
cli.add_command(calldata)


# ============ Entry Points ============


def main() -> None:
    """ethexamples CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
