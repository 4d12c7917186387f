"""
Contract deploy - compile a Solidity project and deploy one contract.

Flow:
1. Compile the project root (or load a prebuilt artifact)
2. Spawn ganache with the example mnemonic
3. Print every contract with its constructor and functions
4. Deploy the chosen contract from the first wallet, priced at the
   predicted next block base fee
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import click

from ..chain.artifacts import CompiledProject, compile_project, describe_project, load_artifact
from ..chain.ganache import DevChain
from ..config import Settings
from ..errors import ConfigurationError, EthExamplesError
from ..utils import fail


def parse_constructor_args(args_json: str) -> list[Any]:
    try:
        args = json.loads(args_json)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid constructor args: {exc}") from exc
    if not isinstance(args, list):
        raise ConfigurationError("Constructor args must be a JSON array")
    return args


def load_project(
    root: Path,
    artifact_path: Optional[Path],
    solc_version: Optional[str],
) -> CompiledProject:
    if artifact_path is not None:
        return CompiledProject([load_artifact(artifact_path)])
    return compile_project(root, solc_version=solc_version)


def run(
    settings: Settings,
    root: Path,
    contract_name: str,
    artifact_path: Optional[Path] = None,
    solc_version: Optional[str] = None,
    constructor_args: Optional[list[Any]] = None,
    gas_price: Optional[int] = None,
) -> str:
    """Deploy ``contract_name`` and return its address."""
    project = load_project(root, artifact_path, solc_version)
    artifact = project.find(contract_name)

    with DevChain.spawn(settings, mnemonic=settings.mnemonic) as chain:
        click.echo(f"HTTP Endpoint: {chain.endpoint}")

        wallet = chain.default_wallet()
        click.echo(f"Wallet first address: {wallet.address}")
        click.echo(f"Ganache started with chain_id {chain.chain_id}")

        for line in describe_project(project):
            click.echo(line)

        balance = chain.provider.get_balance(wallet.address)
        click.echo(f"Wallet first address {wallet.address} balance: {balance}")

        deployed = chain.deploy_contract(
            artifact,
            constructor_args=constructor_args,
            gas_price=gas_price,
        )
        click.echo(f"{contract_name} contract address {deployed.address}")
        return deployed.address


@click.command("contract-deploy")
@click.option("--root", "root", default="contracts", show_default=True,
              type=click.Path(path_type=Path), help="Solidity project root")
@click.option("--contract", "contract_name", default="SimpleToken", show_default=True,
              help="Name of the contract to deploy")
@click.option("--artifact", "artifact_path", default=None,
              type=click.Path(path_type=Path, dir_okay=False),
              help="Prebuilt JSON artifact to deploy instead of compiling")
@click.option("--solc-version", default=None, help="solc version (default: from pragma)")
@click.option("--args", "args_json", default="[]", help="Constructor args as JSON array")
@click.option("--gas-price", default=None, type=click.IntRange(min=0),
              help="Gas price in wei (default: predicted next block base fee)")
@click.pass_obj
def contract_deploy(
    obj: dict,
    root: Path,
    contract_name: str,
    artifact_path: Optional[Path],
    solc_version: Optional[str],
    args_json: str,
    gas_price: Optional[int],
) -> None:
    """Compile a Solidity project and deploy a contract to ganache."""
    try:
        run(
            obj["settings"],
            root,
            contract_name,
            artifact_path=artifact_path,
            solc_version=solc_version,
            constructor_args=parse_constructor_args(args_json),
            gas_price=gas_price,
        )
    except EthExamplesError as exc:
        fail(exc)
