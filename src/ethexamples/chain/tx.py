"""
Transaction Builder - Build, sign, send and confirm Ethereum transactions.

Two dispatch modes:

- unlocked accounts (ganache ``-u`` / its own accounts): the node signs,
  ``eth_sendTransaction``;
- local keys: eth-account signs, ``eth_sendRawTransaction``.

Both return a ``PendingTransaction`` whose ``confirmations()`` walks
``SUBMITTED -> PENDING -> MINED -> CONFIRMED``.  Nothing is retried or
replaced; reverts surface as RPC errors or as a receipt with ``status`` 0.
"""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from eth_abi import encode
from eth_account.signers.local import LocalAccount
from eth_utils import to_checksum_address

from ..errors import ConfigurationError, EncodingError, MissingReceiptError, TransportError
from ..utils import from_hex_quantity, strip_0x, to_hex_quantity
from .artifacts import ContractArtifact
from .rpc import RpcClient

logger = logging.getLogger(__name__)

ELASTICITY_MULTIPLIER = 2
BASE_FEE_CHANGE_DENOMINATOR = 8

_QUANTITY_FIELDS = ("value", "nonce", "gas", "gasPrice", "chainId")


def next_block_base_fee(block: dict) -> int:
    """
    Predict the next block's base fee (EIP-1559) from a block header.

    Raises:
        TransportError: If the block carries no ``baseFeePerGas``
    """
    if block.get("baseFeePerGas") is None:
        raise TransportError("Failed to get the next block base fee: block has no baseFeePerGas")

    base_fee = from_hex_quantity(block["baseFeePerGas"])
    gas_used = from_hex_quantity(block["gasUsed"])
    target = from_hex_quantity(block["gasLimit"]) // ELASTICITY_MULTIPLIER

    if gas_used == target or target == 0:
        return base_fee
    if gas_used > target:
        delta = base_fee * (gas_used - target) // target // BASE_FEE_CHANGE_DENOMINATOR
        return base_fee + max(delta, 1)
    delta = base_fee * (target - gas_used) // target // BASE_FEE_CHANGE_DENOMINATOR
    return base_fee - delta


def predict_gas_price(client: RpcClient) -> int:
    """Next block base fee of the latest block; a gas price that won't be rejected."""
    block = client.get_block("latest")
    if block is None:
        raise TransportError("Failed to get latest block")
    return next_block_base_fee(block)


def _rpc_tx(tx: dict) -> dict:
    """Render int fields as JSON-RPC hex quantities."""
    out: dict[str, Any] = {}
    for key, value in tx.items():
        if value is None:
            continue
        out[key] = to_hex_quantity(value) if key in _QUANTITY_FIELDS and isinstance(value, int) else value
    return out


class TxState(enum.Enum):
    SUBMITTED = "submitted"
    PENDING = "pending"
    MINED = "mined"
    CONFIRMED = "confirmed"


@dataclass
class PendingTransaction:
    """A submitted transaction; ``confirmations()`` waits for it to settle."""

    client: RpcClient
    tx_hash: str
    timeout: float = 120.0
    state: TxState = field(default=TxState.SUBMITTED)

    def confirmations(self, count: int = 1) -> dict:
        """
        Wait until the transaction has ``count`` confirmations.

        Returns:
            The transaction receipt

        Raises:
            MissingReceiptError: If no receipt exists once the wait ends
        """
        if count < 1:
            raise ValueError("count must be at least 1")

        deadline = time.monotonic() + self.timeout
        while True:
            receipt = self.client.get_transaction_receipt(self.tx_hash)
            if receipt is not None and receipt.get("blockNumber") is not None:
                self.state = TxState.MINED
                mined_in = from_hex_quantity(receipt["blockNumber"])
                if self.client.block_number() >= mined_in + count - 1:
                    break
            else:
                self.state = TxState.PENDING

            if time.monotonic() >= deadline:
                raise MissingReceiptError(
                    f"Transaction {self.tx_hash} not confirmed within {self.timeout}s "
                    f"(state: {self.state.value})"
                )
            time.sleep(self.client.poll_interval)

        # Fetch again: the receipt may vanish in a reorg while we waited.
        receipt = self.client.get_transaction_receipt(self.tx_hash)
        if receipt is None:
            raise MissingReceiptError(f"Missing receipt for {self.tx_hash}")

        self.state = TxState.CONFIRMED
        logger.debug("tx %s confirmed in block %s", self.tx_hash, receipt.get("blockNumber"))
        return receipt


def send_transaction(
    client: RpcClient,
    tx: dict,
    timeout: float = 120.0,
) -> PendingTransaction:
    """
    Send a transaction from an unlocked account.

    Args:
        tx: Transaction fields (``from`` is required); ints are hex-encoded

    Returns:
        PendingTransaction for the submitted hash
    """
    if not tx.get("from"):
        raise ConfigurationError("A sender ('from') is required for a transaction")
    tx_hash = client.send_transaction(_rpc_tx(tx))
    logger.debug("submitted tx %s", tx_hash)
    return PendingTransaction(client, tx_hash, timeout=timeout)


def sign_and_send(
    client: RpcClient,
    account: LocalAccount,
    tx: dict,
    timeout: float = 120.0,
) -> PendingTransaction:
    """
    Sign a legacy transaction locally and send it.

    Missing ``nonce``, ``gasPrice``, ``chainId`` and ``gas`` are filled from
    the node (``gas`` via eth_estimateGas).
    """
    tx = dict(tx)
    tx.setdefault("value", 0)
    if "to" in tx and tx["to"]:
        try:
            tx["to"] = to_checksum_address(tx["to"])
        except ValueError as exc:
            raise EncodingError(f"Invalid recipient address {tx['to']!r}") from exc
    if "nonce" not in tx:
        tx["nonce"] = client.get_transaction_count(account.address, "pending")
    if "gasPrice" not in tx:
        tx["gasPrice"] = client.gas_price()
    if "chainId" not in tx:
        tx["chainId"] = client.chain_id()
    if "gas" not in tx:
        estimate = {k: tx[k] for k in ("to", "data", "value") if tx.get(k) is not None}
        estimate["from"] = account.address
        tx["gas"] = client.estimate_gas(_rpc_tx(estimate))

    signed = account.sign_transaction(tx)
    raw_tx = "0x" + bytes(signed.raw_transaction).hex()

    tx_hash = client.send_raw_transaction(raw_tx)
    logger.debug("submitted signed tx %s from %s", tx_hash, account.address)
    return PendingTransaction(client, tx_hash, timeout=timeout)


def transfer(
    client: RpcClient,
    sender: str,
    to: str,
    value: int,
    timeout: float = 120.0,
) -> PendingTransaction:
    """Pay ``value`` wei from an unlocked ``sender`` to ``to``."""
    return send_transaction(client, {"from": sender, "to": to, "value": value}, timeout=timeout)


@dataclass(frozen=True)
class DeployedContract:
    address: str
    abi: list
    receipt: dict


def deploy_contract(
    client: RpcClient,
    account: LocalAccount,
    artifact: ContractArtifact,
    constructor_args: Optional[Sequence[Any]] = None,
    gas_price: Optional[int] = None,
    timeout: float = 120.0,
) -> DeployedContract:
    """
    Deploy a compiled contract and wait for one confirmation.

    Builds a creation transaction (no ``to``) from the bytecode plus
    ABI-encoded constructor args, signs it with ``account`` and extracts
    the deployed address from the receipt.

    Raises:
        ConfigurationError: Missing ABI/bytecode, or args without a constructor
        MissingReceiptError: Receipt absent or without ``contractAddress``
    """
    abi, bytecode = artifact.into_parts()

    deploy_data = strip_0x(bytecode)
    if constructor_args:
        constructor = artifact.constructor()
        if constructor is None:
            raise ConfigurationError(
                f"Constructor not found in ABI for {artifact.name}, "
                f"but constructor_args were provided."
            )
        input_types = [inp["type"] for inp in constructor.get("inputs", [])]
        deploy_data += encode(input_types, list(constructor_args)).hex()

    tx: dict[str, Any] = {"data": "0x" + deploy_data}
    if gas_price is not None:
        tx["gasPrice"] = gas_price

    pending = sign_and_send(client, account, tx, timeout=timeout)
    receipt = pending.confirmations(1)

    contract_address = receipt.get("contractAddress")
    if not contract_address:
        raise MissingReceiptError(
            f"Receipt for {pending.tx_hash} has no contractAddress"
        )
    return DeployedContract(address=contract_address, abi=abi, receipt=receipt)
