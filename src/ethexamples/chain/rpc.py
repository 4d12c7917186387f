"""
JSON-RPC Client for the local development chain.

Lightweight alternative to web3.py: uses httpx for HTTP and the codec
package for call data.  One ``RpcClient`` is created per chain endpoint and
passed explicitly to every operation; requests are issued sequentially.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Optional, Union

import httpx

from ..errors import RpcError, TransportError
from ..utils import from_hex_quantity, hex_to_bytes, to_hex_quantity

logger = logging.getLogger(__name__)

BlockTag = Union[int, str]


def _block_param(block: BlockTag) -> str:
    return to_hex_quantity(block) if isinstance(block, int) else block


class RpcClient:
    """
    Blocking JSON-RPC 2.0 client over HTTP.

    Args:
        url: HTTP endpoint of the node
        timeout: Per-request timeout in seconds
        poll_interval: Delay between polls while waiting for receipts
        client: Pre-built ``httpx.Client`` (tests inject a mock transport)
    """

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        poll_interval: float = 0.01,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.url = url
        self.poll_interval = poll_interval
        self._client = client or httpx.Client(timeout=timeout)
        self._ids = itertools.count(1)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "RpcClient":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def request(self, method: str, params: Optional[list] = None) -> Any:
        """
        Make a JSON-RPC call.

        Returns:
            Result field from the RPC response

        Raises:
            RpcError: If the node returned an ``error`` member
            TransportError: If the request or response is broken
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or [],
            "id": next(self._ids),
        }
        logger.debug("rpc -> %s %s", method, payload["params"])

        try:
            response = self._client.post(self.url, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} failed: {exc}") from exc
        except ValueError as exc:
            raise TransportError(f"{method} returned a non-JSON body") from exc

        if not isinstance(data, dict):
            raise TransportError(f"{method} returned a malformed response: {data!r}")

        if data.get("error") is not None:
            error = data["error"]
            if isinstance(error, dict):
                raise RpcError(error.get("code"), str(error.get("message")), error.get("data"))
            raise RpcError(None, str(error))

        if "result" not in data:
            raise TransportError(f"{method} response has no result")

        logger.debug("rpc <- %s %s", method, data["result"])
        return data["result"]

    # ------------------------------------------------------------------
    # Chain state
    # ------------------------------------------------------------------

    def chain_id(self) -> int:
        return from_hex_quantity(self.request("eth_chainId"))

    def block_number(self) -> int:
        return from_hex_quantity(self.request("eth_blockNumber"))

    def get_balance(self, address: str, block: BlockTag = "latest") -> int:
        """Get ETH balance for an address, in wei."""
        result = self.request("eth_getBalance", [address, _block_param(block)])
        return from_hex_quantity(result)

    def get_transaction_count(self, address: str, block: BlockTag = "latest") -> int:
        result = self.request("eth_getTransactionCount", [address, _block_param(block)])
        return from_hex_quantity(result)

    def gas_price(self) -> int:
        return from_hex_quantity(self.request("eth_gasPrice"))

    def get_block(self, block: BlockTag = "latest") -> Optional[dict]:
        """Get a block header (without full transactions), or None."""
        return self.request("eth_getBlockByNumber", [_block_param(block), False])

    def estimate_gas(self, tx: dict) -> int:
        return from_hex_quantity(self.request("eth_estimateGas", [tx]))

    # ------------------------------------------------------------------
    # Calls and transactions
    # ------------------------------------------------------------------

    def call(
        self,
        to: str,
        data: bytes,
        block: BlockTag = "latest",
        sender: Optional[str] = None,
    ) -> bytes:
        """
        Read-only contract call (eth_call).

        Args:
            to: 0x-prefixed contract address
            data: Call data bytes
            block: Block number or tag

        Returns:
            Raw return data
        """
        tx: dict[str, Any] = {"to": to, "data": "0x" + data.hex()}
        if sender:
            tx["from"] = sender
        result = self.request("eth_call", [tx, _block_param(block)])
        if not isinstance(result, str):
            raise TransportError(f"eth_call returned {result!r}")
        return hex_to_bytes(result)

    def send_transaction(self, tx: dict) -> str:
        """Send a transaction from an unlocked account; returns the tx hash."""
        return self.request("eth_sendTransaction", [tx])

    def send_raw_transaction(self, raw_tx: str) -> str:
        """Send a signed raw transaction; returns the tx hash."""
        return self.request("eth_sendRawTransaction", [raw_tx])

    def get_transaction_receipt(self, tx_hash: str) -> Optional[dict]:
        return self.request("eth_getTransactionReceipt", [tx_hash])
