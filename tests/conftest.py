"""Shared fixtures: an in-memory JSON-RPC node behind httpx.MockTransport."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest
from eth_abi import encode

from ethexamples.chain.rpc import RpcClient

Handler = Callable[[list], Any]


class FakeNode:
    """Answers JSON-RPC requests from per-method handlers and records them."""

    def __init__(self) -> None:
        self.handlers: dict[str, Handler] = {}
        self.requests: list[tuple[str, list]] = []

    def on(self, method: str, result: Any = None, handler: Handler | None = None) -> None:
        self.handlers[method] = handler or (lambda params: result)

    def params_for(self, method: str) -> list[list]:
        return [params for name, params in self.requests if name == method]

    def handle(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        method, params = payload["method"], payload["params"]
        self.requests.append((method, params))

        handler = self.handlers.get(method)
        if handler is None:
            body = {
                "jsonrpc": "2.0",
                "id": payload["id"],
                "error": {"code": -32601, "message": f"Method {method} not supported"},
            }
        else:
            body = {"jsonrpc": "2.0", "id": payload["id"], "result": handler(params)}
        return httpx.Response(200, json=body)

    def client(self) -> RpcClient:
        transport = httpx.MockTransport(self.handle)
        return RpcClient("http://fake-node", poll_interval=0, client=httpx.Client(transport=transport))


class TokenNode(FakeNode):
    """
    A fake chain holding one ERC-20 token.

    Understands ``symbol()``, ``balanceOf(address)`` and
    ``transfer(address,uint256)``; each transaction mines one block.
    """

    def __init__(self, token: str, symbol: str = "STK") -> None:
        super().__init__()
        self.token = token.lower()
        self.symbol = symbol
        self.balances: dict[str, int] = {}
        self.block = 5
        self.receipts: dict[str, dict] = {}

        self.on("eth_chainId", "0x539")
        self.on("eth_getBalance", hex(10**18))
        self.on("eth_blockNumber", handler=lambda p: hex(self.block))
        self.on("eth_getBlockByNumber", handler=lambda p: {
            "number": hex(self.block),
            "baseFeePerGas": hex(1_000_000_000),
            "gasUsed": "0x0",
            "gasLimit": hex(30_000_000),
        })
        self.on("eth_call", handler=self._call)
        self.on("eth_sendTransaction", handler=self._send)
        self.on("eth_getTransactionReceipt", handler=lambda p: self.receipts.get(p[0]))

    def _call(self, params: list) -> str:
        tx = params[0]
        assert tx["to"].lower() == self.token
        data = tx["data"][2:]
        selector = data[:8]
        if selector == "95d89b41":
            return "0x" + encode(["string"], [self.symbol]).hex()
        if selector == "70a08231":
            owner = "0x" + data[-40:]
            return "0x" + encode(["uint256"], [self.balances.get(owner, 0)]).hex()
        raise AssertionError(f"unexpected selector {selector}")

    def _send(self, params: list) -> str:
        tx = params[0]
        data = tx["data"][2:]
        assert data[:8] == "a9059cbb"
        recipient = "0x" + data[8 + 24:8 + 64]
        amount = int(data[8 + 64:8 + 128], 16)
        sender = tx["from"].lower()
        self.balances[sender] = self.balances.get(sender, 0) - amount
        self.balances[recipient] = self.balances.get(recipient, 0) + amount

        self.block += 1
        tx_hash = "0x" + f"{len(self.receipts) + 1:064x}"
        self.receipts[tx_hash] = {
            "transactionHash": tx_hash,
            "blockNumber": hex(self.block),
            "status": "0x1",
        }
        return tx_hash


@pytest.fixture()
def node() -> FakeNode:
    return FakeNode()


@pytest.fixture()
def token_node() -> TokenNode:
    return TokenNode("0xdac17f958d2ee523a2206206994597c13d831ec7")
