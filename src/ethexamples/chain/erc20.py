"""
ERC-20 calls built by hand.

No ABI file is involved: call data is assembled from the function
signature and hand-encoded ``address``/``uint256`` words.
"""

from __future__ import annotations

from typing import Optional

from ..codec.decoding import decode_string, decode_uint256
from ..codec.encoding import Address, Uint256, encode_call
from .rpc import BlockTag, RpcClient
from .tx import PendingTransaction, send_transaction

SYMBOL = "symbol()"
DECIMALS = "decimals()"
BALANCE_OF = "balanceOf(address)"
TRANSFER = "transfer(address,uint256)"


def symbol(client: RpcClient, token: str, block: BlockTag = "latest") -> str:
    """Read ``symbol()``; trailing whitespace is trimmed."""
    raw = client.call(token, encode_call(SYMBOL), block=block)
    return decode_string(raw).strip()


def decimals(client: RpcClient, token: str, block: BlockTag = "latest") -> int:
    return decode_uint256(client.call(token, encode_call(DECIMALS), block=block))


def balance_of(
    client: RpcClient,
    token: str,
    owner: str,
    block: BlockTag = "latest",
) -> int:
    """Read ``balanceOf(owner)`` as a raw integer amount."""
    data = encode_call(BALANCE_OF, [Address.parse(owner)])
    return decode_uint256(client.call(token, data, block=block))


def transfer(
    client: RpcClient,
    token: str,
    sender: str,
    recipient: str,
    amount: int,
    gas_price: Optional[int] = None,
    timeout: float = 120.0,
) -> PendingTransaction:
    """
    Send ``transfer(recipient, amount)`` from an unlocked ``sender``.

    Unlike a read-only call, the result is a pending transaction: it has
    to be mined and only yields a receipt, not the return value.
    """
    data = encode_call(TRANSFER, [Address.parse(recipient), Uint256(amount)])
    tx = {
        "from": sender,
        "to": token,
        "data": "0x" + data.hex(),
        "gasPrice": gas_price,
    }
    return send_transaction(client, tx, timeout=timeout)
