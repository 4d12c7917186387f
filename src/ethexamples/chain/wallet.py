"""
Local signing keys.

Keys come either from ganache's startup output (0x-prefixed hex) or are
derived from a BIP-39 mnemonic on the standard Ethereum path.

Dependencies: eth-account (no full web3.py needed)
"""

from __future__ import annotations

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_utils import ValidationError

from ..errors import ConfigurationError

DEFAULT_DERIVATION_PATH = "m/44'/60'/0'/0/{index}"

Account.enable_unaudited_hdwallet_features()


def get_account(private_key: str) -> LocalAccount:
    """
    Get an eth-account LocalAccount from a private key.

    Args:
        private_key: hex private key, with or without 0x prefix

    Raises:
        ConfigurationError: If the key is not a valid secp256k1 key
    """
    if not private_key.startswith("0x"):
        private_key = "0x" + private_key
    try:
        return Account.from_key(private_key)
    except (ValueError, TypeError) as exc:
        raise ConfigurationError(f"Invalid private key: {exc}") from exc


def account_from_mnemonic(mnemonic: str, index: int = 0) -> LocalAccount:
    """
    Derive the ``index``-th account of a mnemonic (``m/44'/60'/0'/0/i``),
    the same accounts ganache creates for ``-m MNEMONIC``.
    """
    try:
        return Account.from_mnemonic(
            mnemonic, account_path=DEFAULT_DERIVATION_PATH.format(index=index)
        )
    except (ValidationError, ValueError) as exc:
        raise ConfigurationError(f"Invalid mnemonic: {exc}") from exc
