"""
Error taxonomy for the example programs.

Every error is fatal for the calling flow: the CLI prints the message and
exits with the class-level ``exit_code``.
"""

from __future__ import annotations

from typing import Optional, Sequence


class EthExamplesError(RuntimeError):
    exit_code: int = 1


class ConfigurationError(EthExamplesError):
    """Missing/invalid project root, contract, artifact part or setting."""

    exit_code = 2


class CompilationError(EthExamplesError):
    """The Solidity compiler reported one or more errors."""

    exit_code = 3

    def __init__(self, errors: Sequence[str]) -> None:
        self.errors = list(errors)
        listing = "\n".join(f"  - {err}" for err in self.errors)
        super().__init__(f"Compiling solidity project failed:\n{listing}")


class TransportError(EthExamplesError):
    """JSON-RPC request failed (network, HTTP status, malformed response)."""

    exit_code = 4


class RpcError(TransportError):
    """The node answered with a JSON-RPC ``error`` member."""

    def __init__(self, code: Optional[int], message: str, data: object = None) -> None:
        self.code = code
        self.message = message
        self.data = data
        super().__init__(f"RPC error {code}: {message}")


class EncodingError(EthExamplesError):
    exit_code = 5


class DecodingError(EthExamplesError):
    exit_code = 6


class MissingReceiptError(EthExamplesError):
    exit_code = 7


class NodeStartupError(EthExamplesError):
    """The local development chain could not be started."""

    exit_code = 8
