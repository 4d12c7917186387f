"""
Local development chain (ganache) lifecycle.

``GanacheInstance`` spawns the ganache binary on an unused port and waits
for it to listen, collecting the private keys it prints.  ``DevChain``
bundles a running instance with an ``RpcClient``, the chain id and the
wallets, and is what the example programs pass around.

Both are context managers: the child process is stopped on every exit
path, including errors raised while the chain is in use.
"""

from __future__ import annotations

import logging
import queue
import re
import socket
import subprocess
import threading
import time
from typing import Any, Optional, Sequence

from eth_account.signers.local import LocalAccount

from ..config import Settings
from ..errors import ConfigurationError, NodeStartupError
from .artifacts import ContractArtifact
from .rpc import RpcClient
from .tx import DeployedContract, deploy_contract, predict_gas_price
from .wallet import account_from_mnemonic, get_account

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(r"^\((\d+)\)\s+(0x[0-9a-fA-F]{64})")


def _unused_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class GanacheInstance:
    """
    A spawned ganache process.

    Args:
        binary: ganache executable (``ganache`` or ``ganache-cli``)
        mnemonic: Seed words for the generated accounts
        port: Listen port (default: an unused one)
        args: Extra arguments, e.g. ``["-f", URL, "-u", ADDRESS]``
        startup_timeout: Seconds to wait for the "Listening on" line
    """

    def __init__(
        self,
        binary: str = "ganache",
        mnemonic: Optional[str] = None,
        port: Optional[int] = None,
        args: Sequence[str] = (),
        startup_timeout: float = 10.0,
    ) -> None:
        self.binary = binary
        self.mnemonic = mnemonic
        self.port = port or _unused_port()
        self.args = list(args)
        self.startup_timeout = startup_timeout
        self.keys: list[str] = []
        self._process: Optional[subprocess.Popen] = None
        self._reader: Optional[threading.Thread] = None
        self._lines: "queue.Queue[Optional[str]]" = queue.Queue()
        self._started = threading.Event()

    @property
    def endpoint(self) -> str:
        return f"http://localhost:{self.port}"

    @property
    def ws_endpoint(self) -> str:
        return f"ws://localhost:{self.port}"

    def command(self) -> list[str]:
        cmd = [self.binary, "-p", str(self.port)]
        if self.mnemonic:
            cmd += ["-m", self.mnemonic]
        return cmd + self.args

    def start(self) -> "GanacheInstance":
        """
        Spawn the process and block until it listens.

        Raises:
            NodeStartupError: Binary missing, early exit, or timeout
        """
        cmd = self.command()
        logger.debug("spawning %s", " ".join(cmd))
        try:
            self._process = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                bufsize=1,
            )
        except OSError as exc:
            raise NodeStartupError(
                f"Could not start {self.binary}: {exc}. "
                "Install ganache (npm install -g ganache) or set ETHEXAMPLES_GANACHE_BIN."
            ) from exc

        self._reader = threading.Thread(target=self._read_output, daemon=True)
        self._reader.start()

        try:
            self._wait_until_listening()
        except BaseException:
            self.stop()
            raise
        self._started.set()
        return self

    def _read_output(self) -> None:
        """Feed stdout lines to the startup wait, then keep draining them."""
        process = self._process
        if process is None or process.stdout is None:
            return
        try:
            for line in process.stdout:
                line = line.rstrip()
                logger.debug("ganache: %s", line)
                if not self._started.is_set():
                    self._lines.put(line)
        except ValueError:
            # stdout closed by stop()
            pass
        finally:
            self._lines.put(None)

    def _wait_until_listening(self) -> None:
        assert self._process is not None
        deadline = time.monotonic() + self.startup_timeout
        in_private_keys = False

        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise NodeStartupError(
                    f"Timed out waiting for ganache to start ({self.startup_timeout}s)"
                )
            try:
                line = self._lines.get(timeout=remaining)
            except queue.Empty:
                continue

            if line is None:
                code = self._process.wait()
                raise NodeStartupError(
                    f"ganache exited with code {code} before it started listening"
                )

            line = line.strip()
            if "Listening on" in line:
                return
            if line.startswith("Private Keys"):
                in_private_keys = True
                continue
            if in_private_keys:
                match = _KEY_RE.match(line)
                if match:
                    self.keys.append(match.group(2))
                elif line and not line.startswith("="):
                    in_private_keys = False

    def stop(self) -> None:
        """Terminate the process; kill it if it does not exit within 5s."""
        process = self._process
        if process is None:
            return
        self._process = None
        if process.poll() is None:
            process.terminate()
            try:
                process.wait(timeout=5)
            except subprocess.TimeoutExpired:
                process.kill()
                process.wait()
        if self._reader is not None:
            self._reader.join(timeout=1)
        if process.stdout is not None:
            process.stdout.close()
        logger.debug("ganache on port %d stopped", self.port)

    def __enter__(self) -> "GanacheInstance":
        if self._process is None:
            self.start()
        return self

    def __exit__(self, *exc: object) -> None:
        self.stop()


class DevChain:
    """
    A running ganache instance plus its JSON-RPC client and wallets.

    Use ``DevChain.spawn(...)`` as a context manager.
    """

    def __init__(self, ganache: GanacheInstance, settings: Settings) -> None:
        self.ganache = ganache
        self.settings = settings
        self.provider = RpcClient(
            ganache.endpoint,
            timeout=settings.rpc_timeout,
            poll_interval=settings.poll_interval,
        )
        try:
            self.chain_id = self.provider.chain_id()
        except BaseException:
            self.provider.close()
            raise

    @classmethod
    def spawn(
        cls,
        settings: Settings,
        mnemonic: Optional[str] = None,
        args: Sequence[str] = (),
    ) -> "DevChain":
        """Start ganache with ``mnemonic``/``args`` and connect to it."""
        ganache = GanacheInstance(
            binary=settings.ganache_bin,
            mnemonic=mnemonic,
            args=args,
            startup_timeout=settings.startup_timeout,
        ).start()
        try:
            return cls(ganache, settings)
        except BaseException:
            ganache.stop()
            raise

    @property
    def endpoint(self) -> str:
        return self.ganache.endpoint

    def close(self) -> None:
        try:
            self.provider.close()
        finally:
            self.ganache.stop()

    def __enter__(self) -> "DevChain":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def get_wallet(self, index: int) -> LocalAccount:
        """
        Get the ``index``-th account managed by ganache.

        Falls back to deriving from the mnemonic when ganache printed no keys.

        Raises:
            ConfigurationError: If there is no wallet at this index
        """
        if index < 0:
            raise ConfigurationError(f"Wallet not found at index {index}")
        keys = self.ganache.keys
        if keys:
            if index >= len(keys):
                raise ConfigurationError(f"Wallet not found at index {index}")
            return get_account(keys[index])
        if self.ganache.mnemonic:
            return account_from_mnemonic(self.ganache.mnemonic, index)
        raise ConfigurationError(f"Wallet not found at index {index}")

    def default_wallet(self) -> LocalAccount:
        return self.get_wallet(0)

    def deploy_contract(
        self,
        artifact: ContractArtifact,
        constructor_args: Optional[Sequence[Any]] = None,
        gas_price: Optional[int] = None,
    ) -> DeployedContract:
        """
        Deploy ``artifact`` from the default wallet.

        The gas price defaults to the predicted next block base fee so the
        transaction is not rejected for underpricing.
        """
        if gas_price is None:
            gas_price = predict_gas_price(self.provider)
        return deploy_contract(
            self.provider,
            self.default_wallet(),
            artifact,
            constructor_args=constructor_args,
            gas_price=gas_price,
            timeout=self.settings.confirm_timeout,
        )
