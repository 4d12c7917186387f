"""
Runtime configuration.

Values come from the process environment, optionally seeded from a
``.env`` file (current directory by default).  The environment always
wins over the file.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigurationError

# Mnemonic used by the example programs so that ganache hands out the same
# accounts on every run.
DEFAULT_MNEMONIC = (
    "gas monster ski craft below illegal discover limit dog bundle bus artefact"
)

ENV_PREFIX = "ETHEXAMPLES_"


@dataclass(frozen=True)
class Settings:
    ganache_bin: str = "ganache"
    mnemonic: str = DEFAULT_MNEMONIC
    startup_timeout: float = 10.0
    poll_interval: float = 0.01
    rpc_timeout: float = 30.0
    confirm_timeout: float = 120.0


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(ENV_PREFIX + name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}")
    if not math.isfinite(value) or value <= 0:
        raise ConfigurationError(
            f"{ENV_PREFIX}{name} must be a positive finite number, got {raw!r}"
        )
    return value


def load_settings(env_path: Optional[Path] = None) -> Settings:
    """
    Build ``Settings`` from the environment.

    Args:
        env_path: ``.env`` file to load first (default: ./.env if present)

    Raises:
        ConfigurationError: If an explicit env file is missing or a value
            is invalid
    """
    if env_path is not None:
        if not env_path.exists():
            raise ConfigurationError(f"Env file not found: {env_path}")
        load_dotenv(env_path, override=False)
    else:
        default_env = Path.cwd() / ".env"
        if default_env.exists():
            load_dotenv(default_env, override=False)

    defaults = Settings()
    return Settings(
        ganache_bin=os.environ.get(ENV_PREFIX + "GANACHE_BIN") or defaults.ganache_bin,
        mnemonic=os.environ.get(ENV_PREFIX + "MNEMONIC") or defaults.mnemonic,
        startup_timeout=_float_env("STARTUP_TIMEOUT", defaults.startup_timeout),
        poll_interval=_float_env("POLL_INTERVAL", defaults.poll_interval),
        rpc_timeout=_float_env("RPC_TIMEOUT", defaults.rpc_timeout),
        confirm_timeout=_float_env("CONFIRM_TIMEOUT", defaults.confirm_timeout),
    )
