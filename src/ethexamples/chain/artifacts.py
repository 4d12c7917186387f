"""
Contract artifacts - compile Solidity projects and load compiled output.

Compilation goes through py-solc-x (``solc`` standard JSON).  Prebuilt
Foundry (``out/X.sol/X.json``) or flat solc JSON artifacts can be loaded
instead of compiling.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Optional

import solcx
from solcx.exceptions import SolcError

from ..errors import CompilationError, ConfigurationError

logger = logging.getLogger(__name__)

_PRAGMA_RE = re.compile(r"pragma\s+solidity\s+([^;]+);")
_VERSION_RE = re.compile(r"(\d+)\.(\d+)\.(\d+)")


@dataclass(frozen=True)
class ContractArtifact:
    name: str
    source: str
    abi: Optional[list[dict[str, Any]]] = None
    bytecode: Optional[str] = None

    def into_parts(self) -> tuple[list[dict[str, Any]], str]:
        """
        Split into the parts needed for deployment.

        Raises:
            ConfigurationError: If ABI or bytecode is missing
        """
        if self.abi is None:
            raise ConfigurationError(f"Missing abi from contract {self.name}")
        if not self.bytecode:
            raise ConfigurationError(f"Missing bytecode from contract {self.name}")
        return self.abi, self.bytecode

    def functions(self) -> list[dict[str, Any]]:
        return [e for e in self.abi or [] if e.get("type") == "function"]

    def constructor(self) -> Optional[dict[str, Any]]:
        for entry in self.abi or []:
            if entry.get("type") == "constructor":
                return entry
        return None


@dataclass
class CompiledProject:
    artifacts: list[ContractArtifact] = field(default_factory=list)

    def find(self, name: str) -> ContractArtifact:
        """Find a contract by name; raises ConfigurationError if absent."""
        for artifact in self.artifacts:
            if artifact.name == name:
                return artifact
        raise ConfigurationError(f"Contract not found: {name}")

    def names(self) -> list[str]:
        return [a.name for a in self.artifacts]


def detect_solc_version(sources: dict[str, str]) -> str:
    """
    Pick a solc version from the ``pragma solidity`` lines.

    The first concrete version of each pragma is taken (``^0.8.0`` ->
    ``0.8.0``, ``>=0.6.0 <0.9.0`` -> ``0.6.0``) and the highest one wins.
    """
    best: Optional[tuple[int, int, int]] = None
    for content in sources.values():
        for pragma in _PRAGMA_RE.findall(content):
            match = _VERSION_RE.search(pragma)
            if match is None:
                continue
            version = tuple(int(part) for part in match.groups())
            if best is None or version > best:
                best = version  # type: ignore[assignment]
    if best is None:
        raise ConfigurationError("No 'pragma solidity' found; pass an explicit solc version")
    return ".".join(str(part) for part in best)


def _ensure_solc(version: str) -> None:
    installed = {str(v) for v in solcx.get_installed_solc_versions()}
    if version not in installed:
        logger.debug("installing solc %s", version)
        solcx.install_solc(version)


def _read_sources(root: Path) -> dict[str, str]:
    sources: dict[str, str] = {}
    for path in sorted(root.rglob("*.sol")):
        key = path.relative_to(root).as_posix()
        sources[key] = path.read_text(encoding="utf-8")
    return sources


def compile_project(root: Path, solc_version: Optional[str] = None) -> CompiledProject:
    """
    Compile every ``*.sol`` file below ``root``.

    Args:
        root: Project root (also the sources directory)
        solc_version: Compiler version; detected from pragmas when omitted

    Returns:
        CompiledProject with one artifact per contract

    Raises:
        ConfigurationError: If the root does not exist or holds no sources
        CompilationError: If the compiler reports any error
    """
    root = Path(root)
    if not root.exists():
        raise ConfigurationError(f"Project root {root} does not exist!")

    sources = _read_sources(root)
    if not sources:
        raise ConfigurationError(f"No Solidity sources found under {root}")

    version = solc_version or detect_solc_version(sources)
    _ensure_solc(version)

    standard_input = {
        "language": "Solidity",
        "sources": {key: {"content": content} for key, content in sources.items()},
        "settings": {
            "outputSelection": {
                "*": {"*": ["abi", "evm.bytecode.object"]},
            },
        },
    }

    try:
        output = solcx.compile_standard(
            standard_input,
            solc_version=version,
            allow_paths=[str(root.resolve())],
        )
    except SolcError as exc:
        diagnostics = getattr(exc, "error_dict", None) or []
        messages = [
            d.get("formattedMessage") or d.get("message", "")
            for d in diagnostics
            if d.get("severity") == "error"
        ]
        raise CompilationError(messages or [str(exc)]) from exc

    errors = [
        d.get("formattedMessage") or d.get("message", "")
        for d in output.get("errors", [])
        if d.get("severity") == "error"
    ]
    if errors:
        raise CompilationError(errors)

    project = CompiledProject()
    for source, contracts in output.get("contracts", {}).items():
        for name, data in contracts.items():
            bytecode = data.get("evm", {}).get("bytecode", {}).get("object") or None
            project.artifacts.append(
                ContractArtifact(
                    name=name,
                    source=source,
                    abi=data.get("abi"),
                    bytecode=bytecode,
                )
            )
    logger.debug("compiled %d contract(s) with solc %s", len(project.artifacts), version)
    return project


def _format_params(params: list[dict[str, Any]]) -> str:
    return ", ".join(
        f"{p.get('type')} {p.get('name')}".strip() for p in params
    )


def describe_project(project: CompiledProject) -> Iterator[str]:
    """Yield a printable summary: each contract, its constructor and functions."""
    for artifact in project.artifacts:
        if artifact.abi is None:
            raise ConfigurationError(f"No ABI found for artifact {artifact.name}")
        yield "=" * 80
        yield f"CONTRACT: {artifact.name}"

        constructor = artifact.constructor()
        if constructor is not None:
            yield f"CONSTRUCTOR args: [{_format_params(constructor.get('inputs', []))}]"

        for func in artifact.functions():
            yield f"FUNCTION  {func['name']} [{_format_params(func.get('inputs', []))}]"


def load_artifact(path: Path) -> ContractArtifact:
    """
    Load a compiled artifact from JSON.

    Accepts Foundry output (``bytecode.object``) and flat
    ``{"abi": [...], "bytecode": "0x..."}`` files.  The contract name is the
    file stem.

    Raises:
        ConfigurationError: If the file is missing or not an artifact
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Artifact not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            artifact = json.load(f)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Artifact {path} is not valid JSON: {exc}") from exc

    if not isinstance(artifact, dict) or "abi" not in artifact:
        raise ConfigurationError(f"No abi in artifact {path}")

    bytecode = artifact.get("bytecode")
    if isinstance(bytecode, dict):
        bytecode = bytecode.get("object")

    return ContractArtifact(
        name=path.stem,
        source=str(path),
        abi=artifact["abi"],
        bytecode=bytecode or None,
    )
