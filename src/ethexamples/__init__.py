__version__ = "0.1.0"

__all__ = [
    # Codec
    "Address",
    "Uint256",
    "build_call_data",
    "encode_argument",
    "encode_call",
    "function_selector",
    "decode_address",
    "decode_string",
    "decode_uint256",
    # Chain
    "DevChain",
    "GanacheInstance",
    "RpcClient",
    "PendingTransaction",
    "TxState",
    "compile_project",
    "load_artifact",
    # Config
    "Settings",
    "load_settings",
    # Errors
    "EthExamplesError",
    "ConfigurationError",
    "CompilationError",
    "TransportError",
    "RpcError",
    "EncodingError",
    "DecodingError",
    "MissingReceiptError",
    "NodeStartupError",
]

from .errors import (
    CompilationError,
    ConfigurationError,
    DecodingError,
    EncodingError,
    EthExamplesError,
    MissingReceiptError,
    NodeStartupError,
    RpcError,
    TransportError,
)
from .codec.encoding import (
    Address,
    Uint256,
    build_call_data,
    encode_argument,
    encode_call,
    function_selector,
)
from .codec.decoding import decode_address, decode_string, decode_uint256
from .config import Settings, load_settings
from .chain.rpc import RpcClient
from .chain.tx import PendingTransaction, TxState
from .chain.artifacts import compile_project, load_artifact
from .chain.ganache import DevChain, GanacheInstance
