from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _version

from evmabi.abi_decoder import abi_decode, abi_decode_args
from evmabi.abi_encoder import abi_encode, abi_encode_args
from evmabi.abi_types import parse_abi_type
from evmabi.abi_values import from_native
from evmabi.evm.query import QueryRevert, QuerySuccess, call_function, deploy, run_query
from evmabi.function_signature import ERROR_STRING, PANIC, ErrorSignature, FunctionSignature
from evmabi.hexcodec import parse_hex, to_hex, to_short_hex
from evmabi.settings import Settings
from evmabi.word import Word

__version__: str
try:
    __version__ = _version(__name__)
except PackageNotFoundError:
    from evmabi.version import version

    __version__ = version
