from typing import Optional

from evmabi.exceptions import EvmabiPanic
from evmabi.settings import EVMABI_EVM_VERSION

# EVM version rules work as follows:
# 1. Fork rules go from oldest (lowest value) to newest (highest value).
# 2. The values are only used to order forks; they are not tied to anything
#    on chain.
_evm_versions = ("london", "paris", "shanghai", "cancun")
EVM_VERSIONS: dict[str, int] = dict((v, i) for i, v in enumerate(_evm_versions))

DEFAULT_EVM_VERSION: str = EVMABI_EVM_VERSION

# opcode name -> (opcode, number of values removed from stack, number of values added to stack)
OpcodeValue = tuple[int, int, int]
OpcodeMap = dict[str, OpcodeValue]

OPCODES: OpcodeMap = {
    "STOP": (0x00, 0, 0),
    "ADD": (0x01, 2, 1),
    "MUL": (0x02, 2, 1),
    "SUB": (0x03, 2, 1),
    "DIV": (0x04, 2, 1),
    "SDIV": (0x05, 2, 1),
    "MOD": (0x06, 2, 1),
    "SMOD": (0x07, 2, 1),
    "ADDMOD": (0x08, 3, 1),
    "MULMOD": (0x09, 3, 1),
    "EXP": (0x0A, 2, 1),
    "SIGNEXTEND": (0x0B, 2, 1),
    "LT": (0x10, 2, 1),
    "GT": (0x11, 2, 1),
    "SLT": (0x12, 2, 1),
    "SGT": (0x13, 2, 1),
    "EQ": (0x14, 2, 1),
    "ISZERO": (0x15, 1, 1),
    "AND": (0x16, 2, 1),
    "OR": (0x17, 2, 1),
    "XOR": (0x18, 2, 1),
    "NOT": (0x19, 1, 1),
    "BYTE": (0x1A, 2, 1),
    "SHL": (0x1B, 2, 1),
    "SHR": (0x1C, 2, 1),
    "SAR": (0x1D, 2, 1),
    "SHA3": (0x20, 2, 1),
    "ADDRESS": (0x30, 0, 1),
    "BALANCE": (0x31, 1, 1),
    "ORIGIN": (0x32, 0, 1),
    "CALLER": (0x33, 0, 1),
    "CALLVALUE": (0x34, 0, 1),
    "CALLDATALOAD": (0x35, 1, 1),
    "CALLDATASIZE": (0x36, 0, 1),
    "CALLDATACOPY": (0x37, 3, 0),
    "CODESIZE": (0x38, 0, 1),
    "CODECOPY": (0x39, 3, 0),
    "GASPRICE": (0x3A, 0, 1),
    "EXTCODESIZE": (0x3B, 1, 1),
    "EXTCODECOPY": (0x3C, 4, 0),
    "RETURNDATASIZE": (0x3D, 0, 1),
    "RETURNDATACOPY": (0x3E, 3, 0),
    "EXTCODEHASH": (0x3F, 1, 1),
    "BLOCKHASH": (0x40, 1, 1),
    "COINBASE": (0x41, 0, 1),
    "TIMESTAMP": (0x42, 0, 1),
    "NUMBER": (0x43, 0, 1),
    "DIFFICULTY": (0x44, 0, 1),
    "PREVRANDAO": (0x44, 0, 1),
    "GASLIMIT": (0x45, 0, 1),
    "CHAINID": (0x46, 0, 1),
    "SELFBALANCE": (0x47, 0, 1),
    "BASEFEE": (0x48, 0, 1),
    "BLOBHASH": (0x49, 1, 1),
    "BLOBBASEFEE": (0x4A, 0, 1),
    "POP": (0x50, 1, 0),
    "MLOAD": (0x51, 1, 1),
    "MSTORE": (0x52, 2, 0),
    "MSTORE8": (0x53, 2, 0),
    "SLOAD": (0x54, 1, 1),
    "SSTORE": (0x55, 2, 0),
    "JUMP": (0x56, 1, 0),
    "JUMPI": (0x57, 2, 0),
    "PC": (0x58, 0, 1),
    "MSIZE": (0x59, 0, 1),
    "GAS": (0x5A, 0, 1),
    "JUMPDEST": (0x5B, 0, 0),
    "TLOAD": (0x5C, 1, 1),
    "TSTORE": (0x5D, 2, 0),
    "MCOPY": (0x5E, 3, 0),
    "PUSH0": (0x5F, 0, 1),
    **{f"PUSH{i}": (0x5F + i, 0, 1) for i in range(1, 33)},
    **{f"DUP{i}": (0x7F + i, i, i + 1) for i in range(1, 17)},
    **{f"SWAP{i}": (0x8F + i, i + 1, i + 1) for i in range(1, 17)},
    "LOG0": (0xA0, 2, 0),
    "LOG1": (0xA1, 3, 0),
    "LOG2": (0xA2, 4, 0),
    "LOG3": (0xA3, 5, 0),
    "LOG4": (0xA4, 6, 0),
    "CREATE": (0xF0, 3, 1),
    "CALL": (0xF1, 7, 1),
    "CALLCODE": (0xF2, 7, 1),
    "RETURN": (0xF3, 2, 0),
    "DELEGATECALL": (0xF4, 6, 1),
    "CREATE2": (0xF5, 4, 1),
    "STATICCALL": (0xFA, 6, 1),
    "REVERT": (0xFD, 2, 0),
    "INVALID": (0xFE, 0, 0),
    "SELFDESTRUCT": (0xFF, 1, 0),
}

# opcodes which only exist in a range of forks, as (first fork, last fork).
# everything else is available in every supported fork.
FORK_RANGES: dict[str, tuple[Optional[str], Optional[str]]] = {
    "DIFFICULTY": (None, "london"),
    "PREVRANDAO": ("paris", None),
    "PUSH0": ("shanghai", None),
    "TLOAD": ("cancun", None),
    "TSTORE": ("cancun", None),
    "MCOPY": ("cancun", None),
    "BLOBHASH": ("cancun", None),
    "BLOBBASEFEE": ("cancun", None),
}


def version_check(evm_version: str, begin: Optional[str] = None, end: Optional[str] = None) -> bool:
    if evm_version not in EVM_VERSIONS:
        raise EvmabiPanic(f"unknown evm version: {evm_version}")
    if begin is None:
        begin_idx = min(EVM_VERSIONS.values())
    else:
        begin_idx = EVM_VERSIONS[begin]
    end_idx = max(EVM_VERSIONS.values()) if end is None else EVM_VERSIONS[end]
    return begin_idx <= EVM_VERSIONS[evm_version] <= end_idx


def _mk_version_opcodes(opcodes: OpcodeMap, evm_version: str) -> OpcodeMap:
    return dict(
        (k, v)
        for k, v in opcodes.items()
        if version_check(evm_version, *FORK_RANGES.get(k, (None, None)))
    )


_evm_opcodes: dict[str, OpcodeMap] = {v: _mk_version_opcodes(OPCODES, v) for v in EVM_VERSIONS}

# reverse lookup, opcode byte -> name
_evm_opcode_names: dict[str, dict[int, str]] = {
    v: dict((val[0], k) for k, val in opcodes.items()) for v, opcodes in _evm_opcodes.items()
}


def get_opcodes(evm_version: Optional[str] = None) -> OpcodeMap:
    evm_version = evm_version or DEFAULT_EVM_VERSION
    if evm_version not in _evm_opcodes:
        raise EvmabiPanic(f"unknown evm version: {evm_version}")
    return _evm_opcodes[evm_version]


def get_opcode_names(evm_version: Optional[str] = None) -> dict[int, str]:
    evm_version = evm_version or DEFAULT_EVM_VERSION
    if evm_version not in _evm_opcode_names:
        raise EvmabiPanic(f"unknown evm version: {evm_version}")
    return _evm_opcode_names[evm_version]


def push_size(name: str) -> int:
    """Number of immediate bytes following a PUSH opcode (0 for anything else)."""
    if name.startswith("PUSH"):
        return int(name[4:])
    return 0
