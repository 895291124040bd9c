from typing import Optional, Union

from evmabi.evm.metadata import strip_cbor_metadata
from evmabi.evm.opcodes import get_opcode_names, push_size
from evmabi.hexcodec import coerce_bytes


def disassemble(
    bytecode: Union[bytes, str], evm_version: Optional[str] = None, strip_metadata: bool = False
) -> str:
    """
    Render bytecode as space separated opcodes, e.g. `PUSH1 0x80 PUSH1 0x40 MSTORE`.

    Bytes which are not opcodes in `evm_version` render as `UNKNOWN_0x..`.
    With `strip_metadata`, a trailing CBOR metadata section is dropped first.
    """
    code = coerce_bytes(bytecode)
    if strip_metadata:
        code = strip_cbor_metadata(code)

    names = get_opcode_names(evm_version)
    tokens = []
    pc = 0
    while pc < len(code):
        op = code[pc]
        name = names.get(op, f"UNKNOWN_0x{op:02X}")
        tokens.append(name)
        pc += 1

        n = push_size(name)
        if n > 0:
            # a PUSH at the very end may be cut short, e.g. by trailing data
            immediate = code[pc : pc + n]
            tokens.append("0x" + immediate.hex().upper())
            pc += n

    return " ".join(tokens)
