"""
CBOR metadata trailers.

Compilers append a CBOR-encoded metadata section to the bytecode, followed
by its length as a 2-byte big-endian integer. Solidity encodes a map and its
length excludes the two length bytes; Vyper encodes an array and its length
includes them.
"""
from dataclasses import dataclass
from typing import Any, Optional, Union

import cbor2

from evmabi.hexcodec import coerce_bytes


@dataclass(frozen=True)
class CBORMetadata:
    compiler: str  # "solidity" or "vyper"
    data: Any
    # total length of the trailer, including the two length bytes
    length: int

    @property
    def compiler_version(self) -> Optional[str]:
        if self.compiler == "solidity":
            solc = self.data.get("solc")
            if isinstance(solc, bytes) and len(solc) == 3:
                return ".".join(str(b) for b in solc)
            # prerelease builds embed the full version string
            return solc
        version = self.data[-1].get("vyper") if isinstance(self.data[-1], dict) else None
        if version is None:
            return None
        return ".".join(str(v) for v in version)


def _loads(payload: bytes) -> Any:
    try:
        return cbor2.loads(payload)
    except cbor2.CBORDecodeError:
        return None


def parse_cbor_metadata(bytecode: Union[bytes, str]) -> Optional[CBORMetadata]:
    """
    Decode the metadata trailer of `bytecode`, or return None if there is none.
    """
    bytecode = coerce_bytes(bytecode)
    if len(bytecode) < 2:
        return None
    suffix_len = int.from_bytes(bytecode[-2:], "big")

    # solidity: length of the cbor payload only
    if 0 < suffix_len <= len(bytecode) - 2:
        data = _loads(bytecode[-(suffix_len + 2) : -2])
        if isinstance(data, dict):
            return CBORMetadata("solidity", data, suffix_len + 2)

    # vyper: length of the payload plus the length bytes themselves
    if 2 < suffix_len <= len(bytecode):
        data = _loads(bytecode[-suffix_len:-2])
        if isinstance(data, list) and len(data) > 0:
            return CBORMetadata("vyper", data, suffix_len)

    return None


def strip_cbor_metadata(bytecode: Union[bytes, str]) -> bytes:
    bytecode = coerce_bytes(bytecode)
    metadata = parse_cbor_metadata(bytecode)
    if metadata is None:
        return bytecode
    return bytecode[: -metadata.length]
