"""
Function and error descriptors.

A descriptor pairs a name with the schemas of its inputs (and, for
functions, its outputs). The 4-byte selector is derived from the canonical
signature `name(type1,type2,...)` and cached per instance.
"""
import re
from dataclasses import dataclass
from functools import cached_property
from typing import Any

from evmabi.abi_decoder import abi_decode_args
from evmabi.abi_encoder import abi_encode_args
from evmabi.abi_types import ABIType, parse_abi_type, split_type_list
from evmabi.abi_values import from_native
from evmabi.exceptions import (
    ArgumentException,
    DecodeError,
    EncodingOverflow,
    InvalidABIType,
    TypeMismatch,
)
from evmabi.utils import method_id

_NAME_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
_SIGNATURE_RE = re.compile(r"([^(]+)\((.*)\)")


def _schemas(types) -> tuple:
    ret = tuple(parse_abi_type(t) if isinstance(t, str) else t for t in types)
    for typ in ret:
        if not isinstance(typ, ABIType):
            raise InvalidABIType(f"expected an ABI schema, got {typ!r}")
    return ret


def _parse_signature(text: str):
    m = _SIGNATURE_RE.fullmatch(text.replace(" ", ""))
    if m is None:
        raise InvalidABIType(f"not a canonical signature: {text!r}")
    name, args = m.groups()
    return name, [parse_abi_type(t) for t in split_type_list(args)]


@dataclass(frozen=True)
class _Signature:
    name: str
    inputs: tuple = ()

    def __post_init__(self):
        if not isinstance(self.name, str) or _NAME_RE.fullmatch(self.name) is None:
            raise InvalidABIType(f"invalid identifier: {self.name!r}")
        object.__setattr__(self, "inputs", _schemas(self.inputs))

    @property
    def argument_count(self) -> int:
        return len(self.inputs)

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(t.selector_name() for t in self.inputs)})"

    @cached_property
    def method_id(self) -> bytes:
        return method_id(self.signature)

    def _prepare_args(self, schemas, args) -> list:
        if len(args) != len(schemas):
            raise ArgumentException(
                "invocation failed due to improper number of arguments to"
                f" `{self.signature}` (expected {len(schemas)} arguments, got {len(args)})"
            )
        return [from_native(t, arg) for t, arg in zip(schemas, args)]

    def _strip_selector(self, data: bytes) -> bytes:
        data = bytes(data)
        if len(data) < 4:
            raise DecodeError(f"{len(data)} bytes are too short to hold a selector")
        if data[:4] != self.method_id:
            raise ArgumentException(
                f"selector 0x{data[:4].hex()} does not match `{self.signature}`"
                f" (0x{self.method_id.hex()})"
            )
        return data[4:]

    def __str__(self) -> str:
        return self.signature


@dataclass(frozen=True)
class FunctionSignature(_Signature):
    """An external function. Overloads are separate descriptors."""

    outputs: tuple = ()

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, "outputs", _schemas(self.outputs))

    @classmethod
    def from_signature(cls, text: str, outputs=()) -> "FunctionSignature":
        """
        Build a descriptor from canonical text, e.g.
        `FunctionSignature.from_signature("sum(uint256,uint256)", outputs=["uint256"])`.
        """
        name, inputs = _parse_signature(text)
        return cls(name, tuple(inputs), _schemas(outputs))

    @property
    def pretty_signature(self) -> str:
        ret = ",".join(t.selector_name() for t in self.outputs)
        return f"{self.signature} -> ({ret})"

    def is_encodable(self, *args) -> bool:
        """Check whether this function accepts the given arguments."""
        try:
            self.encode_call(*args)
        except (ArgumentException, TypeMismatch, EncodingOverflow):
            return False
        return True

    def encode_call(self, *args) -> bytes:
        """Prepare the calldata for a call with the given arguments."""
        return self.method_id + abi_encode_args(self._prepare_args(self.inputs, args))

    def decode_input(self, calldata: bytes) -> tuple:
        return abi_decode_args(self.inputs, self._strip_selector(calldata))

    def encode_output(self, *args) -> bytes:
        return abi_encode_args(self._prepare_args(self.outputs, args))

    def decode_output(self, data: bytes) -> tuple:
        return abi_decode_args(self.outputs, data)


@dataclass(frozen=True)
class ErrorSignature(_Signature):
    """A custom error, as raised by `revert someErr(...)`."""

    @classmethod
    def from_signature(cls, text: str) -> "ErrorSignature":
        name, inputs = _parse_signature(text)
        return cls(name, tuple(inputs))

    def encode(self, *args) -> bytes:
        """Build the revert payload for this error."""
        return self.method_id + abi_encode_args(self._prepare_args(self.inputs, args))

    def matches(self, payload: bytes) -> bool:
        return bytes(payload[:4]) == self.method_id

    def decode(self, payload: bytes) -> "DecodedError":
        return DecodedError(self, abi_decode_args(self.inputs, self._strip_selector(payload)))


@dataclass(frozen=True)
class DecodedError:
    descriptor: ErrorSignature
    args: tuple

    @property
    def name(self) -> str:
        return self.descriptor.name

    def native_args(self) -> Any:
        return tuple(a.to_native() for a in self.args)

    def __str__(self) -> str:
        return f"{self.name}({', '.join(repr(a) for a in self.native_args())})"


# reason strings, as produced by `require(cond, "reason")`
ERROR_STRING = ErrorSignature("Error", ("string",))
# compiler-inserted checks, e.g. 0x11 for arithmetic overflow
PANIC = ErrorSignature("Panic", ("uint256",))

BUILTIN_ERRORS = (ERROR_STRING, PANIC)
