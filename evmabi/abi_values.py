"""
Runtime ABI values.

Each value class mirrors one schema tag and carries a native Python value of
the matching shape. A value always infers exactly one schema (`.schema`);
range and length limits are checked when the value is encoded.
"""
from dataclasses import dataclass
from typing import Any, Sequence

from evmabi.abi_types import (
    ABI_Address,
    ABI_Bool,
    ABI_Bytes,
    ABI_BytesM,
    ABI_DynamicArray,
    ABI_GIntM,
    ABI_StaticArray,
    ABI_String,
    ABI_Tuple,
    ABITag,
    ABIType,
)
from evmabi.exceptions import InvalidHex, TypeMismatch
from evmabi.hexcodec import parse_hex
from evmabi.utils import checksum_encode


@dataclass(frozen=True)
class ABIValue:
    @property
    def schema(self) -> ABIType:
        raise NotImplementedError("ABIValue.schema")

    @property
    def tag(self) -> ABITag:
        return self.schema.tag

    def to_native(self) -> Any:
        raise NotImplementedError("ABIValue.to_native")


@dataclass(frozen=True)
class UInt(ABIValue):
    value: int
    bits: int = 256

    @property
    def schema(self):
        return ABI_GIntM(self.bits, signed=False)

    def to_native(self):
        return self.value


@dataclass(frozen=True)
class Int(ABIValue):
    value: int
    bits: int = 256

    @property
    def schema(self):
        return ABI_GIntM(self.bits, signed=True)

    def to_native(self):
        return self.value


@dataclass(frozen=True)
class Address(ABIValue):
    value: bytes

    @property
    def schema(self):
        return ABI_Address()

    def to_native(self):
        return checksum_encode(self.value)


@dataclass(frozen=True)
class Bool(ABIValue):
    value: bool

    @property
    def schema(self):
        return ABI_Bool()

    def to_native(self):
        return bool(self.value)


@dataclass(frozen=True)
class FixedBytes(ABIValue):
    value: bytes
    size: int = 32

    def __post_init__(self):
        # bytes<M> is right-padded: b"\x01" as a bytes4 is 0x01000000.
        # longer values are kept as given and rejected by the encoder.
        object.__setattr__(self, "value", bytes(self.value).ljust(self.size, b"\x00"))

    @property
    def schema(self):
        return ABI_BytesM(self.size)

    def to_native(self):
        return self.value


@dataclass(frozen=True)
class Bytes(ABIValue):
    value: bytes

    @property
    def schema(self):
        return ABI_Bytes()

    def to_native(self):
        return self.value


@dataclass(frozen=True)
class String(ABIValue):
    value: str

    @property
    def schema(self):
        return ABI_String()

    def to_native(self):
        return self.value


@dataclass(frozen=True)
class FixedArray(ABIValue):
    element_schema: ABIType
    values: tuple

    def __post_init__(self):
        object.__setattr__(self, "values", _members(self.values))

    @property
    def schema(self):
        return ABI_StaticArray(self.element_schema, len(self.values))

    def to_native(self):
        return [v.to_native() for v in self.values]


@dataclass(frozen=True)
class DynamicArray(ABIValue):
    # needed so that an empty array still infers a schema
    element_schema: ABIType
    values: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, "values", _members(self.values))

    @property
    def schema(self):
        return ABI_DynamicArray(self.element_schema)

    def to_native(self):
        return [v.to_native() for v in self.values]


@dataclass(frozen=True)
class Tuple(ABIValue):
    values: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, "values", _members(self.values))

    @property
    def schema(self):
        return ABI_Tuple([v.schema for v in self.values])

    def to_native(self):
        return tuple(v.to_native() for v in self.values)


def _members(values) -> tuple:
    values = tuple(values)
    for item in values:
        if not isinstance(item, ABIValue):
            raise TypeMismatch(f"members must be ABI values, got {type(item).__name__}")
    return values


def check_schema(value: ABIValue, schema: ABIType) -> ABIValue:
    actual = value.schema
    if actual != schema:
        raise TypeMismatch("value does not match the expected schema", expected=schema, actual=actual)
    return value


def from_native(schema: ABIType, value: Any) -> ABIValue:
    """
    Wrap a native Python value as the ABI value described by `schema`.

    ABI values are passed through after checking their schema. Hex strings
    are accepted for `address`, `bytes<M>` and `bytes`.
    """
    if isinstance(value, ABIValue):
        return check_schema(value, schema)
    return _FROM_NATIVE[schema.tag](schema, value)


def _mismatch(schema, value):
    return TypeMismatch(f"cannot convert {type(value).__name__} {value!r} to {schema.selector_name()}")


def _as_bytes(schema, value) -> bytes:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str) and value[:2] in ("0x", "0X"):
        try:
            return parse_hex(value)
        except InvalidHex as e:
            raise _mismatch(schema, value) from e
    raise _mismatch(schema, value)


def _int_from_native(schema, value):
    # bool is an int subclass, but True is not a valid uint256
    if not isinstance(value, int) or isinstance(value, bool):
        raise _mismatch(schema, value)
    if schema.signed:
        return Int(value, schema.m_bits)
    return UInt(value, schema.m_bits)


def _address_from_native(schema, value):
    return Address(_as_bytes(schema, value))


def _bool_from_native(schema, value):
    if not isinstance(value, bool):
        raise _mismatch(schema, value)
    return Bool(value)


def _fixed_bytes_from_native(schema, value):
    return FixedBytes(_as_bytes(schema, value), schema.m_bytes)


def _bytes_from_native(schema, value):
    return Bytes(_as_bytes(schema, value))


def _string_from_native(schema, value):
    if not isinstance(value, str):
        raise _mismatch(schema, value)
    return String(value)


def _sequence(schema, value) -> Sequence:
    if isinstance(value, (str, bytes, bytearray)) or not isinstance(value, Sequence):
        raise _mismatch(schema, value)
    return value


def _fixed_array_from_native(schema, value):
    items = _sequence(schema, value)
    ret = FixedArray(schema.subtyp, [from_native(schema.subtyp, v) for v in items])
    return check_schema(ret, schema)


def _dynamic_array_from_native(schema, value):
    items = _sequence(schema, value)
    return DynamicArray(schema.subtyp, [from_native(schema.subtyp, v) for v in items])


def _tuple_from_native(schema, value):
    items = _sequence(schema, value)
    if len(items) != len(schema.subtyps):
        raise TypeMismatch(
            f"tuple {schema.selector_name()} takes {len(schema.subtyps)} items, got {len(items)}"
        )
    return Tuple([from_native(t, v) for t, v in zip(schema.subtyps, items)])


_FROM_NATIVE = {
    ABITag.UINT: _int_from_native,
    ABITag.INT: _int_from_native,
    ABITag.ADDRESS: _address_from_native,
    ABITag.BOOL: _bool_from_native,
    ABITag.FIXED_BYTES: _fixed_bytes_from_native,
    ABITag.BYTES: _bytes_from_native,
    ABITag.STRING: _string_from_native,
    ABITag.FIXED_ARRAY: _fixed_array_from_native,
    ABITag.DYNAMIC_ARRAY: _dynamic_array_from_native,
    ABITag.TUPLE: _tuple_from_native,
}
