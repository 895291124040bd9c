"""
ABI decoding.

Decoding walks the schema, reads heads at fixed positions and follows
offsets into tails. Every read is checked against the end of the buffer,
so truncated or malicious input raises `DecodeError` instead of reading
garbage. Words which a canonical encoder could not have produced (dirty high
bits, bad sign extension, a bool other than 0 or 1) are rejected as well.

A canonical encoding is read at most once byte for byte, so decoding may not
consume more bytes than the input holds. Offsets which alias the same tail
many times over would otherwise blow a small payload up into a huge value.
"""
from typing import Sequence

from evmabi.abi_types import ABITag, ABIType
from evmabi.abi_values import (
    ABIValue,
    Address,
    Bool,
    Bytes,
    DynamicArray,
    FixedArray,
    FixedBytes,
    Int,
    String,
    Tuple,
    UInt,
    check_schema,
)
from evmabi.exceptions import DecodeError
from evmabi.utils import ceil32, int_bounds
from evmabi.word import Word


class _Buffer:
    """Input bytes, plus how many more bytes decoding may consume."""

    def __init__(self, data: bytes):
        self.data = data
        self.budget = len(data)

    def __len__(self):
        return len(self.data)

    def consume(self, n: int, pos: int) -> None:
        self.budget -= n
        if self.budget < 0:
            raise DecodeError(
                f"reading offset {pos} consumes more than the {len(self.data)} byte input "
                "holds (are offsets aliased?)"
            )


def abi_decode(schema: ABIType, data: bytes) -> ABIValue:
    """
    Decode a single value previously produced by `abi_encode`.

    Raises `TypeMismatch` if the decoded value does not infer `schema`.
    """
    value = _decode(schema, _Buffer(bytes(data)), 0)
    return check_schema(value, schema)


def abi_decode_args(schemas: Sequence[ABIType], data: bytes) -> tuple:
    """Decode a tuple-encoded argument list into a tuple of values."""
    schemas = tuple(schemas)
    values = _decode_sequence(schemas, _Buffer(bytes(data)), 0)
    return tuple(check_schema(v, t) for v, t in zip(values, schemas))


def _read_word(buf: _Buffer, pos: int) -> Word:
    if pos < 0 or pos + 32 > len(buf):
        raise DecodeError(f"word read at offset {pos} is out of bounds ({len(buf)} byte buffer)")
    buf.consume(32, pos)
    return Word(buf.data[pos : pos + 32])


def _read_uint256(buf, pos):
    return _read_word(buf, pos).to_unsigned()


def _decode(schema, buf, pos):
    return _DECODERS[schema.tag](schema, buf, pos)


def _decode_sequence(schemas, buf, start):
    ret = []
    head = start
    for typ in schemas:
        if typ.is_dynamic():
            # offsets are relative to the start of the enclosing head region
            ofst = _read_uint256(buf, head)
            ret.append(_decode(typ, buf, start + ofst))
        else:
            ret.append(_decode(typ, buf, head))
        head += typ.embedded_static_size()
    return ret


def _decode_uint(schema, buf, pos):
    val = _read_uint256(buf, pos)
    _, hi = int_bounds(False, schema.m_bits)
    if val > hi:
        raise DecodeError(f"dirty high bits for {schema.selector_name()} at offset {pos}")
    return UInt(val, schema.m_bits)


def _decode_int(schema, buf, pos):
    val = _read_word(buf, pos).to_signed()
    lo, hi = int_bounds(True, schema.m_bits)
    if not lo <= val <= hi:
        raise DecodeError(f"bad sign extension for {schema.selector_name()} at offset {pos}")
    return Int(val, schema.m_bits)


def _decode_address(schema, buf, pos):
    word = _read_word(buf, pos)
    if any(word.data[:12]):
        raise DecodeError(f"dirty high bits for address at offset {pos}")
    return Address(word.data[12:])


def _decode_bool(schema, buf, pos):
    val = _read_uint256(buf, pos)
    if val not in (0, 1):
        raise DecodeError(f"invalid bool {val} at offset {pos}")
    return Bool(val == 1)


def _decode_fixed_bytes(schema, buf, pos):
    word = _read_word(buf, pos)
    if any(word.data[schema.m_bytes :]):
        raise DecodeError(f"dirty low bytes for {schema.selector_name()} at offset {pos}")
    return FixedBytes(word.data[: schema.m_bytes], schema.m_bytes)


def _read_bytestring(buf, pos) -> bytes:
    length = _read_uint256(buf, pos)
    start = pos + 32
    # the padded payload must be present in full
    if start + ceil32(length) > len(buf):
        raise DecodeError(
            f"byte string of length {length} at offset {pos} overruns the {len(buf)} byte buffer"
        )
    buf.consume(ceil32(length), pos)
    return buf.data[start : start + length]


def _decode_bytes(schema, buf, pos):
    return Bytes(_read_bytestring(buf, pos))


def _decode_string(schema, buf, pos):
    raw = _read_bytestring(buf, pos)
    try:
        return String(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise DecodeError(f"string at offset {pos} is not valid utf-8") from e


def _decode_fixed_array(schema, buf, pos):
    values = _decode_sequence([schema.subtyp] * schema.m_elems, buf, pos)
    return FixedArray(schema.subtyp, values)


def _decode_dynamic_array(schema, buf, pos):
    count = _read_uint256(buf, pos)
    start = pos + 32
    # reject counts the buffer cannot possibly hold before allocating.
    # zero-sized elements are still capped at one byte each.
    elem_size = schema.subtyp.embedded_static_size()
    if start + count * max(elem_size, 1) > len(buf) and count > 0:
        raise DecodeError(f"array of {count} elements at offset {pos} overruns the buffer")
    if elem_size == 0:
        # nothing is read for them, so charge the cap instead
        buf.consume(count, pos)
    values = _decode_sequence([schema.subtyp] * count, buf, start)
    return DynamicArray(schema.subtyp, values)


def _decode_tuple(schema, buf, pos):
    return Tuple(_decode_sequence(schema.subtyps, buf, pos))


_DECODERS = {
    ABITag.UINT: _decode_uint,
    ABITag.INT: _decode_int,
    ABITag.ADDRESS: _decode_address,
    ABITag.BOOL: _decode_bool,
    ABITag.FIXED_BYTES: _decode_fixed_bytes,
    ABITag.BYTES: _decode_bytes,
    ABITag.STRING: _decode_string,
    ABITag.FIXED_ARRAY: _decode_fixed_array,
    ABITag.DYNAMIC_ARRAY: _decode_dynamic_array,
    ABITag.TUPLE: _decode_tuple,
}
