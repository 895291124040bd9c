from typing import Sequence

from evmabi.abi_types import ABITag
from evmabi.abi_values import ABIValue, check_schema
from evmabi.exceptions import EncodingOverflow
from evmabi.utils import ceil32, int_bounds
from evmabi.word import Word


def abi_encode(value: ABIValue) -> bytes:
    """
    ABI-encode a single value.

    Static values are encoded in place. A dynamic value is encoded as its
    tail (e.g. length word followed by padded data for `bytes`), which is
    what a parent tuple points at through its head offset.
    """
    return _ENCODERS[value.tag](value)


def abi_encode_args(values: Sequence[ABIValue]) -> bytes:
    """ABI-encode a list of values as a tuple, i.e. an argument list."""
    return _encode_sequence(values)


def _encode_sequence(values):
    # heads are laid out first; dynamic members store the offset of their
    # tail, relative to the start of this head region.
    schemas = [v.schema for v in values]
    dyn_ofst = sum(t.embedded_static_size() for t in schemas)

    heads = []
    tails = []
    for value, typ in zip(values, schemas):
        encoded = abi_encode(value)
        if typ.is_dynamic():
            heads.append(_encode_uint256(dyn_ofst))
            tails.append(encoded)
            dyn_ofst += len(encoded)
        else:
            heads.append(encoded)

    return b"".join(heads + tails)


def _encode_uint256(n):
    return Word.from_unsigned(n).data


def _check_int_bounds(value):
    typ = value.schema
    lo, hi = int_bounds(typ.signed, typ.m_bits)
    if not isinstance(value.value, int) or not lo <= value.value <= hi:
        raise EncodingOverflow(f"{value.value!r} is out of bounds for {typ.selector_name()}")


def _encode_uint(value):
    _check_int_bounds(value)
    return Word.from_unsigned(value.value).data


def _encode_int(value):
    _check_int_bounds(value)
    return Word.from_signed(value.value).data


def _encode_address(value):
    if len(value.value) != 20:
        raise EncodingOverflow(f"address must be 20 bytes, got {len(value.value)}")
    return Word.from_bytes_extending(value.value).data


def _encode_bool(value):
    if value.value not in (0, 1):
        raise EncodingOverflow(f"{value.value!r} is not a bool")
    return _encode_uint256(int(value.value))


def _encode_fixed_bytes(value):
    # validate M before looking at the data
    typ = value.schema
    if len(value.value) > typ.m_bytes:
        raise EncodingOverflow(f"{len(value.value)} bytes do not fit in {typ.selector_name()}")
    return bytes(value.value).ljust(32, b"\x00")


def _encode_bytestring(data: bytes):
    return _encode_uint256(len(data)) + data.ljust(ceil32(len(data)), b"\x00")


def _encode_bytes(value):
    return _encode_bytestring(bytes(value.value))


def _encode_string(value):
    return _encode_bytestring(value.value.encode("utf-8"))


def _check_elements(value):
    for item in value.values:
        check_schema(item, value.element_schema)


def _encode_fixed_array(value):
    _check_elements(value)
    return _encode_sequence(value.values)


def _encode_dynamic_array(value):
    _check_elements(value)
    return _encode_uint256(len(value.values)) + _encode_sequence(value.values)


def _encode_tuple(value):
    return _encode_sequence(value.values)


_ENCODERS = {
    ABITag.UINT: _encode_uint,
    ABITag.INT: _encode_int,
    ABITag.ADDRESS: _encode_address,
    ABITag.BOOL: _encode_bool,
    ABITag.FIXED_BYTES: _encode_fixed_bytes,
    ABITag.BYTES: _encode_bytes,
    ABITag.STRING: _encode_string,
    ABITag.FIXED_ARRAY: _encode_fixed_array,
    ABITag.DYNAMIC_ARRAY: _encode_dynamic_array,
    ABITag.TUPLE: _encode_tuple,
}
