import pytest

from evmabi.abi_types import ADDRESS_T, UINT256_T, parse_abi_type
from evmabi.abi_values import (
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
    from_native,
)
from evmabi.exceptions import TypeMismatch

ADDR = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"


def test_inferred_schemas():
    assert UInt(1).schema == UINT256_T
    assert Int(-1, 8).schema == parse_abi_type("int8")
    assert FixedBytes(b"\x01", 1).schema == parse_abi_type("bytes1")
    assert DynamicArray(UINT256_T).schema == parse_abi_type("uint256[]")
    assert FixedArray(ADDRESS_T, [Address(b"\x00" * 20)] * 2).schema == parse_abi_type("address[2]")
    assert Tuple([UInt(1), Bytes(b"")]).schema == parse_abi_type("(uint256,bytes)")
    assert Tuple().schema == parse_abi_type("()")


def test_container_members_must_be_values():
    with pytest.raises(TypeMismatch):
        Tuple([1, 2])
    with pytest.raises(TypeMismatch):
        DynamicArray(UINT256_T, [1])


def test_check_schema():
    assert check_schema(Bool(True), parse_abi_type("bool")) == Bool(True)
    with pytest.raises(TypeMismatch) as excinfo:
        check_schema(UInt(1, 8), UINT256_T)
    assert excinfo.value.expected == UINT256_T
    assert excinfo.value.actual == parse_abi_type("uint8")


@pytest.mark.parametrize(
    "type_str,native,expected",
    [
        ("uint8", 255, UInt(255, 8)),
        ("int16", -5, Int(-5, 16)),
        ("bool", False, Bool(False)),
        ("address", ADDR, Address(bytes.fromhex(ADDR[2:]))),
        ("bytes2", b"\x01\x02", FixedBytes(b"\x01\x02", 2)),
        ("bytes2", "0x0102", FixedBytes(b"\x01\x02", 2)),
        ("bytes", b"", Bytes(b"")),
        ("string", "héllo", String("héllo")),
        ("uint256[]", [1, 2], DynamicArray(UINT256_T, [UInt(1), UInt(2)])),
        ("uint256[2]", (1, 2), FixedArray(UINT256_T, [UInt(1), UInt(2)])),
        ("(bool,string)", [True, "x"], Tuple([Bool(True), String("x")])),
    ],
)
def test_from_native(type_str, native, expected):
    assert from_native(parse_abi_type(type_str), native) == expected


@pytest.mark.parametrize(
    "type_str,native",
    [
        ("uint256", True),
        ("uint256", "1"),
        ("uint256", 1.0),
        ("bool", 1),
        ("address", "5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"),
        ("bytes", "0x123"),
        ("string", b"abc"),
        ("uint256[]", "12"),
        ("uint256[]", b"\x01"),
        ("uint256[2]", [1]),
        ("(bool,string)", [True]),
        ("uint8", UInt(1)),
    ],
)
def test_from_native_mismatch(type_str, native):
    with pytest.raises(TypeMismatch):
        from_native(parse_abi_type(type_str), native)


def test_to_native():
    assert Address(bytes.fromhex(ADDR[2:].lower())).to_native() == ADDR
    value = Tuple([UInt(7), DynamicArray(UINT256_T, [UInt(1)]), Bool(True)])
    assert value.to_native() == (7, [1], True)
