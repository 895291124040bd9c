import itertools

import eth_abi
import pytest

from evmabi.abi_types import UINT256_T, parse_abi_type
from evmabi.abi_values import Bool, String, UInt
from evmabi.exceptions import (
    ArgumentException,
    DecodeError,
    EncodingOverflow,
    InvalidABIType,
    TypeMismatch,
    UnknownType,
)
from evmabi.function_signature import (
    ERROR_STRING,
    PANIC,
    DecodedError,
    ErrorSignature,
    FunctionSignature,
)
from evmabi.word import Word

KNOWN_SELECTORS = [
    ("transfer(address,uint256)", "a9059cbb"),
    ("balanceOf(address)", "70a08231"),
    ("approve(address,uint256)", "095ea7b3"),
    ("totalSupply()", "18160ddd"),
    ("sum(uint256,uint256)", "cad0899b"),
    ("Error(string)", "08c379a0"),
    ("Panic(uint256)", "4e487b71"),
]


@pytest.mark.parametrize("signature,selector", KNOWN_SELECTORS)
def test_known_selectors(signature, selector):
    fn = FunctionSignature.from_signature(signature)
    assert fn.signature == signature
    assert fn.method_id.hex() == selector


def test_selectors_are_distinct():
    selectors = [FunctionSignature.from_signature(s).method_id for s, _ in KNOWN_SELECTORS]
    for a, b in itertools.combinations(selectors, 2):
        assert a != b


def test_selector_is_deterministic_and_cached():
    fn = FunctionSignature("sum", ("uint256", "uint256"))
    assert fn.method_id is fn.method_id
    assert fn.method_id == FunctionSignature("sum", (UINT256_T, UINT256_T)).method_id


def test_aliases_normalize():
    fn = FunctionSignature.from_signature("sum(uint, uint)")
    assert fn.signature == "sum(uint256,uint256)"
    assert fn.method_id.hex() == "cad0899b"


def test_builtins():
    assert ERROR_STRING.signature == "Error(string)"
    assert PANIC.signature == "Panic(uint256)"


def test_sum_calldata(sum_fn):
    calldata = sum_fn.encode_call(3, 4)
    expected = bytes.fromhex("cad0899b") + Word.from_unsigned(3).data + Word.from_unsigned(4).data
    assert calldata == expected
    assert sum_fn.decode_input(calldata) == (UInt(3), UInt(4))


def test_encode_call_matches_reference():
    fn = FunctionSignature.from_signature("transfer(address,uint256)", outputs=["bool"])
    to = "0x" + "ab" * 20
    assert fn.encode_call(to, 10) == fn.method_id + eth_abi.encode(["address", "uint256"], [to, 10])


def test_encode_call_accepts_abi_values(sum_fn):
    assert sum_fn.encode_call(UInt(3), 4) == sum_fn.encode_call(3, 4)


def test_arity(sum_fn):
    with pytest.raises(ArgumentException):
        sum_fn.encode_call(1)
    with pytest.raises(ArgumentException):
        sum_fn.encode_call(1, 2, 3)


def test_is_encodable(sum_fn):
    assert sum_fn.is_encodable(1, 2)
    assert not sum_fn.is_encodable(1)
    assert not sum_fn.is_encodable("1", 2)
    assert not sum_fn.is_encodable(-1, 2)


def test_bad_arguments():
    fn = FunctionSignature.from_signature("f(uint8,bool)")
    with pytest.raises(TypeMismatch):
        fn.encode_call(1, 1)
    with pytest.raises(EncodingOverflow):
        fn.encode_call(256, True)


def test_decode_input_checks_selector(sum_fn):
    calldata = sum_fn.encode_call(3, 4)
    with pytest.raises(ArgumentException):
        sum_fn.decode_input(b"\x00\x00\x00\x00" + calldata[4:])
    with pytest.raises(DecodeError):
        sum_fn.decode_input(calldata[:3])
    with pytest.raises(DecodeError):
        sum_fn.decode_input(calldata[:-1])


def test_outputs():
    fn = FunctionSignature.from_signature("info()", outputs=["string", "bool"])
    data = fn.encode_output("hi", True)
    assert data == eth_abi.encode(["string", "bool"], ["hi", True])
    assert fn.decode_output(data) == (String("hi"), Bool(True))
    assert fn.pretty_signature == "info() -> (string,bool)"


def test_tuple_signature():
    fn = FunctionSignature.from_signature(
        "swap((address, uint256[2])[], uint64)", outputs=["bool"]
    )
    assert fn.signature == "swap((address,uint256[2])[],uint64)"
    assert fn.outputs == (parse_abi_type("bool"),)
    assert fn.argument_count == 2

    with pytest.raises(InvalidABIType):
        FunctionSignature.from_signature("swap((address,uint256)")


@pytest.mark.parametrize("name", ["", "1abc", "foo bar", "f(", None])
def test_invalid_names(name):
    with pytest.raises(InvalidABIType):
        FunctionSignature(name, ())


@pytest.mark.parametrize("types", [(123,), ("uint256", None), (b"uint256",)])
def test_schemas_must_be_abi_types(types):
    with pytest.raises(InvalidABIType):
        FunctionSignature("f", types)
    with pytest.raises(InvalidABIType):
        FunctionSignature("f", (), types)
    with pytest.raises(InvalidABIType):
        FunctionSignature.from_signature("f()", outputs=types)


@pytest.mark.parametrize("text", ["foo", "foo(", "(uint256)"])
def test_invalid_signatures(text):
    with pytest.raises(InvalidABIType):
        FunctionSignature.from_signature(text)


def test_unknown_argument_type():
    with pytest.raises(UnknownType):
        FunctionSignature.from_signature("foo(uint7)")


def test_error_signature():
    some_err = ErrorSignature.from_signature("someErr(uint256)")
    payload = some_err.encode(42)
    assert payload == some_err.method_id + Word.from_unsigned(42).data
    assert some_err.matches(payload)
    assert not some_err.matches(b"\x00\x00")

    decoded = some_err.decode(payload)
    assert decoded == DecodedError(some_err, (UInt(42),))
    assert decoded.name == "someErr"
    assert decoded.native_args() == (42,)
    assert str(decoded) == "someErr(42)"


def test_error_string_payload():
    payload = ERROR_STRING.encode("nope")
    expected = (
        bytes.fromhex("08c379a0")
        + Word.from_unsigned(32).data
        + Word.from_unsigned(4).data
        + b"nope".ljust(32, b"\x00")
    )
    assert payload == expected
    assert str(ERROR_STRING.decode(payload)) == "Error('nope')"
