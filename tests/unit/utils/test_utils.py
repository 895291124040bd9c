import pytest

from evmabi.abi_types import UINT8_T, UINT256_T, ABITag
from evmabi.exceptions import EvmabiPanic, TypeMismatch, UnknownType
from evmabi.utils import ceil32, int_bounds, method_id


@pytest.mark.parametrize(
    "signed,bits,expected",
    [(True, 8, (-128, 127)), (False, 8, (0, 255)), (False, 256, (0, 2**256 - 1))],
)
def test_int_bounds(signed, bits, expected):
    assert int_bounds(signed, bits) == expected


@pytest.mark.parametrize("x,expected", [(0, 0), (1, 32), (32, 32), (33, 64)])
def test_ceil32(x, expected):
    assert ceil32(x) == expected


def test_method_id_pluggable_hash():
    def fake_hash(data):
        return b"\x01\x02\x03\x04\x05\x06"

    assert method_id("anything()", hash_fn=fake_hash) == b"\x01\x02\x03\x04"


def test_string_enum_rejects_foreign_comparison():
    assert ABITag.UINT == ABITag.UINT
    with pytest.raises(EvmabiPanic):
        ABITag.UINT == "uint"  # noqa: B015
    with pytest.raises(EvmabiPanic):
        ABITag("not_a_tag")


def test_lazy_hint():
    calls = []

    def hint():
        calls.append(1)
        return "try something else"

    exc = UnknownType("bad type", hint=hint)
    assert calls == []
    assert str(exc) == "bad type\n\n  (hint: try something else)"
    assert calls == [1]


def test_type_mismatch_message():
    exc = TypeMismatch("value does not match", expected=UINT256_T, actual=UINT8_T)
    assert str(exc) == "value does not match (expected uint256, got uint8)"
    assert exc.expected == UINT256_T
