import pytest

from evmabi.evm.disassembler import disassemble


def test_disassemble_prologue():
    assert disassemble("0x6080604052") == "PUSH1 0x80 PUSH1 0x40 MSTORE"
    assert disassemble(bytes.fromhex("6080604052")) == "PUSH1 0x80 PUSH1 0x40 MSTORE"


def test_disassemble_sum(sum_runtime):
    out = disassemble(sum_runtime, strip_metadata=True)
    assert out.startswith("PUSH1 0x80 PUSH1 0x40 MSTORE CALLVALUE DUP1 ISZERO PUSH1 0x0F JUMPI")
    assert "PUSH4 0xCAD0899B" in out
    assert "PUSH4 0x4E487B71" in out
    assert out.endswith("REVERT INVALID")


@pytest.mark.parametrize(
    "code,expected",
    [
        ("", ""),
        ("00", "STOP"),
        ("61ff", "PUSH2 0xFF"),
        ("0c", "UNKNOWN_0x0C"),
        ("7f" + "01" * 32 + "00", "PUSH32 0x" + "01" * 32 + " STOP"),
    ],
)
def test_disassemble(code, expected):
    assert disassemble(code) == expected


def test_disassemble_follows_evm_version():
    assert disassemble("5f", evm_version="shanghai") == "PUSH0"
    assert disassemble("5f", evm_version="paris") == "UNKNOWN_0x5F"
    assert disassemble("44", evm_version="london") == "DIFFICULTY"
    assert disassemble("44", evm_version="cancun") == "PREVRANDAO"
