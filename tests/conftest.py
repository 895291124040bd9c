import hypothesis
import pytest

from evmabi.function_signature import FunctionSignature
from evmabi.utils import keccak256

############
# PATCHING #
############


# disable hypothesis deadline globally
hypothesis.settings.register_profile("ci", deadline=None)
hypothesis.settings.load_profile("ci")


def pytest_configure(config):
    config.addinivalue_line("markers", "fuzzing: property based tests which run many examples")


# solc 0.8.24:
#   contract Cool { function sum(uint256 a, uint256 b) external pure returns (uint256) { return a + b; } }
SUM_RUNTIME_HEX = (
    "6080604052348015600f57600080fd5b506004361060285760003560e01c8063cad0899b14602d575b"
    "600080fd5b603c60383660046061565b604e565b60405190815260200160405180910390f35b6000"
    "605882846082565b90505b92915050565b60008060408385031215607357600080fd5b5050803592"
    "6020909101359150565b80820180821115605b57634e487b7160e01b600052601160045260246000"
    "fdfea264697066735822122009bb58f13fe00f9a4823e324313255ba6da63085111762970486bc5b"
    "48658cfe64736f6c63430008180033"
)
SUM_CREATION_HEX = "608060405234801561001057600080fd5b5060d88061001f6000396000f3fe" + SUM_RUNTIME_HEX


@pytest.fixture(scope="session")
def keccak():
    return keccak256


@pytest.fixture(scope="session")
def sum_runtime():
    return bytes.fromhex(SUM_RUNTIME_HEX)


@pytest.fixture(scope="session")
def sum_creation():
    return bytes.fromhex(SUM_CREATION_HEX)


@pytest.fixture(scope="session")
def sum_fn():
    return FunctionSignature.from_signature("sum(uint256,uint256)", outputs=["uint256"])


@pytest.fixture(scope="session")
def make_reverter():
    """
    Bytecode which reverts with `selector ++ word(arg)`, i.e. what
    `revert someErr(arg)` compiles to for an error taking one word.
    """

    def fn(selector: bytes, arg: int) -> bytes:
        assert len(selector) == 4 and 0 <= arg < 256
        # PUSH4 selector, PUSH1 0xe0, SHL, PUSH1 0, MSTORE,
        # PUSH1 arg, PUSH1 4, MSTORE, PUSH1 0x24, PUSH1 0, REVERT
        return (
            bytes([0x63])
            + selector
            + bytes.fromhex("60e01b600052")
            + bytes([0x60, arg])
            + bytes.fromhex("60045260246000fd")
        )

    return fn


@pytest.fixture(scope="session")
def make_returner():
    """Bytecode which returns (or reverts with) `data` verbatim."""

    def fn(data: bytes, revert: bool = False) -> bytes:
        assert len(data) < 2**16
        # PUSH2 len, DUP1, PUSH2 ofst, PUSH1 0, CODECOPY, PUSH1 0, RETURN/REVERT
        prefix_len = 13
        return (
            bytes([0x61])
            + len(data).to_bytes(2, "big")
            + bytes([0x80, 0x61])
            + prefix_len.to_bytes(2, "big")
            + bytes.fromhex("600039" "6000")
            + bytes([0xFD if revert else 0xF3])
            + data
        )

    return fn
