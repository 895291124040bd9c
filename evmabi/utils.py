import enum
from typing import Callable

from Crypto.Hash import keccak  # type: ignore

from evmabi.exceptions import EvmabiPanic

WORD_SIZE = 32


class StringEnum(enum.Enum):
    # `enum.auto()` members take their lowercased name as value
    @staticmethod
    def _generate_next_value_(name, start, count, last_values):
        return name.lower()

    # lookups of unknown values are internal errors, not ValueErrors
    @classmethod
    def _missing_(cls, value):
        raise EvmabiPanic(f"{value!r} is not a member of {cls.__name__}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            raise EvmabiPanic(f"cannot compare {type(self).__name__} with {type(other).__name__}")
        return self is other

    # defining __eq__ drops the inherited hash
    def __hash__(self) -> int:
        return super().__hash__()

    def __str__(self) -> str:
        return self.value


def keccak256(data: bytes) -> bytes:
    return keccak.new(digest_bits=256, data=data).digest()


def method_id(signature: str, hash_fn: Callable[[bytes], bytes] = keccak256) -> bytes:
    """
    Selector of a canonical signature such as `transfer(address,uint256)`:
    the first four bytes of its hash.
    """
    return hash_fn(signature.encode("ascii"))[:4]


def int_bounds(signed: bool, bits: int) -> tuple[int, int]:
    """
    Inclusive range of int<bits> or uint<bits>,
    e.g. int_bounds(True, 8) -> (-128, 127).
    """
    if signed:
        half = 1 << (bits - 1)
        return -half, half - 1
    return 0, (1 << bits) - 1


def ceil32(n: int) -> int:
    return (n + 31) // 32 * 32


def checksum_encode(address: bytes) -> str:
    """
    EIP-55 mixed-case rendering of a 20 byte address: a hex letter is
    uppercased when the matching nibble of keccak256(lowercase hex) is >= 8.
    """
    lower = address.hex()
    digest = keccak256(lower.encode("ascii")).hex()
    return "0x" + "".join(
        c.upper() if c.isalpha() and int(digest[i], 16) >= 8 else c for i, c in enumerate(lower)
    )
