import sys
from dataclasses import dataclass

from evmabi.exceptions import InvalidWordLength, WordOverflow
from evmabi.hexcodec import parse_hex, to_hex, to_short_hex
from evmabi.utils import WORD_SIZE


@dataclass(frozen=True, repr=False)
class Word:
    """
    A 256-bit EVM word, stored as exactly 32 big-endian bytes.

    Whether the word holds an unsigned integer or a signed two's-complement
    integer depends on the reader: see `to_unsigned` and `to_signed`.
    """

    data: bytes

    def __post_init__(self):
        if not isinstance(self.data, (bytes, bytearray, memoryview)):
            raise InvalidWordLength(f"expected bytes, got {type(self.data).__name__}")
        if len(self.data) != WORD_SIZE:
            raise InvalidWordLength(f"a word is {WORD_SIZE} bytes, got {len(self.data)}")
        # normalize bytearray/memoryview so equality and hashing are byte-wise
        object.__setattr__(self, "data", bytes(self.data))

    @classmethod
    def from_hex(cls, hexstr: str) -> "Word":
        return cls(parse_hex(hexstr))

    @classmethod
    def from_bytes_extending(cls, data: bytes, padding: int = 0x00) -> "Word":
        padding_size = WORD_SIZE - len(data)
        if padding_size < 0:
            raise WordOverflow(f"{len(data)} bytes do not fit in a word")
        return cls(bytes([padding]) * padding_size + bytes(data))

    @classmethod
    def from_hex_extending(cls, hexstr: str) -> "Word":
        return cls.from_bytes_extending(parse_hex(hexstr))

    @classmethod
    def from_unsigned(cls, value: int) -> "Word":
        if value < 0:
            raise WordOverflow(f"negative value {value} is not unsigned")
        return cls.from_bytes_extending(_magnitude_bytes(value))

    @classmethod
    def from_signed(cls, value: int) -> "Word":
        if value >= 0:
            data = _magnitude_bytes(value)
            if len(data) == WORD_SIZE and data[0] & 0x80:
                raise WordOverflow(f"{value} overflows int256", hint="use from_unsigned")
            return cls.from_bytes_extending(data)

        # two's complement: invert the magnitude of -(value + 1)
        data = bytes(~b & 0xFF for b in _magnitude_bytes(-(value + 1)))
        if len(data) == WORD_SIZE and not data[0] & 0x80:
            raise WordOverflow(f"{value} underflows int256")
        return cls.from_bytes_extending(data, padding=0xFF)

    def to_unsigned(self) -> int:
        return int.from_bytes(self.data, "big")

    def to_signed(self) -> int:
        if self.data[0] & 0x80:
            inverted = bytes(~b & 0xFF for b in self.data)
            return -(int.from_bytes(inverted, "big") + 1)
        return int.from_bytes(self.data, "big")

    def to_int(self):
        """Return the unsigned value if it fits a native machine int, else None."""
        value = self.to_unsigned()
        if value <= sys.maxsize:
            return value
        return None

    def to_hex(self) -> str:
        return to_hex(self.data)

    def to_short_hex(self) -> str:
        return to_short_hex(self.data)

    def __bytes__(self) -> bytes:
        return self.data

    def __repr__(self) -> str:
        return f"Word[{self.to_short_hex()}]"


# big-endian magnitude with no leading zero bytes (zero serializes to b"")
def _magnitude_bytes(value: int) -> bytes:
    return value.to_bytes((value.bit_length() + 7) // 8, "big")
