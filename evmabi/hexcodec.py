"""
Conversions between raw bytes and their hex text form.

The canonical form is lowercase and `0x`-prefixed and always carries every
byte. The short form drops leading zero bytes and is meant for display only.
"""
import re

from evmabi.exceptions import InvalidHex

_HEX_RE = re.compile(r"(?:0[xX])?([0-9a-fA-F]*)")


def parse_hex(hexstr: str) -> bytes:
    """
    Parse a hex string into bytes.

    Accepts an optional `0x` prefix and digits of either case. Anything else
    (odd digit count, stray characters, whitespace) raises `InvalidHex`.
    """
    if not isinstance(hexstr, str):
        raise InvalidHex(f"expected a hex string, got {type(hexstr).__name__}")

    match = _HEX_RE.fullmatch(hexstr)
    if match is None:
        raise InvalidHex(f"not a hex string: {hexstr!r}")

    digits = match.group(1)
    if len(digits) % 2 != 0:
        raise InvalidHex(
            f"hex string has an odd number of digits: {hexstr!r}",
            hint="pad the value with a leading zero",
        )
    return bytes.fromhex(digits)


def to_hex(data: bytes) -> str:
    return "0x" + bytes(data).hex()


def to_short_hex(data: bytes) -> str:
    data = bytes(data)
    if not data:
        return "0x"
    stripped = data.lstrip(b"\x00")
    if not stripped:
        # keep a single byte so the value still reads as zero
        stripped = b"\x00"
    return "0x" + stripped.hex()


def coerce_bytes(value) -> bytes:
    """Accept either raw bytes or hex text, as the query helpers do."""
    if isinstance(value, str):
        return parse_hex(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise InvalidHex(f"expected bytes or a hex string, got {type(value).__name__}")
