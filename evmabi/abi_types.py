import enum
import functools
import re

from evmabi.exceptions import InvalidABIType, UnknownType
from evmabi.utils import StringEnum


class ABITag(StringEnum):
    UINT = enum.auto()
    INT = enum.auto()
    ADDRESS = enum.auto()
    BOOL = enum.auto()
    FIXED_BYTES = enum.auto()
    BYTES = enum.auto()
    STRING = enum.auto()
    FIXED_ARRAY = enum.auto()
    DYNAMIC_ARRAY = enum.auto()
    TUPLE = enum.auto()


# https://docs.soliditylang.org/en/latest/abi-spec.html#types
class ABIType:
    tag: ABITag

    # a dynamic type is encoded out of line, behind an offset in the head
    def is_dynamic(self):
        raise NotImplementedError("ABIType.is_dynamic")

    # bytes this type occupies in the head of an enclosing tuple or array
    def embedded_static_size(self):
        if self.is_dynamic():
            return 32
        return self.static_size()

    # bytes of the head when encoded on its own, 0 for bytes/string/T[]
    def static_size(self):
        raise NotImplementedError("ABIType.static_size")

    # canonical type name, as it appears in a selector signature
    def selector_name(self):
        raise NotImplementedError("ABIType.selector_name")

    # the parameters which, together with the tag, identify the schema
    def _key(self):
        raise NotImplementedError("ABIType._key")

    def __eq__(self, other):
        if not isinstance(other, ABIType):
            return NotImplemented
        return self.tag is other.tag and self._key() == other._key()

    def __hash__(self):
        return hash((self.tag.value, self._key()))

    def __repr__(self):
        return f"{type(self).__name__}({self.selector_name()})"


class _WordType(ABIType):
    # scalars take exactly one word in the head
    def is_dynamic(self):
        return False

    def static_size(self):
        return 32


# uint<M> and int<M>, 8 <= M <= 256 in steps of 8
class ABI_GIntM(_WordType):
    def __init__(self, m_bits, signed):
        if not isinstance(m_bits, int) or m_bits % 8 != 0 or not 8 <= m_bits <= 256:
            raise InvalidABIType(f"integer width must be a multiple of 8 in [8, 256], got {m_bits}")
        self.m_bits = m_bits
        self.signed = signed

    @property
    def tag(self):
        return ABITag.INT if self.signed else ABITag.UINT

    def selector_name(self):
        prefix = "int" if self.signed else "uint"
        return f"{prefix}{self.m_bits}"

    def _key(self):
        return (self.m_bits, self.signed)


# encoded like uint160
class ABI_Address(ABI_GIntM):
    tag = ABITag.ADDRESS

    def __init__(self):
        super().__init__(160, False)

    def selector_name(self):
        return "address"


# encoded like uint8, but only 0 and 1 are valid
class ABI_Bool(ABI_GIntM):
    tag = ABITag.BOOL

    def __init__(self):
        super().__init__(8, False)

    def selector_name(self):
        return "bool"


# bytes<M>, 1 <= M <= 32, left aligned in its word
class ABI_BytesM(_WordType):
    tag = ABITag.FIXED_BYTES

    def __init__(self, m_bytes):
        if not isinstance(m_bytes, int) or not 1 <= m_bytes <= 32:
            raise InvalidABIType(f"fixed bytes width must be in [1, 32], got {m_bytes}")
        self.m_bytes = m_bytes

    def selector_name(self):
        return "bytes" + str(self.m_bytes)

    def _key(self):
        return (self.m_bytes,)


# T[k]: k elements laid out like a k-tuple of T
class ABI_StaticArray(ABIType):
    tag = ABITag.FIXED_ARRAY

    def __init__(self, subtyp, m_elems):
        if not isinstance(m_elems, int) or m_elems < 0:
            raise InvalidABIType(f"array length must be a non-negative integer, got {m_elems}")
        self.subtyp = subtyp
        self.m_elems = m_elems

    def is_dynamic(self):
        # T[k] is dynamic exactly when T is
        return self.subtyp.is_dynamic()

    def static_size(self):
        return self.subtyp.embedded_static_size() * self.m_elems

    def selector_name(self):
        return "%s[%d]" % (self.subtyp.selector_name(), self.m_elems)

    def _key(self):
        return (self.subtyp, self.m_elems)


class ABI_Bytes(ABIType):
    tag = ABITag.BYTES

    def is_dynamic(self):
        return True

    def static_size(self):
        return 0

    def selector_name(self):
        return "bytes"

    def _key(self):
        return ()


# utf-8 text, encoded exactly like `bytes`
class ABI_String(ABI_Bytes):
    tag = ABITag.STRING

    def selector_name(self):
        return "string"


class ABI_DynamicArray(ABIType):
    tag = ABITag.DYNAMIC_ARRAY

    def __init__(self, subtyp):
        self.subtyp = subtyp

    def is_dynamic(self):
        return True

    def static_size(self):
        return 0

    def selector_name(self):
        return self.subtyp.selector_name() + "[]"

    def _key(self):
        return (self.subtyp,)


class ABI_Tuple(ABIType):
    tag = ABITag.TUPLE

    def __init__(self, subtyps):
        self.subtyps = tuple(subtyps)

    def is_dynamic(self):
        return any(t.is_dynamic() for t in self.subtyps)

    def static_size(self):
        return sum(t.embedded_static_size() for t in self.subtyps)

    def selector_name(self):
        members = ",".join(t.selector_name() for t in self.subtyps)
        return f"({members})"

    def _key(self):
        return self.subtyps


UINT256_T = ABI_GIntM(256, False)
INT256_T = ABI_GIntM(256, True)
UINT8_T = ABI_GIntM(8, False)
ADDRESS_T = ABI_Address()
BOOL_T = ABI_Bool()
BYTES32_T = ABI_BytesM(32)
BYTES_T = ABI_Bytes()
STRING_T = ABI_String()

_INT_RE = re.compile(r"(u?)int([1-9][0-9]*)?")
_BYTES_M_RE = re.compile(r"bytes([1-9][0-9]*)")
_ARRAY_LEN_RE = re.compile(r"[0-9]+")

_ELEMENTARY = {
    "address": ADDRESS_T,
    "bool": BOOL_T,
    "bytes": BYTES_T,
    "string": STRING_T,
}


@functools.lru_cache(maxsize=512)
def parse_abi_type(type_str: str) -> ABIType:
    """
    Return a schema from its canonical type string.

    Arguments
    ---------
    type_str : str
        A type as written in a canonical signature, e.g. `uint256`,
        `bytes32`, `uint256[]`, `(uint256,address)[2]`. `uint` and `int`
        are accepted as aliases for `uint256` and `int256`.

    Returns
    -------
    ABIType
        The corresponding schema.
    """
    try:
        return _parse_abi_type(type_str)
    except UnknownType:
        raise
    except InvalidABIType as e:
        raise UnknownType(f"ABI contains unknown type: {type_str}") from e


def _parse_abi_type(type_str: str) -> ABIType:
    if type_str.endswith("]"):
        # handle dynarrays, static arrays
        value_type_str, bracket, length_str = type_str[:-1].rpartition("[")
        if not bracket or not value_type_str:
            raise UnknownType(f"ABI type has unbalanced brackets: {type_str}")
        value_type = _parse_abi_type(value_type_str)
        if length_str == "":
            return ABI_DynamicArray(value_type)
        if _ARRAY_LEN_RE.fullmatch(length_str) is None:
            raise UnknownType(f"ABI type has an invalid length: {type_str}")
        return ABI_StaticArray(value_type, int(length_str))

    if type_str.startswith("("):
        if not type_str.endswith(")"):
            raise UnknownType(f"ABI tuple type is not closed: {type_str}")
        return ABI_Tuple([_parse_abi_type(t) for t in split_type_list(type_str[1:-1])])

    if type_str in _ELEMENTARY:
        return _ELEMENTARY[type_str]

    if (m := _INT_RE.fullmatch(type_str)) is not None:
        unsigned, bits = m.groups()
        return ABI_GIntM(int(bits or 256), signed=not unsigned)

    if (m := _BYTES_M_RE.fullmatch(type_str)) is not None:
        return ABI_BytesM(int(m.group(1)))

    raise UnknownType(f"ABI contains unknown type: {type_str}")


def split_type_list(type_list: str) -> list[str]:
    """
    Split a comma separated list of types at the top nesting level,
    e.g. `uint256,(bool,bytes),string` -> `["uint256", "(bool,bytes)", "string"]`.
    """
    if type_list == "":
        return []

    ret = []
    depth = 0
    start = 0
    for i, c in enumerate(type_list):
        if c == "(":
            depth += 1
        elif c == ")":
            depth -= 1
            if depth < 0:
                raise UnknownType(f"ABI type list has unbalanced parentheses: {type_list}")
        elif c == "," and depth == 0:
            ret.append(type_list[start:i])
            start = i + 1
    if depth != 0:
        raise UnknownType(f"ABI type list has unbalanced parentheses: {type_list}")
    ret.append(type_list[start:])
    return ret
