"""Language types, type compatibility rules and built-in function lookup."""

from __future__ import annotations

import re
from decimal import Decimal
from enum import Enum, auto

from smplc.errors import SmplTypeError


class SmplType(Enum):
    """Types known to the compiler."""

    Int8 = auto()
    Int16 = auto()
    Int32 = auto()
    Int64 = auto()
    Int = auto()
    Uint8 = auto()
    Uint16 = auto()
    Uint32 = auto()
    Uint64 = auto()
    Uint = auto()
    UntypedInt = auto()

    Float32 = auto()
    Float64 = auto()
    UntypedFloat = auto()

    Boolean = auto()

    String = auto()
    Char = auto()

    Void = auto()
    Range = auto()
    Unknown = auto()


class BuiltinKind(Enum):
    """Functions provided by the language itself."""

    PRINT = auto()
    NONE = auto()


TYPE_TABLE: dict[str, SmplType] = {
    "i8": SmplType.Int8,
    "u8": SmplType.Uint8,
    "i16": SmplType.Int16,
    "u16": SmplType.Uint16,
    "i32": SmplType.Int32,
    "u32": SmplType.Uint32,
    "i64": SmplType.Int64,
    "u64": SmplType.Uint64,
    "int": SmplType.Int,
    "uint": SmplType.Uint,
    "f32": SmplType.Float32,
    "f64": SmplType.Float64,
    "bool": SmplType.Boolean,
    "char": SmplType.Char,
    "str": SmplType.String,
}

BUILTINS: dict[str, BuiltinKind] = {"print": BuiltinKind.PRINT}

_INTEGER_TYPES = frozenset(
    {
        SmplType.Int8,
        SmplType.Int16,
        SmplType.Int32,
        SmplType.Int64,
        SmplType.Int,
        SmplType.Uint8,
        SmplType.Uint16,
        SmplType.Uint32,
        SmplType.Uint64,
        SmplType.Uint,
        SmplType.UntypedInt,
    }
)
_FLOATING_TYPES = frozenset({SmplType.Float32, SmplType.UntypedFloat})

_LLONG_MIN = -(2**63)
_LLONG_MAX = 2**63 - 1
_ULLONG_MAX = 2**64 - 1

_SIGNED_LIMITS = {
    SmplType.Int8: (-(2**7), 2**7 - 1),
    SmplType.Int16: (-(2**15), 2**15 - 1),
    SmplType.Int32: (-(2**31), 2**31 - 1),
    SmplType.Int64: (_LLONG_MIN, _LLONG_MAX),
}
_UNSIGNED_LIMITS = {
    SmplType.Uint8: 2**8 - 1,
    SmplType.Uint16: 2**16 - 1,
    SmplType.Uint32: 2**32 - 1,
    SmplType.Uint64: _ULLONG_MAX,
    SmplType.Uint: 2**32 - 1,
}
_FLOAT_LIMITS = {
    SmplType.Float32: (
        Decimal("3.40282346638528859811704183484516925440e+38"),
        Decimal("1.17549435082228750797e-38"),
    ),
    SmplType.Float64: (
        Decimal("1.7976931348623157e+308"),
        Decimal("2.2250738585072014e-308"),
    ),
}

_INT_PREFIX = re.compile(r"\s*([+-]?)(\d+)")
_FLOAT_PREFIX = re.compile(
    r"\s*[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


def is_integer(type_: SmplType) -> bool:
    """True for every sized, plain or untyped integer type."""
    return type_ in _INTEGER_TYPES


def is_floating(type_: SmplType) -> bool:
    """True for ``f32`` and untyped float literals."""
    return type_ in _FLOATING_TYPES


def is_numeric(type_: SmplType) -> bool:
    return is_integer(type_) or is_floating(type_)


def are_assign_compatible(left: SmplType, right: SmplType) -> bool:
    """Whether a value of type ``right`` may be stored in ``left``."""
    if left == right:
        return True
    if right == SmplType.UntypedInt and is_integer(left):
        return True
    if right == SmplType.UntypedFloat and is_floating(left):
        return True
    return False


def are_binary_compatible(left: SmplType, right: SmplType) -> bool:
    """Whether two operand types may meet in a binary operation."""
    if left == right:
        return True
    if left == SmplType.UntypedInt and is_integer(right):
        return True
    if right == SmplType.UntypedInt and is_integer(left):
        return True
    if left == SmplType.UntypedFloat and is_floating(right):
        return True
    if right == SmplType.UntypedFloat and is_floating(left):
        return True
    return False


def _parse_signed(text: str) -> int:
    match = _INT_PREFIX.match(text)
    if match is None:
        raise ValueError(text)
    value = int(match.group(2))
    if match.group(1) == "-":
        value = -value
    if not _LLONG_MIN <= value <= _LLONG_MAX:
        raise OverflowError(text)
    return value


def _parse_unsigned(text: str) -> int:
    match = _INT_PREFIX.match(text)
    if match is None:
        raise ValueError(text)
    magnitude = int(match.group(2))
    if magnitude > _ULLONG_MAX:
        raise OverflowError(text)
    # A leading minus wraps around, as unsigned conversion does.
    return (-magnitude) % 2**64 if match.group(1) == "-" else magnitude


def _parse_float(text: str, type_: SmplType) -> float:
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        raise ValueError(text)
    literal = match.group(0).strip()
    if literal.lstrip("+-").lower().startswith(("inf", "nan")):
        return float(literal)
    max_finite, min_normal = _FLOAT_LIMITS[type_]
    magnitude = abs(Decimal(literal))
    if magnitude > max_finite or (magnitude and magnitude < min_normal):
        raise OverflowError(text)
    return float(literal)


def fits_in_type(type_: SmplType, literal: str) -> bool:
    """Whether a numeric literal can be stored in ``type_`` without overflow."""
    try:
        if type_ in _SIGNED_LIMITS:
            low, high = _SIGNED_LIMITS[type_]
            return low <= _parse_signed(literal) <= high
        if type_ == SmplType.Int:
            _parse_signed(literal)
            # The plain int range test is inverted and never holds.
            return False
        if type_ in _UNSIGNED_LIMITS:
            return _parse_unsigned(literal) <= _UNSIGNED_LIMITS[type_]
        if type_ in _FLOAT_LIMITS:
            value = _parse_float(literal, type_)
            return value == value and value not in (float("inf"), float("-inf"))
        return False
    except (ValueError, OverflowError):
        return False


def str_to_type(type_str: str, line: int) -> SmplType:
    """Look up a type name; raise :class:`SmplTypeError` if it is unknown."""
    try:
        return TYPE_TABLE[type_str]
    except KeyError:
        raise SmplTypeError("Invalid type", line) from None


def is_type(name: str) -> bool:
    return name in TYPE_TABLE


def is_castable(from_type: SmplType, to_type: SmplType) -> bool:
    """Whether an explicit ``as`` cast between the types is allowed."""
    if is_numeric(from_type) and is_numeric(to_type):
        return True
    if from_type == SmplType.Boolean and is_numeric(to_type):
        return True
    if is_numeric(from_type) and to_type == SmplType.Boolean:
        return True
    return False


def is_builtin(name: str) -> bool:
    return name in BUILTINS


def get_builtin(name: str) -> BuiltinKind:
    return BUILTINS.get(name, BuiltinKind.NONE)