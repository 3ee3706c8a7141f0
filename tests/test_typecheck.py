import pytest

from smplc.errors import SmplTypeError
from smplc.typecheck import (
    TYPE_TABLE,
    BuiltinKind,
    SmplType,
    are_assign_compatible,
    are_binary_compatible,
    fits_in_type,
    get_builtin,
    is_builtin,
    is_castable,
    is_floating,
    is_integer,
    is_numeric,
    is_type,
    str_to_type,
)


@pytest.mark.parametrize(
    "type_",
    [SmplType.Int8, SmplType.Int, SmplType.Uint64, SmplType.Uint, SmplType.UntypedInt],
)
def test_integer_types(type_):
    assert is_integer(type_)
    assert not is_floating(type_)
    assert is_numeric(type_)


def test_floating_types():
    assert is_floating(SmplType.Float32)
    assert is_floating(SmplType.UntypedFloat)
    assert not is_floating(SmplType.Float64)
    assert not is_numeric(SmplType.Float64)


@pytest.mark.parametrize("type_", [SmplType.Boolean, SmplType.String, SmplType.Void, SmplType.Range])
def test_non_numeric_types(type_):
    assert not is_numeric(type_)


def test_assign_compatibility():
    assert are_assign_compatible(SmplType.Int32, SmplType.Int32)
    assert are_assign_compatible(SmplType.Uint8, SmplType.UntypedInt)
    assert are_assign_compatible(SmplType.Float32, SmplType.UntypedFloat)
    assert not are_assign_compatible(SmplType.Int32, SmplType.Int64)
    assert not are_assign_compatible(SmplType.UntypedInt, SmplType.Int32)
    assert not are_assign_compatible(SmplType.Int32, SmplType.UntypedFloat)


def test_binary_compatibility_is_symmetric_for_untyped():
    assert are_binary_compatible(SmplType.UntypedInt, SmplType.Int16)
    assert are_binary_compatible(SmplType.Int16, SmplType.UntypedInt)
    assert are_binary_compatible(SmplType.UntypedFloat, SmplType.Float32)
    assert are_binary_compatible(SmplType.Float32, SmplType.UntypedFloat)
    assert not are_binary_compatible(SmplType.Int8, SmplType.Int16)
    assert not are_binary_compatible(SmplType.UntypedInt, SmplType.Float32)


@pytest.mark.parametrize(
    "type_, literal, expected",
    [
        (SmplType.Int8, "127", True),
        (SmplType.Int8, "128", False),
        (SmplType.Int8, "-128", True),
        (SmplType.Int16, "32767", True),
        (SmplType.Int16, "32768", False),
        (SmplType.Int32, "2147483647", True),
        (SmplType.Int32, "2147483648", False),
        (SmplType.Int64, "9223372036854775807", True),
        (SmplType.Int64, "9223372036854775808", False),
        (SmplType.Uint8, "255", True),
        (SmplType.Uint8, "256", False),
        (SmplType.Uint8, "-1", False),
        (SmplType.Uint64, "-1", True),
        (SmplType.Uint64, "18446744073709551616", False),
        (SmplType.Uint, "4294967295", True),
        (SmplType.Uint, "4294967296", False),
        (SmplType.Float32, "3.5", True),
        (SmplType.Float32, "1e39", False),
        (SmplType.Float64, "1e39", True),
        (SmplType.Float64, "1e309", False),
        (SmplType.Boolean, "1", False),
        (SmplType.Int32, "abc", False),
        (SmplType.Float32, "abc", False),
    ],
)
def test_fits_in_type(type_, literal, expected):
    assert fits_in_type(type_, literal) is expected


def test_fits_in_type_reads_integer_prefix():
    assert fits_in_type(SmplType.Int8, "12.75")
    assert not fits_in_type(SmplType.Int8, "300.1")


def test_str_to_type_known_names():
    for name, type_ in TYPE_TABLE.items():
        assert str_to_type(name, 1) is type_


def test_str_to_type_unknown_raises_with_line():
    with pytest.raises(SmplTypeError) as info:
        str_to_type("float", 7)
    assert info.value.line_number == 7
    assert str(info.value) == "Invalid type"


def test_is_type():
    assert is_type("i32")
    assert is_type("str")
    assert not is_type("main")


def test_is_castable():
    assert is_castable(SmplType.Int32, SmplType.Float32)
    assert is_castable(SmplType.Boolean, SmplType.Uint8)
    assert is_castable(SmplType.UntypedFloat, SmplType.Boolean)
    assert not is_castable(SmplType.Boolean, SmplType.Boolean)
    assert not is_castable(SmplType.String, SmplType.Int32)


def test_builtins():
    assert is_builtin("print")
    assert get_builtin("print") is BuiltinKind.PRINT
    assert not is_builtin("print_int")
    assert get_builtin("print_int") is BuiltinKind.NONE