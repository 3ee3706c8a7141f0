import pytest

from smplc.errors import (
    CompilerError,
    LexicalError,
    SmplSyntaxError,
    SmplTypeError,
    report_error,
)


@pytest.mark.parametrize("cls", [CompilerError, SmplSyntaxError, LexicalError, SmplTypeError])
def test_error_keeps_message_and_line(cls):
    err = cls("Invalid type", 12)
    assert str(err) == "Invalid type"
    assert err.message == "Invalid type"
    assert err.line_number == 12


@pytest.mark.parametrize("cls", [SmplSyntaxError, LexicalError, SmplTypeError])
def test_specific_errors_are_caught_as_compiler_errors(cls):
    err = cls("bad", 3)
    with pytest.raises(CompilerError) as info:
        raise err
    assert info.value is err
    assert info.value.message == "bad"
    assert info.value.line_number == 3


def test_report_error_format(capsys):
    report_error(3, "boom")
    assert capsys.readouterr().out == "line [3]: boom\n"


def test_report_error_uses_given_line(capsys):
    report_error(41, "x already defined")
    out = capsys.readouterr().out
    assert out.startswith("line [41]")
    assert out.rstrip("\n").endswith("x already defined")