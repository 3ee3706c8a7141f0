"""Exceptions raised by the compiler stages and the diagnostic printer."""

from __future__ import annotations


class CompilerError(Exception):
    """A compile-time error tied to a source line."""

    def __init__(self, message: str, line_number: int) -> None:
        super().__init__(message)
        self.message = message
        self.line_number = line_number


class SmplSyntaxError(CompilerError):
    """The token stream does not form a valid program."""


class LexicalError(CompilerError):
    """The source text cannot be split into tokens."""


class SmplTypeError(CompilerError):
    """An expression or declaration has an invalid type."""


def report_error(line: int, msg: str) -> None:
    """Print a diagnostic for ``line`` to standard output."""
    print(f"line [{line}]: {msg}")