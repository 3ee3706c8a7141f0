"""Token kinds and the token record produced by the lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenKind(Enum):
    """Every kind of token the language knows."""

    Defn = auto()
    Let = auto()
    As = auto()
    For = auto()
    Return = auto()
    In = auto()
    If = auto()
    Else = auto()
    While = auto()

    LeftParen = auto()
    RightParen = auto()
    LeftBrace = auto()
    RightBrace = auto()
    Colon = auto()
    SemiColon = auto()
    Comma = auto()
    ThinArrow = auto()
    Range = auto()
    Plus = auto()
    PlusEqual = auto()
    Minus = auto()
    MinusEqual = auto()
    Star = auto()
    StarEqual = auto()
    Equal = auto()
    EqualEqual = auto()
    ForSlash = auto()
    ForSlashEqual = auto()
    Percent = auto()
    PercentEqual = auto()
    Not = auto()
    GreaterThan = auto()
    GreaterGreater = auto()
    GreaterGreaterEqual = auto()
    GreaterEqual = auto()
    LesserThan = auto()
    LesserLesser = auto()
    LesserLesserEqual = auto()
    LesserEqual = auto()
    And = auto()
    Or = auto()
    NotEqual = auto()
    Ampersand = auto()
    AmperEqual = auto()
    Pipe = auto()
    PipeEqual = auto()
    Caret = auto()
    CaretEqual = auto()
    Tilde = auto()
    TildeEqual = auto()

    Identifier = auto()
    Type = auto()
    NumLiteral = auto()
    StringLiteral = auto()
    CharLiteral = auto()
    True_ = auto()
    False_ = auto()

    Eof = auto()


@dataclass(frozen=True, slots=True)
class Token:
    """A lexeme of a given kind found on a given line."""

    kind: TokenKind
    lexeme: str
    line: int