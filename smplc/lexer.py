"""Turns source text into a list of tokens."""

from __future__ import annotations

import string

from smplc.errors import LexicalError
from smplc.tokens import Token, TokenKind
from smplc.typecheck import is_type

KEYWORDS: dict[str, TokenKind] = {
    "defn": TokenKind.Defn,
    "let": TokenKind.Let,
    "as": TokenKind.As,
    "return": TokenKind.Return,
    "in": TokenKind.In,
    "for": TokenKind.For,
    "if": TokenKind.If,
    "else": TokenKind.Else,
    "while": TokenKind.While,
    "true": TokenKind.True_,
    "false": TokenKind.False_,
    "not": TokenKind.Not,
    "and": TokenKind.And,
    "or": TokenKind.Or,
}

# Character -> (continuations tried in order, kind when none matches).
_OPERATORS: dict[str, tuple[tuple[tuple[str, TokenKind], ...], TokenKind]] = {
    "(": ((), TokenKind.LeftParen),
    ")": ((), TokenKind.RightParen),
    "{": ((), TokenKind.LeftBrace),
    "}": ((), TokenKind.RightBrace),
    ":": ((), TokenKind.Colon),
    ";": ((), TokenKind.SemiColon),
    ",": ((), TokenKind.Comma),
    "=": ((("=", TokenKind.EqualEqual),), TokenKind.Equal),
    "+": ((("=", TokenKind.PlusEqual),), TokenKind.Plus),
    "-": ((("=", TokenKind.MinusEqual), (">", TokenKind.ThinArrow)), TokenKind.Minus),
    "*": ((("=", TokenKind.StarEqual),), TokenKind.Star),
    "%": ((("=", TokenKind.PercentEqual),), TokenKind.Percent),
    ">": (
        (
            ("=", TokenKind.GreaterEqual),
            (">=", TokenKind.GreaterGreaterEqual),
            (">", TokenKind.GreaterGreater),
        ),
        TokenKind.GreaterThan,
    ),
    "<": (
        (
            ("=", TokenKind.LesserEqual),
            ("<=", TokenKind.LesserLesserEqual),
            ("<", TokenKind.LesserLesser),
        ),
        TokenKind.LesserThan,
    ),
    "!": ((("=", TokenKind.NotEqual),), TokenKind.Not),
    "&": ((("=", TokenKind.AmperEqual), ("&", TokenKind.And)), TokenKind.Ampersand),
    "|": ((("=", TokenKind.PipeEqual), ("|", TokenKind.Or)), TokenKind.Pipe),
    "^": ((("=", TokenKind.CaretEqual),), TokenKind.Caret),
    "~": ((("=", TokenKind.TildeEqual),), TokenKind.Tilde),
}

_LETTERS = frozenset(string.ascii_letters)
_DIGITS = frozenset(string.digits)
_ALNUM = _LETTERS | _DIGITS
_END = "\0"


class Lexer:
    """Single-pass scanner over one source string."""

    def __init__(self, source: str) -> None:
        self.source = source
        self._tokens: list[Token] = []
        self._line = 1
        self._start = 0
        self._current = 0

    def lex(self) -> list[Token]:
        """Scan the whole source and return its tokens, ending with ``Eof``."""
        self._tokens = []
        self._line = 1
        self._start = 0
        self._current = 0
        while not self._at_end():
            self._start = self._current
            self._lex_token()
        self._add(TokenKind.Eof, "EOF")
        return self._tokens

    def _lex_token(self) -> None:
        ch = self._advance()

        if ch in _OPERATORS:
            continuations, default = _OPERATORS[ch]
            for follow, kind in continuations:
                if self._match(follow):
                    self._add(kind)
                    return
            self._add(default)
        elif ch == "/":
            if self._match("="):
                self._add(TokenKind.ForSlashEqual)
            elif self._match("/"):
                while not self._at_end() and self._peek() != "\n":
                    self._advance()
            else:
                self._add(TokenKind.ForSlash)
        elif ch == ".":
            # A lone dot produces no token.
            if self._match("."):
                self._add(TokenKind.Range)
        elif ch == '"':
            self._lex_string()
        elif ch in " \t\r":
            pass
        elif ch == "\n":
            self._line += 1
        elif ch in _LETTERS:
            self._lex_identifier()
        elif ch in _DIGITS:
            self._lex_number()
        else:
            raise LexicalError(f"[{self._line}]: Unexpected character: {ch}", self._line)

    def _lex_string(self) -> None:
        while self._peek() not in ('"', "\n") and not self._at_end():
            self._advance()
        if self._at_end() or self._peek() == "\n":
            raise LexicalError(f"[{self._line}]: Unterminated string literal", self._line)
        self._advance()
        self._add(TokenKind.StringLiteral, self.source[self._start + 1 : self._current - 1])

    def _lex_identifier(self) -> None:
        while not self._at_end() and (self._peek() in _ALNUM or self._peek() == "_"):
            self._advance()
        word = self.source[self._start : self._current]
        if word in KEYWORDS:
            self._add(KEYWORDS[word])
        elif is_type(word):
            self._add(TokenKind.Type)
        else:
            self._add(TokenKind.Identifier)

    def _lex_number(self) -> None:
        while not self._at_end() and (self._peek() in _DIGITS or self._peek() == "_"):
            self._advance()
        if self._peek() == "." and self._peek_next() in _DIGITS:
            self._advance()
            while not self._at_end() and self._peek() in _DIGITS:
                self._advance()
        while not self._at_end() and self._peek() in _ALNUM:
            self._advance()
        text = self.source[self._start : self._current].replace("_", "")
        self._add(TokenKind.NumLiteral, text)

    def _add(self, kind: TokenKind, lexeme: str | None = None) -> None:
        if lexeme is None:
            lexeme = self.source[self._start : self._current]
        self._tokens.append(Token(kind, lexeme, self._line))

    def _advance(self) -> str:
        self._current += 1
        return self.source[self._current - 1]

    def _peek(self) -> str:
        return self.source[self._current] if self._current < len(self.source) else _END

    def _peek_next(self) -> str:
        index = self._current + 1
        return self.source[index] if index < len(self.source) else _END

    def _match(self, expected: str) -> bool:
        if not self.source.startswith(expected, self._current):
            return False
        self._current += len(expected)
        return True

    def _at_end(self) -> bool:
        return self._current >= len(self.source)


def tokenize(source: str) -> list[Token]:
    """Return the tokens of ``source``."""
    return Lexer(source).lex()