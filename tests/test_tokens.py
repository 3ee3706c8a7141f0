import dataclasses

import pytest

from smplc.tokens import Token, TokenKind


def test_token_fields():
    tok = Token(TokenKind.Identifier, "main", 1)
    assert tok.kind is TokenKind.Identifier
    assert tok.lexeme == "main"
    assert tok.line == 1


def test_tokens_compare_by_value():
    assert Token(TokenKind.Type, "int", 2) == Token(TokenKind.Type, "int", 2)
    assert Token(TokenKind.Type, "int", 2) != Token(TokenKind.Type, "int", 3)


def test_token_is_immutable():
    tok = Token(TokenKind.Eof, "EOF", 1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        tok.lexeme = "other"  # type: ignore[misc]
    assert tok.lexeme == "EOF"


def test_kind_order_starts_with_keywords_and_ends_with_eof():
    kinds = [TokenKind(kind.value) for kind in TokenKind]
    assert kinds[0] is TokenKind.Defn
    assert kinds[-1] is TokenKind.Eof


def test_kind_names_used_in_diagnostics():
    ident = Token(TokenKind["Identifier"], "x", 1)
    semi = Token(TokenKind["SemiColon"], ";", 1)
    assert ident.kind.name == "Identifier"
    assert semi.kind.name == "SemiColon"


def test_kinds_are_distinct():
    tokens = {Token(kind, "x", 1) for kind in TokenKind}
    assert len(tokens) == len(list(TokenKind))