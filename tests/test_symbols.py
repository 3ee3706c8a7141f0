import pytest

from smplc.symbols import FuncSymbol, Symbol, SymbolKind, VarSymbol
from smplc.tokens import Token, TokenKind
from smplc.typecheck import SmplType


def test_var_symbol():
    tok = Token(TokenKind.Identifier, "count", 4)
    sym = VarSymbol(SmplType.Int32, tok)
    assert sym.kind is SymbolKind.VARIABLE
    assert sym.type is SmplType.Int32
    assert sym.symbol_type is SmplType.Int32
    assert sym.token == tok
    assert sym.name == "count"


def test_func_symbol():
    tok = Token(TokenKind.Identifier, "print_int", 1)
    sym = FuncSymbol(SmplType.Void, [SmplType.Int], tok)
    assert sym.kind is SymbolKind.FUNCTION
    assert sym.symbol_type is SmplType.Void
    assert sym.return_type is SmplType.Void
    assert sym.param_types == [SmplType.Int]
    assert sym.name == "print_int"


def test_func_symbol_without_params():
    sym = FuncSymbol(SmplType.Boolean, [], Token(TokenKind.Identifier, "ready", 2))
    assert len(sym.param_types) == 0
    assert sym.symbol_type is SmplType.Boolean


def test_symbols_compare_by_value():
    tok = Token(TokenKind.Identifier, "v", 1)
    assert VarSymbol(SmplType.Float32, tok) == VarSymbol(SmplType.Float32, tok)
    assert VarSymbol(SmplType.Float32, tok) != VarSymbol(SmplType.Int8, tok)


def test_base_symbol_is_abstract():
    with pytest.raises(TypeError):
        Symbol()  # type: ignore[abstract]