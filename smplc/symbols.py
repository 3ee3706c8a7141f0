"""Entries stored in the analyzer's symbol table."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto

from smplc.tokens import Token
from smplc.typecheck import SmplType


class SymbolKind(Enum):
    VARIABLE = auto()
    FUNCTION = auto()
    BUILTIN_VAR = auto()
    BUILTIN_FUNC = auto()


class Symbol(ABC):
    """A named entity declared in some scope."""

    token: Token

    @property
    @abstractmethod
    def kind(self) -> SymbolKind:
        """What sort of entity this is."""

    @property
    @abstractmethod
    def symbol_type(self) -> SmplType:
        """The variable's type, or the function's return type."""

    @property
    def name(self) -> str:
        return self.token.lexeme


@dataclass
class VarSymbol(Symbol):
    """A variable or parameter."""

    type: SmplType
    token: Token

    @property
    def kind(self) -> SymbolKind:
        return SymbolKind.VARIABLE

    @property
    def symbol_type(self) -> SmplType:
        return self.type


@dataclass
class FuncSymbol(Symbol):
    """A function with its return type and parameter types."""

    return_type: SmplType
    param_types: list[SmplType]
    token: Token

    @property
    def kind(self) -> SymbolKind:
        return SymbolKind.FUNCTION

    @property
    def symbol_type(self) -> SmplType:
        return self.return_type